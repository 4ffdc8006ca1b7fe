"""Abstract repository interface for attachment storage."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from vtttracks.models import Attachment, AttachmentQuery

# A named query filter: inspects the query and returns an extra
# ``(where_sql, params)`` clause to AND into the WHERE, or None.
QueryFilter = Callable[[AttachmentQuery], tuple[str, list] | None]


class AttachmentRepository(ABC):
    """Abstract base class defining the attachment storage contract.

    Concrete stores speak SQL with ``LIKE ... ESCAPE '\\'`` pattern
    semantics; registered filters rely on that dialect.
    """

    LIKE_ESCAPE = "\\"

    @abstractmethod
    def save(self, attachment: Attachment) -> Attachment:
        """Persist an attachment. Inserts when id is 0, otherwise upserts by id.

        Returns the stored attachment with its id assigned.
        """

    @abstractmethod
    def get(self, attachment_id: int) -> Attachment | None:
        """Retrieve an attachment by id. Returns None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> Attachment | None:
        """Retrieve the attachment whose name equals ``name`` exactly."""

    @abstractmethod
    def query(self, query: AttachmentQuery) -> list[Attachment]:
        """Return attachments matching ``query`` and every registered filter."""

    @abstractmethod
    def list_all(self) -> list[Attachment]:
        """List all attachments ordered by id."""

    @abstractmethod
    def delete(self, attachment_id: int) -> None:
        """Remove an attachment. No-op if it does not exist."""

    @abstractmethod
    def exists(self, attachment_id: int) -> bool:
        """Check whether an attachment with the given id is stored."""

    @abstractmethod
    def resolve_url(self, attachment_id: int) -> str | None:
        """Public URL of the attachment's file, or None if it has none."""

    @abstractmethod
    def register_filter(self, name: str, query_filter: QueryFilter) -> None:
        """Register a named query filter. Re-registering a name replaces it."""

    @classmethod
    def escape_like(cls, value: str) -> str:
        """Escape LIKE wildcards so ``value`` only matches literally."""
        esc = cls.LIKE_ESCAPE
        return (
            value.replace(esc, esc + esc)
            .replace("%", esc + "%")
            .replace("_", esc + "_")
        )
