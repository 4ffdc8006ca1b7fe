"""SQLite implementation of the attachment repository."""

import logging
import sqlite3
import threading
from urllib.parse import quote

from vtttracks.config import settings
from vtttracks.models import Attachment, AttachmentQuery
from vtttracks.storage.repository import AttachmentRepository, QueryFilter

logger = logging.getLogger(__name__)


class SQLiteAttachmentRepository(AttachmentRepository):
    """SQLite-backed attachment storage.

    Implements AttachmentRepository using stdlib sqlite3. Registered
    filters contribute extra WHERE clauses to every query().
    """

    _CREATE_TABLE = """
        CREATE TABLE IF NOT EXISTS attachments (
            id          INTEGER PRIMARY KEY AUTOINCREMENT,
            name        TEXT NOT NULL,
            title       TEXT DEFAULT '',
            mime_type   TEXT DEFAULT '',
            status      TEXT DEFAULT 'inherit',
            file        TEXT DEFAULT '',
            caption     TEXT DEFAULT '',
            description TEXT DEFAULT '',
            width       INTEGER,
            height      INTEGER,
            parent_id   INTEGER DEFAULT 0,
            menu_order  INTEGER DEFAULT 0
        )
    """

    _CREATE_INDEX = "CREATE INDEX IF NOT EXISTS attachments_name ON attachments (name)"

    _COLUMNS = (
        "name", "title", "mime_type", "status", "file", "caption",
        "description", "width", "height", "parent_id", "menu_order",
    )

    _ORDER_BY = {
        "name": "name",
        "id": "id",
        "menu_order": "menu_order, id",
    }

    def __init__(self, db_path: str | None = None, media_base_url: str | None = None) -> None:
        """Initialize the repository.

        Args:
            db_path: Path to SQLite database file. Defaults to settings.db_path.
                     Use ":memory:" for testing.
            media_base_url: Public URL prefix for attachment files.
                            Defaults to settings.media_base_url.
        """
        self._db_path = db_path or str(settings.db_path)
        self._media_base_url = (media_base_url or settings.media_base_url).rstrip("/")
        self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._filters: dict[str, QueryFilter] = {}
        self._filters_lock = threading.Lock()
        self._init_db()

    def _init_db(self) -> None:
        """Create tables if they don't exist."""
        self._conn.execute(self._CREATE_TABLE)
        self._conn.execute(self._CREATE_INDEX)
        self._conn.commit()

    def save(self, attachment: Attachment) -> Attachment:
        """Persist an attachment. Inserts when id is 0, otherwise upserts by id."""
        values = [getattr(attachment, col) for col in self._COLUMNS]
        if attachment.id:
            placeholders = ", ".join("?" for _ in range(len(self._COLUMNS) + 1))
            updates = ", ".join(f"{col} = excluded.{col}" for col in self._COLUMNS)
            sql = f"""
                INSERT INTO attachments (id, {", ".join(self._COLUMNS)})
                VALUES ({placeholders})
                ON CONFLICT(id) DO UPDATE SET {updates}
            """
            self._conn.execute(sql, [attachment.id, *values])
            self._conn.commit()
            return attachment

        placeholders = ", ".join("?" for _ in self._COLUMNS)
        sql = f"INSERT INTO attachments ({', '.join(self._COLUMNS)}) VALUES ({placeholders})"
        cursor = self._conn.execute(sql, values)
        self._conn.commit()
        return attachment.model_copy(update={"id": cursor.lastrowid})

    def get(self, attachment_id: int) -> Attachment | None:
        """Retrieve an attachment by id. Returns None if not found."""
        sql = "SELECT * FROM attachments WHERE id = ?"
        row = self._conn.execute(sql, (attachment_id,)).fetchone()
        return self._row_to_attachment(row) if row else None

    def get_by_name(self, name: str) -> Attachment | None:
        """Retrieve the attachment whose name equals ``name`` exactly."""
        sql = "SELECT * FROM attachments WHERE name = ? ORDER BY id LIMIT 1"
        row = self._conn.execute(sql, (name,)).fetchone()
        return self._row_to_attachment(row) if row else None

    def query(self, query: AttachmentQuery) -> list[Attachment]:
        """Return attachments matching ``query`` and every registered filter."""
        if query.ids is not None and not query.ids:
            return []

        where: list[str] = []
        params: list = []

        if query.mime_type is not None:
            where.append("mime_type = ?")
            params.append(query.mime_type)
        if query.mime_prefix is not None:
            where.append(f"mime_type LIKE ? ESCAPE '{self.LIKE_ESCAPE}'")
            params.append(self.escape_like(query.mime_prefix) + "%")
        if query.status is not None:
            where.append("status = ?")
            params.append(query.status)
        if query.name is not None:
            where.append("name = ?")
            params.append(query.name)
        if query.parent_id is not None:
            where.append("parent_id = ?")
            params.append(query.parent_id)
        if query.ids is not None:
            where.append(f"id IN ({', '.join('?' for _ in query.ids)})")
            params.extend(query.ids)
        if query.exclude:
            where.append(f"id NOT IN ({', '.join('?' for _ in query.exclude)})")
            params.extend(query.exclude)

        with self._filters_lock:
            filters = list(self._filters.values())
        for query_filter in filters:
            clause = query_filter(query)
            if clause:
                sql, clause_params = clause
                where.append(f"({sql})")
                params.extend(clause_params)

        sql = "SELECT * FROM attachments"
        if where:
            sql += " WHERE " + " AND ".join(where)

        by_ids = query.order_by == "ids"
        if not by_ids:
            if query.order_by not in self._ORDER_BY:
                raise ValueError(f"Unsupported order_by: {query.order_by}")
            direction = "DESC" if query.descending else "ASC"
            columns = ", ".join(
                f"{col.strip()} {direction}" for col in self._ORDER_BY[query.order_by].split(",")
            )
            sql += f" ORDER BY {columns}"
            if query.limit is not None:
                sql += " LIMIT ?"
                params.append(query.limit)

        rows = self._conn.execute(sql, params).fetchall()
        attachments = [self._row_to_attachment(row) for row in rows]

        if by_ids:
            position = {attachment_id: i for i, attachment_id in enumerate(query.ids or [])}
            attachments.sort(key=lambda a: position.get(a.id, len(position)))
            if query.limit is not None:
                attachments = attachments[: query.limit]
        return attachments

    def list_all(self) -> list[Attachment]:
        """List all attachments ordered by id."""
        rows = self._conn.execute("SELECT * FROM attachments ORDER BY id").fetchall()
        return [self._row_to_attachment(row) for row in rows]

    def delete(self, attachment_id: int) -> None:
        """Remove an attachment. No-op if it does not exist."""
        self._conn.execute("DELETE FROM attachments WHERE id = ?", (attachment_id,))
        self._conn.commit()

    def exists(self, attachment_id: int) -> bool:
        """Check whether an attachment with the given id is stored."""
        sql = "SELECT 1 FROM attachments WHERE id = ? LIMIT 1"
        return self._conn.execute(sql, (attachment_id,)).fetchone() is not None

    def resolve_url(self, attachment_id: int) -> str | None:
        """Public URL of the attachment's file, or None if it has none."""
        sql = "SELECT file FROM attachments WHERE id = ?"
        row = self._conn.execute(sql, (attachment_id,)).fetchone()
        if row is None or not row["file"]:
            return None
        return f"{self._media_base_url}/{quote(row['file'].lstrip('/'), safe='/')}"

    def register_filter(self, name: str, query_filter: QueryFilter) -> None:
        """Register a named query filter. Re-registering a name replaces it."""
        with self._filters_lock:
            if name in self._filters:
                logger.debug("Replacing query filter: %s", name)
            self._filters[name] = query_filter

    @staticmethod
    def _row_to_attachment(row: sqlite3.Row) -> Attachment:
        """Convert a database row to an Attachment model."""
        return Attachment(
            id=row["id"],
            name=row["name"],
            title=row["title"],
            mime_type=row["mime_type"],
            status=row["status"],
            file=row["file"],
            caption=row["caption"],
            description=row["description"],
            width=row["width"],
            height=row["height"],
            parent_id=row["parent_id"],
            menu_order=row["menu_order"],
        )
