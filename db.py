import json
import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


@dataclass
class ContentRecord:
    id: str
    owner_id: str
    topic: str
    titles: list[str]
    description: str
    tags: list[str]
    thumbnail_ideas: list[str]
    script_outline: list[str]
    ai_model: str
    is_favorite: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "topic": self.topic,
            "titles": self.titles,
            "description": self.description,
            "tags": self.tags,
            "thumbnailIdeas": self.thumbnail_ideas,
            "scriptOutline": self.script_outline,
            "aiModel": self.ai_model,
            "isFavorite": self.is_favorite,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_ts(value: str) -> datetime:
    ts = datetime.fromisoformat(value)
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def _row_to_record(row: sqlite3.Row) -> ContentRecord:
    return ContentRecord(
        id=row["id"],
        owner_id=row["user_id"],
        topic=row["topic"],
        titles=json.loads(row["titles"]),
        description=row["description"],
        tags=json.loads(row["tags"]),
        thumbnail_ideas=json.loads(row["thumbnail_ideas"]),
        script_outline=json.loads(row["script_outline"]),
        ai_model=row["ai_model"],
        is_favorite=bool(row["is_favorite"]),
        created_at=_parse_ts(row["created_at"]),
        updated_at=_parse_ts(row["updated_at"]),
    )


def _matches(record: ContentRecord, needle: str) -> bool:
    fields = [record.topic, record.description, *record.titles, *record.tags]
    return any(needle in str(value).lower() for value in fields)


class ContentStore:
    """SQLite persistence for generated content.

    Every query that touches an existing row filters on user_id, so a record
    owned by someone else behaves exactly like a missing one.
    """

    def __init__(self, db_path: str):
        p = Path(db_path).expanduser()
        p.parent.mkdir(parents=True, exist_ok=True)
        self._path = p

    def _conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._path))
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        with self._conn() as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS contents (
                    id              TEXT    PRIMARY KEY,
                    user_id         TEXT    NOT NULL,
                    topic           TEXT    NOT NULL,
                    titles          TEXT    NOT NULL,
                    description     TEXT    NOT NULL,
                    tags            TEXT    NOT NULL,
                    thumbnail_ideas TEXT    NOT NULL,
                    script_outline  TEXT    NOT NULL,
                    ai_model        TEXT    NOT NULL,
                    is_favorite     INTEGER NOT NULL DEFAULT 0,
                    created_at      TEXT    NOT NULL,
                    updated_at      TEXT    NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_contents_user
                    ON contents (user_id, created_at);
                CREATE INDEX IF NOT EXISTS idx_contents_user_favorite
                    ON contents (user_id, is_favorite);
            """)

    # ── writes ────────────────────────────────────────────────────────────────

    def create(
        self,
        owner_id: str,
        topic: str,
        content: dict,
        ai_model: str,
    ) -> ContentRecord:
        """Insert a generated result. `content` holds the five normalized fields."""
        now = _now()
        record = ContentRecord(
            id=uuid.uuid4().hex,
            owner_id=owner_id,
            topic=topic,
            titles=list(content["titles"]),
            description=content["description"],
            tags=list(content["tags"]),
            thumbnail_ideas=list(content["thumbnailIdeas"]),
            script_outline=list(content["scriptOutline"]),
            ai_model=ai_model,
            is_favorite=False,
            created_at=now,
            updated_at=now,
        )
        with self._conn() as conn:
            conn.execute(
                """INSERT INTO contents
                   (id, user_id, topic, titles, description, tags, thumbnail_ideas,
                    script_outline, ai_model, is_favorite, created_at, updated_at)
                   VALUES (?,?,?,?,?,?,?,?,?,?,?,?)""",
                (
                    record.id, owner_id, topic,
                    json.dumps(record.titles, ensure_ascii=False),
                    record.description,
                    json.dumps(record.tags, ensure_ascii=False),
                    json.dumps(record.thumbnail_ideas, ensure_ascii=False),
                    json.dumps(record.script_outline, ensure_ascii=False),
                    ai_model, 0, now.isoformat(), now.isoformat(),
                ),
            )
        return record

    def delete(self, content_id: str, owner_id: str) -> bool:
        with self._conn() as conn:
            cur = conn.execute(
                "DELETE FROM contents WHERE id=? AND user_id=?",
                (content_id, owner_id),
            )
            return cur.rowcount > 0

    def toggle_favorite(self, content_id: str, owner_id: str) -> Optional[ContentRecord]:
        now = _now().isoformat()
        with self._conn() as conn:
            cur = conn.execute(
                """UPDATE contents SET is_favorite = 1 - is_favorite, updated_at=?
                   WHERE id=? AND user_id=?""",
                (now, content_id, owner_id),
            )
            if cur.rowcount == 0:
                return None
            row = conn.execute(
                "SELECT * FROM contents WHERE id=? AND user_id=?",
                (content_id, owner_id),
            ).fetchone()
        return _row_to_record(row) if row else None

    # ── reads ─────────────────────────────────────────────────────────────────

    def get(self, content_id: str, owner_id: str) -> Optional[ContentRecord]:
        with self._conn() as conn:
            row = conn.execute(
                "SELECT * FROM contents WHERE id=? AND user_id=?",
                (content_id, owner_id),
            ).fetchone()
        return _row_to_record(row) if row else None

    def list_for_owner(self, owner_id: str, limit: int | None = None) -> list[ContentRecord]:
        """Owner's records, newest first. No limit returns everything."""
        sql = "SELECT * FROM contents WHERE user_id=? ORDER BY created_at DESC, rowid DESC"
        params: tuple = (owner_id,)
        if limit is not None:
            sql += " LIMIT ?"
            params = (owner_id, limit)
        with self._conn() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [_row_to_record(r) for r in rows]

    def list_favorites(self, owner_id: str) -> list[ContentRecord]:
        with self._conn() as conn:
            rows = conn.execute(
                """SELECT * FROM contents WHERE user_id=? AND is_favorite=1
                   ORDER BY created_at DESC, rowid DESC""",
                (owner_id,),
            ).fetchall()
        return [_row_to_record(r) for r in rows]

    def search(self, owner_id: str, keyword: str) -> list[ContentRecord]:
        """Case-insensitive substring match over topic, titles, description and tags.

        List fields are matched per element, never against their stored JSON text.
        """
        needle = keyword.lower()
        return [r for r in self.list_for_owner(owner_id) if _matches(r, needle)]
