# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: data access for MailChimp lists and their members.
Pure CRUD — no validation, no provider calls.
"""
import json
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from member_sync.core.logging import get_logger

logger = get_logger(__name__)

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS mail_chimp_list (
        id            VARCHAR(36)  PRIMARY KEY,
        name          VARCHAR(255) NOT NULL,
        mail_chimp_id VARCHAR(255),
        created_at    VARCHAR(40)  NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS mail_chimp_list_member (
        id                    VARCHAR(36)  PRIMARY KEY,
        list_id               VARCHAR(36)  NOT NULL REFERENCES mail_chimp_list (id),
        mail_chimp_id         VARCHAR(255),
        email_address         VARCHAR(255) NOT NULL,
        email_type            VARCHAR(16),
        status                VARCHAR(32)  NOT NULL,
        merge_fields          TEXT,
        interests             TEXT,
        language              VARCHAR(16),
        vip                   BOOLEAN,
        location              TEXT,
        marketing_permissions TEXT,
        ip_signup             VARCHAR(64),
        timestamp_signup      VARCHAR(64),
        ip_opt                VARCHAR(64),
        timestamp_opt         VARCHAR(64),
        tags                  TEXT,
        created_at            VARCHAR(40)  NOT NULL,
        updated_at            VARCHAR(40)  NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS ix_list_member_list_id ON mail_chimp_list_member (list_id)",
)

LIST_COLS = "id, name, mail_chimp_id, created_at"

MEMBER_COLS = (
    "id, list_id, mail_chimp_id, email_address, email_type, status, merge_fields, "
    "interests, language, vip, location, marketing_permissions, ip_signup, "
    "timestamp_signup, ip_opt, timestamp_opt, tags, created_at, updated_at"
)

# Columns holding nested structures, stored as JSON text.
JSON_COLS = ("merge_fields", "interests", "location", "marketing_permissions", "tags")

_MEMBER_COL_NAMES = tuple(c.strip() for c in MEMBER_COLS.split(","))


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _dump(value: Any) -> Optional[str]:
    return None if value is None else json.dumps(value)


def _load(value: Optional[str]) -> Any:
    return None if value is None else json.loads(value)


def _list_row_to_dict(row) -> Dict[str, Any]:
    return {
        "id": str(row[0]),
        "name": row[1],
        "mail_chimp_id": row[2],
        "created_at": row[3],
    }


def _member_row_to_dict(row) -> Dict[str, Any]:
    member = dict(zip(_MEMBER_COL_NAMES, row))
    member["id"] = str(member["id"])
    member["list_id"] = str(member["list_id"])
    for col in JSON_COLS:
        member[col] = _load(member[col])
    if member["vip"] is not None:
        member["vip"] = bool(member["vip"])
    return member


def _member_params(member: Dict[str, Any]) -> Dict[str, Any]:
    params = {col: member.get(col) for col in _MEMBER_COL_NAMES}
    for col in JSON_COLS:
        params[col] = _dump(params[col])
    return params


class MemberRepository:
    """Handles all direct database operations for lists and list members."""

    def __init__(self, engine: Engine):
        self._engine = engine

    def init_schema(self) -> None:
        with self._engine.begin() as conn:
            for statement in SCHEMA:
                conn.execute(text(statement))

    # ── Lists ──────────────────────────────────────────────────────────

    def create_list(self, name: str, mail_chimp_id: Optional[str] = None) -> Dict[str, Any]:
        mc_list = {
            "id": str(uuid.uuid4()),
            "name": name,
            "mail_chimp_id": mail_chimp_id,
            "created_at": _now(),
        }
        with self._engine.begin() as conn:
            conn.execute(
                text(f"INSERT INTO mail_chimp_list ({LIST_COLS}) "
                     "VALUES (:id, :name, :mail_chimp_id, :created_at)"),
                mc_list,
            )
        return mc_list

    def find_list(self, list_id: str) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text(f"SELECT {LIST_COLS} FROM mail_chimp_list WHERE id = :id"),
                {"id": list_id},
            ).fetchone()
        return _list_row_to_dict(row) if row else None

    # ── Members: read ──────────────────────────────────────────────────

    def find_member(self, list_id: str, subscriber_id: str) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text(f"SELECT {MEMBER_COLS} FROM mail_chimp_list_member "
                     "WHERE list_id = :list_id AND id = :id"),
                {"list_id": list_id, "id": subscriber_id},
            ).fetchone()
        return _member_row_to_dict(row) if row else None

    def list_members(self, list_id: str) -> List[Dict[str, Any]]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"SELECT {MEMBER_COLS} FROM mail_chimp_list_member "
                     "WHERE list_id = :list_id ORDER BY created_at, id"),
                {"list_id": list_id},
            ).fetchall()
        return [_member_row_to_dict(r) for r in rows]

    def count_by_status(self, status: str) -> int:
        with self._engine.connect() as conn:
            return conn.execute(
                text("SELECT COUNT(*) FROM mail_chimp_list_member WHERE status = :s"),
                {"s": status},
            ).scalar() or 0

    # ── Members: write ─────────────────────────────────────────────────

    def insert_member(self, member: Dict[str, Any]) -> Dict[str, Any]:
        """Persist a new member. ``id`` is assigned here when absent."""
        record = dict(member)
        record.setdefault("id", None)
        if not record["id"]:
            record["id"] = str(uuid.uuid4())
        record["created_at"] = record["updated_at"] = _now()
        placeholders = ", ".join(f":{col}" for col in _MEMBER_COL_NAMES)
        with self._engine.begin() as conn:
            conn.execute(
                text(f"INSERT INTO mail_chimp_list_member ({MEMBER_COLS}) VALUES ({placeholders})"),
                _member_params(record),
            )
        logger.debug("Member row inserted id=%s list=%s", record["id"], record["list_id"])
        return record

    def update_member(self, member: Dict[str, Any]) -> Dict[str, Any]:
        """Overwrite every mutable column. ``id`` and ``list_id`` never change."""
        record = dict(member)
        record["updated_at"] = _now()
        assignments = ", ".join(
            f"{col} = :{col}" for col in _MEMBER_COL_NAMES
            if col not in ("id", "list_id", "created_at")
        )
        with self._engine.begin() as conn:
            conn.execute(
                text(f"UPDATE mail_chimp_list_member SET {assignments} "
                     "WHERE id = :id AND list_id = :list_id"),
                _member_params(record),
            )
        return record

    def delete_member(self, member_id: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                text("DELETE FROM mail_chimp_list_member WHERE id = :id"),
                {"id": member_id},
            )

    # ── Ops ────────────────────────────────────────────────────────────

    def verify_connection(self):
        with self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def dispose(self):
        self._engine.dispose()
