# key-value access to the blob store: engine snapshots and the remembered login
from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Optional

from db.database import connect
from utils.logger import get_logger

_logger = get_logger(__name__)

STATE_KEY = "store-state-v1"
SESSION_KEY = "store-session-v1"


# ---------------------------
# Raw blobs
# ---------------------------


async def get_blob(key: str) -> Optional[str]:
    """Return the stored text for ``key``, or None."""
    async with connect() as conn:
        cur = await conn.execute("SELECT value FROM kv WHERE key = ?;", (key,))
        row = await cur.fetchone()
        await cur.close()
    return row[0] if row else None


async def put_blob(key: str, value: str) -> None:
    """Insert or replace the text stored under ``key``."""
    async with connect() as conn:
        await conn.execute(
            """
            INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at;
            """,
            (key, value, datetime.now().isoformat()),
        )
        await conn.commit()


async def delete_blob(key: str) -> bool:
    """Remove ``key``; True if something was deleted."""
    async with connect() as conn:
        res = await conn.execute("DELETE FROM kv WHERE key = ?;", (key,))
        await conn.commit()
        return res.rowcount > 0


async def _get_json(key: str) -> Optional[Any]:
    text = await get_blob(key)
    if text is None:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        _logger.warning(f"Stored value for '{key}' is not valid JSON: {e}")
        return None


# ---------------------------
# Engine state
# ---------------------------


async def load_state() -> Optional[Dict[str, Any]]:
    """
    Return the last saved snapshot record, or None if nothing usable is stored.
    Shape checks are left to the engine, which falls back to seed data.
    """
    data = await _get_json(STATE_KEY)
    if data is not None and not isinstance(data, dict):
        _logger.warning("Stored state is not a JSON object; ignoring it")
        return None
    return data


async def save_state(snapshot: Dict[str, Any]) -> None:
    await put_blob(STATE_KEY, json.dumps(snapshot))
    _logger.debug(
        "Saved state: "
        + ", ".join(f"{len(v)} {k}" for k, v in snapshot.items())
    )


# ---------------------------
# Remembered login
# ---------------------------


async def load_session() -> Optional[Dict[str, str]]:
    """Return the remembered user record if it has a username and role."""
    data = await _get_json(SESSION_KEY)
    if not isinstance(data, dict) or not data.get("username") or not data.get("role"):
        return None
    return data


async def save_session(user: Dict[str, str]) -> None:
    await put_blob(SESSION_KEY, json.dumps(user))


async def clear_session() -> None:
    await delete_blob(SESSION_KEY)
