"""Database operations for uploads."""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import asyncpg

from ..models.uploads import Upload
from ..pagination import CursorPageRequest, OffsetPageRequest, Page, PageRequest
from ..errors.problem_details import (
    InvalidParameterError, InternalServerError, NotFoundError, UnknownPageRequestTypeError
)
from .connection import get_db_pool
from .errors import RangeNotSatisfiableDBError


logger = logging.getLogger(__name__)

UPLOAD_COLUMNS = """
    u.id::text AS id, u.type, u.name, u.source_cid AS cid,
    u.inserted_at AS created, u.updated_at AS updated, c.dag_size,
    COALESCE((
        SELECT json_agg(json_build_object(
            'status', p.status,
            'updated', p.updated_at,
            'peerId', l.peer_id,
            'peerName', l.peer_name,
            'region', l.region
        ))
        FROM pins p
        JOIN pin_locations l ON l.id = p.pin_location_id
        WHERE p.content_cid = u.content_cid
    ), '[]'::json) AS pins
"""

UPLOAD_FROM = """
    FROM uploads u
    JOIN content c ON c.cid = u.content_cid
"""


def _upload_from_row(row: Any) -> Upload:
    row_dict = dict(row)
    row_dict.pop('total', None)
    if isinstance(row_dict.get('pins'), str):
        row_dict['pins'] = json.loads(row_dict['pins'])
    return Upload.model_validate(row_dict)


def parse_cursor_timestamp(before: str) -> datetime:
    """Interpret a ``before`` cursor as an ISO-8601 timestamp.

    Raises:
        InvalidParameterError: If the cursor is not a timestamp
    """
    try:
        timestamp = datetime.fromisoformat(before.replace("Z", "+00:00"))
    except ValueError:
        raise InvalidParameterError("before", f"before must be an ISO-8601 timestamp, got {before!r}")
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp


async def list_uploads(user_id: str, page_request: PageRequest) -> Page:
    """List a user's uploads, newest first.

    Offset requests return the requested slice and the total number of
    uploads. Cursor requests return up to ``size`` uploads created before
    the cursor and do not count the total. Uploads sharing the cursor's
    exact timestamp are not returned on the following page.

    Args:
        user_id: ID of the owning user
        page_request: Offset or cursor page request

    Returns:
        Page of ``Upload`` items

    Raises:
        RangeNotSatisfiableDBError: If the offset lies beyond the user's uploads
        InvalidParameterError: If the cursor is not a timestamp
        InternalServerError: If database operation fails
    """
    pool = await get_db_pool()

    try:
        async with pool.acquire() as conn:
            if isinstance(page_request, CursorPageRequest):
                rows = await conn.fetch(
                    f"SELECT {UPLOAD_COLUMNS} {UPLOAD_FROM}" + """
                    WHERE u.user_id = $1 AND u.deleted_at IS NULL AND u.inserted_at < $2
                    ORDER BY u.inserted_at DESC, u.id DESC
                    LIMIT $3
                    """,
                    int(user_id),
                    parse_cursor_timestamp(page_request.before),
                    page_request.size
                )
                return Page(items=[_upload_from_row(row) for row in rows], count=None)

            if not isinstance(page_request, OffsetPageRequest):
                raise UnknownPageRequestTypeError(
                    f"Unknown page request type: {type(page_request).__name__}"
                )

            offset = page_request.offset
            rows = await conn.fetch(
                f"SELECT COUNT(*) OVER () AS total, {UPLOAD_COLUMNS} {UPLOAD_FROM}" + """
                WHERE u.user_id = $1 AND u.deleted_at IS NULL
                ORDER BY u.inserted_at DESC, u.id DESC
                LIMIT $2 OFFSET $3
                """,
                int(user_id),
                page_request.size,
                offset
            )

            if rows:
                count = rows[0]['total']
            else:
                count = await conn.fetchval(
                    "SELECT COUNT(*) FROM uploads WHERE user_id = $1 AND deleted_at IS NULL",
                    int(user_id)
                )

            if offset > 0 and offset >= count:
                raise RangeNotSatisfiableDBError(offset, count)

            return Page(items=[_upload_from_row(row) for row in rows], count=count)

    except asyncpg.PostgresError as e:
        logger.error(f"Database error listing uploads: {e}")
        raise InternalServerError(f"Database error: {e}")


async def get_upload(cid: str, user_id: str) -> Upload:
    """Get one of a user's uploads by CID.

    Raises:
        NotFoundError: If the user has no non-deleted upload with this CID
        InternalServerError: If database operation fails
    """
    pool = await get_db_pool()

    try:
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {UPLOAD_COLUMNS} {UPLOAD_FROM}" + """
                WHERE u.source_cid = $1 AND u.user_id = $2 AND u.deleted_at IS NULL
                """,
                cid,
                int(user_id)
            )

            if not row:
                raise NotFoundError(f"Upload '{cid}' not found")

            return _upload_from_row(row)

    except NotFoundError:
        raise
    except asyncpg.PostgresError as e:
        logger.error(f"Database error retrieving upload: {e}")
        raise InternalServerError(f"Database error: {e}")


async def delete_upload(user_id: str, cid: str) -> Optional[Dict[str, str]]:
    """Tombstone one of a user's uploads.

    Returns:
        ``{"_id": <upload id>}``, or None if the user has no such upload
    """
    pool = await get_db_pool()

    try:
        async with pool.acquire() as conn:
            upload_id = await conn.fetchval(
                """
                UPDATE uploads
                SET deleted_at = now(), updated_at = now()
                WHERE user_id = $1 AND source_cid = $2 AND deleted_at IS NULL
                RETURNING id::text
                """,
                int(user_id),
                cid
            )
            if not upload_id:
                return None

            logger.info(f"Deleted upload {upload_id} ({cid}) for user {user_id}")
            return {"_id": upload_id}

    except asyncpg.PostgresError as e:
        logger.error(f"Database error deleting upload: {e}")
        raise InternalServerError(f"Database error: {e}")


async def rename_upload(user_id: str, cid: str, name: str) -> Optional[Dict[str, str]]:
    """Rename one of a user's uploads.

    Returns:
        ``{"name": <new name>}``, or None if the user has no such upload
    """
    pool = await get_db_pool()

    try:
        async with pool.acquire() as conn:
            new_name = await conn.fetchval(
                """
                UPDATE uploads
                SET name = $3, updated_at = now()
                WHERE user_id = $1 AND source_cid = $2 AND deleted_at IS NULL
                RETURNING name
                """,
                int(user_id),
                cid,
                name
            )
            if new_name is None:
                return None

            logger.info(f"Renamed upload {cid} for user {user_id}")
            return {"name": new_name}

    except asyncpg.PostgresError as e:
        logger.error(f"Database error renaming upload: {e}")
        raise InternalServerError(f"Database error: {e}")
