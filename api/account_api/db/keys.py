"""Database operations for API tokens."""

import logging
from typing import List, Optional

import asyncpg

from ..models.keys import AuthKey
from ..errors.problem_details import InternalServerError
from .connection import get_db_pool


logger = logging.getLogger(__name__)


async def create_key(user_id: str, name: str, secret: str) -> AuthKey:
    """Store a new API token for a user.

    Args:
        user_id: ID of the owning user
        name: Human readable token name
        secret: The signed token

    Returns:
        The created token

    Raises:
        InternalServerError: If database operation fails
    """
    pool = await get_db_pool()

    try:
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO auth_keys (name, secret, user_id)
                VALUES ($1, $2, $3)
                RETURNING id::text AS id, name, secret, inserted_at AS created, user_id::text AS user_id
                """,
                name,
                secret,
                int(user_id)
            )

            if not row:
                raise InternalServerError("Failed to create API token")

            logger.info(f"Created API token {row['id']} for user {user_id}")
            return AuthKey.model_validate(dict(row))

    except InternalServerError:
        raise
    except asyncpg.PostgresError as e:
        logger.error(f"Database error creating API token: {e}")
        raise InternalServerError(f"Database error: {e}")


async def list_keys(user_id: str) -> List[AuthKey]:
    """List a user's non-deleted API tokens, newest first."""
    pool = await get_db_pool()

    try:
        async with pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT k.id::text AS id, k.name, k.secret, k.inserted_at AS created,
                       EXISTS (
                           SELECT 1 FROM uploads u
                           WHERE u.auth_key_id = k.id AND u.deleted_at IS NULL
                       ) AS has_uploads
                FROM auth_keys k
                WHERE k.user_id = $1 AND k.deleted_at IS NULL
                ORDER BY k.inserted_at DESC
                """,
                int(user_id)
            )
            return [AuthKey.model_validate(dict(row)) for row in rows]

    except asyncpg.PostgresError as e:
        logger.error(f"Database error listing API tokens: {e}")
        raise InternalServerError(f"Database error: {e}")


async def get_key_by_secret(secret: str) -> Optional[AuthKey]:
    """Find a non-deleted API token by its secret, or None."""
    pool = await get_db_pool()

    try:
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT id::text AS id, name, secret, inserted_at AS created, user_id::text AS user_id
                FROM auth_keys
                WHERE secret = $1 AND deleted_at IS NULL
                """,
                secret
            )
            return AuthKey.model_validate(dict(row)) if row else None

    except asyncpg.PostgresError as e:
        logger.error(f"Database error retrieving API token: {e}")
        raise InternalServerError(f"Database error: {e}")


async def delete_key(user_id: str, key_id: str) -> Optional[str]:
    """Tombstone one of a user's API tokens.

    Returns:
        The deleted token ID, or None if the user has no such token
    """
    pool = await get_db_pool()

    try:
        key = int(key_id)
    except ValueError:
        return None

    try:
        async with pool.acquire() as conn:
            deleted_id = await conn.fetchval(
                """
                UPDATE auth_keys
                SET deleted_at = now(), updated_at = now()
                WHERE id = $1 AND user_id = $2 AND deleted_at IS NULL
                RETURNING id::text
                """,
                key,
                int(user_id)
            )
            if deleted_id:
                logger.info(f"Deleted API token {deleted_id} for user {user_id}")
            return deleted_id

    except asyncpg.PostgresError as e:
        logger.error(f"Database error deleting API token: {e}")
        raise InternalServerError(f"Database error: {e}")
