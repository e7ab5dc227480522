"""Database operations for users, tags and tag change requests."""

import json
import logging
from typing import Any, Dict, Optional

import asyncpg

from ..models.users import User, UserInput, UserTag, UserTagProposal
from ..errors.problem_details import InternalServerError
from .connection import get_db_pool


logger = logging.getLogger(__name__)

USER_COLUMNS = """
    id::text AS id, issuer, name, email, github, picture, public_address,
    inserted_at AS created, updated_at AS updated
"""


def _user_from_row(row: Any) -> User:
    return User(
        id=row['id'],
        issuer=row['issuer'],
        name=row['name'],
        email=row['email'],
        github=row['github'],
        picture=row['picture'],
        public_address=row['public_address'],
        created=row['created'],
        updated=row['updated']
    )


async def upsert_user(user: UserInput) -> User:
    """Create a user, or refresh the login details of an existing one.

    Args:
        user: User record built from login metadata

    Returns:
        The stored user

    Raises:
        InternalServerError: If database operation fails
    """
    pool = await get_db_pool()

    try:
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO users (name, picture, email, issuer, github, public_address)
                VALUES ($1, $2, $3, $4, $5, $6)
                ON CONFLICT (issuer)
                DO UPDATE SET
                    email = EXCLUDED.email,
                    github = COALESCE(EXCLUDED.github, users.github),
                    public_address = EXCLUDED.public_address,
                    updated_at = now()
                RETURNING {USER_COLUMNS}
                """,
                user.name,
                user.picture,
                user.email,
                user.issuer,
                user.github,
                user.public_address
            )

            if not row:
                raise InternalServerError("Failed to upsert user")

            logger.info(f"Upserted user {row['id']} for issuer {user.issuer}")
            return _user_from_row(row)

    except InternalServerError:
        raise
    except asyncpg.PostgresError as e:
        logger.error(f"Database error upserting user: {e}")
        raise InternalServerError(f"Database error: {e}")


async def get_user(
    issuer: str,
    include_tags: bool = False,
    include_tag_proposals: bool = False
) -> Optional[User]:
    """Get a user by magic issuer.

    Args:
        issuer: The user's issuer (DID)
        include_tags: Load the user's active tags
        include_tag_proposals: Load the user's tag change requests

    Returns:
        The user, or None if no user has this issuer

    Raises:
        InternalServerError: If database operation fails
    """
    pool = await get_db_pool()

    try:
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {USER_COLUMNS} FROM users WHERE issuer = $1",
                issuer
            )
            if not row:
                return None

            user = _user_from_row(row)

            if include_tags:
                tag_rows = await conn.fetch(
                    """
                    SELECT tag, value, deleted_at
                    FROM user_tags
                    WHERE user_id = $1 AND deleted_at IS NULL
                    ORDER BY inserted_at DESC
                    """,
                    int(user.id)
                )
                user.tags = [UserTag.model_validate(dict(r)) for r in tag_rows]

            if include_tag_proposals:
                proposal_rows = await conn.fetch(
                    """
                    SELECT id::text AS id, tag, proposed_tag_value, admin_decision_type, deleted_at
                    FROM user_tag_proposals
                    WHERE user_id = $1
                    ORDER BY inserted_at DESC
                    """,
                    int(user.id)
                )
                user.tag_proposals = [UserTagProposal.model_validate(dict(r)) for r in proposal_rows]

            return user

    except asyncpg.PostgresError as e:
        logger.error(f"Database error retrieving user: {e}")
        raise InternalServerError(f"Database error: {e}")


async def get_storage_used(user_id: str) -> int:
    """Total DAG size in bytes of the user's non-deleted uploads."""
    pool = await get_db_pool()

    try:
        async with pool.acquire() as conn:
            used = await conn.fetchval(
                """
                SELECT COALESCE(SUM(c.dag_size), 0)
                FROM uploads u
                JOIN content c ON c.cid = u.content_cid
                WHERE u.user_id = $1 AND u.deleted_at IS NULL
                """,
                int(user_id)
            )
            return int(used or 0)

    except asyncpg.PostgresError as e:
        logger.error(f"Database error computing storage used: {e}")
        raise InternalServerError(f"Database error: {e}")


async def get_user_tag_value(user_id: str, tag: str) -> Optional[str]:
    """Value of the user's active tag, or None if the tag is not set."""
    pool = await get_db_pool()

    try:
        async with pool.acquire() as conn:
            return await conn.fetchval(
                """
                SELECT value
                FROM user_tags
                WHERE user_id = $1 AND tag = $2 AND deleted_at IS NULL
                ORDER BY inserted_at DESC
                LIMIT 1
                """,
                int(user_id),
                tag
            )

    except asyncpg.PostgresError as e:
        logger.error(f"Database error retrieving tag {tag}: {e}")
        raise InternalServerError(f"Database error: {e}")


async def create_user_request(
    user_id: str,
    tag_name: str,
    requested_tag_value: str,
    user_proposal_form: str
) -> Dict[str, str]:
    """Record a tag change request for an administrator to decide on.

    Returns:
        ``{"_id": <proposal id>}``
    """
    pool = await get_db_pool()

    try:
        form = json.loads(user_proposal_form)
    except json.JSONDecodeError:
        # Stored as a JSON string so the submission is never lost
        form = user_proposal_form

    try:
        async with pool.acquire() as conn:
            proposal_id = await conn.fetchval(
                """
                INSERT INTO user_tag_proposals (user_id, tag, proposed_tag_value, user_proposal_form)
                VALUES ($1, $2, $3, $4::jsonb)
                RETURNING id::text
                """,
                int(user_id),
                tag_name,
                requested_tag_value,
                json.dumps(form)
            )
            logger.info(f"Created tag request {proposal_id} for user {user_id} ({tag_name})")
            return {"_id": proposal_id}

    except asyncpg.PostgresError as e:
        logger.error(f"Database error creating tag request: {e}")
        raise InternalServerError(f"Database error: {e}")
