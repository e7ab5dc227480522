"""Database operations for billing provider customers."""

import logging
from typing import Optional

import asyncpg

from ..errors.problem_details import InternalServerError
from .connection import get_db_pool


logger = logging.getLogger(__name__)


async def get_customer_id(user_id: str) -> Optional[str]:
    """Billing provider customer ID of a user, or None if none was created yet."""
    pool = await get_db_pool()

    try:
        async with pool.acquire() as conn:
            return await conn.fetchval(
                "SELECT id FROM customers WHERE user_id = $1",
                int(user_id)
            )

    except asyncpg.PostgresError as e:
        logger.error(f"Database error retrieving customer: {e}")
        raise InternalServerError(f"Database error: {e}")


async def save_customer(user_id: str, customer_id: str) -> str:
    """Associate a billing provider customer with a user.

    If the user already has a customer (a concurrent request created one
    first), the stored customer ID is kept and returned.
    """
    pool = await get_db_pool()

    try:
        async with pool.acquire() as conn:
            stored = await conn.fetchval(
                """
                INSERT INTO customers (id, user_id)
                VALUES ($1, $2)
                ON CONFLICT (user_id) DO UPDATE SET user_id = customers.user_id
                RETURNING id
                """,
                customer_id,
                int(user_id)
            )
            logger.info(f"Stored customer {stored} for user {user_id}")
            return stored

    except asyncpg.PostgresError as e:
        logger.error(f"Database error storing customer: {e}")
        raise InternalServerError(f"Database error: {e}")
