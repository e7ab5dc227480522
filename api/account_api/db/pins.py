"""Database operations for Pinning Service API pin requests."""

import json
import logging
from typing import Any, List, Sequence

import asyncpg

from ..models.pins import PsaPinRequest
from ..pagination import OffsetPageRequest, Page
from ..psa import PsaListParams
from ..errors.problem_details import InternalServerError
from .connection import get_db_pool
from .errors import RangeNotSatisfiableDBError


logger = logging.getLogger(__name__)

# Aggregate status of a request's pins: any pinned wins, then pinning, then
# queued. A request without pins is still queued.
PIN_STATUS_SQL = """
    SELECT CASE
        WHEN COUNT(*) = 0 THEN 'queued'
        WHEN bool_or(p.status = 'pinned') THEN 'pinned'
        WHEN bool_or(p.status = 'pinning') THEN 'pinning'
        WHEN bool_or(p.status = 'queued') THEN 'queued'
        ELSE 'failed'
    END
    FROM pins p
    WHERE p.content_cid = r.content_cid
"""

NAME_MATCHERS = {
    "exact": "r.name = {param}",
    "iexact": "lower(r.name) = lower({param})",
    "partial": "r.name LIKE '%' || {param} || '%'",
    "ipartial": "r.name ILIKE '%' || {param} || '%'",
}


def build_pin_request_filters(
    auth_key_ids: Sequence[str],
    params: PsaListParams
) -> tuple[str, List[Any]]:
    """Build the WHERE clause selecting pin requests.

    Returns:
        Tuple of (where_clause, parameters)
    """
    conditions = ["r.auth_key_id = ANY($1::bigint[])", "r.deleted_at IS NULL"]
    values: List[Any] = [[int(key_id) for key_id in auth_key_ids]]

    def add(condition: str, value: Any) -> None:
        values.append(value)
        conditions.append(condition.format(param=f"${len(values)}"))

    if params.cid:
        add("r.source_cid = ANY({param}::text[])", params.cid)
    if params.name:
        add(NAME_MATCHERS[params.match], params.name)
    if params.before:
        add("r.inserted_at < {param}", params.before)
    if params.after:
        add("r.inserted_at > {param}", params.after)
    if params.meta:
        add("r.meta @> {param}::jsonb", json.dumps(params.meta))

    return " AND ".join(conditions), values


def _pin_request_from_row(row: Any) -> PsaPinRequest:
    row_dict = dict(row)
    row_dict.pop('total', None)
    for key in ('origins', 'meta'):
        if isinstance(row_dict.get(key), str):
            row_dict[key] = json.loads(row_dict[key])
    return PsaPinRequest.model_validate(row_dict)


async def list_psa_pin_requests(
    auth_key_ids: Sequence[str],
    params: PsaListParams,
    page_request: OffsetPageRequest
) -> Page:
    """List pin requests made with any of the given API tokens, newest first.

    Args:
        auth_key_ids: IDs of the tokens whose pin requests are listed
        params: Validated Pinning Service API filters
        page_request: Offset page request

    Returns:
        Page of ``PsaPinRequest`` items with the total matching count

    Raises:
        RangeNotSatisfiableDBError: If the offset lies beyond the matching requests
        InternalServerError: If database operation fails
    """
    if not auth_key_ids:
        if page_request.offset > 0:
            raise RangeNotSatisfiableDBError(page_request.offset, 0)
        return Page(items=[], count=0)

    where_clause, values = build_pin_request_filters(auth_key_ids, params)
    status_clause = ""
    if params.status:
        values.append(list(params.status))
        status_clause = f"WHERE status = ANY(${len(values)}::text[])"

    values.extend([page_request.size, page_request.offset])
    limit_param, offset_param = f"${len(values) - 1}", f"${len(values)}"

    query = f"""
        WITH requests AS (
            SELECT r.id::text AS id, r.source_cid, r.content_cid, r.name, r.origins, r.meta,
                   r.inserted_at AS created, ({PIN_STATUS_SQL}) AS status
            FROM psa_pin_requests r
            WHERE {where_clause}
        )
        SELECT *, COUNT(*) OVER () AS total
        FROM requests
        {status_clause}
        ORDER BY created DESC, id DESC
        LIMIT {limit_param} OFFSET {offset_param}
    """

    pool = await get_db_pool()

    try:
        async with pool.acquire() as conn:
            rows = await conn.fetch(query, *values)

            if rows:
                count = rows[0]['total']
            else:
                count_query = f"""
                    WITH requests AS (
                        SELECT ({PIN_STATUS_SQL}) AS status
                        FROM psa_pin_requests r
                        WHERE {where_clause}
                    )
                    SELECT COUNT(*) FROM requests {status_clause}
                """
                count = await conn.fetchval(count_query, *values[:-2])

            if page_request.offset > 0 and page_request.offset >= count:
                raise RangeNotSatisfiableDBError(page_request.offset, count)

            return Page(items=[_pin_request_from_row(row) for row in rows], count=count)

    except asyncpg.PostgresError as e:
        logger.error(f"Database error listing pin requests: {e}")
        raise InternalServerError(f"Database error: {e}")
