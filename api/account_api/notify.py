"""Slack notifications for user tag change requests."""

import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from .models.users import User


logger = logging.getLogger(__name__)

STORAGE_LIMIT_TAG = "StorageLimitBytes"
DEFAULT_STORAGE_LIMIT = "1TiB"


def format_user_request(
    user: User,
    tag_name: str,
    requested_value: str,
    form: List[Dict[str, Any]]
) -> str:
    """Render a tag change request as a Slack block quote."""
    if tag_name == STORAGE_LIMIT_TAG and requested_value == "":
        requested_value = DEFAULT_STORAGE_LIMIT

    fields = [
        ("Username", user.name),
        ("Email", user.email),
        ("User Id", user.id),
        ("Requested Tag Name", tag_name),
        ("Requested Tag Value", requested_value),
    ]
    fields.extend((entry.get("label"), entry.get("value")) for entry in form)

    return "\n>\n".join(f">*{label}*\n>{value}" for label, value in fields)


async def notify_slack_user_request(
    user: User,
    tag_name: str,
    requested_value: str,
    user_proposal_form: str,
    webhook_url: Optional[str]
) -> None:
    """Post a tag change request to the Slack webhook, if one is configured.

    Failures are logged and never propagate to the request that triggered
    the notification.
    """
    if not webhook_url:
        return

    try:
        form = json.loads(user_proposal_form)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse user request form: {e}")
        return

    if not isinstance(form, list):
        logger.error("User request form is not a list of fields")
        return

    fields = [entry for entry in form if isinstance(entry, dict)]
    if len(fields) != len(form):
        logger.warning(f"Skipped {len(form) - len(fields)} malformed user request form fields")

    text = format_user_request(user, tag_name, requested_value, fields)

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.post(webhook_url, json={"text": text})
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"Failed to notify Slack of request from user {user.id}: {e}")
        return

    logger.info(f"Notified Slack of {tag_name} request from user {user.id}")
