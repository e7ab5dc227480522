"""Helpers for reading user tags and tag change requests."""

from typing import Optional

from .models.users import User


def get_tag_value(user: User, tag_name: str, default: Optional[str] = None) -> Optional[str]:
    """Value of the user's active tag, or ``default`` if it is not set."""
    for tag in user.tags:
        if tag.tag == tag_name and tag.deleted_at is None:
            return tag.value
    return default


def has_tag(user: User, tag_name: str, value: str) -> bool:
    """Whether the user has an active tag with the given value."""
    return get_tag_value(user, tag_name) == value


def has_pending_tag_proposal(user: User, tag_name: str) -> bool:
    """Whether the user has an undecided, non-deleted request for the tag."""
    return any(
        proposal.tag == tag_name
        and proposal.admin_decision_type is None
        and proposal.deleted_at is None
        for proposal in user.tag_proposals
    )
