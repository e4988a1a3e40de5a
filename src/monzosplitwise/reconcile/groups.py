#!/usr/bin/env python3
"""
Group Resolution

Maps a split tag to the Splitwise group it names.

Tag grammar:
- ``#splitwise`` or ``#splitwise-``: ungrouped expense owed entirely by the
  current user (group id 0)
- ``#splitwise-<name>``: the group whose name matches ``<name>`` ignoring
  case and whitespace; everything after the first ``-`` is the name, so
  ``#splitwise-flat-mates`` names "flat-mates"

Anything else that merely contains the marker (``x#splitwise``,
``#splitwiseTrip``) is malformed.
"""

import logging
from collections.abc import Sequence

from ..splitwise.models import UNGROUPED_GROUP_ID, Group
from .models import ResolvedGroup
from .tags import TAG_MARKER

logger = logging.getLogger(__name__)

UNGROUPED_NAME = "ungrouped"


class GroupNotFoundError(Exception):
    """Raised when a tag names no known group."""

    def __init__(self, tag: str, message: str | None = None):
        super().__init__(message or f"No Splitwise group matches tag {tag!r}")
        self.tag = tag


class MalformedTagError(GroupNotFoundError):
    """Raised when a token contains the marker but does not follow the tag grammar."""

    def __init__(self, tag: str):
        super().__init__(tag, f"Unrecognized split tag {tag!r}")


def normalize_group_name(name: str) -> str:
    """Case-fold and drop all whitespace."""
    return "".join(name.casefold().split())


def parse_group_name(tag: str) -> str:
    """
    Extract the group name from a tag.

    Returns:
        The raw group name, or "" for the ungrouped forms

    Raises:
        MalformedTagError: If the tag does not follow the grammar
    """
    if not tag.startswith(TAG_MARKER):
        raise MalformedTagError(tag)

    rest = tag[len(TAG_MARKER) :]
    if not rest:
        return ""
    if not rest.startswith("-"):
        raise MalformedTagError(tag)
    return rest[1:]


def resolve_group(tag: str, groups: Sequence[Group], current_user_id: int) -> ResolvedGroup:
    """
    Resolve a tag to the group and participants of the split.

    When several groups normalize to the same name the first one in listing
    order wins. Splitwise does not document the order of get_groups, so which
    group that is cannot be relied upon; the ambiguity is logged.

    Args:
        tag: Split tag taken from a memo
        groups: Group snapshot in API order
        current_user_id: Authenticated Splitwise user, always the payer

    Returns:
        ResolvedGroup with participants in member order

    Raises:
        GroupNotFoundError: If no group name matches
        MalformedTagError: If the tag grammar is not recognized
    """
    name = parse_group_name(tag)
    if not normalize_group_name(name):
        return ResolvedGroup(
            group_id=UNGROUPED_GROUP_ID,
            name=UNGROUPED_NAME,
            participant_ids=(current_user_id,),
            payer_id=current_user_id,
        )

    wanted = normalize_group_name(name)
    matches = [g for g in groups if normalize_group_name(g.name) == wanted]
    if not matches:
        raise GroupNotFoundError(tag)

    if len(matches) > 1:
        logger.warning(
            "Tag %s matches %d groups (%s); using the first listed, id %d",
            tag,
            len(matches),
            ", ".join(f"{g.name!r}/{g.id}" for g in matches),
            matches[0].id,
        )

    group = matches[0]
    return ResolvedGroup(
        group_id=group.id,
        name=group.name,
        participant_ids=tuple(group.member_ids),
        payer_id=current_user_id,
    )
