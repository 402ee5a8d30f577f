"""Normalization of publish and subscription criteria."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .exceptions import MissingEventNameError, PodiumError


@dataclass(slots=True, frozen=True)
class Criteria:
    """Canonical form of a publish request."""

    name: str
    channel: Optional[Any] = None
    tags: Optional[Dict[str, bool]] = None


def normalize_tags(tags: Any) -> Optional[Dict[str, bool]]:
    """Turn a tag string, list of tags or tag map into a tag map."""

    if tags is None:
        return None
    if isinstance(tags, str):
        return {tags: True}
    if isinstance(tags, Mapping):
        return {str(tag): bool(value) for tag, value in tags.items()}
    if isinstance(tags, (list, tuple, set, frozenset)):
        return {str(tag): True for tag in tags}
    raise PodiumError(f"Invalid criteria tags: {tags!r}")


def normalize_criteria(criteria: Any) -> Criteria:
    """Return the :class:`Criteria` for a bare event name or a criteria mapping."""

    if isinstance(criteria, Criteria):
        return criteria
    if isinstance(criteria, Mapping):
        name = criteria.get("name")
        if not name:
            raise MissingEventNameError()
        unknown = set(criteria) - {"name", "channel", "tags"}
        if unknown:
            raise PodiumError(f"Invalid criteria keys: {', '.join(sorted(map(str, unknown)))}")
        return Criteria(
            name=name,
            channel=criteria.get("channel"),
            tags=normalize_tags(criteria.get("tags")),
        )
    if not criteria:
        raise MissingEventNameError()
    return Criteria(name=criteria)


def subscription_options(criteria: Any) -> Dict[str, Any]:
    """Return subscription criteria as a mutable options mapping."""

    if isinstance(criteria, Mapping):
        return dict(criteria)
    return {"name": criteria}
