"""Channel and tag matching between updates and subscriptions."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from .config import TagFilter


def matches_channel(channels: Optional[Sequence[str]], channel: Any) -> bool:
    """Return True when an update on ``channel`` reaches a listener limited to ``channels``."""

    if not channels:
        return True
    return channel is not None and channel in channels


def matches_tags(tag_filter: Optional[TagFilter], tags: Optional[Dict[str, bool]]) -> bool:
    """Return True when the update ``tags`` satisfy ``tag_filter``.

    Without ``all`` one shared tag is enough; with it every filter tag must be
    present on the update.
    """

    if tag_filter is None:
        return True
    if not tags:
        return False
    matched = [tag for tag in tag_filter.tags if tag in tags]
    if not matched:
        return False
    if tag_filter.all:
        return len(matched) == len(tag_filter.tags)
    return True
