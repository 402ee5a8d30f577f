"""In-process event emitter with channels, tag filters and aggregated dispatch."""

from .config import EventDefinition, EventSettings, ListenerOptions, TagFilter
from .dispatch import SettledResult
from .emitter import Podium
from .exceptions import (
    DuplicateEventError,
    InvalidEventOptionsError,
    InvalidListenerOptionsError,
    ListenerInvocationError,
    MissingEventNameError,
    PodiumError,
    SpreadDataMustBeArrayError,
    UnknownChannelError,
    UnknownEventChannelsError,
    UnknownEventError,
)

__all__ = [
    "Podium",
    "EventDefinition",
    "EventSettings",
    "ListenerOptions",
    "TagFilter",
    "SettledResult",
    "PodiumError",
    "UnknownEventError",
    "DuplicateEventError",
    "InvalidEventOptionsError",
    "InvalidListenerOptionsError",
    "UnknownEventChannelsError",
    "MissingEventNameError",
    "UnknownChannelError",
    "SpreadDataMustBeArrayError",
    "ListenerInvocationError",
]
