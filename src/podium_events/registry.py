"""Event registry owning event definitions and their subscribed handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from .config import EventDefinition, ListenerOptions, TagFilter
from .exceptions import DuplicateEventError, UnknownEventError
from .logging import describe_listener, get_logger, log_event

LOGGER = get_logger("registry")


@dataclass(slots=True, eq=False)
class HandlerRecord:
    """A single subscription to a registered event."""

    name: str
    listener: Callable[..., Any]
    context: Any = None
    count: Optional[int] = None
    channels: Optional[Tuple[str, ...]] = None
    filter: Optional[TagFilter] = None
    clone: Optional[bool] = None
    spread: Optional[bool] = None
    tags: Optional[bool] = None

    @classmethod
    def from_options(cls, options: ListenerOptions) -> "HandlerRecord":
        return cls(
            name=options.name,
            listener=options.listener,
            context=options.context,
            count=options.count,
            channels=options.channels,
            filter=options.filter,
            clone=options.clone,
            spread=options.spread,
            tags=options.tags,
        )

    def invoke(self, args: Iterable[Any]) -> Any:
        if self.context is not None:
            return self.listener(self.context, *args)
        return self.listener(*args)


@dataclass(slots=True)
class EventEntry:
    """Registered event and the ordered tuple of its handlers.

    ``handlers`` is replaced on every change so a dispatch pass holding the
    previous tuple is unaffected.
    """

    definition: EventDefinition
    handlers: Tuple[HandlerRecord, ...] = field(default_factory=tuple)

    def flag(self, handler: HandlerRecord, name: str) -> bool:
        override = getattr(handler, name)
        if override is not None:
            return override
        return bool(getattr(self.definition, name, False))


class EventRegistry:
    """Registry that maps event names to :class:`EventEntry` objects."""

    def __init__(self) -> None:
        self._events: Dict[str, EventEntry] = {}

    def register(self, definition: EventDefinition) -> EventEntry:
        existing = self._events.get(definition.name)
        if existing is not None:
            if existing.definition.shared or definition.shared:
                return existing
            raise DuplicateEventError(definition.name)

        entry = EventEntry(definition=definition)
        self._events[definition.name] = entry
        log_event(
            LOGGER,
            "event_registered",
            definition.name,
            **definition.model_dump(exclude={"name"}, exclude_none=True),
        )
        return entry

    def entry(self, name: Any) -> EventEntry:
        try:
            return self._events[name]
        except (KeyError, TypeError) as exc:
            raise UnknownEventError(name) from exc

    def add_handler(self, handler: HandlerRecord) -> None:
        entry = self.entry(handler.name)
        entry.handlers = entry.handlers + (handler,)
        log_event(
            LOGGER,
            "listener_added",
            handler.name,
            handlers=len(entry.handlers),
            listener=describe_listener(handler.listener),
        )

    def remove_handler(self, name: str, handler: HandlerRecord) -> None:
        entry = self.entry(name)
        entry.handlers = tuple(item for item in entry.handlers if item is not handler)
        log_event(LOGGER, "listener_exhausted", name, handlers=len(entry.handlers))

    def remove_listener(self, name: str, listener: Callable[..., Any]) -> None:
        entry = self.entry(name)
        entry.handlers = tuple(item for item in entry.handlers if item.listener != listener)
        log_event(LOGGER, "listener_removed", name, handlers=len(entry.handlers))

    def remove_all_listeners(self, name: str) -> None:
        entry = self.entry(name)
        entry.handlers = ()
        log_event(LOGGER, "listeners_cleared", name, handlers=0)

    def has_listeners(self, name: str) -> bool:
        return bool(self.entry(name).handlers)
