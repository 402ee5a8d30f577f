"""Public event emitter: registration, subscription and publishing."""

from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Callable, List, Mapping

from . import dispatch
from .config import (
    EventDefinition,
    EventSettings,
    build_event_definition,
    build_event_definitions,
    build_event_settings,
    build_listener_options,
    trust_event_definition,
)
from .criteria import subscription_options
from .dispatch import UNSET, SettledResult
from .exceptions import InvalidListenerOptionsError, UnknownEventChannelsError
from .registry import EventRegistry, HandlerRecord


class Podium:
    """Event emitter with pre-registered events and filtered subscriptions.

    Events must be registered before they can be emitted or subscribed to so
    misspelled names fail at the call that used them.
    """

    def __init__(
        self,
        events: Any = None,
        options: Mapping[str, Any] | EventSettings | None = None,
    ) -> None:
        self._registry = EventRegistry()
        if events is not None:
            self.register_event(events, options)

    @staticmethod
    def validate(events: Any) -> List[EventDefinition]:
        """Validate event definitions for a later ``register_event(..., {"validate": False})``."""

        return build_event_definitions(events)

    def register_event(
        self,
        events: Any,
        options: Mapping[str, Any] | EventSettings | None = None,
    ) -> None:
        """Register one event definition or a list of them.

        A definition is an event name, a mapping of event options or an
        :class:`EventDefinition`. Registering an existing name fails unless
        either registration is ``shared``, in which case the first one wins.
        """

        settings = build_event_settings(options)
        build = build_event_definition if settings.validate_events else trust_event_definition
        items = events if isinstance(events, (list, tuple)) else [events]
        for item in items:
            self._registry.register(build(item))

    def emit(self, criteria: Any, data: Any = UNSET) -> None:
        """Emit an update to all matching listeners.

        ``data`` may be a zero-argument function, called once on the first
        match and shared by every listener of this update. When ``data`` is
        omitted listeners receive no data argument.
        """

        dispatch.emit(self._registry, criteria, data)

    async def gauge(self, criteria: Any, data: Any = UNSET) -> List[SettledResult]:
        """Emit an update and return every listener's settled result in order."""

        return await dispatch.gauge(self._registry, criteria, data)

    def on(self, criteria: Any, listener: Callable[..., Any], context: Any = None) -> "Podium":
        """Subscribe ``listener`` to the event described by ``criteria``."""

        options = subscription_options(criteria)
        options["listener"] = listener
        if context is not None:
            options["context"] = context

        validated = build_listener_options(options)
        entry = self._registry.entry(validated.name)
        allowed = entry.definition.channels
        if validated.channels and allowed:
            unknown = [channel for channel in validated.channels if channel not in allowed]
            if unknown:
                raise UnknownEventChannelsError(validated.name, unknown)

        self._registry.add_handler(HandlerRecord.from_options(validated))
        return self

    add_listener = on

    def once(
        self,
        criteria: Any,
        listener: Callable[..., Any] | None = None,
        context: Any = None,
    ) -> "Podium | Future[List[Any]]":
        """Subscribe for a single update.

        Without ``listener`` a future is returned, resolved with the argument
        list of the first matching update.
        """

        options = {**subscription_options(criteria), "count": 1}
        if listener is not None:
            return self.on(options, listener, context)

        future: Future[List[Any]] = Future()

        def resolve(*args: Any) -> None:
            if not future.cancelled():
                future.set_result(list(args))

        self.on(options, resolve)
        return future

    def few(self, criteria: Mapping[str, Any]) -> "Future[List[List[Any]]]":
        """Return a future resolved with the argument lists of ``count`` updates."""

        if not isinstance(criteria, Mapping) or criteria.get("count") is None:
            raise InvalidListenerOptionsError("Criteria must include a count", field="count")

        future: Future[List[List[Any]]] = Future()
        collected: List[List[Any]] = []
        count = criteria["count"]

        def collect(*args: Any) -> None:
            collected.append(list(args))
            if len(collected) == count and not future.cancelled():
                future.set_result(collected)

        self.on(criteria, collect)
        return future

    def remove_listener(self, name: str, listener: Callable[..., Any]) -> "Podium":
        """Remove every subscription of ``listener`` to ``name``."""

        if not callable(listener):
            raise InvalidListenerOptionsError("Listener must be a function", field="listener")
        self._registry.remove_listener(name, listener)
        return self

    off = remove_listener

    def remove_all_listeners(self, name: str) -> "Podium":
        self._registry.remove_all_listeners(name)
        return self

    def has_listeners(self, name: str) -> bool:
        return self._registry.has_listeners(name)
