"""Option models validating event definitions and subscriptions."""
from __future__ import annotations

from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from .exceptions import InvalidEventOptionsError, InvalidListenerOptionsError


def _as_tuple(value: Any) -> Any:
    if isinstance(value, str):
        return (value,)
    return value


def _unique_strings(value: Optional[Tuple[str, ...]], label: str) -> Optional[Tuple[str, ...]]:
    if value is None:
        return value
    if not value:
        raise ValueError(f"{label} must not be empty")
    if len(set(value)) != len(value):
        raise ValueError(f"{label} must be unique")
    return value


class EventDefinition(BaseModel):
    """Registration flags of a single event."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: StrictStr = Field(..., min_length=1, description="Unique event name")
    channels: Optional[Tuple[StrictStr, ...]] = Field(
        default=None,
        description="Allowed channels. Unset means updates are not restricted.",
    )
    clone: StrictBool = Field(default=False, description="Deep clone data before delivery")
    spread: StrictBool = Field(default=False, description="Deliver array data as positional arguments")
    tags: StrictBool = Field(default=False, description="Append the tags map to the listener arguments")
    shared: StrictBool = Field(
        default=False,
        description="Ignore later registrations of the same name instead of failing.",
    )

    @field_validator("channels", mode="before")
    @classmethod
    def coerce_channels(cls, value: Any) -> Any:
        return _as_tuple(value)

    @field_validator("channels")
    @classmethod
    def validate_channels(cls, value: Optional[Tuple[str, ...]]) -> Optional[Tuple[str, ...]]:
        return _unique_strings(value, "channels")


class TagFilter(BaseModel):
    """Tags a listener requires on an update."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    tags: Tuple[StrictStr, ...]
    all: StrictBool = Field(default=False, description="Require every tag instead of any")

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, value: Any) -> Any:
        return _as_tuple(value)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        return _unique_strings(value, "filter tags")


class ListenerOptions(BaseModel):
    """Subscription criteria merged with the listener and its context."""

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    name: StrictStr = Field(..., min_length=1)
    listener: Callable[..., Any]
    context: Any = None
    count: Optional[StrictInt] = Field(default=None, ge=1, description="Invocations before removal")
    channels: Optional[Tuple[StrictStr, ...]] = None
    filter: Optional[TagFilter] = None
    clone: Optional[StrictBool] = None
    spread: Optional[StrictBool] = None
    tags: Optional[StrictBool] = None

    @field_validator("channels", mode="before")
    @classmethod
    def coerce_channels(cls, value: Any) -> Any:
        return _as_tuple(value)

    @field_validator("channels")
    @classmethod
    def validate_channels(cls, value: Optional[Tuple[str, ...]]) -> Optional[Tuple[str, ...]]:
        return _unique_strings(value, "channels")

    @field_validator("filter", mode="before")
    @classmethod
    def coerce_filter(cls, value: Any) -> Any:
        if isinstance(value, (str, list, tuple)):
            return {"tags": value}
        return value


class EventSettings(BaseModel):
    """Options accepted by ``register_event``."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    validate_events: StrictBool = Field(
        default=True,
        alias="validate",
        description="Validate definitions. Disable only for output of Podium.validate().",
    )


def _describe(exc: ValidationError) -> Tuple[str, str | None]:
    errors = exc.errors()
    parts: List[str] = []
    for error in errors:
        loc = ".".join(str(part) for part in error["loc"])
        parts.append(f"{loc}: {error['msg']}" if loc else error["msg"])
    first_loc = errors[0]["loc"] if errors else ()
    field = str(first_loc[0]) if first_loc else None
    return "; ".join(parts), field


def build_event_definition(raw: Any) -> EventDefinition:
    """Validate ``raw`` (a name, mapping or definition) into an :class:`EventDefinition`."""

    if isinstance(raw, EventDefinition):
        return raw
    if isinstance(raw, str):
        raw = {"name": raw}
    if not isinstance(raw, Mapping):
        raise InvalidEventOptionsError(f"Invalid event options: {raw!r}")
    try:
        return EventDefinition.model_validate(dict(raw))
    except ValidationError as exc:
        message, field = _describe(exc)
        raise InvalidEventOptionsError(f"Invalid event options: {message}", field=field) from exc


def trust_event_definition(raw: Any) -> EventDefinition:
    """Build an :class:`EventDefinition` without validating ``raw``."""

    if isinstance(raw, EventDefinition):
        return raw
    if isinstance(raw, str):
        return EventDefinition.model_construct(name=raw)
    return EventDefinition.model_construct(**dict(raw))


def build_event_definitions(events: Any) -> List[EventDefinition]:
    """Validate one definition or a list of them."""

    items: Iterable[Any] = events if isinstance(events, (list, tuple)) else [events]
    return [build_event_definition(item) for item in items]


def build_listener_options(raw: Mapping[str, Any]) -> ListenerOptions:
    """Validate merged subscription options into :class:`ListenerOptions`."""

    try:
        return ListenerOptions.model_validate(dict(raw))
    except ValidationError as exc:
        message, field = _describe(exc)
        raise InvalidListenerOptionsError(f"Invalid event listener options: {message}", field=field) from exc


def build_event_settings(raw: Mapping[str, Any] | EventSettings | None) -> EventSettings:
    if raw is None:
        return EventSettings()
    if isinstance(raw, EventSettings):
        return raw
    try:
        return EventSettings.model_validate(dict(raw))
    except ValidationError as exc:
        message, field = _describe(exc)
        raise InvalidEventOptionsError(f"Invalid event settings: {message}", field=field) from exc


__all__ = [
    "EventDefinition",
    "EventSettings",
    "ListenerOptions",
    "TagFilter",
    "build_event_definition",
    "build_event_definitions",
    "build_event_settings",
    "build_listener_options",
    "trust_event_definition",
]
