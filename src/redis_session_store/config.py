"""Store configuration.

Classes
-------
- StoreOptions  — validated option set for ``RedisStore``
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from redis_session_store.errors import ConfigurationError
from redis_session_store.session.keys import DEFAULT_PREFIX
from redis_session_store.session.serializer import JSONSerializer, Serializer
from redis_session_store.session.ttl import DEFAULT_TTL_SECONDS

DEFAULT_SCAN_COUNT = 100
DEFAULT_TOMBSTONE_TTL = 300


class StoreOptions(BaseModel):
    """Options recognised by ``RedisStore``.

    Parameters
    ----------
    prefix:
        Key namespace.  ``""`` disables namespacing.
    ttl:
        Fixed lifetime in seconds, or a callable ``ttl(session) -> seconds``.
        Its type is checked when a ``set`` or ``touch`` first needs it.
    disable_ttl:
        Store records without expiry; ``touch`` becomes a no-op.
    disable_touch:
        ``touch`` becomes a no-op while ``set`` still applies a TTL.
    scan_count:
        ``COUNT`` hint passed to each SCAN page.
    serializer:
        Object with ``stringify``/``parse``.  Defaults to ``JSONSerializer``.
    tombstones:
        ``destroy`` overwrites the key with a short-lived tombstone instead
        of deleting it, and ``set`` refuses to write over a tombstone.
    tombstone_ttl:
        Lifetime in seconds of a tombstone.
    merge:
        ``set`` reads the stored record first and deep-merges the incoming
        session onto it when their ``lastModified`` stamps differ.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True, extra="forbid")

    prefix: str = DEFAULT_PREFIX
    ttl: Any = DEFAULT_TTL_SECONDS
    disable_ttl: bool = False
    disable_touch: bool = False
    scan_count: int = Field(default=DEFAULT_SCAN_COUNT, ge=1)
    serializer: Any = Field(default_factory=JSONSerializer)
    tombstones: bool = False
    tombstone_ttl: int = Field(default=DEFAULT_TOMBSTONE_TTL, ge=1)
    merge: bool = False

    @field_validator("serializer")
    @classmethod
    def _check_serializer(cls, value: Any) -> Any:
        if value is None:
            return JSONSerializer()
        if not isinstance(value, Serializer):
            raise ValueError("serializer must provide stringify() and parse()")
        return value


def build_options(options: StoreOptions | None = None, **overrides: Any) -> StoreOptions:
    """Return ``options`` with ``overrides`` applied, validated.

    Raises
    ------
    ConfigurationError
        If an override has an invalid value.
    """
    base: dict[str, Any] = {}
    if options is not None:
        base = {name: getattr(options, name) for name in StoreOptions.model_fields}
    base.update(overrides)
    try:
        return StoreOptions(**base)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


__all__ = ["DEFAULT_SCAN_COUNT", "DEFAULT_TOMBSTONE_TTL", "StoreOptions", "build_options"]
