"""Time-to-live computation for session records.

Precedence
----------
1. A callable ``ttl`` option is called with the session and its result used
   as is.
2. ``cookie.expires`` (ISO-8601 string, ``datetime`` or epoch number) gives
   ``ceil((expires - now) / 1s)``, which is negative for past expiries.
3. ``cookie.maxAge`` in milliseconds gives ``maxAge / 1000`` truncated.
4. Otherwise the fixed ``ttl`` option, 86400 seconds unless configured.

A fixed ``ttl`` must be at least one second.  A result ``<= 0`` means the
record must be deleted rather than stored; that decision belongs to the
caller.

Classes
-------
- TTLPolicy  — computes the lifetime in seconds of one session record
"""
from __future__ import annotations

import math
import time
from datetime import datetime, timezone
from typing import Any, Callable, Union

from pydantic import TypeAdapter, ValidationError

from redis_session_store.errors import ConfigurationError, SerializationError

DEFAULT_TTL_SECONDS = 86400  # one day

TTLSetting = Union[int, float, Callable[[dict[str, Any]], Union[int, float]]]

_DATETIME_ADAPTER: TypeAdapter[datetime] = TypeAdapter(datetime)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class TTLPolicy:
    """Compute how many seconds a session record should live.

    The ``ttl`` setting is validated when it is used, not when the policy
    is built, so a bad value surfaces from the ``set`` or ``touch`` that
    needed it.

    Parameters
    ----------
    ttl:
        Fixed number of seconds, or a callable receiving the session and
        returning seconds.
    clock:
        Returns the current epoch time in seconds.  Defaults to
        ``time.time``; tests inject a fixed clock.
    """

    def __init__(
        self,
        ttl: TTLSetting = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttl = ttl
        self._clock = clock

    def compute(self, session: dict[str, Any]) -> int:
        """Return the TTL in seconds for ``session``.

        Raises
        ------
        ConfigurationError
            If the configured ``ttl`` is neither a number nor a callable, or
            a callable returned something other than a number.
        SerializationError
            If ``cookie.expires`` is present but cannot be read as a date.
        """
        if callable(self._ttl):
            result = self._ttl(session)
            if not _is_number(result):
                raise ConfigurationError(
                    f"ttl function must return a number, got {type(result).__name__}"
                )
            return int(result)

        if not _is_number(self._ttl):
            raise ConfigurationError(
                f"ttl must be a number or function, got {type(self._ttl).__name__}"
            )
        if self._ttl < 1:
            raise ConfigurationError(f"ttl must be at least 1 second, got {self._ttl!r}")

        cookie = session.get("cookie") if isinstance(session, dict) else None
        if isinstance(cookie, dict):
            expires = cookie.get("expires")
            if expires:
                remaining_ms = self._epoch_ms(expires) - self._clock() * 1000
                return math.ceil(remaining_ms / 1000)
            max_age = cookie.get("maxAge")
            if _is_number(max_age):
                return int(max_age / 1000)

        return int(self._ttl)

    @staticmethod
    def _epoch_ms(expires: object) -> float:
        try:
            moment = _DATETIME_ADAPTER.validate_python(expires)
        except ValidationError as exc:
            raise SerializationError(
                "parse", reason=f"cookie.expires {expires!r} is not a date"
            ) from exc
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.timestamp() * 1000

    def __repr__(self) -> str:
        return f"TTLPolicy(ttl={self._ttl!r})"


__all__ = ["DEFAULT_TTL_SECONDS", "TTLPolicy", "TTLSetting"]
