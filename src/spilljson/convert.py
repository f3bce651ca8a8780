"""
Type-directed decoding of one raw JSON value.

The destination type is chosen before any decoding happens, so validators
and hooks that belong to that type (pydantic models, ``datetime`` parsing,
nested ``@spillover`` records) all apply to the raw text directly.
"""

from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter

from spilljson._profile import ProfileContext
from spilljson.config import CONTEXT_KEY
from spilljson.config import DEFAULT_CONFIG
from spilljson.config import DecodeConfig
from spilljson.fields import PLANS_ATTR

# Recursive JSON value, for overflow maps that want a closed value type
type JsonPrimitive = str | int | float | bool | None
type JsonValue = JsonPrimitive | list[JsonValue] | dict[str, JsonValue]


class RawMessage(bytes):
    """
    An undecoded JSON value, kept exactly as it appeared in the input.

    Use it as an overflow value type to pass unknown keys through untouched,
    then decode individual entries later with ``decode_as``.
    """

    __slots__ = ()

    def decode_as(self, tp: Any, *, config: DecodeConfig | None = None) -> Any:
        return decode_value(tp, self, config=config)


@lru_cache(maxsize=256)
def _cached_adapter(tp: Any) -> TypeAdapter[Any]:
    return TypeAdapter(tp)


def adapter_for(tp: Any) -> TypeAdapter[Any]:
    """Returns a pydantic adapter for ``tp``, reusing one where possible."""
    try:
        hash(tp)
    except TypeError:
        # Annotated metadata is not always hashable
        return TypeAdapter(tp)
    return _cached_adapter(tp)


def decode_value(
    tp: Any, raw: str | bytes, *, config: DecodeConfig | None = None
) -> Any:
    """
    Decodes the raw text of a single JSON value as ``tp``.

    Raises ``pydantic.ValidationError`` unchanged when the value cannot be
    represented as ``tp``. ``config`` also reaches ``@spillover`` records
    nested inside containers, through pydantic's validation context.
    """
    config = config or DEFAULT_CONFIG
    with ProfileContext("decode_value", len(raw)):
        if tp is RawMessage:
            return RawMessage(
                raw.encode("utf-8") if isinstance(raw, str) else raw
            )
        if isinstance(tp, type) and PLANS_ATTR in tp.__dict__:
            # @spillover records read their own raw text
            from_json = tp.from_json  # type: ignore[attr-defined]
            return from_json(raw, config=config)
        return adapter_for(tp).validate_json(
            raw, strict=config.strict, context={CONTEXT_KEY: config}
        )
