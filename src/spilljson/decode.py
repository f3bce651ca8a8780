"""
Decoding a JSON object into a record while keeping unknown keys.

Known keys are decoded into their declared fields. Every other key is decoded
as the spillover mapping's value type and stored in that mapping, which is
created only when the first unknown key turns up.
"""

from typing import Any

from spilljson._profile import ProfileContext
from spilljson._stream import Delim
from spilljson._stream import Token
from spilljson._stream import TokenStream
from spilljson.config import DEFAULT_CONFIG
from spilljson.config import DecodeConfig
from spilljson.convert import decode_value
from spilljson.errors import ErrorKind
from spilljson.errors import FramingError
from spilljson.fields import DecodePlan
from spilljson.fields import plan_for

type RawInput = str | bytes | bytearray | memoryview


def unmarshal_with(
    target: Any,
    spillover_name: str,
    raw: RawInput,
    *,
    config: DecodeConfig | None = None,
) -> None:
    """
    Decodes the JSON object in ``raw`` into ``target``.

    ``target`` must be a mutable dataclass instance with a field named
    ``spillover_name`` annotated as a string-keyed mutable mapping. Problems
    with the target raise ``DeclarationError`` before any input is read.

    Key matching is exact; there is no case-insensitive fallback. On error,
    fields decoded before the failing key keep their new values.
    """
    plan = plan_for(target, spillover_name)
    text = _as_text(raw)
    config = config or DEFAULT_CONFIG

    with ProfileContext("unmarshal_with", len(text)):
        stream = TokenStream(text)
        _expect_delim(stream, "{", ErrorKind.NOT_GIVEN_STRUCT)

        while stream.more():
            key = stream.token()
            if not isinstance(key, str) or isinstance(key, Delim):
                raise FramingError(
                    ErrorKind.GIVEN_NON_STRING_KEY, f"got {key!r}"
                )
            _route(plan, target, key, stream.decode_raw(), config)

        _expect_delim(stream, "}", ErrorKind.MALFORMED_JSON)
        if not stream.at_end():
            raise FramingError(
                ErrorKind.MALFORMED_JSON, "trailing data after object"
            )


def _route(
    plan: DecodePlan,
    target: Any,
    key: str,
    raw_value: str,
    config: DecodeConfig,
) -> None:
    """Decodes one value into its field, or into the spillover mapping."""
    field = plan.fields.get(key)
    if field is not None:
        value = decode_value(field.annotation, raw_value, config=config)
        setattr(target, field.name, value)
        return

    spill = plan.spillover
    value = decode_value(spill.value_type, raw_value, config=config)

    container = getattr(target, spill.name, None)
    if container is None:
        container = spill.new_container()
        setattr(target, spill.name, container)
    container[spill.convert_key(key)] = value


def _expect_delim(stream: TokenStream, delim: str, kind: ErrorKind) -> None:
    token: Token = stream.token()
    if token != delim or not isinstance(token, Delim):
        raise FramingError(kind, f"expected {delim!r} got {str(token)!r}")


def _as_text(raw: RawInput) -> str:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, bytes | bytearray | memoryview):
        return bytes(raw).decode("utf-8")
    raise TypeError(
        f"the JSON object must be str or bytes, not {type(raw).__name__}"
    )
