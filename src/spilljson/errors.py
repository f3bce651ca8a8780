"""
Errors raised by spilljson itself.

Every error carries an ``ErrorKind`` discriminator and renders with the
``spilljson:`` prefix. Errors from the underlying decoders
(``json.JSONDecodeError``, ``pydantic.ValidationError``) are never wrapped.
"""

from enum import Enum

PREFIX = "spilljson"


class ErrorKind(Enum):
    """Stable discriminator for every error this package raises."""

    NOT_GIVEN_MUTABLE = "not given something which we can assign to"
    NOT_STRUCT_HOLDER = "holder is not a struct"
    MISSING_SPILLOVER_FIELD = "target struct missing specified spillover field"
    SPILL_NOT_RIGHT_MAP = "target's spillover field is not a string-keyed map"
    UNSETABLE_SPILLOVER_FIELD = (
        "target struct's spillover field not assignable"
    )
    DUPLICATE_WIRE_NAME = "two fields share one wire name"
    NOT_GIVEN_STRUCT = "not given a struct in the raw stream"
    GIVEN_NON_STRING_KEY = "given object with non-string key"
    MALFORMED_JSON = "given malformed JSON"


DECLARATION_KINDS = frozenset(
    {
        ErrorKind.NOT_GIVEN_MUTABLE,
        ErrorKind.NOT_STRUCT_HOLDER,
        ErrorKind.MISSING_SPILLOVER_FIELD,
        ErrorKind.SPILL_NOT_RIGHT_MAP,
        ErrorKind.UNSETABLE_SPILLOVER_FIELD,
        ErrorKind.DUPLICATE_WIRE_NAME,
    }
)


class SpilloverError(ValueError):
    """
    Base class for failures detected by spilljson rather than by a decoder.

    ``kind`` identifies the failure; ``detail`` holds optional diagnostics
    such as the token that was found instead of the expected one.
    """

    def __init__(self, kind: ErrorKind, detail: str = "") -> None:
        if not isinstance(kind, ErrorKind):
            raise TypeError("kind must be an ErrorKind")

        self.kind = kind
        self.detail = detail

        msg = f"{PREFIX}: {kind.value}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class DeclarationError(SpilloverError, TypeError):
    """The target or its record type cannot be decoded into."""

    def __init__(self, kind: ErrorKind, detail: str = "") -> None:
        if kind not in DECLARATION_KINDS:
            raise ValueError(f"{kind.name} is not a declaration error")
        super().__init__(kind, detail)


class FramingError(SpilloverError):
    """The raw input is not framed as a single JSON object."""

    def __init__(self, kind: ErrorKind, detail: str = "") -> None:
        if kind in DECLARATION_KINDS:
            raise ValueError(f"{kind.name} is a declaration error")
        super().__init__(kind, detail)
