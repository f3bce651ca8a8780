"""
One-line integration for record types.

``@spillover("rest")`` on a dataclass gives it ``unmarshal_json``,
``from_json`` and ``marshal_json``, and makes it decode through spilljson
wherever pydantic meets it as a nested value.
"""

import dataclasses
import logging
from collections.abc import Callable
from typing import Any

import pydantic_core
from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from spilljson.config import CONTEXT_KEY
from spilljson.config import DecodeConfig
from spilljson.decode import RawInput
from spilljson.decode import unmarshal_with
from spilljson.encode import marshal_with
from spilljson.errors import DeclarationError
from spilljson.errors import ErrorKind
from spilljson.fields import PLANS_ATTR

logger = logging.getLogger(__name__)


def spillover[T: type](field_name: str) -> Callable[[T], T]:
    """
    Registers a dataclass whose unknown JSON keys land in ``field_name``.

    The field is validated on first use and the resulting plan is kept on
    the class. ``from_json`` and nested decoding build instances with no
    arguments, so every field of such a record needs a default.
    """
    if not isinstance(field_name, str):
        raise TypeError("field_name must be a string")

    def register(cls: T) -> T:
        if not dataclasses.is_dataclass(cls):
            raise DeclarationError(
                ErrorKind.NOT_STRUCT_HOLDER, f"got {cls!r}"
            )

        def unmarshal_json(
            self: Any, raw: RawInput, *, config: DecodeConfig | None = None
        ) -> None:
            unmarshal_with(self, field_name, raw, config=config)

        def from_json(
            klass: Any, raw: RawInput, *, config: DecodeConfig | None = None
        ) -> Any:
            target = klass()
            unmarshal_with(target, field_name, raw, config=config)
            return target

        def marshal_json(self: Any) -> bytes:
            return marshal_with(self, field_name)

        def get_core_schema(
            klass: Any, source: Any, handler: GetCoreSchemaHandler
        ) -> core_schema.CoreSchema:
            # Only reached for records inside containers or unions; a record
            # that is itself the destination type is decoded from raw text.
            def validate(value: Any, info: core_schema.ValidationInfo) -> Any:
                if isinstance(value, klass):
                    return value
                context = info.context
                config = (
                    context.get(CONTEXT_KEY)
                    if isinstance(context, dict)
                    else None
                )
                return from_json(
                    klass, pydantic_core.to_json(value), config=config
                )

            def serialize(value: Any) -> Any:
                return pydantic_core.from_json(marshal_with(value, field_name))

            return core_schema.with_info_plain_validator_function(
                validate,
                serialization=core_schema.plain_serializer_function_ser_schema(
                    serialize
                ),
            )

        setattr(cls, PLANS_ATTR, {})
        cls.unmarshal_json = unmarshal_json  # type: ignore[attr-defined]
        cls.from_json = classmethod(from_json)  # type: ignore[attr-defined]
        cls.marshal_json = marshal_json  # type: ignore[attr-defined]
        cls.__get_pydantic_core_schema__ = classmethod(get_core_schema)  # type: ignore[attr-defined]

        logger.debug(
            "registered %s with spillover field %r",
            cls.__qualname__,
            field_name,
        )
        return cls

    return register
