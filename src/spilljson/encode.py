"""
Re-encoding a record together with the keys it spilled.

Declared fields are written under their wire keys, then every spillover
entry whose key no declared field claims. ``RawMessage`` values are copied
back byte-for-byte.
"""

from typing import Any

import pydantic_core

from spilljson.convert import RawMessage
from spilljson.convert import adapter_for
from spilljson.errors import DeclarationError
from spilljson.errors import ErrorKind
from spilljson.fields import cached_plan


def marshal_with(target: Any, spillover_name: str) -> bytes:
    """Encodes ``target`` as a JSON object, spillover entries included."""
    cls = type(target)
    if isinstance(target, type):
        raise DeclarationError(
            ErrorKind.NOT_STRUCT_HOLDER, f"got class {target.__qualname__}"
        )
    plan = cached_plan(cls, spillover_name)
    spill = plan.spillover

    members: list[bytes] = []
    for wire_name, field in plan.fields.items():
        if field.name == spill.name:
            continue
        value = getattr(target, field.name)
        members.append(_member(wire_name, field.annotation, value))

    overflow = getattr(target, spill.name, None) or {}
    for key, value in overflow.items():
        if key in plan.fields:
            continue
        members.append(_member(key, spill.value_type, value))

    return b"{" + b",".join(members) + b"}"


def _member(key: str, annotation: Any, value: Any) -> bytes:
    if isinstance(value, RawMessage):
        encoded = bytes(value)
    elif annotation is RawMessage:
        encoded = pydantic_core.to_json(value)
    else:
        encoded = adapter_for(annotation).dump_json(value)
    return pydantic_core.to_json(str(key)) + b":" + encoded
