"""
Target introspection.

Validates a decode target and its record type, then builds the lookup from
wire key to declared field plus the description of the spillover mapping.
Nothing here reads input; every failure is a ``DeclarationError``.
"""

import dataclasses
import inspect
import types
from collections.abc import Mapping
from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Annotated
from typing import Any
from typing import ClassVar
from typing import Final
from typing import TypeAliasType
from typing import Union
from typing import get_args
from typing import get_origin
from typing import get_type_hints

from spilljson._profile import ProfileContext
from spilljson.errors import DeclarationError
from spilljson.errors import ErrorKind

TAG_KEY = "json"
EXCLUDE = "-"
PLANS_ATTR = "__spillover_plans__"

# Immutable values handed over by copy rather than by reference
_VALUE_TYPES = (int, float, complex, str, bytes, tuple, frozenset)


@dataclass(frozen=True)
class FieldDescriptor:
    """A declared field reachable by exactly one wire key."""

    name: str
    wire_name: str
    annotation: Any


@dataclass(frozen=True)
class SpilloverDescriptor:
    """
    The field that collects keys no declared field claims.

    ``container_type`` is instantiated with no arguments the first time an
    unmatched key shows up while the field is still absent.
    """

    name: str
    key_type: type[str]
    value_type: Any
    container_type: type[MutableMapping[str, Any]]

    def new_container(self) -> MutableMapping[str, Any]:
        return self.container_type()

    def convert_key(self, key: str) -> str:
        return key if self.key_type is str else self.key_type(key)


@dataclass(frozen=True)
class DecodePlan:
    """Everything a decode call needs to know about the record type."""

    record_type: type
    fields: Mapping[str, FieldDescriptor]
    spillover: SpilloverDescriptor


def json_field(wire_name: str, **kwargs: Any) -> Any:
    """
    Declares a dataclass field with an explicit wire key.

    ``wire_name`` uses the usual tag layout: the first comma-separated
    segment is the key and ``"-"`` keeps the field out of key matching.
    Remaining keyword arguments go to ``dataclasses.field``.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG_KEY] = wire_name
    return dataclasses.field(metadata=metadata, **kwargs)


def wire_name_of(field: dataclasses.Field[Any]) -> str | None:
    """Returns the wire key for ``field``, or None if it is excluded."""
    tag = field.metadata.get(TAG_KEY)
    if tag is None:
        return field.name

    name = tag.split(",", 1)[0]
    if name == EXCLUDE:
        return None
    return name or field.name


def check_target(target: Any) -> type:
    """Ensures ``target`` is a mutable record instance; returns its class."""
    if target is None or isinstance(target, (type, *_VALUE_TYPES)):
        raise DeclarationError(
            ErrorKind.NOT_GIVEN_MUTABLE, f"got {_describe(target)}"
        )

    cls = type(target)
    if not dataclasses.is_dataclass(cls):
        raise DeclarationError(
            ErrorKind.NOT_STRUCT_HOLDER, f"got {_describe(target)}"
        )

    params = getattr(cls, "__dataclass_params__", None)
    if params is not None and params.frozen:
        raise DeclarationError(
            ErrorKind.NOT_GIVEN_MUTABLE, f"{cls.__qualname__} is frozen"
        )
    return cls


def plan_for(target: Any, spillover_name: str) -> DecodePlan:
    """
    Validates ``target`` and returns the decode plan for its record type.

    Records registered with ``@spillover`` keep their plans on the class, so
    introspection runs once per record type and overflow field.
    """
    with ProfileContext("plan_for"):
        return cached_plan(check_target(target), spillover_name)


def cached_plan(cls: type, spillover_name: str) -> DecodePlan:
    """Returns the registered plan for ``cls``, building it if needed."""
    plans = cls.__dict__.get(PLANS_ATTR)
    if plans is not None and spillover_name in plans:
        return plans[spillover_name]  # type: ignore[no-any-return]

    plan = build_plan(cls, spillover_name)
    if plans is not None:
        plans[spillover_name] = plan
    return plan


def build_plan(cls: type, spillover_name: str) -> DecodePlan:
    """Introspects a dataclass type without needing an instance of it."""
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise DeclarationError(
            ErrorKind.NOT_STRUCT_HOLDER, f"got {_describe(cls)}"
        )

    hints = get_type_hints(cls, include_extras=True)
    spillover = _resolve_spillover(cls, hints, spillover_name)
    fields = _build_fields(cls, hints)
    return DecodePlan(cls, types.MappingProxyType(fields), spillover)


def _resolve_spillover(
    cls: type, hints: dict[str, Any], name: str
) -> SpilloverDescriptor:
    """Runs the spillover checks in order: exists, map, string key, settable."""
    if name not in hints:
        raise DeclarationError(
            ErrorKind.MISSING_SPILLOVER_FIELD,
            f"{cls.__qualname__} has no field {name!r}",
        )

    annotation, read_only = _unwrap(hints[name])
    origin = get_origin(annotation) or annotation
    if not (isinstance(origin, type) and issubclass(origin, Mapping)):
        raise DeclarationError(
            ErrorKind.SPILL_NOT_RIGHT_MAP, f"{name} is {annotation!r}"
        )

    args = get_args(annotation)
    key_type, value_type = args if len(args) == 2 else (Any, Any)
    if not (isinstance(key_type, type) and issubclass(key_type, str)):
        raise DeclarationError(
            ErrorKind.SPILL_NOT_RIGHT_MAP,
            f"{name} has key type {key_type!r}",
        )

    if read_only or not issubclass(origin, MutableMapping):
        raise DeclarationError(
            ErrorKind.UNSETABLE_SPILLOVER_FIELD, f"{name} is {hints[name]!r}"
        )

    container_type = dict if inspect.isabstract(origin) else origin
    return SpilloverDescriptor(name, key_type, value_type, container_type)


def _build_fields(
    cls: type, hints: dict[str, Any]
) -> dict[str, FieldDescriptor]:
    table: dict[str, FieldDescriptor] = {}
    for field in dataclasses.fields(cls):
        wire_name = wire_name_of(field)
        if wire_name is None:
            continue
        if wire_name in table:
            raise DeclarationError(
                ErrorKind.DUPLICATE_WIRE_NAME,
                f"{wire_name!r} claimed by {table[wire_name].name!r} "
                f"and {field.name!r}",
            )
        annotation, _ = _unwrap(hints.get(field.name, field.type), True)
        table[wire_name] = FieldDescriptor(field.name, wire_name, annotation)
    return table


def _unwrap(annotation: Any, keep_optional: bool = False) -> tuple[Any, bool]:
    """
    Strips qualifiers off an annotation.

    Returns the bare type and whether a ``ClassVar`` or ``Final`` qualifier
    was found. ``Optional`` is stripped too unless ``keep_optional`` is set,
    in which case only the qualifiers and type aliases are removed.
    """
    read_only = False
    while True:
        if annotation is ClassVar or annotation is Final:
            return Any, True

        origin = get_origin(annotation)
        if origin is ClassVar or origin is Final:
            read_only = True
            annotation = get_args(annotation)[0]
        elif isinstance(annotation, TypeAliasType):
            annotation = annotation.__value__
        elif keep_optional:
            return annotation, read_only
        elif origin is Annotated:
            annotation = get_args(annotation)[0]
        elif origin is Union or origin is types.UnionType:
            arms = [a for a in get_args(annotation) if a is not type(None)]
            if len(arms) != 1:
                return annotation, read_only
            annotation = arms[0]
        else:
            return annotation, read_only


def _describe(value: Any) -> str:
    if isinstance(value, type):
        return f"class {value.__qualname__}"
    return type(value).__qualname__
