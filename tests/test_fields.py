"""
Target introspection tests.

Validates wire key resolution from tags, the shape of the resolved
spillover field, and the profiling helpers around introspection.
"""

from collections import OrderedDict
from collections.abc import MutableMapping
from dataclasses import dataclass
from dataclasses import fields
from typing import Annotated
from typing import Any

import pytest

import spilljson
from spilljson import JsonValue
from spilljson import json_field
from spilljson.fields import build_plan
from spilljson.fields import wire_name_of


class Key(str):
    pass


type Extras = dict[str, JsonValue]


@dataclass
class Tagged:
    plain: int = 0
    named: int = json_field("wire", default=0)
    options: int = json_field("opt,omitempty", default=0)
    empty_name: int = json_field(",omitempty", default=0)
    hidden: int = json_field("-", default=0)
    hidden_opts: int = json_field("-,omitempty", default=0)
    noted: int = json_field("n", default=0, metadata={"doc": "kept"})
    rest: dict[str, Any] | None = json_field("-", default=None)


@dataclass
class AbstractSpill:
    rest: MutableMapping[Key, int] | None = None


@dataclass
class OrderedSpill:
    rest: Annotated[OrderedDict[str, str], "ordered"] = json_field(
        "-", default_factory=OrderedDict
    )


@dataclass
class AliasSpill:
    rest: Extras | None = None


def test_wire_names_from_tags() -> None:
    """
    Validates the first tag segment names the key and "-" excludes.
    """
    names = {f.name: wire_name_of(f) for f in fields(Tagged)}

    assert names == {
        "plain": "plain",
        "named": "wire",
        "options": "opt",
        "empty_name": "empty_name",
        "hidden": None,
        "hidden_opts": None,
        "noted": "n",
        "rest": None,
    }


def test_json_field_keeps_metadata() -> None:
    """
    Validates extra metadata survives alongside the tag.
    """
    noted = next(f for f in fields(Tagged) if f.name == "noted")
    assert dict(noted.metadata) == {"doc": "kept", "json": "n"}


def test_field_table_in_declaration_order() -> None:
    """
    Validates the lookup covers matchable fields in declaration order.
    """
    plan = build_plan(Tagged, "rest")

    assert list(plan.fields) == ["plain", "wire", "opt", "empty_name", "n"]
    assert plan.fields["wire"].name == "named"
    assert plan.fields["wire"].annotation is int
    with pytest.raises(TypeError):
        plan.fields["extra"] = plan.fields["wire"]  # type: ignore[index]


def test_excluded_field_spills() -> None:
    """
    Validates a key matching an excluded field name goes to spillover.
    """
    target = Tagged()
    spilljson.unmarshal_with(
        target, "rest", '{"hidden": 1, "wire": 2, "named": 3, "opt": 4}'
    )

    assert target.hidden == 0
    assert target.named == 2
    assert target.options == 4
    assert target.rest == {"hidden": 1, "named": 3}


def test_abstract_mapping_uses_dict_and_key_type() -> None:
    """
    Validates abstract mappings become dicts keyed by the declared type.
    """
    plan = build_plan(AbstractSpill, "rest")
    assert plan.spillover.container_type is dict
    assert plan.spillover.key_type is Key

    target = AbstractSpill()
    spilljson.unmarshal_with(target, "rest", '{"a": 1}')

    assert type(target.rest) is dict
    assert target.rest is not None
    assert all(type(k) is Key for k in target.rest)


def test_concrete_mapping_type_kept() -> None:
    """
    Validates a concrete mapping class is kept and Annotated is looked through.
    """
    target = OrderedSpill()
    spilljson.unmarshal_with(target, "rest", '{"b": "2", "a": "1"}')

    assert isinstance(target.rest, OrderedDict)
    assert list(target.rest) == ["b", "a"]


def test_type_alias_spillover() -> None:
    """
    Validates a spillover annotated through a type alias resolves.
    """
    plan = build_plan(AliasSpill, "rest")
    assert plan.spillover.value_type is JsonValue

    target = AliasSpill()
    spilljson.unmarshal_with(target, "rest", '{"a": [1, "x", null]}')
    assert target.rest == {"a": [1, "x", None]}


def test_build_plan_requires_dataclass() -> None:
    """
    Validates introspection of a non-record class fails as a declaration.
    """
    with pytest.raises(spilljson.DeclarationError) as exc_info:
        build_plan(dict, "rest")
    assert exc_info.value.kind is spilljson.ErrorKind.NOT_STRUCT_HOLDER


def test_profiling_disabled_by_default() -> None:
    """
    Validates profiling stays inert without SPILLJSON_PROFILE.
    """
    spilljson.clear_hot_path_stats()
    spilljson.unmarshal_with(Tagged(), "rest", "{}")
    assert spilljson.get_hot_path_stats() == {}


def test_hot_path_stats_accumulate() -> None:
    """
    Validates HotPathStats sums calls, time and characters.
    """
    stats = spilljson.HotPathStats("decode_value")
    stats.record_call(10, 3)
    stats.record_call(5, failed=True)

    assert (stats.call_count, stats.total_time_ns, stats.chars_processed) == (
        2,
        15,
        3,
    )
    assert stats.failures == 1
    assert stats.mean_time_ns == 7.5
    assert spilljson.HotPathStats("idle").mean_time_ns == 0.0
