"""
Pytest configuration and shared records for spilljson tests.

Record types live at module level so their annotations resolve through
``typing.get_type_hints``.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from typing import Any
from typing import ClassVar
from typing import Final

import pytest

from spilljson import JsonValue
from spilljson import RawMessage
from spilljson import json_field
from spilljson import spillover


@spillover("rest")
@dataclass
class Generic:
    foo: str = json_field("foo", default="")
    bar: int = json_field("bar", default=0)
    rest: dict[str, Any] | None = json_field("-", default=None)


@dataclass
class Typed:
    foo: str = json_field("foo", default="")
    bar: int = json_field("bar", default=0)
    baz: datetime | None = json_field("baz", default=None)


@spillover("rest")
@dataclass
class Passthrough:
    foo: str = json_field("foo", default="")
    bar: int = json_field("bar", default=0)
    rest: dict[str, RawMessage] | None = json_field("-", default=None)


@spillover("rest")
@dataclass
class IntsOnly:
    foo: str = json_field("foo", default="")
    bar: int = json_field("bar", default=0)
    rest: dict[str, int] | None = json_field("-", default=None)


@spillover("rest")
@dataclass
class Untagged:
    foo: str = json_field("foo", default="")
    Direct: bool = False
    rest: dict[str, JsonValue] | None = json_field("-", default=None)


@dataclass
class NoSpill:
    foo: str = ""


@dataclass
class SpillIsString:
    rest: str = ""


@dataclass
class SpillIntKeys:
    rest: dict[int, Any] = field(default_factory=dict)


@dataclass
class SpillBareDict:
    rest: dict = field(default_factory=dict)  # type: ignore[type-arg]


@dataclass
class SpillReadOnly:
    rest: Mapping[str, Any] = field(default_factory=dict)


@dataclass
class SpillFinal:
    rest: Final[dict[str, Any]] = field(default_factory=dict)  # type: ignore[misc]


@dataclass
class SpillClassVar:
    rest: ClassVar[dict[str, Any]] = {}


@dataclass
class DuplicateWire:
    first: str = json_field("name", default="")
    second: str = json_field("name,omitempty", default="")
    rest: dict[str, Any] | None = None


@dataclass(frozen=True)
class Frozen:
    foo: str = ""
    rest: dict[str, Any] | None = None


@dataclass(frozen=True)
class DecodeCase:
    """
    Immutable container for one decode scenario.

    Holds the raw document and the state the target should end up in.
    """

    description: str
    raw: str
    foo: str = ""
    bar: int = 0
    rest: dict[str, Any] | None = None


RAW_A = """{
    "foo": "alpha", "bar": 42, "baz": "2009-11-10T23:00:00Z",
    "more": "wibble", "num": 3.14159
}
"""

RAW_B = '{ "foo": "alpha", "bar": 42 }'

RAW_C = """{
    "foo": "alpha", "bar": 42, "depth": { "a": 1, "b": 2 },
    "arr": [10,20,30], "scalar": "x"
}
"""

RAW_E = """{
    "foo": "alpha", "bar": 42, "Direct": true, "more": "wibble",
    "num": 3.14159
}"""


@pytest.fixture
def generic_cases() -> list[DecodeCase]:
    """Provides documents decoded into ``Generic`` with expected results."""
    return [
        DecodeCase("known keys only", RAW_B, "alpha", 42, None),
        DecodeCase(
            "one unknown timestamp",
            '{"foo":"alpha","bar":42,"baz":"2009-11-10T23:00:00Z"}',
            "alpha",
            42,
            {"baz": "2009-11-10T23:00:00Z"},
        ),
        DecodeCase(
            "unknown scalars",
            RAW_A,
            "alpha",
            42,
            {
                "baz": "2009-11-10T23:00:00Z",
                "more": "wibble",
                "num": 3.14159,
            },
        ),
        DecodeCase(
            "unknown containers",
            RAW_C,
            "alpha",
            42,
            {"depth": {"a": 1, "b": 2}, "arr": [10, 20, 30], "scalar": "x"},
        ),
        DecodeCase("empty object", "{}", "", 0, None),
        DecodeCase(
            "unknown key only",
            '{"other": null}',
            "",
            0,
            {"other": None},
        ),
    ]
