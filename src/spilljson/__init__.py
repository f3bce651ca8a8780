"""
Selective-capture JSON decoding for dataclass records.

Keys that match a declared field are decoded into that field with its
declared type; every other key is kept in a designated "spillover" mapping
instead of being discarded, so records survive schema changes and can be
passed through without losing data.

    @spillover("rest")
    @dataclass
    class Event:
        kind: str = json_field("kind", default="")
        rest: dict[str, JsonValue] | None = json_field("-", default=None)

    event = Event.from_json(b'{"kind": "push", "actor": "octo"}')
    assert event.rest == {"actor": "octo"}
"""

from spilljson._profile import HotPathStats
from spilljson._profile import clear_hot_path_stats
from spilljson._profile import get_hot_path_stats
from spilljson._stream import Delim
from spilljson._stream import TokenStream
from spilljson.config import DecodeConfig
from spilljson.convert import JsonPrimitive
from spilljson.convert import JsonValue
from spilljson.convert import RawMessage
from spilljson.convert import decode_value
from spilljson.decode import unmarshal_with
from spilljson.encode import marshal_with
from spilljson.errors import DeclarationError
from spilljson.errors import ErrorKind
from spilljson.errors import FramingError
from spilljson.errors import SpilloverError
from spilljson.fields import DecodePlan
from spilljson.fields import FieldDescriptor
from spilljson.fields import SpilloverDescriptor
from spilljson.fields import json_field
from spilljson.fields import plan_for
from spilljson.record import spillover

__version__ = "0.1.0"

__all__ = [
    "DecodeConfig",
    "DecodePlan",
    "DeclarationError",
    "Delim",
    "ErrorKind",
    "FieldDescriptor",
    "FramingError",
    "HotPathStats",
    "JsonPrimitive",
    "JsonValue",
    "RawMessage",
    "SpilloverDescriptor",
    "SpilloverError",
    "TokenStream",
    "clear_hot_path_stats",
    "decode_value",
    "get_hot_path_stats",
    "json_field",
    "marshal_with",
    "plan_for",
    "spillover",
    "unmarshal_with",
]
