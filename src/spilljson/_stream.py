"""
Sequential token reader over a JSON document.

Only structural framing lives here: delimiters, commas and colons are tracked
by a small state machine. Strings, numbers, literals and whole nested values
are scanned by the standard library ``json`` decoder, and its
``JSONDecodeError`` is what callers see for any lexical problem. Raw values
are only measured, never converted, and ``NaN``/``Infinity`` are refused.
"""

import json
from enum import Enum
from typing import Any
from json.decoder import JSONDecoder
from json.decoder import scanstring

type Position = int


class Delim(str):
    """One of the structural delimiters ``{ } [ ]``."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Delim({str.__repr__(self)})"


type Token = Delim | str | int | float | bool | None


class _NonStandardConstant(Exception):
    """Raised from the scanner on NaN, Infinity or -Infinity."""


def _reject_constant(name: str) -> Any:
    raise _NonStandardConstant(name)


_DECODER = JSONDecoder(parse_constant=_reject_constant)
# Only measures where a value ends; numbers stay as their source text
_SCANNER = JSONDecoder(
    parse_int=str, parse_float=str, parse_constant=_reject_constant
)


class StreamState(Enum):
    """What the reader will accept next."""

    VALUE = "value"
    OBJECT_START = "object_start"
    OBJECT_KEY = "object_key"
    OBJECT_COLON = "object_colon"
    OBJECT_VALUE = "object_value"
    OBJECT_COMMA = "object_comma"
    ARRAY_START = "array_start"
    ARRAY_VALUE = "array_value"
    ARRAY_COMMA = "array_comma"
    END = "end"


_VALUE_STATES = frozenset(
    {
        StreamState.VALUE,
        StreamState.OBJECT_VALUE,
        StreamState.ARRAY_START,
        StreamState.ARRAY_VALUE,
    }
)
_KEY_STATES = frozenset({StreamState.OBJECT_START, StreamState.OBJECT_KEY})


class TokenStream:
    """
    Reads one JSON document token by token.

    ``token()`` returns the next delimiter, object key or scalar, silently
    consuming the commas and colons between them. ``decode_raw()`` returns the
    source text of the next complete value, however deeply nested, so the
    caller can decode it into a type of its choosing.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos: Position = 0
        self.length = len(text)
        self.state = StreamState.VALUE
        self._stack: list[str] = []

    def peek(self) -> str:
        """Returns current character, or an empty string at end of input."""
        return self.text[self.pos] if self.pos < self.length else ""

    def skip_whitespace(self) -> None:
        """Skips whitespace characters according to JSON spec."""
        while self.pos < self.length and self.text[self.pos] in " \t\n\r":
            self.pos += 1

    def at_end(self) -> bool:
        """Reports whether only whitespace remains."""
        self.skip_whitespace()
        return self.pos >= self.length

    def more(self) -> bool:
        """Reports whether the current array or object has another element."""
        self.skip_whitespace()
        char = self.peek()
        return bool(char) and char not in "]}"

    def token(self) -> Token:
        """Returns the next token, validating the document's structure."""
        while True:
            self.skip_whitespace()
            char = self.peek()
            if not char:
                raise self._end_of_input()

            if char in "{[":
                self._require_value(char)
                self.pos += 1
                self._stack.append(char)
                self.state = (
                    StreamState.OBJECT_START
                    if char == "{"
                    else StreamState.ARRAY_START
                )
                return Delim(char)

            if char == "}":
                if self.state not in (
                    StreamState.OBJECT_START,
                    StreamState.OBJECT_COMMA,
                ):
                    raise self._state_error(char)
                return self._close(char)

            if char == "]":
                if self.state not in (
                    StreamState.ARRAY_START,
                    StreamState.ARRAY_COMMA,
                ):
                    raise self._state_error(char)
                return self._close(char)

            if char == ":":
                if self.state is not StreamState.OBJECT_COLON:
                    raise self._state_error(char)
                self.pos += 1
                self.state = StreamState.OBJECT_VALUE
                continue

            if char == ",":
                if self.state is StreamState.ARRAY_COMMA:
                    self.state = StreamState.ARRAY_VALUE
                elif self.state is StreamState.OBJECT_COMMA:
                    self.state = StreamState.OBJECT_KEY
                else:
                    raise self._state_error(char)
                self.pos += 1
                continue

            if char == '"' and self.state in _KEY_STATES:
                key, self.pos = scanstring(self.text, self.pos + 1)
                self.state = StreamState.OBJECT_COLON
                return key

            self._require_value(char)
            value = self._scan(_DECODER)
            self._end_value()
            return value  # type: ignore[no-any-return]

    def decode_raw(self) -> str:
        """
        Consumes the next complete value and returns its source text.

        A pending colon (after an object key) or comma (between array
        elements) is consumed first.
        """
        self.skip_whitespace()
        if self.state is StreamState.OBJECT_COLON:
            self._expect(":")
            self.state = StreamState.OBJECT_VALUE
        elif self.state is StreamState.ARRAY_COMMA:
            self._expect(",")
            self.state = StreamState.ARRAY_VALUE

        self.skip_whitespace()
        char = self.peek()
        if not char:
            raise self._end_of_input()
        self._require_value(char)

        start = self.pos
        self._scan(_SCANNER)
        self._end_value()
        return self.text[start : self.pos]

    def _scan(self, decoder: JSONDecoder) -> Any:
        start = self.pos
        try:
            value, self.pos = decoder.raw_decode(self.text, start)
        except _NonStandardConstant as exc:
            pos = self.text.find(exc.args[0], start)
            raise json.JSONDecodeError(
                "Expecting value", self.text, pos
            ) from None
        return value

    def _expect(self, char: str) -> None:
        found = self.peek()
        if not found:
            raise self._end_of_input()
        if found != char:
            raise json.JSONDecodeError(
                f"Expecting '{char}' delimiter", self.text, self.pos
            )
        self.pos += 1
        self.skip_whitespace()

    def _require_value(self, char: str) -> None:
        if self.state not in _VALUE_STATES:
            raise self._state_error(char)

    def _close(self, char: str) -> Delim:
        self.pos += 1
        self._stack.pop()
        self._end_value()
        return Delim(char)

    def _end_value(self) -> None:
        if not self._stack:
            self.state = StreamState.END
        elif self._stack[-1] == "{":
            self.state = StreamState.OBJECT_COMMA
        else:
            self.state = StreamState.ARRAY_COMMA

    def _end_of_input(self) -> json.JSONDecodeError:
        return json.JSONDecodeError(
            "Unexpected end of JSON input", self.text, self.pos
        )

    def _state_error(self, char: str) -> json.JSONDecodeError:
        """Builds the error for ``char`` appearing where it is not allowed."""
        state = self.state
        if state is StreamState.OBJECT_KEY and char == "}":
            msg = "Illegal trailing comma before end of object"
        elif state is StreamState.ARRAY_VALUE and char == "]":
            msg = "Illegal trailing comma before end of array"
        elif state in _KEY_STATES:
            msg = "Expecting property name enclosed in double quotes"
        elif state is StreamState.OBJECT_COLON:
            msg = "Expecting ':' delimiter"
        elif state in (StreamState.OBJECT_COMMA, StreamState.ARRAY_COMMA):
            msg = "Expecting ',' delimiter"
        elif state is StreamState.END:
            msg = "Extra data"
        else:
            msg = "Expecting value"
        return json.JSONDecodeError(msg, self.text, self.pos)
