"""Immutable decode settings."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DecodeConfig:
    """
    Configures how raw values are converted into destination types.

    ``strict`` is handed to pydantic for every field and overflow value, so a
    JSON string is never coerced into an ``int`` field and similar.
    """

    strict: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.strict, bool):
            raise TypeError("strict must be a boolean")


DEFAULT_CONFIG = DecodeConfig()

# Validation context key that carries the config to nested records
CONTEXT_KEY = "spilljson_config"
