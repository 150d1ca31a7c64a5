"""Generator options, read from the request's plugin options JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from typing import Any

from typed_sqlgen.errors import ConfigError

DEFAULT_DRIVER = "bun-sql"


@dataclass
class GeneratorOptions:
    """Options controlling one generation run."""

    driver: str = DEFAULT_DRIVER
    strict: bool | None = None  # None keeps the driver's own policy
    emit_row_values: bool = False
    extension: str = ".ts"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GeneratorOptions:
        """Build options from a parsed JSON object.

        Raises:
            ConfigError: On unknown keys or values of the wrong type.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown plugin options: {', '.join(unknown)}")

        options = cls(**data)
        if not isinstance(options.driver, str) or not options.driver:
            raise ConfigError("Option 'driver' must be a non-empty string")
        if options.strict is not None and not isinstance(options.strict, bool):
            raise ConfigError("Option 'strict' must be a boolean")
        if not isinstance(options.emit_row_values, bool):
            raise ConfigError("Option 'emit_row_values' must be a boolean")
        if not isinstance(options.extension, str) or not options.extension.startswith("."):
            raise ConfigError("Option 'extension' must start with '.'")
        return options

    @classmethod
    def from_json(cls, raw: bytes | str | None) -> GeneratorOptions:
        """Parse plugin options; empty input yields the defaults."""
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        if not raw or not raw.strip():
            return cls()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as err:
            raise ConfigError(f"Plugin options are not valid JSON: {err}") from err
        if not isinstance(data, dict):
            raise ConfigError("Plugin options must be a JSON object")
        return cls.from_dict(data)
