"""Driver strategies, one per client library."""

from __future__ import annotations

from typed_sqlgen.drivers.base import CallShape, Driver, DriverConfig, QuerySignature
from typed_sqlgen.drivers.bun_sqlite import BUN_SQLITE, BunSqliteDriver
from typed_sqlgen.drivers.postgres import POSTGRES_JS, PostgresDriver
from typed_sqlgen.drivers.postgres_common import BUN_SQL, PostgresCommonDriver
from typed_sqlgen.enums import EMPTY_ENUMS, EnumLookup
from typed_sqlgen.errors import ConfigError

# Call shape -> driver class emitting it
DRIVER_CLASSES: dict[CallShape, type[Driver]] = {
    CallShape.POSITIONAL_ARRAY: PostgresCommonDriver,
    CallShape.TAGGED_TEMPLATE: PostgresDriver,
    CallShape.PREPARED_STATEMENT: BunSqliteDriver,
}

# Driver name -> client library config
DRIVERS: dict[str, DriverConfig] = {
    config.name: config for config in (BUN_SQL, POSTGRES_JS, BUN_SQLITE)
}


def driver_for(
    config: DriverConfig, enums: EnumLookup = EMPTY_ENUMS, *, strict: bool | None = None
) -> Driver:
    """Instantiate the driver class for a config's call shape."""
    return DRIVER_CLASSES[config.call_shape](config, enums, strict=strict)


def create_driver(
    name: str, enums: EnumLookup = EMPTY_ENUMS, *, strict: bool | None = None
) -> Driver:
    """Instantiate the driver registered under ``name``.

    Raises:
        ConfigError: If no driver has that name.
    """
    try:
        config = DRIVERS[name]
    except KeyError:
        available = ", ".join(sorted(DRIVERS))
        raise ConfigError(f"Unknown driver {name!r} (available: {available})") from None
    return driver_for(config, enums, strict=strict)


__all__ = [
    "BUN_SQL",
    "BUN_SQLITE",
    "DRIVER_CLASSES",
    "DRIVERS",
    "POSTGRES_JS",
    "BunSqliteDriver",
    "CallShape",
    "Driver",
    "DriverConfig",
    "PostgresCommonDriver",
    "PostgresDriver",
    "QuerySignature",
    "create_driver",
    "driver_for",
]
