"""Tests for the driver strategies and the code they emit."""

from __future__ import annotations

import pytest
from conftest import GET_AUTHOR_SQL, column, params

from typed_sqlgen.catalog import CommandKind
from typed_sqlgen.drivers import (
    BUN_SQL,
    BUN_SQLITE,
    DRIVER_CLASSES,
    DRIVERS,
    POSTGRES_JS,
    BunSqliteDriver,
    CallShape,
    DriverConfig,
    PostgresCommonDriver,
    PostgresDriver,
    QuerySignature,
    create_driver,
    driver_for,
)
from typed_sqlgen.errors import ConfigError, UnclassifiedTypeError, UnsupportedCommandError
from typed_sqlgen.mapping import POSTGRES_TYPES
from typed_sqlgen.render import TypeScriptRenderer
from typed_sqlgen.types import ANY, VOID, TypeReference

ONE_ROW_GUARD = "    if (rows.length !== 1) {\n        return null;\n    }\n"
MISSING_ROW_GUARD = "    if (!row) {\n        return null;\n    }\n"


def _signature(text=GET_AUTHOR_SQL, *, with_args=True, with_row=True, row_values=None):
    columns = [
        column("id", "int8", not_null=True),
        column("bio", "text"),
        column("author_id", "int8"),
    ] if with_row else []
    return QuerySignature(
        func_name="getAuthor",
        query_text=text,
        arg_iface="GetAuthorArgs" if with_args else None,
        row_type=TypeReference("GetAuthorRow") if with_row else VOID,
        params=params(column("id", "int8")) if with_args else [],
        columns=columns,
        row_values=row_values,
    )


def _render(driver, cmd, signature):
    return TypeScriptRenderer().render_declaration(driver.declare(cmd, signature))


def _preamble(driver):
    renderer = TypeScriptRenderer()
    return [renderer.render_declaration(d) for d in driver.preamble()]


class TestRegistry:
    def test_registered_drivers(self):
        assert sorted(DRIVERS) == ["bun-sql", "bun-sqlite", "postgres"]

    @pytest.mark.parametrize(
        "name,cls",
        [
            ("bun-sql", PostgresCommonDriver),
            ("postgres", PostgresDriver),
            ("bun-sqlite", BunSqliteDriver),
        ],
    )
    def test_create_driver(self, name, cls):
        driver = create_driver(name)
        assert isinstance(driver, cls)
        assert driver.name == name

    def test_unknown_driver(self):
        with pytest.raises(ConfigError, match="available: bun-sql, bun-sqlite, postgres"):
            create_driver("mysql2")

    def test_strictness_defaults(self):
        assert create_driver("postgres").strict is True
        assert create_driver("bun-sql").strict is False
        assert create_driver("bun-sqlite").strict is False

    def test_strictness_override(self):
        assert create_driver("postgres", strict=False).strict is False
        assert create_driver("bun-sql", strict=True).strict is True

    def test_call_shapes(self):
        assert BUN_SQL.call_shape is CallShape.POSITIONAL_ARRAY
        assert POSTGRES_JS.call_shape is CallShape.TAGGED_TEMPLATE
        assert BUN_SQLITE.call_shape is CallShape.PREPARED_STATEMENT

    def test_driver_class_follows_call_shape(self):
        """A config for another client reuses the driver of its call shape."""
        config = DriverConfig(
            name="pg-unsafe",
            import_module="pg-unsafe",
            import_type="Client",
            call_shape=CallShape.POSITIONAL_ARRAY,
            type_table=POSTGRES_TYPES,
        )
        driver = driver_for(config)
        assert isinstance(driver, PostgresCommonDriver)
        assert _preamble(driver) == ['import type { Client } from "pg-unsafe";']
        text = _render(driver, CommandKind.EXEC, _signature(with_row=False))
        assert "(sql: Client, args: GetAuthorArgs)" in text

    def test_every_call_shape_has_a_driver(self):
        assert set(DRIVER_CLASSES) == set(CallShape)
        for config in DRIVERS.values():
            assert DRIVER_CLASSES[config.call_shape] is type(create_driver(config.name))


class TestPreamble:
    def test_bun_sql(self):
        assert _preamble(create_driver("bun-sql")) == ['import type { SQL } from "bun";']

    def test_postgres(self):
        assert _preamble(create_driver("postgres")) == ['import type { Sql } from "postgres";']

    def test_bun_sqlite(self):
        assert _preamble(create_driver("bun-sqlite")) == [
            'import { Database } from "bun:sqlite";'
        ]


class TestBunSqlDriver:
    @pytest.fixture
    def driver(self):
        return create_driver("bun-sql")

    def test_exec(self, driver):
        text = _render(driver, CommandKind.EXEC, _signature("DELETE FROM a WHERE id = $1", with_row=False))
        assert text == (
            "export async function getAuthor(sql: SQL, args: GetAuthorArgs): Promise<void> {\n"
            "    await sql.unsafe(`DELETE FROM a WHERE id = $1`, [args.id]);\n"
            "}"
        )

    def test_exec_without_args(self, driver):
        text = _render(driver, CommandKind.EXEC, _signature("TRUNCATE a", with_args=False, with_row=False))
        assert "getAuthor(sql: SQL): Promise<void>" in text
        assert "await sql.unsafe(`TRUNCATE a`, []);" in text

    def test_one(self, driver):
        text = _render(driver, CommandKind.ONE, _signature())
        assert text == (
            "export async function getAuthor(sql: SQL, args: GetAuthorArgs): "
            "Promise<GetAuthorRow | null> {\n"
            f"    const rows = await sql.unsafe(`{GET_AUTHOR_SQL}`, [args.id]).values() as any[];\n"
            + ONE_ROW_GUARD
            + "    const row = rows[0];\n"
            + MISSING_ROW_GUARD
            + "    return {\n"
            "        id: Number(row[0]),\n"
            "        bio: row[1],\n"
            "        authorId: row[2] === null ? null : Number(row[2])\n"
            "    };\n"
            "}"
        )

    def test_many(self, driver):
        text = _render(driver, CommandKind.MANY, _signature())
        assert "Promise<GetAuthorRow[]>" in text
        assert (
            f"    return (await sql.unsafe(`{GET_AUTHOR_SQL}`, [args.id]).values() as any[])"
            ".map((row: any[]) => ({\n"
            "        id: Number(row[0]),\n"
            "        bio: row[1],\n"
            "        authorId: row[2] === null ? null : Number(row[2])\n"
            "    }));\n"
        ) in text

    def test_row_values_cast(self, driver):
        text = _render(driver, CommandKind.MANY, _signature(row_values="GetAuthorRowValues"))
        assert ".values() as GetAuthorRowValues[])" in text
        assert ".map((row: GetAuthorRowValues) => ({" in text

    def test_execlastid_unsupported(self, driver):
        with pytest.raises(UnsupportedCommandError, match="bun-sql driver does not support :execlastid"):
            driver.declare(CommandKind.EXECLASTID, _signature())

    def test_permissive_unknown_type(self, driver):
        assert driver.map_type(column("shape", "geometry", not_null=True)) == ANY


class TestBunSqlArrayNarrowing:
    """bigint arrays arrive as arrays of strings and are converted per element."""

    @pytest.fixture
    def driver(self):
        return create_driver("bun-sql")

    def _row_field(self, driver, col):
        signature = QuerySignature(
            func_name="listIds",
            query_text="SELECT ids FROM a",
            arg_iface=None,
            row_type=TypeReference("ListIdsRow"),
            columns=[col],
        )
        text = _render(driver, CommandKind.ONE, signature)
        return text.split("    return {\n", 1)[1].split("\n", 1)[0].strip()

    def test_not_null_array(self, driver):
        col = column("ids", "bigint", not_null=True, is_array=True, array_dims=1)
        assert self._row_field(driver, col) == "ids: row[0].map(Number)"

    def test_nullable_array(self, driver):
        col = column("ids", "int8", is_array=True, array_dims=1)
        assert self._row_field(driver, col) == "ids: row[0] === null ? null : row[0].map(Number)"

    def test_nested_array(self, driver):
        col = column("ids", "int8", not_null=True, is_array=True, array_dims=2)
        assert self._row_field(driver, col) == "ids: row[0].map((v2) => v2.map(Number))"

    def test_declared_type_stays_numeric(self, driver):
        col = column("ids", "bigint", not_null=True, is_array=True, array_dims=1)
        assert TypeScriptRenderer().render_type(driver.map_type(col)) == "number[]"

    def test_text_array_untouched(self, driver):
        col = column("tags", "text", not_null=True, is_array=True, array_dims=1)
        assert self._row_field(driver, col) == "tags: row[0]"


class TestPostgresDriver:
    @pytest.fixture
    def driver(self):
        return create_driver("postgres")

    def test_exec(self, driver):
        text = _render(driver, CommandKind.EXEC, _signature("DELETE FROM a WHERE id = $1", with_row=False))
        assert text == (
            "export async function getAuthor(sql: Sql, args: GetAuthorArgs): Promise<void> {\n"
            "    await sql`DELETE FROM a WHERE id = ${args.id}`;\n"
            "}"
        )

    def test_one(self, driver):
        text = _render(driver, CommandKind.ONE, _signature())
        assert text == (
            "export async function getAuthor(sql: Sql, args: GetAuthorArgs): "
            "Promise<GetAuthorRow | null> {\n"
            "    const rows = await sql<GetAuthorRow[]>`SELECT id, name, status FROM authors "
            "WHERE id = ${args.id} LIMIT 1`;\n"
            + ONE_ROW_GUARD
            + "    return rows[0];\n"
            "}"
        )

    def test_many(self, driver):
        text = _render(driver, CommandKind.MANY, _signature("SELECT * FROM a", with_args=False))
        assert text == (
            "export async function getAuthor(sql: Sql): Promise<GetAuthorRow[]> {\n"
            "    return await sql<GetAuthorRow[]>`SELECT * FROM a`;\n"
            "}"
        )

    def test_no_number_conversion(self, driver):
        """Rows come back typed; nothing is narrowed."""
        text = _render(driver, CommandKind.ONE, _signature())
        assert "Number(" not in text

    def test_execlastid_unsupported(self, driver):
        with pytest.raises(UnsupportedCommandError, match="postgres driver does not support"):
            driver.declare(CommandKind.EXECLASTID, _signature())

    def test_strict_unknown_type(self, driver):
        with pytest.raises(UnclassifiedTypeError):
            driver.map_type(column("location", "point"))


class TestBunSqliteDriver:
    @pytest.fixture
    def driver(self):
        return create_driver("bun-sqlite")

    def test_exec(self, driver):
        text = _render(driver, CommandKind.EXEC, _signature("DELETE FROM a WHERE id = ?", with_row=False))
        assert text == (
            "export async function getAuthor(database: Database, args: GetAuthorArgs): "
            "Promise<void> {\n"
            "    const stmt = database.prepare(`DELETE FROM a WHERE id = ?`);\n"
            "    stmt.run(args.id);\n"
            "}"
        )

    def test_execlastid(self, driver):
        text = _render(driver, CommandKind.EXECLASTID, _signature("INSERT INTO a (id) VALUES (?)", with_row=False))
        assert text == (
            "export async function getAuthor(database: Database, args: GetAuthorArgs): "
            "Promise<number> {\n"
            "    const stmt = database.prepare(`INSERT INTO a (id) VALUES (?)`);\n"
            "    const result = stmt.run(args.id);\n"
            "    return Number(result.lastInsertRowid);\n"
            "}"
        )

    def test_one(self, driver):
        text = _render(driver, CommandKind.ONE, _signature("SELECT id, bio, author_id FROM a WHERE id = ?"))
        assert text == (
            "export async function getAuthor(database: Database, args: GetAuthorArgs): "
            "Promise<GetAuthorRow | null> {\n"
            "    const stmt = database.prepare(`SELECT id, bio, author_id FROM a WHERE id = ?`);\n"
            "    const rows = stmt.values(args.id);\n"
            + ONE_ROW_GUARD
            + "    const row = rows[0];\n"
            + MISSING_ROW_GUARD
            + "    return {\n"
            "        id: row[0] as number,\n"
            "        bio: row[1] as string | null,\n"
            "        authorId: row[2] as number | null\n"
            "    };\n"
            "}"
        )

    def test_many(self, driver):
        text = _render(driver, CommandKind.MANY, _signature("SELECT id, bio, author_id FROM a", with_args=False))
        assert "getAuthor(database: Database): Promise<GetAuthorRow[]>" in text
        assert "    const rows = stmt.values();\n" in text
        assert "    return rows.map((row) => ({\n        id: row[0] as number," in text

    def test_row_values_cast(self, driver):
        text = _render(driver, CommandKind.MANY, _signature(row_values="GetAuthorRowValues"))
        assert "const rows = stmt.values(args.id) as GetAuthorRowValues[];" in text
        assert "rows.map((row: GetAuthorRowValues) => ({" in text


class TestCommandKinds:
    """Every command kind yields a function or a defined error."""

    @pytest.mark.parametrize("name", sorted(DRIVERS))
    @pytest.mark.parametrize("cmd", list(CommandKind))
    def test_exhaustive(self, name, cmd):
        driver = create_driver(name)
        try:
            decl = driver.declare(cmd, _signature("SELECT 1"))
        except UnsupportedCommandError:
            assert cmd is CommandKind.EXECLASTID
            assert name != "bun-sqlite"
        else:
            assert decl.name == "getAuthor"
            assert decl.body

    def test_parse_unknown_command(self):
        with pytest.raises(UnsupportedCommandError, match="':copyfrom'"):
            CommandKind.parse(":copyfrom")

    def test_parse_known_command(self):
        assert CommandKind.parse(":many") is CommandKind.MANY
