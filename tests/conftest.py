"""Shared fixtures: the authors catalog and its queries."""

from __future__ import annotations

import pytest

from typed_sqlgen.catalog import (
    Catalog,
    Column,
    CommandKind,
    Enum,
    GenerateRequest,
    Identifier,
    Parameter,
    Query,
    Schema,
)

GET_AUTHOR_SQL = "SELECT id, name, status FROM authors WHERE id = $1 LIMIT 1"


def column(name, type_name=None, *, not_null=False, is_array=False, array_dims=0, schema=""):
    """Build a column; ``type_name=None`` leaves the type undeclared."""
    type_id = Identifier(name=type_name, schema=schema) if type_name is not None else None
    return Column(
        name=name,
        type=type_id,
        not_null=not_null,
        is_array=is_array,
        array_dims=array_dims,
    )


def params(*columns):
    """Number parameters from 1 in the given order."""
    return [Parameter(number=i + 1, column=c) for i, c in enumerate(columns)]


@pytest.fixture
def authors_catalog():
    """Default schema public with the author_status enum."""
    status = Enum(name="author_status", vals=["active", "inactive", "pending"], schema="public")
    return Catalog(default_schema="public", schemas=[Schema(name="public", enums=[status])])


@pytest.fixture
def get_author():
    """GetAuthor :one from authors.sql."""
    return Query(
        name="GetAuthor",
        cmd=CommandKind.ONE,
        text=GET_AUTHOR_SQL,
        filename="authors.sql",
        params=params(column("id", "int8")),
        columns=[
            column("id", "int8", not_null=True),
            column("name", "text", not_null=True),
            column("status", "author_status", not_null=True),
        ],
    )


@pytest.fixture
def list_authors():
    """ListAuthors :many from authors.sql."""
    return Query(
        name="ListAuthors",
        cmd=CommandKind.MANY,
        text="SELECT id, bio FROM authors ORDER BY name",
        filename="authors.sql",
        columns=[
            column("id", "bigserial", not_null=True),
            column("bio", "text"),
        ],
    )


@pytest.fixture
def delete_author():
    """DeleteAuthor :exec from authors.sql."""
    return Query(
        name="DeleteAuthor",
        cmd=CommandKind.EXEC,
        text="DELETE FROM authors WHERE id = $1",
        filename="authors.sql",
        params=params(column("id", "int8", not_null=True)),
    )


@pytest.fixture
def authors_request(authors_catalog, get_author, list_authors, delete_author):
    """Request with the three authors queries and no plugin options."""
    return GenerateRequest(
        catalog=authors_catalog,
        queries=[get_author, list_authors, delete_author],
    )
