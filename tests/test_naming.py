"""Tests for identifier derivation and the uniqueness check."""

from __future__ import annotations

import pytest
from conftest import column

from typed_sqlgen.errors import NAMED_PARAMS_DOCS_URL, AmbiguousNameError
from typed_sqlgen.naming import (
    arg_name,
    assert_unique_names,
    camel_case,
    col_name,
    function_name,
)


class TestCamelCase:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("id", "id"),
            ("author_id", "authorId"),
            ("created_at", "createdAt"),
            ("ID", "id"),
            ("UserName", "userName"),
            ("count(*)", "count"),
            ("first name", "firstName"),
            ("__private", "private"),
            ("2fa_code", "_2faCode"),
        ],
    )
    def test_conversion(self, name, expected):
        assert camel_case(name) == expected

    def test_nothing_usable(self):
        assert camel_case("?!") == ""


class TestFieldNames:
    def test_arg_name_from_column(self):
        assert arg_name(0, column("author_id", "int8")) == "authorId"

    def test_arg_name_fallback(self):
        """Parameters without a usable name fall back to their position."""
        assert arg_name(2, None) == "arg2"
        assert arg_name(1, column("", "text")) == "arg1"
        assert arg_name(0, column("?column?", "text")) == "column"

    def test_col_name_fallback(self):
        assert col_name(3, column("", "int4")) == "column3"
        assert col_name(0, column("*", "int4")) == "column0"

    def test_function_name(self):
        assert function_name("GetAuthor") == "getAuthor"
        assert function_name("listAuthors") == "listAuthors"


class TestAssertUniqueNames:
    def test_unique_names_pass(self):
        assert_unique_names("column", "ListAuthors", "authors.sql", ["id", "createdAt"])

    def test_empty_list_passes(self):
        assert_unique_names("argument", "Q", "q.sql", [])

    def test_duplicate_argument(self):
        """The message names the duplicate, the query and the file."""
        with pytest.raises(AmbiguousNameError) as exc:
            assert_unique_names(
                "argument", "CountRecent", "events.sql", ["startedAt", "startedAt"]
            )
        message = str(exc.value)
        assert "ambiguous argument names for query 'CountRecent' (events.sql)" in message
        assert "- startedAt" in message
        assert "sqlc.arg/sqlc.narg" in message
        assert NAMED_PARAMS_DOCS_URL in message

    def test_duplicates_sorted_and_deduplicated(self):
        with pytest.raises(AmbiguousNameError) as exc:
            assert_unique_names("column", "Q", "q.sql", ["b", "a", "b", "a", "b", "c"])
        assert exc.value.duplicates == ["a", "b"]
        assert exc.value.kind == "column"
        assert exc.value.query_name == "Q"
        assert exc.value.file_name == "q.sql"
        message = str(exc.value)
        assert message.index("- a") < message.index("- b")
        assert "- c" not in message

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            assert_unique_names("column", "Q", "q.sql", ["x", "x"])
