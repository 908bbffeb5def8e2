# topmark:header:start
#
#   project      : DJC
#   file         : test_command.py
#   file_relpath : tests/core/test_command.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the default render rules of `BaseCommand`."""

from __future__ import annotations

from typing import Any

from djc.core.command import (
    BaseCommand,
    Column,
    ColumnData,
    CommandDescriptor,
    Empty,
    Message,
    RowSet,
    TableSet,
)


class _Flat(BaseCommand):
    def get_column_data(self) -> ColumnData | None:
        return [Column("name", "Name"), "size"]


class _Multi(BaseCommand):
    def get_column_data(self) -> ColumnData | None:
        return {"users": ["name"], "groups": ["name"]}

    def get_empty_result_message(self, table_name: str) -> str | None:
        return f"No {table_name}." if table_name == "groups" else None


class _Talker(BaseCommand):
    def get_human_success_message(self, result: Any) -> str | None:
        return f"Done with {result}"


def test_command_id_is_namespaced() -> None:
    assert CommandDescriptor(name="split", topic="data", description="").command_id == "djc:data:split"


def test_empty_list_result_renders_empty() -> None:
    assert _Flat().render_result([]) == Empty()
    assert _Talker().render_result(()) == Empty()


def test_flat_column_data_renders_rowset() -> None:
    rendered = _Flat().render_result([{"name": "a", "size": 1}])

    assert isinstance(rendered, RowSet)
    assert rendered.columns == (Column("name", "Name"), Column("size", "size"))
    assert rendered.rows == ({"name": "a", "size": 1},)


def test_single_mapping_result_is_one_row() -> None:
    rendered = _Flat().render_result({"name": "a", "size": 1})
    assert isinstance(rendered, RowSet)
    assert len(rendered.rows) == 1


def test_keyed_column_data_renders_tableset_with_per_table_empty() -> None:
    rendered = _Multi().render_result({"users": [{"name": "ann"}], "groups": []})

    assert isinstance(rendered, TableSet)
    assert isinstance(rendered.tables["users"], RowSet)
    assert rendered.tables["groups"] == Empty("No groups.")


def test_without_columns_the_success_message_is_shown() -> None:
    assert _Talker().render_result(3) == Message("Done with 3")
    assert BaseCommand().render_result(3) == Message("")
