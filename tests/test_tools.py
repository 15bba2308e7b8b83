"""Tests for the agent tools and the table store behind them."""

import polars as pl

from table_refine.core.table_store import TableStore, to_frame, to_markdown
from table_refine.tools.refining import (
    _get_store,
    list_tables,
    refine_table,
    register_table,
    sample_table,
)


def _register(rows, ctx, name="people"):
    result = register_table(name, rows, ctx)
    assert result["status"] == "success", f"Register failed: {result}"
    return result["table_name"]


# ---------------------------------------------------------------------------
# Table store
# ---------------------------------------------------------------------------

class TestTableStore:

    def test_put_and_get_copy(self):
        store = TableStore()
        rows = [["a", "b"]]
        store.put("t", rows)
        rows[0][0] = "changed"
        fetched = store.get("t")
        assert fetched == [["a", "b"]]
        fetched[0][0] = "again"
        assert store.get("t") == [["a", "b"]]

    def test_metadata(self):
        store = TableStore()
        metadata = store.put("t", [["a"], ["b", "c"]], source_table="s", operations=["transpose"])
        assert metadata.to_dict() == {
            "table_name": "t",
            "row_count": 2,
            "column_count": 2,
            "source_table": "s",
            "operations": ["transpose"],
        }
        assert store.get_row_count("t") == 2

    def test_drop(self):
        store = TableStore()
        store.put("t", [])
        store.drop("t")
        assert not store.table_exists("t")
        assert "t" not in store.table_registry

    def test_generate_table_name(self):
        store = TableStore()
        assert store.generate_table_name("My Sheet (2024)") == "my_sheet_2024"
        assert store.generate_table_name("2024 data") == "t_2024_data"
        assert store.generate_table_name("!!!") == "t_"


class TestPreview:

    def test_frame_pads_ragged_rows(self):
        frame = to_frame([["a", 1], ["b"]])
        assert frame.columns == ["col_0", "col_1"]
        assert frame.schema["col_1"] == pl.Utf8
        assert frame["col_1"].to_list() == ["1", None]

    def test_frame_limit(self):
        assert to_frame([["a"], ["b"], ["c"]], limit=2).height == 2

    def test_markdown(self):
        markdown = to_markdown(to_frame([["a", "b"]]))
        assert markdown.splitlines()[0] == "| col_0 | col_1 |"
        assert "| a | b |" in markdown

    def test_markdown_truncates_columns(self):
        markdown = to_markdown(to_frame([list("abcd")]), max_columns=2)
        assert "| col_0 | col_1 |" in markdown
        assert "2 more columns not shown" in markdown

    def test_markdown_padding_renders_blank(self):
        markdown = to_markdown(to_frame([["a", "b"], ["c"]]))
        assert "| c |  |" in markdown

    def test_markdown_escapes_pipes_and_clips(self):
        markdown = to_markdown(to_frame([["a|b", "x" * 50]]), max_cell_width=10)
        assert "a\\|b" in markdown
        assert "| xxxxxxx... |" in markdown

    def test_markdown_empty(self):
        assert to_markdown(to_frame([])) == "No rows."


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------

class TestRegisterTable:

    def test_register(self, people_rows, tool_context):
        result = register_table("People List", people_rows, tool_context)
        assert result["status"] == "success"
        assert result["table_name"] == "people_list"
        assert result["row_count"] == 4
        assert result["column_count"] == 3
        assert "| Ada | 36 | Y |" in result["preview"]
        assert tool_context.state["current_table"] == "people_list"

    def test_rejects_non_table(self, tool_context):
        result = register_table("bad", ["a", "b"], tool_context)
        assert "error" in result


class TestRefineTable:

    def test_refine(self, people_rows, tool_context):
        name = _register(people_rows, tool_context)
        result = refine_table(
            name,
            [
                {"operation": "ignoreRowIf", "param": [{"index": 0}]},
                {"operation": "ignoreColIf", "param": [{"index": 2}]},
            ],
            tool_context,
        )
        assert result["status"] == "success"
        assert result["output_table"] == "people_refined"
        assert result["before_rows"] == 4
        assert result["after_rows"] == 3
        assert result["before_columns"] == 3
        assert result["after_columns"] == 2
        assert result["operations"] == ["ignoreRowIf", "ignoreColIf"]
        assert _get_store().get("people_refined")[0] == ["Ada", "36"]

    def test_source_is_kept(self, people_rows, tool_context):
        name = _register(people_rows, tool_context)
        refine_table(name, [{"operation": "transpose"}], tool_context)
        assert _get_store().get(name) == people_rows

    def test_custom_output_table(self, people_rows, tool_context):
        name = _register(people_rows, tool_context)
        result = refine_table(name, [{"operation": "transpose"}], tool_context, output_table="flipped")
        assert result["output_table"] == "flipped"
        assert _get_store().get("flipped")[0] == ["name", "Ada", "Grace", "Linus"]

    def test_updates_state(self, people_rows, tool_context):
        name = _register(people_rows, tool_context)
        refine_table(name, [{"operation": "transpose"}], tool_context)
        history = tool_context.state["refine_history"]
        assert len(history) == 1
        assert history[0]["source_table"] == name
        assert history[0]["operations"] == ["transpose"]
        assert tool_context.state["current_table"] == "people_refined"

    def test_refine_in_place_reports_original_columns(self, people_rows, tool_context):
        name = _register(people_rows, tool_context)
        result = refine_table(
            name,
            [{"operation": "ignoreColIf", "param": [{"index": 2}]}],
            tool_context,
            output_table=name,
        )
        assert result["output_table"] == name
        assert result["before_columns"] == 3
        assert result["after_columns"] == 2
        assert _get_store().get_column_count(name) == 2

    def test_accepts_name_as_registered(self, people_rows, tool_context):
        register_table("People List", people_rows, tool_context)
        result = refine_table("People List", [{"operation": "transpose"}], tool_context)
        assert result["status"] == "success"
        assert result["table_name"] == "people_list"
        assert result["output_table"] == "people_list_refined"

    def test_missing_table(self, tool_context):
        result = refine_table("nope", [{"operation": "transpose"}], tool_context)
        assert "not found" in result["error"]

    def test_bad_operation_returns_error(self, people_rows, tool_context):
        name = _register(people_rows, tool_context)
        result = refine_table(name, [{"operation": "shuffle"}], tool_context)
        assert "Unknown operation 'shuffle'" in result["error"]
        assert "refine_history" not in tool_context.state

    def test_bad_param_returns_error(self, people_rows, tool_context):
        name = _register(people_rows, tool_context)
        result = refine_table(name, [{"operation": "replace", "param": [{"orig": "Y"}]}], tool_context)
        assert "new" in result["error"]


class TestSampleAndList:

    def test_sample(self, people_rows, tool_context):
        name = _register(people_rows, tool_context)
        result = sample_table(name, tool_context, limit=2)
        assert result["status"] == "success"
        assert result["total_rows"] == 4
        assert "Ada" in result["sample"]
        assert "Grace" not in result["sample"]

    def test_sample_by_name_as_registered(self, people_rows, tool_context):
        register_table("People List", people_rows, tool_context)
        result = sample_table("People List", tool_context)
        assert result["table_name"] == "people_list"
        assert result["total_rows"] == 4

    def test_sample_missing(self, tool_context):
        assert "error" in sample_table("nope", tool_context)

    def test_list_tables(self, people_rows, tool_context):
        name = _register(people_rows, tool_context)
        refine_table(name, [{"operation": "transpose"}], tool_context)
        result = list_tables(tool_context)
        names = [t["table_name"] for t in result["tables"]]
        assert names == ["people", "people_refined"]
        assert result["tables"][1]["source_table"] == "people"
        assert result["current_table"] == "people_refined"

    def test_list_tables_empty(self, tool_context):
        result = list_tables(tool_context)
        assert result["tables"] == []
        assert result["current_table"] == ""
