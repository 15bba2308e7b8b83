"""Tests for transpose."""

from table_refine.ops.structure_ops import transpose


class TestTranspose:

    def test_square(self):
        rows = [
            ["", "a", "b"],
            ["1", "a1", "b1"],
            ["2", "a2", "b2"],
        ]
        assert transpose(rows) == [
            ["", "1", "2"],
            ["a", "a1", "a2"],
            ["b", "b1", "b2"],
        ]

    def test_rectangular(self):
        assert transpose([[1, 2, 3], [4, 5, 6]]) == [[1, 4], [2, 5], [3, 6]]

    def test_twice_is_identity(self):
        rows = [["a", "b"], ["c", "d"], ["e", "f"]]
        assert transpose(transpose(rows)) == rows

    def test_ragged_rows_skip_missing_cells(self):
        assert transpose([["a", "b", "c"], ["d"]]) == [["a", "d"], ["b"], ["c"]]

    def test_empty(self):
        assert transpose([]) == []
        assert transpose([[], []]) == []

    def test_input_is_untouched(self):
        rows = [["a", "b"]]
        transpose(rows)[0].append("x")
        assert rows == [["a", "b"]]
