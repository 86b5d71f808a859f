"""Unit tests for connection argument normalization."""
from __future__ import annotations

import pytest

from catalog_service.core.exceptions import InvalidParameterException
from catalog_service.core.pagination import (
    DEFAULT_LIMIT,
    ConnectionArgs,
    PaginationMode,
    normalize_connection_args,
)


class TestNormalizeConnectionArgs:
    """Tests for normalize_connection_args."""

    def test_empty_args_default_to_forward_with_default_limit(self):
        args = normalize_connection_args({})

        assert args.first == DEFAULT_LIMIT == 20
        assert args.last is None
        assert args.mode is PaginationMode.FORWARD
        assert args.sort_by == "id"
        assert args.sort_order == "asc"

    def test_none_is_treated_as_empty(self):
        assert normalize_connection_args(None).first == DEFAULT_LIMIT

    def test_custom_default_limit(self):
        assert normalize_connection_args({}, default_limit=5).first == 5

    def test_zero_page_size_means_default(self):
        assert normalize_connection_args({"first": 0}).first == DEFAULT_LIMIT

        args = normalize_connection_args({"first": 5, "last": 0})
        assert args.last is None
        assert args.mode is PaginationMode.FORWARD

    def test_last_does_not_get_a_default_first(self):
        args = normalize_connection_args({"last": 3})

        assert args.first is None
        assert args.last == 3
        assert args.mode is PaginationMode.BACKWARD

    def test_offset_selects_offset_mode(self):
        args = normalize_connection_args({"offset": 10, "first": 5})

        assert args.mode is PaginationMode.OFFSET
        assert args.first == 5

    def test_accepts_camel_and_snake_case_keys(self):
        camel = normalize_connection_args({"sortBy": "priority", "sortOrder": "desc"})
        snake = normalize_connection_args({"sort_by": "priority", "sort_order": "desc"})

        assert camel.sort == snake.sort
        assert camel.sort.descending

    def test_does_not_mutate_input(self):
        raw = {"sortBy": "priority"}
        normalize_connection_args(raw)

        assert raw == {"sortBy": "priority"}

    def test_existing_args_are_copied(self):
        original = ConnectionArgs(last=2)
        normalized = normalize_connection_args(original)

        assert normalized is not original
        assert normalized == original

    def test_blank_cursors_are_absent(self):
        args = normalize_connection_args({"after": "", "before": ""})

        assert args.after is None
        assert args.before is None
        assert args.cursor is None

    @pytest.mark.parametrize(
        "raw",
        [
            {"first": 1, "last": 1},
            {"first": 1, "last": 1, "offset": 0, "after": "a"},
            {"offset": 0, "last": 1},
            {"after": "a", "before": "b"},
        ],
    )
    def test_mutually_exclusive_arguments(self, raw):
        with pytest.raises(InvalidParameterException) as exc_info:
            normalize_connection_args(raw)

        assert exc_info.value.status_code == 400
        assert exc_info.value.type == "invalid-parameter"

    @pytest.mark.parametrize("sort_by", [None, ""])
    def test_missing_sort_by(self, sort_by):
        with pytest.raises(InvalidParameterException, match="sortBy"):
            normalize_connection_args({"sortBy": sort_by})

    @pytest.mark.parametrize("sort_order", [None, "up", "ASC"])
    def test_unknown_sort_order(self, sort_order):
        with pytest.raises(InvalidParameterException, match="sortOrder"):
            normalize_connection_args({"sortOrder": sort_order})

    @pytest.mark.parametrize("raw", [{"first": -1}, {"last": -1}, {"offset": -5}])
    def test_out_of_range_values(self, raw):
        with pytest.raises(InvalidParameterException):
            normalize_connection_args(raw)


class TestConnectionArgs:
    """Tests for ConnectionArgs helpers."""

    def test_cursor_prefers_whichever_is_set(self):
        assert ConnectionArgs(after="x").cursor == "x"
        assert ConnectionArgs(before="y").cursor == "y"

    def test_sort_spec(self):
        sort = ConnectionArgs(sortBy="priority", sortOrder="desc").sort

        assert sort.field == "priority"
        assert sort.order == "desc"
        assert not sort.is_id
