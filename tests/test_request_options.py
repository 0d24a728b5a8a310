"""
Unit tests for RequestOptions.

Tests query/header multimaps, pagination ranges and the single-use lock.
"""

import pytest

from koios_client.application.exceptions import ErrorKind, RequestOptionsError
from koios_client.infrastructure.request_options import PAGE_SIZE, RequestOptions


class TestPagination:
    """Test the Range header materialized on lock."""

    def test_default_page_emits_no_range(self):
        opts = RequestOptions()
        opts.set_page_size(PAGE_SIZE)
        opts.lock()

        assert "Range" not in opts.headers

    def test_second_page_of_ten(self):
        opts = RequestOptions().set_page_size(10).set_current_page(2)
        opts.lock()

        assert opts.headers["Range"] == "10-19"

    @pytest.mark.parametrize(
        "size,page,expected",
        [
            (10, 1, "0-9"),
            (PAGE_SIZE, 2, "1000-1999"),
            (1, 5, "4-4"),
            (250, 3, "500-749"),
        ],
    )
    def test_range_values(self, size, page, expected):
        opts = RequestOptions().set_page_size(size).set_current_page(page)
        assert opts.range_header() == expected

    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_values_are_rejected(self, value):
        opts = RequestOptions()

        with pytest.raises(RequestOptionsError) as exc:
            opts.set_page_size(value)
        assert exc.value.is_(ErrorKind.INVALID_PAGINATION)

        with pytest.raises(RequestOptionsError):
            opts.set_current_page(value)


class TestLock:
    """Test that options can be used exactly once."""

    def test_second_lock_fails(self):
        opts = RequestOptions()
        opts.lock()

        with pytest.raises(RequestOptionsError) as exc:
            opts.lock()
        assert exc.value.is_(ErrorKind.REQUEST_OPTIONS_USED)

    def test_clone_locks_independently(self):
        opts = RequestOptions().query_set("select", "hash")
        opts.lock()

        clone = opts.clone()
        assert not clone.locked
        clone.lock()

        assert clone.locked
        assert clone.query["select"] == "hash"

    def test_clone_does_not_share_state(self):
        template = RequestOptions().query_set("a", "1").header_set("X-Test", "1")
        clone = template.clone()
        clone.query_set("a", "2").header_set("X-Test", "2")

        assert template.query["a"] == "1"
        assert template.headers["X-Test"] == "1"

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda o: o.query_set("a", "1"),
            lambda o: o.query_add("a", "1"),
            lambda o: o.query_apply({"a": "1"}),
            lambda o: o.header_set("X-A", "1"),
            lambda o: o.header_add("X-A", "1"),
            lambda o: o.header_apply({"X-A": "1"}),
            lambda o: o.set_page_size(10),
            lambda o: o.set_current_page(2),
        ],
    )
    def test_mutation_after_lock_fails(self, mutate):
        opts = RequestOptions()
        opts.lock()

        with pytest.raises(RequestOptionsError):
            mutate(opts)


class TestMultimaps:
    """Test replace vs. append semantics."""

    def test_query_set_replaces(self):
        opts = RequestOptions().query_add("order", "a").query_set("order", "b")
        assert opts.query.get_list("order") == ["b"]

    def test_query_add_appends(self):
        opts = RequestOptions().query_add("order", "a").query_add("order", "b")
        assert opts.query.get_list("order") == ["a", "b"]

    def test_query_apply_appends_all_values(self):
        opts = RequestOptions().query_set("a", "1")
        opts.query_apply({"a": "2", "b": "3"})

        assert opts.query.get_list("a") == ["1", "2"]
        assert opts.query["b"] == "3"

    def test_header_set_replaces(self):
        opts = RequestOptions().header_add("X-A", "1").header_set("X-A", "2")
        assert opts.headers.get_list("X-A") == ["2"]

    def test_header_add_appends(self):
        opts = RequestOptions().header_add("X-A", "1").header_add("X-A", "2")
        assert opts.headers.get_list("X-A") == ["1", "2"]
