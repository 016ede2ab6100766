"""Tests for page-size choice and selection."""

import pytest

from table_verifier.core.results import FailureKind
from table_verifier.engine.pagination import choose_page_size, select_page_size


class TestChoosePageSize:
    """Smallest option strictly greater than the record count."""

    @pytest.mark.parametrize(
        "count,expected",
        [(0, 10), (3, 10), (9, 10), (10, 25), (24, 25), (99, 100)],
    )
    def test_smallest_option_above_count(self, count, expected):
        assert choose_page_size(count, (10, 25, 50, 100)) == expected

    def test_falls_back_to_smallest_when_fixture_too_large(self):
        """Larger fixtures than any option under-provision the page."""
        assert choose_page_size(100, (10, 25, 50, 100)) == 10
        assert choose_page_size(5000, (10, 25, 50, 100)) == 10

    def test_unsorted_options(self):
        assert choose_page_size(30, (100, 10, 50, 25)) == 50

    def test_no_options(self):
        with pytest.raises(ValueError):
            choose_page_size(3, ())


class TestSelectPageSize:
    """Driving the page-size dropdown."""

    def test_selects_option_and_refreshes(self, make_app, make_context, status_records):
        app = make_app(status_records, default_page_size=25)
        app.goto(app.table_url)
        context = make_context(app)

        check = select_page_size(context, "Statuses", len(status_records))

        assert check.passed
        assert app.page_size == 10
        assert not app.dropdown_open
        assert app.sleeps == [context.config.settle_delay]

    def test_selected_size_covers_all_rows(self, make_app, make_context):
        rows = [{"id": f"R{i:02d}", "status": "s", "count": i} for i in range(30)]
        app = make_app(rows)
        app.goto(app.table_url)
        context = make_context(app)

        select_page_size(context, "Statuses", len(rows))

        assert app.page_size == 50
        assert len(app.texts_of(context.selectors.cell("id"))) == len(rows)

    def test_missing_option_is_reported(self, make_app, make_context, status_records, sink):
        app = make_app(status_records, page_size_options=(25, 50))
        app.goto(app.table_url)
        context = make_context(app)

        check = select_page_size(context, "Statuses", len(status_records))

        assert not check.passed
        assert check.kind == FailureKind.ELEMENT_NOT_FOUND
        assert sink.failures == [
            "Failure: Statuses: Page size option 10 not available. Options: ['25', '50']"
        ]
        # Page is still refreshed and settled
        assert app.sleeps == [context.config.settle_delay]
