"""End-to-end batching of SQLAlchemy selects on in-memory SQLite."""
from __future__ import annotations

import pytest
from sqlalchemy import select, update
from sqlalchemy.engine import Row

from each_batch import InvalidConfigurationError, SelectQuerySource, each_batch, pluck_batches
from tests.fixtures.models import Widget

pytestmark = pytest.mark.integration


def ids(pages) -> list[list[int]]:
    return [[widget.id for widget in page] for page in pages]


@pytest.fixture
def widgets_source(db_session):
    return SelectQuerySource(db_session, select(Widget))


# ──────────────────────────────────────────────────────────────
# Lazy pages
# ──────────────────────────────────────────────────────────────


class TestLazyPages:
    def test_short_last_page(self, seed_widgets, widgets_source):
        seed_widgets(5)

        pages = list(each_batch(widgets_source, of=2))

        assert not any(page.loaded for page in pages)
        assert ids(pages) == [[1, 2], [3, 4], [5]]

    def test_exact_multiple_has_trailing_empty_page(self, seed_widgets, widgets_source):
        seed_widgets(4)

        assert ids(each_batch(widgets_source, of=2)) == [[1, 2], [3, 4], []]

    def test_empty_table_yields_one_empty_page(self, widgets_source):
        assert ids(each_batch(widgets_source, of=2)) == [[]]

    def test_page_source_is_a_bounded_query(self, seed_widgets, widgets_source):
        seed_widgets(5)

        first = next(iter(each_batch(widgets_source, of=2)))

        assert isinstance(first.source, SelectQuerySource)
        assert "LIMIT" in str(first.source.statement)

    def test_where_clause_is_preserved(self, db_session, seed_widgets):
        seed_widgets(9)
        source = SelectQuerySource(db_session, select(Widget).where(Widget.id % 2 == 1))

        assert ids(each_batch(source, of=2)) == [[1, 3], [5, 7], [9]]


# ──────────────────────────────────────────────────────────────
# Eager pages
# ──────────────────────────────────────────────────────────────


class TestEagerPages:
    def test_exact_multiple_has_no_trailing_page(self, seed_widgets, widgets_source):
        seed_widgets(4)

        pages = list(each_batch(widgets_source, of=2, load=True))

        assert all(page.loaded for page in pages)
        assert ids(pages) == [[1, 2], [3, 4]]

    def test_page_source_requeries_the_same_rows(self, seed_widgets, widgets_source):
        seed_widgets(5)

        pages = list(each_batch(widgets_source, of=2, load=True, order="desc"))

        assert [[w.id for w in page.source.fetch_rows()] for page in pages] == ids(pages)
        assert ids(pages) == [[5, 4], [3, 2], [1]]

    def test_rows_are_refreshed_from_the_database(self, db_session, seed_widgets, widgets_source):
        seed_widgets(3)
        db_session.execute(
            update(Widget).values(name="renamed"),
            execution_options={"synchronize_session": False},
        )

        names = [w.name for page in each_batch(widgets_source, of=2, load=True) for w in page]

        assert names == ["renamed"] * 3

    def test_updating_each_page(self, db_session, seed_widgets, widgets_source):
        """Rows changed while iterating are still visited exactly once."""
        seed_widgets(7)

        for page in each_batch(widgets_source, of=3, load=True):
            db_session.execute(
                update(Widget)
                .where(Widget.id.in_([w.id for w in page]))
                .values(name="done"),
                execution_options={"synchronize_session": False},
            )

        assert set(db_session.scalars(select(Widget.name))) == {"done"}


# ──────────────────────────────────────────────────────────────
# Composite keys and projections
# ──────────────────────────────────────────────────────────────


class TestCompositeKeys:
    @pytest.mark.parametrize("order", ["asc", "desc"])
    @pytest.mark.parametrize("load", [False, True])
    @pytest.mark.parametrize("batch_size", [1, 2, 4, 5])
    def test_ties_visit_every_row_once(self, seed_widgets, widgets_source, order, load, batch_size):
        widgets = seed_widgets(10)
        expected = [
            w.id
            for w in sorted(widgets, key=lambda w: (w.enabled_at, w.id), reverse=order == "desc")
        ]

        enumerator = each_batch(
            widgets_source, of=batch_size, load=load, order=order, keys=["enabled_at", "id"]
        )

        assert [w.id for w in enumerator.each_record()] == expected

    def test_projection_yields_rows(self, db_session, seed_widgets):
        seed_widgets(5)
        source = SelectQuerySource(db_session, select(Widget.id, Widget.enabled_at))

        pages = list(each_batch(source, of=2, load=True, keys=["enabled_at", "id"]))

        assert all(isinstance(row, Row) for page in pages for row in page)
        assert sum(len(page) for page in pages) == 5

    def test_projection_must_include_keys(self, db_session):
        source = SelectQuerySource(db_session, select(Widget.id, Widget.name))

        with pytest.raises(InvalidConfigurationError, match="custom select clause"):
            each_batch(source, keys=["enabled_at", "id"])


# ──────────────────────────────────────────────────────────────
# Plucking
# ──────────────────────────────────────────────────────────────


class TestPluck:
    def test_pluck_ids(self, seed_widgets, widgets_source):
        seed_widgets(5)

        assert list(pluck_batches(widgets_source, "id", of=2)) == [[1, 2], [3, 4], [5]]

    def test_pluck_composite(self, seed_widgets, widgets_source):
        widgets = seed_widgets(8)
        expected = sorted((w.enabled_at, w.id) for w in widgets)

        rows = list(
            each_batch(widgets_source, of=3, keys=["enabled_at", "id"])
            .pluck("enabled_at", "id")
            .each_row()
        )

        assert rows == expected

    def test_pluck_exact_multiple(self, seed_widgets, widgets_source):
        seed_widgets(4)

        pages = list(pluck_batches(widgets_source, "id", "name", of=2, order="desc"))

        assert pages == [[(4, "widget-4"), (3, "widget-3")], [(2, "widget-2"), (1, "widget-1")]]
