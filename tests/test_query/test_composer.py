"""
Tests for list query composition and execution.
"""

import pytest
from sqlalchemy import event, inspect

from demo_db import Gender, Parent, Person, Tag
from ormadmin.core.dsl import (
    FilterOperator,
    FilterSpec,
    ListRequest,
    PageSpec,
    SortDirection,
    SortSpec,
)


def request(filters=(), sorts=(), page_number=0, page_size=0):
    return ListRequest(
        filters=list(filters),
        sorts=list(sorts),
        page=PageSpec(page_number=page_number, page_size=page_size),
    )


def names(result):
    return [p.name for p in result.records]


@pytest.fixture
def ages_session(empty_session):
    """Three people aged 30, 20 and 40, inserted in that order."""
    for name, age in (("P30", 30), ("P20", 20), ("P40", 40)):
        empty_session.add(Person(name=name, age=age, gender=Gender.OTHER))
    empty_session.commit()
    return empty_session


class TestAgeScenario:
    def test_filter_sort_and_page(self, composer, ages_session):
        result = composer.page(
            ages_session,
            Person,
            request(
                filters=[FilterSpec(property_name="age", operator=FilterOperator.GREATER_THAN, value="25")],
                sorts=[SortSpec(property_name="age", direction=SortDirection.ASCENDING)],
                page_number=1,
                page_size=1,
            ),
        )
        assert [p.age for p in result.records] == [30]
        assert result.total_count == 2
        assert result.page_number == 1

    def test_second_page(self, composer, ages_session):
        result = composer.page(
            ages_session,
            Person,
            request(
                filters=[FilterSpec(property_name="age", operator=FilterOperator.GREATER_THAN, value="25")],
                sorts=[SortSpec(property_name="age")],
                page_number=2,
                page_size=1,
            ),
        )
        assert [p.age for p in result.records] == [40]
        assert result.total_count == 2

    def test_no_sort_keeps_key_order(self, composer, ages_session):
        result = composer.page(ages_session, Person, request())
        assert [p.age for p in result.records] == [30, 20, 40]

    def test_unsortable_sort_keeps_key_order(self, composer, ages_session):
        result = composer.page(ages_session, Person, request(sorts=[SortSpec(property_name="notes")]))
        assert [p.age for p in result.records] == [30, 20, 40]


class TestPaging:
    def test_unpaginated_returns_everything(self, composer, session):
        result = composer.page(session, Person)
        assert len(result.records) == 5
        assert result.total_count == 5
        assert result.page_number == 0

    @pytest.mark.parametrize(("page_number", "page_size"), [(0, 2), (1, 0), (-1, 2)])
    def test_non_positive_values_return_everything(self, composer, session, page_number, page_size):
        result = composer.page(session, Person, request(page_number=page_number, page_size=page_size))
        assert len(result.records) == 5

    def test_pages_partition_the_result(self, composer, session):
        sorts = [SortSpec(property_name="name")]
        pages = [
            names(composer.page(session, Person, request(sorts=sorts, page_number=n, page_size=2)))
            for n in (1, 2, 3)
        ]
        assert pages == [["Ann", "Bob"], ["Cid", "Dee"], ["eve"]]

    def test_page_beyond_data(self, composer, session):
        result = composer.page(session, Person, request(page_number=10, page_size=2))
        assert result.records == []
        assert result.total_count == 5

    def test_total_ignores_pagination(self, composer, session):
        filters = [FilterSpec(property_name="is_active", operator=FilterOperator.EQUALS, value="true")]
        result = composer.page(session, Person, request(filters=filters, page_number=1, page_size=1))
        assert len(result.records) == 1
        assert result.total_count == 3

    def test_empty_set(self, composer, empty_session):
        result = composer.page(empty_session, Person, request(page_number=1, page_size=10))
        assert result.records == []
        assert result.total_count == 0


class TestStatements:
    def test_count_statement_has_no_order_or_limit(self, composer):
        filtered = composer.filtered(Person, request())
        sql = str(composer.count_statement(filtered.order_by(Person.age).limit(3)))
        assert "count(*)" in sql.lower()
        assert "LIMIT" not in sql
        assert "ORDER BY" not in sql

    def test_compose_appends_key_tiebreaker(self, composer):
        stmt = composer.compose(Person, request(sorts=[SortSpec(property_name="age")]))
        clauses = [str(c) for c in stmt._order_by_clauses]
        assert clauses == ["people.age ASC", "people.id ASC"]

    def test_compose_paginates(self, composer):
        stmt = composer.compose(Tag, request(page_number=3, page_size=10))
        sql = str(stmt.compile(compile_kwargs={"literal_binds": True}))
        assert "LIMIT 10 OFFSET 20" in sql


class TestEagerLoading:
    def test_single_valued_relations_are_loaded(self, composer, session):
        result = composer.page(session, Person, request(sorts=[SortSpec(property_name="id")]))
        session.expunge_all()
        ann = result.records[0]
        assert "job" not in inspect(ann).unloaded
        assert ann.job.title == "Engineer"

    def test_joined_mode_is_one_statement(self, composer, session, engine):
        statements = []
        event.listen(engine, "before_cursor_execute", lambda *args: statements.append(args[2]))
        session.expunge_all()
        composer.page(session, Person)
        # count + page
        assert len(statements) == 2
        assert "JOIN" in statements[1]

    def test_split_mode_loads_separately(self, composer, session, engine):
        statements = []
        event.listen(engine, "before_cursor_execute", lambda *args: statements.append(args[2]))
        session.expunge_all()
        result = composer.page(session, Person, split_queries=True)
        assert len(statements) == 3
        assert "JOIN" not in statements[1]
        assert result.records[0].job.title == "Engineer"

    def test_collections_are_not_loaded(self, composer, session):
        session.expunge_all()
        result = composer.page(session, Parent)
        alpha = result.records[0]
        assert "children" in inspect(alpha).unloaded


class TestAsync:
    @pytest.mark.asyncio
    async def test_page_async(self, composer, async_session):
        result = await composer.page_async(
            async_session,
            Person,
            request(
                filters=[FilterSpec(property_name="age", operator=FilterOperator.GREATER_THAN, value="25")],
                sorts=[SortSpec(property_name="age", direction=SortDirection.DESCENDING)],
                page_number=1,
                page_size=2,
            ),
        )
        assert names(result) == ["Cid", "eve"]
        assert result.total_count == 3

    @pytest.mark.asyncio
    async def test_page_async_loads_relations(self, composer, async_session):
        result = await composer.page_async(async_session, Person, request(sorts=[SortSpec(property_name="id")]))
        assert result.records[0].job.title == "Engineer"
