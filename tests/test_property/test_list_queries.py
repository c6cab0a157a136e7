"""
Property-based tests for list query composition using Hypothesis.

These tests check the guarantees a list view relies on across many
filter, sort and page combinations.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from sqlalchemy.orm import Session

from demo_db import DemoDb, Person, create_demo_engine, seed
from ormadmin.core.dsl import (
    FilterOperator,
    FilterSpec,
    ListRequest,
    PageSpec,
    SortDirection,
    SortSpec,
    StringComparison,
)
from ormadmin.policy.identity import AdminAction, policy_identity
from ormadmin.query import QueryComposer

TOTAL_PEOPLE = 5


@pytest.fixture(scope="module")
def db():
    engine = create_demo_engine()
    with Session(engine) as session:
        seed(session)
        yield session
    engine.dispose()


# === Strategy Definitions ===

@st.composite
def person_filters(draw):
    """Filters that compile for Person."""
    kind = draw(st.sampled_from(["age", "name", "is_active", "gender"]))
    if kind == "age":
        return FilterSpec(
            property_name="age",
            operator=draw(
                st.sampled_from(
                    [
                        FilterOperator.EQUALS,
                        FilterOperator.NOT_EQUALS,
                        FilterOperator.GREATER_THAN,
                        FilterOperator.GREATER_THAN_OR_EQUALS,
                        FilterOperator.LESS_THAN,
                        FilterOperator.LESS_THAN_OR_EQUALS,
                    ]
                )
            ),
            value=str(draw(st.integers(min_value=0, max_value=60))),
        )
    if kind == "name":
        return FilterSpec(
            property_name="name",
            operator=draw(
                st.sampled_from(
                    [
                        FilterOperator.CONTAINS,
                        FilterOperator.DOES_NOT_CONTAIN,
                        FilterOperator.STARTS_WITH,
                        FilterOperator.ENDS_WITH,
                    ]
                )
            ),
            value=draw(st.text(alphabet="abcdeABCDE", max_size=3)),
            comparison=draw(st.sampled_from(list(StringComparison))),
        )
    if kind == "is_active":
        return FilterSpec(
            property_name="is_active",
            operator=FilterOperator.EQUALS,
            value=draw(st.sampled_from(["true", "false"])),
        )
    return FilterSpec(
        property_name="gender",
        operator=draw(st.sampled_from([FilterOperator.EQUALS, FilterOperator.NOT_EQUALS])),
        value=draw(st.sampled_from(["MALE", "FEMALE", "OTHER"])),
    )


@st.composite
def person_sorts(draw):
    return SortSpec(
        property_name=draw(st.sampled_from(["age", "name", "height", "born_on", "notes", "nope"])),
        direction=draw(st.sampled_from(list(SortDirection))),
    )


def ids(result):
    return [p.id for p in result.records]


# === Properties ===

class TestFilterProperties:
    @given(
        filters=st.lists(person_filters(), max_size=3),
        extra=person_filters(),
    )
    @settings(max_examples=50, deadline=None)
    def test_adding_a_filter_never_grows_the_result(self, db, filters, extra):
        composer = QueryComposer()
        before = composer.page(db, Person, ListRequest(filters=filters))
        after = composer.page(db, Person, ListRequest(filters=[*filters, extra]))
        assert after.total_count <= before.total_count
        assert set(ids(after)) <= set(ids(before))

    @given(
        property_name=st.text(alphabet="xyz_", min_size=1, max_size=8),
        operator=st.sampled_from(list(FilterOperator)),
        value=st.text(max_size=5),
    )
    @settings(max_examples=30, deadline=None)
    def test_unknown_properties_never_filter(self, db, property_name, operator, value):
        spec = FilterSpec(property_name=property_name, operator=operator, value=value)
        result = QueryComposer().page(db, Person, ListRequest(filters=[spec]))
        assert result.total_count == TOTAL_PEOPLE


class TestPagingProperties:
    @given(
        filters=st.lists(person_filters(), max_size=2),
        sorts=st.lists(person_sorts(), max_size=2),
        page_number=st.integers(max_value=0),
        page_size=st.integers(min_value=-5, max_value=5),
    )
    @settings(max_examples=30, deadline=None)
    def test_non_positive_page_returns_everything(self, db, filters, sorts, page_number, page_size):
        composer = QueryComposer()
        everything = composer.page(db, Person, ListRequest(filters=filters, sorts=sorts))
        paged = composer.page(
            db,
            Person,
            ListRequest(
                filters=filters,
                sorts=sorts,
                page=PageSpec(page_number=page_number, page_size=page_size),
            ),
        )
        assert ids(paged) == ids(everything)
        assert len(paged.records) == paged.total_count

    @given(
        filters=st.lists(person_filters(), max_size=2),
        sorts=st.lists(person_sorts(), max_size=2),
        page_size=st.integers(min_value=1, max_value=6),
    )
    @settings(max_examples=30, deadline=None)
    def test_pages_concatenate_to_the_whole_result(self, db, filters, sorts, page_size):
        composer = QueryComposer()
        everything = composer.page(db, Person, ListRequest(filters=filters, sorts=sorts))

        collected = []
        for page_number in range(1, TOTAL_PEOPLE + 2):
            page = composer.page(
                db,
                Person,
                ListRequest(
                    filters=filters,
                    sorts=sorts,
                    page=PageSpec(page_number=page_number, page_size=page_size),
                ),
            )
            assert page.total_count == everything.total_count
            assert len(page.records) <= page_size
            collected.extend(ids(page))

        assert collected == ids(everything)


class TestIdentityProperties:
    @given(
        context_name=st.text(alphabet="ABCxyz", min_size=1, max_size=6),
        set_name=st.text(alphabet="ABCxyz", min_size=1, max_size=6),
        action=st.sampled_from(
            [
                AdminAction.READ_RECORDS,
                AdminAction.CREATE_RECORD,
                AdminAction.EDIT_RECORD,
                AdminAction.DELETE_RECORD,
            ]
        ),
    )
    def test_set_identities_are_stable_and_structured(self, context_name, set_name, action):
        identity = policy_identity(context_name, action, set_name)
        assert identity == policy_identity(context_name, action, set_name)
        assert identity.split("/") == [context_name, set_name, action.value]


def test_demo_context_name():
    assert policy_identity(DemoDb, AdminAction.READ_CONTEXT_INFO) == "DemoDb/Info"
