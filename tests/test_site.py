"""
Tests for the admin site facade.
"""

import pytest

from demo_db import DemoDb, Gender, Job, Person, Tag
from ormadmin.core.context import RequestContext
from ormadmin.core.dsl import FilterOperator, FilterSpec, ListRequest, PageSpec, SortSpec
from ormadmin.core.errors import (
    AccessDeniedError,
    ConfigurationError,
    NotFoundError,
    PolicyNotFoundError,
    ValidationError,
)
from ormadmin.logging import ContextFilter, get_log_context
from ormadmin.policy.registry import PolicyRegistry
from ormadmin.site import AdminSite


def is_admin(principal):
    return principal.has_role("admin")


@pytest.fixture
def site(options_builder, policies, introspector):
    options = options_builder.configure_context(
        DemoDb,
        lambda ctx: ctx.with_split_queries().configure_set(
            Person,
            lambda s: s.configure_property("notes", lambda p: p.hidden())
            .user_can_create_if(is_admin)
            .user_can_edit_if(is_admin)
            .user_can_delete_if(is_admin),
        ),
    ).build()
    return AdminSite(options, policies, introspector)


class TestReads:
    def test_context_info(self, site, ctx):
        info = site.context_info(ctx, DemoDb)
        assert [s.name for s in info.sets] == ["Job", "Person", "Parent", "Child", "Tag"]

    def test_context_info_by_name(self, site, ctx):
        assert site.context_info(ctx, "DemoDb").context_type is DemoDb

    def test_list_records(self, site, ctx):
        result = site.list_records(
            ctx,
            DemoDb,
            Person,
            ListRequest(
                filters=[FilterSpec(property_name="gender", operator=FilterOperator.EQUALS, value="FEMALE")],
                sorts=[SortSpec(property_name="age")],
                page=PageSpec(page_number=1, page_size=10),
            ),
        )
        assert [p.name for p in result.records] == ["Ann", "eve"]
        assert result.total_count == 2

    def test_list_records_by_set_name(self, site, ctx):
        assert site.list_records(ctx, "DemoDb", "Tag").total_count == 2

    def test_unknown_set(self, site, ctx):
        with pytest.raises(ConfigurationError):
            site.list_records(ctx, DemoDb, "Nope")

    def test_get_record_with_string_key(self, site, ctx):
        assert site.get_record(ctx, DemoDb, Person, "2").name == "Bob"

    def test_get_record_with_typed_key(self, site, ctx):
        assert site.get_record(ctx, DemoDb, Tag, "py").label == "Python"
        assert site.get_record(ctx, DemoDb, Person, 3).name == "Cid"

    def test_get_missing_record(self, site, ctx):
        with pytest.raises(NotFoundError):
            site.get_record(ctx, DemoDb, Person, "99")

    def test_get_record_with_bad_key(self, site, ctx):
        with pytest.raises(ValidationError) as exc_info:
            site.get_record(ctx, DemoDb, Person, "abc")
        assert exc_info.value.details["field"] == "id"

    @pytest.mark.asyncio
    async def test_list_records_async(self, site, async_session, principal):
        ctx = RequestContext(principal=principal, db=async_session)
        result = await site.list_records_async(ctx, DemoDb, Job)
        assert [j.title for j in result.records] == ["Engineer", "Designer"]


class TestAuthorization:
    def test_denied_write(self, site, ctx):
        with pytest.raises(AccessDeniedError):
            site.delete_record(ctx, DemoDb, Person, "1")

    def test_denied_before_lookup(self, site, ctx):
        # Authorization runs before the record is looked up
        with pytest.raises(AccessDeniedError):
            site.update_record(ctx, DemoDb, Person, "99", {"name": "X"})

    def test_denied_read(self, options_builder, policies, ctx):
        options = options_builder.configure_context(
            DemoDb, lambda c: c.configure_set(Tag, lambda s: s.user_can_read_if(is_admin))
        ).build()
        site = AdminSite(options, policies)
        with pytest.raises(AccessDeniedError):
            site.list_records(ctx, DemoDb, Tag)
        with pytest.raises(AccessDeniedError):
            site.get_record(ctx, DemoDb, Tag, "py")

    def test_missing_policy(self, options_builder, ctx):
        site = AdminSite(options_builder.build(), PolicyRegistry())
        with pytest.raises(PolicyNotFoundError):
            site.context_info(ctx, DemoDb)


class TestWrites:
    def test_create(self, site, admin_ctx):
        person = site.create_record(
            admin_ctx,
            DemoDb,
            Person,
            {"name": "Fay", "age": 28, "gender": Gender.FEMALE},
        )
        assert person.id == 6
        assert site.get_record(admin_ctx, DemoDb, Person, "6").name == "Fay"

    def test_create_with_supplied_key(self, site, admin_ctx):
        tag = site.create_record(admin_ctx, DemoDb, Tag, {"code": "js", "label": "JavaScript"})
        assert tag.code == "js"

    def test_create_rejects_generated_key(self, site, admin_ctx):
        with pytest.raises(ValidationError) as exc_info:
            site.create_record(admin_ctx, DemoDb, Person, {"id": 10, "name": "X", "age": 1})
        assert exc_info.value.details["field"] == "id"

    def test_create_rejects_unknown_property(self, site, admin_ctx):
        with pytest.raises(ValidationError):
            site.create_record(admin_ctx, DemoDb, Person, {"name": "X", "nickname": "x"})

    def test_create_with_relation(self, site, admin_ctx, session):
        designer = session.get(Job, 2)
        person = site.create_record(
            admin_ctx,
            DemoDb,
            Person,
            {"name": "Gus", "age": 50, "gender": Gender.MALE, "job": designer},
        )
        assert person.job_id == 2

    def test_update(self, site, admin_ctx):
        person = site.update_record(admin_ctx, DemoDb, Person, "1", {"age": 31})
        assert person.age == 31
        assert site.get_record(admin_ctx, DemoDb, Person, 1).age == 31

    def test_update_rejects_key(self, site, admin_ctx):
        with pytest.raises(ValidationError):
            site.update_record(admin_ctx, DemoDb, Tag, "py", {"code": "python"})

    def test_update_missing(self, site, admin_ctx):
        with pytest.raises(NotFoundError):
            site.update_record(admin_ctx, DemoDb, Person, "99", {"age": 1})

    def test_delete(self, site, admin_ctx):
        site.delete_record(admin_ctx, DemoDb, Tag, "sql")
        with pytest.raises(NotFoundError):
            site.get_record(admin_ctx, DemoDb, Tag, "sql")

    def test_delete_missing(self, site, admin_ctx):
        with pytest.raises(NotFoundError):
            site.delete_record(admin_ctx, DemoDb, Tag, "nope")

    def test_writes_only_flush(self, site, admin_ctx, session):
        site.update_record(admin_ctx, DemoDb, Person, "1", {"age": 99})
        session.rollback()
        assert site.get_record(admin_ctx, DemoDb, Person, 1).age == 30


class TestValidate:
    def test_validate_configured_site(self, site):
        site.validate()

    def test_validate_detects_unrenderable_property(self, options_builder, policies):
        site = AdminSite(options_builder.build(), policies)
        with pytest.raises(ConfigurationError):
            site.validate()

    def test_resolver_is_cached(self, site):
        assert site.resolver(DemoDb) is site.resolver("DemoDb")


class TestLogContext:
    @pytest.fixture
    def records(self, caplog_ormadmin):
        context_filter = ContextFilter()
        caplog_ormadmin.handler.addFilter(context_filter)
        # caplog swaps its record list per test phase; read it lazily at use time
        class _Records:
            def __iter__(self):
                return iter(caplog_ormadmin.records)

        yield _Records()
        caplog_ormadmin.handler.removeFilter(context_filter)

    def test_write_logs_carry_request_fields(self, site, admin_ctx, records):
        site.update_record(admin_ctx, DemoDb, Person, "1", {"age": 31})
        [record] = [r for r in records if r.getMessage() == "Record updated"]
        assert record.user_id == "admin-1"
        assert record.context_name == "DemoDb"
        assert record.set_name == "Person"
        assert record.action == "Edit"

    def test_denials_carry_request_fields(self, site, ctx, records):
        with pytest.raises(AccessDeniedError):
            site.delete_record(ctx, DemoDb, Person, "1")
        [record] = [r for r in records if r.getMessage() == "Access denied"]
        assert record.set_name == "Person"
        assert record.action == "Delete"

    def test_query_logs_carry_request_fields(self, site, ctx, records):
        site.list_records(ctx, DemoDb, Tag)
        [record] = [r for r in records if r.getMessage() == "List query executed"]
        assert record.set_name == "Tag"
        assert record.action == "Read"
        assert record.user_id == "user-1"

    def test_context_is_cleared_afterwards(self, site, ctx):
        site.context_info(ctx, DemoDb)
        assert get_log_context() == {}
