"""
List query composition and execution.

Combines filters, sort keys, pagination and eager loading of displayable
relations into SQLAlchemy statements, then runs them against a sync or
async session.
"""

from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session, joinedload, selectinload

from ormadmin.core.dsl import ListRequest, PageResult, PageSpec
from ormadmin.logging import get_logger
from ormadmin.query.introspection import RecordIntrospector
from ormadmin.query.ordering import OrderingBuilder
from ormadmin.query.predicates import PredicateBuilder

logger = get_logger(__name__)


class QueryComposer:
    """
    Builds and executes paged list queries.

    The count and the page are two separate round trips against the same
    filter. They are not run in one transaction, so under concurrent
    writes they may disagree slightly.
    """

    def __init__(
        self,
        introspector: RecordIntrospector | None = None,
        predicates: PredicateBuilder | None = None,
        orderings: OrderingBuilder | None = None,
    ) -> None:
        self.introspector = introspector or RecordIntrospector()
        self.predicates = predicates or PredicateBuilder(self.introspector)
        self.orderings = orderings or OrderingBuilder(self.introspector)

    # ---------------------------------------------------------------------
    # Statement building
    # ---------------------------------------------------------------------

    def filtered(self, record_type: type, request: ListRequest) -> Select:
        """The set's base statement with every applicable filter."""
        return self.predicates.apply(select(record_type), record_type, request.filters)

    def count_statement(self, filtered: Select) -> Select:
        """Count over a filtered statement, ignoring order and pagination."""
        inner = filtered.order_by(None).limit(None).offset(None)
        return select(func.count()).select_from(inner.subquery())

    def compose(
        self,
        record_type: type,
        request: ListRequest,
        split_queries: bool = False,
    ) -> Select:
        """
        Build the statement for one page.

        Filters are applied before ordering, the primary key is appended as
        the last ordering key so page boundaries are deterministic, and
        single-valued relations are eagerly loaded so a list can show the
        related record without one query per row.
        """
        stmt = self.filtered(record_type, request)
        stmt = self.orderings.apply(stmt, record_type, request.sorts)
        stmt = stmt.order_by(self._key_column(record_type).asc())
        stmt = self.with_displayable_relations(stmt, record_type, split_queries)
        return self.with_pagination(stmt, request.page)

    def with_displayable_relations(
        self,
        stmt: Select,
        record_type: type,
        split_queries: bool = False,
    ) -> Select:
        """
        Eagerly load every displayable relation.

        Joined loading by default; split mode issues one extra SELECT per
        relation instead of widening the main query.
        """
        loader = selectinload if split_queries else joinedload
        for relation in self.introspector.displayable_relations(record_type):
            stmt = stmt.options(loader(getattr(record_type, relation.name)))
        return stmt

    def with_pagination(self, stmt: Select, page: PageSpec) -> Select:
        """Apply skip/take; non-positive page values return everything."""
        if not page.is_paginated:
            return stmt
        return stmt.offset(page.offset).limit(page.page_size)

    # ---------------------------------------------------------------------
    # Execution
    # ---------------------------------------------------------------------

    def page(
        self,
        session: Session,
        record_type: type,
        request: ListRequest | None = None,
        split_queries: bool = False,
    ) -> PageResult:
        """Execute a list request on a sync session."""
        request = request or ListRequest()
        filtered = self.filtered(record_type, request)

        total_count = session.execute(self.count_statement(filtered)).scalar_one()
        result = session.execute(self.compose(record_type, request, split_queries))
        records = list(result.scalars().unique().all())

        return self._to_page(record_type, request, records, total_count, split_queries)

    async def page_async(
        self,
        session: AsyncSession,
        record_type: type,
        request: ListRequest | None = None,
        split_queries: bool = False,
    ) -> PageResult:
        """Execute a list request on an async session."""
        request = request or ListRequest()
        filtered = self.filtered(record_type, request)

        total_count = (await session.execute(self.count_statement(filtered))).scalar_one()
        result = await session.execute(self.compose(record_type, request, split_queries))
        records = list(result.scalars().unique().all())

        return self._to_page(record_type, request, records, total_count, split_queries)

    def _to_page(
        self,
        record_type: type,
        request: ListRequest,
        records: list[Any],
        total_count: int,
        split_queries: bool,
    ) -> PageResult:
        logger.debug(
            "List query executed",
            record_type=record_type.__name__,
            filter_count=len(request.filters),
            sort_count=len(request.sorts),
            page_number=request.page.page_number,
            page_size=request.page.page_size,
            split_queries=split_queries,
            returned=len(records),
            total_count=total_count,
        )
        return PageResult(
            records=records,
            total_count=total_count,
            page_number=request.page.page_number,
        )

    def _key_column(self, record_type: type) -> Any:
        return getattr(record_type, self.introspector.primary_key(record_type).name)
