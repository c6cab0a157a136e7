"""
Admin site facade.

The guarded entry points a UI calls. Every method first requires the
synthesized policy identity for its action, then reads or writes through
the request's SQLAlchemy session. Writes only flush; committing is the
caller's business.
"""

from contextlib import AbstractContextManager
from typing import Any

from sqlalchemy import select

from ormadmin.capabilities.resolver import CapabilityResolver
from ormadmin.config.discovery import ContextInfo, SetInfo
from ormadmin.config.models import AdminOptions
from ormadmin.core.context import RequestContext
from ormadmin.core.dsl import ListRequest, PageResult
from ormadmin.core.errors import ConfigurationError, NotFoundError, ValidationError
from ormadmin.logging import LogContext, get_logger, with_log_context
from ormadmin.policy.identity import AdminAction, policy_identity
from ormadmin.policy.registry import PolicyRegistry
from ormadmin.query.composer import QueryComposer
from ormadmin.query.introspection import RecordIntrospector
from ormadmin.query.predicates import parse_literal

logger = get_logger(__name__)


class AdminSite:
    """Policy-guarded access to the sets of every configured context."""

    def __init__(
        self,
        options: AdminOptions,
        policies: PolicyRegistry,
        introspector: RecordIntrospector | None = None,
        composer: QueryComposer | None = None,
    ) -> None:
        self.options = options
        self.policies = policies
        self.introspector = introspector or RecordIntrospector()
        self.composer = composer or QueryComposer(self.introspector)
        self._resolvers: dict[str, CapabilityResolver] = {}

    def resolver(self, context: type | str) -> CapabilityResolver:
        """Capability resolver of one context (cached)."""
        options = self.options.get_context(context)
        resolver = self._resolvers.get(options.name)
        if resolver is None:
            resolver = CapabilityResolver(options, self.introspector)
            self._resolvers[options.name] = resolver
        return resolver

    def validate(self) -> None:
        """
        Startup check of every discovered set of every context.

        Raises:
            ConfigurationError: If a property cannot be rendered
        """
        for info in self.options.discovered:
            self.resolver(info.name).validate_all(info.record_types())

    # ---------------------------------------------------------------------
    # Reads
    # ---------------------------------------------------------------------

    def context_info(self, ctx: RequestContext, context: type | str) -> ContextInfo:
        """The context's sets, for its info page."""
        info = self.options.get_context_info(context)
        with self._log_scope(ctx, info, AdminAction.READ_CONTEXT_INFO):
            self._require(ctx, info, AdminAction.READ_CONTEXT_INFO)
            return info

    def list_records(
        self,
        ctx: RequestContext,
        context: type | str,
        record_type: type | str,
        request: ListRequest | None = None,
    ) -> PageResult:
        info, set_info = self._resolve_set(context, record_type)
        with self._log_scope(ctx, info, AdminAction.READ_RECORDS, set_info):
            self._require(ctx, info, AdminAction.READ_RECORDS, set_info)
            return self.composer.page(
                ctx.db,
                set_info.record_type,
                request,
                split_queries=self._split_queries(info),
            )

    async def list_records_async(
        self,
        ctx: RequestContext,
        context: type | str,
        record_type: type | str,
        request: ListRequest | None = None,
    ) -> PageResult:
        info, set_info = self._resolve_set(context, record_type)
        with self._log_scope(ctx, info, AdminAction.READ_RECORDS, set_info):
            self._require(ctx, info, AdminAction.READ_RECORDS, set_info)
            return await self.composer.page_async(
                ctx.db,
                set_info.record_type,
                request,
                split_queries=self._split_queries(info),
            )

    def get_record(
        self,
        ctx: RequestContext,
        context: type | str,
        record_type: type | str,
        key: Any,
    ) -> Any:
        """
        Load one record by primary key.

        Raises:
            ValidationError: If a string key does not parse into the key type
            NotFoundError: If no record has the key
        """
        info, set_info = self._resolve_set(context, record_type)
        with self._log_scope(ctx, info, AdminAction.READ_RECORDS, set_info):
            self._require(ctx, info, AdminAction.READ_RECORDS, set_info)
            return self._load(ctx, set_info.record_type, key)

    # ---------------------------------------------------------------------
    # Writes
    # ---------------------------------------------------------------------

    def create_record(
        self,
        ctx: RequestContext,
        context: type | str,
        record_type: type | str,
        values: dict[str, Any],
    ) -> Any:
        """
        Create and flush a record.

        Raises:
            ValidationError: If values name unknown properties or a generated key
        """
        info, set_info = self._resolve_set(context, record_type)
        with self._log_scope(ctx, info, AdminAction.CREATE_RECORD, set_info):
            self._require(ctx, info, AdminAction.CREATE_RECORD, set_info)
            self._check_values(set_info.record_type, values, allow_key=True)

            record = set_info.record_type(**values)
            ctx.db.add(record)
            ctx.db.flush()

            logger.info("Record created", key=self._key_of(record))
            return record

    def update_record(
        self,
        ctx: RequestContext,
        context: type | str,
        record_type: type | str,
        key: Any,
        values: dict[str, Any],
    ) -> Any:
        """
        Apply values to an existing record and flush.

        Raises:
            NotFoundError: If no record has the key
            ValidationError: If values name unknown properties or the key
        """
        info, set_info = self._resolve_set(context, record_type)
        with self._log_scope(ctx, info, AdminAction.EDIT_RECORD, set_info):
            self._require(ctx, info, AdminAction.EDIT_RECORD, set_info)
            self._check_values(set_info.record_type, values, allow_key=False)

            record = self._load(ctx, set_info.record_type, key)
            for name, value in values.items():
                setattr(record, name, value)
            ctx.db.flush()

            logger.info("Record updated", key=self._key_of(record), changed=sorted(values))
            return record

    def delete_record(
        self,
        ctx: RequestContext,
        context: type | str,
        record_type: type | str,
        key: Any,
    ) -> None:
        """
        Delete a record and flush.

        Raises:
            NotFoundError: If no record has the key
        """
        info, set_info = self._resolve_set(context, record_type)
        with self._log_scope(ctx, info, AdminAction.DELETE_RECORD, set_info):
            self._require(ctx, info, AdminAction.DELETE_RECORD, set_info)

            record = self._load(ctx, set_info.record_type, key)
            ctx.db.delete(record)
            ctx.db.flush()

            logger.info("Record deleted", key=str(key))

    # ---------------------------------------------------------------------
    # Internals
    # ---------------------------------------------------------------------

    def _log_scope(
        self,
        ctx: RequestContext,
        info: ContextInfo,
        action: AdminAction,
        set_info: SetInfo | None = None,
    ) -> AbstractContextManager[None]:
        return with_log_context(
            LogContext.from_request_context(
                ctx,
                context_name=info.name,
                set_name=set_info.name if set_info else None,
                action=action.value,
            )
        )

    def _require(
        self,
        ctx: RequestContext,
        info: ContextInfo,
        action: AdminAction,
        set_info: SetInfo | None = None,
    ) -> None:
        identity = policy_identity(info.name, action, set_info.name if set_info else None)
        self.policies.require(identity, ctx.principal)

    def _resolve_set(
        self,
        context: type | str,
        record_type: type | str,
    ) -> tuple[ContextInfo, SetInfo]:
        info = self.options.get_context_info(context)
        set_info = info.get_set(record_type)
        if set_info is None:
            name = getattr(record_type, "__name__", str(record_type))
            raise ConfigurationError(
                f"'{name}' is not a set of context '{info.name}'",
                details={"context": info.name, "record_type": name},
            )
        return info, set_info

    def _split_queries(self, info: ContextInfo) -> bool:
        return self.options.get_context(info.name).split_queries

    def _parse_key(self, record_type: type, key: Any) -> Any:
        if not isinstance(key, str):
            return key
        descriptor = self.introspector.primary_key(record_type)
        try:
            return parse_literal(descriptor, key)
        except ValueError as e:
            raise ValidationError(
                f"Invalid key '{key}' for {record_type.__name__}",
                field=descriptor.name,
            ) from e

    def _load(self, ctx: RequestContext, record_type: type, key: Any) -> Any:
        value = self._parse_key(record_type, key)
        key_column = getattr(record_type, self.introspector.primary_key(record_type).name)
        record = ctx.db.execute(select(record_type).where(key_column == value)).scalars().first()
        if record is None:
            raise NotFoundError(record_type, key)
        return record

    def _check_values(self, record_type: type, values: dict[str, Any], allow_key: bool) -> None:
        metadata = self.introspector.describe(record_type)
        for name in values:
            descriptor = metadata.get_property(name)
            if descriptor is None:
                raise ValidationError(
                    f"Unknown property '{name}' on {record_type.__name__}",
                    field=name,
                )
            if descriptor.is_primary_key and (descriptor.is_generated_key or not allow_key):
                raise ValidationError(
                    f"Primary key '{name}' of {record_type.__name__} cannot be written",
                    field=name,
                )

    def _key_of(self, record: Any) -> Any:
        return getattr(record, self.introspector.primary_key(type(record)).name)
