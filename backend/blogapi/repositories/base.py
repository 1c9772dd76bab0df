"""Generic repository base and query utilities for SQLAlchemy 2.x.

Persistence-only concerns shared by all repositories:

- Pagination and whitelisted sorting (primary key appended as tiebreaker).
- Soft-delete awareness: models carrying ``deleted_at`` are filtered out of
  every read and ``delete()`` stamps the column instead of removing the row.
- Eager-loading hooks to prevent N+1 issues.
- Safe update helpers with per-repository updatable-field whitelists.

Repositories never commit or roll back; the Unit of Work owns transactions.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from math import ceil
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import ColumnElement, Select, and_, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from blogapi.core.extensions import db
from blogapi.models.base import utcnow

E = TypeVar("E")  # SQLAlchemy mapped entity type


# ------------------------------- Pagination ----------------------------------


@dataclass(slots=True)
class Pagination:
    """Pagination input parameters.

    :param page: 1-based page number.
    :type page: int
    :param limit: Page size.
    :type limit: int
    :param sort: Public sort tokens (e.g., ``["-created_at", "title"]``).
    :type sort: list[str]
    """

    page: int
    limit: int
    sort: list[str]


@dataclass(slots=True)
class Page(Generic[E]):
    """Result page with metadata."""

    items: Sequence[E]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return ceil(self.total / self.limit)


# ----------------------------- Sorting utilities -----------------------------


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """Parse public sort tokens into ``(field, is_desc)`` tuples.

    :param raw: Public tokens like ``["-created_at", "title"]``.
    :type raw: Iterable[str]
    :returns: List of ``(field_name, is_desc)`` tokens.
    :rtype: list[tuple[str, bool]]
    """
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        is_desc = token.startswith("-")
        field = (token[1:] if is_desc else token).strip()
        if field:
            parsed.append((field, is_desc))
    return parsed


def apply_sorting(
    stmt: Select[Any],
    sortable_fields: Mapping[str, InstrumentedAttribute[Any]],
    tokens: Iterable[str],
    *,
    pk_attr: InstrumentedAttribute[Any] | None,
) -> Select[Any]:
    """Apply safe ``ORDER BY`` clauses based on a whitelist mapping.

    Unknown sort tokens are ignored silently.

    :param stmt: Base selectable.
    :param sortable_fields: Public field → SQLAlchemy attribute mapping.
    :param tokens: Public sort tokens.
    :param pk_attr: Primary-key attribute used as a tiebreaker.
    :returns: Modified select with ``ORDER BY`` clauses.
    :rtype: :class:`sqlalchemy.sql.Select`
    """
    orders: list[Any] = []
    for field, is_desc in parse_sort_tokens(tokens):
        col = sortable_fields.get(field)
        if isinstance(col, InstrumentedAttribute):
            orders.append(col.desc() if is_desc else col.asc())

    if orders:
        stmt = stmt.order_by(*orders)

    if pk_attr is not None:
        stmt = stmt.order_by(pk_attr.asc())

    return stmt


# --------------------------- Pagination execution ----------------------------


def paginate_select(
    session: Session,
    stmt: Select[Any],
    *,
    page: int,
    limit: int,
    with_total: bool = True,
) -> tuple[list[Any], int]:
    """Execute a select with pagination and an optional total count.

    The statement's ``ORDER BY`` is stripped for the ``COUNT``.

    :param session: Active SQLAlchemy session.
    :param stmt: Base select to paginate (already filtered/sorted).
    :param page: 1-based page number (clamped to ``>= 1``).
    :param limit: Page size (clamped to ``>= 1``).
    :param with_total: Whether to compute the total row count.
    :returns: ``(items, total)``; ``total`` is 0 when ``with_total=False``.
    :rtype: tuple[list[Any], int]
    """
    page = max(int(page), 1)
    limit = max(int(limit), 1)

    total = 0
    if with_total:
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = int(session.execute(count_stmt).scalar_one())

    sliced = stmt.limit(limit).offset((page - 1) * limit)
    items = list(session.execute(sliced).unique().scalars().all())
    return items, total


# ------------------------------ Base repository ------------------------------


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define ``model``. They MAY override ``_sortable_fields``,
    ``_default_eagerload``, ``_filterable_fields`` and ``_updatable_fields``.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Return the injected session, else the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _default_eagerload(self, stmt: Select[Any]) -> Select[Any]:
        return stmt

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _updatable_fields(self) -> set[str]:
        return set()

    @property
    def soft_deletes(self) -> bool:
        """Whether the model carries a ``deleted_at`` column."""
        return hasattr(self.model, "deleted_at")

    def _soft_delete(self, instance: E) -> bool:
        """Stamp ``deleted_at`` when supported. Returns ``True`` if handled."""
        if not self.soft_deletes:
            return False
        instance.deleted_at = utcnow()  # type: ignore[attr-defined]
        return True

    # ------------------------------ Internals --------------------------------

    def _live(self, stmt: Select[Any]) -> Select[Any]:
        """Hide soft-deleted rows from ``stmt``."""
        if self.soft_deletes:
            stmt = stmt.where(self.model.deleted_at.is_(None))  # type: ignore[attr-defined]
        return stmt

    def _select(self) -> Select[Any]:
        return self._live(select(self.model))

    def _apply_equality_filters(
        self,
        stmt: Select[Any],
        filters: Mapping[str, Any] | None,
    ) -> Select[Any]:
        """Apply whitelisted equality filters; unknown keys and ``None`` are ignored."""
        if not filters:
            return stmt
        allowed = self._filterable_fields()
        clauses: list[Any] = []
        for k, v in filters.items():
            col = allowed.get(k)
            if v is not None and isinstance(col, InstrumentedAttribute):
                clauses.append(col == v)
        return stmt.where(and_(*clauses)) if clauses else stmt

    def _sanitize_update_fields(
        self,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
    ) -> dict[str, Any]:
        """Return a dict with only whitelisted update keys.

        :raises ValueError: If ``strict`` and unknown keys are present.
        """
        allowed = self._updatable_fields()
        if not allowed:
            if fields and strict:
                raise ValueError("No updatable fields configured for this repository.")
            return {}

        unknown = [k for k in fields if k not in allowed]
        if unknown and strict:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")

        return {k: v for k, v in fields.items() if k in allowed}

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush so defaults and constraints apply.

        :param instance: New entity instance.
        :type instance: E
        :returns: The same instance after ``flush()``.
        :rtype: E
        """
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a live entity by primary key.

        :param entity_id: Primary-key value.
        :returns: Entity or ``None`` (also when soft-deleted).
        :rtype: E | None
        """
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.get requires a detectable PK attribute.")
        if entity_id is None:
            return None
        stmt = self._default_eagerload(self._select().where(pk_attr == str(entity_id)))
        return cast(E | None, self.session.execute(stmt).unique().scalars().first())

    def get_for_update(self, entity_id: Any) -> E | None:
        """Retrieve a live entity with ``FOR UPDATE`` (ignored by SQLite)."""
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.get_for_update requires a detectable PK.")
        stmt = self._select().where(pk_attr == str(entity_id)).with_for_update()
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def delete(self, instance: E) -> None:
        """Delete an entity (soft when supported) and flush."""
        if not self._soft_delete(instance):
            self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()

    # ----------------------------- Safe updates -------------------------------

    def assign_updates(
        self,
        instance: E,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
        flush: bool = True,
    ) -> E:
        """Assign only whitelisted keys to ``instance`` and optionally flush.

        Assignment goes through ``setattr`` so ``@validates`` hooks run.

        :param instance: Entity to mutate.
        :param fields: Public mapping of fields to assign.
        :param strict: Raise on unknown keys.
        :param flush: Call ``session.flush()`` after assignment.
        :returns: The mutated instance.
        :raises ValueError: If ``strict`` and unknown keys are present.
        """
        updates = self._sanitize_update_fields(fields, strict=strict)
        for k, v in updates.items():
            setattr(instance, k, v)
        if flush:
            self.flush()
        return instance

    # ------------------------------- Listing ---------------------------------

    def list(
        self,
        *,
        filters: Mapping[str, Any] | None = None,
        where: Iterable[ColumnElement[bool]] = (),
        sort: Iterable[str] | None = None,
        limit: int | None = None,
    ) -> list[E]:
        """List live entities with optional filtering and sorting."""
        stmt = self._apply_equality_filters(self._select(), filters)
        for clause in where:
            stmt = stmt.where(clause)
        stmt = self._default_eagerload(stmt)
        stmt = apply_sorting(stmt, self._sortable_fields(), sort or [], pk_attr=self._pk_attr())
        if limit is not None:
            stmt = stmt.limit(int(limit))
        return cast(list[E], list(self.session.execute(stmt).unique().scalars().all()))

    def paginate(
        self,
        pagination: Pagination,
        *,
        filters: Mapping[str, Any] | None = None,
        where: Iterable[ColumnElement[bool]] = (),
        with_total: bool = True,
    ) -> Page[E]:
        """Paginate live entities with stable sorting and optional total.

        :param pagination: Pagination parameters.
        :type pagination: Pagination
        :param filters: Whitelisted equality filters (public keys).
        :type filters: Mapping[str, Any] | None
        :param where: Extra SQL criteria built by the subclass.
        :type where: Iterable[ColumnElement[bool]]
        :param with_total: Whether to compute total rows.
        :type with_total: bool
        :returns: :class:`Page` with items and metadata.
        :rtype: Page[E]
        """
        stmt = self._apply_equality_filters(self._select(), filters)
        for clause in where:
            stmt = stmt.where(clause)
        stmt = self._default_eagerload(stmt)
        stmt = apply_sorting(
            stmt, self._sortable_fields(), pagination.sort, pk_attr=self._pk_attr()
        )

        raw_items, total = paginate_select(
            self.session,
            stmt,
            page=pagination.page,
            limit=pagination.limit,
            with_total=with_total,
        )
        return Page(
            items=cast(list[E], raw_items),
            total=total,
            page=pagination.page,
            limit=pagination.limit,
        )
