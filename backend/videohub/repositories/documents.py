"""
Persistence collaborator.

A thin document-style repository over a SQLAlchemy session. Filters are
equality mappings of column name to value. ``conditional_update`` and
``conditional_delete`` are single UPDATE/DELETE ... WHERE ... RETURNING
statements, which makes them the atomic compare-and-swap primitive the
services rely on instead of in-process locks.
"""
from typing import Any, Generic, Mapping, Optional, Sequence, Type, TypeVar
from sqlalchemy import and_, delete, func, select, update
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

ModelT = TypeVar("ModelT")

Filter = Mapping[str, Any]


class Repository(Generic[ModelT]):
    def __init__(self, db: Session, model: Type[ModelT]):
        self.db = db
        self.model = model

    def _where(self, filter: Filter) -> ColumnElement:
        clauses = []
        for name, value in filter.items():
            column = getattr(self.model, name)
            clauses.append(column.is_(None) if value is None else column == value)
        return and_(*clauses)

    def create(self, **values) -> ModelT:
        """Insert a new row and flush so constraint violations surface here."""
        instance = self.model(**values)
        self.db.add(instance)
        self.db.flush()
        return instance

    def find_by_id(self, id: Any) -> Optional[ModelT]:
        return self.db.get(self.model, id)

    def find_one(self, filter: Filter) -> Optional[ModelT]:
        return self.db.scalars(select(self.model).where(self._where(filter)).limit(1)).first()

    def find_all(self, filter: Filter, order_by: Sequence[Any] = ()) -> list[ModelT]:
        stmt = select(self.model).where(self._where(filter))
        if order_by:
            stmt = stmt.order_by(*order_by)
        return list(self.db.scalars(stmt))

    def conditional_update(self, filter: Filter, patch: Mapping[str, Any]) -> Optional[ModelT]:
        """Apply ``patch`` to the row matching ``filter``; None when nothing matched."""
        stmt = (
            update(self.model)
            .where(self._where(filter))
            .values(**patch)
            .returning(self.model)
        )
        updated = self.db.scalars(stmt).first()
        if updated is not None:
            # Identity map may hold a stale copy loaded earlier in this session
            self.db.refresh(updated)
        return updated

    def conditional_delete(self, filter: Filter) -> Optional[ModelT]:
        """Delete the row matching ``filter`` and return it; None when nothing matched."""
        matched = self.find_one(filter)
        if matched is None:
            return None
        stmt = (
            delete(self.model)
            .where(self._where(filter))
            .returning(self.model.id)
            .execution_options(synchronize_session=False)
        )
        deleted_id = self.db.execute(stmt).scalar()
        if deleted_id is None:
            # Lost a race with a concurrent delete
            return None
        self.db.expunge(matched)
        return matched

    def count(self, filter: Filter) -> int:
        stmt = select(func.count()).select_from(self.model).where(self._where(filter))
        return self.db.execute(stmt).scalar_one()

    def page(
        self,
        filter: Filter,
        sort_field: str,
        descending: bool,
        skip: int,
        limit: int,
    ) -> list[ModelT]:
        """Fetch one slice ordered by ``sort_field`` with id ascending as the tie-breaker."""
        column = getattr(self.model, sort_field)
        stmt = (
            select(self.model)
            .where(self._where(filter))
            .order_by(column.desc() if descending else column.asc(), self.model.id.asc())
            .offset(skip)
            .limit(limit)
        )
        return list(self.db.scalars(stmt))
