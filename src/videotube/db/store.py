import logging
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from videotube.db.models import utc_now
from videotube.errors import StoreError

logger = logging.getLogger("store")

ModelT = TypeVar("ModelT", bound=SQLModel)


class ResourceStore(Generic[ModelT]):
    """CRUD-by-filter access to one table.

    Listings are always newest first. Database failures are rolled back,
    logged and raised as StoreError.
    """

    def __init__(self, session: Session, model: Type[ModelT]):
        self.session = session
        self.model = model

    def _fail(self, operation: str, exc: Exception):
        logger.error(f"Database error in {self.model.__name__}.{operation}: {exc}")
        self.session.rollback()
        raise StoreError() from exc

    def create(self, **fields: Any) -> ModelT:
        obj = self.model(**fields)
        try:
            self.session.add(obj)
            self.session.commit()
            self.session.refresh(obj)
        except SQLAlchemyError as e:
            self._fail("create", e)
        return obj

    def insert_if_absent(self, **fields: Any) -> Optional[ModelT]:
        """Create a row, or return None when a unique constraint says it already exists."""
        obj = self.model(**fields)
        try:
            self.session.add(obj)
            self.session.commit()
            self.session.refresh(obj)
        except IntegrityError:
            self.session.rollback()
            return None
        except SQLAlchemyError as e:
            self._fail("insert_if_absent", e)
        return obj

    def find_by_id(self, resource_id: str) -> Optional[ModelT]:
        try:
            return self.session.get(self.model, resource_id)
        except SQLAlchemyError as e:
            self._fail("find_by_id", e)

    def find_one(self, *filters) -> Optional[ModelT]:
        try:
            return self.session.exec(select(self.model).where(*filters)).first()
        except SQLAlchemyError as e:
            self._fail("find_one", e)

    def find(self, *filters, order_by=None, skip: int = 0, limit: Optional[int] = None) -> List[ModelT]:
        query = select(self.model)
        if filters:
            query = query.where(*filters)
        if order_by is None:
            order_by = self.model.created_at.desc()
        query = query.order_by(order_by).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        try:
            return list(self.session.exec(query).all())
        except SQLAlchemyError as e:
            self._fail("find", e)

    def count(self, *filters) -> int:
        query = select(func.count()).select_from(self.model)
        if filters:
            query = query.where(*filters)
        try:
            return self.session.exec(query).one()
        except SQLAlchemyError as e:
            self._fail("count", e)

    def exists(self, *filters) -> bool:
        return self.find_one(*filters) is not None

    def update(self, resource_id: str, patch: dict) -> Optional[ModelT]:
        """Apply ``patch`` and return the refreshed row, or None if it is gone."""
        obj = self.find_by_id(resource_id)
        if obj is None:
            return None
        for key, value in patch.items():
            setattr(obj, key, value)
        if hasattr(obj, "updated_at"):
            obj.updated_at = utc_now()
        try:
            self.session.add(obj)
            self.session.commit()
            self.session.refresh(obj)
        except SQLAlchemyError as e:
            self._fail("update", e)
        return obj

    def delete(self, resource_id: str) -> Optional[ModelT]:
        obj = self.find_by_id(resource_id)
        if obj is None:
            return None
        try:
            self.session.delete(obj)
            self.session.commit()
        except SQLAlchemyError as e:
            self._fail("delete", e)
        return obj

    def delete_where(self, *filters) -> int:
        """Delete every matching row in one statement; returns the number removed."""
        try:
            result = self.session.execute(delete(self.model).where(*filters))
            self.session.commit()
        except SQLAlchemyError as e:
            self._fail("delete_where", e)
        return result.rowcount
