# barbershop/store.py

"""
Storage capability used by the booking logic.

The booking code only needs get / list / insert / update / delete, so it
depends on the ``Store`` protocol rather than on a session. ``SqlStore`` is the
SQLModel-backed implementation used by the API.
"""

from typing import Any, Optional, Protocol, Sequence, Type, TypeVar

from sqlalchemy import update as sql_update
from sqlmodel import SQLModel, Session, select

ModelT = TypeVar("ModelT", bound=SQLModel)


class Store(Protocol):
    def get(self, model: Type[ModelT], ident: int) -> Optional[ModelT]: ...

    def list(self, model: Type[ModelT], *criteria: Any, order_by: Any = None) -> Sequence[ModelT]: ...

    def insert(self, obj: ModelT) -> ModelT: ...

    def update(self, obj: ModelT, changes: dict) -> ModelT: ...

    def update_where(self, model: Type[SQLModel], values: dict, *criteria: Any) -> int: ...

    def delete(self, obj: SQLModel) -> None: ...


class SqlStore:
    """Store over a SQLModel session. Every write commits immediately."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, model: Type[ModelT], ident: int) -> Optional[ModelT]:
        return self.session.get(model, ident)

    def list(self, model: Type[ModelT], *criteria: Any, order_by: Any = None) -> Sequence[ModelT]:
        stmt = select(model)
        if criteria:
            stmt = stmt.where(*criteria)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        return self.session.exec(stmt).all()

    def insert(self, obj: ModelT) -> ModelT:
        self.session.add(obj)
        self.session.commit()
        self.session.refresh(obj)  # fills obj.id
        return obj

    def update(self, obj: ModelT, changes: dict) -> ModelT:
        for key, value in changes.items():
            setattr(obj, key, value)
        self.session.add(obj)
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def delete(self, obj: SQLModel) -> None:
        self.session.delete(obj)
        self.session.commit()

    def update_where(self, model: Type[SQLModel], values: dict, *criteria: Any) -> int:
        """Single UPDATE statement; values may be column expressions such as ``col + 1``."""
        stmt = sql_update(model).where(*criteria).values(**values).execution_options(synchronize_session=False)
        result = self.session.execute(stmt)
        self.session.commit()
        return result.rowcount
