"""
Base Repository
Session-bound get/list/save/delete access to one model
"""

from typing import Generic, List, Optional, Type, TypeVar
from sqlalchemy.orm import Session

from procurement.config.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository over a SQLAlchemy session

    ``save`` only flushes; the caller commits once per service operation.
    """

    model: Type[ModelType]

    def __init__(self, db: Session):
        self.db = db

    def get(self, entity_id: int) -> Optional[ModelType]:
        return self.db.get(self.model, entity_id)

    def list(self) -> List[ModelType]:
        return self.db.query(self.model).order_by(self.model.id.desc()).all()

    def save(self, entity: ModelType) -> ModelType:
        self.db.add(entity)
        self.db.flush()
        return entity

    def delete(self, entity: ModelType) -> None:
        self.db.delete(entity)
        self.db.flush()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
