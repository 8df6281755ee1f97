"""
Base Repository
Common CRUD operations for all entities
"""

from typing import Any, Dict, Generic, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..connection import Base

# Type variables for generic repository
ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class RepositoryError(Exception):
    """Base repository error"""
    pass


class ConflictError(RepositoryError):
    """Data conflict error"""
    pass


def _as_dict(obj_in: Union[BaseModel, Mapping[str, Any]], exclude_unset: bool = False) -> Dict[str, Any]:
    if isinstance(obj_in, BaseModel):
        return obj_in.model_dump(exclude_unset=exclude_unset)
    return dict(obj_in)


class BaseRepository(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Base repository with common CRUD operations"""

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    async def create(self, obj_in: Union[CreateSchemaType, Mapping[str, Any]], **kwargs) -> ModelType:
        """Create a new entity; columns the model does not define are ignored"""
        obj_data = _as_dict(obj_in)
        obj_data.update(kwargs)

        columns = self.model.__mapper__.attrs.keys()
        db_obj = self.model(**{k: v for k, v in obj_data.items() if k in columns})

        try:
            self.session.add(db_obj)
            await self.session.flush()
            await self.session.refresh(db_obj)
            return db_obj

        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError(f"Data conflict: {str(e)}")

    async def get(self, id: str) -> Optional[ModelType]:
        """Get entity by ID"""
        try:
            result = await self.session.execute(
                select(self.model).where(self.model.id == id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error getting entity: {str(e)}")

    async def get_by_field(self, field: str, value: Any) -> Optional[ModelType]:
        """Get the first entity whose column equals value"""
        try:
            column = getattr(self.model, field)
            result = await self.session.execute(
                select(self.model).where(column == value).limit(1)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error getting entity: {str(e)}")

    async def get_multi(
        self,
        limit: int = 50,
        skip: int = 0,
        filters: Optional[Dict[str, Any]] = None
    ) -> List[ModelType]:
        """Get entities newest first with optional equality filters"""
        try:
            query = select(self.model)

            if filters:
                for field, value in filters.items():
                    if hasattr(self.model, field):
                        query = query.where(getattr(self.model, field) == value)

            if hasattr(self.model, 'created_at'):
                query = query.order_by(self.model.created_at.desc())

            query = query.offset(skip).limit(limit)

            result = await self.session.execute(query)
            return list(result.scalars().all())

        except SQLAlchemyError as e:
            raise RepositoryError(f"Error getting entities: {str(e)}")

    async def update(
        self,
        id: str,
        obj_in: Union[UpdateSchemaType, Mapping[str, Any]]
    ) -> Optional[ModelType]:
        """Partially update entity by ID; returns None when the ID does not exist"""
        db_obj = await self.get(id)
        if db_obj is None:
            return None

        update_data = _as_dict(obj_in, exclude_unset=True)

        try:
            for field, value in update_data.items():
                if hasattr(db_obj, field) and field != "id":
                    setattr(db_obj, field, value)

            await self.session.flush()
            await self.session.refresh(db_obj)
            return db_obj

        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError(f"Data conflict: {str(e)}")
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise RepositoryError(f"Error updating entity: {str(e)}")
