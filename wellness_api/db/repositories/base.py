import uuid
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from wellness_api.db.models.base import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


class BaseRepository(Generic[ModelT]):
    """Data access shared by every table keyed by a UUID ``id``"""

    def __init__(self, session: AsyncSession, model: Type[ModelT]):
        self.session = session
        self.model = model

    async def get_by_id(self, document_id: uuid.UUID) -> Optional[ModelT]:
        result = await self.session.execute(select(self.model).where(self.model.id == document_id))
        return result.scalar_one_or_none()

    async def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        search: Optional[str] = None,
        search_fields: Sequence[str] = (),
        offset: int = 0,
        limit: Optional[int] = None,
        order_by: Optional[Sequence[Any]] = None,
    ) -> Tuple[List[ModelT], int]:
        """Filtered, searched and paginated listing plus the unpaginated total"""
        query = select(self.model)

        for name, value in (filters or {}).items():
            if value is not None:
                query = query.where(getattr(self.model, name) == value)

        if search and search_fields:
            query = query.where(or_(*(getattr(self.model, name).ilike(f"%{search}%") for name in search_fields)))

        total = (await self.session.execute(select(func.count()).select_from(query.subquery()))).scalar_one()

        query = query.order_by(*(order_by or [self.model.created_at.desc()]))
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def add(self, document: ModelT) -> ModelT:
        """Insert or update a document and commit"""
        self.session.add(document)
        await self.session.commit()
        await self.session.refresh(document)
        return document

    async def delete(self, *documents: ModelT) -> None:
        """Delete documents in the given order within a single commit"""
        for document in documents:
            await self.session.delete(document)
            await self.session.flush()
        await self.session.commit()
