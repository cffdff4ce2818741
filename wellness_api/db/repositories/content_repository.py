import uuid
from typing import Any, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from wellness_api.core.errors import DuplicateSlugError, ValidationError
from wellness_api.db.repositories.base import BaseRepository, ModelT


class ContentRepository(BaseRepository[ModelT]):
    """Repository for slugged content tables"""

    async def get_by_slug(self, slug: str, **filters: Any) -> Optional[ModelT]:
        query = select(self.model).where(self.model.slug == slug)
        for name, value in filters.items():
            query = query.where(getattr(self.model, name) == value)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def slug_exists(self, slug: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        """Whether another document already uses ``slug``"""
        query = select(self.model.id).where(self.model.slug == slug)
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.first() is not None

    async def children(self, foreign_key: str, parent_id: uuid.UUID, order_by: Sequence[Any] = ()) -> List[ModelT]:
        query = select(self.model).where(getattr(self.model, foreign_key) == parent_id)
        result = await self.session.execute(query.order_by(*(order_by or [self.model.created_at.asc()])))
        return list(result.scalars().all())

    async def distinct(self, column: str) -> List[Any]:
        """Distinct non-empty values of a column, sorted"""
        attribute = getattr(self.model, column)
        result = await self.session.execute(
            select(attribute).where(attribute.is_not(None)).distinct().order_by(attribute)
        )
        return [value for value in result.scalars().all() if value != ""]

    async def add(self, document: ModelT, label: str = "document") -> ModelT:
        """Insert or update a document.

        Raises:
            DuplicateSlugError: the slug was taken between resolution and write.
            ValidationError: another unique constraint was violated.
        """
        slug, document_id = document.slug, document.id
        try:
            return await super().add(document)
        except IntegrityError as e:
            await self.session.rollback()
            if await self.slug_exists(slug, document_id):
                raise DuplicateSlugError(slug, label) from e
            raise ValidationError(f"This {label} conflicts with an existing record.") from e
