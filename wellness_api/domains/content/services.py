import logging
import uuid
from typing import Any, Collection, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from wellness_api.core.errors import NotFoundError, ValidationError
from wellness_api.db.repositories.content_repository import ContentRepository
from wellness_api.domains.content.assets import AssetLifecycleManager, CleanupReport
from wellness_api.domains.content.entities import UploadedAsset
from wellness_api.domains.content.registry import ContentType, children_of, get_content_type
from wellness_api.domains.content.slugs import SlugPolicy, resolve_slug

logger = logging.getLogger(__name__)


class ContentService:
    """Create, update and delete for any slugged content collection.

    Write ordering on create and update: resolve the slug, stage assets
    (validation, then uploads), write the document, and only then delete
    objects the document stopped referencing. A failed write destroys the
    objects uploaded for it.
    """

    def __init__(
        self,
        session: AsyncSession,
        content_type: ContentType,
        asset_manager: AssetLifecycleManager,
        slug_policy: SlugPolicy = SlugPolicy.DISAMBIGUATE,
    ):
        self.session = session
        self.content_type = content_type
        self.assets = asset_manager
        self.slug_policy = slug_policy
        self.repository = ContentRepository(session, content_type.model)

    @property
    def label(self) -> str:
        return self.content_type.label

    async def get_by_id(self, document_id: uuid.UUID):
        """Get a document by id or raise NotFoundError"""
        document = await self.repository.get_by_id(document_id)
        if document is None:
            raise NotFoundError(f"{self.label} not found")
        return document

    async def get_by_slug(self, slug: str, **filters: Any):
        """Get a document by slug or raise NotFoundError"""
        document = await self.repository.get_by_slug(slug, **filters)
        if document is None:
            raise NotFoundError(f"{self.label} not found")
        return document

    async def list(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        search: Optional[str] = None,
        filters: Optional[Dict[str, Any]] = None,
    ) -> Tuple[List[Any], int]:
        limit = limit or self.content_type.default_page_size
        return await self.repository.list(
            filters=filters,
            search=search,
            search_fields=self.content_type.search_fields,
            offset=(page - 1) * limit,
            limit=limit,
        )

    async def children(self, parent_id: uuid.UUID) -> List[Any]:
        """Documents of this collection that belong to the given series, in episode order"""
        parent_link = self.content_type.parent
        if parent_link is None:
            raise ValueError(f"{self.content_type.collection} has no parent collection")

        parent_type = get_content_type(parent_link.collection)
        if await ContentRepository(self.session, parent_type.model).get_by_id(parent_id) is None:
            raise NotFoundError(f"{parent_type.label} not found")

        order = [getattr(self.content_type.model, name) for name in self.content_type.child_order]
        return await self.repository.children(parent_link.field, parent_id, order_by=order)

    async def create(self, data: BaseModel, files: Mapping[str, UploadedAsset]):
        """Create a document with its assets"""
        values = data.model_dump(exclude_none=True)
        await self._check_parent(values)

        document = self.content_type.model(id=uuid.uuid4(), **values)
        document.slug = await resolve_slug(
            values["title"],
            None,
            True,
            self.repository.slug_exists,
            policy=self.slug_policy,
            label=self.label.lower(),
        )

        changes = await self.assets.prepare(self.content_type.slots, {}, files, (), is_new=True)
        changes.apply_to(document)

        try:
            document = await self.repository.add(document, self.label.lower())
        except Exception:
            await self.assets.rollback(changes)
            raise

        logger.info("Created %s '%s' (%s)", self.label.lower(), document.slug, document.id)
        return document

    async def update(
        self,
        document_id: uuid.UUID,
        data: BaseModel,
        files: Mapping[str, UploadedAsset],
        clears: Collection[str] = (),
    ):
        """Update a document; only fields present in ``data`` change"""
        document = await self.get_by_id(document_id)

        values = self._update_values(data)
        await self._check_parent(values)

        slug = await resolve_slug(
            values.get("title", document.title),
            document.slug,
            False,
            self.repository.slug_exists,
            previous_title=document.title,
            document_id=document.id,
            policy=self.slug_policy,
            label=self.label.lower(),
        )

        existing = {slot.name: slot.read(document) for slot in self.content_type.slots}
        changes = await self.assets.prepare(self.content_type.slots, existing, files, clears, is_new=False)

        for name, value in values.items():
            setattr(document, name, value)
        document.slug = slug
        changes.apply_to(document)

        try:
            document = await self.repository.add(document, self.label.lower())
        except Exception:
            await self.assets.rollback(changes)
            raise

        await self.assets.commit(changes)
        return document

    async def delete(self, document_id: uuid.UUID) -> CleanupReport:
        """Delete a document, its series children, and then their assets.

        Asset deletes are best-effort and never fail the call; the returned
        report lists what was attempted and what failed.
        """
        document = await self.get_by_id(document_id)

        owned: List[Tuple[ContentType, Any]] = []
        for child_type in children_of(self.content_type):
            child_repository = ContentRepository(self.session, child_type.model)
            for child in await child_repository.children(child_type.parent.field, document.id):
                owned.append((child_type, child))
        owned.append((self.content_type, document))

        await self.repository.delete(*(item for _, item in owned))
        if len(owned) > 1:
            logger.info("Deleted %s %s with %d child document(s)", self.label.lower(), document.id, len(owned) - 1)

        report = CleanupReport()
        for content_type, item in owned:
            report.merge(await self.assets.release(content_type.slots, item))
        return report

    def _update_values(self, data: BaseModel) -> Dict[str, Any]:
        values = data.model_dump(exclude_unset=True)
        parent_link = self.content_type.parent
        detachable = parent_link.field if parent_link is not None and not parent_link.required else None
        # null only detaches an optional parent; other columns keep their value
        return {name: value for name, value in values.items() if value is not None or name == detachable}

    async def _check_parent(self, values: Dict[str, Any]) -> None:
        parent_link = self.content_type.parent
        if parent_link is None or values.get(parent_link.field) is None:
            return

        parent_type = get_content_type(parent_link.collection)
        parent = await ContentRepository(self.session, parent_type.model).get_by_id(values[parent_link.field])
        if parent is None:
            raise ValidationError(f"Specified {parent_type.label} does not exist.")
