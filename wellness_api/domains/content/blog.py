from typing import Any, List, Optional, Tuple

from wellness_api.domains.content.services import ContentService

PUBLISHED = "published"


class BlogService(ContentService):
    """Blog specific reads. Categories live in a JSON list, so category
    matching happens here rather than in SQL."""

    async def list_posts(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        search: Optional[str] = None,
        category: Optional[str] = None,
        status: str = PUBLISHED,
    ) -> Tuple[List[Any], int]:
        limit = limit or self.content_type.default_page_size
        filters = {"status": status} if status != "all" else None
        if not category or category == "all":
            return await self.list(page=page, limit=limit, search=search, filters=filters)

        posts, _ = await self.repository.list(
            filters=filters, search=search, search_fields=self.content_type.search_fields
        )
        category = category.lower()
        matching = [post for post in posts if category in (post.categories or [])]
        start = (page - 1) * limit
        return matching[start:start + limit], len(matching)

    async def get_published(self, slug: str):
        return await self.get_by_slug(slug, status=PUBLISHED)

    async def featured(self, limit: int = 2) -> List[Any]:
        posts, _ = await self.repository.list(filters={"is_featured": True, "status": PUBLISHED}, limit=limit)
        return posts

    async def categories(self) -> List[str]:
        """Sorted distinct categories of published posts"""
        posts, _ = await self.repository.list(filters={"status": PUBLISHED})
        return sorted({category for post in posts for category in (post.categories or []) if category.strip()})

    async def related(self, slug: str, limit: int = 3) -> List[Any]:
        """Published posts sharing at least one category, newest first"""
        current = await self.repository.get_by_slug(slug, status=PUBLISHED)
        if current is None or not current.categories:
            return []

        wanted = set(current.categories)
        posts, _ = await self.repository.list(filters={"status": PUBLISHED})
        related = [post for post in posts if post.id != current.id and wanted.intersection(post.categories or [])]
        return related[:limit]
