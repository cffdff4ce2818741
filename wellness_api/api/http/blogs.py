from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials

from wellness_api.api.dependencies import content_service
from wellness_api.api.http.content import add_content_routes
from wellness_api.api.responses import pagination, success
from wellness_api.core.auth import bearer_scheme, require_admin
from wellness_api.domains.content.blog import PUBLISHED, BlogService
from wellness_api.domains.content.registry import BLOG_POSTS, dump_document

router = APIRouter(prefix="/blogs", tags=["blogs"])

get_blog_service = content_service(BLOG_POSTS, BlogService)


@router.get("")
async def list_blog_posts(
    request: Request,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    status: str = Query(PUBLISHED, pattern="^(draft|published|all)$"),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    service: BlogService = Depends(get_blog_service),
):
    """Published posts without their body; drafts only for admins"""
    if status != PUBLISHED:
        await require_admin(request, credentials)

    limit = limit or BLOG_POSTS.default_page_size
    posts, total = await service.list_posts(page=page, limit=limit, search=search, category=category, status=status)
    return success(
        [dump_document(BLOG_POSTS, post, summary=True) for post in posts],
        count=len(posts),
        total=total,
        pagination=pagination(page, limit, total),
    )


@router.get("/featured")
async def get_featured_blog_posts(
    limit: int = Query(2, ge=1, le=20),
    service: BlogService = Depends(get_blog_service),
):
    posts = await service.featured(limit)
    return success([dump_document(BLOG_POSTS, post, summary=True) for post in posts], count=len(posts))


@router.get("/categories")
async def get_blog_categories(service: BlogService = Depends(get_blog_service)):
    return success(await service.categories())


@router.get("/related/{slug}")
async def get_related_blog_posts(
    slug: str,
    limit: int = Query(3, ge=1, le=20),
    service: BlogService = Depends(get_blog_service),
):
    posts = await service.related(slug, limit)
    return success([dump_document(BLOG_POSTS, post, summary=True) for post in posts], count=len(posts))


@router.get("/{slug}")
async def get_blog_post(slug: str, service: BlogService = Depends(get_blog_service)):
    """A published post by slug"""
    post = await service.get_published(slug)
    return success(dump_document(BLOG_POSTS, post))


add_content_routes(router, BLOG_POSTS, list_route=False, slug_route=False)
