"""Slug derivation and collision handling for content documents."""

import enum
import logging
import re
import uuid
from typing import Awaitable, Callable, Optional

from slugify import slugify as _transliterate

from wellness_api.core.errors import DuplicateSlugError, EmptySlugDerived, SlugResolutionFailed

logger = logging.getLogger(__name__)

MAX_SLUG_ATTEMPTS = 1000
MAX_SLUG_LENGTH = 120

ExistsWithSlug = Callable[[str, Optional[uuid.UUID]], Awaitable[bool]]


class SlugPolicy(str, enum.Enum):
    # append -1, -2, ... until the slug is free
    DISAMBIGUATE = "disambiguate"
    # a taken slug is reported to the caller as DuplicateSlugError
    STRICT = "strict"


def slugify(text: str, max_len: int = MAX_SLUG_LENGTH) -> str:
    """Convert text to a lower-case, ASCII, hyphen-separated slug.

    Non-Latin scripts are transliterated before the character rules apply.

    Examples:
        >>> slugify("Yoga Basics!!")
        'yoga-basics'
        >>> slugify("Mind & Body")
        'mind-body'
        >>> slugify("Café Détox")
        'cafe-detox'
        >>> slugify("Привет мир")
        'privet-mir'

    """
    if not text:
        return ""

    slug = re.sub(r"[^a-z0-9]+", "-", _transliterate(text, lowercase=True)).strip("-")

    if len(slug) > max_len:
        slug = slug[:max_len].rstrip("-")
    return slug


async def resolve_slug(
    title: str,
    current_slug: Optional[str],
    is_new: bool,
    exists_with_slug: ExistsWithSlug,
    *,
    previous_title: Optional[str] = None,
    document_id: Optional[uuid.UUID] = None,
    policy: SlugPolicy = SlugPolicy.DISAMBIGUATE,
    max_attempts: int = MAX_SLUG_ATTEMPTS,
    label: str = "document",
) -> str:
    """Return the slug a document should be persisted with.

    An existing document whose title did not change keeps its slug without
    any existence query. Otherwise the slug is re-derived from the title and,
    under the disambiguating policy, suffixed with ``-1``, ``-2``, ... until
    ``exists_with_slug`` reports it free. The check is not atomic; the unique
    index on the slug column catches concurrent creators.

    Raises:
        EmptySlugDerived: the title has no letters or digits.
        DuplicateSlugError: strict policy and the slug is taken.
        SlugResolutionFailed: no free candidate within ``max_attempts``.
    """
    if not is_new and current_slug and title == previous_title:
        return current_slug

    base_slug = slugify(title)
    if not base_slug:
        raise EmptySlugDerived(title)

    if policy == SlugPolicy.STRICT:
        if await exists_with_slug(base_slug, document_id):
            raise DuplicateSlugError(base_slug, label)
        return base_slug

    candidate = base_slug
    for count in range(1, max_attempts + 1):
        if not await exists_with_slug(candidate, document_id):
            if candidate != base_slug:
                logger.debug("Slug '%s' taken, using '%s'", base_slug, candidate)
            return candidate
        candidate = f"{base_slug}-{count}"

    raise SlugResolutionFailed(base_slug, max_attempts)
