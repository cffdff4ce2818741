import re
import uuid
from unittest.mock import AsyncMock

import pytest

from wellness_api.core.errors import DuplicateSlugError, EmptySlugDerived, SlugResolutionFailed, ValidationError
from wellness_api.domains.content.slugs import SlugPolicy, resolve_slug, slugify


def taken(*slugs):
    existing = set(slugs)

    async def exists_with_slug(slug, exclude_id):
        return slug in existing

    return exists_with_slug


@pytest.mark.parametrize("title, expected", [
    ("Yoga Basics!!", "yoga-basics"),
    ("Mind & Body", "mind-body"),
    ("  Morning   Stretch  ", "morning-stretch"),
    ("Café Détox", "cafe-detox"),
    ("--Core__Strength--", "core-strength"),
    ("10 Minute Abs", "10-minute-abs"),
])
def test_slugify(title, expected):
    assert slugify(title) == expected


@pytest.mark.parametrize("title, words", [
    ("Йога для начинающих", 3),
    ("योग निद्रा", 2),
])
def test_slugify_transliterates_non_latin_titles(title, words):
    slug = slugify(title)
    assert re.fullmatch(r"[a-z0-9]+(-[a-z0-9]+)*", slug)
    assert len(slug.split("-")) == words


def test_slugify_cyrillic():
    assert slugify("Привет мир") == "privet-mir"


async def test_non_latin_title_resolves_to_a_slug():
    slug = await resolve_slug("Йога для начинающих", None, True, taken())
    assert slug == slugify("Йога для начинающих")
    assert slug.count("-") == 2


def test_slugify_truncates_without_trailing_hyphen():
    slug = slugify("word " * 50, max_len=12)
    assert slug == "word-word-wo"
    assert not slugify("ab cd", max_len=3).endswith("-")


async def test_new_document_gets_base_slug():
    assert await resolve_slug("Yoga Basics!!", None, True, taken()) == "yoga-basics"


async def test_collisions_are_disambiguated_in_order():
    assert await resolve_slug("Yoga Basics", None, True, taken("yoga-basics")) == "yoga-basics-1"
    assert await resolve_slug("Yoga Basics", None, True, taken("yoga-basics", "yoga-basics-1")) == "yoga-basics-2"


async def test_unchanged_title_skips_existence_check():
    exists = AsyncMock(return_value=True)

    slug = await resolve_slug(
        "Yoga Basics", "yoga-basics", False, exists, previous_title="Yoga Basics", document_id=uuid.uuid4()
    )

    assert slug == "yoga-basics"
    exists.assert_not_awaited()


async def test_changed_title_excludes_own_document():
    document_id = uuid.uuid4()
    exists = AsyncMock(return_value=False)

    slug = await resolve_slug(
        "Mind And Body", "mind-body", False, exists, previous_title="Mind & Body", document_id=document_id
    )

    assert slug == "mind-and-body"
    exists.assert_awaited_once_with("mind-and-body", document_id)


async def test_title_without_alphanumerics_is_rejected():
    with pytest.raises(EmptySlugDerived) as excinfo:
        await resolve_slug("!!! ???", None, True, taken())
    assert isinstance(excinfo.value, ValidationError)


async def test_strict_policy_reports_duplicates():
    with pytest.raises(DuplicateSlugError) as excinfo:
        await resolve_slug("Yoga Basics", None, True, taken("yoga-basics"), policy=SlugPolicy.STRICT, label="ebook")
    assert excinfo.value.slug == "yoga-basics"
    assert "ebook" in excinfo.value.message


async def test_strict_policy_accepts_free_slug():
    assert await resolve_slug("Yoga Basics", None, True, taken(), policy=SlugPolicy.STRICT) == "yoga-basics"


async def test_resolution_is_bounded():
    exists = AsyncMock(return_value=True)

    with pytest.raises(SlugResolutionFailed):
        await resolve_slug("Yoga", None, True, exists, max_attempts=3)

    assert exists.await_count == 3
