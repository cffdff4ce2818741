"""Declarative description of every slugged content collection.

Each :class:`ContentType` tells the generic service and router which model,
schemas and asset slots a collection uses, so per-entity code only adds what
is genuinely specific to that entity.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Type

from pydantic import BaseModel

from wellness_api.db.models import BlogPost, Ebook, NutritionPlan, PodcastEpisode, PodcastSeries, Program, ProgramSeries
from wellness_api.domains.content import schemas
from wellness_api.domains.content.entities import AssetKind, AssetSlotConfig


@dataclass(frozen=True)
class ParentLink:
    """Foreign key from a child collection to its series"""
    field: str
    collection: str
    required: bool = False


@dataclass(frozen=True)
class ContentType:
    collection: str
    label: str
    model: Type
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    read_schema: Type[BaseModel]
    slots: Tuple[AssetSlotConfig, ...]
    list_schema: Optional[Type[BaseModel]] = None
    search_fields: Tuple[str, ...] = ("title", "description")
    filter_fields: Tuple[str, ...] = ()
    parent: Optional[ParentLink] = None
    child_order: Tuple[str, ...] = ("episode_number", "created_at")
    default_page_size: int = 20
    # list responses also carry the distinct category values
    list_categories: bool = False

    @property
    def summary_schema(self) -> Type[BaseModel]:
        return self.list_schema or self.read_schema

    def slot(self, name: str) -> AssetSlotConfig:
        for slot in self.slots:
            if slot.name == name:
                return slot
        raise KeyError(name)


EBOOKS = ContentType(
    collection="ebooks",
    label="E-book",
    model=Ebook,
    create_schema=schemas.EbookCreate,
    update_schema=schemas.EbookUpdate,
    read_schema=schemas.EbookRead,
    slots=(
        AssetSlotConfig("thumbnail", "ebook_thumbnails", AssetKind.IMAGE, "Thumbnail image"),
        AssetSlotConfig("pdf", "ebook_pdfs", AssetKind.RAW, "PDF file"),
    ),
    filter_fields=("category",),
)

NUTRITION_PLANS = ContentType(
    collection="nutrition-plans",
    label="Nutrition plan",
    model=NutritionPlan,
    create_schema=schemas.NutritionPlanCreate,
    update_schema=schemas.NutritionPlanUpdate,
    read_schema=schemas.NutritionPlanRead,
    slots=(
        AssetSlotConfig("thumbnail", "nutrition_thumbnails", AssetKind.IMAGE, "Thumbnail image"),
        AssetSlotConfig("pdf", "nutrition_pdfs", AssetKind.RAW, "PDF document"),
    ),
    filter_fields=("category",),
    default_page_size=10,
    list_categories=True,
)

PROGRAM_SERIES = ContentType(
    collection="program-series",
    label="Program series",
    model=ProgramSeries,
    create_schema=schemas.ProgramSeriesCreate,
    update_schema=schemas.ProgramSeriesUpdate,
    read_schema=schemas.ProgramSeriesRead,
    slots=(AssetSlotConfig("cover_image", "program_series_covers", AssetKind.IMAGE, "Cover image"),),
    filter_fields=("category",),
)

PROGRAMS = ContentType(
    collection="programs",
    label="Program",
    model=Program,
    create_schema=schemas.ProgramCreate,
    update_schema=schemas.ProgramUpdate,
    read_schema=schemas.ProgramRead,
    slots=(
        AssetSlotConfig("thumbnail", "program_thumbnails", AssetKind.IMAGE, "Thumbnail image"),
        AssetSlotConfig("video", "program_videos", AssetKind.VIDEO, "Program video"),
    ),
    parent=ParentLink("program_series_id", "program-series"),
)

PODCAST_SERIES = ContentType(
    collection="podcast-series",
    label="Podcast series",
    model=PodcastSeries,
    create_schema=schemas.PodcastSeriesCreate,
    update_schema=schemas.PodcastSeriesUpdate,
    read_schema=schemas.PodcastSeriesRead,
    slots=(AssetSlotConfig("cover_image", "podcast_series_covers", AssetKind.IMAGE, "Cover image"),),
    filter_fields=("category",),
)

PODCAST_EPISODES = ContentType(
    collection="podcast-episodes",
    label="Podcast episode",
    model=PodcastEpisode,
    create_schema=schemas.PodcastEpisodeCreate,
    update_schema=schemas.PodcastEpisodeUpdate,
    read_schema=schemas.PodcastEpisodeRead,
    slots=(AssetSlotConfig("thumbnail", "podcast_episode_thumbnails", AssetKind.IMAGE, "Episode thumbnail image"),),
    parent=ParentLink("podcast_series_id", "podcast-series", required=True),
)

BLOG_POSTS = ContentType(
    collection="blogs",
    label="Blog post",
    model=BlogPost,
    create_schema=schemas.BlogPostCreate,
    update_schema=schemas.BlogPostUpdate,
    read_schema=schemas.BlogPostRead,
    list_schema=schemas.BlogPostSummary,
    slots=(AssetSlotConfig("cover_image", "blog_covers", AssetKind.IMAGE, "Cover image"),),
    search_fields=("title", "content", "excerpt"),
    default_page_size=6,
)

CONTENT_TYPES: Dict[str, ContentType] = {
    content_type.collection: content_type
    for content_type in (
        EBOOKS, NUTRITION_PLANS, PROGRAM_SERIES, PROGRAMS, PODCAST_SERIES, PODCAST_EPISODES, BLOG_POSTS
    )
}


def get_content_type(collection: str) -> ContentType:
    return CONTENT_TYPES[collection]


def children_of(content_type: ContentType) -> List[ContentType]:
    """Collections whose documents belong to a document of ``content_type``"""
    return [
        child for child in CONTENT_TYPES.values()
        if child.parent is not None and child.parent.collection == content_type.collection
    ]


def dump_document(content_type: ContentType, document, summary: bool = False) -> Dict:
    """JSON-ready representation including one entry per asset slot"""
    schema = content_type.summary_schema if summary else content_type.read_schema
    data = schema.model_validate(document).model_dump(mode="json")
    for slot in content_type.slots:
        reference = slot.read(document)
        data[slot.name] = {"remote_key": reference.remote_key, "url": reference.url} if reference else None
    return data
