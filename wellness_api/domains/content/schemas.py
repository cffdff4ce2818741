import re
import uuid
from datetime import datetime
from typing import Annotated, Any, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, field_validator

YOUTUBE_URL_PATTERN = re.compile(r"^(https?://)?(www\.)?(youtube\.com|youtu\.?be)/.+$")


def _blank_to_none(v: Any) -> Any:
    # form submissions send "" for untouched optional inputs
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _check_youtube_link(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if v and not YOUTUBE_URL_PATTERN.match(v):
        raise ValueError("Please enter a valid YouTube URL")
    return v


def parse_categories(v: Any) -> Any:
    """Accept a list or a comma separated string, lower-cased and trimmed"""
    if v is None:
        return v
    if isinstance(v, str):
        v = v.split(",")
    if isinstance(v, (list, tuple)):
        return [str(item).strip().lower() for item in v if str(item).strip()]
    return v


FormInt = Annotated[Optional[int], BeforeValidator(_blank_to_none)]
FormFloat = Annotated[Optional[float], BeforeValidator(_blank_to_none)]
FormBool = Annotated[Optional[bool], BeforeValidator(_blank_to_none)]
FormDatetime = Annotated[Optional[datetime], BeforeValidator(_blank_to_none)]
FormUUID = Annotated[Optional[uuid.UUID], BeforeValidator(_blank_to_none)]
YoutubeLink = Annotated[Optional[str], AfterValidator(_check_youtube_link)]
Categories = Annotated[List[str], BeforeValidator(parse_categories)]


class ContentCreate(BaseModel):
    """Base schema for creating a content document"""
    title: str = Field(..., min_length=1, max_length=255)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()


class ContentUpdate(BaseModel):
    """Base schema for updating a content document"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip() if v else v


class ContentRead(BaseModel):
    id: uuid.UUID
    title: str
    slug: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Ebooks

class EbookCreate(ContentCreate):
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    pages: int = Field(..., ge=1)
    category: str = Field(..., min_length=1, max_length=100)
    publish_date: FormDatetime = None
    payment_link: Optional[str] = Field(None, max_length=500)


class EbookUpdate(ContentUpdate):
    description: Optional[str] = Field(None, min_length=1)
    price: FormFloat = Field(None, ge=0)
    pages: FormInt = Field(None, ge=1)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    publish_date: FormDatetime = None
    payment_link: Optional[str] = Field(None, max_length=500)


class EbookRead(ContentRead):
    description: str
    price: float
    pages: int
    category: str
    publish_date: Optional[datetime] = None
    payment_link: Optional[str] = None


# Nutrition plans

class NutritionPlanCreate(ContentCreate):
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    pages: FormInt = Field(None, ge=1)
    category: str = Field(..., min_length=1, max_length=100)
    payment_link: Optional[str] = Field(None, max_length=500)


class NutritionPlanUpdate(ContentUpdate):
    description: Optional[str] = Field(None, min_length=1)
    price: FormFloat = Field(None, ge=0)
    pages: FormInt = Field(None, ge=1)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    payment_link: Optional[str] = Field(None, max_length=500)


class NutritionPlanRead(ContentRead):
    description: str
    price: float
    pages: Optional[int] = None
    category: str
    payment_link: Optional[str] = None


# Program series and programs

class ProgramSeriesCreate(ContentCreate):
    description: str = Field(..., min_length=1)
    category: Optional[str] = Field(None, max_length=100)
    author: Optional[str] = Field(None, max_length=255)
    publish_date: FormDatetime = None


class ProgramSeriesUpdate(ContentUpdate):
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, max_length=100)
    author: Optional[str] = Field(None, max_length=255)
    publish_date: FormDatetime = None


class ProgramSeriesRead(ContentRead):
    description: str
    category: Optional[str] = None
    author: Optional[str] = None
    publish_date: Optional[datetime] = None


class ProgramCreate(ContentCreate):
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    duration: str = Field(..., min_length=1, max_length=50)
    youtube_link: YoutubeLink = Field(None, max_length=500)
    episode_number: FormInt = Field(1, ge=1)
    program_series_id: FormUUID = None
    publish_date: FormDatetime = None


class ProgramUpdate(ContentUpdate):
    description: Optional[str] = Field(None, min_length=1)
    price: FormFloat = Field(None, ge=0)
    duration: Optional[str] = Field(None, min_length=1, max_length=50)
    youtube_link: YoutubeLink = Field(None, max_length=500)
    episode_number: FormInt = Field(None, ge=1)
    program_series_id: FormUUID = None
    publish_date: FormDatetime = None


class ProgramRead(ContentRead):
    description: str
    price: float
    duration: str
    youtube_link: Optional[str] = None
    episode_number: int
    program_series_id: Optional[uuid.UUID] = None
    publish_date: Optional[datetime] = None


# Podcast series and episodes

class PodcastSeriesCreate(ContentCreate):
    description: str = Field(..., min_length=1)
    category: Optional[str] = Field(None, max_length=100)
    author: Optional[str] = Field(None, max_length=255)


class PodcastSeriesUpdate(ContentUpdate):
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, max_length=100)
    author: Optional[str] = Field(None, max_length=255)


class PodcastSeriesRead(ContentRead):
    description: str
    category: Optional[str] = None
    author: Optional[str] = None


class PodcastEpisodeCreate(ContentCreate):
    podcast_series_id: uuid.UUID
    description: str = Field(..., min_length=1)
    youtube_link: Annotated[str, AfterValidator(_check_youtube_link)] = Field(..., min_length=1, max_length=500)
    duration: str = Field(..., min_length=1, max_length=50)
    episode_number: int = Field(..., ge=1)
    publish_date: FormDatetime = None


class PodcastEpisodeUpdate(ContentUpdate):
    podcast_series_id: FormUUID = None
    description: Optional[str] = Field(None, min_length=1)
    youtube_link: YoutubeLink = Field(None, min_length=1, max_length=500)
    duration: Optional[str] = Field(None, min_length=1, max_length=50)
    episode_number: FormInt = Field(None, ge=1)
    publish_date: FormDatetime = None


class PodcastEpisodeRead(ContentRead):
    podcast_series_id: uuid.UUID
    description: str
    youtube_link: str
    duration: str
    episode_number: int
    publish_date: Optional[datetime] = None


# Blog posts

BlogStatus = Literal["draft", "published"]


class BlogPostCreate(ContentCreate):
    content: str = Field(..., min_length=1)
    excerpt: str = Field(..., min_length=1, max_length=300)
    categories: Categories = Field(default_factory=list)
    author_name: Optional[str] = Field(None, max_length=255)
    author_bio: Optional[str] = None
    is_featured: FormBool = False
    status: Optional[BlogStatus] = "draft"
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = Field(None, max_length=500)
    reading_time: Optional[str] = Field(None, max_length=50)

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v):
        return _blank_to_none(v) or "draft"


class BlogPostUpdate(ContentUpdate):
    content: Optional[str] = Field(None, min_length=1)
    excerpt: Optional[str] = Field(None, min_length=1, max_length=300)
    categories: Optional[Categories] = None
    author_name: Optional[str] = Field(None, max_length=255)
    author_bio: Optional[str] = None
    is_featured: FormBool = None
    status: Optional[BlogStatus] = None
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = Field(None, max_length=500)
    reading_time: Optional[str] = Field(None, max_length=50)

    @field_validator("status", mode="before")
    @classmethod
    def blank_status(cls, v):
        return _blank_to_none(v)


class BlogPostSummary(ContentRead):
    """Blog post without its body, for listings"""
    excerpt: str
    categories: List[str] = []
    author_name: Optional[str] = None
    is_featured: bool
    status: str
    reading_time: Optional[str] = None


class BlogPostRead(BlogPostSummary):
    content: str
    author_bio: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
