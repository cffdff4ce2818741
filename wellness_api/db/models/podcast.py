from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid

from wellness_api.db.models.base import ContentModel, utcnow


class PodcastSeries(ContentModel):
    __tablename__ = "podcast_series"

    description = Column(Text, nullable=False)
    category = Column(String(100))
    author = Column(String(255))

    cover_image_key = Column(String(255))
    cover_image_url = Column(String(1024))


class PodcastEpisode(ContentModel):
    __tablename__ = "podcast_episodes"
    __table_args__ = (
        UniqueConstraint("podcast_series_id", "episode_number", name="uq_podcast_episode_number"),
    )

    podcast_series_id = Column(Uuid, ForeignKey("podcast_series.id"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    youtube_link = Column(String(500), nullable=False)
    duration = Column(String(50), nullable=False)
    episode_number = Column(Integer, nullable=False)
    publish_date = Column(DateTime(timezone=True), default=utcnow)

    thumbnail_key = Column(String(255))
    thumbnail_url = Column(String(1024))
