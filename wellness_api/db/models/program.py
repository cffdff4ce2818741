from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, Uuid

from wellness_api.db.models.base import ContentModel, utcnow


class ProgramSeries(ContentModel):
    __tablename__ = "program_series"

    description = Column(Text, nullable=False)
    category = Column(String(100))
    author = Column(String(255))
    publish_date = Column(DateTime(timezone=True), default=utcnow)

    cover_image_key = Column(String(255))
    cover_image_url = Column(String(1024))


class Program(ContentModel):
    __tablename__ = "programs"

    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    duration = Column(String(50), nullable=False)
    youtube_link = Column(String(500), nullable=True)
    episode_number = Column(Integer, nullable=False, default=1)
    publish_date = Column(DateTime(timezone=True), default=utcnow)
    program_series_id = Column(Uuid, ForeignKey("program_series.id"), nullable=True, index=True)

    thumbnail_key = Column(String(255))
    thumbnail_url = Column(String(1024))
    video_key = Column(String(255))
    video_url = Column(String(1024))
