from sqlalchemy import Column, DateTime, Float, Integer, String, Text

from wellness_api.db.models.base import ContentModel, utcnow


class Ebook(ContentModel):
    __tablename__ = "ebooks"

    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    pages = Column(Integer, nullable=False)
    category = Column(String(100), nullable=False, index=True)
    publish_date = Column(DateTime(timezone=True), default=utcnow)
    payment_link = Column(String(500), nullable=True)

    thumbnail_key = Column(String(255))
    thumbnail_url = Column(String(1024))
    pdf_key = Column(String(255))
    pdf_url = Column(String(1024))
