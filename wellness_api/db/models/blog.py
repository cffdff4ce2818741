from sqlalchemy import JSON, Boolean, Column, String, Text

from wellness_api.db.models.base import ContentModel


class BlogPost(ContentModel):
    __tablename__ = "blog_posts"

    content = Column(Text, nullable=False)
    excerpt = Column(String(300), nullable=False)
    categories = Column(JSON, nullable=False, default=list)
    author_name = Column(String(255), default="Dr. Yogita Physiotherapy")
    author_bio = Column(Text)
    is_featured = Column(Boolean, nullable=False, default=False, index=True)
    status = Column(String(20), nullable=False, default="draft", index=True)
    meta_title = Column(String(255))
    meta_description = Column(String(500))
    reading_time = Column(String(50))

    cover_image_key = Column(String(255))
    cover_image_url = Column(String(1024))
