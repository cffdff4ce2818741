from sqlalchemy import Column, Float, Integer, String, Text

from wellness_api.db.models.base import ContentModel


class NutritionPlan(ContentModel):
    __tablename__ = "nutrition_plans"

    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    pages = Column(Integer, nullable=True)
    category = Column(String(100), nullable=False, index=True)
    payment_link = Column(String(500), nullable=True)

    thumbnail_key = Column(String(255))
    thumbnail_url = Column(String(1024))
    pdf_key = Column(String(255))
    pdf_url = Column(String(1024))
