from sqlalchemy import Column, String, Text

from wellness_api.db.models.base import BaseModel


class Setting(BaseModel):
    __tablename__ = "settings"

    key = Column(String(255), unique=True, index=True, nullable=False)
    value = Column(Text, nullable=False)
