from sqlalchemy import Column, DateTime, Integer, String, Text

from db.database import Base, utcnow


class Setting(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String, unique=True, index=True, nullable=False)
    value = Column(Text, nullable=False)  # always a string; typed on read
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
