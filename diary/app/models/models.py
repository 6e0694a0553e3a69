from uuid import uuid4
from datetime import datetime

from sqlalchemy import Column, String, Integer, DateTime, Date, JSON, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# --- SQLALCHEMY MODELS ---

class DiaryEntry(Base):
    __tablename__ = "diary_entries"
    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    date = Column(Date, nullable=False, index=True)
    mood = Column(Integer, nullable=False)
    learned = Column(Text, nullable=False)
    improvements = Column(Text, nullable=False)
    gratitude = Column(JSON, nullable=False, default=list)
    looking_forward = Column(Text, nullable=False)
    news = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<DiaryEntry id={self.id} date={self.date} mood={self.mood}>"
