# app/models/knowledge.py
from sqlalchemy import Column, Integer, String, Text, DateTime
from app.database import Base
import enum
from datetime import datetime

class DifficultyLevel(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

class KnowledgeEntry(Base):
    __tablename__ = "knowledge_base"

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    tags = Column(String, nullable=True)  # comma-separated keywords
    equipment_type = Column(String, nullable=True, index=True)
    difficulty_level = Column(String(10), nullable=False, default=DifficultyLevel.MEDIUM.value)

    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    def __repr__(self):
        return f"<KnowledgeEntry(id={self.id}, category='{self.category}', title='{self.title}')>"
