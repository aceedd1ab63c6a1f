# app/schemas/knowledge.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Optional, List

from app.models.knowledge import DifficultyLevel

class KnowledgeCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    category: str = Field(min_length=2)
    title: str = Field(min_length=5)
    content: str = Field(min_length=20)
    tags: Optional[str] = None
    equipment_type: Optional[str] = None
    difficulty_level: DifficultyLevel = DifficultyLevel.MEDIUM

class KnowledgeUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    category: Optional[str] = Field(default=None, min_length=2)
    title: Optional[str] = Field(default=None, min_length=5)
    content: Optional[str] = Field(default=None, min_length=20)
    tags: Optional[str] = None
    equipment_type: Optional[str] = None
    difficulty_level: Optional[DifficultyLevel] = None

    @field_validator("category", "title", "content", "difficulty_level")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

class KnowledgeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category: str
    title: str
    content: str
    tags: Optional[str] = None
    equipment_type: Optional[str] = None
    difficulty_level: DifficultyLevel
    created_at: datetime
    updated_at: Optional[datetime] = None

class KnowledgeSearchResult(KnowledgeOut):
    relevance_score: int

class KnowledgeSearchResponse(BaseModel):
    results: List[KnowledgeSearchResult]
    total: int
    query: str

class KnowledgeList(BaseModel):
    entries: List[KnowledgeOut]

class KnowledgeCreated(BaseModel):
    message: str
    entryId: int

class ChatRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    message: str = Field(min_length=1)

class ChatSuggestion(BaseModel):
    id: int
    title: str
    category: str

class ChatResponse(BaseModel):
    response: str
    suggestions: List[ChatSuggestion]
    keywords: List[str]
