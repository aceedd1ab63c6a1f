from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import user as user_model
from app.schemas import knowledge as knowledge_schema
from app.services import chatbot, knowledge_search, knowledge_service
from app.utils.auth import get_current_user

router = APIRouter(prefix="/api/knowledge", tags=["Knowledge Base"])


@router.get("/search", response_model=knowledge_schema.KnowledgeSearchResponse)
def search_knowledge(
    q: Optional[str] = None,
    category: Optional[str] = None,
    equipment_type: Optional[str] = None,
    difficulty_level: Optional[knowledge_schema.DifficultyLevel] = None,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    """Search the knowledge base, best matches first"""
    ranked = knowledge_search.search(
        db,
        q,
        category=category,
        equipment_type=equipment_type,
        difficulty_level=difficulty_level.value if difficulty_level else None,
    )
    results = [
        {
            **knowledge_schema.KnowledgeOut.model_validate(item.entry).model_dump(),
            "relevance_score": item.score,
        }
        for item in ranked
    ]
    return {"results": results, "total": len(results), "query": q}


@router.post("/chat", response_model=knowledge_schema.ChatResponse)
def chat(
    request: knowledge_schema.ChatRequest,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    """Answer a free-text question from the knowledge base"""
    return chatbot.chat(db, request.message)


@router.get("/meta/categories")
def get_categories(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    return {"categories": knowledge_service.list_categories(db)}


@router.get("/meta/equipment-types")
def get_equipment_types(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    return {"equipmentTypes": knowledge_service.list_equipment_types(db)}


@router.get("/", response_model=knowledge_schema.KnowledgeList)
def get_entries(
    category: Optional[str] = None,
    equipment_type: Optional[str] = None,
    difficulty_level: Optional[knowledge_schema.DifficultyLevel] = None,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    entries = knowledge_service.list_entries(
        db,
        category=category,
        equipment_type=equipment_type,
        difficulty_level=difficulty_level.value if difficulty_level else None,
        limit=limit,
    )
    return {"entries": entries}


@router.get("/{entry_id}")
def get_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    entry = knowledge_service.get_entry(db, entry_id)
    return {"entry": knowledge_schema.KnowledgeOut.model_validate(entry)}


@router.post("/", response_model=knowledge_schema.KnowledgeCreated, status_code=status.HTTP_201_CREATED)
def create_entry(
    entry: knowledge_schema.KnowledgeCreate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    db_entry = knowledge_service.create_entry(db, entry)
    return {"message": "Knowledge base entry created successfully", "entryId": db_entry.id}


@router.put("/{entry_id}")
def update_entry(
    entry_id: int,
    entry_update: knowledge_schema.KnowledgeUpdate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    knowledge_service.update_entry(db, entry_id, entry_update)
    return {"message": "Knowledge base entry updated successfully"}


@router.delete("/{entry_id}")
def delete_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    knowledge_service.delete_entry(db, entry_id)
    return {"message": "Knowledge base entry deleted successfully"}
