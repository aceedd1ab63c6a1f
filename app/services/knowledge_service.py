# app/services/knowledge_service.py
import enum
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.knowledge import KnowledgeEntry
from app.schemas.knowledge import KnowledgeCreate, KnowledgeUpdate
from app.utils.errors import EmptyUpdate, NotFound, StoreFailure

logger = logging.getLogger(__name__)


def list_entries(
    db: Session,
    category: Optional[str] = None,
    equipment_type: Optional[str] = None,
    difficulty_level: Optional[str] = None,
    limit: int = 50,
) -> List[KnowledgeEntry]:
    query = db.query(KnowledgeEntry)
    if category:
        query = query.filter(KnowledgeEntry.category == category)
    if equipment_type:
        query = query.filter(KnowledgeEntry.equipment_type == equipment_type)
    if difficulty_level:
        query = query.filter(KnowledgeEntry.difficulty_level == difficulty_level)

    try:
        return query.order_by(KnowledgeEntry.category, KnowledgeEntry.title).limit(limit).all()
    except SQLAlchemyError as e:
        logger.error(f"Error listing knowledge entries: {e}")
        raise StoreFailure(str(e)) from e


def get_entry(db: Session, entry_id: int) -> KnowledgeEntry:
    try:
        entry = db.query(KnowledgeEntry).filter(KnowledgeEntry.id == entry_id).first()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching knowledge entry {entry_id}: {e}")
        raise StoreFailure(str(e)) from e
    if not entry:
        raise NotFound("Knowledge base entry not found")
    return entry


def _commit(db: Session, action: str):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error during {action}: {e}")
        raise StoreFailure(str(e)) from e


def create_entry(db: Session, data: KnowledgeCreate) -> KnowledgeEntry:
    entry = KnowledgeEntry(
        category=data.category,
        title=data.title,
        content=data.content,
        tags=data.tags,
        equipment_type=data.equipment_type,
        difficulty_level=data.difficulty_level.value,
    )
    db.add(entry)
    _commit(db, "knowledge entry creation")
    db.refresh(entry)
    return entry


def update_entry(db: Session, entry_id: int, update: KnowledgeUpdate) -> KnowledgeEntry:
    changes = update.model_dump(exclude_unset=True)
    if not changes:
        raise EmptyUpdate()

    entry = get_entry(db, entry_id)
    for key, value in changes.items():
        if isinstance(value, enum.Enum):
            value = value.value
        setattr(entry, key, value)
    _commit(db, f"update of knowledge entry {entry_id}")
    db.refresh(entry)
    return entry


def delete_entry(db: Session, entry_id: int) -> None:
    entry = get_entry(db, entry_id)
    db.delete(entry)
    _commit(db, f"deletion of knowledge entry {entry_id}")


def list_categories(db: Session) -> List[str]:
    try:
        rows = db.query(KnowledgeEntry.category).distinct().order_by(KnowledgeEntry.category).all()
    except SQLAlchemyError as e:
        raise StoreFailure(str(e)) from e
    return [row[0] for row in rows]


def list_equipment_types(db: Session) -> List[str]:
    try:
        rows = (
            db.query(KnowledgeEntry.equipment_type)
            .filter(KnowledgeEntry.equipment_type.isnot(None))
            .distinct()
            .order_by(KnowledgeEntry.equipment_type)
            .all()
        )
    except SQLAlchemyError as e:
        raise StoreFailure(str(e)) from e
    return [row[0] for row in rows]
