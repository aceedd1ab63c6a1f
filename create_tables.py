# create_tables.py
import logging

from app.database import Base, engine
from app.models import KnowledgeEntry, NotificationRecord, Task, User  # noqa: F401 - registers tables

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def create_tables(drop_existing: bool = False):
    """Create all tables"""
    if drop_existing:
        Base.metadata.drop_all(bind=engine)
        logger.info("Dropped existing tables")
    Base.metadata.create_all(bind=engine)
    logger.info("✅ All tables created successfully!")

if __name__ == "__main__":
    create_tables()
