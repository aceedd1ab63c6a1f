"""
Master Database Seeding Script
Creates database tables and populates them with demo data
"""

import logging
from datetime import date, timedelta

from sqlalchemy.exc import SQLAlchemyError

from app.database import SessionLocal
from app.models import KnowledgeEntry, Task, User
from create_tables import create_tables

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ADMIN_USER = {
    "email": "admin@facilities-service.com",
    "name": "System Administrator",
    "department": "Service",
}

# Due dates are offsets from today so the reminder window has something to find
DEMO_TASKS = [
    {
        "title": "Monthly Generator Inspection",
        "description": "Perform monthly inspection of backup generators including oil levels, battery condition, and operational testing.",
        "due_in_days": 2,
        "priority": "high",
        "equipment_id": "GEN-001",
        "location": "Building A - Basement",
        "estimated_hours": 4,
    },
    {
        "title": "HVAC Filter Replacement",
        "description": "Replace air filters in all HVAC units across the facility. Check for any unusual wear or damage.",
        "due_in_days": 5,
        "priority": "medium",
        "equipment_id": "HVAC-MAIN",
        "location": "Rooftop Units 1-6",
        "estimated_hours": 6,
    },
    {
        "title": "Fire Safety System Check",
        "description": "Comprehensive inspection of fire detection systems, sprinklers, and emergency exits.",
        "due_in_days": 12,
        "priority": "high",
        "equipment_id": "FIRE-SYS",
        "location": "All Buildings",
        "estimated_hours": 8,
    },
    {
        "title": "Elevator Maintenance",
        "description": "Quarterly maintenance of all elevator systems including safety checks and mechanical inspections.",
        "due_in_days": 20,
        "priority": "medium",
        "equipment_id": "ELEV-001,ELEV-002",
        "location": "Buildings A & B",
        "estimated_hours": 12,
    },
    {
        "title": "UPS Battery Replacement",
        "description": "Replace aging UPS batteries in data center and critical systems.",
        "due_in_days": 30,
        "priority": "high",
        "equipment_id": "UPS-DC-001",
        "location": "Data Center",
        "estimated_hours": 3,
    },
]

DEMO_KNOWLEDGE = [
    {
        "category": "Generator Maintenance",
        "title": "Generator Oil Change Procedure",
        "content": "Step-by-step procedure for changing generator oil: 1. Turn off generator and wait for cool down. 2. Drain old oil completely. 3. Replace oil filter. 4. Add new oil as per manufacturer specifications. 5. Check oil level and run test cycle.",
        "tags": "generator,oil,maintenance,safety",
        "equipment_type": "Generator",
        "difficulty_level": "medium",
    },
    {
        "category": "HVAC Maintenance",
        "title": "Air Filter Selection Guide",
        "content": "Proper air filter selection is crucial for HVAC efficiency. MERV ratings: 6-8 for residential, 9-12 for commercial, 13-16 for hospitals. Replace every 1-3 months depending on usage and environment. Always check airflow direction before installation.",
        "tags": "hvac,filters,merv,airflow",
        "equipment_type": "HVAC",
        "difficulty_level": "easy",
    },
    {
        "category": "Fire Safety",
        "title": "Fire Sprinkler System Testing",
        "content": "Monthly visual inspection: Check for corrosion, damage, or obstructions. Annual testing: Test water flow, pressure, and alarm systems. Always coordinate with building occupants and security before testing. Document all findings.",
        "tags": "fire,sprinkler,safety,testing",
        "equipment_type": "Fire Safety",
        "difficulty_level": "hard",
    },
    {
        "category": "Elevator Maintenance",
        "title": "Elevator Safety Checklist",
        "content": "Daily checks: Door operation, emergency phone, lighting. Weekly: Lubrication points, cable inspection. Monthly: Emergency brake test, load testing. Annual: Full safety inspection by certified technician. Report any unusual noises immediately.",
        "tags": "elevator,safety,inspection,certification",
        "equipment_type": "Elevator",
        "difficulty_level": "medium",
    },
    {
        "category": "Electrical Systems",
        "title": "UPS Battery Maintenance",
        "content": "Battery maintenance schedule: Monthly - voltage checks and visual inspection. Quarterly - load testing and temperature monitoring. Annually - full capacity test and replacement planning. Keep battery room well-ventilated and at optimal temperature (20-25°C).",
        "tags": "ups,battery,electrical,power",
        "equipment_type": "UPS",
        "difficulty_level": "medium",
    },
]

def seed_admin(db) -> User:
    admin = db.query(User).filter(User.email == ADMIN_USER["email"]).first()
    if admin:
        logger.info("ℹ️  Admin user already exists")
        return admin
    admin = User(**ADMIN_USER)
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(f"✅ Admin user created: {admin.email}")
    return admin

def seed_tasks(db, owner: User):
    today = date.today()
    created = 0
    for item in DEMO_TASKS:
        if db.query(Task).filter(Task.title == item["title"]).first():
            continue
        data = dict(item)
        due_in_days = data.pop("due_in_days")
        db.add(Task(
            **data,
            due_date=today + timedelta(days=due_in_days),
            assigned_to=owner.id,
            created_by=owner.id,
        ))
        created += 1
    db.commit()
    logger.info(f"✅ {created} sample tasks created")

def seed_knowledge(db):
    created = 0
    for item in DEMO_KNOWLEDGE:
        if db.query(KnowledgeEntry).filter(KnowledgeEntry.title == item["title"]).first():
            continue
        db.add(KnowledgeEntry(**item))
        created += 1
    db.commit()
    logger.info(f"✅ {created} knowledge base entries created")

def main():
    create_tables()
    db = SessionLocal()
    try:
        admin = seed_admin(db)
        seed_tasks(db, admin)
        seed_knowledge(db)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Seeding failed: {e}")
        raise
    finally:
        db.close()
    logger.info("Database initialization completed.")

if __name__ == "__main__":
    main()
