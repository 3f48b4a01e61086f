"""Create tables, constraints and indexes, and seed a sample campaign.

Run directly with ``python -m campaign_manager.database.init_db``.
"""
import logging
import sys

from campaign_manager.database import crud
from campaign_manager.database.db import Base, SessionLocal, engine
from campaign_manager.database.models import CampaignStatus, utcnow

logger = logging.getLogger(__name__)

SAMPLE_CAMPAIGN = {
    "name": "Sample Campaign",
    "description": "This is a sample campaign created during initialization",
    "status": CampaignStatus.ACTIVE.value,
    "leads": ["https://linkedin.com/in/sample-profile-1", "https://linkedin.com/in/sample-profile-2"],
    "accountIDs": ["123", "456"],
}


def initialize_database(seed: bool = True) -> None:
    logger.info("Initializing database...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables and indexes created/checked.")

    if not seed:
        return
    db = SessionLocal()
    try:
        if crud.count_campaigns(db) == 0:
            logger.info("Adding sample campaign data...")
            now = utcnow()
            crud.insert_campaign(db, {**SAMPLE_CAMPAIGN, "createdAt": now, "updatedAt": now})
    finally:
        db.close()


if __name__ == "__main__":
    from campaign_manager.core.logging_config import configure_logging
    from campaign_manager.core.settings import settings

    configure_logging(settings.log_level)
    try:
        initialize_database(seed=True)
    except Exception:
        logger.exception("Error initializing database")
        sys.exit(1)
    logger.info("Database initialization complete!")
