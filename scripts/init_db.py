"""
Database initialization script

Run once to create the contacts collection indexes:
    python scripts/init_db.py
"""

import sys
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables before settings are read
load_dotenv()

from smsverify.core.config import settings
from smsverify.core.logging import setup_logging, get_logger
from smsverify.db.mongo import connect_to_mongo, close_mongo_connection
from smsverify.db.indexes import create_indexes

setup_logging()
logger = get_logger("scripts.init_db")


def main():
    logger.info(f"🔌 Connecting to MongoDB: {settings.MONGODB_DB_NAME}")
    connect_to_mongo()
    try:
        create_indexes()
        logger.info("✅ Database initialized")
    finally:
        close_mongo_connection()


if __name__ == "__main__":
    main()
