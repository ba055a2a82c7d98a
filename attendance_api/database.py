"""
Database Connection and Pool Management
Uses PostgreSQL with asyncpg
"""

import logging
from databases import Database
from sqlalchemy import MetaData
from sqlalchemy.orm import declarative_base
from attendance_api.config import settings

logger = logging.getLogger(__name__)

# Database URL
DATABASE_URL = settings.DATABASE_URL

# For Supabase connection pooler (pgbouncer), disable prepared statements
if "pooler.supabase.com" in DATABASE_URL:
    db_options = {"min_size": settings.DB_POOL_MIN, "max_size": settings.DB_POOL_MAX, "statement_cache_size": 0}
else:
    db_options = {"min_size": settings.DB_POOL_MIN, "max_size": settings.DB_POOL_MAX}

# Pooled database instance for async queries
database = Database(DATABASE_URL, **db_options)

# Metadata for models
metadata = MetaData()

# Base class for models
Base = declarative_base(metadata=metadata)


# Dependency to get database connection
async def get_database() -> Database:
    """Get database connection"""
    return database


async def connect_db():
    """Connect to database on startup"""
    await database.connect()
    logger.info("Database connected (pool %s-%s)", settings.DB_POOL_MIN, settings.DB_POOL_MAX)


async def disconnect_db():
    """Disconnect from database on shutdown"""
    await database.disconnect()
    logger.info("Database disconnected")
