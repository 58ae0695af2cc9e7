# database.py
"""
SQLAlchemy database connection and session management.

This module provides:
- Database engine configuration for Azure SQL (MS SQL Server), or any
  SQLAlchemy URL given through DATABASE_URL
- Session factory used by the ledger store
- Connection utilities

Usage:
     from database import SessionLocal
     from services.ledger_store import SqlLedgerStore

     store = SqlLedgerStore(SessionLocal)
"""
import logging
import os
from urllib.parse import quote_plus

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

import config

logger = logging.getLogger(__name__)


def build_database_url() -> str:
     """
     Resolve the database URL.

     DATABASE_URL wins when set; otherwise the MS SQL Server URL is built
     from the DB_* variables using pymssql.
     """
     url = os.getenv("DATABASE_URL")
     if url:
          return url
     safe_user = quote_plus(config.DB_USER or "")
     safe_pass = quote_plus(config.DB_PASS or "")
     return f"mssql+pymssql://{safe_user}:{safe_pass}@{config.DB_SERVER}:{config.DB_PORT}/{config.DB_NAME}"


DATABASE_URL = build_database_url()

# No connection is opened until the first query.
if DATABASE_URL.startswith("sqlite"):
     engine = create_engine(DATABASE_URL, echo=config.SQL_ECHO)
else:
     engine = create_engine(
          DATABASE_URL,
          pool_size=5,
          max_overflow=10,
          pool_timeout=30,
          pool_recycle=1800,  # Recycle connections after 30 minutes
          echo=config.SQL_ECHO,
     )

# Session factory
SessionLocal = sessionmaker(
     bind=engine,
     autocommit=False,
     autoflush=False,
     expire_on_commit=False,
)


def init_db() -> None:
     """
     Initialize database tables.

     Creates all tables defined in the models if they don't exist.
     For production, use Alembic migrations instead.
     """
     from models import Base
     Base.metadata.create_all(bind=engine)
     logger.info("[Database] Tables created")


def check_connection() -> bool:
     """
     Test database connectivity.

     Returns:
          bool: True if connection successful, False otherwise
     """
     try:
          with engine.connect() as conn:
               conn.execute(text("SELECT 1"))
          return True
     except SQLAlchemyError as e:
          logger.error(f"[Database] Connection failed: {e}")
          return False
