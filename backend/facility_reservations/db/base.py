"""
Declarative base and shared columns for the ORM models.
"""

from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class TimestampMixin:
    # Stores write these from the injected clock; the server defaults cover
    # rows inserted by migrations or by hand.
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())
