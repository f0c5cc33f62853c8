"""
Data models — document de page persisté + schémas d'API.
SQLAlchemy (SQLite) + Pydantic v2
"""
from datetime import datetime
from typing import Any, Dict, Optional

import sqlalchemy as sa
from pydantic import BaseModel, Field
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .blocks import BlockType


# ── ORM ────────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    pass


class PageDocumentDB(Base):
    """Document complet d'une page (champs + blocs), remplacé en bloc à chaque sauvegarde."""
    __tablename__ = "page_documents"
    page_id:    Mapped[str]      = mapped_column(sa.String, primary_key=True)
    document:   Mapped[str]      = mapped_column(sa.Text, default="{}")
    version:    Mapped[int]      = mapped_column(sa.Integer, default=0)
    updated_at: Mapped[datetime] = mapped_column(sa.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


# ── PYDANTIC SCHEMAS ────────────────────────────────────────────────────

class AddBlockRequest(BaseModel):
    type: BlockType


class UpdateBlockRequest(BaseModel):
    config: Dict[str, Any] = Field(default_factory=dict)


class SaveRequest(BaseModel):
    expected_version: Optional[int] = None
