"""
SonicVision Database Models
SQLAlchemy ORM models for users and generation records
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    TIMESTAMP,
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from ..core.constants import DEFAULT_MUSIC_MODEL, GenerationStatus
from .connection import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp matching the TIMESTAMP columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


class User(Base):
    """Application user - optional owner of generation records"""
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        default=utcnow,
        server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"


class MusicGeneration(Base):
    """Music generation request and its provider result"""
    __tablename__ = "music_generations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    # Request
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    style: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    model: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=DEFAULT_MUSIC_MODEL.value
    )
    instrumental: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # seconds

    # Provider state
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=GenerationStatus.PENDING.value
    )
    task_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    audio_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # provider cover art
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # "metadata" is reserved on declarative classes
    generation_metadata: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        "metadata",
        JSONType,
        nullable=True
    )

    user_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        default=utcnow,
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP, nullable=True)

    images: Mapped[List["ImageGeneration"]] = relationship(
        "ImageGeneration",
        back_populates="music_generation",
        order_by="ImageGeneration.created_at"
    )

    __table_args__ = (
        Index("ix_music_generations_user_created", "user_id", "created_at"),
        Index("ix_music_generations_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<MusicGeneration(id={self.id}, status='{self.status}', model='{self.model}')>"


class ImageGeneration(Base):
    """Image generation request, optionally paired with a music generation"""
    __tablename__ = "image_generations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    music_generation_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("music_generations.id", ondelete="SET NULL"),
        nullable=True
    )
    user_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=GenerationStatus.PENDING.value
    )
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        default=utcnow,
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP, nullable=True)

    music_generation: Mapped[Optional["MusicGeneration"]] = relationship(
        "MusicGeneration",
        back_populates="images"
    )

    __table_args__ = (
        Index("ix_image_generations_user_created", "user_id", "created_at"),
        Index("ix_image_generations_music_generation_id", "music_generation_id"),
    )

    def __repr__(self) -> str:
        return f"<ImageGeneration(id={self.id}, status='{self.status}')>"
