"""
SonicVision Pydantic Schemas
Request/response models for API validation and serialization
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.constants import MAX_PROMPT_LENGTH, GenerationStatus, MusicModel


# Base configuration for all schemas
class BaseSchema(BaseModel):
    """Base schema with common configuration"""
    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
        validate_assignment=True,
        protected_namespaces=()
    )


def _strip_prompt(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("Prompt must not be blank")
    return value.strip()


# User Schemas
class UserCreate(BaseSchema):
    """Schema for creating a user"""
    username: str = Field(..., min_length=1, max_length=255)


class UserResponse(BaseSchema):
    id: str
    username: str
    created_at: datetime


# Music Generation Schemas
class MusicGenerationCreate(BaseSchema):
    """Schema for submitting a music generation"""
    prompt: str = Field(..., min_length=1, max_length=MAX_PROMPT_LENGTH, description="Text prompt")
    style: Optional[str] = Field(None, max_length=1000, description="Genre/style tags")
    title: Optional[str] = Field(None, max_length=255)
    model: MusicModel = Field(default=MusicModel.V5, description="Provider model version")
    instrumental: bool = Field(default=False)
    duration: Optional[int] = Field(None, ge=1, le=480, description="Target duration in seconds")
    generate_image: bool = Field(default=False, description="Also generate a paired image")

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, value: str) -> str:
        return _strip_prompt(value)


class MusicGenerationUpdate(BaseSchema):
    """Schema for partial updates of a music generation"""
    title: Optional[str] = Field(None, max_length=255)
    style: Optional[str] = None
    duration: Optional[int] = None
    status: Optional[GenerationStatus] = None
    task_id: Optional[str] = None
    audio_url: Optional[str] = None
    image_url: Optional[str] = None
    error_message: Optional[str] = None
    generation_metadata: Optional[Dict[str, Any]] = None
    completed_at: Optional[datetime] = None


class MusicGenerationResponse(BaseSchema):
    """Schema for music generation responses"""
    id: str
    prompt: str
    style: Optional[str] = None
    title: Optional[str] = None
    model: str
    instrumental: bool
    duration: Optional[int] = None
    status: GenerationStatus
    audio_url: Optional[str] = None
    image_url: Optional[str] = None
    error_message: Optional[str] = None
    user_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None


# Image Generation Schemas
class ImageGenerationCreate(BaseSchema):
    """Schema for submitting an image generation"""
    prompt: str = Field(..., min_length=1, max_length=MAX_PROMPT_LENGTH)
    title: Optional[str] = Field(None, max_length=255)
    music_generation_id: Optional[str] = Field(None, description="Paired music generation")

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, value: str) -> str:
        return _strip_prompt(value)


class ImageGenerationUpdate(BaseSchema):
    """Schema for partial updates of an image generation"""
    title: Optional[str] = Field(None, max_length=255)
    status: Optional[GenerationStatus] = None
    image_url: Optional[str] = None
    error_message: Optional[str] = None
    completed_at: Optional[datetime] = None


class ImageGenerationResponse(BaseSchema):
    """Schema for image generation responses"""
    id: str
    prompt: str
    title: Optional[str] = None
    music_generation_id: Optional[str] = None
    user_id: Optional[str] = None
    status: GenerationStatus
    image_url: Optional[str] = None
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None
