"""
SonicVision Users API Routes
"""

from fastapi import APIRouter, Depends, HTTPException

from ...database.schemas import UserCreate, UserResponse
from ...database.storage import BaseStorage
from ..dependencies import get_storage

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(body: UserCreate, storage: BaseStorage = Depends(get_storage)):
    if await storage.get_user_by_username(body.username) is not None:
        raise HTTPException(status_code=409, detail=f"Username {body.username} is taken")
    return await storage.create_user(body)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, storage: BaseStorage = Depends(get_storage)):
    user = await storage.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return user
