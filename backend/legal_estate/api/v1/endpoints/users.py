"""
Staff directory endpoints
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from legal_estate.api.v1.deps import get_user_service
from legal_estate.db.models import UserRole
from legal_estate.db.schemas import UserFilter, UserResponse
from legal_estate.services.user_service import UserService

router = APIRouter()


@router.get("/", response_model=List[UserResponse])
async def list_users(
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    users: UserService = Depends(get_user_service),
):
    """Active staff members, for assignment pickers."""
    return await users.list_users(UserFilter(role=role))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, users: UserService = Depends(get_user_service)):
    return await users.get_user(user_id)
