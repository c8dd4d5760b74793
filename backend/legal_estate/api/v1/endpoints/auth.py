"""
Authentication endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status

from legal_estate.api.v1.deps import get_current_user, get_user_service
from legal_estate.core.security import create_access_token
from legal_estate.db.models import User
from legal_estate.db.schemas import TokenResponse, UserLogin, UserResponse
from legal_estate.services.user_service import UserService

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(form_data: UserLogin, users: UserService = Depends(get_user_service)):
    """Exchange email and password for a bearer token."""
    email = form_data.email.strip().lower()
    user = await users.authenticate(email, form_data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    access_token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return current_user
