"""Auth API routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from farmledger.auth.deps import get_current_user
from farmledger.auth.jwt import create_access_token
from farmledger.database import get_db
from farmledger.models.user import User, UserRole
from farmledger.schemas.auth import Token, UserCreate, UserLogin, UserResponse
from farmledger.services.auth_service import authenticate_user, create_user, user_to_response

router = APIRouter(prefix="/auth", tags=["auth"])


async def _load_user(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(
        select(User)
        .where(User.id == user_id)
        .options(selectinload(User.user_roles).selectinload(UserRole.role))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


@router.post("/register", response_model=Token)
async def register(
    data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    result = await db.execute(select(User).where(User.email == data.email))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Email already registered")
    user = await create_user(db, data)
    user = await _load_user(db, user.id)
    logger.info("Registered user {} with roles {}", user.id, list(data.roles))
    token = create_access_token(user.id, user.farm_id)
    return Token(access_token=token, user=user_to_response(user))


@router.post("/login", response_model=Token)
async def login(
    data: UserLogin,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    user = await authenticate_user(db, data)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    user = await _load_user(db, user.id)
    token = create_access_token(user.id, user.farm_id)
    return Token(access_token=token, user=user_to_response(user))


@router.get("/me", response_model=UserResponse)
async def me(user: Annotated[User, Depends(get_current_user)]):
    return user_to_response(user)
