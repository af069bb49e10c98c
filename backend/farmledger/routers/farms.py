"""Farm (tenant) API routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.auth.deps import get_current_farm_id, get_current_user, get_user_roles
from farmledger.auth.rbac import can_create_farm, can_manage_members
from farmledger.database import get_db
from farmledger.models.audit import AuditLog
from farmledger.models.farm import Farm
from farmledger.models.user import User
from farmledger.schemas.auth import UserResponse
from farmledger.schemas.farm import FarmCreate, FarmMemberAdd, FarmResponse
from farmledger.services.auth_service import get_user_by_email, user_to_response

router = APIRouter(prefix="/farms", tags=["farms"])


@router.post("", response_model=FarmResponse, status_code=201)
async def create_farm(
    data: FarmCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    """Create a farm and attach the calling user to it."""
    if not can_create_farm(roles):
        raise HTTPException(status_code=403, detail="Cannot create farm")
    if user.farm_id is not None:
        raise HTTPException(status_code=400, detail="User already belongs to a farm")
    farm = Farm(name=data.name, location=data.location, description=data.description)
    db.add(farm)
    await db.flush()
    user.farm_id = farm.id
    db.add(AuditLog(
        farm_id=farm.id,
        user_id=user.id,
        action="create",
        entity_type="farm",
        entity_id=farm.id,
        new_value=farm.name,
    ))
    await db.flush()
    logger.info("Farm {} created by user {}", farm.id, user.id)
    return FarmResponse.model_validate(farm)


@router.get("/current", response_model=FarmResponse)
async def get_current_farm(
    db: Annotated[AsyncSession, Depends(get_db)],
    farm_id: Annotated[int, Depends(get_current_farm_id)],
):
    farm = await db.get(Farm, farm_id)
    if not farm:
        raise HTTPException(status_code=404, detail="Farm not found")
    return FarmResponse.model_validate(farm)


@router.post("/current/members", response_model=UserResponse)
async def add_member(
    data: FarmMemberAdd,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    farm_id: Annotated[int, Depends(get_current_farm_id)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    """Attach an already registered user (manager, staff, ...) to the caller's farm."""
    if not can_manage_members(roles):
        raise HTTPException(status_code=403, detail="Cannot manage farm members")
    member = await get_user_by_email(db, data.email)
    if not member:
        raise HTTPException(status_code=404, detail="User not found")
    if member.farm_id is not None:
        raise HTTPException(status_code=400, detail="User already belongs to a farm")
    member.farm_id = farm_id
    db.add(AuditLog(
        farm_id=farm_id,
        user_id=user.id,
        action="add_member",
        entity_type="user",
        entity_id=member.id,
        new_value=member.email,
    ))
    await db.flush()
    logger.info("User {} added to farm {} by user {}", member.id, farm_id, user.id)
    return user_to_response(member)
