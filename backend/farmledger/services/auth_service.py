"""Authentication service."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from farmledger.auth.jwt import hash_password, verify_password
from farmledger.auth.rbac import ROLE_DESCRIPTIONS
from farmledger.models.user import Role, User, UserRole
from farmledger.schemas.auth import UserCreate, UserLogin, UserResponse


async def ensure_roles(db: AsyncSession) -> dict[str, Role]:
    """Create any missing RBAC roles; return all roles by name."""
    result = await db.execute(select(Role))
    existing = {r.name: r for r in result.scalars().all()}
    for role, description in ROLE_DESCRIPTIONS.items():
        if role.value not in existing:
            row = Role(name=role.value, description=description)
            db.add(row)
            existing[role.value] = row
    await db.flush()
    return existing


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    """Create user with roles. Users join a farm later, by creating one or being added to one."""
    roles = await ensure_roles(db)
    user = User(
        email=data.email,
        hashed_password=hash_password(data.password),
        full_name=data.full_name,
    )
    db.add(user)
    await db.flush()
    for name in dict.fromkeys(data.roles):
        db.add(UserRole(user_id=user.id, role_id=roles[name].id))
    await db.flush()
    return user


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(
        select(User)
        .where(User.email == email)
        .options(selectinload(User.user_roles).selectinload(UserRole.role))
    )
    return result.scalar_one_or_none()


async def authenticate_user(db: AsyncSession, data: UserLogin) -> User | None:
    """Authenticate user by email and password."""
    user = await get_user_by_email(db, data.email)
    if not user or not verify_password(data.password, user.hashed_password):
        return None
    return user


def user_to_response(user: User) -> UserResponse:
    """Convert user to response with roles."""
    roles = []
    for ur in user.user_roles:
        if ur.role:
            roles.append(ur.role.name)
    return UserResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        is_active=user.is_active,
        farm_id=user.farm_id,
        roles=roles,
    )
