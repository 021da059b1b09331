"""Authentication utilities."""

from datetime import UTC, datetime, timedelta

import bcrypt
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from iiifdims.config import config
from iiifdims.models import User


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(
        plain_password.encode("utf-8"), hashed_password.encode("utf-8")
    )


def get_password_hash(password: str) -> str:
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def create_access_token(subject: str, expires_delta: timedelta | None = None) -> str:
    """Create a signed session token for ``subject`` (an email)."""
    lifetime = expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims: dict[str, object] = {
        "sub": subject,
        "exp": datetime.now(UTC) + lifetime,
    }
    encoded: str = jwt.encode(claims, config.SECRET_KEY, algorithm=config.ALGORITHM)
    return encoded


def decode_access_token(token: str) -> str | None:
    """Return the email a session token was issued for, or None."""
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except JWTError:
        return None
    email: str | None = payload.get("sub")
    return email


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def authenticate_user(
    db: AsyncSession, email: str, password: str
) -> User | None:
    user = await get_user_by_email(db, email)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


async def ensure_initial_admin(db: AsyncSession) -> User | None:
    """Create the configured admin account on an empty install."""
    email = config.INITIAL_ADMIN_EMAIL
    password = config.INITIAL_ADMIN_PASSWORD
    if not email or not password:
        return None

    existing_any = await db.execute(select(User.id).limit(1))
    if existing_any.scalar_one_or_none() is not None:
        return None

    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        is_active=True,
        is_admin=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user
