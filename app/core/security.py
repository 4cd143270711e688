import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError

from app.core.config import settings
from app.core.constants import UserRoleEnum


def create_access_token(
    user_id: uuid.UUID,
    organization_id: Optional[uuid.UUID],
    role: UserRoleEnum,
    expires_delta: Optional[timedelta] = None,
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode: Dict[str, Any] = {
        "sub": str(user_id),
        "role": role.value if isinstance(role, UserRoleEnum) else role,
        "exp": expire,
        "jti": str(uuid.uuid4()),
    }
    if organization_id is not None:
        to_encode["org_id"] = str(organization_id)
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verified claims of ``token``, or None when the signature or expiry check fails."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
