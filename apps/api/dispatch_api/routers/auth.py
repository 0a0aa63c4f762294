from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from dispatch_api.core.config import settings
from dispatch_api.scheduling.enums import Role

router = APIRouter()
security = HTTPBearer()

ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24 * 7  # 7 days


@dataclass(frozen=True)
class CurrentUser:
    employee_id: str
    role: Role


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """Create a JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> CurrentUser:
    """Decode a bearer token into its `sub` and `role` claims."""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )

    employee_id = payload.get("sub")
    try:
        role = Role(payload.get("role"))
    except ValueError:
        role = None
    if employee_id is None or role is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )
    return CurrentUser(employee_id=employee_id, role=role)


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> CurrentUser:
    return decode_token(credentials.credentials)


def require_role(minimum: Role):
    """Dependency factory: reject users ranked below `minimum`."""

    def check(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not user.role.at_least(minimum):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires {minimum.value} role or above",
            )
        return user

    return check


@router.get("/me")
def get_current_user_info(user: CurrentUser = Depends(get_current_user)):
    """Claims of the authenticated caller."""
    return {"employee_id": user.employee_id, "role": user.role.value}
