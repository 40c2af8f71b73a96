from collections.abc import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.orm import Session

from wms.core.config import get_settings
from wms.core.security import decode_access_token
from wms.db.session import get_db
from wms.models.audit import AuditLog
from wms.models.role import Role
from wms.models.user import User
from wms.services.inventory import InventoryError
from wms.services.rbac import has_permission


settings = get_settings()
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_prefix}/auth/login")


def get_current_user(db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)) -> User:
    claims = decode_access_token(token)
    if not claims:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    user_email = claims.get("sub")
    token_role = claims.get("role", "")

    user = db.scalar(select(User).where(User.email == user_email))
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Inactive user")
    # a role change since login invalidates the token
    role = db.scalar(select(Role).where(Role.id == user.role_id))
    if (role.name if role else "") != token_role:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session expired")
    return user


def require_permission(permission: str) -> Callable:
    def checker(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> User:
        role = db.scalar(select(Role).where(Role.id == current_user.role_id))
        if not role or not has_permission(role.permissions, permission):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permission")
        return current_user

    return checker


def log_action(db: Session, user_id: int, action: str, entity: str, entity_id: int | None = None, detail: str = "") -> None:
    """Queue an audit row in the caller's unit of work; the caller commits."""
    db.add(AuditLog(user_id=user_id, action=action, entity=entity, entity_id=entity_id, detail=detail[:500]))


def http_error(exc: InventoryError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)
