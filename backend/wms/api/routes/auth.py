import logging
from urllib.parse import parse_qs

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from wms.api.deps import get_current_user
from wms.core.security import create_access_token, verify_password
from wms.db.session import get_db
from wms.models.role import Role
from wms.models.user import User
from wms.schemas.auth import LoginRequest, TokenResponse
from wms.schemas.user import UserRead
from wms.services.rbac import parse_permissions


router = APIRouter()
logger = logging.getLogger(__name__)


async def parse_request_payload(request: Request) -> dict:
    """Accept JSON bodies and the form-encoded bodies sent by the OAuth2 docs login."""
    content_type = (request.headers.get("content-type") or "").split(";")[0].strip().lower()

    if content_type == "application/json":
        return await request.json()

    raw = (await request.body()).decode("utf-8", errors="ignore")
    if not raw:
        return {}

    parsed = parse_qs(raw, keep_blank_values=True)
    payload = {key: values[0] if values else "" for key, values in parsed.items()}
    # OAuth2PasswordRequestForm sends the identifier as "username"
    if "email" not in payload and "username" in payload:
        payload["email"] = payload.pop("username")
    return payload


@router.post("/login", response_model=TokenResponse)
async def login(request: Request, db: Session = Depends(get_db)) -> TokenResponse:
    payload_data = await parse_request_payload(request)
    try:
        payload = LoginRequest(**payload_data)
    except ValidationError:
        raise HTTPException(status_code=422, detail="Invalid credentials")

    user = db.scalar(select(User).where(User.email == payload.email))
    if not user or not user.is_active or not verify_password(payload.password, user.hashed_password):
        logger.warning("Failed login for %s", payload.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    role = db.scalar(select(Role).where(Role.id == user.role_id))
    token = create_access_token(subject=user.email, role=role.name if role else "")
    logger.info("User %s logged in", user.email)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=UserRead)
def me(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> UserRead:
    role = db.scalar(select(Role).where(Role.id == current_user.role_id))
    return UserRead(
        id=current_user.id,
        email=current_user.email,
        full_name=current_user.full_name,
        role=role.name if role else "",
        permissions=parse_permissions(role.permissions) if role else [],
    )
