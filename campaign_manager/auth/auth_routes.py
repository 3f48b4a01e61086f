# campaign_manager/auth/auth_routes.py
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from fastapi.security import OAuth2PasswordRequestForm
from typing import Annotated

from campaign_manager.auth import auth_utils
from campaign_manager.auth.auth_utils import get_current_user, require_role
from campaign_manager.core import errors
from campaign_manager.database import crud
from campaign_manager.database.db import get_db
from campaign_manager.database.models import User, UserRole
from campaign_manager.schemas import UserCreate

router = APIRouter()
logger = logging.getLogger(__name__)


def _token_claims(user: User) -> dict:
    return {"sub": user.email, "role": user.role}


def register_user(db: Session, name: str, email: str, password: str, role: str = UserRole.USER.value) -> User:
    """Validates the role and uniqueness, hashes the password and stores the user."""
    valid_roles = [r.value for r in UserRole]
    if role not in valid_roles:
        raise errors.ValidationError(f"Invalid role: {role}", details={"validRoles": valid_roles})
    if crud.get_user_by_email(db, email):
        raise errors.ValidationError(f"User with email {email} already exists")
    return crud.create_user(db, name, email, auth_utils.hash_password(password), role)


@router.post("/login")
def login(form_data: Annotated[OAuth2PasswordRequestForm, Depends()], db: Session = Depends(get_db)):
    """OAuth2 password flow; ``username`` carries the email address."""
    user = crud.get_user_by_email(db, form_data.username)
    if not user or not auth_utils.verify_password(form_data.password, user.hashed_password):
        logger.warning("Login failed", extra={"email": form_data.username})
        raise errors.UnauthorizedError("Invalid credentials")

    logger.info("Login successful", extra={"user_id": user.id})
    return {
        "access_token": auth_utils.create_access_token(data=_token_claims(user)),
        "token_type": "bearer",
        "refresh_token": auth_utils.create_refresh_token(data=_token_claims(user)),
        "user_id": user.id,
        "role": user.role,
    }


@router.post("/refresh")
def refresh_access_token(
    refresh_token: Annotated[str, Depends(auth_utils.oauth2_scheme)],
    db: Session = Depends(get_db),
):
    payload = auth_utils.decode_token(refresh_token)
    if payload is None:
        raise errors.UnauthorizedError("Could not validate refresh token")
    if payload.get("sub") is None or payload.get("token_type") != "refresh":
        raise errors.ForbiddenError("Invalid token type or missing subject")

    user = crud.get_user_by_email(db, payload["sub"])
    if not user:
        raise errors.UnauthorizedError("User not found.")

    return {
        "access_token": auth_utils.create_access_token(data=_token_claims(user)),
        "token_type": "bearer",
        "refresh_token": auth_utils.create_refresh_token(data=_token_claims(user)),
    }


@router.get("/me")
def read_current_user(current_user: User = Depends(get_current_user)):
    return {
        "id": current_user.id,
        "name": current_user.name,
        "email": current_user.email,
        "role": current_user.role,
    }


@router.post("/users", status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_role(UserRole.ADMIN)),
):
    """Admin-only account creation."""
    user = register_user(db, user_data.name, user_data.email, user_data.password, user_data.role)
    logger.info("User created", extra={"user_id": user.id, "created_by": admin.id})
    return {"message": "User created", "user_id": user.id}
