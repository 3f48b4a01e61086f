# campaign_manager/auth/auth_utils.py
from passlib.context import CryptContext
from jose import JWTError, jwt
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
import uuid

from campaign_manager.core import errors
from campaign_manager.core.settings import settings
from campaign_manager.database import crud
from campaign_manager.database.db import get_db
from campaign_manager.database.models import User, UserRole

SECRET_KEY = settings.secret_key
ALGORITHM = "HS256"

ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_exp_minutes
REFRESH_TOKEN_EXPIRE_DAYS = settings.refresh_token_exp_days

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

def _password_meets_policy(password: str) -> bool:
    """Basic password complexity policy: length>=10, upper, lower, digit, symbol."""
    if len(password) < 10:
        return False
    classes = {
        "upper": any(c.isupper() for c in password),
        "lower": any(c.islower() for c in password),
        "digit": any(c.isdigit() for c in password),
        "symbol": any(c in "!@#$%^&*()-_=+[]{};:,<.>/?" for c in password),
    }
    return all(classes.values())

def hash_password(password: str):
    if not _password_meets_policy(password):
        raise errors.ValidationError("Password does not meet complexity requirements.")
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed: str):
    return pwd_context.verify(plain_password, hashed)

def _create_token(data: dict, token_type: str, expires_delta: timedelta):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire, "token_type": token_type, "jti": str(uuid.uuid4())})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """
    Creates a JWT access token.
    data: Dictionary to encode into the token (e.g., {"sub": email, "role": role}).
    expires_delta: Optional timedelta for token expiration.
    """
    return _create_token(data, "access", expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))

def create_refresh_token(data: dict, expires_delta: Optional[timedelta] = None):
    """Creates a JWT refresh token; same claims as the access token, longer lifetime."""
    return _create_token(data, "refresh", expires_delta or timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS))

def decode_token(token: str):
    """Decodes a JWT token. Returns payload or None if decoding fails."""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None

def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    """
    Dependency returning the user behind a bearer access token.
    Raises UnauthorizedError if the token is invalid or the user is gone.
    """
    payload = decode_token(token)
    if payload is None:
        raise errors.UnauthorizedError("Access token expired or invalid")
    email = payload.get("sub")
    if email is None or payload.get("token_type") != "access" or payload.get("jti") is None:
        raise errors.UnauthorizedError("Could not validate credentials")

    user = crud.get_user_by_email(db, email=email)
    if user is None:
        raise errors.UnauthorizedError("Could not validate credentials")
    return user

def require_role(required_role: UserRole):
    """Dependency factory: the current user must hold ``required_role``."""
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role != required_role.value:
            raise errors.ForbiddenError(
                "Insufficient permissions",
                details={"requiredRole": required_role.value, "userRole": current_user.role},
            )
        return current_user
    return checker
