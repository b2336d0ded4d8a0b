import logging
import uuid as uuid_lib
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import jwt
from jose.exceptions import JWTError, ExpiredSignatureError
from passlib.context import CryptContext

from app.db.session import get_db
from app.models.login_token import LoginToken
from app.models.user import User
from app.core.config import settings

logger = logging.getLogger(__name__)

# Security scheme for Bearer token
security = HTTPBearer()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password with bcrypt. Raises ValueError if it exceeds bcrypt's input limit."""
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password too long (max {MAX_PASSWORD_BYTES} bytes)")
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    if len(plain_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    return pwd_context.verify(plain_password, password_hash)


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Return the user for valid credentials, otherwise None (unknown email and bad password look the same)."""
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        logger.info(f"Login failed: no user for email={email}")
        return None
    if not verify_password(password, user.password_hash):
        logger.info(f"Login failed: bad password for user id={user.id}")
        return None
    return user


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> tuple[str, datetime]:
    """
    Create a signed JWT for the user.

    Returns:
        (token, expires_at)
    """
    expires_at = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "exp": expires_at,
        "iat": datetime.now(timezone.utc),
    }
    token = jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return token, expires_at


def issue_login_token(db: Session, user: User) -> str:
    """Create an access token and record it in login_tokens."""
    token, expires_at = create_access_token(user)
    db.add(LoginToken(user_id=user.id, token=token, expires_at=expires_at))
    db.commit()
    logger.info(f"Issued login token for user id={user.id}, expires_at={expires_at.isoformat()}")
    return token


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises:
        HTTPException: 401 if the token is invalid or expired
    """
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token verification failed",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except JWTError as e:
        logger.warning(f"JWT verification error: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token verification failed",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the authenticated user from a Bearer token.

    The token's sub claim must be the id of an existing user.
    """
    token = credentials.credentials
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing token"
        )

    claims = decode_access_token(token)
    sub = claims.get("sub")
    try:
        user_id = uuid_lib.UUID(str(sub))
    except (ValueError, TypeError):
        logger.warning(f"Token has invalid subject (sub) claim: {sub!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token verification failed"
        )

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        logger.warning(f"Token subject {user_id} does not match any user")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token verification failed"
        )
    return user
