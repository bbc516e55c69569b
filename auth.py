from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt

from fastapi import Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from database import get_db
from models_orm import UserORM
from config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES, REFRESH_TOKEN_EXPIRE_MINUTES

import bcrypt
import logging
import time

logger = logging.getLogger("gymbucket")

def verify_password(plain_password, hashed_password):
    # bcrypt requires bytes for both
    pwd_bytes = plain_password.encode('utf-8')
    hashed_bytes = hashed_password.encode('utf-8')
    return bcrypt.checkpw(pwd_bytes, hashed_bytes)

def get_password_hash(password):
    # bcrypt requires bytes, returns bytes. We store as string.
    pwd_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(pwd_bytes, salt)
    return hashed.decode('utf-8')

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    now = datetime.utcnow()
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire, "iat": now})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt

def create_refresh_token(email: str, expires_delta: Optional[timedelta] = None):
    if expires_delta is None:
        expires_delta = timedelta(minutes=REFRESH_TOKEN_EXPIRE_MINUTES)
    return create_access_token({"sub": email, "type": "refresh"}, expires_delta)

def decode_token(token: str) -> dict:
    """Verify signature and expiry. Raises JWTError on any failure."""
    return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])

def is_token_expired(token: Optional[str], now: Optional[datetime] = None) -> bool:
    """
    Best-effort expiry check: reads the `exp` claim without verifying the
    signature. Anything that cannot be decoded counts as expired.
    """
    if not token:
        return True
    try:
        claims = jwt.get_unverified_claims(token)
        exp = claims["exp"]
        current = now.timestamp() if now else time.time()
        return current >= float(exp)
    except (JWTError, KeyError, TypeError, ValueError):
        return True

async def get_current_user(request: Request, db: Session = Depends(get_db)):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = None
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header.replace("Bearer ", "")

    if not token:
        logger.debug("AUTH: No bearer token on request")
        raise credentials_exception

    try:
        payload = decode_token(token)
        email: str = payload.get("sub")
        if email is None or payload.get("type") == "refresh":
            logger.debug("AUTH: Token missing 'sub' or is a refresh token")
            raise credentials_exception
    except JWTError as e:
        logger.info(f"AUTH: JWT validation error: {e}")
        raise credentials_exception

    user = db.query(UserORM).filter(UserORM.email == email).first()
    if user is None:
        logger.info(f"AUTH: User {email} not found in DB")
        raise credentials_exception
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled")

    return user
