"""
Password Reset Service - handles reset token generation, validation and the
password change itself.
"""
import uuid
import secrets
import logging
import bcrypt
from datetime import datetime, timedelta

from database import get_db_session
from models_orm import UserORM, PasswordResetTokenORM
from config import FRONTEND_URL, RESET_TOKEN_EXPIRE_HOURS
from auth import get_password_hash
from .email_service import get_email_service

logger = logging.getLogger("gymbucket")

FORGOT_PASSWORD_MESSAGE = "If an account exists with that email, we've sent a reset link."


def _hash_token(token: str) -> str:
    return bcrypt.hashpw(token.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def _verify_token(plain_token: str, hashed_token: str) -> bool:
    return bcrypt.checkpw(plain_token.encode("utf-8"), hashed_token.encode("utf-8"))


def _find_valid_token(db, raw_token: str):
    now = datetime.utcnow().isoformat()
    tokens = db.query(PasswordResetTokenORM).filter(
        PasswordResetTokenORM.used_at.is_(None),
        PasswordResetTokenORM.expires_at > now,
    ).all()

    for token_record in tokens:
        if _verify_token(raw_token, token_record.token_hash):
            return token_record
    return None


def create_reset_token(db, user: UserORM) -> str:
    """Store the hash of a fresh token and return the raw value."""
    raw_token = secrets.token_urlsafe(32)
    db.add(PasswordResetTokenORM(
        id=str(uuid.uuid4()),
        user_id=user.id,
        token_hash=_hash_token(raw_token),
        expires_at=(datetime.utcnow() + timedelta(hours=RESET_TOKEN_EXPIRE_HOURS)).isoformat(),
    ))
    db.commit()
    return raw_token


def request_password_reset(email: str, base_url: str = FRONTEND_URL) -> dict:
    """Create a password reset token and send email. Always returns success to prevent email enumeration."""
    db = get_db_session()
    try:
        user = db.query(UserORM).filter(UserORM.email == (email or "").strip().lower()).first()
        if not user or not user.is_active:
            return {"status": "success", "message": FORGOT_PASSWORD_MESSAGE}

        raw_token = create_reset_token(db, user)

        reset_url = f"{base_url}/reset-password?token={raw_token}"
        email_service = get_email_service()
        if email_service.is_configured():
            email_service.send_password_reset_email(user.email, user.first_name, reset_url)
        else:
            logger.warning("SMTP not configured, password reset email not sent")

        return {"status": "success", "message": FORGOT_PASSWORD_MESSAGE}
    except Exception as e:
        db.rollback()
        logger.error(f"Password reset request error: {e}")
        return {"status": "success", "message": FORGOT_PASSWORD_MESSAGE}
    finally:
        db.close()


def validate_reset_token(raw_token: str):
    """Validate a reset token. Returns the user if valid, None otherwise."""
    db = get_db_session()
    try:
        token_record = _find_valid_token(db, raw_token)
        if not token_record:
            return None
        return db.query(UserORM).filter(UserORM.id == token_record.user_id).first()
    finally:
        db.close()


def reset_password(raw_token: str, new_password: str) -> dict:
    """Validate token and set new password. Mark token as used."""
    db = get_db_session()
    try:
        matched_token = _find_valid_token(db, raw_token)
        if not matched_token:
            return {"status": "error", "message": "Invalid or expired reset link. Please request a new one."}

        user = db.query(UserORM).filter(UserORM.id == matched_token.user_id).first()
        if not user:
            return {"status": "error", "message": "Account not found."}

        user.hashed_password = get_password_hash(new_password)
        matched_token.used_at = datetime.utcnow().isoformat()
        db.commit()

        logger.info(f"Password reset completed for user {user.id}")
        return {"status": "success", "message": "Password reset successfully. You can now log in."}
    except Exception as e:
        logger.error(f"Password reset error: {e}")
        db.rollback()
        return {"status": "error", "message": "An error occurred. Please try again."}
    finally:
        db.close()
