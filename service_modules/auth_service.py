"""
Auth Service - handles trainer registration, login, token refresh and email
verification.
"""
from datetime import timedelta
from typing import Optional

from jose import JWTError

from .base import (
    HTTPException, uuid, json, logging, datetime,
    get_db_session, UserORM, load_json_list, validation_error
)
from .email_service import get_email_service
from .validation import validate_registration
from auth import (
    verify_password, get_password_hash, create_access_token, create_refresh_token, decode_token
)
from config import ACCESS_TOKEN_EXPIRE_MINUTES, REFRESH_TOKEN_EXPIRE_MINUTES, FRONTEND_URL

logger = logging.getLogger("gymbucket")

# Refresh token lifetime when "remember me" is not ticked
SESSION_REFRESH_MINUTES = 60 * 24


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class AuthService:
    """Service for managing authentication and user registration."""

    def user_to_dict(self, user: UserORM) -> dict:
        return {
            "id": user.id,
            "email": user.email,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "role": user.role,
            "is_active": bool(user.is_active),
            "avatar": user.avatar,
            "phone": user.phone,
            "specializations": load_json_list(user.specializations_json),
            "certifications": load_json_list(user.certifications_json),
            "experience": user.experience,
            "is_email_verified": bool(user.is_email_verified),
            "created_at": user.created_at,
            "last_login": user.last_login
        }

    def _issue_tokens(self, user: UserORM, remember_me: bool = True) -> dict:
        token = create_access_token({"sub": user.email, "user_id": user.id, "role": user.role})
        refresh_minutes = REFRESH_TOKEN_EXPIRE_MINUTES if remember_me else SESSION_REFRESH_MINUTES
        refresh_token = create_refresh_token(user.email, timedelta(minutes=refresh_minutes))
        return {
            "token": token,
            "refresh_token": refresh_token,
            "token_type": "bearer",
            "expires_in": ACCESS_TOKEN_EXPIRE_MINUTES * 60
        }

    def _send_verification(self, user: UserORM):
        verify_url = f"{FRONTEND_URL}/verify-email?token={user.email_verification_token}"
        email_service = get_email_service()
        if email_service.is_configured():
            email_service.send_verification_email(user.email, user.first_name, verify_url)
        else:
            logger.warning(f"SMTP not configured, verification email for {user.email} not sent")

    def email_exists(self, email: str) -> bool:
        db = get_db_session()
        try:
            return db.query(UserORM).filter(UserORM.email == normalize_email(email)).first() is not None
        finally:
            db.close()

    def register_user(self, user_data: dict) -> dict:
        """Register a new trainer. The account starts unverified."""
        errors = validate_registration(user_data)
        if errors:
            raise validation_error("Registration validation failed", errors)

        email = normalize_email(user_data["email"])
        logger.debug(f"register_user called for {email}")
        db = get_db_session()
        try:
            if db.query(UserORM).filter(UserORM.email == email).first():
                raise HTTPException(status_code=409, detail="Email is already registered")

            certification = user_data.get("certification")
            now = datetime.utcnow().isoformat()
            new_user = UserORM(
                id=str(uuid.uuid4()),
                email=email,
                hashed_password=get_password_hash(user_data["password"]),
                first_name=user_data["first_name"].strip(),
                last_name=user_data["last_name"].strip(),
                role="trainer",
                is_active=True,
                phone=user_data.get("phone") or None,
                specializations_json=json.dumps(user_data.get("specializations") or []),
                certifications_json=json.dumps([certification] if certification else []),
                experience=user_data.get("experience"),
                accept_newsletter=bool(user_data.get("accept_newsletter")),
                terms_agreed_at=now,
                is_email_verified=False,
                email_verification_token=str(uuid.uuid4()),
                created_at=now
            )

            db.add(new_user)
            db.commit()
            db.refresh(new_user)

            self._send_verification(new_user)
            logger.info(f"User registered successfully: {new_user.email}")

            return {
                "success": True,
                "message": "Account created. Check your inbox to verify your email.",
                "user": self.user_to_dict(new_user),
                "requires_verification": True
            }
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Registration failed for {email}: {e}")
            raise HTTPException(status_code=500, detail=f"Registration failed: {str(e)}")
        finally:
            db.close()

    def login(self, email: Optional[str], password: Optional[str], remember_me: bool = False) -> dict:
        if not email or not password:
            raise HTTPException(status_code=400, detail="Email and password are required")

        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.email == normalize_email(email)).first()
            if not user or not verify_password(password, user.hashed_password):
                logger.info(f"Failed login attempt for {email}")
                raise HTTPException(status_code=401, detail="Invalid email or password")
            if not user.is_active:
                raise HTTPException(status_code=403, detail="Account is disabled")

            user.last_login = datetime.utcnow().isoformat()
            db.commit()
            db.refresh(user)

            response = {"success": True, "message": "Login successful", "user": self.user_to_dict(user)}
            response.update(self._issue_tokens(user, remember_me))
            return response
        finally:
            db.close()

    def refresh(self, refresh_token: str) -> dict:
        invalid = HTTPException(status_code=401, detail="Invalid refresh token")
        try:
            payload = decode_token(refresh_token)
        except JWTError:
            raise invalid
        if payload.get("type") != "refresh" or not payload.get("sub"):
            raise invalid

        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.email == payload["sub"]).first()
            if not user:
                raise invalid
            if not user.is_active:
                raise HTTPException(status_code=403, detail="Account is disabled")

            response = {"success": True, "message": "Token refreshed", "user": self.user_to_dict(user)}
            response.update(self._issue_tokens(user))
            return response
        finally:
            db.close()

    def verify_email(self, token: str) -> dict:
        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.email_verification_token == token).first() if token else None
            if not user:
                raise HTTPException(status_code=400, detail="Invalid verification token")

            user.is_email_verified = True
            user.email_verification_token = None
            db.commit()
            logger.info(f"Email verified for user: {user.email}")
            return {"success": True, "message": "Email verified successfully"}
        finally:
            db.close()

    def resend_verification(self, email: str) -> dict:
        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.email == normalize_email(email)).first()
            if not user:
                raise HTTPException(status_code=404, detail="User not found")
            if user.is_email_verified:
                raise HTTPException(status_code=400, detail="Email is already verified")

            user.email_verification_token = str(uuid.uuid4())
            db.commit()
            db.refresh(user)

            self._send_verification(user)
            return {"success": True, "message": "Verification email sent again"}
        finally:
            db.close()


# Singleton instance
auth_service = AuthService()

def get_auth_service() -> AuthService:
    """Dependency injection helper."""
    return auth_service
