"""
Auth Routes - registration, login, token refresh, password reset and email
verification.
"""
from fastapi import APIRouter, Depends, HTTPException

from auth import get_current_user
from models import (
    RegisterRequest, LoginRequest, RefreshTokenRequest, ForgotPasswordRequest,
    ResetPasswordRequest, EmailVerificationRequest, ResendVerificationRequest
)
from models_orm import UserORM
from service_modules.auth_service import AuthService, get_auth_service
from service_modules import password_reset_service
from service_modules.base import validation_error
from service_modules.validation import validate_password_reset

router = APIRouter(prefix="/api/auth")


@router.post("/register")
async def register(
    data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new trainer account."""
    return service.register_user(data.model_dump())


@router.post("/login")
async def login(
    data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    return service.login(data.email, data.password, data.remember_me)


@router.post("/refresh")
async def refresh_token(
    data: RefreshTokenRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Exchange a refresh token for a new token pair."""
    return service.refresh(data.refresh_token)


@router.get("/check-email")
async def check_email(
    email: str,
    service: AuthService = Depends(get_auth_service)
):
    return {"exists": service.email_exists(email)}


@router.post("/forgot-password")
async def forgot_password(data: ForgotPasswordRequest):
    """Same answer whether or not the email is registered."""
    return password_reset_service.request_password_reset(data.email)


@router.get("/reset-password/validate")
async def validate_reset_token(token: str):
    """Lets the reset page check the link before showing the form."""
    user = password_reset_service.validate_reset_token(token)
    if not user:
        raise HTTPException(status_code=400, detail="Invalid or expired reset link")
    return {"valid": True, "email": user.email}


@router.post("/reset-password")
async def reset_password(data: ResetPasswordRequest):
    errors = validate_password_reset(data.password, data.confirm_password)
    if errors:
        raise validation_error("Password validation failed", errors)

    result = password_reset_service.reset_password(data.token, data.password)
    if result["status"] != "success":
        raise HTTPException(status_code=400, detail=result["message"])
    return result


@router.post("/verify-email")
async def verify_email(
    data: EmailVerificationRequest,
    service: AuthService = Depends(get_auth_service)
):
    return service.verify_email(data.token)


@router.post("/resend-verification")
async def resend_verification(
    data: ResendVerificationRequest,
    service: AuthService = Depends(get_auth_service)
):
    return service.resend_verification(data.email)


@router.post("/logout")
async def logout():
    # Tokens are stateless; the client drops them.
    return {"success": True, "message": "Logged out"}


@router.get("/health")
async def health():
    return {"success": True, "message": "Auth service is running"}


@router.get("/me")
async def get_me(
    current_user: UserORM = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    return service.user_to_dict(current_user)
