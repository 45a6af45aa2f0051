"""
Authentication endpoints.

Handles registration, login, logout and the current user's profile.
Sessions travel as an HTTP-only cookie.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from app.api.dependencies import get_current_user, get_session_token, get_user_service
from app.core.config import settings
from app.core.errors import ValidationError
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.user import LoginRequest, PasswordChange, ProfileUpdate, RegisterRequest, UserResponse
from app.services.user_service import UserService

router = APIRouter()


def set_session_cookie(response: Response, token: str, persistent: bool = True) -> None:
    """Attach the session cookie. Non-persistent cookies end with the browser session."""
    response.set_cookie(key=settings.SESSION_COOKIE_NAME, value=token,
                        max_age=settings.session_ttl_seconds if persistent else None, path="/",
                        secure=settings.SESSION_SECURE, httponly=settings.SESSION_HTTP_ONLY, samesite="lax", )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, path="/", secure=settings.SESSION_SECURE,
                           httponly=settings.SESSION_HTTP_ONLY, samesite="lax", )


@router.post("/register",
             summary="User registration endpoint.",
             response_model=UserResponse,
             status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, response: Response, service: UserService = Depends(get_user_service)):
    """
    Register a new user and start a session.

    Args:
        data: Registration data (email, password, displayName)

    Returns:
        Created user data (without password)

    Raises:
        400: If a field fails validation
        409: If the email is already registered
    """
    user, token = service.register(data.email, data.display_name, data.password)
    set_session_cookie(response, token)
    return UserResponse.model_validate(user)


@router.post("/login",
             summary="User login endpoint.",
             response_model=UserResponse)
def login(data: LoginRequest, response: Response, service: UserService = Depends(get_user_service)):
    """
    Authenticate via JSON body and start a session.

    With ``rememberMe`` the cookie persists for the session lifetime;
    otherwise it is dropped when the browser closes.
    """
    user, token = service.login(data.email, data.password)
    set_session_cookie(response, token, persistent=data.remember_me)
    return UserResponse.model_validate(user)


@router.post("/logout",
             summary="End the current session.",
             response_model=MessageResponse)
def logout(response: Response, token: Optional[str] = Depends(get_session_token),
           service: UserService = Depends(get_user_service)):
    if not token:
        raise ValidationError("4011", "no active session found")
    service.logout(token)
    clear_session_cookie(response)
    return MessageResponse(message="Logged out successfully")


@router.get("/me",
            summary="User info endpoint.",
            response_model=UserResponse)
def me(user: User = Depends(get_current_user)):
    return UserResponse.model_validate(user)


@router.put("/me",
            summary="Update the current user's profile.",
            response_model=UserResponse)
def update_me(data: ProfileUpdate, user: User = Depends(get_current_user),
              service: UserService = Depends(get_user_service)):
    updated = service.update_profile(user.id, data.display_name)
    return UserResponse.model_validate(updated)


@router.put("/password",
            summary="Change the current user's password.",
            response_model=MessageResponse)
def change_password(data: PasswordChange, response: Response, user: User = Depends(get_current_user),
                    service: UserService = Depends(get_user_service)):
    """Change the password. All other sessions are signed out."""
    token = service.change_password(user.id, data.current_password, data.new_password)
    set_session_cookie(response, token)
    return MessageResponse(message="Password changed successfully")
