"""
Authentication API endpoints for registration, login and user information.
Provides JWT-based authentication with role claims.
"""

from fastapi import APIRouter, Depends, status
from app.models.user import User
from app.services.auth import AuthService
from app.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    AuthUser,
    AuthResponse,
    CurrentUserResponse
)
from app.schemas.error import error_responses
from app.utils.dependencies import get_auth_service, get_current_user


router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_response(message: str, user: User, token: str) -> AuthResponse:
    return AuthResponse(
        message=message,
        token=token,
        user=AuthUser(
            id=str(user.id),
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role
        )
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
    description="Create an account (buyer unless a role is given) and return an access token",
    responses=error_responses(400, 422)
)
async def register(
    register_data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> AuthResponse:
    """
    Register a new user.

    Raises:
        ValidationError: If the email is taken or an admin account is requested
    """
    user, token = await auth_service.register(register_data)
    return _auth_response("User created successfully", user, token)


@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="User login",
    description="Authenticate user with email and password, returns a JWT access token",
    responses=error_responses(401, 422)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> AuthResponse:
    """
    Authenticate user and return a JWT access token.

    Raises:
        InvalidCredentialsError: If credentials are invalid
    """
    user, token = await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )
    return _auth_response("Login successful", user, token)


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    summary="Get current user",
    description="Get the profile of the authenticated user",
    responses=error_responses(401)
)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
) -> CurrentUserResponse:
    return CurrentUserResponse.model_validate({"user": current_user.to_dict()})
