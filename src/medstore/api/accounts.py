"""FastAPI endpoints for sign-up, login and account administration."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from medstore.account.authentication import AuthenticateUser
from medstore.account.profile import ChangePassword, UpdateProfile
from medstore.account.registration import CreateAdmin, RegisterUser
from medstore.account.roles import ChangeUserRole
from medstore.account.user import User
from medstore.api.dependencies import current_user, require_admin
from medstore.api.schemas import (
    AuthResponse,
    ChangePasswordRequest,
    ChangeRoleRequest,
    CreateAdminRequest,
    LoginRequest,
    MessageResponse,
    SignupRequest,
    UpdateProfileRequest,
    UserResponse,
)
from medstore.shared.security import create_access_token

auth_router = APIRouter(prefix="/auth", tags=["auth"])


def _authenticated(user_id: str) -> AuthResponse:
    user = current_domain.repository_for(User).get(user_id)
    return AuthResponse(token=create_access_token(user.id), user=UserResponse.from_user(user))


@auth_router.post("/signup", status_code=201, response_model=AuthResponse)
async def signup(body: SignupRequest) -> AuthResponse:
    command = RegisterUser(
        name=body.name,
        email=body.email,
        password=body.password,
        phone=body.phone,
    )
    user_id = current_domain.process(command, asynchronous=False)
    return _authenticated(user_id)


@auth_router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest) -> AuthResponse:
    command = AuthenticateUser(email=body.email, password=body.password)
    user_id = current_domain.process(command, asynchronous=False)
    return _authenticated(user_id)


@auth_router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(current_user)) -> UserResponse:
    return UserResponse.from_user(user)


@auth_router.put("/profile", response_model=UserResponse)
async def update_profile(body: UpdateProfileRequest, user: User = Depends(current_user)) -> UserResponse:
    address = body.address.model_dump(exclude_none=True) if body.address else None
    command = UpdateProfile(
        user_id=user.id,
        name=body.name,
        phone=body.phone,
        address=json.dumps(address) if address else None,
    )
    current_domain.process(command, asynchronous=False)
    return UserResponse.from_user(current_domain.repository_for(User).get(user.id))


@auth_router.put("/change-password", response_model=MessageResponse)
async def change_password(body: ChangePasswordRequest, user: User = Depends(current_user)) -> MessageResponse:
    command = ChangePassword(
        user_id=user.id,
        current_password=body.current_password,
        new_password=body.new_password,
    )
    current_domain.process(command, asynchronous=False)
    return MessageResponse(message="Password updated successfully")


@auth_router.post("/create-admin", status_code=201, response_model=AuthResponse)
async def create_admin(body: CreateAdminRequest) -> AuthResponse:
    command = CreateAdmin(
        name=body.name,
        email=body.email,
        password=body.password,
        setup_key=body.setup_key,
    )
    admin_id = current_domain.process(command, asynchronous=False)
    return _authenticated(admin_id)


@auth_router.get("/users", response_model=list[UserResponse])
async def list_users(admin: User = Depends(require_admin)) -> list[UserResponse]:
    users = current_domain.repository_for(User).newest_first()
    return [UserResponse.from_user(u) for u in users]


@auth_router.put("/users/{user_id}/role", response_model=UserResponse)
async def change_role(user_id: str, body: ChangeRoleRequest, admin: User = Depends(require_admin)) -> UserResponse:
    command = ChangeUserRole(user_id=user_id, role=body.role, requested_by=admin.id)
    current_domain.process(command, asynchronous=False)
    return UserResponse.from_user(current_domain.repository_for(User).get(user_id))
