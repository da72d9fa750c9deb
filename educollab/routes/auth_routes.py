from enum import Enum

from fastapi import APIRouter, Depends
from pydantic import field_validator
from sqlalchemy.orm import Session

from educollab.auth import jwt_handler
from educollab.auth.dependencies import (
    normalize_email,
    require_admin,
    require_authenticated,
    require_self,
)
from educollab.core.errors import not_found
from educollab.database import get_db
from educollab.models.account import Role
from educollab.schemas import AccountResponse, ApiModel, InsertResponse
from educollab.services import accounts

router = APIRouter(tags=['auth'])

SELF_ASSIGNABLE_ROLES = {Role.UNASSIGNED, Role.STUDENT, Role.TUTOR}


class CheckableRole(str, Enum):
    ADMIN = Role.ADMIN.value
    STUDENT = Role.STUDENT.value
    TUTOR = Role.TUTOR.value


class LoginRequest(ApiModel):
    email: str

    class Config:
        extra = 'allow'

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = normalize_email(value)
        if not normalized:
            raise ValueError('Email is required.')
        return normalized


class LoginResponse(ApiModel):
    user_token: str


class RegisterRequest(ApiModel):
    email: str
    name: str | None = None
    photo_url: str | None = None
    role: Role = Role.UNASSIGNED

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = normalize_email(value)
        if '@' not in normalized:
            raise ValueError('A valid email is required.')
        return normalized

    @field_validator('role')
    @classmethod
    def validate_role(cls, value: Role) -> Role:
        if value not in SELF_ASSIGNABLE_ROLES:
            raise ValueError('Admin accounts cannot be self-registered.')
        return value


class UpdateRoleRequest(ApiModel):
    email: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return normalize_email(value)


@router.post('/user-login', response_model=LoginResponse)
def user_login(data: LoginRequest):
    claims = data.model_dump()
    return LoginResponse(user_token=jwt_handler.create_access_token(claims))


@router.post('/users', response_model=InsertResponse)
def register_user(data: RegisterRequest, db: Session = Depends(get_db)):
    account = accounts.register_account(
        db,
        email=data.email,
        role=data.role,
        name=data.name,
        photo_url=data.photo_url,
    )
    return InsertResponse(inserted_id=account.id)


@router.get('/users', response_model=list[AccountResponse], dependencies=[Depends(require_admin)])
def list_users(db: Session = Depends(get_db)):
    return accounts.list_accounts(db)


@router.patch('/update-role', response_model=AccountResponse, dependencies=[Depends(require_admin)])
def update_role(data: UpdateRoleRequest, db: Session = Depends(get_db)):
    return accounts.promote_account(db, data.email, Role.ADMIN)


@router.get('/user/{role}/{email}', dependencies=[Depends(require_self)])
def check_role(role: CheckableRole, email: str, db: Session = Depends(get_db)):
    account = accounts.get_account(db, normalize_email(email))
    has_role = account is not None and account.role_value == Role(role.value)
    return {role.value: has_role}


@router.get('/me', response_model=AccountResponse)
def me(claims: dict = Depends(require_authenticated), db: Session = Depends(get_db)):
    account = accounts.get_account(db, normalize_email(claims['email']))
    if account is None:
        raise not_found('Account not found.')
    return account
