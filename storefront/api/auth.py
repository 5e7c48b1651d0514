import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from jose import jwt
from passlib.context import CryptContext
from pydantic import ConfigDict, EmailStr, Field, field_validator, model_validator
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.dependencies import get_current_user
from storefront.models import User, get_db
from storefront.models.user import ROLE_USER
from storefront.schemas.common import CamelModel

router = APIRouter()
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
logger = logging.getLogger(__name__)


class RegisterRequest(CamelModel):
    display_name: str = Field(alias="displayName", min_length=1, max_length=255)
    email: EmailStr
    password: str
    confirm_password: str = Field(alias="confirmPassword")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters long")
        return v

    @model_validator(mode="after")
    def validate_registration(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Password confirmation does not match")
        return self


class RegisterResponse(CamelModel):
    id: int
    email: str
    display_name: str | None = Field(default=None, alias="displayName")
    role: str


class LoginRequest(CamelModel):
    email: EmailStr
    password: str

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"email": "user@example.com", "password": "securepassword"}]},
        populate_by_name=True,
    )


class TokenResponse(CamelModel):
    access_token: str = Field(alias="accessToken")
    token_type: str = Field(default="bearer", alias="tokenType")
    expires_in: int = Field(alias="expiresIn")
    role: str


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(user_id: int) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    to_encode = {"sub": str(user_id), "exp": expire, "type": "access"}
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


@router.post(
    "/register",
    response_model=RegisterResponse,
    summary="Register a new buyer",
)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a buyer account. Administrators are provisioned out of band."""
    if db.query(User).filter(User.email == body.email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    user = User(
        display_name=body.display_name,
        email=body.email,
        hashed_password=get_password_hash(body.password),
        role=ROLE_USER,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User %s registered", user.id)
    return user


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login and get access token",
)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
):
    user = db.query(User).filter(User.email == body.email).first()
    if not user or not verify_password(body.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return TokenResponse(
        accessToken=create_access_token(user.id),
        expiresIn=settings.JWT_EXPIRE_MINUTES * 60,
        role=user.role,
    )


@router.get(
    "/me",
    response_model=RegisterResponse,
    summary="Current user",
)
def me(current_user: Annotated[User, Depends(get_current_user)]):
    return current_user
