# storefront/schemas/auth.py
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from storefront.schemas.cart import CartRead
from storefront.schemas.user import MIN_PASSWORD_LENGTH, UserRead


class RegisterRequest(SQLModel):
    """
    Self sign-up. Admin accounts are not self-service
    (see create_admin.py).
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    role: Literal["customer", "seller"] = "customer"

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class LoginRequest(SQLModel):
    """
    Credentials plus, optionally, the guest session token the client used
    while browsing anonymously; its cart is merged into the customer's.
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str
    session_id: str | None = Field(default=None, max_length=128)


class TokenRead(SQLModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
    cart: CartRead | None = None
