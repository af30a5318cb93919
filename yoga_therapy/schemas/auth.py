from typing import Literal, Optional

from pydantic import EmailStr, Field, model_validator

from .base import ApiModel


class LoginRequest(ApiModel):
    email: EmailStr
    password: str = Field(min_length=6)


class RegisterRequest(ApiModel):
    email: EmailStr
    password: str = Field(min_length=6)
    confirm_password: str
    name: str = Field(min_length=1)
    role: Literal["instructor", "patient"]
    instructor_id: Optional[str] = None

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


class UserBrief(ApiModel):
    id: str
    email: str
    name: str
    role: str


class AuthResponse(ApiModel):
    user: UserBrief
    token: str
