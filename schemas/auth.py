from pydantic import BaseModel, Field
from typing import Literal


class Credentials(BaseModel):
    """
    Username/password pair sent to /auth/register and /auth/login.
    Emptiness is checked by the router so the error matches the API contract.
    """
    username: str = Field("", max_length=64)
    password: str = Field("", max_length=128)


class UserInfo(BaseModel):
    id: int
    username: str
    type: Literal["user", "admin"]

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """
    Response for a successful register or login.
    """
    token: str
    token_type: Literal["bearer"] = "bearer"
    expires_in_ms: int
    user: UserInfo


class RegisterResponse(TokenResponse):
    message: str = "User created successfully"
