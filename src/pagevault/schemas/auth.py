"""Pydantic schemas for registration and login.

Learn: Request bodies are validated before they reach the services:
a missing or empty email/password becomes a 400 in main.py's
validation handler. Responses use camelCase on the wire (userId,
accessToken) via an alias generator.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RegisterResponse(CamelModel):
    message: str
    user_id: int


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"


class MeResponse(BaseModel):
    """Identity as asserted by the token, not re-read from the database."""
    id: int
    email: str
