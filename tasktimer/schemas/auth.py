from __future__ import annotations

from typing import Optional

from .common import ApiModel, UtcDateTime


class SignupRequest(ApiModel):
    # Optional so that missing fields reach the handler and get the
    # "All fields are required" message instead of a schema error list.
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {"email": "ada@example.com", "password": "hunter22", "name": "Ada"}
        },
    }


class LoginRequest(ApiModel):
    email: Optional[str] = None
    password: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {"email": "ada@example.com", "password": "hunter22"}
        },
    }


class UserOut(ApiModel):
    id: str
    email: str
    name: str
    created_at: UtcDateTime


class UserEnvelope(ApiModel):
    user: UserOut
