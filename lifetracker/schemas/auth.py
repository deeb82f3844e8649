"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class CurrentUser(BaseModel):
    """Authenticated principal (id, username, role) for dependency injection."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class LoginResponse(BaseModel):
    """JWT access token and the user it was issued for."""

    token: str = Field(..., description="JWT access token; send as 'Authorization: Bearer <token>'")
    user: CurrentUser
