"""Pydantic schemas for authentication endpoints."""

from pydantic import BaseModel, Field, model_validator

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    """Request model for account registration."""

    display_name: str = Field(min_length=2, max_length=50, description="Name shown in the app")
    email: str = Field(pattern=EMAIL_PATTERN, max_length=254)
    password: str = Field(min_length=6, max_length=128)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords must match")
        return self

    class Config:
        """Pydantic config."""

        json_schema_extra = {
            "example": {
                "display_name": "Jane Doe",
                "email": "jane@example.com",
                "password": "secret123",
                "confirm_password": "secret123",
            }
        }


class LoginRequest(BaseModel):
    """Request model for login."""

    email: str = Field(pattern=EMAIL_PATTERN, max_length=254)
    password: str = Field(min_length=6, max_length=128)


class PasswordResetRequest(BaseModel):
    """Request model for a password reset email."""

    email: str = Field(pattern=EMAIL_PATTERN, max_length=254)


class SessionResponse(BaseModel):
    """Current session as held by the app."""

    user_id: str | None = None
    email: str | None = None
    is_authenticated: bool
    is_email_verified: bool


class RegisterResponse(SessionResponse):
    """Session after registration."""

    requires_login_after_verification: bool = Field(
        default=False,
        description="True when no remote session was created; log in after clicking the link",
    )


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
