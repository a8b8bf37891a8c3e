from pydantic import BaseModel, Field


class TrainerLoginRequest(BaseModel):
    password: str = ""


class ClientLoginRequest(BaseModel):
    access_code: str = ""


class AuthUser(BaseModel):
    """Sent back to the app after login; camelCase keys are what the mobile client reads."""
    role: str
    client_id: int | None = Field(default=None, serialization_alias="clientId")
    first_name: str | None = Field(default=None, serialization_alias="firstName")
    last_name: str | None = Field(default=None, serialization_alias="lastName")


class LoginResponse(BaseModel):
    token: str
    user: AuthUser
