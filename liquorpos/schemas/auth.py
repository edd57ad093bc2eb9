from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from liquorpos.schemas.user import UserOut


class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=128)

    @model_validator(mode="before")
    @classmethod
    def accept_email_field(cls, data):
        if not isinstance(data, dict):
            return data
        if data.get("username"):
            return data
        value = data.get("email")
        if isinstance(value, str) and value.strip():
            data["username"] = value
        return data

    @field_validator("username")
    @classmethod
    def normalize_username(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("username must not be empty")
        return normalized


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserOut
