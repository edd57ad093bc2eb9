from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from liquorpos.models.user import UserRole


class UserOut(BaseModel):
    id: int
    username: str
    name: str
    role: UserRole
    is_active: bool = True
    created_at: datetime

    model_config = {"from_attributes": True}


class UserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=320)
    name: str = Field(min_length=2, max_length=120)
    password: str = Field(min_length=8, max_length=128)
    role: UserRole = UserRole.CASHIER

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: str | UserRole):
        if isinstance(value, UserRole) or not isinstance(value, str):
            return value
        return value.strip().lower()
