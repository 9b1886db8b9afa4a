from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from cocheras.enums.user_status import UserStatus


class UserBase(BaseModel):
    name: str = Field(..., max_length=100)
    last_name: str = Field(..., max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserInDB(UserBase):
    id: int
    status: UserStatus
    is_admin: bool = False
    last_login: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class UserResponse(UserInDB):
    pass


class UserPublic(BaseModel):
    id: int
    name: str
    last_name: str

    class Config:
        from_attributes = True


class UserChangePassword(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)

    class Config:
        json_schema_extra = {
            "example": {
                "current_password": "old_password123",
                "new_password": "new_secure_password456",
            }
        }


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class LoginResponse(Token):
    user_id: int
    name: str
    last_name: str
    email: EmailStr
