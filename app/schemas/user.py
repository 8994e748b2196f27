import re
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator


_LOWER_RE = re.compile(r"[a-z]")
_UPPER_RE = re.compile(r"[A-Z]")
_DIGIT_RE = re.compile(r"\d")


# 🔹 관리자 계정 생성 요청
class UserCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    email: EmailStr
    firstname: str = Field(..., min_length=1, max_length=100)
    lastname: str = Field(..., min_length=1, max_length=100)
    roles: List[uuid.UUID] = Field(..., min_length=1)
    prefered_language: Optional[str] = Field(None, alias="preferedLanguage", max_length=20)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


# 🔹 관리자 계정 수정 요청 (부분 수정)
class UserUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    email: Optional[EmailStr] = None
    firstname: Optional[str] = Field(None, min_length=1, max_length=100)
    lastname: Optional[str] = Field(None, min_length=1, max_length=100)
    username: Optional[str] = Field(None, min_length=1, max_length=100)
    password: Optional[str] = Field(None, min_length=8, max_length=72)
    is_active: Optional[bool] = Field(None, alias="isActive")
    roles: Optional[List[uuid.UUID]] = Field(None, min_length=1)
    prefered_language: Optional[str] = Field(None, alias="preferedLanguage", max_length=20)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v is not None else v

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not _LOWER_RE.search(v):
            raise ValueError("password must contain at least one lowercase character")
        if not _UPPER_RE.search(v):
            raise ValueError("password must contain at least one uppercase character")
        if not _DIGIT_RE.search(v):
            raise ValueError("password must contain at least one number")
        return v

    # username / preferedLanguage 만 null 허용
    @model_validator(mode="after")
    def reject_nulls(self):
        nullable = {"username", "prefered_language"}
        for name in self.model_fields_set - nullable:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


# 🔹 여러 계정 삭제 요청
class UsersDelete(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ids: List[uuid.UUID] = Field(..., min_length=1)


# 🔹 역할 응답용
class RoleResponse(BaseModel):
    id: uuid.UUID
    name: str
    code: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# 🔹 관리자 계정 응답용 (비밀번호 해시 / 재설정 토큰은 포함하지 않음)
class UserResponse(BaseModel):
    id: uuid.UUID
    firstname: str
    lastname: str
    username: Optional[str] = None
    email: str
    is_active: bool = Field(serialization_alias="isActive")
    blocked: bool
    prefered_language: Optional[str] = Field(None, serialization_alias="preferedLanguage")
    registration_token: Optional[str] = Field(None, serialization_alias="registrationToken")
    roles: List[RoleResponse] = []
    deleted_at: Optional[datetime] = Field(None, serialization_alias="deletedAt")
    deleted_by: Optional[uuid.UUID] = Field(None, serialization_alias="deletedBy")
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")

    model_config = ConfigDict(from_attributes=True)
