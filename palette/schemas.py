"""Request/response bodies (camelCase on the wire)."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -------------------------- users / tokens --------------------------
class LoginRequest(CamelModel):
    email: str = Field(min_length=3, max_length=255)
    social_type: str


class LoginResponse(CamelModel):
    access_token: str
    is_registered: bool
    social_types: list[str]


class TokenResponse(CamelModel):
    access_token: str


# -------------------------- colors --------------------------
class ColorResponse(CamelModel):
    id: int
    name: str
    hex_code: str


# -------------------------- diaries --------------------------
class CreateDiaryRequest(CamelModel):
    color_id: int
    title: Optional[str] = Field(default=None, max_length=255)


class CreateDiaryResponse(CamelModel):
    invitation_code: str


class InviteDiaryRequest(CamelModel):
    invitation_code: str


class AdminUserResponse(CamelModel):
    id: int
    email: str


class InviteDiaryResponse(CamelModel):
    diary_id: int
    title: Optional[str]
    admin_user: Optional[AdminUserResponse]


class HistoryResponse(CamelModel):
    id: int
    diary_id: int
    start_date: datetime
    end_date: datetime


class DiaryResponse(CamelModel):
    id: int
    title: Optional[str]
    invitation_code: str
    color_id: int
    color_hex: Optional[str]
    diary_status: str
    current_history: Optional[HistoryResponse]


class CreateHistoryRequest(CamelModel):
    diary_id: int
    period: Optional[int] = Field(default=None, ge=1, le=365)


class CreateHistoryResponse(CamelModel):
    history_id: int
