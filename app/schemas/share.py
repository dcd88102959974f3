# app/schemas/share.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime, timezone
from typing import Optional

class ShareCreate(BaseModel):
    """공유 생성 요청"""
    content: str = Field(..., min_length=1, description="공유할 텍스트")
    password: Optional[str] = Field(None, min_length=1, description="접근 비밀번호 (선택)")
    max_views: Optional[int] = Field(None, ge=1, description="최대 조회 수 (선택, 1 이상)")
    expires_at: Optional[datetime] = Field(
        None,
        description="만료 시각 (ISO 8601, 선택)",
        examples=["2025-12-31T23:59:59Z"]
    )

    @field_validator("expires_at")
    def normalize_expires_at(cls, v):
        # 시간대 없는 값은 UTC로 간주
        if v is None:
            return v
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

class ShareViewRequest(BaseModel):
    """공유 조회 요청"""
    password: Optional[str] = Field(None, description="접근 비밀번호 (필요한 경우)")

class ShareCreatedResponse(BaseModel):
    """공유 생성 응답 (내용/비밀번호 제외)"""
    id: str
    created_at: datetime
    expires_at: Optional[datetime]
    max_views: Optional[int]
    has_password: bool

    class Config:
        from_attributes = True

class ShareViewResponse(BaseModel):
    """공유 조회 응답"""
    id: str
    content: str
    view_count: int
    max_views: Optional[int]
    expires_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True

class ShareSummaryResponse(BaseModel):
    """관리자 목록 항목"""
    id: str
    content: str
    has_password: bool
    view_count: int
    max_views: Optional[int]
    expires_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True

class CleanExpiredResponse(BaseModel):
    """만료 공유 정리 결과"""
    deleted_count: int

class MessageResponse(BaseModel):
    message: str
