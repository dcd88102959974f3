# app/models/share.py
from sqlalchemy import Column, String, Integer, DateTime, Text
from app.database import Base
import secrets
from datetime import datetime, timezone

SHARE_ID_LENGTH = 10


def generate_share_id() -> str:
    """URL에 바로 쓸 수 있는 짧은 ID"""
    return secrets.token_urlsafe(8)[:SHARE_ID_LENGTH]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """DB(SQLite 등)에서 tz 정보 없이 돌아온 값은 UTC로 간주"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Share(Base):
    """자동 파기 텍스트 공유 모델"""
    __tablename__ = "shares"

    # 기본 필드
    id = Column(String(SHARE_ID_LENGTH), primary_key=True, default=generate_share_id)
    content = Column(Text, nullable=False)

    # 자격 증명 레코드 (None이면 비밀번호 없음)
    password = Column(Text, nullable=True)

    # 조회 제한 (None이면 무제한)
    max_views = Column(Integer, nullable=True)
    view_count = Column(Integer, nullable=False, default=0)

    # 만료 (None이면 만료 없음)
    expires_at = Column(DateTime(timezone=True), nullable=True, index=True)

    # 타임스탬프
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    @property
    def has_password(self) -> bool:
        return self.password is not None

    def is_expired(self, now: datetime | None = None) -> bool:
        """만료 여부 확인"""
        if not self.expires_at:
            return False
        return (now or utcnow()) > as_utc(self.expires_at)

    def is_quota_exhausted(self) -> bool:
        """조회 한도 소진 여부 (max_views=0 이면 즉시 소진)"""
        if self.max_views is None:
            return False
        return self.view_count >= self.max_views

    def __repr__(self):
        return f"<Share {self.id}>"
