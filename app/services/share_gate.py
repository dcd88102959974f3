# app/services/share_gate.py
"""
공유 조회 게이트

consume()은 아래 순서대로 검사하며, 하나라도 실패하면 나머지는 보지 않는다.

1. 존재 여부        → NOT_FOUND
2. 만료 여부        → EXPIRED (삭제는 하지 않음, sweep_expired 에서 처리)
3. 조회 한도        → QUOTA_EXHAUSTED
4. 비밀번호         → PASSWORD_REQUIRED / PASSWORD_INCORRECT
5. 조회수 +1 (조건부 UPDATE) 후 내용 반환

만료/한도 검사를 비밀번호보다 먼저 하므로, 더 이상 열 수 없는 공유로는
비밀번호가 맞는지 확인할 수 없다.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Union
import enum

from app.core.logger import logger
from app.core.security import CredentialCodec
from app.models.share import Share, as_utc
from app.services.share_store import IncrementStatus, ShareStore

# 동시 소비자에게 한도를 뺏긴 경우 다시 시도할 최대 횟수
MAX_INCREMENT_ATTEMPTS = 3


class DenyReason(str, enum.Enum):
    """조회 거부 사유"""
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    QUOTA_EXHAUSTED = "quota_exhausted"
    PASSWORD_REQUIRED = "password_required"
    PASSWORD_INCORRECT = "password_incorrect"


@dataclass(frozen=True)
class ShareView:
    """조회 성공 결과 (자격 증명 레코드는 포함하지 않음)"""
    id: str
    content: str
    view_count: int
    max_views: Optional[int]
    expires_at: Optional[datetime]
    created_at: datetime


@dataclass(frozen=True)
class ShareSummary:
    """관리자 목록용 요약"""
    id: str
    content: str
    has_password: bool
    view_count: int
    max_views: Optional[int]
    expires_at: Optional[datetime]
    created_at: datetime

    @classmethod
    def from_share(cls, share: Share) -> "ShareSummary":
        return cls(
            id=share.id,
            content=share.content,
            has_password=share.has_password,
            view_count=share.view_count,
            max_views=share.max_views,
            expires_at=as_utc(share.expires_at),
            created_at=as_utc(share.created_at),
        )


@dataclass(frozen=True)
class ShareCreated:
    """생성 결과 (내용/비밀번호는 돌려주지 않음)"""
    id: str
    created_at: datetime
    expires_at: Optional[datetime]
    max_views: Optional[int]
    has_password: bool


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ShareGate:
    def __init__(
        self,
        store: ShareStore,
        codec: CredentialCodec,
        clock: Callable[[], datetime] = _utcnow
    ):
        self.store = store
        self.codec = codec
        self.clock = clock

    def create(
        self,
        content: str,
        password: Optional[str] = None,
        max_views: Optional[int] = None,
        expires_at: Optional[datetime] = None
    ) -> ShareCreated:
        """공유 생성 (비밀번호가 있으면 해시 후 저장)"""
        if max_views is not None and max_views < 1:
            raise ValueError("max_views는 1 이상이어야 합니다")

        share = Share(
            content=content,
            password=self.codec.hash(password) if password is not None else None,
            max_views=max_views,
            view_count=0,
            expires_at=as_utc(expires_at),
            created_at=self.clock(),
        )
        share = self.store.add(share)
        logger.info(
            f"공유 생성: {share.id} (password={share.has_password}, "
            f"max_views={share.max_views}, expires_at={share.expires_at})"
        )
        return ShareCreated(
            id=share.id,
            created_at=as_utc(share.created_at),
            expires_at=as_utc(share.expires_at),
            max_views=share.max_views,
            has_password=share.has_password,
        )

    def consume(
        self,
        share_id: str,
        candidate_secret: Optional[str] = None
    ) -> Union[ShareView, DenyReason]:
        """게이트를 통과하면 조회수를 1 올리고 내용을 반환"""
        share = self.store.get(share_id)
        if share is None:
            return self._deny(share_id, DenyReason.NOT_FOUND)

        if share.is_expired(self.clock()):
            return self._deny(share_id, DenyReason.EXPIRED)

        if share.is_quota_exhausted():
            return self._deny(share_id, DenyReason.QUOTA_EXHAUSTED)

        if share.password is not None:
            # 빈 문자열도 미입력으로 취급 (빈 폼 제출)
            if not candidate_secret:
                return self._deny(share_id, DenyReason.PASSWORD_REQUIRED)
            if not self.codec.verify(share.password, candidate_secret):
                return self._deny(share_id, DenyReason.PASSWORD_INCORRECT)

        # 불변 필드는 증가 전에 확보 (커밋 후 동시 삭제되어도 안전)
        content = share.content
        max_views = share.max_views
        expires_at = as_utc(share.expires_at)
        created_at = as_utc(share.created_at)

        for _ in range(MAX_INCREMENT_ATTEMPTS):
            result = self.store.conditional_increment_view(share_id)

            if result.status == IncrementStatus.INCREMENTED:
                logger.info(f"공유 조회: {share_id} ({result.new_count}/{max_views or '∞'})")
                return ShareView(
                    id=share_id,
                    content=content,
                    view_count=result.new_count,
                    max_views=max_views,
                    expires_at=expires_at,
                    created_at=created_at,
                )

            if result.status == IncrementStatus.NOT_FOUND:
                return self._deny(share_id, DenyReason.NOT_FOUND)

            # 다른 소비자가 먼저 한도를 채움 - 이전 조회값은 믿지 않고 다시 확인
            share = self.store.get(share_id)
            if share is None:
                return self._deny(share_id, DenyReason.NOT_FOUND)
            if share.is_quota_exhausted():
                return self._deny(share_id, DenyReason.QUOTA_EXHAUSTED)

        return self._deny(share_id, DenyReason.QUOTA_EXHAUSTED)

    def list_shares(self) -> list[ShareSummary]:
        """생성일 내림차순 요약 목록 (비밀번호 레코드 제외)"""
        return [ShareSummary.from_share(share) for share in self.store.list_all()]

    def remove(self, share_id: str) -> bool:
        """무조건 삭제, 없으면 False"""
        deleted = self.store.delete(share_id)
        if deleted:
            logger.info(f"공유 삭제: {share_id}")
        return deleted

    def sweep_expired(self) -> int:
        """만료 시각이 지난 공유 일괄 삭제"""
        deleted_count = self.store.delete_expired_before(self.clock())
        logger.info(f"만료 공유 정리: {deleted_count}건 삭제")
        return deleted_count

    @staticmethod
    def _deny(share_id: str, reason: DenyReason) -> DenyReason:
        logger.info(f"공유 조회 거부: {share_id} ({reason.value})")
        return reason
