# app/services/share_store.py
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
import enum

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from app.models.share import Share


class IncrementStatus(str, enum.Enum):
    """조건부 조회수 증가 결과"""
    INCREMENTED = "incremented"
    QUOTA_EXCEEDED = "quota_exceeded"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class IncrementResult:
    status: IncrementStatus
    new_count: Optional[int] = None


# SQLite 쓰기 잠금 경합은 잠시 후 재시도, 그래도 실패하면 그대로 전파
db_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
    retry=retry_if_exception_type(OperationalError),
    reraise=True
)


class ShareStore:
    """
    공유 레코드 저장소 (SQLAlchemy 세션 기반)

    조회수 증가와 만료 삭제는 각각 단일 UPDATE / DELETE 문으로 실행되어
    같은 ID에 대한 동시 호출에도 원자적이다.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, share_id: str) -> Optional[Share]:
        return self.db.get(Share, share_id)

    def add(self, share: Share) -> Share:
        self.db.add(share)
        self.db.commit()
        self.db.refresh(share)
        return share

    def list_all(self) -> list[Share]:
        """생성일 내림차순 전체 목록"""
        return list(self.db.scalars(select(Share).order_by(Share.created_at.desc())))

    @db_retry
    def conditional_increment_view(self, share_id: str) -> IncrementResult:
        """view_count < max_views (또는 max_views 없음) 인 경우에만 1 증가"""
        try:
            result = self.db.execute(
                update(Share)
                .where(
                    Share.id == share_id,
                    or_(Share.max_views.is_(None), Share.view_count < Share.max_views)
                )
                .values(view_count=Share.view_count + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 1:
                # 같은 트랜잭션 안에서 증가 후 값 읽기
                new_count = self.db.execute(
                    select(Share.view_count).where(Share.id == share_id)
                ).scalar_one()
                self.db.commit()
                return IncrementResult(IncrementStatus.INCREMENTED, new_count)
            self.db.rollback()

            exists = self.db.execute(select(Share.id).where(Share.id == share_id)).first()
        except OperationalError:
            self.db.rollback()
            raise

        if exists is None:
            return IncrementResult(IncrementStatus.NOT_FOUND)
        return IncrementResult(IncrementStatus.QUOTA_EXCEEDED)

    @db_retry
    def delete(self, share_id: str) -> bool:
        try:
            result = self.db.execute(
                delete(Share)
                .where(Share.id == share_id)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except OperationalError:
            self.db.rollback()
            raise
        return result.rowcount > 0

    @db_retry
    def delete_expired_before(self, now: datetime) -> int:
        """expires_at <= now 인 레코드를 한 번의 DELETE로 삭제"""
        try:
            result = self.db.execute(
                delete(Share)
                .where(Share.expires_at.is_not(None), Share.expires_at <= now)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except OperationalError:
            self.db.rollback()
            raise
        return result.rowcount
