# app/api/deps.py
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.core.security import CredentialCodec
from app.services.admin_service import AdminAuthenticator
from app.services.share_gate import ShareGate
from app.services.share_store import ShareStore

# 프로세스 전체에서 공유 (동시 해시 계산 수 제한)
credential_codec = CredentialCodec(max_concurrency=settings.max_concurrent_hashes)

# 관리자 비밀번호/서명 키는 시작 시 한 번만 읽음
admin_authenticator = AdminAuthenticator(
    admin_password=settings.admin_password,
    codec=credential_codec,
    secret_key=settings.secret_key,
    algorithm=settings.algorithm,
    token_expire_minutes=settings.access_token_expire_minutes
)

# Bearer 토큰 스킴 (직접 401 처리)
security = HTTPBearer(auto_error=False)

def get_credential_codec() -> CredentialCodec:
    return credential_codec

def get_admin_authenticator() -> AdminAuthenticator:
    return admin_authenticator

def get_share_gate(
    db: Session = Depends(get_db),
    codec: CredentialCodec = Depends(get_credential_codec)
) -> ShareGate:
    """요청 단위 게이트 (세션마다 새 저장소)"""
    return ShareGate(store=ShareStore(db), codec=codec)

def require_admin(
    token: HTTPAuthorizationCredentials | None = Depends(security),
    authenticator: AdminAuthenticator = Depends(get_admin_authenticator)
) -> None:
    """관리자 JWT 검증"""
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="인증 정보가 없습니다",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not authenticator.validate_token(token.credentials):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="인증 정보가 올바르지 않습니다",
            headers={"WWW-Authenticate": "Bearer"},
        )
