# app/services/admin_service.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.logger import logger
from app.core.security import CredentialCodec

ADMIN_SUBJECT = "admin"

# 이전 배포에서 쓰던 bcrypt 관리자 해시 ($2a$ / $2b$ / $2y$)
bcrypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
BCRYPT_PREFIX = "$2"


class AdminDisabledError(Exception):
    """ADMIN_PASSWORD 미설정 - 관리 기능 비활성화"""


class InvalidAdminPasswordError(Exception):
    """관리자 비밀번호 불일치"""


class AdminAuthenticator:
    """
    관리자 인증

    관리자 비밀번호와 JWT 서명 키는 프로세스 시작 시 한 번 읽어서 주입한다.
    비밀번호 값은 자격 증명 레코드(scripts/generate_admin_hash.py 로 생성),
    bcrypt 해시, 개발용 평문 모두 가능하다.
    """

    def __init__(
        self,
        admin_password: str,
        codec: CredentialCodec,
        secret_key: str,
        algorithm: str = "HS256",
        token_expire_minutes: int = 30
    ):
        self._admin_password = admin_password
        self._codec = codec
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._token_expires = timedelta(minutes=token_expire_minutes)

    @property
    def enabled(self) -> bool:
        return bool(self._admin_password)

    @property
    def token_expires_in(self) -> int:
        return int(self._token_expires.total_seconds())

    def validate_password(self, password: str) -> bool:
        # 미설정이면 모든 접근 거부
        if not self.enabled:
            return False
        if self._admin_password.startswith(BCRYPT_PREFIX):
            try:
                return bcrypt_context.verify(password, self._admin_password)
            except ValueError:
                # 손상된 bcrypt 해시는 불일치로 처리
                return False
        return self._codec.verify(self._admin_password, password)

    def login(self, password: str) -> str:
        """비밀번호 확인 후 관리자 JWT 발급"""
        if not self.enabled:
            raise AdminDisabledError()
        if not self.validate_password(password):
            logger.warning("관리자 로그인 실패")
            raise InvalidAdminPasswordError()

        logger.info("관리자 로그인 성공")
        return self.create_access_token({"sub": ADMIN_SUBJECT})

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """JWT 액세스 토큰 생성"""
        to_encode = data.copy()
        to_encode["exp"] = datetime.now(timezone.utc) + (expires_delta or self._token_expires)
        return jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)

    def decode_access_token(self, token: str) -> Optional[dict]:
        """JWT 토큰 디코드 (서명 불일치/만료 시 None)"""
        try:
            return jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError:
            return None

    def validate_token(self, token: str) -> bool:
        if not self.enabled:
            return False
        payload = self.decode_access_token(token)
        return payload is not None and payload.get("sub") == ADMIN_SUBJECT
