# app/core/security.py
"""
비밀번호 해시/검증

공유 비밀번호는 scrypt로 유도한 키를 자기 기술형(self-describing) 레코드로 저장한다.
레코드 = base64(JSON {"salt", "hash", "params": {"n", "r", "p", "keylen"}})

- salt / hash 는 JSON 안에서 다시 base64 인코딩
- 비용 파라미터를 레코드마다 저장하므로 기본값을 올려도 기존 레코드는 그대로 검증된다
- 구조화 형식으로 파싱되지 않는 문자열은 레거시(평문) 레코드로 취급한다
"""
import base64
import hashlib
import hmac
import json
import secrets
import threading
from dataclasses import dataclass
from typing import Union

from app.core.logger import logger

# 기본 scrypt 파라미터 (검증 1회 ~100ms 이하 목표)
SCRYPT_N = 32768   # CPU/메모리 비용
SCRYPT_R = 8       # 블록 크기
SCRYPT_P = 1       # 병렬화
SCRYPT_KEYLEN = 64  # 출력 길이
SALT_BYTES = 16

# 레코드에서 읽은 파라미터 상한 (손상된 레코드로 메모리 폭주 방지)
MAX_SCRYPT_MEMORY = 128 * 1024 * 1024
MAX_SCRYPT_P = 16
MIN_KEYLEN = 16
MAX_KEYLEN = 1024


@dataclass(frozen=True)
class ScryptParams:
    """scrypt 비용 파라미터"""
    n: int = SCRYPT_N
    r: int = SCRYPT_R
    p: int = SCRYPT_P
    keylen: int = SCRYPT_KEYLEN

    def within_limits(self) -> bool:
        if self.n < 2 or self.n & (self.n - 1):
            return False
        if self.r < 1 or not 1 <= self.p <= MAX_SCRYPT_P:
            return False
        if not MIN_KEYLEN <= self.keylen <= MAX_KEYLEN:
            return False
        return 128 * self.r * (self.n + self.p + 2) <= MAX_SCRYPT_MEMORY


@dataclass(frozen=True)
class StructuredRecord:
    """구조화된 자격 증명 레코드"""
    salt: bytes
    key: bytes
    params: ScryptParams


@dataclass(frozen=True)
class LegacyPlaintext:
    """구조화 형식 이전의 평문 레코드 (deprecated)"""
    value: str


CredentialRecord = Union[StructuredRecord, LegacyPlaintext]


def _b64decode(value) -> bytes:
    if not isinstance(value, str):
        raise TypeError("base64 문자열이 아닙니다")
    return base64.b64decode(value, validate=True)


def parse_credential_record(record: str) -> CredentialRecord:
    """저장된 문자열을 구조화 레코드로 파싱, 실패하면 레거시 평문으로 분류"""
    try:
        data = json.loads(_b64decode(record).decode("utf-8"))
        params = data["params"]
        return StructuredRecord(
            salt=_b64decode(data["salt"]),
            key=_b64decode(data["hash"]),
            params=ScryptParams(
                n=int(params["n"]),
                r=int(params["r"]),
                p=int(params["p"]),
                keylen=int(params["keylen"]),
            ),
        )
    except (ValueError, TypeError, KeyError, OverflowError, RecursionError):
        # binascii.Error / JSONDecodeError / UnicodeDecodeError 모두 ValueError
        # OverflowError: int(Infinity), RecursionError: 과도하게 중첩된 JSON
        return LegacyPlaintext(record)


def serialize_credential_record(record: StructuredRecord) -> str:
    payload = {
        "salt": base64.b64encode(record.salt).decode("ascii"),
        "hash": base64.b64encode(record.key).decode("ascii"),
        "params": {
            "n": record.params.n,
            "r": record.params.r,
            "p": record.params.p,
            "keylen": record.params.keylen,
        },
    }
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


class CredentialCodec:
    """
    비밀번호 → 자격 증명 레코드, 레코드 + 후보 비밀번호 → 일치 여부

    상태가 없으므로 여러 스레드에서 동시에 사용 가능하다.
    해시 계산은 CPU를 많이 쓰므로 동시 실행 수를 세마포어로 제한한다.
    """

    def __init__(self, params: ScryptParams = ScryptParams(), max_concurrency: int = 4):
        if not params.within_limits():
            raise ValueError(f"허용 범위를 벗어난 scrypt 파라미터: {params}")
        self.params = params
        self._slots = threading.BoundedSemaphore(max_concurrency)

    def _derive(self, secret: str, salt: bytes, params: ScryptParams) -> bytes:
        with self._slots:
            return hashlib.scrypt(
                secret.encode("utf-8"),
                salt=salt,
                n=params.n,
                r=params.r,
                p=params.p,
                dklen=params.keylen,
                maxmem=MAX_SCRYPT_MEMORY + 1024 * 1024,
            )

    def hash(self, secret: str) -> str:
        """새 salt로 키를 유도해 레코드 문자열 생성 (호출마다 결과가 다름)"""
        salt = secrets.token_bytes(SALT_BYTES)
        key = self._derive(secret, salt, self.params)
        return serialize_credential_record(StructuredRecord(salt=salt, key=key, params=self.params))

    def verify(self, record: str, candidate: str) -> bool:
        """
        레코드에 저장된 salt/파라미터로 다시 유도한 뒤 상수 시간 비교.

        손상된 레코드와 틀린 비밀번호는 구분하지 않는다 (둘 다 False).
        """
        parsed = parse_credential_record(record)

        if isinstance(parsed, LegacyPlaintext):
            logger.warning("레거시 평문 자격 증명 레코드 검증 (deprecated)")
            return parsed.value == candidate

        if not parsed.params.within_limits() or not parsed.salt or not parsed.key:
            return False

        try:
            derived = self._derive(candidate, parsed.salt, parsed.params)
        except (ValueError, OverflowError, MemoryError):
            return False

        return hmac.compare_digest(derived, parsed.key)
