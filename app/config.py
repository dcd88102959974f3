# app/config.py
from pydantic_settings import BaseSettings
from pydantic import field_validator

class Settings(BaseSettings):
    """환경변수 설정"""

    # API 기본 설정
    app_name: str = "Burnote API"
    debug: bool = False

    # Database
    database_url: str

    # JWT (관리자 토큰)
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # 관리자 비밀번호 (비어 있으면 관리 기능 비활성화)
    admin_password: str = ""

    # CORS
    cors_origins: list[str] = ["http://localhost:3500"]

    # 동시에 실행할 수 있는 비밀번호 해시 계산 수
    max_concurrent_hashes: int = 4

    @field_validator('secret_key')
    def validate_secret_key(cls, v):
        if len(v) < 32:
            raise ValueError('SECRET_KEY는 최소 32자 이상이어야 합니다')
        return v

    @field_validator('max_concurrent_hashes')
    def validate_max_concurrent_hashes(cls, v):
        if v < 1:
            raise ValueError('MAX_CONCURRENT_HASHES는 1 이상이어야 합니다')
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False

# 싱글톤 인스턴스
settings = Settings()
