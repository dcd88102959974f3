# app/schemas/admin.py
from pydantic import BaseModel

class AdminLogin(BaseModel):
    """관리자 로그인 요청"""
    password: str

class Token(BaseModel):
    """JWT 토큰 응답"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
