# app/api/routes/admin.py
from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_admin_authenticator
from app.schemas.admin import AdminLogin, Token
from app.services.admin_service import AdminAuthenticator, AdminDisabledError, InvalidAdminPasswordError

router = APIRouter(prefix="/api/admin", tags=["관리자"])

@router.post("/login", response_model=Token)
def login(
    data: AdminLogin,
    authenticator: AdminAuthenticator = Depends(get_admin_authenticator)
):
    """관리자 로그인"""
    try:
        access_token = authenticator.login(data.password)
    except AdminDisabledError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="관리 기능이 비활성화되어 있습니다"
        )
    except InvalidAdminPasswordError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="비밀번호가 올바르지 않습니다",
            headers={"WWW-Authenticate": "Bearer"}
        )

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "expires_in": authenticator.token_expires_in
    }
