# app/api/routes/shares.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from app.api.deps import get_share_gate, require_admin
from app.schemas.share import (
    ShareCreate, ShareViewRequest, ShareCreatedResponse, ShareViewResponse,
    ShareSummaryResponse, CleanExpiredResponse, MessageResponse
)
from app.services.share_gate import DenyReason, ShareGate

router = APIRouter(prefix="/api/shares", tags=["공유"])

# 거부 사유 → HTTP 상태/메시지
DENY_RESPONSES = {
    DenyReason.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "공유를 찾을 수 없습니다"),
    DenyReason.EXPIRED: (status.HTTP_410_GONE, "만료된 공유입니다"),
    DenyReason.QUOTA_EXHAUSTED: (status.HTTP_410_GONE, "최대 조회 수에 도달한 공유입니다"),
    DenyReason.PASSWORD_REQUIRED: (status.HTTP_401_UNAUTHORIZED, "비밀번호가 필요합니다"),
    DenyReason.PASSWORD_INCORRECT: (status.HTTP_401_UNAUTHORIZED, "비밀번호가 올바르지 않습니다"),
}

def deny_response(reason: DenyReason) -> JSONResponse:
    status_code, detail = DENY_RESPONSES[reason]
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "reason": reason.value}
    )

@router.post("", response_model=ShareCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_share(data: ShareCreate, gate: ShareGate = Depends(get_share_gate)):
    """공유 생성"""
    return gate.create(
        content=data.content,
        password=data.password,
        max_views=data.max_views,
        expires_at=data.expires_at
    )

@router.post(
    "/{share_id}/view",
    response_model=ShareViewResponse,
    responses={401: {"description": "비밀번호 필요/불일치"}, 404: {"description": "공유 없음"}, 410: {"description": "만료/조회 한도 도달"}}
)
def view_share(
    share_id: str,
    data: ShareViewRequest | None = None,
    gate: ShareGate = Depends(get_share_gate)
):
    """공유 내용 조회 (조회 수 1 증가)"""
    result = gate.consume(share_id, data.password if data else None)
    if isinstance(result, DenyReason):
        return deny_response(result)
    return result

@router.get("", response_model=list[ShareSummaryResponse], dependencies=[Depends(require_admin)])
def list_shares(gate: ShareGate = Depends(get_share_gate)):
    """전체 공유 목록 (관리자)"""
    return gate.list_shares()

@router.post("/clean-expired", response_model=CleanExpiredResponse, dependencies=[Depends(require_admin)])
def clean_expired(gate: ShareGate = Depends(get_share_gate)):
    """만료 공유 정리 (관리자)"""
    return CleanExpiredResponse(deleted_count=gate.sweep_expired())

@router.delete("/{share_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
def delete_share(share_id: str, gate: ShareGate = Depends(get_share_gate)):
    """공유 삭제 (관리자)"""
    if not gate.remove(share_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="공유를 찾을 수 없습니다"
        )
    return MessageResponse(message="삭제되었습니다")
