# app/core/logging_middleware.py
from fastapi import Request
from app.core.logger import logger
import secrets
import time

async def log_requests(request: Request, call_next):
    """모든 요청/응답 로깅 (본문은 기록하지 않음 - 비밀번호/공유 내용 보호)"""

    request_id = secrets.token_hex(4)
    start_time = time.perf_counter()
    client = request.client.host if request.client else "-"

    logger.info(f"➡️  [{request_id}] {request.method} {request.url.path} from {client}")

    try:
        response = await call_next(request)
    except Exception as e:
        elapsed = (time.perf_counter() - start_time) * 1000
        logger.error(
            f"❌ [{request_id}] {request.method} {request.url.path} "
            f"- Error: {e.__class__.__name__} "
            f"- Time: {elapsed:.2f}ms"
        )
        logger.exception("Exception details:")
        raise

    elapsed = (time.perf_counter() - start_time) * 1000  # ms
    logger.info(
        f"⬅️  [{request_id}] {request.method} {request.url.path} "
        f"- Status: {response.status_code} "
        f"- Time: {elapsed:.2f}ms"
    )
    response.headers["X-Request-ID"] = request_id
    return response
