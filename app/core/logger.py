# app/core/logger.py
from loguru import logger
import sys
import os

# 환경변수로 조정 (설정 객체 없이도 사용 가능 - scripts/ 등)
LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

os.makedirs(LOG_DIR, exist_ok=True)

# 기본 로거 제거
logger.remove()

# 콘솔 출력
logger.add(
    sys.stdout,
    colorize=True,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    level=LOG_LEVEL
)

# 파일 출력 (모든 로그) - 요청 스레드 여러 개에서 기록하므로 enqueue
logger.add(
    f"{LOG_DIR}/burnote.log",
    rotation="10 MB",
    retention="14 days",
    compression="zip",
    format=FILE_FORMAT,
    level="DEBUG",
    enqueue=True
)

# 에러 전용 파일
logger.add(
    f"{LOG_DIR}/error.log",
    rotation="10 MB",
    retention="30 days",
    compression="zip",
    format=FILE_FORMAT,
    level="ERROR",
    enqueue=True,
    backtrace=True,
    diagnose=False  # 예외 로그에 변수 값(비밀번호 등) 노출 금지
)
