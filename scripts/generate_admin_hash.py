# scripts/generate_admin_hash.py
"""
관리자 비밀번호 해시 생성

사용법:
    python scripts/generate_admin_hash.py <password>

출력된 값을 .env 또는 docker-compose.yml 의 ADMIN_PASSWORD 로 설정한다.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.core.security import CredentialCodec


def main(argv: list[str]) -> int:
    if len(argv) < 2 or not argv[1]:
        print("Usage: python scripts/generate_admin_hash.py <password>", file=sys.stderr)
        print("Example: python scripts/generate_admin_hash.py my-secure-password", file=sys.stderr)
        return 1

    record = CredentialCodec().hash(argv[1])
    print("Generated admin password hash:")
    print(f"ADMIN_PASSWORD={record}")
    print("\n.env 또는 docker-compose.yml 에 위 값을 추가하세요")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
