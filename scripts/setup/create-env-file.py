#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""로컬 개발용 .env 파일 생성"""
import os
from pathlib import Path

# 프로젝트 루트
project_root = Path(__file__).parent.parent.parent
env_file = project_root / ".env"

# 주의: DB 계정 정보는 직접 입력해야 함
env_content = """# Database
DATABASE_URL=postgresql+asyncpg://<DB_USER>:<DB_PASSWORD>@localhost:5432/elearning_quiz_db
DB_ECHO=false

# CORS (쉼표로 구분)
ALLOWED_ORIGINS=http://localhost:3000,http://localhost:5173

# Environment
# development: DEBUG 로그 + 상세 에러 메시지
ENVIRONMENT=development
PORT=8001

# production 환경에서만 파일 로그 사용
LOG_DIR=./logs
"""


def create_env_file():
    """.env 파일 생성 (UTF-8, BOM 없음)"""
    print(f"[INFO] .env 파일 생성 중: {env_file}")

    if env_file.exists():
        backup_file = project_root / ".env.backup"
        print(f"[INFO] 기존 .env 파일 백업: {backup_file}")
        backup_file.write_text(env_file.read_text(encoding="utf-8"), encoding="utf-8")

    with open(env_file, "w", encoding="utf-8", newline="\n") as f:
        f.write(env_content)

    print(f"[OK] .env 파일 생성 완료: {env_file}")

    # Windows에는 chmod 없음
    if os.name != "nt":
        os.chmod(env_file, 0o600)
        print(f"[INFO] 파일 권한 설정: 600")


if __name__ == "__main__":
    try:
        create_env_file()
        print("\n[OK] 작업 완료")
    except Exception as e:
        print(f"\n[ERROR] 에러 발생: {e.__class__.__name__}: {str(e)}")
        raise SystemExit(1)
