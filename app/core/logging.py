# -*- coding: utf-8 -*-
import logging
import sys
from pathlib import Path

from app.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging():
    """로깅 설정 (development: DEBUG, 그 외: INFO, production은 파일 로그 추가)"""
    log_level = logging.DEBUG if settings.environment == "development" else logging.INFO
    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # 재호출 시 핸들러 중복 방지 (테스트에서 app 재import 등)
    if any(getattr(h, "_quiz_backend_handler", False) for h in root_logger.handlers):
        return

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    console_handler._quiz_backend_handler = True
    root_logger.addHandler(console_handler)

    if settings.environment == "production":
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_dir / "app.log", encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.INFO)
        file_handler._quiz_backend_handler = True
        root_logger.addHandler(file_handler)
