from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정 (.env 또는 환경변수에서 로드)"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "postgresql+asyncpg://localhost:5432/elearning_quiz_db"
    db_echo: bool = False

    # CORS (쉼표로 구분)
    allowed_origins: str = "http://localhost:3000"

    # Environment: development | production | test
    environment: str = "development"
    port: int = 8001

    # Logging (production 파일 로그 위치)
    log_dir: str = "/app/logs"

    @property
    def allowed_origins_list(self) -> list[str]:
        """ALLOWED_ORIGINS 문자열을 리스트로 변환"""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


settings = Settings()
