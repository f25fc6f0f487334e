from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Database
    database_url: str = "sqlite:///mortgage_calc.sqlite3"

    # Conversational input sessions (stored in Redis)
    redis_url: str = "redis://localhost:6379/0"
    session_ttl_minutes: int = 30

    # App
    debug: bool = False
    log_level: str = "INFO"


settings = Settings()
