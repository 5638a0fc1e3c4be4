from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CS_",
    )

    # Engine
    max_workers: int = 4  # partitioned mode only
    downsample_target: int = 500

    # API Server
    api_title: str = "crashsim API"
    cors_origins: list[str] = ["http://localhost:3000"]
    max_total_steps: int = 200_000_000  # runs x observations x assets per request

    # Logging
    log_dir: str = "logs"
    log_file: str = "crashsim.log"
