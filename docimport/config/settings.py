from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Importer configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"

    max_memory_bytes: int = 1024 * 1024

    parser_engine: str = "pdfplumber"
    parse_retry_on_mismatch: bool = True

    external_timeout_seconds: float | None = None
    external_exit_error_fatal: bool = False
    external_metadata_format: str = "properties"

    split_max_workers: int = 1
    max_split_depth: int = 10
    import_max_workers: int = 4
