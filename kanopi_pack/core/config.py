from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Asset origins used when a registry does not pass its own
    KANOPI_DEVELOPMENT_ASSET_URL: str = ""
    KANOPI_PRODUCTION_ASSET_URL: str = ""
    KANOPI_PRODUCTION_FILE_PATH: str = ""

    # Network manifests are a single best-effort fetch
    KANOPI_MANIFEST_TIMEOUT: float = 5.0

    KANOPI_DEFAULT_PRIORITY: int = 10

    LOG_LEVEL: str = "INFO"
    LOGFIRE_TOKEN: str = ""

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
