from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    STUDIO_NAME: str = "VBunker31"
    STUDIO_TIMEZONE: str = "Europe/Moscow"

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    PROFILE_STORE: str = "memory"  # "memory" | "json"
    PROFILE_DATA_DIR: str = "./data/profile"


settings = Settings()
