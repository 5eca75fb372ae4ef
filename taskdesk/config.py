from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./taskdesk.sqlite"
    app_env: str = "dev"
    log_level: str = "INFO"
    # Seed Work / Personal / Research on first start
    seed_default_contexts: bool = True

    model_config = SettingsConfigDict(env_file=".env", env_prefix="", case_sensitive=False)


settings = Settings()
