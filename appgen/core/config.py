from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    app_name: str = "appgen"
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    log_level: str = "INFO"

    interpreter_url: str | None = None
    interpreter_timeout: float = 60.0

    # Field count above which a readable entity should declare pagination
    pagination_field_threshold: int = 8

settings = Settings()
