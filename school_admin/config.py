from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    app_name: str = 'School Admin'
    app_env: str = 'local'
    app_timezone: str = 'UTC'
    app_base_url: str = 'http://127.0.0.1:8000'
    database_url: str = Field(min_length=1)
    jwt_secret: str = Field(min_length=1, validation_alias=AliasChoices('jwt_secret', 'session_secret'))
    token_expiry_days: int = Field(default=7, ge=1)
    cors_allow_origins: list[str] = ['*']
    bootstrap_admin_username: str = ''
    bootstrap_admin_password: str = ''
    bootstrap_admin_email: str = ''
    bootstrap_admin_name: str = 'Administrator'
    db_slow_query_ms: int = 100
    metrics_slow_ms: int = 200


def _load_settings(env_file: str | None = '.env') -> Settings:
    try:
        return Settings(_env_file=env_file)
    except ValidationError as exc:
        missing = sorted({str(err['loc'][0]).upper() for err in exc.errors() if err.get('loc')})
        raise RuntimeError(f'Invalid or missing configuration: {", ".join(missing)}') from exc


settings = _load_settings()
