from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    app_name: str = 'Campus Portal'
    app_env: str = 'local'
    app_timezone: str = 'Asia/Kolkata'
    database_url: str = 'sqlite:///./portal.db'
    institution_domain: str = 'psgtech.ac.in'
    cors_allowed_origins: list[str] = ['*']
    static_dir: str = ''
    host: str = '0.0.0.0'
    port: int = 3000
    app_base_url: str = 'http://127.0.0.1:3000'
    log_level: str = 'INFO'
    db_slow_query_ms: int = 100
    metrics_slow_ms: int = 200


settings = Settings()
