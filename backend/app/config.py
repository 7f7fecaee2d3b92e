"""应用配置管理，从环境变量加载配置"""
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """应用配置类"""

    # Database
    database_url: str = "sqlite:///./wellbeing.db"

    # API Auth
    api_key: str = ""

    # App Config
    debug: bool = False
    log_level: str = "INFO"
    default_time_range: str = "30d"

    # Result cache
    analysis_cache_enabled: bool = True
    analysis_cache_ttl_seconds: int = 300
    analysis_cache_sweep_interval_seconds: int = 300

    # Risk detection
    risk_excerpt_limit: int = 200
    risk_context_words: int = 10
    risk_example_limit: int = 5

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            env_settings,
            dotenv_settings,
            init_settings,
            file_secret_settings,
        )


@lru_cache
def get_settings() -> Settings:
    """获取配置单例"""
    return Settings()
