from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    运行配置（环境变量前缀 FORUM_，也可以写在 .env 里）
    - 数据库默认 MySQL（PyMySQL 驱动），database_url 可整体覆盖
    - cache_backend: redis 为生产用；memory 只适合单进程调试 / 测试
    """

    model_config = SettingsConfigDict(env_prefix="FORUM_", env_file=".env", extra="ignore")

    # ======== 数据库 ========
    db_host: str = "127.0.0.1"
    db_port: int = 3306
    db_user: str = "root"
    db_password: str = ""
    db_name: str = "forum_db"
    database_url: Optional[str] = None
    sql_echo: bool = False

    # ======== 缓存 ========
    cache_backend: Literal["redis", "memory"] = "redis"
    redis_url: str = "redis://127.0.0.1:6379/0"
    memory_cache_maxsize: int = Field(default=10000, gt=0)

    log_level: str = "INFO"

    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"mysql+pymysql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}?charset=utf8mb4"
        )


settings = Settings()
