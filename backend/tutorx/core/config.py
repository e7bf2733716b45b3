from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal

class Settings(BaseSettings):
    """
    应用程序配置设置类，从环境变量或.env文件加载所有配置项。
    使用Pydantic进行数据验证和类型检查。

    包含服务器配置、存储后端选择、数据库连接、日志级别等配置项。
    """
    # Server
    BACKEND_PORT: int = 8000

    # Model configuration tells Pydantic where to find the .env file.
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=True
    )

    PROJECT_NAME: str = "TutorX"
    API_PREFIX: str = "/api"

    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # Storage: "memory" 使用进程内存储，"sql" 使用 SQLAlchemy 持久化
    STORAGE_BACKEND: Literal["memory", "sql"] = "memory"
    DATABASE_URL: str = "sqlite:///./tutorx.db"

    # 启动时是否写入示例课程数据（用户、主题、课时、测验、成就）
    SEED_SAMPLE_DATA: bool = True

    LOG_LEVEL: str = "INFO"

# Create a single, globally accessible instance of the settings.
settings = Settings()
