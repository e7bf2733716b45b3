#!/usr/bin/env python3
"""
数据库初始化脚本
创建所有数据表，并按需写入示例课程数据
"""

import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# 添加项目根目录到Python路径
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))
load_dotenv(project_root / ".env")

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from tutorx.core.config import settings
from tutorx.core.exceptions import StorageError
from tutorx.core.logging import setup_logging
from tutorx.db.base_class import Base
from tutorx.db.database import build_engine, build_session_factory
import tutorx.models  # noqa: F401
from tutorx.storage.sql import SQLStorage
from tutorx.storage.seed import seed_sample_data

logger = logging.getLogger("init_database")


async def init_database(database_url: str, seed: bool = True) -> bool:
    """初始化数据库"""
    logger.info("初始化数据库: %s", database_url)
    try:
        engine = build_engine(database_url)
        Base.metadata.create_all(bind=engine)
        tables = inspect(engine).get_table_names()
        logger.info("已创建的表: %s", tables)
        if seed:
            storage = SQLStorage(build_session_factory(engine))
            created = await seed_sample_data(storage)
            logger.info("示例数据%s", "已写入" if created else "已存在，跳过")
    except (SQLAlchemyError, StorageError):
        logger.exception("数据库初始化失败")
        return False
    return True


if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL)
    ok = asyncio.run(init_database(settings.DATABASE_URL, seed=settings.SEED_SAMPLE_DATA))
    sys.exit(0 if ok else 1)
