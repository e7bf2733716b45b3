from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


def build_engine(database_url: str) -> Engine:
    """创建数据库引擎

    connect_args 是SQLite特有的，用于允许多线程访问；
    内存数据库使用 StaticPool，让所有会话共享同一个连接。
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        database_url,
        connect_args={"check_same_thread": False}
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    """创建一个Session工厂"""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
