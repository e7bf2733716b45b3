import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tutorx.api.api import api_router
from tutorx.config.dependency_injection import create_storage
from tutorx.core.config import Settings, settings
from tutorx.core.logging import setup_logging
from tutorx.storage.base import Storage
from tutorx.storage.seed import seed_sample_data

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None, storage: Optional[Storage] = None) -> FastAPI:
    """
    创建应用实例

    存储在这里创建一次并挂到 app.state 上，所有请求共享；
    测试可以直接传入预先准备好的存储。
    """
    if app_settings is None:
        app_settings = settings
    setup_logging(app_settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app_settings.SEED_SAMPLE_DATA:
            logger.info("写入示例数据")
            await seed_sample_data(app.state.storage)
        yield
        logger.info("应用关闭")

    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        openapi_url=f"{app_settings.API_PREFIX}/openapi.json",
        lifespan=lifespan,
    )
    app.state.storage = storage if storage is not None else create_storage(app_settings)

    # Set all CORS enabled origins
    if app_settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in app_settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(api_router, prefix=app_settings.API_PREFIX)
    return app


app = create_app(settings)


if __name__ == '__main__':
    uvicorn.run(
        'tutorx.main:app',
        host='0.0.0.0',
        port=settings.BACKEND_PORT,
        reload=True
    )
