"""FastAPI应用入口"""
import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.api import analysis
from app.api.deps import require_api_key
from app.services.analysis_service import AnalysisService
from app.utils.logger import LOG_FORMAT, resolve_level

settings = get_settings()
logger = logging.getLogger(__name__)

# 配置日志
def setup_logging():
    log_dir = "logs"
    if not os.path.exists(log_dir):
        os.makedirs(log_dir)

    formatter = logging.Formatter(LOG_FORMAT)

    # 1. 控制台处理器
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    # 2. 文件轮转处理器 (10MB * 5 backups)
    file_handler = RotatingFileHandler(
        os.path.join(log_dir, "app.log"),
        maxBytes=10*1024*1024,
        backupCount=5,
        encoding="utf-8"
    )
    file_handler.setFormatter(formatter)

    logging.basicConfig(
        level=resolve_level(settings.log_level),
        handlers=[console_handler, file_handler]
    )

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    应用生命周期管理

    启动时：创建分析服务并启动结果缓存的定时清理
    关闭时：停止定时清理
    """
    logger.info("Starting application...")

    service = AnalysisService(settings=settings)
    service.start()
    app.state.analysis_service = service

    logger.info("Application startup complete")

    yield  # 应用运行中

    logger.info("Shutting down application...")
    service.shutdown()
    logger.info("Application shutdown complete")


app = FastAPI(
    title="Social Wellbeing Analytics",
    description="社交媒体互动与心理健康指标分析API",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
    dependencies=[Depends(require_api_key)],
)

# CORS配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,  # 使用 * 时必须为 False
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check(request: Request):
    """健康检查接口"""
    service = getattr(request.app.state, "analysis_service", None)
    cache = service.cache if service is not None else None

    return {
        "status": "healthy",
        "version": "1.0.0",
        "cache": {
            "enabled": cache is not None,
            **(cache.stats() if cache is not None else {}),
        },
    }


# 注册路由
app.include_router(analysis.router, prefix="/api/v1/analysis", tags=["分析"])
