"""API dependencies."""
from hmac import compare_digest

from fastapi import Header, HTTPException, Request, status

from app.config import get_settings
from app.services.analysis_service import AnalysisService


def require_api_key(authorization: str | None = Header(default=None)) -> None:
    """Require a valid API key for all protected endpoints."""
    settings = get_settings()
    if not settings.api_key:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="API key not configured",
        )
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
        )
    token = authorization.removeprefix("Bearer ").strip()
    if not token or not compare_digest(token, settings.api_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )


def get_analysis_service(request: Request) -> AnalysisService:
    """应用启动时创建的分析服务"""
    return request.app.state.analysis_service
