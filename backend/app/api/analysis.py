"""分析相关API"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import get_analysis_service
from app.database import get_db
from app.errors import AnalysisError, ComputationError, InvalidInputError
from app.models import Analysis
from app.schemas import (
    AnalysisResponse,
    AnalysisRunRequest,
    AnalysisSummaryResponse,
    BatchAnalysisRequest,
    MetricsIngestRequest,
    MetricsIngestResponse,
    StoredAnalysisResponse,
)
from app.services.analysis_service import AnalysisService, resolve_time_window
from app.services.report_formatter import format_analysis_report
from app.services.storage import AnalysisStore, MetricsFilter, MetricsStore
from app.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


def to_http_error(error: AnalysisError) -> HTTPException:
    """领域错误映射为 HTTP 状态码"""
    if isinstance(error, InvalidInputError):
        return HTTPException(status_code=404 if error.no_data else 400, detail=error.message)
    if isinstance(error, ComputationError):
        return HTTPException(status_code=500, detail=error.message)
    return HTTPException(status_code=500, detail=str(error))


def _get_analysis_or_404(db: Session, analysis_id: UUID) -> Analysis:
    analysis = AnalysisStore(db).get(analysis_id)
    if not analysis:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return analysis


@router.post("/run", response_model=StoredAnalysisResponse)
def run_analysis(
    request: AnalysisRunRequest,
    db: Session = Depends(get_db),
    service: AnalysisService = Depends(get_analysis_service),
):
    """对用户已入库的指标执行分析并保存结果"""
    try:
        options = resolve_time_window(request.time_range, request.start_date, request.end_date)
        records = MetricsStore(db).find(
            MetricsFilter(
                user_id=request.user_id,
                start_date=options.start_date,
                end_date=options.end_date,
                provider=request.provider,
            )
        )
        if not records:
            raise InvalidInputError("No data available for the selected time range", no_data=True)

        response = service.analyze(records, options)
    except AnalysisError as e:
        raise to_http_error(e) from e

    analysis = AnalysisStore(db).save(
        user_id=request.user_id,
        options=options,
        result=response.result,
        post_ids=[record.id for record in records],
    )
    logger.info(f"Saved analysis {analysis.id} for user {request.user_id} ({len(records)} posts)")

    stored = StoredAnalysisResponse.model_validate(analysis)
    return stored.model_copy(update={"cached": response.cached})


@router.post("/batch", response_model=AnalysisResponse)
def analyze_batch(
    request: BatchAnalysisRequest,
    service: AnalysisService = Depends(get_analysis_service),
):
    """直接分析请求中提交的记录（不保存）"""
    try:
        return service.analyze(request.records, request.options)
    except AnalysisError as e:
        raise to_http_error(e) from e


@router.post("/metrics", response_model=MetricsIngestResponse)
def ingest_metrics(request: MetricsIngestRequest, db: Session = Depends(get_db)):
    """写入帖子指标，缺少情感值时按文本计算"""
    inserted, updated = MetricsStore(db).add_many(request.user_id, request.records)
    return MetricsIngestResponse(inserted=inserted, updated=updated)


@router.get("", response_model=List[AnalysisSummaryResponse])
def list_analyses(
    user_id: str = Query(..., min_length=1),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    """用户的分析列表（按时间倒序）"""
    analyses = AnalysisStore(db).list_for_user(user_id, limit=limit, offset=offset)
    return [
        AnalysisSummaryResponse(
            id=analysis.id,
            user_id=analysis.user_id,
            date=analysis.date,
            time_range=analysis.time_range,
            start_date=analysis.start_date,
            end_date=analysis.end_date,
            interest_score=analysis.metrics["scores"]["interest_score"],
            stress_score=analysis.metrics["scores"]["stress_score"],
            risk_level=analysis.metrics["risk"]["risk_level"],
        )
        for analysis in analyses
    ]


@router.get("/{analysis_id}", response_model=StoredAnalysisResponse)
def get_analysis(analysis_id: UUID, db: Session = Depends(get_db)):
    """获取单个分析"""
    return StoredAnalysisResponse.model_validate(_get_analysis_or_404(db, analysis_id))


@router.get("/{analysis_id}/report")
def get_analysis_report(analysis_id: UUID, db: Session = Depends(get_db)):
    """获取用于展示的分析报告（数值已舍入）"""
    analysis = _get_analysis_or_404(db, analysis_id)
    return {
        "id": str(analysis.id),
        "user_id": analysis.user_id,
        "time_range": analysis.time_range.value,
        "start_date": analysis.start_date,
        "end_date": analysis.end_date,
        "report": format_analysis_report(analysis.metrics),
    }


@router.delete("/{analysis_id}")
def delete_analysis(analysis_id: UUID, db: Session = Depends(get_db)):
    """删除分析"""
    if not AnalysisStore(db).delete(analysis_id):
        raise HTTPException(status_code=404, detail="Analysis not found")
    return {"status": "deleted"}
