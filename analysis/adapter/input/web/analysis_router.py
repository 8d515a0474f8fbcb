import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response

from analysis.adapter.input.web.request.analyze_requests import AnalyzeRequest
from analysis.application.usecase.analysis_usecase import AnalysisUseCase
from analysis.application.usecase.presentation_usecase import comments_to_csv, summarize
from analysis.application.usecase.sentiment_usecase import SentimentClassifier
from analysis.domain.exceptions import AnalysisNotFoundError, InvalidInputError
from analysis.infrastructure.client.openai_client import OpenAISentimentModel
from analysis.infrastructure.client.youtube_client import YouTubeClient
from analysis.infrastructure.repository.analysis_repository_impl import AnalysisRepositoryImpl
from config.settings import AnalysisSettings, OpenAISettings, YouTubeSettings

logger = logging.getLogger(__name__)

analysis_router = APIRouter(tags=["analysis"])

FALLBACK_ERROR = "Analysis failed"

# API 키가 뒤늦게 설정되어도 반영되도록 최초 요청 시점에 생성한다.
_analysis_usecase: AnalysisUseCase | None = None


def get_analysis_usecase() -> AnalysisUseCase:
    global _analysis_usecase
    if _analysis_usecase is not None:
        return _analysis_usecase
    _analysis_usecase = AnalysisUseCase(
        comment_source=YouTubeClient(YouTubeSettings()),
        classifier=SentimentClassifier(OpenAISentimentModel(OpenAISettings())),
        repository=AnalysisRepositoryImpl(),
        settings=AnalysisSettings(),
    )
    return _analysis_usecase


def _error_response(exc: Exception) -> JSONResponse:
    if isinstance(exc, InvalidInputError):
        status_code = 400
    elif isinstance(exc, AnalysisNotFoundError):
        status_code = 404
    else:
        status_code = 500
    return JSONResponse({"error": str(exc) or FALLBACK_ERROR}, status_code=status_code)


def _read_failure(exc: Exception, analysis_id: str) -> JSONResponse:
    if not isinstance(exc, AnalysisNotFoundError):
        logger.exception("[ANALYSES] read failed | id=%s", analysis_id)
    return _error_response(exc)


@analysis_router.post("/analyze")
async def analyze(request: AnalyzeRequest, usecase: AnalysisUseCase = Depends(get_analysis_usecase)):
    """
    URL의 댓글을 수집해 감정 분류, 키워드 추출까지 마친 뒤 저장된 분석 결과를 반환한다.
    """
    try:
        record = await usecase.analyze(request.url)
    except InvalidInputError as exc:
        logger.warning("[ANALYZE] invalid input | url=%r: %s", request.url, exc)
        return _error_response(exc)
    except Exception as exc:
        logger.exception("[ANALYZE] failed | url=%r", request.url)
        return _error_response(exc)
    return JSONResponse(record.to_dict())


@analysis_router.get("/analyses")
async def list_analyses(
    video_id: str | None = Query(default=None, alias="videoId"),
    limit: int = Query(default=20, ge=1, le=100),
    usecase: AnalysisUseCase = Depends(get_analysis_usecase),
):
    try:
        records = await usecase.list_analyses(video_id=video_id, limit=limit)
    except Exception as exc:
        logger.exception("[ANALYSES] listing failed")
        return _error_response(exc)
    return JSONResponse([record.to_dict() for record in records])


@analysis_router.get("/analyses/{analysis_id}")
async def get_analysis(analysis_id: str, usecase: AnalysisUseCase = Depends(get_analysis_usecase)):
    try:
        record = await usecase.get_analysis(analysis_id)
    except Exception as exc:
        return _read_failure(exc, analysis_id)
    return JSONResponse(record.to_dict())


@analysis_router.get("/analyses/{analysis_id}/summary")
async def get_analysis_summary(analysis_id: str, usecase: AnalysisUseCase = Depends(get_analysis_usecase)):
    """
    차트용 집계: 감정 분포(Agree, Disagree, Neutral 고정 순서), 월별 댓글 수, 키워드.
    """
    try:
        record = await usecase.get_analysis(analysis_id)
    except Exception as exc:
        return _read_failure(exc, analysis_id)
    return JSONResponse(summarize(record))


@analysis_router.get("/analyses/{analysis_id}/comments.csv")
async def export_comments_csv(analysis_id: str, usecase: AnalysisUseCase = Depends(get_analysis_usecase)):
    try:
        record = await usecase.get_analysis(analysis_id)
    except Exception as exc:
        return _read_failure(exc, analysis_id)
    return Response(
        content=comments_to_csv(record.comments),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="analysis.csv"'},
    )

# Postman 참고:
# 1) 건강 확인: GET  http://localhost:8000/health
# 2) 분석 실행: POST http://localhost:8000/api/analyze  {"url": "https://www.youtube.com/watch?v=<VIDEO_ID>"}
# 3) 분석 조회: GET  http://localhost:8000/api/analyses/<ID>
# 4) 차트 집계: GET  http://localhost:8000/api/analyses/<ID>/summary
# 5) CSV 내보내기: GET http://localhost:8000/api/analyses/<ID>/comments.csv
