"""
설문 관리 API (관리자 전용)
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Query, status

from karts.core.security import Session, get_admin_session
from karts.dependencies import get_document_store
from karts.schemas.survey import SurveyOverviewResponse, SurveyResetResponse
from karts.services import survey_service
from karts.services.document_store import DocumentStore

router = APIRouter()


@router.get("", response_model=SurveyOverviewResponse)
async def list_surveys(
    session: Session = Depends(get_admin_session),
    store: DocumentStore = Depends(get_document_store),
):
    """설문 목록 + 요약"""
    overview = await survey_service.overview(store)
    return SurveyOverviewResponse.model_validate(overview)


@router.post("", response_model=SurveyOverviewResponse, status_code=status.HTTP_201_CREATED)
async def add_survey(
    payload: Dict[str, Any] = Body(...),
    session: Session = Depends(get_admin_session),
    store: DocumentStore = Depends(get_document_store),
):
    """설문 추가 후 전체 재집계"""
    await survey_service.add(store, payload)
    overview = await survey_service.overview(store)
    return SurveyOverviewResponse.model_validate(overview)


@router.delete("", response_model=SurveyResetResponse)
async def reset_surveys(
    confirm: bool = Query(False),
    session: Session = Depends(get_admin_session),
    store: DocumentStore = Depends(get_document_store),
):
    """설문 전체 삭제"""
    deleted = await survey_service.reset_all(store, confirm)
    overview = await survey_service.overview(store)
    return SurveyResetResponse(deleted=deleted, overview=SurveyOverviewResponse.model_validate(overview))
