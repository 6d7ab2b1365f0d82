"""
작품 전용 코드 패스워드 설정 API
"""

from fastapi import APIRouter, Depends

from karts.core.security import Session, get_admin_session
from karts.dependencies import get_document_store
from karts.schemas.auth import SecondaryPasswordRequest
from karts.services import auth_service
from karts.services.document_store import DocumentStore

router = APIRouter()


@router.put("")
async def set_password(
    payload: SecondaryPasswordRequest,
    session: Session = Depends(get_admin_session),
    store: DocumentStore = Depends(get_document_store),
):
    """지정된 관리자 코드만 설정 가능"""
    code = await auth_service.set_secondary_password(store, session, payload.code, payload.password)
    return {"message": f"코드 {code} 의 패스워드를 설정했습니다.", "code": code}
