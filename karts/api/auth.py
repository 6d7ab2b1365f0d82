"""
로그인/로그아웃 API 라우터
"""

from fastapi import APIRouter, Depends
import logging
import redis.asyncio as redis

from karts.core.config import settings
from karts.core.roles import Role
from karts.core.security import Session, close_session, get_current_session, open_session
from karts.dependencies import get_document_store, get_redis
from karts.schemas.auth import LoginRequest, SessionResponse, Token
from karts.services import auth_service
from karts.services.document_store import DocumentStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=Token)
async def login(
    login_data: LoginRequest,
    store: DocumentStore = Depends(get_document_store),
):
    """코드 로그인 -> 세션 생성"""
    result = await auth_service.authenticate(store, login_data.code, login_data.password)
    session, token = open_session(result.code, result.role)
    logger.info(f"login: code={session.code} role={session.role.value}")
    return {
        "access_token": token,
        "token_type": "bearer",
        "code": session.code,
        "role": session.role,
        "screen": "admin" if session.role == Role.ADMIN else "artwork",
    }


@router.post("/logout")
async def logout(
    session: Session = Depends(get_current_session),
    redis_client: redis.Redis = Depends(get_redis),
):
    """로그아웃 -> 세션 폐기"""
    await close_session(redis_client, session)
    logger.info(f"logout: code={session.code}")
    return {"message": "로그아웃되었습니다."}


@router.get("/me", response_model=SessionResponse)
async def me(session: Session = Depends(get_current_session)):
    """현재 세션 정보"""
    return SessionResponse(
        code=session.code,
        role=session.role,
        can_promote=session.role == Role.PRIMARY,
        can_set_passwords=session.role == Role.ADMIN and session.code == settings.BPASSWORD_ADMIN_CODE,
    )
