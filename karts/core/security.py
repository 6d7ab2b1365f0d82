"""
보안 관련 유틸리티

로그인 성공 시 만들어지는 Session 이 유일한 세션 상태다.
핸들러는 get_current_session 의존성으로만 세션을 받는다.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging
import uuid

from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import redis.asyncio as redis
from redis.exceptions import RedisError

from karts.core.config import settings
from karts.core.database import get_redis
from karts.core.roles import Role

logger = logging.getLogger(__name__)

# 코드별 패스워드 해싱 컨텍스트
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# JWT 토큰 스키마
security = HTTPBearer(auto_error=False)

REVOKED_PREFIX = "revoked:"


@dataclass(frozen=True)
class Session:
    """로그인 세션"""
    code: str
    role: Role
    token_id: str
    expires_at: datetime


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """패스워드 검증"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """패스워드 해싱"""
    return pwd_context.hash(password)


def open_session(code: str, role: Role, expires_delta: Optional[timedelta] = None) -> tuple[Session, str]:
    """세션 생성 + 액세스 토큰 발급"""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    session = Session(code=code, role=role, token_id=uuid.uuid4().hex, expires_at=expire)
    to_encode = {
        "sub": code,
        "role": role.value,
        "jti": session.token_id,
        "exp": expire,
        "type": "access",
    }
    token = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return session, token


def decode_session(token: str) -> Optional[Session]:
    """토큰 검증 -> Session (실패 시 None)"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != "access":
        return None
    try:
        return Session(
            code=payload["sub"],
            role=Role(payload["role"]),
            token_id=payload["jti"],
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, ValueError):
        return None


async def is_revoked(redis_client: redis.Redis, session: Session) -> bool:
    try:
        return bool(await redis_client.exists(f"{REVOKED_PREFIX}{session.token_id}"))
    except RedisError as e:
        # Redis 장애 시 폐기 확인을 건너뛴다(가용성 우선)
        logger.warning(f"revocation check skipped: {e}")
        return False


async def close_session(redis_client: redis.Redis, session: Session) -> None:
    """로그아웃: 토큰 만료 시각까지 폐기 목록에 올린다"""
    ttl = int((session.expires_at - datetime.now(timezone.utc)).total_seconds())
    if ttl <= 0:
        return
    try:
        await redis_client.set(f"{REVOKED_PREFIX}{session.token_id}", session.code, ex=ttl)
    except RedisError as e:
        logger.warning(f"session revoke failed: code={session.code}: {e}")


async def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    redis_client: redis.Redis = Depends(get_redis),
) -> Session:
    """현재 세션 가져오기"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="로그인이 필요합니다.",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    session = decode_session(credentials.credentials)
    if session is None or await is_revoked(redis_client, session):
        raise credentials_exception
    return session


async def get_artwork_session(session: Session = Depends(get_current_session)) -> Session:
    """작품 페이지를 가진 역할만"""
    if not session.role.has_artwork:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="작품 페이지가 없는 코드입니다.")
    return session


async def get_admin_session(session: Session = Depends(get_current_session)) -> Session:
    """관리자 역할만"""
    if session.role != Role.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="관리자만 사용할 수 있습니다.")
    return session
