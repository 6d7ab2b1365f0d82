"""
인증 관련 Pydantic 스키마
"""

from pydantic import BaseModel
from typing import Literal, Optional

from karts.core.roles import Role


class LoginRequest(BaseModel):
    """로그인 요청 스키마"""
    code: str
    password: Optional[str] = None


class Token(BaseModel):
    """토큰 응답 스키마"""
    access_token: str
    token_type: str = "bearer"
    code: str
    role: Role
    screen: Literal["artwork", "admin"]


class SessionResponse(BaseModel):
    """현재 세션 스키마"""
    code: str
    role: Role
    can_promote: bool
    can_set_passwords: bool


class SecondaryPasswordRequest(BaseModel):
    """작품 전용 코드 패스워드 설정 요청"""
    code: str
    password: str
