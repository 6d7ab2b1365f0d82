"""
애플리케이션 설정
"""

from pydantic_settings import BaseSettings
from typing import Literal
from pathlib import Path
from dotenv import load_dotenv


"""env 로딩 우선순위
1) OS 환경변수
2) 프로젝트 루트의 .env
"""

# .env 사전 로드 (OS 환경변수 우선, override=False)
_repo_root_env = Path(__file__).resolve().parents[2] / ".env"
if _repo_root_env.exists():
    load_dotenv(dotenv_path=str(_repo_root_env), override=False)

DEFAULT_JWT_SECRET = "karts-dev-secret-change-this-in-production"
DEFAULT_SHARED_PASSWORD = "1221"


class Settings(BaseSettings):
    """애플리케이션 설정"""
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    DATABASE_URL: str = "sqlite+aiosqlite:///./data/karts.db"
    REDIS_URL: str = "redis://localhost:6379/0"

    # JWT (로그인 세션 토큰)
    JWT_SECRET_KEY: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 12 * 60

    # 로그인 코드: 역할 문자 3개 (순서: 작품+추천 / 작품 / 관리자)
    ROLE_LETTERS: str = "MBE"
    SHARED_PASSWORD: str = DEFAULT_SHARED_PASSWORD
    SECONDARY_PASSWORD_POLICY: Literal["none", "any_four_digits", "per_code"] = "per_code"
    BPASSWORD_ADMIN_CODE: str = "E00002"

    # 추천 작품(みんなの作品)
    FEATURED_MODE: Literal["view", "slots"] = "view"
    FEATURED_CAPACITY: int = 8
    FEATURED_SLOT_CAPACITY: int = 2
    PROMOTION_REQUIREMENT: Literal["image_and_comment", "image_only", "image_or_comment"] = "image_and_comment"

    ARTWORK_STAMP_ROLE: bool = True
    SURVEY_HISTOGRAM_ENABLED: bool = True

    # 이미지 호스트
    STORAGE_BACKEND: Literal["local", "cloudinary"] = "local"
    UPLOAD_DIRECTORY: str | None = None
    CLOUDINARY_CLOUD_NAME: str | None = None
    CLOUDINARY_UPLOAD_PRESET: str = "karts_unsigned"
    CLOUDINARY_FOLDER: str = "karts-artworks"

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = 'ignore'

settings = Settings()


# 환경별 설정 검증
def validate_settings(s: Settings = settings):
    """설정 검증"""
    letters = s.ROLE_LETTERS
    if len(letters) != 3 or len(set(letters)) != 3 or not letters.isalpha() or not letters.isupper():
        raise ValueError("ROLE_LETTERS는 서로 다른 대문자 3개여야 합니다. (예: MBE)")
    if not s.BPASSWORD_ADMIN_CODE.startswith(letters[2]):
        raise ValueError("BPASSWORD_ADMIN_CODE는 관리자 역할 코드여야 합니다.")
    if s.FEATURED_CAPACITY < 1 or s.FEATURED_SLOT_CAPACITY < 1:
        raise ValueError("추천 작품 정원은 1 이상이어야 합니다.")

    if s.ENVIRONMENT == "production":
        if s.JWT_SECRET_KEY == DEFAULT_JWT_SECRET:
            raise ValueError("프로덕션 환경에서는 JWT_SECRET_KEY를 변경해야 합니다.")
        if s.STORAGE_BACKEND == "cloudinary" and not s.CLOUDINARY_CLOUD_NAME:
            raise ValueError("CLOUDINARY_CLOUD_NAME이 필요합니다.")

    return True


# 설정 검증 실행
validate_settings()
