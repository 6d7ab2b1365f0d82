"""
KARTS 작품 갤러리 - FastAPI 메인 애플리케이션
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from sqlalchemy.engine import make_url

from karts.core.config import settings
from karts.core.database import engine, Base
from karts.core.errors import KartsError
from karts.core.paths import ensure_sqlite_dir, get_upload_dir
import karts.models  # noqa: F401  (테이블 등록)

from karts.api.auth import router as auth_router
from karts.api.artworks import router as artworks_router
from karts.api.featured import router as featured_router
from karts.api.surveys import router as surveys_router
from karts.api.bpasswords import router as bpasswords_router

# 로깅 설정
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 시작/종료 시 실행되는 이벤트"""
    logger.info("KARTS gallery API 시작")

    # 데이터베이스 테이블 생성 (개발용)
    if settings.ENVIRONMENT == "development":
        url = make_url(settings.DATABASE_URL)
        if url.get_backend_name() == "sqlite":
            ensure_sqlite_dir(url.database)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("데이터베이스 테이블 생성 완료")

    yield

    logger.info("KARTS gallery API 종료")


# FastAPI 앱 생성
app = FastAPI(
    title="KARTS 작품 갤러리 API",
    description="코드 로그인, 작품 페이지, みんなの作品, 설문 관리",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT == "development" else None,
    lifespan=lifespan
)

# 로컬 이미지 호스트 사용 시 업로드 파일 제공
if settings.STORAGE_BACKEND == "local":
    app.mount("/static", StaticFiles(directory=get_upload_dir()), name="static")

DEV_ALLOWED_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
ALLOWED_ORIGINS = DEV_ALLOWED_ORIGINS if settings.ENVIRONMENT == "development" else []
ALLOWED_ORIGIN_REGEX = None if settings.ENVIRONMENT == "development" else r"https?://(localhost|127\.0\.0\.1)(:\d+)?"
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_origin_regex=ALLOWED_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KartsError)
async def karts_error_handler(request: Request, exc: KartsError):
    """도메인 예외 -> JSON"""
    if exc.status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.code}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(auth_router, prefix="/auth", tags=["인증"])
app.include_router(artworks_router, prefix="/artworks", tags=["작품"])
app.include_router(featured_router, prefix="/featured", tags=["みんなの作品"])
app.include_router(surveys_router, prefix="/surveys", tags=["설문"])
app.include_router(bpasswords_router, prefix="/bpasswords", tags=["패스워드"])


@app.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "message": "KARTS 작품 갤러리 API",
        "version": "1.0.0",
        "docs": "/docs",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """헬스 체크 엔드포인트"""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "featured_mode": settings.FEATURED_MODE,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "karts.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True if settings.ENVIRONMENT == "development" else False
    )
