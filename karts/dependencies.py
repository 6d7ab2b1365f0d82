from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from karts.core.database import get_db, get_redis
from karts.services.document_store import DocumentStore, SqlDocumentStore
from karts.services.storage import ImageHost, get_storage


# 라우터가 공통으로 쓰는 의존성 모음


async def get_document_store(db: AsyncSession = Depends(get_db)) -> DocumentStore:
    return SqlDocumentStore(db)


def get_image_host() -> ImageHost:
    return get_storage()


__all__ = ["get_db", "get_redis", "get_document_store", "get_image_host"]
