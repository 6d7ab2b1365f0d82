"""
공개 갤러리 API
"""

from fastapi import APIRouter, Depends

from karts.dependencies import get_document_store
from karts.schemas.artwork import FeaturedItemResponse, FeaturedListResponse
from karts.services import featured_service
from karts.services.document_store import DocumentStore

router = APIRouter()


@router.get("", response_model=FeaturedListResponse)
async def list_featured(store: DocumentStore = Depends(get_document_store)):
    """추천 작품 목록 (로그인 불필요)"""
    items = await featured_service.current_featured(store)
    return FeaturedListResponse(
        items=[FeaturedItemResponse.model_validate(i) for i in items],
        total_count=len(items),
    )
