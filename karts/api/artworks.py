"""
작품 페이지 API
"""

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from karts.core.security import Session, get_artwork_session
from karts.dependencies import get_document_store, get_image_host
from karts.schemas.artwork import ArtworkResponse, CommentUpdate, FeaturedItemResponse, FeaturedListResponse
from karts.services import artwork_service, featured_service
from karts.services.document_store import DocumentStore
from karts.services.storage import ImageHost

router = APIRouter()


@router.get("/me", response_model=ArtworkResponse)
async def get_my_artwork(
    session: Session = Depends(get_artwork_session),
    store: DocumentStore = Depends(get_document_store),
):
    """내 작품 조회 (없으면 빈 작품)"""
    return ArtworkResponse.model_validate(await artwork_service.load(store, session.code))


@router.put("/me/comment", response_model=ArtworkResponse)
async def save_comment(
    payload: CommentUpdate,
    session: Session = Depends(get_artwork_session),
    store: DocumentStore = Depends(get_document_store),
):
    """해설 저장"""
    view = await artwork_service.save_comment(store, session, payload.comment)
    return ArtworkResponse.model_validate(view)


@router.post("/me/image", response_model=ArtworkResponse)
async def upload_image(
    file: UploadFile = File(...),
    session: Session = Depends(get_artwork_session),
    store: DocumentStore = Depends(get_document_store),
    host: ImageHost = Depends(get_image_host),
):
    """이미지 업로드 후 저장. 실패 시 응답의 revert_to 로 미리보기를 되돌린다."""
    if not (file.content_type or "").startswith("image/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="이미지 파일만 업로드할 수 있습니다.")
    try:
        data = await file.read()
    finally:
        await file.close()
    view = await artwork_service.attach_image(store, host, session, data, file.content_type)
    return ArtworkResponse.model_validate(view)


@router.delete("/me/image", response_model=ArtworkResponse)
async def delete_image(
    confirm: bool = Query(False),
    session: Session = Depends(get_artwork_session),
    store: DocumentStore = Depends(get_document_store),
):
    """이미지 삭제 (연결만 해제)"""
    view = await artwork_service.delete_image(store, session, confirm)
    return ArtworkResponse.model_validate(view)


@router.post("/me/feature", response_model=FeaturedListResponse)
async def feature_artwork(
    session: Session = Depends(get_artwork_session),
    store: DocumentStore = Depends(get_document_store),
):
    """みんなの作品에 등록"""
    items = await featured_service.promote(store, session)
    return FeaturedListResponse(
        items=[FeaturedItemResponse.model_validate(i) for i in items],
        total_count=len(items),
    )
