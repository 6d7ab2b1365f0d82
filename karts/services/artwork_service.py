"""
작품 레코드 관련 서비스

artworks[code] 문서 하나가 코드 하나의 작품이다. 저장은 항상 merge-upsert.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

from karts.core import timeutil
from karts.core.config import Settings, settings
from karts.core.errors import ConfirmationRequired, ImageUploadFailed, NothingToDelete, RemoteFailure
from karts.core.roles import Role, letter_for_role
from karts.core.security import Session
from karts.services.document_store import ARTWORKS, DocumentStore
from karts.services.storage import ImageHost, ImageHostError

logger = logging.getLogger(__name__)


@dataclass
class ArtworkView:
    """저장된 작품 상태 (없으면 빈 기본값)"""
    code: str
    image_url: Optional[str] = None
    image_public_id: Optional[str] = None
    comment: str = ""
    updated_at: Optional[str] = None
    featured_at: Optional[str] = None

    @property
    def has_image(self) -> bool:
        return bool(self.image_url)

    @property
    def has_comment(self) -> bool:
        return bool(self.comment.strip())

    @classmethod
    def from_document(cls, code: str, data: Optional[Dict[str, Any]]) -> "ArtworkView":
        data = data or {}
        return cls(
            code=code,
            image_url=data.get("imageUrl"),
            image_public_id=data.get("imagePublicId"),
            comment=data.get("comment") or "",
            updated_at=data.get("updatedAt"),
            featured_at=data.get("featuredAt"),
        )


async def load(store: DocumentStore, code: str) -> ArtworkView:
    """작품 조회. 문서가 없어도 에러가 아니다."""
    data = await store.get(ARTWORKS, code)
    return ArtworkView.from_document(code, data)


async def save(
    store: DocumentStore,
    code: str,
    fields: Dict[str, Any],
    role: Optional[Role] = None,
    config: Settings = settings,
) -> ArtworkView:
    """부분 저장. 전달하지 않은 필드는 그대로 두고 updatedAt은 항상 갱신"""
    data = dict(fields)
    data["updatedAt"] = timeutil.utcnow_iso()
    if config.ARTWORK_STAMP_ROLE and role is not None:
        data["role"] = letter_for_role(role, config)
        data["code"] = code
    merged = await store.set(ARTWORKS, code, data, merge=True)
    return ArtworkView.from_document(code, merged)


async def save_comment(
    store: DocumentStore,
    session: Session,
    comment: Optional[str],
    config: Settings = settings,
) -> ArtworkView:
    """해설 저장. 이미지 필드는 건드리지 않는다."""
    return await save(store, session.code, {"comment": comment or ""}, session.role, config)


def make_public_id(code: str) -> str:
    """업로드마다 유일한 public_id (코드 + 업로드 시각 ms)"""
    return f"{code}_{timeutil.epoch_millis()}"


async def attach_image(
    store: DocumentStore,
    host: ImageHost,
    session: Session,
    data: bytes,
    content_type: Optional[str] = None,
    config: Settings = settings,
) -> ArtworkView:
    """이미지 업로드 후 URL/public_id 저장.

    실패하면 이전에 저장된 이미지는 그대로 두고 ImageUploadFailed(revert_to=이전 URL)를 던진다.
    클라이언트는 로컬 미리보기를 revert_to 로 되돌린다.
    저장된 작품을 읽지 못하면 업로드하지 않고 ImageUploadFailed(reload=True).
    """
    try:
        persisted = await load(store, session.code)
    except RemoteFailure as e:
        raise ImageUploadFailed(revert_to=None, reload=True) from e
    public_id = make_public_id(session.code)

    try:
        uploaded = await host.upload(data, content_type=content_type, public_id=public_id)
    except ImageHostError as e:
        logger.exception(f"image upload failed: code={session.code} public_id={public_id}: {e}")
        raise ImageUploadFailed(revert_to=persisted.image_url) from e

    try:
        return await save(
            store,
            session.code,
            {"imageUrl": uploaded.secure_url, "imagePublicId": uploaded.public_id},
            session.role,
            config,
        )
    except RemoteFailure as e:
        raise ImageUploadFailed(revert_to=persisted.image_url) from e


async def delete_image(
    store: DocumentStore,
    session: Session,
    confirm: bool,
    config: Settings = settings,
) -> ArtworkView:
    """이미지 연결 해제. 호스트의 실제 파일은 콘솔에서 수동 삭제한다."""
    current = await load(store, session.code)
    if not current.has_image:
        raise NothingToDelete()
    if not confirm:
        raise ConfirmationRequired("이미지를 삭제하려면 확인이 필요합니다.")
    return await save(
        store,
        session.code,
        {"imageUrl": None, "imagePublicId": None},
        session.role,
        config,
    )
