"""
추천 작품(みんなの作品) 서비스

배포 설정 FEATURED_MODE 로 방식을 고른다.
- view: 작품 문서에 featuredAt 을 찍고, 최신순 상위 N개를 매번 계산
- slots: featured 문서 하나에 slot1..slotN 을 두고 등록 때마다 한 칸씩 밀어낸다
"""

from dataclasses import dataclass
from typing import List, Optional
import logging

from karts.core import timeutil
from karts.core.config import Settings, settings
from karts.core.errors import IncompleteArtwork, NotPermitted
from karts.core.roles import Role, letter_for_role
from karts.core.security import Session
from karts.services import artwork_service
from karts.services.artwork_service import ArtworkView
from karts.services.document_store import ARTWORKS, FEATURED, DocumentStore

logger = logging.getLogger(__name__)

SLOTS_KEY = "current"


@dataclass
class FeaturedItem:
    code: str
    image_url: Optional[str]
    comment: str

    def to_slot(self) -> dict:
        return {"code": self.code, "imageUrl": self.image_url, "comment": self.comment}

    @classmethod
    def from_slot(cls, slot: dict) -> "FeaturedItem":
        return cls(code=slot["code"], image_url=slot.get("imageUrl"), comment=slot.get("comment") or "")


def check_eligible(artwork: ArtworkView, requirement: str) -> None:
    """등록 전제 조건 검사"""
    if requirement == "image_only":
        ok = artwork.has_image
    elif requirement == "image_or_comment":
        ok = artwork.has_image or artwork.has_comment
    else:
        ok = artwork.has_image and artwork.has_comment

    if not ok:
        messages = {
            "image_only": "먼저 사진을 저장해주세요.",
            "image_or_comment": "사진이나 해설 중 하나는 입력해주세요.",
        }
        raise IncompleteArtwork(messages.get(requirement))


class FeaturedSet:
    async def add(self, store: DocumentStore, artwork: ArtworkView, config: Settings) -> None:
        raise NotImplementedError

    async def items(self, store: DocumentStore, config: Settings) -> List[FeaturedItem]:
        raise NotImplementedError


class RecencyFeaturedSet(FeaturedSet):
    """featuredAt 최신순 상위 capacity 개"""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity

    async def add(self, store: DocumentStore, artwork: ArtworkView, config: Settings) -> None:
        await artwork_service.save(
            store,
            artwork.code,
            {"featured": True, "featuredAt": timeutil.utcnow_iso()},
            Role.PRIMARY,
            config,
        )

    async def items(self, store: DocumentStore, config: Settings) -> List[FeaturedItem]:
        primary = letter_for_role(Role.PRIMARY, config)
        docs = await store.list_ordered(ARTWORKS, "featuredAt", descending=True)
        items = [
            FeaturedItem(code=d.key, image_url=d.data.get("imageUrl"), comment=d.data.get("comment") or "")
            for d in docs
            if d.key.startswith(primary)
        ]
        return items[: self.capacity]


class SlotFeaturedSet(FeaturedSet):
    """고정 칸(slot1..slotN). 새 작품이 맨 앞, 넘치는 작품은 버린다."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity

    def _slots(self, data: Optional[dict]) -> List[FeaturedItem]:
        data = data or {}
        slots = [data.get(f"slot{i}") for i in range(1, self.capacity + 1)]
        return [FeaturedItem.from_slot(s) for s in slots if s]

    async def add(self, store: DocumentStore, artwork: ArtworkView, config: Settings) -> None:
        current = self._slots(await store.get(FEATURED, SLOTS_KEY))
        entry = FeaturedItem(code=artwork.code, image_url=artwork.image_url, comment=artwork.comment)
        # 같은 작품이 두 칸을 차지하지 않도록 기존 칸에서 뺀 뒤 앞에 넣는다
        shifted = [entry] + [s for s in current if s.code != artwork.code]
        shifted = shifted[: self.capacity]

        data = {f"slot{i + 1}": None for i in range(self.capacity)}
        for i, item in enumerate(shifted):
            data[f"slot{i + 1}"] = item.to_slot()
        data["updatedAt"] = timeutil.utcnow_iso()
        await store.set(FEATURED, SLOTS_KEY, data)

    async def items(self, store: DocumentStore, config: Settings) -> List[FeaturedItem]:
        return self._slots(await store.get(FEATURED, SLOTS_KEY))


def get_featured_set(config: Settings = settings) -> FeaturedSet:
    if config.FEATURED_MODE == "slots":
        return SlotFeaturedSet(config.FEATURED_SLOT_CAPACITY)
    return RecencyFeaturedSet(config.FEATURED_CAPACITY)


async def promote(store: DocumentStore, session: Session, config: Settings = settings) -> List[FeaturedItem]:
    """추천 작품 등록 (PRIMARY 역할만)"""
    if session.role != Role.PRIMARY:
        raise NotPermitted("추천 작품 등록은 이 코드로 사용할 수 없습니다.")

    artwork = await artwork_service.load(store, session.code)
    check_eligible(artwork, config.PROMOTION_REQUIREMENT)

    featured = get_featured_set(config)
    await featured.add(store, artwork, config)
    logger.info(f"artwork promoted: code={session.code} mode={config.FEATURED_MODE}")
    return await featured.items(store, config)


async def current_featured(store: DocumentStore, config: Settings = settings) -> List[FeaturedItem]:
    """공개 갤러리용 추천 작품 목록 (타임스탬프 미포함)"""
    return await get_featured_set(config).items(store, config)
