"""
설문 집계 서비스

설문은 추가와 전체 삭제만 있다. 요약은 매번 전체 목록으로 다시 계산한다.
"""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Sequence
import logging

from pydantic import ValidationError

from karts.core import timeutil
from karts.core.config import Settings, settings
from karts.core.errors import ConfirmationRequired, InvalidEntry
from karts.schemas.survey import SurveyCreate
from karts.services.document_store import SURVEYS, DocumentStore

logger = logging.getLogger(__name__)

# (라벨, 최소, 최대) - 위에서부터 처음 맞는 구간 하나에만 센다
AGE_BUCKETS = (
    ("0-39", 0, 39),
    ("40-64", 40, 64),
    ("65+", 65, None),
)


@dataclass
class SurveyEntry:
    age: int
    wallet: int
    free_comment: str = ""
    created_at: str = ""

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "SurveyEntry":
        return cls(
            age=int(data.get("age") or 0),
            wallet=int(data.get("wallet") or 0),
            free_comment=data.get("freeComment") or "",
            created_at=data.get("createdAt") or "",
        )


@dataclass
class SurveySummary:
    count: int
    mean_age: Optional[float] = None
    mean_wallet: Optional[int] = None
    histogram: Optional[Dict[str, int]] = None


@dataclass
class SurveyOverview:
    entries: List[SurveyEntry] = field(default_factory=list)
    summary: SurveySummary = field(default_factory=lambda: SurveySummary(count=0))


def _round(value: Decimal, places: str) -> Decimal:
    return value.quantize(Decimal(places), rounding=ROUND_HALF_UP)


def age_histogram(entries: Sequence[SurveyEntry]) -> Dict[str, int]:
    histogram = {label: 0 for label, _, _ in AGE_BUCKETS}
    for entry in entries:
        for label, low, high in AGE_BUCKETS:
            if entry.age >= low and (high is None or entry.age <= high):
                histogram[label] += 1
                break
    return histogram


def summarize(entries: Sequence[SurveyEntry], with_histogram: bool = True) -> SurveySummary:
    """건수, 평균 나이(소수 1자리), 평균 지갑 금액(정수), 나이 구간 분포"""
    count = len(entries)
    if count == 0:
        return SurveySummary(count=0, histogram=age_histogram(entries) if with_histogram else None)

    mean_age = Decimal(sum(e.age for e in entries)) / count
    mean_wallet = Decimal(sum(e.wallet for e in entries)) / count
    return SurveySummary(
        count=count,
        mean_age=float(_round(mean_age, "0.1")),
        mean_wallet=int(_round(mean_wallet, "1")),
        histogram=age_histogram(entries) if with_histogram else None,
    )


def validate_entry(raw: Dict[str, Any]) -> SurveyCreate:
    """저장 전에 검증. 잘못된 값이면 InvalidEntry (저장소 호출 없음)"""
    try:
        return SurveyCreate.model_validate(raw)
    except ValidationError as e:
        logger.info(f"survey entry rejected: {e.errors()}")
        raise InvalidEntry() from e


async def add(store: DocumentStore, raw: Dict[str, Any]) -> SurveyEntry:
    """설문 추가. createdAt 은 서버에서 찍는다."""
    entry = validate_entry(raw)
    data = {
        "age": entry.age,
        "wallet": entry.wallet,
        "freeComment": entry.free_comment,
        "createdAt": timeutil.utcnow_iso(),
    }
    await store.add(SURVEYS, data)
    return SurveyEntry.from_document(data)


async def all_entries(store: DocumentStore) -> List[SurveyEntry]:
    """createdAt 오름차순 전체 목록"""
    docs = await store.list_ordered(SURVEYS, "createdAt")
    return [SurveyEntry.from_document(d.data) for d in docs]


async def reset_all(store: DocumentStore, confirm: bool) -> int:
    """설문 전체 삭제 (되돌릴 수 없음, 확인 필수)"""
    if not confirm:
        raise ConfirmationRequired("설문 결과를 모두 삭제하려면 확인이 필요합니다.")
    deleted = await store.delete_all(SURVEYS)
    logger.info(f"surveys reset: deleted={deleted}")
    return deleted


async def overview(store: DocumentStore, config: Settings = settings) -> SurveyOverview:
    """전체 재조회 + 재집계"""
    entries = await all_entries(store)
    return SurveyOverview(
        entries=entries,
        summary=summarize(entries, with_histogram=config.SURVEY_HISTOGRAM_ENABLED),
    )
