import pytest

from karts.core.config import Settings
from karts.core.errors import ConfirmationRequired, InvalidEntry
from karts.services import survey_service
from karts.services.document_store import SURVEYS
from karts.services.survey_service import SurveyEntry


def _entries(*pairs):
    return [SurveyEntry(age=a, wallet=w) for a, w in pairs]


def test_summarize_example():
    summary = survey_service.summarize(_entries((20, 1000), (70, 3000)))
    assert summary.count == 2
    assert summary.mean_age == 45.0
    assert summary.mean_wallet == 2000
    assert summary.histogram == {"0-39": 1, "40-64": 0, "65+": 1}


def test_summarize_rounding():
    summary = survey_service.summarize(_entries((20, 1), (21, 2), (21, 2)))
    assert summary.mean_age == 20.7
    assert summary.mean_wallet == 2

    summary = survey_service.summarize(_entries((0, 1), (1, 2)))
    assert summary.mean_age == 0.5
    assert summary.mean_wallet == 2


def test_histogram_bucket_edges():
    summary = survey_service.summarize(_entries((0, 0), (39, 0), (40, 0), (64, 0), (65, 0), (120, 0)))
    assert summary.histogram == {"0-39": 2, "40-64": 2, "65+": 2}


def test_summarize_empty_and_without_histogram():
    empty = survey_service.summarize([])
    assert empty.count == 0
    assert empty.mean_age is None
    assert empty.mean_wallet is None
    assert empty.histogram == {"0-39": 0, "40-64": 0, "65+": 0}

    assert survey_service.summarize(_entries((30, 10)), with_histogram=False).histogram is None


@pytest.mark.parametrize(
    "raw",
    [
        {"age": "abc", "wallet": 100},
        {"age": 20, "wallet": -1},
        {"age": -5, "wallet": 100},
        {"age": 20.5, "wallet": 100},
        {"wallet": 100},
        {"age": 20},
        {"age": True, "wallet": 100},
        {"age": 20, "wallet": False},
        {"age": True, "wallet": False},
    ],
)
async def test_add_rejects_invalid_entries_before_writing(store, raw):
    with pytest.raises(InvalidEntry):
        await survey_service.add(store, raw)
    assert await store.list_all(SURVEYS) == []


async def test_add_assigns_created_at_server_side(store, clock):
    entry = await survey_service.add(
        store, {"age": 33, "wallet": 5000, "free_comment": "  fun  ", "created_at": "1999-01-01"}
    )
    assert entry.created_at == "2025-01-01T00:00:01+00:00"
    assert entry.free_comment == "fun"

    [doc] = await store.list_all(SURVEYS)
    assert doc.data == {"age": 33, "wallet": 5000, "freeComment": "fun", "createdAt": "2025-01-01T00:00:01+00:00"}


async def test_add_accepts_camel_case_comment(store):
    entry = await survey_service.add(store, {"age": 41, "wallet": 200, "freeComment": " 좋아요 "})
    assert entry.free_comment == "좋아요"

    [doc] = await store.list_all(SURVEYS)
    assert doc.data["freeComment"] == "좋아요"


async def test_add_accepts_numeric_strings(store):
    entry = await survey_service.add(store, {"age": "20", "wallet": "300"})
    assert (entry.age, entry.wallet) == (20, 300)


async def test_all_entries_ordered_by_created_at(store, clock):
    for age in (10, 20, 30):
        await survey_service.add(store, {"age": age, "wallet": 0})
    # 시각이 앞선 문서를 나중에 직접 추가
    await store.add(SURVEYS, {"age": 99, "wallet": 0, "freeComment": "", "createdAt": "2024-12-31T00:00:00+00:00"})

    assert [e.age for e in await survey_service.all_entries(store)] == [99, 10, 20, 30]


async def test_reset_all(store):
    for age in (10, 50, 80):
        await survey_service.add(store, {"age": age, "wallet": 100})

    with pytest.raises(ConfirmationRequired):
        await survey_service.reset_all(store, confirm=False)
    assert len(await survey_service.all_entries(store)) == 3

    assert await survey_service.reset_all(store, confirm=True) == 3
    assert await survey_service.all_entries(store) == []
    assert await survey_service.reset_all(store, confirm=True) == 0


async def test_overview_recomputes(store):
    await survey_service.add(store, {"age": 20, "wallet": 1000})
    await survey_service.add(store, {"age": 70, "wallet": 3000})

    overview = await survey_service.overview(store)
    assert len(overview.entries) == 2
    assert overview.summary.mean_age == 45.0

    no_hist = await survey_service.overview(store, Settings(SURVEY_HISTOGRAM_ENABLED=False))
    assert no_hist.summary.histogram is None
