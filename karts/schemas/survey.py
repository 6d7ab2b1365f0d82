"""
설문 관련 Pydantic 스키마
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, List, Optional


class SurveyCreate(BaseModel):
    """설문 추가 스키마 (freeComment / free_comment 둘 다 허용)"""
    model_config = ConfigDict(populate_by_name=True)

    age: int = Field(..., ge=0)
    wallet: int = Field(..., ge=0)
    free_comment: str = Field("", alias="freeComment")

    @field_validator('age', 'wallet', mode='before')
    @classmethod
    def reject_bool(cls, v):
        # JSON true/false 는 1/0 으로 바뀌므로 따로 거부
        if isinstance(v, bool):
            raise ValueError("숫자여야 합니다.")
        return v

    @field_validator('free_comment', mode='before')
    @classmethod
    def strip_comment(cls, v):
        return str(v or "").strip()


class SurveyEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    age: int
    wallet: int
    free_comment: str
    created_at: str


class SurveySummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    count: int
    mean_age: Optional[float] = None
    mean_wallet: Optional[int] = None
    histogram: Optional[Dict[str, int]] = None


class SurveyOverviewResponse(BaseModel):
    """설문 목록 + 요약 (추가/초기화 후 매번 새로 계산)"""
    model_config = ConfigDict(from_attributes=True)

    entries: List[SurveyEntryResponse]
    summary: SurveySummaryResponse


class SurveyResetResponse(BaseModel):
    deleted: int
    overview: SurveyOverviewResponse
