"""
Pydantic 스키마 패키지
"""

from .auth import LoginRequest, Token, SessionResponse, SecondaryPasswordRequest
from .artwork import CommentUpdate, ArtworkResponse, FeaturedItemResponse, FeaturedListResponse
from .survey import (
    SurveyCreate,
    SurveyEntryResponse,
    SurveySummaryResponse,
    SurveyOverviewResponse,
    SurveyResetResponse,
)

__all__ = [
    "LoginRequest",
    "Token",
    "SessionResponse",
    "SecondaryPasswordRequest",
    "CommentUpdate",
    "ArtworkResponse",
    "FeaturedItemResponse",
    "FeaturedListResponse",
    "SurveyCreate",
    "SurveyEntryResponse",
    "SurveySummaryResponse",
    "SurveyOverviewResponse",
    "SurveyResetResponse",
]
