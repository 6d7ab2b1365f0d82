"""
작품 관련 Pydantic 스키마
"""

from pydantic import BaseModel, ConfigDict
from typing import List, Optional


class CommentUpdate(BaseModel):
    """해설 저장 스키마"""
    comment: str = ""


class ArtworkResponse(BaseModel):
    """작품 응답 스키마"""
    model_config = ConfigDict(from_attributes=True)

    code: str
    image_url: Optional[str] = None
    comment: str = ""
    has_image: bool
    has_comment: bool
    updated_at: Optional[str] = None


class FeaturedItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str
    image_url: Optional[str] = None
    comment: str = ""


class FeaturedListResponse(BaseModel):
    items: List[FeaturedItemResponse]
    total_count: int
