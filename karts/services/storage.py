"""
이미지 호스트

업로드만 담당한다. 삭제는 호스트 콘솔에서 수동으로 처리하므로 인터페이스에 없다.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Optional

import aiohttp

from karts.core.config import settings

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


class ImageHostError(Exception):
    """업로드 실패 (네트워크 오류, 호스트 거부)"""


@dataclass
class UploadResult:
    secure_url: str
    public_id: str


class ImageHost:
    async def upload(self, data: bytes, *, content_type: Optional[str] = None, public_id: str) -> UploadResult:
        raise NotImplementedError


class LocalImageHost(ImageHost):
    def __init__(self, base_dir: str, public_base: str = "/static") -> None:
        self.base_dir = base_dir
        self.public_base = public_base.rstrip("/")
        os.makedirs(self.base_dir, exist_ok=True)

    async def upload(self, data: bytes, *, content_type: Optional[str] = None, public_id: str) -> UploadResult:
        name = f"{public_id}{_EXTENSIONS.get(content_type or '', '.png')}"
        path = os.path.join(self.base_dir, name)
        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise ImageHostError(f"local write failed: {e}") from e
        return UploadResult(secure_url=f"{self.public_base}/{name}", public_id=public_id)


class CloudinaryImageHost(ImageHost):
    """Cloudinary unsigned upload (upload_preset + folder + public_id)"""

    API_BASE = "https://api.cloudinary.com/v1_1"

    def __init__(
        self,
        *,
        cloud_name: str,
        upload_preset: str,
        folder: str,
        timeout: float = 60,
        api_base: Optional[str] = None,
    ) -> None:
        base = (api_base or self.API_BASE).rstrip("/")
        self.url = f"{base}/{cloud_name}/image/upload"
        self.upload_preset = upload_preset
        self.folder = folder
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def upload(self, data: bytes, *, content_type: Optional[str] = None, public_id: str) -> UploadResult:
        form = aiohttp.FormData()
        form.add_field("file", data, filename=public_id, content_type=content_type or "application/octet-stream")
        form.add_field("upload_preset", self.upload_preset)
        form.add_field("folder", self.folder)
        form.add_field("public_id", public_id)

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(self.url, data=form) as resp:
                    if resp.status >= 300:
                        body = await resp.text()
                        raise ImageHostError(f"cloudinary upload failed: status={resp.status} body={body[:200]}")
                    try:
                        payload = await resp.json()
                    except ValueError as e:
                        raise ImageHostError(f"cloudinary response is not JSON: {e}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ImageHostError(f"cloudinary request failed: {e}") from e

        if not isinstance(payload, dict):
            raise ImageHostError(f"cloudinary response is not an object: {type(payload).__name__}")

        secure_url = payload.get("secure_url")
        if not secure_url:
            raise ImageHostError("cloudinary response has no secure_url")
        return UploadResult(secure_url=secure_url, public_id=payload.get("public_id") or public_id)


def get_storage() -> ImageHost:
    backend = settings.STORAGE_BACKEND
    if backend == "cloudinary":
        if not settings.CLOUDINARY_CLOUD_NAME:
            raise RuntimeError("Cloudinary storage is not fully configured")
        return CloudinaryImageHost(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            upload_preset=settings.CLOUDINARY_UPLOAD_PRESET,
            folder=settings.CLOUDINARY_FOLDER,
        )
    # local
    from karts.core.paths import get_upload_dir
    return LocalImageHost(base_dir=get_upload_dir(), public_base="/static")
