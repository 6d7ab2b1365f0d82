"""
문서 저장소

컬렉션/키 단위로 JSON 문서를 읽고 쓰는 얇은 계층.
- set(merge=True): 없으면 생성, 있으면 전달된 필드만 갱신 (merge-upsert)
- list_ordered: 정렬 필드가 없는 문서는 결과에서 제외한다
- delete_all: 단일 트랜잭션으로 컬렉션 전체 삭제
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging
import uuid

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from karts.core.errors import RemoteFailure
from karts.models.document import Document

logger = logging.getLogger(__name__)


ARTWORKS = "artworks"
SURVEYS = "surveys"
BPASSWORDS = "b_passwords"
FEATURED = "featured"


@dataclass
class StoredDocument:
    key: str
    data: Dict[str, Any] = field(default_factory=dict)


class DocumentStore:
    """문서 저장소 인터페이스"""

    async def get(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def set(self, collection: str, key: str, data: Dict[str, Any], *, merge: bool = True) -> Dict[str, Any]:
        raise NotImplementedError

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        raise NotImplementedError

    async def list_all(self, collection: str) -> List[StoredDocument]:
        raise NotImplementedError

    async def list_ordered(
        self,
        collection: str,
        field_name: str,
        *,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[StoredDocument]:
        raise NotImplementedError

    async def delete_all(self, collection: str) -> int:
        raise NotImplementedError


class SqlDocumentStore(DocumentStore):
    """SQLAlchemy(AsyncSession) 기반 문서 저장소"""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _fail(self, op: str, collection: str, exc: Exception) -> RemoteFailure:
        logger.exception(f"document store {op} failed: collection={collection}: {exc}")
        try:
            await self.db.rollback()
        except SQLAlchemyError:
            logger.warning("rollback failed after store error")
        return RemoteFailure()

    async def _find(self, collection: str, key: str) -> Optional[Document]:
        result = await self.db.execute(
            select(Document).where(Document.collection == collection, Document.key == key)
        )
        return result.scalar_one_or_none()

    async def get(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        try:
            doc = await self._find(collection, key)
        except SQLAlchemyError as e:
            raise await self._fail("get", collection, e) from e
        return dict(doc.data or {}) if doc is not None else None

    async def set(self, collection: str, key: str, data: Dict[str, Any], *, merge: bool = True) -> Dict[str, Any]:
        try:
            doc = await self._find(collection, key)
            if doc is None:
                doc = Document(collection=collection, key=key, data=dict(data))
                self.db.add(doc)
            else:
                merged = dict(doc.data or {}) if merge else {}
                merged.update(data)
                # 새 dict를 대입해야 JSON 컬럼 변경이 감지된다
                doc.data = merged
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("set", collection, e) from e
        return dict(doc.data)

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        key = uuid.uuid4().hex
        try:
            self.db.add(Document(collection=collection, key=key, data=dict(data)))
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("add", collection, e) from e
        return key

    async def list_all(self, collection: str) -> List[StoredDocument]:
        try:
            result = await self.db.execute(
                select(Document).where(Document.collection == collection).order_by(Document.id)
            )
            docs = result.scalars().all()
        except SQLAlchemyError as e:
            raise await self._fail("list", collection, e) from e
        return [StoredDocument(key=d.key, data=dict(d.data or {})) for d in docs]

    async def list_ordered(
        self,
        collection: str,
        field_name: str,
        *,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[StoredDocument]:
        docs = [d for d in await self.list_all(collection) if d.data.get(field_name) is not None]
        # 타임스탬프는 ISO-8601 UTC 문자열이라 문자열 정렬 == 시간 정렬
        docs.sort(key=lambda d: d.data[field_name], reverse=descending)
        if limit is not None:
            docs = docs[:limit]
        return docs

    async def delete_all(self, collection: str) -> int:
        try:
            result = await self.db.execute(delete(Document).where(Document.collection == collection))
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("delete_all", collection, e) from e
        return result.rowcount or 0
