"""
문서 모델 (컬렉션 + 키 -> JSON 필드)
"""

from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint, func

from karts.core.database import Base, JSON


class Document(Base):
    """문서 저장소의 한 문서 (artworks / surveys / bpasswords / featured)"""
    __tablename__ = "documents"
    __table_args__ = (UniqueConstraint("collection", "key", name="uq_documents_collection_key"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    collection = Column(String(64), nullable=False, index=True)
    key = Column(String(128), nullable=False)
    data = Column(JSON(), nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Document(collection={self.collection}, key={self.key})>"
