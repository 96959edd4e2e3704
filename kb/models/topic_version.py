from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from kb.db.session import Base
from kb.models.common import TimestampMixin

class TopicVersion(Base, TimestampMixin):
    """One immutable version of a topic. Rows sharing ``topic_id`` form its version chain."""

    __tablename__ = "topic_versions"
    __table_args__ = (Index("ix_topic_versions_topic_id_version", "topic_id", "version"),)

    row_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    topic_id: Mapped[int] = mapped_column(Integer, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Refers to a topic id, not a row; may dangle or form a cycle.
    parent_topic_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
