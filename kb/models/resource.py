from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from kb.db.session import Base
from kb.models.common import IntIdMixin, TimestampMixin

class Resource(Base, IntIdMixin, TimestampMixin):
    __tablename__ = "resources"
    topic_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    url: Mapped[str] = mapped_column(String(2000), nullable=False)
    title: Mapped[str] = mapped_column(String(400), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(String(30), nullable=False)
