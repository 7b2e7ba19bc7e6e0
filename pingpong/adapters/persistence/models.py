"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from pingpong.adapters.persistence.database import Base

COUNTER_ROW_ID = 1


class PingCounterModel(Base):
    __tablename__ = "ping_counter"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    counter_value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
