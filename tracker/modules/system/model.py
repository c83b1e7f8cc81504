from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.sql import func
from tracker.db.base import Base


class KeepAlive(Base):
    __tablename__ = "keep_alive"
    id = Column(Integer, primary_key=True)
    last_ping = Column(DateTime(timezone=True), server_default=func.now())
