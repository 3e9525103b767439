"""SQLAlchemy models for ledgerbook database."""

from datetime import datetime, UTC

from sqlalchemy import Column, DateTime, Integer, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class SnapshotRecord(Base):
    """Serialized application snapshot stored under a fixed key."""

    __tablename__ = "snapshots"

    id = Column(Integer, primary_key=True)
    key = Column(String, unique=True, nullable=False)
    payload = Column(Text, nullable=False)
    saved_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
