from sqlalchemy import create_engine, Column, Integer, String, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker
from datetime import datetime

from ..config import settings


def build_engine(database_url: str, echo: bool = False):
    """Create an engine; SQLite gets thread-safe connect args, servers get a pool"""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False}
        )

    return create_engine(
        database_url,
        echo=echo,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        pool_recycle=300
    )


# Create engine
engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all models
Base = declarative_base()


class StoreConnection(Base):
    """Connected store credentials, kept in insertion order"""
    __tablename__ = "connected_stores"

    id = Column(Integer, primary_key=True, index=True)
    # Not unique: connecting the same store twice keeps both entries
    url = Column(String(255), nullable=False, index=True)
    access_token = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<StoreConnection(id={self.id}, url='{self.url}')>"


# Database utility functions
def create_tables(bind=None):
    """Create all database tables"""
    Base.metadata.create_all(bind=bind or engine)


def drop_tables(bind=None):
    """Drop all database tables (use with caution)"""
    Base.metadata.drop_all(bind=bind or engine)
