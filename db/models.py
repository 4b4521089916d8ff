"""SQLAlchemy models for the trimp-local sample database."""
from datetime import datetime
from pathlib import Path

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    create_engine,
)
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class SampleRecord(Base):
    """Raw sample table - one row per timestamped measurement."""

    __tablename__ = "samples"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Where the sample came from (e.g. 'fit', 'csv', 'garmin-export')
    source = Column(String, nullable=False, default="local")

    # ActivityKind / MetricKind flag values
    activity_kind = Column(Integer, nullable=False)
    metric_kind = Column(Integer, nullable=False)

    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)

    # Value and unit symbol from the unit registry (e.g. 'bpm', 'W')
    value = Column(Float, nullable=False)
    unit = Column(String, nullable=False)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_samples_metric_start", "metric_kind", "start_time"),
    )

    def __repr__(self) -> str:
        return f"<SampleRecord {self.start_time} {self.value} {self.unit}>"


class AthleteRecord(Base):
    """Athlete attributes served to profiles by the database source."""

    __tablename__ = "athletes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, unique=True, nullable=False)

    # 'male', 'female', 'other', 'not set'
    gender = Column(String, nullable=True)
    birth_date = Column(Date, nullable=True)
    height_m = Column(Float, nullable=True)
    weight_kg = Column(Float, nullable=True)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<AthleteRecord {self.name}>"


class FitFileRecord(Base):
    """FIT files already ingested, keyed by content hash."""

    __tablename__ = "fit_files"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sha256 = Column(String(64), unique=True, nullable=False)
    file_path = Column(String, nullable=False)
    file_size = Column(Integer, nullable=True)
    sample_count = Column(Integer, nullable=False, default=0)

    # Metadata
    ingested_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<FitFileRecord {self.file_path} {self.sha256[:8]}>"


# Database path
DEFAULT_DB_PATH = Path(__file__).parent.parent / "data" / "trimp_local.db"


def get_engine(db_path: Path | None = None, echo: bool = False):
    """Create and return a SQLAlchemy engine."""
    if db_path is None:
        db_path = DEFAULT_DB_PATH

    # Ensure the data directory exists
    db_path.parent.mkdir(parents=True, exist_ok=True)

    return create_engine(f"sqlite:///{db_path}", echo=echo)


def get_session(engine=None) -> Session:
    """Create and return a new database session."""
    if engine is None:
        engine = get_engine()

    SessionLocal = sessionmaker(bind=engine)
    return SessionLocal()


def get_session_factory(engine=None) -> sessionmaker:
    """Create a session factory for callers that open sessions on demand."""
    if engine is None:
        engine = get_engine()

    return sessionmaker(bind=engine)


def init_db(engine=None) -> None:
    """Initialize the database schema."""
    if engine is None:
        engine = get_engine()

    Base.metadata.create_all(engine)
