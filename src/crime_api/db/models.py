"""
models.py
----------
Defines the three tables of the crime database using SQLAlchemy ORM.

Codes and Neighborhoods are reference data seeded once (see
database_setup.py). Incidents are created and removed through the API.
There are no foreign keys: an incident may point at a code or neighborhood
that does not exist, and readers just fail to resolve a label for it.
"""

from sqlalchemy import Column, Integer, String, DateTime, Index
from sqlalchemy.dialects import sqlite

from .session import Base

# Largest magnitude a SQL integer column (SQLite INTEGER, PostgreSQL BIGINT) can bind
MAX_SQL_INTEGER = 2 ** 63 - 1

# The St. Paul data set stores date_time in SQLite as "YYYY-MM-DDTHH:MM:SS".
# Rows written here use the same text so ORDER BY date_time sorts old and new
# rows together.
IncidentDateTime = DateTime().with_variant(
    sqlite.DATETIME(
        storage_format="%(year)04d-%(month)02d-%(day)02dT%(hour)02d:%(minute)02d:%(second)02d",
        regexp=r"(\d+)-(\d+)-(\d+)[T ](\d+):(\d+):(\d+)",
    ),
    "sqlite",
)


class Code(Base):
    """Numeric crime classification and its human-readable label."""
    __tablename__ = "Codes"

    code = Column(Integer, primary_key=True, autoincrement=False)
    incident_type = Column(String, nullable=False)


class Neighborhood(Base):
    """Numbered district of the city (St. Paul district councils)."""
    __tablename__ = "Neighborhoods"

    neighborhood_number = Column(Integer, primary_key=True, autoincrement=False)
    neighborhood_name = Column(String, nullable=False)


class Incident(Base):
    """
    A single reported crime.

    case_number is the primary key, so the store itself rejects duplicates;
    the write service turns that rejection into IncidentConflictError.
    """
    __tablename__ = "Incidents"

    case_number = Column(String, primary_key=True)

    # Date and time are kept together; readers split them back apart
    date_time = Column(IncidentDateTime, nullable=False)

    code = Column(Integer, nullable=False)

    # Free-text label from the source data, independent of Codes.incident_type
    incident = Column(String, nullable=False)

    police_grid = Column(Integer, nullable=False)
    neighborhood_number = Column(Integer, nullable=False)

    # Address fragment like "98X UNIVERSITY AV W"
    block = Column(String, nullable=False)

    __table_args__ = (
        Index("ix_incidents_date_time", "date_time"),
    )

    def __repr__(self):
        return f"<Incident(case_number={self.case_number!r}, date_time={self.date_time})>"
