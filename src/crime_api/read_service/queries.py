# src/crime_api/read_service/queries.py

"""
Read-side queries for codes, neighborhoods and incidents.

Every filter list is bound through SQLAlchemy's in_() operator, which renders
one bind parameter per value. Filter values never become part of the SQL text.
"""

from datetime import date, datetime, time, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from crime_api.config import DEFAULT_INCIDENT_LIMIT
from crime_api.db.models import MAX_SQL_INTEGER, Code, Neighborhood, Incident


def _as_sql_integer(item):
    try:
        value = int(item)
    except ValueError:
        return None
    if -MAX_SQL_INTEGER <= value <= MAX_SQL_INTEGER:
        return value
    return None


def split_id_list(raw):
    """
    Turn a comma-separated query value like "110, 210,," into [110, 210].

    Returns None when the value is missing or has only blank items, meaning
    "no filter". Items that are not integers, or do not fit a SQL integer,
    can never match a row, so they are skipped: "600,abc" gives [600] and
    "abc" gives [], which matches nothing.
    """
    if not raw:
        return None
    items = [item.strip() for item in raw.split(",") if item.strip()]
    if not items:
        return None
    values = (_as_sql_integer(item) for item in items)
    return [value for value in values if value is not None]


def parse_limit(raw, default=DEFAULT_INCIDENT_LIMIT):
    """
    Return raw as a positive int, or the default when it is missing,
    non-numeric, <= 0 or too large to bind.

    The whole value must be an integer: "10abc" falls back to the default.
    """
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        return default
    if limit <= 0 or limit > MAX_SQL_INTEGER:
        return default
    return limit


def parse_date(raw):
    """Parse a YYYY-MM-DD query value; empty values mean no bound."""
    if raw is None or not raw.strip():
        return None
    return date.fromisoformat(raw.strip())


def incident_to_dict(incident):
    """Shape an Incident row for JSON, splitting date_time into date and time strings."""
    return {
        "case_number": incident.case_number,
        "date": incident.date_time.strftime("%Y-%m-%d"),
        "time": incident.date_time.strftime("%H:%M:%S"),
        "code": incident.code,
        "incident": incident.incident,
        "police_grid": incident.police_grid,
        "neighborhood_number": incident.neighborhood_number,
        "block": incident.block,
    }


def list_codes(session: Session, codes=None):
    """
    Retrieve crime codes ordered by code.

    Args:
        session: SQLAlchemy database session
        codes: optional list of codes to restrict to; None means all,
            an empty list matches nothing

    Returns:
        List of {"code", "type"} dictionaries.
    """
    query = select(Code)
    if codes is not None:
        query = query.where(Code.code.in_(codes))
    query = query.order_by(Code.code)

    return [
        {"code": row.code, "type": row.incident_type}
        for row in session.scalars(query)
    ]


def list_neighborhoods(session: Session, ids=None):
    """Retrieve neighborhoods as {"id", "name"} dictionaries ordered by number."""
    query = select(Neighborhood)
    if ids is not None:
        query = query.where(Neighborhood.neighborhood_number.in_(ids))
    query = query.order_by(Neighborhood.neighborhood_number)

    return [
        {"id": row.neighborhood_number, "name": row.neighborhood_name}
        for row in session.scalars(query)
    ]


def list_incidents(session: Session, start_date=None, end_date=None, codes=None,
                   grids=None, neighborhoods=None, limit=DEFAULT_INCIDENT_LIMIT):
    """
    Retrieve incidents matching every given filter, most recent first.

    Args:
        session: SQLAlchemy database session
        start_date: date; keep incidents on or after this day
        end_date: date; keep incidents on or before this day (whole day included)
        codes: list of crime codes (None: no code filter)
        grids: list of police grid numbers
        neighborhoods: list of neighborhood numbers
        limit: maximum number of rows returned

    Returns:
        List of incident dictionaries (see incident_to_dict).
    """
    query = select(Incident)

    if start_date is not None:
        query = query.where(Incident.date_time >= datetime.combine(start_date, time.min))
    if end_date is not None:
        # Compare against the start of the next day so times on end_date still match
        query = query.where(Incident.date_time < datetime.combine(end_date + timedelta(days=1), time.min))
    if codes is not None:
        query = query.where(Incident.code.in_(codes))
    if grids is not None:
        query = query.where(Incident.police_grid.in_(grids))
    if neighborhoods is not None:
        query = query.where(Incident.neighborhood_number.in_(neighborhoods))

    query = query.order_by(Incident.date_time.desc()).limit(limit)

    return [incident_to_dict(row) for row in session.scalars(query)]
