"""
incidents.py
------------
Write-side operations for incidents: create and delete.

Both operations are a single statement. Duplicate case numbers are caught by
the primary key on Incidents, not by a lookup before the insert, so two
concurrent creates of the same case number cannot both succeed.
"""

import logging
from datetime import datetime

from jsonschema import validate, ValidationError
from sqlalchemy import delete, insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crime_api.db.models import MAX_SQL_INTEGER, Incident
from crime_api.errors import (
    IncidentConflictError,
    IncidentNotFoundError,
    InvalidIncidentError,
)

logger = logging.getLogger(__name__)

# Numbers may arrive as JSON integers or as digit strings from HTML forms
_integer_field = {"type": ["integer", "string"], "pattern": r"^\s*-?\d+\s*$"}

incident_schema = {
    "type": "object",
    "properties": {
        "case_number": {"type": "string", "minLength": 1},
        "date": {"type": "string", "minLength": 1},
        "time": {"type": "string", "minLength": 1},
        "code": _integer_field,
        "incident": {"type": "string"},
        "police_grid": _integer_field,
        "neighborhood_number": _integer_field,
        "block": {"type": "string"},
    },
    "required": [
        "case_number", "date", "time", "code", "incident",
        "police_grid", "neighborhood_number", "block",
    ],
}

case_number_schema = {
    "type": "object",
    "properties": {"case_number": {"type": "string", "minLength": 1}},
    "required": ["case_number"],
}


def _check(payload, schema):
    try:
        validate(instance=payload, schema=schema)
    except ValidationError as e:
        raise InvalidIncidentError(f"Invalid incident: {e.message}") from e


def _integer_value(payload, field):
    value = int(payload[field])
    if not -MAX_SQL_INTEGER <= value <= MAX_SQL_INTEGER:
        raise InvalidIncidentError(f"Invalid incident: {field} is out of range")
    return value


def build_incident_values(payload):
    """
    Validate a new-incident payload and return the column values to insert.

    date and time are joined as "<date>T<time>" and parsed as ISO 8601, so
    "2024-01-05" + "13:30:00" is stored as 2024-01-05 13:30:00. Anything that
    does not parse is rejected instead of being stored as-is.
    """
    _check(payload, incident_schema)

    try:
        date_time = datetime.fromisoformat(f"{payload['date'].strip()}T{payload['time'].strip()}")
    except ValueError as e:
        raise InvalidIncidentError("Invalid date or time") from e

    return {
        "case_number": payload["case_number"].strip(),
        "date_time": date_time,
        "code": _integer_value(payload, "code"),
        "incident": payload["incident"],
        "police_grid": _integer_value(payload, "police_grid"),
        "neighborhood_number": _integer_value(payload, "neighborhood_number"),
        "block": payload["block"],
    }


def create_incident(session: Session, payload):
    """
    Insert a new incident.

    Raises:
        InvalidIncidentError: payload is missing fields or has bad values
        IncidentConflictError: the case number is already stored; the
            existing row is left untouched
    """
    values = build_incident_values(payload)

    try:
        session.execute(insert(Incident).values(**values))
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.warning(f"Duplicate case number {values['case_number']}: {e.orig}")
        raise IncidentConflictError("Case number already exists") from e

    logger.info(f"Inserted incident {values['case_number']}")
    return values


def delete_incident(session: Session, payload):
    """
    Delete the incident named by payload["case_number"].

    Raises:
        InvalidIncidentError: no case_number in the payload
        IncidentNotFoundError: no row has that case number; nothing is changed
    """
    _check(payload, case_number_schema)
    case_number = payload["case_number"].strip()

    result = session.execute(
        delete(Incident).where(Incident.case_number == case_number)
    )
    if result.rowcount == 0:
        session.rollback()
        raise IncidentNotFoundError("Case number does not exist")

    session.commit()
    logger.info(f"Deleted incident {case_number}")
    return case_number
