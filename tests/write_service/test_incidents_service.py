from datetime import datetime

import pytest

from crime_api.errors import (
    IncidentConflictError,
    IncidentNotFoundError,
    InvalidIncidentError,
)
from crime_api.write_service.incidents import (
    build_incident_values,
    create_incident,
    delete_incident,
)


def test_build_values_joins_date_and_time(incident_payload):
    values = build_incident_values(incident_payload)

    assert values["date_time"] == datetime(2024, 1, 5, 13, 30, 0)
    assert values["code"] == 600


@pytest.mark.parametrize("field,value", [
    ("time", "1:30 PM"),
    ("date", "2024-13-40"),
])
def test_build_values_rejects_unparseable_timestamp(incident_payload, field, value):
    incident_payload[field] = value

    with pytest.raises(InvalidIncidentError, match="Invalid date or time"):
        build_incident_values(incident_payload)


@pytest.mark.parametrize("field,value", [
    ("code", "six hundred"),
    ("police_grid", True),
    ("case_number", ""),
    ("block", None),
])
def test_build_values_rejects_bad_fields(incident_payload, field, value):
    incident_payload[field] = value

    with pytest.raises(InvalidIncidentError):
        build_incident_values(incident_payload)


@pytest.mark.parametrize("field", ["code", "police_grid", "neighborhood_number"])
def test_build_values_rejects_out_of_range_integers(incident_payload, field):
    incident_payload[field] = str(2 ** 64)

    with pytest.raises(InvalidIncidentError, match=f"{field} is out of range"):
        build_incident_values(incident_payload)


def test_create_conflict_is_typed(session_factory, seeded, incident_payload):
    incident_payload["case_number"] = "24000002"

    with session_factory() as session:
        with pytest.raises(IncidentConflictError) as excinfo:
            create_incident(session, incident_payload)

    assert excinfo.value.message == "Case number already exists"
    assert excinfo.value.status_code == 500


def test_session_usable_after_conflict(session_factory, seeded, incident_payload):
    with session_factory() as session:
        incident_payload["case_number"] = "24000002"
        with pytest.raises(IncidentConflictError):
            create_incident(session, incident_payload)

        incident_payload["case_number"] = "24000200"
        values = create_incident(session, incident_payload)

    assert values["case_number"] == "24000200"


def test_delete_not_found_is_typed(session_factory, seeded):
    with session_factory() as session:
        with pytest.raises(IncidentNotFoundError, match="Case number does not exist"):
            delete_incident(session, {"case_number": "missing"})
