# tests/write_service/test_incident_mutations.py
"""
Tests for PUT /new-incident and DELETE /remove-incident.
"""

from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError

from crime_api.db.models import Incident


def _count(session_factory):
    with session_factory() as session:
        return session.scalar(select(func.count()).select_from(Incident))


def test_create_then_list_round_trip(client, incident_payload):
    response = client.put("/new-incident", json=incident_payload)

    assert response.status_code == 200
    assert response.get_data(as_text=True) == "OK"

    rows = client.get("/incidents").get_json()
    assert rows == [{
        "case_number": "24000100",
        "date": "2024-01-05",
        "time": "13:30:00",
        "code": 600,
        "incident": "Theft",
        "police_grid": 87,
        "neighborhood_number": 8,
        "block": "98X UNIVERSITY AV W",
    }]


def test_create_accepts_numeric_strings(client, incident_payload):
    incident_payload.update(code="600", police_grid="87", neighborhood_number=" 8 ")

    response = client.put("/new-incident", json=incident_payload)

    assert response.status_code == 200
    row = client.get("/incidents").get_json()[0]
    assert (row["code"], row["police_grid"], row["neighborhood_number"]) == (600, 87, 8)


def test_create_with_unknown_code_is_allowed(client, incident_payload):
    incident_payload.update(code=31337, neighborhood_number=404)

    response = client.put("/new-incident", json=incident_payload)

    assert response.status_code == 200


def test_duplicate_case_number_is_rejected(client, seeded, session_factory, incident_payload):
    incident_payload["case_number"] = "24000001"
    incident_payload["incident"] = "Overwritten"

    response = client.put("/new-incident", json=incident_payload)

    assert response.status_code == 500
    assert response.mimetype == "text/plain"
    assert response.get_data(as_text=True) == "Case number already exists"

    with session_factory() as session:
        existing = session.get(Incident, "24000001")
        assert existing.incident == "Theft"
        assert existing.block == "98X UNIVERSITY AV W"
    assert _count(session_factory) == len(seeded)


def test_create_missing_field(client, incident_payload):
    del incident_payload["block"]

    response = client.put("/new-incident", json=incident_payload)

    assert response.status_code == 500
    assert "block" in response.get_data(as_text=True)


def test_create_malformed_date(client, session_factory, incident_payload):
    incident_payload["date"] = "01/05/2024"

    response = client.put("/new-incident", json=incident_payload)

    assert response.status_code == 500
    assert response.get_data(as_text=True) == "Invalid date or time"
    assert _count(session_factory) == 0


def test_create_oversized_integer(client, session_factory, incident_payload):
    incident_payload["code"] = 99999999999999999999

    response = client.put("/new-incident", json=incident_payload)

    assert response.status_code == 500
    assert response.mimetype == "text/plain"
    assert response.get_data(as_text=True) == "Invalid incident: code is out of range"
    assert _count(session_factory) == 0


def test_created_timestamp_sorts_with_existing_rows(client, session_factory, incident_payload):
    """Rows loaded as "YYYY-MM-DDTHH:MM:SS" text and rows created here share one format."""
    with session_factory() as session:
        session.execute(text(
            "INSERT INTO Incidents (case_number, date_time, code, incident, police_grid,"
            " neighborhood_number, block)"
            " VALUES ('23999999', '2024-01-05T08:00:00', 600, 'Theft', 87, 8, '4XX SELBY AV')"
        ))
        session.commit()

    client.put("/new-incident", json=incident_payload)

    with session_factory() as session:
        stored = session.scalar(
            text("SELECT date_time FROM Incidents WHERE case_number = '24000100'")
        )
    assert stored == "2024-01-05T13:30:00"

    rows = client.get("/incidents").get_json()
    assert [(row["case_number"], row["time"]) for row in rows] == [
        ("24000100", "13:30:00"),
        ("23999999", "08:00:00"),
    ]


def test_create_without_json_body(client):
    response = client.put("/new-incident", data="case_number=1")

    assert response.status_code == 500
    assert response.get_data(as_text=True).startswith("Invalid incident")


def test_create_database_error(client, mocker, incident_payload):
    mocker.patch(
        "crime_api.write_service.api.create_incident",
        side_effect=SQLAlchemyError("disk I/O error"),
    )

    response = client.put("/new-incident", json=incident_payload)

    assert response.status_code == 500
    assert response.get_data(as_text=True) == "Error inserting incident"


def test_delete_existing(client, seeded, session_factory):
    response = client.delete("/remove-incident", json={"case_number": "24000003"})

    assert response.status_code == 200
    assert response.get_data(as_text=True) == "OK"

    with session_factory() as session:
        assert session.get(Incident, "24000003") is None
    assert _count(session_factory) == len(seeded) - 1


def test_delete_missing_leaves_table_alone(client, seeded, session_factory):
    response = client.delete("/remove-incident", json={"case_number": "nope"})

    assert response.status_code == 500
    assert response.get_data(as_text=True) == "Case number does not exist"
    assert _count(session_factory) == len(seeded)


def test_delete_twice(client, seeded):
    first = client.delete("/remove-incident", json={"case_number": "24000005"})
    second = client.delete("/remove-incident", json={"case_number": "24000005"})

    assert first.status_code == 200
    assert second.status_code == 500
    assert second.get_data(as_text=True) == "Case number does not exist"


def test_delete_without_case_number(client, seeded, session_factory):
    response = client.delete("/remove-incident", json={})

    assert response.status_code == 500
    assert "case_number" in response.get_data(as_text=True)
    assert _count(session_factory) == len(seeded)
