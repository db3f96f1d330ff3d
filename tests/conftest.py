"""
Shared fixtures: a Flask app on a fresh in-memory SQLite database per test,
plus a small St. Paul data set.
"""

from datetime import datetime

import pytest

from crime_api.app import create_app
from crime_api.db.models import Code, Neighborhood, Incident


CODES = {
    110: "Murder, Non Negligent Manslaughter",
    400: "Aggravated Assault",
    600: "Theft",
    700: "Motor Vehicle Theft",
    1400: "Vandalism",
}

NEIGHBORHOODS = {
    3: "West Side",
    7: "Thomas/Dale(Frogtown)",
    8: "Summit/University",
    13: "Union Park",
}

# case_number, date_time, code, incident, police_grid, neighborhood_number, block
INCIDENTS = [
    ("24000001", datetime(2024, 1, 1, 8, 15, 0), 600, "Theft", 87, 8, "98X UNIVERSITY AV W"),
    ("24000002", datetime(2024, 1, 2, 23, 59, 59), 700, "Motor Vehicle Theft", 88, 8, "4XX SELBY AV"),
    ("24000003", datetime(2024, 1, 3, 0, 0, 0), 600, "Theft", 106, 13, "17XX GRAND AV"),
    ("24000004", datetime(2024, 1, 5, 13, 30, 0), 400, "Agg. Assault", 66, 3, "1X CESAR CHAVEZ ST"),
    ("24000005", datetime(2024, 1, 7, 17, 45, 0), 1400, "Vandalism", 106, 13, "2XX SNELLING AV S"),
    # Code and neighborhood that are not in the reference tables
    ("24000006", datetime(2024, 1, 9, 2, 5, 0), 9999, "Unknown", 250, 99, "1XX MAIN ST"),
]


@pytest.fixture
def app(tmp_path):
    """Flask app with its own in-memory database and no built client."""
    app = create_app({
        "DATABASE_URL": "sqlite://",
        "DOCS_DIR": str(tmp_path / "docs"),
    })
    app.config["TESTING"] = True
    yield app


@pytest.fixture
def client(app):
    """Flask test client fixture."""
    with app.test_client() as client:
        yield client


@pytest.fixture
def session_factory(app):
    return app.extensions["crime_api"]["session_factory"]


@pytest.fixture
def seeded(session_factory):
    """Insert the reference data and incidents above."""
    with session_factory() as session:
        session.add_all(Code(code=code, incident_type=label) for code, label in CODES.items())
        session.add_all(
            Neighborhood(neighborhood_number=number, neighborhood_name=name)
            for number, name in NEIGHBORHOODS.items()
        )
        session.add_all(
            Incident(
                case_number=case_number,
                date_time=date_time,
                code=code,
                incident=incident,
                police_grid=grid,
                neighborhood_number=neighborhood,
                block=block,
            )
            for case_number, date_time, code, incident, grid, neighborhood, block in INCIDENTS
        )
        session.commit()
    return INCIDENTS


@pytest.fixture
def incident_payload():
    return {
        "case_number": "24000100",
        "date": "2024-01-05",
        "time": "13:30:00",
        "code": 600,
        "incident": "Theft",
        "police_grid": 87,
        "neighborhood_number": 8,
        "block": "98X UNIVERSITY AV W",
    }
