"""
database_setup.py
-----------------
Creates the crime tables and seeds the reference data (codes and
neighborhoods) the API expects to exist.

Run with: crime-api-init-db   (uses DATABASE_URL, see config.py)
Seeding is idempotent: rows that already exist are left alone.
"""

import argparse
import logging

from sqlalchemy import select

from crime_api.config import configure_logging, load_config
from crime_api.db.models import Code, Neighborhood
from crime_api.db.session import Base, create_db_engine, create_session_factory

logger = logging.getLogger(__name__)

# St. Paul district councils, numbered as in the city's open data
NEIGHBORHOODS = {
    1: "Conway/Battlecreek/Highwood",
    2: "Greater East Side",
    3: "West Side",
    4: "Dayton's Bluff",
    5: "Payne/Phalen",
    6: "North End",
    7: "Thomas/Dale(Frogtown)",
    8: "Summit/University",
    9: "West Seventh",
    10: "Como",
    11: "Hamline/Midway",
    12: "St. Anthony",
    13: "Union Park",
    14: "Macalester-Groveland",
    15: "Highland",
    16: "Summit Hill",
    17: "Capitol River",
}

CODES = {
    110: "Murder, Non Negligent Manslaughter",
    210: "Rape, By Force",
    300: "Robbery",
    400: "Aggravated Assault",
    500: "Burglary",
    600: "Theft",
    700: "Motor Vehicle Theft",
    810: "Simple Assault Domestic",
    861: "Simple Assault",
    900: "Arson",
    1400: "Vandalism",
    1800: "Narcotics",
    2619: "Weapons",
    3100: "Graffiti",
    9954: "Proactive Police Visit",
    9959: "Community Engagement Event",
}


def seed_reference_data(session):
    """Insert any missing codes and neighborhoods. Returns (codes_added, neighborhoods_added)."""
    existing_codes = set(session.scalars(select(Code.code)))
    new_codes = [
        Code(code=code, incident_type=label)
        for code, label in CODES.items() if code not in existing_codes
    ]

    existing_neighborhoods = set(session.scalars(select(Neighborhood.neighborhood_number)))
    new_neighborhoods = [
        Neighborhood(neighborhood_number=number, neighborhood_name=name)
        for number, name in NEIGHBORHOODS.items() if number not in existing_neighborhoods
    ]

    session.add_all(new_codes + new_neighborhoods)
    session.commit()
    return len(new_codes), len(new_neighborhoods)


def initialize_database(engine, seed=True):
    """Create all tables, then optionally seed the reference data."""
    logger.info("Attempting to create tables...")
    Base.metadata.create_all(engine)

    if seed:
        SessionLocal = create_session_factory(engine)
        session = SessionLocal()
        try:
            codes_added, neighborhoods_added = seed_reference_data(session)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
        logger.info(f"Seeded {codes_added} codes and {neighborhoods_added} neighborhoods")

    logger.info("Database and tables initialized successfully.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create and seed the crime database.")
    parser.add_argument("--database-url", help="SQLAlchemy URL (default: DATABASE_URL)")
    parser.add_argument("--no-seed", action="store_true", help="only create tables")
    args = parser.parse_args(argv)

    overrides = {"DATABASE_URL": args.database_url} if args.database_url else None
    settings = load_config(overrides)
    configure_logging(settings["LOG_LEVEL"])

    engine = create_db_engine(settings["DATABASE_URL"])
    initialize_database(engine, seed=not args.no_seed)


if __name__ == "__main__":
    main()
