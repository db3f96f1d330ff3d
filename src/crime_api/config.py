"""
config.py
---------
Settings for the crime API, read from environment variables.

A .env file in the working directory is loaded first (python-dotenv), so local
runs can keep their DATABASE_URL there instead of exporting it.
"""

import os
import logging

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///db/stpaul_crime.sqlite3"
DEFAULT_INCIDENT_LIMIT = 1000

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def load_config(overrides=None):
    """
    Build the settings dictionary that create_app() copies into app.config.

    Args:
        overrides: optional dict whose keys win over the environment
            (tests pass an in-memory DATABASE_URL this way).
    """
    config = {
        "DATABASE_URL": os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        "DOCS_DIR": os.getenv("DOCS_DIR", "docs"),
        "PORT": int(os.getenv("PORT", "8000")),
        "FLASK_DEBUG": os.getenv("FLASK_DEBUG", "False").lower() == "true",
        "DEFAULT_INCIDENT_LIMIT": int(os.getenv("DEFAULT_INCIDENT_LIMIT", str(DEFAULT_INCIDENT_LIMIT))),
        "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO").upper(),
    }
    if overrides:
        config.update(overrides)
    return config


def configure_logging(level="INFO"):
    """Set up root logging once; later calls only adjust the level."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
