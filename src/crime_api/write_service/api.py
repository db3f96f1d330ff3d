# src/crime_api/write_service/api.py

from flask import Blueprint, current_app, request
from sqlalchemy.exc import SQLAlchemyError

from crime_api.errors import CrimeDataError
from crime_api.responses import text_response
from .incidents import create_incident, delete_incident


def create_write_blueprint(SessionLocal):
    """
    Factory that creates the write blueprint with access to SessionLocal.

    Endpoints:
        PUT    /new-incident     JSON body with every incident field
        DELETE /remove-incident  JSON body {"case_number": ...}

    Both answer "OK" as text on success. Conflicts, missing records and bad
    payloads answer 500 with the reason as text; database failures answer
    500 with a generic message.
    """
    bp = Blueprint("write_service", __name__)

    @bp.route("/new-incident", methods=["PUT"])
    def new_incident():
        payload = request.get_json(silent=True)
        db = SessionLocal()
        try:
            create_incident(db, payload)
            return text_response("OK", 200)
        except CrimeDataError as e:
            current_app.logger.warning(f"New incident rejected: {e.message}")
            return text_response(e.message, e.status_code)
        except SQLAlchemyError as e:
            db.rollback()
            current_app.logger.error(f"Incident insert failed: {e}", exc_info=True)
            return text_response("Error inserting incident", 500)
        finally:
            db.close()

    @bp.route("/remove-incident", methods=["DELETE"])
    def remove_incident():
        payload = request.get_json(silent=True)
        db = SessionLocal()
        try:
            delete_incident(db, payload)
            return text_response("OK", 200)
        except CrimeDataError as e:
            current_app.logger.warning(f"Incident removal rejected: {e.message}")
            return text_response(e.message, e.status_code)
        except SQLAlchemyError as e:
            db.rollback()
            current_app.logger.error(f"Incident delete failed: {e}", exc_info=True)
            return text_response("Error deleting incident", 500)
        finally:
            db.close()

    return bp
