# src/crime_api/read_service/api.py

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from crime_api.responses import text_response
from .queries import (
    list_codes,
    list_incidents,
    list_neighborhoods,
    parse_date,
    parse_limit,
    split_id_list,
)


def create_read_blueprint(SessionLocal):
    """
    Factory that creates the read blueprint with access to SessionLocal
    for DB queries.

    Endpoints:
        GET /codes          ?code=110,210
        GET /neighborhoods  ?id=3,7
        GET /incidents      ?start_date=&end_date=&code=&grid=&neighborhood=&limit=

    All endpoints answer with a JSON array (empty when nothing matches).
    Any failure is logged and answered with 500 and a plain-text message.
    """
    bp = Blueprint("read_service", __name__)

    @bp.route("/codes", methods=["GET"])
    def get_codes():
        """Crime codes ordered by code, optionally restricted to ?code=..."""
        db = SessionLocal()
        try:
            codes = split_id_list(request.args.get("code"))
            return jsonify(list_codes(db, codes)), 200
        except (SQLAlchemyError, ValueError) as e:
            current_app.logger.error(f"Code query failed: {e}", exc_info=True)
            return text_response("Error retrieving codes", 500)
        finally:
            db.close()

    @bp.route("/neighborhoods", methods=["GET"])
    def get_neighborhoods():
        """Neighborhoods ordered by number, optionally restricted to ?id=..."""
        db = SessionLocal()
        try:
            ids = split_id_list(request.args.get("id"))
            return jsonify(list_neighborhoods(db, ids)), 200
        except (SQLAlchemyError, ValueError) as e:
            current_app.logger.error(f"Neighborhood query failed: {e}", exc_info=True)
            return text_response("Error retrieving neighborhoods", 500)
        finally:
            db.close()

    @bp.route("/incidents", methods=["GET"])
    def get_incidents():
        """
        Incidents newest first, filtered by date range, code, grid and
        neighborhood, capped at ?limit (default 1000).
        """
        db = SessionLocal()
        try:
            incidents = list_incidents(
                db,
                start_date=parse_date(request.args.get("start_date")),
                end_date=parse_date(request.args.get("end_date")),
                codes=split_id_list(request.args.get("code")),
                grids=split_id_list(request.args.get("grid")),
                neighborhoods=split_id_list(request.args.get("neighborhood")),
                limit=parse_limit(
                    request.args.get("limit"),
                    default=current_app.config["DEFAULT_INCIDENT_LIMIT"],
                ),
            )
            return jsonify(incidents), 200
        except (SQLAlchemyError, ValueError) as e:
            current_app.logger.error(f"Incident query failed: {e}", exc_info=True)
            return text_response("Error retrieving incidents", 500)
        finally:
            db.close()

    return bp
