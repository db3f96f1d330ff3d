"""
swagger.py: OpenAPI document and Swagger UI blueprint for the crime API.
"""

from flask_swagger_ui import get_swaggerui_blueprint

SWAGGER_URL = '/swagger'  # URL for Swagger UI (e.g., http://localhost:8000/swagger)
API_URL = '/swagger.json'

SWAGGER_CONFIG = {
    'app_name': "St. Paul Crime API",
    'deepLinking': True,
    'defaultModelsExpandDepth': -1,
    'showExtensions': True,
    'showCommonExtensions': True
}


def _comma_list(name, description):
    return {
        "name": name,
        "in": "query",
        "required": False,
        "description": description,
        "schema": {"type": "string"},
    }


def _text_responses(ok_description, error_example):
    return {
        "200": {
            "description": ok_description,
            "content": {"text/plain": {"example": "OK"}}
        },
        "500": {
            "description": "Rejected or failed; the reason is sent as plain text",
            "content": {"text/plain": {"example": error_example}}
        }
    }


INCIDENT_EXAMPLE = {
    "case_number": "24000123",
    "date": "2024-01-05",
    "time": "13:30:00",
    "code": 600,
    "incident": "Theft",
    "police_grid": 87,
    "neighborhood_number": 8,
    "block": "98X UNIVERSITY AV W"
}

OPENAPI_SPEC = {
    "openapi": "3.0.0",
    "info": {"title": "St. Paul Crime API", "version": "1.0.0"},
    "paths": {
        "/health": {
            "get": {
                "summary": "Health check",
                "responses": {"200": {"description": "OK"}}
            }
        },
        "/codes": {
            "get": {
                "summary": "Get crime codes",
                "tags": ["Reference Data"],
                "parameters": [_comma_list("code", "Comma-separated codes, e.g. 110,700")],
                "responses": {
                    "200": {
                        "description": "Codes sorted by code",
                        "content": {
                            "application/json": {
                                "example": [{"code": 110, "type": "Murder, Non Negligent Manslaughter"}]
                            }
                        }
                    },
                    "500": {"description": "Error retrieving codes"}
                }
            }
        },
        "/neighborhoods": {
            "get": {
                "summary": "Get neighborhoods",
                "tags": ["Reference Data"],
                "parameters": [_comma_list("id", "Comma-separated neighborhood numbers, e.g. 3,7")],
                "responses": {
                    "200": {
                        "description": "Neighborhoods sorted by id",
                        "content": {
                            "application/json": {
                                "example": [{"id": 3, "name": "West Side"}]
                            }
                        }
                    },
                    "500": {"description": "Error retrieving neighborhoods"}
                }
            }
        },
        "/incidents": {
            "get": {
                "summary": "Get crime incidents, newest first",
                "tags": ["Incidents"],
                "parameters": [
                    {"name": "start_date", "in": "query", "required": False,
                     "schema": {"type": "string", "format": "date"}},
                    {"name": "end_date", "in": "query", "required": False,
                     "schema": {"type": "string", "format": "date"}},
                    _comma_list("code", "Comma-separated crime codes"),
                    _comma_list("grid", "Comma-separated police grid numbers"),
                    _comma_list("neighborhood", "Comma-separated neighborhood numbers"),
                    {"name": "limit", "in": "query", "required": False,
                     "description": "Maximum rows; invalid or non-positive values mean 1000",
                     "schema": {"type": "integer", "default": 1000}},
                ],
                "responses": {
                    "200": {
                        "description": "Matching incidents",
                        "content": {"application/json": {"example": [INCIDENT_EXAMPLE]}}
                    },
                    "500": {"description": "Error retrieving incidents"}
                }
            }
        },
        "/new-incident": {
            "put": {
                "summary": "Add a crime incident",
                "tags": ["Incidents"],
                "requestBody": {
                    "required": True,
                    "content": {"application/json": {"example": INCIDENT_EXAMPLE}}
                },
                "responses": _text_responses("Incident stored", "Case number already exists")
            }
        },
        "/remove-incident": {
            "delete": {
                "summary": "Remove a crime incident",
                "tags": ["Incidents"],
                "requestBody": {
                    "required": True,
                    "content": {"application/json": {"example": {"case_number": "24000123"}}}
                },
                "responses": _text_responses("Incident removed", "Case number does not exist")
            }
        }
    }
}


def create_swagger_blueprint():
    """Swagger UI blueprint pointed at /swagger.json."""
    return get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config=SWAGGER_CONFIG
    )
