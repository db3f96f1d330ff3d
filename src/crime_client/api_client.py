"""
api_client.py
HTTP client for the crime API, used by the browser controller.

Any network failure or non-success status raises CrimeApiError carrying the
server's plain-text reason, so the caller can show it to the user.
"""
import os
import logging

import requests

logger = logging.getLogger(__name__)

CRIME_API_URL = os.getenv("CRIME_API_URL", "http://localhost:8000")


class CrimeApiError(Exception):
    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _comma_list(values):
    return ",".join(str(value) for value in values)


class CrimeApiClient:
    def __init__(self, base_url=None, session=None, timeout=10):
        self.base_url = (base_url or CRIME_API_URL).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method, path, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response

        except requests.exceptions.HTTPError as httpError:
            code = httpError.response.status_code
            reason = httpError.response.text.strip() or f"HTTP {code}"
            logger.error(f"Error {code} from {method} {url}: {reason}")
            raise CrimeApiError(reason, status_code=code) from httpError

        except requests.exceptions.RequestException as requestError:
            error = f"Something went wrong with the connection. \nError: {requestError}"
            logger.error(error)
            raise CrimeApiError(error) from requestError

    def _get_json(self, path, params=None):
        response = self._request("GET", path, params=params)
        try:
            return response.json()
        except requests.exceptions.JSONDecodeError as jsonError:
            error = f"The JSON data is not valid. \nError: {jsonError}"
            logger.error(error)
            raise CrimeApiError(error, status_code=response.status_code) from jsonError

    def get_codes(self, codes=None):
        params = {"code": _comma_list(codes)} if codes else None
        return self._get_json("/codes", params)

    def get_neighborhoods(self, ids=None):
        params = {"id": _comma_list(ids)} if ids else None
        return self._get_json("/neighborhoods", params)

    def get_incidents(self, filters=None, grids=None):
        """
        Fetch incidents for a FilterSet (or no filters at all).
        Police grids are not part of the browser's filter set, so they are
        passed separately.
        """
        params = filters.to_query_params() if filters is not None else {}
        if grids:
            params["grid"] = _comma_list(grids)
        return self._get_json("/incidents", params)

    def create_incident(self, record):
        """record holds every incident field, with date and time as separate strings."""
        self._request("PUT", "/new-incident", json=record)

    def delete_incident(self, case_number):
        self._request("DELETE", "/remove-incident", json={"case_number": case_number})
