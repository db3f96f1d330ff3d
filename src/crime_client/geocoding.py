"""
geocoding.py
This code turns place names into map coordinates and back.

The browser never talks to a geocoder directly: it is handed an object with
forward_geocode() and reverse_geocode(), so tests can pass a stub.
NominatimGeocoder is the real implementation (OpenStreetMap Nominatim).
"""
import os
import re
import threading
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import requests

logger = logging.getLogger(__name__)

DEFAULT_CITY = "St. Paul, MN"
NOMINATIM_URL = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org")
USER_AGENT = os.getenv("GEOCODER_USER_AGENT", "stpaul-crime-browser/1.0")

# "98X" or "7XX": a digit followed by X placeholders that hide the house number
_BLOCK_PLACEHOLDER = re.compile(r"(\d)(X+)")


@dataclass(frozen=True)
class Location:
    lat: float
    lng: float


class GeocodingError(Exception):
    """The geocoder could not resolve a query or answered with something unusable."""


class Geocoder(ABC):
    """Interface for geocoding services."""

    @abstractmethod
    def forward_geocode(self, query):
        """Return the Location of a free-text place, or raise GeocodingError."""

    @abstractmethod
    def reverse_geocode(self, location):
        """Return a human-readable label for a Location, or raise GeocodingError."""


def normalize_block_address(block, city=DEFAULT_CITY):
    """
    Turn a block from the crime data into a concrete street address.

    The data hides house numbers behind X placeholders ("98X UNIVERSITY AV W");
    each X following a digit becomes 0, so that block becomes
    "980 UNIVERSITY AV W, St. Paul, MN".
    """
    address = _BLOCK_PLACEHOLDER.sub(lambda m: m.group(1) + "0" * len(m.group(2)), block.strip())
    if city:
        address = f"{address}, {city}"
    return address


class NominatimGeocoder(Geocoder):
    """Geocoder backed by the Nominatim HTTP API."""

    def __init__(self, base_url=None, session=None, timeout=10):
        self.base_url = (base_url or NOMINATIM_URL).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _get(self, path, params):
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.get(
                url,
                params={**params, "format": "json"},
                headers={"User-Agent": USER_AGENT},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()

        except requests.exceptions.HTTPError as httpError:
            error = f"Geocoder answered HTTP {httpError.response.status_code} for {url}"
            logger.error(error)
            raise GeocodingError(error) from httpError

        except requests.exceptions.JSONDecodeError as jsonError:
            error = f"The geocoder response is not valid JSON. \nError: {jsonError}"
            logger.error(error)
            raise GeocodingError(error) from jsonError

        except requests.exceptions.RequestException as requestError:
            error = f"Something went wrong with the connection. \nError: {requestError}"
            logger.error(error)
            raise GeocodingError(error) from requestError

    def forward_geocode(self, query):
        results = self._get("search", {"q": query, "limit": 1})
        if not results:
            raise GeocodingError(f"No location found for {query!r}")
        try:
            return Location(float(results[0]["lat"]), float(results[0]["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingError(f"Unexpected geocoder result for {query!r}") from e

    def reverse_geocode(self, location):
        result = self._get("reverse", {"lat": location.lat, "lon": location.lng})
        if not isinstance(result, dict) or "display_name" not in result:
            error = result.get("error") if isinstance(result, dict) else None
            raise GeocodingError(error or f"No place found at {location.lat}, {location.lng}")
        return result["display_name"]


class Debouncer:
    """
    Collapse rapid successive calls into one call after `delay` seconds of quiet.

    Used for the map-drag label lookup: every move restarts the timer, so the
    geocoder is only asked once the map has settled.
    """

    def __init__(self, delay, func):
        self.delay = delay
        self.func = func
        self._timer = None
        self._lock = threading.Lock()

    def __call__(self, *args, **kwargs):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self._fire, args, kwargs)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self, *args, **kwargs):
        with self._lock:
            # flush(), cancel() or a newer call already took this timer over
            if self._timer is not threading.current_thread():
                return
            self._timer = None
        self.func(*args, **kwargs)

    @property
    def pending(self):
        return self._timer is not None

    def flush(self):
        """Run the pending call now instead of waiting for the timer."""
        with self._lock:
            timer = self._timer
            self._timer = None
        if timer is None:
            return False
        timer.cancel()
        self.func(*timer.args, **timer.kwargs)
        return True

    def cancel(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
