"""
browser.py
Controller of the crime browser: runs user intents against the API and the
geocoder and feeds the results through reduce().

Nothing here patches state optimistically. Mutations are followed by a full
re-fetch of the current filtered list, and a failed call only produces a
notification; the state it would have changed stays as it was.
"""
import logging
import threading

from .api_client import CrimeApiError
from .geocoding import Debouncer, GeocodingError, normalize_block_address
from .markers import clamp_to_bounds
from .state import (
    AppState,
    IncidentPinned,
    IncidentsLoaded,
    MapMoved,
    PinCleared,
    PlaceLabelResolved,
    ReferenceDataLoaded,
    SearchTextChanged,
    SetDateRange,
    SetLimit,
    ToggleCode,
    ToggleNeighborhood,
    reduce,
)

logger = logging.getLogger(__name__)

LABEL_LOOKUP_DELAY = 0.5


class CrimeBrowser:
    """
    Args:
        api: CrimeApiClient (or anything with the same methods)
        geocoder: Geocoder implementation
        notify: callable(message) shown to the user as a blocking alert
        label_delay: seconds the map must be still before its label is looked up
    """

    def __init__(self, api, geocoder, notify, label_delay=LABEL_LOOKUP_DELAY):
        self.api = api
        self.geocoder = geocoder
        self.notify = notify
        self.state = AppState()
        self._listeners = []
        # The debounced label lookup dispatches from a timer thread
        self._dispatch_lock = threading.RLock()
        self._label_lookup = Debouncer(label_delay, self._resolve_map_label)

    def subscribe(self, listener):
        """listener(state) is called after every state change (the re-render hook)."""
        self._listeners.append(listener)

    def dispatch(self, action):
        """
        Apply one action and notify listeners. Dispatches are serialized, so
        listeners see every state in order even when the map-label timer fires
        during a user action.
        """
        with self._dispatch_lock:
            self.state = reduce(self.state, action)
            for listener in self._listeners:
                listener(self.state)
            return self.state

    def _fail(self, message, error):
        logger.error(f"{message}: {error}")
        self.notify(f"{message}: {error}")

    # Data loading

    def load_reference_data(self):
        try:
            codes = self.api.get_codes()
            neighborhoods = self.api.get_neighborhoods()
        except CrimeApiError as e:
            self._fail("Could not load codes and neighborhoods", e.message)
            return False
        self.dispatch(ReferenceDataLoaded(tuple(codes), tuple(neighborhoods)))
        return True

    def _fetch(self, filters):
        try:
            incidents = self.api.get_incidents(filters)
        except CrimeApiError as e:
            self._fail("Could not load incidents", e.message)
            return False
        self.dispatch(IncidentsLoaded(tuple(incidents), filters))
        return True

    def start(self):
        """Initial load: reference lookups, then the unfiltered incident list."""
        loaded = self.load_reference_data()
        return self._fetch(self.state.active_filters) and loaded

    # Filters

    def toggle_code(self, code):
        self.dispatch(ToggleCode(code))

    def toggle_neighborhood(self, neighborhood_number):
        self.dispatch(ToggleNeighborhood(neighborhood_number))

    def set_date_range(self, start_date, end_date):
        self.dispatch(SetDateRange(start_date, end_date))

    def set_limit(self, limit):
        self.dispatch(SetLimit(limit))

    def apply_filters(self):
        """Fetch with the pending filters; they become active only if the fetch succeeds."""
        return self._fetch(self.state.pending_filters)

    def refresh(self):
        return self._fetch(self.state.active_filters)

    # Mutations

    def create_incident(self, record):
        try:
            self.api.create_incident(record)
        except CrimeApiError as e:
            self._fail("Could not add incident", e.message)
            return False
        self.refresh()
        return True

    def delete_incident(self, case_number):
        try:
            self.api.delete_incident(case_number)
        except CrimeApiError as e:
            self._fail("Could not delete incident", e.message)
            return False
        pinned = self.state.map.pinned
        if pinned is not None and pinned.case_number == case_number:
            self.dispatch(PinCleared())
        self.refresh()
        return True

    # Map

    def select_incident(self, incident):
        """Geocode the incident's block and pin it; on failure nothing is pinned."""
        address = normalize_block_address(incident["block"])
        try:
            location = self.geocoder.forward_geocode(address)
        except GeocodingError as e:
            self._fail(f"Could not locate {address}", e)
            return None
        self.dispatch(IncidentPinned(incident["case_number"], location, address))
        return location

    def set_search_text(self, text):
        self.dispatch(SearchTextChanged(text))

    def search(self, query=None):
        """
        Move the map to a searched place and show its label. The search text
        itself is left as the user typed it.
        """
        query = self.state.search_text if query is None else query
        try:
            location = self.geocoder.forward_geocode(query)
            label = self.geocoder.reverse_geocode(location)
        except GeocodingError as e:
            self._fail(f"Could not find {query!r}", e)
            return None
        self._label_lookup.cancel()
        self.dispatch(MapMoved(clamp_to_bounds(location)))
        self.dispatch(PlaceLabelResolved(label))
        return location

    def map_moved(self, center, zoom=None):
        """Record a drag/zoom; the label lookup waits until the map settles."""
        self.dispatch(MapMoved(clamp_to_bounds(center), zoom))
        self._label_lookup()

    def flush_label_lookup(self):
        return self._label_lookup.flush()

    def _resolve_map_label(self):
        try:
            label = self.geocoder.reverse_geocode(self.state.map.center)
        except GeocodingError as e:
            self._fail("Could not look up the map location", e)
            return
        self.dispatch(PlaceLabelResolved(label))
