"""
Application state of the crime browser and the actions that change it.

State is immutable. The only way to get a new state is reduce(state, action),
so every change follows one path: action -> new state -> re-render.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Optional, Tuple

from .geocoding import Location
from .markers import (
    DEFAULT_CENTER,
    DEFAULT_ZOOM,
    count_by_neighborhood,
    marker_radii,
)

DEFAULT_LIMIT = 1000


def _clamp_limit(limit):
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        return DEFAULT_LIMIT
    return limit if limit > 0 else DEFAULT_LIMIT


def _toggle(members, item):
    return members - {item} if item in members else members | {item}


@dataclass(frozen=True)
class FilterSet:
    """Date range, codes, neighborhoods and result cap for the incident query."""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    codes: FrozenSet[int] = frozenset()
    neighborhoods: FrozenSet[int] = frozenset()
    limit: int = DEFAULT_LIMIT

    def to_query_params(self):
        """Query parameters for GET /incidents; unset filters are left out."""
        params = {"limit": self.limit}
        if self.start_date:
            params["start_date"] = self.start_date
        if self.end_date:
            params["end_date"] = self.end_date
        if self.codes:
            params["code"] = ",".join(str(code) for code in sorted(self.codes))
        if self.neighborhoods:
            params["neighborhood"] = ",".join(str(n) for n in sorted(self.neighborhoods))
        return params


@dataclass(frozen=True)
class PinnedIncident:
    case_number: str
    location: Location
    address: str


@dataclass(frozen=True)
class MapView:
    center: Location = DEFAULT_CENTER
    zoom: int = DEFAULT_ZOOM
    # Label of what the map currently shows; never copied into the search box
    place_label: str = ""
    marker_radii: Dict[int, float] = field(default_factory=dict)
    neighborhood_counts: Dict[int, int] = field(default_factory=dict)
    pinned: Optional[PinnedIncident] = None


@dataclass(frozen=True)
class AppState:
    # Filters being edited; they only reach the query through IncidentsLoaded
    pending_filters: FilterSet = FilterSet()
    active_filters: FilterSet = FilterSet()
    incidents: Tuple[dict, ...] = ()
    code_labels: Dict[int, str] = field(default_factory=dict)
    neighborhood_names: Dict[int, str] = field(default_factory=dict)
    # What the user typed in the location search
    search_text: str = ""
    map: MapView = MapView()

    def code_label(self, code):
        return self.code_labels.get(code, str(code))

    def neighborhood_name(self, number):
        return self.neighborhood_names.get(number, str(number))

    def incident_rows(self):
        """Incidents with their code label and neighborhood name resolved for the table."""
        return [
            {
                **incident,
                "type": self.code_label(incident["code"]),
                "neighborhood_name": self.neighborhood_name(incident["neighborhood_number"]),
            }
            for incident in self.incidents
        ]


# Actions

@dataclass(frozen=True)
class ToggleCode:
    code: int


@dataclass(frozen=True)
class ToggleNeighborhood:
    neighborhood_number: int


@dataclass(frozen=True)
class SetDateRange:
    start_date: Optional[str]
    end_date: Optional[str]


@dataclass(frozen=True)
class SetLimit:
    limit: object


@dataclass(frozen=True)
class ReferenceDataLoaded:
    codes: Tuple[dict, ...]
    neighborhoods: Tuple[dict, ...]


@dataclass(frozen=True)
class IncidentsLoaded:
    """A fetch succeeded: `filters` produced `incidents`."""
    incidents: Tuple[dict, ...]
    filters: FilterSet


@dataclass(frozen=True)
class SearchTextChanged:
    text: str


@dataclass(frozen=True)
class MapMoved:
    center: Location
    zoom: Optional[int] = None


@dataclass(frozen=True)
class PlaceLabelResolved:
    label: str


@dataclass(frozen=True)
class IncidentPinned:
    case_number: str
    location: Location
    address: str


@dataclass(frozen=True)
class PinCleared:
    pass


def reduce(state, action):
    """Return the state that results from applying action to state."""
    if isinstance(action, ToggleCode):
        filters = state.pending_filters
        return replace(state, pending_filters=replace(filters, codes=_toggle(filters.codes, action.code)))

    if isinstance(action, ToggleNeighborhood):
        filters = state.pending_filters
        neighborhoods = _toggle(filters.neighborhoods, action.neighborhood_number)
        return replace(state, pending_filters=replace(filters, neighborhoods=neighborhoods))

    if isinstance(action, SetDateRange):
        filters = replace(state.pending_filters, start_date=action.start_date or None,
                          end_date=action.end_date or None)
        return replace(state, pending_filters=filters)

    if isinstance(action, SetLimit):
        return replace(state, pending_filters=replace(state.pending_filters, limit=_clamp_limit(action.limit)))

    if isinstance(action, ReferenceDataLoaded):
        return replace(
            state,
            code_labels={row["code"]: row["type"] for row in action.codes},
            neighborhood_names={row["id"]: row["name"] for row in action.neighborhoods},
        )

    if isinstance(action, IncidentsLoaded):
        counts = count_by_neighborhood(action.incidents)
        map_view = replace(state.map, neighborhood_counts=counts, marker_radii=marker_radii(counts))
        return replace(state, incidents=tuple(action.incidents), active_filters=action.filters, map=map_view)

    if isinstance(action, SearchTextChanged):
        return replace(state, search_text=action.text)

    if isinstance(action, MapMoved):
        zoom = state.map.zoom if action.zoom is None else action.zoom
        return replace(state, map=replace(state.map, center=action.center, zoom=zoom))

    if isinstance(action, PlaceLabelResolved):
        return replace(state, map=replace(state.map, place_label=action.label))

    if isinstance(action, IncidentPinned):
        pinned = PinnedIncident(action.case_number, action.location, action.address)
        return replace(state, map=replace(state.map, pinned=pinned, center=action.location))

    if isinstance(action, PinCleared):
        return replace(state, map=replace(state.map, pinned=None))

    raise TypeError(f"Unknown action: {action!r}")
