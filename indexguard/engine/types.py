"""Typed data structures used by the indexing eligibility engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class EntityRole(str, Enum):
    """Role of a page in the internal link graph."""

    HUB = "hub"
    LEAF = "leaf"
    EDITORIAL = "editorial"


@dataclass(frozen=True)
class FlightRecord:
    """A single scheduled flight as exposed by the catalog."""

    airline_iata: Optional[str]
    flight_number: str = ""
    origin_iata: str = ""
    destination_iata: str = ""


@dataclass(frozen=True)
class RouteRecord:
    """Origin/destination pair with its aggregate schedule data."""

    origin_iata: str
    destination_iata: str
    destination_city: str = ""
    flights_per_day: str = ""
    has_flight_data: bool = False
    average_duration: Optional[str] = None
    typical_duration: Optional[str] = None
    is_domestic: Optional[bool] = None

    @property
    def key(self) -> str:
        return f"{self.origin_iata.lower()}-{self.destination_iata.lower()}"


@dataclass(frozen=True)
class AirportRecord:
    """Airport summary with departure/arrival activity counters."""

    iata: str
    city: Optional[str] = None
    country: Optional[str] = None
    name: Optional[str] = None
    departure_count: int = 0
    arrival_count: int = 0
    destinations_count: int = 0
    terminals: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class AirlineRecord:
    """Airline catalog entry."""

    code: str
    name: str
    iata: Optional[str] = None
    country: Optional[str] = None


@dataclass(frozen=True)
class BlogRecord:
    slug: str
    title: str


@dataclass(frozen=True)
class PageQualityInput:
    """Raw metrics for a page, built per request from live data."""

    flights_count: int = 0
    airlines_count: int = 0
    poi_count: int = 0
    unique_data_blocks: Optional[int] = None
    schedules_count: int = 0
    weather_data_available: bool = False
    routes_count: int = 0
    terminals_count: int = 0
    distance_available: bool = False
    duration_available: bool = False
    has_route_data: bool = False
    has_airport_data: bool = False


@dataclass(frozen=True)
class PageQualityCheck:
    """Outcome of a quality evaluation.

    ``allowed_sections`` is filled in even when the page is not indexable;
    rendering must be gated on ``indexable``.
    """

    indexable: bool
    quality_score: int
    unique_data_points: List[str]
    missing_data_points: List[str]
    allowed_sections: List[str]
    reason: Optional[str] = None


@dataclass(frozen=True)
class IndexingCheck:
    should_index: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class PublishDecision:
    """Both indexing stages for one page; publishable only if both pass."""

    indexing: IndexingCheck
    quality: PageQualityCheck

    @property
    def publishable(self) -> bool:
        return self.indexing.should_index and self.quality.indexable

    @property
    def reason(self) -> Optional[str]:
        if self.publishable:
            return None
        return self.indexing.reason or self.quality.reason


@dataclass(frozen=True)
class RoleInfo:
    role: EntityRole
    priority: int
    max_internal_links: int
    max_external_links: int
    description: str = ""


@dataclass(frozen=True)
class LinkingStrategy:
    include_routes: bool
    include_airports: bool
    include_airlines: bool
    include_blogs: bool
    max_per_category: int

    def includes(self, category: str) -> bool:
        return bool(getattr(self, f"include_{category}", False))


@dataclass(frozen=True)
class RelatedEntity:
    """Candidate target for an internal link, tagged with its indexability."""

    id: str
    should_index: bool
    entity: Any


@dataclass(frozen=True)
class FormattedLink:
    """A related link ready for rendering."""

    category: str
    url: str
    anchor: str
    entity_id: str


@dataclass(frozen=True)
class IntroValidation:
    is_valid: bool
    referenced_data_points: List[str]


@dataclass(frozen=True)
class UniquenessResult:
    is_unique: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class SitemapEntry:
    loc: str
    priority: float
    page_type: str


@dataclass(frozen=True)
class DuplicatePattern:
    pattern: str
    count: int
    urls: List[str]


@dataclass(frozen=True)
class AuditReport:
    """Aggregated index health for a batch of sampled pages."""

    total_pages: int
    indexable_pages: int
    noindex_pages: int
    indexability_rate: float
    duplicate_patterns: List[DuplicatePattern]
    noindex_reasons: Dict[str, int] = field(default_factory=dict)
    skipped_pages: int = 0
    complete: bool = True

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)
