"""Link budget allocation for related internal links.

Every category follows the same pattern: fetch up to twice the limit,
tag each candidate with its indexability, keep the indexable ones and
truncate to the limit. Secondary categories fail open: a fetch error
drops that category only.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from . import anchors as anchors_module
from .catalog import CatalogSource, airline_url, airport_url, blog_url, route_url
from .config import DEFAULTS, EngineConfig, resolve
from .errors import CapabilityDisabledError
from .roles import ENTITY_ROLES, coerce_role, get_linking_strategy
from .types import (
    AirportRecord,
    EntityRole,
    FlightRecord,
    FormattedLink,
    RelatedEntity,
    RouteRecord,
)

logger = logging.getLogger(__name__)

CATEGORIES = ("routes", "airports", "airlines", "blogs")

LINK_LIMITS: Mapping[str, Mapping[str, int]] = DEFAULTS["link_limits"]

# Blog linking has no backing content store yet.
BLOG_LINKING_ENABLED = False


def get_link_limits_by_role(role: EntityRole | str) -> Dict[str, int]:
    """Per-category caps for a role; disabled categories get zero."""

    strategy = get_linking_strategy(role)
    return {
        category: strategy.max_per_category if strategy.includes(category) else 0
        for category in CATEGORIES
    }


def _airline_codes(flights: Sequence[FlightRecord]) -> List[str]:
    codes: List[str] = []
    for flight in flights:
        if flight.airline_iata and flight.airline_iata not in codes:
            codes.append(flight.airline_iata)
    return codes


def _indexable(candidates: Iterable[RelatedEntity], limit: int) -> List[RelatedEntity]:
    return [candidate for candidate in candidates if candidate.should_index is True][:limit]


def get_related_routes(
    catalog: CatalogSource,
    airport_iata: str,
    limit: int = LINK_LIMITS["airport"]["routes"],
) -> List[RelatedEntity]:
    """Top routes from an airport that carry flight data."""

    routes = catalog.fetch_candidate_routes_from_airport(airport_iata)
    tagged = [
        RelatedEntity(id=route.key, should_index=route.has_flight_data is True, entity=route)
        for route in routes[: limit * 2]
    ]
    return _indexable(tagged, limit)


def get_related_airports(
    route_iatas: Sequence[str],
    exclude_iatas: Sequence[str] = (),
    limit: int = LINK_LIMITS["route"]["airports"],
    cities: Mapping[str, str] | None = None,
) -> List[RelatedEntity]:
    """Airports referenced by routes; a referenced airport is assumed indexable."""

    excluded = {iata.upper() for iata in exclude_iatas}
    unique: List[str] = []
    for iata in route_iatas:
        code = iata.upper()
        if code and code not in excluded and code not in unique:
            unique.append(code)

    city_lookup = cities or {}
    tagged = [
        RelatedEntity(id=code, should_index=True, entity=AirportRecord(iata=code, city=city_lookup.get(code)))
        for code in unique[: limit * 2]
    ]
    return _indexable(tagged, limit)


def get_related_airlines(
    catalog: CatalogSource,
    airline_codes: Sequence[str],
    limit: int = LINK_LIMITS["airline"]["routes"],
) -> List[RelatedEntity]:
    """Airlines from the catalog; codes missing from it are dropped."""

    airlines = catalog.fetch_airline_catalog()
    tagged = []
    for code in airline_codes[: limit * 2]:
        airline = airlines.get(code.lower())
        tagged.append(RelatedEntity(id=code.upper(), should_index=airline is not None, entity=airline))
    return _indexable(tagged, limit)


def get_related_airlines_by_country(
    catalog: CatalogSource,
    country: str,
    exclude_code: str,
    limit: int = 6,
) -> List[RelatedEntity]:
    wanted = (country or "").lower()
    excluded = exclude_code.lower()
    matches = [
        airline
        for airline in catalog.fetch_airline_catalog().values()
        if (airline.country or "").lower() == wanted
        and airline.code.lower() != excluded
        and (airline.iata or airline.code)
    ]
    return [RelatedEntity(id=airline.code.upper(), should_index=True, entity=airline) for airline in matches[:limit]]


def get_airlines_for_route(
    catalog: CatalogSource,
    flights: Sequence[FlightRecord],
    config: EngineConfig | None = None,
) -> List[RelatedEntity]:
    limit = resolve(config).link_limits("route").get("airlines", 4)
    return get_related_airlines(catalog, _airline_codes(flights), limit)


def get_related_blogs(entity_type: str, entity_id: str, limit: int = 3) -> List[RelatedEntity]:
    """Related blog posts for an entity page.

    Always raises :class:`CapabilityDisabledError`: there is no blog
    content store to query, and an empty list would read as "no blogs
    exist". Callers gate on ``BLOG_LINKING_ENABLED`` before calling.
    """

    raise CapabilityDisabledError("blog_linking")


def should_link_route(catalog: CatalogSource, origin: str, destination: str) -> bool:
    route = catalog.fetch_route(origin, destination)
    return route is not None and route.has_flight_data is True


def should_link_airport(iata: str) -> bool:
    return True


def _fail_open(category: str, fetch: Callable[[], List[RelatedEntity]]) -> List[RelatedEntity]:
    try:
        return fetch()
    except Exception:
        logger.warning("Dropping related %s: candidate fetch failed", category, exc_info=True)
        return []


def collect_related_candidates(
    catalog: CatalogSource,
    page_type: str,
    *,
    airport_iata: Optional[str] = None,
    route: Optional[RouteRecord] = None,
    flights: Sequence[FlightRecord] = (),
    config: EngineConfig | None = None,
) -> Dict[str, List[RelatedEntity]]:
    """Fetch raw related candidates for a page, one category at a time."""

    limits = resolve(config).link_limits(page_type)
    collected: Dict[str, List[RelatedEntity]] = {}
    airline_codes = _airline_codes(flights)

    if page_type == "airport" and airport_iata:
        collected["routes"] = _fail_open(
            "routes", lambda: get_related_routes(catalog, airport_iata, limits.get("routes", 0))
        )
        collected["airlines"] = _fail_open(
            "airlines", lambda: get_related_airlines(catalog, airline_codes, limits.get("airlines", 0))
        )
    elif page_type == "route" and route is not None:
        collected["airports"] = _fail_open(
            "airports",
            lambda: get_related_airports(
                [route.origin_iata, route.destination_iata],
                limit=limits.get("airports", 0),
                cities={route.destination_iata.upper(): route.destination_city},
            ),
        )
        collected["airlines"] = _fail_open("airlines", lambda: get_airlines_for_route(catalog, flights, config))
    elif page_type == "airline":
        collected["routes"] = _fail_open(
            "routes", lambda: _routes_from_flights(catalog, flights, limits.get("routes", 0))
        )
        endpoints = [code for flight in flights for code in (flight.origin_iata, flight.destination_iata)]
        collected["airports"] = _fail_open(
            "airports", lambda: get_related_airports(endpoints, limit=limits.get("airports", 0))
        )

    if BLOG_LINKING_ENABLED:
        entity_id = airport_iata or (route.key if route is not None else "")
        collected["blogs"] = _fail_open(
            "blogs", lambda: get_related_blogs(page_type, entity_id, limits.get("blogs", 0))
        )
    else:
        logger.debug("Blog linking disabled; no blog candidates for %s page", page_type)

    return collected


def _routes_from_flights(catalog: CatalogSource, flights: Sequence[FlightRecord], limit: int) -> List[RelatedEntity]:
    pairs: List[tuple[str, str]] = []
    for flight in flights:
        pair = (flight.origin_iata, flight.destination_iata)
        if all(pair) and pair not in pairs:
            pairs.append(pair)

    tagged = []
    for origin, destination in pairs[: limit * 2]:
        record = catalog.fetch_route(origin, destination)
        if record is None:
            continue
        tagged.append(RelatedEntity(id=record.key, should_index=record.has_flight_data is True, entity=record))
    return _indexable(tagged, limit)


def _format_link(category: str, candidate: RelatedEntity, index: int) -> FormattedLink:
    entity: Any = candidate.entity
    if category == "routes":
        anchor = anchors_module.format_route_anchor(entity, index)
        url = route_url(entity)
    elif category == "airports":
        anchor = anchors_module.format_airport_anchor(entity.iata, entity.city, index)
        url = airport_url(entity.iata)
    elif category == "airlines":
        anchor = anchors_module.format_airline_anchor(entity, index)
        url = airline_url(entity.code)
    else:
        anchor = anchors_module.format_blog_anchor(entity, index)
        url = blog_url(entity.slug)
    return FormattedLink(category=category, url=url, anchor=anchor, entity_id=candidate.id)


def build_related_links(
    role: EntityRole | str,
    candidates_by_category: Mapping[str, Sequence[RelatedEntity]],
    page_type: Optional[str] = None,
    config: EngineConfig | None = None,
) -> Dict[str, List[FormattedLink]]:
    """Filter, cap and anchor-vary related links for a page.

    Per-category caps come from the role's strategy, tightened by the page
    type's declared limits when ``page_type`` is given. The result never
    exceeds the page type's ``max_total`` (or the role's internal link
    maximum); categories are filled in ``CATEGORIES`` order.
    """

    strategy = get_linking_strategy(role)
    limits = resolve(config).link_limits(page_type) if page_type else {}
    resolved_role = coerce_role(role)
    if "max_total" in limits:
        remaining = int(limits["max_total"])
    elif resolved_role is not None:
        remaining = ENTITY_ROLES[resolved_role].max_internal_links
    else:
        remaining = 0

    links: Dict[str, List[FormattedLink]] = {}
    for category in CATEGORIES:
        if not strategy.includes(category):
            continue
        cap = strategy.max_per_category
        if page_type:
            cap = min(cap, int(limits.get(category, 0)))

        seen: set[str] = set()
        eligible: List[RelatedEntity] = []
        for candidate in candidates_by_category.get(category, ()):
            if candidate.should_index is not True or candidate.entity is None or candidate.id in seen:
                continue
            seen.add(candidate.id)
            eligible.append(candidate)

        selected = eligible[: max(0, min(cap, remaining))]
        links[category] = [_format_link(category, candidate, index) for index, candidate in enumerate(selected)]
        remaining -= len(selected)

    return links
