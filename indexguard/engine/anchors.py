"""Anchor text variation for related links.

Sibling links on a page rotate through a fixed list of phrasings so that
a hub page does not repeat one anchor pattern across dozens of links.
The variant is picked by the link's position among its siblings.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from .types import AirlineRecord, BlogRecord, RouteRecord

_ROUTE_VARIATIONS: List[Callable[[RouteRecord], str]] = [
    lambda route: f"{route.origin_iata} to {route.destination_iata}",
    lambda route: f"{route.origin_iata}-{route.destination_iata}",
    lambda route: f"{route.origin_iata} → {route.destination_iata}",
    lambda route: f"{route.origin_iata} to {route.destination_iata} ({route.destination_city})",
    lambda route: f"Flights from {route.origin_iata} to {route.destination_iata}",
]

_AIRPORT_VARIATIONS: List[Callable[[str, Optional[str]], str]] = [
    lambda iata, city: f"{city} ({iata})" if city else iata,
    lambda iata, city: f"{city} Airport ({iata})" if city else f"{iata} Airport",
    lambda iata, city: f"{iata} Airport",
    lambda iata, city: city if city else iata,
]


def _airline_code(airline: AirlineRecord) -> str:
    return airline.iata or airline.code or ""


_AIRLINE_VARIATIONS: List[Callable[[AirlineRecord], str]] = [
    lambda airline: f"{airline.name} ({_airline_code(airline)})" if _airline_code(airline) else airline.name,
    lambda airline: airline.name,
    lambda airline: airline.name,
    lambda airline: f"{_airline_code(airline)} - {airline.name}" if _airline_code(airline) else airline.name,
]


def format_route_anchor(route: RouteRecord, index: int = 0) -> str:
    return _ROUTE_VARIATIONS[index % len(_ROUTE_VARIATIONS)](route)


def format_airport_anchor(iata: str, city: Optional[str] = None, index: int = 0) -> str:
    return _AIRPORT_VARIATIONS[index % len(_AIRPORT_VARIATIONS)](iata, city)


def format_airline_anchor(airline: AirlineRecord, index: int = 0) -> str:
    return _AIRLINE_VARIATIONS[index % len(_AIRLINE_VARIATIONS)](airline)


def format_blog_anchor(blog: BlogRecord, index: int = 0) -> str:
    return blog.title
