"""Sitemap entry selection driven by entity roles and page quality."""

from __future__ import annotations

import logging
from typing import List

from .catalog import CatalogSource, airport_url, route_url
from .config import EngineConfig, resolve
from .gate import should_index_airport, should_index_route
from .quality import airport_record_input, evaluate_page_quality, route_record_input
from .roles import get_entity_role, get_sitemap_priority, should_include_in_sitemap
from .types import SitemapEntry

logger = logging.getLogger(__name__)

# Protocol upper bound for URLs in one sitemap file.
MAX_SITEMAP_URLS = 50000


def build_sitemap_entries(
    catalog: CatalogSource,
    base_url: str,
    config: EngineConfig | None = None,
    limit: int = MAX_SITEMAP_URLS,
) -> List[SitemapEntry]:
    """Return sitemap entries for airports and routes that pass both stages.

    An entity whose flights cannot be fetched is logged and left out.
    """

    engine_config = resolve(config)
    base = base_url.rstrip("/")
    entries: List[SitemapEntry] = []

    airport_role = get_entity_role("airport")
    for airport in catalog.fetch_airports_sample(limit):
        try:
            flights = catalog.fetch_airport_flights(airport.iata)
            indexing = should_index_airport(airport, flights, engine_config.raw)
            quality = evaluate_page_quality(airport_record_input(airport, flights), engine_config.raw)
        except Exception:
            logger.warning("Leaving airport:%s out of the sitemap: evaluation failed", airport.iata, exc_info=True)
            continue
        indexable = indexing.should_index and quality.indexable
        if should_include_in_sitemap(airport_role, indexable, quality.quality_score):
            entries.append(
                SitemapEntry(
                    loc=f"{base}{airport_url(airport.iata)}",
                    priority=round(get_sitemap_priority(airport_role, quality.quality_score), 1),
                    page_type="airport",
                )
            )

    route_role = get_entity_role("route")
    for route in catalog.fetch_routes_sample(limit, has_flight_data=True):
        try:
            flights = catalog.fetch_route_flights(route.origin_iata, route.destination_iata)
            indexing = should_index_route(flights, route, engine_config.raw)
            quality = evaluate_page_quality(route_record_input(route, flights), engine_config.raw)
        except Exception:
            logger.warning("Leaving route:%s out of the sitemap: evaluation failed", route.key, exc_info=True)
            continue
        indexable = indexing.should_index and quality.indexable
        if should_include_in_sitemap(route_role, indexable, quality.quality_score):
            entries.append(
                SitemapEntry(
                    loc=f"{base}{route_url(route)}",
                    priority=round(get_sitemap_priority(route_role, quality.quality_score), 1),
                    page_type="route",
                )
            )

    return entries[:limit]
