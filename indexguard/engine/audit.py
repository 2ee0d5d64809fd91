"""Batch index health auditing.

Samples persisted airports and routes, runs both indexing stages over
each one and aggregates the indexability rate and repeated section
layouts. Per-entity work fans out over a bounded thread pool; results
are merged after collection, so ordering never affects the report.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import Counter, defaultdict
from concurrent import futures
from dataclasses import dataclass
from functools import partial
from typing import Callable, Dict, List, Optional

from .catalog import CatalogSource, airport_url, route_url
from .config import EngineConfig, resolve
from .gate import should_index_airport, should_index_route
from .quality import airport_record_input, evaluate_page_quality, route_record_input
from .types import AirportRecord, AuditReport, DuplicatePattern, RouteRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageVerdict:
    """Evaluation outcome for one sampled page."""

    url: str
    page_type: str
    indexable: bool
    pattern: str
    reason: Optional[str] = None


def pattern_key(page_type: str, sections: List[str]) -> str:
    return f"{page_type}:{','.join(sorted(sections))}"


def audit_airport(
    catalog: CatalogSource,
    airport: AirportRecord,
    base_url: str,
    config: EngineConfig,
) -> PageVerdict:
    flights = catalog.fetch_airport_flights(airport.iata)
    indexing = should_index_airport(airport, flights, config.raw)
    quality = evaluate_page_quality(airport_record_input(airport, flights), config.raw)
    return PageVerdict(
        url=f"{base_url}{airport_url(airport.iata)}",
        page_type="airport",
        indexable=indexing.should_index and quality.indexable,
        pattern=pattern_key("airport", quality.allowed_sections),
        reason=indexing.reason or quality.reason,
    )


def audit_route(
    catalog: CatalogSource,
    route: RouteRecord,
    base_url: str,
    config: EngineConfig,
) -> PageVerdict:
    flights = catalog.fetch_route_flights(route.origin_iata, route.destination_iata)
    indexing = should_index_route(flights, route, config.raw)
    quality = evaluate_page_quality(route_record_input(route, flights), config.raw)
    return PageVerdict(
        url=f"{base_url}{route_url(route)}",
        page_type="route",
        indexable=indexing.should_index and quality.indexable,
        pattern=pattern_key("route", quality.allowed_sections),
        reason=indexing.reason or quality.reason,
    )


def summarize(
    verdicts: List[PageVerdict],
    config: EngineConfig,
    skipped: int = 0,
    complete: bool = True,
) -> AuditReport:
    """Aggregate verdicts into an :class:`AuditReport`."""

    settings = config.section("audit")
    min_count = int(settings.get("duplicate_pattern_min", 5))
    url_cap = int(settings.get("pattern_url_cap", 10))

    indexable = sum(1 for verdict in verdicts if verdict.indexable)
    total = len(verdicts)
    noindex_reasons = Counter(verdict.reason or "unknown" for verdict in verdicts if not verdict.indexable)

    groups: Dict[str, List[str]] = defaultdict(list)
    for verdict in verdicts:
        groups[verdict.pattern].append(verdict.url)

    duplicate_patterns = [
        DuplicatePattern(pattern=pattern, count=len(urls), urls=sorted(urls)[:url_cap])
        for pattern, urls in groups.items()
        if len(urls) > min_count
    ]
    duplicate_patterns.sort(key=lambda item: (-item.count, item.pattern))

    rate = indexable / total * 100 if total else 0.0
    return AuditReport(
        total_pages=total,
        indexable_pages=indexable,
        noindex_pages=total - indexable,
        indexability_rate=_round_half_up(rate),
        duplicate_patterns=duplicate_patterns,
        noindex_reasons=dict(noindex_reasons),
        skipped_pages=skipped,
        complete=complete,
    )


def generate_index_health_report(
    catalog: CatalogSource,
    sample_size: Optional[int] = None,
    *,
    config: EngineConfig | None = None,
    base_url: str = "",
    max_workers: Optional[int] = None,
    deadline: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
) -> AuditReport:
    """Audit a sample of airports and routes.

    A failure while fetching one entity's flights skips that entity. When
    ``deadline`` (seconds) elapses or ``cancel_event`` is set, pending work
    is cancelled and the partial report is returned with ``complete=False``.
    """

    engine_config = resolve(config)
    settings = engine_config.section("audit")
    size = int(sample_size if sample_size is not None else settings.get("sample_size", 100))
    workers = int(max_workers or settings.get("max_workers", 8))
    if deadline is None and settings.get("deadline_seconds") is not None:
        deadline = float(settings["deadline_seconds"])
    base = base_url.rstrip("/")

    tasks: Dict[str, Callable[[], PageVerdict]] = {}
    for airport in catalog.fetch_airports_sample(size):
        if not airport.iata:
            continue
        tasks[f"airport:{airport.iata}"] = partial(audit_airport, catalog, airport, base, engine_config)
    for route in catalog.fetch_routes_sample(size, has_flight_data=True):
        if not route.origin_iata or not route.destination_iata:
            continue
        tasks[f"route:{route.key}"] = partial(audit_route, catalog, route, base, engine_config)

    verdicts: List[PageVerdict] = []
    skipped = 0
    complete = True
    started = time.monotonic()

    stop = threading.Event()
    release = getattr(catalog, "close_thread_connections", None)
    pool = futures.ThreadPoolExecutor(max_workers=max(1, workers), thread_name_prefix="index-audit")
    try:
        pending = {
            pool.submit(_guarded(task, cancel_event, stop, release)): label for label, task in tasks.items()
        }
        try:
            for future in futures.as_completed(pending, timeout=deadline):
                if cancel_event is not None and cancel_event.is_set():
                    logger.warning("Index audit cancelled; returning partial report")
                    complete = False
                    break
                label = pending[future]
                try:
                    verdict = future.result()
                except Exception:
                    logger.warning("Skipping %s: evaluation failed", label, exc_info=True)
                    skipped += 1
                    continue
                if verdict is None:
                    skipped += 1
                    continue
                verdicts.append(verdict)
        except futures.TimeoutError:
            logger.warning("Index audit deadline of %ss reached; returning partial report", deadline)
            complete = False
    finally:
        stop.set()
        # Past the deadline, running tasks finish in the background and still release.
        pool.shutdown(wait=complete, cancel_futures=True)

    if not complete:
        skipped = len(tasks) - len(verdicts)

    report = summarize(verdicts, engine_config, skipped=skipped, complete=complete)
    logger.info(
        "Index audit finished: %s pages, %s%% indexable, %s skipped, %.2fs",
        report.total_pages,
        report.indexability_rate,
        report.skipped_pages,
        time.monotonic() - started,
    )
    return report


def quick_health_check(catalog: CatalogSource, *, config: EngineConfig | None = None, **kwargs) -> Dict[str, float]:
    engine_config = resolve(config)
    size = int(engine_config.section("audit").get("quick_sample_size", 50))
    report = generate_index_health_report(catalog, size, config=engine_config, **kwargs)
    return {
        "indexability_rate": report.indexability_rate,
        "duplicate_pattern_count": len(report.duplicate_patterns),
    }


def _round_half_up(rate: float) -> float:
    return math.floor(rate * 100 + 0.5) / 100


def _guarded(
    task: Callable[[], PageVerdict],
    cancel_event: Optional[threading.Event],
    stop: threading.Event,
    release: Optional[Callable[[], None]],
):
    def run() -> Optional[PageVerdict]:
        try:
            if stop.is_set() or (cancel_event is not None and cancel_event.is_set()):
                return None
            return task()
        finally:
            if release is not None:
                release()

    return run
