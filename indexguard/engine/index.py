"""Coordinator exposing the engine's in-process contracts to the page layer."""

from __future__ import annotations

import threading
from typing import Any, Dict, List, Mapping, Optional, Sequence

from . import audit as audit_module
from . import duplicates as duplicates_module
from . import gate as gate_module
from . import linking as linking_module
from . import quality as quality_module
from .catalog import CatalogSource
from .config import EngineConfig, resolve
from .roles import get_linking_strategy
from .types import (
    AuditReport,
    EntityRole,
    FormattedLink,
    IndexingCheck,
    LinkingStrategy,
    PageQualityCheck,
    PageQualityInput,
    PublishDecision,
    RelatedEntity,
)


def evaluate_quality(data: PageQualityInput, config: EngineConfig | None = None) -> PageQualityCheck:
    return quality_module.evaluate_page_quality(data, resolve(config).raw)


def check_indexing_eligibility(
    page_type: str,
    payload: Mapping[str, Any],
    config: EngineConfig | None = None,
) -> IndexingCheck:
    return gate_module.check_indexing_eligibility(page_type, payload, resolve(config).raw)


def evaluate_page(
    page_type: str,
    payload: Mapping[str, Any],
    data: PageQualityInput,
    config: EngineConfig | None = None,
) -> PublishDecision:
    """Run the activity gate and the quality evaluator side by side.

    Neither stage is derived from the other; a page is publishable only
    when both pass.
    """

    engine_config = resolve(config)
    return PublishDecision(
        indexing=check_indexing_eligibility(page_type, payload, engine_config),
        quality=evaluate_quality(data, engine_config),
    )


def get_link_budget(role: EntityRole | str) -> LinkingStrategy:
    return get_linking_strategy(role)


def build_related_links(
    role: EntityRole | str,
    candidates_by_category: Mapping[str, Sequence[RelatedEntity]],
    page_type: Optional[str] = None,
    config: EngineConfig | None = None,
) -> Dict[str, List[FormattedLink]]:
    return linking_module.build_related_links(role, candidates_by_category, page_type, config)


def check_duplicate(
    page_type: str,
    text: str,
    store: Optional[duplicates_module.ContentHashStore] = None,
) -> bool:
    return duplicates_module.check_duplicate(page_type, text, store)


def run_audit(
    catalog: CatalogSource,
    sample_size: Optional[int] = None,
    *,
    config: EngineConfig | None = None,
    base_url: str = "",
    max_workers: Optional[int] = None,
    deadline: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
) -> AuditReport:
    return audit_module.generate_index_health_report(
        catalog,
        sample_size,
        config=config,
        base_url=base_url,
        max_workers=max_workers,
        deadline=deadline,
        cancel_event=cancel_event,
    )
