"""Entity roles: linking depth and sitemap priority per page type."""

from __future__ import annotations

from typing import Dict, Optional

from .types import EntityRole, LinkingStrategy, RoleInfo

ENTITY_ROLES: Dict[EntityRole, RoleInfo] = {
    EntityRole.HUB: RoleInfo(
        role=EntityRole.HUB,
        priority=100,
        max_internal_links=15,
        max_external_links=5,
        description="Authority hubs (airports, airlines)",
    ),
    EntityRole.LEAF: RoleInfo(
        role=EntityRole.LEAF,
        priority=50,
        max_internal_links=8,
        max_external_links=2,
        description="Route pages",
    ),
    EntityRole.EDITORIAL: RoleInfo(
        role=EntityRole.EDITORIAL,
        priority=75,
        max_internal_links=10,
        max_external_links=3,
        description="Editorial content (blogs)",
    ),
}

_PAGE_TYPE_ROLES = {
    "airport": EntityRole.HUB,
    "airline": EntityRole.HUB,
    "route": EntityRole.LEAF,
    "blog": EntityRole.EDITORIAL,
}

# Path-level page types mapped onto the entity page types above.
_PATH_ENTITY_TYPES = {
    "flight_route": "route",
    "airline_route": "route",
    "airport": "airport",
    "airline": "airline",
    "blog": "blog",
}

_STRATEGIES = {
    EntityRole.HUB: LinkingStrategy(True, True, True, True, max_per_category=6),
    EntityRole.LEAF: LinkingStrategy(False, True, True, True, max_per_category=4),
    EntityRole.EDITORIAL: LinkingStrategy(True, True, True, True, max_per_category=3),
}
_NO_LINKS = LinkingStrategy(False, False, False, False, max_per_category=0)


def coerce_role(role: EntityRole | str) -> Optional[EntityRole]:
    try:
        return EntityRole(role)
    except ValueError:
        return None


def get_entity_role(page_type: str) -> EntityRole:
    """Return the role for a page type; unknown types are leaves."""

    return _PAGE_TYPE_ROLES.get(page_type, EntityRole.LEAF)


def get_role_info(page_type: str) -> RoleInfo:
    return ENTITY_ROLES[get_entity_role(page_type)]


def _info_for_role(role: EntityRole | str) -> RoleInfo:
    # Unknown roles get the leaf limits, the most restrictive defined role.
    return ENTITY_ROLES[coerce_role(role) or EntityRole.LEAF]


def get_max_internal_links(role: EntityRole | str) -> int:
    return _info_for_role(role).max_internal_links


def get_max_external_links(role: EntityRole | str) -> int:
    return _info_for_role(role).max_external_links


def should_include_in_sitemap(role: EntityRole | str, should_index: bool, quality_score: int = 0) -> bool:
    """Return whether an indexable page belongs in the sitemap."""

    if not should_index:
        return False
    resolved = coerce_role(role)
    if resolved in (EntityRole.HUB, EntityRole.EDITORIAL):
        return True
    if resolved is EntityRole.LEAF:
        return quality_score >= 3
    return False


def get_sitemap_priority(role: EntityRole | str, quality_score: int = 0) -> float:
    """Return a sitemap priority in [0.0, 1.0].

    Leaves get a quality boost capped at 0.2; other roles use their base.
    Unknown roles are priced as leaves.
    """

    info = _info_for_role(role)
    base = info.priority / 100
    if info.role is EntityRole.LEAF:
        return min(base + min(quality_score / 10, 0.2), 1.0)
    return base


def get_linking_strategy(role: EntityRole | str) -> LinkingStrategy:
    """Return which link categories a role may carry and how many of each."""

    resolved = coerce_role(role)
    if resolved is None:
        return _NO_LINKS
    return _STRATEGIES[resolved]


def get_page_type(pathname: str) -> str:
    """Classify a site path into a page type."""

    if pathname == "/":
        return "home"
    if pathname.startswith("/flights/") and "-" in pathname:
        return "flight_route"
    if pathname.startswith("/airports/"):
        return "airport"
    if pathname.startswith("/airlines/"):
        depth = len(pathname.rstrip("/").split("/"))
        if depth == 3:
            return "airline"
        if depth == 4:
            return "airline_route"
    if pathname.startswith("/blog/"):
        return "blog"
    return "other"


def get_role_for_path(pathname: str) -> EntityRole:
    page_type = get_page_type(pathname)
    return get_entity_role(_PATH_ENTITY_TYPES.get(page_type, page_type))
