"""Link budget allocation tests."""

from __future__ import annotations

import logging

import pytest

from indexguard.engine import linking
from indexguard.engine.errors import CapabilityDisabledError
from indexguard.engine.linking import (
    build_related_links,
    collect_related_candidates,
    get_airlines_for_route,
    get_link_limits_by_role,
    get_related_airlines,
    get_related_airlines_by_country,
    get_related_airports,
    get_related_blogs,
    get_related_routes,
    should_link_airport,
    should_link_route,
)
from indexguard.engine.types import AirportRecord, EntityRole, RelatedEntity

from .conftest import FakeCatalog, make_airline, make_candidates, make_flights, make_route


def make_airport_record(code: str) -> AirportRecord:
    return AirportRecord(iata=code, city=None)


def _routes_from(origin: str, count: int, *, with_data_every: int = 1):
    return [
        make_route(origin, f"D{index:02d}", has_flight_data=index % with_data_every == 0)
        for index in range(count)
    ]


def test_limits_by_role():
    assert get_link_limits_by_role(EntityRole.HUB) == {"routes": 6, "airports": 6, "airlines": 6, "blogs": 6}
    assert get_link_limits_by_role("leaf") == {"routes": 0, "airports": 4, "airlines": 4, "blogs": 4}
    assert get_link_limits_by_role("nobody") == {"routes": 0, "airports": 0, "airlines": 0, "blogs": 0}


def test_related_routes_are_indexable_and_capped():
    catalog = FakeCatalog(routes=_routes_from("JFK", 20, with_data_every=2))
    related = get_related_routes(catalog, "JFK")
    assert len(related) <= 6
    assert all(candidate.should_index is True for candidate in related)
    assert all(candidate.entity.has_flight_data is True for candidate in related)


def test_related_routes_only_look_at_twice_the_limit():
    routes = [make_route("JFK", f"N{index}", has_flight_data=False) for index in range(4)]
    routes.append(make_route("JFK", "YES"))
    catalog = FakeCatalog(routes=routes)
    assert get_related_routes(catalog, "JFK", limit=2) == []
    assert [candidate.id for candidate in get_related_routes(catalog, "JFK", limit=3)] == ["jfk-yes"]


def test_related_airports_dedupe_and_exclude():
    related = get_related_airports(["jfk", "LAX", "JFK", "SFO"], exclude_iatas=["sfo"], limit=5)
    assert [candidate.id for candidate in related] == ["JFK", "LAX"]
    assert all(candidate.should_index for candidate in related)


def test_related_airlines_drop_unknown_codes():
    catalog = FakeCatalog(airlines=[make_airline("AA", "American Airlines"), make_airline("DL", "Delta")])
    related = get_related_airlines(catalog, ["AA", "ZZ", "DL"], limit=4)
    assert [candidate.id for candidate in related] == ["AA", "DL"]


def test_airlines_by_country():
    catalog = FakeCatalog(
        airlines=[
            make_airline("AF", "Air France", country="FR"),
            make_airline("TO", "Transavia France", country="fr"),
            make_airline("LH", "Lufthansa", country="DE"),
        ]
    )
    related = get_related_airlines_by_country(catalog, "FR", "af")
    assert [candidate.id for candidate in related] == ["TO"]


def test_airlines_for_route_use_route_cap():
    airlines = [make_airline(code, f"Airline {code}") for code in ("AA", "DL", "B6", "UA", "AS")]
    flights = make_flights(10, airlines=["AA", "DL", "B6", "UA", "AS"])
    related = get_airlines_for_route(FakeCatalog(airlines=airlines), flights)
    assert [candidate.id for candidate in related] == ["AA", "DL", "B6", "UA"]


def test_blog_linking_is_an_explicit_capability():
    with pytest.raises(CapabilityDisabledError) as excinfo:
        get_related_blogs("airport", "JFK")
    assert excinfo.value.capability == "blog_linking"


def test_blog_lookup_raises_even_when_flag_is_on(monkeypatch):
    monkeypatch.setattr(linking, "BLOG_LINKING_ENABLED", True)
    with pytest.raises(CapabilityDisabledError):
        get_related_blogs("route", "jfk-lax")


def test_should_link_helpers():
    catalog = FakeCatalog(routes=[make_route("JFK", "LAX"), make_route("JFK", "BOS", has_flight_data=False)])
    assert should_link_route(catalog, "jfk", "lax") is True
    assert should_link_route(catalog, "JFK", "BOS") is False
    assert should_link_route(catalog, "JFK", "ORD") is False
    assert should_link_airport("ANY") is True


def test_hub_links_are_capped_per_category_and_indexable():
    candidates = {
        "routes": make_candidates("r", 10) + make_candidates("bad", 3, indexable=False),
        "airlines": [
            RelatedEntity(id=f"A{index}", should_index=index % 2 == 0, entity=make_airline(f"A{index}", f"Air {index}"))
            for index in range(20)
        ],
    }
    links = build_related_links(EntityRole.HUB, candidates)
    assert len(links["routes"]) == 6
    assert len(links["airlines"]) == 6
    assert all(link.entity_id.startswith("r-") for link in links["routes"])
    assert [link.entity_id for link in links["airlines"]] == ["A0", "A2", "A4", "A6", "A8", "A10"]
    assert links["airports"] == []


def test_leaf_pages_never_link_routes():
    links = build_related_links("leaf", {"routes": make_candidates("r", 5)})
    assert "routes" not in links


def test_unknown_role_gets_no_links():
    assert build_related_links("orphan", {"routes": make_candidates("r", 5)}) == {}


def test_duplicate_and_empty_candidates_are_dropped():
    route = make_route()
    candidates = {
        "routes": [
            RelatedEntity(id="jfk-lax", should_index=True, entity=route),
            RelatedEntity(id="jfk-lax", should_index=True, entity=route),
            RelatedEntity(id="ghost", should_index=True, entity=None),
        ]
    }
    links = build_related_links(EntityRole.HUB, candidates)
    assert [link.entity_id for link in links["routes"]] == ["jfk-lax"]
    assert links["routes"][0].url == "/flights/jfk-lax"
    assert links["routes"][0].anchor == "JFK to LAX"


def test_sibling_anchors_vary():
    links = build_related_links(EntityRole.HUB, {"routes": make_candidates("r", 3)})
    anchors = [link.anchor for link in links["routes"]]
    assert len(set(anchors)) == 3


def test_page_type_limits_tighten_role_caps():
    airports = [
        RelatedEntity(id=code, should_index=True, entity=make_airport_record(code)) for code in ("BOS", "ORD", "SEA")
    ]
    links = build_related_links(EntityRole.LEAF, {"airports": airports}, page_type="route")
    assert [link.entity_id for link in links["airports"]] == ["BOS", "ORD"]


@pytest.mark.parametrize("page_type", ["airport", "route", "airline", "blog"])
@pytest.mark.parametrize("role", list(EntityRole))
def test_total_never_exceeds_page_type_budget(page_type, role, engine_config):
    airlines = [
        RelatedEntity(id=f"L{index}", should_index=True, entity=make_airline(f"L{index}", f"Line {index}"))
        for index in range(10)
    ]
    airports = [RelatedEntity(id=f"P{index}", should_index=True, entity=make_airport_record(f"P{index:02d}")) for index in range(10)]
    candidates = {"routes": make_candidates("r", 10), "airports": airports, "airlines": airlines}
    links = build_related_links(role, candidates, page_type=page_type, config=engine_config)
    total = sum(len(items) for items in links.values())
    assert total <= engine_config.link_limits(page_type)["max_total"]


def test_max_total_truncates_in_category_order(engine_config):
    engine_config.raw["link_limits"]["airport"]["max_total"] = 8
    airlines = [
        RelatedEntity(id=f"L{index}", should_index=True, entity=make_airline(f"L{index}", f"Line {index}"))
        for index in range(6)
    ]
    links = build_related_links(
        EntityRole.HUB,
        {"routes": make_candidates("r", 6), "airlines": airlines},
        page_type="airport",
        config=engine_config,
    )
    assert len(links["routes"]) == 6
    assert len(links["airlines"]) == 2


def test_collect_airport_candidates_fails_open(caplog):
    catalog = FakeCatalog(routes=_routes_from("JFK", 4), airlines=[make_airline("AA", "American")])
    catalog.fail("fetch_airline_catalog")
    with caplog.at_level(logging.WARNING, logger="indexguard.engine.linking"):
        collected = collect_related_candidates(
            catalog, "airport", airport_iata="JFK", flights=make_flights(3, airlines=["AA"])
        )
    assert collected["airlines"] == []
    assert len(collected["routes"]) == 4
    assert "blogs" not in collected
    assert "Dropping related airlines" in caplog.text


def test_collect_route_candidates():
    route = make_route("JFK", "LAX", city="Los Angeles")
    catalog = FakeCatalog(airlines=[make_airline("AA", "American"), make_airline("DL", "Delta")])
    collected = collect_related_candidates(
        catalog, "route", route=route, flights=make_flights(4, airlines=["AA", "DL"])
    )
    assert [candidate.id for candidate in collected["airports"]] == ["JFK", "LAX"]
    assert collected["airports"][1].entity.city == "Los Angeles"
    assert [candidate.id for candidate in collected["airlines"]] == ["AA", "DL"]


def test_collect_airline_candidates_from_flights():
    catalog = FakeCatalog(routes=[make_route("JFK", "LAX"), make_route("JFK", "SFO", has_flight_data=False)])
    flights = make_flights(2, destination="LAX") + make_flights(2, destination="SFO")
    collected = collect_related_candidates(catalog, "airline", flights=flights)
    assert [candidate.id for candidate in collected["routes"]] == ["jfk-lax"]
    assert [candidate.id for candidate in collected["airports"]] == ["JFK", "LAX", "SFO"]


def test_collect_blogs_when_enabled_fails_open(monkeypatch):
    monkeypatch.setattr(linking, "BLOG_LINKING_ENABLED", True)
    collected = collect_related_candidates(FakeCatalog(), "airport", airport_iata="JFK")
    assert collected["blogs"] == []
