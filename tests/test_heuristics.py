from sink_island.analysis import EdgeEligibilityFilter, ExclusionHeuristics
from sink_island.analysis.heuristics import (
    ALREADY_FLAGGED,
    EXCLUDED_AMENITY_END_NODE,
    SERVICE_ROAD_PEDESTRIAN_CONNECTION,
    SYNTHETIC_BOUNDARY,
)


PARKING_LOT = [(0.0, 0.0), (0.01, 0.0), (0.01, 0.01), (0.0, 0.01), (0.0, 0.0)]


def test_eligible_road_edges(network):
    (residential,) = network.road(1, 2)
    (track,) = network.road(2, 3, highway="track")
    assert EdgeEligibilityFilter.is_eligible(residential)
    assert EdgeEligibilityFilter().is_eligible(track)


def test_ineligible_edges(network):
    eligibility = EdgeEligibilityFilter()
    (footway,) = network.road(1, 2, highway="footway")
    (runway,) = network.road(2, 3, aeroway="runway")
    (ferry,) = network.road(3, 4, route="ferry")
    (area,) = network.road(4, 5, area="yes")
    (unknown,) = network.road(5, 6, highway="not_a_highway")
    for edge in (footway, runway, ferry, area, unknown):
        assert not eligibility(edge)
    assert not eligibility.is_eligible(None)


def test_clean_edge_does_not_abort(network, ledger):
    (edge,) = network.road(1, 2)
    assert ExclusionHeuristics(ledger).abort_reason(edge) is None


def test_flagged_edge_aborts(network, ledger):
    (edge,) = network.road(1, 2)
    ledger.mark_flagged(edge.identifier)
    heuristics = ExclusionHeuristics(ledger)
    assert heuristics.should_abort_on(edge)
    assert heuristics.abort_reason(edge) == ALREADY_FLAGGED


def test_service_road_into_parking_aborts(network, ledger):
    network.node(2, amenity="parking_entrance")
    (driveway,) = network.road(1, 2, highway="service", service="driveway")
    assert ExclusionHeuristics(ledger).abort_reason(driveway) == EXCLUDED_AMENITY_END_NODE


def test_service_road_without_subtype_into_parking_continues(network, ledger):
    network.node(2, amenity="parking")
    (service,) = network.road(1, 2, highway="service")
    assert ExclusionHeuristics(ledger).abort_reason(service) is None


def test_residential_road_into_parking_continues(network, ledger):
    network.node(2, amenity="motorcycle_parking")
    (street,) = network.road(1, 2)
    assert ExclusionHeuristics(ledger).abort_reason(street) is None


def test_boundary_start_node_aborts(network, ledger):
    network.node(1, synthetic_boundary_node="yes")
    (edge,) = network.road(1, 2)
    assert ExclusionHeuristics(ledger).abort_reason(edge) == SYNTHETIC_BOUNDARY


def test_service_road_next_to_footway_aborts(network, ledger):
    (driveway,) = network.road(1, 2, highway="service", service="driveway")
    network.road(2, 3, highway="footway")
    heuristics = ExclusionHeuristics(ledger)
    assert heuristics.is_connected_to_pedestrian_navigable_highway(driveway)
    assert heuristics.abort_reason(driveway) == SERVICE_ROAD_PEDESTRIAN_CONNECTION


def test_residential_road_next_to_footway_continues(network, ledger):
    (street,) = network.road(1, 2)
    network.road(3, 1, highway="steps")
    assert ExclusionHeuristics(ledger).abort_reason(street) is None


def test_service_road_inside_parking_area(network):
    network.node(1, lon=0.002, lat=0.002)
    network.node(2, lon=0.008, lat=0.008)
    (aisle,) = network.road(1, 2, highway="service", service="parking_aisle")
    network.area(900, PARKING_LOT, amenity="parking")
    assert ExclusionHeuristics.is_within_excluded_amenity_area(aisle, network.graph)


def test_service_road_leaving_parking_area(network):
    network.node(1, lon=0.002, lat=0.002)
    network.node(2, lon=0.05, lat=0.05)
    (aisle,) = network.road(1, 2, highway="service", service="parking_aisle")
    network.area(900, PARKING_LOT, amenity="parking")
    assert not ExclusionHeuristics.is_within_excluded_amenity_area(aisle, network.graph)


def test_road_inside_other_amenity_area_is_not_excluded(network):
    network.node(1, lon=0.002, lat=0.002)
    network.node(2, lon=0.008, lat=0.008)
    (aisle,) = network.road(1, 2, highway="service", service="drive-through")
    network.area(901, PARKING_LOT, amenity="fast_food")
    assert not ExclusionHeuristics.is_within_excluded_amenity_area(aisle, network.graph)
