from sink_island.analysis import BoundedFrontierSearch, FlagLedger
from sink_island.analysis.frontier_search import TREE_TOO_LARGE
from sink_island.analysis.heuristics import ALREADY_FLAGGED, SYNTHETIC_BOUNDARY
from sink_island.graph import Edge


def ids(edges):
    return {edge.identifier for edge in edges}


def test_simple_dead_end_is_an_island(network, ledger):
    # A -> B, B has no outgoing edge
    a, b = network.road(1, 2, 3)

    outcome = BoundedFrontierSearch(ledger, tree_size=50).search(a)

    assert not outcome.aborted
    assert ids(outcome.island) == {a.identifier, b.identifier}
    assert ids(outcome.terminal) == {b.identifier}
    assert ledger.snapshot() == {a.identifier, b.identifier}


def test_seed_without_exit_is_a_single_edge_island(network, ledger):
    (a,) = network.road(1, 2)

    outcome = BoundedFrontierSearch(ledger).search(a)

    assert not outcome.aborted
    assert ids(outcome.island) == {a.identifier}
    assert a.identifier in ledger


def test_loop_with_exit_into_large_network_aborts(network, ledger):
    # Cycle A -> B -> C -> A with C -> D leading into 100 more edges
    a, b, c = network.road(1, 2, 3, 1)
    (d,) = network.road(1, 4)
    network.road(*range(4, 105))
    network.road(104, 4)

    outcome = BoundedFrontierSearch(ledger, tree_size=10).search(a)

    assert outcome.aborted
    assert outcome.reason == TREE_TOO_LARGE
    assert outcome.island is None
    # Partially explored region is flagged even without a finding
    assert {a.identifier, b.identifier, c.identifier, d.identifier} <= ledger.snapshot()
    assert len(outcome.explored) <= 10


def test_synthetic_boundary_end_node_aborts(network, ledger):
    network.node(2, synthetic_boundary_node="yes")
    (a,) = network.road(1, 2)

    outcome = BoundedFrontierSearch(ledger).search(a)

    assert outcome.aborted
    assert outcome.reason == SYNTHETIC_BOUNDARY
    assert outcome.visited == 1
    # Seed is always explored, so it is flagged
    assert ledger.snapshot() == {a.identifier}


def test_synthetic_boundary_deeper_in_the_tree_aborts(network, ledger):
    network.node(4, synthetic_boundary_node="existing")
    a, b, c = network.road(1, 2, 3, 4)

    outcome = BoundedFrontierSearch(ledger).search(a)

    assert outcome.aborted
    assert outcome.reason == SYNTHETIC_BOUNDARY
    # c was never confirmed as interior, so it is not flagged
    assert ledger.snapshot() == {a.identifier, b.identifier}


def test_flagged_edge_inside_tree_defers_to_earlier_search(network, ledger):
    a, b, c = network.road(1, 2, 3, 4)
    ledger.mark_flagged(c.identifier)

    outcome = BoundedFrontierSearch(ledger).search(a)

    assert outcome.aborted
    assert outcome.reason == ALREADY_FLAGGED
    assert ids(outcome.explored) == {a.identifier, b.identifier}


def test_terminal_edges_are_not_flagged_on_abort(network, ledger):
    # Seed fans out into a dead end and a long chain
    (seed,) = network.road(1, 2)
    (dead_end,) = network.road(2, 3)
    network.road(2, *range(10, 40))

    outcome = BoundedFrontierSearch(ledger, tree_size=5).search(seed)

    assert outcome.aborted
    assert dead_end in outcome.terminal
    assert dead_end.identifier not in ledger


def test_disconnected_two_way_loop_visits_each_edge_once(network, ledger):
    network.road(1, 2, 3, 1, oneway=False)
    edges = list(network.graph.edges())
    assert len(edges) == 6

    outcome = BoundedFrontierSearch(ledger, tree_size=50).search(edges[0])

    assert not outcome.aborted
    assert ids(outcome.island) == ids(edges)
    assert outcome.visited == len(edges)


def test_two_way_street_has_no_terminal_edges(network, ledger):
    # A two-way street never produces terminal edges: the reverse edge is always an exit
    a, b = network.road(1, 2, 3, oneway=False)

    outcome = BoundedFrontierSearch(ledger).search(a)

    assert not outcome.terminal
    assert not outcome.aborted
    assert len(outcome.island) == 4


def test_bound_respected_with_wide_fan_out(network, ledger):
    (seed,) = network.road(1, 2)
    for leaf in range(100, 120):
        network.road(2, leaf)

    outcome = BoundedFrontierSearch(ledger, tree_size=10).search(seed)

    assert outcome.aborted
    assert outcome.reason == TREE_TOO_LARGE
    max_branching = 20
    assert len(outcome.explored) + outcome.pending <= 10 + max_branching
    assert outcome.visited == 1


def test_bound_is_inclusive(network, ledger):
    # Exactly tree_size edges reachable: still an island
    edges = network.road(*range(1, 12))
    assert len(edges) == 10

    outcome = BoundedFrontierSearch(ledger, tree_size=10).search(edges[0])

    assert not outcome.aborted
    assert ids(outcome.island) == ids(edges)


def test_ineligible_edges_are_invisible(network, ledger):
    (a,) = network.road(1, 2)
    network.road(2, 3, highway="footway")
    network.road(2, 4, route="ferry")
    network.road(2, 5, aeroway="taxiway")

    outcome = BoundedFrontierSearch(ledger).search(a)

    assert not outcome.aborted
    assert ids(outcome.island) == {a.identifier}


def test_inconsistent_adjacency_is_ignored(network, ledger):
    (a,) = network.road(1, 2)
    (elsewhere,) = network.road(7, 8)
    # Corrupt adjacency: node 2 claims an edge that starts at node 7
    a.end.out_edges.append(elsewhere)

    outcome = BoundedFrontierSearch(ledger).search(a)

    assert not outcome.aborted
    assert ids(outcome.island) == {a.identifier}


def test_breadth_first_order_decides_what_gets_flagged(network, ledger):
    # Seed branches into two chains; breadth-first visits alternate between them
    (seed,) = network.road(1, 2)
    left = network.road(2, 10, 11, 12, 13, 14)
    right = network.road(2, 20, 21, 22, 23, 24)

    outcome = BoundedFrontierSearch(ledger, tree_size=6).search(seed)

    assert outcome.aborted
    assert ids(outcome.explored) == {seed.identifier, left[0].identifier, right[0].identifier,
                                     left[1].identifier, right[1].identifier}


def test_outcome_identifiers_are_sorted(network):
    a, b = network.road(1, 2, 3)
    outcome = BoundedFrontierSearch(FlagLedger()).search(a)
    assert outcome.identifiers == sorted([a.identifier, b.identifier])
    assert isinstance(next(iter(outcome.explored)), Edge)
