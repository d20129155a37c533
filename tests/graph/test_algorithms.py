"""Tests for Tarjan SCC and reachability."""

from gosight.graph.algorithms import cyclic_components, reachable, tarjan_scc


class TestTarjanSCC:
    def test_chain_has_singleton_components(self):
        adj = {"a": ["b"], "b": ["c"], "c": []}
        sccs = tarjan_scc(adj, {"a", "b", "c"})
        assert sorted(sorted(c) for c in sccs) == [["a"], ["b"], ["c"]]

    def test_cycle(self):
        adj = {"a": ["b"], "b": ["c"], "c": ["a"]}
        sccs = tarjan_scc(adj, {"a", "b", "c"})
        assert sccs == [{"a", "b", "c"}]

    def test_two_cycles_joined_by_edge(self):
        adj = {"a": ["b"], "b": ["a", "c"], "c": ["d"], "d": ["c"]}
        sccs = tarjan_scc(adj, {"a", "b", "c", "d"})
        assert sorted(sorted(c) for c in sccs) == [["a", "b"], ["c", "d"]]

    def test_edges_outside_node_set_ignored(self):
        adj = {"a": ["x"], "x": ["a"]}
        assert tarjan_scc(adj, {"a"}) == [{"a"}]

    def test_deep_chain_does_not_recurse(self):
        n = 5000
        adj = {f"n{i}": [f"n{i + 1}"] for i in range(n)}
        adj[f"n{n}"] = ["n0"]
        nodes = set(adj)
        sccs = tarjan_scc(adj, nodes)
        assert len(sccs) == 1
        assert sccs[0] == nodes

    def test_empty(self):
        assert tarjan_scc({}, set()) == []

    def test_components_in_reverse_topological_order(self):
        adj = {"a": ["b"], "b": ["c"], "c": ["b"]}
        assert tarjan_scc(adj, {"a", "b", "c"}) == [{"b", "c"}, {"a"}]


class TestCyclicComponents:
    def test_self_edge_is_cyclic(self):
        adj = {"fact": ["fact"], "main": ["fact"]}
        assert cyclic_components(adj, {"fact", "main"}) == [{"fact"}]

    def test_acyclic_singletons_dropped(self):
        adj = {"a": ["b"], "b": []}
        assert cyclic_components(adj, {"a", "b"}) == []

    def test_cycle_and_self_edge(self):
        adj = {"a": ["b"], "b": ["a"], "c": ["c", "a"]}
        found = cyclic_components(adj, {"a", "b", "c"})
        assert sorted(sorted(c) for c in found) == [["a", "b"], ["c"]]

    def test_self_edge_outside_node_set_ignored(self):
        adj = {"a": ["a"]}
        assert cyclic_components(adj, {"b"}) == []


class TestReachable:
    def test_follows_edges(self):
        adj = {"main": ["used"], "used": ["deep"], "deep": [], "unused": []}
        assert reachable(adj, ["main"]) == {"main", "used", "deep"}

    def test_seeds_included(self):
        assert reachable({}, ["lonely"]) == {"lonely"}

    def test_handles_cycles(self):
        adj = {"a": ["b"], "b": ["a"]}
        assert reachable(adj, ["a"]) == {"a", "b"}
