import pytest

from netsci.community.stability import analyze_stability, compare_partitions


def test_stability_runs(karate_graph):
    """Seeded reruns report qualities, agreement and the best partition."""
    results = analyze_stability(karate_graph, n_iterations=3, base_seed=10)

    assert len(results["qualities"]) == 3
    assert results["best_seed"] in (10, 11, 12)
    assert results["best_quality"] == max(results["qualities"])
    assert -1.0 <= results["mean_ari"] <= 1.0
    assert results["mean_quality"] == pytest.approx(sum(results["qualities"]) / 3)

    members = [v for c in results["best_communities"] for v in c]
    assert sorted(members) == sorted(karate_graph.nodes())


def test_single_run_is_fully_stable(karate_graph):
    results = analyze_stability(karate_graph, "goldberg", n_iterations=1)

    assert results["mean_ari"] == 1.0
    assert results["best_seed"] == 0


def test_stability_requires_a_run(karate_graph):
    with pytest.raises(ValueError):
        analyze_stability(karate_graph, n_iterations=0)


def test_compare_partitions():
    nodes = ["a", "b", "c", "d"]
    same = compare_partitions([{"a", "b"}, {"c", "d"}], [{"d", "c"}, {"b", "a"}], nodes)

    assert same["ari"] == pytest.approx(1.0)
    assert same["nmi"] == pytest.approx(1.0)

    different = compare_partitions([{"a", "b"}, {"c", "d"}], [{"a", "c"}, {"b", "d"}], nodes)
    assert different["ari"] < 1.0
