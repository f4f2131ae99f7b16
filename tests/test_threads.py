import random
from concurrent.futures import ThreadPoolExecutor

from dndbot.freq_graph import FreqGraph
from dndbot.roll_parser import analyze, calculate, parse

TWO_D6 = [1, 2, 3, 4, 5, 6, 5, 4, 3, 2, 1]


def test_calculate_from_many_threads():
    def worker(seed):
        rng = random.Random(seed)
        return [calculate("2d6 + 3", rng) for _ in range(200)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(worker, range(16)))

    assert len(results) == 16
    for rolls in results:
        assert all(5 <= r <= 15 for r in rolls)


def test_seeded_threads_match_serial_rolls():
    def worker(seed):
        rng = random.Random(seed)
        return [calculate("d4d6 - 1", rng) for _ in range(50)]

    with ThreadPoolExecutor(max_workers=4) as pool:
        threaded = list(pool.map(worker, range(8)))

    assert threaded == [worker(seed) for seed in range(8)]


def test_analyze_from_many_threads():
    with ThreadPoolExecutor(max_workers=8) as pool:
        graphs = list(pool.map(analyze, ["2d6"] * 32))

    assert all(graph == FreqGraph(2, TWO_D6) for graph in graphs)


def test_shared_tree_from_many_threads():
    expr = parse("3d6")

    with ThreadPoolExecutor(max_workers=8) as pool:
        rolls = list(pool.map(lambda _: expr.roll(), range(400)))
        graphs = list(pool.map(lambda _: expr.freq_graph(), range(8)))

    assert all(3 <= r <= 18 for r in rolls)
    assert all(graph.total_weight == 216 for graph in graphs)
