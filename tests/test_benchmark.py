import json

import pytest

from benchmark import PUT, READ, WRITE, BenchmarkRunner, MemoryModel
from cache import Cache
from primitives import Addr, Int
from visualize import plot_evictions, plot_hit_miss_rate, plot_latency_histogram

@pytest.fixture
def cfg():
    return {
        "cache": {"capacity": 8},
        "memory": {"sram_latency_ns": 10, "dram_latency_ns": 100},
        "benchmark": {
            "num_requests": 500,
            "address_space": 32,
            "read_ratio": 0.5,
            "write_ratio": 0.3,
            "access_pattern": "random",
            "random_seed": 7,
        },
    }

class TestMemoryModel:
    def test_miss_then_hit(self):
        mem = MemoryModel(dram_ns=100, sram_ns=10, cache=Cache(2))
        latency, hit, victim = mem.access(READ, Addr(1), Int(0))
        assert (latency, hit, victim) == (0.1, False, None)
        latency, hit, victim = mem.access(READ, Addr(1), Int(0))
        assert (latency, hit, victim) == (0.01, True, None)

    def test_dirty_eviction_costs_writeback(self):
        cache = Cache(1)
        mem = MemoryModel(dram_ns=100, sram_ns=10, cache=cache)
        mem.access(WRITE, Addr(0), Int(1))
        latency, hit, victim = mem.access(PUT, Addr(1), Int(2))
        assert not hit
        assert victim.addr == Addr(0)
        assert latency == pytest.approx(0.2)

    def test_update_is_not_an_eviction(self):
        mem = MemoryModel(cache=Cache(1))
        mem.access(WRITE, Addr(0), Int(1))
        _, hit, victim = mem.access(PUT, Addr(0), Int(2))
        assert hit
        assert victim is None

class TestBenchmarkRunner:
    def test_summary(self, cfg):
        runner = BenchmarkRunner(cfg)
        summary, latencies = runner.run()
        assert summary["total_requests"] == 500 == len(latencies)
        assert summary["hits"] + summary["misses"] == 500
        assert 0.0 <= summary["hit_rate"] <= 1.0
        evictions = summary["evictions_front"] + summary["evictions_back"]
        assert 0 < evictions <= summary["misses"]
        assert summary["writebacks"] <= evictions
        assert 1 <= summary["tree_height"] <= 8
        assert len(runner.cache) == 8

    def test_seeded_runs_repeat(self, cfg):
        first, _ = BenchmarkRunner(cfg).run()
        second, _ = BenchmarkRunner(cfg).run()
        for key in ("hits", "misses", "evictions_front", "evictions_back", "writebacks"):
            assert first[key] == second[key]

    def test_sequential_pattern_never_hits_when_space_exceeds_capacity(self, cfg):
        cfg["benchmark"]["access_pattern"] = "sequential"
        cfg["benchmark"]["address_space"] = 1000
        summary, _ = BenchmarkRunner(cfg).run()
        assert summary["hits"] == 0

    def test_save_results(self, cfg, tmp_path):
        runner = BenchmarkRunner(cfg)
        summary, _ = runner.run()
        path = runner.save_results(summary, {"results_dir": str(tmp_path / "out")})
        with open(path) as f:
            assert json.load(f)["total_requests"] == 500

class TestPlots:
    def test_plots_written(self, cfg, tmp_path):
        summary, latencies = BenchmarkRunner(cfg).run()
        targets = [tmp_path / "a" / "hm.png", tmp_path / "ev.png", tmp_path / "lat.png"]
        plot_hit_miss_rate(summary, str(targets[0]))
        plot_evictions(summary, str(targets[1]))
        plot_latency_histogram(latencies, str(targets[2]))
        for t in targets:
            assert t.exists() and t.stat().st_size > 0

    def test_hit_miss_plot_with_no_requests(self, tmp_path):
        summary = {"hits": 0, "misses": 0, "hit_rate": 0, "total_requests": 0}
        target = tmp_path / "empty.png"
        plot_hit_miss_rate(summary, str(target))
        assert target.exists()
