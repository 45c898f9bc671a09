# benchmark.py
import os
import json
import time
import logging
import numpy as np
from cache import Cache
from primitives import Addr, Int

logger = logging.getLogger(__name__)

READ, PUT, WRITE = "R", "U", "W"

class MemoryModel:
    def __init__(self, dram_ns=100, sram_ns=10, cache: Cache = None):
        self.dram_ns = dram_ns
        self.sram_ns = sram_ns
        self.cache = cache

    def access(self, op, addr, data):
        """
        Apply one request to the cache and price it.
        Resident address -> SRAM latency, otherwise DRAM latency. Evicting an
        out-of-sync line adds a DRAM write-back.
        Returns (latency in microseconds, hit, evicted entry or None).
        """
        hit = addr in self.cache
        latency_ns = self.sram_ns if hit else self.dram_ns
        if op == READ:
            # a read miss fills the line with the supplied default
            displaced = None if hit else self.cache.put(addr, data)
        else:
            store = self.cache.write if op == WRITE else self.cache.put
            displaced = store(addr, data)
        # on a hit the displaced entry is the old copy of the same line
        victim = None if hit else displaced
        if victim is not None and not victim.in_sync:
            latency_ns += self.dram_ns
        return latency_ns / 1000.0, hit, victim

class BenchmarkRunner:
    def __init__(self, cfg):
        self.cfg = cfg
        bench_cfg = cfg.get("benchmark", {})
        self.rng = np.random.default_rng(bench_cfg.get("random_seed", None))
        self.cache = Cache(cfg.get("cache", {}).get("capacity", 64))
        mem_cfg = cfg.get("memory", {})
        self.mem = MemoryModel(
            dram_ns=mem_cfg.get("dram_latency_ns", 100),
            sram_ns=mem_cfg.get("sram_latency_ns", 10),
            cache=self.cache
        )
        self.address_space = max(1, bench_cfg.get("address_space", 256))
        self.num_requests = bench_cfg.get("num_requests", 10000)
        self.read_ratio = bench_cfg.get("read_ratio", 0.6)
        self.write_ratio = bench_cfg.get("write_ratio", 0.2)
        self.access_pattern = bench_cfg.get("access_pattern", "mixed")
        self._seq_ptr = 0
        self.latencies = []
        self.hits = 0
        self.misses = 0
        self.evictions_front = 0
        self.evictions_back = 0
        self.writebacks = 0

    def _generate_address(self):
        if self.access_pattern == "sequential":
            return self._next_sequential()
        elif self.access_pattern == "random":
            return int(self.rng.integers(0, self.address_space))
        else:  # mixed: mostly sequential with some random
            if self.rng.random() < 0.8:
                return self._next_sequential()
            return int(self.rng.integers(0, self.address_space))

    def _next_sequential(self):
        addr = self._seq_ptr
        self._seq_ptr = (addr + 1) % self.address_space
        return addr

    def _generate_op(self):
        roll = self.rng.random()
        if roll < self.read_ratio:
            return READ
        if roll < self.read_ratio + self.write_ratio:
            return WRITE
        return PUT

    def run(self):
        start = time.time()
        for _ in range(self.num_requests):
            addr = Addr(self._generate_address())
            op = self._generate_op()
            data = Int(int(self.rng.integers(-1000, 1000)))
            latency_us, hit, victim = self.mem.access(op, addr, data)
            self.latencies.append(latency_us)
            if hit:
                self.hits += 1
            else:
                self.misses += 1
            if victim is not None:
                if addr.is_even:
                    self.evictions_front += 1
                else:
                    self.evictions_back += 1
                if not victim.in_sync:
                    self.writebacks += 1
        end = time.time()

        total = len(self.latencies)
        avg_latency = float(np.mean(self.latencies)) if total else 0
        throughput = total / (end - start) if (end - start) > 0 else 0
        hit_rate = (self.hits / (self.hits + self.misses)) if (self.hits + self.misses) else 0

        summary = {
            "total_requests": total,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": hit_rate,
            "evictions_front": self.evictions_front,
            "evictions_back": self.evictions_back,
            "writebacks": self.writebacks,
            "avg_latency_us": avg_latency,
            "throughput_ops_per_sec": throughput,
            "tree_height": self.cache.height(),
            "duration_s": end - start
        }
        logger.info("benchmark finished: %d requests, hit rate %.3f", total, hit_rate)
        return summary, self.latencies

    def save_results(self, summary, out_cfg):
        results_dir = out_cfg.get("results_dir", "results")
        os.makedirs(results_dir, exist_ok=True)
        path = os.path.join(results_dir, "summary.json")
        with open(path, "w") as f:
            json.dump(summary, f, indent=2)
        return path
