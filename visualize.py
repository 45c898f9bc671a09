# visualize.py
import os
import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

def _ensure_parent(outpath):
    parent = os.path.dirname(outpath)
    if parent:
        os.makedirs(parent, exist_ok=True)

def plot_hit_miss_rate(summary, outpath):
    _ensure_parent(outpath)
    hits, misses = summary["hits"], summary["misses"]
    plt.figure(figsize=(5,4))
    if hits + misses:
        plt.pie([hits, misses], labels=[f"Hit ({hits})", f"Miss ({misses})"],
                autopct='%1.1f%%', colors=['tab:green', 'tab:gray'])
    title = f"Hit rate {summary['hit_rate']:.1%} over {summary['total_requests']} requests"
    plt.title(title)
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()

def plot_evictions(summary, outpath):
    # front = evicted for even incoming addresses, back = for odd ones
    _ensure_parent(outpath)
    plt.figure(figsize=(6,4))
    labels = ['Front (even)', 'Back (odd)', 'Write-backs']
    counts = [summary["evictions_front"], summary["evictions_back"], summary["writebacks"]]
    plt.bar(labels, counts, color=['tab:blue', 'tab:orange', 'tab:red'])
    plt.title(f"Evictions (tree height: {summary['tree_height']})")
    plt.ylabel("Count")
    plt.grid(True, axis='y')
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()

def plot_latency_histogram(latencies, outpath):
    _ensure_parent(outpath)
    values, counts = np.unique(np.asarray(latencies, dtype=float), return_counts=True)
    plt.figure(figsize=(6,4))
    plt.bar([f"{v:g}" for v in values], counts)
    plt.title("Request Latency")
    plt.xlabel("Latency (us)")
    plt.ylabel("Requests")
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()
