#!/usr/bin/env python3
"""
Centrality report for the bundled movie co-occurrence network.

    - Builds the graph (movie_network.py)
    - Computes degree / betweenness / closeness (centrality.py)
    - Prints connectivity + top-k rankings
    - Optionally exports a CSV table and a bar plot

Run with:
    python report.py --top 5 --out-csv centrality.csv --out-plot betweenness.png
"""

import argparse
import csv
import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from centrality import compute_all, compute_connectivity
from graph_store import GraphError, WeightedGraph
from movie_network import load_movie_network


logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# PARAMETERS
# ------------------------------------------------------------------

DEFAULT_TOP_K = 5
METRICS = ("degree", "betweenness", "closeness")
PLOT_DPI = 200


# ------------------------------------------------------------------
# Tables / rankings
# ------------------------------------------------------------------

def centrality_table(
    graph: WeightedGraph,
    scores: Optional[Dict[str, Dict[str, float]]] = None,
) -> List[Dict[str, object]]:
    """
    One row per node (insertion order):
        node, group, degree, betweenness, closeness
    `scores` is compute_all() output; computed here when omitted.
    """
    if scores is None:
        scores = compute_all(graph)

    rows = []
    for node in graph.nodes():
        row: Dict[str, object] = {
            "node": node.node_id,
            "group": node.attributes.get("group", ""),
        }
        for metric in METRICS:
            row[metric] = scores[metric][node.node_id]
        rows.append(row)
    return rows


def top_k(scores: Dict[str, float], k: int) -> List[Tuple[str, float]]:
    """Highest k scores; ties broken by node id."""
    if k < 0:
        raise ValueError("k must be non-negative")
    return sorted(scores.items(), key=lambda kv: (-kv[1], kv[0]))[:k]


def summarize_scores(scores: Dict[str, float]) -> Dict[str, float]:
    if not scores:
        return {"n": 0, "mean": 0.0, "std": 0.0, "min": 0.0, "median": 0.0, "max": 0.0}

    arr = np.fromiter(scores.values(), dtype=float)
    return {
        "n": int(arr.size),
        "mean": float(arr.mean()),
        "std": float(arr.std()),
        "min": float(arr.min()),
        "median": float(np.median(arr)),
        "max": float(arr.max()),
    }


# ------------------------------------------------------------------
# CSV export + plotting
# ------------------------------------------------------------------

def export_centrality_to_csv(path: str, rows: List[Dict[str, object]]) -> None:
    """Write centrality_table() rows to a CSV file."""
    fieldnames = ["node", "group", *METRICS]
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow({k: row.get(k, "") for k in fieldnames})
    print(f"Saved centrality table to {path}")


def plot_centrality_bars(
    scores: Dict[str, float],
    out_path: str,
    title: str = "Centrality",
) -> None:
    """Horizontal bar chart of one metric, highest score on top."""
    import matplotlib.pyplot as plt

    ranked = top_k(scores, len(scores))
    labels = [u for u, _ in reversed(ranked)]
    values = [v for _, v in reversed(ranked)]

    plt.figure(figsize=(7, max(3, 0.3 * len(labels))))
    plt.barh(labels, values, color="C0")
    plt.xlabel(title)
    plt.title(title)
    plt.tight_layout()
    plt.savefig(out_path, dpi=PLOT_DPI)
    plt.close()
    print(f"Saved {title.lower()} plot to {out_path}")


# ------------------------------------------------------------------
# CLI entry point
# ------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Co-occurrence network centrality report")
    parser.add_argument(
        "--top",
        type=int,
        default=DEFAULT_TOP_K,
        help="Number of top nodes to print per metric",
    )
    parser.add_argument(
        "--metric",
        choices=METRICS,
        default="betweenness",
        help="Metric to plot with --out-plot",
    )
    parser.add_argument("--out-csv", type=str, help="Path to CSV for exporting node metrics")
    parser.add_argument("--out-plot", type=str, help="Path to PNG bar plot of --metric")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.top < 0:
        parser.error("--top must be non-negative")

    try:
        graph = load_movie_network()
        scores = compute_all(graph)
    except GraphError as exc:
        parser.exit(2, f"error: {exc}\n")
    logger.info("computed %s for %r", ", ".join(METRICS), graph)

    print("=== BASIC INFO ===")
    print("Nodes:", graph.node_count())
    print("Edges:", graph.edge_count())
    print("Total weight:", graph.total_weight())

    print("\n=== CONNECTIVITY ===")
    print(compute_connectivity(graph))

    for metric in METRICS:
        stats = summarize_scores(scores[metric])
        print(f"\n=== {metric.upper()} (top {args.top}) ===")
        for node_id, value in top_k(scores[metric], args.top):
            print(f"  {node_id:<12} {value:.4f}")
        print(
            f"  mean={stats['mean']:.4f} std={stats['std']:.4f} "
            f"median={stats['median']:.4f} max={stats['max']:.4f}"
        )

    if args.out_csv:
        export_centrality_to_csv(args.out_csv, centrality_table(graph, scores))

    if args.out_plot:
        import matplotlib

        # file output only; no display needed
        matplotlib.use("Agg")
        plot_centrality_bars(scores[args.metric], args.out_plot, title=args.metric.capitalize())

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
