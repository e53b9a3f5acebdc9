#!/usr/bin/env python3
"""Entry point for running a graph analysis on a planted-partition graph.

Chains all analysis stages into a single executable command:
graph generation -> snapshot -> traversal -> community detection ->
centrality -> spanning tree -> result writing.

Usage:
    python run_analysis.py --config config.json
    python run_analysis.py --config config.json --dry-run
    python run_analysis.py --config config.json --verbose --output results
"""

import argparse
import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

from graphkit.config import config_from_json, full_config_hash, graph_config_hash
from graphkit.results import generate_analysis_id

log = logging.getLogger(__name__)


@contextmanager
def stage_timer(name: str) -> Generator[None, None, None]:
    """Context manager that prints stage banners with elapsed time."""
    print(f"\n=== {name} ===")
    log.info("Starting: %s", name)
    t0 = time.monotonic()
    yield
    elapsed = time.monotonic() - t0
    print(f"... done in {elapsed:.1f}s")
    log.info("Completed: %s in %.1fs", name, elapsed)


def run_pipeline(config_path: Path, results_dir: str = "results") -> Path:
    """Execute the full analysis pipeline.

    Args:
        config_path: Path to analysis config JSON file.
        results_dir: Base directory for results output.

    Returns:
        Path to the written result.json.
    """
    # Lazy imports to keep --dry-run fast
    from graphkit.centrality import (
        degree_centrality,
        eigenvector_centrality,
        katz_centrality,
        pagerank,
    )
    from graphkit.community import label_propagation, leiden, louvain, modularity
    from graphkit.config import LabelPropagationOptions
    from graphkit.graph import SnapshotCache, generate_planted_partition
    from graphkit.results import (
        summarize_centrality,
        summarize_communities,
        summarize_spanning_tree,
        summarize_traversal,
        write_result,
    )
    from graphkit.structure import is_connected, minimum_spanning_tree
    from graphkit.traversal import DirectionOptimizedBFS

    pipeline_start = time.monotonic()
    config = config_from_json(config_path.read_text())
    log.info("Config loaded from %s", config_path)
    log.info("Seed: %d", config.seed)
    cache = SnapshotCache()

    # ── Stage 1: Graph Generation ──────────────────────────────────
    with stage_timer("Graph Generation"):
        planted = generate_planted_partition(config.generator, config.seed)
        graph = planted.graph
        log.info(
            "Graph: n=%d, K=%d, edges=%d (attempt %d)",
            graph.node_count,
            config.generator.K,
            graph.edge_count,
            planted.attempt,
        )

    # ── Stage 2: CSR Snapshot ──────────────────────────────────────
    with stage_timer("CSR Snapshot"):
        snapshot = cache.get(graph)
        connected = is_connected(graph, cache)
        log.info("Snapshot: %r, connected=%s", snapshot, connected)

    # ── Stage 3: Traversal ─────────────────────────────────────────
    with stage_timer("Direction-Optimized BFS"):
        bfs = DirectionOptimizedBFS(snapshot, config.traversal).search(
            config.bfs_source
        )
        log.info(
            "BFS from %d reached %d nodes in %d level(s)",
            config.bfs_source,
            bfs.visited_count,
            len(bfs.directions),
        )

    # ── Stage 4: Community Detection ───────────────────────────────
    with stage_timer("Community Detection"):
        communities = louvain(graph, config.louvain)
        leiden_communities = leiden(graph, config.leiden)
        lpa = label_propagation(graph, LabelPropagationOptions(seed=config.seed))
        planted_partition = {
            node: int(block) for node, block in enumerate(planted.block_assignments)
        }
        planted_q = modularity(graph, planted_partition, config.louvain.resolution)
        log.info(
            "Louvain Q=%.4f (%d communities), Leiden Q=%.4f (%d communities), "
            "label propagation Q=%.4f, planted Q=%.4f",
            communities.modularity,
            communities.num_communities,
            leiden_communities.modularity,
            leiden_communities.num_communities,
            lpa.modularity,
            planted_q,
        )

    # ── Stage 5: Centrality ────────────────────────────────────────
    with stage_timer("Centrality"):
        centrality = {
            "eigenvector": eigenvector_centrality(
                graph, config.centrality, cache=cache
            ),
            "katz": katz_centrality(graph, config.katz, cache=cache),
            "pagerank": pagerank(graph, config.pagerank, cache=cache),
            "degree": degree_centrality(graph),
        }
        for name, result in centrality.items():
            log.info(
                "%s: %d iteration(s), %s", name, result.iterations, result.status.value
            )

    # ── Stage 6: Spanning Tree ─────────────────────────────────────
    with stage_timer("Spanning Tree"):
        tree = minimum_spanning_tree(graph)
        log.info("Spanning forest: %d edges", len(tree.edges))

    # ── Stage 7: Write Result ──────────────────────────────────────
    with stage_timer("Write Result"):
        metrics: dict[str, Any] = {
            "scalars": {
                "node_count": graph.node_count,
                "edge_count": graph.edge_count,
                "connected": connected,
                "louvain_modularity": communities.modularity,
                "leiden_modularity": leiden_communities.modularity,
                "label_propagation_modularity": lpa.modularity,
                "planted_modularity": planted_q,
            },
            "traversal": summarize_traversal(bfs),
            "communities": summarize_communities(communities),
            "centrality": {
                name: summarize_centrality(result)
                for name, result in centrality.items()
            },
            "spanning_tree": summarize_spanning_tree(tree),
        }
        result_path = write_result(
            config,
            metrics,
            metadata={"generation_attempt": planted.attempt},
            results_dir=results_dir,
        )
        log.info("Result written to %s", result_path)

    total_elapsed = time.monotonic() - pipeline_start
    print(f"\n{'=' * 60}")
    print(f"Pipeline complete in {total_elapsed:.1f}s")
    print(f"  Analysis:    {result_path.parent.name}")
    print(f"  Result:      {result_path}")
    print(f"  Communities: {communities.num_communities} "
          f"(Q={communities.modularity:.4f}, planted Q={planted_q:.4f})")
    print(f"  BFS reach:   {bfs.visited_count}/{graph.node_count}")
    print(f"{'=' * 60}")

    return result_path


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run a graph analysis on a planted-partition graph"
    )
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to analysis config JSON file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show pipeline plan without running the analysis",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable DEBUG-level logging",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="results",
        help="Base directory for result output",
    )
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Error: config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)

    config = config_from_json(config_path.read_text())
    gen = config.generator

    analysis_id = generate_analysis_id(config)
    print(f"Analysis ID: {analysis_id}")
    print(f"Config hash: {full_config_hash(config)}")
    print(f"Graph hash:  {graph_config_hash(config)}")
    print()
    print(f"Graph:     n={gen.n}, K={gen.K}, p_in={gen.p_in}, p_out={gen.p_out}, "
          f"degree_correction={gen.degree_correction}")
    print(f"Traversal: alpha={config.traversal.alpha}, beta={config.traversal.beta}, "
          f"source={config.bfs_source}")
    print(f"Louvain:   resolution={config.louvain.resolution}, "
          f"seed={config.louvain.seed}")
    print(f"Leiden:    resolution={config.leiden.resolution}, "
          f"seed={config.leiden.seed}")
    print(f"Seed:      {config.seed}")

    if args.dry_run:
        print(f"\nPipeline plan for analysis {analysis_id}:")
        print(f"  1. Graph generation: planted partition, seed {config.seed}")
        print(f"  2. CSR snapshot + connectivity check")
        print(f"  3. Direction-optimized BFS from node {config.bfs_source}")
        print(f"  4. Community detection: Louvain + Leiden + label propagation")
        print(f"  5. Centrality: eigenvector, Katz, PageRank, degree")
        print(f"  6. Minimum spanning tree")
        print(f"\nOutput: {args.output}/{analysis_id}/result.json")
        print(f"\n[dry-run] Config loaded successfully. Exiting.")
        return

    try:
        run_pipeline(config_path, results_dir=args.output)
    except Exception:
        log.exception("Pipeline failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
