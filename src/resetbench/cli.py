"""CLI runner: benchmark the GPU reset Job across labelled nodes."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from resetbench.config import Settings
from resetbench.core.benchmark import BenchmarkRunner
from resetbench.core.percentiles import compute_report
from resetbench.core.sample_store import SampleStore
from resetbench.errors import ConfigurationError, PollTimeoutError, SubmissionError
from resetbench.models.job import PercentileReport

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s — %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resetbench",
        description="Benchmark the GPU reset Job across cluster nodes",
    )
    sub = parser.add_subparsers(dest="command")

    run = sub.add_parser("run", help="Launch reset jobs in batches and report durations")
    run.add_argument("--target-runs", type=int, default=None, help="Total runs to cover (default: 30)")
    run.add_argument("--selector", default=None, help="Node label selector")
    run.add_argument("--template", default=None, help="Job template YAML (default: gpu-reset-job.yaml)")
    run.add_argument("--reset-threshold-days", default=None,
                     help="Value substituted for ##RESET_THRESHOLD_DAYS## (default: -1, force reset)")
    run.add_argument("--namespace", default=None, help="Namespace for created jobs")
    run.add_argument("--kubeconfig", default=None, help="Kubeconfig path")
    run.add_argument("--in-cluster", action="store_true", help="Use in-cluster service account config")
    run.add_argument("--poll-interval", type=float, default=None, help="Status poll interval (seconds)")
    run.add_argument("--max-wait", type=float, default=None,
                     help="Give up on a batch after this many seconds (default: wait forever)")
    run.add_argument("--batch-pause", type=float, default=None, help="Sleep between batches (seconds)")
    run.add_argument("--output-dir", default=None, help="Directory for results.csv (default: temp dir)")
    run.add_argument("--cleanup", action="store_true", help="Delete created jobs on exit")
    run.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    stats = sub.add_parser("stats", help="Recompute percentiles from a results.csv")
    stats.add_argument("results_file", help="results.csv written by a previous run")

    return parser


def build_settings(args: argparse.Namespace) -> Settings:
    """Build Settings from CLI args; unset flags fall back to env/defaults."""
    overrides: dict = {}
    for attr, field in [
        ("target_runs", "target_runs"),
        ("selector", "node_selector"),
        ("template", "job_template_path"),
        ("reset_threshold_days", "reset_threshold_days"),
        ("namespace", "namespace"),
        ("kubeconfig", "kubeconfig"),
        ("poll_interval", "poll_interval"),
        ("max_wait", "max_wait"),
        ("batch_pause", "batch_pause"),
        ("output_dir", "output_dir"),
        ("log_level", "log_level"),
    ]:
        value = getattr(args, attr, None)
        if value is not None:
            overrides[field] = value
    if getattr(args, "in_cluster", False):
        overrides["in_cluster"] = True
    if getattr(args, "cleanup", False):
        overrides["cleanup_jobs"] = True
    return Settings(**overrides)


def _build_cluster(settings: Settings):
    from resetbench.adapters.k8s import KubernetesAdapter

    return KubernetesAdapter(
        namespace=settings.namespace,
        kubeconfig=settings.kubeconfig,
        in_cluster=settings.in_cluster,
    )


def print_report(report: PercentileReport | None, results_path: str) -> None:
    if report is None:
        print("No valid durations captured.")
        print("Benchmark Results (0 runs)")
        return
    print("------------------------------------------------")
    print(f"Benchmark Results ({report.count} runs)")
    print(f"P50 Duration: {report.p50:g}s")
    print(f"P90 Duration: {report.p90:g}s")
    print(f"P99 Duration: {report.p99:g}s")
    print("------------------------------------------------")
    print(f"Detailed results in {results_path}")


async def run_benchmark(args: argparse.Namespace, cluster=None) -> int:
    settings = build_settings(args)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format=LOG_FORMAT,
    )

    print(f"=== resetbench: {settings.target_runs} runs ===")
    print(f"  selector:      {settings.node_selector}")
    print(f"  template:      {settings.job_template_path}")
    print(f"  namespace:     {settings.namespace}")
    print(f"  poll_interval: {settings.poll_interval}s")
    print(f"  max_wait:      {settings.max_wait or 'none'}")
    print()

    try:
        if cluster is None:
            cluster = _build_cluster(settings)
        outcome = await BenchmarkRunner(cluster, settings).run()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except (SubmissionError, PollTimeoutError) as exc:
        logger.error("Benchmark aborted: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    result = outcome.result
    print()
    print(f"Ran {result.batches} batches, {result.total_jobs} jobs on {len(result.nodes)} nodes")
    print("Calculating stats...")
    print_report(outcome.report, outcome.results_path)
    return 0


def run_stats(args: argparse.Namespace) -> int:
    try:
        store = SampleStore.read_csv(args.results_file)
    except FileNotFoundError:
        print(f"Error: {args.results_file} not found.", file=sys.stderr)
        return 1
    except (ValueError, KeyError) as exc:
        print(f"Error: {args.results_file} is malformed: {exc}", file=sys.stderr)
        return 1
    print_report(compute_report(store.durations()), args.results_file)
    return 0


def main():
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "run":
        sys.exit(asyncio.run(run_benchmark(args)))
    elif args.command == "stats":
        sys.exit(run_stats(args))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
