"""CLI commands for the chain benchmark."""

import logging
import sys
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar, cast

import click
import structlog

from chainbench.config.constants import COMPONENT_CLI, DEFAULT_RUNS
from chainbench.config.error_hints import format_validation_error
from chainbench.config.loader import ConfigLoader, available_models
from chainbench.config.schemas import BenchmarkConfig
from chainbench.config.state_machine import ConfigState
from chainbench.features.llm.factory import CLIENT_CLAUDE_CLI, CLIENT_NAMES
from chainbench.grid.builder import build_grid
from chainbench.grid.models import Grid
from chainbench.grid.reducers import ResultField, compare_result_sets
from chainbench.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
)
from chainbench.providers.errors import NoCredentialsError
from chainbench.providers.registry import ProviderRegistry
from chainbench.renderer.console import format_grid
from chainbench.renderer.csv_renderer import CsvRenderer
from chainbench.renderer.dashboard import DashboardExporter
from chainbench.renderer.markdown_renderer import MarkdownRenderer
from chainbench.runner.benchmark import BenchmarkRunner, DryRunPlan
from chainbench.runner.classify import (
    DEFAULT_CONCURRENCY,
    ClassifyOptions,
    ClassifyRunner,
    build_detector_factory,
)
from chainbench.runner.detectors import DETECTOR_NAMES, DETECTOR_PATTERN
from chainbench.runner.metrics import RunnerMetrics
from chainbench.settings.app import AppSettings, get_settings
from chainbench.store.json_store import (
    ResultStore,
    create_run_dir,
    load_responses_or_results,
    load_results,
)
from chainbench.store.models import BenchmarkResult


logger = structlog.get_logger()

DEFAULT_OUTPUT_DIR = Path("results")
DEFAULT_DASHBOARD_DIR = Path("dashboard/public/data")
COMPARE_FIELDS = ("ecosystem", "network", "tools")

CommandT = TypeVar("CommandT", bound=Callable[..., Any])


@dataclass
class RunOptions:
    """Options shared by the run and collect commands."""

    config_path: Path | None
    output_dir: Path
    dashboard_dir: Path | None
    model_ids: list[str]
    runs: int
    web_search: bool
    dry_run: bool
    json_logs: bool
    verbose: bool


def _parse_model_ids(models: str | None) -> list[str]:
    if not models:
        return []
    return [m.strip() for m in models.split(",") if m.strip()]


def _setup_logging_and_context(
    run_id: str,
    command: str,
    json_logs: bool,
    verbose: bool,
) -> structlog.typing.FilteringBoundLogger:
    """Set up logging and return bound logger.

    Args:
        run_id: Unique run identifier.
        command: CLI command name.
        json_logs: Render JSON log lines.
        verbose: Enable debug logging.

    Returns:
        Bound logger with run context.
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    configure_logging(level=log_level, json_format=json_logs)
    bind_run_context(run_id)
    return logger.bind(run_id=run_id, component=COMPONENT_CLI, command=command)


def _echo_validation_errors(loader: ConfigLoader) -> None:
    click.echo("Configuration validation failed:", err=True)
    for error in loader.validation_errors:
        formatted = format_validation_error(
            location=error["loc"],
            message=error["msg"],
            error_type=error.get("type", "unknown"),
            include_hint=True,
        )
        click.echo(f"  - {formatted}", err=True)


def _load_configuration(
    config_path: Path | None,
    run_id: str,
    log: structlog.typing.FilteringBoundLogger,
) -> BenchmarkConfig:
    """Load and validate configuration, exiting with status 1 on failure."""
    loader = ConfigLoader(run_id=run_id)

    try:
        config = loader.load(config_path)
    except Exception as e:
        log.warning(
            "config_load_failed",
            error=str(e),
            validation_errors=loader.validation_errors,
        )
        _echo_validation_errors(loader)
        sys.exit(1)

    if loader.state != ConfigState.READY:
        log.error("unexpected_state", state=loader.state.name)
        sys.exit(1)

    log.info(
        "config_validated",
        prompt_count=len(config.prompts),
        model_count=len(config.models),
        file_checksums=loader.file_checksums,
    )
    return config


def _echo_plan(plan: DryRunPlan) -> None:
    low, high = plan.estimated_cost
    click.echo("Dry run: no API calls will be made.")
    click.echo(f"  Prompts: {len(plan.prompts)}")
    click.echo(f"  Models: {', '.join(m.display_name or m.id for m in plan.models)}")
    click.echo(f"  Runs: {plan.runs}")
    click.echo(f"  Web search: {'ON' if plan.web_search else 'OFF'}")
    click.echo(f"  Total API calls: {plan.total_calls}")
    click.echo(f"  Estimated cost: ${low:.2f} - ${high:.2f}")


def _echo_grid(grid: Grid) -> None:
    for line in format_grid(grid):
        click.echo(line)


def _write_reports(
    output_dir: Path,
    results: Sequence[BenchmarkResult],
    grid: Grid,
    log: structlog.typing.FilteringBoundLogger,
) -> None:
    markdown = MarkdownRenderer(output_dir).render(grid, results)
    csv_file = CsvRenderer(output_dir).render(results)
    log.info(
        "reports_written",
        markdown=markdown.absolute_path,
        csv=csv_file.absolute_path,
    )
    click.echo(f"Report: {markdown.absolute_path}")
    click.echo(f"CSV: {csv_file.absolute_path}")


def _execute_benchmark(options: RunOptions, command: str) -> None:
    """Run or collect, depending on ``command``."""
    run_id = str(uuid.uuid4())
    log = _setup_logging_and_context(run_id, command, options.json_logs, options.verbose)
    try:
        _run_benchmark(options, command, run_id, log)
    finally:
        clear_run_context()


def _run_benchmark(
    options: RunOptions,
    command: str,
    run_id: str,
    log: structlog.typing.FilteringBoundLogger,
) -> None:
    log.info(
        "benchmark_command_started",
        config_path=str(options.config_path) if options.config_path else None,
        output_dir=str(options.output_dir),
        model_filter=options.model_ids,
        runs=options.runs,
        web_search=options.web_search,
        dry_run=options.dry_run,
    )

    config = _load_configuration(options.config_path, run_id, log)
    settings = get_settings()
    models = available_models(config.to_model_configs(), settings, options.model_ids)
    prompts = config.to_prompts()

    if not models:
        log.error("no_models_available", model_filter=options.model_ids)
        click.echo(
            "No models available. Set ANTHROPIC_API_KEY, OPENAI_API_KEY "
            "or GEMINI_API_KEY, and check --models.",
            err=True,
        )
        sys.exit(1)

    store_dir = options.output_dir
    if not options.dry_run:
        store_dir = create_run_dir(options.output_dir, options.web_search)
    runner = BenchmarkRunner(ProviderRegistry(settings), ResultStore(store_dir))

    if options.dry_run:
        _echo_plan(runner.plan(prompts, models, options.runs, options.web_search))
        return

    execute = runner.run if command == "run" else runner.collect_responses
    try:
        outcome = execute(prompts, models, options.runs, options.web_search)
    except NoCredentialsError as e:
        log.error("no_credentials", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        log.info("runner_metrics", **RunnerMetrics.get_instance().get_summary())

    if command == "collect":
        click.echo(
            f"Collected {len(outcome.responses)} responses into {store_dir} "
            f"({outcome.failures} failed, {outcome.skipped} skipped)"
        )
        if not outcome.responses:
            sys.exit(1)
        click.echo(f"Classify them with: chainbench classify {store_dir}")
        return

    if not outcome.results:
        log.error("no_results", failures=outcome.failures, skipped=outcome.skipped)
        click.echo("No results collected.", err=True)
        sys.exit(1)

    _echo_grid(outcome.grid)
    _write_reports(store_dir, outcome.results, outcome.grid, log)
    if options.dashboard_dir is not None:
        run_file = DashboardExporter(options.dashboard_dir).export(
            outcome.results, outcome.grid
        )
        click.echo(f"Dashboard: {run_file.absolute_path}")
    click.echo(
        f"Saved {len(outcome.results)} results to {store_dir} "
        f"({outcome.failures} failed, {outcome.skipped} skipped)"
    )


def _benchmark_options(func: CommandT) -> CommandT:
    """Options shared by the run and collect commands."""
    options = [
        click.option(
            "--config",
            "config_path",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            default=None,
            help="Path to benchmark.yaml (default: built-in prompts and models).",
        ),
        click.option(
            "--models",
            type=str,
            default=None,
            help="Comma-separated model ids to run (default: all with API keys).",
        ),
        click.option(
            "--runs",
            type=click.IntRange(min=1),
            default=DEFAULT_RUNS,
            help="Repetitions per prompt and model (default: 1).",
        ),
        click.option(
            "--web-search",
            is_flag=True,
            help="Enable provider web search.",
        ),
        click.option(
            "--dry-run",
            is_flag=True,
            help="Show the plan and cost estimate without calling any API.",
        ),
        click.option(
            "--output-dir",
            type=click.Path(file_okay=False, path_type=Path),
            default=DEFAULT_OUTPUT_DIR,
            help="Directory receiving timestamped run directories.",
        ),
        click.option(
            "--json-logs/--no-json-logs",
            default=True,
            help="Use JSON format for logs (default: true).",
        ),
        click.option(
            "--verbose",
            "-v",
            is_flag=True,
            help="Enable verbose logging.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """Chain benchmark CLI: which blockchain do LLMs default to?"""


@cli.command()
@_benchmark_options
@click.option(
    "--dashboard-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_DASHBOARD_DIR,
    help="Dashboard data directory for the exported run.",
)
@click.option(
    "--no-dashboard",
    is_flag=True,
    help="Skip the dashboard export.",
)
def run(  # noqa: PLR0913
    config_path: Path | None,
    models: str | None,
    runs: int,
    web_search: bool,
    dry_run: bool,
    output_dir: Path,
    json_logs: bool,
    verbose: bool,
    dashboard_dir: Path,
    no_dashboard: bool,
) -> None:
    """Run the benchmark: collect, classify, report and export.

    Each result is classified with the pattern detector and saved as soon
    as it arrives, so an interrupted run keeps what it collected.
    """
    options = RunOptions(
        config_path=config_path,
        output_dir=output_dir,
        dashboard_dir=None if no_dashboard else dashboard_dir,
        model_ids=_parse_model_ids(models),
        runs=runs,
        web_search=web_search,
        dry_run=dry_run,
        json_logs=json_logs,
        verbose=verbose,
    )
    _execute_benchmark(options, "run")


@cli.command()
@_benchmark_options
def collect(  # noqa: PLR0913
    config_path: Path | None,
    models: str | None,
    runs: int,
    web_search: bool,
    dry_run: bool,
    output_dir: Path,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Collect raw responses without classifying them."""
    options = RunOptions(
        config_path=config_path,
        output_dir=output_dir,
        dashboard_dir=None,
        model_ids=_parse_model_ids(models),
        runs=runs,
        web_search=web_search,
        dry_run=dry_run,
        json_logs=json_logs,
        verbose=verbose,
    )
    _execute_benchmark(options, "collect")


@cli.command()
@click.argument(
    "dirs",
    nargs=-1,
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
)
@click.option(
    "--concurrency",
    type=click.IntRange(min=1),
    default=DEFAULT_CONCURRENCY,
    help=f"Responses classified in parallel (default: {DEFAULT_CONCURRENCY}).",
)
@click.option(
    "--detector",
    type=click.Choice(DETECTOR_NAMES),
    default=DETECTOR_PATTERN,
    help="Chain detector to use (default: pattern).",
)
@click.option(
    "--classifier-model",
    type=str,
    default=None,
    help="Model used by the llm detector (default: CHAINBENCH_CLASSIFIER_MODEL).",
)
@click.option(
    "--classifier-client",
    type=click.Choice(CLIENT_NAMES),
    default=CLIENT_CLAUDE_CLI,
    help="Client used by the llm detector (default: claude-cli).",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_OUTPUT_DIR,
    help="Directory receiving the classified run directory.",
)
@click.option(
    "--dashboard-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_DASHBOARD_DIR,
    help="Dashboard data directory for the exported run.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=True,
    help="Use JSON format for logs (default: true).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def classify(  # noqa: PLR0913
    dirs: tuple[Path, ...],
    concurrency: int,
    detector: str,
    classifier_model: str | None,
    classifier_client: str,
    output_dir: Path,
    dashboard_dir: Path,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Classify stored responses from one or more run directories.

    Accepts collection directories and result directories; existing
    analyses are replaced.
    """
    run_id = str(uuid.uuid4())
    log = _setup_logging_and_context(run_id, "classify", json_logs, verbose)
    try:
        settings = get_settings()
        _classify_dirs(
            dirs,
            settings,
            ClassifyOptions(
                concurrency=concurrency,
                detector=detector,
                classifier_model=classifier_model or settings.classifier_model,
                classifier_client=classifier_client,
            ),
            output_dir,
            dashboard_dir,
            log,
        )
    finally:
        clear_run_context()


def _classify_dirs(
    dirs: tuple[Path, ...],
    settings: AppSettings,
    options: ClassifyOptions,
    output_dir: Path,
    dashboard_dir: Path,
    log: structlog.typing.FilteringBoundLogger,
) -> None:
    responses = load_responses_or_results(dirs)
    if not responses:
        log.error("no_responses_found", dirs=[str(d) for d in dirs])
        click.echo("No responses found in the given directories.", err=True)
        sys.exit(1)

    try:
        detector_factory = build_detector_factory(options, settings)
    except Exception as e:
        log.error("detector_setup_failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    web_search = any(r.web_search for r in responses)
    store_dir = create_run_dir(output_dir, web_search)
    runner = ClassifyRunner(
        ResultStore(store_dir),
        options,
        detector_factory=detector_factory,
        exporter=DashboardExporter(dashboard_dir),
    )
    outcome = runner.classify(responses)
    log.info("runner_metrics", **RunnerMetrics.get_instance().get_summary())

    _echo_grid(outcome.grid)
    _write_reports(store_dir, outcome.results, outcome.grid, log)
    if outcome.dashboard_file is not None:
        click.echo(f"Dashboard: {outcome.dashboard_file.absolute_path}")
    click.echo(
        f"Classified {len(outcome.results)} responses into {store_dir} "
        f"({outcome.failures} failed)"
    )


@cli.command()
@click.argument(
    "dirs",
    nargs=-1,
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Where to write report.md and report.csv (default: first directory).",
)
def report(dirs: tuple[Path, ...], output_dir: Path | None) -> None:
    """Rebuild the grid and reports from stored results."""
    configure_logging(json_format=False)
    log = logger.bind(component=COMPONENT_CLI, command="report")

    results = load_results(dirs)
    if not results:
        click.echo("No results found in the given directories.", err=True)
        sys.exit(1)

    grid = build_grid(results)
    _echo_grid(grid)
    _write_reports(output_dir or dirs[0], results, grid, log)


@cli.command()
@click.option(
    "--base",
    "base_dirs",
    multiple=True,
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Result directory of the base mode (repeatable).",
)
@click.option(
    "--web",
    "web_dirs",
    multiple=True,
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Result directory of the web search mode (repeatable).",
)
@click.option(
    "--field",
    type=click.Choice(COMPARE_FIELDS),
    default="ecosystem",
    help="What to compare (default: ecosystem).",
)
def compare(
    base_dirs: tuple[Path, ...],
    web_dirs: tuple[Path, ...],
    field: str,
) -> None:
    """Compare label shares between two result sets."""
    configure_logging(json_format=False)

    base_results = load_results(base_dirs)
    web_results = load_results(web_dirs)
    if not base_results or not web_results:
        click.echo("Both result sets must contain results.", err=True)
        sys.exit(1)

    rows = compare_result_sets(base_results, web_results, cast(ResultField, field))
    click.echo(
        f"Base: {len(base_results)} results, web search: {len(web_results)} results"
    )
    click.echo(f"{'Label':<22}{'Base':>9}{'Web':>9}{'Delta':>10}")
    click.echo("-" * 50)
    for row in rows:
        click.echo(
            f"{row.label[:21]:<22}{row.base_pct:>8.1f}%{row.web_pct:>8.1f}%"
            f"{row.delta_pp:>+8.1f}pp"
        )


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to benchmark.yaml (default: built-in prompts and models).",
)
def validate(config_path: Path | None) -> None:
    """Validate a benchmark configuration without calling any API."""
    run_id = str(uuid.uuid4())
    configure_logging(json_format=False)
    bind_run_context(run_id)

    loader = ConfigLoader(run_id=run_id)

    try:
        config = loader.load(config_path)

        click.echo("Configuration is valid!")
        click.echo(f"  Prompts: {len(config.prompts)}")
        click.echo(f"  Models: {len(config.models)}")
        for path, checksum in loader.file_checksums.items():
            click.echo(f"  Checksum: {checksum[:12]} ({Path(path).name})")

    except Exception:
        _echo_validation_errors(loader)
        sys.exit(1)
    finally:
        clear_run_context()
