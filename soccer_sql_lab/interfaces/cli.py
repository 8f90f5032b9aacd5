"""
Soccer SQL Lab CLI.

Single entry point for the database and modeling workflow:
- build-db: load the CSVs and register the seven relations
- relations / queries / query: inspect the database with canned SQL
- train: tune, compare and test the outcome classifiers
- export-config: write the effective configuration as JSON

Usage:
    soccer-lab build-db
    soccer-lab queries --concept aggregation
    soccer-lab train --knn-range wide --knn-metric roc_auc
    soccer-lab --config lab.json train --use-cache
"""

from pathlib import Path
from typing import Any, Dict, Optional

import typer
from loguru import logger

from soccer_sql_lab.adapters.sqlite_store import open_store
from soccer_sql_lab.config.settings import KNN_NEIGHBOR_PRESETS, SoccerLabConfig, load_config
from soccer_sql_lab.config.utils import export_config_to_json, format_config_summary
from soccer_sql_lab.domain.common.errors import SoccerLabError
from soccer_sql_lab.domain.services.pipeline_service import ModelingPipelineService
from soccer_sql_lab.domain.services.query_library import get_query
from soccer_sql_lab.utils.helpers import configure_logging, format_table

app = typer.Typer(
    help="SQL walkthrough and outcome modeling over the football dataset",
    add_completion=False,
)


def _load(ctx: typer.Context, overrides: Optional[Dict[str, Any]] = None) -> SoccerLabConfig:
    try:
        return load_config(ctx.obj.get("config_path"), config_data=overrides)
    except SoccerLabError as e:
        _fail(e)


def _fail(error: SoccerLabError) -> None:
    typer.secho(f"❌ {error.error_type.value}: {error.message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="JSON configuration file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs and SQL"),
):
    """Configure logging and remember the configuration file."""
    configure_logging(verbose)
    ctx.obj = {"config_path": config_path}


# =============================================================================
# DATABASE
# =============================================================================


@app.command("build-db")
def build_db(
    ctx: typer.Context,
    skip_existing: bool = typer.Option(
        False, "--skip-existing", help="Skip relations already in the database"
    ),
):
    """Load the CSVs and register all seven relations."""
    config = _load(ctx)
    service = ModelingPipelineService(config)
    try:
        with open_store(config.database.path) as store:
            written = service.build_database(
                store, skip_existing=skip_existing or config.database.skip_existing
            )
    except SoccerLabError as e:
        _fail(e)

    typer.echo(f"✅ Wrote {len(written)} relations to {config.database.path}")
    for name in written:
        typer.echo(f"   • {name}")


@app.command("relations")
def relations(ctx: typer.Context):
    """List relations and their columns."""
    config = _load(ctx)
    try:
        with open_store(config.database.path) as store:
            listing = {name: store.columns(name) for name in sorted(store.list_relations())}
    except SoccerLabError as e:
        _fail(e)

    if not listing:
        typer.echo(f"No relations in {config.database.path}")
    for name, columns in listing.items():
        typer.echo(f"{name}: {', '.join(columns)}")


# =============================================================================
# QUERIES
# =============================================================================


@app.command("queries")
def queries(
    ctx: typer.Context,
    concept: Optional[str] = typer.Option(None, help="Only queries for this concept"),
    rows: int = typer.Option(6, help="Rows to preview per query"),
):
    """Run the canned query catalog and print previews."""
    config = _load(ctx)
    service = ModelingPipelineService(config)
    try:
        with open_store(config.database.path) as store:
            results = service.run_queries(store, concept)
    except SoccerLabError as e:
        _fail(e)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--concept")

    for name, result in results.items():
        typer.echo(f"\n🔎 {name} ({len(result)} rows): {get_query(name).description}")
        typer.echo(format_table(result, max_rows=rows))


@app.command("query")
def query(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Catalog query name"),
    rows: Optional[int] = typer.Option(None, help="Rows to print (default: all)"),
):
    """Run one canned query."""
    try:
        canned = get_query(name)
    except KeyError as e:
        raise typer.BadParameter(e.args[0], param_hint="NAME")

    config = _load(ctx)
    try:
        with open_store(config.database.path) as store:
            result = store.execute(canned.sql)
    except SoccerLabError as e:
        _fail(e)

    typer.echo(f"🔎 {canned.name}: {canned.description}")
    typer.echo(format_table(result, max_rows=rows))


# =============================================================================
# MODELING
# =============================================================================


@app.command("train")
def train(
    ctx: typer.Context,
    use_cache: Optional[bool] = typer.Option(
        None, "--use-cache/--no-use-cache", help="Read search results from the cache"
    ),
    write_cache: Optional[bool] = typer.Option(
        None, "--write-cache/--no-write-cache", help="Save fresh search results"
    ),
    knn_metric: Optional[str] = typer.Option(
        None, help="KNN selection metric (accuracy or roc_auc)"
    ),
    knn_range: Optional[str] = typer.Option(
        None, help=f"KNN neighbor bounds preset ({' or '.join(KNN_NEIGHBOR_PRESETS)})"
    ),
):
    """Tune both classifiers, compare on training data and score the winner on test."""
    overrides: Dict[str, Dict[str, Any]] = {"tuning": {}, "knn": {}}
    if use_cache is not None:
        overrides["tuning"]["use_cache"] = use_cache
    if write_cache is not None:
        overrides["tuning"]["write_cache"] = write_cache
    if knn_metric is not None:
        if knn_metric not in ("accuracy", "roc_auc"):
            raise typer.BadParameter(
                "must be 'accuracy' or 'roc_auc'", param_hint="--knn-metric"
            )
        overrides["knn"]["selection_metric"] = knn_metric
    if knn_range is not None:
        if knn_range not in KNN_NEIGHBOR_PRESETS:
            raise typer.BadParameter(
                f"must be one of {list(KNN_NEIGHBOR_PRESETS)}", param_hint="--knn-range"
            )
        overrides["knn"]["neighbors_range"] = KNN_NEIGHBOR_PRESETS[knn_range]

    config = _load(ctx, {k: v for k, v in overrides.items() if v})
    logger.info(format_config_summary(config))

    try:
        report = ModelingPipelineService(config).run()
    except SoccerLabError as e:
        _fail(e)

    typer.echo(f"\nFeature table: {report.n_rows} rows")
    typer.echo("\nTraining comparison:")
    typer.echo(format_table(report.train_comparison))
    typer.echo(f"\nSelected model: {report.selected_display_name}")
    typer.echo("\nTest metrics:")
    typer.echo(format_table(report.test_metrics))
    typer.echo("\nTest confusion matrix:")
    typer.echo(report.confusion.to_string())


@app.command("export-config")
def export_config(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Output JSON file"),
):
    """Write the effective configuration as JSON."""
    config = _load(ctx)
    export_config_to_json(config, path)
    typer.echo(f"✅ Configuration written to {path}")


if __name__ == "__main__":
    app()
