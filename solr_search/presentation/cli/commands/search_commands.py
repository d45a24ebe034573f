"""
Search commands for CLI.

``solr-search query`` shows the derived backend parameters without
running the search, ``search`` prints the result records and ``facets``
the facet counts.
"""

import sys
from typing import Any, Dict, Optional, Tuple

import click

from ....application.services.search_application_service import (
    SearchApplicationService,
    create_search_service
)
from ....domain.query.facet_config_adapter import FacetConfigAdapter
from ....infrastructure.config.config_manager import ConfigManager
from ....shared.exceptions import ErrorContextManager, SolrSearchError
from ..formatters.output_formatter import OutputFormatter


def parse_params(
    pairs: Tuple[str, ...],
    collection: Optional[str] = None,
    limit: Optional[int] = None,
    page: Optional[int] = None
) -> Dict[str, Any]:
    """
    Turn repeated ``key=value`` options into request parameters.

    A key given more than once becomes a list.

    Raises:
        click.BadParameter: If an option has no ``=``
    """
    params: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--param")
        if key in params:
            existing = params[key]
            params[key] = (existing if isinstance(existing, list) else [existing]) + [value]
        else:
            params[key] = value

    if collection:
        params["collection"] = collection
    if limit is not None:
        params["limit"] = limit
    if page is not None:
        params["page"] = page
    return params


class CliContext:
    """Lazily created service shared by the commands of one invocation."""

    def __init__(self, config_dir: str, environment: Optional[str], formatter: OutputFormatter):
        self.config_dir = config_dir
        self.environment = environment
        self.formatter = formatter
        self._service: Optional[SearchApplicationService] = None

    @property
    def service(self) -> SearchApplicationService:
        if self._service is None:
            self._service = create_search_service(
                ConfigManager(config_dir=self.config_dir, environment=self.environment)
            )
        return self._service


def _fail(ctx: CliContext, error: SolrSearchError) -> None:
    ctx.formatter.print(ctx.formatter.format_error(error.message, str(error.details or "")))
    sys.exit(1)


common_options = [
    click.argument("query", required=False, default=""),
    click.option("--param", "-p", "params", multiple=True, help="Request parameter as key=value."),
    click.option("--collection", "-c", default=None, help="Restrict to a collection PID."),
    click.option("--limit", "-l", type=int, default=None, help="Results per page."),
    click.option("--page", type=int, default=None, help="Zero based page number."),
]


def with_common_options(func):
    for option in reversed(common_options):
        func = option(func)
    return func


@click.group(name="solr-search")
@click.option("--config-dir", default="config", show_default=True, help="Configuration directory.")
@click.option("--env", "environment", default=None, help="Configuration environment (APP_ENV).")
@click.option("--plain", is_flag=True, help="Plain text output instead of rich tables.")
@click.pass_context
def cli(ctx: click.Context, config_dir: str, environment: Optional[str], plain: bool) -> None:
    """Faceted repository search over Solr."""
    ctx.obj = CliContext(config_dir, environment, OutputFormatter(use_rich=not plain))


@cli.command()
@with_common_options
@click.pass_obj
def query(ctx: CliContext, query: str, params, collection, limit, page) -> None:
    """Show the backend parameters derived for QUERY."""
    try:
        spec = ctx.service.build_query(query, parse_params(params, collection, limit, page))
    except SolrSearchError as e:
        _fail(ctx, e)
        return
    ctx.formatter.print(ctx.formatter.format_json({
        "q": spec.effective_query_text,
        "start": spec.offset,
        "rows": spec.limit,
        "params": spec.to_backend_params(),
        "errors": [error.to_dict() for error in spec.errors]
    }))


@cli.command()
@with_common_options
@click.option("--json", "as_json", is_flag=True, help="Print the full outcome as JSON.")
@click.pass_obj
def search(ctx: CliContext, query: str, params, collection, limit, page, as_json: bool) -> None:
    """Run QUERY and list the matching objects."""
    try:
        outcome = ctx.service.search(query, parse_params(params, collection, limit, page))
    except SolrSearchError as e:
        _fail(ctx, e)
        return

    if as_json:
        ctx.formatter.print(ctx.formatter.format_json(outcome.to_dict()))
    else:
        ctx.formatter.print(ctx.formatter.format_outcome(outcome))
    for error in outcome.errors:
        ctx.formatter.print(ctx.formatter.format_error(ErrorContextManager.format_context(error)))
    if outcome.errors and outcome.is_empty:
        sys.exit(1)


@cli.command()
@with_common_options
@click.pass_obj
def facets(ctx: CliContext, query: str, params, collection, limit, page) -> None:
    """Show facet counts for QUERY."""
    try:
        outcome = ctx.service.search(query, parse_params(params, collection, limit, page))
    except SolrSearchError as e:
        _fail(ctx, e)
        return

    options = FacetConfigAdapter(ctx.service.config).display_options()
    labels = {field: option["label"] for field, option in options.items()}
    tables = ctx.formatter.format_facets(outcome.facet_counts, labels)
    if not tables:
        ctx.formatter.print("No facet counts returned")
    for table in tables:
        ctx.formatter.print(table)
    for error in outcome.errors:
        ctx.formatter.print(ctx.formatter.format_error(ErrorContextManager.format_context(error)))


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
