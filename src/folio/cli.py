"""CLI interface for Folio.

Command-line tool for populating portfolio pages and serving the site.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import NoReturn
from urllib.parse import urlsplit
from urllib.request import url2pathname

import click
import httpx

from folio.config import Config
from folio.core.document import PageDocument
from folio.core.effects import NoEffects, RevealEffects
from folio.core.loader import ResourceLoader
from folio.core.location import Location
from folio.core.orchestrator import PageOrchestrator, PageOutcome, PageState, PageView, SiteResources
from folio.core.resources import build_candidates, portfolio_resource, posts_resource
from folio.core.sections import RenderOptions
from folio.core.theme import PreferenceStore, Theme, resolve_theme

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover folio.toml)",
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Folio - populate and serve a JSON-driven portfolio site."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("url")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the populated page to a file instead of stdout",
)
@click.option(
    "--prefers-dark",
    is_flag=True,
    help="Operating system prefers a dark theme (used when no theme is stored)",
)
@click.option(
    "--effects/--no-effects",
    default=True,
    help="Mark elements for reveal animations (default: enabled)",
)
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Per-candidate fetch timeout in seconds (overrides config)",
)
@config_option
def render(
    url: str,
    output: Path | None,
    prefers_dark: bool,
    effects: bool,
    timeout: float | None,
    config_path: Path | None,
) -> None:
    """Populate the page at URL with the site's data and print it."""
    config = _load_config(config_path).with_overrides(timeout=timeout)

    try:
        location = Location.from_url(url)
    except ValueError as e:
        _fail(str(e))

    store = PreferenceStore(config.preferences.path)
    theme = resolve_theme(store.get_theme(), prefers_dark=prefers_dark)

    try:
        html, outcome = asyncio.run(_render_page(config, location, theme, effects=effects))
    except (httpx.HTTPError, OSError) as e:
        _fail(f"Could not fetch page {url}: {e}")

    if output is None:
        click.echo(html)
    else:
        output.write_text(html, encoding="utf-8")
        click.echo(f"Wrote {outcome.identity.value} page to {output}", err=True)

    if outcome.state is PageState.FAILED:
        click.echo(click.style(f"Error: {outcome.error}", fg="red"), err=True)
        sys.exit(1)


async def _render_page(
    config: Config,
    location: Location,
    theme: Theme,
    *,
    effects: bool,
) -> tuple[str, PageOutcome]:
    """Fetch the page markup and run one page view over it."""
    resources = SiteResources(
        portfolio=portfolio_resource(config.resources.portfolio),
        posts=posts_resource(config.resources.posts),
    )
    options = RenderOptions(
        tagline=config.site.tagline,
        preview_count=config.blog.preview_count,
        blog_index=config.site.blog_index,
        post_page=config.site.post_page,
    )

    async with httpx.AsyncClient(follow_redirects=True) as client:
        markup = await _fetch_page(client, location, config.resources.timeout)
        view = PageView(document=PageDocument(markup), location=location, theme=theme)
        orchestrator = PageOrchestrator(
            ResourceLoader(client, timeout=config.resources.timeout),
            resources=resources,
            options=options,
            effects=RevealEffects() if effects else NoEffects(),
        )
        outcome = await orchestrator.run(view)

    return view.document.render(), outcome


async def _fetch_page(client: httpx.AsyncClient, location: Location, timeout: float) -> str:
    """Read the page markup, from disk for file:// URLs.

    Raises:
        httpx.HTTPError: If the page cannot be fetched
        OSError: If a local page cannot be read
    """
    if location.is_local_file:
        return Path(url2pathname(urlsplit(location.url).path)).read_text(encoding="utf-8")

    response = await client.get(location.url, timeout=timeout)
    response.raise_for_status()
    return response.text


@cli.command()
@click.argument("path")
@click.option(
    "--base-url",
    "-b",
    required=True,
    help="Origin plus directory of the page (e.g., https://jane.github.io/site/)",
)
def candidates(path: str, base_url: str) -> None:
    """Print the candidate URLs tried for a resource PATH."""
    for index, candidate in enumerate(build_candidates(path, base_url), start=1):
        click.echo(f"{index}. {candidate}")


@cli.command()
@click.argument("value", required=False, type=click.Choice([t.value for t in Theme]))
@click.option("--clear", is_flag=True, help="Remove the stored preference")
@config_option
def theme(value: str | None, clear: bool, config_path: Path | None) -> None:
    """Show or store the light/dark theme preference."""
    config = _load_config(config_path)
    store = PreferenceStore(config.preferences.path)

    if clear:
        store.clear()
        click.echo("Theme preference cleared (following system preference)")
        return

    if value is not None:
        store.set_theme(Theme(value))
        click.echo(f"Theme set to {value}")
        return

    stored = store.get_theme()
    if stored is None:
        click.echo("Theme: system preference")
    else:
        click.echo(f"Theme: {stored.value}")


@cli.command()
@config_option
@click.option(
    "--root",
    "-r",
    "root_dir",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Site root directory (overrides config)",
)
@click.option("--host", default=None, help="Host to bind to (overrides config)")
@click.option("--port", "-p", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable live reload (overrides config, default: enabled)",
)
def serve(
    config_path: Path | None,
    root_dir: Path | None,
    host: str | None,
    port: int | None,
    live_reload: bool | None,
) -> None:
    """Start the development server for the site directory."""
    from folio.server import run_server

    config = _load_config(config_path).with_overrides(
        host=host,
        port=port,
        root_dir=root_dir,
        live_reload_enabled=live_reload,
    )

    if not config.site.root_dir.is_dir():
        _fail(f"Site directory not found: {config.site.root_dir}")

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Site directory: {config.site.root_dir}")
    if config.live_reload.enabled:
        click.echo("Live reload: enabled")
    else:
        click.echo("Live reload: disabled")

    run_server(config)


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (OSError, ValueError) as e:
        _fail(f"Invalid configuration: {e}")


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


if __name__ == "__main__":
    cli()
