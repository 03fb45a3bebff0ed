"""aiohttp development server for a Folio site.

Serves the static site directory: page markup, the JSON documents, and
assets. Files go out unchanged except for the live reload client added to
HTML pages. Population happens in the page, not here.
"""

from pathlib import Path

from aiohttp import web

from folio.app_keys import live_reload_key, site_root_key
from folio.config import Config
from folio.live.reload import (
    LiveReloadManager,
    create_live_reload_routes,
    inject_live_reload_script,
)

HTML_SUFFIXES = (".html", ".htm")


async def serve_site_file(request: web.Request) -> web.StreamResponse:
    """Serve a file from the site root.

    Directory paths resolve to their index.html. Paths escaping the site
    root are answered with 404. With live reload enabled, HTML pages get
    the reload client injected.
    """
    root = request.app[site_root_key]
    source_path = _resolve_site_path(root, request.match_info["path"])
    if source_path is None:
        raise web.HTTPNotFound()

    if live_reload_key in request.app and source_path.suffix.lower() in HTML_SUFFIXES:
        markup = source_path.read_text(encoding="utf-8")
        return web.Response(text=inject_live_reload_script(markup), content_type="text/html")

    return web.FileResponse(source_path)


def _resolve_site_path(root: Path, path: str) -> Path | None:
    """Resolve a request path to a file under the site root.

    Args:
        root: Site root directory
        path: Request path without leading slash (e.g., "blog/post.html")

    Returns:
        Path to an existing file, or None
    """
    resolved_root = root.resolve()
    candidate = (resolved_root / path).resolve()

    if not candidate.is_relative_to(resolved_root):
        return None

    if candidate.is_dir():
        candidate = candidate / "index.html"

    if not candidate.is_file():
        return None
    return candidate


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application
    """
    app = web.Application()
    app[site_root_key] = config.site.root_dir

    if config.live_reload.enabled:
        manager = LiveReloadManager(
            config.site.root_dir,
            watch_patterns=config.live_reload.watch_patterns,
        )
        app[live_reload_key] = manager
        app.router.add_routes(create_live_reload_routes(manager))
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    # Catch-all, must be last
    app.router.add_get("/{path:.*}", serve_site_file)

    return app


async def _start_live_reload(app: web.Application) -> None:
    await app[live_reload_key].start()


async def _stop_live_reload(app: web.Application) -> None:
    await app[live_reload_key].stop()


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)
