"""WebSocket-based live reload for the development server.

Monitors the site directory for changes and notifies connected pages via
WebSocket so they reload and re-run population.
"""

import asyncio
import json
import logging
import weakref
from pathlib import Path

from aiohttp import WSMsgType, web
from watchfiles import Change, awatch

logger = logging.getLogger(__name__)

DEFAULT_WATCH_PATTERNS = ["**/*.html", "**/*.json", "**/*.css", "**/*.js"]

LIVE_RELOAD_PATH = "/ws/live-reload"

# Reloading re-runs population, so data file edits show up too
LIVE_RELOAD_SCRIPT = f"""<script data-folio-live-reload>
(() => {{
  const scheme = location.protocol === "https:" ? "wss" : "ws";
  const socket = new WebSocket(`${{scheme}}://${{location.host}}{LIVE_RELOAD_PATH}`);
  socket.addEventListener("message", (event) => {{
    const message = JSON.parse(event.data);
    if (message.type === "reload") {{
      location.reload();
    }}
  }});
}})();
</script>"""


def inject_live_reload_script(markup: str) -> str:
    """Insert the live reload client before the closing </body> tag.

    Args:
        markup: Page HTML as stored in the site directory

    Returns:
        HTML with the client script, appended at the end when there is no body tag
    """
    index = markup.lower().rfind("</body>")
    if index == -1:
        return markup + LIVE_RELOAD_SCRIPT
    return markup[:index] + LIVE_RELOAD_SCRIPT + markup[index:]


class LiveReloadManager:
    """Manages WebSocket connections and file watching for live reload."""

    def __init__(self, site_root: Path, watch_patterns: list[str] | None = None) -> None:
        """Initialize the live reload manager.

        Args:
            site_root: Directory to watch for changes
            watch_patterns: Glob patterns to watch (default: site markup, data and assets)
        """
        self._site_root = site_root
        self._watch_patterns = watch_patterns or DEFAULT_WATCH_PATTERNS
        self._connections: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._watch_task: asyncio.Task[None] | None = None

    @property
    def connection_count(self) -> int:
        """Number of pages currently listening for reloads."""
        return len(self._connections)

    async def start(self) -> None:
        """Start the file watcher."""
        if self._watch_task is not None:
            return
        self._watch_task = asyncio.create_task(self._watch_files())

    async def stop(self) -> None:
        """Stop the file watcher and close all connections."""
        if self._watch_task is not None:
            self._watch_task.cancel()
            try:
                await self._watch_task
            except asyncio.CancelledError:
                pass
            self._watch_task = None

        for ws in list(self._connections):
            await ws.close()

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        """Handle WebSocket connection for live reload."""
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        self._connections.add(ws)

        try:
            async for msg in ws:
                if msg.type == WSMsgType.ERROR:
                    break
        finally:
            self._connections.discard(ws)

        return ws

    async def _watch_files(self) -> None:
        """Watch for file changes and broadcast reload events."""
        async for changes in awatch(self._site_root):
            for change_type, path_str in changes:
                if change_type == Change.deleted:
                    continue

                path = Path(path_str)
                if not self.matches_patterns(path):
                    continue

                site_path = self.to_site_path(path)
                logger.info(f"Site file changed: {site_path}")
                await self.broadcast_reload(site_path)

    def matches_patterns(self, path: Path) -> bool:
        """Check if a path under the site root matches any watch pattern."""
        try:
            relative = path.relative_to(self._site_root)
        except ValueError:
            return False

        # Path.match anchors "**/" to at least one directory level
        for pattern in self._watch_patterns:
            if relative.match(pattern) or relative.match(pattern.removeprefix("**/")):
                return True
        return False

    def to_site_path(self, file_path: Path) -> str:
        """Convert a file system path to the URL path it is served at.

        Args:
            file_path: Absolute file path under the site root

        Returns:
            URL path (e.g., "/about.html", "/data/posts.json")
        """
        relative = file_path.relative_to(self._site_root)
        return f"/{relative.as_posix()}"

    async def broadcast_reload(self, path: str) -> None:
        """Tell every connected page that a site file changed."""
        if not self._connections:
            return

        message = json.dumps({"type": "reload", "path": path})

        for ws in list(self._connections):
            if ws.closed:
                continue
            try:
                await ws.send_str(message)
            except ConnectionResetError:
                # Client disconnected mid-send, will be cleaned up by WeakSet
                pass


def create_live_reload_routes(manager: LiveReloadManager) -> list[web.RouteDef]:
    """Create routes for live reload WebSocket."""
    return [web.get(LIVE_RELOAD_PATH, manager.handle_websocket)]
