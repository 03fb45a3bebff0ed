"""Application keys for type-safe app configuration access."""

from pathlib import Path

from aiohttp import web

from folio.live.reload import LiveReloadManager

site_root_key = web.AppKey("site_root", Path)
live_reload_key = web.AppKey("live_reload", LiveReloadManager)
