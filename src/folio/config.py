"""Configuration management for Folio.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "folio.toml"

DEFAULT_PORTFOLIO_PATH = "my information.json"
DEFAULT_POSTS_PATH = "data/posts.json"
DEFAULT_TAGLINE = "Software Engineer & Problem Solver"


@dataclass
class ServerConfig:
    """Development server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class SiteConfig:
    """Static site configuration."""

    root_dir: Path = field(default_factory=lambda: Path("site"))
    tagline: str = DEFAULT_TAGLINE
    blog_index: str = "blog.html"
    post_page: str = "post.html"


@dataclass
class ResourcesConfig:
    """Locations of the site's JSON documents."""

    portfolio: str = DEFAULT_PORTFOLIO_PATH
    posts: str = DEFAULT_POSTS_PATH
    timeout: float = 10.0


@dataclass
class BlogConfig:
    """Blog rendering configuration."""

    preview_count: int = 3


@dataclass
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = True
    watch_patterns: list[str] | None = None


@dataclass
class PreferencesConfig:
    """Persisted viewer preferences."""

    path: Path = field(default_factory=lambda: Path(".folio") / "preferences.json")


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    site: SiteConfig
    resources: ResourcesConfig
    blog: BlogConfig
    live_reload: LiveReloadConfig
    preferences: PreferencesConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for folio.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        return cls(
            server=ServerConfig(),
            site=SiteConfig(),
            resources=ResourcesConfig(),
            blog=BlogConfig(),
            live_reload=LiveReloadConfig(),
            preferences=PreferencesConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            site=cls._parse_site(data.get("site"), config_dir),
            resources=cls._parse_resources(data.get("resources")),
            blog=cls._parse_blog(data.get("blog")),
            live_reload=cls._parse_live_reload(data.get("live_reload")),
            preferences=cls._parse_preferences(data.get("preferences"), config_dir),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8000)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_site(cls, data: object, config_dir: Path) -> SiteConfig:
        """Parse site configuration section.

        Args:
            data: Raw site section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            SiteConfig instance
        """
        if data is None:
            return SiteConfig(root_dir=config_dir / "site")

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        root_dir = data.get("root_dir", "site")
        if not isinstance(root_dir, str):
            raise ValueError("site.root_dir must be a string")

        tagline = data.get("tagline", DEFAULT_TAGLINE)
        if not isinstance(tagline, str):
            raise ValueError("site.tagline must be a string")

        blog_index = data.get("blog_index", "blog.html")
        if not isinstance(blog_index, str):
            raise ValueError("site.blog_index must be a string")

        post_page = data.get("post_page", "post.html")
        if not isinstance(post_page, str):
            raise ValueError("site.post_page must be a string")

        return SiteConfig(
            root_dir=config_dir / root_dir,
            tagline=tagline,
            blog_index=blog_index,
            post_page=post_page,
        )

    @classmethod
    def _parse_resources(cls, data: object) -> ResourcesConfig:
        if data is None:
            return ResourcesConfig()

        if not isinstance(data, dict):
            raise ValueError("resources section must be a dictionary")

        portfolio = data.get("portfolio", DEFAULT_PORTFOLIO_PATH)
        if not isinstance(portfolio, str) or not portfolio:
            raise ValueError("resources.portfolio must be a non-empty string")

        posts = data.get("posts", DEFAULT_POSTS_PATH)
        if not isinstance(posts, str) or not posts:
            raise ValueError("resources.posts must be a non-empty string")

        timeout = data.get("timeout", 10.0)
        if not isinstance(timeout, (int, float)) or isinstance(timeout, bool):
            raise ValueError("resources.timeout must be a number")
        if timeout <= 0:
            raise ValueError("resources.timeout must be positive")

        return ResourcesConfig(portfolio=portfolio, posts=posts, timeout=float(timeout))

    @classmethod
    def _parse_blog(cls, data: object) -> BlogConfig:
        if data is None:
            return BlogConfig()

        if not isinstance(data, dict):
            raise ValueError("blog section must be a dictionary")

        preview_count = data.get("preview_count", 3)
        if not isinstance(preview_count, int) or isinstance(preview_count, bool):
            raise ValueError("blog.preview_count must be an integer")
        if preview_count < 0:
            raise ValueError("blog.preview_count must not be negative")

        return BlogConfig(preview_count=preview_count)

    @classmethod
    def _parse_live_reload(cls, data: object) -> LiveReloadConfig:
        """Parse live_reload configuration section.

        Args:
            data: Raw live_reload section data

        Returns:
            LiveReloadConfig instance
        """
        if data is None:
            return LiveReloadConfig()

        if not isinstance(data, dict):
            raise ValueError("live_reload section must be a dictionary")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("live_reload.enabled must be a boolean")

        watch_patterns_raw = data.get("watch_patterns")
        watch_patterns: list[str] | None = None
        if watch_patterns_raw is not None:
            if not isinstance(watch_patterns_raw, list):
                raise ValueError("live_reload.watch_patterns must be a list")
            watch_patterns = []
            for item in watch_patterns_raw:
                if not isinstance(item, str):
                    raise ValueError("live_reload.watch_patterns items must be strings")
                watch_patterns.append(item)

        return LiveReloadConfig(enabled=enabled, watch_patterns=watch_patterns)

    @classmethod
    def _parse_preferences(cls, data: object, config_dir: Path) -> PreferencesConfig:
        if data is None:
            return PreferencesConfig(path=config_dir / ".folio" / "preferences.json")

        if not isinstance(data, dict):
            raise ValueError("preferences section must be a dictionary")

        path = data.get("path", ".folio/preferences.json")
        if not isinstance(path, str):
            raise ValueError("preferences.path must be a string")

        return PreferencesConfig(path=config_dir / path)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        root_dir: Path | None = None,
        timeout: float | None = None,
        live_reload_enabled: bool | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            root_dir: Override site.root_dir
            timeout: Override resources.timeout
            live_reload_enabled: Override live_reload.enabled

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        site = self.site
        if root_dir is not None:
            site = replace(self.site, root_dir=root_dir)

        resources = self.resources
        if timeout is not None:
            resources = replace(self.resources, timeout=timeout)

        live_reload = self.live_reload
        if live_reload_enabled is not None:
            live_reload = replace(self.live_reload, enabled=live_reload_enabled)

        return replace(
            self,
            server=server,
            site=site,
            resources=resources,
            live_reload=live_reload,
        )
