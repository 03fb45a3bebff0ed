"""Tests for CLI commands."""

from pathlib import Path
from typing import Any
from unittest.mock import patch

import httpx
import pytest
from click.testing import CliRunner
from folio.cli import cli

from tests.sample_site import HOME_HTML, SITE_URL, site_files, site_transport


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Config file keeping preferences inside tmp_path."""
    path = tmp_path / "folio.toml"
    path.write_text('[preferences]\npath = "prefs.json"\n\n[resources]\ntimeout = 1\n')
    return path


def _mock_site(**overrides: object) -> Any:
    """Patch the CLI's HTTP client to serve the sample site."""
    real_client = httpx.AsyncClient
    transport = site_transport(site_files(**overrides))

    def factory(**kwargs: Any) -> httpx.AsyncClient:
        return real_client(transport=transport, **kwargs)

    return patch("folio.cli.httpx.AsyncClient", side_effect=factory)


class TestRenderCommand:
    """Tests for the render command."""

    def test__served_site__prints_populated_page(self, config_file: Path) -> None:
        """Render a home page fetched over HTTP."""
        runner = CliRunner()
        with _mock_site():
            result = runner.invoke(
                cli,
                ["render", f"{SITE_URL}index.html", "--prefers-dark", "-c", str(config_file)],
            )

        assert result.exit_code == 0
        assert "<h1>Jane Doe</h1>" in result.output
        assert 'data-theme="dark"' in result.output
        assert "data-reveal" in result.output

    def test__output_option__writes_file(self, tmp_path: Path, config_file: Path) -> None:
        """Render to a file and report the page identity."""
        output = tmp_path / "out.html"

        runner = CliRunner()
        with _mock_site():
            result = runner.invoke(
                cli,
                [
                    "render",
                    f"{SITE_URL}blog.html",
                    "-o",
                    str(output),
                    "--no-effects",
                    "-c",
                    str(config_file),
                ],
            )

        assert result.exit_code == 0
        assert "Wrote blog page to" in result.output
        html = output.read_text()
        assert "Newest" in html
        assert "data-reveal" not in html

    def test__invalid_portfolio__exits_with_error(self, config_file: Path) -> None:
        """A failed page still prints the banner and exits 1."""
        runner = CliRunner()
        with _mock_site(**{"/site/my information.json": b"not json"}):
            result = runner.invoke(
                cli, ["render", f"{SITE_URL}about.html", "-c", str(config_file)]
            )

        assert result.exit_code == 1
        assert "Error Loading Data" in result.output
        assert "Error: Failed to load my information.json" in result.output

    def test__local_file_page__suggests_serve(self, tmp_path: Path, config_file: Path) -> None:
        """Pages opened from disk cannot load data and get the serve hint."""
        page = tmp_path / "index.html"
        page.write_text(HOME_HTML)

        runner = CliRunner()
        result = runner.invoke(cli, ["render", page.as_uri(), "-c", str(config_file)])

        assert result.exit_code == 1
        assert "folio serve" in result.output

    def test__relative_url__fails(self, config_file: Path) -> None:
        """Page URLs must be absolute."""
        runner = CliRunner()
        result = runner.invoke(cli, ["render", "index.html", "-c", str(config_file)])

        assert result.exit_code == 1
        assert "must be absolute" in result.output

    def test__unreachable_page__fails(self, config_file: Path) -> None:
        """A page that cannot be fetched is reported."""
        runner = CliRunner()
        with _mock_site():
            result = runner.invoke(
                cli, ["render", f"{SITE_URL}missing.html", "-c", str(config_file)]
            )

        assert result.exit_code == 1
        assert "Could not fetch page" in result.output


class TestCandidatesCommand:
    """Tests for the candidates command."""

    def test__prints_numbered_candidates(self) -> None:
        """All eight candidates are listed in order."""
        runner = CliRunner()
        result = runner.invoke(
            cli, ["candidates", "my information.json", "--base-url", "https://jane.example/site/"]
        )

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert len(lines) == 8
        assert lines[0] == "1. my information.json"
        assert lines[3] == "4. https://jane.example/site/my information.json"
        assert lines[4] == "5. my%20information.json"


class TestThemeCommand:
    """Tests for the theme command."""

    def test__set_show_clear(self, tmp_path: Path, config_file: Path) -> None:
        """Store, read back and clear the preference."""
        runner = CliRunner()

        result = runner.invoke(cli, ["theme", "-c", str(config_file)])
        assert result.output.strip() == "Theme: system preference"

        result = runner.invoke(cli, ["theme", "dark", "-c", str(config_file)])
        assert result.exit_code == 0
        assert "Theme set to dark" in result.output
        assert (tmp_path / "prefs.json").exists()

        result = runner.invoke(cli, ["theme", "-c", str(config_file)])
        assert result.output.strip() == "Theme: dark"

        result = runner.invoke(cli, ["theme", "--clear", "-c", str(config_file)])
        assert "cleared" in result.output
        assert not (tmp_path / "prefs.json").exists()

    def test__invalid_value__rejected(self, config_file: Path) -> None:
        """Only light and dark are accepted."""
        runner = CliRunner()
        result = runner.invoke(cli, ["theme", "sepia", "-c", str(config_file)])

        assert result.exit_code != 0


class TestServeCommand:
    """Tests for the serve command."""

    def test__missing_site_directory__fails(self, config_file: Path) -> None:
        """Serving requires the site directory."""
        runner = CliRunner()
        result = runner.invoke(cli, ["serve", "-c", str(config_file)])

        assert result.exit_code == 1
        assert "Site directory not found" in result.output

    def test__valid_config__runs_server(self, tmp_path: Path, config_file: Path) -> None:
        """Overrides reach the server configuration."""
        (tmp_path / "site").mkdir()

        runner = CliRunner()
        with patch("folio.server.run_server") as run_server:
            result = runner.invoke(
                cli, ["serve", "-c", str(config_file), "--port", "9100", "--no-live-reload"]
            )

        assert result.exit_code == 0
        assert "Starting server on 127.0.0.1:9100" in result.output
        assert "Live reload: disabled" in result.output
        config = run_server.call_args.args[0]
        assert config.server.port == 9100
        assert config.live_reload.enabled is False
