"""
Tests for the command-line interface.

Sources come from local files or from a Manager wired to
httpx.MockTransport, so no test touches the network.
"""

import json

import httpx
import pytest

from domain_resolver import cli
from domain_resolver.cache import MemoryCache
from domain_resolver.config import ResolverConfig
from domain_resolver.http_client import HttpxClient
from domain_resolver.manager import Manager


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in (cli.ENV_PSL_URL, cli.ENV_RZD_URL, cli.ENV_CACHE_DIR, cli.ENV_CACHE_TTL):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def psl_file(tmp_path, psl_text):
    path = tmp_path / "public_suffix_list.dat"
    path.write_text(psl_text, encoding="utf-8")
    return str(path)


@pytest.fixture
def rzd_file(tmp_path, rzd_text):
    path = tmp_path / "tlds-alpha-by-domain.txt"
    path.write_text(rzd_text, encoding="utf-8")
    return str(path)


@pytest.fixture
def mock_manager(monkeypatch, psl_text, rzd_text):
    """Route create_manager to a memory-cached Manager over a mock transport."""
    requested: list = []
    config = ResolverConfig()
    bodies = {config.sources.psl_url: psl_text, config.sources.rzd_url: rzd_text}

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, text=bodies[str(request.url)])

    def create_manager(config, logger=None):
        http = HttpxClient(config.http, transport=httpx.MockTransport(handler))
        return Manager(MemoryCache(), http, config, logger)

    monkeypatch.setattr(cli, "create_manager", create_manager)
    return requested


class TestResolveCommandProperty:
    """Tests for the 'resolve' command."""

    @pytest.mark.parametrize("label", ["example", "shop", "a"])
    def test_json_output(self, capsys, psl_file: str, label: str) -> None:
        code = cli.main(["resolve", f"www.{label}.co.uk", "--psl-file", psl_file, "--json"])

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["public_suffix"] == "co.uk"
        assert data["section"] == "ICANN_DOMAINS"
        assert data["registrable_domain"] == f"{label}.co.uk"
        assert data["sub_domain"] == "www"

    def test_text_output(self, capsys, psl_file: str) -> None:
        code = cli.main(["resolve", "foo.blogspot.com", "--psl-file", psl_file])

        out = capsys.readouterr().out
        assert code == 0
        assert "Public suffix: blogspot.com (PRIVATE_DOMAINS)" in out
        assert "Registrable domain: foo.blogspot.com" in out

    def test_section_option(self, capsys, psl_file: str) -> None:
        cli.main(["resolve", "foo.blogspot.com", "--psl-file", psl_file, "--section", "icann", "--json"])

        assert json.loads(capsys.readouterr().out)["public_suffix"] == "com"

    def test_no_default_option(self, capsys, psl_file: str) -> None:
        code = cli.main(["resolve", "example.zzz", "--psl-file", psl_file, "--no-default", "--json"])

        assert code == 1
        assert json.loads(capsys.readouterr().out)["public_suffix"] is None

    def test_invalid_host(self, capsys, psl_file: str) -> None:
        code = cli.main(["resolve", "192.168.1.1", "--psl-file", psl_file, "--json"])

        assert code == 1
        assert json.loads(capsys.readouterr().out)["domain"] is None

    def test_missing_psl_file(self, capsys, tmp_path) -> None:
        code = cli.main(["resolve", "example.com", "--psl-file", str(tmp_path / "missing.dat")])

        assert code == 1
        assert "Error reading file" in capsys.readouterr().err

    def test_rules_from_manager(self, capsys, mock_manager: list) -> None:
        code = cli.main(["resolve", "a.b.ck", "--json"])

        assert code == 0
        assert json.loads(capsys.readouterr().out)["public_suffix"] == "b.ck"
        assert mock_manager == [ResolverConfig().sources.psl_url]

    def test_verbose_logs_to_stderr(self, capsys, mock_manager: list) -> None:
        cli.main(["resolve", "example.com", "--verbose"])

        assert "Cache miss" in capsys.readouterr().err


class TestTldCommandProperty:
    """Tests for the 'tld' command."""

    def test_known_tld(self, capsys, rzd_file: str) -> None:
        code = cli.main(["tld", "www.example.com", "--rzd-file", rzd_file])

        out = capsys.readouterr().out
        assert code == 0
        assert "Root zone version: 2023090400" in out
        assert "Public suffix: com (ICANN_DOMAINS)" in out

    def test_unknown_tld(self, capsys, rzd_file: str) -> None:
        code = cli.main(["tld", "example.zzz", "--rzd-file", rzd_file, "--json"])

        assert code == 1
        assert json.loads(capsys.readouterr().out)["public_suffix"] is None

    def test_tlds_from_manager(self, capsys, mock_manager: list) -> None:
        code = cli.main(["tld", "example.公司", "--json"])

        assert code == 0
        assert json.loads(capsys.readouterr().out)["public_suffix"] == "公司"


class TestRefreshCommandProperty:
    """Tests for the 'refresh' command."""

    def test_refresh_both_sources(self, capsys, mock_manager: list) -> None:
        code = cli.main(["refresh"])

        out = capsys.readouterr().out
        assert code == 0
        assert "Public suffix list: cached" in out
        assert "Root zone database: cached" in out
        assert len(mock_manager) == 2

    def test_refresh_rules_only(self, capsys, mock_manager: list) -> None:
        code = cli.main(["refresh", "--rules"])

        assert code == 0
        assert mock_manager == [ResolverConfig().sources.psl_url]

    def test_refresh_failure(self, capsys, monkeypatch) -> None:
        def create_manager(config, logger=None):
            http = HttpxClient(config.http, transport=httpx.MockTransport(lambda request: httpx.Response(500)))
            return Manager(MemoryCache(), http, config, logger)

        monkeypatch.setattr(cli, "create_manager", create_manager)

        code = cli.main(["refresh", "--tlds"])

        assert code == 1
        assert "Invalid response from URI" in capsys.readouterr().err


class TestConfigCommandProperty:
    """Tests for the 'config' command."""

    def test_init_show_validate(self, capsys, tmp_path) -> None:
        path = str(tmp_path / "config.json")

        assert cli.main(["config", "init", "--path", path]) == 0
        assert cli.main(["config", "show", "--path", path]) == 0
        assert cli.main(["config", "validate", "--path", path]) == 0

        out = capsys.readouterr().out
        assert f"Configuration created at: {path}" in out
        assert "PSL URL: https://publicsuffix.org/list/public_suffix_list.dat" in out
        assert "is valid" in out

    def test_init_does_not_overwrite(self, capsys, tmp_path) -> None:
        path = str(tmp_path / "config.json")
        cli.main(["config", "init", "--path", path])

        assert cli.main(["config", "init", "--path", path]) == 1
        assert cli.main(["config", "init", "--path", path, "--force"]) == 0

    def test_show_missing(self, capsys, tmp_path) -> None:
        assert cli.main(["config", "show", "--path", str(tmp_path / "missing.json")]) == 1
        assert "config init" in capsys.readouterr().out

    def test_validate_rejects_unknown_output_format(self, capsys, tmp_path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"logging": {"output_format": "xml"}}), encoding="utf-8")

        assert cli.main(["config", "validate", "--path", str(path)]) == 1
        assert "Invalid output_format" in capsys.readouterr().err

    def test_config_file_is_used(self, monkeypatch, tmp_path, psl_text: str) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"sources": {"psl_url": "https://mirror.example/psl.dat"}}), encoding="utf-8")
        requested: list = []

        def create_manager(config, logger=None):
            def handler(request: httpx.Request) -> httpx.Response:
                requested.append(str(request.url))
                return httpx.Response(200, text=psl_text)

            http = HttpxClient(config.http, transport=httpx.MockTransport(handler))
            return Manager(MemoryCache(), http, config, logger)

        monkeypatch.setattr(cli, "create_manager", create_manager)

        assert cli.main(["resolve", "example.com", "--config", str(path)]) == 0

        assert requested == ["https://mirror.example/psl.dat"]


class TestMainProperty:
    """Tests for the entry point."""

    def test_no_command_prints_help(self, capsys) -> None:
        assert cli.main([]) == 0
        assert "usage: domain-resolver" in capsys.readouterr().out

    def test_version(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--version"])

        assert exc_info.value.code == 0
        assert "0.1.0" in capsys.readouterr().out


class TestHttpClientLifecycleProperty:
    """Tests for releasing the HTTP client after a command."""

    @pytest.mark.parametrize("argv", [
        ["resolve", "example.com"],
        ["tld", "example.com"],
        ["refresh"],
        ["refresh", "--tlds"],
    ])
    def test_commands_close_the_http_client(self, capsys, monkeypatch, psl_text, rzd_text, argv) -> None:
        config = ResolverConfig()
        bodies = {config.sources.psl_url: psl_text, config.sources.rzd_url: rzd_text}
        closed: list = []

        class TrackingClient(HttpxClient):
            def close(self) -> None:
                closed.append(True)
                super().close()

        def create_manager(config, logger=None):
            transport = httpx.MockTransport(lambda request: httpx.Response(200, text=bodies[str(request.url)]))
            return Manager(MemoryCache(), TrackingClient(config.http, transport=transport), config, logger)

        monkeypatch.setattr(cli, "create_manager", create_manager)

        assert cli.main(argv) == 0
        assert closed == [True]
