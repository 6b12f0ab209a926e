from __future__ import annotations

import httpx
from typer.testing import CliRunner

from timetraveller.app import AppState, app
from timetraveller.config import ConfigRepository, LookupSettings, SelectionMode
from timetraveller.orchestrator import LookupOrchestrator


def install_state(monkeypatch, fake_index, cdx):
    def route(request: httpx.Request) -> httpx.Response:
        target = request.url.params["url"]
        if "missing" in target:
            return httpx.Response(200, text=cdx.body())
        if "broken" in target:
            return httpx.Response(400, text="bad request")
        return httpx.Response(
            200,
            text=cdx.body(cdx.row("20000101000000", target), cdx.row("20200101000000", target)),
        )

    index = fake_index(route)
    captured: dict[str, LookupSettings] = {}

    def factory(settings, renderer):
        captured["settings"] = settings
        return LookupOrchestrator(settings, renderer=renderer, client=index.client(), sleeper=lambda _s: None)

    state = AppState(repository=ConfigRepository(), orchestrator_factory=factory)
    monkeypatch.setattr("timetraveller.app.build_state", lambda verbose: state)
    return index, captured


def test_lookup_prints_each_outcome(monkeypatch, fake_index, cdx) -> None:
    index, _ = install_state(monkeypatch, fake_index, cdx)
    result = CliRunner().invoke(
        app, ["lookup", "http://example.com", "http://missing.example", "http://broken.example"]
    )

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert (
        "[+] http://example.com - Snapshots: 2 - Oldest: "
        "http://web.archive.org/web/20000101000000/http://example.com"
    ) in lines
    assert "[-] http://missing.example" in lines
    assert any(line.startswith("[!] http://broken.example - API request failed.") for line in lines)
    assert index.calls == 3


def test_lookup_reads_stdin_and_applies_flags(monkeypatch, fake_index, cdx, tmp_path) -> None:
    _, captured = install_state(monkeypatch, fake_index, cdx)
    output = tmp_path / "found.txt"
    result = CliRunner().invoke(
        app,
        [
            "lookup",
            "--latest",
            "--no-err",
            "-t", "3",
            "--timeout", "2500",
            "-d", "100",
            "-r", "1",
            "--retry-delay", "200",
            "-o", str(output),
        ],
        input="http://example.com\n\nhttp://missing.example\n",
    )

    assert result.exit_code == 0, result.output
    settings = captured["settings"]
    assert settings.mode is SelectionMode.LATEST
    assert settings.hide_failures is True
    assert (settings.workers, settings.request_timeout, settings.delay) == (3, 2.5, 0.1)
    assert (settings.retry_attempts, settings.retry_delay) == (1, 0.2)
    lines = result.stdout.splitlines()
    assert (
        "[+] http://example.com - Snapshots: 2 - Latest: "
        "http://web.archive.org/web/20200101000000/http://example.com"
    ) in lines
    assert not any(line.startswith("[-]") for line in lines)
    assert output.read_text(encoding="utf-8") == (
        "http://web.archive.org/web/20200101000000/http://example.com\n"
    )


def test_lookup_without_urls_exits_with_usage(monkeypatch, fake_index, cdx) -> None:
    index, _ = install_state(monkeypatch, fake_index, cdx)
    result = CliRunner().invoke(app, ["lookup"])
    assert result.exit_code == 1
    assert index.calls == 0


def test_lookup_uses_settings_file(monkeypatch, fake_index, cdx, tmp_path) -> None:
    _, captured = install_state(monkeypatch, fake_index, cdx)
    config = tmp_path / "custom.yaml"
    config.write_text("workers: 7\nmode: latest\n", encoding="utf-8")

    result = CliRunner().invoke(app, ["lookup", "--config", str(config), "-t", "2", "http://example.com"])

    assert result.exit_code == 0, result.output
    assert captured["settings"].workers == 2
    assert captured["settings"].mode is SelectionMode.LATEST


def test_lookup_rejects_invalid_settings_file(monkeypatch, fake_index, cdx, tmp_path) -> None:
    install_state(monkeypatch, fake_index, cdx)
    config = tmp_path / "bad.yaml"
    config.write_text("workers: -1\n", encoding="utf-8")
    result = CliRunner().invoke(app, ["lookup", "--config", str(config), "http://example.com"])
    assert result.exit_code == 2


def test_init_config_writes_defaults(monkeypatch, fake_index, cdx, isolated_home) -> None:
    install_state(monkeypatch, fake_index, cdx)
    runner = CliRunner()

    first = runner.invoke(app, ["init-config"])
    second = runner.invoke(app, ["init-config"])

    assert first.exit_code == 0, first.output
    assert (isolated_home / "timetraveller.yaml").exists()
    assert second.exit_code == 1
    assert ConfigRepository().load_settings() == LookupSettings()


def test_logs_command_tails_application_log(monkeypatch, fake_index, cdx, isolated_home) -> None:
    install_state(monkeypatch, fake_index, cdx)
    log_dir = isolated_home / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    (log_dir / "timetraveller.log").write_text("one\ntwo\nthree\n", encoding="utf-8")

    result = CliRunner().invoke(app, ["logs", "-n", "2"])

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines()[-2:] == ["two", "three"]
