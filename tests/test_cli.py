import sys
import types

import pytest

from quizdrill import cli


@pytest.fixture(autouse=True)
def fixed_version(monkeypatch):
    def fake_version(name: str) -> str:
        assert name == "quizdrill"
        return "0.0-test"

    monkeypatch.setattr(cli.metadata, "version", fake_version)


def test_version_command_handles_missing_package(monkeypatch, capsys):
    def missing(name: str) -> str:
        raise cli.metadata.PackageNotFoundError(name)

    monkeypatch.setattr(cli.metadata, "version", missing)

    assert cli.main(["version"]) == 0
    assert capsys.readouterr().out.strip() == "unknown"


@pytest.mark.parametrize("flag", ["version", "--version", "-V"])
def test_version_variants(flag, capsys):
    assert cli.main([flag]) == 0
    assert capsys.readouterr().out.strip() == "0.0-test"


def test_no_args_prints_usage_and_returns_error(capsys):
    code = cli.main([])

    out = capsys.readouterr().out
    assert code == 2
    assert "Usage: drill" in out
    assert "Available commands:" in out


def test_list_outputs_command_table(capsys):
    assert cli.main(["list"]) == 0

    out = capsys.readouterr().out
    for name in ("init", "modes", "play", "check"):
        assert name in out
    assert "(interactive)" in out


def test_help_variants(capsys):
    assert cli.main(["--help"]) == 0
    assert "Usage: drill" in capsys.readouterr().out

    assert cli.main(["help", "play"]) == 0
    assert "Run `drill play --help`" in capsys.readouterr().out

    assert cli.main(["help", "nope"]) == 2
    assert "Unknown command 'nope'" in capsys.readouterr().err


def test_unknown_command_errors(capsys):
    code = cli.main(["bogus"])

    captured = capsys.readouterr()
    assert code == 2
    assert "Available commands:" in captured.err


def test_dispatch_passes_argv_and_restores_sys_argv(monkeypatch):
    before = list(sys.argv)
    captured = {}

    def fake_import(module_name: str):
        assert module_name == "quizdrill.play.cli"

        def check_main(argv):
            captured["argv"] = list(argv)
            captured["sys_argv"] = list(sys.argv)
            return 7

        return types.SimpleNamespace(check_main=check_main)

    monkeypatch.setattr(cli, "import_module", fake_import)

    assert cli.main(["check", "--data", "x.quiz"]) == 7
    assert captured["argv"] == ["--data", "x.quiz"]
    assert captured["sys_argv"] == ["drill check", "--data", "x.quiz"]
    assert sys.argv == before


def test_dispatch_supports_main_without_parameters(monkeypatch):
    called = []

    def fake_import(module_name: str):
        return types.SimpleNamespace(main=lambda: called.append(sys.argv[0]))

    monkeypatch.setattr(cli, "import_module", fake_import)

    assert cli.main(["init"]) == 0
    assert called == ["drill init"]


@pytest.mark.parametrize(
    ("exit_value", "expected"),
    [(5, 5), (None, 0), ("boom", 1)],
)
def test_dispatch_normalizes_system_exit(
    monkeypatch, capsys, exit_value, expected
):
    def fake_import(module_name: str):
        def main(argv):
            raise SystemExit(exit_value)

        return types.SimpleNamespace(main=main)

    monkeypatch.setattr(cli, "import_module", fake_import)

    assert cli.main(["play"]) == expected
    if exit_value == "boom":
        assert capsys.readouterr().err.strip() == "boom"


def test_drill_runs_init_end_to_end(tmp_path, capsys):
    target = tmp_path / "workspace"

    code = cli.main(["init", "--path", str(target)])

    assert code == 0
    assert "Workspace ready" in capsys.readouterr().out
    assert (target / "config").is_dir()


def test_drill_runs_check_end_to_end(workspace, capsys):
    data = workspace.quiz("k:v;")

    assert cli.main(["check", "--data", str(data)]) == 0
    assert "1 record(s)" in capsys.readouterr().out


def test_drill_play_config_init(tmp_path, capsys):
    destination = tmp_path / "quizdrill.toml"

    code = cli.main(["play", "config", "init", "--path", str(destination)])

    assert code == 0
    assert destination.exists()
    assert str(destination) in capsys.readouterr().out
