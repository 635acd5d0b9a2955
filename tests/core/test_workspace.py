from __future__ import annotations

import pytest

from quizdrill.core import workspace


def test_ensure_workspace_creates_directories(tmp_path, monkeypatch):
    root = tmp_path / "data"
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    layout = workspace.ensure_workspace()

    assert layout.home == root.resolve()
    assert set(layout.directories) == {"config", "logs"}
    for name, path in layout.items():
        assert path.is_dir()
        assert layout.created[name] is True
    assert layout.created["home"] is True


def test_ensure_workspace_is_idempotent(tmp_path):
    root = tmp_path / "existing"

    workspace.ensure_workspace(path=root)
    second = workspace.ensure_workspace(path=root)

    assert all(not created for created in second.created.values())


def test_explicit_path_beats_environment(tmp_path, monkeypatch):
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(tmp_path / "env"))
    custom = tmp_path / "custom-root"

    layout = workspace.ensure_workspace(path=custom)

    assert layout.home == custom.resolve()
    assert not (tmp_path / "env").exists()


def test_env_mapping_is_used_when_given(tmp_path):
    root = tmp_path / "mapped"

    layout = workspace.ensure_workspace(
        env={workspace.WORKSPACE_ENV: f"  {root}  "}
    )

    assert layout.home == root.resolve()


def test_describe_layout_does_not_create(tmp_path, monkeypatch):
    root = tmp_path / "layout"
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    mapping = workspace.describe_layout()

    assert mapping["home"] == root.resolve()
    assert mapping["logs"] == root.resolve() / "logs"
    assert not root.exists()


def test_workspace_that_is_a_file_errors(tmp_path):
    root = tmp_path / "file"
    root.write_text("not a dir", encoding="utf-8")

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace(path=root)


def test_subdirectory_that_is_a_file_errors(tmp_path):
    root = tmp_path / "ws"
    root.mkdir()
    (root / "logs").write_text("oops", encoding="utf-8")

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace(path=root)


def test_path_for_unknown_key_errors(tmp_path):
    layout = workspace.ensure_workspace(path=tmp_path / "ws", create=False)

    with pytest.raises(KeyError):
        layout.path_for("unknown")
