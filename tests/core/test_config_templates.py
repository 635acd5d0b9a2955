from __future__ import annotations

import tomllib

import pytest

from quizdrill.core import config_templates


def test_play_template_is_valid_toml():
    template = config_templates.get_template("play")

    parsed = tomllib.loads(template.read_text())

    assert parsed["session"]["count"] == 0
    assert parsed["session"]["plain"] is False
    assert parsed["logging"]["level"] == "INFO"


def test_iter_templates_lists_play():
    names = [template.name for template in config_templates.iter_templates()]

    assert names == ["play"]


def test_unknown_template_errors():
    with pytest.raises(config_templates.ConfigTemplateError):
        config_templates.get_template("nope")


def test_write_refuses_to_clobber(tmp_path):
    template = config_templates.get_template("play")
    target = tmp_path / "quizdrill.toml"

    template.write(target)
    with pytest.raises(config_templates.ConfigTemplateError):
        template.write(target)
    template.write(target, overwrite=True)

    assert target.read_text(encoding="utf-8") == template.read_text()
