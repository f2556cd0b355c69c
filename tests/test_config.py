import pytest

from teamctl.core.config import DEFAULT_SETTINGS, load_settings
from teamctl.core.errors import SettingsError


def test_defaults_without_file(tmp_path):
    assert load_settings(tmp_path / "missing.yaml", environ={}) == DEFAULT_SETTINGS


def test_file_values(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("namespace: team-a\nbatch_mode: true\nupdate_retries: 3\nunknown: 1\n")

    settings = load_settings(path, environ={})

    assert settings["namespace"] == "team-a"
    assert settings["batch_mode"] is True
    assert settings["update_retries"] == 3
    assert "unknown" not in settings


def test_environment_overrides_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("namespace: team-a\n")

    settings = load_settings(path, environ={
        "TEAMCTL_NAMESPACE": "team-b",
        "TEAMCTL_CONTEXT": "prod",
        "TEAMCTL_BATCH_MODE": "yes",
    })

    assert settings["namespace"] == "team-b"
    assert settings["context"] == "prod"
    assert settings["batch_mode"] is True


def test_empty_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_settings(path, environ={}) == DEFAULT_SETTINGS


@pytest.mark.parametrize("content, message", [
    ("namespace: [unclosed\n", "Could not parse"),
    ("- a\n- b\n", "must contain a mapping"),
    ("batch_mode: sometimes\n", "batch_mode"),
    ("update_retries: 0\n", "update_retries"),
])
def test_invalid_settings(tmp_path, content, message):
    path = tmp_path / "config.yaml"
    path.write_text(content)
    with pytest.raises(SettingsError, match=message):
        load_settings(path, environ={})
