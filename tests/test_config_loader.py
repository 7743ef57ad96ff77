import pytest

pytest.importorskip("yaml")

from tagmetrics.core.config_loader import CONFIG_ENV_VAR, get_base_dir, load_config


def test_load_config_adds_logging_defaults(tmp_path):
    config = load_config(tmp_path / "config.yaml")
    logging_cfg = config.get("logging")

    assert logging_cfg is not None
    assert logging_cfg["level"] == "INFO"
    assert logging_cfg["file"] == "logs/tagmetrics.log"
    assert logging_cfg["max_bytes"] == 10 * 1024 * 1024
    assert logging_cfg["backup_count"] == 5
    assert config["metrics"] == []


def test_local_override_is_merged(tmp_path):
    (tmp_path / "config.yaml").write_text(
        "logging:\n  level: WARNING\n  file: base.log\nmetrics:\n  - {name: vus, type: gauge}\n",
        encoding="utf-8",
    )
    (tmp_path / "config.local.yaml").write_text("logging:\n  level: DEBUG\n", encoding="utf-8")

    config = load_config(tmp_path / "config.yaml")

    assert config["logging"]["level"] == "DEBUG"
    assert config["logging"]["file"] == "base.log"
    assert config["metrics"] == [{"name": "vus", "type": "gauge"}]


def test_env_var_selects_config_file(tmp_path, monkeypatch):
    path = tmp_path / "alt.yaml"
    path.write_text("logging:\n  level: ERROR\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    assert load_config()["logging"]["level"] == "ERROR"


def test_shipped_config_declares_metrics(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    config = load_config()
    names = [m["name"] for m in config["metrics"]]
    assert "http_req_duration{status:200}" in names


def test_get_base_dir_points_to_project_root():
    base_dir = get_base_dir()
    assert (base_dir / "tagmetrics").is_dir()
