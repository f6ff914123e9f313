import pytest

from regionmigrate.config import MigrationConfig, load_config
from regionmigrate.errors import ConfigError
from regionmigrate.models import Action


def test_defaults():
    config = load_config(environ={})
    assert config.log_files is Action.IGNORE
    assert config.extra_files is Action.IGNORE
    assert config.service_url == "http://localhost:60010/"
    assert config.journal_dir is None


def test_yaml_file_then_environment(tmp_path):
    path = tmp_path / "migrate.yaml"
    path.write_text(
        "root_dir: /data/hbase\n"
        "log_files: delete\n"
        "extra_files: prompt\n"
        "probe_timeout: 5\n"
    )
    config = load_config(path, environ={"REGIONMIGRATE_ROOT": "/srv/hbase"})
    assert config.root_dir == "/srv/hbase"
    assert config.log_files is Action.DELETE
    assert config.extra_files is Action.PROMPT
    assert config.probe_timeout == 5.0


def test_none_values_do_not_override():
    config = MigrationConfig(root_dir="/data")
    config.update({"root_dir": None, "log_files": "abort"})
    assert config.root_dir == "/data"
    assert config.log_files is Action.ABORT


@pytest.mark.parametrize("content", [
    "unknown_key: 1\n",
    "log_files: retry\n",
    "probe_timeout: soon\n",
    "- just\n- a list\n",
])
def test_bad_config_files(tmp_path, content):
    path = tmp_path / "migrate.yaml"
    path.write_text(content)
    with pytest.raises(ConfigError):
        load_config(path, environ={})


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.yaml", environ={})
