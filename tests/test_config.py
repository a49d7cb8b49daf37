import pytest

from envboot.config import BootstrapConfig, load_config
from envboot.errors import ConfigError


def test_defaults():
    cfg = BootstrapConfig()
    assert cfg.profile == "default"
    assert cfg.profiles_dir is None
    assert cfg.profile_url is None
    assert cfg.dry_run is False
    assert cfg.timeout is None
    assert cfg.winget_source is None
    assert cfg.brew_prefix is None


def test_missing_default_file_is_empty_config(tmp_path):
    cfg = load_config(str(tmp_path / "config.yaml"))
    assert cfg.raw == {}


def test_missing_explicit_file_is_an_error(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "config.yaml"), required=True)


def test_reads_values(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text(
        "profile: work\n"
        "dry_run: true\n"
        "timeout: 600\n"
        "winget:\n  source: winget\n"
        "brew:\n  prefix: /opt/homebrew\n",
        encoding="utf-8",
    )
    cfg = load_config(str(p))
    assert cfg.profile == "work"
    assert cfg.dry_run is True
    assert cfg.timeout == 600.0
    assert cfg.winget_source == "winget"
    assert cfg.brew_prefix == "/opt/homebrew"


def test_rejects_non_yaml_suffix(tmp_path):
    p = tmp_path / "config.toml"
    p.write_text("profile = 'x'\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(p))


@pytest.mark.parametrize("text", ["- a\n- b\n", "winget: [source]\n"])
def test_rejects_bad_shapes(tmp_path, text):
    p = tmp_path / "config.yaml"
    p.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(p))


@pytest.mark.parametrize("value", ['"false"', "0", "yes please"])
def test_dry_run_must_be_a_boolean(tmp_path, value):
    p = tmp_path / "config.yaml"
    p.write_text(f"dry_run: {value}\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(p))


def test_dry_run_false_is_false(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text("dry_run: false\n", encoding="utf-8")
    assert load_config(str(p)).dry_run is False


@pytest.mark.parametrize("value", ["soon", "true", "0", "-5", "[1]"])
def test_timeout_must_be_a_positive_number(tmp_path, value):
    p = tmp_path / "config.yaml"
    p.write_text(f"timeout: {value}\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(p))


def test_unreadable_config_is_a_config_error(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_bytes(b"profile: \xff\xfe\n")
    with pytest.raises(ConfigError):
        load_config(str(p))
