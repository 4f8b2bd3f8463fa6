"""Tests for provisioning options."""
import pytest

from risc0_gpu_setup.config import ProvisionConfig, load_config


def test_defaults_match_reference_host():
    cfg = load_config()

    assert cfg.operator_user == "ubuntu"
    assert (cfg.os_name, cfg.os_version_id) == ("Ubuntu", "22.04")
    assert cfg.disk_mount == "/"
    assert cfg.min_free_gb == 100
    assert cfg.build_packages == ["build-essential", "xz-utils"]
    assert cfg.monitoring_packages == ["nvtop"]
    assert cfg.monitoring_required is True
    assert cfg.just_channel is None
    assert cfg.cargo_risczero_version == "2.0.2"
    assert cfg.bento_branch == "mukesh/add_bento_to_v2.0"
    assert cfg.boundless_branch == "mukesh/multiple_gpu"
    assert cfg.boundless_dir("/home/ubuntu") == "/home/ubuntu/boundless"
    assert cfg.stack_up_command == ["just", "bento", "up"]
    assert cfg.benchmark_concurrency == 4096
    assert cfg.benchmark_extra_args == ["-s"]


def test_yaml_values_and_overrides(tmp_path):
    p = tmp_path / "provision.yaml"
    p.write_text(
        "disk:\n  mount: /data\n  min_free_gb: 200\njust:\n  channel: 1.14/stable\n"
        "packages:\n  monitoring_required: false\n",
        encoding="utf-8",
    )

    cfg = load_config(str(p), overrides={"disk": {"min_free_gb": 150}, "operator_user": "prover"})

    assert cfg.disk_mount == "/data"
    assert cfg.min_free_gb == 150
    assert cfg.just_channel == "1.14/stable"
    assert cfg.monitoring_required is False
    assert cfg.operator_user == "prover"


def test_zero_threshold_is_respected():
    cfg = ProvisionConfig(raw={"disk": {"min_free_gb": 0}})

    assert cfg.min_free_gb == 0


def test_explicit_boundless_dir():
    cfg = ProvisionConfig(raw={"boundless": {"dir": "/opt/boundless"}})

    assert cfg.boundless_dir("/home/ubuntu") == "/opt/boundless"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "absent.yaml"))


def test_rejects_non_yaml(tmp_path):
    p = tmp_path / "provision.json"
    p.write_text("{}", encoding="utf-8")

    with pytest.raises(ValueError, match="must be YAML"):
        load_config(str(p))


def test_rejects_non_mapping(tmp_path):
    p = tmp_path / "provision.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError, match="mapping"):
        load_config(str(p))


def test_explicit_concurrency_is_kept():
    cfg = ProvisionConfig(raw={"benchmark": {"concurrency": 8}})

    assert cfg.benchmark_concurrency == 8


def test_rejects_zero_concurrency(tmp_path):
    p = tmp_path / "provision.yaml"
    p.write_text("benchmark:\n  concurrency: 0\n", encoding="utf-8")

    with pytest.raises(ValueError, match="concurrency must be at least 1, got 0"):
        load_config(str(p))
