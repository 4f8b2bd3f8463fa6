from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional


def _deep_merge(base: Dict[str, Any], extra: Mapping[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in extra.items():
        if isinstance(v, Mapping) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


@dataclass(frozen=True)
class ProvisionConfig:
    raw: Dict[str, Any]

    def _section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name) or {}

    @property
    def operator_user(self) -> str:
        return str(self.raw.get("operator_user") or "ubuntu")

    # Host preconditions

    @property
    def os_name(self) -> str:
        return str(self._section("os").get("name") or "Ubuntu")

    @property
    def os_version_id(self) -> str:
        return str(self._section("os").get("version_id") or "22.04")

    @property
    def os_release_path(self) -> str:
        return str(self._section("os").get("release_path") or "/etc/os-release")

    @property
    def disk_mount(self) -> str:
        return str(self._section("disk").get("mount") or "/")

    @property
    def min_free_gb(self) -> int:
        value = self._section("disk").get("min_free_gb")
        return int(100 if value is None else value)

    # Toolchains and packages

    @property
    def rustup_url(self) -> str:
        return str(self._section("rust").get("rustup_url") or "https://sh.rustup.rs")

    @property
    def apt_upgrade(self) -> bool:
        return bool(self._section("packages").get("apt_upgrade", False))

    @property
    def build_packages(self) -> List[str]:
        pkgs = self._section("packages").get("build")
        return list(pkgs) if pkgs is not None else ["build-essential", "xz-utils"]

    @property
    def monitoring_packages(self) -> List[str]:
        pkgs = self._section("packages").get("monitoring")
        return list(pkgs) if pkgs is not None else ["nvtop"]

    @property
    def monitoring_required(self) -> bool:
        return bool(self._section("packages").get("monitoring_required", True))

    @property
    def just_channel(self) -> Optional[str]:
        channel = str(self._section("just").get("channel") or "latest")
        return None if channel == "latest" else channel

    @property
    def risczero_installer_url(self) -> str:
        return str(self._section("risczero").get("installer_url") or "https://risczero.com/install")

    @property
    def cargo_risczero_version(self) -> str:
        return str(self._section("risczero").get("cargo_risczero_version") or "2.0.2")

    @property
    def install_risc0_rust(self) -> bool:
        return bool(self._section("risczero").get("install_rust_toolchain", True))

    # Companion repositories

    @property
    def bento_repo(self) -> str:
        return str(self._section("bento").get("repo") or "https://github.com/alpenlabs/risc0")

    @property
    def bento_branch(self) -> str:
        return str(self._section("bento").get("branch") or "mukesh/add_bento_to_v2.0")

    @property
    def bento_package(self) -> str:
        return str(self._section("bento").get("package") or "bento-client")

    @property
    def bento_bin(self) -> str:
        return str(self._section("bento").get("bin") or "bento_cli")

    @property
    def boundless_repo(self) -> str:
        return str(self._section("boundless").get("repo") or "https://github.com/alpenlabs/boundless")

    @property
    def boundless_branch(self) -> str:
        return str(self._section("boundless").get("branch") or "mukesh/multiple_gpu")

    def boundless_dir(self, home: str) -> str:
        configured = self._section("boundless").get("dir")
        return str(configured) if configured else str(Path(home) / "boundless")

    @property
    def boundless_setup_script(self) -> str:
        return str(self._section("boundless").get("setup_script") or "scripts/setup.sh")

    # Post-reboot

    @property
    def stack_up_command(self) -> List[str]:
        cmd = self._section("stack").get("up_command")
        return [str(c) for c in cmd] if cmd else ["just", "bento", "up"]

    @property
    def benchmark_concurrency(self) -> int:
        value = self._section("benchmark").get("concurrency")
        return int(4096 if value is None else value)

    @property
    def benchmark_rust_log(self) -> str:
        return str(self._section("benchmark").get("rust_log") or "info")

    @property
    def benchmark_extra_args(self) -> List[str]:
        args = self._section("benchmark").get("extra_args")
        return [str(a) for a in args] if args is not None else ["-s"]

    @property
    def reboot_delay_s(self) -> float:
        value = self._section("reboot").get("delay_s")
        return float(5 if value is None else value)


def load_config(path: Optional[str] = None, overrides: Optional[Mapping[str, Any]] = None) -> ProvisionConfig:
    """Load YAML provisioning options; no path means built-in defaults."""

    raw: Dict[str, Any] = {}
    if path:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(path)

        if p.suffix.lower() not in {".yaml", ".yml"}:
            raise ValueError("provisioning config must be YAML")

        try:
            import yaml  # type: ignore
        except Exception as e:
            raise RuntimeError("PyYAML is required to read the provisioning config") from e

        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"{path} must contain a mapping/object")

    if overrides:
        raw = _deep_merge(raw, overrides)

    cfg = ProvisionConfig(raw=raw)
    if cfg.benchmark_concurrency < 1:
        raise ValueError(f"benchmark.concurrency must be at least 1, got {cfg.benchmark_concurrency}")
    return cfg
