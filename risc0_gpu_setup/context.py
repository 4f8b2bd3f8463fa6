from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Any, Optional, Sequence

from .config import ProvisionConfig
from .lib.command import CmdResult, run_cmd, run_shell
from .lib.tools import ToolPaths


class Phase(enum.Enum):
    PRE_REBOOT = "pre-reboot"
    POST_REBOOT = "post-reboot"

    @classmethod
    def from_arg(cls, value: str | None) -> "Phase":
        """No argument means the pre-reboot phase."""
        if value is None:
            return cls.PRE_REBOOT
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown phase {value!r} (expected one of: {choices})") from None


@dataclass(frozen=True)
class ProvisionCtx:
    cfg: ProvisionConfig
    phase: Phase
    tools: ToolPaths
    dry_run: bool = False
    # Account the current step's commands run as; None means this process's user.
    run_as: Optional[str] = None

    @classmethod
    def create(cls, cfg: ProvisionConfig, phase: Phase, *, dry_run: bool = False) -> "ProvisionCtx":
        return cls(cfg=cfg, phase=phase, tools=ToolPaths.for_user(cfg.operator_user), dry_run=dry_run)

    @property
    def operator(self) -> str:
        return self.cfg.operator_user

    @property
    def boundless_dir(self) -> str:
        return self.cfg.boundless_dir(self.tools.home)

    def operator_env(self) -> dict[str, str]:
        """Environment for commands run as the operator: installed tool dirs first."""
        return {"HOME": self.tools.home, "PATH": self.tools.path_env()}

    def for_step(self, step: Any) -> "ProvisionCtx":
        """Context for one step, honoring its ``run_as_operator`` attribute."""
        run_as = self.operator if getattr(step, "run_as_operator", False) else None
        return replace(self, run_as=run_as)

    def _cmd_kwargs(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        if self.run_as:
            kwargs.setdefault("user", self.run_as)
            kwargs["env"] = {**self.operator_env(), **(kwargs.get("env") or {})}
        kwargs.setdefault("dry_run", self.dry_run)
        return kwargs

    def cmd(self, argv: Sequence[str], **kwargs: Any) -> CmdResult:
        """run_cmd as the step's account, with dry_run applied."""
        return run_cmd(argv, **self._cmd_kwargs(kwargs))

    def shell(self, script: str, **kwargs: Any) -> CmdResult:
        return run_shell(script, **self._cmd_kwargs(kwargs))
