"""RiscZero multi-GPU host provisioner (Python-first, phase-driven).

Core design goals:
- Two phases split by a mandatory driver reboot
- Idempotent steps, resume by re-running
- Fail fast, no rollback
- Explicit tool paths and run-as users instead of ambient shell state
- Centralized logging
"""

__all__ = []
