from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.pkg import apt_install
from ..sequencer import BaseStep

logger = logging.getLogger(__name__)


class InstallMonitoringStep(BaseStep):
    step_id = "40_install_monitoring"
    label = "Install GPU monitoring tools"

    def __init__(self, *, required: bool = True) -> None:
        self.tolerate_failure = not required

    def run(self, ctx: ProvisionCtx) -> None:
        apt_install(ctx.cfg.monitoring_packages, dry_run=ctx.dry_run)
        logger.info("Monitoring tools installed: %s", ", ".join(ctx.cfg.monitoring_packages))
