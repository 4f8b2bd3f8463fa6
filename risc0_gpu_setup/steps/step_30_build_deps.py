from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.pkg import apt_install, apt_update, apt_upgrade, snap_install, snap_refresh
from ..sequencer import BaseStep

logger = logging.getLogger(__name__)


class InstallBuildDepsStep(BaseStep):
    step_id = "30_build_deps"
    label = "Update packages, install build toolchain and Just"

    def run(self, ctx: ProvisionCtx) -> None:
        cfg = ctx.cfg
        dry_run = ctx.dry_run

        apt_update(dry_run=dry_run)
        if cfg.apt_upgrade:
            apt_upgrade(dry_run=dry_run)
        apt_install(cfg.build_packages, dry_run=dry_run)

        # snapd ships with the distribution; refreshing core is best-effort.
        if not snap_install("core", check=False, dry_run=dry_run):
            logger.warning("snap install core failed; continuing")
        if not snap_refresh("core", check=False, dry_run=dry_run):
            logger.info("snap refresh core reported no update")

        snap_install("just", classic=True, channel=cfg.just_channel, dry_run=dry_run)
        logger.info("Installed %s and just", ", ".join(cfg.build_packages) or "no apt packages")
