"""Full build: optional rules rendering, then packaging."""

import logging
from typing import Optional

from pcio.config import BuildConfig
from pcio.packager import PackageResult, package_assets
from pcio.rules.renderer import render_rules_for_config

logger = logging.getLogger(__name__)


def run_build(config: BuildConfig, with_rules: Optional[bool] = None) -> PackageResult:
    """
    Render the rules pages (if requested) and package everything.

    Args:
        config: Resolved build paths
        with_rules: True renders, False skips, None renders when the rules file exists

    Returns:
        Result of the packaging step
    """
    if with_rules is None:
        with_rules = config.rules.exists()
        if not with_rules:
            logger.info(f"No {config.rules.name} found, skipping rules rendering")

    if with_rules:
        render_rules_for_config(config)

    return package_assets(config.template, config.images_dir, config.output)
