#
# Copyright (c) 2019 Matthias Tafelmeier.
#
# This file is part of godon
#
# godon is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.
#
# godon is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this godon. If not, see <http://www.gnu.org/licenses/>.
#

"""
Host probe for node_system.

Reports what the node exposes: calibrated jiffies and, for every known kernel
feature, whether it is supported and enabled. Optionally applies requested
feature states. Runs as the single writer of those features.
"""

import logging
from typing import Dict, Any

from node_system import jiffies
from node_system.config import RootConfig, get_config
from node_system.errors import FeatureError
from node_system.features import FeatureToggle, KNOWN_FEATURES

logger = logging.getLogger(__name__)


def _root_config(config: Dict[str, Any]) -> RootConfig:
    roots = config.get('roots')
    if not roots:
        return get_config()
    return RootConfig(
        sys_root_dir=roots.get('sys_root_dir', get_config().sys_root_dir),
        proc_root_dir=roots.get('proc_root_dir', get_config().proc_root_dir),
    )


def main(config=None):
    """
    Probe and optionally adjust kernel features of this host.

    Args:
        config: Optional dict with
            - roots: {'sys_root_dir': ..., 'proc_root_dir': ...}
            - features: {feature sysctl name: bool} states to apply

    Returns:
        dict with result status and either data or error details
    """
    config = config or {}

    try:
        root_config = _root_config(config)
        toggle = FeatureToggle(config=root_config)
        calibrator = jiffies.init_jiffies()

        requested = config.get('features', {})
        if not isinstance(requested, dict):
            return {
                "result": "FAILURE",
                "error": "features: must be a dict"
            }

        errors = []

        for feature, enable in requested.items():
            if not toggle.is_supported(feature):
                errors.append(f"features.{feature}: not supported by this kernel")
                continue
            try:
                toggle.set_enabled(feature, bool(enable))
            except FeatureError as e:
                errors.append(f"features.{feature}: {e}")

        features = {}
        for feature in sorted(set(KNOWN_FEATURES) | set(requested)):
            state = {'supported': toggle.is_supported(feature), 'enabled': None}
            if state['supported']:
                try:
                    state['enabled'] = toggle.get_enabled(feature)
                except FeatureError as e:
                    errors.append(f"features.{feature}: {e}")
            features[feature] = state

        if errors:
            error_msg = "Host probe failed:\n" + "\n".join(f"  - {err}" for err in errors)
            logger.warning(error_msg)
            return {
                "result": "FAILURE",
                "error": error_msg
            }

        logger.info(f"Host probe completed for {len(features)} features")
        return {
            "result": "SUCCESS",
            "data": {
                "jiffies_ns": calibrator.jiffies_ns,
                "features": features
            }
        }

    except Exception as e:
        logger.error(f"Host probe error: {e}", exc_info=True)
        return {
            "result": "FAILURE",
            "error": f"Host probe error: {str(e)}"
        }
