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
Idempotent enable/disable of binary kernel features exposed as sysctls.

set_enabled is a read-modify-write and is not atomic. It is only correct when
a single process writes a given feature; deployments must designate that
writer. Concurrent writers race and the last write wins.
"""

import os
import logging
from typing import Optional

from node_system import metrics
from node_system.config import RootConfig
from node_system.errors import FeatureError
from node_system.paths import get_proc_sys_file_path
from node_system.sysctl import ProcSysctl

logger = logging.getLogger(__name__)

KERNEL_SCHED_GROUP_IDENTITY_ENABLE = "kernel/sched_group_identity_enabled"
KERNEL_SCHED_CORE = "kernel/sched_core"

KNOWN_FEATURES = [KERNEL_SCHED_GROUP_IDENTITY_ENABLE, KERNEL_SCHED_CORE]

# 0: disabled; 1: enabled
FEATURE_DISABLED = 0
FEATURE_ENABLED = 1


class FeatureToggle:

    def __init__(self, sysctl=None, config: Optional[RootConfig] = None):
        """
        Args:
            sysctl: Object exposing get_sysctl/set_sysctl (default ProcSysctl on config)
            config: Roots used for the existence probe. Must match the roots the
                sysctl backend reads and writes; when omitted they are taken from a
                ProcSysctl backend, else the process config is used.
        """
        if config is None and isinstance(sysctl, ProcSysctl):
            config = sysctl.config
        self.config = config
        self.sysctl = sysctl if sysctl is not None else ProcSysctl(config)

    def is_supported(self, feature: str) -> bool:
        """A missing control file means the running kernel lacks the feature"""
        return os.path.exists(get_proc_sys_file_path(feature, self.config))

    def get_enabled(self, feature: str) -> bool:
        try:
            cur = self.sysctl.get_sysctl(feature)
        except (OSError, ValueError) as e:
            raise FeatureError(feature, "get", e) from e
        return cur == FEATURE_ENABLED

    def set_enabled(self, feature: str, enable: bool) -> None:
        try:
            cur = self.sysctl.get_sysctl(feature)
        except (OSError, ValueError) as e:
            raise FeatureError(feature, "get", e) from e

        v = FEATURE_ENABLED if enable else FEATURE_DISABLED
        if cur == v:
            logger.debug(f"set_enabled {feature} skips since current sysctl config is already {enable}")
            return

        try:
            self.sysctl.set_sysctl(feature, v)
        except OSError as e:
            raise FeatureError(feature, "set", e) from e

        metrics.record_kernel_feature_transition(feature, enable)
        logger.info(f"set_enabled {feature} set sysctl config successfully, value {cur} -> {v}")


def is_group_identity_sysctl_supported(toggle: Optional[FeatureToggle] = None) -> bool:
    return (toggle or FeatureToggle()).is_supported(KERNEL_SCHED_GROUP_IDENTITY_ENABLE)


def get_sched_group_identity(toggle: Optional[FeatureToggle] = None) -> bool:
    return (toggle or FeatureToggle()).get_enabled(KERNEL_SCHED_GROUP_IDENTITY_ENABLE)


def set_sched_group_identity(enable: bool, toggle: Optional[FeatureToggle] = None) -> None:
    (toggle or FeatureToggle()).set_enabled(KERNEL_SCHED_GROUP_IDENTITY_ENABLE, enable)


def is_sched_core_supported(toggle: Optional[FeatureToggle] = None) -> bool:
    return (toggle or FeatureToggle()).is_supported(KERNEL_SCHED_CORE)


def get_sched_core(toggle: Optional[FeatureToggle] = None) -> bool:
    return (toggle or FeatureToggle()).get_enabled(KERNEL_SCHED_CORE)


def set_sched_core(enable: bool, toggle: Optional[FeatureToggle] = None) -> None:
    (toggle or FeatureToggle()).set_enabled(KERNEL_SCHED_CORE, enable)
