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

import os
import logging
import threading
from typing import NamedTuple, Optional

from node_system.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SYS_ROOT_DIR = "/sys/"
DEFAULT_PROC_ROOT_DIR = "/proc/"


class RootConfig(NamedTuple):
    """Filesystem roots every control-file path is built from"""
    sys_root_dir: str = DEFAULT_SYS_ROOT_DIR
    proc_root_dir: str = DEFAULT_PROC_ROOT_DIR


def load_config_from_env() -> RootConfig:
    return RootConfig(
        sys_root_dir=os.environ.get("NODE_SYSTEM_SYS_ROOT_DIR", DEFAULT_SYS_ROOT_DIR),
        proc_root_dir=os.environ.get("NODE_SYSTEM_PROC_ROOT_DIR", DEFAULT_PROC_ROOT_DIR),
    )


_lock = threading.Lock()
_config: Optional[RootConfig] = None


def init_config(config: Optional[RootConfig] = None) -> RootConfig:
    """
    Install the process-wide root configuration.

    The value is set at most once. Installing the same value again is a no-op,
    installing a different one raises ConfigError.

    Args:
        config: Roots to install (default loaded from the environment)

    Returns:
        The installed configuration
    """
    global _config
    if config is None:
        config = load_config_from_env()
    with _lock:
        if _config is None:
            _config = config
            logger.debug(f"Initialized root config: sys={config.sys_root_dir}, proc={config.proc_root_dir}")
        elif _config != config:
            raise ConfigError(f"root config already initialized as {_config}, refusing {config}")
        return _config


def get_config() -> RootConfig:
    if _config is None:
        return init_config()
    return _config


def get_node_name() -> Optional[str]:
    return os.environ.get("NODE_NAME") or None
