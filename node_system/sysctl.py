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
import re
import logging
from typing import Optional

from node_system.config import RootConfig
from node_system.errors import SysctlParseError
from node_system.paths import get_proc_sys_file_path

logger = logging.getLogger(__name__)

SYSCTL_FILE_MODE = 0o640

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_sysctl_value(sysctl: str, content: str) -> int:
    trimmed = content.strip(" \n")
    if not _INT_PATTERN.fullmatch(trimmed):
        raise SysctlParseError(sysctl, content)
    return int(trimmed)


class ProcSysctl:
    """
    Integer sysctl access through the files under <proc_root>/sys.

    Each call is exactly one read or one write of the control file. Values are
    never cached, so a read always reflects the live kernel state. OSError from
    the filesystem is propagated unchanged.
    """

    def __init__(self, config: Optional[RootConfig] = None):
        self.config = config

    def path(self, sysctl: str) -> str:
        return get_proc_sys_file_path(sysctl, self.config)

    def get_sysctl(self, sysctl: str) -> int:
        with open(self.path(sysctl), "r") as f:
            content = f.read()
        return parse_sysctl_value(sysctl, content)

    def set_sysctl(self, sysctl: str, value: int) -> None:
        """Modify the specified sysctl to the new value"""
        fd = os.open(self.path(sysctl), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, SYSCTL_FILE_MODE)
        try:
            os.write(fd, str(int(value)).encode())
        finally:
            os.close(fd)
        logger.debug(f"Wrote sysctl {sysctl} = {value}")
