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
Pytest configuration for node_system unit tests.

Provides a fake host tree under tmp_path standing in for /proc and /sys, so
tests never touch the real kernel control files.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from node_system.config import RootConfig


@pytest.fixture
def root_config(tmp_path):
    """RootConfig pointing at an empty fake host tree"""
    sys_root = tmp_path / "sys"
    proc_root = tmp_path / "proc"
    (proc_root / "sys" / "kernel").mkdir(parents=True)
    sys_root.mkdir()
    return RootConfig(sys_root_dir=str(sys_root), proc_root_dir=str(proc_root))


@pytest.fixture
def write_sysctl(root_config):
    """Write raw content to a sysctl file of the fake host tree"""
    def _write(name, content):
        path = os.path.join(root_config.proc_root_dir, "sys", name)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            f.write(content)
        return path
    return _write
