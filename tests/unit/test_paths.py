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

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../..'))

from node_system.config import RootConfig
from node_system import paths


CONFIG = RootConfig(sys_root_dir="/host/sys", proc_root_dir="/host/proc")


class TestPathResolution:
    """Test control-file path construction"""

    def test_proc_sys_file_path(self):
        """Test sysctl names are joined under <proc>/sys"""
        assert paths.get_proc_sys_file_path("kernel/sched_core", CONFIG) == "/host/proc/sys/kernel/sched_core"

    def test_numa_paths(self):
        """Test NUMA node paths under the sys root"""
        assert paths.get_sys_numa_dir(CONFIG) == "/host/sys/bus/node/devices"
        assert paths.get_numa_meminfo_path("node0", CONFIG) == "/host/sys/bus/node/devices/node0/meminfo"
        assert paths.get_numa_hugepages_dir("node1", CONFIG) == "/host/sys/bus/node/devices/node1/hugepages"
        assert paths.get_numa_hugepages_nr_path("node1", "hugepages-2048kB", CONFIG) == \
            "/host/sys/bus/node/devices/node1/hugepages/hugepages-2048kB/nr_hugepages"

    def test_cpu_paths(self):
        """Test CPU related paths"""
        assert paths.get_cpuinfo_path(CONFIG) == "/host/proc/cpuinfo"
        assert paths.get_kernel_cmdline_path(CONFIG) == "/host/proc/cmdline"
        assert paths.get_sys_cpu_smt_active_path(CONFIG) == "/host/sys/devices/system/cpu/smt/active"
        assert paths.get_sys_intel_pstate_no_turbo_path(CONFIG) == "/host/sys/devices/system/cpu/intel_pstate/no_turbo"

    def test_root_and_pci_dirs(self):
        """Test sys root and PCI device directory"""
        assert paths.get_sys_root_dir(CONFIG) == "/host/sys"
        assert paths.get_pci_device_dir(CONFIG) == "/host/sys/bus/pci/devices"

    def test_trailing_slash_roots(self):
        """Test default-style roots with trailing slash join cleanly"""
        config = RootConfig(sys_root_dir="/sys/", proc_root_dir="/proc/")
        assert paths.get_proc_sys_file_path("vm/swappiness", config) == "/proc/sys/vm/swappiness"
        assert paths.get_sys_numa_dir(config) == "/sys/bus/node/devices"


class TestPathPurity:
    """Test that path construction never depends on filesystem state"""

    def test_identical_inputs_identical_outputs(self, tmp_path):
        """Test repeated calls are deterministic regardless of files created in between"""
        config = RootConfig(sys_root_dir=str(tmp_path / "sys"), proc_root_dir=str(tmp_path / "proc"))
        first = paths.get_proc_sys_file_path("kernel/sched_core", config)

        (tmp_path / "proc" / "sys" / "kernel").mkdir(parents=True)
        (tmp_path / "proc" / "sys" / "kernel" / "sched_core").write_text("1")

        second = paths.get_proc_sys_file_path("kernel/sched_core", config)
        assert first == second

    def test_missing_roots_still_resolve(self):
        """Test resolution succeeds for roots that do not exist"""
        config = RootConfig(sys_root_dir="/does/not/exist", proc_root_dir="/nor/this")
        assert paths.get_cpuinfo_path(config) == "/nor/this/cpuinfo"
