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
Control-file path construction.

Every function is a pure join of a RootConfig and fixed sub-paths. Nothing
here touches the filesystem; callers that read or write the result are the
ones that can fail.
"""

import os
from typing import Optional

from node_system.config import RootConfig, get_config

SYSCTL_SUB_DIR = "sys"
KERNEL_CMDLINE_FILE_NAME = "cmdline"
PROC_MEMINFO_NAME = "meminfo"
PROC_CPUINFO_NAME = "cpuinfo"
HUGEPAGE_DIR = "hugepages"
NR_HUGEPAGES_FILE_NAME = "nr_hugepages"

SYS_NUMA_SUB_DIR = "bus/node/devices"
SYS_PCI_DEVICE_DIR = "bus/pci/devices"

SYS_CPU_SMT_ACTIVE_SUB_PATH = "devices/system/cpu/smt/active"
SYS_INTEL_PSTATE_NO_TURBO_SUB_PATH = "devices/system/cpu/intel_pstate/no_turbo"


def _conf(config: Optional[RootConfig]) -> RootConfig:
    return config if config is not None else get_config()


def get_sys_root_dir(config: Optional[RootConfig] = None) -> str:
    return _conf(config).sys_root_dir


def get_sys_numa_dir(config: Optional[RootConfig] = None) -> str:
    return os.path.join(_conf(config).sys_root_dir, SYS_NUMA_SUB_DIR)


def get_numa_meminfo_path(numa_node_sub_dir: str, config: Optional[RootConfig] = None) -> str:
    return os.path.join(_conf(config).sys_root_dir, SYS_NUMA_SUB_DIR, numa_node_sub_dir, PROC_MEMINFO_NAME)


def get_numa_hugepages_dir(numa_node_sub_dir: str, config: Optional[RootConfig] = None) -> str:
    return os.path.join(_conf(config).sys_root_dir, SYS_NUMA_SUB_DIR, numa_node_sub_dir, HUGEPAGE_DIR)


def get_numa_hugepages_nr_path(numa_node_sub_dir: str, page: str, config: Optional[RootConfig] = None) -> str:
    """Path of nr_hugepages for one page size class (e.g. 'hugepages-2048kB') of a NUMA node"""
    return os.path.join(_conf(config).sys_root_dir, SYS_NUMA_SUB_DIR, numa_node_sub_dir,
                        HUGEPAGE_DIR, page, NR_HUGEPAGES_FILE_NAME)


def get_cpuinfo_path(config: Optional[RootConfig] = None) -> str:
    return os.path.join(_conf(config).proc_root_dir, PROC_CPUINFO_NAME)


def get_kernel_cmdline_path(config: Optional[RootConfig] = None) -> str:
    return os.path.join(_conf(config).proc_root_dir, KERNEL_CMDLINE_FILE_NAME)


def get_sys_cpu_smt_active_path(config: Optional[RootConfig] = None) -> str:
    return os.path.join(_conf(config).sys_root_dir, SYS_CPU_SMT_ACTIVE_SUB_PATH)


def get_sys_intel_pstate_no_turbo_path(config: Optional[RootConfig] = None) -> str:
    return os.path.join(_conf(config).sys_root_dir, SYS_INTEL_PSTATE_NO_TURBO_SUB_PATH)


def get_proc_sys_file_path(sysctl: str, config: Optional[RootConfig] = None) -> str:
    """Path of a sysctl such as 'kernel/sched_core' under <proc_root>/sys"""
    return os.path.join(_conf(config).proc_root_dir, SYSCTL_SUB_DIR, sysctl)


def get_pci_device_dir(config: Optional[RootConfig] = None) -> str:
    return os.path.join(_conf(config).sys_root_dir, SYS_PCI_DEVICE_DIR)
