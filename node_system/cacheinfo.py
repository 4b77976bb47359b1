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
CPU cache topology parsing for `lscpu -e=CPU,NODE,SOCKET,CORE,CACHE,ONLINE`.

The CACHE column looks like "0:0:0:0" (L1d:L1i:L2:L3). Some hosts print no
L3 (qemu-kvm, see https://bugzilla.redhat.com/show_bug.cgi?id=1434537) and
some arm64 hosts print "-" for the whole column:

    CPU NODE SOCKET CORE CACHE ONLINE
     0    0      0    0 -        yes
     1    0      0    1 -        yes

Both shapes are handled at runtime, the same on every architecture.
"""

import re
import logging
from typing import List, NamedTuple

from node_system.errors import CacheInfoFormatError, CacheInfoParseError

logger = logging.getLogger(__name__)

NO_CACHE_INFO = "-"
INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


class CacheInfo(NamedTuple):
    l1l2_id: str
    l3_id: int = 0


class CPUInfo(NamedTuple):
    cpu: int
    node: int
    socket: int
    core: int
    l1l2_id: str
    l3_id: int
    online: bool


def _parse_int32(field: str) -> int:
    if not _INT_PATTERN.fullmatch(field):
        raise CacheInfoParseError(f"invalid l3 cache id {field!r}")
    value = int(field)
    if value < INT32_MIN or value > INT32_MAX:
        raise CacheInfoParseError(f"l3 cache id {field!r} out of int32 range")
    return value


def get_cache_info(descriptor: str) -> CacheInfo:
    """
    Parse one CACHE column value into its l1l2 and l3 ids.

    L1 and L2 are assumed private caches, so they share the id of the core
    and the first field is returned as is.

    e.g.
    - "-"       -> ("0", 0)
    - "0:0:0"   -> ("0", 0)
    - "1:1:1:0" -> ("1", 0)

    Raises:
        CacheInfoFormatError: fewer than three fields
        CacheInfoParseError: the L3 field is not a 32-bit integer
    """
    s = descriptor.strip()
    if s == NO_CACHE_INFO:
        return CacheInfo("0", 0)

    infos = s.split(":")
    if len(infos) < 3:
        raise CacheInfoFormatError(f"invalid cache info {descriptor}")
    l1l2 = infos[0]
    if len(infos) == 3:
        return CacheInfo(l1l2, 0)
    return CacheInfo(l1l2, _parse_int32(infos[3]))


def _parse_column(row: str, name: str, value: str) -> int:
    if value == NO_CACHE_INFO:
        return 0
    if not _INT_PATTERN.fullmatch(value):
        raise CacheInfoFormatError(f"invalid {name} {value!r} in lscpu row {row!r}")
    return int(value)


def parse_lscpu_cpus(text: str) -> List[CPUInfo]:
    """Parse the table printed by `lscpu -e=CPU,NODE,SOCKET,CORE,CACHE,ONLINE`"""
    cpus = []
    for line in text.splitlines():
        fields = line.split()
        if not fields or fields[0] == "CPU":
            continue
        if len(fields) != 6:
            raise CacheInfoFormatError(f"invalid lscpu row {line!r}, expected 6 columns")

        cpu, node, socket, core, cache, online = fields
        info = get_cache_info(cache)
        cpus.append(CPUInfo(
            cpu=_parse_column(line, "cpu", cpu),
            node=_parse_column(line, "node", node),
            socket=_parse_column(line, "socket", socket),
            core=_parse_column(line, "core", core),
            l1l2_id=info.l1l2_id,
            l3_id=info.l3_id,
            online=online == "yes",
        ))

    logger.debug(f"Parsed {len(cpus)} cpus from lscpu output")
    return cpus
