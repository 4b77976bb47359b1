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
Jiffies: the duration unit of CPU stats.

Normally a jiffy is 10ms. At startup the agent asks the host for its
CLK_TCK via getconf; if that fails for any reason the default is kept,
since a coarse tick is preferable to blocking startup.
"""

import shutil
import logging
import threading
import subprocess
from datetime import timedelta
from typing import Optional

logger = logging.getLogger(__name__)

NANOSECONDS_PER_SECOND = 1_000_000_000
DEFAULT_JIFFIES_NS = float(10 * 1_000_000)


def _to_nanoseconds(delta) -> float:
    if isinstance(delta, timedelta):
        return float(delta // timedelta(microseconds=1) * 1000)
    # plain numbers are seconds, e.g. from time.monotonic()
    return float(delta) * NANOSECONDS_PER_SECOND


class JiffyCalibrator:
    """Holds the tick duration (nanoseconds) and converts intervals into ticks"""

    def __init__(self, jiffies_ns: float = DEFAULT_JIFFIES_NS):
        self.jiffies_ns = jiffies_ns

    def calibrate(self, timeout: Optional[float] = None) -> bool:
        """
        Fetch the clock tick of the current host with "getconf CLK_TCK".

        No timeout is applied unless one is given, so a hanging getconf blocks
        the caller. Failures are never raised.

        Returns:
            True if the tick duration was updated, False if the current value was kept
        """
        getconf = shutil.which("getconf")
        if getconf is None:
            logger.debug(f"getconf not found, keeping jiffies {self.jiffies_ns}ns")
            return False

        try:
            out = subprocess.run(
                [getconf, "CLK_TCK"], stdout=subprocess.PIPE, stderr=subprocess.DEVNULL,
                timeout=timeout, text=True, check=True
            ).stdout
            ticks = int(float(out.strip()))
            if ticks <= 0:
                raise ValueError(f"non-positive clock ticks {ticks}")
            jiffies_ns = NANOSECONDS_PER_SECOND // ticks
            if jiffies_ns == 0:
                raise ValueError(f"clock ticks {ticks} exceed one per nanosecond")
        except (OSError, subprocess.SubprocessError, ValueError, OverflowError) as e:
            logger.debug(f"Failed to calibrate jiffies, keeping {self.jiffies_ns}ns: {e}")
            return False

        self.jiffies_ns = float(jiffies_ns)
        logger.debug(f"Calibrated jiffies to {self.jiffies_ns}ns ({ticks} ticks per second)")
        return True

    def get_period_ticks(self, start, end) -> float:
        return _to_nanoseconds(end - start) / self.jiffies_ns


_jiffies = JiffyCalibrator()
_init_lock = threading.Lock()
_initialized = False


def init_jiffies(timeout: Optional[float] = None) -> JiffyCalibrator:
    """
    Calibrate the process-wide jiffies exactly once.

    Must complete before concurrent consumers start. Later calls return the
    already calibrated instance without running getconf again.
    """
    global _initialized
    with _init_lock:
        if not _initialized:
            _jiffies.calibrate(timeout=timeout)
            _initialized = True
    return _jiffies


def get_jiffies() -> JiffyCalibrator:
    return _jiffies


def get_period_ticks(start, end, jiffies: Optional[JiffyCalibrator] = None) -> float:
    return (jiffies or _jiffies).get_period_ticks(start, end)
