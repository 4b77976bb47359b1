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
Exception types raised by node_system.

Filesystem failures are not wrapped here: they surface as the builtin OSError
so callers can inspect errno directly.
"""


class NodeSystemError(Exception):
    """Base class for node_system errors"""


class ConfigError(NodeSystemError):
    """Root configuration was replaced after first use"""


class SysctlParseError(NodeSystemError, ValueError):
    """Content of a sysctl file is not a base-10 integer"""

    def __init__(self, sysctl: str, content: str):
        self.sysctl = sysctl
        self.content = content
        super().__init__(f"cannot parse sysctl {sysctl}, content {content!r} is not an integer")


class CacheInfoFormatError(NodeSystemError, ValueError):
    """Cache descriptor does not have the colon-delimited shape"""


class CacheInfoParseError(NodeSystemError, ValueError):
    """L3 field of a cache descriptor is not a 32-bit integer"""


class FeatureError(NodeSystemError):
    """Reading or writing a kernel feature sysctl failed"""

    def __init__(self, feature: str, action: str, cause: Exception):
        self.feature = feature
        self.action = action
        super().__init__(f"cannot {action} sysctl {feature}, err: {cause}")
