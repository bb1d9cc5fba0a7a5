#
# Copyright 2024 zhlinh and ccgo Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""Exceptions raised by the libyue smoke-test driver."""


class YueDistError(Exception):
    """Base class for all driver failures"""

    exit_code = 1


class CommandExecutionError(YueDistError):
    """Exception raised when an external command exits non-zero"""

    def __init__(self, command: str, cwd: str, exit_code: int):
        self.command = command
        self.cwd = cwd
        # keep the failing command's status so the driver can exit with it
        self.exit_code = exit_code if exit_code > 0 else 1
        self.returncode = exit_code
        super().__init__(
            f"Command failed with exit code {exit_code}: {command} (cwd: {cwd})"
        )


class ExtractionError(YueDistError):
    """Exception raised when a distribution archive can not be unpacked"""

    def __init__(self, archive_path: str, reason: str):
        self.archive_path = archive_path
        self.reason = reason
        super().__init__(f"Failed to extract {archive_path}: {reason}")


class UnsupportedPlatformError(YueDistError):
    """Exception raised for host OS / CPU combinations without a sample project"""

    def __init__(self, host_os, target_cpu):
        self.host_os = host_os
        self.target_cpu = target_cpu
        super().__init__(
            f"No sample project generator for host OS '{host_os}' and CPU '{target_cpu}'"
        )


class ConfigError(YueDistError):
    """Exception raised for unreadable or invalid yuedist.toml files"""
    pass
