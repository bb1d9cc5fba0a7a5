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

"""
Host platform detection and distribution naming.

OS and CPU identifiers follow the names used in libyue release archives:
OS is one of "linux", "mac", "win"; CPU is "x64", "x86", "arm64", "arm".
"""

import os
import platform
import tempfile
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from yuedist.utils.cmd.cmd_util import exec_command

OS_LINUX = "linux"
OS_MAC = "mac"
OS_WIN = "win"

CPU_X64 = "x64"
CPU_X86 = "x86"

ARCHIVE_PREFIX = "libyue"

_HOST_OS_MAP = {
    "linux": OS_LINUX,
    "darwin": OS_MAC,
    "windows": OS_WIN,
}

_CPU_ALIASES = {
    "x86_64": CPU_X64,
    "amd64": CPU_X64,
    "x64": CPU_X64,
    "i386": CPU_X86,
    "i686": CPU_X86,
    "x86": CPU_X86,
    "ia32": CPU_X86,
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
    "arm": "arm",
}


def get_host_os(system_name: Optional[str] = None) -> str:
    """Return the host OS family, unknown systems keep their lowered name."""
    if system_name is None:
        system_name = platform.system()
    system_name = system_name.lower()
    return _HOST_OS_MAP.get(system_name, system_name)


def normalize_cpu(machine: str) -> str:
    """Map a machine or --target-cpu value to its archive CPU name."""
    machine = machine.strip().lower()
    return _CPU_ALIASES.get(machine, machine)


def get_host_cpu() -> str:
    return normalize_cpu(platform.machine())


def get_version(project_dir: str, explicit: Optional[str] = None, configured: Optional[str] = None) -> str:
    """
    Get the libyue version used in archive names.

    Priority: explicit value > configured value > git describe > date stamp
    """
    if explicit:
        return explicit
    if configured:
        return configured

    err_code, output = exec_command("git describe --always --tags", cwd=project_dir)
    if err_code == 0 and output.strip():
        return output.strip().splitlines()[-1]

    print("WARNING: git describe failed, using date as version")
    return datetime.now().strftime("%Y%m%d")


def get_archive_name(version: str, target_os: str, target_cpu: str) -> str:
    """Return the distribution archive base name, without extension."""
    return f"{ARCHIVE_PREFIX}_{version}_{target_os}_{target_cpu}"


def get_archive_path(dist_dir: str, archive_name: str) -> str:
    return os.path.join(dist_dir, archive_name + ".zip")


def get_extract_dir(archive_name: str, tmp_dir: Optional[str] = None) -> str:
    return os.path.join(tmp_dir or tempfile.gettempdir(), archive_name)


@dataclass(frozen=True)
class BuildTarget:
    """The OS, CPU and version every stage names and branches on."""
    target_os: str
    target_cpu: str
    version: str

    @property
    def archive_name(self) -> str:
        return get_archive_name(self.version, self.target_os, self.target_cpu)


def resolve_build_target(
    project_dir: str,
    target_cpu: Optional[str] = None,
    version: Optional[str] = None,
    configured_version: Optional[str] = None,
) -> BuildTarget:
    """
    Resolve the build target once from the host and the command line.

    The target OS is always the host OS; the CPU defaults to the host CPU.
    """
    return BuildTarget(
        target_os=get_host_os(),
        target_cpu=normalize_cpu(target_cpu) if target_cpu else get_host_cpu(),
        version=get_version(project_dir, version, configured_version),
    )
