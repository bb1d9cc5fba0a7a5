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
Build, package and extraction stages of the libyue smoke test.

Every external command goes through a runner with the signature of
yuedist.utils.cmd.cmd_util.run_command, so callers can substitute a
recording runner.
"""

import os
import zipfile

from yuedist.build_scripts.platform_utils import (
    CPU_X64,
    OS_WIN,
    BuildTarget,
    get_archive_path,
)
from yuedist.build_scripts.settings import (
    DEFAULT_BUILD_COMMAND,
    DEFAULT_PACKAGE_COMMAND,
)
from yuedist.utils.cmd.cmd_util import run_command
from yuedist.utils.context.result import CliResult
from yuedist.utils.errors import ExtractionError


def build_library(project_dir: str, runner=run_command, command: str = DEFAULT_BUILD_COMMAND):
    """Build libyue into out/Release."""
    print("Building libyue...")
    runner(command, project_dir)


def create_distribution(
    project_dir: str,
    dist_dir: str,
    target: BuildTarget,
    runner=run_command,
    command: str = DEFAULT_PACKAGE_COMMAND,
) -> str:
    """
    Run the distribution packager and return where its zip is expected.

    The packager takes no arguments, it must write
    <dist_dir>/<target.archive_name>.zip on its own.
    """
    print("Zipping libyue...")
    runner(command, project_dir)
    return get_archive_path(dist_dir, target.archive_name)


def _check_member_path(archive_path: str, dest_dir: str, name: str):
    dest_root = os.path.realpath(dest_dir)
    member_path = os.path.realpath(os.path.join(dest_root, name))
    if os.path.isabs(name) or os.path.commonpath([dest_root, member_path]) != dest_root:
        raise ExtractionError(archive_path, f"entry escapes destination: {name}")


def _restore_modes(zf: zipfile.ZipFile, dest_dir: str):
    # extractall drops Unix permission bits, executables need them back
    for info in zf.infolist():
        mode = (info.external_attr >> 16) & 0o777
        if mode and not info.is_dir():
            os.chmod(os.path.join(dest_dir, info.filename), mode)


def extract_distribution(archive_path: str, dest_dir: str) -> CliResult:
    """
    Unpack a distribution zip into dest_dir.

    dest_dir is created when missing and reused when a previous run left it
    behind, files from the archive overwrite stale ones.

    Returns:
        CliResult: value is dest_dir on success, error is an ExtractionError
            when the archive is missing, corrupt or unreadable
    """
    print(f"Unzipping {archive_path} to {dest_dir}...")
    if not os.path.isfile(archive_path):
        return CliResult(error=ExtractionError(archive_path, "archive not found"))
    try:
        os.makedirs(dest_dir, exist_ok=True)
        with zipfile.ZipFile(archive_path) as zf:
            names = zf.namelist()
            for name in names:
                _check_member_path(archive_path, dest_dir, name)
            zf.extractall(dest_dir)
            _restore_modes(zf, dest_dir)
    except ExtractionError as e:
        return CliResult(error=e)
    except (zipfile.BadZipFile, OSError) as e:
        return CliResult(error=ExtractionError(archive_path, str(e)))
    print(f"   Extracted {len(names)} entries")
    return CliResult(value=dest_dir)


def should_verify(target_cpu: str, target_os: str) -> bool:
    """
    Whether the sample project is generated and built for this target.

    Skipped only for non-x64 CPUs on non-Windows systems, Windows verifies
    every CPU.
    """
    if target_cpu != CPU_X64 and target_os != OS_WIN:
        return False
    return True
