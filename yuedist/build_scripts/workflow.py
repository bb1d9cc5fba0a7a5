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
The libyue smoke test: build, package, unpack, then build the sample app.

    build_library -> create_distribution -> extract_distribution
        -> should_verify? -> generate_project -> build_project

Stages run strictly in order and the first failure ends the run.
"""

import os
from typing import Optional

from yuedist.build_scripts import sample_project, stages
from yuedist.build_scripts.platform_utils import BuildTarget, get_extract_dir, get_host_os
from yuedist.build_scripts.settings import SmokeTestSettings
from yuedist.utils.cmd.cmd_util import run_command
from yuedist.utils.errors import UnsupportedPlatformError


class SmokeTestWorkflow:
    """
    Runs the smoke test for one BuildTarget.

    Args:
        target: Resolved OS, CPU and version
        project_dir: libyue checkout the build and package commands run in
        runner: Callable (command, cwd) that raises CommandExecutionError on
            failure, run_command by default
        host_os: OS whose sample-project handler is used (default: this host)
        settings: Commands and locations, defaults when omitted
        tmp_dir: Parent of the extraction directory (default: system temp dir)
    """

    def __init__(
        self,
        target: BuildTarget,
        project_dir: str,
        runner=run_command,
        host_os: Optional[str] = None,
        settings: Optional[SmokeTestSettings] = None,
        tmp_dir: Optional[str] = None,
    ):
        self.target = target
        self.project_dir = os.path.abspath(project_dir)
        self.runner = runner
        self.host_os = host_os or get_host_os()
        self.settings = settings or SmokeTestSettings()
        self.tmp_dir = tmp_dir

    @property
    def dist_dir(self) -> str:
        return os.path.join(self.project_dir, self.settings.dist_dir)

    @property
    def extract_dir(self) -> str:
        return get_extract_dir(self.target.archive_name, self.tmp_dir)

    def run(self) -> str:
        """
        Run every stage.

        Returns:
            str: The extraction directory, left in place for inspection

        Raises:
            CommandExecutionError: An external command failed
            ExtractionError: The archive could not be unpacked
            UnsupportedPlatformError: No sample project for this platform
                and settings.strict_platform is set
        """
        print(f"=== Smoke testing {self.target.archive_name} ===")
        stages.build_library(self.project_dir, self.runner, self.settings.build_command)
        archive_path = stages.create_distribution(
            self.project_dir,
            self.dist_dir,
            self.target,
            self.runner,
            self.settings.package_command,
        )

        result = stages.extract_distribution(archive_path, self.extract_dir)
        if result.is_failure():
            raise result.get_error()
        work_dir = result.get_value()

        if stages.should_verify(self.target.target_cpu, self.target.target_os):
            self.verify(work_dir)
        else:
            print(f"Skipping sample project for {self.target.target_os}/{self.target.target_cpu}")

        print(work_dir)
        return work_dir

    def verify(self, work_dir: str) -> bool:
        """Generate and build the sample project, False if it was skipped."""
        print("=== Building sample project ===")
        generated = sample_project.generate_project(
            self.host_os, work_dir, self.target, self.runner, self.settings
        )
        if not generated:
            if self.settings.strict_platform:
                raise UnsupportedPlatformError(self.host_os, self.target.target_cpu)
            print(
                f"WARNING: no sample project generator for {self.host_os}/"
                f"{self.target.target_cpu}, skipping sample build"
            )
            return False
        sample_project.build_project(self.host_os, work_dir, self.runner, self.settings)
        return True
