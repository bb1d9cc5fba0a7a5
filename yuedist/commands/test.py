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

import os
import sys
import argparse
import time

from yuedist.utils.context.namespace import CliNameSpace
from yuedist.utils.context.context import CliContext
from yuedist.utils.context.command import CliCommand
from yuedist.utils.errors import ConfigError, YueDistError
from yuedist.build_scripts.platform_utils import resolve_build_target
from yuedist.build_scripts.settings import load_settings
from yuedist.build_scripts.workflow import SmokeTestWorkflow


class Test(CliCommand):
    def description(self) -> str:
        return """Build libyue, package it and smoke test the package.

Steps:
    1. node scripts/build.js out/Release
    2. node scripts/create_dist.js
    3. unzip out/Dist/libyue_<version>_<os>_<cpu>.zip into the temp directory
    4. generate and build YueSampleApp (Release and Debug) against it,
       only for x64 targets or on Windows

EXAMPLES:
    # Test the host CPU
    yuedist test

    # Test a 32-bit Windows package
    yuedist test --target-cpu x86

    # Use a libyue checkout elsewhere with a fixed version
    yuedist test --project-dir ../yue --version v0.15.0

CONFIGURATION:
    Optional yuedist.toml in the project directory, see the [smoke_test]
    table in the README. Command line options win over the file.
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="yuedist test",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "--target-cpu",
            type=str,
            help="Target CPU, x64/x86/arm64/arm (default: host CPU)",
        )
        parser.add_argument(
            "--version",
            type=str,
            help="Version in the archive name (default: git describe)",
        )
        parser.add_argument(
            "--project-dir",
            type=str,
            default=os.getcwd(),
            help="libyue checkout to build (default: current directory)",
        )
        parser.add_argument(
            "--dist-dir",
            type=str,
            help="Directory the packager writes zips to (default: out/Dist)",
        )
        parser.add_argument(
            "--config",
            type=str,
            help="Path to yuedist.toml (default: <project-dir>/yuedist.toml)",
        )
        parser.add_argument(
            "--strict-platform",
            action="store_true",
            help="Fail when no sample project exists for this OS/CPU instead of skipping it",
        )

        if argv is None:
            module_name = os.path.splitext(os.path.basename(__file__))[0]
            argv = list(sys.argv[1:])
            # only the subcommand itself, option values may also be "test"
            if module_name in argv:
                argv.remove(module_name)
        args = parser.parse_args(argv, namespace=CliNameSpace())
        return args

    def _print_elapsed(self, start_time: float):
        elapsed = time.time() - start_time
        minutes, seconds = divmod(int(elapsed), 60)
        print(f"\nTotal time: {minutes}m {seconds}s")

    def exec(self, context: CliContext, args: CliNameSpace):
        start_time = time.time()
        project_dir = os.path.abspath(args.project_dir or context.project_dir)
        try:
            if not os.path.isdir(project_dir):
                raise ConfigError(f"Project directory not found: {project_dir}")
            settings = load_settings(project_dir, args.config)
            if args.dist_dir:
                settings.dist_dir = args.dist_dir
            if args.strict_platform:
                settings.strict_platform = True
            target = resolve_build_target(
                project_dir,
                target_cpu=args.target_cpu,
                version=args.version,
                configured_version=settings.version,
            )
            SmokeTestWorkflow(target, project_dir, settings=settings).run()
        except YueDistError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            self._print_elapsed(start_time)
            sys.exit(e.exit_code)
        self._print_elapsed(start_time)
        sys.exit(0)
