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
import importlib
import argparse

from yuedist.utils.context.namespace import CliNameSpace
from yuedist.utils.context.context import CliContext
from yuedist.utils.context.command import CliCommand

SCRIPT_PATH = os.path.split(os.path.realpath(__file__))[0]
PACKAGE_NAME = os.path.basename(SCRIPT_PATH)


# Root Class for Command Line Interface
class Cli(CliCommand):
    def description(self) -> str:
        return """yuedist - libyue distribution smoke tester

Builds libyue, packages it as libyue_<version>_<os>_<cpu>.zip, unpacks the
archive and builds the bundled sample app against it.

USAGE:
    yuedist <command> [options]

COMMANDS:
    test        Build, package and smoke test libyue

EXAMPLES:
    yuedist test                     # Test for the host CPU
    yuedist test --target-cpu x86    # Test a 32-bit package

For more information on a specific command:
    yuedist <command> --help
        """

    def get_command_list(self) -> list:
        arr = []
        for command in os.listdir(os.path.join(SCRIPT_PATH, "commands")):
            if not command.startswith("_") and command.endswith(".py"):
                arr.append(os.path.splitext(os.path.basename(command))[0])
        return sorted(arr)

    def _make_parser(self, add_help: bool) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="yuedist",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
            add_help=add_help,
        )
        parser.add_argument(
            "subcommand",
            metavar=f"{self.get_command_list()}",
            type=str,
            nargs="?",
            choices=self.get_command_list(),
        )
        return parser

    def cli(self) -> CliNameSpace:
        # Only `yuedist --help` shows this help, `yuedist test --help` is
        # left for the subcommand parser
        if len(sys.argv) == 2 and sys.argv[1] in ["--help", "-h"]:
            self._make_parser(add_help=True).print_help()
            sys.exit(0)

        # parse only known args so subcommand options pass through
        args, unknown = self._make_parser(add_help=False).parse_known_args(
            namespace=CliNameSpace()
        )
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        if not args.subcommand:
            print("ERROR: No command specified\n")
            self._make_parser(add_help=True).print_help()
            sys.exit(1)

        module = importlib.import_module(f"{PACKAGE_NAME}.commands.{args.subcommand}")
        klass = getattr(module, args.subcommand.capitalize())
        sub_cmd = klass()
        sub_cmd.exec(context, sub_cmd.cli())


def main():
    cmd = Cli()
    cmd.exec(CliContext(), cmd.cli())


if __name__ == "__main__":
    main()
