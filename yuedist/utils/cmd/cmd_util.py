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

import subprocess
import sys

from yuedist.utils.errors import CommandExecutionError


def decode_bytes(input: bytes) -> str:
    """
    Decode bytes to string, falling back to GBK for Chinese Windows consoles.
    """
    try:
        return bytes.decode(input, "UTF-8")
    except UnicodeDecodeError:
        return bytes.decode(input, "GBK", errors="replace")


def exec_command(command, cwd=None):
    """
    Execute a shell command and capture its output.

    Args:
        command: Shell command string to execute
        cwd: Working directory of the command (default: current directory)

    Returns:
        tuple: (exit_code, output_message)
            - exit_code: Integer return code from command (0 = success)
            - output_message: Combined stdout/stderr as decoded string
    """
    try:
        compile_popen = subprocess.run(
            command,
            shell=True,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
    except OSError as e:
        return 1, str(e)
    return compile_popen.returncode, decode_bytes(compile_popen.stdout or b"")


def run_command(command: str, cwd: str) -> None:
    """
    Run a shell command synchronously in the given directory.

    Output is not captured: the child inherits stdout/stderr so build tool
    output streams straight to the console.

    Args:
        command: Shell command line
        cwd: Working directory for the command, the driver's own current
            directory is never changed

    Raises:
        CommandExecutionError: If the command exits with a non-zero code or
            can not be started (missing cwd, no shell)
    """
    print(f"Executing: {command}  (in {cwd})")
    sys.stdout.flush()
    try:
        result = subprocess.run(command, shell=True, cwd=cwd)
    except OSError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        raise CommandExecutionError(command, cwd, 1) from e
    if result.returncode != 0:
        raise CommandExecutionError(command, cwd, result.returncode)
