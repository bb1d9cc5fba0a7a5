import os
import zipfile

from yuedist.utils.errors import CommandExecutionError


class RecordingRunner:
    """Runner stub that records (command, cwd) and can fail one command."""

    def __init__(self, fail_on=None, exit_code=2, on_command=None):
        self.calls = []
        self.fail_on = fail_on
        self.exit_code = exit_code
        self.on_command = on_command or {}

    def __call__(self, command, cwd):
        self.calls.append((command, cwd))
        if self.fail_on is not None and self.fail_on in command:
            raise CommandExecutionError(command, cwd, self.exit_code)
        action = self.on_command.get(command)
        if action is not None:
            action()

    @property
    def commands(self):
        return [command for command, _ in self.calls]


def write_zip(path, entries):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return path


SAMPLE_ENTRIES = {
    "CMakeLists.txt": "project(YueSampleApp)\n",
    "include/nativeui/nativeui.h": "#pragma once\n",
    "src/main.cc": "int main() { return 0; }\n",
}
