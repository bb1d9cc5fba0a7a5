import os
import unittest
from unittest import mock

from yuedist.build_scripts import platform_utils
from yuedist.build_scripts.platform_utils import (
    BuildTarget,
    get_archive_name,
    get_archive_path,
    get_extract_dir,
    get_host_os,
    get_version,
    normalize_cpu,
    resolve_build_target,
)


class TestHostDetection(unittest.TestCase):

    def test_host_os_names(self):
        self.assertEqual(get_host_os("Linux"), "linux")
        self.assertEqual(get_host_os("Darwin"), "mac")
        self.assertEqual(get_host_os("Windows"), "win")

    def test_unknown_host_keeps_its_name(self):
        self.assertEqual(get_host_os("FreeBSD"), "freebsd")

    def test_normalize_cpu(self):
        self.assertEqual(normalize_cpu("x86_64"), "x64")
        self.assertEqual(normalize_cpu("AMD64"), "x64")
        self.assertEqual(normalize_cpu("i686"), "x86")
        self.assertEqual(normalize_cpu("ia32"), "x86")
        self.assertEqual(normalize_cpu("aarch64"), "arm64")
        self.assertEqual(normalize_cpu("riscv64"), "riscv64")

    @mock.patch("platform.machine", return_value="AMD64")
    def test_host_cpu(self, _machine):
        self.assertEqual(platform_utils.get_host_cpu(), "x64")


class TestArchiveNaming(unittest.TestCase):

    def test_archive_name(self):
        self.assertEqual(
            get_archive_name("v0.15.0", "linux", "x64"),
            "libyue_v0.15.0_linux_x64",
        )

    def test_archive_name_is_deterministic(self):
        target = BuildTarget("win", "x86", "v1.2.3")
        self.assertEqual(target.archive_name, target.archive_name)
        self.assertEqual(target.archive_name, get_archive_name("v1.2.3", "win", "x86"))

    def test_archive_and_extract_paths(self):
        name = "libyue_v1_mac_arm64"
        self.assertEqual(
            get_archive_path("/src/out/Dist", name),
            os.path.join("/src/out/Dist", "libyue_v1_mac_arm64.zip"),
        )
        self.assertEqual(get_extract_dir(name, "/tmp"), os.path.join("/tmp", "libyue_v1_mac_arm64"))


class TestVersion(unittest.TestCase):

    def test_explicit_version_wins(self):
        with mock.patch.object(platform_utils, "exec_command") as exec_command:
            self.assertEqual(get_version(".", "v9", "v8"), "v9")
            exec_command.assert_not_called()

    def test_configured_version(self):
        with mock.patch.object(platform_utils, "exec_command") as exec_command:
            self.assertEqual(get_version(".", None, "v8"), "v8")
            exec_command.assert_not_called()

    def test_git_describe(self):
        with mock.patch.object(
            platform_utils, "exec_command", return_value=(0, "v0.15.0-3-gabc123\n")
        ) as exec_command:
            self.assertEqual(get_version("/src"), "v0.15.0-3-gabc123")
            exec_command.assert_called_once_with("git describe --always --tags", cwd="/src")

    def test_date_fallback(self):
        with mock.patch.object(platform_utils, "exec_command", return_value=(128, "fatal")):
            version = get_version("/src")
        self.assertEqual(len(version), 8)
        self.assertTrue(version.isdigit())


class TestResolveBuildTarget(unittest.TestCase):

    @mock.patch("platform.machine", return_value="x86_64")
    @mock.patch("platform.system", return_value="Linux")
    def test_defaults_to_host(self, _system, _machine):
        target = resolve_build_target(".", version="v1")
        self.assertEqual(target, BuildTarget("linux", "x64", "v1"))

    @mock.patch("platform.system", return_value="Windows")
    def test_target_cpu_argument(self, _system):
        target = resolve_build_target(".", target_cpu="ia32", version="v1")
        self.assertEqual(target.target_cpu, "x86")
        self.assertEqual(target.archive_name, "libyue_v1_win_x86")
