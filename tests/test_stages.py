import os
import tempfile
import unittest
import zipfile

from yuedist.build_scripts import stages
from yuedist.build_scripts.platform_utils import BuildTarget
from yuedist.utils.errors import CommandExecutionError, ExtractionError

from tests.helpers import SAMPLE_ENTRIES, RecordingRunner, write_zip


class TestVerificationGate(unittest.TestCase):

    def test_truth_table(self):
        cases = [
            ("x64", "win", True),
            ("x64", "linux", True),
            ("x64", "mac", True),
            ("x86", "win", True),
            ("arm64", "win", True),
            ("x86", "linux", False),
            ("arm64", "mac", False),
            ("arm", "linux", False),
        ]
        for cpu, os_name, expected in cases:
            with self.subTest(cpu=cpu, os=os_name):
                self.assertEqual(stages.should_verify(cpu, os_name), expected)


class TestBuildAndPackage(unittest.TestCase):

    def test_build_runs_in_project_dir(self):
        runner = RecordingRunner()
        stages.build_library("/src/yue", runner)
        self.assertEqual(runner.calls, [("node scripts/build.js out/Release", "/src/yue")])

    def test_package_returns_expected_archive(self):
        runner = RecordingRunner()
        target = BuildTarget("linux", "x64", "v0.15.0")
        path = stages.create_distribution("/src/yue", "/src/yue/out/Dist", target, runner)
        self.assertEqual(runner.calls, [("node scripts/create_dist.js", "/src/yue")])
        self.assertEqual(
            path, os.path.join("/src/yue/out/Dist", "libyue_v0.15.0_linux_x64.zip")
        )

    def test_package_failure_propagates(self):
        runner = RecordingRunner(fail_on="create_dist", exit_code=5)
        target = BuildTarget("linux", "x64", "v1")
        with self.assertRaises(CommandExecutionError) as ctx:
            stages.create_distribution("/src", "/src/out/Dist", target, runner)
        self.assertEqual(ctx.exception.exit_code, 5)
        self.assertEqual(ctx.exception.cwd, "/src")


class TestExtraction(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = self.temp_dir.name
        self.archive = write_zip(
            os.path.join(self.root, "dist", "libyue_v1_linux_x64.zip"), SAMPLE_ENTRIES
        )
        self.dest = os.path.join(self.root, "tmp", "libyue_v1_linux_x64")

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_extracts_and_creates_destination(self):
        result = stages.extract_distribution(self.archive, self.dest)
        self.assertTrue(result.is_success())
        self.assertEqual(result.get_value(), self.dest)
        self.assertTrue(os.path.isfile(os.path.join(self.dest, "CMakeLists.txt")))
        self.assertTrue(
            os.path.isfile(os.path.join(self.dest, "include", "nativeui", "nativeui.h"))
        )

    def test_existing_destination_is_reused(self):
        os.makedirs(os.path.join(self.dest, "Release"))
        with open(os.path.join(self.dest, "CMakeLists.txt"), "w") as f:
            f.write("stale")
        result = stages.extract_distribution(self.archive, self.dest)
        self.assertTrue(result.is_success())
        with open(os.path.join(self.dest, "CMakeLists.txt")) as f:
            self.assertEqual(f.read(), SAMPLE_ENTRIES["CMakeLists.txt"])

    def test_extract_twice(self):
        self.assertTrue(stages.extract_distribution(self.archive, self.dest).is_success())
        self.assertTrue(stages.extract_distribution(self.archive, self.dest).is_success())

    def test_missing_archive(self):
        missing = os.path.join(self.root, "dist", "nope.zip")
        result = stages.extract_distribution(missing, self.dest)
        self.assertTrue(result.is_failure())
        self.assertIsInstance(result.get_error(), ExtractionError)
        self.assertEqual(result.get_error().archive_path, missing)
        self.assertFalse(os.path.exists(self.dest))

    def test_corrupt_archive(self):
        corrupt = os.path.join(self.root, "dist", "corrupt.zip")
        with open(corrupt, "wb") as f:
            f.write(b"this is not a zip file")
        result = stages.extract_distribution(corrupt, self.dest)
        self.assertTrue(result.is_failure())
        self.assertIsInstance(result.get_error(), ExtractionError)

    def test_entry_escaping_destination(self):
        evil = os.path.join(self.root, "dist", "evil.zip")
        with zipfile.ZipFile(evil, "w") as zf:
            zf.writestr("../escaped.txt", "x")
        result = stages.extract_distribution(evil, self.dest)
        self.assertTrue(result.is_failure())
        self.assertIn("escapes", str(result.get_error()))
        self.assertFalse(os.path.exists(os.path.join(self.root, "tmp", "escaped.txt")))

    @unittest.skipIf(os.name == "nt", "Unix permission bits")
    def test_keeps_executable_bit(self):
        archive = os.path.join(self.root, "dist", "modes.zip")
        with zipfile.ZipFile(archive, "w") as zf:
            info = zipfile.ZipInfo("bin/tool.sh")
            info.external_attr = 0o755 << 16
            zf.writestr(info, "#!/bin/sh\n")
            zf.writestr("README.md", "libyue\n")
        result = stages.extract_distribution(archive, self.dest)
        self.assertTrue(result.is_success())
        self.assertTrue(os.access(os.path.join(self.dest, "bin", "tool.sh"), os.X_OK))
        self.assertFalse(os.access(os.path.join(self.dest, "README.md"), os.X_OK))
