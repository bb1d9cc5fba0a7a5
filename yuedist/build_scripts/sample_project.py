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
Generate and build the YueSampleApp project shipped in a libyue archive.

Generation and building depend on the host OS, each supported OS has one
SampleProjectHandler in SAMPLE_PROJECT_HANDLERS:

    linux   cmake with CMAKE_BUILD_TYPE in Release/ and Debug/, then make
    mac     cmake -G Xcode in build/, then xcodebuild per configuration
    win     cmake -G "Visual Studio 15 [Win64]" in build/, then msbuild
"""

import os
from collections import namedtuple

from yuedist.build_scripts.platform_utils import OS_LINUX, OS_MAC, OS_WIN, BuildTarget
from yuedist.build_scripts.settings import SmokeTestSettings

# Release is always generated and built before Debug
CONFIGURATIONS = ("Release", "Debug")
BUILD_DIR = "build"

SampleProjectHandler = namedtuple("SampleProjectHandler", ["generate", "build"])


def mkdir(path):
    os.makedirs(path, exist_ok=True)


# linux

def generate_linux(work_dir, target: BuildTarget, runner, settings: SmokeTestSettings) -> bool:
    for config in CONFIGURATIONS:
        config_dir = os.path.join(work_dir, config)
        mkdir(config_dir)
        runner(f"cmake -D CMAKE_BUILD_TYPE={config} ..", config_dir)
    return True


def build_linux(work_dir, runner, settings: SmokeTestSettings):
    for config in CONFIGURATIONS:
        runner("make", os.path.join(work_dir, config))


# macOS, the configuration is picked at build time

def generate_mac(work_dir, target: BuildTarget, runner, settings: SmokeTestSettings) -> bool:
    build_dir = os.path.join(work_dir, BUILD_DIR)
    mkdir(build_dir)
    runner("cmake .. -G Xcode", build_dir)
    return True


def build_mac(work_dir, runner, settings: SmokeTestSettings):
    build_dir = os.path.join(work_dir, BUILD_DIR)
    for config in CONFIGURATIONS:
        runner(f"xcodebuild -configuration {config}", build_dir)


# windows, the generator depends on the target CPU

def generate_win(work_dir, target: BuildTarget, runner, settings: SmokeTestSettings) -> bool:
    build_dir = os.path.join(work_dir, BUILD_DIR)
    mkdir(build_dir)
    generator = settings.vs_generators.get(target.target_cpu)
    if not generator:
        return False
    runner(f'cmake .. -G "{generator}"', build_dir)
    return True


def build_win(work_dir, runner, settings: SmokeTestSettings):
    build_dir = os.path.join(work_dir, BUILD_DIR)
    for config in CONFIGURATIONS:
        runner(f"msbuild {settings.sample_solution} /p:Configuration={config}", build_dir)


SAMPLE_PROJECT_HANDLERS = {
    OS_LINUX: SampleProjectHandler(generate_linux, build_linux),
    OS_MAC: SampleProjectHandler(generate_mac, build_mac),
    OS_WIN: SampleProjectHandler(generate_win, build_win),
}


def get_handler(host_os: str):
    """Return the SampleProjectHandler for host_os, or None if unsupported."""
    return SAMPLE_PROJECT_HANDLERS.get(host_os)


def generate_project(host_os, work_dir, target, runner, settings) -> bool:
    """
    Generate the sample project in work_dir.

    Returns:
        bool: False when nothing was generated because the host OS, or on
            Windows the target CPU, has no generator
    """
    handler = get_handler(host_os)
    if handler is None:
        return False
    return handler.generate(work_dir, target, runner, settings)


def build_project(host_os, work_dir, runner, settings):
    """Build Release then Debug of a generated sample project."""
    handler = get_handler(host_os)
    if handler is not None:
        handler.build(work_dir, runner, settings)
