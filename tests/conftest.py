"""Shared fixtures for ciseed tests.

Most fixtures build a small fake repository under ``tmp_path`` and
return its root. Files only carry the markers the scanners look for.
"""

from __future__ import annotations

import pathlib
from typing import Callable

import pytest

from ciseed.scanners.registry import ScannerRegistry, default_registry
from ciseed.steps.catalog import StepCatalog, load_catalog

ANDROID_APP_GRADLE = (
    "apply plugin: 'com.android.application'\n"
    "android {\n"
    "    compileSdkVersion 33\n"
    "}\n"
)

XAMARIN_SLN = """\
Microsoft Visual Studio Solution File, Format Version 12.00
Project("{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}") = "App.iOS", "App.iOS\\App.iOS.csproj", "{1A2B}"
EndProject
Global
	GlobalSection(SolutionConfigurationPlatforms) = preSolution
		Debug|iPhone = Debug|iPhone
		Release|iPhone = Release|iPhone
		Release|iPhoneSimulator = Release|iPhoneSimulator
	EndGlobalSection
EndGlobal
"""

XAMARIN_CSPROJ = (
    '<Project>\n'
    '  <Import Project="$(MSBuildExtensionsPath)\\Xamarin\\iOS\\Xamarin.iOS.CSharp.targets" />\n'
    '</Project>\n'
)

FASTFILE = """\
default_platform(:ios)

lane :test do
  scan
end

platform :ios do
  lane :beta do
    gym
  end
end
"""

CORDOVA_CONFIG = (
    '<?xml version="1.0" encoding="utf-8"?>\n'
    '<widget id="io.example.app" version="1.0.0">\n'
    "  <name>App</name>\n"
    "</widget>\n"
)


def write(path: pathlib.Path, text: str = "") -> pathlib.Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def make_xcode_project(
    root: pathlib.Path,
    name: str = "App",
    sdk: str = "iphoneos",
    schemes: tuple[str, ...] = ("App",),
    podfile: bool = False,
) -> pathlib.Path:
    """Create ``<root>/<name>.xcodeproj`` with shared schemes."""
    project = root / f"{name}.xcodeproj"
    write(
        project / "project.pbxproj",
        "buildSettings = {\n"
        f"    SDKROOT = {sdk};\n"
        "};\n",
    )
    for scheme in schemes:
        write(project / "xcshareddata" / "xcschemes" / f"{scheme}.xcscheme", "<Scheme/>\n")
    if podfile:
        write(root / "Podfile", "platform :ios, '14.0'\n")
    return project


def make_android_project(root: pathlib.Path, gradlew: bool = True) -> pathlib.Path:
    """Create an Android project with an ``app`` module under ``root``."""
    write(root / "build.gradle", "buildscript {}\n")
    write(root / "app" / "build.gradle", ANDROID_APP_GRADLE)
    if gradlew:
        write(root / "gradlew", "#!/bin/sh\n")
    return root / "build.gradle"


@pytest.fixture
def catalog() -> StepCatalog:
    """The packaged step catalog."""
    return load_catalog()


@pytest.fixture
def registry(catalog: StepCatalog) -> ScannerRegistry:
    """Registry with every built-in scanner."""
    return default_registry(catalog)


@pytest.fixture
def xcode_project() -> Callable[..., pathlib.Path]:
    return make_xcode_project


@pytest.fixture
def android_repo(tmp_path: pathlib.Path) -> pathlib.Path:
    make_android_project(tmp_path)
    return tmp_path


@pytest.fixture
def ios_repo(tmp_path: pathlib.Path) -> pathlib.Path:
    make_xcode_project(tmp_path, "App", schemes=("App", "AppTests"))
    return tmp_path


@pytest.fixture
def rn_repo(tmp_path: pathlib.Path) -> pathlib.Path:
    """React Native app with only the Android side."""
    write(tmp_path / "package.json", '{"dependencies": {"react-native": "0.72.0"}}\n')
    write(tmp_path / "android" / "build.gradle", ANDROID_APP_GRADLE)
    write(tmp_path / "android" / "gradlew", "#!/bin/sh\n")
    return tmp_path


@pytest.fixture
def rn_full_repo(rn_repo: pathlib.Path) -> pathlib.Path:
    """React Native app with Android and iOS sides."""
    make_xcode_project(rn_repo / "ios", "App", schemes=("App",))
    return rn_repo


@pytest.fixture
def cordova_repo(tmp_path: pathlib.Path) -> pathlib.Path:
    """Cordova app with its generated Android project checked in."""
    write(tmp_path / "config.xml", CORDOVA_CONFIG)
    write(tmp_path / "platforms" / "android" / "build.gradle", ANDROID_APP_GRADLE)
    return tmp_path


@pytest.fixture
def fastlane_repo(tmp_path: pathlib.Path) -> pathlib.Path:
    write(tmp_path / "fastlane" / "Fastfile", FASTFILE)
    return tmp_path


@pytest.fixture
def xamarin_repo(tmp_path: pathlib.Path) -> pathlib.Path:
    write(tmp_path / "App.sln", XAMARIN_SLN)
    write(tmp_path / "App.iOS" / "App.iOS.csproj", XAMARIN_CSPROJ)
    return tmp_path


@pytest.fixture
def make_file() -> Callable[..., pathlib.Path]:
    return write


@pytest.fixture
def android_project() -> Callable[..., pathlib.Path]:
    return make_android_project
