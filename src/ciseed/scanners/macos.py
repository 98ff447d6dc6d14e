"""Scanner for macOS Xcode projects and workspaces."""

from __future__ import annotations

from ciseed.scanners.xcode import SDK_MACOS, XcodeScanner

SCANNER_NAME = "macos"


class MacosScanner(XcodeScanner):
    """Scanner for Xcode projects whose SDKROOT is ``macosx``."""

    scanner_name = SCANNER_NAME
    sdk = SDK_MACOS
    test_step = "xcode-test-mac"
    archive_step = "xcode-archive-mac"
