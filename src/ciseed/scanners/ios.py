"""Scanner for iOS Xcode projects and workspaces."""

from __future__ import annotations

from ciseed.scanners.xcode import SDK_IOS, XcodeScanner

SCANNER_NAME = "ios"


class IosScanner(XcodeScanner):
    """Scanner for Xcode projects whose SDKROOT is ``iphoneos``."""

    scanner_name = SCANNER_NAME
    sdk = SDK_IOS
    test_step = "xcode-test"
    archive_step = "xcode-archive"
