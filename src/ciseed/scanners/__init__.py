"""Platform scanners for Android, iOS, macOS, Cordova, fastlane, Xamarin and React Native."""

from ciseed.scanners.android import AndroidScanner
from ciseed.scanners.base import PlatformScanner
from ciseed.scanners.cordova import CordovaScanner
from ciseed.scanners.fastlane import FastlaneScanner
from ciseed.scanners.ios import IosScanner
from ciseed.scanners.macos import MacosScanner
from ciseed.scanners.other import OtherScanner
from ciseed.scanners.reactnative import ReactNativeScanner
from ciseed.scanners.registry import ScannerRegistry, default_registry
from ciseed.scanners.xamarin import XamarinScanner

__all__ = [
    "AndroidScanner",
    "CordovaScanner",
    "FastlaneScanner",
    "IosScanner",
    "MacosScanner",
    "OtherScanner",
    "PlatformScanner",
    "ReactNativeScanner",
    "ScannerRegistry",
    "XamarinScanner",
    "default_registry",
]
