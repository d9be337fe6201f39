"""Category scanners.

This module exports the scanner interface, the concrete scanners and the
registry that maps category ids to them.
"""

from spacectl.scanners.base import Scanner, ScanOptions
from spacectl.scanners.commands import DockerScanner, HomebrewScanner
from spacectl.scanners.filesystem import DirectoryScanner, LocationScanner
from spacectl.scanners.language_files import LanguageFilesScanner
from spacectl.scanners.large_files import LargeFilesScanner
from spacectl.scanners.node_modules import NodeModulesScanner
from spacectl.scanners.registry import build_registry, get_all_scanners, get_scanner

__all__ = [
    "DirectoryScanner",
    "DockerScanner",
    "HomebrewScanner",
    "LanguageFilesScanner",
    "LargeFilesScanner",
    "LocationScanner",
    "NodeModulesScanner",
    "ScanOptions",
    "Scanner",
    "build_registry",
    "get_all_scanners",
    "get_scanner",
]
