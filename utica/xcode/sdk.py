"""
SDK and product type helpers.

An SDK is a build destination reported by xcodebuild (``iphoneos``,
``iphonesimulator``, ``macosx`` ...). This module classifies SDKs into
simulator and device destinations and maps them to the folder their built
binaries live in.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Iterable, List, Tuple

from utica.core.exceptions import ParseError

# Platform folder names keyed by SDK name prefix
_PLATFORM_FOLDERS = {
    "iphone": "iOS",
    "macosx": "Mac",
    "watch": "watchOS",
    "appletv": "tvOS",
    "xr": "visionOS",
}

DEFAULT_BINARIES_FOLDER = "Carthage/Build"


@dataclass(frozen=True)
class SDK:
    """
    A build destination identifier.

    Attributes:
        name: SDK name as understood by xcodebuild (e.g., 'iphonesimulator')
    """

    name: str

    def __post_init__(self):
        if not self.name:
            raise ValueError("SDK name cannot be empty")

    def __str__(self) -> str:
        return self.name

    @property
    def is_simulator(self) -> bool:
        """Whether this SDK targets a simulator rather than a device."""
        return self.name.lower().endswith("simulator")

    @property
    def platform_simulatorless(self) -> str:
        """
        Platform name shared by the device and simulator flavours of this SDK.

        Example:
            >>> SDK("iphonesimulator").platform_simulatorless
            'iOS'
        """
        lowered = self.name.lower()
        for prefix, platform in _PLATFORM_FOLDERS.items():
            if lowered.startswith(prefix):
                return platform
        return self.name

    def relative_path(self, binaries_folder: str = DEFAULT_BINARIES_FOLDER) -> str:
        """
        Relative path at which binaries for this platform are stored.

        Args:
            binaries_folder: Build output folder relative to the project root

        Returns:
            POSIX style relative path (e.g., 'Carthage/Build/iOS')
        """
        return str(PurePosixPath(binaries_folder) / self.platform_simulatorless)


def split_sdks(sdks: Iterable[SDK]) -> Tuple[List[SDK], List[SDK]]:
    """
    Split the given SDKs into simulator ones and device ones.

    Each input element lands in exactly one of the two lists and keeps its
    relative order from the input.

    Args:
        sdks: SDKs to partition

    Returns:
        Tuple of (simulators, devices)
    """
    simulators: List[SDK] = []
    devices: List[SDK] = []

    for sdk in sdks:
        if sdk.is_simulator:
            simulators.append(sdk)
        else:
            devices.append(sdk)

    return simulators, devices


class MachOType(Enum):
    """Mach-O product types reported by xcodebuild's MACH_O_TYPE setting."""

    EXECUTABLE = "mh_execute"
    DYNAMIC_LIBRARY = "mh_dylib"
    BUNDLE = "mh_bundle"
    STATIC_LIBRARY = "staticlib"
    RELOCATABLE_OBJECT = "mh_object"

    @classmethod
    def from_string(cls, value: str) -> "MachOType":
        """
        Parse a Mach-O type from a string returned by xcodebuild.

        Raises:
            ParseError: If the value is not a known Mach-O type
        """
        try:
            return cls(value.strip())
        except ValueError:
            raise ParseError(f'unexpected Mach-O type "{value}"') from None
