"""Shared test fixtures for pscompat.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest

_PROFILE_DOCUMENT: dict[str, object] = {
    "Platform": {
        "Id": "win-10_x64_7.2",
        "OperatingSystem": "Windows",
        "RuntimeVersion": "7.2.1",
        "Edition": "Core",
    },
    "Types": {
        "Types": [
            "System.Int32",
            "System.String",
            "System.Management.Automation.PSCustomObject",
        ],
        "TypeAccelerators": {
            "int": "System.Int32",
            "string": "System.String",
            "pscustomobject": "System.Management.Automation.PSCustomObject",
        },
    },
    "Modules": {
        "Microsoft.PowerShell.Management": {
            "7.0.0.0": {
                "Cmdlets": {
                    "Get-ChildItem": {
                        "OutputType": ["System.IO.FileInfo", "System.IO.DirectoryInfo"],
                        "ParameterSets": ["Items", "LiteralItems"],
                        "DefaultParameterSet": "Items",
                        "Parameters": {
                            "Path": {
                                "Type": "System.String[]",
                                "ParameterSets": {
                                    "Items": {"Position": 0, "Flags": ["ValueFromPipeline"]}
                                },
                            },
                            "LiteralPath": {
                                "Type": "System.String[]",
                                "ParameterSets": {
                                    "LiteralItems": {"Flags": ["Mandatory"]}
                                },
                            },
                        },
                        "ParameterAliases": {"PSPath": "LiteralPath"},
                    }
                },
                "Aliases": {"gci": "Get-ChildItem", "dir": "Get-ChildItem"},
            }
        },
        "PSReadLine": {
            "2.0.0": {
                "Functions": {"PSConsoleHostReadLine": {"BindingStyle": "Advanced"}},
            },
            "2.1.0": {
                "Cmdlets": {"Get-PSReadLineOption": {}},
                "Functions": {"PSConsoleHostReadLine": {"BindingStyle": "Advanced"}},
            },
        },
        "Helpers": {
            "1.0": {
                "Functions": {"Get-ChildItem": {"CmdletBinding": False}},
                "Aliases": {"ls2": "gci", "broken": "Missing-Command"},
            }
        },
    },
    "NativeCommands": {
        "git": [{"Path": "C:\\Program Files\\Git\\cmd\\git.exe", "Version": "2.40.0.1"}],
    },
}


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "pscompat"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def profile_document() -> dict[str, object]:
    """Return a fresh, mutable copy of a small but complete profile document."""
    return copy.deepcopy(_PROFILE_DOCUMENT)


@pytest.fixture()
def profile_bytes(profile_document: dict[str, object]) -> bytes:
    return json.dumps(profile_document).encode("utf-8")


@pytest.fixture()
def profile_file(tmp_path: Path, profile_bytes: bytes) -> Path:
    """Write the sample profile to a temporary file and return its path."""
    path = tmp_path / "win-10_x64_7.2.json"
    path.write_bytes(profile_bytes)
    return path
