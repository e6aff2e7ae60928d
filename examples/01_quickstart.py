#!/usr/bin/env python3
"""Example: Quickstart — pscompat

Minimal working example: decode a profile, look up commands and types,
and check a script's names against the target.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install pscompat
"""
from __future__ import annotations

import pscompat

PROFILE_JSON = """
{
  "Platform": {"Id": "ubuntu_x64_7.2", "OperatingSystem": "Linux", "RuntimeVersion": "7.2.1"},
  "Types": {
    "Types": ["System.Int32", "System.Collections.Hashtable"],
    "TypeAccelerators": {"int": "System.Int32", "hashtable": "System.Collections.Hashtable"}
  },
  "Modules": {
    "Microsoft.PowerShell.Management": {
      "7.0.0.0": {
        "Cmdlets": {"Get-ChildItem": {"DefaultParameterSet": "Items"}},
        "Aliases": {"gci": "Get-ChildItem", "dir": "Get-ChildItem"}
      }
    }
  },
  "NativeCommands": {"ls": [{"Path": "/usr/bin/ls"}]}
}
"""


def main() -> None:
    print(f"pscompat version: {pscompat.__version__}")

    # Step 1: Decode the captured profile
    profile = pscompat.decode(PROFILE_JSON)
    runtime = pscompat.RuntimeQuery(profile)
    print(f"Target: {runtime.name}, modules={len(runtime.modules)}")

    # Step 2: Resolve an alias to the commands behind it
    for descriptor in runtime.get_commands("gci"):
        print(f"  gci -> {descriptor.name} ({descriptor.kind} in {descriptor.module_name})")

    # Step 3: Resolve a type accelerator
    print(f"[hashtable] -> {runtime.types.resolve('[hashtable]')}")

    # Step 4: Check what a script needs
    findings = pscompat.check(
        [runtime], commands=["gci", "ls", "Get-Clipboard"], types=["[pscustomobject]"]
    )
    print(f"\nFindings: {len(findings)}")
    for finding in findings:
        print(f"  {finding}")

    # Step 5: Re-encode in canonical form
    print(f"\nCanonical size: {len(pscompat.encode(profile))} bytes")


if __name__ == "__main__":
    main()
