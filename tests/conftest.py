"""Shared test fixtures for dhall-lang.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "dhall"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def config_source() -> str:
    """Return a realistic Dhall configuration exercising most of the grammar."""
    return """
-- Deployment settings
let Port = Natural

let Service = { name : Text, port : Port }

let mkService =
      λ(name : Text) → λ(port : Port) → { name = name, port = port } : Service

in  { services = [ mkService "api" 8080, mkService "worker" 9090 ]
    , owner = env:USER as Text ? "nobody"
    , motd = ''
        Deployed by ${env:USER as Text}
        ''
    }
"""


@pytest.fixture()
def dhall_file(tmp_path: Path, config_source: str) -> Path:
    """Write ``config_source`` to a temporary .dhall file and return its path."""
    path = tmp_path / "config.dhall"
    path.write_text(config_source, encoding="utf-8")
    return path
