"""Allow ``python -m dhall`` as an alias for the ``dhall-lang`` command."""
from __future__ import annotations

from dhall.cli.main import cli

cli()
