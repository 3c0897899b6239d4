"""CLI package.

The ``cli`` sub-package contains the Click application for inspecting
Dhall sources.  It should import only from the public API of the parent
package and its ``parser`` and ``ast`` modules.
"""
from __future__ import annotations
