"""
Shared pytest configuration for portless tests.

Clears PORTLESS_* environment variables at module level BEFORE any project
imports. pydantic-settings reads the environment when portless.config is
first imported, so a developer's own overrides must not leak into tests.
"""

import os
import sys
from pathlib import Path

import pytest

# Allow running the suite from a checkout without installing
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

for _var in [name for name in os.environ if name.startswith("PORTLESS_")]:
    del os.environ[_var]


@pytest.fixture
def make_paths():
    """Build a PlatformPaths for any platform with fake host lookups."""
    from portless.platform_detect import build_platform_paths

    def _make(platform, home="/home/alice", tempdir="/var/tmp"):
        return build_platform_paths(platform, home=lambda: home, tempdir=lambda: tempdir)

    return _make
