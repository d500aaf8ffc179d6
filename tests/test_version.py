"""Tests for dynamic version management.

Verifies that ``axis_resolver.__version__`` is resolved from the installed
package metadata (``pyproject.toml``) and looks like a release version.
"""

from __future__ import annotations

import re
from importlib.metadata import version

import pytest

import axis_resolver

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

# Matches semver-ish strings: major.minor.patch with optional pre-release
# suffix (e.g. "0.1.0", "1.0.0-rc.1").
_SEMVER_RE = re.compile(
    r"^\d+\.\d+\.\d+"  # major.minor.patch
    r"(-[A-Za-z0-9]+(\.[A-Za-z0-9]+)*)?$"  # optional pre-release
)


@pytest.mark.unit
class TestVersionAttribute:
    """Verify the ``axis_resolver.__version__`` package attribute."""

    def test_version_is_a_string(self) -> None:
        """__version__ must be a non-empty string."""
        assert isinstance(axis_resolver.__version__, str)
        assert len(axis_resolver.__version__) > 0

    def test_version_matches_semver(self) -> None:
        """__version__ must look like a valid semantic version."""
        assert _SEMVER_RE.match(axis_resolver.__version__), (
            f"__version__ {axis_resolver.__version__!r} does not match "
            f"expected semver pattern (major.minor.patch[-prerelease])"
        )

    def test_version_matches_distribution_metadata(self) -> None:
        """In an installed environment the attribute mirrors the metadata."""
        assert axis_resolver.__version__ == version("axis-resolver")


@pytest.mark.unit
class TestPublicApi:
    """The names re-exported from the package root."""

    def test_all_names_resolve(self) -> None:
        for name in axis_resolver.__all__:
            assert hasattr(axis_resolver, name), name
