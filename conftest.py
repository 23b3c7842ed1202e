"""
Pytest configuration and shared fixtures for the ppz-logalyzer project.
"""
import pytest
from hypothesis import settings, Verbosity

# Configure Hypothesis settings for all property-based tests
settings.register_profile(
    "default",
    max_examples=100,
    deadline=5000,
    suppress_health_check=[],
    verbosity=Verbosity.normal,
)

settings.register_profile(
    "ci",
    max_examples=200,
    deadline=10000,
    suppress_health_check=[],
    verbosity=Verbosity.quiet,
)

settings.register_profile(
    "debug",
    max_examples=10,
    deadline=None,
    suppress_health_check=[],
    verbosity=Verbosity.verbose,
)

settings.load_profile("default")


@pytest.fixture
def make_file():
    """Build FileHandle instances; sizes are given in MB."""
    from ppz_logalyzer.upload.models import FileHandle

    def _make(name: str, size_mb: float = 1, content_type: str = "application/octet-stream"):
        return FileHandle(name=name, size=int(size_mb * 1024 * 1024), content_type=content_type)

    return _make
