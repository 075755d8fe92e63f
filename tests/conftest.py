"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
# This ensures that the local diffcov package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of diffcov modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("diffcov"):
        del sys.modules[module_name]


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Isolate structlog's global configuration between tests."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()
