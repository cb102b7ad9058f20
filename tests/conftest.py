"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local scssnav package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of scssnav modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("scssnav"):
        del sys.modules[module_name]


@pytest.fixture
def write_file(tmp_path: Path):
    """Write a text file under tmp_path, creating parent directories."""

    def _write(rel_path: str, content: str = "") -> Path:
        path = tmp_path / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write
