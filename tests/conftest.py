"""Pytest configuration. Ensures project root is in sys.path and provides a virtual project tree."""
import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from pagepack.layout.fs import MemoryFileSystem  # noqa: E402
from pagepack.layout.project import ProjectLayout  # noqa: E402

ROOT = "/project"


@pytest.fixture
def layout() -> ProjectLayout:
    return ProjectLayout.from_root(ROOT)


@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    """src/ with three alias groups and two pages; only `b` has an entry script."""
    return MemoryFileSystem(
        {
            f"{ROOT}/src/modules/titlebar/index.js": "export default 1;",
            f"{ROOT}/src/assets/css/mixin.scss": "$a: 1;",
            f"{ROOT}/src/pages/a/index.html": "<html></html>",
            f"{ROOT}/src/pages/b/index.html": "<html></html>",
            f"{ROOT}/src/pages/b/init.js": "console.log('b');",
        }
    )
