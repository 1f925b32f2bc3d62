"""Test configuration shared by unit and integration tests.

Makes the project root importable so tests can use ``src.*`` imports
without installing the package.
"""

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
