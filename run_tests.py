import os
import sys

import pytest

# Ensure src is importable without an editable install
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

if __name__ == "__main__":
    sys.exit(pytest.main([os.path.join(os.path.dirname(__file__), 'tests'), *sys.argv[1:]]))
