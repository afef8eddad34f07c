import sys
from pathlib import Path

import numpy as np
import pytest

# Flat-layout modules live at the project root
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root))


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
