import random

import pytest

from recurrent import utils


@pytest.fixture(autouse=True)
def seeded_random():
    random.seed(42)
    utils._gauss_cache = None
    yield
