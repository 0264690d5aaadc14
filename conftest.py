# conftest.py
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import pytest


@pytest.fixture(autouse=True)
def close_figures():
    """Non-interactive backend for all tests; drop figures afterwards."""
    yield
    plt.close('all')
