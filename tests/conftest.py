import os
import sys

import matplotlib
import numpy as np
import pytest

matplotlib.use("Agg")

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)


class FixedOrder:
    """Stand-in random source whose shuffles always return the same order."""

    def __init__(self, reverse=False):
        self.reverse = reverse

    def permutation(self, n):
        order = np.arange(n)
        return order[::-1] if self.reverse else order


@pytest.fixture()
def rng():
    return np.random.default_rng(20240601)


@pytest.fixture()
def fixed_order():
    return FixedOrder()


@pytest.fixture()
def reversed_order():
    return FixedOrder(reverse=True)
