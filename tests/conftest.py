"""
Pytest configuration and shared fixtures for SearchModels tests.
"""

import logging

import pytest

from searchmodels import SearchParameters

from model_spaces import PolyModelSpace, RosenbrockSpace, ScalarSpace


@pytest.fixture(autouse=True)
def quiet_logging(caplog):
    """Capture library logs at DEBUG so failures show the search trace."""
    caplog.set_level(logging.DEBUG, logger="searchmodels")


@pytest.fixture
def scalar_space():
    return ScalarSpace(0.0, 10.0, seed=7)


@pytest.fixture
def poly_space():
    return PolyModelSpace(range(2, 6), seed=3)


@pytest.fixture
def rosenbrock_space():
    return RosenbrockSpace(seed=11)


@pytest.fixture
def quiet_params():
    """Small, non-verbose search parameters."""
    return SearchParameters(
        maxpopulation=10,
        bsize=5,
        mutbsize=5,
        crossbsize=5,
        maxiters=10,
        tol=-1.0,
        verbose=False,
    )
