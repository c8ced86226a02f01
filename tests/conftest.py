"""Shared fixtures and markers for chain tests."""

import random

import pytest

from smc.engine.chain import MarkovChain

LAMB_CORPUS = (
    "a lamb ate a lamb made a lamb wear a little lamb with a lamb on top "
    "of that one lamb who lambed over lamb with a cute lamb"
)


def pytest_configure(config):
    config.addinivalue_line("markers", "db: requires PostgreSQL connection")


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def chain(rng):
    return MarkovChain(rng=rng)


@pytest.fixture
def lamb_chain(rng):
    chain = MarkovChain(rng=rng)
    chain.parse_sentence(LAMB_CORPUS)
    return chain
