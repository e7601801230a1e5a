"""
conftest.py — Shared pytest fixtures for the Frontline pricing test suite.

All tests in this suite are pure unit tests that exercise the pricing
engines and the quote session in isolation; no I/O is performed.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``frontline.*`` imports resolve correctly regardless of where pytest is
    invoked.
"""

import sys
import os
import pytest

# ---------------------------------------------------------------------------
# Ensure ``backend/`` is on the import path before any frontline imports occur.
# ---------------------------------------------------------------------------
_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clean_default_cost_env(monkeypatch):
    """Factory default costs must not leak in from the developer's shell or .env."""
    monkeypatch.delenv("FRONTLINE_MP3_DEFAULT_COST", raising=False)
    monkeypatch.delenv("FRONTLINE_LV2_DEFAULT_COST", raising=False)


# ---------------------------------------------------------------------------
# ReferenceDataStore fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def store():
    """
    ReferenceDataStore seeded with factory tables.

    Defaults:
      system cost MP3 = 50 000, LV2 = 60 000
      foam S/M/L/XL = 700 / 1000 / 1400 / 1800
      solar = 700 flat, UPS = 250 flat
    """
    from frontline.services.reference_store import ReferenceDataStore
    return ReferenceDataStore()


# ---------------------------------------------------------------------------
# QuoteSession fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def session():
    """
    Fresh QuoteSession at factory state:
      MP3 / M, cost 50 000, GM 0.5, price 100 000 (last edited = price),
      adder GM 0.5, Foam on, vertical 'res', no high usage, monthly billing.
    """
    from frontline.services.quote_session import QuoteSession
    return QuoteSession()


@pytest.fixture
def bare_session():
    """QuoteSession with every add-on switched off."""
    from frontline.models.pricing_schema import Adder
    from frontline.services.quote_session import QuoteSession
    s = QuoteSession()
    for adder in Adder:
        s.set_adder_enabled(adder, False)
    return s
