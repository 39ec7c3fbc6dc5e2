import os

import pytest


def pytest_configure(config):
    # Register markers used across the repo without requiring external plugins.
    config.addinivalue_line(
        "markers", "slow: BN254 pairing checks (seconds each with pure-Python py_ecc)"
    )


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(config, items):
    """
    Skip the pairing-heavy tests when ZKCALL_SKIP_SLOW is set.

    The in-process Groth16 verifier runs four pairings per proof in pure Python,
    which is fine for CI but noticeable in an edit/test loop.
    """
    if os.getenv("ZKCALL_SKIP_SLOW", "").strip().lower() not in {"1", "true", "yes", "on"}:
        return
    slow_skip = pytest.mark.skip(reason="ZKCALL_SKIP_SLOW is set")
    for item in items:
        if item.get_closest_marker("slow") is not None:
            item.add_marker(slow_skip)
