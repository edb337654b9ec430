"""Pytest configuration and shared fixtures for sphidewin tests."""

import signal
import sys
from pathlib import Path

import pytest

# Add project root to Python path BEFORE test collection
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture
def restore_signal_handlers():
    """Restore SIGINT/SIGTERM handlers changed by a test."""
    saved = {signum: signal.getsignal(signum) for signum in (signal.SIGINT, signal.SIGTERM)}
    yield
    for signum, handler in saved.items():
        signal.signal(signum, handler)
