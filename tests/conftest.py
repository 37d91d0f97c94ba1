"""Pytest configuration and fixtures."""
import pytest

from clinic_data import reset_bookings


@pytest.fixture(autouse=True)
def reset_state():
    """Start every test with an empty booking store."""
    reset_bookings()
    yield
    reset_bookings()
