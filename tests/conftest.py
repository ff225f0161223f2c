"""Pytest configuration and fixtures for parking lot tests."""
import os
import sys

import pytest

# flat layout: make the project root importable when running from a checkout
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from parking_lot import ParkingLot
from settings import load_settings


@pytest.fixture
def settings():
    """Settings built from an empty environment, i.e. all defaults."""
    return load_settings({"APP_ENV": "testing"})


@pytest.fixture
def lot():
    """A fresh, uninitialized lot per test."""
    return ParkingLot()


@pytest.fixture
def app(settings, lot):
    app = create_app(settings, lot)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    """Create a test client for the Flask app."""
    with app.test_client() as client:
        yield client


@pytest.fixture
def five_slot_lot(lot):
    lot.create_lot(5)
    return lot
