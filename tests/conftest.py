"""Shared fixtures for the RainMachine tests."""

import pytest

from rainmachine.engine import RainMachineEngine
from rainmachine.parameters import RenderParameters


@pytest.fixture
def params():
    """Parameters from the worked example: i=j=1, expr 10, mod 20, threshold 0.5"""
    return RenderParameters(
        i_mult=1.0,
        j_mult=1.0,
        expr_mult=10.0,
        mod_val=20.0,
        threshold=0.5,
        speed=0.1,
        hue=200.0,
        background_hue=40.0,
        cell_size=32,
        pixel_size=2,
    )


@pytest.fixture
def engine():
    """Small engine with its surface already set up"""
    eng = RainMachineEngine(resolution=(96, 64))
    eng.setup()
    return eng


@pytest.fixture
def flask_app():
    """The Flask app reconfigured for testing, render loop stopped afterwards"""
    from rainmachine import app as app_module

    app = app_module.create_app('testing')
    yield app_module
    app_module.stop_rendering()
