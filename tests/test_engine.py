"""
Tests for the control feed and the RainMachine engine

Run with: pytest tests/test_engine.py -v
"""

import threading

import pytest

from config import TestingConfig
from rainmachine.controls import (
    CONTROL_MALFORMED,
    CONTROL_SET,
    ControlFeed,
    analog_value,
    button_value,
)
from rainmachine.engine import RainMachineEngine
from rainmachine.pattern import BLACK


class TestControlFeed:
    """Tests for the thread-safe control store"""

    def test_set_and_snapshot(self):
        feed = ControlFeed()
        assert feed.set_value('knob_1', 0.42)
        assert feed.set_value('button_left', 1)
        assert feed.snapshot() == {'knob_1': 0.42, 'button_left': True}

    def test_unknown_control_ignored(self):
        feed = ControlFeed()
        assert feed.set_value('knob_9', 0.5) is None
        assert feed.snapshot() == {}

    def test_bad_analog_value_reads_as_zero(self):
        """An unreadable value replaces the last good one with 0.0"""
        feed = ControlFeed()
        for bad in ('high', float('inf'), float('nan'), True, None):
            assert feed.set_value('knob_2', 0.8) == CONTROL_SET
            assert feed.set_value('knob_2', bad) == CONTROL_MALFORMED
            assert feed.snapshot()['knob_2'] == 0.0

    def test_serial_entry_shape(self):
        """Entries shaped like {'value': x} are unwrapped"""
        feed = ControlFeed({'knob_3': {'value': 0.25}, 'button_up': {'value': True}})
        assert feed.snapshot() == {'knob_3': 0.25, 'button_up': True}

    def test_update_returns_accepted(self):
        feed = ControlFeed()
        assert feed.update({'knob_1': 0.1, 'nope': 1, 'button_down': False}) == ['knob_1', 'button_down']

    def test_snapshot_is_a_copy(self):
        feed = ControlFeed({'knob_1': 0.1})
        snap = feed.snapshot()
        feed.set_value('knob_1', 0.9)
        assert snap['knob_1'] == 0.1

    def test_concurrent_writers(self):
        feed = ControlFeed()

        def writer(name):
            for step in range(500):
                feed.set_value(name, step / 500)

        threads = [threading.Thread(target=writer, args=(f'knob_{n}',)) for n in range(1, 6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(feed.snapshot()) == 5

    def test_readers(self):
        assert analog_value({}, 'knob_1') == 0.0
        assert analog_value({'knob_1': '0.5'}, 'knob_1') == 0.5
        assert button_value({}, 'button_up') is False
        assert button_value({'button_up': 'true'}, 'button_up') is True


class TestEngine:
    """Tests for the per-frame tick"""

    def test_tick_before_setup_is_noop(self):
        eng = RainMachineEngine(resolution=(32, 32))
        assert eng.tick() is False
        assert eng.frame_count == 0
        assert eng.render_frame() == (None, None)

        eng.setup()
        assert eng.tick() is True
        assert eng.frame_count == 1

    def test_default_controls_render_background(self, engine):
        """All controls at zero: mod_val 0 means background only (hue 0, red)"""
        engine.tick()
        image = engine.screen.front()
        assert image.getpixel((0, 0)) == (255, 0, 0)
        assert image.getpixel((95, 63)) == (255, 0, 0)

    def test_monochrome_background(self, engine):
        engine.set_controls({'button_down': True, 'vertical_slider_2': 0.5})
        engine.tick()
        assert engine.screen.front().getpixel((10, 10)) == BLACK

    def test_offset_advances_with_speed(self, engine):
        engine.set_control('horizontal_slider', 1.0)
        engine.tick()
        engine.tick()
        assert engine.animation.offset == pytest.approx(0.4)

    def test_offset_frozen_without_speed(self, engine):
        for _ in range(10):
            engine.tick()
        assert engine.animation.offset == 0.0

    def test_lightness_follows_button_presses(self, engine):
        engine.set_control('button_right', True)
        for _ in range(5):
            engine.tick()
        assert engine.lightness.delta == 1

        engine.set_control('button_right', False)
        engine.tick()
        engine.set_control('button_left', True)
        engine.tick()
        engine.tick()
        assert engine.lightness.delta == 0

    def test_lightness_repeat_mode(self):
        eng = RainMachineEngine(resolution=(32, 32), lightness_repeat=True)
        eng.setup()
        eng.set_control('button_left', True)
        for _ in range(60):
            eng.tick()
        assert eng.lightness.delta == -50

    def test_render_frame(self, engine):
        image, error = engine.render_frame()
        assert error is None
        assert image.startswith('data:image/jpeg;base64,')

    def test_render_frame_reports_errors(self, engine, monkeypatch):
        def boom(*args):
            raise RuntimeError('surface gone')

        monkeypatch.setattr(engine.renderer, 'render', boom)
        image, error = engine.render_frame()
        assert image is None
        assert 'surface gone' in error

    def test_latest_controls(self, engine):
        engine.set_control('knob_5', 0.75)
        assert engine.latest_controls() == {'knob_5': 0.75}

    def test_status(self, engine):
        engine.set_control('knob_4', 0.5)
        engine.tick()
        status = engine.get_status()
        assert status['initialized'] is True
        assert status['frame_count'] == 1
        assert status['parameters']['mod_val'] == pytest.approx(64)
        assert status['resolution'] == (96, 64)

    def test_reset_applied_on_next_tick(self, engine):
        engine.set_controls({'horizontal_slider': 1.0, 'button_right': True})
        engine.tick()
        engine.reset()
        # Nothing changes outside the tick
        assert engine.animation.offset == pytest.approx(0.2)
        assert engine.lightness.delta == 1

        engine.tick()
        assert engine.animation.offset == pytest.approx(0.2)
        assert engine.lightness.delta == 0

    def test_button_held_through_reset(self):
        """A held button does not count as a new press after a reset"""
        eng = RainMachineEngine(resolution=(32, 32))
        eng.setup()
        eng.set_control('button_right', True)
        eng.tick()
        eng.reset()
        eng.tick()
        eng.tick()
        assert eng.lightness.delta == 0

        eng.set_control('button_right', False)
        eng.tick()
        eng.set_control('button_right', True)
        eng.tick()
        assert eng.lightness.delta == 1

    def test_malformed_control_reads_as_zero(self, engine):
        """A garbage reading does not leave the knob stuck at its last value"""
        engine.set_control('knob_2', 0.8)
        engine.tick()
        assert engine.params.j_mult == pytest.approx(1.6)

        assert engine.set_control('knob_2', 'garbage') == CONTROL_MALFORMED
        engine.tick()
        assert engine.params.j_mult == 0.0

    def test_from_config(self):
        eng = RainMachineEngine.from_config(TestingConfig)
        assert eng.resolution == (TestingConfig.SCREEN_WIDTH, TestingConfig.SCREEN_HEIGHT)
        assert eng.mapper.native_range('knob_1') == (0.0, 1.0)

    def test_native_ranges_from_config(self):
        eng = RainMachineEngine.from_config({'CONTROL_RANGES': {'knob_4': (0, 1023)},
                                             'SCREEN_WIDTH': 32, 'SCREEN_HEIGHT': 32})
        eng.setup()
        eng.set_control('knob_4', 1023)
        eng.tick()
        assert eng.params.mod_val == pytest.approx(128)
