"""
Control input feed - holds the latest raw control values

Values arrive from the hardware bridge (or the browser) on their own thread,
one named control at a time. The render tick takes a single snapshot per frame
so parameters never change in the middle of a sweep.
"""

import math
import threading

# Analog controls (native range configurable per control)
ANALOG_CONTROLS = (
    'knob_1',
    'knob_2',
    'knob_3',
    'knob_4',
    'knob_5',
    'horizontal_slider',
    'vertical_slider_1',
    'vertical_slider_2',
    'vertical_slider_3',
)

# Digital controls (pressed / released)
BUTTON_CONTROLS = (
    'button_left',
    'button_right',
    'button_up',
    'button_down',
)

DEFAULT_NATIVE_RANGE = (0.0, 1.0)

# set_value results
CONTROL_SET = 'set'
CONTROL_MALFORMED = 'malformed'


def analog_value(controls, name):
    """Read an analog control from a snapshot, 0.0 when missing or malformed"""
    try:
        value = float(controls.get(name, 0.0))
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


def button_value(controls, name):
    """Read a button from a snapshot, False when missing"""
    value = controls.get(name)
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'on', 'pressed')
    return bool(value)


class ControlFeed:
    """Thread-safe store of the last known value of every control.

    Writers are the socket handlers; the only reader that matters is the
    render tick, which calls snapshot() once at the start of each frame.
    """

    def __init__(self, initial=None):
        self._lock = threading.Lock()
        self._values = {}
        if initial:
            self.update(initial)

    def set_value(self, name, value):
        """Set a single control.

        Returns CONTROL_SET, CONTROL_MALFORMED (analog value unreadable,
        stored as 0.0) or None for an unknown name.

        The serial bridge sends entries shaped like {'value': 0.42}; bare
        values are accepted too.
        """
        if isinstance(value, dict):
            value = value.get('value')
        if name in ANALOG_CONTROLS:
            result = CONTROL_SET
            if (isinstance(value, bool) or not isinstance(value, (int, float))
                    or not math.isfinite(value)):
                value = 0.0
                result = CONTROL_MALFORMED
            with self._lock:
                self._values[name] = float(value)
            return result
        if name in BUTTON_CONTROLS:
            pressed = button_value({name: value}, name)
            with self._lock:
                self._values[name] = pressed
            return CONTROL_SET
        return None

    def update(self, values):
        """Apply several controls at once, returns the known names that were stored"""
        accepted = []
        for name, value in values.items():
            if self.set_value(name, value) is not None:
                accepted.append(name)
        return accepted

    def snapshot(self):
        """Return a copy of the current values (safe to read without the lock)"""
        with self._lock:
            return dict(self._values)

    def clear(self):
        with self._lock:
            self._values.clear()
