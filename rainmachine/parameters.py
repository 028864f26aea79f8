"""
Parameter mapping - raw control values to render parameters

Knob layout (same as the hardware panel):
    knob_1             i multiplier        0 .. 2
    knob_2             j multiplier        0 .. 2
    knob_3             expression mult     0 .. 128
    knob_4             modulo value        0 .. 128
    knob_5             threshold           0 .. 1
    horizontal_slider  scroll speed        0 .. 0.2
    vertical_slider_1  foreground hue      180 .. -180 (inverted)
    vertical_slider_2  background hue      0 .. 360
    vertical_slider_3  scale factor        0.125 .. 1 -> cell / pixel size
    button_up          monochrome foreground (white)
    button_down        monochrome background (black)
"""

import math
from dataclasses import dataclass

from rainmachine.controls import DEFAULT_NATIVE_RANGE, analog_value, button_value

BASE_CELL_SIZE = 32
BASE_PIXEL_SIZE = 2
SIZE_BUCKETS = 8

SCALE_FACTOR_MIN = 0.125
SCALE_FACTOR_MAX = 1.0


@dataclass(frozen=True)
class RenderParameters:
    """Everything one frame needs, recomputed from the controls every tick"""
    i_mult: float = 0.0
    j_mult: float = 0.0
    expr_mult: float = 0.0
    mod_val: float = 0.0
    threshold: float = 0.0
    speed: float = 0.0
    hue: float = 180.0
    background_hue: float = 0.0
    monochrome_foreground: bool = False
    monochrome_background: bool = False
    cell_size: int = BASE_CELL_SIZE
    pixel_size: int = BASE_PIXEL_SIZE

    def to_dict(self):
        return {
            'i_mult': self.i_mult,
            'j_mult': self.j_mult,
            'expr_mult': self.expr_mult,
            'mod_val': self.mod_val,
            'threshold': self.threshold,
            'speed': self.speed,
            'hue': self.hue,
            'background_hue': self.background_hue,
            'monochrome_foreground': self.monochrome_foreground,
            'monochrome_background': self.monochrome_background,
            'cell_size': self.cell_size,
            'pixel_size': self.pixel_size,
        }


def convert_range(value, src_lo, src_hi, dst_lo, dst_hi):
    """Linearly map value from [src_lo, src_hi] onto [dst_lo, dst_hi].

    Not clamped: values outside the source range extrapolate. A degenerate
    source range maps everything to dst_lo.
    """
    span = src_hi - src_lo
    if span == 0:
        return dst_lo
    return dst_lo + (value - src_lo) / span * (dst_hi - dst_lo)


def size_bucket(scale_factor):
    """Bucket index 0-7 for a scale factor"""
    if not math.isfinite(scale_factor):
        return 0
    return max(0, min(SIZE_BUCKETS - 1, int(math.floor(scale_factor * SIZE_BUCKETS))))


def sizes_for_bucket(bucket):
    """(cell_size, pixel_size) for a bucket index. Both use the same index."""
    bucket = max(0, min(SIZE_BUCKETS - 1, int(bucket)))
    return BASE_CELL_SIZE * 2 ** bucket, BASE_PIXEL_SIZE * 2 ** bucket


class ParameterMapper:
    """Maps a control snapshot to RenderParameters.

    ranges: optional {control_name: (lo, hi)} giving each analog control's
    native range. Controls not listed use DEFAULT_NATIVE_RANGE.
    """

    def __init__(self, ranges=None):
        self.ranges = dict(ranges or {})

    def native_range(self, name):
        return self.ranges.get(name, DEFAULT_NATIVE_RANGE)

    def _control(self, controls, name, dst_lo, dst_hi):
        lo, hi = self.native_range(name)
        value = analog_value(controls, name)
        # Keep readings inside the declared native range
        value = max(min(lo, hi), min(max(lo, hi), value))
        return convert_range(value, lo, hi, dst_lo, dst_hi)

    def map(self, controls):
        """Build RenderParameters from a snapshot. Never raises."""
        scale_factor = self._control(controls, 'vertical_slider_3',
                                     SCALE_FACTOR_MIN, SCALE_FACTOR_MAX)
        cell_size, pixel_size = sizes_for_bucket(size_bucket(scale_factor))

        return RenderParameters(
            i_mult=self._control(controls, 'knob_1', 0, 2),
            j_mult=self._control(controls, 'knob_2', 0, 2),
            expr_mult=self._control(controls, 'knob_3', 0, 128),
            mod_val=self._control(controls, 'knob_4', 0, 128),
            threshold=self._control(controls, 'knob_5', 0, 1),
            speed=self._control(controls, 'horizontal_slider', 0, 0.2),
            hue=self._control(controls, 'vertical_slider_1', 180, -180),
            background_hue=self._control(controls, 'vertical_slider_2', 0, 360),
            monochrome_foreground=button_value(controls, 'button_up'),
            monochrome_background=button_value(controls, 'button_down'),
            cell_size=cell_size,
            pixel_size=pixel_size,
        )


def map_parameters(controls, ranges=None):
    """Shortcut for a one-off mapping"""
    return ParameterMapper(ranges).map(controls)
