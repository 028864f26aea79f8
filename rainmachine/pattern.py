"""
Rain pattern - the per-pixel foreground/background decision and colors

Everything here is pure: the same parameters, offset and lightness delta
always give the same answer. Coordinates are local to one cell, so every
cell on screen shows the same tile.
"""

import math
import colorsys

import numpy as np

SIN_WAVE_MULTIPLIER = 0.1
BASE_LIGHTNESS = 50

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)

# mod_val below this counts as zero (always background)
MIN_MOD_VAL = 1e-9


def hsl_to_rgb(hue, saturation, lightness):
    """CSS style hsl() to an RGB tuple.

    hue in degrees (any value, wraps at 360), saturation and lightness in
    percent (clamped to 0-100).
    """
    h = (hue % 360) / 360.0
    s = max(0.0, min(100.0, saturation)) / 100.0
    l = max(0.0, min(100.0, lightness)) / 100.0
    r, g, b = colorsys.hls_to_rgb(h, l, s)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))


def background_color(params, lightness_delta=0):
    """Uniform fill color for the whole frame"""
    if params.monochrome_background:
        return BLACK
    return hsl_to_rgb(params.background_hue, 100, BASE_LIGHTNESS + lightness_delta)


def foreground_color(params, lightness_delta=0):
    """Color of every foreground sub-block. Lightness moves opposite to the background."""
    if params.monochrome_foreground:
        return WHITE
    return hsl_to_rgb(params.hue, 100, BASE_LIGHTNESS - lightness_delta)


def _usable_mod_val(mod_val):
    return math.isfinite(mod_val) and mod_val > MIN_MOD_VAL


def is_foreground(i, j, params, offset):
    """Decide whether local sub-block (i, j) of a cell is foreground"""
    mod_val = params.mod_val
    if not _usable_mod_val(mod_val):
        return False

    cell_size = params.cell_size
    # Offset scrolls the pattern vertically inside the cell
    animated_j = (j - offset + cell_size) % cell_size

    base_expression = (params.i_mult * i + params.j_mult * animated_j) * params.expr_mult
    half_mod_val = mod_val / 2
    sin_wave = (math.sin((i * params.j_mult + animated_j * params.i_mult) * SIN_WAVE_MULTIPLIER)
                * half_mod_val + half_mod_val)
    expression = (base_expression + sin_wave) % mod_val

    ratio = expression / mod_val
    if not math.isfinite(ratio):
        return False
    return ratio < params.threshold


def paint(i, j, params, offset, lightness_delta=0):
    """Color of local sub-block (i, j)"""
    if is_foreground(i, j, params, offset):
        return foreground_color(params, lightness_delta)
    return background_color(params, lightness_delta)


_sin = np.vectorize(math.sin, otypes=[np.float64])


def cell_mask(params, offset):
    """Foreground decision for every sub-block of one cell.

    Returns a bool array of shape (n, n), n = cell_size // pixel_size,
    indexed [j, i] (row = vertical position). Same math as is_foreground.
    """
    cell_size = params.cell_size
    steps = np.arange(0, cell_size, params.pixel_size, dtype=np.float64)
    mod_val = params.mod_val
    if not _usable_mod_val(mod_val):
        return np.zeros((len(steps), len(steps)), dtype=bool)

    j, i = np.meshgrid(steps, steps, indexing='ij')
    animated_j = np.mod(j - offset + cell_size, cell_size)

    base_expression = (params.i_mult * i + params.j_mult * animated_j) * params.expr_mult
    half_mod_val = mod_val / 2
    phase = (i * params.j_mult + animated_j * params.i_mult) * SIN_WAVE_MULTIPLIER
    # One cell is small; math.sin keeps the result bit-identical to is_foreground
    sin_wave = _sin(phase) * half_mod_val + half_mod_val

    with np.errstate(invalid='ignore', divide='ignore', over='ignore'):
        expression = np.mod(base_expression + sin_wave, mod_val)
        ratio = expression / mod_val
    return np.isfinite(ratio) & (ratio < params.threshold)
