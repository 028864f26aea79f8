"""
Lightness trim - left/right buttons push foreground and background lightness apart
"""

LIGHTNESS_DELTA_MIN = -50
LIGHTNESS_DELTA_MAX = 50


def update_lightness(delta, left_pressed, right_pressed):
    """One clamped step: left darkens the background, right brightens it.

    Both buttons together cancel out, including at the limits.
    """
    if left_pressed and right_pressed:
        return delta
    if left_pressed:
        delta = max(LIGHTNESS_DELTA_MIN, delta - 1)
    if right_pressed:
        delta = min(LIGHTNESS_DELTA_MAX, delta + 1)
    return delta


class LightnessTrim:
    """Holds the lightness delta across frames.

    By default a button moves the delta once per press (false -> true).
    With repeat=True it keeps stepping every tick while held.
    """

    def __init__(self, repeat=False, delta=0):
        self.repeat = repeat
        self.delta = delta
        self._left_was_pressed = False
        self._right_was_pressed = False

    def update(self, left_pressed, right_pressed):
        left_pressed = bool(left_pressed)
        right_pressed = bool(right_pressed)

        if self.repeat:
            left_step, right_step = left_pressed, right_pressed
        else:
            left_step = left_pressed and not self._left_was_pressed
            right_step = right_pressed and not self._right_was_pressed

        self._left_was_pressed = left_pressed
        self._right_was_pressed = right_pressed

        self.delta = update_lightness(self.delta, left_step, right_step)
        return self.delta

    def reset(self):
        """Zero the delta. A button still held from before stays ignored until released."""
        self.delta = 0
