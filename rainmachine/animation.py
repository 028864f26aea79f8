"""
Scroll animation - vertical offset inside one cell
"""


def advance(prev_offset, speed, cell_size):
    """Next scroll offset.

    Frozen (returned as-is, no wrap) when speed <= 0. Otherwise wraps modulo
    the current cell_size, which may be smaller than the one the previous
    offset was computed against.
    """
    if not speed > 0:
        return prev_offset
    return (prev_offset + speed) % cell_size


class AnimationState:
    """Owns the scroll offset between frames"""

    def __init__(self, offset=0.0):
        self.offset = offset

    def advance(self, speed, cell_size):
        self.offset = advance(self.offset, speed, cell_size)
        return self.offset

    def reset(self):
        self.offset = 0.0
