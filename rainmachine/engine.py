"""
RainMachine engine - turns control values into animated frames

One engine drives one framebuffer. Control values may be written from any
thread; everything else (offset, lightness delta, the framebuffer's back
surface) is only touched from tick().
"""

import threading
import traceback

from rainmachine.animation import AnimationState
from rainmachine.controls import ControlFeed, button_value
from rainmachine.lightness import LightnessTrim
from rainmachine.parameters import ParameterMapper
from rainmachine.renderer import FrameRenderer
from rainmachine.surface import Framebuffer

DEFAULT_RESOLUTION = (1280, 720)


class RainMachineEngine:
    def __init__(self, resolution=DEFAULT_RESOLUTION, control_ranges=None,
                 lightness_repeat=False, strategy='vectorized', jpeg_quality=85):
        self.resolution = tuple(resolution)
        self.jpeg_quality = jpeg_quality
        self.screen = None  # Framebuffer, created by setup()

        self.controls = ControlFeed()
        self.mapper = ParameterMapper(control_ranges)
        self.animation = AnimationState()
        self.lightness = LightnessTrim(repeat=lightness_repeat)
        self.renderer = FrameRenderer(strategy)

        self.params = None  # parameters of the last rendered frame
        self._reset_requested = threading.Event()
        self.frame_count = 0

    @classmethod
    def from_config(cls, cfg):
        """Build an engine from a config class or app.config mapping"""
        get = cfg.get if hasattr(cfg, 'get') else lambda key, default=None: getattr(cfg, key, default)
        return cls(
            resolution=(get('SCREEN_WIDTH', DEFAULT_RESOLUTION[0]),
                        get('SCREEN_HEIGHT', DEFAULT_RESOLUTION[1])),
            control_ranges=get('CONTROL_RANGES'),
            lightness_repeat=get('LIGHTNESS_REPEAT', False),
            strategy=get('RENDER_STRATEGY', 'vectorized'),
            jpeg_quality=get('JPEG_QUALITY', 85),
        )

    @property
    def is_initialized(self):
        return self.screen is not None

    def setup(self):
        """Create the presentation surface. Safe to call more than once."""
        if self.screen is None:
            self.screen = Framebuffer(*self.resolution)

    def set_control(self, name, value):
        """Set one control value (returns None for unknown names)"""
        return self.controls.set_value(name, value)

    def set_controls(self, values):
        return self.controls.update(values)

    def latest_controls(self):
        """Current raw control snapshot, as sent to diagnostic clients"""
        return self.controls.snapshot()

    def tick(self):
        """Advance and render one frame.

        No-op (returns False) until setup() has created the surface.
        """
        if self.screen is None:
            return False

        controls = self.controls.snapshot()
        if self._reset_requested.is_set():
            self._reset_requested.clear()
            self.animation.reset()
            self.lightness.reset()

        params = self.mapper.map(controls)
        delta = self.lightness.update(button_value(controls, 'button_left'),
                                      button_value(controls, 'button_right'))
        offset = self.animation.advance(params.speed, params.cell_size)

        self.renderer.render(self.screen, params, offset, delta)
        self.params = params
        self.frame_count += 1
        return True

    def render_frame(self):
        """Render one frame and return it as a base64 JPEG data URL

        Returns (None, None) while the surface is not set up yet; the caller
        just tries again on its next tick.
        """
        try:
            if not self.tick():
                return None, None
            return self.screen.to_data_url(self.jpeg_quality), None

        except Exception as e:
            error_msg = f"Error rendering frame: {str(e)}\n{traceback.format_exc()}"
            return None, error_msg

    def reset(self):
        """Back to a still, untrimmed pattern (controls are kept).

        Applied at the start of the next tick.
        """
        self._reset_requested.set()

    def get_status(self):
        """Get current engine status"""
        return {
            'initialized': self.is_initialized,
            'frame_count': self.frame_count,
            'offset': self.animation.offset,
            'lightness_delta': self.lightness.delta,
            'parameters': self.params.to_dict() if self.params else None,
            'controls': self.latest_controls(),
            'resolution': self.resolution,
            'strategy': self.renderer.strategy,
        }
