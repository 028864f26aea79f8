"""
Frame renderer - sweeps the framebuffer cell by cell

The frame is filled with the background color, then every foreground
sub-block (pixel_size x pixel_size) of every cell is painted over it.
Cells at the right and bottom edges are clipped.

Two strategies produce the same image:
    vectorized  one cell's decisions computed with numpy, tiled over the frame
    scalar      the plain cell / sub-block loop, one draw call per sub-block
"""

import numpy as np

from rainmachine.pattern import background_color, cell_mask, foreground_color, is_foreground

STRATEGIES = ('vectorized', 'scalar')


class FrameRenderer:
    def __init__(self, strategy='vectorized'):
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown render strategy '{strategy}', expected one of {STRATEGIES}")
        self.strategy = strategy

    def render(self, framebuffer, params, offset, lightness_delta=0):
        """Compose one frame into the back surface and commit it"""
        self.draw(framebuffer.back, params, offset, lightness_delta)
        framebuffer.commit()

    def draw(self, surface, params, offset, lightness_delta=0):
        """Compose one frame into surface without presenting it"""
        bg = background_color(params, lightness_delta)
        fg = foreground_color(params, lightness_delta)
        if self.strategy == 'scalar':
            self._sweep_scalar(surface, params, offset, bg, fg)
        else:
            self._sweep_vectorized(surface, params, offset, bg, fg)

    def _sweep_scalar(self, surface, params, offset, bg, fg):
        width, height = surface.get_size()
        cell_size = params.cell_size
        pixel_size = params.pixel_size

        surface.fill(bg)
        for y in range(0, height, cell_size):
            for x in range(0, width, cell_size):
                for j in range(0, cell_size, pixel_size):
                    for i in range(0, cell_size, pixel_size):
                        if is_foreground(i, j, params, offset):
                            surface.rect(fg, (x + i, y + j, pixel_size, pixel_size))

    def _sweep_vectorized(self, surface, params, offset, bg, fg):
        width, height = surface.get_size()
        cell_size = params.cell_size
        pixel_size = params.pixel_size

        mask = cell_mask(params, offset)
        # Expand sub-blocks to pixels, then repeat the cell across the frame
        tile = np.repeat(np.repeat(mask, pixel_size, axis=0), pixel_size, axis=1)
        cells_y = -(-height // cell_size)
        cells_x = -(-width // cell_size)
        full = np.tile(tile, (cells_y, cells_x))[:height, :width]

        pixels = np.empty((height, width, 3), dtype=np.uint8)
        pixels[:, :] = bg
        pixels[full] = fg
        surface.set_pixels(pixels)
