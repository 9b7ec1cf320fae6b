"""
PNG renderer module for concept diagrams.

Rasterizes a serialized SVG diagram with cairosvg, so the bitmap shows
exactly what the exported vector shows. The result is a transparent RGBA
Pillow image; the exporter composites it onto a white background.
"""

import io
from typing import Tuple

import cairosvg
from PIL import Image


class PNGRenderer:
    """Renders SVG diagram sources as Pillow images."""

    def __init__(self, scale: int = 1):
        """
        Initialize the PNG renderer.

        Args:
            scale: Resolution multiplier (2 for retina-sized output).
        """
        if scale < 1:
            raise ValueError("scale must be a positive integer")
        self.scale = scale

    def render(self, svg_source: str, size: Tuple[int, int]) -> Image.Image:
        """
        Rasterize an SVG document onto a transparent RGBA image.

        Args:
            svg_source: Standalone SVG source, stylesheet included.
            size: Displayed size in pixels before scaling. The document is
                fitted into it keeping its aspect ratio.

        Returns:
            The rasterized image. The caller owns (and should close) it.
        """
        width, height = size
        png = cairosvg.svg2png(
            bytestring=svg_source.encode("utf-8"),
            output_width=width * self.scale,
            output_height=height * self.scale,
        )
        with Image.open(io.BytesIO(png)) as raw:
            return raw.convert("RGBA")
