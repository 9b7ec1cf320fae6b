"""
File export functionality for concept diagrams.

This module handles exporting rendered diagrams to downloadable artifacts:
- SVG documents - a self-contained copy of the live SVG with the stylesheet
  embedded and an XML declaration
- PNG images - the exported SVG rasterized at its displayed size over a
  white background

Both exports work on the most recently rendered Drawing and never modify it.
When there is nothing to export, or rasterizing fails, no artifact is
produced and None is returned.
"""

import copy
import io
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from .png_renderer import PNGRenderer
from .renderer import Drawing
from .svg_renderer import SVGRenderer, build_stylesheet

XML_DECLARATION = '<?xml version="1.0" standalone="no"?>\r\n'


class DiagramExporter:
    """
    Exports concept diagrams to SVG and PNG.

    Attributes:
        png_renderer: Rasterizer used for raster export.
        svg_renderer: Builder used when a drawing has no live document yet.
    """

    def __init__(
        self,
        png_renderer: Optional[PNGRenderer] = None,
        svg_renderer: Optional[SVGRenderer] = None,
    ):
        self.png_renderer = png_renderer if png_renderer is not None else PNGRenderer()
        self.svg_renderer = svg_renderer if svg_renderer is not None else SVGRenderer()

    @staticmethod
    def artifact_name(drawing: Drawing, extension: str) -> str:
        """File name for an exported diagram, e.g. ``diagram-12345.svg``."""
        return f"diagram-{drawing.concept_id or 'concept'}.{extension}"

    def export_vector(self, drawing: Optional[Drawing]) -> Optional[str]:
        """
        Serialize a drawing to a standalone SVG document.

        The live document is deep-copied so embedding the stylesheet leaves
        it untouched.

        Returns:
            SVG source starting with an XML declaration, or None if there is
            no rendered content.
        """
        if drawing is None or drawing.is_empty:
            return None

        document = drawing.document
        if document is None:
            document = self.svg_renderer.render(drawing)

        standalone = copy.deepcopy(document)
        standalone.append_css(build_stylesheet())
        source = standalone.as_svg()
        if not source.startswith("<?xml"):
            source = XML_DECLARATION + source
        return source

    def export_raster(self, drawing: Optional[Drawing]) -> Optional[bytes]:
        """
        Rasterize a drawing to PNG bytes.

        The exported SVG is rasterized at the drawing's bounding rectangle
        (times the renderer scale) over a white background.

        Returns:
            PNG bytes, or None if there is no rendered content or
            rasterizing failed.
        """
        source = self.export_vector(drawing)
        if source is None:
            return None

        width, height = drawing.bounding_rect()
        if width <= 0 or height <= 0:
            return None

        try:
            layer = self.png_renderer.render(source, (width, height))
        except (OSError, ValueError):
            return None

        bitmap = None
        try:
            bitmap = Image.new("RGB", layer.size, "#ffffff")
            bitmap.paste(layer, (0, 0), layer)
            output = io.BytesIO()
            bitmap.save(output, "PNG")
            return output.getvalue()
        except (OSError, ValueError):
            return None
        finally:
            layer.close()
            if bitmap is not None:
                bitmap.close()

    def save_svg(
        self, drawing: Optional[Drawing], directory: Union[str, Path] = "."
    ) -> Optional[Path]:
        """
        Save a drawing as ``diagram-<conceptId>.svg`` in a directory.

        Returns:
            The written path, or None if nothing was exported.
        """
        source = self.export_vector(drawing)
        if source is None:
            return None
        output_path = Path(directory) / self.artifact_name(drawing, "svg")
        output_path.write_text(source, encoding="utf-8")
        return output_path

    def save_png(
        self, drawing: Optional[Drawing], directory: Union[str, Path] = "."
    ) -> Optional[Path]:
        """
        Save a drawing as ``diagram-<conceptId>.png`` in a directory.

        Returns:
            The written path, or None if nothing was exported.
        """
        data = self.export_raster(drawing)
        if data is None:
            return None
        output_path = Path(directory) / self.artifact_name(drawing, "png")
        output_path.write_bytes(data)
        return output_path
