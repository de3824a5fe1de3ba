"""SVG export for traced polygons."""
from typing import List

from palmap.types import Polygon

SVG_NS = "http://www.w3.org/2000/svg"


def format_points(points) -> str:
    """Format points as ``x,y x,y ...``."""
    return ' '.join(f"{int(x)},{int(y)}" for x, y in points)


def polygon_to_svg(polygon: Polygon) -> str:
    """Convert a polygon to an SVG polygon element."""
    return f'<polygon points="{format_points(polygon.points)}" fill="{polygon.fill}" stroke="none"/>'


def polygons_to_svg(polygons: List[Polygon], width: int, height: int) -> str:
    """
    Generate an SVG document from polygons.

    Polygons are emitted flat, in the given order, under a root element with
    viewBox ``0 0 width height``.

    Args:
        polygons: Traced polygons
        width: Image width
        height: Image height

    Returns:
        Complete SVG string
    """
    elements = ''.join(f"\n  {polygon_to_svg(p)}" for p in polygons)
    return f'<svg xmlns="{SVG_NS}" viewBox="0 0 {width} {height}">{elements}\n</svg>'


def save_svg(svg_string: str, output_path) -> None:
    """
    Save SVG string to file.

    Args:
        svg_string: SVG content
        output_path: Output file path
    """
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(svg_string)
