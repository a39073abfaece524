from typing import List, Optional
from xml.sax.saxutils import escape, quoteattr

from .core import DEFAULT_SETTINGS, LayoutSettings, NodeStyle, Palette, format_number as _n
from .layout import LayoutResult, PositionedNode

TOGGLE_RADIUS = 10
TOGGLE_GAP = 12
LABEL_INSET = 5
FONT_SIZE = 12


def _render_node(node: PositionedNode, settings: LayoutSettings) -> List[str]:
    style = NodeStyle.for_kind(node.kind)
    offset_x = -node.half_width
    offset_y = -settings.node_height / 2
    stroke = style.stroke or "none"
    font_family = "monospace" if style.monospace else "sans-serif"

    parts = [
        f'  <g class="mindnode-node mindnode-{node.kind.value}" data-node-id={quoteattr(node.id)} '
        f'transform="translate({_n(node.x)},{_n(node.y)})">',
        f'    <rect x="{_n(offset_x)}" y="{_n(offset_y)}" width="{_n(node.width)}" '
        f'height="{_n(settings.node_height)}" rx="{style.corner_radius}" fill="{style.fill}" '
        f'stroke="{stroke}" stroke-width="{style.stroke_width}"/>',
        f'    <text x="0" y="0" text-anchor="middle" dominant-baseline="central" '
        f'font-family="{font_family}" font-size="{FONT_SIZE}" fill="{style.text_color}">'
        f"{escape(node.label)}</text>",
    ]

    if node.has_children:
        glyph = "+" if node.is_collapsed else "-"
        parts.extend(
            [
                f'    <g class="mindnode-toggle" data-node-id={quoteattr(node.id)} '
                f'transform="translate({_n(node.half_width + TOGGLE_GAP)},0)">',
                f'      <circle cx="0" cy="0" r="{TOGGLE_RADIUS}" fill="{Palette.BACKGROUND}" '
                f'stroke="{Palette.PRIMARY}" stroke-width="2"/>',
                f'      <text x="0" y="3.5" text-anchor="middle" fill="{Palette.PRIMARY}" '
                f'font-size="14" font-weight="bold">{glyph}</text>',
                "    </g>",
            ]
        )

    parts.append("  </g>")
    return parts


def render_svg(result: LayoutResult, settings: Optional[LayoutSettings] = None, *, title: Optional[str] = None) -> str:
    """Draw a laid-out mind map as a standalone SVG document.

    Connectors are cubic curves between edge anchors. Each node group and each
    toggle glyph carries ``data-node-id`` so a host page can route clicks back
    to ``MindMapSession.on_toggle``.
    """
    settings = settings or DEFAULT_SETTINGS
    width, height = _n(result.width), _n(result.height)
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">',
    ]
    if title:
        parts.append(f"  <title>{escape(title)}</title>")
    parts.append(f'  <rect width="100%" height="100%" fill="{Palette.BACKGROUND}"/>')

    for edge in result.edges:
        parts.append(
            f'  <path class="mindnode-edge" data-source={quoteattr(edge.source_id)} '
            f'data-target={quoteattr(edge.target_id)} d="{edge.path_data()}" '
            f'stroke="{Palette.LINE}" stroke-width="2" fill="none"/>'
        )

    for node in result.nodes:
        parts.extend(_render_node(node, settings))

    parts.append("</svg>")
    return "\n".join(parts)
