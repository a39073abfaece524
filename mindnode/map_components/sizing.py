from typing import Union

from .core import DEFAULT_SETTINGS, LayoutSettings, NodeKind, NodeStyle

NODE_HEIGHT = DEFAULT_SETTINGS.node_height


def node_width(
    label: str, kind: Union[NodeKind, str] = NodeKind.CHILD, settings: LayoutSettings = DEFAULT_SETTINGS
) -> float:
    char_width = NodeStyle.for_kind(NodeKind.coerce(kind)).char_width
    return max(settings.min_node_width, len(label) * char_width + settings.node_padding)


def half_width(
    label: str, kind: Union[NodeKind, str] = NodeKind.CHILD, settings: LayoutSettings = DEFAULT_SETTINGS
) -> float:
    return node_width(label, kind, settings) / 2
