class MindMapError(Exception):
    pass


class ConfigurationError(MindMapError):
    pass


class TreeFormatError(MindMapError, ValueError):
    pass


class DuplicateNodeError(MindMapError):
    def __init__(self, node_id: str) -> None:
        super().__init__(f"Node id '{node_id}' appears more than once in the tree.")
        self.node_id = node_id


class GenerationError(MindMapError):
    pass


class CanvasOverflowError(MindMapError):
    pass
