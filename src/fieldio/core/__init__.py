from .header import Header, is_header_line
from .window import Window, ScalarKind

__all__ = ["Header", "is_header_line", "Window", "ScalarKind"]
