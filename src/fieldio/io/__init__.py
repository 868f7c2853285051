"""
io 包的对外 API。

驱动只需要 FileHandler；单独的编解码函数供工具与测试直接使用。
"""

from .paths import PathResolver
from .registry import FileRegistry
from .matrix import LoadResult, LoadStatus, format_matrix, load_matrix, write_matrix
from .listfile import load_list, write_list
from .handler import FileHandler

__all__ = [
    "PathResolver",
    "FileRegistry",
    "LoadResult",
    "LoadStatus",
    "format_matrix",
    "load_matrix",
    "write_matrix",
    "load_list",
    "write_list",
    "FileHandler",
]
