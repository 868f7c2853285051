from __future__ import annotations
from pathlib import Path
import logging
from typing import Dict, TextIO

from .paths import PathResolver

__all__ = ["FileRegistry", "prepare_out"]

logger = logging.getLogger(__name__)


def prepare_out(output_dir) -> Path:
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    return out


class FileRegistry:
    """
    逻辑名 -> 已打开输出流 的惰性映射
    - 每个逻辑名在一次运行中只打开一次（"w" 截断），之后复用同一句柄
    - 句柄由拥有者在运行结束时 close()，中途不关闭重开
    - 非线程安全；多线程输出需要外部加锁
    """

    def __init__(self, resolver: PathResolver) -> None:
        self.resolver = resolver
        self._files: Dict[str, TextIO] = {}

    def get(self, name: str) -> TextIO:
        f = self._files.get(name)
        if f is None:
            path = self.resolver.resolve(name)
            prepare_out(path.parent)
            f = open(path, "w", encoding="utf-8")
            self._files[name] = f
            logger.debug("打开输出文件 %s -> %s", name, path)
        return f

    def __contains__(self, name: str) -> bool:
        return name in self._files

    @property
    def names(self):
        return tuple(self._files)

    def flush(self) -> None:
        for f in self._files.values():
            f.flush()

    def close(self) -> None:
        for name, f in self._files.items():
            if not f.closed:
                f.close()
                logger.debug("关闭输出文件 %s", name)
        self._files.clear()

    def __enter__(self) -> "FileRegistry":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
