from __future__ import annotations
from pathlib import Path

__all__ = ["PathResolver", "EXTENSION"]

EXTENSION = ".txt"


class PathResolver:
    """
    逻辑名 -> 输出文件路径
    output_dir / "<output_name>_<name>.txt"，output_name 为空时为 "<name>.txt"
    纯函数，不创建目录
    """

    def __init__(self, output_dir, output_name: str = "") -> None:
        self.output_dir = Path(output_dir)
        self.output_name = str(output_name or "")

    def resolve(self, name: str) -> Path:
        stem = f"{self.output_name}_{name}" if self.output_name else name
        return self.output_dir / f"{stem}{EXTENSION}"

    def __repr__(self) -> str:
        return f"PathResolver({str(self.output_dir)!r}, {self.output_name!r})"
