# -*- coding: utf-8 -*-
"""
FileHandler — 一次运行的文件输出/载入门面
=========================================

【功能】
把路径解析（PathResolver）、打开文件表（FileRegistry）与两种编解码
（矩阵、列表）组合起来，供模拟驱动在外层循环中调用。
自身不持有任何网格缓冲区，只在调用期间读写调用方传入的数组。

【成员】
- resolver: PathResolver   逻辑名 -> 路径
- registry: FileRegistry   逻辑名 -> 已打开流（每次运行只打开一次）
- load_dir: Optional[Path] 重启文件目录；None 表示不载入
- outputs:  tuple[str]     需要写出的矩阵名，含 "all" 时全部写出
- increment: int           默认抽样步长（无显式窗口时使用）

【生命周期】
由驱动创建并拥有；运行结束调用 close()（或使用 with 语句）。
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, TextIO
import logging
import numpy as np

from ..core.header import Header
from ..core.window import Window
from .paths import EXTENSION, PathResolver
from .registry import FileRegistry
from .matrix import LoadResult, load_matrix, write_matrix
from .listfile import load_list, write_list

__all__ = ["FileHandler"]

logger = logging.getLogger(__name__)


class FileHandler:
    def __init__(
        self,
        output_dir,
        output_name: str = "",
        *,
        load_dir=None,
        outputs: Iterable[str] = ("all",),
        increment: int = 1,
    ) -> None:
        if int(increment) < 1:
            raise ValueError(f"increment 必须 ≥ 1，得到 {increment}")
        self.resolver = PathResolver(output_dir, output_name)
        self.registry = FileRegistry(self.resolver)
        self.load_dir: Optional[Path] = Path(load_dir) if load_dir else None
        # 重启文件沿用输出的命名规则，可直接指向上一次运行的输出目录
        self.load_resolver = (
            PathResolver(self.load_dir, output_name) if self.load_dir else None
        )
        self.outputs = tuple(outputs)
        self.increment = int(increment)

    @classmethod
    def from_config(cls, io_cfg: Dict[str, Any]) -> "FileHandler":
        """由配置的 io 段构建（字段默认值见 config_loader.load_cfg）。"""
        return cls(
            io_cfg["output_dir"],
            io_cfg.get("output_name", ""),
            load_dir=io_cfg.get("load_dir"),
            outputs=io_cfg.get("outputs", ("all",)),
            increment=io_cfg.get("increment", 1),
        )

    # -------- 单文件 -------- #
    def get_file(self, name: str) -> TextIO:
        return self.registry.get(name)

    def do_output(self, name: str) -> bool:
        return "all" in self.outputs or name in self.outputs

    def output_matrix(
        self,
        buffer: np.ndarray,
        N: int,
        name: str,
        header: Header,
        window: Optional[Window] = None,
    ) -> None:
        """按逻辑名写矩阵；首次使用该名时截断打开。"""
        write_matrix(buffer, N, header, self.get_file(name), window=window)

    def output_list(self, rows: Sequence[Sequence[float]], name: str) -> None:
        write_list(rows, self.get_file(name))

    def load_list(self, path, name: str) -> List[List[float]]:
        """path 为目录时读取 path/<name>.txt，否则直接读取 path。"""
        p = Path(path)
        if p.is_dir():
            p = p / f"{name}{EXTENSION}"
        return load_list(p)

    # -------- 批量 -------- #
    def output_matrices(
        self,
        buffers: Mapping[str, np.ndarray],
        N: int,
        header: Header,
        window: Optional[Window] = None,
    ) -> List[str]:
        """
        【功能】写出 buffers 中被 outputs 选中的矩阵。
        【说明】未给 window 时使用全网格 + 配置的 increment。
        【输出】实际写出的逻辑名列表（保持 buffers 的顺序）。
        """
        window = window or Window.full(N, self.increment)
        written = []
        for name, buf in buffers.items():
            if not self.do_output(name):
                continue
            self.output_matrix(buf, N, name, header, window)
            written.append(name)
        logger.info("写出矩阵：%s", ", ".join(written) if written else "(无)")
        return written

    def load_matrices(self, buffers: Mapping[str, np.ndarray]) -> Dict[str, LoadResult]:
        """
        【功能】从 load_dir 中与输出同名的文件载入重启矩阵，就地写入对应缓冲区。
        【说明】未配置 load_dir 时什么都不做，返回空字典；
               单个文件缺失时该缓冲区保持原值（通常为生成的初值）。
        """
        if self.load_dir is None:
            return {}
        results = {}
        for name, buf in buffers.items():
            results[name] = load_matrix(self.load_resolver.resolve(name), buf)
        return results

    def cache_to_files(self, series: Mapping[str, Sequence[Sequence[float]]]) -> None:
        """把驱动缓存的时间序列逐个写成列表文件。"""
        for name, rows in series.items():
            self.output_list(rows, name)

    # -------- 生命周期 -------- #
    def flush(self) -> None:
        self.registry.flush()

    def close(self) -> None:
        self.registry.close()

    def __enter__(self) -> "FileHandler":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
