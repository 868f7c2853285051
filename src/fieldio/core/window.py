# -*- coding: utf-8 -*-
"""
窗口描述与标量类型
- Window: N×N 网格上的子矩形 + 抽样步长 increment
- ScalarKind: 实数（每样本 1 个记号）/ 复数（每样本 2 个记号：实部 虚部）
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import numpy as np

__all__ = ["Window", "ScalarKind", "as_grid"]


class ScalarKind(Enum):
    REAL = 1
    COMPLEX = 2

    @property
    def tokens_per_sample(self) -> int:
        return self.value

    @classmethod
    def of(cls, buffer: np.ndarray) -> "ScalarKind":
        return cls.COMPLEX if np.iscomplexobj(buffer) else cls.REAL


@dataclass(frozen=True)
class Window:
    col_start: int
    col_stop: int
    row_start: int
    row_stop: int
    increment: int = 1

    @classmethod
    def full(cls, N: int, increment: int = 1) -> "Window":
        return cls(0, int(N), 0, int(N), int(increment))

    def validate(self, N: int) -> "Window":
        """0 ≤ start < stop ≤ N 且 increment ≥ 1，否则抛 ValueError。"""
        if not (0 <= self.col_start < self.col_stop <= N):
            raise ValueError(
                f"列范围非法：[{self.col_start}, {self.col_stop}) 不在 [0, {N}] 内"
            )
        if not (0 <= self.row_start < self.row_stop <= N):
            raise ValueError(
                f"行范围非法：[{self.row_start}, {self.row_stop}) 不在 [0, {N}] 内"
            )
        if self.increment < 1:
            raise ValueError(f"increment 必须 ≥ 1，得到 {self.increment}")
        return self

    @property
    def slices(self):
        """(行切片, 列切片)，可直接用于 (N, N) 数组。"""
        inc = self.increment
        return (
            slice(self.row_start, self.row_stop, inc),
            slice(self.col_start, self.col_stop, inc),
        )

    @property
    def shape(self):
        inc = self.increment
        if inc < 1:
            raise ValueError(f"increment 必须 ≥ 1，得到 {inc}")
        rows = -(-(self.row_stop - self.row_start) // inc)
        cols = -(-(self.col_stop - self.col_start) // inc)
        return rows, cols

    @property
    def n_samples(self) -> int:
        rows, cols = self.shape
        return rows * cols


def as_grid(buffer: np.ndarray, N: int) -> np.ndarray:
    """
    把外部缓冲区视为 (N, N) 行主序数组（只读视图，不拷贝、不保留引用）。
    接受长度 N*N 的一维数组或 (N, N) 二维数组。
    """
    a = np.asarray(buffer)
    if a.size != N * N or a.ndim not in (1, 2):
        raise ValueError(f"缓冲区形状 {a.shape} 与网格 N={N} 不匹配")
    return a.reshape(N, N)
