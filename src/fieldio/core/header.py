# -*- coding: utf-8 -*-
"""
矩阵文件头（Header）
- 不可变值对象：计算域半宽、网格间距、模拟时间、可选脉冲源参数
- 序列化为单行文本，写在每个矩阵文件数值主体之前
  LX <v> LY <v> DX <v> DY <v> TIME <v> [OSC T0 <v> FREQ <v> SIGMA <v>]
"""
from __future__ import annotations
from dataclasses import dataclass

__all__ = ["Header", "HEADER_FMT", "is_header_line"]

# 头部数值格式固定为 %g（六位有效数字）
HEADER_FMT = "%g"

_KEYS = ("LX", "LY", "DX", "DY", "TIME")
_OSC_KEYS = ("T0", "FREQ", "SIGMA")


def is_header_line(line: str) -> bool:
    """首个记号为 LX 即视为头部行。"""
    tokens = line.split(None, 1)
    return bool(tokens) and tokens[0] == "LX"


@dataclass(frozen=True)
class Header:
    domain_extent_x: float
    domain_extent_y: float
    grid_spacing_x: float
    grid_spacing_y: float
    simulated_time: float
    # 脉冲源参数；三者全为 0 表示“不适用”
    source_t0: float = 0.0
    source_frequency: float = 0.0
    source_sigma: float = 0.0

    @property
    def has_source(self) -> bool:
        return not (
            self.source_t0 == 0
            and self.source_frequency == 0
            and self.source_sigma == 0
        )

    def format(self) -> str:
        """
        【功能】渲染为单行头部文本（不含换行符）。
        【说明】三个源参数全为 0 时省略 OSC 子句；任一非零则三者全部输出。
        """
        values = (
            self.domain_extent_x,
            self.domain_extent_y,
            self.grid_spacing_x,
            self.grid_spacing_y,
            self.simulated_time,
        )
        parts = [f"{k} {HEADER_FMT % v}" for k, v in zip(_KEYS, values)]
        if self.has_source:
            osc = (self.source_t0, self.source_frequency, self.source_sigma)
            parts.append("OSC")
            parts.extend(f"{k} {HEADER_FMT % v}" for k, v in zip(_OSC_KEYS, osc))
        return " ".join(parts)

    def __str__(self) -> str:
        return self.format()

    @classmethod
    def parse(cls, line: str) -> "Header":
        """
        【功能】从头部行解析 Header，是 format() 的逆操作。
        【异常】不是合法头部行时抛出 ValueError。
        """
        tokens = line.split()
        if not tokens or tokens[0] != "LX":
            raise ValueError(f"不是头部行：{line!r}")

        vals = {}
        i = 0
        while i < len(tokens):
            key = tokens[i]
            if key == "OSC":
                i += 1
                continue
            if key not in _KEYS and key not in _OSC_KEYS:
                raise ValueError(f"头部中出现未知字段 {key!r}")
            if i + 1 >= len(tokens):
                raise ValueError(f"头部字段 {key} 缺少数值")
            try:
                vals[key] = float(tokens[i + 1])
            except ValueError:
                raise ValueError(f"头部字段 {key} 的数值无法解析：{tokens[i + 1]!r}")
            i += 2

        missing = [k for k in _KEYS if k not in vals]
        if missing:
            raise ValueError(f"头部缺少字段：{missing}")

        return cls(
            vals["LX"],
            vals["LY"],
            vals["DX"],
            vals["DY"],
            vals["TIME"],
            vals.get("T0", 0.0),
            vals.get("FREQ", 0.0),
            vals.get("SIGMA", 0.0),
        )
