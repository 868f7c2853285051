# -*- coding: utf-8 -*-
"""
矩阵文本编解码
==============

【格式】
    LX <v> LY <v> DX <v> DY <v> TIME <v> [OSC T0 <v> FREQ <v> SIGMA <v>]
    <第 0 行样本，空格分隔>
    <第 1 行样本，空格分隔>
    ...
- 实数：每样本 1 个记号；复数：每样本 2 个记号 "<实部> <虚部>"
- 行间以换行分隔，最后一行之后不加分隔符
- 不写坐标，N 由调用方从配置得知

【写】按窗口 (col_start, col_stop, row_start, row_stop, increment) 抽样，
     行主序、列变化最快；所有数值统一用 FLOAT_FMT 格式化，保证相同输入逐字节一致。
【读】跳过首行头部（首记号为 LX），按行主序顺序填入调用方缓冲区；
     文件不足时保留缓冲区尾部原值，并以 PARTIAL 状态报告。
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, TextIO
import io
import logging
import numpy as np

from ..core.header import Header, is_header_line
from ..core.window import ScalarKind, Window, as_grid

__all__ = [
    "FLOAT_FMT",
    "LoadStatus",
    "LoadResult",
    "format_matrix",
    "write_matrix",
    "load_matrix",
]

logger = logging.getLogger(__name__)

# 固定数值格式：17 位有效数字可精确回读 float64，1.0 -> "1"
FLOAT_FMT = "%.17g"


def _tokens(grid: np.ndarray, window: Window, kind: ScalarKind) -> np.ndarray:
    """窗口内样本展开为 (rows, cols * tokens_per_sample) 的 float64 记号矩阵。"""
    sub = grid[window.slices]
    if kind is ScalarKind.COMPLEX:
        # complex128 连续存储即 (实部, 虚部) 交错
        return np.ascontiguousarray(sub, dtype=np.complex128).view(np.float64)
    return np.asarray(sub, dtype=np.float64)


def format_matrix(
    buffer: np.ndarray,
    N: int,
    header: Header,
    *,
    window: Optional[Window] = None,
) -> str:
    """
    【功能】把 N×N 缓冲区的窗口部分渲染为矩阵文件文本（头部行 + 主体）。

    【输入】
    - buffer: 长度 N*N 的一维数组或 (N, N) 数组，实数或复数
    - N: 网格边长
    - header: 写在首行的 Header
    - window: 省略时为全网格、步长 1

    【输出】
    - str：头部行 + "\\n" + 主体，主体末尾无换行
    """
    grid = as_grid(buffer, N)
    window = (window or Window.full(N)).validate(N)
    kind = ScalarKind.of(grid)

    rows = _tokens(grid, window, kind)
    buf = io.StringIO()
    np.savetxt(buf, rows, fmt=FLOAT_FMT, delimiter=" ")
    # savetxt 每行以换行结尾，去掉最后一个
    body = buf.getvalue()[:-1]
    return f"{header.format()}\n{body}"


def write_matrix(
    buffer: np.ndarray,
    N: int,
    header: Header,
    out: TextIO,
    *,
    window: Optional[Window] = None,
) -> None:
    """
    写入已打开的文本流；不 flush、不 close。
    流中已有内容（同一逻辑名的后续快照）时先补一个换行，使新头部另起一行。
    写失败（磁盘满、权限等）原样抛出 OSError。
    """
    text = format_matrix(buffer, N, header, window=window)
    if out.tell() > 0:
        out.write("\n")
    out.write(text)


class LoadStatus(Enum):
    COMPLETE = "complete"
    PARTIAL = "partial"
    MISSING = "missing"


@dataclass
class LoadResult:
    """
    【功能】load_matrix 的结果
    - 文件能打开即为真（COMPLETE 或 PARTIAL），MISSING 为假
    - PARTIAL 表示样本数不足，缓冲区尾部保持调用前的值，是否接受由调用方决定
    """

    path: Path
    status: LoadStatus
    samples_read: int = 0
    samples_expected: int = 0
    header: Optional[Header] = None

    def __bool__(self) -> bool:
        return self.status is not LoadStatus.MISSING

    @property
    def complete(self) -> bool:
        return self.status is LoadStatus.COMPLETE


def _parse_numbers(tokens, limit: int) -> np.ndarray:
    """解析前 limit 个数值记号；遇到非数值记号即停止。"""
    head = tokens[:limit]
    try:
        return np.array(head, dtype=np.float64)
    except ValueError:
        vals = []
        for tok in head:
            try:
                vals.append(float(tok))
            except ValueError:
                logger.warning("遇到非数值记号 %r，停止读取", tok)
                break
        return np.array(vals, dtype=np.float64)


def load_matrix(filepath, buffer: np.ndarray) -> LoadResult:
    """
    【功能】从矩阵文件读入调用方缓冲区（就地写入）。

    【输入】
    - filepath: 文件路径
    - buffer: C 连续的 numpy 数组（一维 N*N 或 (N, N)），实数或复数

    【输出】
    - LoadResult；文件缺失或不可读时状态为 MISSING 且不修改 buffer
    """
    path = Path(filepath)
    if not isinstance(buffer, np.ndarray) or not buffer.flags.c_contiguous:
        raise ValueError("buffer 必须是 C 连续的 numpy 数组")

    kind = ScalarKind.of(buffer)
    flat = buffer.reshape(-1)
    n_expected = flat.size

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("无法读取 %s：%s", path, e)
        return LoadResult(path, LoadStatus.MISSING, 0, n_expected)

    header = None
    first, _, rest = text.partition("\n")
    if is_header_line(first):
        try:
            header = Header.parse(first)
        except ValueError as e:
            logger.warning("%s 头部无法解析（%s），按头部行跳过", path, e)
        text = rest

    k = kind.tokens_per_sample
    vals = _parse_numbers(text.split(), n_expected * k)
    n = vals.size // k
    if kind is ScalarKind.COMPLEX:
        pairs = vals[: 2 * n].reshape(n, 2)
        flat[:n] = pairs[:, 0] + 1j * pairs[:, 1]
    else:
        flat[:n] = vals[:n]

    if n < n_expected:
        logger.warning("%s 只读到 %d/%d 个样本，其余保持原值", path, n, n_expected)
        status = LoadStatus.PARTIAL
    else:
        logger.info("已从 %s 载入 %d 个样本", path, n)
        status = LoadStatus.COMPLETE
    return LoadResult(path, status, n, n_expected, header)
