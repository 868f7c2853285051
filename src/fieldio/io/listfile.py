from __future__ import annotations
from pathlib import Path
from typing import List, Sequence, TextIO
import logging

from .matrix import FLOAT_FMT

__all__ = ["write_list", "load_list"]

logger = logging.getLogger(__name__)


def write_list(rows: Sequence[Sequence[float]], out: TextIO) -> None:
    """
    时间序列/标量日志：每行一个样本向量，空格分隔，行尾换行
    行顺序按给定顺序保留；多次调用在同一流上顺序追加
    """
    for row in rows:
        out.write(" ".join(FLOAT_FMT % float(v) for v in row))
        out.write("\n")


def load_list(filepath) -> List[List[float]]:
    """
    逐行解析为 float 列表，保持文件中的顺序
    空行与无法解析的行跳过（尽力读取，不整体失败）；文件不存在返回 []
    """
    path = Path(filepath)
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("无法读取列表文件 %s：%s", path, e)
        return []

    rows: List[List[float]] = []
    for lineno, line in enumerate(lines, start=1):
        tokens = line.split()
        if not tokens:
            continue
        try:
            rows.append([float(t) for t in tokens])
        except ValueError:
            logger.debug("%s 第 %d 行无法解析，已跳过：%r", path, lineno, line)
    return rows
