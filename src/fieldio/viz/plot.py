from pathlib import Path
import math
import numpy as np
import matplotlib
import matplotlib.pyplot as plt
import argparse

from ..core.header import is_header_line
from ..io.matrix import load_matrix


def read_matrix_file(path: Path, complex_valued: bool = False):
    """
    读取矩阵文件，N 由记号数反推（方阵）。
    返回 ((N, N) 数组, Header 或 None)。
    """
    text = Path(path).read_text(encoding="utf-8")
    first = text.split("\n", 1)[0]
    n_tokens = len(text.split()) - (len(first.split()) if is_header_line(first) else 0)
    per = 2 if complex_valued else 1
    N = math.isqrt(n_tokens // per)
    if N == 0 or N * N * per != n_tokens:
        raise ValueError(f"{path} 不是方阵数据：共 {n_tokens} 个数值记号")

    buf = np.zeros(N * N, dtype=np.complex128 if complex_valued else np.float64)
    res = load_matrix(path, buf)
    return buf.reshape(N, N), res.header


# 绘制矩阵文件
def plot_matrix(
    path: Path,
    complex_valued: bool = False,
    out_png: Path | None = None,
) -> Path:
    A, header = read_matrix_file(path, complex_valued)
    # 复数场画 |ψ|²
    A_plot = np.abs(A) ** 2 if complex_valued else A

    plt.figure()
    if header is not None:
        extent = (
            -header.domain_extent_x,
            header.domain_extent_x,
            -header.domain_extent_y,
            header.domain_extent_y,
        )
        plt.imshow(A_plot, origin="lower", extent=extent)
    else:
        plt.imshow(A_plot, origin="lower")
    label = "|psi|^2" if complex_valued else path.stem
    plt.colorbar(label=label)
    title_time = f" t={header.simulated_time:.4g}" if header is not None else ""
    plt.title(f"{path.stem}{title_time}")
    out_png = out_png or path.with_suffix(".png")
    plt.savefig(out_png, dpi=160, bbox_inches="tight")
    plt.close()
    return out_png


def main(argv=None):
    ap = argparse.ArgumentParser(description="Plot a matrix text file.")
    ap.add_argument("path", type=Path, help="矩阵文件，例如 data/output/run-minimal/wavefunction_plus.txt")
    ap.add_argument("--complex", action="store_true", help="每样本两个记号（实部 虚部）")
    ap.add_argument("--out", type=Path, default=None, help="输出 PNG 路径")
    args = ap.parse_args(argv)
    # 命令行出图不需要窗口
    matplotlib.use("Agg")

    png = plot_matrix(args.path, complex_valued=args.complex, out_png=args.out)
    print("已保存：", png)
    return png


if __name__ == "__main__":
    main()
