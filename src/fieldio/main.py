import argparse
import logging
import numpy as np

from .config_loader import load_cfg
from .core.header import Header
from .io.handler import FileHandler

logger = logging.getLogger(__name__)


def header_from_cfg(cfg: dict) -> Header:
    g, src = cfg["grid"], cfg["source"]
    return Header(
        float(g["xmax"]),
        float(g.get("ymax", g["xmax"])),
        float(g["dx"]),
        float(g["dy"]),
        float(g["t"]),
        float(src["t0"]),
        float(src["freq"]),
        float(src["sigma"]),
    )


def allocate_buffers(cfg: dict) -> dict:
    """按配置分配全零的一维 N*N 缓冲区（未载入重启文件时即为初值）。"""
    N = int(cfg["grid"]["N"])
    return {
        name: np.zeros(N * N, dtype=np.complex128 if kind == "complex" else np.float64)
        for name, kind in cfg["grid"]["fields"].items()
    }


def summarize(buffers: dict) -> dict:
    """每个场一行：[max|v|, mean|v|]。"""
    return {
        "summary": [
            [float(np.max(np.abs(b))), float(np.mean(np.abs(b)))]
            for b in buffers.values()
        ]
    }


def parse_args(argv=None):
    ap = argparse.ArgumentParser(
        description="Load restart matrices and write them back out (windowed)."
    )
    ap.add_argument("config", nargs="?", default="config.json", help="JSON 配置文件")
    ap.add_argument("--path", dest="output_dir", help="输出目录")
    ap.add_argument("--name", dest="output_name", help="输出文件名前缀")
    ap.add_argument("--load", dest="load_dir", help="重启文件目录")
    ap.add_argument("--increment", type=int, help="抽样步长")
    ap.add_argument("--outputs", help="逗号分隔的输出名，或 all")
    return ap.parse_args(argv)


def main(argv=None):
    # 入口里，第一行就配置日志（只配一次）
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = parse_args(argv)
    cfg = load_cfg(args.config)

    # 命令行覆盖配置
    io = cfg["io"]
    for key in ("output_dir", "output_name", "load_dir", "increment"):
        val = getattr(args, key)
        if val is not None:
            io[key] = val
    if args.outputs:
        io["outputs"] = [s.strip() for s in args.outputs.split(",") if s.strip()]

    N = int(cfg["grid"]["N"])
    buffers = allocate_buffers(cfg)
    header = header_from_cfg(cfg)

    with FileHandler.from_config(io) as fh:
        results = fh.load_matrices(buffers)
        for name, res in results.items():
            if not res:
                logger.info("%s 无重启文件，使用生成的初值", name)
            elif not res.complete:
                logger.warning(
                    "%s 仅部分载入（%d/%d）", name, res.samples_read, res.samples_expected
                )
        written = fh.output_matrices(buffers, N, header)
        fh.cache_to_files(summarize(buffers))

    logger.info("运行完成，输出目录：%s", io["output_dir"])
    return {"loaded": results, "written": written}


if __name__ == "__main__":
    main()
