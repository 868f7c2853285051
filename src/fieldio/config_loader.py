from pathlib import Path
import json

# 默认输出的场：名称 -> 标量类型
DEFAULT_FIELDS = {
    "wavefunction_plus": "complex",
    "wavefunction_minus": "complex",
    "reservoir_plus": "real",
    "reservoir_minus": "real",
}


def load_cfg(
    path="config.json",
) -> dict:

    # 读取并解析 JSON 配置文件
    data = json.loads(Path(path).read_text(encoding="utf-8"))

    # 基本结构校验
    for sec in ("grid", "io"):
        assert sec in data and isinstance(data[sec], dict), f"缺少配置节 [{sec}]"

    g, io = data["grid"], data["io"]

    # 最小校验 + 安全默认
    assert int(g["N"]) > 0 and float(g["xmax"]) > 0
    g.setdefault("t", 0.0)
    g.setdefault("dx", 2.0 * float(g["xmax"]) / int(g["N"]))
    g.setdefault("dy", g["dx"])
    g.setdefault("fields", dict(DEFAULT_FIELDS))
    for name, kind in g["fields"].items():
        assert kind in ("real", "complex"), f"场 {name} 的类型必须是 real 或 complex"

    io.setdefault("output_dir", "data/output/run-minimal")
    io.setdefault("output_name", "")
    io.setdefault("load_dir", None)
    io.setdefault("outputs", ["all"])
    io.setdefault("increment", 1)
    assert int(io["increment"]) >= 1

    # 可选：脉冲源参数，缺省全为 0（头部不写 OSC）
    src = data.setdefault("source", {})
    for k in ("t0", "freq", "sigma"):
        src.setdefault(k, 0.0)
    return data
