# tests/test_matrix_codec.py
import io
import math

import numpy as np
import pytest

from fieldio.core.header import Header
from fieldio.core.window import Window
from fieldio.io.matrix import (
    LoadStatus,
    format_matrix,
    load_matrix,
    write_matrix,
)

HEADER = Header(1.0, 1.0, 0.5, 0.5, 0.0)


def _body(text: str) -> str:
    first, _, rest = text.partition("\n")
    assert first.startswith("LX "), "首行必须是头部"
    return rest


def test_2x2_real_scenario(tmp_path):
    buf = np.array([1.0, 2.0, 3.0, 4.0])
    text = format_matrix(buf, 2, HEADER)
    assert text == "LX 1 LY 1 DX 0.5 DY 0.5 TIME 0\n1 2\n3 4"

    path = tmp_path / "m.txt"
    with open(path, "w", encoding="utf-8") as f:
        write_matrix(buf, 2, HEADER, f)

    out = np.zeros(4)
    res = load_matrix(path, out)
    assert res and res.complete
    assert res.header == HEADER
    np.testing.assert_array_equal(out.reshape(2, 2), [[1, 2], [3, 4]])


def test_window_stride_scenario():
    buf = np.array([[1.0, 2.0], [3.0, 4.0]])
    text = format_matrix(buf, 2, HEADER, window=Window(0, 2, 0, 2, 2))
    assert _body(text) == "1"


def test_complex_tokens_are_re_im_pairs():
    buf = np.array([1 + 2j, 3 - 4j, 0.5j, -1.0 + 0j])
    assert _body(format_matrix(buf, 2, HEADER)) == "1 2 3 -4\n0 0.5 -1 0"


def test_window_sample_count_and_order():
    N = 7
    buf = np.arange(N * N, dtype=float)
    win = Window(1, 6, 2, 7, 2)  # 列 1,3,5；行 2,4,6
    body = _body(format_matrix(buf, N, HEADER, window=win))

    rows = [list(map(float, line.split())) for line in body.split("\n")]
    expected = [[r * N + c for c in range(1, 6, 2)] for r in range(2, 7, 2)]
    assert rows == expected
    assert win.n_samples == math.ceil(5 / 2) * math.ceil(5 / 2)
    assert sum(len(r) for r in rows) == win.n_samples


def test_write_is_deterministic():
    rng = np.random.default_rng(0)
    buf = rng.normal(size=16) + 1j * rng.normal(size=16)
    a = format_matrix(buf, 4, HEADER)
    b = format_matrix(buf.copy(), 4, HEADER)
    assert a == b
    assert not a.endswith("\n"), "最后一行之后不应有分隔符"


def test_write_does_not_close_stream():
    s = io.StringIO()
    write_matrix(np.ones(4), 2, HEADER, s)
    write_matrix(np.ones(4), 2, HEADER, s)
    assert not s.closed
    # 第二个矩阵的头部另起一行，末尾仍无分隔符
    block = "LX 1 LY 1 DX 0.5 DY 0.5 TIME 0\n1 1\n1 1"
    assert s.getvalue() == f"{block}\n{block}"


def test_write_to_closed_stream_raises():
    s = io.StringIO()
    s.close()
    with pytest.raises((ValueError, OSError)):
        write_matrix(np.ones(4), 2, HEADER, s)


def test_window_shape_with_zero_increment_raises():
    with pytest.raises(ValueError):
        Window(0, 2, 0, 2, 0).n_samples


@pytest.mark.parametrize(
    "win",
    [
        Window(0, 3, 0, 2, 1),  # col_stop > N
        Window(1, 1, 0, 2, 1),  # 空列范围
        Window(0, 2, -1, 2, 1),
        Window(0, 2, 0, 2, 0),  # increment < 1
    ],
)
def test_invalid_window_raises(win):
    with pytest.raises(ValueError):
        format_matrix(np.zeros(4), 2, HEADER, window=win)


def test_buffer_shape_mismatch_raises():
    with pytest.raises(ValueError):
        format_matrix(np.zeros(5), 2, HEADER)


def test_roundtrip_real_and_complex(tmp_path):
    rng = np.random.default_rng(42)
    N = 8
    real = rng.normal(size=N * N) * 1e3
    cplx = rng.normal(size=N * N) + 1j * rng.normal(size=N * N)

    for name, buf in (("real", real), ("complex", cplx)):
        path = tmp_path / f"{name}.txt"
        path.write_text(format_matrix(buf, N, HEADER), encoding="utf-8")
        out = np.zeros_like(buf)
        res = load_matrix(path, out)
        assert res.status is LoadStatus.COMPLETE
        assert res.samples_read == N * N
        np.testing.assert_array_equal(out, buf)


def test_load_without_header_matches_body(tmp_path):
    buf = np.arange(9, dtype=float)
    text = format_matrix(buf, 3, HEADER)
    path = tmp_path / "body.txt"
    path.write_text(_body(text), encoding="utf-8")

    out = np.zeros(9)
    res = load_matrix(path, out)
    assert res.complete and res.header is None
    np.testing.assert_array_equal(out, buf)


def test_load_into_2d_buffer(tmp_path):
    path = tmp_path / "m.txt"
    path.write_text("LX 1 LY 1 DX 0.5 DY 0.5 TIME 0\n1 2\n3 4", encoding="utf-8")
    out = np.zeros((2, 2))
    assert load_matrix(path, out).complete
    np.testing.assert_array_equal(out, [[1, 2], [3, 4]])


def test_missing_file_leaves_buffer_untouched(tmp_path):
    out = np.full(4, 7.0)
    res = load_matrix(tmp_path / "nope.txt", out)
    assert not res
    assert res.status is LoadStatus.MISSING
    np.testing.assert_array_equal(out, 7.0)


def test_truncated_file_reports_partial(tmp_path):
    path = tmp_path / "short.txt"
    path.write_text("LX 1 LY 1 DX 0.5 DY 0.5 TIME 0\n1 2\n3", encoding="utf-8")
    out = np.full(4, -1.0)
    res = load_matrix(path, out)
    assert res, "文件能打开即为真"
    assert res.status is LoadStatus.PARTIAL and not res.complete
    assert (res.samples_read, res.samples_expected) == (3, 4)
    np.testing.assert_array_equal(out, [1, 2, 3, -1])


def test_truncated_complex_keeps_incomplete_pair_out(tmp_path):
    path = tmp_path / "short_c.txt"
    path.write_text("1 2 3", encoding="utf-8")
    out = np.full(2, 9 + 9j)
    res = load_matrix(path, out)
    assert res.samples_read == 1
    np.testing.assert_array_equal(out, [1 + 2j, 9 + 9j])


def test_reading_stops_at_non_numeric_token(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text("1 2 oops 4", encoding="utf-8")
    out = np.zeros(4)
    res = load_matrix(path, out)
    assert res.status is LoadStatus.PARTIAL
    np.testing.assert_array_equal(out, [1, 2, 0, 0])


def test_extra_tokens_are_ignored(tmp_path):
    path = tmp_path / "long.txt"
    path.write_text("1 2 3 4 5 6", encoding="utf-8")
    out = np.zeros(4)
    assert load_matrix(path, out).complete
    np.testing.assert_array_equal(out, [1, 2, 3, 4])
