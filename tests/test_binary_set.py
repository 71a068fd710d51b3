import struct

import pytest

from knowhere.binary_set import index_file_name, read_binary_set, write_binary_set


def test_round_trip(tmp_path):
    path = tmp_path / "set.index"
    binaries = {"IVF": b"\x00\x01\x02", "RAW_DATA": bytes(range(256)), "meta": b""}
    write_binary_set(path, binaries)
    assert read_binary_set(path) == binaries


def test_entries_are_written_in_name_order(tmp_path):
    path = tmp_path / "set.index"
    write_binary_set(path, {"zeta": b"z", "alpha": b"a", "mid": b"m"})
    assert list(read_binary_set(path)) == sorted(["zeta", "alpha", "mid"])


def test_wire_layout(tmp_path):
    path = tmp_path / "set.index"
    write_binary_set(path, {"ab": b"\x07\x08\x09"})
    assert path.read_bytes() == struct.pack("<QQ", 2, 3) + b"ab" + b"\x07\x08\x09"


def test_empty_set_gives_empty_file(tmp_path):
    path = tmp_path / "set.index"
    write_binary_set(path, {})
    assert path.read_bytes() == b""
    assert read_binary_set(path) == {}


def test_accepts_bytearray_and_memoryview(tmp_path):
    path = tmp_path / "set.index"
    write_binary_set(path, {"a": bytearray(b"xy"), "b": memoryview(b"zw")})
    assert read_binary_set(path) == {"a": b"xy", "b": b"zw"}


def test_truncated_data_raises(tmp_path):
    path = tmp_path / "set.index"
    write_binary_set(path, {"name": b"payload"})
    path.write_bytes(path.read_bytes()[:-2])
    with pytest.raises(ValueError):
        read_binary_set(path)


def test_truncated_header_raises(tmp_path):
    path = tmp_path / "set.index"
    path.write_bytes(b"\x01\x02\x03")
    with pytest.raises(ValueError):
        read_binary_set(path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_binary_set(tmp_path / "absent.index")


def test_index_file_name_with_params():
    name = index_file_name("sift-128-euclidean", "IVF_PQ", [1024, 8])
    assert name == "sift-128-euclidean_IVF_PQ_1024_8.index"


def test_index_file_name_without_params():
    assert index_file_name("sift-128-euclidean", "FLAT", []) == "sift-128-euclidean_FLAT.index"