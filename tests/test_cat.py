import io

from xvkit.cat import cat, main


def test_copies_everything():
    data = bytes(range(256)) * 9
    dst = io.BytesIO()
    assert cat(io.BytesIO(data), dst) == len(data)
    assert dst.getvalue() == data


def test_empty_source():
    dst = io.BytesIO()
    assert cat(io.BytesIO(b""), dst) == 0
    assert dst.getvalue() == b""


def test_main_concatenates(tmp_path, capsysbinary):
    first = tmp_path / "a"
    second = tmp_path / "b"
    first.write_bytes(b"first\n")
    second.write_bytes(b"second\n")
    assert main([str(first), str(second)]) == 0
    assert capsysbinary.readouterr().out == b"first\nsecond\n"


def test_main_missing_file(tmp_path, capsysbinary):
    missing = str(tmp_path / "nope")
    assert main([missing]) == 1
    assert capsysbinary.readouterr().out == f"cat: cannot open {missing}\n".encode()