import io
import struct

import pytest

from xvkit.layout import (
    BSIZE,
    DINODE_SIZE,
    DIRENT_SIZE,
    IPB,
    MAXFILE,
    NDIRECT,
    NINDIRECT,
    ROOTINO,
    DInode,
    Dirent,
    FileType,
    Superblock,
    iblock,
)
from xvkit.mkfs import ImageBuilder, build_image, main


def _sector(image, sec):
    return image[sec * BSIZE : (sec + 1) * BSIZE]


def _inode(image, inum):
    block = _sector(image, iblock(inum))
    start = (inum % IPB) * DINODE_SIZE
    return DInode.unpack(block[start : start + DINODE_SIZE])


def _contents(image, inum):
    din = _inode(image, inum)
    blocks = list(din.addrs[:NDIRECT])
    if din.addrs[NDIRECT]:
        blocks += struct.unpack(f"<{NINDIRECT}I", _sector(image, din.addrs[NDIRECT]))
    data = b"".join(_sector(image, b) for b in blocks if b)
    return data[: din.size]


def _entries(image, inum):
    data = _contents(image, inum)
    found = [Dirent.unpack(data[i : i + DIRENT_SIZE]) for i in range(0, len(data), DIRENT_SIZE)]
    return [d for d in found if d.inum != 0]


@pytest.fixture
def tree(tmp_path):
    src = tmp_path / "fs"
    src.mkdir()
    (src / "README").write_bytes(b"hello")
    (src / "sub").mkdir()
    (src / "sub" / "inner").write_bytes(b"xyz")
    return src


@pytest.fixture
def builder(tmp_path):
    b = ImageBuilder(tmp_path / "img", out=io.StringIO())
    b.format(995, 200, 1024)
    yield b
    b.close()


def test_build_image_layout(tmp_path, tree):
    img = tmp_path / "fs.img"
    build_image(img, tree)
    image = img.read_bytes()
    assert len(image) == 1024 * BSIZE
    assert Superblock.unpack(_sector(image, 1)) == Superblock(1024, 995, 200)
    assert _inode(image, ROOTINO).type == FileType.DIR

    root = _entries(image, ROOTINO)
    assert [d.name for d in root] == [".", "..", "README", "sub"]
    assert root[0].inum == ROOTINO and root[1].inum == ROOTINO

    by_name = {d.name: d.inum for d in root}
    assert _contents(image, by_name["README"]) == b"hello"
    sub = {d.name: d.inum for d in _entries(image, by_name["sub"])}
    assert sub[".."] == ROOTINO
    assert sub["."] == by_name["sub"]
    assert _contents(image, sub["inner"]) == b"xyz"


def test_build_image_prints_names(tmp_path, tree, capsys):
    build_image(tmp_path / "fs.img", tree)
    out = capsys.readouterr().out
    assert "README" in out
    assert "inner" in out


def test_directory_size_rounded_to_block(tmp_path, tree):
    img = tmp_path / "fs.img"
    build_image(img, tree)
    image = img.read_bytes()
    size = _inode(image, ROOTINO).size
    assert size % BSIZE == 0
    assert size > len(_entries(image, ROOTINO)) * DIRENT_SIZE


def test_bitmap_marks_used_blocks(builder, tree):
    root = builder.ialloc(FileType.DIR)
    builder.add_dir(tree, root, root)
    builder.balloc(builder.usedblocks)
    bitmap = builder.read_sector(builder.ninodes // IPB + 3)
    assert int.from_bytes(bitmap, "little") == (1 << builder.usedblocks) - 1


def test_balloc_too_many(builder):
    with pytest.raises(ValueError):
        builder.balloc(BSIZE * 8)


def test_ialloc_numbers_in_sequence(builder):
    first = builder.ialloc(FileType.DIR)
    second = builder.ialloc(FileType.FILE)
    assert first == ROOTINO
    assert second == first + 1
    inode = builder.read_inode(second)
    assert inode.type == FileType.FILE
    assert inode.nlink == 1
    assert inode.size == 0


def _read_back(builder, inum):
    din = builder.read_inode(inum)
    blocks = list(din.addrs[:NDIRECT])
    if din.addrs[NDIRECT]:
        blocks += struct.unpack(f"<{NINDIRECT}I", builder.read_sector(din.addrs[NDIRECT]))
    return b"".join(builder.read_sector(b) for b in blocks if b)[: din.size]


def test_iappend_concatenates(builder):
    inum = builder.ialloc(FileType.FILE)
    builder.iappend(inum, b"ab")
    builder.iappend(inum, b"cd")
    assert builder.read_inode(inum).size == 4
    assert _read_back(builder, inum) == b"abcd"


def test_iappend_uses_indirect_block(builder):
    inum = builder.ialloc(FileType.FILE)
    payload = bytes(i % 251 for i in range((NDIRECT + 8) * BSIZE + 7))
    builder.iappend(inum, payload)
    assert builder.read_inode(inum).addrs[NDIRECT] != 0
    assert _read_back(builder, inum) == payload


def test_iappend_rejects_oversized_file(builder):
    inum = builder.ialloc(FileType.FILE)
    with pytest.raises(ValueError):
        builder.iappend(inum, bytes(MAXFILE * BSIZE + 1))


def test_add_dir_without_source(builder):
    root = builder.ialloc(FileType.DIR)
    builder.add_dir(None, root, root)
    assert builder.read_inode(root).size == 2 * DIRENT_SIZE
    data = _read_back(builder, root)
    assert Dirent.unpack(data[DIRENT_SIZE:]) == Dirent(root, "..")


def test_format_rejects_inconsistent_sizes(tmp_path):
    with ImageBuilder(tmp_path / "bad.img", out=io.StringIO()) as b:
        with pytest.raises(ValueError):
            b.format(995, 200, 2048)


def test_sector_errors(builder):
    with pytest.raises(ValueError):
        builder.write_sector(3, bytes(BSIZE + 1))
    with pytest.raises(OSError):
        builder.read_sector(5000)


def test_write_sector_pads(builder):
    builder.write_sector(7, b"abc")
    assert builder.read_sector(7) == b"abc".ljust(BSIZE, b"\0")


def test_main_usage(capsys):
    assert main([]) == 1
    assert "Usage" in capsys.readouterr().err


def test_main_builds_image(tmp_path, tree):
    img = tmp_path / "out.img"
    assert main([str(img), str(tree)]) == 0
    image = img.read_bytes()
    names = [d.name for d in _entries(image, ROOTINO)]
    assert "README" in names