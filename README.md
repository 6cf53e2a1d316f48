# xvkit

A toolkit for working with a small teaching Unix from Python. It covers:

- **The on-disk file system format**: superblock, inodes, directory entries,
  open flags, file types and the block arithmetic that places them
  (`xvkit.layout`).
- **An image builder** that lays a host directory tree out as a file system
  image (`xvkit.mkfs`).
- **x86 paging and segment structures**: page-directory and page-table index
  helpers, page rounding, segment and gate descriptors (`xvkit.mmu`).
- **ELF executable headers**: file and program headers, with parsing of a
  binary's program header table (`xvkit.elf`).
- **System call, trap and IRQ numbers** (`xvkit.abi`).
- **User-land utilities**: a small `printf`, a `grep` that understands
  `^ . * $`, `wc`, `cat`, `echo`, `ls`, `atoi` and `gets`, a first-fit memory
  allocator and the shell's command-line parser.

No third-party dependencies are needed.

## Installation

```
pip install xvkit
```

To run the test suite:

```
pip install "xvkit[test]"
pytest
```

## Building a file system image

Copy the files that should appear on the disk into one directory, then:

```
xvkit-mkfs fs.img fs
```

This writes a 1024-block image with 200 inodes and 995 data blocks. The
contents of `fs` become the root directory (inode 1), subdirectories
included, with entries added in name order. Names longer than 14 bytes are
truncated. The block bitmap marks as allocated every block that was used:
the boot block, super block, inode blocks, bitmap block and the data blocks
written. Progress is printed to standard output. If the second argument is
missing or is not a directory, the root holds only `.` and `..`.

From Python:

```python
from xvkit.mkfs import build_image

build_image("fs.img", "fs")
```

For finer control, `ImageBuilder` exposes the individual steps: `format`,
`ialloc`, `iappend`, `add_dir`, `balloc`, `read_sector`, `write_sector`,
`read_inode` and `write_inode`. It is a context manager and closes the image
on exit.

## Reading the on-disk structures

```python
from xvkit.layout import Superblock, DInode, DINODE_SIZE, IPB, iblock

with open("fs.img", "rb") as f:
    image = f.read()

sb = Superblock.unpack(image[512:1024])
block = iblock(1)                      # block holding inode 1
start = block * 512 + (1 % IPB) * DINODE_SIZE
root = DInode.unpack(image[start:start + DINODE_SIZE])
```

`Superblock`, `DInode` and `Dirent` each have `pack()` to produce their exact
on-disk bytes and an `unpack()` class method to read them back; too little
data raises `ValueError`. `bblock(b, ninodes)` gives the bitmap block for
block `b`. `FileType` and `OpenFlag` name inode types and `open` flags.

## Paging and descriptors

```python
from xvkit.mmu import pdx, ptx, pgroundup, pgrounddown

pdx(0x00403123)        # page directory index
ptx(0x00403123)        # page table index
pgroundup(5000)        # 8192
pgrounddown(5000)      # 4096
```

`pgaddr` builds an address from its parts and `pte_addr` extracts the
address from a page table entry. `SegDesc.normal` and `SegDesc.small16`
build segment descriptors, `GateDesc.make` builds interrupt and trap gates,
all with `pack()`/`unpack()` to and from eight bytes, and `seg_asm` gives the
eight bytes of a present, 4K-granular 32-bit segment descriptor.

## ELF headers

```python
from xvkit.elf import ElfHeader, program_headers

with open("program.elf", "rb") as f:
    data = f.read()

header = ElfHeader.unpack(data)
loadable = [ph for ph in program_headers(data) if ph.is_loadable()]
```

Data without the ELF magic, a truncated header, or a program header table
running past the end of the data raises `ElfFormatError`.

## System calls and traps

```python
from xvkit.abi import Syscall, Irq, syscall_name, trap_name

syscall_name(Syscall.SBRK)   # 'sbrk'
trap_name(14)                # 'pgflt'
Irq.COM1.vector              # 36
```

Unknown numbers raise `ValueError`.

## The utilities

Each utility is available as a command and as a function:

```
xvkit-cat README.md
xvkit-echo hello world
xvkit-grep '^int' notes.txt
xvkit-wc notes.txt
xvkit-ls .
```

`xvkit-cat`, `xvkit-grep` and `xvkit-wc` read standard input when no file is
given; `xvkit-ls` lists the current directory. `grep` reports only lines
ended by a newline. `ls` prints each name padded to 14 characters, followed
by its type (1 directory, 2 file, 3 other), inode number and size, as found
on the host file system.

```python
from xvkit.grep import match
from xvkit.printf import sprintf
from xvkit.ulib import atoi
from xvkit.wc import wc

match("^ab*c$", "abbbc")             # True
sprintf("%d %x %s", -7, 255, "ok")   # '-7 FF ok'
atoi("42abc")                        # 42
```

`sprintf`, `printf(stream, fmt, *args)` and `format_int` know `%d`, `%x`,
`%p`, `%s`, `%c` and `%%`; any other conversion is printed as written, and
too few arguments raise `ValueError`. `wc(stream)` returns a `Counts` with
`lines`, `words` and `chars`.

## Parsing shell command lines

```python
from xvkit.sh import parse_cmd, tokenize

cmd = parse_cmd("cat < in.txt | grep x > out.txt; echo done &")
```

The result is a tree of `ExecCmd`, `RedirCmd`, `PipeCmd`, `ListCmd` and
`BackCmd` nodes; `tokenize` gives the token list. Malformed input, such as a
redirection without a file name, an unmatched parenthesis, leftover text or
ten or more arguments, raises `ShellSyntaxError`.

## Memory allocation

`xvkit.umalloc` provides an `Allocator` working on an `Arena` whose break
moves with `sbrk`. Addresses are simulated integers, not real memory. It
hands out blocks first-fit, coalesces neighbours on `free`, reports the free
list with `free_blocks()`, raises `OutOfMemory` when the arena cannot grow
any further and `ValueError` when freeing an address it did not hand out.

## What this package does not do

- It does not run anything: there is no kernel, emulator or process model,
  and the shell module parses command lines but does not execute them.
- It writes file system images but has no reader that lists or extracts
  files from an existing image; `xvkit-ls` and the other utilities work on
  the host file system.