# xv6tools

The user programs, the shell's command-line parser, the virtual-memory
code and the block-device ring layouts of a small teaching Unix, as
plain Python. No dependencies beyond the standard library.

## Installing

```
pip install .
pip install ".[test]"   # with pytest, to run the test suite
```

## Commands

| Command      | What it does                                                          |
|--------------|-----------------------------------------------------------------------|
| `xv6-cat`    | Copies the named files, or standard input, to standard output.        |
| `xv6-echo`   | Prints its arguments separated by spaces, then a newline.             |
| `xv6-wc`     | Prints lines, words and bytes, then the name, for each input.         |
| `xv6-ls`     | Lists a file or the entries of a directory: name, type, inode, size.  |
| `xv6-ln`     | `xv6-ln old new` makes a hard link.                                   |
| `xv6-mkdir`  | Creates each named directory, stopping at the first failure.          |
| `xv6-rm`     | Removes each named file or empty directory, stopping at the first failure. |
| `xv6-kill`   | Sends a kill signal to each process id given; failures are ignored.   |
| `xv6-grep`   | `xv6-grep pattern [file ...]` prints matching lines.                  |

`xv6-grep` understands a small pattern language: `^` anchors at the
start, `$` at the end, `.` matches any character and `*` repeats the
character before it.

## Library

```python
import io
import sys

from xv6tools.fmt import format
from xv6tools.grep import match, grep
from xv6tools.sh import parse_command, PipeCmd, ShellSyntaxError
from xv6tools.coreutils import count, fmtname
from xv6tools.rand import ParkMiller

# printf with %d %l %x %p %s %c and %%
print(format("%d %x %s", -5, 255, "hi"))        # -5 FF hi

# the grep matcher on its own, or over a stream
if match("^ab*c$", "abbbc"):
    print("matched")
grep("b*c", io.BytesIO(b"abc\nxyz\n"), sys.stdout.buffer)

# the shell's parser gives a tree of command objects
tree = parse_command("echo hi | wc")
assert isinstance(tree, PipeCmd)
try:
    parse_command("echo )")
except ShellSyntaxError as err:
    print("syntax error:", err)

# line, word and byte counts, and ls-style name padding
print(count(b"one two\nthree\n"))               # Counts(lines=2, words=3, chars=14)
print(repr(fmtname("dir/file")))

# the deterministic Park-Miller generator
gen = ParkMiller(31)
values = [gen.rand() for _ in range(3)]
```

### Other modules

- `xv6tools.ulib` — `atoi`, `strcmp` and the line reader `gets`.
- `xv6tools.fmt` — `format`, `fprintf` and `printf`.
- `xv6tools.umalloc` — `Allocator`, a first-fit free-list allocator
  over a bounded heap, with `malloc` and `free`.
- `xv6tools.rand` — `do_rand` and `ParkMiller`.
- `xv6tools.records` — `FileType`, `Stat` and `RtcDate`, packed and
  unpacked in a fixed little-endian byte layout.
- `xv6tools.sh` — `parse_command` and the command classes `ExecCmd`,
  `RedirCmd`, `PipeCmd`, `ListCmd` and `BackCmd`.
- `xv6tools.coreutils` — `cat`, `echo`, `count`, `fmtname`, `ls` and the
  `*_main` functions behind the commands above.
- `xv6tools.vm` — `PhysicalMemory` and `PageTable`: a three-level
  page-table model with `walk`, `walkaddr`, `mappages`, `unmap`,
  `init_first`, `grow`, `shrink`, `free`, `copy_to`, `clear_user`,
  `copyin`, `copyout` and `copyinstr`. Failures raise `Panic`,
  `OutOfMemory` or `BadAddress`.
- `xv6tools.virtio` — `VRingDesc`, `VRingUsedElem`, `UsedArea` and
  `Buf`, the block-device ring structures with byte-exact packing.

## What it does not do

- It does not build file-system images; there is no image-builder
  command or module.
- It has no interactive shell: `xv6tools.sh` parses command lines into
  trees but does not run them.
- It has no kernel, scheduler or device driver; the page tables and
  ring structures are models in memory only.

## Running the tests

```
pip install ".[test]"
pytest
```