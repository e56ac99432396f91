"""Unit tests for the file tools.

Run:  uv run python -m tests.test_file_tools
"""

import sys
if sys.stdout.encoding and sys.stdout.encoding.lower() != "utf-8":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")

import os
import stat
import tempfile
from pathlib import Path
from unittest.mock import patch

from devtools.tools.files import (
    EditOperation,
    edit_file,
    glob_files,
    grep_files,
    list_directory,
    multi_edit,
    read_file,
    write_file,
)
from devtools.tools.replace import AmbiguousMatchError, EmptySpecListError, NotFoundError

TOTAL = 0
PASSED = 0


def check(label, actual, expected):
    global TOTAL, PASSED
    TOTAL += 1
    ok = actual == expected
    PASSED += ok
    print(f"  {'[PASS]' if ok else '[FAIL]'}  {label}")
    if not ok:
        print(f"         Expected {expected!r}")
        print(f"         Got      {actual!r}")
    assert ok, label


def check_raises(label, exc_type, fn, *args, **kwargs):
    try:
        fn(*args, **kwargs)
    except exc_type as e:
        check(label, type(e).__name__, exc_type.__name__)
        return e
    check(label, "no error", exc_type.__name__)


def _touch(path, text, mtime):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    os.utime(path, (mtime, mtime))
    return os.path.abspath(path)


# ── Read / Write ───────────────────────────────────────

def test_read_write():
    print("\n--- Read / Write -----------------------------------------")
    with tempfile.TemporaryDirectory() as tmp:
        target = os.path.join(tmp, "nested", "dir", "a.txt")
        check("write message",    write_file(target, "one\ntwo\nthree"), f"File created successfully at: {target}")
        check("parents created",  Path(target).read_text(encoding="utf-8"), "one\ntwo\nthree")

        check("numbered lines",   read_file(target),                      "     1\tone\n     2\ttwo\n     3\tthree")
        check("offset/limit",     read_file(target, offset=1, limit=1),   "     2\ttwo")
        check("offset past end",  read_file(target, offset=10),           "")

        long_path = os.path.join(tmp, "long.txt")
        write_file(long_path, "x" * 2500)
        check("long line cut",    read_file(long_path),                   "     1\t" + "x" * 2000 + "...")

        missing = os.path.join(tmp, "missing.txt")
        check("missing file",     read_file(missing),                     f"Error: File not found at {missing}")


# ── Edit ───────────────────────────────────────────────

def test_edit():
    print("\n--- Edit -------------------------------------------------")
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp, "code.py")
        path.write_text("x = 1\ny = 2\nx = 3\n", encoding="utf-8")

        check("unique edit",      edit_file(str(path), "y = 2", "y = 20"), f"Successfully edited {path}")
        check("edit applied",     path.read_text(encoding="utf-8"),        "x = 1\ny = 20\nx = 3\n")

        before = path.read_text(encoding="utf-8")
        e = check_raises("ambiguous edit", AmbiguousMatchError, edit_file, str(path), "x = ", "z = ")
        check("ambiguous count",  e.count, 2)
        check("file unchanged",   path.read_text(encoding="utf-8"), before)

        check_raises("not found edit", NotFoundError, edit_file, str(path), "nope", "yes")
        check("file unchanged 2", path.read_text(encoding="utf-8"), before)

        edit_file(str(path), "x = ", "z = ", replace_all=True)
        check("replace_all edit", path.read_text(encoding="utf-8"), "z = 1\ny = 20\nz = 3\n")

        check_raises("missing file", FileNotFoundError, edit_file, os.path.join(tmp, "none.py"), "a", "b")


# ── MultiEdit ──────────────────────────────────────────

def test_multi_edit():
    print("\n--- MultiEdit --------------------------------------------")
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp, "mod.py")
        path.write_text("import old\nold.run()\nold.stop()\n", encoding="utf-8")

        edits = [
            EditOperation(old_string="import old", new_string="import new"),
            EditOperation(old_string="old.", new_string="new.", replace_all=True),
        ]
        check("message",          multi_edit(str(path), edits), f"Successfully applied 2 edits to {path}")
        check("content",          path.read_text(encoding="utf-8"), "import new\nnew.run()\nnew.stop()\n")

        before = path.read_text(encoding="utf-8")
        bad = [
            EditOperation(old_string="import new", new_string="import other"),
            EditOperation(old_string="missing()", new_string="x()"),
        ]
        e = check_raises("atomic failure", NotFoundError, multi_edit, str(path), bad)
        check("failing index",    e.index, 1)
        check("nothing written",  path.read_text(encoding="utf-8"), before)

        check_raises("empty edits", EmptySpecListError, multi_edit, str(path), [])


# ── Line endings / write-back ──────────────────────────

def test_crlf_preserved():
    print("\n--- CRLF line endings ------------------------------------")
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp, "win.txt")
        path.write_bytes(b"a\r\nb\r\nc\r\n")

        edit_file(str(path), "b", "B")
        check("endings kept",     path.read_bytes(), b"a\r\nB\r\nc\r\n")

        edit_file(str(path), "a\r\nB", "x")
        check("crlf old_string",  path.read_bytes(), b"x\r\nc\r\n")

        multi_edit(str(path), [EditOperation(old_string="\r\n", new_string="\n", replace_all=True)])
        check("crlf normalized",  path.read_bytes(), b"x\nc\n")

        path.write_bytes(b"one\r\ntwo")
        check("read keeps cr",    read_file(str(path)), "     1\tone\r\n     2\ttwo")


def test_write_back():
    print("\n--- atomic write-back ------------------------------------")
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp, "run.sh")
        path.write_text("echo old\n", encoding="utf-8")
        os.chmod(path, 0o755)

        edit_file(str(path), "old", "new")
        check("mode kept",        stat.S_IMODE(os.stat(path).st_mode), 0o755)
        check("no temp files",    sorted(os.listdir(tmp)), ["run.sh"])

        with patch("devtools.tools.files.os.replace", side_effect=OSError("disk full")):
            check_raises("write failure", OSError, edit_file, str(path), "new", "newer")
        check("original intact",  path.read_text(encoding="utf-8"), "echo new\n")
        check("temp cleaned up",  sorted(os.listdir(tmp)), ["run.sh"])


# ── Glob / Grep / LS ───────────────────────────────────

def test_glob_grep():
    print("\n--- Glob / Grep ------------------------------------------")
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        a = _touch(root / "src" / "a.py", "def alpha():\n    pass\n", 1_000_000)
        b = _touch(root / "src" / "pkg" / "b.py", "class Beta:\n    pass\n", 2_000_000)
        c = _touch(root / "web" / "c.ts", "export function gamma() {}\n", 3_000_000)
        _touch(root / "notes.md", "nothing here\n", 4_000_000)

        check("recursive glob",   glob_files("**/*.py", tmp),             "\n".join([b, a]))
        check("brace glob",       glob_files("**/*.{py,ts}", tmp),        "\n".join([c, b, a]))
        check("no matches",       glob_files("**/*.rs", tmp),             "")

        check("grep regex",       grep_files(r"def\s+\w+", tmp),          a)
        check("grep include",     grep_files(r"pass", tmp, "**/*.py"),    "\n".join([b, a]))
        check("grep brace incl",  grep_files(r"gamma|Beta", tmp, "**/*.{py,ts}"), "\n".join([c, b]))

        (root / "blob.bin").write_bytes(b"\xff\xfe\x00def x")
        check("skips binary",     grep_files(r"def x", tmp),              "")
        check_raises("bad regex", ValueError, grep_files, "(", tmp)


def test_ls():
    print("\n--- LS ---------------------------------------------------")
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        (root / "src").mkdir()
        (root / "node_modules").mkdir()
        (root / "b.txt").write_text("12345", encoding="utf-8")
        (root / "a.log").write_text("", encoding="utf-8")

        check("listing",          list_directory(tmp),                    "a.log (0 bytes)\nb.txt (5 bytes)\nnode_modules/\nsrc/")
        check("ignore",           list_directory(tmp, ["node_modules", "*.log"]), "b.txt (5 bytes)\nsrc/")
        check_raises("missing dir", FileNotFoundError, list_directory, str(root / "nope"))


# ── Main ───────────────────────────────────────────────

if __name__ == "__main__":
    print("=" * 52)
    print("  devtools — File Tool Tests")
    print("=" * 52)

    test_read_write()
    test_edit()
    test_multi_edit()
    test_crlf_preserved()
    test_write_back()
    test_glob_grep()
    test_ls()

    print("\n" + "=" * 52)
    print(f"  {PASSED}/{TOTAL} passed")
    print("=" * 52)
