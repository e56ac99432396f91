"""Unit tests for the notebook tools.

Run:  uv run python -m tests.test_notebook_tools
"""

import sys
if sys.stdout.encoding and sys.stdout.encoding.lower() != "utf-8":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")

import json
import os
import tempfile

from devtools.tools.notebook import assign_cell_ids, notebook_edit, notebook_read

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


NOTEBOOK = {
    "cells": [
        {"cell_type": "markdown", "metadata": {}, "source": ["# Title\n", "intro"]},
        {"cell_type": "code", "metadata": {}, "execution_count": 1,
         "source": ["print(1)"], "outputs": [{"output_type": "stream", "name": "stdout", "text": ["1\n"]}]},
        {"id": "custom", "cell_type": "code", "metadata": {}, "execution_count": None,
         "source": "x = 2", "outputs": []},
    ],
    "metadata": {},
    "nbformat": 4,
    "nbformat_minor": 5,
}


def _write_notebook(tmp):
    path = os.path.join(tmp, "nb.ipynb")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(NOTEBOOK, f)
    return path


def _cells(path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)["cells"]


def test_cell_ids():
    print("\n--- cell ids ---------------------------------------------")
    cells = json.loads(json.dumps(NOTEBOOK["cells"]))
    ids = [c["id"] for c in assign_cell_ids(cells)]
    check("positional ids",   ids, ["cell-1", "cell-2", "custom"])
    check("idempotent",       [c["id"] for c in assign_cell_ids(cells)], ids)

    taken = [{"id": "cell-2", "cell_type": "code"}, {"cell_type": "code"}, {"cell_type": "code"}]
    check("taken id skipped", [c["id"] for c in assign_cell_ids(taken)], ["cell-2", "cell-1", "cell-3"])


def test_ids_unique_on_save():
    print("\n--- cell ids (saved) -------------------------------------")
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "dup.ipynb")
        notebook = {
            "cells": [
                {"id": "cell-2", "cell_type": "markdown", "metadata": {}, "source": "first"},
                {"cell_type": "markdown", "metadata": {}, "source": "second"},
            ],
            "metadata": {}, "nbformat": 4, "nbformat_minor": 5,
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(notebook, f)

        notebook_edit(path, "changed", cell_id="cell-2")
        cells = _cells(path)
        check("ids saved unique", [c["id"] for c in cells], ["cell-2", "cell-1"])
        check("only target edited", [c["source"] for c in cells], [["changed"], "second"])


def test_read():
    print("\n--- NotebookRead -----------------------------------------")
    with tempfile.TemporaryDirectory() as tmp:
        path = _write_notebook(tmp)
        out = notebook_read(path)
        check("three cells",      out.count("\n---\n"), 2)
        check("first header",     out.startswith("Cell 1 (markdown):\nID: cell-1\nSource:\n# Title\nintro\n"), True)
        check("outputs shown",    "Outputs:\n  Output 1: {" in out, True)
        check("same ids twice",   notebook_read(path), out)

        one = notebook_read(path, "custom")
        check("single cell",      one, "Cell 3 (code):\nID: custom\nSource:\nx = 2\n")
        check_raises("unknown id", LookupError, notebook_read, path, "nope")


def test_edit_replace():
    print("\n--- NotebookEdit (replace) -------------------------------")
    with tempfile.TemporaryDirectory() as tmp:
        path = _write_notebook(tmp)
        check("message",          notebook_edit(path, "a = 1\nb = 2", "cell-2"), "Successfully updated cell with ID cell-2")
        cell = _cells(path)[1]
        check("source lines",     cell["source"], ["a = 1\n", "b = 2"])
        check("outputs kept",     len(cell["outputs"]), 1)

        notebook_edit(path, "## Notes", "custom", cell_type="markdown")
        cell = _cells(path)[2]
        check("type changed",     cell["cell_type"], "markdown")
        check("outputs dropped",  "outputs" in cell or "execution_count" in cell, False)

        notebook_edit(path, "y = 3", "cell-1", cell_type="code")
        cell = _cells(path)[0]
        check("to code outputs",  cell["outputs"], [])
        check("to code count",    cell["execution_count"], None)

        check_raises("needs cell_id", ValueError, notebook_edit, path, "z")
        check_raises("unknown cell",  LookupError, notebook_edit, path, "z", "missing")
        check_raises("bad mode",      ValueError, notebook_edit, path, "z", "cell-1", edit_mode="append")


def test_edit_insert_delete():
    print("\n--- NotebookEdit (insert/delete) -------------------------")
    with tempfile.TemporaryDirectory() as tmp:
        path = _write_notebook(tmp)
        msg = notebook_edit(path, "print(3)", "cell-2", edit_mode="insert", cell_type="code")
        check("insert message",   msg, "Successfully inserted new code cell with ID cell-3")
        cells = _cells(path)
        check("inserted after",   [c["id"] for c in cells], ["cell-1", "cell-2", "cell-3", "custom"])
        check("new code cell",    (cells[2]["outputs"], cells[2]["execution_count"]), ([], None))

        notebook_edit(path, "# Top", edit_mode="insert", cell_type="markdown")
        cells = _cells(path)
        check("insert at start",  cells[0]["source"], ["# Top"])
        check("next free id",     cells[0]["id"], "cell-4")
        check("markdown no outs", "outputs" in cells[0], False)

        check_raises("needs type", ValueError, notebook_edit, path, "x", edit_mode="insert")

        check("delete message",   notebook_edit(path, "", "cell-2", edit_mode="delete"), "Successfully deleted cell with ID cell-2")
        check("deleted",          [c["id"] for c in _cells(path)], ["cell-4", "cell-1", "cell-3", "custom"])
        check_raises("delete needs id", ValueError, notebook_edit, path, "", edit_mode="delete")


if __name__ == "__main__":
    print("=" * 52)
    print("  devtools — Notebook Tool Tests")
    print("=" * 52)

    test_cell_ids()
    test_ids_unique_on_save()
    test_read()
    test_edit_replace()
    test_edit_insert_delete()

    print("\n" + "=" * 52)
    print(f"  {PASSED}/{TOTAL} passed")
    print("=" * 52)
