"""Notebook tools — read and edit Jupyter (.ipynb) cells.

Operations (edit_mode): replace, insert, delete.
Cells without an id get ``cell-<position>`` every time the notebook is
loaded, so the same document always yields the same ids.
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Literal, Optional

from pydantic import Field

logger = logging.getLogger(__name__)

EDIT_MODES = {"replace", "insert", "delete"}
CELL_TYPES = {"code", "markdown"}


def _load(notebook_path: str) -> dict:
    notebook = json.loads(Path(notebook_path).read_text(encoding="utf-8"))
    assign_cell_ids(notebook["cells"])
    return notebook


def _save(notebook_path: str, notebook: dict) -> None:
    text = json.dumps(notebook, indent=1, ensure_ascii=False)
    Path(notebook_path).write_text(text + "\n", encoding="utf-8")


def assign_cell_ids(cells: list) -> list:
    """Give every cell missing an id the id ``cell-<1-based position>``.

    If that id is already taken by another cell, the smallest free ``cell-N`` is used instead.
    """
    used = {cell["id"] for cell in cells if cell.get("id")}
    for index, cell in enumerate(cells):
        if not cell.get("id"):
            cell_id = f"cell-{index + 1}"
            if cell_id in used:
                cell_id = _next_cell_id(used)
            cell["id"] = cell_id
            used.add(cell_id)
    return cells


def _next_cell_id(used: set) -> str:
    n = 1
    while f"cell-{n}" in used:
        n += 1
    return f"cell-{n}"


def _find(cells: list, cell_id: str) -> int:
    for index, cell in enumerate(cells):
        if cell["id"] == cell_id:
            return index
    raise LookupError(f"Cell with ID {cell_id} not found")


def _join_source(source) -> str:
    return "".join(source) if isinstance(source, list) else source


def _set_type(cell: dict, cell_type: str) -> None:
    cell["cell_type"] = cell_type
    if cell_type == "code":
        cell["outputs"] = []
        cell["execution_count"] = None
    else:
        cell.pop("outputs", None)
        cell.pop("execution_count", None)


def notebook_read(
    notebook_path: Annotated[str, Field(description="The absolute path to the Jupyter notebook file to read (must be absolute, not relative)")],
    cell_id: Annotated[Optional[str], Field(description="The ID of a specific cell to read. If not provided, all cells will be read.")] = None,
) -> str:
    """Reads a Jupyter notebook (.ipynb file) and returns all of the cells with their outputs."""
    cells = _load(notebook_path)["cells"]
    positions = [_find(cells, cell_id)] if cell_id else range(len(cells))

    rendered = []
    for pos in positions:
        cell = cells[pos]
        out = f"Cell {pos + 1} ({cell['cell_type']}):\n"
        out += f"ID: {cell['id']}\n"
        out += f"Source:\n{_join_source(cell.get('source', ''))}\n"
        outputs = cell.get("outputs") or []
        if outputs:
            out += "Outputs:\n"
            for i, item in enumerate(outputs, 1):
                out += f"  Output {i}: {json.dumps(item, indent=2)}\n"
        rendered.append(out)
    return "\n---\n".join(rendered)


def notebook_edit(
    notebook_path: Annotated[str, Field(description="The absolute path to the Jupyter notebook file to edit (must be absolute, not relative)")],
    new_source: Annotated[str, Field(description="The new source for the cell")],
    cell_id: Annotated[Optional[str], Field(description="The ID of the cell to edit. When inserting a new cell, the new cell will be inserted after the cell with this ID, or at the beginning if not specified.")] = None,
    edit_mode: Annotated[Literal["replace", "insert", "delete"], Field(description="The type of edit to make (replace, insert, delete). Defaults to replace.")] = "replace",
    cell_type: Annotated[Optional[Literal["code", "markdown"]], Field(description="The type of the cell (code or markdown). Required for edit_mode=insert.")] = None,
) -> str:
    """Completely replaces the contents of a specific cell in a Jupyter notebook (.ipynb file) with new source.

    Also supports inserting a new cell (edit_mode=insert) or deleting one (edit_mode=delete).
    """
    if edit_mode not in EDIT_MODES:
        raise ValueError(f"Unknown edit_mode '{edit_mode}'. Use: {', '.join(sorted(EDIT_MODES))}")
    if cell_type is not None and cell_type not in CELL_TYPES:
        raise ValueError(f"Unknown cell_type '{cell_type}'. Use: {', '.join(sorted(CELL_TYPES))}")

    notebook = _load(notebook_path)
    cells = notebook["cells"]
    source = new_source.splitlines(keepends=True)

    if edit_mode == "insert":
        if not cell_type:
            raise ValueError("cell_type is required when inserting a new cell")
        new_cell = {"id": _next_cell_id({cell["id"] for cell in cells}), "cell_type": cell_type, "metadata": {}, "source": source}
        if cell_type == "code":
            new_cell["outputs"] = []
            new_cell["execution_count"] = None
        index = _find(cells, cell_id) + 1 if cell_id else 0
        cells.insert(index, new_cell)
        _save(notebook_path, notebook)
        logger.info(f"Inserted {cell_type} cell {new_cell['id']} into {notebook_path}")
        return f"Successfully inserted new {cell_type} cell with ID {new_cell['id']}"

    if edit_mode == "delete":
        if not cell_id:
            raise ValueError("cell_id is required when deleting a cell")
        del cells[_find(cells, cell_id)]
        _save(notebook_path, notebook)
        logger.info(f"Deleted cell {cell_id} from {notebook_path}")
        return f"Successfully deleted cell with ID {cell_id}"

    if not cell_id:
        raise ValueError("cell_id is required when replacing a cell")
    cell = cells[_find(cells, cell_id)]
    cell["source"] = source
    if cell_type and cell_type != cell["cell_type"]:
        _set_type(cell, cell_type)
    _save(notebook_path, notebook)
    logger.info(f"Replaced cell {cell_id} in {notebook_path}")
    return f"Successfully updated cell with ID {cell_id}"
