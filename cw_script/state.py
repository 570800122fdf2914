"""
cw_script.state
===============

JSON-backed record of deployed contracts:

    {
      "<group>": {
        "<contract>": {"addr": "terra1...", "code_id": 42}
      }
    }

Every mutation loads the whole document, patches exactly one leaf and rewrites
the whole document, so sibling records written earlier (by this or another
orchestrator) are never dropped. Nothing is cached in memory: each call re-reads
the file.

There is no cross-process lock. Two writers racing on the same file resolve
last-writer-wins; callers must serialize their own deployments. Writes go
through a temp file + ``os.replace`` so a crash never leaves a truncated file.
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Union

from .errors import NotFoundError, StateFileError
from .logging import get_logger

log = get_logger(__name__)

Document = Dict[str, Any]


class StateStore:
    """Read/modify/write access to the contract state file."""

    def __init__(self, file_path: Union[str, Path]) -> None:
        self.file_path = Path(file_path)

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"StateStore({str(self.file_path)!r})"

    # --- whole document ---------------------------------------------------

    def load(self) -> Document:
        """
        Read and parse the state file. A missing file is an empty document;
        anything that is not a JSON object is treated as corruption.
        """
        try:
            text = self.file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StateFileError(
                f"cannot read state file: {e}", data={"path": str(self.file_path)}
            ) from e

        if not text.strip():
            return {}
        try:
            doc = json.loads(text)
        except json.JSONDecodeError as e:
            raise StateFileError(
                f"state file is not valid JSON: {e}", data={"path": str(self.file_path)}
            ) from e
        if not isinstance(doc, dict):
            raise StateFileError(
                "state file must contain a JSON object at the top level",
                data={"path": str(self.file_path), "type": type(doc).__name__},
            )
        return doc

    def save(self, doc: Document) -> None:
        """Atomically replace the state file with `doc` (pretty JSON)."""
        target = self.file_path
        parent = target.parent if str(target.parent) else Path(".")
        try:
            parent.mkdir(parents=True, exist_ok=True)
            fd, tmpname = tempfile.mkstemp(prefix=".tmp.", suffix=".json", dir=str(parent))
        except OSError as e:
            raise StateFileError(
                f"cannot write state file: {e}", data={"path": str(target)}
            ) from e

        tmp = Path(tmpname)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(doc, f, indent=2)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, target)
        except (OSError, TypeError, ValueError) as e:
            raise StateFileError(
                f"cannot write state file: {e}", data={"path": str(target)}
            ) from e
        finally:
            if tmp.exists():
                with contextlib.suppress(OSError):
                    tmp.unlink()

    # --- leaves -----------------------------------------------------------

    def _patch(self, group: str, name: str, field: str, value: Any) -> None:
        doc = self.load()
        group_doc = doc.setdefault(group, {})
        if not isinstance(group_doc, dict):
            raise StateFileError(f"group entry {group!r} is not an object", data={"group": group})
        record = group_doc.setdefault(name, {})
        if not isinstance(record, dict):
            raise StateFileError(
                f"contract entry {group}/{name} is not an object",
                data={"group": group, "contract": name},
            )
        record[field] = value
        self.save(doc)

    def _record(self, group: str, name: str) -> Dict[str, Any]:
        doc = self.load()
        record = doc.get(group, {}).get(name) if isinstance(doc.get(group), dict) else None
        if not isinstance(record, dict):
            raise NotFoundError(
                f"contract {name!r} is not registered in group {group!r}",
                data={"group": group, "contract": name, "path": str(self.file_path)},
            )
        return record

    def ensure_scaffold(self, group: str, name: str) -> bool:
        """
        Insert an empty record for (group, name) if absent.

        Returns True if the file was written. Calling it again is a no-op.
        """
        doc = self.load()
        group_doc = doc.get(group)
        if isinstance(group_doc, dict) and name in group_doc:
            return False
        if group_doc is None:
            group_doc = doc[group] = {}
        elif not isinstance(group_doc, dict):
            raise StateFileError(f"group entry {group!r} is not an object", data={"group": group})
        group_doc[name] = {}
        self.save(doc)
        log.debug("state_scaffolded", group=group, contract=name, path=str(self.file_path))
        return True

    def set_addr(self, group: str, name: str, addr: str) -> None:
        self._patch(group, name, "addr", str(addr))

    def set_code_id(self, group: str, name: str, code_id: int) -> None:
        if isinstance(code_id, bool) or not isinstance(code_id, int) or code_id < 0:
            raise StateFileError(
                f"code id for {group}/{name} must be an unsigned integer: {code_id!r}",
                data={"group": group, "contract": name},
            )
        self._patch(group, name, "code_id", int(code_id))

    def get_addr(self, group: str, name: str) -> str:
        addr = self._record(group, name).get("addr")
        if not isinstance(addr, str) or not addr:
            raise NotFoundError(
                f"no address recorded for {group}/{name}",
                data={"group": group, "contract": name},
            )
        return addr

    def get_code_id(self, group: str, name: str) -> int:
        code_id = self._record(group, name).get("code_id")
        if code_id is None:
            raise NotFoundError(
                f"no code id recorded for {group}/{name}",
                data={"group": group, "contract": name},
            )
        if isinstance(code_id, bool) or not isinstance(code_id, int) or code_id < 0:
            raise StateFileError(
                f"code id for {group}/{name} is not an unsigned integer: {code_id!r}",
                data={"group": group, "contract": name},
            )
        return code_id

    def records(self, group: str) -> Dict[str, Dict[str, Any]]:
        """All contract records of `group` (empty if the group is unknown)."""
        group_doc = self.load().get(group)
        return dict(group_doc) if isinstance(group_doc, dict) else {}


__all__ = ["StateStore", "Document"]
