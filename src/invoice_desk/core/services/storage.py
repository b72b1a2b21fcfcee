from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from invoice_desk.exceptions import StorageError

logger = logging.getLogger(__name__)


class JsonStore:
    """One JSON document on disk. Missing files read as `default`."""

    def __init__(self, path: Path, default: Any = None) -> None:
        self.path = Path(path)
        self._default = {} if default is None else default

    def load(self) -> Any:
        if not self.path.exists():
            return copy.deepcopy(self._default)
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Cannot read {self.path.name}: {exc}", details={"path": str(self.path)}, cause=exc) from exc

    def save(self, data: Any) -> Path:
        """Write to a temp file next to the target, then swap it in."""
        target = self.path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, target)
        except OSError as exc:
            raise StorageError(f"Cannot write {target.name}: {exc}", details={"path": str(target)}, cause=exc) from exc
        logger.debug("Saved %s", target)
        return target
