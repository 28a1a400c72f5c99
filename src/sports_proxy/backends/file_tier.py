"""Filesystem-backed cold cache tier: one JSON blob plus a metadata sidecar per key."""

import asyncio
import hashlib
import json
from pathlib import Path
from typing import Dict, Optional

from ..core.exceptions import TierUnavailable
from ..core.logger import get_logger

logger = get_logger(__name__)


class FileColdTier:
    """Blob store under ``root``. Entries never expire on their own."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        # Keys contain ':' and '|', hash them into safe file names.
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.root / digest[:2] / f"{digest}.json"

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._read, key)

    async def put(self, key: str, blob: str, metadata: Dict[str, str]) -> None:
        await asyncio.to_thread(self._write, key, blob, metadata)

    def metadata(self, key: str) -> Optional[Dict[str, str]]:
        sidecar = self._path(key).with_suffix(".meta.json")
        if not sidecar.exists():
            return None
        return json.loads(sidecar.read_text(encoding="utf-8"))

    def _read(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise TierUnavailable(f"Cold tier read failed for {path}: {e}") from e

    def _write(self, key: str, blob: str, metadata: Dict[str, str]) -> None:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".tmp")
            tmp.write_text(blob, encoding="utf-8")
            tmp.replace(path)
            path.with_suffix(".meta.json").write_text(json.dumps({"key": key, **metadata}), encoding="utf-8")
        except OSError as e:
            raise TierUnavailable(f"Cold tier write failed for {path}: {e}") from e
        logger.debug("Cold tier stored '%s' at %s.", key, path)
