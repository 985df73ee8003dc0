import hashlib
import json
import logging
import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from schemas import ValidationResult

logger = logging.getLogger(__name__)

# serialises version check, write and map sync across request threads
_write_lock = threading.Lock()

WORK_DATA_FILE = "allWorkData.json"
PORTFOLIO_MAP_FILE = "portfolioMap.json"
INVALID_DATA_NOTICE = "Invalid data"


class DataFileError(Exception):
    pass

class InvalidFilename(DataFileError):
    pass

class DataFileReadError(DataFileError):
    pass

class DataFileWriteError(DataFileError):
    pass

class VersionConflict(DataFileError):
    def __init__(self, filename: str, current: Optional[str]):
        super().__init__(f"{filename} was changed by another save")
        self.current = current


def content_version(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:16]


def build_portfolio_map(all_work_data: dict) -> Dict[str, str]:
    """code -> display name; ``tableName`` first, then ``fullName``, then the code."""
    portfolio_map = {}
    for code, detail in all_work_data.items():
        detail = detail if isinstance(detail, dict) else {}
        name = detail.get("tableName") or detail.get("fullName") or code
        portfolio_map[code] = re.sub(r"[\r\n]+", " ", str(name)).strip()
    return portfolio_map


# expected top-level shape per file, for the admin "invalid data" notice
_STRUCTURE_CHECKS = {
    "experience.json": lambda d: isinstance(d, dict)
        and isinstance(d.get("entries"), list)
        and isinstance(d.get("typeOrder"), list),
    "skillsData.json": lambda d: isinstance(d, dict) and isinstance(d.get("groups"), list),
    "publishData.json": lambda d: isinstance(d, dict) and isinstance(d.get("groups"), list),
    "portfolioRoutes.json": lambda d: isinstance(d, dict) and all(isinstance(v, dict) for v in d.values()),
    WORK_DATA_FILE: lambda d: isinstance(d, dict) and all(isinstance(v, dict) for v in d.values()),
    PORTFOLIO_MAP_FILE: lambda d: isinstance(d, dict),
}


def validate_content(filename: str, content: str) -> ValidationResult:
    if not filename.endswith(".json"):
        return ValidationResult(valid=True)
    try:
        data = json.loads(content)
    except ValueError as exc:
        return ValidationResult(valid=False, message=f"{INVALID_DATA_NOTICE}: {exc}")
    check = _STRUCTURE_CHECKS.get(filename)
    if check and not check(data):
        return ValidationResult(valid=False, message=f"{INVALID_DATA_NOTICE}: unexpected structure in {filename}")
    return ValidationResult(valid=True)


class DataFileStore:
    """Plain read/overwrite access to the content directory for the admin tool."""

    def __init__(self, data_dir: Path, hidden: Iterable[str] = ()):
        self.data_dir = Path(data_dir)
        self.hidden = set(hidden)

    def _path(self, filename: str) -> Path:
        if ".." in filename or "/" in filename or "\\" in filename or not filename:
            raise InvalidFilename(filename)
        return self.data_dir / filename

    def list_files(self) -> List[str]:
        try:
            names = os.listdir(self.data_dir)
        except OSError as exc:
            logger.error("Error reading data directory %s: %s", self.data_dir, exc)
            raise DataFileReadError("Error reading data directory") from exc
        return sorted(
            name for name in names
            if (name.endswith(".json") or name.endswith(".csv")) and name not in self.hidden
        )

    def read(self, filename: str) -> str:
        path = self._path(filename)
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Error reading file %s: %s", filename, exc)
            raise DataFileReadError(f"Error reading file {filename}") from exc

    def version(self, filename: str) -> Optional[str]:
        try:
            return content_version(self.read(filename))
        except DataFileReadError:
            return None

    def write(self, filename: str, content: str, base_version: Optional[str] = None) -> str:
        """Overwrite ``filename``; returns the new version.

        With ``base_version`` the write only happens if the file still has that
        version, otherwise ``VersionConflict`` is raised.
        """
        path = self._path(filename)
        with _write_lock:
            if base_version is not None:
                current = self.version(filename)
                if current is not None and current != base_version:
                    raise VersionConflict(filename, current)

            self._atomic_write(path, content)
            logger.info("%s updated", filename)

            if filename == WORK_DATA_FILE:
                self.sync_portfolio_map(content)
        return content_version(content)

    def _atomic_write(self, path: Path, content: str) -> None:
        tmp = None
        try:
            fd, tmp = tempfile.mkstemp(dir=self.data_dir, prefix=f".{path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp, path)
        except OSError as exc:
            if tmp is not None and os.path.exists(tmp):
                os.unlink(tmp)
            logger.error("Error writing to file %s: %s", path.name, exc)
            raise DataFileWriteError(f"Error writing to file {path.name}") from exc

    def sync_portfolio_map(self, all_work_data_content: str) -> Optional[Dict[str, str]]:
        """Regenerate portfolioMap.json from saved work data; failures are logged only."""
        try:
            data = json.loads(all_work_data_content)
            if not isinstance(data, dict):
                raise ValueError("work data must be an object")
            portfolio_map = build_portfolio_map(data)
            self._atomic_write(
                self.data_dir / PORTFOLIO_MAP_FILE,
                json.dumps(portfolio_map, ensure_ascii=False, indent=2) + "\n",
            )
        except (ValueError, DataFileWriteError) as exc:
            logger.error("Failed to sync %s: %s", PORTFOLIO_MAP_FILE, exc)
            return None
        logger.info("%s synced (%d entries)", PORTFOLIO_MAP_FILE, len(portfolio_map))
        return portfolio_map
