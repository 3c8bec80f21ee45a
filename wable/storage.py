import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

INDEX_FILE = "workable-index.json"
SHOW_FILE = "workable-show.json"
PROFILE_FILE = "0-PROFILE.md"
RESUME_FILE = "0-RESUME.pdf"
COVER_FILE = "0-COVER.txt"

JOB_INDEX_FILE = "job-index.json"
STAGES_JSON_FILE = "stages.json"
STAGES_MD_FILE = "stages.md"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9@.-]")


def sanitize_identifier(value: str) -> str:
    """Replace every character outside [A-Za-z0-9@.-] with an underscore."""
    return _UNSAFE_CHARS.sub("_", str(value))


def resolve_base_dir(base_dir: Optional[Union[str, Path]]) -> Path:
    return Path(base_dir) if base_dir else Path.cwd()


def candidate_dir(base_dir: Optional[Union[str, Path]], candidate: Dict[str, Any]) -> Path:
    key = candidate.get("email") or candidate["id"]
    return resolve_base_dir(base_dir) / "candidates" / sanitize_identifier(key)


def job_dir(base_dir: Optional[Union[str, Path]], shortcode: str) -> Path:
    return resolve_base_dir(base_dir) / "jobs" / sanitize_identifier(shortcode)


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_bytes(path: Path, data: bytes) -> None:
    """Write a file atomically: readers see either the old or the new content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def write_text(path: Path, text: str) -> None:
    write_bytes(path, text.encode("utf-8"))


def write_json(path: Path, data: Any) -> None:
    write_text(path, json.dumps(data, indent=2, ensure_ascii=False))


def load_json(path: Path) -> Any:
    """Read and decode a JSON file. Raises OSError or ValueError on failure."""
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)
