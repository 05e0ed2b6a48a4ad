from __future__ import annotations

from pathlib import Path


def ensure_dir(directory: str | Path) -> Path:
    path = Path(directory)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_download(directory: str | Path, file_name: str, content: bytes) -> Path:
    path = ensure_dir(directory) / Path(file_name).name
    path.write_bytes(content)
    return path


def remove_file(path: str | Path) -> None:
    Path(path).unlink(missing_ok=True)


def remove_dir_if_empty(directory: str | Path) -> None:
    path = Path(directory)
    if path.is_dir() and not any(path.iterdir()):
        path.rmdir()
