from __future__ import annotations

import shutil
import zipfile
from pathlib import Path
from typing import BinaryIO, List, Optional


def entry_base_name(name: str) -> str:
    return name.replace("\\", "/").rsplit("/", 1)[-1]


def save_zip_stream(stream: BinaryIO, dest_dir: Optional[Path] = None) -> List[Path]:
    """Write every file entry of the zip in `stream` flat into `dest_dir`.

    Archive subdirectories are dropped and existing files are overwritten.
    `stream` must be seekable. Defaults to the current working directory.
    """
    out_dir = Path(dest_dir) if dest_dir is not None else Path.cwd()
    written: List[Path] = []
    with zipfile.ZipFile(stream, "r") as zf:
        for info in zf.infolist():
            if info.is_dir():
                continue
            name = entry_base_name(info.filename)
            if name in ("", ".", ".."):
                continue
            path = out_dir / name
            with zf.open(info, "r") as src, open(path, "wb") as dst:
                shutil.copyfileobj(src, dst)
            written.append(path)
    return written


def save_raw_stream(stream: BinaryIO, dest_dir: Path, name: str) -> Path:
    """Copy `stream` unchanged to `dest_dir/name`, overwriting."""
    path = Path(dest_dir) / name
    with open(path, "wb") as dst:
        shutil.copyfileobj(stream, dst)
    return path
