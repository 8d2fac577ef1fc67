from __future__ import annotations

import codecs
import os
from pathlib import Path
from typing import BinaryIO

import lz4.frame


CHUNK_SIZE = 64 * 1024


def lz4_stream_to_file(stream: BinaryIO, output_path: Path) -> int:
    """Decompress an LZ4 frame stream into a UTF-8 text file, 64 KiB at a time.

    Text is written to `{output_path}.part` and moved over `output_path` only
    once the whole stream decoded, so a failed hour leaves no file behind.
    Reader and writer are closed whether or not decompression succeeds.
    Returns characters written.
    """
    tmp_path = Path(f"{output_path}.part")
    reader = lz4.frame.LZ4FrameFile(stream, mode="rb")
    try:
        writer = open(tmp_path, "w", encoding="utf-8", newline="")
    except Exception:
        reader.close()
        raise
    # Chunks can split a multi-byte character
    decoder = codecs.getincrementaldecoder("utf-8")()
    written = 0
    try:
        try:
            while True:
                chunk = reader.read(CHUNK_SIZE)
                if not chunk:
                    break
                s = decoder.decode(chunk)
                writer.write(s)
                written += len(s)
            tail = decoder.decode(b"", final=True)
            writer.write(tail)
            written += len(tail)
        finally:
            writer.close()
            reader.close()
        os.replace(tmp_path, output_path)
    finally:
        # Clean up partial files on error
        if tmp_path.exists():
            tmp_path.unlink()
    return written
