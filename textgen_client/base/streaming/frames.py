"""Server-sent event frame splitting.

Splits the text received so far into complete event frames. Frames are
separated by a blank line (``"\\n\\n"``); whatever follows the last separator
is an incomplete frame and is handed back as the new buffer so the next chunk
can complete it. Matching is purely textual and independent of how the
transport cut the byte stream.
"""
from __future__ import annotations

from typing import List, Tuple

from ..constants import EVENT_PREFIX, FRAME_DELIMITER


def split_frames(buffer: str) -> Tuple[List[str], str]:
    """Split ``buffer`` into complete frames and the leftover tail.

    Returns
    -------
    tuple[list[str], str]
        ``(frames, tail)`` where ``frames`` are the delimiter-terminated spans
        in arrival order (delimiters removed) and ``tail`` is the text after
        the last delimiter. ``tail`` is ``""`` when the buffer ends exactly on
        a delimiter and equals ``buffer`` when no delimiter is present. A
        CRLF blank line (``"\\r\\n\\r\\n"``) is not a delimiter.
    """
    *frames, tail = buffer.split(FRAME_DELIMITER)
    return frames, tail


def accept_frame(frame: str) -> bool:
    """Return True when ``frame`` carries an event payload worth decoding.

    Blank keep-alive frames, comment lines (``": ping"``) and any other frame
    not starting with the ``data:`` marker are discarded.
    """
    return frame.startswith(EVENT_PREFIX)


__all__ = ["split_frames", "accept_frame"]
