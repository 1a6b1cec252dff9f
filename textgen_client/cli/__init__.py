"""textgen command-line entrypoint.

Wires argument parsing (``cli_parser``) to the per-endpoint handlers in
``cli_actions``. Performs no API logic directly.
"""

from __future__ import annotations

import sys
from typing import Optional

from .cli_actions import HANDLERS
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code (0 success, 1 on API or transport error).
    """
    args = build_parser().parse_args(list(sys.argv[1:] if argv is None else argv))
    return HANDLERS[args.cmd](args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
