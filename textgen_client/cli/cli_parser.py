"""CLI parser construction for textgen-cli.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions`` to keep the presentation layer thin.
"""

from __future__ import annotations

import argparse

from ..openai.models import GPT3, Codex, EditsModel, EmbeddingModel, ImageResponseFormat, ImageSize

COMMANDS = ("chat", "complete", "edit", "embed", "image")


def _str2bool(v: str | None) -> bool:
    """Permissive conversion of common truthy/falsey strings to bool."""
    if v is None:
        return True
    val = v.strip().lower()
    if val in {"1", "t", "true", "y", "yes", "on"}:
        return True
    return False if val in {"0", "f", "false", "n", "no", "off"} else bool(val)


def add_stream_flags(parser: argparse.ArgumentParser) -> None:
    """Attach ``--stream``/``--no-stream`` flags to a parser.

    ``--stream`` accepts an optional boolean (``--stream``, ``--stream false``)
    and defaults to ``True`` without a value.
    """
    grp = parser.add_mutually_exclusive_group()
    grp.add_argument("--stream", nargs="?", const=True, type=_str2bool, default=False)
    grp.add_argument("--no-stream", dest="stream", action="store_false")


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--base-url", default=None)
    parser.add_argument("--organization", default=None)
    parser.add_argument("--json", action="store_true", help="Print the full response as JSON")


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level parser with one subcommand per endpoint.

    Performs no I/O; handlers are dispatched by ``main``.
    """
    p = argparse.ArgumentParser(prog="textgen-cli", description="Command-line access to the OpenAI text endpoints")
    sub = p.add_subparsers(dest="cmd", required=True)

    # chat
    p_chat = sub.add_parser("chat", help="Chat completion (optionally streamed)")
    p_chat.add_argument("prompt")
    p_chat.add_argument("--system", default=None, help="System message sent before the prompt")
    p_chat.add_argument("--model", default=None)
    p_chat.add_argument("--max-tokens", type=int, default=None)
    p_chat.add_argument("--temperature", type=float, default=1.0)
    add_stream_flags(p_chat)
    _add_common(p_chat)

    # complete
    completion_models = [m.value for m in GPT3] + [m.value for m in Codex]
    p_complete = sub.add_parser("complete", help="Text completion")
    p_complete.add_argument("prompt")
    p_complete.add_argument("--suffix", default=None)
    p_complete.add_argument("--model", default=GPT3.DAVINCI.value, choices=completion_models)
    p_complete.add_argument("--max-tokens", type=int, default=16)
    p_complete.add_argument("--temperature", type=float, default=1.0)
    _add_common(p_complete)

    # edit
    p_edit = sub.add_parser("edit", help="Apply an instruction to input text")
    p_edit.add_argument("instruction")
    p_edit.add_argument("--input", default="")
    p_edit.add_argument("--model", default=EditsModel.DAVINCI_TEXT.value, choices=[m.value for m in EditsModel])
    _add_common(p_edit)

    # embed
    p_embed = sub.add_parser("embed", help="Compute an embedding vector")
    p_embed.add_argument("input")
    p_embed.add_argument("--model", default=EmbeddingModel.ADA_V2.value, choices=[m.value for m in EmbeddingModel])
    _add_common(p_embed)

    # image
    p_image = sub.add_parser("image", help="Generate images from a prompt")
    p_image.add_argument("prompt")
    p_image.add_argument("-n", type=int, default=1)
    p_image.add_argument("--size", default=ImageSize.X256.value, choices=[s.value for s in ImageSize])
    p_image.add_argument(
        "--response-format",
        default=ImageResponseFormat.URL.value,
        choices=[f.value for f in ImageResponseFormat],
    )
    _add_common(p_image)

    return p


__all__ = ["COMMANDS", "add_stream_flags", "build_parser"]
