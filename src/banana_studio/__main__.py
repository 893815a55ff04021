#!/usr/bin/env python3
"""
Banana Studio - Command-Line Entry Point

Run with: python -m banana_studio <mode> [options]

Modes:
    remix      --style IMG --subject IMG [--prompt TEXT]
    face-swap  --face IMG --target IMG [--prompt TEXT]
    edit       --image IMG --prompt TEXT
    generate   --prompt TEXT
    set-key    store a Gemini API key in the local config
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .api.credentials import interactive_api_key_setup
from .config import APP_NAME, APP_VERSION, BILLING_DOCS_URL
from .core.models import (
    AspectRatio,
    ErrorClass,
    ImageResolution,
    Mode,
    ModelVersion,
    RawInputs,
    ReferenceImage,
    Success,
)
from .logging_utils import log_exception, log_info, setup_logging
from .pipeline import generate_sync

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_MISSING_INPUT = 2

COMMAND_MODES = {
    "remix": Mode.STYLE_REMIX,
    "face-swap": Mode.FACE_SWAP,
    "edit": Mode.EDIT,
    "generate": Mode.GENERATE,
}


def _add_common_options(parser: argparse.ArgumentParser, prompt_help: str) -> None:
    parser.add_argument("--prompt", "-p", default="", help=prompt_help)
    parser.add_argument(
        "--resolution",
        choices=[r.value for r in ImageResolution],
        default=ImageResolution.RES_1K.value,
        help="Output size (Pro model only; ignored otherwise).",
    )
    parser.add_argument(
        "--aspect-ratio",
        choices=[a.value for a in AspectRatio],
        default=AspectRatio.SQUARE.value,
        help="Output aspect ratio.",
    )
    parser.add_argument(
        "--model",
        choices=[m.value for m in ModelVersion],
        default=None,
        help="Gemini image model (default: config default_model, else the Pro model).",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Write the generated image here. Without it the data URI is printed.",
    )
    parser.add_argument(
        "--no-interactive",
        action="store_true",
        help="Never prompt for a new API key on quota errors.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="banana-studio",
        description=f"{APP_NAME} - image generation with Google Gemini.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument("--no-log-file", action="store_true", help="Log to the console only.")
    sub = parser.add_subparsers(dest="command", required=True)

    remix = sub.add_parser("remix", help="Place a subject into the scene of a style reference.")
    remix.add_argument("--style", type=Path, help="Background/style reference image.")
    remix.add_argument("--subject", type=Path, help="Subject image (person and outfit to keep).")
    _add_common_options(remix, "Action/context for the subject (optional).")

    swap = sub.add_parser("face-swap", help="Put the reference face onto the target image.")
    swap.add_argument("--face", type=Path, help="Face reference image.")
    swap.add_argument("--target", type=Path, help="Target/body image.")
    _add_common_options(swap, "Optional note for the swap.")

    edit = sub.add_parser("edit", help="Edit a single image with a text instruction.")
    edit.add_argument("--image", type=Path, help="Image to edit.")
    _add_common_options(edit, "Edit instruction (required).")

    generate = sub.add_parser("generate", help="Generate an image from text alone.")
    _add_common_options(generate, "Text prompt (required).")

    sub.add_parser("set-key", help="Store a Gemini API key in the local config.")
    return parser


def _load_image(path: Optional[Path]) -> Optional[ReferenceImage]:
    if path is None:
        return None
    return ReferenceImage.from_path(path)


def build_inputs(args: argparse.Namespace) -> RawInputs:
    """
    Map parsed arguments onto the mode's input slots.

    Raises:
        OSError: If an image file cannot be read.
        ValueError: If a file is not an image.
    """
    primary = getattr(args, "style", None) or getattr(args, "face", None) or getattr(args, "image", None)
    secondary = getattr(args, "subject", None) or getattr(args, "target", None)
    return RawInputs(
        primary_image=_load_image(primary),
        secondary_image=_load_image(secondary),
        prompt=args.prompt,
        resolution=ImageResolution(args.resolution),
        aspect_ratio=AspectRatio(args.aspect_ratio),
    )


def _offer_new_key(args: argparse.Namespace) -> None:
    print(f"Billing information: {BILLING_DOCS_URL}", file=sys.stderr)
    if args.no_interactive or not sys.stdin.isatty():
        print("Run `banana-studio set-key` to select a paid API key.", file=sys.stderr)
        return
    answer = input("Select a different API key now? [y/N] ").strip().lower()
    if answer in ("y", "yes"):
        interactive_api_key_setup()


def run_command(args: argparse.Namespace) -> int:
    """Run one parsed command and return the process exit status."""
    if args.command == "set-key":
        return EXIT_OK if interactive_api_key_setup() else EXIT_FAILED

    mode = COMMAND_MODES[args.command]
    try:
        inputs = build_inputs(args)
    except (OSError, ValueError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return EXIT_MISSING_INPUT

    outcome = generate_sync(mode, inputs, model=args.model)

    if isinstance(outcome, Success):
        if args.output is not None:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_bytes(outcome.image_bytes())
            log_info(f"Saved image to {args.output}")
            print(f"Saved image to {args.output}")
        else:
            print(outcome.image_data_uri)
        return EXIT_OK

    print(f"[ERROR] {outcome.message}", file=sys.stderr)
    if outcome.requires_new_credential:
        _offer_new_key(args)
    if outcome.error_class is ErrorClass.MISSING_INPUT:
        return EXIT_MISSING_INPUT
    return EXIT_FAILED


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command-line front end."""
    args = build_parser().parse_args(argv)
    setup_logging(log_to_file=not args.no_log_file)
    try:
        return run_command(args)
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        return EXIT_FAILED
    except Exception as e:
        log_exception(f"Unexpected error: {e}")
        print(f"[ERROR] {e}", file=sys.stderr)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
