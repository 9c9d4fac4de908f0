#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/web2md/cli.py
"""Command-line interface for web2md.

Converts a saved HTML page (or HTML on stdin) to Markdown.

Environment Variable Support
----------------------------
Every conversion option has an environment variable default named
``WEB2MD_<OPTION_NAME>`` (e.g. ``WEB2MD_HEADING_STYLE=setext``).
``WEB2MD_CONFIG`` names a configuration file. Command line flags always win.

Examples
--------
Convert a page and print the Markdown::

    $ web2md page.html

Convert only the ``<main>`` region and save it under a title-derived name::

    $ web2md page.html --mode main --save --output-dir ./notes

Convert a fragment selected with CSS, keeping ``<sup>`` as raw HTML::

    $ curl -s https://example.com | web2md --mode selection --selector "article" --keep sup

Preview in the terminal::

    $ web2md page.html --rich

"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import fields
from pathlib import Path
from typing import Any, Optional

from web2md import __version__
from web2md.config import build_options, env_overrides, load_config_with_priority, split_config
from web2md.constants import (
    EXIT_CONVERSION_ERROR,
    EXIT_FILE_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
)
from web2md.converter import convert
from web2md.exceptions import FileError, ValidationError, Web2MdError
from web2md.logging_utils import configure_logging
from web2md.options import ConversionOptions
from web2md.registry import RuleRegistry, default_registry
from web2md.soup import EXTRACTION_MODES, document_title, extract_region, from_soup, parse_html
from web2md.utils import safe_filename

logger = logging.getLogger(__name__)


def _add_option_arguments(parser: argparse.ArgumentParser) -> None:
    """Add one flag per ConversionOptions field, driven by field metadata."""
    group = parser.add_argument_group("Markdown options")
    for spec in fields(ConversionOptions):
        metadata = spec.metadata
        cli_name = "--" + metadata.get("cli_name", spec.name.replace("_", "-"))
        kwargs: dict[str, Any] = {"dest": spec.name, "default": None, "help": metadata.get("help")}
        if isinstance(spec.default, bool):
            # Flags flip the default: --no-escape, --extract-title
            kwargs["action"] = "store_false" if spec.default else "store_true"
        else:
            if "choices" in metadata:
                kwargs["choices"] = metadata["choices"]
            if "type" in metadata:
                kwargs["type"] = metadata["type"]
            kwargs["help"] = f"{kwargs['help']} (default: {spec.default})"
        group.add_argument(cli_name, **kwargs)


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="web2md",
        description="Convert an HTML page to Markdown.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", nargs="?", default="-", help="HTML file to convert (default: stdin)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    output = parser.add_mutually_exclusive_group()
    output.add_argument("--out", "-o", help="Write the Markdown to this file (default: stdout)")
    output.add_argument("--save", action="store_true", help="Save under a name derived from the page title")
    parser.add_argument("--output-dir", default=".", help="Directory used by --save (default: current directory)")

    region = parser.add_argument_group("Region")
    region.add_argument("--mode", choices=EXTRACTION_MODES, default=None, help="Part of the page to convert")
    region.add_argument("--selector", default=None, help="CSS selector for --mode selection")

    rules = parser.add_argument_group("Rules")
    rules.add_argument("--keep", action="append", default=[], metavar="TAG", help="Emit TAG as raw HTML")
    rules.add_argument("--remove", action="append", default=[], metavar="TAG", help="Drop TAG and its content")

    _add_option_arguments(parser)

    misc = parser.add_argument_group("Miscellaneous")
    misc.add_argument("--config", default=None, help="Configuration file (TOML, YAML or JSON)")
    misc.add_argument("--rich", action="store_true", default=None, help="Preview the Markdown with rich")
    misc.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    misc.add_argument("--log-file", default=None, help="Also write log records to this file")
    misc.add_argument("--trace", action="store_true", help="Verbose logging with timestamps")
    return parser


def _read_input(source: str) -> bytes:
    if source == "-":
        return sys.stdin.buffer.read()
    path = Path(source)
    try:
        return path.read_bytes()
    except FileNotFoundError as e:
        raise FileError(f"Input file not found: {source}", file_path=source, original_error=e) from e
    except OSError as e:
        raise FileError(f"Cannot read {source}: {e}", file_path=source, original_error=e) from e


def _write_output(path: Path, markdown: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(markdown, encoding="utf-8")
    except OSError as e:
        raise FileError(f"Cannot write {path}: {e}", file_path=str(path), original_error=e) from e


def _build_registry(keep: list[str], remove: list[str]) -> RuleRegistry:
    registry = default_registry.copy()
    registry.remove(*remove)
    registry.keep(*keep)
    return registry


def _as_list(value: Any, name: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    raise ValidationError(f"'{name}' must be a tag name or a list of tag names", parameter_name=name)


def _print_rich(markdown: str) -> None:
    from rich.console import Console
    from rich.markdown import Markdown

    Console().print(Markdown(markdown))


def run(parsed: argparse.Namespace) -> int:
    """Execute a parsed command line and return the exit code."""
    config = load_config_with_priority(parsed.config)
    option_config, settings = split_config(config)
    cli_options = {spec.name: getattr(parsed, spec.name) for spec in fields(ConversionOptions)}
    options = build_options(
        option_config,
        env_overrides(),
        {name: value for name, value in cli_options.items() if value is not None},
    )

    mode = parsed.mode or settings.get("mode", "body")
    selector = parsed.selector or settings.get("selector")
    registry = _build_registry(
        _as_list(settings.get("keep"), "keep") + parsed.keep,
        _as_list(settings.get("remove"), "remove") + parsed.remove,
    )

    soup = parse_html(_read_input(parsed.input))
    tree = from_soup(extract_region(soup, mode=mode, selector=selector))
    title = document_title(soup)
    markdown = convert(tree, options, registry, title=title).unwrap()

    use_rich = parsed.rich if parsed.rich is not None else bool(settings.get("rich", False))
    if parsed.out:
        _write_output(Path(parsed.out), markdown)
        logger.info(f"Wrote {parsed.out}")
    elif parsed.save:
        target = Path(parsed.output_dir) / safe_filename(title)
        _write_output(target, markdown)
        print(target, file=sys.stderr)
    elif use_rich:
        _print_rich(markdown)
    else:
        sys.stdout.write(markdown)
    return EXIT_SUCCESS


def main(args: Optional[list[str]] = None) -> int:
    """Execute the web2md command line."""
    parser = create_parser()
    parsed = parser.parse_args(args)
    configure_logging(parsed.log_level, log_file=parsed.log_file, trace_mode=parsed.trace)

    try:
        return run(parsed)
    except ValidationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except FileError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_FILE_ERROR
    except Web2MdError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_CONVERSION_ERROR


if __name__ == "__main__":
    sys.exit(main())
