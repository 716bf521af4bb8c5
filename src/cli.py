"""CLI entry point for SlideForge.

Orchestrates the pipeline: spec loading, validation, HTML generation,
QA read-back and export.

Usage::

    # Render a spec to a self-contained HTML deck
    python -m src.cli generate --spec decks/q3.yaml -o output/q3.html

    # Override spec options and export a print-ready copy
    python -m src.cli generate --spec decks/q3.yaml -o output/q3.html \\
        --theme academic --aspect-ratio 4:3 --minify --format pdf-html

    # Validate a spec without rendering it
    python -m src.cli validate --spec decks/q3.yaml

    # QA an existing deck against its spec
    python -m src.cli check --spec decks/q3.yaml --html output/q3.html

    # Themes and capabilities
    python -m src.cli themes list
    python -m src.cli themes show pitch-deck
    python -m src.cli capabilities

    # Standalone icons and background patterns
    python -m src.cli svg icon trend-up -o trend-up.svg --size 64
    python -m src.cli svg pattern hexagon -o bg.svg --theme academic --density high
"""

import argparse
import json
import sys
from pathlib import Path

import yaml

from src.capabilities import get_capabilities
from src.errors import PresentationError, SpecValidationError, ThemeNotFoundError
from src.export.formats import EXPORT_FORMATS, export_presentation
from src.generator.html_builder import HTMLBuilder
from src.generator.icons import ICON_NAMES, ICON_STYLES, icon_svg
from src.generator.patterns import DENSITY, PATTERN_TYPES, pattern_svg
from src.qa.validator import QAValidator
from src.schema.loader import load_raw
from src.schema.models import ASPECT_RATIOS, FONT_SIZES
from src.schema.themes import default_registry
from src.schema.validation import validate


# ---------------------------------------------------------------------------
# Spec loading
# ---------------------------------------------------------------------------

def _load_raw(args):
    """Decode the --spec file, exiting with a message on I/O or syntax errors."""
    path = Path(args.spec)
    if not path.exists():
        _error(f"Spec file not found: {path}")
    try:
        return load_raw(path)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        _error(f"Could not parse {path}: {exc}")


def _load_spec(args):
    """Load and validate the --spec file; print every issue and exit on failure."""
    result = validate(_load_raw(args))
    if not result.ok:
        print(result.report(), file=sys.stderr)
        _error("Spec validation failed.")
    return result.spec


def _call_options(args):
    """Generation overrides given on the command line (unset flags stay unset)."""
    options = {}
    if args.theme:
        options["theme"] = args.theme
    if args.aspect_ratio:
        options["aspect_ratio"] = args.aspect_ratio
    if args.font_size:
        options["font_size"] = args.font_size
    if args.minify:
        options["minify"] = True
    if args.no_styles:
        options["include_styles"] = False
    return options or None


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_generate(args):
    """Render a spec to HTML, QA it, and write the requested export."""
    spec = _load_spec(args)
    _info(f"Spec: {spec.title} ({len(spec.slides)} slides, theme {spec.theme})")

    _info("Rendering HTML...")
    try:
        doc = HTMLBuilder().build(spec, options=_call_options(args))
    except PresentationError as exc:
        _error(str(exc))

    for w in doc.warnings:
        _warn(w)

    # QA validation
    if not args.skip_qa:
        _info("Running QA validation...")
        qa_result = QAValidator(spec).validate(doc.html)
        if qa_result.passed:
            _info(qa_result.summary())
        else:
            _warn(qa_result.summary())
            if args.verbose:
                print(qa_result.report(), file=sys.stderr)
            if not args.force:
                _error("QA validation failed. Use --force to write anyway, "
                       "or --skip-qa to skip validation.")
    else:
        _info("QA validation skipped (--skip-qa)")

    # Export
    output = Path(args.output)
    try:
        exported = export_presentation(args.format, html=doc.html, presentation=spec,
                                       filename=output.stem)
    except SpecValidationError as exc:
        _error(str(exc))

    output.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(exported.content, bytes):
        output.write_bytes(exported.content)
        size = len(exported.content)
    else:
        output.write_text(exported.content, encoding="utf-8")
        size = len(exported.content.encode("utf-8"))
    _info(f"Written: {output} ({size:,} bytes, {args.format})")
    if args.verbose:
        _info(exported.instructions)


def cmd_validate(args):
    """Validate a spec file and report every issue."""
    result = validate(_load_raw(args))
    if result.ok:
        spec = result.spec
        print(f"Spec OK: {spec.title!r}, {len(spec.slides)} slide(s), theme {spec.theme}")
        sys.exit(0)
    print(result.report())
    sys.exit(1)


def cmd_check(args):
    """QA an existing HTML deck against its spec."""
    spec = _load_spec(args)
    html_path = Path(args.html)
    if not html_path.exists():
        _error(f"HTML file not found: {html_path}")

    _info(f"Checking {html_path} against {args.spec}")
    qa_result = QAValidator(spec).validate(html_path.read_bytes())
    print(qa_result.report())
    sys.exit(0 if qa_result.passed else 1)


def cmd_themes(args):
    """List themes or show one theme's palette."""
    if args.action == "show":
        if not args.name:
            _error("themes show needs a theme name")
        try:
            theme = default_registry.lookup(args.name)
        except ThemeNotFoundError as exc:
            _error(str(exc))
        print(json.dumps(theme.to_dict(), indent=2))
        return

    for theme in default_registry.all():
        print(f"  {theme.name:<12} {theme.display_name:<14} {theme.description}")


def cmd_capabilities(args):
    """Print what this installation supports."""
    print(json.dumps(get_capabilities(), indent=2))


def cmd_svg(args):
    """Write a standalone icon or background pattern as an SVG file."""
    theme = None
    if args.theme:
        try:
            theme = default_registry.lookup(args.theme)
        except ThemeNotFoundError as exc:
            _error(str(exc))

    try:
        if args.kind == "icon":
            markup = icon_svg(args.name, size=args.size, color=args.color or "currentColor",
                              style=args.style, theme=theme)
        else:
            markup = pattern_svg(args.name, args.width, args.height, theme=theme,
                                 color=args.color or "theme:primary", opacity=args.opacity,
                                 density=args.density)
    except ValueError as exc:
        _error(str(exc))

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(markup, encoding="utf-8")
    _info(f"Written: {output} ({args.kind} {args.name})")


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def _info(msg):
    print(f"  {msg}", file=sys.stderr)


def _warn(msg):
    print(f"  WARNING: {msg}", file=sys.stderr)


def _error(msg):
    print(f"  ERROR: {msg}", file=sys.stderr)
    sys.exit(1)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="slideforge",
        description="Compile presentation specs into self-contained HTML slide decks.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---- generate ----
    gen = subparsers.add_parser(
        "generate",
        help="Render a spec file to an HTML deck (or another export format).",
    )
    _add_spec_arg(gen)
    gen.add_argument(
        "-o", "--output",
        required=True,
        help="Output file path.",
    )
    gen.add_argument(
        "--format",
        choices=EXPORT_FORMATS,
        default="html",
        help="Export format (default: html).",
    )
    overrides = gen.add_argument_group("option overrides")
    overrides.add_argument("--theme", help="Theme id, overriding the spec.")
    overrides.add_argument("--aspect-ratio", choices=ASPECT_RATIOS)
    overrides.add_argument("--font-size", choices=FONT_SIZES)
    overrides.add_argument(
        "--minify",
        action="store_true",
        default=False,
        help="Minify the HTML output.",
    )
    overrides.add_argument(
        "--no-styles",
        action="store_true",
        default=False,
        help="Omit the base stylesheet (theme variables are still emitted).",
    )
    gen.add_argument(
        "--skip-qa",
        action="store_true",
        default=False,
        help="Skip QA validation after generation.",
    )
    gen.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Write output even if QA validation fails.",
    )
    gen.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Show detailed output (full QA report on failure).",
    )
    gen.set_defaults(func=cmd_generate)

    # ---- validate ----
    val = subparsers.add_parser(
        "validate",
        help="Validate a spec file and list every issue.",
    )
    _add_spec_arg(val)
    val.set_defaults(func=cmd_validate)

    # ---- check ----
    chk = subparsers.add_parser(
        "check",
        help="QA an existing HTML deck against its spec.",
    )
    _add_spec_arg(chk)
    chk.add_argument(
        "--html",
        required=True,
        help="Path to the generated HTML file.",
    )
    chk.set_defaults(func=cmd_check)

    # ---- themes ----
    thm = subparsers.add_parser(
        "themes",
        help="List themes or show one theme.",
    )
    thm.add_argument("action", nargs="?", choices=["list", "show"], default="list")
    thm.add_argument("name", nargs="?", help="Theme id (for show).")
    thm.set_defaults(func=cmd_themes)

    # ---- capabilities ----
    cap = subparsers.add_parser(
        "capabilities",
        help="List supported slide kinds, charts, formats and themes.",
    )
    cap.set_defaults(func=cmd_capabilities)

    # ---- svg ----
    svg = subparsers.add_parser(
        "svg",
        help="Write a named icon or a background pattern as an SVG file.",
    )
    svg_kinds = svg.add_subparsers(dest="kind", required=True)
    icon = svg_kinds.add_parser("icon", help="One of the built-in icons.")
    icon.add_argument("name", choices=ICON_NAMES)
    icon.add_argument("--size", type=float, default=48, help="Edge length in px (default: 48).")
    icon.add_argument("--style", choices=ICON_STYLES, default="outline")
    pattern = svg_kinds.add_parser("pattern", help="A decorative background pattern.")
    pattern.add_argument("name", choices=PATTERN_TYPES)
    pattern.add_argument("--width", type=float, default=800)
    pattern.add_argument("--height", type=float, default=600)
    pattern.add_argument("--density", choices=list(DENSITY), default="medium")
    pattern.add_argument("--opacity", type=float, default=0.1)
    for sub in (icon, pattern):
        sub.add_argument("-o", "--output", required=True, help="Output .svg path.")
        sub.add_argument("--theme", help="Theme whose colours resolve theme:<name> references.")
        sub.add_argument("--color", help="Colour or theme:<name> reference.")
        sub.set_defaults(func=cmd_svg)

    return parser


def _add_spec_arg(parser):
    parser.add_argument(
        "--spec",
        required=True,
        help="Presentation spec file (YAML or JSON).",
    )


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv=None):
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
