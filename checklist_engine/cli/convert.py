"""
Command-line checklist converter.

Usage:
    checklist-convert INPUT OUTPUT [--from FMT] [--to FMT] [--config PATH] [--verbose]

Formats not given on the command line are detected from the file extensions
and, for the input, from the content.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from checklist_engine.config import get_config, load_config
from checklist_engine.formats import convert, detect_format
from checklist_engine.formats.context import build_context
from checklist_engine.formats.errors import ConversionError
from checklist_engine.schemas.common.enums import ChecklistFormat

logger = logging.getLogger(__name__)

FORMAT_CHOICES = [f.value for f in ChecklistFormat]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert checklist files between formats")
    parser.add_argument("input", type=Path, help="Checklist file to read")
    parser.add_argument("output", type=Path, help="File to write the converted checklist to")
    parser.add_argument("--from", dest="source_format", choices=FORMAT_CHOICES,
                        help="Format of the input file (detected when omitted)")
    parser.add_argument("--to", dest="target_format", choices=FORMAT_CHOICES,
                        help="Format of the output file (detected from its extension when omitted)")
    parser.add_argument("--config", type=Path, help="Engine configuration YAML file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the converter.

    Returns:
        Process exit code: 0 on success, 1 on a conversion or I/O error
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        config = load_config(args.config) if args.config else get_config()
        context = build_context(config)
        content = args.input.read_bytes()

        source = args.source_format or detect_format(args.input, content, config["file_type_map"])
        target = args.target_format or detect_format(args.output, None, config["file_type_map"])
        logger.info(f"Converting {args.input} ({ChecklistFormat(source).value}) "
                    f"to {args.output} ({ChecklistFormat(target).value})")

        result = convert(content, source, target, context)
        args.output.write_bytes(result)
    except (ConversionError, OSError, ValueError, yaml.YAMLError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    logger.info(f"Wrote {len(result)} bytes to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
