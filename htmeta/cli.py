"""
Command-line driver:

    $ htmeta page.kdl                  # writes page.html
    $ htmeta page.kdl out.html -m      # minified output to out.html
    $ htmeta page.kdl - -t 2           # output to stdout, indented by 2 spaces
"""

import sys
import logging
import argparse
from pathlib import Path

from htmeta.config import DEFAULT_INDENT
from htmeta.errors import HError
from htmeta.runtime import Runtime

log = logging.getLogger(__name__)


def _build_parser():
    p = argparse.ArgumentParser(
        prog = "htmeta",
        description = "Compile a KDL document with variables and templates into HTML.",
    )
    p.add_argument("input", type = Path, help = "source file in KDL format")
    p.add_argument("output", nargs = "?", help = "output file; '-' for stdout; by default, INPUT with the .html extension")
    p.add_argument("-m", "--minify", action = "store_true", help = "no indentation and no line breaks in output")
    p.add_argument("-t", "--tab-size", type = int, default = DEFAULT_INDENT, metavar = "N", help = "no. of spaces per nesting level (default: %(default)s)")
    p.add_argument("-v", "--verbose", action = "store_true", help = "print debug messages to stderr")
    return p


def output_path(source, output):
    """Path of the output file, or None if output shall be written to stdout."""
    if output == '-': return None
    if output is None: return source.with_suffix('.html')
    return Path(output)


def main(argv = None):
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level = logging.DEBUG if args.verbose else logging.WARNING, format = "%(levelname)s %(name)s: %(message)s")

    try:
        source = args.input.read_text(encoding = 'utf-8')
        html = Runtime().render(source, pretty = not args.minify, indent = args.tab_size)
        path = output_path(args.input, args.output)
        if path is None:
            sys.stdout.write(html)
            sys.stdout.flush()
        else:
            path.write_text(html, encoding = 'utf-8')
            log.debug("written %d characters to %s", len(html), path)
    except (HError, OSError) as ex:
        print(f"error: {ex}", file = sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
