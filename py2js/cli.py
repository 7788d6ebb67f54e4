"""
Batch filter: compile one whole program, from stdin or a file, to JavaScript.
"""

import argparse
import logging
import sys

from .compiler import compile
from .errors import CompileError


def read_source(args) -> str:
    if args.eval is not None:
        return args.eval
    if args.input == '-':
        return sys.stdin.read()
    with open(args.input, 'r', encoding='utf-8') as f:
        return f.read()


def main(argv=None):
    ap = argparse.ArgumentParser(
        prog='py2js',
        description="Compile a small Python-like language to JavaScript.")
    ap.add_argument('input', nargs='?', default='-',
                    help="source file (default: read standard input)")
    ap.add_argument('-e', '--eval', metavar='SOURCE',
                    help="compile SOURCE instead of reading a file")
    ap.add_argument('-o', '--out', help="output file (default: standard output)")
    ap.add_argument('-v', '--verbose', action='store_true', help="log pipeline progress")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        code = compile(read_source(args))
        if args.out:
            with open(args.out, 'w', encoding='utf-8') as f:
                f.write(code)
                f.write('\n')
        else:
            sys.stdout.write(code)
            sys.stdout.write('\n')
    except CompileError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except RecursionError:
        print("Error: program is nested too deeply to compile", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
