#!/usr/bin/env python3
"""
CLI for the Monkey interpreter.

Usage:
    python -m monkey [repl]
    python -m monkey run FILE
    python -m monkey check FILE
    python -m monkey ast FILE
    python -m monkey tokens FILE

Global options (before the subcommand):
    --config FILE       YAML settings (prompt, max_errors, show_banner)
    --max-errors N      Stop parsing after N errors

Examples:
    # Interactive session
    python -m monkey

    # Evaluate a script and print its result
    python -m monkey run examples/fibonacci.mk

    # Report parse errors without evaluating
    python -m monkey check examples/fibonacci.mk
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from .config import ReplConfig


def read_source(path_str: str) -> Optional[str]:
    """Read a source file, reporting a missing file on stderr."""
    source_path = Path(path_str)
    if not source_path.exists():
        print(f"Error: File not found: {source_path}", file=sys.stderr)
        return None
    return source_path.read_text(encoding="utf-8")


def cmd_repl(args, config: ReplConfig):
    """Start an interactive session on stdin/stdout."""
    from .repl import start

    if config.show_banner:
        print("Hello! This is the Monkey programming language!")
        print("Feel free to type in commands (exit or EOF to quit)")
    start(sys.stdin, sys.stdout, config)
    return 0


def cmd_run(args, config: ReplConfig):
    """Evaluate a script and print the result."""
    from .runtime import run

    source = read_source(args.file)
    if source is None:
        return 1

    result = run(source, filename=args.file, max_errors=config.max_errors)

    if result.parse_errors:
        print(f"Parsing failed with {len(result.parse_errors)} error(s):", file=sys.stderr)
        for msg in result.parse_errors:
            print(f"\t{msg}", file=sys.stderr)
        return 1

    if result.error_message is not None:
        print(f"Error: {result.error_message}", file=sys.stderr)
        return 1

    if not result.success:
        print(result.output, file=sys.stderr)
        return 1

    print(result.output)
    return 0


def cmd_check(args, config: ReplConfig):
    """Parse a file and report its diagnostics."""
    from .lexer import Lexer
    from .parser import Parser

    source = read_source(args.file)
    if source is None:
        return 1

    parser = Parser(Lexer(source, args.file), source=source, max_errors=config.max_errors)
    program = parser.parse_program()

    if parser.diagnostics.has_errors:
        print(parser.diagnostics.format_all(), file=sys.stderr)
        return 1

    print(f"OK: {Path(args.file).name} - {len(program.statements)} statement(s), no errors")
    return 0


def cmd_ast(args, config: ReplConfig):
    """Print the parse tree of a file."""
    from .lexer import Lexer
    from .parser import Parser
    from .ast import print_ast

    source = read_source(args.file)
    if source is None:
        return 1

    parser = Parser(Lexer(source, args.file), source=source, max_errors=config.max_errors)
    program = parser.parse_program()
    if parser.errors:
        print(parser.diagnostics.format_all(), file=sys.stderr)
        return 1

    print_ast(program, out=sys.stdout)
    return 0


def cmd_tokens(args, config: ReplConfig):
    """List the tokens of a file, one per line."""
    from .lexer import tokenize

    source = read_source(args.file)
    if source is None:
        return 1

    for token in tokenize(source, args.file):
        location = f"{token.span.start}" if token.span is not None else "?"
        print(f"{location:<12} {token.type.name:<10} {token.literal!r}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='python -m monkey',
        description='Monkey language interpreter',
    )
    parser.add_argument('--config', metavar='FILE',
                        help='YAML settings file')
    parser.add_argument('--max-errors', type=int, metavar='N',
                        help='Stop parsing after N errors')

    subparsers = parser.add_subparsers(dest='action')

    # repl command
    subparsers.add_parser('repl', help='Start an interactive session (default)')

    # run command
    run_parser = subparsers.add_parser('run', help='Evaluate a Monkey file')
    run_parser.add_argument('file', help='Monkey source file')

    # check command
    check_parser = subparsers.add_parser('check', help='Check a Monkey file for parse errors')
    check_parser.add_argument('file', help='Monkey source file')

    # ast command
    ast_parser = subparsers.add_parser('ast', help='Print the parse tree of a Monkey file')
    ast_parser.add_argument('file', help='Monkey source file')

    # tokens command
    tokens_parser = subparsers.add_parser('tokens', help='List the tokens of a Monkey file')
    tokens_parser.add_argument('file', help='Monkey source file')

    return parser


COMMANDS = {
    'repl': cmd_repl,
    'run': cmd_run,
    'check': cmd_check,
    'ast': cmd_ast,
    'tokens': cmd_tokens,
}


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = ReplConfig.load(args.config).with_overrides(max_errors=args.max_errors)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    action = args.action or 'repl'
    return COMMANDS[action](args, config)


if __name__ == '__main__':
    sys.exit(main())
