#!/usr/bin/env python3
"""
CLI for the Lox interpreter.

Usage:
    python -m lox run FILE
    python -m lox eval EXPRESSION
    python -m lox tokens FILE
    python -m lox ast FILE
    python -m lox [repl]

Examples:
    # Run a script
    python -m lox run examples/hello.lox

    # Evaluate one expression
    python -m lox eval "(2 + 3) * 4"

    # Interactive prompt with a custom configuration
    python -m lox --config lox.yaml repl

Exit codes follow the sysexits convention: 64 usage, 65 lex/parse error,
66 unreadable input, 70 runtime error, 78 bad configuration.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .ast import print_ast
from .config import LoxConfig, load_config
from .errors import LoxError, ParseError, RuntimeError
from .lexer import tokenize
from .parser import Parser
from .runtime import Interpreter, ExecutionResult, looks_like_program, run_source, stringify

logger = logging.getLogger("lox")

EXIT_OK = 0
EXIT_USAGE = 64
EXIT_DATAERR = 65
EXIT_NOINPUT = 66
EXIT_SOFTWARE = 70
EXIT_CONFIG = 78

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("lox").setLevel(level)


def report(error: LoxError) -> int:
    """Print a diagnostic to stderr and return the matching exit code."""
    print(error.format(), file=sys.stderr)
    if isinstance(error, RuntimeError):
        return EXIT_SOFTWARE
    return EXIT_DATAERR


def read_source(path_str: str) -> Optional[str]:
    source_path = Path(path_str)
    try:
        return source_path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error: cannot read {source_path}: {e.strerror}", file=sys.stderr)
        return None
    except UnicodeDecodeError as e:
        print(f"Error: cannot read {source_path}: not valid UTF-8 (byte {e.start})",
              file=sys.stderr)
        return None


def show_debug(source: str, config: LoxConfig, mode: str = "program") -> None:
    """Print tokens and/or the tree when the configuration asks for them."""
    if not (config.show_tokens or config.show_ast):
        return
    try:
        tokens = tokenize(source)
        if config.show_tokens:
            for token in tokens:
                print(token)
        if config.show_ast:
            if mode == "auto":
                mode = "program" if looks_like_program(tokens) else "expression"
            if mode == "expression":
                print(print_ast(Parser(tokens).parse_expression()))
            else:
                for stmt in Parser(tokens).parse_program():
                    print(print_ast(stmt))
    except (LoxError, RecursionError) as e:
        # The real run reports the error
        logger.debug("skipping debug output: %r", e)


def print_result(result: ExecutionResult) -> int:
    if not result.success:
        return report(result.error)
    if result.value is not None:
        print(stringify(result.value))
    return EXIT_OK


def cmd_run(args, config: LoxConfig) -> int:
    """Execute a Lox script."""
    source = read_source(args.file)
    if source is None:
        return EXIT_NOINPUT
    show_debug(source, config)
    return print_result(run_source(source, mode="program"))


def cmd_eval(args, config: LoxConfig) -> int:
    """Evaluate a single expression and print its value."""
    show_debug(args.expression, config, "expression")
    return print_result(run_source(args.expression, mode="expression"))


def cmd_tokens(args, config: LoxConfig) -> int:
    """Print the token stream of a file."""
    source = read_source(args.file)
    if source is None:
        return EXIT_NOINPUT
    try:
        for token in tokenize(source):
            print(token)
    except LoxError as e:
        return report(e)
    return EXIT_OK


def cmd_ast(args, config: LoxConfig) -> int:
    """Print the parsed statements of a file."""
    source = read_source(args.file)
    if source is None:
        return EXIT_NOINPUT
    try:
        parser = Parser(tokenize(source))
    except LoxError as e:
        return report(e)

    try:
        statements = parser.parse_program()
    except ParseError:
        # Every error found while recovering, not just the first
        print(parser.diagnostics.format_all(), file=sys.stderr)
        return EXIT_DATAERR

    try:
        for stmt in statements:
            print(print_ast(stmt))
    except RecursionError:
        print(f"Error: {args.file}: syntax tree too deep to print", file=sys.stderr)
        return EXIT_DATAERR
    return EXIT_OK


def cmd_repl(args, config: LoxConfig) -> int:
    """Read-eval-print loop; a bad line is reported and the loop continues."""
    interpreter = Interpreter()
    while True:
        try:
            line = input(config.prompt)
        except EOFError:
            print()
            return EXIT_OK
        except KeyboardInterrupt:
            print()
            return EXIT_OK

        if not line.strip():
            continue
        show_debug(line, config, config.mode)
        print_result(run_source(line, interpreter, mode=config.mode))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='lox',
        description='Lox interpreter',
    )
    parser.add_argument('--config', metavar='FILE',
                        help='YAML configuration file (default: $LOX_CONFIG)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Verbose (debug) logging')
    parser.add_argument('--tokens', action='store_true',
                        help='Print tokens before running')
    parser.add_argument('--ast', action='store_true',
                        help='Print the syntax tree before running')

    subparsers = parser.add_subparsers(dest='action')

    # run command
    run_parser = subparsers.add_parser('run', help='Run a Lox script')
    run_parser.add_argument('file', help='Lox source file')

    # eval command
    eval_parser = subparsers.add_parser('eval', help='Evaluate one expression')
    eval_parser.add_argument('expression', help='Expression source text')

    # tokens command
    tokens_parser = subparsers.add_parser('tokens', help='Print the token stream of a file')
    tokens_parser.add_argument('file', help='Lox source file')

    # ast command
    ast_parser = subparsers.add_parser('ast', help='Print the syntax tree of a file')
    ast_parser.add_argument('file', help='Lox source file')

    # repl command
    subparsers.add_parser('repl', help='Interactive prompt (default)')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG

    if args.verbose:
        config.log_level = "DEBUG"
    if args.tokens:
        config.show_tokens = True
    if args.ast:
        config.show_ast = True
    configure_logging(config.log_level)
    logger.debug("configuration: %s", config)

    handlers = {
        'run': cmd_run,
        'eval': cmd_eval,
        'tokens': cmd_tokens,
        'ast': cmd_ast,
        'repl': cmd_repl,
        None: cmd_repl,
    }
    handler = handlers.get(args.action)
    if handler is None:
        parser.print_help()
        return EXIT_USAGE
    return handler(args, config)


if __name__ == '__main__':
    sys.exit(main())
