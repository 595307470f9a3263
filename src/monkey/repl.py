"""
Read-eval-print loop.

Each line is lexed, parsed and evaluated on its own, in one environment that
lives for the whole session, so bindings made on one line are visible on the
next.
"""

from typing import List, Optional, TextIO

from .config import ReplConfig
from .lexer import Lexer
from .parser import Parser
from .ast import LetStatement, Program
from .runtime.environment import Environment
from .runtime.builtins import BuiltinRegistry
from .runtime.evaluator import Evaluator, recursion_limit
from .runtime.values import is_error

MONKEY_FACE = r"""
                                   __
                                  /  |
_____  ____    ______   _______   $$ |   __   ______   __    __
/     \/    \  /      \ /       \ $$ |  /  | /      \ /  |  /  |
$$$$$$ $$$$  |/$$$$$$  |$$$$$$$  |$$ |_/$$/ /$$$$$$  |$$ |  $$ |
$$ | $$ | $$ |$$ |  $$ |$$ |  $$ |$$   $$<  $$    $$ |$$ |  $$ |
$$ | $$ | $$ |$$ \__$$ |$$ |  $$ |$$$$$$  \ $$$$$$$$/ $$ \__$$ |
$$ | $$ | $$ |$$    $$/ $$ |  $$ |$$ | $$  |$$       |$$    $$ |
$$/  $$/  $$/  $$$$$$/  $$/   $$/ $$/   $$/  $$$$$$$/  $$$$$$$ |
                                                      /  \__$$ |
                                                      $$    $$/
                                                       $$$$$$/

"""

EXIT_COMMAND = "exit"


def print_parse_errors(out: TextIO, errors: List[str], show_banner: bool = True) -> None:
    if show_banner:
        out.write(MONKEY_FACE)
    out.write("Woops! We ran into some monkey business here!\n")
    out.write(" parser errors:\n")
    for msg in errors:
        out.write(f"\t{msg}\n")


def _ends_with_let(program: Program) -> bool:
    return bool(program.statements) and isinstance(program.statements[-1], LetStatement)


def start(stdin: TextIO, stdout: TextIO, config: Optional[ReplConfig] = None) -> None:
    """
    Run the loop until `stdin` is exhausted or the line `exit` is read.

    Results are written to `stdout` as their inspect() rendering; so is the
    output of `puts`.
    """
    if config is None:
        config = ReplConfig()

    env = Environment()
    evaluator = Evaluator(BuiltinRegistry(output=stdout))

    while True:
        stdout.write(config.prompt)
        stdout.flush()
        line = stdin.readline()
        if not line:
            return
        line = line.rstrip("\r\n")
        if line.strip() == EXIT_COMMAND:
            return

        parser = Parser(Lexer(line), source=line, max_errors=config.max_errors)
        program = parser.parse_program()
        if parser.errors:
            print_parse_errors(stdout, parser.errors, config.show_banner)
            continue
        if not program.statements:
            continue

        try:
            with recursion_limit():
                evaluated = evaluator.evaluate(program, env)
        except RecursionError:
            stdout.write("ERROR: maximum recursion depth exceeded\n")
            continue

        if _ends_with_let(program) and not is_error(evaluated):
            continue
        stdout.write(evaluated.inspect() + "\n")
