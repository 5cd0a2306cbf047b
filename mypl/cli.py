"""
Command line driver for the MyPL front end.

    mypl program.mypl            parse and report
    mypl --tokens program.mypl   show the token stream
    mypl --print program.mypl    parse and pretty-print

Reads standard input when no file (or '-') is given. Errors are shown with
the offending source line and a caret under the reported column.

Author: xwest
"""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .version import __version__
from .lexer import Lexer, MyPLError, TokenType
from .parser import Parser
from .printer import print_program

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool, console: Console):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def render_error(console: Console, error: MyPLError, text: str):
    """Show a front-end error with its source line and a caret."""
    console.print(f"[bold red]{error.category.name} error[/]: {escape(error.message)}")
    console.print(f"  [blue]-->[/] {escape(str(error.location))}")

    lines = text.splitlines()
    if 1 <= error.line <= len(lines):
        gutter = f"{error.line:>4} | "
        console.print(gutter + lines[error.line - 1], markup=False, highlight=False)
        console.print(" " * (len(gutter) + error.column - 1) + "^", markup=False, highlight=False)

    if error.diagnostic.help_text:
        console.print(f"  [green]help[/]: {escape(error.diagnostic.help_text)}")


def show_tokens(console: Console, lexer: Lexer):
    table = Table(title="Tokens")
    table.add_column("Kind")
    table.add_column("Lexeme")
    table.add_column("Line", justify="right")
    table.add_column("Column", justify="right")

    while True:
        token = lexer.next_token()
        table.add_row(token.type.name, escape(token.lexeme), str(token.line), str(token.column))
        if token.type == TokenType.EOS:
            break

    console.print(table)


@click.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--tokens", "mode", flag_value="tokens", help="Print the token stream and stop.")
@click.option("--print", "mode", flag_value="print", help="Pretty-print the parsed program.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(__version__, prog_name="mypl")
def main(source, mode, verbose):
    """Lex and parse a MyPL program."""
    console = Console()
    err_console = Console(stderr=True)
    _configure_logging(verbose, err_console)

    filename = source.name
    text = source.read()
    logger.debug("Read %d characters from %s", len(text), filename)

    lexer = Lexer(text, filename)
    try:
        if mode == "tokens":
            show_tokens(console, lexer)
            return

        program = Parser(lexer).parse()
    except MyPLError as error:
        logger.debug("Front end failed with %s", error.code)
        render_error(err_console, error, text)
        sys.exit(1)

    logger.debug("Parsed %d declarations", len(program.decls))

    if mode == "print":
        click.echo(print_program(program), nl=False)
    else:
        console.print(f"[green]ok[/]: {escape(filename)} ({len(program.decls)} declarations)")


if __name__ == "__main__":
    main()
