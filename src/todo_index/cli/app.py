import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from todo_index.cli.todos import count, list_todos
from todo_index.cli.watch import watch

app = typer.Typer(
    name="todo-index",
    help="Todo Index CLI: find and track TODO comments in a project.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


app.command("list")(list_todos)
app.command("count")(count)
app.command("watch")(watch)


def main() -> None:
    app()
