"""CLI entrypoint: Typer app definition and command registration"""

import typer

from answerkit.cli.commands import (
    add_cmd, attach_cmd, clean_cmd, init_cmd, render_cmd, search_cmd, stats_cmd, validate_cmd,
)


app = typer.Typer(name="answerkit", no_args_is_help=True, help="Interview answer content pipeline")

app.command(name="clean")(clean_cmd)
app.command(name="render")(render_cmd)
app.command(name="stats")(stats_cmd)
app.command(name="attach")(attach_cmd)
app.command(name="validate")(validate_cmd)
app.command(name="init")(init_cmd)
app.command(name="add")(add_cmd)
app.command(name="search")(search_cmd)
