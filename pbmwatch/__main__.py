from .cli.app import app

app(prog_name="pbmwatch")
