"""Allow ``python -m streamlauncher``, which is how scheduled tasks invoke the CLI."""

from streamlauncher.cli import app

app(prog_name="streamlauncher")
