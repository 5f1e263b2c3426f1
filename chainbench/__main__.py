"""Allow ``python -m chainbench``."""

from chainbench.cli.bench import cli


cli()
