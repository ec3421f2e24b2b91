import click

from farmpro.management.commands.maintenance import reconcile, seed, set_webhook
from farmpro.utils.logger import init_logger


@click.group()
def cli():
    """Farming Pro management commands."""
    init_logger()


cli.add_command(seed)
cli.add_command(reconcile)
cli.add_command(set_webhook)


if __name__ == "__main__":
    cli()
