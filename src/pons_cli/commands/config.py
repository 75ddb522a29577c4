"""Config commands -- view and modify the configuration.

Provides the ``pons config`` sub-command group, the one-shot form of the
REPL's ``.set``. Settings are persisted as
:class:`~pons_cli.models.AppConfig` JSON in the pons-cli config directory.
"""

from __future__ import annotations

import typer

from pons_cli.commands import cli_errors
from pons_cli.output import OutputFormat, get_output, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Prints the config file path followed by every setting, as a table or
    JSON depending on the active output mode.

    Example::

        pons config show
        pons --json config show
    """
    from pons_cli.config import config_path, load_config

    with cli_errors():
        config = load_config()
        info(f"Config file: {config_path()}")
        output = get_output()
        data = config.model_dump(mode="json")
        if output.format == OutputFormat.JSON:
            output.print_json(data)
        else:
            output.print_table(["Setting", "Value"], [[k, str(v)] for k, v in data.items()])


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Setting name, e.g. 'api_key' or 'cache_ttl'."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the setting's type (bool, int, float, or str)
    and validated before saving.

    Raises:
        typer.Exit: With code 2 if the key is unknown or the value cannot
            be coerced.

    Example::

        pons config set api_key 0123456789abcdef
        pons config set cache_ttl 86400
    """
    from pons_cli.config import load_config, save_config, set_config_value

    with cli_errors():
        config = set_config_value(load_config(), key, value)
        save_config(config)
        success(f"Set {key} = {getattr(config, key)}")
