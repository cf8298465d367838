"""Config commands -- view and modify global configuration.

Provides the ``apidraft config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~apidraft.models.GlobalConfig`).
"""

from __future__ import annotations

from typing import Any

import typer
from pydantic import ValidationError

from apidraft.exit_codes import EXIT_INVALID_USAGE
from apidraft.output import error, info, print_json, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration.

    Prints the config directory followed by the configuration after the
    project file and environment variables have been applied.

    Example::

        apidraft config show
        apidraft --json config show
    """
    from apidraft.config import get_config_dir, resolve_config

    config = resolve_config()
    info(f"Config directory: {get_config_dir()}")
    print_json(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'fetch.timeout')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a value in the global configuration file.

    The value is coerced to the type of the existing field (bool, int,
    float, or str) and the result is validated before saving.

    Example::

        apidraft config set output.format json
        apidraft config set fetch.verify_ssl false
        apidraft config set synthesis.example_indent 4
    """
    from apidraft.config import load_global_config, save_global_config
    from apidraft.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")

    *sections, final_key = key.split(".")
    target = data
    for section in sections:
        if not isinstance(target.get(section), dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        target = target[section]

    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    coerced = _coerce(target[final_key], value)
    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset the global configuration to defaults.

    Example::

        apidraft config reset --force
    """
    from apidraft.config import save_global_config
    from apidraft.models import GlobalConfig

    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")


def _coerce(current: Any, value: str) -> Any:
    # Anything not coercible is left as a string for validation to reject
    if isinstance(current, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(current, int):
        try:
            return int(value)
        except ValueError:
            return value
    if isinstance(current, float):
        try:
            return float(value)
        except ValueError:
            return value
    return value
