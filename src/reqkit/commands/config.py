"""Config commands -- view and modify the persisted request defaults.

Provides the ``reqkit config`` sub-command group. Settings live in the
reqkit config directory as a :class:`~reqkit.models.RequestConfig`.
"""

from __future__ import annotations

import typer

from reqkit.output import error, get_output, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration after env and project overrides.

    Example::

        reqkit config show
        reqkit --json config show
    """
    from reqkit.config import get_config_dir, resolve_config

    config = resolve_config()
    info(f"Config directory: {get_config_dir()}")
    rows = [
        ["timeout", "none" if config.timeout is None else str(config.timeout)],
        ["retry", str(config.retry)],
    ]
    rows.extend([f"headers.{k}", v] for k, v in config.headers.items())
    get_output().print_table(["key", "value"], rows, title="reqkit config")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="'timeout', 'retry', or 'headers.<Name>'."),
    value: str = typer.Argument(help="Value to set; 'none' clears timeout or a header."),
) -> None:
    """Set a value in the user config file.

    Example::

        reqkit config set retry 3
        reqkit config set timeout 10
        reqkit config set headers.User-Agent my-tool/1.0
    """
    from reqkit.config import load_config, save_config
    from reqkit.models import RequestConfig

    data = load_config().model_dump(mode="json")
    clear = value.lower() == "none"

    if key.startswith("headers."):
        name = key[len("headers."):]
        if not name:
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        if clear:
            data["headers"].pop(name, None)
        else:
            data["headers"][name] = value
    elif key in ("timeout", "retry"):
        data[key] = None if clear and key == "timeout" else value
    else:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    try:
        new_config = RequestConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_config(new_config)
    success(f"Set {key} = {value}")
