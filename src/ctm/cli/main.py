"""CLI entry point for ctm.

A single command runs a complete traceability analysis::

    ctm -c ctm.yaml --sd 1.2.0 --sp Shop --bi "Jira:SHOP-1, GitHub:acme/shop#4"
"""

from __future__ import annotations

from pathlib import Path

import click
import rich_click as rclick
from pydantic import ValidationError as PydanticValidationError

from ctm import __version__
from ctm.cli.errors import EXIT_SYSTEM_ERROR, CLIError, validation_cli_error
from ctm.cli.output import report_paths, run_summary, set_no_color, success
from ctm.config import CtmConfig, DeliveryFile
from ctm.errors import ConfigurationError, CtmError, MappingFileError
from ctm.observability import configure_logging

rclick.rich_click.TEXT_MARKUP = "markdown"

DEFAULT_CONFIG_FILE = "./ctm.yaml"


def load_config(
    config_file: str,
    *,
    delivery_file: str | None = None,
    program: str | None = None,
    version: str | None = None,
    backlog_items: str | None = None,
) -> CtmConfig:
    """Load the run configuration.

    Delivery settings are layered: the configuration file, then the delivery
    file, then the command line options.

    Raises:
        CLIError: If a file is missing or invalid.
    """
    try:
        config = CtmConfig.from_file(config_file)
    except PydanticValidationError as e:
        raise validation_cli_error(e, config_file) from None
    except ConfigurationError as e:
        raise CLIError(e.user_message) from None

    if delivery_file:
        try:
            config = DeliveryFile.from_file(delivery_file).apply_to(config)
        except PydanticValidationError as e:
            raise validation_cli_error(e, delivery_file) from None
        except ConfigurationError as e:
            raise CLIError(e.user_message) from None

    return config.with_delivery(program=program, version=version, backlog_items=backlog_items)


@click.command(cls=rclick.RichCommand)
@click.version_option(version=__version__, prog_name="ctm")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False),
    default=DEFAULT_CONFIG_FILE,
    help=f"Configuration file [default: {DEFAULT_CONFIG_FILE}]",
)
@click.option("--sd", "--delivery-version", "delivery_version", default=None, help="Delivery version.")
@click.option("--sp", "--delivery-program", "delivery_program", default=None, help="Delivery program.")
@click.option(
    "--bi",
    "--backlog-items",
    "backlog_items",
    default=None,
    help="Comma separated delivery backlog items, e.g. `Jira:P-1, GitHub:org/repo#2`.",
)
@click.option(
    "--df",
    "--delivery-file",
    "delivery_file",
    type=click.Path(exists=False),
    default=None,
    help="Delivery file listing the Jira and GitHub keys of a delivery.",
)
@click.option(
    "--erm",
    "--export-mapping",
    "export_mapping",
    is_flag=True,
    default=False,
    help="Also write the traces as a requirements mapping file.",
)
def cli(
    config_file: str,
    delivery_version: str | None,
    delivery_program: str | None,
    backlog_items: str | None,
    delivery_file: str | None,
    export_mapping: bool,
) -> None:
    """Continuous Traceability Monitor.

    Links backlog items (Jira issues, GitHub issues) to the automated tests
    that verify them and reports which items are tested and passing.

    **Examples:**

    - `ctm -c ctm.yaml` - Full traceability report
    - `ctm -c ctm.yaml --df delivery.json` - Add a delivery report
    - `ctm -c ctm.yaml --erm` - Also export a requirements mapping file
    """
    config = load_config(
        config_file,
        delivery_file=delivery_file,
        program=delivery_program,
        version=delivery_version,
        backlog_items=backlog_items,
    )
    configure_logging(log_level=config.log.level)

    from ctm.pipeline import run

    try:
        result = run(config, export_mapping=export_mapping)
    except (ConfigurationError, MappingFileError) as e:
        raise CLIError(e.user_message) from None
    except CtmError as e:
        raise CLIError(e.user_message, exit_code=EXIT_SYSTEM_ERROR) from None
    except OSError as e:
        raise CLIError(f"Cannot write reports: {e}", exit_code=EXIT_SYSTEM_ERROR) from None

    report_paths(result.reports)
    success(f"Reports written to {Path(config.output_dir)}")
    run_summary(len(result.traces), result.failed_traces)


if __name__ == "__main__":
    cli()
