"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from tfc_run_worker.config_versions import ConfigVersionIdError, extract_config_version_id
from tfc_run_worker.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    WorkerConfiguration,
    load_configuration,
    write_placeholder_configuration,
)
from tfc_run_worker.run_requests import QueueMessage
from tfc_run_worker.worker_assembly import aws_client_factory, build_run_processor, build_run_worker

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVEL_CHOICES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="tfc-run-worker")
def cli() -> None:
    """Provisioning run worker."""


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML worker configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML worker configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="run")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the YAML worker configuration file",
)
@click.option(
    "--max-iterations",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many queue polls instead of running forever.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVEL_CHOICES, case_sensitive=False),
    default=None,
    help="Override logging.level from the configuration file.",
)
def run_worker(config_path: str, max_iterations: int | None, log_level: str | None) -> None:
    """Poll the run-request queue and process runs."""
    configuration = _load(config_path)
    _configure_logging(configuration, log_level)
    try:
        worker = build_run_worker(configuration)
    except ValueError as exc:
        raise CliError(str(exc)) from exc
    worker.run(max_iterations=max_iterations)


@cli.command(name="process")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the YAML worker configuration file",
)
@click.option(
    "--message",
    "message_path",
    required=True,
    type=click.Path(path_type=str, exists=True, dir_okay=False),
    help="Path to a JSON run-request message body",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVEL_CHOICES, case_sensitive=False),
    default=None,
    help="Override logging.level from the configuration file.",
)
def process_message(config_path: str, message_path: str, log_level: str | None) -> None:
    """Process one run request from a file without using the queue."""
    configuration = _load(config_path)
    _configure_logging(configuration, log_level)
    processor = build_run_processor(configuration, aws_client_factory(configuration.aws))
    body = Path(message_path).read_text(encoding="utf-8")
    outcome = processor.process(
        QueueMessage(message_id=Path(message_path).name, body=body, receipt_handle=None)
    )
    if not outcome.is_success:
        raise CliError(f"{outcome.status.value}: {outcome.reason}")
    click.echo(outcome.status.value)


@cli.command(name="config-version-id")
@click.argument("object_key")
def config_version_id(object_key: str) -> None:
    """Print the configuration version id encoded in an uploaded bundle key."""
    try:
        click.echo(extract_config_version_id(object_key))
    except ConfigVersionIdError as exc:
        raise CliError(str(exc)) from exc


def _load(config_path: str) -> WorkerConfiguration:
    try:
        return load_configuration(config_path)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc


def _configure_logging(configuration: WorkerConfiguration, override: str | None) -> None:
    level = (override or configuration.logging.level).upper()
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
