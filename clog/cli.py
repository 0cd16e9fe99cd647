import sys

import click

from clog._version import __version__
from clog.config import LoggingConfig
from clog.destination import Destination
from clog.levels import LogLevel, OutputAttribute, OutputFormat, level_names

CONTEXT_SETTINGS = dict(auto_envvar_prefix="CLOG")

LEVEL_CHOICE = click.Choice([name.lower() for name in LogLevel.__members__], case_sensitive=False)
ATTRIBUTE_CHOICE = click.Choice(
    [name.lower() for name in OutputAttribute.__members__ if name != "MINIMAL"], case_sensitive=False
)
FORMAT_CHOICE = click.Choice([output_format.value for output_format in OutputFormat], case_sensitive=False)

FAULT_MAPPING = dict(
    init_failed="Unable to initialize logging to '{target}'. Make sure the file can be written and that "
    "--append is not used with the xml or json format.",
    invalid_config="Invalid logging configuration: {error}",
)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, prog_name="clog")
def cli():
    """Write leveled log messages from shell scripts."""


@cli.command()
@click.argument("level", type=LEVEL_CHOICE)
@click.argument("message")
@click.argument("args", nargs=-1)
@click.option("-c", "--config", type=click.Path(), metavar="", help="Optional path to a YAML logging configuration.")
@click.option("-f", "--file", "file_path", type=click.Path(), metavar="", help="Log file (default: stderr).")
@click.option("--append", is_flag=True, help="Append to the log file instead of truncating it.")
@click.option("--format", "output_format", type=FORMAT_CHOICE, help="Output format.")
@click.option("--attr", "attributes", type=ATTRIBUTE_CHOICE, multiple=True, help="Header attribute (repeatable).")
@click.option("--filter", "filter_level", type=LEVEL_CHOICE, help="Minimum level written.")
def emit(level, message, args, config, file_path, append, output_format, attributes, filter_level):
    """Write MESSAGE at LEVEL. ARGS are interpolated into %s directives of MESSAGE."""
    if append and not file_path:
        raise click.UsageError("--append can only be used together with --file")
    overrides = dict(format=output_format, level=filter_level)
    if attributes:
        overrides["attributes"] = list(attributes)
    if file_path:
        overrides.update(output="file", file_path=file_path, mode="append" if append else "truncate")

    destination = Destination()
    config_values = LoggingConfig.load(config)
    config_values.update({key: value for key, value in overrides.items() if value is not None})
    is_valid, error = LoggingConfig.validate(config_values)
    if not is_valid:
        click.echo(FAULT_MAPPING["invalid_config"].format(error=error), file=sys.stderr)
        exit(1)

    if not LoggingConfig.setup_logging(config, destination=destination, **overrides):
        target = config_values.get("file_path") or config_values.get("output")
        click.echo(FAULT_MAPPING["init_failed"].format(target=target), file=sys.stderr)
        exit(1)
    try:
        destination.vlog("clog", 0, "emit", LogLevel.parse(level), message, args)
    except (TypeError, ValueError) as e:
        click.echo(f"Unable to format message: {e}", file=sys.stderr)
        exit(1)
    finally:
        destination.terminate()


@cli.command()
def levels():
    """List the log levels, from least to most severe."""
    for name in level_names():
        click.echo(name)
