"""Command-line interface for the endpoint metrics collector."""

import json
import logging
import sys
from pathlib import Path

import click
import yaml

from euem_metrics import __version__
from euem_metrics.errors import AcquisitionError, ConfigurationError
from euem_metrics.orchestration import EndpointMetricsCollector
from euem_metrics.utils.config import default_config_dict, load_config, validate_config_file

# Configure logging; records go to stdout, diagnostics to stderr
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="euem-metrics")
@click.pass_context
def cli(ctx):
    """Citrix EUEM endpoint metrics collector for uberAgent."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(collect)


@cli.command()
@click.option(
    "--config", "-c", "config_file", type=click.Path(exists=True), default=None,
    help="Collector configuration file (YAML or JSON)"
)
@click.option(
    "--snapshot", "-s", type=click.Path(), default=None,
    help="Replay provider rows from a snapshot file instead of querying WMI"
)
@click.option(
    "--guid-map", "-g", type=click.Path(), default=None,
    help="Read session GUIDs from a YAML/JSON file instead of the registry"
)
@click.option(
    "--csv", "csv_path", type=click.Path(), default=None,
    help="Also write every acquired field to a CSV file"
)
@click.option(
    "--log-level", "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default="WARNING",
    help="Logging level"
)
def collect(config_file, snapshot, guid_map, csv_path, log_level):
    """Query endpoint metrics once and print one key=value line per session."""
    logging.getLogger().setLevel(getattr(logging, log_level))

    try:
        config = load_config(config_file)
        if snapshot:
            config.provider.type = "snapshot"
            config.provider.snapshot_path = snapshot
        if guid_map:
            config.identifiers.type = "file"
            config.identifiers.file_path = guid_map
        if csv_path:
            config.output.csv_path = csv_path

        collector = EndpointMetricsCollector(config)
        records = collector.collect()
    except (AcquisitionError, ConfigurationError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    collector.emit(records)


@cli.command()
@click.option(
    "--output", "-o", default="euem_metrics.yaml",
    help="Output file path"
)
@click.option(
    "--format", "-f", type=click.Choice(["yaml", "json"]), default="yaml",
    help="Configuration file format"
)
def generate_config(output: str, format: str):
    """Generate a configuration file holding the defaults."""
    config = default_config_dict()

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        if format == "yaml":
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(config, f, indent=2)

    click.echo(f"Generated configuration at {output_path}")


@cli.command()
@click.argument("config_file", type=click.Path(exists=True))
def validate(config_file: str):
    """Validate a configuration file without collecting."""
    click.echo(f"Validating configuration: {config_file}")

    is_valid, errors, _ = validate_config_file(config_file)
    if is_valid:
        click.echo(click.style("✓ Configuration is valid", fg="green"))
    else:
        click.echo(click.style(f"✗ Configuration has {len(errors)} errors:", fg="red"))
        for i, error in enumerate(errors, 1):
            click.echo(f"  {i}. {error}")

    sys.exit(0 if is_valid else 1)


if __name__ == "__main__":
    cli()
