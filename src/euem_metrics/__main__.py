from euem_metrics.cli import cli

cli()
