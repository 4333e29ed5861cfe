"""Common CLI options for the CLI."""

import typer

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Enable debug logging on stderr",
)

InteractiveOpt = typer.Option(
    False,
    "--interactive",
    "-i",
    help="Prompt for any missing required values",
)

DomainPrefixOpt = typer.Option(
    None,
    "--domain-prefix",
    help=(
        "User-defined prefix for the DNS zone. It must be unique and consist of "
        "lowercase alphanumeric characters or '-', start with an alphabetic "
        "character, and end with an alphanumeric character. The maximum length "
        "is 15 characters. Once set, the DNS zone prefix cannot be changed."
    ),
)

ProjectIdOpt = typer.Option(
    None,
    "--project-id",
    help="ID of the GCP project that will be used by the DNS zone",
)

NetworkIdOpt = typer.Option(
    None,
    "--network-id",
    help="ID of the Shared VPC network that will be used by the DNS zone",
)

NetworkProjectIdOpt = typer.Option(
    None,
    "--network-project-id",
    help="ID of the GCP project that is used as network project to the VPC network",
)

ColumnsOpt = typer.Option(
    "id,gcp.domain_prefix,gcp.project_id,gcp.network_id",
    "--columns",
    help="Columns to display, separated by commas. Paths follow the dns-zone object.",
)

NoHeadersOpt = typer.Option(
    False,
    "--no-headers",
    help="Don't print header row",
)

ParameterOpt = typer.Option(
    [],
    "--parameter",
    help="Query parameter (name=value) added to the request. This is reusable.",
    show_default=False,
)

SingleOpt = typer.Option(
    False,
    "--single",
    help="Return the output as a single line.",
)

ConfirmOpt = typer.Option(
    True,
    "--confirm/--no-confirm",
    help="Ask for confirmation before deleting",
)
