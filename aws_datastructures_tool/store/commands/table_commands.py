"""
Table management commands.
"""

import json
from typing import Any, Literal

import click

from ..core.table_operations import create_table, drop_table
from ..exceptions import KVStoreError, TableAlreadyExistsError, TableNotFoundError
from ..logging_config import get_logger, setup_logging
from ..utils import error_json, error_text, output_json, output_text, validate_table_name
from .common import settings_from_options, store_options

logger = get_logger(__name__)


def _fail(ctx: click.Context, text: bool, error: str, solution: str, exit_code: int) -> None:
    if text:
        click.echo(error_text(error, solution), err=True)
    else:
        click.echo(json.dumps(error_json(error, solution, exit_code)), err=True)
    ctx.exit(exit_code)


@click.command("create-table")
@click.option(
    "--billing",
    type=click.Choice(["on-demand", "provisioned"]),
    default="on-demand",
    help="Billing mode (default: on-demand)",
)
@store_options
@click.pass_context
def create_table_command(ctx: click.Context, billing: str, **options: Any) -> None:
    """Create the DynamoDB table.

    The table has string keys pk (collection) and sk (member) and a local
    secondary index over the numeric skN attribute, which orders lists,
    sorted sets and geo sets.

    Examples:

    \b
        # Create table with default name
        aws-datastructures-tool store create-table

    \b
        # Create table in DynamoDB Local
        aws-datastructures-tool store create-table --endpoint-url http://localhost:8000

    \b
    Output Format:
        Returns JSON with table details:
        {"table": "...", "status": "ACTIVE", "arn": "..."}
    """
    setup_logging(options["verbose"])
    text = options["text"]
    table = options["table"]

    try:
        validate_table_name(table)
        logger.info("Creating table '%s'", table)
        logger.debug("Region: %s, Billing: %s", options["region"], billing)

        billing_mode: Literal["PAY_PER_REQUEST", "PROVISIONED"] = (
            "PAY_PER_REQUEST" if billing == "on-demand" else "PROVISIONED"
        )
        table_desc = create_table(settings_from_options(options), billing_mode)

        if text:
            output_text(f"✅ Table '{table}' created successfully")
            output_text(f"Status: {table_desc['TableStatus']}")
            output_text(f"ARN: {table_desc['TableArn']}")
        else:
            output_json(
                {
                    "table": table,
                    "status": table_desc["TableStatus"],
                    "arn": table_desc["TableArn"],
                }
            )

    except ValueError as e:
        _fail(ctx, text, str(e), "Use 3-255 letters, digits, '-', '_' or '.'", 2)

    except TableAlreadyExistsError as e:
        _fail(
            ctx,
            text,
            str(e),
            f"Use a different table name or drop the existing table with "
            f"'aws-datastructures-tool store drop-table --table {table} --approve'",
            1,
        )

    except KVStoreError as e:
        _fail(ctx, text, str(e), "Check AWS credentials and permissions", 3)


@click.command("drop-table")
@click.option("--approve", is_flag=True, help="Required flag to confirm table deletion")
@store_options
@click.pass_context
def drop_table_command(ctx: click.Context, approve: bool, **options: Any) -> None:
    """Drop the DynamoDB table.

    WARNING: This permanently deletes the table and ALL data.

    \b
    Examples:
        aws-datastructures-tool store drop-table --approve
        aws-datastructures-tool store drop-table --table my-store --approve
    """
    setup_logging(options["verbose"])
    text = options["text"]
    table = options["table"]

    if not approve:
        _fail(
            ctx,
            text,
            "Table deletion requires approval",
            f"Add --approve flag to confirm: aws-datastructures-tool store drop-table --table {table} --approve",
            2,
        )

    try:
        logger.info("Dropping table '%s'", table)
        table_desc = drop_table(settings_from_options(options))

        if text:
            output_text(f"✅ Table '{table}' deletion initiated")
            output_text(f"Status: {table_desc['TableStatus']}")
        else:
            output_json({"table": table, "status": table_desc["TableStatus"]})

    except TableNotFoundError as e:
        _fail(ctx, text, str(e), "Check table name", 1)

    except KVStoreError as e:
        _fail(ctx, text, str(e), "Check AWS credentials and permissions", 3)
