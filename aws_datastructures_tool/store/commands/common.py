"""
Options and error handling shared by every store command.
"""

import base64
import json
from collections.abc import Callable
from typing import Any

import click

from ..constants import DEFAULT_INDEX_NAME, DEFAULT_TABLE_NAME
from ..core.client import DynamoDBClient
from ..core.range_caps import RangeCap
from ..exceptions import ErrorKind, KVStoreError
from ..logging_config import get_logger, setup_logging
from ..models import Location, StoreSettings, Value
from ..utils import error_json, error_text, output_json, output_text, validate_table_name

logger = get_logger(__name__)

_STORE_OPTIONS = [
    click.option(
        "--table",
        envvar="DSTORE_TABLE",
        default=DEFAULT_TABLE_NAME,
        help="DynamoDB table name",
    ),
    click.option(
        "--index",
        "index_name",
        envvar="DSTORE_INDEX",
        default=DEFAULT_INDEX_NAME,
        help="Name of the score index",
    ),
    click.option(
        "--endpoint-url",
        envvar="DSTORE_ENDPOINT_URL",
        help="Custom DynamoDB endpoint, e.g. http://localhost:8000",
    ),
    click.option("--region", envvar="AWS_REGION", help="AWS region"),
    click.option("--profile", envvar="AWS_PROFILE", help="AWS profile"),
    click.option("--eventual", is_flag=True, help="Use eventually consistent reads"),
    click.option("--text", is_flag=True, help="Output as human-readable text"),
    click.option(
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v INFO, -vv DEBUG, -vvv DEBUG incl. AWS SDK)",
    ),
]

value_type_option = click.option(
    "--type",
    "value_type",
    type=click.Choice(["str", "int", "float", "bytes"]),
    default="str",
    help="Type of the values (bytes are given base64 encoded)",
)


def store_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the connection, output and verbosity options."""
    for option in reversed(_STORE_OPTIONS):
        func = option(func)
    return func


def settings_from_options(options: dict[str, Any]) -> StoreSettings:
    return StoreSettings(
        table_name=options["table"],
        index_name=options["index_name"],
        consistent_read=not options["eventual"],
        region=options["region"],
        profile=options["profile"],
        endpoint_url=options["endpoint_url"],
    )


def parse_value(raw: str, value_type: str) -> Value:
    """
    Convert a command-line argument to a stored value.

    Raises:
        ValueError: If the argument does not parse as the requested type
    """
    if value_type == "int":
        return Value.of(int(raw))
    if value_type == "float":
        return Value.of(float(raw))
    if value_type == "bytes":
        try:
            return Value.of(base64.b64decode(raw, validate=True))
        except ValueError as e:
            raise ValueError(f"Invalid base64 value '{raw}'") from e
    return Value.of(raw)


def parse_score_cap(raw: str) -> RangeCap:
    """Parse '1.5', '(1.5', '-inf' or '+inf'."""
    try:
        return RangeCap.parse_score(raw)
    except ValueError as e:
        raise ValueError(f"Invalid score bound '{raw}', expected a number, '(number', '-inf' or '+inf'") from e


def jsonable(data: Any) -> Any:
    """Turn command results into JSON-serializable structures."""
    if isinstance(data, Value):
        return data.to_json()
    if isinstance(data, (bytes, bytearray)):
        return base64.b64encode(bytes(data)).decode("ascii")
    if isinstance(data, Location):
        return {"lat": data.lat, "lon": data.lon}
    if isinstance(data, dict):
        return {key: jsonable(value) for key, value in data.items()}
    if isinstance(data, (set, frozenset)):
        return sorted(jsonable(value) for value in data)
    if isinstance(data, (list, tuple)):
        return [jsonable(value) for value in data]
    return data


def run_command(
    ctx: click.Context,
    options: dict[str, Any],
    action: Callable[[DynamoDBClient], Any],
    render: Callable[[Any], str] | None = None,
    hint: str = "Check the command arguments",
) -> None:
    """
    Run a store action and report its result or error.

    Validation problems exit with code 2, store errors with code 3.

    Args:
        ctx: Click context
        options: Parsed store options
        action: Function of the client returning a JSON-friendly result
        render: Text rendering of the result for --text (optional)
        hint: Solution shown for validation errors
    """
    text = options["text"]
    setup_logging(options["verbose"])

    try:
        validate_table_name(options["table"])
        settings = settings_from_options(options)
        logger.debug("Using table '%s' (index '%s')", settings.table_name, settings.index_name)
        result = jsonable(action(DynamoDBClient(settings=settings)))

        if text:
            output_text(render(result) if render else str(result))
        else:
            output_json(result)

    except ValueError as e:
        if text:
            click.echo(error_text(str(e), hint), err=True)
        else:
            click.echo(json.dumps(error_json(str(e), hint, 2)), err=True)
        ctx.exit(2)

    except KVStoreError as e:
        logger.info("Store error (%s): %s", e.kind.value, e)
        if e.kind is ErrorKind.INVALID:
            exit_code, solution = 2, hint
        else:
            exit_code, solution = 3, "Check table exists and AWS credentials"
        if text:
            click.echo(error_text(str(e), solution), err=True)
        else:
            click.echo(json.dumps(error_json(str(e), solution, exit_code)), err=True)
        ctx.exit(exit_code)


def lines(items: Any) -> str:
    """One item per line; dicts as 'key value'."""
    if isinstance(items, dict):
        return "\n".join(f"{key} {value}" for key, value in items.items())
    return "\n".join(str(item) for item in items)
