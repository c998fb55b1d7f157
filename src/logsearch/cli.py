import signal
import sys

# Handle Ctrl+C gracefully before any other imports
signal.signal(signal.SIGINT, lambda *_: sys.exit(130))

from typing import List, Optional

import click
import typer

from .config import load_config, set_dotenv_path
from .errors import GatewayError
from .formatting import format_message
from .gateway import MessageGateway
from .models import FilterCriteria, ScopeOptions
from .opensearch.client import OpenSearchError, check_connection, get_opensearch_client

app = typer.Typer()


@app.callback()
def _main_options(
	env: str = typer.Option(None, "--env", help="Path to a .env file to load"),
):
	"""Search and inspect messages stored in OpenSearch."""
	if env:
		set_dotenv_path(env)


def _fail(message):
	typer.echo(typer.style(f"Error: {message}", fg=typer.colors.RED), err=True)
	raise typer.Exit(1)


def require_gateway():
	"""Build a gateway and verify OpenSearch is accessible."""
	cfg = load_config()
	client = get_opensearch_client(cfg)
	try:
		check_connection(client, cfg)
	except OpenSearchError as e:
		_fail(e)
	return MessageGateway(client, cfg)


def _parse_fields(values: Optional[List[str]]):
	fields = {}
	for item in values or []:
		key, sep, value = item.partition("=")
		if not sep or not key.strip():
			raise typer.BadParameter(f"Expected KEY=VALUE, got '{item}'", param_hint="--field")
		fields[key.strip()] = value
	return fields


def _scope(stream: Optional[str], hostname: Optional[str]) -> Optional[ScopeOptions]:
	if not stream and not hostname:
		return None
	return ScopeOptions(stream_id=stream, hostname=hostname)


def _print_result(result, utc: bool):
	if result is None or len(result) == 0:
		typer.echo(typer.style("No messages found.", dim=True), err=True)
		return
	for message in result:
		typer.echo(format_message(message, use_utc=utc))
	typer.echo(typer.style(f"{len(result)} of {result.total_result_count} messages", dim=True), err=True)


def _run(action):
	try:
		return action()
	except (OpenSearchError, GatewayError) as e:
		_fail(e)


@app.command("list")
def list_messages(
	page: int = typer.Option(1, "--page", "-p"),
	stream: str = typer.Option(None, "--stream", help="Only messages of this stream"),
	host: str = typer.Option(None, "--host", help="Only messages of this host"),
	utc: bool = typer.Option(False, "--utc", help="Display timestamps in UTC instead of local time"),
):
	"""List messages, newest first."""
	if stream and host:
		_fail("You can only pass --stream OR --host")
	gateway = require_gateway()
	if stream:
		result = _run(lambda: gateway.all_of_stream_paginated(stream, page))
	elif host:
		result = _run(lambda: gateway.all_of_host_paginated(host, page))
	else:
		result = _run(lambda: gateway.all_paginated(page))
	_print_result(result, utc)


@app.command()
def show(
	message_id: str = typer.Argument(..., help="Message id"),
	utc: bool = typer.Option(False, "--utc", help="Display timestamps in UTC instead of local time"),
):
	"""Show a single message."""
	gateway = require_gateway()
	message = _run(lambda: gateway.retrieve_by_id(message_id))
	if message is None:
		_fail(f"Message '{message_id}' not found")
	typer.echo(format_message(message, use_utc=utc))
	if message.full_message:
		typer.echo(message.full_message)
	for key, value in sorted(message.additional_fields.items()):
		typer.echo(f"  {key}={value}")


@app.command()
def search(
	message: str = typer.Option(None, "--message", "-m", help="Message query"),
	facility: str = typer.Option(None, "--facility"),
	severity: str = typer.Option(None, "--severity", help="Syslog severity name or number"),
	severity_above: bool = typer.Option(False, "--severity-above", help="Include more severe levels too"),
	host: str = typer.Option(None, "--host"),
	field: List[str] = typer.Option(None, "--field", help="Additional field filter KEY=VALUE"),
	range_from: str = typer.Option(None, "--from", help="Start timestamp"),
	range_to: str = typer.Option(None, "--to", help="End timestamp"),
	date: str = typer.Option(None, "--date", help="Relative timeframe, e.g. 'last 15 minutes'"),
	stream: str = typer.Option(None, "--stream", help="Only messages of this stream"),
	hostname: str = typer.Option(None, "--scope-host", help="Only messages of this host"),
	page: int = typer.Option(1, "--page", "-p"),
	utc: bool = typer.Option(False, "--utc", help="Display timestamps in UTC instead of local time"),
):
	"""Search messages with quickfilters."""
	criteria = FilterCriteria(
		message=message,
		facility=facility,
		severity=severity,
		severity_above=severity_above,
		host=host,
		extra=_parse_fields(field),
		from_time=range_from,
		to_time=range_to,
		date=date,
	)
	gateway = require_gateway()
	result = _run(lambda: gateway.all_by_quickfilter(criteria, page, _scope(stream, hostname)))
	_print_result(result, utc)


@app.command("range")
def range_search(
	range_from: str = typer.Argument(..., help="Start timestamp (inclusive)"),
	range_to: str = typer.Argument(..., help="End timestamp (inclusive)"),
	stream: str = typer.Option(None, "--stream"),
	host: str = typer.Option(None, "--host"),
	page: Optional[int] = typer.Option(None, "--page", "-p"),
	utc: bool = typer.Option(False, "--utc", help="Display timestamps in UTC instead of local time"),
):
	"""List messages created between two timestamps."""
	gateway = require_gateway()
	result = _run(lambda: gateway.all_in_range(page, range_from, range_to, _scope(stream, host)))
	_print_result(result, utc)


@app.command()
def count(
	stream: str = typer.Option(None, "--stream", help="Count only messages of this stream"),
):
	"""Count stored messages."""
	gateway = require_gateway()
	if stream:
		total = _run(lambda: gateway.stream_count(stream))
	else:
		total = _run(gateway.total_count)
	typer.echo(str(total))


@app.command()
def oldest(
	utc: bool = typer.Option(False, "--utc", help="Display timestamps in UTC instead of local time"),
):
	"""Show the oldest stored message."""
	gateway = require_gateway()
	message = _run(gateway.oldest_message)
	if message is None:
		typer.echo(typer.style("No messages found.", dim=True), err=True)
		return
	typer.echo(format_message(message, use_utc=utc))


@app.command()
def distribution(
	target: str = typer.Argument(..., help="Field to count distinct values of"),
	message: str = typer.Option(None, "--message", "-m", help="Only count messages matching this query"),
):
	"""Count messages per distinct value of a field."""
	query = {"query": {"match_all": {}}}
	if message:
		query = {"query": {"query_string": {"default_field": "message", "query": message}}}
	gateway = require_gateway()
	entries = _run(lambda: gateway.dynamic_distribution(target, query))
	for entry in entries:
		typer.echo(f"{entry.count}\t{entry.distinct}")


@app.command()
def delete(
	message_id: str = typer.Argument(..., help="Message id"),
):
	"""Delete a message."""
	gateway = require_gateway()
	if not _run(lambda: gateway.delete_message(message_id)):
		_fail(f"Message '{message_id}' was not deleted")
	typer.echo(f"Deleted message '{message_id}'.")


@app.command()
def analyze(
	text: str = typer.Argument(...),
	field: str = typer.Option("message", "--field"),
):
	"""Show how text is broken down into terms."""
	gateway = require_gateway()
	for token in _run(lambda: gateway.analyze(text, field)):
		typer.echo(token)


def main():
	if len(sys.argv) == 1:
		# No arguments: show help
		command = typer.main.get_command(app)
		ctx = click.Context(command)
		typer.echo(command.get_help(ctx), err=True)
		return 0
	try:
		app()
	except typer.Exit:
		raise
	except Exception as e:
		typer.echo(typer.style(
			f"Fatal error: {type(e).__name__}: {e}",
			fg=typer.colors.RED
		), err=True)
		sys.exit(1)

if __name__ == "__main__":
	main()
