"""Main CLI entrypoint for Streamsweep."""

import json
import logging
import sys
from typing import Any, Dict, List

import click

from ..config import DEFAULT_DAYS, SweepConfig, default_checkpoint_path
from ..errors import SweepError
from ..events import FAILURE_EVENTS, EventTypes
from ..ledger import Status, load_checkpoint
from ..orchestrator import Orchestrator, RunReport


@click.group()
@click.option('--json', 'output_json', is_flag=True, help='Output machine-readable JSON')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def main(ctx, output_json, verbose):
    """Streamsweep - delete Lightstep streams with no recent activity."""
    ctx.ensure_object(dict)
    ctx.obj['json'] = output_json
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


def _json_output(data: Dict[str, Any]) -> None:
    """Output data as JSON."""
    click.echo(json.dumps(data, indent=None))


@main.command('delete-streams')
@click.argument('org')
@click.argument('project')
@click.option('--days', '-d', default=DEFAULT_DAYS, show_default=True, type=int,
              help='Integer days since last active data')
@click.option('--dry-run/--no-dry-run', '-r', 'dry_run', default=True, show_default=True,
              help='List non-active streams without deleting')
@click.option('--api-key', '-a', required=True, envvar='LIGHTSTEP_API_KEY',
              help='API key with permission to list and delete streams')
@click.option('--resume', is_flag=True, default=False,
              help='Re-check streams left unknown in the checkpoint instead of listing')
@click.option('--service', '-s', default=None, help='Only consider streams whose query mentions this string')
@click.option('--exclude', '-x', multiple=True, help='Skip streams whose name or query contains this (repeatable)')
@click.option('--env', '-e', default=None, help='Environment suffix for the API host, e.g. staging')
@click.option('--checkpoint', 'checkpoint_path', type=click.Path(dir_okay=False),
              default=None, help='Checkpoint file (default: streams-status.json)')
@click.option('--batch-size', default=10, show_default=True, type=int, help='Streams per batch')
@click.option('--concurrency', default=8, show_default=True, type=int, help='Batches in flight')
@click.pass_context
def delete_streams(ctx, org, project, days, dry_run, api_key, resume, service, exclude, env,
                   checkpoint_path, batch_size, concurrency):
    """List and delete streams in a project that have not been active in the last DAYS days."""
    output_json = ctx.obj.get('json', False)

    config = SweepConfig(
        org=org,
        project=project,
        api_key=api_key,
        days=days,
        dry_run=dry_run,
        resume=resume,
        service=service,
        exclude=tuple(exclude),
        env=env,
        checkpoint_path=checkpoint_path or default_checkpoint_path(),
        batch_size=batch_size,
        concurrency=concurrency,
    )

    try:
        orchestrator = Orchestrator(config, event_callback=None if output_json else _print_event_human)
        report = orchestrator.run()
    except SweepError as e:
        error_msg = f"Sweep failed: {e}"
        if output_json:
            _json_output({'error': error_msg})
        else:
            click.echo(click.style(f"❌ {error_msg}", fg='red'), err=True)
        sys.exit(1)

    if output_json:
        _json_output(report.to_dict())
    else:
        _print_report_human(report)


@main.command()
@click.option('--checkpoint', 'checkpoint_path', type=click.Path(dir_okay=False),
              default=None, help='Checkpoint file (default: streams-status.json)')
@click.pass_context
def status(ctx, checkpoint_path):
    """Summarize an existing checkpoint without contacting the API."""
    output_json = ctx.obj.get('json', False)
    path = checkpoint_path or default_checkpoint_path()

    try:
        ledger = load_checkpoint(path)
    except SweepError as e:
        if output_json:
            _json_output({'error': str(e)})
        else:
            click.echo(click.style(f"❌ {e}", fg='red'), err=True)
        sys.exit(1)

    groups = ledger.partition()
    if output_json:
        _json_output({status.value: ids for status, ids in groups.items()})
    else:
        click.echo(f"📋 Checkpoint: {path}")
        _print_groups(groups)


def _print_event_human(event_type: str, data: Dict[str, Any]) -> None:
    """Print a run event as it happens."""
    if event_type in FAILURE_EVENTS:
        color = 'red'
    elif event_type == EventTypes.CHECKPOINT_SAVED:
        color = 'blue'
    elif event_type == EventTypes.DELETE_SKIPPED_DRY_RUN:
        color = 'yellow'
    else:
        color = 'white'

    if event_type in (EventTypes.CLASSIFY_BATCH_FAILED, EventTypes.DELETE_BATCH_FAILED):
        message = f"{len(data['streams'])} streams ({', '.join(data['streams'])}): {data['error']}"
    elif event_type == EventTypes.CANDIDATES_LISTED:
        message = f"{data['count']} streams to classify"
    elif event_type == EventTypes.CHECKPOINT_SAVED:
        message = f"{data['entries']} entries written to {data['path']}"
    elif event_type == EventTypes.DELETE_SKIPPED_DRY_RUN:
        message = f"dry run, {len(data['would_delete'])} streams would be deleted"
    elif event_type == EventTypes.RUN_FAILED:
        message = data.get('error', '')
    elif event_type == EventTypes.RUN_START:
        message = f"{data['org']}/{data['project']} activity window {data['oldest']} .. {data['youngest']}"
    else:
        message = ', '.join(f"{k}={v}" for k, v in data.items())

    click.echo(f"{click.style(event_type, fg=color)}: {message}")


def _print_groups(groups: Dict[Status, List[str]]) -> None:
    labels = {
        Status.UNKNOWN: ('Unknown (re-run with --resume)', 'yellow'),
        Status.INACTIVE: ('Inactive', 'white'),
        Status.DELETED: ('Deleted', 'green'),
    }
    for status, ids in groups.items():
        label, color = labels[status]
        click.echo(f"\n{click.style(label, fg=color)}: {len(ids)}")
        for stream_id in ids:
            click.echo(f"  • {stream_id}")


def _print_report_human(report: RunReport) -> None:
    """Print the final report in human-readable format."""
    click.echo("\n📊 Sweep report")
    if report.dry_run:
        click.echo(click.style("Dry run: inactive streams were not deleted", fg='yellow'))
    if report.classify_failures or report.delete_failures:
        click.echo(click.style(
            f"{report.classify_failures} classify batches and {report.delete_failures} delete batches failed",
            fg='red'))

    _print_groups({
        Status.UNKNOWN: report.unknown,
        Status.INACTIVE: report.inactive,
        Status.DELETED: report.deleted,
    })
    click.echo(f"\n📋 Checkpoint: {report.checkpoint_path}")


if __name__ == '__main__':
    main()
