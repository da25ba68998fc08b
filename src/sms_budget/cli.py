"""Command-line interface for the bank message sync engine."""

import json
import os
import sys
import time
import click
from typing import Optional, Dict, Any
import logging

from .exceptions import CheckpointWriteError, SourceUnavailable
from .models.core import RawMessage, SyncResult
from .parsers.bank_resolver import BankResolver
from .parsers.message_parser import MessageParser
from .storage.sqlite_store import SQLiteTransactionStore
from .sync.checkpoint import JSONCheckpointStore
from .sync.coordinator import SyncCoordinator
from .sync.sources import JSONFileMessageSource
from .utils.config_manager import ConfigManager
from .utils.error_handler import ErrorHandler


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class SmsBudgetCLI:
    """Wires configuration, stores and the coordinator for CLI commands"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_manager = ConfigManager(config_path)
        self.config = self.config_manager.load_config()
        self.error_handler = ErrorHandler(log_directory=self.config.log_directory)
        self.checkpoint_store = JSONCheckpointStore(self.config.checkpoint_file, self.error_handler)
        self.parser = MessageParser(
            BankResolver(self.config.bank_headers, self.config.bank_names),
            description_max_length=self.config.description_max_length,
        )
        self._store: Optional[SQLiteTransactionStore] = None

    @property
    def store(self) -> SQLiteTransactionStore:
        if self._store is None:
            self._store = SQLiteTransactionStore(self.config.database_file)
        return self._store

    def sync(self, messages_file: str) -> SyncResult:
        """Run one sync cycle against an exported inbox file"""
        coordinator = SyncCoordinator(
            source=JSONFileMessageSource(messages_file),
            sink=self.store,
            checkpoint_store=self.checkpoint_store,
            parser=self.parser,
            config=self.config,
            error_handler=self.error_handler,
        )
        return coordinator.run_sync_cycle()

    def parse_text(self, body: str, sender: str, timestamp_millis: Optional[int] = None):
        message = RawMessage(
            sender=sender,
            body=body,
            timestamp_millis=timestamp_millis if timestamp_millis is not None else int(time.time() * 1000),
        )
        return self.parser.parse(message)

    def get_status(self) -> Dict[str, Any]:
        return {
            'checkpoint': self.checkpoint_store.get(),
            'checkpoint_file': self.config.checkpoint_file,
            'database_file': self.config.database_file,
            'max_count': self.config.max_count,
            'dedup_enabled': self.config.dedup_enabled,
            'bank_headers': self.config.bank_headers,
        }

    def generate_config_template(self, output_path: str) -> bool:
        try:
            self.config_manager.save_config_template(output_path)
            return True
        except Exception as e:
            self.error_handler.log_error(
                f"Failed to generate config template: {str(e)}",
                "INVALID_CONFIG_FORMAT",
                exception=e
            )
            return False


def _format_millis(value: int) -> str:
    if not value:
        return "never"
    return time.strftime('%Y-%m-%d %H:%M:%S', time.gmtime(value / 1000)) + " UTC"


# CLI Commands using Click
@click.group()
@click.option('--config', '-c', help='Path to configuration file')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, config, verbose):
    """SMS Budget - Extract bank transactions from SMS notifications"""

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    ctx.ensure_object(dict)
    ctx.obj['cli'] = SmsBudgetCLI(config)


@cli.command()
@click.option('--messages', '-m', required=True, type=click.Path(), help='Exported inbox JSON file')
@click.pass_context
def sync(ctx, messages):
    """Run one incremental sync cycle"""

    cli_instance = ctx.obj['cli']

    try:
        result = cli_instance.sync(messages)
    except SourceUnavailable as e:
        click.echo(f"✗ Message source unavailable: {e}")
        sys.exit(1)
    except CheckpointWriteError as e:
        click.echo(f"✗ Stored {e.result.accepted_count if e.result else 0} transactions "
                   f"but could not save checkpoint: {e}")
        sys.exit(1)

    if result.skipped:
        click.echo("Sync already in progress, skipped")
        return

    click.echo("✓ Sync completed")
    click.echo(f"  Accepted: {result.accepted_count}")
    click.echo(f"  Rejected: {result.rejected_count}")
    click.echo(f"  Non-bank messages: {result.filtered_count}")
    if result.duplicate_count:
        click.echo(f"  Already stored: {result.duplicate_count}")
    if result.checkpoint_advanced:
        click.echo(f"  Checkpoint: {_format_millis(cli_instance.checkpoint_store.get())}")


@cli.command()
@click.argument('body')
@click.option('--sender', '-s', default='', help='Sender id, e.g. VM-HDFCBK')
@click.option('--timestamp', '-t', type=int, help='Receive time in epoch milliseconds')
@click.pass_context
def parse(ctx, body, sender, timestamp):
    """Parse a single message body without storing it"""

    cli_instance = ctx.obj['cli']
    outcome = cli_instance.parse_text(body, sender, timestamp)

    if outcome.accepted:
        click.echo(json.dumps(outcome.transaction.to_dict(), indent=2))
    else:
        click.echo(f"✗ Rejected: {outcome.reason.value}")
        sys.exit(1)


@cli.command(name='list')
@click.option('--limit', '-n', default=20, help='Number of transactions to show')
@click.pass_context
def list_transactions(ctx, limit):
    """Show stored transactions, newest first"""

    cli_instance = ctx.obj['cli']
    transactions = cli_instance.store.list_transactions(limit=limit)

    if not transactions:
        click.echo("No transactions stored")
        return

    for t in transactions:
        sign = '+' if t.type == 'CREDIT' else '-'
        bank = f" [{t.bank_name}]" if t.bank_name else ""
        click.echo(f"{t.date}  {sign}{t.amount:>12}  {t.notes}{bank}")


@cli.command()
@click.pass_context
def status(ctx):
    """Show checkpoint and configuration"""

    info = ctx.obj['cli'].get_status()

    click.echo("SMS Budget Status")
    click.echo("=" * 40)
    click.echo(f"Last sync: {_format_millis(info['checkpoint'])}")
    click.echo(f"Checkpoint file: {info['checkpoint_file']}")
    click.echo(f"Database: {info['database_file']}")
    click.echo(f"Batch size: {info['max_count']}")
    click.echo(f"Dedup: {'on' if info['dedup_enabled'] else 'off'}")
    click.echo(f"Bank headers: {', '.join(info['bank_headers'])}")


@cli.command(name='reset-checkpoint')
@click.confirmation_option(prompt='Reprocess the whole inbox on the next sync?')
@click.pass_context
def reset_checkpoint(ctx):
    """Forget the last sync time"""

    ctx.obj['cli'].checkpoint_store.reset()
    click.echo("✓ Checkpoint reset")


@cli.command(name='init-config')
@click.argument('output_path', default='sms_budget.json')
@click.option('--format', type=click.Choice(['json', 'yaml']), default='json', help='Configuration file format')
@click.pass_context
def init_config(ctx, output_path, format):
    """Generate configuration template file"""

    cli_instance = ctx.obj['cli']

    stem, ext = os.path.splitext(output_path)
    if format == 'yaml' and ext not in ('.yml', '.yaml'):
        output_path = f"{stem if ext == '.json' else output_path}.yml"
    elif format == 'json' and ext != '.json':
        output_path = f"{stem if ext in ('.yml', '.yaml') else output_path}.json"

    if cli_instance.generate_config_template(output_path):
        click.echo(f"✓ Configuration template generated: {output_path}")
    else:
        click.echo("✗ Failed to generate configuration template")
        sys.exit(1)


def main():
    cli()


if __name__ == '__main__':
    main()
