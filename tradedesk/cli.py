"""
Tradedesk command line.

Drives the same editor and submission pipeline as the dashboard:

    tradedesk catalog --plan free
    tradedesk create --type ma_crossover --symbol eurusd --param fast_period=8
    tradedesk backtest --type rsi_reversal --timeframe H4
"""

import argparse
import asyncio
import json
import sys
from typing import Dict, List, Optional

import structlog

from .clients.http_client import HttpStrategyApi
from .core.config import Settings, get_settings
from .core.exceptions import ConfigurationError, TradedeskError
from .editor.draft import EditorContext
from .editor.synchronizer import ConfigurationSynchronizer
from .logging.logger_config import setup_logging
from .strategies.access import Plan, Role, UserAccessContext
from .strategies.config import MultiSelectParameter
from .strategies.list_state import StrategyList
from .strategies.registry import StrategyRegistry
from .submission.notifier import Notifier
from .submission.pipeline import SubmissionPipeline

logger = structlog.get_logger()

class ConsoleNotifier(Notifier):
    """Prints notices to stdout"""

    def loading(self, message: str) -> None:
        print(f"... {message}")

    def success(self, message: str) -> None:
        print(f"OK  {message}")

    def error(self, message: str) -> None:
        print(f"ERR {message}")

def parse_assignments(assignments: List[str]) -> Dict[str, str]:
    """Parse repeated name=value options"""
    values = {}
    for item in assignments or []:
        name, sep, value = item.partition('=')
        if not sep or not name:
            raise ConfigurationError(f"Expected name=value, got '{item}'")
        values[name.strip()] = value
    return values

def apply_parameters(editor: ConfigurationSynchronizer, assignments: Dict[str, str]) -> None:
    for name, raw in assignments.items():
        try:
            spec = editor.definition.parameter(name)
        except KeyError:
            raise ConfigurationError(f"Unknown parameter '{name}' for {editor.definition.key}") from None
        if isinstance(spec, MultiSelectParameter):
            editor.set_parameter(name, [part.strip() for part in raw.split(',') if part.strip()])
        else:
            editor.set_parameter(name, raw)

def access_from_args(args: argparse.Namespace) -> UserAccessContext:
    plan = Plan(args.plan) if args.plan else None
    role = Role.SUPERUSER if args.superuser else Role.USER
    return UserAccessContext(plan=plan, role=role)

def print_catalog(registry: StrategyRegistry, editor: ConfigurationSynchronizer) -> None:
    for option in editor.type_options():
        flags = []
        if option['is_premium']:
            flags.append('premium')
        if option['upgrade_required']:
            flags.append('upgrade required')
        suffix = f" ({', '.join(flags)})" if flags else ""
        print(f"{option['strategy_name']}: {option['name']}{suffix}")
        for param in registry.describe(option['strategy_name'])['parameters']:
            print(f"    {param['name']} [{param['type']}] default={param['default']!r}")

def print_errors(errors: Dict[str, str]) -> None:
    for field_name, message in errors.items():
        print(f"    {field_name}: {message}")

async def submit_draft(args: argparse.Namespace, settings: Settings, registry: StrategyRegistry,
                       context: EditorContext) -> int:
    notifier = ConsoleNotifier()
    editor = ConfigurationSynchronizer(
        registry,
        access_from_args(args),
        context=context,
        default_symbol=settings.default_symbol,
        default_timeframe=settings.default_timeframe,
    )

    async with HttpStrategyApi.from_settings(settings) as api:
        strategies = StrategyList(api, notifier)
        pipeline = SubmissionPipeline(api, notifier, on_saved=strategies.on_saved)

        if getattr(args, 'id', None) is not None:
            await strategies.refresh()
            instance = next((s for s in strategies.strategies if str(s.id) == args.id), None)
            if instance is None:
                print(f"Strategy {args.id} not found")
                return 1
            editor.open_edit(instance)
        else:
            editor.open_create()
            if args.type:
                editor.select_type(args.type)

        if args.symbol:
            editor.set_symbol(args.symbol)
        if args.timeframe:
            editor.set_timeframe(args.timeframe)
        apply_parameters(editor, parse_assignments(args.param))

        if editor.is_creation_disabled:
            print(editor.upgrade_prompt)
            return 2

        result = await pipeline.submit(editor)
        if result.field:
            print("Configuration is invalid:")
            print_errors(editor.errors)
            return 2
        if result.ok and result.instance is not None:
            print(json.dumps({'id': result.instance.id, 'status': result.instance.status.value}))
        return 0 if result.ok else 1

async def list_strategies(settings: Settings) -> int:
    async with HttpStrategyApi.from_settings(settings) as api:
        strategies = StrategyList(api, ConsoleNotifier())
        if not await strategies.refresh():
            return 1
        for strategy in strategies.strategies:
            print(f"{strategy.id}\t{strategy.strategy_name}\t{strategy.symbol}\t"
                  f"{strategy.timeframe}\t{strategy.status.value}")
        return 0

async def toggle_strategy(settings: Settings, strategy_id: str, active: bool) -> int:
    async with HttpStrategyApi.from_settings(settings) as api:
        strategies = StrategyList(api, ConsoleNotifier())
        return 0 if await strategies.toggle_status(strategy_id, active) else 1

async def delete_strategy(settings: Settings, strategy_id: str) -> int:
    async with HttpStrategyApi.from_settings(settings) as api:
        strategies = StrategyList(api, ConsoleNotifier())
        return 0 if await strategies.delete(strategy_id) else 1

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='tradedesk', description='Tradedesk strategy console')
    parser.add_argument('--log-level', default=None, help='Override TRADEDESK_LOG_LEVEL')
    parser.add_argument('--plan', choices=[plan.value for plan in Plan],
                        help='Subscription plan of the acting user')
    parser.add_argument('--superuser', action='store_true', help='Act as a superuser')
    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('catalog', help='List strategy types')
    subparsers.add_parser('strategies', help='List saved strategies')

    def add_draft_arguments(sub: argparse.ArgumentParser, with_type: bool = True) -> None:
        if with_type:
            sub.add_argument('--type', help='Strategy type key (defaults to the first catalog entry)')
        sub.add_argument('--symbol', help='Instrument symbol')
        sub.add_argument('--timeframe', help='Timeframe, e.g. H1')
        sub.add_argument('--param', action='append', default=[], metavar='NAME=VALUE',
                         help='Parameter value; repeat for several. Multiselect values are comma separated')

    add_draft_arguments(subparsers.add_parser('create', help='Create a strategy'))
    add_draft_arguments(subparsers.add_parser('backtest', help='Start a backtest'))

    update = subparsers.add_parser('update', help='Edit a saved strategy')
    update.add_argument('id', help='Strategy id')
    add_draft_arguments(update, with_type=False)

    for name, help_text in (('activate', 'Activate a strategy'), ('deactivate', 'Deactivate a strategy'),
                            ('delete', 'Delete a strategy')):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('id', help='Strategy id')

    return parser

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(log_level=args.log_level or settings.log_level)

    try:
        registry = StrategyRegistry.from_yaml(settings.catalog_path)

        if args.command == 'catalog':
            editor = ConfigurationSynchronizer(registry, access_from_args(args))
            print_catalog(registry, editor)
            return 0
        if args.command == 'strategies':
            return asyncio.run(list_strategies(settings))
        if args.command in ('create', 'update'):
            return asyncio.run(submit_draft(args, settings, registry, EditorContext.MANAGE_STRATEGY))
        if args.command == 'backtest':
            return asyncio.run(submit_draft(args, settings, registry, EditorContext.BACKTEST))
        if args.command in ('activate', 'deactivate'):
            return asyncio.run(toggle_strategy(settings, args.id, args.command == 'activate'))
        if args.command == 'delete':
            return asyncio.run(delete_strategy(settings, args.id))
    except TradedeskError as e:
        logger.error("Command failed", command=args.command, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser.error(f"Unknown command {args.command}")
    return 2

if __name__ == '__main__':
    sys.exit(main())
