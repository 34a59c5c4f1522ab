import argparse
import json
import logging
import sys
from datetime import datetime

from planner.core.app import LOG_FORMAT, PlannerApp
from planner.core.config import Config
from planner.core.errors import PlannerError
from planner.core.seed import apply_seed, load_seed_file


def setup_basic_logging():
    """Setup basic stdout logging before config is loaded"""
    root_logger = logging.getLogger()
    if not root_logger.handlers:  # Only add handler if none exists
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)
        root_logger.setLevel(logging.DEBUG)
        logging.debug("Basic logging initialized")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Academic Planner')
    parser.add_argument('--config',
                        help='Path to config file (default: ./config.yaml)')
    subparsers = parser.add_subparsers(dest='command')

    subparsers.add_parser('serve', help='Run the API server (default)')

    summary = subparsers.add_parser('summary', help='Print the dashboard overview as JSON')
    summary.add_argument('--remote', metavar='URL',
                         help='Read from a running planner API instead of the local database')

    seed = subparsers.add_parser('seed', help='Load a YAML seed file into the store')
    seed.add_argument('file', help='Path to the seed file')
    return parser


def print_overview(snapshot, settings) -> None:
    from planner.plugins.overview.service import build_overview

    overview = build_overview(snapshot, datetime.now(), settings)
    print(json.dumps(overview, indent=2))


def run_remote_summary(config_path, remote_url) -> None:
    """Overview of a running planner API; the local database is never opened."""
    from planner.core.remote import RemoteStore

    config = Config(config_path=config_path, watch=False)
    print_overview(RemoteStore(remote_url).snapshot(), config.analytics_settings())


def run_local(command: str, args) -> None:
    app = PlannerApp(config_path=args.config, watch_config=False)
    try:
        if command == 'summary':
            print_overview(app.store.snapshot(), app.analytics_settings)
        elif command == 'seed':
            created = apply_seed(app.store, load_seed_file(args.file))
            print(json.dumps(created))
    finally:
        app.close()


def main(argv=None) -> int:
    setup_basic_logging()

    args = build_parser().parse_args(argv)
    command = args.command or 'serve'

    try:
        if command == 'serve':
            PlannerApp(config_path=args.config).run()
        elif command == 'summary' and args.remote:
            run_remote_summary(args.config, args.remote)
        else:
            run_local(command, args)
    except (PlannerError, OSError) as e:
        logging.error(f"planner {command} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
