#!/usr/bin/env python3
"""
PostgreSQL Dumper - CLI Entry Point
===================================
Dumps PostgreSQL databases with pg_dump / pg_dumpall, with support for:
- Single database or all databases
- Table include / exclude filters
- Running as another user through sudo
- Gzip, Bzip2 or custom compression
- Validating a dump by restoring it into a scratch database
"""

import argparse
import logging
import sys

import yaml

from .config import ConfigLoader
from .database_dumper import DatabaseDumper
from .errors import DumperError
from .utils import print_dry_run_info, setup_logging


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='PostgreSQL Dumper - pg_dump pipelines with restore validation'
    )
    parser.add_argument(
        '-c', '--config',
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show the commands that would run without running them'
    )
    parser.add_argument(
        '-d', '--database',
        help='Dump only the database with this id (must be defined in config)'
    )

    args = parser.parse_args()

    # Load configuration
    try:
        config = ConfigLoader(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file '{args.config}' not found")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file: {e}")
        sys.exit(1)
    except DumperError as e:
        print(f"Error: {e}")
        sys.exit(1)

    # Setup logging
    log_settings = config.get_logging_settings()
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    setup_logging(log_settings)

    try:
        dumper = DatabaseDumper(config)

        # Dry run mode
        if args.dry_run:
            logging.info("DRY RUN MODE - No commands will be run")
            print_dry_run_info(dumper, dumper.filter_databases(args.database))
            sys.exit(0)

        stats = dumper.run(database_filter=args.database)

        # Print summary
        logging.info("=" * 50)
        logging.info("DUMP COMPLETE")
        logging.info(f"Databases: {len(stats.databases)}")
        logging.info(f"Succeeded: {stats.succeeded}")

        if stats.errors:
            logging.warning(f"Errors: {len(stats.errors)}")
            for err in stats.errors:
                logging.warning(f"  - {err['database']}: {err['error']}")
            sys.exit(1)

    except DumperError as e:
        logging.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
