import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console

from regionmigrate.config import load_config
from regionmigrate.errors import MigrateError
from regionmigrate.migrate import Migration
from regionmigrate.models import ACTIONS, MigrationReport

console = Console()

ACTION_CHOICES = "{" + "|".join(ACTIONS) + "}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="regionmigrate",
        description="Upgrade a flat region layout to the per-table layout.",
    )
    parser.add_argument("mode", choices=["check", "upgrade"],
                        help="check: perform upgrade checks only; "
                             "upgrade: perform upgrade checks and modify the layout")
    parser.add_argument("--root", help="storage root directory (path or file:// URI)")
    parser.add_argument("--logfiles", choices=list(ACTIONS), metavar=ACTION_CHOICES,
                        help="action to take when unrecovered region server log files are found")
    parser.add_argument("--extrafiles", choices=list(ACTIONS), metavar=ACTION_CHOICES,
                        help="action to take if \"extra\" files are found")
    parser.add_argument("--config", type=Path, help="YAML configuration file")
    parser.add_argument("--service-url", help="status URL probed to make sure the service is down")
    parser.add_argument("--journal", help="directory where renames and deletes are recorded")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    return parser


def print_report(report: MigrationReport) -> None:
    if report.up_to_date:
        console.print("No upgrade necessary.", style="green")
        return
    for r in report.relocated:
        console.print(f"  moved    {r}")
    for d in report.deleted:
        console.print(f"  deleted  {d}", style="yellow")
    for w in report.warnings:
        console.print(f"  warning  {w}", style="yellow")
    if report.upgraded:
        console.print("Upgrade successful.", style="bold green")
    elif report.migration_needed:
        console.print("Upgrade needed.", style="bold yellow")
    else:
        console.print("Upgrade check passed.", style="green")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    read_only = args.mode == "check"

    try:
        config = load_config(args.config)
        config.update({
            "root_dir": args.root,
            "log_files": args.logfiles,
            "extra_files": args.extrafiles,
            "service_url": args.service_url,
            "journal_dir": args.journal,
            "log_level": args.log_level,
        })
    except MigrateError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        migration = Migration.from_config(config, read_only=read_only)
        report = migration.run()
    except MigrateError as e:
        console.print(f"[bold red]Upgrade{' check' if read_only else ''} failed:[/bold red] {e}")
        return 1

    print_report(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
