#!/usr/bin/env python3
"""
mirrorlink CLI: generate a Metalink 4 manifest describing a directory tree.
Every file is hashed once; identical files can be listed with each other's URLs
or consolidated into a single entry.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from pathlib import Path
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    print("\nOr install the package with its dependencies:", file=sys.stderr)
    print("   pip install mirrorlink", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from mirrorlink.core.errors import ManifestError
from mirrorlink.core.models import (
    CollisionPolicy, DuplicateMode, FileRecord, ManifestParams, RunStats, UnreadablePolicy)
from mirrorlink.commands import ManifestCommand
from mirrorlink.utils.convert_utils import ConvertUtils
from mirrorlink.version import APP_NAME, __version__
from mirrorlink.aliases import (
    COLLISION_ALIASES, COLLISION_CHOICES, COLLISION_HELP_TEXT,
    DUPLICATE_MODE_ALIASES, DUPLICATE_MODE_CHOICES, DUPLICATE_MODE_HELP_TEXT,
    HASH_HELP_TEXT, EPILOG_TEXT
)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.show_statistics: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8', errors='backslashreplace')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog=APP_NAME,
            description="mirrorlink: Metalink 4 manifest generator for directory trees",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        # Required arguments
        parser.add_argument(
            "--directory", "-d",
            required=True,
            type=str,
            help="Root directory to describe"
        )
        parser.add_argument(
            "--output", "-o",
            required=True,
            type=str,
            help="Path of the Metalink file to write"
        )

        # Locators
        parser.add_argument(
            "--base-url", "-u",
            default=None,
            type=str,
            metavar='',
            dest="base_url",
            help="Mirror URL of the root directory (e.g., ftp://ftp.example.com/pub/)"
        )
        parser.add_argument(
            "--country", "-c",
            default=None,
            type=str,
            metavar='',
            help="Two-letter ISO 3166 country code of the mirror (e.g., us)"
        )
        parser.add_argument(
            "--file-url", "-f",
            action="store_true",
            dest="file_url",
            help="Add file: URLs pointing into the local directory"
        )
        parser.add_argument(
            "--ni-url",
            action="store_true",
            dest="ni_url",
            help="Add RFC 6920 ni:///sha-256 URLs (requires sha256)"
        )
        parser.add_argument(
            "--magnet-url",
            action="store_true",
            dest="magnet_url",
            help="Add magnet:?xt=urn:sha256 links (requires sha256)"
        )

        # Hashing and duplicates
        parser.add_argument(
            "--hash-type",
            default="sha256",
            type=str,
            metavar='',
            dest="hash_type",
            help=HASH_HELP_TEXT
        )
        parser.add_argument(
            "--duplicates",
            choices=DUPLICATE_MODE_CHOICES,
            default="off",
            type=str,
            help=DUPLICATE_MODE_HELP_TEXT
        )
        parser.add_argument(
            "--ignore-dates",
            action="store_true",
            dest="ignore_dates",
            help="Treat files with different modification times as possible duplicates"
        )
        parser.add_argument(
            "--collisions",
            choices=COLLISION_CHOICES,
            default="warn",
            type=str,
            help=COLLISION_HELP_TEXT
        )

        # Traversal
        parser.add_argument(
            "--no-recursive",
            action="store_true",
            dest="no_recursive",
            help="Only describe files directly inside the directory"
        )
        parser.add_argument(
            "--follow-symlinks",
            action="store_true",
            dest="follow_symlinks",
            help="Follow symbolic links instead of skipping them"
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Abort on the first unreadable file or directory instead of skipping it"
        )

        # Output options
        parser.add_argument(
            "--sparse-output",
            action="store_true",
            dest="sparse_output",
            help="Same as --no-generator --no-date"
        )
        parser.add_argument(
            "--no-generator",
            action="store_true",
            dest="no_generator",
            help="Do not write the <generator> element"
        )
        parser.add_argument(
            "--no-date",
            action="store_true",
            dest="no_date",
            help="Do not write the <published> element"
        )
        parser.add_argument(
            "--show-statistics", "-s",
            action="store_true",
            dest="show_statistics",
            help="Print run statistics when finished"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show progress and log every processed file"
        )
        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {__version__}"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        root_path = Path(args.directory).resolve()
        if not root_path.exists():
            self.error_exit(f"Directory not found: {args.directory}")
        if not root_path.is_dir():
            self.error_exit(f"Path is not a directory: {args.directory}")

        output_path = Path(args.output).resolve()
        if output_path.is_dir():
            self.error_exit(f"Output path is a directory: {args.output}")
        if not output_path.parent.is_dir():
            self.error_exit(f"Output directory not found: {output_path.parent}")

        if not (args.base_url or args.file_url or args.ni_url or args.magnet_url):
            self.error_exit("Nothing to describe: use at least one of "
                            "--base-url, --file-url, --ni-url or --magnet-url")

        if args.country and not args.base_url:
            self.warning("--country has no effect without --base-url")

        if args.ignore_dates and args.duplicates == "off":
            self.warning("--ignore-dates has no effect with --duplicates off")

        if args.duplicates not in DUPLICATE_MODE_ALIASES:
            self.error_exit(
                f"Invalid duplicate mode: '{args.duplicates}'.\n"
                f"Valid options: {', '.join(DUPLICATE_MODE_CHOICES)}"
            )

    def create_params(self, args: argparse.Namespace) -> ManifestParams:
        """Create ManifestParams from CLI arguments."""
        try:
            mode = DUPLICATE_MODE_ALIASES.get(args.duplicates, DuplicateMode.OFF)
            collision_policy = COLLISION_ALIASES.get(args.collisions, CollisionPolicy.WARN)
            unreadable_policy = UnreadablePolicy.FAIL if args.strict else UnreadablePolicy.SKIP

            return ManifestParams.from_human_readable(
                root_dir=str(Path(args.directory).resolve()),
                hash_list_str=args.hash_type,
                mode=mode,
                ignore_dates=args.ignore_dates,
                recursive=not args.no_recursive,
                follow_symlinks=args.follow_symlinks,
                unreadable_policy=unreadable_policy,
                collision_policy=collision_policy,
                base_url=args.base_url,
                country=args.country,
                file_url=args.file_url,
                ni_url=args.ni_url,
                magnet_url=args.magnet_url,
                generator=not (args.sparse_output or args.no_generator),
                include_date=not (args.sparse_output or args.no_date)
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(
                f"\r  [{stage}] {current}/{total} ({percent:.1f}%)"
            )
        else:
            sys.stderr.write(f"\r  [{stage}] {current} processed...")
        sys.stderr.flush()

    def run_manifest(self, params: ManifestParams) -> tuple[List[FileRecord], RunStats]:
        """Execute the traversal and hashing workflow."""
        command = ManifestCommand()
        if self.verbose:
            print(f"Building manifest (duplicates: {params.mode.display_name}, "
                  f"hashes: {', '.join(h.value for h in params.hash_types)})...")

        try:
            stats = RunStats()
            stats.add_listener(self.on_stats_event)
            records, stats = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None,
                stats=stats
            )
        except (ManifestError, ValueError) as e:
            if self.verbose:
                sys.stderr.write("\n")
            self.error_exit(f"Manifest generation failed: {e}")

        if self.verbose:
            sys.stderr.write("\n")
        return records, stats

    def on_stats_event(self, event: str, payload: dict) -> None:
        """Reports skipped entries as soon as the builder records them."""
        if event == "skipped":
            if self.verbose:
                sys.stderr.write("\n")
            self.warning(f"Skipped {payload['path']}: {payload['reason'] or payload['operation']}")

    def output_results(self, records: List[FileRecord], stats: RunStats, params: ManifestParams,
                       output_path: str) -> None:
        """Report what was written and what was kept apart."""
        if stats.skipped and not self.quiet:
            print(f"Skipped {len(stats.skipped)} unreadable entries")

        if stats.collision_count and params.collision_policy != CollisionPolicy.IGNORE:
            self.warning(f"{stats.collision_count} digest collision(s): files with identical "
                         f"sha256 but different content were kept apart")

        if self.show_statistics:
            print(stats.print_summary())
            print(f"Data hashed: {ConvertUtils.bytes_to_human(stats.bytes_hashed)}")

        if not self.quiet:
            print(f"✅ Wrote {len(records)} file entries to {output_path}")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.show_statistics = args.show_statistics

        if self.verbose:
            logging.getLogger(APP_NAME).setLevel(logging.INFO)

        self.validate_args(args)
        params = self.create_params(args)

        if not self.quiet:
            print(f"Scanning directory: {params.root_dir}")

        records, stats = self.run_manifest(params)

        try:
            ManifestCommand.write(records, args.output, params)
        except ManifestError as e:
            self.error_exit(str(e))

        self.output_results(records, stats, params, args.output)

        # Show completion time
        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
