"""
Main Application Entry Point.

This module serves as the primary entry point for the closed work report.
It orchestrates the reporting workflow, including:
- Credential resolution
- Scope construction
- Mining, or loading a data store snapshot
- Report rendering

The report is rendered only after the whole fetch completes, so a failed run
writes nothing to its destination.
"""

import argparse
import io
import logging
import os
import sys
from typing import List, Optional, TextIO

from config import ConfigurationError, settings, logger
from miners.base import RepositoryMiner
from miners.github_miner import GitHubMiner
from miners.models import DataStore, Scope
from report.formats import ReportFormat, render_report
from storage.data_store_snapshot import DataStoreSnapshot


def resolve_access_token(access_token: Optional[str] = None) -> str:
    """
    Pick the GitHub token for this run: explicit argument first, then settings.

    Raises:
        ConfigurationError: If no token is available.
    """
    if access_token:
        return access_token
    if settings.github_token is not None and settings.github_token.get_secret_value():
        return settings.github_token.get_secret_value()
    raise ConfigurationError(
        "GitHub token missing: pass one explicitly or set GITHUB_TOKEN / GITHUB_OAUTH_TOKEN"
    )


def run(
    since_date: str,
    until_date: str,
    repos: List[str],
    access_token: Optional[str] = None,
    buffer: Optional[TextIO] = None,
    labels: Optional[List[str]] = None,
    report_format: ReportFormat = ReportFormat.CSV,
    data_store_path: Optional[str] = None,
    miner: Optional[RepositoryMiner] = None,
) -> DataStore:
    """
    Fetch closed issues and pull requests and render the report.

    Args:
        since_date (str): First reported day, ``YYYY-MM-DD`` (inclusive).
        until_date (str): Day after the last reported day, ``YYYY-MM-DD`` (exclusive).
        repos (List[str]): ``owner/repo`` names, mined in order.
        access_token (Optional[str]): GitHub token; settings are used when omitted.
        buffer (Optional[TextIO]): Output sink, standard output by default.
        labels (Optional[List[str]]): Labels reported as boolean columns.
        report_format (ReportFormat): Output format.
        data_store_path (Optional[str]): Snapshot file. An existing snapshot
            mined for the same repositories and window is rendered instead of
            mining; otherwise the mined result is saved there.
        miner (Optional[RepositoryMiner]): Miner to use instead of a GitHubMiner.

    Returns:
        DataStore: The rendered data store.

    Raises:
        ConfigurationError: On a missing token or an invalid scope.
        Exception: Any GitHub API or network failure.
    """
    buffer = buffer if buffer is not None else sys.stdout
    scope = Scope.from_dates(since_date, until_date, repos, labels)

    data_store = None
    snapshot = DataStoreSnapshot(data_store_path) if data_store_path else None
    if snapshot is not None and snapshot.exists():
        document = snapshot.load()
        if document.scope.same_query(scope):
            logger.info({"message": "Using data store snapshot", "file": str(snapshot.path)})
            data_store = document.data_store
        else:
            logger.warning(
                {
                    "message": "Data store snapshot was mined for another scope, mining again",
                    "file": str(snapshot.path),
                    "snapshot_repositories": document.scope.repository_names,
                    "snapshot_since": document.scope.report_since_date.isoformat(),
                    "snapshot_until": document.scope.report_until_date.isoformat(),
                }
            )

    if data_store is None:
        if miner is None:
            miner = GitHubMiner(
                access_token=resolve_access_token(access_token),
                per_page=settings.per_page,
            )
        data_store = miner.mine(scope)
        if snapshot is not None:
            snapshot.save(data_store, scope)

    render_report(report_format, data_store, scope, buffer)
    return data_store


def _snapshot_path(value: Optional[str]) -> Optional[str]:
    if not value or os.path.isabs(value):
        return value
    return os.path.join(settings.data_dir, value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Report GitHub issues and pull requests closed within a date window"
    )
    parser.add_argument("--since", required=True, help="First day, YYYY-MM-DD (inclusive)")
    parser.add_argument("--until", required=True, help="End day, YYYY-MM-DD (exclusive)")
    parser.add_argument(
        "--repo",
        dest="repos",
        action="append",
        help="owner/repo to report on; repeatable (defaults to GITHUB_REPO_NAMES)",
    )
    parser.add_argument(
        "--label",
        dest="labels",
        action="append",
        help="Label reported as a true/empty column; repeatable (defaults to REPORT_LABELS)",
    )
    parser.add_argument(
        "--format",
        dest="report_format",
        default=ReportFormat.CSV.value,
        choices=[report_format.value for report_format in ReportFormat],
        help="Report format",
    )
    parser.add_argument("--output", help="Report file (defaults to standard output)")
    parser.add_argument(
        "--data-store",
        help="Snapshot file, relative paths resolve inside DATA_DIR; "
        "rendered from when present, written after mining otherwise",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (defaults to LOG_LEVEL)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_level:
        logger.setLevel(getattr(logging, args.log_level))

    report = io.StringIO()
    try:
        run(
            since_date=args.since,
            until_date=args.until,
            repos=args.repos or settings.repository_names,
            buffer=report,
            labels=args.labels if args.labels is not None else settings.labels_to_report,
            report_format=ReportFormat(args.report_format),
            data_store_path=_snapshot_path(args.data_store),
        )
    except KeyboardInterrupt:
        return 130
    except ConfigurationError as e:
        logger.error({"message": "Invalid configuration", "error": str(e)})
        return 2
    except Exception as e:
        logger.exception({"message": "Report run failed", "error": str(e)})
        return 1

    if args.output:
        with open(args.output, "w", encoding="utf-8", newline="") as f:
            f.write(report.getvalue())
        logger.info({"message": "Report written", "file": args.output})
    else:
        sys.stdout.write(report.getvalue())
    logger.info("application finished")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
