"""
Command line entry point: audit the site described by a snapshot file.
"""
import argparse
import asyncio
import sys

import uvicorn

from site_inspector.config import settings
from site_inspector.schemas.report import ReportResponse
from site_inspector.services.environment import SnapshotEnvironment
from site_inspector.services.report_service import ReportService
from site_inspector.services.scoring.engine import AuditReport

STATUS_MARKS = {"pass": "PASS", "warning": "WARN", "fail": "FAIL"}


def format_report(report: AuditReport) -> str:
    classes = report.scores.classes()
    lines = [
        f"Site: {report.site_url}",
        f"Overall: {report.scores.overall} ({classes['overall']})",
    ]
    for key, results in (("performance", report.performance), ("security", report.security)):
        lines.append("")
        lines.append(f"{key.capitalize()}: {getattr(report.scores, key)} ({classes[key]})")
        for result in results:
            lines.append(f"  [{STATUS_MARKS[result.status.value]}] {result.title}: {result.message}")
            if result.fix:
                lines.append(f"         Fix: {result.fix}")
    return "\n".join(lines)


async def _run(snapshot_path: str) -> AuditReport:
    env = SnapshotEnvironment.from_file(snapshot_path)
    return await ReportService(env, settings=settings).generate()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="site-inspector", description="Audit site performance and security.")
    parser.add_argument("--snapshot", default=settings.SITE_SNAPSHOT_PATH, help="Environment snapshot JSON file")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    args = parser.parse_args(argv)

    try:
        report = asyncio.run(_run(args.snapshot))
    except FileNotFoundError:
        print(f"Snapshot not found: {args.snapshot}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"Invalid snapshot {args.snapshot}: {e}", file=sys.stderr)
        return 2

    if args.json:
        print(ReportResponse.from_report(report).model_dump_json(indent=2))
    else:
        print(format_report(report))
    return 0


def serve(argv=None) -> None:
    """Serve the report API."""
    parser = argparse.ArgumentParser(prog="site-inspector-serve", description="Serve the site audit API.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args(argv)

    uvicorn.run(
        "site_inspector.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    sys.exit(main())
