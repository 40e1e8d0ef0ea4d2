"""Command-line entry point for the skill tracker"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from skill_tracker.config import DATA_PATH, LOG_LEVEL, validate_config
from skill_tracker.exceptions import SkillTrackerError
from skill_tracker.services.engine import TrackerEngine, create_engine
from skill_tracker.storage.kv_store import FileKeyValueStore

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, level.upper(), logging.INFO)
    )


def _print_json(obj) -> None:
    json.dump(obj, sys.stdout, ensure_ascii=False, indent=2, sort_keys=True, default=str)
    sys.stdout.write("\n")


def cmd_status(engine: TrackerEngine, args: argparse.Namespace) -> int:
    """Print today's summary and per-skill progress"""
    today = engine.clock.today()
    store = engine.completion_store
    _print_json({
        "today": today.isoformat(),
        "summary": store.dashboard_summary(),
        "skills": [
            {
                "name": p.skill_name,
                "visible_today": engine.rollover_engine.should_show_task(p.skill_id, today),
                "current_streak": p.current_streak,
                "longest_streak": p.longest_streak,
                "completion_percentage": round(p.completion_percentage, 1),
            }
            for p in store.get_all_progress()
        ],
        "morning_routine": {
            "completed": engine.morning_routine.completed_count(today),
            "total": len(engine.morning_routine.habits),
        },
        "latest_weight": engine.weight_log.latest_entry().weight if engine.weight_log.latest_entry() else None,
    })
    return 0


def cmd_export(engine: TrackerEngine, args: argparse.Namespace) -> int:
    data = engine.export_snapshot()
    if args.output:
        Path(args.output).write_bytes(data)
        logger.info(f"Exported snapshot to {args.output}")
    else:
        sys.stdout.write(data.decode("utf-8") + "\n")
    return 0


def cmd_import(engine: TrackerEngine, args: argparse.Namespace) -> int:
    data = Path(args.input).read_bytes() if args.input != "-" else sys.stdin.buffer.read()
    snapshot = engine.import_snapshot(data)
    _print_json({
        "ok": True,
        "skills": len(snapshot.skills),
        "daily_completions": len(snapshot.daily_completions),
        "weight_entries": len(snapshot.weight_entries),
    })
    return 0


def cmd_rollover(engine: TrackerEngine, args: argparse.Namespace) -> int:
    rolled = engine.rollover_engine.rollover_incomplete_tasks()
    _print_json({"rolled_over": [str(skill_id) for skill_id in rolled]})
    return 0


def cmd_cleanup_weights(engine: TrackerEngine, args: argparse.Namespace) -> int:
    removed = engine.weight_log.cleanup()
    _print_json({"removed": removed, "remaining": len(engine.weight_log.entries)})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="skill-tracker", description="Habit and skill completion tracker")
    parser.add_argument("--data-path", default=str(DATA_PATH), help="Directory holding persisted state")
    parser.add_argument("--log-level", default=LOG_LEVEL)

    sub = parser.add_subparsers(dest="command", required=True)

    p_status = sub.add_parser("status", help="Show today's progress")
    p_status.set_defaults(func=cmd_status)

    p_export = sub.add_parser("export", help="Export all data as JSON")
    p_export.add_argument("--output", "-o", help="File to write (default: stdout)")
    p_export.set_defaults(func=cmd_export)

    p_import = sub.add_parser("import", help="Replace all data with an exported JSON document")
    p_import.add_argument("input", help="File to read, or - for stdin")
    p_import.set_defaults(func=cmd_import)

    p_rollover = sub.add_parser("rollover", help="Carry today's unfinished rollover-eligible tasks forward")
    p_rollover.set_defaults(func=cmd_rollover)

    p_cleanup = sub.add_parser("cleanup-weights", help="Remove stale or out-of-range weight entries")
    p_cleanup.set_defaults(func=cmd_cleanup_weights)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main application entry point"""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        validate_config()
        engine = create_engine(FileKeyValueStore(Path(args.data_path)))
        return args.func(engine, args)
    except SkillTrackerError as e:
        _print_json({"ok": False, **e.to_dict()})
        return 1


if __name__ == "__main__":
    sys.exit(main())
