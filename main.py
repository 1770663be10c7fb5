"""Main entry point for RemindR daily task reminders."""

import argparse
import logging
import signal
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

import yaml

from remindr.engine import Clock, EngineRun, ReminderEngine
from remindr.models import UpcomingDeadline
from remindr.notifiers import Environment, Notifier, NotifyError, create_notifier
from remindr.reporting import IncompleteTaskError, ReportWriter, build_partial_report, build_report
from remindr.utils import ScheduleFile, format_clock_time, load_schedule, resolve_config, validate_config

logger = logging.getLogger("remindr")

EXIT_OK = 0
EXIT_NO_TASKS = 1
EXIT_BAD_CONFIG = 1
EXIT_INTERNAL_ERROR = 2
EXIT_INTERRUPTED = 130

SAMPLE_SCHEDULE = """\
06:00-07:00 Study physics
07:30-08:00 Workout
DEADLINE 2026-02-28 Midterm Exam"""


def display_schedule(schedule: ScheduleFile, today: date):
    """Print today's tasks and upcoming deadlines."""
    print("📅 Today's Schedule:")
    print("─" * 37)
    for task in schedule.tasks:
        print(f"  {format_clock_time(task.start)}-{format_clock_time(task.deadline)} {task.name}")
    print()

    print("📆 Upcoming Deadlines:")
    print("─" * 37)
    if schedule.deadlines:
        for deadline in schedule.deadlines:
            print(f"  ⏳ {deadline.describe(today)}")
    else:
        print("  (No deadlines)")
    print()


def report_line_errors(schedule: ScheduleFile):
    """List rejected task lines by line number."""
    if not schedule.errors:
        return
    print(f"⚠️  {len(schedule.errors)} line(s) rejected:", file=sys.stderr)
    for error in schedule.errors:
        print(f"  {error}", file=sys.stderr)
    print(file=sys.stderr)


def load_tasks(tasks_path: str) -> Optional[ScheduleFile]:
    """Load the task list, printing why when nothing can be scheduled."""
    try:
        schedule = load_schedule(tasks_path)
    except OSError as e:
        print(f"❌ Error: Could not read '{tasks_path}': {e}", file=sys.stderr)
        print(f"\nCreate '{tasks_path}' with lines like:\n{SAMPLE_SCHEDULE}\n", file=sys.stderr)
        return None

    report_line_errors(schedule)

    if not schedule.tasks:
        print(f"❌ No valid tasks found in {tasks_path}!", file=sys.stderr)
        print("   Make sure tasks are in format: HH:MM-HH:MM Description", file=sys.stderr)
        return None

    return schedule


def alert_deadlines(notifier: Notifier, deadlines: List[UpcomingDeadline], today: date):
    """Remind once about dated deadlines at startup."""
    for deadline in deadlines:
        days = deadline.days_left(today)
        if days >= 0:
            message = f"⏳ Deadline: {deadline.description}\n({days} days left)"
        else:
            message = f"⏳ Deadline: {deadline.description}\n({abs(days)} days overdue!)"
        try:
            notifier.alert(message)
        except NotifyError as e:
            logger.warning("Deadline alert failed: %s", e)


def run_reminders(
    config: dict,
    tasks_path: str,
    notifier: Optional[Notifier] = None,
    clock: Optional[Clock] = None,
) -> int:
    """Monitor today's tasks and write the daily report. Returns the exit code."""
    schedule = load_tasks(tasks_path)
    if schedule is None:
        return EXIT_NO_TASKS

    if notifier is None:
        notifier = create_notifier(config, Environment.detect())
    logger.info("Using %s notifier", notifier.name)

    report_config = config.get('report', {})
    writer = ReportWriter(report_config.get('directory', '.'), report_config.get('write_json', False))

    def checkpoint(run: EngineRun):
        try:
            writer.write(build_partial_report(run.tasks, run.day, deadlines=schedule.deadlines))
        except OSError as e:
            logger.error("Could not save progress: %s", e)

    engine = ReminderEngine(notifier, config, clock=clock, on_resolved=checkpoint)
    today = engine.clock.now().date()

    display_schedule(schedule, today)
    alert_deadlines(notifier, schedule.deadlines, today)

    print("⏰ Monitoring started.")
    print("Press Ctrl+C to stop RemindR\n")

    def handle_interrupt(signum, frame):
        print("\n\n⚠️  RemindR interrupted")
        print("📝 Daily report will still be saved.\n")
        engine.cancel()

    previous_handlers = {}
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            previous_handlers[signum] = signal.signal(signum, handle_interrupt)
        except ValueError:
            # Not the main thread; rely on KeyboardInterrupt.
            pass

    try:
        run = engine.run(schedule.tasks, today)
    finally:
        for signum, handler in previous_handlers.items():
            if handler is not None:
                signal.signal(signum, handler)

    try:
        report = build_report(run.tasks, run.day, deadlines=schedule.deadlines, partial=run.interrupted)
    except IncompleteTaskError as e:
        logger.exception("Report generation failed")
        print(f"❌ Internal error: {e}", file=sys.stderr)
        return EXIT_INTERNAL_ERROR

    try:
        path = writer.write(report)
        print(f"📊 Daily report saved to: {path}")
    except OSError as e:
        print(f"❌ Failed to write report: {e}", file=sys.stderr)

    if run.interrupted:
        return EXIT_INTERRUPTED

    print("\n✅ RemindR ended. Have a great day!\n")
    return EXIT_OK


def run_check(tasks_path: str) -> int:
    """Validate the task list and show the schedule without monitoring."""
    schedule = load_tasks(tasks_path)
    if schedule is None:
        return EXIT_NO_TASKS
    display_schedule(schedule, date.today())
    print(f"{len(schedule.tasks)} task(s) ready.")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="RemindR - Daily Task Reminder"
    )
    parser.add_argument(
        'command',
        choices=['run', 'check'],
        help='Command to run'
    )
    parser.add_argument(
        '--config',
        type=str,
        default='remindr.yaml',
        help='Path to configuration file (default: remindr.yaml)'
    )
    parser.add_argument(
        '--tasks',
        type=str,
        help='Path to the task list (default: schedule.tasks_file from config)'
    )
    parser.add_argument(
        '--notifier',
        type=str,
        choices=['auto', 'graphical', 'terminal'],
        help='Notification backend (default: notifier.backend from config)'
    )
    parser.add_argument(
        '--report-dir',
        type=str,
        help='Directory for daily reports (default: report.directory from config)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging'
    )

    args = parser.parse_args(argv)

    try:
        config = resolve_config(args.config)
        if args.notifier:
            config['notifier']['backend'] = args.notifier
        if args.report_dir:
            config['report']['directory'] = args.report_dir
        validate_config(config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"❌ Invalid configuration: {e}", file=sys.stderr)
        return EXIT_BAD_CONFIG

    level = 'DEBUG' if args.verbose else str(config.get('logging', {}).get('level', 'INFO')).upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    tasks_path = args.tasks or config['schedule']['tasks_file']

    print("📌 RemindR - Daily Task Reminder")
    print("==================================\n")

    if args.command == 'check':
        return run_check(tasks_path)
    return run_reminders(config, str(Path(tasks_path)))


if __name__ == "__main__":
    sys.exit(main())
