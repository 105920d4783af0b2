#!/usr/bin/env python3
"""
cronscan.py

Extracts schedule definitions from hand-maintained Pipeline Engine scheduler
files (``def cron_HH_MM_am_PE():`` functions registering pipelines).
"""

from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from croniter import croniter


DEFAULT_CONFIG = "cronscan.yaml"
DEFAULT_SOURCE = "scheduler.py"
DEFAULT_TIMEZONE = "America/Lima"
DEFAULT_PREVIEW_COUNT = 5
DEFAULT_OUTPUT_FORMAT = "json"
SOURCE_ENCODING = "utf-8"
LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"

FREQUENCY_DAILY = "daily"
FREQUENCY_WEEKLY = "weekly"
FREQUENCY_MONTHLY = "monthly"
VALID_FREQUENCIES = (FREQUENCY_DAILY, FREQUENCY_WEEKLY, FREQUENCY_MONTHLY)
VALID_OUTPUT_FORMATS = {"json", "yaml"}

LABEL_SUFFIXES = {
    FREQUENCY_DAILY: "Diario",
    FREQUENCY_WEEKLY: "Semanal",
    FREQUENCY_MONTHLY: "Mensual",
}

DAY_NAME_TO_CRON = {
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
    "sun": 0,
    "mon": 1,
    "tue": 2,
    "wed": 3,
    "thu": 4,
    "fri": 5,
    "sat": 6,
    "domingo": 0,
    "lunes": 1,
    "martes": 2,
    "miercoles": 3,
    "miércoles": 3,
    "jueves": 4,
    "viernes": 5,
    "sabado": 6,
    "sábado": 6,
}
CRON_TO_DAY_NAME = {
    0: "Sunday",
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
}

# Document layout. Each pattern backs exactly one extraction layer.
BLOCK_ANCHOR_RE = re.compile(r"def\s+cron_")
BLOCK_SPLIT_RE = re.compile(r"(?=def\s+cron_)")
FUNCTION_NAME_RE = re.compile(r"def\s+(cron_\w+)\s*\(")
TIME_SUFFIX_RE = re.compile(r"cron_([0-9]{2})_([0-9]{2})_(am|pm)_PE", re.IGNORECASE)
DAILY_CALL_RE = re.compile(r"add_ppls_to_cron\s*\(\s*ppl_ids\s*=\s*\[([\s\S]*?)\]\s*\)")
WEEKLY_CALL_RE = re.compile(
    r"day_of_every_week\s*\(\s*(?:day\s*=\s*)?\[([^\]]+)\]\s*,\s*"
    r"(?:method\s*=\s*)?add_ppls_to_cron\s*,\s*args\s*=\s*\[([\s\S]*?)\]\s*\)",
    re.IGNORECASE,
)
MONTHLY_CALL_RE = re.compile(
    r"day_of_every_month\s*\(\s*(?:day\s*=\s*)?\[([^\]]+)\]\s*,\s*"
    r"(?:method\s*=\s*)?add_ppls_to_cron\s*,\s*args\s*=\s*\[([\s\S]*?)\]\s*\)",
    re.IGNORECASE,
)
ENTRY_RE = re.compile(
    r'"([0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})"'
    r"\s*,?\s*#\s*\[([^\]]+)\]\s*(?:pipeline\s+de\s+)?(.+)",
    re.IGNORECASE,
)
TRAILING_COMMA_RE = re.compile(r",\s*$")


class CronscanError(Exception):
    """Base error for cronscan."""


class ConfigError(CronscanError):
    """Config validation error."""


class ConversionError(CronscanError):
    """A parsed schedule cannot be expressed as a cron expression."""


logger = logging.getLogger("cronscan")
UTC = timezone.utc


def setup_logging(level: int = logging.INFO, log_file: Optional[Path] = None) -> logging.Logger:
    logger.setLevel(level)
    if logger.handlers:
        return logger
    formatter = logging.Formatter(LOG_FORMAT)
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    return logger


@dataclass(frozen=True)
class ScheduleTarget:
    pipeline_id: str
    client_name: str
    pipeline_name: str

    def to_payload(self) -> Dict[str, str]:
        return {
            "pipelineId": self.pipeline_id,
            "clientName": self.client_name,
            "pipelineName": self.pipeline_name,
        }


@dataclass(frozen=True)
class ParsedSchedule:
    label: str
    time_of_day: str
    frequency_type: str
    targets: Tuple[ScheduleTarget, ...]
    days_of_week: Optional[str] = None
    days_of_month: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "label": self.label,
            "timeOfDay": self.time_of_day,
            "frequencyType": self.frequency_type,
        }
        if self.days_of_week is not None:
            payload["daysOfWeek"] = self.days_of_week
        if self.days_of_month is not None:
            payload["daysOfMonth"] = self.days_of_month
        payload["targets"] = [target.to_payload() for target in self.targets]
        return payload


@dataclass(frozen=True)
class BlockHeader:
    function_name: str
    time_of_day: str


@dataclass(frozen=True)
class ScheduleSummary:
    schedule_count: int
    target_count: int
    unique_pipeline_count: int
    frequency_counts: Dict[str, int] = field(default_factory=dict)
    clients: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CronscanConfig:
    source: Path
    timezone_name: str
    preview_count: int
    output_format: str


def segment_document(text: str) -> List[str]:
    """Split a scheduler document into one block per ``def cron_...`` declaration.

    Text before the first declaration is dropped.
    """
    return [chunk for chunk in BLOCK_SPLIT_RE.split(text) if BLOCK_ANCHOR_RE.match(chunk)]


def decode_time_suffix(function_name: str) -> Optional[str]:
    """Return the 24-hour ``HH:MM`` encoded in a ``cron_HH_MM_am|pm_PE`` name.

    ``12 am`` maps to hour 0 and ``12 pm`` stays 12. Names that do not carry
    the suffix, or carry an hour above 12 or a minute above 59, yield None.
    """
    match = TIME_SUFFIX_RE.search(function_name)
    if not match:
        return None
    hour = int(match.group(1))
    minute_text = match.group(2)
    meridiem = match.group(3).lower()
    if hour > 12 or int(minute_text) > 59:
        return None

    if meridiem == "pm" and hour != 12:
        hour += 12
    elif meridiem == "am" and hour == 12:
        hour = 0
    return f"{hour:02d}:{minute_text}"


def analyze_header(block: str) -> Optional[BlockHeader]:
    name_match = FUNCTION_NAME_RE.search(block)
    if not name_match:
        return None
    function_name = name_match.group(1)
    time_of_day = decode_time_suffix(function_name)
    if time_of_day is None:
        logger.debug("Skipping %s: name does not encode a cron time.", function_name)
        return None
    return BlockHeader(function_name=function_name, time_of_day=time_of_day)


def extract_daily_block(block: str) -> Optional[str]:
    """Raw text of the ``ppl_ids`` list passed to ``add_ppls_to_cron``, if any."""
    match = DAILY_CALL_RE.search(block)
    if not match:
        return None
    return match.group(1)


def _extract_wrapped_calls(pattern: re.Pattern[str], block: str) -> List[Tuple[str, str]]:
    # Entries lists may hold one level of brackets (the ``[Client]`` comment tags).
    return [(match.group(1), match.group(2)) for match in pattern.finditer(block)]


def extract_weekly_blocks(block: str) -> List[Tuple[str, str]]:
    """``(days_text, entries_text)`` for every ``day_of_every_week`` call, in order."""
    return _extract_wrapped_calls(WEEKLY_CALL_RE, block)


def extract_monthly_blocks(block: str) -> List[Tuple[str, str]]:
    """``(days_text, entries_text)`` for every ``day_of_every_month`` call, in order."""
    return _extract_wrapped_calls(MONTHLY_CALL_RE, block)


def _is_commented_out(text: str, position: int) -> bool:
    line_start = text.rfind("\n", 0, position) + 1
    return "#" in text[line_start:position]


def extract_entries(entries_text: str) -> List[ScheduleTarget]:
    """Decode ``"<uuid>",  # [Client] pipeline de <name>`` lines into targets.

    An entry is ignored when a ``#`` precedes it on its own line. The check
    does not know about string literals, so a ``#`` inside an earlier quoted
    value on the same line also hides the entry.
    """
    targets: List[ScheduleTarget] = []
    for match in ENTRY_RE.finditer(entries_text):
        if _is_commented_out(entries_text, match.start()):
            logger.debug("Skipping commented-out entry %s.", match.group(1))
            continue
        client_name = match.group(2).strip()
        pipeline_name = TRAILING_COMMA_RE.sub("", match.group(3).strip()).strip()
        if not client_name or not pipeline_name:
            logger.debug("Skipping entry %s: empty client or pipeline name.", match.group(1))
            continue
        targets.append(
            ScheduleTarget(
                pipeline_id=match.group(1),
                client_name=client_name,
                pipeline_name=pipeline_name,
            )
        )
    return targets


def schedule_label(time_of_day: str, frequency_type: str, days_text: Optional[str] = None) -> str:
    label = f"Cron {time_of_day} PE - {LABEL_SUFFIXES[frequency_type]}"
    if days_text is not None:
        label += f" ({days_text})"
    return label


def assemble_block(block: str) -> List[ParsedSchedule]:
    """Schedules declared by one block: daily first, then weekly, then monthly."""
    header = analyze_header(block)
    if header is None:
        return []

    time_of_day = header.time_of_day
    schedules: List[ParsedSchedule] = []

    daily_text = extract_daily_block(block)
    if daily_text is not None:
        targets = extract_entries(daily_text)
        if targets:
            schedules.append(
                ParsedSchedule(
                    label=schedule_label(time_of_day, FREQUENCY_DAILY),
                    time_of_day=time_of_day,
                    frequency_type=FREQUENCY_DAILY,
                    targets=tuple(targets),
                )
            )
        else:
            logger.debug("%s: daily registration has no usable entries.", header.function_name)

    for days_text, entries_text in extract_weekly_blocks(block):
        targets = extract_entries(entries_text)
        days = days_text.strip()
        if not targets:
            logger.debug("%s: weekly call (%s) has no usable entries.", header.function_name, days)
            continue
        schedules.append(
            ParsedSchedule(
                label=schedule_label(time_of_day, FREQUENCY_WEEKLY, days),
                time_of_day=time_of_day,
                frequency_type=FREQUENCY_WEEKLY,
                targets=tuple(targets),
                days_of_week=days,
            )
        )

    for days_text, entries_text in extract_monthly_blocks(block):
        targets = extract_entries(entries_text)
        days = days_text.strip()
        if not targets:
            logger.debug("%s: monthly call (%s) has no usable entries.", header.function_name, days)
            continue
        schedules.append(
            ParsedSchedule(
                label=schedule_label(time_of_day, FREQUENCY_MONTHLY, days),
                time_of_day=time_of_day,
                frequency_type=FREQUENCY_MONTHLY,
                targets=tuple(targets),
                days_of_month=days,
            )
        )

    if not schedules:
        logger.debug("%s: no schedules registered.", header.function_name)
    return schedules


def parse(document_text: str) -> List[ParsedSchedule]:
    """Parse a scheduler document. Malformed content yields fewer schedules, never an error."""
    schedules: List[ParsedSchedule] = []
    blocks = segment_document(document_text)
    for block in blocks:
        schedules.extend(assemble_block(block))
    logger.debug("Parsed %s schedule(s) from %s cron block(s).", len(schedules), len(blocks))
    return schedules


def parse_from_path(path: Union[str, Path]) -> List[ParsedSchedule]:
    """Read ``path`` as UTF-8 and parse it. Read errors propagate unchanged."""
    content = Path(path).read_text(encoding=SOURCE_ENCODING)
    return parse(content)


def summarize(schedules: List[ParsedSchedule]) -> ScheduleSummary:
    frequency_counts = {frequency: 0 for frequency in VALID_FREQUENCIES}
    pipeline_ids = set()
    clients = set()
    target_count = 0
    for schedule in schedules:
        frequency_counts[schedule.frequency_type] += 1
        target_count += len(schedule.targets)
        for target in schedule.targets:
            pipeline_ids.add(target.pipeline_id.lower())
            clients.add(target.client_name)
    return ScheduleSummary(
        schedule_count=len(schedules),
        target_count=target_count,
        unique_pipeline_count=len(pipeline_ids),
        frequency_counts=frequency_counts,
        clients=tuple(sorted(clients)),
    )


def _split_day_tokens(days_text: str) -> List[str]:
    tokens = [token.strip().strip("\"'").strip() for token in days_text.split(",")]
    return [token for token in tokens if token]


def normalize_weekday_token(token: str) -> int:
    tok = token.strip().lower()
    if tok in DAY_NAME_TO_CRON:
        return DAY_NAME_TO_CRON[tok]
    if tok.isdigit():
        num = int(tok)
        if num == 7:
            return 0
        if 0 <= num <= 6:
            return num
    raise ConversionError(f'Invalid weekday "{token}".')


def parse_days_of_week(days_text: str) -> List[int]:
    tokens = _split_day_tokens(days_text)
    if not tokens:
        raise ConversionError("Weekday selector is empty.")
    return sorted({normalize_weekday_token(token) for token in tokens})


def parse_days_of_month(days_text: str) -> List[int]:
    tokens = _split_day_tokens(days_text)
    if not tokens:
        raise ConversionError("Day-of-month selector is empty.")
    days = set()
    for token in tokens:
        if not token.isdigit() or not 1 <= int(token) <= 31:
            raise ConversionError(f'Invalid day of month "{token}".')
        days.add(int(token))
    return sorted(days)


def _split_time(time_of_day: str) -> Tuple[int, int]:
    hour_text, minute_text = time_of_day.split(":", 1)
    return int(hour_text), int(minute_text)


def compile_cron(schedule: ParsedSchedule) -> str:
    hour, minute = _split_time(schedule.time_of_day)
    if schedule.frequency_type == FREQUENCY_DAILY:
        return f"{minute} {hour} * * *"
    if schedule.frequency_type == FREQUENCY_WEEKLY:
        dow = ",".join(str(day) for day in parse_days_of_week(schedule.days_of_week or ""))
        return f"{minute} {hour} * * {dow}"
    if schedule.frequency_type == FREQUENCY_MONTHLY:
        dom = ",".join(str(day) for day in parse_days_of_month(schedule.days_of_month or ""))
        return f"{minute} {hour} {dom} * *"
    raise ConversionError(f'Unsupported frequency "{schedule.frequency_type}".')


def describe_schedule(schedule: ParsedSchedule, timezone_name: str) -> str:
    if schedule.frequency_type == FREQUENCY_WEEKLY:
        try:
            days = ", ".join(CRON_TO_DAY_NAME[day] for day in parse_days_of_week(schedule.days_of_week or ""))
        except ConversionError:
            days = schedule.days_of_week
        return f"Runs every {days} at {schedule.time_of_day} ({timezone_name})"
    if schedule.frequency_type == FREQUENCY_MONTHLY:
        return f"Runs monthly on day(s) {schedule.days_of_month} at {schedule.time_of_day} ({timezone_name})"
    return f"Runs daily at {schedule.time_of_day} ({timezone_name})"


def parse_timezone(name: str, field_path: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f'Error: Invalid timezone "{name}" at {field_path}.') from exc


def _ensure_aware_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def next_run_times(
    schedule: ParsedSchedule,
    count: int,
    timezone_name: str,
    now_utc: Optional[datetime] = None,
) -> List[datetime]:
    cron_expr = compile_cron(schedule)
    tz = parse_timezone(timezone_name, "timezone")
    now = _ensure_aware_utc(now_utc or datetime.now(tz=UTC))
    iterator = croniter(cron_expr, now.astimezone(tz))
    runs: List[datetime] = []
    seen_local_slots: Set[str] = set()
    while len(runs) < count:
        nxt = iterator.get_next(datetime)
        if nxt.tzinfo is None:
            nxt = nxt.replace(tzinfo=tz)
        # A wall-clock slot repeated by a DST fall-back runs once.
        slot_key = nxt.astimezone(tz).strftime("%Y-%m-%d %H:%M")
        if slot_key in seen_local_slots:
            continue
        seen_local_slots.add(slot_key)
        runs.append(nxt.astimezone(UTC))
    return runs


def default_config(base_dir: Path) -> CronscanConfig:
    return CronscanConfig(
        source=(base_dir / DEFAULT_SOURCE).resolve(),
        timezone_name=DEFAULT_TIMEZONE,
        preview_count=DEFAULT_PREVIEW_COUNT,
        output_format=DEFAULT_OUTPUT_FORMAT,
    )


def _load_config_payload(config_path: Path) -> Dict[str, Any]:
    try:
        payload = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Error: Failed to parse YAML in {config_path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError("Error: Top-level config must be a mapping.")
    return payload


def load_config(config_path: Path, explicit: bool = False) -> CronscanConfig:
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Error: Config file not found: {config_path}")
        logger.debug("No config at %s; using defaults.", config_path)
        return default_config(config_path.parent)

    payload = _load_config_payload(config_path)
    unknown = set(payload.keys()) - {"source", "timezone", "preview_count", "output_format"}
    if unknown:
        raise ConfigError(f"Error: Unknown top-level keys: {sorted(unknown)}.")

    source_raw = payload.get("source", DEFAULT_SOURCE)
    if not isinstance(source_raw, str) or not source_raw.strip():
        raise ConfigError("Error: source must be a non-empty path string.")
    source = Path(source_raw.strip())
    if not source.is_absolute():
        source = (config_path.parent / source).resolve()

    timezone_name = payload.get("timezone", DEFAULT_TIMEZONE)
    if not isinstance(timezone_name, str):
        raise ConfigError("Error: timezone must be a timezone string.")
    parse_timezone(timezone_name, "timezone")

    preview_count = payload.get("preview_count", DEFAULT_PREVIEW_COUNT)
    if not isinstance(preview_count, int) or isinstance(preview_count, bool):
        raise ConfigError("Error: preview_count must be an integer.")
    if preview_count < 1:
        raise ConfigError("Error: preview_count must be >= 1.")

    output_format = payload.get("output_format", DEFAULT_OUTPUT_FORMAT)
    if not isinstance(output_format, str) or output_format.lower() not in VALID_OUTPUT_FORMATS:
        raise ConfigError(
            f"Error: output_format must be one of {sorted(VALID_OUTPUT_FORMATS)}, got {output_format!r}."
        )

    return CronscanConfig(
        source=source,
        timezone_name=timezone_name,
        preview_count=preview_count,
        output_format=output_format.lower(),
    )


def render_payload(schedules: List[ParsedSchedule], output_format: str) -> str:
    payload = [schedule.to_payload() for schedule in schedules]
    if output_format == "yaml":
        return yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)
    return json.dumps(payload, indent=2, ensure_ascii=False)


def command_parse(source_path: Path, output_format: str) -> int:
    schedules = parse_from_path(source_path)
    logger.info("Parsed %s schedule(s) from %s", len(schedules), source_path)
    print(render_payload(schedules, output_format))
    return 0


def command_summary(source_path: Path) -> int:
    summary = summarize(parse_from_path(source_path))
    print(f"Source: {source_path}")
    print(f"Schedules: {summary.schedule_count}")
    for frequency in VALID_FREQUENCIES:
        print(f"- {frequency}: {summary.frequency_counts.get(frequency, 0)}")
    print(f"Total pipelines: {summary.target_count}")
    print(f"Unique pipelines: {summary.unique_pipeline_count}")
    print(f"Clients: {', '.join(summary.clients) if summary.clients else '(none)'}")
    return 0


def command_preview(source_path: Path, timezone_name: str, count: int) -> int:
    tz = parse_timezone(timezone_name, "--timezone")
    schedules = parse_from_path(source_path)
    now_utc = datetime.now(tz=UTC)

    for schedule in schedules:
        print("=" * 80)
        print(f"Schedule: {schedule.label}")
        print(describe_schedule(schedule, timezone_name))
        try:
            cron_expr = compile_cron(schedule)
        except ConversionError as exc:
            print(f"Cron equivalent: unavailable ({exc})")
            cron_expr = None
        else:
            print(f"Cron equivalent: {cron_expr}")
        print("Pipelines:")
        for target in schedule.targets:
            print(f"- {target.pipeline_id} | [{target.client_name}] {target.pipeline_name}")
        if cron_expr is None:
            continue
        print(f"Next {count} run(s):")
        for run_dt in next_run_times(schedule, count, timezone_name, now_utc=now_utc):
            print(f"- {run_dt.astimezone(tz).isoformat()}")
    print("=" * 80)
    return 0


def command_export_cron(source_path: Path, timezone_name: str) -> int:
    parse_timezone(timezone_name, "--timezone")
    schedules = parse_from_path(source_path)

    print("# cronscan cron export")
    print(f"# source={source_path}")
    print(f"# generated_at={datetime.now(tz=UTC).isoformat()}")
    print(f"CRON_TZ={timezone_name}")
    for schedule in schedules:
        print("")
        print(f"# {schedule.label}")
        for target in schedule.targets:
            print(f"# - {target.pipeline_id} [{target.client_name}] {target.pipeline_name}")
        try:
            print(compile_cron(schedule))
        except ConversionError as exc:
            logger.warning("Cannot export %s: %s", schedule.label, exc)
            print(f"# no cron equivalent: {exc}")
    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="cronscan: extract schedules from Pipeline Engine scheduler files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        help=f"Path to cronscan YAML config (default: {DEFAULT_CONFIG} if present)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log skipped blocks and entries")
    parser.add_argument("--log-file", help="Also write log records to this file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_parser = subparsers.add_parser("parse", help="Print parsed schedules")
    parse_parser.add_argument("source", nargs="?", help=f"Scheduler file (default: {DEFAULT_SOURCE})")
    parse_parser.add_argument("--format", choices=sorted(VALID_OUTPUT_FORMATS), help="Output format")

    summary_parser = subparsers.add_parser("summary", help="Show schedule and pipeline counts")
    summary_parser.add_argument("source", nargs="?", help=f"Scheduler file (default: {DEFAULT_SOURCE})")

    preview_parser = subparsers.add_parser("preview", help="Show friendly schedule preview")
    preview_parser.add_argument("source", nargs="?", help=f"Scheduler file (default: {DEFAULT_SOURCE})")
    preview_parser.add_argument("--count", type=int, help="Next run count")
    preview_parser.add_argument("--timezone", help=f"IANA timezone (default: {DEFAULT_TIMEZONE})")

    export_parser = subparsers.add_parser("export-cron", help="Export cron-compatible schedules")
    export_parser.add_argument("source", nargs="?", help=f"Scheduler file (default: {DEFAULT_SOURCE})")
    export_parser.add_argument("--timezone", help=f"IANA timezone (default: {DEFAULT_TIMEZONE})")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        try:
            setup_logging(
                logging.DEBUG if args.verbose else logging.INFO,
                Path(args.log_file) if args.log_file else None,
            )
        except OSError as exc:
            raise CronscanError(f"Error: Cannot open log file {args.log_file}: {exc}") from exc

        config = load_config(
            Path(args.config or DEFAULT_CONFIG).resolve(),
            explicit=bool(args.config),
        )
        source_path = Path(args.source).resolve() if args.source else config.source
        timezone_name = getattr(args, "timezone", None) or config.timezone_name

        if args.command == "parse":
            return command_parse(source_path, args.format or config.output_format)
        if args.command == "summary":
            return command_summary(source_path)
        if args.command == "preview":
            count = args.count if args.count is not None else config.preview_count
            if count <= 0:
                raise CronscanError("--count must be >= 1")
            return command_preview(source_path, timezone_name, count)
        if args.command == "export-cron":
            return command_export_cron(source_path, timezone_name)
        raise CronscanError(f"Unsupported command: {args.command}")
    except CronscanError as exc:
        logger.error(str(exc))
        return 1
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Error: Could not read scheduler file: %s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
