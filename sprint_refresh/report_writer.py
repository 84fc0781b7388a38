"""
In-place update of the static sprint report (index.html).

The report embeds a JavaScript object keyed by sprint name:

    'Sprint 12': {
        sprintPoints: [ { name: ..., points: ..., stories: ..., focus: ..., progress: ... } ],
        devStories: { 'Dan Morris': [ { id: ..., title: ..., points: ..., state: ..., type: ... } ] }
    }

plus a "Last data refresh" marker. Only the sprint's value and the marker
text are rewritten; every other byte of the document is left alone.
"""
import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import ReportBlockNotFound, ReportRefreshError
from .models import SprintReport

logger = logging.getLogger(__name__)

INDENT = '    '

MONTH_NAMES = (
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
)

_SPRINT_POINTS_FIELD = re.compile(r'''(?<![\w$])['"]?sprintPoints['"]?\s*:''')
_DEV_STORIES_FIELD = re.compile(r'''(?<![\w$])['"]?devStories['"]?\s*:''')
_TIMESTAMP_PATTERN = re.compile(
    r'(Last data refresh: <span id="refreshTimestamp">)[^<]*(</span>)'
)
_JS_ESCAPES = {
    '\\': '\\\\',
    "'": "\\'",
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
    '\u2028': '\\u2028',
    '\u2029': '\\u2029',
}


# ============================================================================
# Serialization
# ============================================================================

def js_string(value: str) -> str:
    """Quote a string as a single-quoted JavaScript literal."""
    escaped = []
    for char in value:
        if char in _JS_ESCAPES:
            escaped.append(_JS_ESCAPES[char])
        elif ord(char) < 0x20:
            escaped.append(f'\\x{ord(char):02x}')
        else:
            escaped.append(char)
    # keep "</script>" in a title from closing the page's script element
    return "'" + ''.join(escaped).replace('</', '<\\/') + "'"


def js_value(value: Any) -> str:
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return js_string(str(value))


def js_record(record: Dict[str, Any]) -> str:
    fields = ', '.join(f'{key}: {js_value(value)}' for key, value in record.items())
    return f'{{ {fields} }}'


def serialize_sprint_block(
    sprint_points: List[Dict[str, Any]],
    dev_stories: Dict[str, List[Dict[str, Any]]],
    indent: str = ''
) -> str:
    """
    Serialize a sprint's report data as a JavaScript object literal.

    Args:
        sprint_points: Developer summary records
        dev_stories: Developer name to item summary records
        indent: Indentation of the line holding the sprint key

    Returns:
        Text from the opening to the closing brace, deterministic for equal input
    """
    inner = indent + INDENT
    row = inner + INDENT

    lines = ['{']
    if sprint_points:
        lines.append(f'{inner}sprintPoints: [')
        lines.append(',\n'.join(row + js_record(record) for record in sprint_points))
        lines.append(f'{inner}],')
    else:
        lines.append(f'{inner}sprintPoints: [],')

    if dev_stories:
        lines.append(f'{inner}devStories: {{')
        entries = []
        for name, items in dev_stories.items():
            records = ',\n'.join(row + INDENT + js_record(item) for item in items)
            entries.append(f'{row}{js_string(name)}: [\n{records}\n{row}]')
        lines.append(',\n'.join(entries))
        lines.append(f'{inner}}}')
    else:
        lines.append(f'{inner}devStories: {{}}')

    lines.append(f'{indent}}}')
    return '\n'.join(lines)


# ============================================================================
# Block location
# ============================================================================

def find_closing_brace(text: str, open_index: int) -> Optional[int]:
    """
    Find the brace closing the one at `open_index`.

    Braces inside quoted strings are skipped. Returns None when unbalanced.
    """
    depth = 0
    quote = None
    index = open_index
    while index < len(text):
        char = text[index]
        if quote:
            if char == '\\':
                index += 1
            elif char == quote:
                quote = None
        elif char in ('"', "'", '`'):
            quote = char
        elif char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return None


def find_sprint_block(document: str, sprint_name: str) -> Optional[Tuple[int, int]]:
    """
    Locate the value of a sprint's entry in the report.

    The key may be single- or double-quoted; the value must be an object
    holding both sprintPoints and devStories.

    Returns:
        (start, end) span of the value, braces included, or None
    """
    keys = (
        re.escape(js_string(sprint_name)),
        re.escape(json.dumps(sprint_name, ensure_ascii=False)),
    )
    key_pattern = re.compile(r'(?:%s|%s)\s*:\s*\{' % keys)

    for match in key_pattern.finditer(document):
        start = match.end() - 1
        end = find_closing_brace(document, start)
        if end is None:
            continue
        value = document[start:end + 1]
        if _SPRINT_POINTS_FIELD.search(value) and _DEV_STORIES_FIELD.search(value):
            return start, end + 1
    return None


def line_indent(document: str, index: int) -> str:
    """Leading whitespace of the line containing `index`."""
    line_start = document.rfind('\n', 0, index) + 1
    return re.match(r'[ \t]*', document[line_start:index]).group(0)


def replace_sprint_block(
    document: str,
    sprint_name: str,
    sprint_points: List[Dict[str, Any]],
    dev_stories: Dict[str, List[Dict[str, Any]]]
) -> str:
    """
    Replace a sprint's block with freshly serialized data.

    Raises:
        ReportBlockNotFound: If the document has no block for the sprint
    """
    span = find_sprint_block(document, sprint_name)
    if span is None:
        raise ReportBlockNotFound(sprint_name)

    start, end = span
    block = serialize_sprint_block(sprint_points, dev_stories, line_indent(document, start))
    return document[:start] + block + document[end:]


# ============================================================================
# Timestamp
# ============================================================================

def format_refresh_timestamp(now: datetime) -> str:
    """
    Format the refresh time, e.g. "October 18, 2026, 09:05 AM".

    English month names and a 12-hour clock are used regardless of locale.
    """
    hour = now.hour % 12 or 12
    meridiem = 'AM' if now.hour < 12 else 'PM'
    return (
        f"{MONTH_NAMES[now.month - 1]} {now.day}, {now.year}, "
        f"{hour:02d}:{now.minute:02d} {meridiem}"
    )


def replace_refresh_timestamp(document: str, now: datetime) -> Tuple[str, bool]:
    """
    Replace the text of the "Last data refresh" marker.

    Returns:
        (document, whether the marker was found)
    """
    timestamp = format_refresh_timestamp(now)
    updated, count = _TIMESTAMP_PATTERN.subn(
        lambda m: f"{m.group(1)}{timestamp}{m.group(2)}",
        document,
        count=1
    )
    return updated, count > 0


# ============================================================================
# Writer
# ============================================================================

def local_now() -> datetime:
    return datetime.now().astimezone()


class ReportWriter:
    """Reads, updates and writes back the HTML report"""

    def __init__(self, path, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize report writer

        Args:
            path: Report document path
            clock: Returns the refresh time (default: local time now)
        """
        self.path = Path(path)
        self.clock = clock or local_now

    def read(self) -> str:
        try:
            with open(self.path, encoding='utf-8', newline='') as f:
                return f.read()
        except OSError as e:
            raise ReportRefreshError(
                message=f"Could not read report {self.path}: {e}",
                original_error=e
            )

    def write(self, document: str):
        try:
            with open(self.path, 'w', encoding='utf-8', newline='') as f:
                f.write(document)
        except OSError as e:
            raise ReportRefreshError(
                message=f"Could not write report {self.path}: {e}",
                original_error=e
            )

    def render(self, document: str, report: SprintReport) -> Tuple[str, bool]:
        """
        Apply the sprint block and timestamp updates to a document.

        Returns:
            (updated document, whether the sprint block was replaced)
        """
        sprint_points = [summary.to_dict() for summary in report.sprint_points]
        dev_stories = {
            name: [item.to_dict() for item in items]
            for name, items in report.dev_stories.items()
        }

        block_replaced = True
        try:
            document = replace_sprint_block(document, report.sprint_name, sprint_points, dev_stories)
        except ReportBlockNotFound as e:
            logger.warning(str(e))
            block_replaced = False

        document, marker_found = replace_refresh_timestamp(document, self.clock())
        if not marker_found:
            logger.warning(f"No refresh timestamp marker found in {self.path}")

        return document, block_replaced

    def update(self, report: SprintReport) -> bool:
        """
        Rewrite the report in place for one sprint.

        Returns:
            Whether the sprint block was found and replaced
        """
        document, block_replaced = self.render(self.read(), report)
        self.write(document)
        logger.info(f"Updated HTML file with data for {report.sprint_name}")
        return block_replaced
