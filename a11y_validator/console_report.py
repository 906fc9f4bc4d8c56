"""
Plain text report of validation results
"""

from typing import Any, Dict, List

from a11y_validator.models import PageResult
from a11y_validator.results import count_occurrences, violations_count, warnings_count

LINE = '-' * 80


def _node_lines(nodes: List[Dict[str, Any]]) -> List[str]:
    lines = []
    for node in nodes:
        lines.append(f"\tHTML Element: {node.get('html', '')}")
        for number, check in enumerate(node.get('any') or [], start=1):
            lines.append(f"\tMessage {number}: {check.get('message', '')}")
        for target in node.get('target') or []:
            lines.append(f"\tDOM Element: {target}")
        lines.append('')
    return lines


def _section(rules: List[Dict[str, Any]], url: str, violation: bool, detailed: bool) -> List[str]:
    caption = 'violation' if violation else 'warning'
    captions = caption + 's'
    lines = [LINE]

    if not rules:
        lines.append(f"No {captions} found on: {url}")
        lines.append(LINE)
        return lines

    occurrences = count_occurrences(rules)
    if occurrences == 1:
        lines.append(f"There is one {caption} on URL: {url}")
    else:
        lines.append(f"There are {occurrences} {captions} on URL: {url}")
    lines.append('')

    for rule in rules:
        nodes = rule.get('nodes') or []
        if len(nodes) == 1:
            lines.append(f"    - 1 instance of the following {caption} type: {rule.get('id')}")
        else:
            lines.append(f"    - {len(nodes)} instances of the following {caption} type: {rule.get('id')}")
        if detailed:
            lines.extend(_node_lines(nodes))

    lines.append('')
    lines.append(f"End of {captions} on: {url}")
    lines.append(LINE)
    return lines


def render_page(page: PageResult, detailed: bool = False) -> str:
    lines = ['', f"Page: {page.name}"]
    if violations_count(page) or warnings_count(page):
        lines.append('Report:')
        lines.extend(_section(page.result.violations, page.name, True, detailed))
        lines.append('')
        lines.extend(_section(page.result.incomplete, page.name, False, detailed))
    else:
        lines.append('No errors.')
    return '\n'.join(lines)


def render(results: List[PageResult], detailed: bool = False) -> str:
    """Render every page; detailed adds per-node HTML, messages and targets"""
    return '\n'.join(render_page(page, detailed) for page in results)
