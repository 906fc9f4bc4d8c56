"""
HTML report generator
"""

from pathlib import Path
from typing import List, Dict, Any
from jinja2 import Template
import logging

from a11y_validator.models import PageResult

logger = logging.getLogger(__name__)


class ReportGenerator:
    """Generates an HTML report of the violations found on each page"""

    def __init__(self, output_dir: str):
        """
        Initialize report generator

        Args:
            output_dir: Directory to save reports
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def generate_report(self, name: str, results: List[PageResult]) -> Path:
        """
        Generate the HTML report

        Args:
            name: Report name, used as <name>-report.html
            results: Validation results

        Returns:
            Path to generated HTML file
        """
        template_data = {
            'name': name,
            'pages': self.page_list(results),
            'total_pages': len(results),
        }
        html_content = self._render_template(template_data)

        filepath = self.output_dir / f"{self._sanitize_name(name)}-report.html"
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(html_content)

        logger.info(f"Generated HTML report: {filepath}")
        return filepath

    def page_list(self, results: List[PageResult]) -> List[Dict[str, Any]]:
        """Pages with at least one violation, shaped for the template"""
        pages = []
        for page in results:
            if not page.result.violations:
                continue
            violations = []
            for index, rule in enumerate(page.result.violations):
                nodes = rule.get('nodes') or []
                violations.append({
                    'index': index,
                    'impact': rule.get('impact'),
                    'help': rule.get('help', ''),
                    'help_url': rule.get('helpUrl', ''),
                    'best_practice': 'best-practice' in (rule.get('tags') or []),
                    'count': len(nodes),
                    'reasons': [self._reasons(node) for node in nodes],
                })
            pages.append({'name': page.name, 'violations': violations})
        return pages

    @staticmethod
    def _reasons(node: Dict[str, Any]) -> Dict[str, Any]:
        """Split a node's checks into 'fix any' and 'fix all' groups"""
        def messages(checks):
            return [
                {
                    'message': check.get('message', ''),
                    'related': [' '.join(related.get('target') or []) for related in check.get('relatedNodes') or []],
                }
                for check in checks
            ]
        return {
            'target': ' '.join(str(t) for t in node.get('target') or []),
            'any': messages(node.get('any') or []),
            'all': messages((node.get('all') or []) + (node.get('none') or [])),
        }

    def _sanitize_name(self, name: str) -> str:
        """Make a report name safe for use as a file name"""
        sanitized = name.replace(':', '_').replace('/', '_').replace('\\', '_').replace(' ', '_')
        while '__' in sanitized:
            sanitized = sanitized.replace('__', '_')
        return sanitized.strip('_') or 'a11y'

    def _render_template(self, data: Dict[str, Any]) -> str:
        """Render HTML template"""
        template = Template(REPORT_TEMPLATE, autoescape=True)
        return template.render(**data)


REPORT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Accessibility Report - {{ name }}</title>
    <style>
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            line-height: 1.6;
            color: #333;
            background: #f5f5f5;
            padding: 20px;
        }
        .container {
            max-width: 1200px;
            margin: 0 auto;
            background: white;
            padding: 30px;
            box-shadow: 0 2px 10px rgba(0,0,0,0.1);
        }
        h1 {
            color: #2c3e50;
            border-bottom: 3px solid #3498db;
            padding-bottom: 10px;
        }
        table {
            width: 100%;
            border-collapse: collapse;
            margin-top: 20px;
        }
        th, td {
            padding: 12px;
            text-align: left;
            border-bottom: 1px solid #ddd;
            vertical-align: top;
        }
        th { background: #34495e; color: white; }
        .impact-critical, .impact-serious { color: #c0392b; font-weight: bold; }
        .impact-moderate { color: #d35400; }
        .impact-minor { color: #7f8c8d; }
        .error-title { font-size: 14px; margin-top: 8px; }
        .no-issues { color: #27ae60; }
    </style>
</head>
<body>
<main class="container">
    <h1>Accessibility Report - {{ name }}</h1>
    <p>{{ total_pages }} page(s) validated, {{ pages|length }} with violations.</p>
    <section id="reportSection">
    {% if not pages %}
        <p class="no-issues">No accessibility violations found.</p>
    {% endif %}
    {% for page in pages %}
        <h2>{{ page.name }}</h2>
        <table>
            <thead>
                <tr><th>#</th><th>Description</th><th>Impact</th><th>Count</th><th>Details</th></tr>
            </thead>
            <tbody>
            {% for rule in page.violations %}
                <tr>
                    <td>{{ rule.index + 1 }}</td>
                    <td>
                        <a href="{{ rule.help_url }}" target="_blank" rel="noopener">{{ rule.help }}</a>
                        {% if rule.best_practice %}<br><em>Best practice</em>{% endif %}
                    </td>
                    <td class="impact-{{ rule.impact }}">{{ rule.impact }}</td>
                    <td>{{ rule.count }}</td>
                    <td>
                    {% for reason in rule.reasons %}
                        <p><code>{{ reason.target }}</code></p>
                        {% if reason.any %}
                        <h3 class="error-title">Fix any of the following</h3>
                        <ul>
                        {% for item in reason.any %}
                            <li>{{ item.message }}{% for related in item.related %}<br><code>{{ related }}</code>{% endfor %}</li>
                        {% endfor %}
                        </ul>
                        {% endif %}
                        {% if reason.all %}
                        <h3 class="error-title">Fix all of the following</h3>
                        <ul>
                        {% for item in reason.all %}
                            <li>{{ item.message }}{% for related in item.related %}<br><code>{{ related }}</code>{% endfor %}</li>
                        {% endfor %}
                        </ul>
                        {% endif %}
                    {% endfor %}
                    </td>
                </tr>
            {% endfor %}
            </tbody>
        </table>
    {% endfor %}
    </section>
</main>
</body>
</html>
"""
