"""
Output formatter for CLI commands.

Renders search outcomes, facet counts and query parameters either with
rich (tables and panels) or as plain tabulate/JSON text.
"""

from typing import Any, Dict, List, Optional, Union
import json
from tabulate import tabulate
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text

from ....core.entities import SearchOutcome

RECORD_COLUMNS = ["#", "id", "label", "content_models", "url"]


class OutputFormatter:
    """
    Formatter for CLI command output.

    With ``use_rich`` disabled everything is rendered to plain strings so
    the output can be piped.
    """

    def __init__(self, use_rich: bool = True, console: Optional[Console] = None):
        """
        Initialize the formatter.

        Args:
            use_rich: Whether to use rich formatting
            console: Optional console to print to
        """
        self.use_rich = use_rich
        self.console = console or (Console() if use_rich else None)

    def format_table(
        self,
        data: List[Dict[str, Any]],
        headers: Optional[List[str]] = None,
        title: Optional[str] = None
    ) -> Union[str, Table]:
        """
        Format data as a table.

        Args:
            data: List of dictionaries containing row data
            headers: Optional list of header names
            title: Optional table title

        Returns:
            Union[str, Table]: Rich table or plain text table
        """
        if not data:
            return "No data to display"

        columns = headers or list(data[0].keys())
        if self.use_rich:
            table = Table(title=title) if title else Table()
            for header in columns:
                table.add_column(header)
            for row in data:
                table.add_row(*[Text(str(row.get(key, ""))) for key in columns])
            return table

        text = tabulate(
            [[row.get(key, "") for key in columns] for row in data],
            headers=columns,
            tablefmt="grid"
        )
        return f"{title}\n{text}" if title else text

    def format_json(
        self,
        data: Union[Dict[str, Any], List[Any]],
        pretty: bool = True
    ) -> str:
        """
        Format data as JSON.

        Args:
            data: Data to format
            pretty: Whether to pretty print

        Returns:
            str: Formatted JSON
        """
        if pretty:
            return json.dumps(data, indent=2, default=str)
        return json.dumps(data, default=str)

    def format_error(
        self,
        message: str,
        details: Optional[str] = None
    ) -> Union[str, Panel]:
        """
        Format error message.

        Args:
            message: Error message
            details: Optional error details

        Returns:
            Union[str, Panel]: Formatted error
        """
        if self.use_rich:
            error_text = Text(message, style="bold red")
            if details:
                error_text.append("\n" + details, style="red")
            return Panel(error_text, title="Error", border_style="red")
        if details:
            return f"Error: {message}\n{details}"
        return f"Error: {message}"

    def format_outcome(self, outcome: SearchOutcome) -> Union[str, Table]:
        """Records of an outcome as a table."""
        rows = [
            {
                "#": outcome.spec.offset + position + 1,
                "id": record.id,
                "label": record.label or "",
                "content_models": ", ".join(record.content_models),
                "url": record.url
            }
            for position, record in enumerate(outcome.records)
        ]
        title = f"{outcome.num_found} result(s) for {outcome.spec.raw_query_text.strip() or '*'}"
        if not rows:
            return title
        return self.format_table(rows, headers=RECORD_COLUMNS, title=title)

    def format_facets(
        self,
        facet_counts: Dict[str, Any],
        labels: Optional[Dict[str, str]] = None
    ) -> List[Union[str, Table]]:
        """
        Facet field counts as one table per field.

        Solr returns each field as a flat ``[value, count, value, count]``
        list. Fields with a configured label are titled ``label (field)``.
        """
        labels = labels or {}
        tables = []
        for field_name, flat in (facet_counts.get("facet_fields") or {}).items():
            rows = [
                {"value": flat[i], "count": flat[i + 1]}
                for i in range(0, len(flat) - 1, 2)
            ]
            label = labels.get(field_name)
            title = f"{label} ({field_name})" if label and label != field_name else field_name
            tables.append(self.format_table(rows, headers=["value", "count"], title=title))
        return tables

    def print(
        self,
        content: Any,
        style: Optional[str] = None
    ) -> None:
        """
        Print content with optional styling.

        Args:
            content: Content to print
            style: Optional style
        """
        if self.use_rich:
            # Plain strings carry Solr syntax such as [* TO *], not markup
            markup = not isinstance(content, str)
            if style:
                self.console.print(content, style=style, markup=markup)
            else:
                self.console.print(content, markup=markup)
        else:
            print(content)
