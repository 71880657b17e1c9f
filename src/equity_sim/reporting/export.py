# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Report exports for a simulation batch.

Outputs the same content in three formats:
- Excel workbook (Parameters, Summary Statistics, Detailed Results, Raw Data)
- Standalone HTML report with the chart embedded as a PNG
- PDF report (ReportLab)

All exporters read the typed BatchResult values directly.
"""

from __future__ import annotations

import base64
import html
import io
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, BinaryIO, List, Optional, Union

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import LETTER, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import (Image, PageBreak, Paragraph, SimpleDocTemplate,
                                Spacer, Table, TableStyle)

from ..config import REPORT_TITLE
from ..simulation import METRIC_LABELS, BatchResult
from .chart import render_chart_png
from .tables import format_value, formatted, parameter_rows, parameters_frame

logger = logging.getLogger(__name__)

Output = Union[str, Path, BinaryIO]

_EXCEL_INF_REP = "inf"
_EXCEL_NA_REP = "NaN"
# Standard PDF fonts have no infinity glyph
_PDF_INF_TEXT = "inf"

_TABLE_STYLE = TableStyle(
    [
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
    ]
)


def _prepare_output(output: Output) -> Output:
    if isinstance(output, (str, Path)):
        output = Path(output)
        output.parent.mkdir(parents=True, exist_ok=True)
    return output


# ===== EXCEL =====

def export_to_excel(output: Output, batch: BatchResult) -> None:
    """
    Export a batch to an Excel workbook.

    Non-finite metric values have no native Excel representation and are
    written as the strings "inf", "-inf" and "NaN".

    Args:
        output: Destination path or binary file object
        batch: Simulation batch to export
    """
    output = _prepare_output(output)
    try:
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            # Sheet 1: Parameters
            parameters_frame(batch.params).to_excel(writer, sheet_name="Parameters", index=False)

            # Sheet 2: Summary Statistics
            batch.report.to_frame().to_excel(
                writer, sheet_name="Summary Statistics",
                inf_rep=_EXCEL_INF_REP, na_rep=_EXCEL_NA_REP,
            )

            # Sheet 3: Detailed Results (one row per simulation)
            batch.metrics_frame().to_excel(
                writer, sheet_name="Detailed Results",
                inf_rep=_EXCEL_INF_REP, na_rep=_EXCEL_NA_REP,
            )

            # Sheet 4: Raw Data (trade number x simulation)
            batch.curves_frame().to_excel(writer, sheet_name="Raw Data")
    except Exception:
        logger.exception("Error exporting batch to Excel")
        raise
    logger.info("Exported %d simulations to Excel", batch.num_simulations)


# ===== HTML =====

_HTML_STYLE = """
        body { font-family: Arial, sans-serif; margin: 20px; }
        table { border-collapse: collapse; width: 100%; margin: 20px 0; }
        th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
        th { background-color: #f5f5f5; }
        .chart-container { margin: 20px 0; }
        .stats-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 20px; margin: 20px 0; }
        .stat-card { border: 1px solid #ddd; padding: 15px; border-radius: 4px; }
"""


def render_html_report(batch: BatchResult, chart_png: Optional[bytes] = None) -> str:
    """Render a standalone HTML report.

    Args:
        batch: Simulation batch to report on
        chart_png: Pre-rendered chart; rendered from the batch when None

    Returns:
        The HTML document as a string
    """
    if chart_png is None:
        chart_png = render_chart_png(batch.curves)
    title = html.escape(REPORT_TITLE)

    parts = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        f"    <title>{title}</title>",
        f"    <style>{_HTML_STYLE}    </style>",
        "</head>",
        "<body>",
        f"    <h1>{title}</h1>",
        "    <h2>Parameters</h2>",
        "    <table>",
        "        <tr><th>Parameter</th><th>Value</th></tr>",
    ]
    for name, value in parameter_rows(batch.params):
        parts.append(f"        <tr><td>{html.escape(name)}</td><td>{html.escape(value)}</td></tr>")
    parts.append("    </table>")

    encoded = base64.b64encode(chart_png).decode("ascii")
    parts.extend([
        "    <h2>Equity Curves</h2>",
        '    <div class="chart-container">',
        f'        <img src="data:image/png;base64,{encoded}" style="width: 100%; max-width: 1000px;" />',
        "    </div>",
        "    <h2>Summary Statistics</h2>",
        '    <div class="stats-grid">',
    ])
    for name, summary in batch.report.items():
        label = html.escape(METRIC_LABELS[name])
        parts.append(
            f'        <div class="stat-card"><h3>{label}</h3>'
            f"<pre>Avg: {html.escape(format_value(summary.average))}\n"
            f"Min: {html.escape(format_value(summary.minimum))}\n"
            f"Max: {html.escape(format_value(summary.maximum))}</pre></div>"
        )
    parts.append("    </div>")

    parts.append("    <h2>Detailed Results</h2>")
    parts.append(formatted(batch.metrics_frame()).to_html(escape=True))
    parts.extend(["</body>", "</html>"])
    return "\n".join(parts)


def export_to_html(output: Output, batch: BatchResult, chart_png: Optional[bytes] = None) -> None:
    """Write the HTML report to a path or binary file object."""
    document = render_html_report(batch, chart_png).encode("utf-8")
    output = _prepare_output(output)
    if isinstance(output, Path):
        output.write_bytes(document)
    else:
        output.write(document)
    logger.info("Exported %d simulations to HTML", batch.num_simulations)


# ===== PDF =====

def _styled_table(data: List[List[Any]], col_widths: Optional[List[float]] = None) -> Table:
    table = Table(data, colWidths=col_widths, repeatRows=1)
    table.setStyle(_TABLE_STYLE)
    return table


def export_to_pdf(output: Output, batch: BatchResult, chart_png: Optional[bytes] = None) -> None:
    """
    Build a PDF report: parameters, chart, summary and per-simulation results.

    Args:
        output: Destination path or binary file object
        batch: Simulation batch to report on
        chart_png: Pre-rendered chart; rendered from the batch when None
    """
    if chart_png is None:
        chart_png = render_chart_png(batch.curves)
    output = _prepare_output(output)
    target = str(output) if isinstance(output, Path) else output

    doc = SimpleDocTemplate(
        target,
        pagesize=landscape(LETTER),
        rightMargin=30,
        leftMargin=30,
        topMargin=30,
        bottomMargin=18,
        title=REPORT_TITLE,
    )
    styles = getSampleStyleSheet()
    elems: List[Any] = []

    # ---- Title ----------------------------------------------------
    elems.append(Paragraph(REPORT_TITLE, styles["Title"]))
    now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    elems.append(Paragraph(f"Generated: {now}", styles["Normal"]))
    elems.append(Spacer(1, 12))

    # ---- Parameters -----------------------------------------------
    elems.append(Paragraph("<b>Simulation Parameters</b>", styles["Heading2"]))
    elems.append(_styled_table([["Parameter", "Value"]] + parameter_rows(batch.params), [200, 300]))
    elems.append(Spacer(1, 12))

    # ---- Chart ----------------------------------------------------
    elems.append(Paragraph("<b>Equity Curves</b>", styles["Heading2"]))
    elems.append(Image(io.BytesIO(chart_png), width=600, height=360))
    elems.append(PageBreak())

    # ---- Summary statistics ---------------------------------------
    elems.append(Paragraph("<b>Summary Statistics</b>", styles["Heading2"]))
    summary = [["Metric", "Average", "Minimum", "Maximum"]]
    for label, row in batch.report.to_frame().iterrows():
        summary.append([
            label,
            format_value(row["Average"], inf_text=_PDF_INF_TEXT),
            format_value(row["Minimum"], inf_text=_PDF_INF_TEXT),
            format_value(row["Maximum"], inf_text=_PDF_INF_TEXT),
        ])
    elems.append(_styled_table(summary, [200, 120, 120, 120]))
    elems.append(PageBreak())

    # ---- Detailed results -----------------------------------------
    elems.append(Paragraph("<b>Detailed Simulation Results</b>", styles["Heading2"]))
    detail = formatted(batch.metrics_frame(), inf_text=_PDF_INF_TEXT)
    rows = [["Simulation"] + list(detail.columns)]
    rows.extend([str(idx)] + values for idx, values in zip(detail.index, detail.values.tolist()))
    elems.append(_styled_table(rows))

    try:
        doc.build(elems)
    except Exception:
        logger.exception("Error exporting batch to PDF")
        raise
    logger.info("Exported %d simulations to PDF", batch.num_simulations)
