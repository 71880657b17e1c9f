# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""Presentation and export of simulation batches."""

from .tables import (
    format_value,
    formatted,
    parameter_rows,
    parameters_frame,
    summary_frame,
    results_frame,
    stat_cards,
)
from .chart import plot_equity_curves, render_chart_png
from .export import export_to_excel, export_to_html, export_to_pdf, render_html_report

__all__ = [
    'format_value',
    'formatted',
    'parameter_rows',
    'parameters_frame',
    'summary_frame',
    'results_frame',
    'stat_cards',
    'plot_equity_curves',
    'render_chart_png',
    'export_to_excel',
    'export_to_html',
    'export_to_pdf',
    'render_html_report',
]
