"""
HTML dashboard generation.

The DashboardGenerator renders an AnalysisResult as a single self-contained
``index.html``: a header, quick stats, interactive Plotly charts of the
timeline and eco-score, and tables of equivalences and scaling projections.
"""

import html
import logging
from pathlib import Path
from typing import List, Union

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from ..calculations import BYTES_PER_MB
from ..models.execution import OutcomeStatus
from ..models.results import AnalysisResult
from ..utils.formatters import (
    format_co2, format_duration, format_energy, format_number
)

logger = logging.getLogger(__name__)

REPORT_FILENAME = "index.html"

OUTCOME_BANNERS = {
    OutcomeStatus.TIMED_OUT: ("warning", "Execution timed out", "Figures cover the run up to the deadline."),
    OutcomeStatus.SIGNALED: ("warning", "Process killed by a signal", "Figures cover the run until the signal."),
    OutcomeStatus.SPAWN_FAILED: ("error", "Script could not be started", "No resource usage was recorded."),
}

CPU_COLOR = "#2563eb"
MEMORY_COLOR = "#16a34a"

PAGE_STYLE = """
body { font-family: -apple-system, "Segoe UI", Roboto, sans-serif; margin: 0; background: #f8fafc; color: #0f172a; }
header { padding: 24px 32px; background: #0f172a; color: #f8fafc; display: flex; justify-content: space-between; align-items: center; }
header h1 { margin: 0; font-size: 1.6em; }
header p { margin: 4px 0 0; color: #94a3b8; }
main { padding: 24px 32px; }
section { background: #fff; border-radius: 8px; padding: 16px 24px; margin-bottom: 24px; box-shadow: 0 1px 3px rgba(0,0,0,.08); }
.grade { font-size: 2.4em; font-weight: bold; border-radius: 8px; padding: 8px 20px; color: #fff; }
.banner { border-radius: 8px; padding: 12px 20px; margin-bottom: 24px; }
.banner.warning { background: #fef3c7; border: 1px solid #f59e0b; }
.banner.error { background: #fee2e2; border: 1px solid #dc2626; }
.stats { display: grid; grid-template-columns: repeat(auto-fit, minmax(160px, 1fr)); gap: 16px; }
.stat { background: #f1f5f9; border-radius: 8px; padding: 12px; }
.stat .value { font-size: 1.3em; font-weight: bold; }
.stat .label { color: #64748b; font-size: .85em; }
table { border-collapse: collapse; width: 100%; }
th, td { text-align: left; padding: 6px 10px; border-bottom: 1px solid #e2e8f0; }
pre { background: #0f172a; color: #e2e8f0; padding: 12px; border-radius: 6px; overflow-x: auto; }
"""


class DashboardGenerator:
    """Builds the HTML report of one analysis."""

    def __init__(self, include_plotlyjs: Union[bool, str] = True):
        """
        Args:
            include_plotlyjs: How plotly.js is included in the page; True embeds
                it (works offline), "cdn" links it
        """
        self.include_plotlyjs = include_plotlyjs
        self._plotly_included = False

    def generate_dashboard(self, result: AnalysisResult, output_dir: Union[str, Path]) -> Path:
        """
        Write ``index.html`` for ``result`` into ``output_dir``.

        Returns:
            Path of the written report
        """
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)
        report_file = output_path / REPORT_FILENAME

        report_file.write_text(self.render(result), encoding="utf-8")
        logger.info(f"Dashboard written to {report_file}")
        return report_file

    def render(self, result: AnalysisResult) -> str:
        """Return the complete HTML page for ``result``."""
        sections: List[str] = [self._outcome_banner(result)]
        self._plotly_included = False

        if result.metrics is not None:
            sections.append(self._quick_stats(result))
            if result.timeline_frame is not None and not result.timeline_frame.is_empty():
                sections.append(self._section("Resource usage over time", self._figure_html(self._timeline_figure(result))))
            sections.append(self._section("Eco-score breakdown", self._figure_html(self._eco_score_figure(result))))
            sections.append(self._equivalences_table(result))
            sections.append(self._scaling_table(result))
        sections.append(self._output_section(result))

        title = html.escape(f"GayaCode report - {result.script_name}")
        return (
            "<!DOCTYPE html>\n<html lang=\"en\">\n<head>\n<meta charset=\"utf-8\">\n"
            f"<title>{title}</title>\n<style>{PAGE_STYLE}</style>\n</head>\n<body>\n"
            f"{self._header(result)}\n<main>\n"
            + "\n".join(s for s in sections if s)
            + "\n</main>\n</body>\n</html>\n"
        )

    @staticmethod
    def _section(title: str, body: str) -> str:
        return f"<section>\n<h2>{html.escape(title)}</h2>\n{body}\n</section>"

    def _figure_html(self, fig: go.Figure) -> str:
        # plotly.js is only embedded once per page
        include = False if self._plotly_included else self.include_plotlyjs
        self._plotly_included = True
        return fig.to_html(full_html=False, include_plotlyjs=include)

    def _header(self, result: AnalysisResult) -> str:
        grade = ""
        if result.eco_score is not None:
            grade = (
                f"<div class=\"grade\" style=\"background:{result.eco_score.grade.color}\">"
                f"{html.escape(result.eco_score.grade.letter)}</div>"
            )
        return (
            f"<header>\n<div>\n<h1>{html.escape(result.script_name)}</h1>\n"
            f"<p>{html.escape(result.script_path)} &middot; {html.escape(result.timestamp)}</p>\n"
            f"</div>\n{grade}\n</header>"
        )

    @staticmethod
    def _outcome_banner(result: AnalysisResult) -> str:
        if result.success or result.status not in OUTCOME_BANNERS:
            return ""
        level, title, detail = OUTCOME_BANNERS[result.status]
        message = f"<strong>{html.escape(title)}.</strong> {html.escape(detail)}"
        if result.error:
            message += f"<br>{html.escape(result.error)}"
        return f"<div class=\"banner {level}\">{message}</div>"

    def _quick_stats(self, result: AnalysisResult) -> str:
        metrics = result.metrics
        stats = [
            ("Execution time", format_duration(metrics.execution_time_seconds)),
            ("Energy", format_energy(metrics.energy_kwh)),
            ("CO2 emitted", format_co2(metrics.co2_grams)),
            ("Peak CPU", f"{metrics.peak_cpu:.1f} %"),
            ("Peak memory", f"{metrics.peak_memory_mb:.1f} MB"),
            ("Samples", str(metrics.samples)),
        ]
        if result.eco_score is not None:
            stats.insert(0, ("Eco-score", f"{result.eco_score.overall:.0f}/100"))
        if result.exit_code is not None:
            stats.append(("Exit code", str(result.exit_code)))

        cards = "\n".join(
            f"<div class=\"stat\"><div class=\"value\">{html.escape(value)}</div>"
            f"<div class=\"label\">{html.escape(label)}</div></div>"
            for label, value in stats
        )
        return self._section("Quick stats", f"<div class=\"stats\">\n{cards}\n</div>")

    @staticmethod
    def _timeline_figure(result: AnalysisResult) -> go.Figure:
        frame = result.timeline_frame
        time_axis = frame["time_seconds"].to_list()

        fig = make_subplots(
            rows=2, cols=1, shared_xaxes=True, vertical_spacing=0.08,
            subplot_titles=("CPU usage (%)", "Memory usage (MB)"),
        )
        fig.add_trace(go.Scatter(
            x=time_axis, y=frame["cpu"].to_list(), mode="lines", name="CPU",
            line={"color": CPU_COLOR, "width": 1}, opacity=0.4,
        ), row=1, col=1)
        fig.add_trace(go.Scatter(
            x=time_axis, y=frame["cpu_smooth"].to_list(), mode="lines", name="CPU (smoothed)",
            line={"color": CPU_COLOR, "width": 2},
        ), row=1, col=1)
        fig.add_trace(go.Scatter(
            x=time_axis, y=frame["memory_mb"].to_list(), mode="lines", name="Memory",
            line={"color": MEMORY_COLOR, "width": 1}, opacity=0.4,
        ), row=2, col=1)
        fig.add_trace(go.Scatter(
            x=time_axis, y=(frame["memory_smooth"] / BYTES_PER_MB).to_list(), mode="lines",
            name="Memory (smoothed)", line={"color": MEMORY_COLOR, "width": 2},
        ), row=2, col=1)

        fig.update_xaxes(title_text="Time (s)", row=2, col=1)
        fig.update_layout(height=560, margin={"t": 40, "b": 40}, legend={"orientation": "h"})
        return fig

    @staticmethod
    def _eco_score_figure(result: AnalysisResult) -> go.Figure:
        score = result.eco_score
        components = ["Energy (40%)", "Time (30%)", "CPU (30%)", "Overall"]
        values = [score.energy, score.time, score.cpu, score.overall]

        fig = go.Figure(go.Bar(
            x=components,
            y=values,
            marker_color=["#0ea5e9", "#8b5cf6", CPU_COLOR, score.grade.color],
            text=[f"{v:.0f}" for v in values],
            textposition="outside",
        ))
        fig.update_layout(yaxis={"range": [0, 110], "title": "Score"}, height=360, margin={"t": 20})
        return fig

    def _equivalences_table(self, result: AnalysisResult) -> str:
        rows = []
        for group, items in result.equivalences.items():
            for item in items:
                rows.append(
                    f"<tr><td>{html.escape(group.upper() if group == 'co2' else group.title())}</td>"
                    f"<td>{format_number(item.value)}</td><td>{html.escape(item.unit)}</td></tr>"
                )
        table = (
            "<table>\n<tr><th>Impact</th><th>Equivalent to</th><th></th></tr>\n"
            + "\n".join(rows) + "\n</table>"
        )
        return self._section("Real-world equivalences", table)

    def _scaling_table(self, result: AnalysisResult) -> str:
        rows = [
            f"<tr><td>{html.escape(p.label)}</td><td>{format_energy(p.energy_kwh)}</td>"
            f"<td>{format_co2(p.co2_grams)}</td><td>{format_number(p.total_hours)} h</td>"
            f"<td>{format_energy(p.yearly_energy_kwh)}</td><td>{format_co2(p.yearly_co2_grams)}</td></tr>"
            for p in result.scaling_projections
        ]
        table = (
            "<table>\n<tr><th>Scale</th><th>Energy</th><th>CO2</th><th>Hours at 100 W</th>"
            "<th>Energy per year</th><th>CO2 per year</th></tr>\n"
            + "\n".join(rows) + "\n</table>"
        )
        return self._section("Scaling projections", table)

    def _output_section(self, result: AnalysisResult) -> str:
        if result.output is None or not (result.output.stdout or result.output.stderr):
            return ""
        parts = []
        if result.output.stdout:
            parts.append(f"<details open><summary>stdout</summary><pre>{html.escape(result.output.stdout)}</pre></details>")
        if result.output.stderr:
            parts.append(f"<details><summary>stderr</summary><pre>{html.escape(result.output.stderr)}</pre></details>")
        return self._section("Script output", "\n".join(parts))
