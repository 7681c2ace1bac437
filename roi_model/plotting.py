# roi_model/plotting.py
"""Annual and cumulative cost chart for one scenario."""

import logging
from pathlib import Path

# To prevent GUI errors on headless servers:
import matplotlib
matplotlib.use('Agg')  # Use a non-interactive backend
import matplotlib.pyplot as plt
import matplotlib.ticker as mtick

from roi_model.formatting import format_eok
from roi_model.results import CostAnalysisResult

logger = logging.getLogger(__name__)

CURRENT_BAR_COLOR = (1.0, 159 / 255, 64 / 255, 0.6)
AI_BAR_COLOR = (75 / 255, 192 / 255, 192 / 255, 0.6)
CURRENT_LINE_COLOR = (1.0, 99 / 255, 132 / 255)
AI_LINE_COLOR = (54 / 255, 162 / 255, 235 / 255)
BREAK_EVEN_COLOR = "#00FF00"


def _eok_tick(value, _pos=None, unit="억"):
    return format_eok(value, unit=unit)


def plot_cost_comparison(
    result: CostAnalysisResult, output_dir: Path, scenario_name: str = "scenario"
) -> Path:
    """
    Bars for annual costs (left axis) and lines for cumulative costs (right
    axis), with the break-even year marked on the AI cumulative line.

    Returns the path of the written PNG.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    plot_path = output_dir / f"{scenario_name}_costs.png"
    s = result.series
    x = list(range(len(s.annual_current)))
    width = 0.38

    logger.info(f"Plotting cost comparison for '{scenario_name}' to {plot_path}")
    fig, ax1 = plt.subplots(figsize=(10, 6))
    try:
        ax1.bar([i - width / 2 for i in x], s.annual_current, width,
                color=CURRENT_BAR_COLOR, label="기존 시스템 연간 비용")
        ax1.bar([i + width / 2 for i in x], s.annual_ai, width,
                color=AI_BAR_COLOR, label="AI 시스템 연간 비용 (운영비)")
        ax1.set_xlabel("년차")
        ax1.set_ylabel("연간 비용 (억원)")
        ax1.set_xticks(x)
        ax1.set_xticklabels(s.labels)
        ax1.yaxis.set_major_formatter(mtick.FuncFormatter(_eok_tick))
        ax1.set_ylim(bottom=0)

        ax2 = ax1.twinx()  # instantiate a second axes that shares the same x-axis
        ax2.plot(x, s.cumulative_current, color=CURRENT_LINE_COLOR, marker='o',
                 linewidth=3, label="기존 시스템 누적 비용")
        ax2.plot(x, s.cumulative_ai, color=AI_LINE_COLOR, marker='o',
                 linewidth=3, label="AI 시스템 누적 비용")
        if s.break_even_year_index is not None:
            i = s.break_even_year_index
            ax2.scatter([i], [s.cumulative_ai[i]], s=120, color=BREAK_EVEN_COLOR,
                        edgecolors="#00AA00", linewidths=3, zorder=5, label="손익분기")
        ax2.set_ylabel("누적 비용 (억원)")
        ax2.yaxis.set_major_formatter(
            mtick.FuncFormatter(lambda v, pos: _eok_tick(v, pos, unit="억원"))
        )
        ax2.set_ylim(bottom=0)

        handles1, labels1 = ax1.get_legend_handles_labels()
        handles2, labels2 = ax2.get_legend_handles_labels()
        ax1.legend(handles1 + handles2, labels1 + labels2, loc="upper center",
                   bbox_to_anchor=(0.5, -0.1), ncol=2)
        ax1.set_title("5개년 연간 및 누적 비용 비교")

        fig.tight_layout()  # otherwise the right y-label is slightly clipped
        fig.savefig(plot_path)
    finally:
        plt.close(fig)
    return plot_path
