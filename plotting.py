import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from loguru import logger
from matplotlib.ticker import FuncFormatter
from typing import Sequence

from constants import CONTRIBUTED_COLOR, CORPUS_COLOR, DISCLAIMER, LAKH, PENSION_COLOR
from formatting import format_inr, format_percent
from models import ProjectionResult, ScenarioComparison
from reporting import timeline_frame


def _lakh_formatter(value: float, _pos) -> str:
    return f"{value / LAKH:,.0f}L"


def plot_growth_timeline(result: ProjectionResult, filename: str, dpi_setting: int = 150) -> None:
    """
    Plots corpus against amount contributed for each timeline age, shading the
    gains between them and annotating the headline figures.

    Args:
        result: Projection whose timeline is drawn.
        filename: Full path of the PNG to write.
        dpi_setting: Resolution of the saved image.
    """
    df = timeline_frame(result.timeline)
    if df.empty:
        logger.warning(f"No timeline data to plot for '{filename}'. Skipping.")
        return

    plt.figure(figsize=(12, 7))
    ax = plt.gca()

    ages = df.index.to_numpy()
    ax.plot(ages, df["corpus"], color=CORPUS_COLOR, linewidth=1.8, label="Projected Corpus")
    ax.plot(ages, df["contributed"], color=CONTRIBUTED_COLOR, linewidth=1.4, label="Amount Contributed")
    ax.fill_between(
        ages,
        df["contributed"],
        df["corpus"],
        color=CORPUS_COLOR,
        alpha=0.15,
        label="Gains",
        interpolate=True,
    )

    request = result.request
    summary_lines = [
        f"Contribution: {format_inr(request.monthly_contribution)}/mo, "
        f"{request.risk_profile.value} @ {format_percent(result.annual_return_rate)}",
        f"Corpus at {request.retirement_age}: {format_inr(result.total_corpus)}",
        f"Lump Sum: {format_inr(result.lump_sum)}, Pension: {format_inr(result.monthly_pension)}/mo",
    ]
    ax.text(
        0.02,
        0.80,
        "\n".join(summary_lines),
        transform=ax.transAxes,
        ha="left",
        va="top",
        fontsize=8,
        bbox=dict(facecolor="white", alpha=0.85, edgecolor="lightgrey", boxstyle="round,pad=0.3"),
    )

    ax.yaxis.set_major_formatter(FuncFormatter(_lakh_formatter))
    plt.title(f"Corpus Growth: Age {request.current_age} to {request.retirement_age}", fontsize=14)
    plt.xlabel("Age", fontsize=10)
    plt.ylabel("Amount (Lakhs of ₹)", fontsize=10)
    plt.figtext(0.5, 0.01, DISCLAIMER, ha="center", fontsize=7, color="grey")
    ax.legend(fontsize=8, loc="upper left")
    plt.grid(True, linestyle=":", alpha=0.6)
    plt.tight_layout(rect=(0, 0.03, 1, 1))

    try:
        plt.savefig(filename, dpi=dpi_setting)
        logger.info(f"Growth timeline plot saved to {filename}")
    except OSError as e:
        logger.error(f"Error saving growth timeline plot '{filename}': {e}")
    finally:
        plt.close()


def plot_scenario_comparison(
    comparisons: Sequence[ScenarioComparison], filename: str, dpi_setting: int = 150
) -> None:
    if not comparisons:
        logger.warning(f"No scenarios to plot for '{filename}'. Skipping.")
        return

    labels = [c.label for c in comparisons]
    corpus = np.array([c.result.total_corpus for c in comparisons], dtype=float)
    contributed = np.array([c.result.total_contributed for c in comparisons], dtype=float)
    pensions = [c.result.monthly_pension for c in comparisons]

    x = np.arange(len(labels))
    width = 0.38

    plt.figure(figsize=(10, 6.5))
    ax = plt.gca()
    ax.bar(x - width / 2, contributed, width, color=CONTRIBUTED_COLOR, label="Contributed")
    bars = ax.bar(x + width / 2, corpus, width, color=CORPUS_COLOR, label="Projected Corpus")

    for bar, pension in zip(bars, pensions):
        ax.annotate(
            f"{format_inr(pension)}/mo",
            xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
            xytext=(0, 3),
            textcoords="offset points",
            ha="center",
            va="bottom",
            fontsize=8,
            color=PENSION_COLOR,
        )

    ax.set_xticks(x)
    ax.set_xticklabels(
        [f"{c.label}\n({format_percent(c.expected_return, 0)} p.a.)" for c in comparisons]
    )
    ax.yaxis.set_major_formatter(FuncFormatter(_lakh_formatter))
    plt.title("Corpus by Risk Profile (labels: est. monthly pension)", fontsize=13)
    plt.ylabel("Amount (Lakhs of ₹)", fontsize=10)
    plt.figtext(0.5, 0.01, DISCLAIMER, ha="center", fontsize=7, color="grey")
    ax.legend(fontsize=8, loc="upper left")
    plt.grid(True, axis="y", linestyle=":", alpha=0.6)
    plt.tight_layout(rect=(0, 0.03, 1, 1))

    try:
        plt.savefig(filename, dpi=dpi_setting)
        logger.info(f"Scenario comparison plot saved to {filename}")
    except OSError as e:
        logger.error(f"Error saving scenario comparison plot '{filename}': {e}")
    finally:
        plt.close()
