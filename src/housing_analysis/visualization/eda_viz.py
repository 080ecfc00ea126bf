"""EDA visualization functions for housing sales."""

import logging
from collections.abc import Sequence

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from housing_analysis.analysis.trends import yearly_growth
from housing_analysis.constants import SALE_AMOUNT

logger: logging.Logger = logging.getLogger(__name__)


def _label(col: str) -> str:
    return col.replace("_", " ").title()


def _empty_figure(message: str, figsize: tuple[int, int], title: str | None = None) -> plt.Figure:
    fig, ax = plt.subplots(figsize=figsize)
    ax.text(0.5, 0.5, message, ha="center", va="center", transform=ax.transAxes)
    if title:
        ax.set_title(title)
    return fig


def plot_amount_by_category(
    df: pd.DataFrame,
    category_col: str,
    title: str,
    order: Sequence[str] | None = None,
    palette: str = "viridis",
    figsize: tuple[int, int] = (12, 7),
) -> plt.Figure:
    """Create box plot with strip plot overlay for sale amount by category.

    Args:
        df: DataFrame with sale_amount and category column
        category_col: Column name to group by on x-axis (e.g. property_zip_code, sale_year)
        title: Plot title
        order: Optional ordering of categories
        palette: Seaborn color palette name
        figsize: Figure size tuple

    Returns:
        Matplotlib Figure object
    """
    df_plot = df[df[category_col].notna() & df[SALE_AMOUNT].notna()].copy()

    if df_plot.empty:
        logger.warning(f"No valid data for category column '{category_col}'")
        return _empty_figure("No data available", figsize, title)

    df_plot[category_col] = df_plot[category_col].astype(str)
    df_plot["amount_k"] = pd.to_numeric(df_plot[SALE_AMOUNT], errors="coerce") / 1000

    if order is None:
        order = (
            df_plot.groupby(category_col)["amount_k"].median().sort_values(ascending=False).index
        )
    else:
        order = [str(c) for c in order if str(c) in df_plot[category_col].values]

    fig, ax = plt.subplots(figsize=figsize)

    sns.boxplot(
        data=df_plot,
        x=category_col,
        y="amount_k",
        hue=category_col,
        order=order,
        hue_order=order,
        palette=palette,
        legend=False,
        ax=ax,
    )
    sns.stripplot(
        data=df_plot,
        x=category_col,
        y="amount_k",
        order=order,
        color="black",
        alpha=0.2,
        size=3,
        ax=ax,
    )

    ax.set_xlabel(_label(category_col))
    ax.set_ylabel("Sale Amount ($k)")
    ax.set_title(title)
    ax.tick_params(axis="x", rotation=45)
    fig.tight_layout()

    return fig


def plot_amount_scatter(
    df: pd.DataFrame,
    x_col: str,
    y_col: str = SALE_AMOUNT,
    hue_col: str | None = None,
    show_regression: bool = True,
    title: str | None = None,
    figsize: tuple[int, int] = (14, 7),
) -> plt.Figure:
    """Create scatter plot with optional hue coloring and regression line.

    Args:
        df: DataFrame with x, y, and optional hue columns
        x_col: Column for x-axis (e.g. property_size)
        y_col: Column for y-axis (default: sale_amount)
        hue_col: Optional column for color grouping
        show_regression: Whether to show overall regression line
        title: Plot title (auto-generated if None)
        figsize: Figure size tuple

    Returns:
        Matplotlib Figure object
    """
    cols_needed = [x_col, y_col]
    if hue_col:
        cols_needed.append(hue_col)

    df_plot = df.dropna(subset=cols_needed).copy()

    if df_plot.empty:
        logger.warning(f"No valid data for columns {cols_needed}")
        return _empty_figure("No data available", figsize)

    df_plot[x_col] = pd.to_numeric(df_plot[x_col], errors="coerce")
    df_plot["y_k"] = pd.to_numeric(df_plot[y_col], errors="coerce") / 1000

    fig, ax = plt.subplots(figsize=figsize)

    scatter_kwargs = {
        "data": df_plot,
        "x": x_col,
        "y": "y_k",
        "alpha": 0.6,
        "s": 50,
        "ax": ax,
    }
    if hue_col:
        scatter_kwargs["hue"] = hue_col

    sns.scatterplot(**scatter_kwargs)

    if show_regression and len(df_plot) > 1:
        sns.regplot(
            data=df_plot,
            x=x_col,
            y="y_k",
            scatter=False,
            color="black",
            line_kws={"linestyle": "--", "label": "Overall trend"},
            ax=ax,
        )

    ax.set_xlabel(_label(x_col))
    ax.set_ylabel(f"{_label(y_col)} ($k)")
    ax.set_title(title or f"{_label(y_col)} vs {_label(x_col)}")

    if hue_col:
        ax.legend(title=_label(hue_col), bbox_to_anchor=(1.02, 1), loc="upper left")

    fig.tight_layout()
    return fig


def plot_amount_heatmap(
    df: pd.DataFrame,
    row_col: str,
    col_col: str,
    title: str | None = None,
    figsize: tuple[int, int] = (12, 8),
    min_groups: int = 2,
) -> plt.Figure:
    """Create heatmap of median sale amounts by two categorical variables.

    Args:
        df: DataFrame with sale_amount and category columns
        row_col: Column for heatmap rows (e.g. property_zip_code)
        col_col: Column for heatmap columns (e.g. sale_year)
        title: Plot title (auto-generated if None)
        figsize: Figure size tuple
        min_groups: Minimum number of non-null columns to include a row

    Returns:
        Matplotlib Figure object
    """
    df_plot = df.dropna(subset=[row_col, col_col, SALE_AMOUNT]).copy()

    if df_plot.empty:
        logger.warning(f"No valid data for columns [{row_col}, {col_col}, {SALE_AMOUNT}]")
        return _empty_figure("No data available", figsize)

    df_plot[SALE_AMOUNT] = pd.to_numeric(df_plot[SALE_AMOUNT], errors="coerce")
    pivot = df_plot.pivot_table(
        values=SALE_AMOUNT,
        index=row_col,
        columns=col_col,
        aggfunc="median",
    )
    pivot = pivot.dropna(thresh=min_groups)

    if pivot.empty:
        logger.warning(f"No rows with at least {min_groups} groups after filtering")
        return _empty_figure(f"No rows with >= {min_groups} groups", figsize)

    fig, ax = plt.subplots(figsize=figsize)
    sns.heatmap(
        pivot / 1000,
        annot=True,
        fmt=".0f",
        cmap="YlOrRd",
        cbar_kws={"label": "Median Sale Amount ($k)"},
        ax=ax,
    )

    ax.set_title(title or f"Median Sale Amount by {_label(row_col)} x {_label(col_col)} ($k)")
    ax.set_xlabel(_label(col_col))
    ax.set_ylabel(_label(row_col))

    fig.tight_layout()
    return fig


def plot_yearly_sales(
    df: pd.DataFrame,
    title: str = "Total Sales by Year",
    figsize: tuple[int, int] = (12, 6),
) -> plt.Figure:
    """Bar chart of total sale amount per year with YoY growth on a second axis.

    Args:
        df: Cleaned sales DataFrame
        title: Plot title
        figsize: Figure size tuple

    Returns:
        Matplotlib Figure object
    """
    growth = yearly_growth(df)

    if growth.empty:
        logger.warning("No dated sales to plot")
        return _empty_figure("No data available", figsize, title)

    fig, ax = plt.subplots(figsize=figsize)
    ax.bar(growth["sale_year"].astype(str), growth["total_sale_amount"] / 1e6, color="steelblue")
    ax.set_xlabel("Sale Year")
    ax.set_ylabel("Total Sale Amount ($M)")
    ax.set_title(title)

    ax_growth = ax.twinx()
    ax_growth.plot(
        growth["sale_year"].astype(str),
        growth["yoy_growth_pct"],
        "r-o",
        linewidth=2,
        label="YoY growth",
    )
    ax_growth.axhline(0, color="gray", linestyle=":", linewidth=1)
    ax_growth.set_ylabel("YoY Growth (%)")
    ax_growth.legend(loc="upper left")

    fig.tight_layout()
    return fig
