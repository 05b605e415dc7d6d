"""
arrestmap/charts.py
-------------------
Shared chart helpers used by the processing scripts and the dashboard
sections. All functions return a Plotly figure object.

Import example:
    from arrestmap.charts import grid_map, apply_base_layout
"""

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
from arrestmap.constants import (
    BASE_LAYOUT,
    AXIS_DEFAULTS,
    LEGEND_TOP,
    MAPBOX_STYLE,
    SF_MAP_CENTRE,
    SF_MAP_ZOOM,
)


# ── Layout helpers ────────────────────────────────────────────────

def apply_base_layout(fig: go.Figure, height: int = 420, **kwargs) -> go.Figure:
    """
    Apply the standard transparent background and drag/spike
    settings to a figure. Additional layout kwargs are passed through
    so callers can override individual properties.

    Usage:
        fig = apply_base_layout(fig, height=360, hovermode='y')
    """
    layout = {**BASE_LAYOUT, "height": height, **kwargs}
    fig.update_layout(**layout)
    return fig


def style_xaxis(fig: go.Figure, show_labels: bool = False, **kwargs) -> go.Figure:
    """Apply standard x-axis defaults. Labels hidden by default."""
    props = {**AXIS_DEFAULTS, "showticklabels": show_labels, **kwargs}
    fig.update_xaxes(**props)
    return fig


def style_yaxis(fig: go.Figure, title: str = "", **kwargs) -> go.Figure:
    """Apply standard y-axis defaults."""
    props = {**AXIS_DEFAULTS, "title": title, **kwargs}
    fig.update_yaxes(**props)
    return fig


# ── Reusable chart builders ───────────────────────────────────────

def horizontal_bar_chart(
    df: pd.DataFrame,
    x_col: str,
    y_col: str,
    colorscale: str = "Reds",
    hover_template: str | None = None,
    height: int = 420,
    x_title: str = "",
    x_suffix: str = "",
) -> go.Figure:
    """
    Standard horizontal bar chart with a sequential colour scale.
    Used for arrest counts per category and for feature importance.

    Args:
        df:              Source DataFrame.
        x_col:           Column for bar length (numeric).
        y_col:           Column for bar labels (categorical).
        colorscale:      Plotly colour scale name.
        hover_template:  Custom hovertemplate string.
        height:          Chart height in pixels.
        x_title:         X-axis title.
        x_suffix:        Suffix appended to x-axis tick labels (e.g. '%').
    """
    bar_kwargs: dict = dict(
        x=df[x_col],
        y=df[y_col],
        orientation="h",
        marker=dict(
            color=df[x_col],
            colorscale=colorscale,
            showscale=False,
        ),
    )
    if hover_template:
        bar_kwargs["hovertemplate"] = hover_template

    fig = go.Figure()
    fig.add_trace(go.Bar(**bar_kwargs))

    fig = apply_base_layout(fig, height=height, hovermode="y")
    fig = style_xaxis(fig, show_labels=True, title=x_title, ticksuffix=x_suffix)
    fig = style_yaxis(fig)

    return fig


def feature_importance_chart(importance: pd.DataFrame) -> go.Figure:
    """Relative gain per feature, largest at the top."""
    ordered = importance.sort_values("gain_pct", ascending=True)
    return horizontal_bar_chart(
        df=ordered,
        x_col="gain_pct",
        y_col="feature",
        hover_template="<b>%{y}</b><br>%{x:.1f}% of total gain<extra></extra>",
        height=320,
        x_title="Share of total gain",
        x_suffix="%",
    )


def category_counts_chart(counts: pd.DataFrame, colours: dict | None = None) -> go.Figure:
    """Arrests per category, sorted ascending so the largest bar is on top."""
    ordered = counts.sort_values("count", ascending=True)
    fig = horizontal_bar_chart(
        df=ordered,
        x_col="count",
        y_col="category",
        hover_template="<b>%{y}</b><br>%{x:,} arrests<extra></extra>",
        height=max(420, 18 * len(ordered)),
        x_title="Arrests",
    )
    if colours:
        fig.update_traces(marker_color=[colours.get(c, "#95a5a6") for c in ordered["category"]])
    return fig


def hourly_arrests_chart(hourly: pd.DataFrame, top_n: int = 5, colours: dict | None = None) -> go.Figure:
    """
    Arrests by hour of day for the `top_n` most frequent categories.

    `hourly` has category, hour, count columns.
    """
    top = (
        hourly.groupby("category")["count"].sum()
        .nlargest(top_n).index.tolist()
    )
    fig = go.Figure()
    for category in top:
        sub = hourly[hourly["category"] == category].sort_values("hour")
        line = dict(width=2)
        if colours and category in colours:
            line["color"] = colours[category]
        fig.add_trace(go.Scatter(
            x=sub["hour"], y=sub["count"], name=category, line=line,
            hovertemplate="%{x}:00<br>%{y:,} arrests<extra>" + category + "</extra>",
        ))
    fig = apply_base_layout(fig, height=420, legend=LEGEND_TOP)
    fig = style_xaxis(fig, show_labels=True, title="Hour of day", dtick=2)
    fig = style_yaxis(fig, title="Arrests")
    return fig


def confusion_heatmap(wide: pd.DataFrame) -> go.Figure:
    """
    Heatmap of the wide confusion matrix (rows predicted, columns actual),
    shaded by column share so rare categories stay readable.
    """
    col_totals = wide.sum(axis=0).replace(0, np.nan)
    share = (wide / col_totals).fillna(0)
    fig = px.imshow(
        share,
        color_continuous_scale="Reds",
        aspect="auto",
        labels=dict(x="Actual", y="Predicted", color="Share of actual"),
    )
    fig.update_traces(
        customdata=wide.values,
        hovertemplate="Predicted %{y}<br>Actual %{x}<br>%{customdata:,} records<extra></extra>",
    )
    fig = apply_base_layout(fig, height=max(500, 22 * len(wide)), hovermode="closest")
    fig.update_xaxes(tickangle=-45)
    return fig


# ── Maps ──────────────────────────────────────────────────────────

def _category_order(frame: pd.DataFrame, colours: dict) -> list:
    present = set(frame["predicted_category"].unique())
    return [c for c in colours if c in present]


def grid_map(frame: pd.DataFrame, colours: dict, title: str = "") -> go.Figure:
    """
    Predicted category at each grid point, drawn over a street basemap.
    `frame` is one predict_grid() result.
    """
    fig = px.scatter_mapbox(
        frame,
        lat="y",
        lon="x",
        color="predicted_category",
        color_discrete_map=colours,
        category_orders={"predicted_category": _category_order(frame, colours)},
        hover_data={"x": False, "y": False, "confidence": ":.2f"},
        opacity=0.55,
        center=SF_MAP_CENTRE,
        zoom=SF_MAP_ZOOM,
        mapbox_style=MAPBOX_STYLE,
        title=title,
        height=700,
    )
    fig.update_traces(marker=dict(size=4))
    fig.update_layout(legend_title_text="Predicted arrest type", margin=dict(l=0, r=0, t=40, b=0))
    return fig


def grid_animation(frames: pd.DataFrame, colours: dict, title: str = "") -> go.Figure:
    """
    One map frame per timestamp. `frames` is a predict_animation()
    result; colours are fixed across frames by `colours`.
    """
    fig = px.scatter_mapbox(
        frames,
        lat="y",
        lon="x",
        color="predicted_category",
        color_discrete_map=colours,
        category_orders={"predicted_category": _category_order(frames, colours)},
        animation_frame="frame",
        hover_data={"x": False, "y": False, "confidence": ":.2f"},
        opacity=0.55,
        center=SF_MAP_CENTRE,
        zoom=SF_MAP_ZOOM,
        mapbox_style=MAPBOX_STYLE,
        title=title,
        height=700,
    )
    fig.update_traces(marker=dict(size=5))
    fig.update_layout(legend_title_text="Predicted arrest type", margin=dict(l=0, r=0, t=40, b=0))
    return fig


def _discrete_colorscale(colours: list) -> list:
    n = len(colours)
    scale = []
    for i, colour in enumerate(colours):
        scale.append([i / n, colour])
        scale.append([(i + 1) / n, colour])
    return scale


def grid_raster(frame: pd.DataFrame, resolution: int, label_index, colours: dict,
                title: str = "") -> go.Figure:
    """
    Raster of predicted label indices over the lattice, one cell per grid
    point, coloured with the same per-category colours as the maps.
    """
    n_classes = len(label_index)
    z = frame["predicted_label"].to_numpy().reshape(resolution, resolution)
    xs = frame["x"].to_numpy()[:resolution]
    ys = frame["y"].to_numpy()[::resolution]
    scale = _discrete_colorscale([colours[c] for c in label_index.categories])

    fig = go.Figure(go.Heatmap(
        z=z,
        x=xs,
        y=ys,
        zmin=-0.5,
        zmax=n_classes - 0.5,
        colorscale=scale,
        customdata=label_index.decode(z.ravel()).reshape(z.shape),
        hovertemplate="%{customdata}<br>(%{x:.4f}, %{y:.4f})<extra></extra>",
        colorbar=dict(
            tickvals=list(range(n_classes)),
            ticktext=list(label_index.categories),
            title="Predicted arrest type",
        ),
    ))
    fig = apply_base_layout(fig, height=700, hovermode="closest", title=title)
    fig.update_yaxes(scaleanchor="x", scaleratio=1, showticklabels=False)
    fig.update_xaxes(showticklabels=False)
    return fig
