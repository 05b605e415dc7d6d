"""
sections/overview.py
--------------------
'Overview' section — what the arrest records contain: totals,
arrests per category, and the hour-of-day profile of the most
common arrest types.
"""

import streamlit as st

from arrestmap.charts import category_counts_chart, hourly_arrests_chart
from arrestmap.constants import CHART_CONFIG, DAY_OF_WEEK_ORDINALS
from arrestmap.data_loaders import colour_map, load_arrest_summary, load_grid_outputs
from arrestmap.helpers import fmt_count


def render():
    st.title("San Francisco Arrests: What, Where and When")
    st.markdown("""
    This dashboard uses San Francisco police incident records that ended in
    an arrest. A gradient-boosted tree model learns which type of arrest is
    most likely at a given place and time, and the map section shows its
    prediction across the whole city.
    """)

    summary  = load_arrest_summary()
    headline = summary["headline"].iloc[0]
    colours  = colour_map(load_grid_outputs()["colours"])

    col1, col2, col3 = st.columns(3)
    col1.metric("Arrests recorded", fmt_count(headline["total_arrests"]))
    col2.metric("Arrest categories", f"{int(headline['categories'])}")
    col3.metric("Years covered", f"{int(headline['year_from'])}–{int(headline['year_to'])}")

    st.divider()

    st.subheader("Arrests by category")
    fig = category_counts_chart(summary["by_category"], colours=colours)
    st.plotly_chart(fig, use_container_width=True, config=CHART_CONFIG)

    st.subheader("Time of day")
    st.markdown("""
    Arrest types follow different daily rhythms, which is why hour of day
    is one of the six features the model learns from.
    """)
    top_n = st.slider("Categories shown", min_value=3, max_value=10, value=5)
    fig2 = hourly_arrests_chart(summary["by_hour"], top_n=top_n, colours=colours)
    st.plotly_chart(fig2, use_container_width=True, config=CHART_CONFIG)

    st.subheader("Day of week")
    weekday = (
        summary["by_weekday"]
        .groupby(["weekday", "day_of_week"])["count"].sum()
        .reset_index()
        .sort_values("weekday")
    )
    st.bar_chart(
        weekday.set_index("day_of_week")["count"].reindex(list(DAY_OF_WEEK_ORDINALS)),
    )

    st.caption("Source: SFPD incident reports via DataSF, arrests only.")
