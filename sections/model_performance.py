"""
sections/model_performance.py
-----------------------------
'Model' section — how well the arrest type model does on the held-out
test split: overall statistics, per-category scores, the confusion
matrix, and which features carry the most gain.
"""

import streamlit as st

from arrestmap.charts import confusion_heatmap, feature_importance_chart
from arrestmap.constants import CHART_CONFIG, STATS_RENAME
from arrestmap.data_loaders import load_evaluation
from arrestmap.helpers import fmt_count, fmt_pct, get_stat


def render():
    st.title("How Good Is the Model?")
    st.markdown("""
    A LightGBM multiclass model was trained on 70% of arrests (stratified
    by category), with early stopping on a validation slice of the training
    data. Everything below is measured on the remaining 30%, which the
    model never saw.
    """)

    data       = load_evaluation()
    stats      = data["stats"]
    class_stats = data["class_stats"]

    accuracy = get_stat(stats, "accuracy")
    nir      = get_stat(stats, "no_information_rate")

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Accuracy", fmt_pct(accuracy))
    col2.metric("Most-frequent-class baseline", fmt_pct(nir))
    col3.metric("Kappa", f"{get_stat(stats, 'kappa'):.3f}")
    col4.metric("Test records", fmt_count(get_stat(stats, "n")))

    st.markdown(f"""
    Always guessing the most common arrest type would be right
    {fmt_pct(nir)} of the time. The model improves on that by
    {(accuracy - nir) * 100:.1f} percentage points using only location and time.
    """)

    with st.expander("All overall statistics"):
        table = stats.copy()
        table["stat"] = table["stat"].map(STATS_RENAME).fillna(table["stat"])
        st.dataframe(table.rename(columns={"stat": "Statistic", "value": "Value"}),
                     hide_index=True, use_container_width=True)

    st.divider()

    st.subheader("Per category")
    st.dataframe(
        class_stats.sort_values("support", ascending=False)
        .drop(columns=["label_index"])
        .rename(columns=str.title),
        hide_index=True,
        use_container_width=True,
    )

    st.subheader("Confusion matrix")
    st.markdown("""
    Each column is an actual arrest type; shading shows where the model
    put those records. A strong diagonal means the type is recognised;
    a bright off-diagonal cell means it is often mistaken for another.
    """)
    fig = confusion_heatmap(data["confusion"])
    st.plotly_chart(fig, use_container_width=True, config=CHART_CONFIG)

    st.subheader("Feature importance")
    fig2 = feature_importance_chart(data["importance"])
    st.plotly_chart(fig2, use_container_width=True, config=CHART_CONFIG)

    if not data["importance"].empty:
        top = data["importance"].iloc[0]
        st.caption(
            f"'{top['feature']}' accounts for {top['gain_pct']:.1f}% of the "
            "total split gain."
        )
