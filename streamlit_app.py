from pathlib import Path
import logging
import json

import streamlit as st
import pandas as pd

from wdbc_report.config import LABEL_COLUMN, LOGS_DIR, MODEL_NAMES, REPORTS_DIR
from wdbc_report.data.load_data import load_raw_data
from wdbc_report.data.preprocess import clean_df
from wdbc_report.data.summary import ORDER_METHODS, cluster_order, correlation_matrix, summarize
from wdbc_report.modeling.predict import predict_from_dataframe
from wdbc_report.modeling.train import load_models
from wdbc_report.viz.plots import (
    plot_confusion_matrix_heatmap,
    plot_correlation_heatmap,
    plot_metrics_bar,
    plot_network_topology,
    plot_roc_curve,
)

# Logging
LOGS_DIR.mkdir(parents=True, exist_ok=True)

logger = logging.getLogger(__name__)
if not logger.handlers:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(LOGS_DIR / "app.log"),
        ],
    )

st.set_page_config(
    page_title="Breast Cancer Model Comparison",
    layout="wide",
)


def _metrics_path() -> Path:
    return REPORTS_DIR / "metrics.json"


@st.cache_data
def load_clean_dataset():
    return clean_df(load_raw_data())


@st.cache_data
def load_metrics():
    with open(_metrics_path(), "r") as f:
        return json.load(f)


def load_confusion_matrix(metrics: dict, model_name: str) -> pd.DataFrame:
    cm_data = metrics[model_name]["confusion_matrix_labeled"]
    return pd.DataFrame(cm_data["matrix"], index=cm_data["labels"], columns=cm_data["labels"])


def main():
    st.title("Breast Cancer Diagnosis: Classifier Comparison")
    st.caption("KNN, decision tree, neural network and logistic regression on min-max normalized features")

    st.sidebar.header("Options")
    model_for_cm = st.sidebar.selectbox("Confusion matrix model", options=MODEL_NAMES, index=0)
    order_method = st.sidebar.selectbox("Correlation order", options=ORDER_METHODS, index=0)
    logger.info("User options: confusion_matrix_model=%s order=%s", model_for_cm, order_method)

    # Dataset
    st.header("Dataset Summary")
    try:
        df = load_clean_dataset()
        summary = summarize(df)
        c1, c2 = st.columns([1, 2])
        with c1:
            st.metric("Rows", summary.n_rows)
            st.metric("Columns (cleaned)", summary.n_columns)
            st.dataframe(
                summary.label_counts.rename_axis(LABEL_COLUMN).reset_index(name="count"),
                use_container_width=True,
                hide_index=True,
            )
        with c2:
            st.dataframe(summary.statistics, use_container_width=True)

        st.subheader("Correlation heat-map")
        corr = correlation_matrix(df)
        st.pyplot(
            plot_correlation_heatmap(corr, order=cluster_order(corr, method=order_method)),
            use_container_width=True,
        )
    except Exception as e:
        logger.exception("Could not load dataset summary.")
        st.warning(f"Could not load dataset summary. Error: {e}")

    st.divider()

    if not _metrics_path().exists():
        st.error(
            "No evaluation artifacts found in artifacts/reports/.\n\n"
            "Run this from the project root to generate them:\n"
            "```bash\n"
            "python3 -m wdbc_report.main all\n"
            "```\n"
        )
        st.stop()

    st.header("Model Metrics")
    metrics = load_metrics()
    metrics_df = pd.DataFrame(
        [
            {
                "model": name,
                "accuracy": m["accuracy"],
                "TP": m["true_positive"],
                "TN": m["true_negative"],
                "FP": m["false_positive"],
                "FN": m["false_negative"],
                "auc": m.get("auc"),
            }
            for name, m in metrics.items()
        ]
    ).sort_values("accuracy", ascending=False)
    st.dataframe(metrics_df, use_container_width=True, hide_index=True)

    col1, col2 = st.columns([1, 1])
    with col1:
        st.subheader("Accuracy")
        st.pyplot(plot_metrics_bar(metrics_df), use_container_width=True)
    with col2:
        if model_for_cm in metrics:
            st.subheader(f"Confusion Matrix ({model_for_cm})")
            st.pyplot(
                plot_confusion_matrix_heatmap(load_confusion_matrix(metrics, model_for_cm)),
                use_container_width=True,
            )
            st.caption("Rows = true labels, columns = predicted labels.")

    roc_models = [name for name, m in metrics.items() if "roc" in m]
    for name in roc_models:
        st.subheader(f"ROC Curve ({name})")
        roc = metrics[name]["roc"]
        st.pyplot(
            plot_roc_curve(roc["fpr"], roc["tpr"], metrics[name]["auc"], model_name=name),
            use_container_width=False,
        )

    st.divider()

    st.header("Neural Network Topology")
    try:
        models, prep = load_models()
        st.pyplot(
            plot_network_topology(models["neural_network"], input_names=prep["feature_columns"]),
            use_container_width=True,
        )
    except FileNotFoundError:
        st.warning("No saved models found. Run `python3 -m wdbc_report.main train`.")

    st.divider()

    # Predictions (Decision Support)
    st.header("Make a Prediction")
    st.caption("Upload a CSV with the same raw feature columns used during training.")

    uploaded = st.file_uploader("Upload a CSV of samples (rows = samples)", type=["csv"])
    model_for_pred = st.selectbox("Prediction model", MODEL_NAMES, index=0)

    if uploaded is not None:
        try:
            df_in = pd.read_csv(uploaded)
            logger.info(
                "Prediction CSV uploaded: filename=%s rows=%s cols=%s",
                getattr(uploaded, "name", "unknown"),
                len(df_in),
                len(df_in.columns),
            )
            st.dataframe(df_in.head(), use_container_width=True, hide_index=True)

            if st.button("Run prediction"):
                logger.info("Running prediction: model=%s rows=%s", model_for_pred, len(df_in))
                preds = predict_from_dataframe(df_in, model_name=model_for_pred)
                st.subheader("Predictions")
                st.dataframe(preds.reset_index(drop=True), use_container_width=True, hide_index=True)
                st.download_button(
                    "Download predictions as CSV",
                    data=preds.to_csv(index=False).encode("utf-8"),
                    file_name="predictions.csv",
                    mime="text/csv",
                )
        except Exception as e:
            logger.exception("Prediction failed.")
            st.error(f"Prediction failed: {e}")


if __name__ == "__main__":
    main()
