from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

plt.style.use("dark_background")


def save_figure(fig: plt.Figure, path: Path, dpi: int = 150) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return path


# metrics_df: Dataframe with columns: model, accuracy
def plot_metrics_bar(metrics_df: pd.DataFrame) -> plt.Figure:
    df = metrics_df.set_index("model")

    fig, ax = plt.subplots(figsize=(6, 3.5))
    x = np.arange(len(df.index))
    bars = ax.bar(x, df["accuracy"].values, 0.5, color="#4C72B0")

    for bar, value in zip(bars, df["accuracy"].values):
        ax.text(
            bar.get_x() + bar.get_width() / 2,
            value,
            f"{value:.3f}",
            ha="center",
            va="bottom",
            fontsize=8,
        )

    ax.set_title("Test Accuracy by Model")
    ax.set_xlabel("Model")
    ax.set_ylabel("Accuracy")
    ax.set_ylim(0, 1.05)
    ax.set_xticks(x)
    ax.set_xticklabels(df.index.tolist(), rotation=0)
    fig.tight_layout()
    return fig


# cm_df: Dataframe with index=true labels, columns=pred labels
def plot_confusion_matrix_heatmap(cm_df: pd.DataFrame, title: str = "Confusion Matrix") -> plt.Figure:

    fig, ax = plt.subplots(figsize=(4.5, 3.8))
    im = ax.imshow(cm_df.values, cmap="Blues")

    ax.set_title(title)
    ax.set_xlabel("Predicted label")
    ax.set_ylabel("True label")

    ax.set_xticks(np.arange(cm_df.shape[1]))
    ax.set_yticks(np.arange(cm_df.shape[0]))
    ax.set_xticklabels(cm_df.columns)
    ax.set_yticklabels(cm_df.index)

    threshold = cm_df.values.max() / 2.0
    for i in range(cm_df.shape[0]):
        for j in range(cm_df.shape[1]):
            value = int(cm_df.iat[i, j])
            ax.text(
                j,
                i,
                value,
                ha="center",
                va="center",
                fontsize=12,
                color="black" if value > threshold else "white",
            )

    fig.colorbar(im, ax=ax, fraction=0.046, pad=0.04)
    fig.tight_layout()
    return fig


# corr: square correlation DataFrame; order: variable order for both axes
def plot_correlation_heatmap(
    corr: pd.DataFrame, order: Optional[List[str]] = None
) -> plt.Figure:
    order = order or list(corr.columns)
    data = corr.loc[order, order]

    fig, ax = plt.subplots(figsize=(11, 9.5))
    im = ax.imshow(data.values, cmap="RdBu_r", vmin=-1.0, vmax=1.0)

    ax.set_title("Pearson Correlation")
    ax.set_xticks(np.arange(len(order)))
    ax.set_yticks(np.arange(len(order)))
    ax.set_xticklabels(order, rotation=90, fontsize=7)
    ax.set_yticklabels(order, fontsize=7)

    fig.colorbar(im, ax=ax, fraction=0.046, pad=0.04)
    fig.tight_layout()
    return fig


def plot_roc_curve(fpr, tpr, auc_value: float, model_name: str = "knn") -> plt.Figure:
    fig, ax = plt.subplots(figsize=(5, 4.5))
    ax.plot(fpr, tpr, color="#5DA5DA", lw=2, label=f"{model_name} (AUC = {auc_value:.3f})")
    ax.plot([0, 1], [0, 1], "--", color="grey", lw=1)

    ax.set_title("ROC Curve")
    ax.set_xlabel("False positive rate")
    ax.set_ylabel("True positive rate")
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1.02)
    ax.legend(loc="lower right")
    fig.tight_layout()
    return fig


def plot_network_topology(mlp, input_names: Optional[List[str]] = None) -> plt.Figure:
    """
    Draw a fitted feed-forward network: nodes per layer, edges coloured by
    weight sign (blue positive, red negative) and scaled by magnitude.
    """
    coefs = mlp.coefs_
    layer_sizes = [coefs[0].shape[0]] + [w.shape[1] for w in coefs]
    input_names = input_names or [f"I{i + 1}" for i in range(layer_sizes[0])]

    tallest = max(layer_sizes)

    def positions(size):
        return np.linspace(tallest - 1, 0, size) if size > 1 else np.array([(tallest - 1) / 2])

    ys = [positions(size) for size in layer_sizes]
    max_abs = max(np.abs(w).max() for w in coefs) or 1.0

    fig, ax = plt.subplots(figsize=(9, 10))
    for layer, weights in enumerate(coefs):
        for i in range(weights.shape[0]):
            for j in range(weights.shape[1]):
                w = weights[i, j]
                ax.plot(
                    [layer, layer + 1],
                    [ys[layer][i], ys[layer + 1][j]],
                    color="#5DA5DA" if w >= 0 else "#E15759",
                    lw=0.2 + 2.5 * abs(w) / max_abs,
                    alpha=0.6,
                    zorder=1,
                )

    for layer, layer_y in enumerate(ys):
        ax.scatter(
            np.full(len(layer_y), layer),
            layer_y,
            s=120,
            color="#DDDDDD",
            edgecolors="black",
            zorder=2,
        )

    for name, y in zip(input_names, ys[0]):
        ax.text(-0.08, y, name, ha="right", va="center", fontsize=7)
    for j, y in enumerate(ys[-1]):
        ax.text(len(coefs) + 0.08, y, f"O{j + 1}", ha="left", va="center", fontsize=8)

    ax.set_xticks(range(len(layer_sizes)))
    ax.set_xticklabels(
        ["Input"] + [f"Hidden {k}" for k in range(1, len(coefs))] + ["Output"]
    )
    ax.set_yticks([])
    ax.set_xlim(-0.9, len(coefs) + 0.4)
    ax.set_title("Neural Network Topology")
    fig.tight_layout()
    return fig


# fi_df columns: feature, importance (or abs_coef)
def plot_feature_importance(fi_df: pd.DataFrame, top_n: int = 20) -> plt.Figure:

    df = fi_df.head(top_n).copy()

    if "importance" in df.columns:
        score_col = "importance"
        title = "Decision Tree Feature Importance"
    elif "abs_coef" in df.columns:
        score_col = "abs_coef"
        title = "Logistic Regression Coefficients (abs)"
    else:
        raise ValueError("Expected 'importance' or 'abs_coef' in feature importance DF.")

    df = df.sort_values(score_col, ascending=True)

    fig, ax = plt.subplots(figsize=(6, 4))
    ax.barh(df["feature"], df[score_col], color="#4C72B0")
    ax.grid(axis="x", alpha=0.2)

    ax.set_title(title)
    ax.set_xlabel(score_col)
    ax.set_ylabel("feature")
    fig.tight_layout()
    return fig
