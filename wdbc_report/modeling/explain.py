import numpy as np
import pandas as pd

from wdbc_report.config import REPORTS_DIR


def decision_tree_feature_importance(model, feature_columns, top_n: int = 20) -> pd.DataFrame:
    """
    Entropy-reduction importance of each feature in a fitted decision tree.
    """
    if not hasattr(model, "feature_importances_"):
        raise ValueError("Model does not expose feature_importances_.")

    importances = np.asarray(model.feature_importances_, dtype=float)
    if len(importances) != len(feature_columns):
        raise ValueError(
            f"Mismatch: {len(importances)} importances vs {len(feature_columns)} feature columns."
        )

    return (
        pd.DataFrame({"feature": feature_columns, "importance": importances})
        .sort_values("importance", ascending=False)
        .head(top_n)
        .reset_index(drop=True)
    )


def logistic_regression_coefficients(model, feature_columns, top_n: int = 20) -> pd.DataFrame:
    """
    Coefficients of the binomial fit on normalized features, ranked by magnitude.
    Positive values push toward malignant.
    """
    if not hasattr(model, "coef_"):
        raise ValueError("Model does not expose coef_.")

    coef = np.asarray(model.coef_, dtype=float).ravel()
    if len(coef) != len(feature_columns):
        raise ValueError(
            f"Mismatch: coef has {len(coef)} features vs {len(feature_columns)} feature columns."
        )

    return (
        pd.DataFrame(
            {"feature": feature_columns, "coef": coef, "abs_coef": np.abs(coef)}
        )
        .sort_values("abs_coef", ascending=False)
        .head(top_n)
        .reset_index(drop=True)
    )


def save_feature_rankings(
    models: dict, feature_columns, top_n: int = 20, out_dir=REPORTS_DIR
):
    out_dir.mkdir(parents=True, exist_ok=True)

    tree_path = out_dir / "feature_importance_decision_tree.csv"
    decision_tree_feature_importance(
        models["decision_tree"], feature_columns, top_n=top_n
    ).to_csv(tree_path, index=False)

    lr_path = out_dir / "feature_importance_logistic_regression.csv"
    logistic_regression_coefficients(
        models["logistic_regression"], feature_columns, top_n=top_n
    ).to_csv(lr_path, index=False)

    return {"decision_tree": tree_path, "logistic_regression": lr_path}
