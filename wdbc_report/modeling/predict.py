import pandas as pd

from wdbc_report.data.preprocess import NormalizerArtifacts, decode_labels, normalize
from wdbc_report.modeling.train import load_models


def predict_from_dataframe(
    df_features: pd.DataFrame,
    model_name: str = "knn",
    include_label_id: bool = True,
    models_dir=None,
):
    """
    Predict diagnosis from a raw (un-normalized) feature dataframe.
    """
    models, prep = load_models() if models_dir is None else load_models(models_dir)

    if model_name not in models:
        raise ValueError(
            f"Unknown model_name='{model_name}'. Available: {list(models.keys())}"
        )

    model = models[model_name]

    artifacts = NormalizerArtifacts(
        feature_columns=prep["feature_columns"],
        scaler=prep["scaler"],
    )

    X = normalize(df_features, artifacts)

    out = pd.DataFrame(index=df_features.index)

    if hasattr(model, "predict_with_confidence"):
        y_pred, confidence = model.predict_with_confidence(X)
    else:
        y_pred, confidence = model.predict(X), None

    if include_label_id:
        out["predicted_label_id"] = y_pred

    out["predicted_label"] = decode_labels(y_pred)

    if confidence is not None:
        out["confidence"] = confidence

    return out
