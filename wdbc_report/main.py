import argparse
import logging
import warnings
from pathlib import Path

import numpy as np
from sklearn.exceptions import ConvergenceWarning

from wdbc_report.config import (
    KNN_NEIGHBORS,
    LABEL_COLUMN,
    LOGS_DIR,
    MODEL_NAMES,
    RAW_DATA_PATH,
    TRAIN_FRACTION,
    SeedPolicy,
)
from wdbc_report.data.load_data import export_sklearn_dataset
from wdbc_report.data.preprocess import NormalizerArtifacts, normalize
from wdbc_report.data.summary import ORDER_METHODS
from wdbc_report.errors import ReportError, SplitMismatchError
from wdbc_report.modeling.evaluate import evaluate_models
from wdbc_report.modeling.explain import save_feature_rankings
from wdbc_report.modeling.train import load_models, save_models, train_models
from wdbc_report.pipeline import load_and_prepare, write_eda_report, write_evaluation_report

EDA_TAG = "[EDA]"
TRAIN_TAG = "[TRAIN]"
EVAL_TAG = "[EVAL]"
LOG_PATH = LOGS_DIR / "app.log"
LOGS_DIR.mkdir(parents=True, exist_ok=True)

logger = logging.getLogger(__name__)
if not logger.handlers:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(LOG_PATH),
        ],
    )


def _seeds(args) -> SeedPolicy:
    return SeedPolicy.uniform(args.seed, split=args.split_seed)


def _prepare(args):
    return load_and_prepare(
        Path(args.data),
        train_fraction=args.train_fraction,
        split_seed=_seeds(args).split,
    )


def _artifacts_from_prep(prep: dict) -> NormalizerArtifacts:
    """
    Reconstruct NormalizerArtifacts from saved preprocessing metadata.
    """
    return NormalizerArtifacts(
        feature_columns=prep["feature_columns"],
        scaler=prep["scaler"],
    )


def _saved_test_rows(prepared, prep: dict) -> np.ndarray:
    """
    Held-out rows recorded at training time. The split requested on the
    command line must reproduce them exactly.
    """
    saved = prep.get("test_index")
    if saved is None:
        raise SplitMismatchError("Saved models carry no train/test split. Re-run train.")

    saved = np.asarray(saved)
    if not np.array_equal(np.sort(saved), np.sort(prepared.split.test_index)):
        raise SplitMismatchError(
            f"Models were trained with split seed {prep.get('split_seed')} and "
            f"train fraction {prep.get('train_fraction')}; pass the same "
            "--split-seed/--seed and --train-fraction to eval, or re-run train."
        )
    return saved


def cmd_prepare_data(args) -> int:
    path = export_sklearn_dataset(Path(args.data))
    print(f"{EDA_TAG} Dataset written to: {path}")
    return 0


def cmd_eda(args) -> int:
    logger.info("CLI eda started: data=%s order=%s", args.data, args.order)
    prepared = _prepare(args)
    paths = write_eda_report(prepared.df, order_method=args.order)

    counts = prepared.df[LABEL_COLUMN].value_counts(sort=False)
    print(f"{EDA_TAG} rows={len(prepared.df)} features={len(prepared.artifacts.feature_columns)}")
    for label, count in counts.items():
        print(f"{EDA_TAG}   {label}: {count}")
    for k, p in paths.items():
        print(f"{EDA_TAG}   {k}: {p}")
    return 0


def cmd_train(args) -> int:
    seeds = _seeds(args)
    logger.info(
        "CLI train started: seeds=%s train_fraction=%s k=%s",
        seeds,
        args.train_fraction,
        args.k,
    )
    prepared = _prepare(args)
    split = prepared.split

    models = train_models(split.X_train, split.y_train, seeds=seeds, n_neighbors=args.k)
    paths = save_models(
        models,
        prepared.artifacts,
        split=split,
        split_seed=seeds.split,
        train_fraction=args.train_fraction,
    )

    print(f"{TRAIN_TAG} Models saved successfully.")
    for k, p in paths.items():
        print(f"{TRAIN_TAG}   {k}: {p}")

    return 0


def cmd_eval(args) -> int:
    logger.info(
        "CLI eval started: split_seed=%s train_fraction=%s model=%s explain=%s",
        _seeds(args).split,
        args.train_fraction,
        args.model,
        args.explain,
    )
    try:
        models, prep = load_models()
    except FileNotFoundError:
        print(f"{EVAL_TAG} No saved models found. Run: python3 -m wdbc_report.main train")
        return 1

    prepared = _prepare(args)
    test_rows = _saved_test_rows(prepared, prep)
    artifacts = _artifacts_from_prep(prep)

    X_test = normalize(prepared.df, artifacts)[test_rows]
    y_test = prepared.y[test_rows]

    if args.model != "all":
        models = {args.model: models[args.model]}

    results = evaluate_models(models, X_test, y_test)
    paths = write_evaluation_report(results, models, artifacts.feature_columns)

    print(f"{EVAL_TAG} Metrics saved to: {paths['metrics']}")
    for name, r in results.items():
        line = (
            f"{EVAL_TAG} {name}: acc={r.accuracy:.4f} "
            f"TP={r.true_positive} TN={r.true_negative} "
            f"FP={r.false_positive} FN={r.false_negative}"
        )
        if r.auc is not None:
            line += f" auc={r.auc:.4f}"
        print(line)
        print(r.crosstab.to_string())

    if args.explain:
        if args.model != "all":
            print(f"{EVAL_TAG} --explain needs --model all; skipped.")
        else:
            for k, p in save_feature_rankings(
                models, artifacts.feature_columns, top_n=args.top_n
            ).items():
                print(f"{EVAL_TAG} Saved feature ranking ({k}) to: {p}")

    return 0


def cmd_all(args) -> int:
    logger.info("CLI all started.")
    for step in (cmd_eda, cmd_train, cmd_eval):
        rc = step(args)
        if rc != 0:
            return rc
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wdbc-report",
        description="Exploratory analysis and classifier comparison for breast cancer diagnosis.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common_flags(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--data",
            default=str(RAW_DATA_PATH),
            help=f"Input CSV (default: {RAW_DATA_PATH})",
        )
        p.add_argument("--seed", type=int, default=42, help="Seed for model fitting (default: 42)")
        p.add_argument(
            "--split-seed",
            type=int,
            default=None,
            help="Seed for the train/test split (default: --seed)",
        )
        p.add_argument(
            "--train-fraction",
            type=float,
            default=TRAIN_FRACTION,
            help=f"Train split fraction (default: {TRAIN_FRACTION})",
        )

    def add_model_flags(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--model",
            choices=["all"] + MODEL_NAMES,
            default="all",
            help="Which model to evaluate (default: all)",
        )
        p.add_argument(
            "--explain", action="store_true", help="Also write feature ranking CSVs"
        )
        p.add_argument(
            "--top-n", type=int, default=20, help="Top-N features to save (default: 20)"
        )

    def add_eda_flags(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--order",
            choices=ORDER_METHODS,
            default="hclust",
            help="Variable order of the correlation heat-map (default: hclust)",
        )

    def add_train_flags(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--k",
            type=int,
            default=KNN_NEIGHBORS,
            help=f"Neighbours for KNN (default: {KNN_NEIGHBORS})",
        )

    p_data = sub.add_parser("prepare-data", help="Write the bundled dataset as CSV")
    p_data.add_argument("--data", default=str(RAW_DATA_PATH), help="Output CSV path")
    p_data.set_defaults(func=cmd_prepare_data)

    p_eda = sub.add_parser("eda", help="Summary statistics and correlation heat-map")
    add_common_flags(p_eda)
    add_eda_flags(p_eda)
    p_eda.set_defaults(func=cmd_eda)

    p_train = sub.add_parser("train", help="Train models and save artifacts")
    add_common_flags(p_train)
    add_train_flags(p_train)
    p_train.set_defaults(func=cmd_train)

    p_eval = sub.add_parser(
        "eval", help="Evaluate saved models and write metrics/reports"
    )
    add_common_flags(p_eval)
    add_model_flags(p_eval)
    p_eval.set_defaults(func=cmd_eval)

    p_all = sub.add_parser("all", help="EDA + train + eval (one-shot)")
    add_common_flags(p_all)
    add_eda_flags(p_all)
    add_train_flags(p_all)
    add_model_flags(p_all)
    p_all.set_defaults(func=cmd_all)

    return parser


def main() -> int:
    # Suppress noisy numerical warnings emitted inside scikit-learn
    warnings.filterwarnings("ignore", category=ConvergenceWarning)
    warnings.filterwarnings("ignore", category=RuntimeWarning, module=r"sklearn\..*")
    warnings.filterwarnings("ignore", category=FutureWarning, module=r"sklearn\..*")

    parser = build_parser()
    args = parser.parse_args()
    try:
        return args.func(args)
    except ReportError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
