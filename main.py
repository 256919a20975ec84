#!/usr/bin/env python3
"""
ML Algorithm Visualizer - Main Entry Point

Trains every from-scratch kernel on its synthetic dataset with the default
hyperparameter panels and reports the metrics the visualizer would show.

Usage:
    python main.py                          # Run every algorithm
    python main.py --algorithm knn          # Run one algorithm
    python main.py --seed 7                 # Different datasets / initialization
    python main.py --save-plots plots       # Also save matplotlib figures
    python main.py --quiet                  # Only print the final metrics
"""

import argparse
import os
import sys

import numpy as np

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import (
    CLASS_NAMES,
    DEFAULT_SEED,
    FEATURE_NAMES,
    PLOT_RESOLUTION,
    get_default_config,
)
from ml_kernels import (
    DecisionTreeClassifier,
    KNeighborsClassifier,
    LinearRegressionGD,
    LogisticRegressionGD,
    NeuralNetwork,
    RandomForestClassifier,
    make_blobs,
    make_clusters,
    make_diagonal,
    make_linear,
    make_quadrants,
    make_xor,
)
from evaluation import confusion_matrix, dataset_summary, print_confusion_matrix

ALGORITHMS = ('linear', 'logistic', 'knn', 'tree', 'forest', 'nn')


def print_banner(title: str):
    print()
    print("=" * 50)
    print(title)
    print("=" * 50)


def print_dataset(X, y=None):
    summary = dataset_summary(X, y, feature_names=FEATURE_NAMES)
    print(f"Samples: {summary.n_samples}")
    for name, stats in summary.features.items():
        print(f"  {name}: min={stats.min:.2f} max={stats.max:.2f} "
              f"mean={stats.mean:.2f} median={stats.median:.2f}")
    if summary.class_counts:
        counts = ", ".join(f"{label}: {count}" for label, count in summary.class_counts.items())
        balance = "balanced" if summary.balanced else "imbalanced"
        print(f"  Classes: {counts} ({balance})")


def _plot_path(plot_dir, name):
    if not plot_dir:
        return None
    os.makedirs(plot_dir, exist_ok=True)
    return os.path.join(plot_dir, f"{name}.png")


def _save_surface(model, X, y, title, plot_dir, name):
    path = _plot_path(plot_dir, name)
    if path is None:
        return
    from evaluation.plots import plot_decision_surface
    import matplotlib.pyplot as plt

    fig = plot_decision_surface(model.predict, X, y, resolution=PLOT_RESOLUTION,
                                title=title, feature_names=FEATURE_NAMES, save_path=path)
    plt.close(fig)
    print(f"Saved plot: {path}")


def _save_curve(history, metrics, title, plot_dir, name):
    path = _plot_path(plot_dir, name)
    if path is None:
        return
    from evaluation.plots import plot_training_curve
    import matplotlib.pyplot as plt

    fig = plot_training_curve(history, metrics=metrics, title=title, save_path=path)
    plt.close(fig)
    print(f"Saved plot: {path}")


# =============================================================================
# DEMOS
# =============================================================================

def run_linear(panel, seed, plot_dir=None, verbose=1):
    """Linear regression by gradient descent on a noisy line."""
    print_banner("Linear Regression (Gradient Descent)")
    x, y = make_linear(random_state=seed)
    print_dataset(x.reshape(-1, 1), None)

    model = LinearRegressionGD(verbose=verbose, **panel.values()).fit(x, y)
    final = model.history_.final

    print(f"Fitted line: y = {model.m:.4f}x + {model.b:.4f}")
    print(f"Steps recorded: {len(model.history_)}")
    print(f"Final MSE: {final.mse:.6f}")
    print(f"R-squared: {model.score(x, y):.4f}")

    path = _plot_path(plot_dir, "linear_regression")
    if path is not None:
        from evaluation.plots import plot_regression_fit
        import matplotlib.pyplot as plt

        fig = plot_regression_fit(x, y, model.m, model.b, save_path=path)
        plt.close(fig)
        print(f"Saved plot: {path}")
    _save_curve(model.history_, ('mse',), "Linear Regression - MSE", plot_dir, "linear_mse")
    return model


def run_logistic(panel, seed, plot_dir=None, verbose=1):
    """Logistic regression on two separated blobs."""
    print_banner("Logistic Regression")
    X, y = make_blobs(random_state=seed)
    print_dataset(X, y)

    model = LogisticRegressionGD(verbose=verbose, **panel.values()).fit(X, y)
    w1, w2, b = model.history_.final.weights

    print(f"Weights: w1={w1:.4f} w2={w2:.4f} b={b:.4f}")
    print(f"Final loss: {model.history_.final.loss:.6f}")
    print(f"Accuracy: {model.score(X, y):.4f}")

    boundary = model.boundary()
    if boundary is None:
        print("Decision boundary: undefined (w2 ~ 0)")
    else:
        print(f"Decision boundary: x2 = {boundary[0]:.4f} * x1 + {boundary[1]:.4f}")

    _save_surface(model, X, y, "Logistic Regression", plot_dir, "logistic_surface")
    _save_curve(model.history_, ('loss',), "Logistic Regression - Loss", plot_dir, "logistic_loss")
    return model


def run_knn(panel, seed, plot_dir=None, verbose=1):
    """K-nearest neighbors on three clusters."""
    print_banner("K-Nearest Neighbors")
    X, y = make_clusters(random_state=seed)
    print_dataset(X, y)

    model = KNeighborsClassifier(**panel.values()).fit(X, y)
    query = np.mean(X, axis=0)
    result = model.classify(query)

    print(f"k={model.n_neighbors} metric={model.metric} weighted={model.weighted}")
    if verbose:
        print(f"Query ({query[0]:.2f}, {query[1]:.2f}) -> class {result.predicted_class}")
        for neighbor in result.neighbors:
            print(f"  #{neighbor.index}: d={neighbor.distance:.3f} label={neighbor.label}")
    print(f"Training accuracy: {model.score(X, y):.4f}")
    print(f"Leave-one-out accuracy: {model.leave_one_out_accuracy():.4f}")

    cm = confusion_matrix(y, model.predict(X), n_classes=3)
    print(print_confusion_matrix(cm, CLASS_NAMES))

    _save_surface(model, X, y, "K-Nearest Neighbors", plot_dir, "knn_surface")
    return model


def run_tree(panel, seed, plot_dir=None, verbose=1):
    """Decision tree on axis-aligned regions."""
    print_banner("Decision Tree")
    X, y = make_quadrants(random_state=seed)
    print_dataset(X, y)

    model = DecisionTreeClassifier(**panel.values()).fit(X, y)

    print(f"Depth: {model.get_depth()}  Nodes: {model.get_n_nodes()}  "
          f"Leaves: {model.get_n_leaves()}")
    print(f"Training accuracy: {model.score(X, y):.4f}")
    if verbose:
        for name, value in zip(FEATURE_NAMES, model.feature_importances_):
            print(f"  importance[{name}] = {value:.4f}")

    _save_surface(model, X, y, "Decision Tree", plot_dir, "tree_surface")
    return model


def run_forest(panel, seed, plot_dir=None, verbose=1):
    """Random forest on diagonal regions."""
    print_banner("Random Forest")
    X, y = make_diagonal(random_state=seed)
    print_dataset(X, y)

    model = RandomForestClassifier(random_state=seed, feature_names=FEATURE_NAMES,
                                   **panel.values()).fit(X, y)

    if verbose:
        for i, tree in enumerate(model.trees):
            print(f"  Tree {i}: samples={tree.sample_size} oob={len(tree.oob_indices)} "
                  f"features={list(tree.features_used)} nodes={tree.n_nodes}")
    print(f"Training accuracy: {model.score(X, y):.4f}")
    print(f"Out-of-bag error: {model.oob_error_:.4f}")
    for name, value in model.feature_importance().items():
        print(f"  importance[{name}] = {value:.4f}")

    _save_surface(model, X, y, "Random Forest", plot_dir, "forest_surface")
    return model


def run_nn(panel, seed, plot_dir=None, verbose=1):
    """Neural network on the XOR pattern."""
    print_banner("Neural Network")
    X, y = make_xor(random_state=seed)
    print_dataset(X, y)

    model = NeuralNetwork(random_state=seed, verbose=verbose, **panel.values()).fit(X, y)
    final = model.history_.final

    print(f"Layers: {model.layer_sizes}  activation={model.activation}")
    print(f"Final loss: {final.loss:.6f}")
    print(f"Accuracy: {final.accuracy:.4f}")

    _save_surface(model, X, y, "Neural Network", plot_dir, "nn_surface")
    _save_curve(model.history_, ('loss', 'accuracy'), "Neural Network - Training",
                plot_dir, "nn_training")
    return model


DEMOS = {
    'linear': run_linear,
    'logistic': run_logistic,
    'knn': run_knn,
    'tree': run_tree,
    'forest': run_forest,
    'nn': run_nn,
}


def build_parser():
    parser = argparse.ArgumentParser(
        description="ML Algorithm Visualizer - from-scratch ML kernels",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py                          # Run every algorithm
    python main.py --algorithm forest       # Run the random forest only
    python main.py --save-plots plots       # Save decision surfaces and curves
        """
    )

    parser.add_argument('--algorithm', choices=ALGORITHMS + ('all',), default='all',
                        help='Algorithm to run (default: all)')
    parser.add_argument('--seed', type=int, default=DEFAULT_SEED,
                        help=f'Random seed for datasets and initialization (default: {DEFAULT_SEED})')
    parser.add_argument('--save-plots', metavar='DIR', default=None,
                        help='Directory to save matplotlib figures to')
    parser.add_argument('--quiet', action='store_true',
                        help='Suppress per-step progress output')
    return parser


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    print("=" * 50)
    print("ML Algorithm Visualizer")
    print("=" * 50)

    if args.save_plots:
        import matplotlib
        matplotlib.use('Agg')

    config = get_default_config()
    verbose = 0 if args.quiet else 1
    names = ALGORITHMS if args.algorithm == 'all' else (args.algorithm,)

    models = {}
    for name in names:
        models[name] = DEMOS[name](config[name], args.seed,
                                   plot_dir=args.save_plots, verbose=verbose)
    return models


if __name__ == "__main__":
    main()
