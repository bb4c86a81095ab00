import numpy as np
from sklearn.base import BaseEstimator, ClassifierMixin
from sklearn.tree import DecisionTreeClassifier
from sklearn.utils.validation import check_array, check_X_y

from ..costs.cost_matrix import CostMatrix
from ..data.dataset import Attribute, Dataset
from ..exceptions import NotBuiltError
from .learners import sklearn_factory
from .metacost import MetaCost, MetaCostConfig


class MetaCostClassifier(BaseEstimator, ClassifierMixin):
    """
    Scikit-learn interface to MetaCost.

    Bags the base estimator, relabels the training set with the minimum
    expected cost class of every sample, and fits one copy of the base
    estimator on the relabelled data. Prediction only uses that final
    estimator, so it is as fast as the plain base estimator.

    Parameters
    ----------
    estimator : classifier, default=None
        Base estimator with ``predict_proba``. Defaults to a
        ``DecisionTreeClassifier``.
    cost_matrix : array-like of shape (n_classes, n_classes), default=None
        ``cost_matrix[i, j]`` is the cost of predicting ``classes_[j]`` for a
        sample of class ``classes_[i]``. ``None`` means unit costs.
    n_iterations : int, default=10
        Number of bagging iterations.
    bag_size_percent : int, default=100
        Size of each bag as a percentage of the training set.
    random_state : int, default=1
        Seed of the bootstrap draws.
    use_weights : bool, default=False
        Resample proportionally to ``sample_weight`` instead of uniformly.
    n_jobs : int, default=None
        Number of joblib workers used to fit the bagged models.
    verbose : bool, default=False
        Print progress.
    """

    def __init__(
        self,
        estimator=None,
        cost_matrix=None,
        n_iterations=10,
        bag_size_percent=100,
        random_state=1,
        use_weights=False,
        n_jobs=None,
        verbose=False,
    ):
        self.estimator = estimator
        self.cost_matrix = cost_matrix
        self.n_iterations = n_iterations
        self.bag_size_percent = bag_size_percent
        self.random_state = random_state
        self.use_weights = use_weights
        self.n_jobs = n_jobs
        self.verbose = verbose

    def _base_estimator(self):
        if self.estimator is None:
            return DecisionTreeClassifier(random_state=self.random_state)
        return self.estimator

    def _to_dataset(self, X, y_enc, sample_weight=None):
        attributes = [Attribute(f"x{i}") for i in range(X.shape[1])]
        attributes.append(Attribute("class", tuple(str(c) for c in self.classes_)))
        return Dataset(attributes, X, y_enc, weights=sample_weight)

    def fit(self, X, y, sample_weight=None):
        """
        Fit the bagged ensemble, relabel the training data and fit the
        final estimator.
        """
        self.__dict__.pop("metacost_", None)
        X, y = check_X_y(X, y, ensure_all_finite="allow-nan")
        self.classes_, y_enc = np.unique(y, return_inverse=True)
        self.n_features_in_ = X.shape[1]

        n_classes = len(self.classes_)
        if self.cost_matrix is None:
            cost_matrix = CostMatrix.zero_one(n_classes)
        elif isinstance(self.cost_matrix, CostMatrix):
            cost_matrix = self.cost_matrix
        else:
            cost_matrix = CostMatrix(self.cost_matrix)

        config = MetaCostConfig(
            iterations=self.n_iterations,
            bag_size_percent=self.bag_size_percent,
            seed=self.random_state,
            use_weights=self.use_weights,
            n_jobs=self.n_jobs,
        )
        metacost = MetaCost(
            sklearn_factory(self._base_estimator(), random_state=self.random_state),
            config=config,
            verbose=self.verbose,
        )
        metacost.build(self._to_dataset(X, y_enc, sample_weight), cost_matrix=cost_matrix)

        self.metacost_ = metacost
        self.cost_matrix_ = metacost.cost_matrix_
        self.relabeled_y_ = self.classes_[metacost.relabeled_labels_]
        self.n_relabeled_ = metacost.n_relabeled_
        return self

    def _final_estimator(self):
        if not hasattr(self, "metacost_"):
            raise NotBuiltError(
                f"This {type(self).__name__} instance is not fitted yet. "
                "Call 'fit' with appropriate arguments before using this estimator."
            )
        return self.metacost_.model_

    def predict_proba(self, X):
        """Class probabilities of the final estimator, columns in ``classes_`` order."""
        final = self._final_estimator()
        X = check_array(X, ensure_all_finite="allow-nan")
        return final.predict_proba(X)

    def predict(self, X):
        """Predict class labels with the final estimator."""
        probs = self.predict_proba(X)
        return self.classes_[np.argmax(probs, axis=1)]
