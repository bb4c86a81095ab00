from .learners import Learner, LearnerFactory, SklearnLearner, sklearn_factory
from .metacost import MetaCost, MetaCostConfig
from .classifier import MetaCostClassifier
from .metrics import cost_score, average_cost, Metric, REGISTRY

__all__ = [
    "Learner",
    "LearnerFactory",
    "SklearnLearner",
    "sklearn_factory",
    "MetaCost",
    "MetaCostConfig",
    "MetaCostClassifier",
    "cost_score",
    "average_cost",
    "Metric",
    "REGISTRY",
]
