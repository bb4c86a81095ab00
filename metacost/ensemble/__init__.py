from .sampler import BootstrapSampler
from .bagging import BaggedEnsemble

__all__ = ["BootstrapSampler", "BaggedEnsemble"]
