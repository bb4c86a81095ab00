from .dataset import MISSING, Attribute, Instance, Dataset
from .loader import from_frame, make_csv_loader

__all__ = ["MISSING", "Attribute", "Instance", "Dataset", "from_frame", "make_csv_loader"]
