"""Machine Learning domain components."""

from .classifiers import FeatureCountXGBClassifier
from .transformers import FeatureSelector, SampleStandardScaler

__all__ = ["FeatureCountXGBClassifier", "FeatureSelector", "SampleStandardScaler"]
