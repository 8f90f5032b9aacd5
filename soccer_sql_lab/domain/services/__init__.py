"""Domain services for business logic."""

from .data_loading_service import DataLoadingService
from .feature_assembly_service import FeatureAssemblyService
from .pipeline_service import ModelingPipelineService, PipelineReport

__all__ = [
    "DataLoadingService",
    "FeatureAssemblyService",
    "ModelingPipelineService",
    "PipelineReport",
]
