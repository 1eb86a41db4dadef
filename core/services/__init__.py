# Servicios del núcleo
from core.services.pipeline import QueryPipeline

__all__ = ["QueryPipeline"]
