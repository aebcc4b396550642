"""Request configuration: schema, loading and adaptation."""

from .adapter import request_to_options, request_to_problem
from .loader import ConfigError, load_request, load_request_from_dict
from .schema import CutPieceSchema, OptimizeRequest, StockSheetSchema

__all__ = [
    "ConfigError",
    "CutPieceSchema",
    "OptimizeRequest",
    "StockSheetSchema",
    "load_request",
    "load_request_from_dict",
    "request_to_options",
    "request_to_problem",
]
