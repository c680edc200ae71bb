"""My Trip package initialization."""

from .api import TourApiClient, normalize_items, resolve_service_key
from .controller import ActiveFilter, FilterController
from .enrichment import EnrichmentResult, enrich_page
from .errors import (
    ConfigurationError,
    ErrorInfo,
    NetworkError,
    ParseError,
    TourApiError,
    UpstreamError,
    describe_error,
)
from .filters import FilterState, decode, encode, merge, reset_to_defaults
from .loader import load_tours
from .models import AreaCode, PetInfo, TourItem, TourListResult, TourPage
from .pagination import AccumulatorState, InfiniteTours
from .sorting import sort_tours

__all__ = [
    "AccumulatorState",
    "ActiveFilter",
    "AreaCode",
    "ConfigurationError",
    "EnrichmentResult",
    "ErrorInfo",
    "FilterController",
    "FilterState",
    "InfiniteTours",
    "NetworkError",
    "ParseError",
    "PetInfo",
    "TourApiClient",
    "TourApiError",
    "TourItem",
    "TourListResult",
    "TourPage",
    "UpstreamError",
    "decode",
    "describe_error",
    "encode",
    "enrich_page",
    "load_tours",
    "merge",
    "normalize_items",
    "reset_to_defaults",
    "resolve_service_key",
    "sort_tours",
]
