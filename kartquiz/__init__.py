"""Kartquiz - polygon reduction engine for "narrow the map" quizzes.

Each quiz answer contributes a region. This library normalizes those regions,
computes the running union and intersection of everything selected so far,
and measures the resulting areas using Shapely and pyproj.
"""

import logging

# Normalization
from .normalize import normalize, validate_region

# Combination
from .combine import (
    CombinationResult,
    StepResult,
    combine,
    reduce_geometries,
)

# Area metrics
from .metrics import (
    area,
    total_area,
    geodesic_area_km2,
    reduction_percent,
)

# GeoJSON interop
from .geojson import (
    region_from_geojson,
    result_to_geojson,
    is_valid_polygon,
    polygon_center,
)

# Quiz reduction pipeline
from .pipeline import (
    Answer,
    AnswerSelection,
    ReductionReport,
    reduce_selection,
)

from .config import ReductionConfig
from .ops import PlanarSetOperation, ShapelySetOperation

# Core types
from .core import (
    Region,
    Single,
    Multi,
    Geometry,
    SetOperation,
    flatten,
)

# Core exceptions
from .core import (
    KartquizError,
    InvalidGeometryError,
    GeometryOperationError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [

    # Normalization
    'normalize',
    'validate_region',

    # Combination
    'CombinationResult',
    'StepResult',
    'combine',
    'reduce_geometries',

    # Area metrics
    'area',
    'total_area',
    'geodesic_area_km2',
    'reduction_percent',

    # GeoJSON interop
    'region_from_geojson',
    'result_to_geojson',
    'is_valid_polygon',
    'polygon_center',

    # Quiz pipeline
    'Answer',
    'AnswerSelection',
    'ReductionReport',
    'reduce_selection',

    # Configuration and backends
    'ReductionConfig',
    'PlanarSetOperation',
    'ShapelySetOperation',

    # Core types
    'Region',
    'Single',
    'Multi',
    'Geometry',
    'SetOperation',
    'flatten',

    # Core exceptions
    'KartquizError',
    'InvalidGeometryError',
    'GeometryOperationError',
]
