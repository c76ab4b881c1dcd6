"""Regular-grid fields, regridding and grid providers."""

from .types import (
    ValueRange,
    VectorFieldGrid,
    ScalarFieldGrid,
    VectorFieldProvider,
    ScalarFieldProvider,
)
from .regrid import GridSpec, grid_dims, regrid_vector, regrid_scalar
from .synthetic import (
    SyntheticWindProvider,
    SyntheticWaveProvider,
    SyntheticTempProvider,
)
from .glofs_provider import (
    GlofsVectorProvider,
    GlofsScalarProvider,
    GlofsMultiLakeProvider,
    hour_offset,
)

__all__ = [
    'ValueRange',
    'VectorFieldGrid',
    'ScalarFieldGrid',
    'VectorFieldProvider',
    'ScalarFieldProvider',
    'GridSpec',
    'grid_dims',
    'regrid_vector',
    'regrid_scalar',
    'SyntheticWindProvider',
    'SyntheticWaveProvider',
    'SyntheticTempProvider',
    'GlofsVectorProvider',
    'GlofsScalarProvider',
    'GlofsMultiLakeProvider',
    'hour_offset',
]
