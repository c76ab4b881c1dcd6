"""
Tests for grid field types and sparse-to-grid projection.
"""

import math

import numpy as np
import pytest

from lakecast.glofs.frames import ScalarSample, VectorSample
from lakecast.grids.regrid import grid_dims, neighbour_fill, regrid_scalar, regrid_vector
from lakecast.grids.types import ScalarFieldGrid, ValueRange, VectorFieldGrid


UNIT_BOX = (0.0, 0.0, 1.0, 1.0)


class TestGridTypes:
    """Tests for VectorFieldGrid / ScalarFieldGrid construction."""

    def test_channels_copied_to_float32(self):
        u = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
        grid = VectorFieldGrid(nx=3, ny=2, lon0=0.0, lat0=0.0, d_lon=0.5, d_lat=1.0, u=u, v=[0.0] * 6)
        assert grid.u.dtype == np.float32
        assert grid.size == 6
        assert grid.as_2d("u")[1, 0] == 4.0  # node (i=0, j=1) -> index j*nx + i

    def test_channel_length_validated(self):
        with pytest.raises(ValueError, match="expected nx\\*ny=6"):
            VectorFieldGrid(nx=3, ny=2, lon0=0.0, lat0=0.0, d_lon=0.5, d_lat=1.0,
                            u=[0.0] * 6, v=[0.0] * 5)

    def test_meta_channel_length_validated(self):
        with pytest.raises(ValueError, match="'Hs'"):
            VectorFieldGrid(nx=2, ny=2, lon0=0.0, lat0=0.0, d_lon=1.0, d_lat=1.0,
                            u=[0.0] * 4, v=[0.0] * 4, meta={"Hs": [1.0, 2.0]})

    def test_channels_read_only(self):
        source = np.zeros(4)
        grid = ScalarFieldGrid(nx=2, ny=2, lon0=0.0, lat0=0.0, d_lon=1.0, d_lat=1.0, t=source)
        with pytest.raises(ValueError):
            grid.t[0] = 1.0
        source[0] = 99.0
        assert grid.t[0] == 0.0

    def test_meta_mapping_frozen(self):
        grid = VectorFieldGrid(nx=1, ny=1, lon0=0.0, lat0=0.0, d_lon=1.0, d_lat=1.0,
                               u=[1.0], v=[1.0], meta={"Hs": [2.0]})
        with pytest.raises(TypeError):
            grid.meta["Hs"] = np.array([3.0])

    def test_node_coordinates(self):
        grid = ScalarFieldGrid(nx=3, ny=2, lon0=-88.0, lat0=41.5, d_lon=0.5, d_lat=0.25, t=np.zeros(6))
        np.testing.assert_allclose(grid.lons(), [-88.0, -87.5, -87.0])
        np.testing.assert_allclose(grid.lats(), [41.5, 41.75])

    def test_non_positive_extent_rejected(self):
        with pytest.raises(ValueError):
            ScalarFieldGrid(nx=0, ny=2, lon0=0.0, lat0=0.0, d_lon=1.0, d_lat=1.0, t=[])


class TestGridDims:

    def test_spacing_hint_used(self):
        spec = grid_dims((-88.0, 41.6, -87.0, 42.2), 0.1, 0.1)
        assert (spec.nx, spec.ny) == (11, 7)
        assert (spec.lon0, spec.lat0) == (-88.0, 41.6)

    def test_fallback_spacing_clamped(self):
        spec = grid_dims((-83.5, 41.3, -78.8, 42.9), None, 0.0)
        assert spec.d_lon == spec.d_lat == pytest.approx(0.05)

        wide = grid_dims((-100.0, 30.0, -60.0, 50.0))
        assert wide.d_lon == pytest.approx(0.2)

    def test_coarsened_to_max_dim(self):
        spec = grid_dims((0.0, 0.0, 100.0, 10.0), 0.1, 0.1, max_dim=500)
        assert max(spec.nx, spec.ny) <= 500
        assert spec.d_lon == pytest.approx(0.3)
        assert spec.d_lat == pytest.approx(0.3)

    @pytest.mark.parametrize("bbox", [(0.0, 0.0, 0.0, 1.0), (1.0, 0.0, 0.0, 1.0), (0.0, 0.0, 1.0)])
    def test_bad_bbox_rejected(self, bbox):
        with pytest.raises(ValueError):
            grid_dims(bbox, 0.1, 0.1)


class TestNeighbourFill:

    def test_single_pass(self):
        grid = np.full((3, 3), np.nan)
        grid[0, 0] = 4.0
        out = neighbour_fill(grid)
        assert out[0, 1] == 4.0
        assert out[1, 1] == 4.0
        assert math.isnan(out[2, 2])  # two cells from data

    def test_input_untouched(self):
        grid = np.array([[1.0, np.nan]])
        neighbour_fill(grid)
        assert math.isnan(grid[0, 1])


class TestRegridVector:

    def test_binned_mean(self):
        samples = [
            VectorSample(lon=0.0, lat=0.0, u=1.0, v=0.0),
            VectorSample(lon=0.1, lat=0.1, u=3.0, v=2.0),
        ]
        grid = regrid_vector(samples, UNIT_BOX, 0.5, 0.5, fill_gaps=False)
        assert (grid.nx, grid.ny) == (3, 3)
        assert grid.u[0] == pytest.approx(2.0)
        assert grid.v[0] == pytest.approx(1.0)
        assert np.isnan(grid.u[1:]).all()

    def test_outside_samples_ignored(self):
        samples = [
            VectorSample(lon=0.5, lat=0.5, u=1.0, v=1.0),
            VectorSample(lon=5.0, lat=5.0, u=100.0, v=100.0),
        ]
        grid = regrid_vector(samples, UNIT_BOX, 0.5, 0.5, fill_gaps=False)
        assert grid.u[4] == pytest.approx(1.0)
        assert np.nanmax(grid.u) == pytest.approx(1.0)

    def test_gap_fill_and_range(self):
        samples = [VectorSample(lon=0.0, lat=0.0, u=3.0, v=4.0)]
        grid = regrid_vector(samples, UNIT_BOX, 0.5, 0.5, units={"u": "m/s", "v": "m/s"})
        u2d = grid.as_2d("u")
        assert u2d[0, 1] == pytest.approx(3.0)
        assert u2d[1, 1] == pytest.approx(3.0)
        assert np.isnan(u2d[2, 2])
        assert grid.range == ValueRange(min=pytest.approx(5.0), max=pytest.approx(5.0))
        assert grid.units == {"u": "m/s", "v": "m/s"}

    def test_no_samples(self):
        grid = regrid_vector([], UNIT_BOX, 0.5, 0.5)
        assert np.isnan(grid.u).all()
        assert grid.range is None


class TestRegridScalar:

    def test_mean_and_range(self):
        samples = [
            ScalarSample(lon=0.0, lat=0.0, value=10.0),
            ScalarSample(lon=0.05, lat=0.0, value=12.0),
            ScalarSample(lon=1.0, lat=1.0, value=20.0),
        ]
        grid = regrid_scalar(samples, UNIT_BOX, 0.5, 0.5, fill_gaps=False, units="°C")
        assert grid.t[0] == pytest.approx(11.0)
        assert grid.t[8] == pytest.approx(20.0)
        assert grid.range.min == pytest.approx(11.0)
        assert grid.range.max == pytest.approx(20.0)
        assert grid.units == "°C"

    def test_nan_samples_dropped(self):
        samples = [
            ScalarSample(lon=0.0, lat=0.0, value=float("nan")),
            ScalarSample(lon=0.0, lat=0.0, value=8.0),
        ]
        grid = regrid_scalar(samples, UNIT_BOX, 0.5, 0.5, fill_gaps=False)
        assert grid.t[0] == pytest.approx(8.0)
