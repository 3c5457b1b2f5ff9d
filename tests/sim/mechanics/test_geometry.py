"""Tests for rectangle overlap and beam hit geometry."""

import math

from soul_sim.sim.core.entities import Rect
from soul_sim.sim.mechanics.geometry import ray_hit, rect_overlap


class TestRectOverlap:
    def test_overlapping(self):
        assert rect_overlap(Rect(x=0, y=0, w=10, h=10), Rect(x=5, y=5, w=10, h=10))

    def test_contained(self):
        assert rect_overlap(Rect(x=0, y=0, w=100, h=100), Rect(x=40, y=40, w=2, h=2))

    def test_shared_edge_is_not_overlap(self):
        assert not rect_overlap(Rect(x=0, y=0, w=10, h=10), Rect(x=10, y=0, w=10, h=10))
        assert not rect_overlap(Rect(x=0, y=0, w=10, h=10), Rect(x=0, y=10, w=10, h=10))

    def test_disjoint(self):
        assert not rect_overlap(Rect(x=0, y=0, w=10, h=10), Rect(x=50, y=50, w=10, h=10))


class TestRayHit:
    def test_point_on_axis(self):
        assert ray_hit((100, 0), (0, 0), 0.0, 800, 22)

    def test_point_behind_origin(self):
        assert not ray_hit((-100, 0), (0, 0), 0.0, 800, 22)

    def test_point_at_origin(self):
        assert not ray_hit((0, 0), (0, 0), 0.0, 800, 22)

    def test_point_beyond_length(self):
        assert not ray_hit((801, 0), (0, 0), 0.0, 800, 22)

    def test_inside_half_width(self):
        assert ray_hit((100, 21.9), (0, 0), 0.0, 800, 22)

    def test_at_half_width_misses(self):
        assert not ray_hit((100, 22), (0, 0), 0.0, 800, 22)

    def test_angled_beam(self):
        assert ray_hit((10, 300), (0, 0), math.pi / 2, 800, 22)
        assert not ray_hit((300, 10), (0, 0), math.pi / 2, 800, 22)
