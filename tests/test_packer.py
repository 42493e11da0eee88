"""
Tests for MaxRectsPacker: online insert, offline batch insert, erase and
the layout invariants that must hold after every operation.

Run with:
    python -m pytest tests/test_packer.py -v
"""

import random

import pytest

from maxrects.algorithms.maxrects_packer import MaxRectsPacker
from maxrects.core.errors import InvalidArgumentError, PackingError, RectNotFoundError
from maxrects.core.models import Heuristic, Rect
from maxrects.core.validation import coverage_map, validate_layout

ALL_HEURISTICS = list(Heuristic)


def bounds(rects):
    return [(r.x, r.y, r.width, r.height) for r in rects]


def check_invariants(packer):
    """Assert every structural property of a packer's free/used lists."""
    w, h = packer.container_width, packer.container_height
    used = list(packer.used_rects)
    free = list(packer.free_rects)

    assert validate_layout(used, w, h)
    assert packer.occupancy == pytest.approx(sum(r.area for r in used) / (w * h))

    for i, a in enumerate(free):
        assert 0 <= a.x and 0 <= a.y and a.right <= w and a.bottom <= h, \
            f"free rect {a!r} leaves the container"
        for j, b in enumerate(free):
            if i != j:
                assert not a.is_in(b), f"{a!r} is contained in {b!r}"
        for u in used:
            assert not a.intersects(u), f"free {a!r} overlaps used {u!r}"

    used_grid = coverage_map(used, w, h)
    free_grid = coverage_map(free, w, h)
    assert used_grid.max(initial=0) <= 1
    assert ((used_grid > 0) | (free_grid > 0)).all(), "free + used must tile the container"
    assert not ((used_grid > 0) & (free_grid > 0)).any()


# ---------------------------------------------------------------------------
# 1. Construction and argument checks
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_starts_with_one_free_rect(self, packer):
        assert bounds(packer.free_rects) == [(0, 0, 100, 100)]
        assert packer.used_rects == ()
        assert packer.occupancy == 0.0

    @pytest.mark.parametrize("w, h", [(0, 10), (10, 0), (-5, 10), (10, -1)])
    def test_invalid_container_size(self, w, h):
        with pytest.raises(InvalidArgumentError):
            MaxRectsPacker(w, h)

    @pytest.mark.parametrize("w, h", [(0, 10), (10, 0), (-1, -1)])
    def test_invalid_piece_size(self, packer, w, h):
        with pytest.raises(InvalidArgumentError):
            packer.insert(w, h)
        assert packer.used_rects == ()

    def test_invalid_argument_is_a_value_error(self, packer):
        with pytest.raises(ValueError):
            packer.insert(0, 0)
        with pytest.raises(PackingError):
            packer.insert(0, 0)

    def test_repr_mentions_size_and_counts(self, packer):
        packer.insert(10, 10)
        text = repr(packer)
        assert "100x100" in text
        assert "used=1" in text


# ---------------------------------------------------------------------------
# 2. Online insertion
# ---------------------------------------------------------------------------

class TestInsert:
    def test_first_piece_goes_to_origin(self, packer):
        rect = packer.insert(50, 50, Heuristic.BEST_SHORT_SIDE_FIT)
        assert bounds([rect]) == [(0, 0, 50, 50)]
        assert rect.rotated is False
        assert packer.occupancy == pytest.approx(0.25)
        assert bounds(packer.free_rects) == [(0, 50, 100, 50), (50, 0, 50, 100)]

    def test_wide_piece_takes_bottom_slab(self, packer):
        packer.insert(50, 50)
        rect = packer.insert(100, 50)
        assert bounds([rect]) == [(0, 50, 100, 50)]
        assert packer.occupancy == pytest.approx(0.75)
        assert bounds(packer.free_rects) == [(50, 0, 50, 50)]
        check_invariants(packer)

    @pytest.mark.parametrize("heuristic", ALL_HEURISTICS)
    def test_no_fit_returns_sentinel_and_changes_nothing(self, packer, heuristic):
        first = packer.insert(100, 50)
        assert bounds([first]) == [(0, 0, 100, 50)]
        assert bounds(packer.free_rects) == [(0, 50, 100, 50)]

        result = packer.insert(100, 60, heuristic)
        assert result.is_no_fit
        assert result.height == 0
        assert bounds(packer.free_rects) == [(0, 50, 100, 50)]
        assert packer.used_rects == (first,)

    def test_try_insert_returns_none_on_no_fit(self, packer):
        assert packer.try_insert(101, 1) is None
        assert packer.used_rects == ()

    def test_rotation_fills_remaining_slab(self):
        packer = MaxRectsPacker(10, 10, allow_rotate=True)

        a = packer.insert(10, 7)
        assert bounds([a]) == [(0, 0, 10, 7)]
        assert a.rotated is False

        b = packer.insert(2, 3)
        assert bounds([b]) == [(0, 7, 2, 3)]
        assert bounds(packer.free_rects) == [(2, 7, 8, 3)]

        c = packer.insert(3, 8)
        assert bounds([c]) == [(2, 7, 8, 3)]
        assert c.rotated is True
        assert packer.occupancy == pytest.approx(1.0)
        assert packer.free_rects == ()

    def test_rotation_disabled_rejects_sideways_fit(self):
        packer = MaxRectsPacker(8, 3, allow_rotate=False)
        assert packer.insert(3, 8).is_no_fit
        rotating = MaxRectsPacker(8, 3, allow_rotate=True)
        rect = rotating.insert(3, 8)
        assert (rect.width, rect.height, rect.rotated) == (8, 3, True)

    def test_contact_point_hugs_placed_rect(self, packer):
        packer.insert(50, 50)
        rect = packer.insert(50, 20, Heuristic.CONTACT_POINT)
        assert (rect.x, rect.y) == (50, 0)

    def test_invalid_heuristic_falls_back(self, packer):
        rect = packer.insert(30, 30, 42)
        assert (rect.x, rect.y) == (0, 0)

    def test_heuristic_by_name(self, packer):
        packer.insert(50, 50)
        rect = packer.insert(50, 20, "contact_point")
        assert (rect.x, rect.y) == (50, 0)

    def test_payload_is_attached(self, packer):
        rect = packer.insert(10, 10, payload={"frame": "walk_01"})
        assert rect.payload == {"frame": "walk_01"}
        assert packer.used_rects[0] is rect

    def test_score_does_not_place(self, packer):
        candidate = packer.score(40, 40)
        assert candidate is not None
        assert (candidate.rect.x, candidate.rect.y) == (0, 0)
        assert packer.used_rects == ()
        assert bounds(packer.free_rects) == [(0, 0, 100, 100)]

    def test_fractional_sizes(self):
        packer = MaxRectsPacker(1.0, 1.0)
        a = packer.insert(0.5, 0.25)
        b = packer.insert(0.5, 0.75)
        assert not a.is_no_fit and not b.is_no_fit
        assert not a.intersects(b)
        assert validate_layout(packer.used_rects, 1.0, 1.0)


# ---------------------------------------------------------------------------
# 3. Erase
# ---------------------------------------------------------------------------

class TestErase:
    def test_erase_restores_occupancy(self, packer):
        packer.insert(50, 50)
        extra = packer.insert(20, 20)
        packer.erase(extra)
        assert packer.occupancy == pytest.approx(0.25)
        assert len(packer.used_rects) == 1
        check_invariants(packer)

    def test_erase_returns_bounds_to_free_set(self, packer):
        rect = packer.insert(50, 50)
        packer.erase(rect)
        assert packer.occupancy == 0.0
        assert bounds(packer.free_rects) == [
            (0, 50, 100, 50),
            (50, 0, 50, 100),
            (0, 0, 50, 50),
        ]

    def test_reinsert_after_erase_reuses_area(self, packer):
        rect = packer.insert(50, 50)
        packer.erase(rect)
        again = packer.insert(50, 50)
        assert (again.x, again.y) == (0, 0)

    def test_erase_by_equal_bounds(self, packer):
        packer.insert(50, 50)
        packer.erase(Rect(0, 0, 50, 50))
        assert packer.used_rects == ()

    def test_erase_unknown_rect_raises(self, packer):
        packer.insert(50, 50)
        free_before = bounds(packer.free_rects)
        with pytest.raises(RectNotFoundError):
            packer.erase(Rect(60, 60, 10, 10))
        assert bounds(packer.free_rects) == free_before
        assert len(packer.used_rects) == 1

    def test_double_erase_raises(self, packer):
        rect = packer.insert(10, 10)
        packer.erase(rect)
        with pytest.raises(LookupError):
            packer.erase(rect)

    def test_erase_prunes_contained_free_rects(self, packer):
        """Erasing the only piece gives back a free rect that covers everything."""
        rect = packer.insert(100, 100)
        assert packer.free_rects == ()
        packer.erase(rect)
        assert bounds(packer.free_rects) == [(0, 0, 100, 100)]


# ---------------------------------------------------------------------------
# 4. Offline batch insertion
# ---------------------------------------------------------------------------

class TestInsertBatch:
    def make_requests(self):
        return [
            Rect(0, 0, 100, 50, payload="a"),
            Rect(0, 0, 50, 50, payload="b"),
            Rect(0, 0, 50, 50, payload="c"),
            Rect(0, 0, 60, 60, payload="big"),
        ]

    def test_best_scoring_piece_first(self, packer):
        requests = self.make_requests()
        result = packer.insert_batch(requests)

        assert [r.payload for r in result.placed] == ["a", "b", "c"]
        assert [(r.x, r.y) for r in result.placed] == [(0, 0), (0, 50), (50, 50)]
        assert result.unplaced == [requests[3]]
        assert packer.occupancy == pytest.approx(1.0)
        check_invariants(packer)

    def test_requests_are_not_modified(self, packer):
        requests = self.make_requests()
        packer.insert_batch(requests)
        assert bounds(requests) == [(0, 0, 100, 50), (0, 0, 50, 50), (0, 0, 50, 50), (0, 0, 60, 60)]

    def test_invalid_request_rejects_whole_batch(self, packer):
        with pytest.raises(InvalidArgumentError):
            packer.insert_batch([Rect(0, 0, 10, 10), Rect(0, 0, 0, 10)])
        assert packer.used_rects == ()

    def test_empty_batch(self, packer):
        result = packer.insert_batch([])
        assert result.placed == [] and result.unplaced == []

    @pytest.mark.parametrize("heuristic", ALL_HEURISTICS)
    def test_batch_keeps_invariants(self, heuristic):
        rng = random.Random(7)
        packer = MaxRectsPacker(64, 64, allow_rotate=True)
        requests = [Rect(0, 0, rng.randint(1, 20), rng.randint(1, 20), payload=i) for i in range(40)]
        result = packer.insert_batch(requests, heuristic)
        assert len(result.placed) + len(result.unplaced) == 40
        check_invariants(packer)


# ---------------------------------------------------------------------------
# 5. Randomized invariant checks
# ---------------------------------------------------------------------------

class TestRandomizedInvariants:
    @pytest.mark.parametrize("seed", range(4))
    @pytest.mark.parametrize("heuristic", ALL_HEURISTICS)
    @pytest.mark.parametrize("allow_rotate", [False, True])
    def test_insert_and_erase_sequence(self, seed, heuristic, allow_rotate):
        rng = random.Random(seed)
        packer = MaxRectsPacker(96, 64, allow_rotate=allow_rotate)

        for step in range(60):
            w, h = rng.randint(1, 40), rng.randint(1, 40)
            free_before = bounds(packer.free_rects)
            used_before = bounds(packer.used_rects)

            rect = packer.insert(w, h, heuristic)
            if rect.is_no_fit:
                assert bounds(packer.free_rects) == free_before
                assert bounds(packer.used_rects) == used_before
            elif allow_rotate:
                assert (rect.width, rect.height) in ((w, h), (h, w))
                assert rect.rotated == ((rect.width, rect.height) != (w, h))
            else:
                assert (rect.width, rect.height) == (w, h)
                assert rect.rotated is False

            if step % 7 == 6 and packer.used_rects:
                packer.erase(rng.choice(packer.used_rects))

            check_invariants(packer)
