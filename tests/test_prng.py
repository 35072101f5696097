"""
Tests for the seedable uniform source and seed parsing.
"""
import numpy as np
import pytest

from distributions.prng import Mulberry32, make_rng, parse_seed


@pytest.mark.unit
class TestMulberry32:
    """Tests for the deterministic generator."""

    def test_reproducible(self):
        a = Mulberry32(12345)
        b = Mulberry32(12345)
        assert [a.random() for _ in range(1000)] == [b.random() for _ in range(1000)]

    def test_range(self):
        rng = Mulberry32(1)
        draws = np.array([rng.random() for _ in range(10000)])
        assert draws.min() >= 0.0
        assert draws.max() < 1.0

    def test_roughly_uniform(self):
        rng = Mulberry32(2024)
        draws = np.array([rng.random() for _ in range(20000)])
        assert draws.mean() == pytest.approx(0.5, abs=0.02)
        counts, _ = np.histogram(draws, bins=10, range=(0.0, 1.0))
        assert counts.min() > 1700
        assert counts.max() < 2300

    def test_seeds_differ(self):
        a = [Mulberry32(1).random() for _ in range(3)]
        b = [Mulberry32(2).random() for _ in range(3)]
        assert a != b

    def test_reset_replays(self):
        rng = Mulberry32(99)
        first = [rng.random() for _ in range(5)]
        rng.reset()
        assert [rng.random() for _ in range(5)] == first

    def test_next_alias(self):
        a = Mulberry32(5)
        b = Mulberry32(5)
        assert a.next() == b.random()

    def test_seed_wraps_to_32_bits(self):
        assert Mulberry32(2 ** 32 + 3).random() == Mulberry32(3).random()

    def test_known_sequence(self):
        rng = Mulberry32(42)
        assert [rng.random() for _ in range(3)] == [
            0.6011037519201636,
            0.44829055899754167,
            0.8524657934904099,
        ]


@pytest.mark.unit
class TestMakeRng:
    """Tests for generator selection."""

    def test_seeded(self):
        assert isinstance(make_rng(3), Mulberry32)

    def test_unseeded(self):
        rng = make_rng(None)
        assert isinstance(rng, np.random.Generator)
        assert 0.0 <= rng.random() < 1.0


@pytest.mark.unit
class TestParseSeed:
    """Tests for mapping the seed form field."""

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_is_nondeterministic(self, value):
        assert parse_seed(value) is None

    @pytest.mark.parametrize("value,expected", [
        ("42", 42),
        (" 7 ", 7),
        (12, 12),
        ("3.9", 3),
        ("1e3", 1000),
        ("-1", 4294967295),
    ])
    def test_numeric(self, value, expected):
        assert parse_seed(value) == expected

    @pytest.mark.parametrize("value", ["abc", "nan", "inf", "12abc"])
    def test_non_numeric_is_zero(self, value):
        assert parse_seed(value) == 0
