"""Unit tests for the seeded random engines."""

import math

import numpy as np
import pytest

from crashsim.engine import RandomAlgorithm
from crashsim.engine.rng import (
    LCG_MODULUS,
    LinearCongruentialEngine,
    PCG64Engine,
    RandomEngine,
    create_engine,
    derive_run_seed,
)


class ScriptedEngine(RandomEngine):
    """Replays a fixed list of uniforms."""

    def __init__(self, uniforms):
        super().__init__(0)
        self._uniforms = list(uniforms)

    def next_uniform(self) -> float:
        return self._uniforms.pop(0)


ENGINE_CLASSES = [PCG64Engine, LinearCongruentialEngine]


# ---------------------------------------------------------------------------
# Box-Muller
# ---------------------------------------------------------------------------

class TestBoxMuller:
    def test_cosine_branch(self):
        engine = ScriptedEngine([0.5, 0.5])
        assert engine.next_normal() == pytest.approx(-math.sqrt(2.0 * math.log(2.0)))

    def test_zero_uniforms_are_resampled(self):
        engine = ScriptedEngine([0.0, 0.5, 0.0, 0.0, 0.5])
        assert engine.next_normal() == pytest.approx(-math.sqrt(2.0 * math.log(2.0)))
        assert engine._uniforms == []

    def test_default_batch_matches_scalar(self):
        uniforms = [0.1, 0.2, 0.0, 0.3, 0.4, 0.9, 0.7, 0.6]
        batch = ScriptedEngine(uniforms).next_normals(3)
        scalar_engine = ScriptedEngine(uniforms)
        scalar = [scalar_engine.next_normal() for _ in range(3)]
        np.testing.assert_array_equal(batch, scalar)


# ---------------------------------------------------------------------------
# Engines
# ---------------------------------------------------------------------------

class TestEngines:
    @pytest.mark.parametrize("engine_cls", ENGINE_CLASSES)
    def test_reproducibility(self, engine_cls):
        e1, e2 = engine_cls(2151), engine_cls(2151)
        assert [e1.next_uniform() for _ in range(100)] == [e2.next_uniform() for _ in range(100)]
        assert [e1.next_normal() for _ in range(100)] == [e2.next_normal() for _ in range(100)]

    @pytest.mark.parametrize("engine_cls", ENGINE_CLASSES)
    def test_uniform_range(self, engine_cls):
        engine = engine_cls(5)
        draws = [engine.next_uniform() for _ in range(5000)]
        assert all(0.0 <= u < 1.0 for u in draws)

    @pytest.mark.parametrize("engine_cls", ENGINE_CLASSES)
    def test_batch_normals_match_scalar_draws(self, engine_cls):
        batch_engine, scalar_engine = engine_cls(99), engine_cls(99)
        batch = batch_engine.next_normals(257)
        scalar = [scalar_engine.next_normal() for _ in range(257)]
        np.testing.assert_array_equal(batch, scalar)
        # Streams stay aligned afterwards
        assert batch_engine.next_uniform() == scalar_engine.next_uniform()

    def test_batch_of_zero(self):
        assert PCG64Engine(1).next_normals(0).shape == (0,)

    def test_different_seeds_differ(self):
        assert PCG64Engine(1).next_uniform() != PCG64Engine(2).next_uniform()

    def test_pcg64_normal_moments(self):
        z = PCG64Engine(12345).next_normals(20000)
        assert abs(z.mean()) < 0.05
        assert abs(z.std() - 1.0) < 0.05


class TestLinearCongruentialEngine:
    def test_known_sequence(self):
        engine = LinearCongruentialEngine(42)
        assert engine.next_uniform() == 206659 / LCG_MODULUS
        assert engine.next_uniform() == 190736 / LCG_MODULUS

    def test_seed_is_reduced_modulo(self):
        e1 = LinearCongruentialEngine(42)
        e2 = LinearCongruentialEngine(42 + LCG_MODULUS)
        assert [e1.next_uniform() for _ in range(10)] == [e2.next_uniform() for _ in range(10)]


class TestFactory:
    def test_create_by_enum_and_string(self):
        assert isinstance(create_engine(RandomAlgorithm.PCG64, 1), PCG64Engine)
        assert isinstance(create_engine("lcg", 1), LinearCongruentialEngine)

    def test_unknown_algorithm(self):
        with pytest.raises(ValueError):
            create_engine("mersenne", 1)

    def test_derive_run_seed(self):
        assert derive_run_seed(42, 0) == derive_run_seed(42, 0)
        assert derive_run_seed(42, 0) != derive_run_seed(42, 1)
        assert derive_run_seed(42, 0) != derive_run_seed(43, 0)
        assert 0 <= derive_run_seed(42, 7) < 2**63
