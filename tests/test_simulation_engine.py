import pygame
import pytest

from seasonfx.constants import (
    MONSOON_PULL,
    POOL_CAPACITY,
    RIPPLE_FADE,
    RIPPLE_GROWTH,
    RIPPLE_START_ALPHA,
    RIPPLE_START_RADIUS,
    SPRING_SPIN_RATE,
    VELOCITY_DAMPING_X,
    VELOCITY_DAMPING_Y,
)
from seasonfx.engine import SimulationEngine
from seasonfx.entities import Particle, ParticleKind, Season
from seasonfx.pointer import PointerTracker
from seasonfx.renderer import Renderer
from seasonfx.rng_service import RNGService
from seasonfx.surface import SurfaceManager

pygame.init()

W, H = 640, 480


class CountingRenderer:
    """Stand-in renderer: counts calls, draws nothing."""

    def __init__(self):
        self.calls = 0

    def begin_frame(self):
        self.calls += 1

    def draw_flare(self, f):
        self.calls += 1

    def draw_particle(self, p):
        self.calls += 1

    def draw_ripple(self, rp):
        self.calls += 1


def make_engine(season="spring", *, interaction=False, reduced=False, seed=7, renderer=None, pointer=None):
    surfaces = SurfaceManager(W, H)
    engine = SimulationEngine(
        surfaces,
        renderer or CountingRenderer(),
        pointer or PointerTracker(),
        reduced_motion=reduced,
        interaction_enabled=lambda: interaction,
        rng=RNGService(seed),
    )
    engine.set_mode(season)
    return engine


def single(engine, **fields):
    p = Particle(**{"x": W / 2, "y": H / 2, "z": 1.0, **fields})
    engine.particles = [p]
    return p


@pytest.mark.parametrize("season", list(POOL_CAPACITY))
def test_pool_matches_capacity_and_never_changes_size(season):
    engine = make_engine(season)
    assert len(engine.particles) == POOL_CAPACITY[season]
    for i in range(50):
        engine.advance(40.0, now=i * 40.0)
    assert len(engine.particles) == POOL_CAPACITY[season]


def test_unknown_mode_uses_prewinter_pool():
    engine = make_engine("Summer")
    assert engine.season is Season.PREWINTER
    assert len(engine.particles) == 90
    assert engine.flares == []


@pytest.mark.parametrize("season", list(POOL_CAPACITY))
def test_no_particle_survives_outside_recycle_bounds(season):
    engine = make_engine(season, seed=11)
    for i in range(300):
        engine.advance(40.0, now=i * 40.0)
        assert not any(engine.is_out_of_bounds(p) for p in engine.particles)


def test_out_of_bounds_slot_is_replaced_in_place():
    engine = make_engine("spring")
    escaped = engine.particles[5]
    escaped.y = H + 500
    engine.advance(16.0, now=0.0)
    fresh = engine.particles[5]
    assert fresh is not escaped
    assert fresh.kind is ParticleKind.PETAL
    assert -50 <= fresh.y <= -10
    assert 0 <= fresh.x <= W
    assert len(engine.particles) == POOL_CAPACITY["spring"]


def test_monsoon_tick_applies_pull_and_spawns_ripples_at_floor():
    engine = make_engine("monsoon")
    engine.particles[0].y = H - 1  # guaranteed impact this tick
    engine.particles[0].vy = 1.0
    pool = list(engine.particles)
    vy_before = [p.vy for p in pool]

    engine.advance(16.0, now=1000.0)

    for p, vy0 in zip(pool, vy_before):
        assert p.vy == pytest.approx((vy0 + MONSOON_PULL * (16 / 16)) * VELOCITY_DAMPING_Y)
    hits = [p for p in pool if p.y > H - 2]
    assert hits
    assert len(engine.ripples) == len(hits)
    for rp, p in zip(engine.ripples, hits):
        assert rp.x == pytest.approx(p.x)
        assert rp.y == pytest.approx(H - 3)


def test_ripples_grow_fade_and_expire():
    engine = make_engine("spring")
    engine.spawn_ripple(10.0, 20.0)
    engine.advance(16.0, now=0.0)
    (rp,) = engine.ripples
    assert rp.r == pytest.approx(RIPPLE_START_RADIUS + RIPPLE_GROWTH)
    assert rp.alpha == pytest.approx(RIPPLE_START_ALPHA - RIPPLE_FADE)
    for i in range(30):
        engine.advance(16.0, now=16.0 * (i + 2))
    assert engine.ripples == []


def test_summer_seeds_flares_in_upper_band():
    for seed in range(10):
        engine = make_engine("summer", seed=seed)
        assert 2 <= len(engine.flares) <= 3
        for f in engine.flares:
            assert 0 <= f.x <= W
            assert 0 <= f.y <= H * 0.6
            assert 120 <= f.r <= 240


def test_season_round_trip_leaves_no_summer_entities():
    engine = make_engine("spring")
    engine.spawn_ripple(1.0, 1.0)
    engine.set_mode("summer")
    assert engine.flares
    assert engine.ripples == []
    engine.set_mode("spring")
    assert len(engine.particles) == POOL_CAPACITY["spring"]
    assert engine.flares == []
    assert all(p.kind is ParticleKind.PETAL for p in engine.particles)


def test_flare_phase_advances_only_with_motion():
    moving = make_engine("summer", seed=3)
    phases = [(f.phase, f.speed) for f in moving.flares]
    moving.advance(16.0, now=0.0)
    for f, (phase, speed) in zip(moving.flares, phases):
        assert f.phase == pytest.approx(phase + speed)

    still = make_engine("summer", seed=3, reduced=True)
    phases = [f.phase for f in still.flares]
    still.advance(16.0, now=0.0)
    assert [f.phase for f in still.flares] == phases


def test_spring_angle_advances_by_spin_unless_reduced():
    engine = make_engine("spring")
    p = single(engine, kind=ParticleKind.PETAL, angle=1.0, spin=0.05)
    engine.advance(16.0, now=0.0)
    assert p.angle == pytest.approx(1.0 + 0.05 * SPRING_SPIN_RATE)

    still = make_engine("spring", reduced=True)
    q = single(still, kind=ParticleKind.PETAL, angle=1.0, spin=0.05)
    still.advance(16.0, now=0.0)
    assert q.angle == 1.0


def test_damping_is_per_tick_while_integration_scales_with_dt():
    short = make_engine("prewinter")
    a = single(short, kind=ParticleKind.DEWDROP, vx=1.0)
    short.advance(16.0, now=0.0)

    long = make_engine("prewinter")
    b = single(long, kind=ParticleKind.DEWDROP, vx=1.0)
    long.advance(32.0, now=0.0)

    assert a.vx == pytest.approx(VELOCITY_DAMPING_X)
    assert b.vx == pytest.approx(VELOCITY_DAMPING_X)
    assert a.x == pytest.approx(W / 2 + VELOCITY_DAMPING_X)
    assert b.x == pytest.approx(W / 2 + 2 * VELOCITY_DAMPING_X)


def test_prewinter_mist_drifts_right_without_dt_scaling():
    engine = make_engine("prewinter")
    p = single(engine, kind=ParticleKind.MIST)
    engine.advance(40.0, now=0.0)
    assert p.vx == pytest.approx(0.004 * VELOCITY_DAMPING_X)
    assert p.vy == 0.0


def test_winter_embers_accelerate_upward():
    engine = make_engine("winter")
    p = single(engine, kind=ParticleKind.EMBER)
    engine.advance(16.0, now=0.0)
    assert p.vy < 0


def test_pointer_pushes_nearby_particles_away():
    pointer = PointerTracker()
    pointer.move(W / 2 - 10, H / 2)
    pointer.state.vx = pointer.state.vy = 0.0
    engine = make_engine("prewinter", interaction=True, pointer=pointer)
    p = single(engine, kind=ParticleKind.DEWDROP)
    engine.advance(16.0, now=0.0)
    assert p.vx > 0


def test_pointer_has_no_effect_when_interaction_disabled_or_reduced():
    for kwargs in ({"interaction": False}, {"interaction": True, "reduced": True}):
        pointer = PointerTracker()
        pointer.move(W / 2 - 10, H / 2)
        engine = make_engine("prewinter", pointer=pointer, **kwargs)
        p = single(engine, kind=ParticleKind.DEWDROP)
        engine.advance(16.0, now=0.0)
        assert p.vx == 0.0


def test_disabled_interaction_matches_pointer_at_infinity():
    near = PointerTracker()
    near.move(200, 200)
    near.move(230, 215)  # moving pointer in the middle of the field
    far = PointerTracker()
    far.move(1e9, 1e9)
    far.state.vx = far.state.vy = 0.0

    disabled = make_engine("autumn", interaction=False, pointer=near, seed=21)
    distant = make_engine("autumn", interaction=True, pointer=far, seed=21)
    for i in range(20):
        disabled.advance(16.0, now=i * 16.0)
        distant.advance(16.0, now=i * 16.0)
    for a, b in zip(disabled.particles, distant.particles):
        assert a.vx == pytest.approx(b.vx)
        assert a.vy == pytest.approx(b.vy)


def test_reflow_clamps_position_only():
    engine = make_engine("winter")
    p = engine.particles[0]
    p.x, p.y, p.vx, p.vy = W + 100, H + 300, 0.3, -0.2
    kind = p.kind
    engine.surfaces.resize(320, 240)
    engine.reflow()
    assert p.x == 320
    assert p.y == 240 + 50
    assert (p.vx, p.vy, p.kind) == (0.3, -0.2, kind)


def test_advance_with_real_renderer_draws_every_season():
    surfaces = SurfaceManager(W, H)
    renderer = Renderer(surfaces)
    engine = SimulationEngine(surfaces, renderer, PointerTracker(), rng=RNGService(5))
    for season in Season:
        engine.set_mode(season)
        engine.advance(16.0, now=0.0)
    assert renderer.draw_calls > 0
    assert renderer.cache_stats()["size"] > 0


def test_draw_static_does_not_move_particles():
    engine = make_engine("autumn")
    before = [(p.x, p.y, p.vx, p.vy, p.angle) for p in engine.particles]
    engine.draw_static()
    assert [(p.x, p.y, p.vx, p.vy, p.angle) for p in engine.particles] == before
    assert engine.ticks == 0
