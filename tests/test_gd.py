import numpy as np
import pytest

from profoc.optim.gd import GDMethod, GDSettings, gd, gd_update, gradient_clipping

CENTER = np.array([1.0, -2.0, 0.5])


def quadratic(x):
    diff = np.asarray(x) - CENTER
    return float(diff @ diff), 2.0 * diff


@pytest.mark.parametrize(
    "method", [GDMethod.BASIC, GDMethod.MOMENTUM, GDMethod.NESTEROV]
)
def test_gd_converges_on_quadratic(method):
    result = gd(np.zeros(3), quadratic, GDSettings(method=method))
    assert result.success
    assert np.allclose(result.x, CENTER, atol=1e-6)
    assert result.value == pytest.approx(0.0, abs=1e-10)


def test_gd_at_minimum_returns_immediately():
    result = gd(CENTER.copy(), quadratic)
    assert result.iterations == 0
    assert np.array_equal(result.x, CENTER)
    assert result.success


def test_gd_respects_iteration_limit():
    result = gd(np.zeros(3), quadratic, GDSettings(iter_max=3))
    assert result.iterations == 3
    assert not result.success


def test_gd_rejects_non_finite_start():
    with pytest.raises(ValueError):
        gd(np.array([np.nan, 0.0, 0.0]), quadratic)


def test_unknown_method_rejected():
    with pytest.raises(ValueError):
        GDSettings(method=42)


def test_basic_update_scales_gradient():
    settings = GDSettings(step_size=0.5)
    grad = np.array([2.0, 4.0])
    out = gd_update(np.zeros(2), grad, np.zeros(2), quadratic, 1, settings, {})
    assert np.allclose(out, 0.5 * grad)


def test_momentum_update_combines_previous_direction():
    settings = GDSettings(method=GDMethod.MOMENTUM, step_size=0.1, momentum=0.9)
    grad = np.array([1.0, -1.0])
    prev = np.array([0.5, 0.5])
    out = gd_update(np.zeros(2), grad, prev, quadratic, 1, settings, {})
    assert np.allclose(out, 0.9 * prev + 0.1 * grad)


@pytest.mark.parametrize(
    "method",
    [
        GDMethod.ADAGRAD,
        GDMethod.RMSPROP,
        GDMethod.ADADELTA,
        GDMethod.ADAM,
        GDMethod.NADAM,
    ],
)
@pytest.mark.parametrize("ada_max", [False, True])
def test_adaptive_updates_point_along_gradient(method, ada_max):
    settings = GDSettings(method=method, ada_max=ada_max)
    grad = np.array([3.0, -0.5, 2.0])
    state = {}
    out = gd_update(np.zeros(3), grad, np.zeros(3), quadratic, 1, settings, state)
    assert np.array_equal(np.sign(out), np.sign(grad))
    assert state["m"].shape == grad.shape
    assert state["v"].shape == grad.shape


def test_adam_first_step_is_step_size_times_sign():
    settings = GDSettings(method=GDMethod.ADAM, step_size=0.1)
    grad = np.array([3.0, -0.5])
    out = gd_update(np.zeros(2), grad, np.zeros(2), quadratic, 1, settings, {})
    assert np.allclose(out, 0.1 * np.sign(grad), rtol=1e-5)


def test_step_decay_reduces_step_size():
    settings = GDSettings(step_size=1.0, step_decay=True, step_decay_periods=2,
                          step_decay_value=0.5)
    state = {}
    grad = np.ones(3)
    first = gd_update(np.zeros(3), grad, np.zeros(3), quadratic, 1, settings, state)
    second = gd_update(np.zeros(3), grad, np.zeros(3), quadratic, 2, settings, state)
    assert np.allclose(first, grad)
    assert np.allclose(second, 0.5 * grad)
    assert state["step_size"] == pytest.approx(0.5)
    assert settings.step_size == 1.0


def test_clipping_limits_l2_norm():
    settings = GDSettings(clip_norm_bound=1.0)
    grad = np.array([3.0, 4.0])
    clipped = gradient_clipping(grad, settings)
    assert np.linalg.norm(clipped) == pytest.approx(1.0)
    assert np.allclose(clipped / np.linalg.norm(clipped), grad / 5.0)


def test_clipping_leaves_small_gradient():
    settings = GDSettings(clip_norm_bound=10.0)
    grad = np.array([3.0, 4.0])
    assert np.array_equal(gradient_clipping(grad, settings), grad)


def test_clipping_with_max_norm():
    settings = GDSettings(clip_norm_bound=2.0, clip_max_norm=True)
    clipped = gradient_clipping(np.array([1.0, -8.0]), settings)
    assert np.max(np.abs(clipped)) == pytest.approx(2.0)


def test_clipped_descent_still_converges():
    settings = GDSettings(clip_grad=True, clip_norm_bound=0.5)
    result = gd(np.full(3, 10.0), quadratic, settings)
    assert np.allclose(result.x, CENTER, atol=1e-6)