import numpy as np
import pytest

from profoc.optim.hessian import numerical_hessian


def make_quadratic(matrix, linear):
    a = np.asarray(matrix, dtype=float)
    b = np.asarray(linear, dtype=float)

    def objective(x):
        return 0.5 * float(x @ a @ x) + float(b @ x)

    return objective


def rosenbrock(x):
    return 100.0 * (x[1] - x[0] ** 2) ** 2 + (1 - x[0]) ** 2


def rosenbrock_hessian(x):
    x1, x2 = x
    return np.array(
        [
            [1200.0 * x1**2 - 400.0 * x2 + 2.0, -400.0 * x1],
            [-400.0 * x1, 200.0],
        ]
    )


@pytest.mark.parametrize(
    "point", [[0.0, 0.0, 0.0], [1.0, -2.0, 0.5], [3.0, 0.25, -1.5]]
)
def test_quadratic_hessian_recovered(point):
    a = np.array([[4.0, 1.0, 0.5], [1.0, 3.0, -1.0], [0.5, -1.0, 2.0]])
    objective = make_quadratic(a, [1.0, -2.0, 0.3])
    hessian = numerical_hessian(np.array(point), objective)
    np.testing.assert_allclose(hessian, a, rtol=1e-6, atol=1e-6)


@pytest.mark.parametrize("point", [[1.0, 1.0], [-1.2, 1.0], [0.5, 2.0]])
def test_rosenbrock_matches_analytic(point):
    hessian = numerical_hessian(point, rosenbrock)
    np.testing.assert_allclose(
        hessian, rosenbrock_hessian(point), rtol=1e-6, atol=1e-6
    )


def test_result_is_symmetric():
    def objective(x):
        return float(np.sin(x[0]) * np.cos(x[1]) + x[0] * x[1] ** 3)

    hessian = numerical_hessian([0.3, -0.7], objective)
    np.testing.assert_array_equal(hessian, hessian.T)


def test_shape_follows_input():
    hessian = numerical_hessian(np.zeros(4), lambda x: float(x @ x))
    assert hessian.shape == (4, 4)
    np.testing.assert_allclose(hessian, 2.0 * np.eye(4), rtol=1e-6, atol=1e-6)


def test_step_size_used_at_origin():
    hessian = numerical_hessian([0.0], lambda x: float(3.0 * x[0] ** 2), step_size=1e-2)
    np.testing.assert_allclose(hessian, [[6.0]], rtol=1e-6)


def test_input_not_modified():
    x = np.array([1.0, 2.0])
    numerical_hessian(x, rosenbrock)
    np.testing.assert_array_equal(x, [1.0, 2.0])