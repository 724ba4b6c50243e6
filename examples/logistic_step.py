"""
One gradient step of a logistic regression with tinymat matrices
run with `TINYMAT_LOGLEVEL=DEBUG python examples/logistic_step.py` to trace the kernels
"""

import numpy as np

import tinymat
from tinymat import Matrix, Shape, SumDirection


def sigmoid(z: Matrix) -> Matrix:
    exp_neg = Matrix(np.exp(np.negative(z.values)), z.shape)  # no exp kernel, go through numpy
    ones = Matrix.zeros(z.shape) + 1.0
    return ones / (ones + exp_neg)


def cross_entropy(probs: Matrix, labels: Matrix) -> float:
    losses = labels * probs.log() + (1.0 - labels) * (1.0 - probs).log()
    return -losses.sum() / labels.shape.rows


def gradient_step(x: Matrix, y: Matrix, weights: Matrix, bias: Matrix, lr: float) -> tuple[Matrix, Matrix]:
    probs = sigmoid(x @ weights + bias)  # bias (1, 1) is broadcast over the batch
    delta = probs - y
    grad_w = x.T @ delta * (1.0 / x.shape.rows)
    grad_b = delta.sum(SumDirection.COLUMNS) * (1.0 / x.shape.rows)
    return weights - lr * grad_w, bias - lr * grad_b


if __name__ == "__main__":
    x = Matrix.from_rows([[0.5, 1.0], [1.5, -0.5], [-1.0, 2.0], [2.0, 0.0]])
    y = Matrix.from_rows([[1.0], [0.0], [1.0], [0.0]])
    weights, bias = Matrix.random(Shape(2, 1), multiplier=0.01), Matrix.zeros(Shape(1, 1))
    for backend in (tinymat.NumPyBackend(), tinymat.PythonBackend()):
        with tinymat.Configuration(backend=backend):
            w, b = weights, bias
            for _ in range(100):
                w, b = gradient_step(x, y, w, b, lr=0.5)
            print(f"{backend!r}: loss={cross_entropy(sigmoid(x @ w + b), y):.4f} weights={w.to_rows()}")
