import math
import random
from typing import Dict, List, Sequence, Tuple

from . import utils


class TrainingSet:
    """An ordered collection of input/expected-output samples.

    Samples are stored as `{"input": [...], "output": [...]}` dictionaries.
    Accessors hand out copies, so callers may distort them freely.
    """

    def __init__(self) -> None:
        self.samples: List[Dict[str, List[float]]] = []

    def set_samples(self, samples: Sequence[Dict[str, Sequence[float]]]) -> None:
        """Replaces all samples."""
        self.samples = []
        for sample in samples:
            self.add_sample(sample["input"], sample["output"])

    def add_sample(self, input: Sequence[float], output: Sequence[float]) -> None:
        self.samples.append({"input": list(input), "output": list(output)})

    def length(self) -> int:
        return len(self.samples)

    def __len__(self) -> int:
        return self.length()

    def get_input_for_sample(self, i: int) -> List[float]:
        return list(self.samples[i]["input"])

    def get_expected_output_for_sample(self, i: int) -> List[float]:
        return list(self.samples[i]["output"])

    def random_index(self) -> int:
        """Index of a uniformly chosen sample."""
        return utils.randi(0, self.length())


def make_pts(N: int) -> List[Tuple[float, float]]:
    """Generates a list of N random 2D points within the range [0, 1].

    Args:
    ----
        N (int): The number of points to generate.

    Returns:
    -------
    List[Tuple[float, float]]: A list of tuples, each representing a 2D point (x_1, x_2) with random coordinates.

    """
    X = []
    for i in range(N):
        x_1 = random.random()
        x_2 = random.random()
        X.append((x_1, x_2))
    return X


def one_hot(label: int) -> List[float]:
    """Two-class one-hot encoding of a 0/1 label."""
    return [1.0, 0.0] if label == 0 else [0.0, 1.0]


def labeled(X: List[Tuple[float, float]], y: List[int]) -> TrainingSet:
    training_set = TrainingSet()
    for x, label in zip(X, y):
        training_set.add_sample(x, one_hot(label))
    return training_set


def simple(N: int) -> TrainingSet:
    """Points labeled 1 if the x-coordinate is less than 0.5, else 0.

    Args:
    ----
        N (int): The number of points to generate.

    Returns:
    -------
    TrainingSet: N samples with one-hot encoded labels.

    """
    X = make_pts(N)
    y = []
    for x_1, x_2 in X:
        y1 = 1 if x_1 < 0.5 else 0
        y.append(y1)
    return labeled(X, y)


def xor(N: int) -> TrainingSet:
    """Points labeled 1 if they fall in opposite quadrants, simulating an XOR pattern, else 0."""
    X = make_pts(N)
    y = []
    for x_1, x_2 in X:
        y1 = 1 if (x_1 < 0.5 and x_2 > 0.5) or (x_1 > 0.5 and x_2 < 0.5) else 0
        y.append(y1)
    return labeled(X, y)


def circle(N: int) -> TrainingSet:
    """Points labeled 1 if outside a circle of radius sqrt(0.1) centered at (0.5, 0.5), else 0."""
    X = make_pts(N)
    y = []
    for x_1, x_2 in X:
        x1, x2 = x_1 - 0.5, x_2 - 0.5
        y1 = 1 if x1 * x1 + x2 * x2 > 0.1 else 0
        y.append(y1)
    return labeled(X, y)


def spiral(N: int) -> TrainingSet:
    """Points arranged in two interleaved spirals with alternating labels."""

    def x(t: float) -> float:
        return t * math.cos(t) / 20.0

    def y(t: float) -> float:
        return t * math.sin(t) / 20.0

    X = [
        (x(10.0 * (float(i) / (N // 2))) + 0.5, y(10.0 * (float(i) / (N // 2))) + 0.5)
        for i in range(5 + 0, 5 + N // 2)
    ]
    X = X + [
        (y(-10.0 * (float(i) / (N // 2))) + 0.5, x(-10.0 * (float(i) / (N // 2))) + 0.5)
        for i in range(5 + 0, 5 + N // 2)
    ]
    y2 = [0] * (N // 2) + [1] * (N // 2)
    return labeled(X, y2)


datasets = {
    "Simple": simple,
    "Xor": xor,
    "Circle": circle,
    "Spiral": spiral,
}
