from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from typing import Any, Mapping, Union

logger = logging.getLogger(__name__)


class InvalidConfiguration(ValueError):
    """Exception raised for network options that cannot describe a network."""

    pass


@dataclass
class Architecture:
    """Layer widths of a network.

    Attributes
    ----------
        input_size (int): width of the input vector.
        hidden_units (List[int]): width of every hidden layer, in order.
        output_size (int): width of the output vector.

    """

    input_size: int
    hidden_units: List[int]
    output_size: int

    def validate(self) -> None:
        widths = [self.input_size, *self.hidden_units, self.output_size]
        for width in widths:
            if not isinstance(width, int) or isinstance(width, bool) or width <= 0:
                raise InvalidConfiguration(
                    f"Layer widths must be positive integers, got {widths}"
                )


@dataclass
class Training:
    """Training hyper parameters.

    Attributes
    ----------
        alpha (float): default learning rate of `backward`.
        loss (float): output errors with an absolute value at or below this
            threshold are treated as converged and propagate no gradient.
        loss_clamp (float): bound on the magnitude of the error seeded into
            the output gradient.
        noise (float): standard deviation of the input noise of `BNN`.

    """

    alpha: float = 0.01
    loss: float = 1e-11
    loss_clamp: float = 1.0
    noise: float = 0.01

    def validate(self) -> None:
        if self.alpha <= 0:
            raise InvalidConfiguration(f"alpha must be positive, got {self.alpha}")
        if self.loss < 0 or self.loss_clamp <= 0 or self.noise < 0:
            raise InvalidConfiguration(
                f"loss and noise must be non-negative and loss_clamp positive, got {self}"
            )


@dataclass
class NetOpts:
    architecture: Architecture
    training: Training = field(default_factory=Training)

    def __post_init__(self) -> None:
        self.architecture.validate()
        self.training.validate()

    @classmethod
    def from_dict(cls, opt: Mapping[str, Any]) -> NetOpts:
        """Builds options from a nested or a flat mapping.

        Either `{"architecture": {...}, "training": {...}}` with `training`
        optional, or only the architecture keys
        `{"input_size": .., "hidden_units": [..], "output_size": ..}`.
        """
        if "architecture" in opt:
            unknown = set(opt) - {"architecture", "training"}
            if unknown:
                raise InvalidConfiguration(f"Unknown option(s) {sorted(unknown)}")
            architecture = _build(Architecture, opt["architecture"])
            training = _build(Training, opt.get("training", {}))
        else:
            architecture = _build(Architecture, opt)
            training = Training()
        architecture.hidden_units = list(architecture.hidden_units)
        logger.debug("network options %s %s", architecture, training)
        return cls(architecture, training)


def _build(kind: type, values: Mapping[str, Any]) -> Any:
    names = {f.name for f in fields(kind)}
    unknown = set(values) - names
    if unknown:
        raise InvalidConfiguration(f"Unknown {kind.__name__} option(s) {sorted(unknown)}")
    try:
        return kind(**values)
    except TypeError as e:
        raise InvalidConfiguration(f"Incomplete {kind.__name__} options: {e}") from e


def as_net_opts(opt: Union[NetOpts, Mapping[str, Any]]) -> NetOpts:
    """Accepts ready-made options or a mapping for `NetOpts.from_dict`."""
    if isinstance(opt, NetOpts):
        return opt
    return NetOpts.from_dict(opt)
