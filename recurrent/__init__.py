"""Neural Network Library on a Dynamic Computation Graph

This package trains small layered networks one sample at a time with a
hand-rolled reverse-mode automatic differentiation engine.

Modules
-------

- `operators`: Scalar math operators and their derivatives.
- `fast_ops`: Numba compiled storage kernels built from the operators.
- `mat`: The `Mat` value/gradient container and its errors.
- `autodiff`: The `Context` of an operation and numeric derivative checks.
- `mat_ops`: Differentiable matrix operations (forward and backward).
- `graph`: The `Graph` recording operations and replaying their derivatives.
- `utils`: Random numbers, array fillers and statistics helpers.
- `net_opts`: Network configuration.
- `ann`: Shared training routine of all architectures.
- `fnn`: Feed-forward networks (`DNN`, `BNN`).
- `rnn`: Recurrent networks (`RNN`, `LSTM`).
- `datasets`: Training sample container and toy datasets.
"""

from . import utils  # noqa: F401
from .mat import *  # noqa: F401,F403
from .autodiff import *  # noqa: F401,F403
from .graph import *  # noqa: F401,F403
from .net_opts import *  # noqa: F401,F403
from .ann import *  # noqa: F401,F403
from .fnn import *  # noqa: F401,F403
from .rnn import *  # noqa: F401,F403
from .datasets import *  # noqa: F401,F403
