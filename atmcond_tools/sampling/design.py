"""Unit-hypercube design matrices for Sobol sensitivity estimation.

This module provides the Sampler class, which draws the two independent base
matrices A and B used by Sobol estimators, and the immutable DesignMatrix
that holds them. Plain seeded uniform draws are the default; quasi-random
Sobol, Latin Hypercube and Halton engines from scipy are also available.

The cross-sampled matrix follows the ordering expected by SALib's Sobol
analysis: for every base row i the block

    A_i, AB_i^1 .. AB_i^D, [BA_i^1 .. BA_i^D,] B_i

where AB_i^j is row i of A with column j taken from B, and BA_i^j the
reverse. The BA rows are only present when second-order indices are wanted.

Typical usage example:

```python
    from atmcond_tools.sampling import Sampler

    sampler = Sampler(["windspeed", "height", "kd", "ko"], seed=42)
    design = sampler.sample(1000)
    X = design.cross_sample(calc_second_order=True)  # (1000 * 10, 4)
```
"""

# Data
import numpy as np

# Distributions and Sampling
from scipy.stats import qmc

# Typing
from typing import Literal
from dataclasses import dataclass

# Logging
import logging


ENGINES = ("random", "sobol", "latin", "halton")


@dataclass(frozen=True, eq=False)
class DesignMatrix:
    """Pair of independent unit-uniform base matrices.

    Both arrays are made read-only on construction so that a design shared
    between scenarios cannot be altered by any of them.

    Attributes:
        A (np.ndarray): First base matrix with shape (N, D).
        B (np.ndarray): Second base matrix with shape (N, D).
        names (tuple[str, ...]): Parameter names in column order.
    """

    A: np.ndarray
    B: np.ndarray
    names: tuple[str, ...]

    def __post_init__(self):
        A = np.array(self.A, dtype=float)
        B = np.array(self.B, dtype=float)

        if A.ndim != 2 or A.shape != B.shape:
            raise ValueError(
                f"Base matrices must be 2-D with equal shapes, got {A.shape} and {B.shape}"
            )
        if A.shape[1] != len(self.names):
            raise ValueError(
                f"Got {len(self.names)} parameter names for {A.shape[1]} columns"
            )
        if not (((A >= 0) & (A <= 1)).all() and ((B >= 0) & (B <= 1)).all()):
            raise ValueError("Design matrix values must lie in [0, 1]")

        A.setflags(write=False)
        B.setflags(write=False)
        object.__setattr__(self, "A", A)
        object.__setattr__(self, "B", B)
        object.__setattr__(self, "names", tuple(self.names))

    @property
    def n(self) -> int:
        """Number of base rows N."""
        return self.A.shape[0]

    @property
    def d(self) -> int:
        """Number of parameters D."""
        return self.A.shape[1]

    def num_evaluations(self, calc_second_order: bool = True) -> int:
        """Number of model evaluations the cross-sampled design requires.

        Args:
            calc_second_order (bool, optional): Whether BA rows are included.
                Defaults to True.

        Returns:
            int: N * (2D + 2) with second order, otherwise N * (D + 2).
        """
        step = 2 * self.d + 2 if calc_second_order else self.d + 2
        return self.n * step

    def cross_sample(self, calc_second_order: bool = True) -> np.ndarray:
        """Build the cross-sampled matrix in SALib's evaluation order.

        `SALib.sample.sobol.sample` cannot take caller-supplied base
        matrices, so the block layout is built here for every engine. For
        A and B taken from one SALib sample the result is identical to it.

        Args:
            calc_second_order (bool, optional): Whether to include the BA
                rows needed for second-order indices. Defaults to True.

        Returns:
            np.ndarray: Matrix with shape (num_evaluations, D), every value in [0, 1].
        """
        N, D = self.A.shape
        step = 2 * D + 2 if calc_second_order else D + 2
        X = np.empty((N, step, D))

        X[:, 0, :] = self.A
        for j in range(D):
            X[:, 1 + j, :] = self.A
            X[:, 1 + j, j] = self.B[:, j]

            if calc_second_order:
                X[:, 1 + D + j, :] = self.B
                X[:, 1 + D + j, j] = self.A[:, j]
        X[:, step - 1, :] = self.B

        return X.reshape(N * step, D)


class Sampler:
    """Seeded generator of DesignMatrix instances.

    Attributes:
        names (tuple[str, ...]): Parameter names, fixing column order.
        seed (int): Random seed for reproducibility.
        engine_name (str): One of 'random', 'sobol', 'latin' or 'halton'.
    """

    def __init__(
        self,
        names: list[str],
        seed: int = 42,
        engine: Literal['random', 'sobol', 'latin', 'halton'] = 'random',
        **engine_kwargs
    ):
        """Initializes the Sampler.

        Args:
            names (list[str]): Parameter names in column order.
            seed (int, optional): Random seed. Defaults to 42.
            engine (str, optional): Sampling engine. Defaults to 'random'.
            **engine_kwargs: Additional arguments for the scipy qmc engine.

        Raises:
            ValueError: If no parameter names are given or the engine is unknown.
        """
        if len(names) <= 0:
            raise ValueError("Sampler needs at least one parameter (d > 0)")
        if engine not in ENGINES:
            raise ValueError(f"Unknown sampling engine: {engine}")

        self.names = tuple(names)
        self.seed = seed
        self.engine_name = engine
        self.engine_kwargs = engine_kwargs

    @staticmethod
    def _get_engine(engine: str, **kwargs):
        """Creates and returns the specified quasi-random sampling engine.

        Args:
            engine (str): One of 'sobol', 'latin' or 'halton'.
            **kwargs: Arguments passed to the engine constructor, typically
                'd' (dimensionality) and 'rng'.

        Returns:
            qmc.QMCEngine: Engine ready for generating samples.
        """
        match engine:
            case 'sobol':
                return qmc.Sobol(**kwargs)
            case 'latin':
                return qmc.LatinHypercube(**kwargs)
            case 'halton':
                return qmc.Halton(**kwargs)
            case _:
                raise ValueError(f"Unknown sampling engine: {engine}")

    def sample(self, n: int) -> DesignMatrix:
        """Draw a new design with n base rows.

        Each call restarts from the configured seed, so equal arguments
        always return equal matrices.

        Args:
            n (int): Number of base rows N. For the Sobol engine it must be
                a power of 2.

        Returns:
            DesignMatrix: Independent base matrices A and B.

        Raises:
            ValueError: If n is not a positive integer, or is not a power of
                2 for the Sobol engine.
        """
        if int(n) != n or n <= 0:
            raise ValueError(f"Sample count must be a positive integer, got {n}")
        n = int(n)
        d = len(self.names)

        logging.info(f"Drawing {n} x {d} base matrices with the '{self.engine_name}' engine.")
        rng = np.random.default_rng(self.seed)

        if self.engine_name == 'random':
            A = rng.random((n, d))
            B = rng.random((n, d))
        else:
            # One 2D-dimensional sequence split in half keeps A and B independent
            engine = self._get_engine(self.engine_name, d=2 * d, rng=rng, **self.engine_kwargs)
            if isinstance(engine, qmc.Sobol):
                if np.log2(n) % 1 != 0:
                    raise ValueError(f"Sobol engine needs a power of 2 samples, got {n}")
                samples = engine.random_base2(m=int(np.log2(n)))
            else:
                samples = engine.random(n)
            A, B = samples[:, :d], samples[:, d:]

        return DesignMatrix(A=A, B=B, names=self.names)
