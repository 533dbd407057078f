import logging
from typing import List, Sequence

from neuralscalar.calc_graph.node import NeuralScalar
from neuralscalar.errors import InvariantViolation
from .double import DoubleUtils

logger = logging.getLogger(__name__)


def is_neural_scalar(obj) -> bool:
    return isinstance(obj, NeuralScalar)


def _require_int(*values):
    for v in values:
        if isinstance(v, bool) or not isinstance(v, int):
            raise TypeError(f'Expected an int but got {type(v).__name__}.')


class NeuralScalarUtils:
    """
    Helpers that build plain NeuralScalars (no inputs, no network) from
    constants and from the results of scalar math on evaluated scalars.
    """
    scalar_utils = DoubleUtils
    scalar_class = NeuralScalar

    @classmethod
    def scalar_from_double(cls, value: float) -> NeuralScalar:
        return cls.scalar_class(cls.scalar_utils.scalar_from_double(value))

    @classmethod
    def getDouble(cls, v: NeuralScalar) -> float:
        return cls.scalar_utils.getDouble(v.evaluate())

    @classmethod
    def zero(cls):
        return cls.scalar_from_double(0.)

    @classmethod
    def one(cls):
        return cls.scalar_from_double(1.)

    @classmethod
    def two(cls):
        return cls.scalar_from_double(2.)

    @classmethod
    def half(cls):
        return cls.scalar_from_double(0.5)

    @classmethod
    def pi(cls):
        return cls.scalar_class(cls.scalar_utils.pi())

    @classmethod
    def half_pi(cls):
        return cls.scalar_class(cls.scalar_utils.half_pi())

    @classmethod
    def fraction(cls, num: int, denom: int):
        """Only integer fractions are accepted, e.g. fraction(1, 3)."""
        _require_int(num, denom)
        return cls.scalar_from_double(float(num) / float(denom))

    @classmethod
    def convert(cls, value: int):
        _require_int(value)
        return cls.scalar_from_double(float(value))

    @classmethod
    def sin1(cls, v: NeuralScalar):
        return cls.scalar_class(cls.scalar_utils.sin1(v.evaluate()))

    @classmethod
    def cos1(cls, v: NeuralScalar):
        return cls.scalar_class(cls.scalar_utils.cos1(v.evaluate()))

    @classmethod
    def sqrt1(cls, v: NeuralScalar):
        return cls.scalar_class(cls.scalar_utils.sqrt1(v.evaluate()))

    @staticmethod
    def full_assert(condition: bool, description: str = 'assertion failed'):
        if not condition:
            logger.error('Invariant violated: %s', description)
            raise InvariantViolation(description)

    @classmethod
    def to_neural(cls, values: Sequence) -> List[NeuralScalar]:
        return [cls.scalar_class(v) for v in values]

    @classmethod
    def from_neural(cls, values: Sequence[NeuralScalar]) -> list:
        return [v.evaluate() for v in values]
