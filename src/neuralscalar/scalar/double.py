import math
import numpy as np


class DoubleUtils:
    """Scalar operations for plain Python floats."""

    @staticmethod
    def zero():
        return 0.0

    @staticmethod
    def one():
        return 1.0

    @staticmethod
    def two():
        return 2.0

    @staticmethod
    def half():
        return 0.5

    @staticmethod
    def pi():
        return math.pi

    @staticmethod
    def half_pi():
        return math.pi / 2.0

    @staticmethod
    def fraction(num: int, denom: int):
        return num / denom

    @staticmethod
    def sin1(v):
        return float(np.sin(v))

    @staticmethod
    def cos1(v):
        return float(np.cos(v))

    @staticmethod
    def sqrt1(v):
        return float(np.sqrt(v))

    @staticmethod
    def getDouble(v) -> float:
        return float(v)

    @staticmethod
    def scalar_from_double(value: float):
        return float(value)

    @staticmethod
    def convert(value: int):
        return float(value)
