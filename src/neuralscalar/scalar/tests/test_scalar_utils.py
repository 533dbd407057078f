import math
import pytest
from neuralscalar.calc_graph.node import NeuralScalar
from neuralscalar.errors import InvariantViolation
from neuralscalar.scalar.double import DoubleUtils
from neuralscalar.scalar.utils import NeuralScalarUtils, is_neural_scalar

Utils = NeuralScalarUtils


def test_constants():
    assert Utils.zero().evaluate() == 0.0
    assert Utils.one().evaluate() == 1.0
    assert Utils.two().evaluate() == 2.0
    assert Utils.half().evaluate() == 0.5
    assert Utils.pi().evaluate() == math.pi
    assert Utils.half_pi().evaluate() == math.pi / 2
    assert Utils.zero().inputs == []


def test_fraction():
    assert Utils.fraction(1, 4).evaluate() == 0.25
    with pytest.raises(TypeError):
        Utils.fraction(1.0, 4)
    with pytest.raises(TypeError):
        Utils.fraction(True, 4)


def test_convert():
    assert Utils.convert(3).evaluate() == 3.0
    with pytest.raises(TypeError):
        Utils.convert(3.5)


def test_math_evaluates_operand():
    x = NeuralScalar(4.0)
    assert Utils.sqrt1(x).evaluate() == 2.0
    assert Utils.sin1(Utils.zero()).evaluate() == 0.0
    assert Utils.cos1(Utils.zero()).evaluate() == 1.0
    assert Utils.sin1(Utils.half_pi()).evaluate() == pytest.approx(1.0)

    x.assign(9.0)
    assert Utils.sqrt1(x).evaluate() == 3.0


def test_get_double():
    assert Utils.getDouble(NeuralScalar(1.5)) == 1.5
    assert isinstance(Utils.getDouble(Utils.convert(2)), float)


def test_batch_conversions():
    scalars = Utils.to_neural([1.0, 2.0, 3.0])
    assert all(is_neural_scalar(s) for s in scalars)
    assert all(s.inputs == [] for s in scalars)

    scalars[1].assign(5.0)
    assert Utils.from_neural(scalars) == [1.0, 5.0, 3.0]
    assert Utils.from_neural([]) == []


def test_full_assert(caplog):
    Utils.full_assert(True)
    with pytest.raises(InvariantViolation) as ctx:
        Utils.full_assert(1 > 2, 'one is not greater than two')
    assert ctx.value.description == 'one is not greater than two'
    assert 'one is not greater than two' in caplog.text


def test_is_neural_scalar():
    assert is_neural_scalar(NeuralScalar())
    assert not is_neural_scalar(1.0)


def test_double_utils():
    assert DoubleUtils.fraction(1, 2) == 0.5
    assert DoubleUtils.sqrt1(16.0) == 4.0
    assert DoubleUtils.getDouble(3) == 3.0
    assert isinstance(DoubleUtils.sin1(0.3), float)
