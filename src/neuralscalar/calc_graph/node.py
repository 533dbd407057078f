import copy
import logging
import weakref

from neuralscalar import config
from neuralscalar.errors import CyclicDependency, InvariantViolation, UnresolvedBlueprintUpstream
from neuralscalar.nn.network import Activation, TinyNeuralNetwork
from neuralscalar.scalar.double import DoubleUtils
from .registry import current_registry

logger = logging.getLogger(__name__)


def _value_of(operand):
    if isinstance(operand, NeuralScalar):
        return operand.evaluate()
    return operand


def _mark_stale_ref(ref):
    scalar = ref()
    if scalar is not None:
        scalar._mark_stale()


class NeuralScalar:
    """
    A scalar that either holds an assigned value or is computed by a small
    neural network from the values of other NeuralScalars.

    In residual mode the network output is added to the assigned value,
    otherwise it replaces it. Results are cached until the scalar is marked
    dirty. Scalars that share a name share the canonical scalar's network
    and inputs, while keeping their own value and residual flag.
    """
    scalar_utils = DoubleUtils

    def __init__(self, value=None, inputs=None, use_input_bias=True, specification=None):
        """
        Args:
            value: Initial value, a raw scalar or another NeuralScalar (which is
                evaluated). Defaults to zero.
            inputs (list): Upstream scalars feeding the network. Entries may be
                None for an absent input.
            use_input_bias (bool): Whether the network adds a bias to its inputs.
            specification (NetworkSpecification): Full network topology to use
                instead of a single identity output layer.
        """
        if value is None:
            value = self.scalar_utils.zero()
        self._value = _value_of(value)
        self._cache = None
        self._is_dirty = True
        self._is_residual = True
        self._inputs = list(inputs) if inputs else []
        self._name = None
        self._registry = None
        # id(dependent) -> weakref to scalars that consumed this value
        self._dependents = {}
        self._evaluating = False
        # weakref to the canonical scalar whose network produced the cache
        self._delegate = None

        if specification is not None:
            if specification.input_dim() != len(self._inputs):
                raise InvariantViolation(
                    f'Specification expects {specification.input_dim()} inputs '
                    f'but {len(self._inputs)} were given.')
            self._net = TinyNeuralNetwork(specification)
        else:
            self._net = TinyNeuralNetwork(len(self._inputs), use_input_bias)
            if self._inputs:
                self._net.add_linear_layer(Activation.IDENTITY, 1)

    # State ---------------------------------------------------------------------
    @property
    def value(self):
        return self._value

    @value.setter
    def value(self, value):
        self.assign(value)

    @property
    def cache(self):
        return self._cache

    @property
    def is_dirty(self):
        return self._is_dirty or self._delegation_changed()

    @property
    def inputs(self):
        return list(self._inputs)

    @property
    def name(self):
        return self._name

    @property
    def net(self):
        return self._net

    @net.setter
    def net(self, net):
        self._net = net
        self.set_dirty()

    @property
    def is_residual(self):
        """Whether the stored value is added to, or replaced by, the network output."""
        return self._is_residual

    @is_residual.setter
    def is_residual(self, residual):
        self._is_residual = bool(residual)
        self.set_dirty()

    def assign(self, value):
        """
        Overwrites the stored value with a raw scalar or the evaluated value of
        another NeuralScalar. Inputs, network and name are left untouched.
        """
        self._value = _value_of(value)
        self._touch()
        return self

    def _touch(self):
        self._is_dirty = True
        self._invalidate_dependents()

    def set_dirty(self):
        """
        Forces recomputation on the next evaluation. Scalars whose network has
        no output yet are left as they are.
        """
        if self._net.output_dim() != 0:
            self._touch()

    def _mark_stale(self):
        if self._is_dirty or self._net.output_dim() == 0:
            return
        self._touch()

    def _add_dependent(self, scalar):
        if scalar is not self:
            self._dependents[id(scalar)] = weakref.ref(scalar)

    def _invalidate_dependents(self):
        for key, ref in list(self._dependents.items()):
            dependent = ref()
            if dependent is None:
                del self._dependents[key]
            else:
                dependent._mark_stale()

    # Wiring --------------------------------------------------------------------
    def connect(self, scalar, activation=Activation.IDENTITY):
        """Adds an input connection and re-initializes the network."""
        self._inputs.append(scalar)
        self._net.set_input_dim(self._net.input_dim() + 1)
        if self._net.num_layers() == 0:
            self._net.add_linear_layer(activation, 1)
        self.initialize()
        self.set_dirty()

    def initialize(self, method=config.DEFAULT_INITIALIZATION):
        self._net.initialize(method)

    def assign_name(self, name: str):
        """
        Assigns a name to this scalar. If a blueprint was registered for the
        name, its inputs are looked up by name and a copy of its network
        replaces this scalar's wiring. The scalar then becomes the canonical
        holder of the name.
        """
        if not name:
            raise ValueError('A NeuralScalar name must be a non-empty string.')

        registry = current_registry()
        blueprint = registry.lookup_blueprint(name)
        if blueprint is not None:
            inputs = []
            for input_name in blueprint.input_names:
                scalar = registry.lookup_canonical(input_name)
                if scalar is None:
                    logger.error('NeuralScalar named "%s" has been requested before it was assigned.',
                                 input_name)
                    raise UnresolvedBlueprintUpstream(input_name, name)
                inputs.append(scalar)

            net = copy.deepcopy(blueprint.net)
            if net.input_dim() != len(inputs):
                logger.error('Blueprint "%s" has %d inputs but its network expects %d.',
                             name, len(inputs), net.input_dim())
                raise InvariantViolation(
                    f'Blueprint "{name}" network expects {net.input_dim()} inputs, got {len(inputs)}.')

            logger.debug('Applying blueprint "%s" with inputs %s', name, blueprint.input_names)
            self._inputs = inputs
            self._net = net
            self.set_dirty()

        self._name = name
        self._registry = registry
        previous = registry.register_canonical(name, self)
        if previous is not None and previous is not self:
            previous.set_dirty()

    def _canonical(self):
        if not self._name:
            return None
        return self._registry.lookup_canonical(self._name)

    def _delegation_changed(self):
        if self._delegate is None:
            return False
        canonical = self._delegate()
        return canonical is None or canonical is not self._canonical()

    @staticmethod
    def retrieve(name: str):
        """Returns the canonical scalar registered under name, or None."""
        return current_registry().lookup_canonical(name)

    @staticmethod
    def add_blueprint(scalar_name: str, input_names, net):
        """
        Defines the inputs and network for a scalar with the given name. The
        blueprint is applied when a scalar is assigned that name.
        """
        current_registry().register_blueprint(scalar_name, input_names, net)

    # Evaluation ----------------------------------------------------------------
    def _evaluate_network(self, requester):
        canonical = self._canonical()
        if canonical is not None and canonical is not self:
            canonical._add_dependent(requester)
            if requester._delegate is None or requester._delegate() is not canonical:
                requester._delegate = weakref.ref(canonical)
                weakref.finalize(canonical, _mark_stale_ref, weakref.ref(requester))
            return canonical._evaluate_network(requester)

        if requester is self:
            self._delegate = None

        if config.DETECT_CYCLES and self._evaluating:
            logger.error('Cyclic dependency through "%s"', self._name)
            raise CyclicDependency(self._name)

        input_dim = self._net.input_dim()
        if input_dim != len(self._inputs):
            logger.error('Network of "%s" expects %d inputs, %d connected',
                         self._name, input_dim, len(self._inputs))
            raise InvariantViolation(
                f'Network expects {input_dim} inputs but {len(self._inputs)} are connected.')

        self._evaluating = True
        try:
            buffer = [self.scalar_utils.zero()] * input_dim
            for i, scalar in enumerate(self._inputs):
                if scalar is None:
                    continue
                buffer[i] = scalar.evaluate()
                scalar._add_dependent(requester)
            outputs = self._net.compute(buffer)
        finally:
            self._evaluating = False

        if len(outputs) == 0:
            logger.error('Network of "%s" has no output layer', self._name)
            raise InvariantViolation('Network produced no output.')
        return self.scalar_utils.scalar_from_double(outputs[0])

    def evaluate(self):
        """
        Returns the cached value, recomputing it first if the scalar is dirty.
        This updates the cache and clears the dirty flag.
        """
        if not self._is_dirty and not self._delegation_changed():
            return self._cache

        if not self._inputs:
            self._cache = self._value
            self._is_dirty = False
            return self._cache

        net_output = self._evaluate_network(self)
        self._cache = self._value + net_output if self._is_residual else net_output
        self._is_dirty = False
        return self._cache

    def __float__(self):
        return self.scalar_utils.getDouble(self.evaluate())

    def __repr__(self):
        return f'<NeuralScalar name={self._name!r} value={self._value!r} dirty={self._is_dirty}>'

    # Scalar operators create plain NeuralScalars without networks.
    def __add__(self, other):
        return type(self)(self.evaluate() + _value_of(other))

    def __radd__(self, other):
        return type(self)(_value_of(other) + self.evaluate())

    def __sub__(self, other):
        return type(self)(self.evaluate() - _value_of(other))

    def __rsub__(self, other):
        return type(self)(_value_of(other) - self.evaluate())

    def __mul__(self, other):
        return type(self)(self.evaluate() * _value_of(other))

    def __rmul__(self, other):
        return type(self)(_value_of(other) * self.evaluate())

    def __truediv__(self, other):
        return type(self)(self.evaluate() / _value_of(other))

    def __rtruediv__(self, other):
        return type(self)(_value_of(other) / self.evaluate())

    def __neg__(self):
        return type(self)(-self.evaluate())

    def __lt__(self, other):
        return self.evaluate() < _value_of(other)

    def __le__(self, other):
        return self.evaluate() <= _value_of(other)

    def __gt__(self, other):
        return self.evaluate() > _value_of(other)

    def __ge__(self, other):
        return self.evaluate() >= _value_of(other)

    def __eq__(self, other):
        return self.evaluate() == _value_of(other)

    def __ne__(self, other):
        return self.evaluate() != _value_of(other)

    __hash__ = None

    def __iadd__(self, other):
        self._value = self._value + _value_of(other)
        self._touch()
        return self

    def __isub__(self, other):
        self._value = self._value - _value_of(other)
        self._touch()
        return self

    def __imul__(self, other):
        self._value = self._value * _value_of(other)
        self._touch()
        return self

    def __itruediv__(self, other):
        self._value = self._value / _value_of(other)
        self._touch()
        return self
