import copy
import logging
from collections import namedtuple
from enum import Enum
from typing import List, Sequence

import torch
import torch.nn as nn
import torch.nn.functional as F

from neuralscalar.config import DTYPE

logger = logging.getLogger(__name__)


class Activation(Enum):
    IDENTITY = 'identity'
    TANH = 'tanh'
    SIGMOID = 'sigmoid'
    RELU = 'relu'
    SOFT_RELU = 'soft_relu'
    ELU = 'elu'
    SIN = 'sin'
    SOFTSIGN = 'softsign'


class Initialization(Enum):
    XAVIER = 'xavier'
    HE = 'he'


_ACTIVATION_FUNCTIONS = {
    Activation.IDENTITY: lambda x: x,
    Activation.TANH: torch.tanh,
    Activation.SIGMOID: torch.sigmoid,
    Activation.RELU: torch.relu,
    Activation.SOFT_RELU: F.softplus,
    Activation.ELU: F.elu,
    Activation.SIN: torch.sin,
    Activation.SOFTSIGN: F.softsign,
}

LayerSpec = namedtuple('LayerSpec', ['units', 'activation', 'learn_bias'])


class NetworkSpecification:
    """
    Describes the topology of a dense feed-forward network: the input
    dimension, whether a bias is added to the inputs, and the list of
    dense layers (width, activation, bias) in order.
    """
    def __init__(self, input_dim: int = 0, use_input_bias: bool = True):
        self._input_dim = int(input_dim)
        self.use_input_bias = use_input_bias
        self.layers: List[LayerSpec] = []

    def add_linear_layer(self, activation=Activation.IDENTITY, units: int = 1, learn_bias: bool = True):
        self.layers.append(LayerSpec(int(units), Activation(activation), learn_bias))

    def set_input_dim(self, input_dim: int):
        self._input_dim = int(input_dim)

    def input_dim(self) -> int:
        return self._input_dim

    def output_dim(self) -> int:
        if not self.layers:
            return 0
        return self.layers[-1].units

    def num_layers(self) -> int:
        return len(self.layers)

    def layer_dims(self):
        """Yields (in_features, out_features) for every dense layer."""
        in_features = self._input_dim
        for layer in self.layers:
            yield in_features, layer.units
            in_features = layer.units

    def num_weights(self) -> int:
        return sum(i * o for i, o in self.layer_dims())

    def num_biases(self) -> int:
        count = self._input_dim if self.use_input_bias else 0
        return count + sum(layer.units for layer in self.layers if layer.learn_bias)

    def num_parameters(self) -> int:
        return self.num_weights() + self.num_biases()

    def __eq__(self, other):
        if not isinstance(other, NetworkSpecification):
            return NotImplemented
        return (self._input_dim == other._input_dim and
                self.use_input_bias == other.use_input_bias and
                self.layers == other.layers)

    def __repr__(self):
        layers = ', '.join(f'{x.units}:{x.activation.value}' for x in self.layers)
        return f'<NetworkSpecification in={self._input_dim} layers=[{layers}]>'


def _zero_linear(in_features: int, out_features: int, bias: bool) -> nn.Linear:
    layer = nn.Linear(in_features, out_features, bias=bias, dtype=DTYPE)
    with torch.no_grad():
        layer.weight.zero_()
        if layer.bias is not None:
            layer.bias.zero_()
    return layer


class TinyNeuralNetwork(nn.Module):
    """
    A small dense network whose input dimension can grow one slot at a time.

    Default construction yields zero weights and biases, so the output is
    zero until initialize() or set_parameters() is called.
    """
    def __init__(self, specification=0, use_input_bias=True):
        """
        Args:
            specification (NetworkSpecification | int): The full topology, or
                just the input dimension of a network without layers.
            use_input_bias (bool): Whether a bias is added to the inputs. Only
                used when specification is an int.
        """
        super(TinyNeuralNetwork, self).__init__()
        if isinstance(specification, NetworkSpecification):
            self.specification = copy.deepcopy(specification)
        else:
            self.specification = NetworkSpecification(specification, use_input_bias)

        self._build_input_bias(torch.zeros(self.input_dim(), dtype=DTYPE))
        self.layers = nn.ModuleList(
            _zero_linear(i, o, layer.learn_bias)
            for (i, o), layer in zip(self.specification.layer_dims(), self.specification.layers))

    def _build_input_bias(self, values):
        if self.specification.use_input_bias:
            self.input_bias = nn.Parameter(values)
        else:
            self.register_parameter('input_bias', None)

    def input_dim(self) -> int:
        return self.specification.input_dim()

    def output_dim(self) -> int:
        return self.specification.output_dim()

    def num_layers(self) -> int:
        return self.specification.num_layers()

    def num_parameters(self) -> int:
        return self.specification.num_parameters()

    def set_input_dim(self, input_dim: int):
        """
        Resizes the input. Weights of the inputs that survive are kept, new
        input columns start at zero.
        """
        old_dim = self.input_dim()
        self.specification.set_input_dim(input_dim)
        keep = min(old_dim, input_dim)

        if self.input_bias is not None:
            values = torch.zeros(input_dim, dtype=DTYPE)
            values[:keep] = self.input_bias.detach()[:keep]
            self._build_input_bias(values)

        if len(self.layers):
            old = self.layers[0]
            layer = _zero_linear(input_dim, old.out_features, old.bias is not None)
            with torch.no_grad():
                layer.weight[:, :keep] = old.weight[:, :keep]
                if old.bias is not None:
                    layer.bias.copy_(old.bias)
            self.layers[0] = layer

    def add_linear_layer(self, activation=Activation.IDENTITY, units: int = 1, learn_bias: bool = True):
        in_features = self.output_dim() if self.num_layers() else self.input_dim()
        self.specification.add_linear_layer(activation, units, learn_bias)
        self.layers.append(_zero_linear(in_features, units, learn_bias))

    def initialize(self, method=Initialization.XAVIER):
        """Draws new weights with the given policy. Biases are reset to zero."""
        method = Initialization(method)
        logger.debug('Initializing %s with %s', self.specification, method.value)
        with torch.no_grad():
            if self.input_bias is not None:
                self.input_bias.zero_()
            for layer in self.layers:
                if method is Initialization.XAVIER:
                    nn.init.xavier_uniform_(layer.weight)
                else:
                    nn.init.kaiming_uniform_(layer.weight, nonlinearity='relu')
                if layer.bias is not None:
                    layer.bias.zero_()

    def forward(self, x):
        if self.input_bias is not None:
            x = x + self.input_bias
        for layer, layer_spec in zip(self.layers, self.specification.layers):
            x = _ACTIVATION_FUNCTIONS[layer_spec.activation](layer(x))
        return x

    def compute(self, inputs: Sequence) -> List[float]:
        """
        Runs a single forward pass.

        Args:
            inputs (sequence): One value per input slot, convertible to float.

        Returns:
            list: One float per output unit, empty if the network has no layers.
        """
        if len(inputs) != self.input_dim():
            raise ValueError(
                f'Expected {self.input_dim()} inputs but received {len(inputs)}.')
        if not self.num_layers():
            return []

        with torch.no_grad():
            x = torch.tensor([float(v) for v in inputs], dtype=DTYPE)
            return self.forward(x).tolist()

    def _parameter_tensors(self):
        if self.input_bias is not None:
            yield self.input_bias
        for layer in self.layers:
            yield layer.weight
            if layer.bias is not None:
                yield layer.bias

    def get_parameters(self) -> List[float]:
        """Flattens input bias, then each layer's weights (row-major) and bias."""
        return [v for t in self._parameter_tensors() for v in t.detach().flatten().tolist()]

    def set_parameters(self, values: Sequence[float]):
        if len(values) != self.num_parameters():
            raise ValueError(
                f'Expected {self.num_parameters()} parameters but received {len(values)}.')
        offset = 0
        with torch.no_grad():
            for t in self._parameter_tensors():
                n = t.numel()
                chunk = torch.tensor([float(v) for v in values[offset:offset + n]], dtype=DTYPE)
                t.copy_(chunk.reshape(t.shape))
                offset += n

    def is_equivalent(self, other) -> bool:
        """Same topology and identical parameter values."""
        return (isinstance(other, TinyNeuralNetwork) and
                self.specification == other.specification and
                self.get_parameters() == other.get_parameters())
