import logging
from collections import OrderedDict

from neuralscalar import config
from neuralscalar.nn.network import NetworkSpecification, TinyNeuralNetwork
from .node import NeuralScalar

logger = logging.getLogger(__name__)


def build_network(description: dict) -> TinyNeuralNetwork:
    """
    Builds a network from a blueprint description.

    Args:
        description (dict): Needs 'inputs' (list of names) and 'layers', a list
            of [activation, units] pairs. 'parameters' optionally holds the flat
            parameter vector, 'use_input_bias' defaults to True.

    Returns:
        TinyNeuralNetwork: The network, zero-initialized unless parameters are given.
    """
    spec = NetworkSpecification(len(description['inputs']),
                                description.get('use_input_bias', True))
    for activation, units in description.get('layers', [[config.DEFAULT_ACTIVATION, 1]]):
        spec.add_linear_layer(activation, units)

    net = TinyNeuralNetwork(spec)
    if 'parameters' in description:
        net.set_parameters(description['parameters'])
    return net


def build_graph(description: dict) -> OrderedDict:
    """
    Registers the blueprints of a graph description and builds its scalars
    in the current registry.

    Args:
        description (dict): {'blueprints': [...], 'nodes': [...]}. Each node
            may give 'value', 'inputs' (names of scalars built before it),
            'activation', 'residual' and 'initialize'.

    Returns:
        OrderedDict: Scalar name to NeuralScalar, in build order.
    """
    for blueprint in description.get('blueprints', []):
        NeuralScalar.add_blueprint(blueprint['name'], blueprint['inputs'], build_network(blueprint))
        logger.debug('Registered blueprint "%s"', blueprint['name'])

    scalars = OrderedDict()
    for node in description.get('nodes', []):
        name = node['name']
        scalar = NeuralScalar(node.get('value'))
        activation = node.get('activation', config.DEFAULT_ACTIVATION)
        for input_name in node.get('inputs', []):
            if input_name not in scalars:
                raise KeyError(f'Scalar "{name}" uses "{input_name}" before it is defined.')
            scalar.connect(scalars[input_name], activation)

        if 'initialize' in node:
            scalar.initialize(node['initialize'])
        if 'residual' in node:
            scalar.is_residual = node['residual']

        scalar.assign_name(name)
        scalars[name] = scalar

    return scalars
