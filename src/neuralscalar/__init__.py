from .errors import (
    NeuralScalarError,
    UnresolvedBlueprintUpstream,
    InvariantViolation,
    CyclicDependency,
)
from .nn.network import (
    Activation,
    Initialization,
    NetworkSpecification,
    TinyNeuralNetwork,
)
from .calc_graph.registry import (
    NameRegistry,
    NeuralBlueprint,
    current_registry,
    registry_session,
    reset_registry,
)
from .calc_graph.node import NeuralScalar
from .scalar.utils import DoubleUtils, NeuralScalarUtils, is_neural_scalar

__all__ = [
    "NeuralScalarError",
    "UnresolvedBlueprintUpstream",
    "InvariantViolation",
    "CyclicDependency",
    "Activation",
    "Initialization",
    "NetworkSpecification",
    "TinyNeuralNetwork",
    "NameRegistry",
    "NeuralBlueprint",
    "current_registry",
    "registry_session",
    "reset_registry",
    "NeuralScalar",
    "DoubleUtils",
    "NeuralScalarUtils",
    "is_neural_scalar",
]
