class NeuralScalarError(Exception):
    """Base class for errors raised by the neural scalar graph."""


class UnresolvedBlueprintUpstream(NeuralScalarError, KeyError):
    """
    A blueprint names an input that has not been assigned to any scalar yet.
    """
    def __init__(self, input_name: str, scalar_name: str = None):
        self.input_name = input_name
        self.scalar_name = scalar_name
        super().__init__(
            f'NeuralScalar named "{input_name}" has been requested before it was assigned.')

    def __str__(self):
        return self.args[0]


class InvariantViolation(NeuralScalarError, AssertionError):
    def __init__(self, description: str):
        self.description = description
        super().__init__(description)


class CyclicDependency(NeuralScalarError, RecursionError):
    def __init__(self, name=None):
        self.name = name
        label = f'"{name}"' if name else 'an unnamed scalar'
        super().__init__(f'Cyclic dependency detected while evaluating {label}.')
