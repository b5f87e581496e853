"""
Exceptions raised at the engine boundary.

Scoring never raises on well-typed input; these only signal arguments that
fall outside an operation's documented domain.
"""


class MemoryEngineError(Exception):
    """Base class for cognitive memory engine errors"""


class InvalidArgumentError(MemoryEngineError, ValueError):
    """An argument is outside the documented domain of an operation"""

    def __init__(self, argument: str, value, expected: str):
        self.argument = argument
        self.value = value
        self.expected = expected
        super().__init__(f"Invalid {argument}={value!r}: expected {expected}")
