from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Type, Union

from schemas.base import SchemaBase


class BaseAgent(ABC):
    """
    Base interface for the audit pipeline steps.

    An agent wraps one deterministic check: it takes its input model (or the
    equivalent dict), runs the check and returns a plain JSON-ready dict.
    """

    name: ClassVar[str]
    input_model: ClassVar[Type[SchemaBase]]

    def parse_input(self, input: Union[SchemaBase, Dict[str, Any]]) -> Any:
        return self.input_model.coerce(input)

    @abstractmethod
    def run(self, input: Union[SchemaBase, Dict[str, Any]]) -> Dict[str, Any]:
        """
        Execute the check.

        Raises pydantic.ValidationError when a dict input does not match
        input_model.
        """
        raise NotImplementedError
