"""Base protocol for pipeline stages."""

from typing import Protocol, TypeVar

from snapsolve.core.types import Result
from snapsolve.exceptions import SnapSolveError

# Contravariant input (handlers can accept supertypes), invariant output
T_In = TypeVar("T_In", contravariant=True)
T_Out = TypeVar("T_Out")
T_Error = TypeVar("T_Error", bound=SnapSolveError)


class BaseAsyncHandler(Protocol[T_In, T_Out, T_Error]):
    """Protocol for asynchronous pipeline stages.

    Each stage performs one model call plus its request construction and
    response parsing, and reports failures as values rather than raising.
    """

    async def handle(self, command: T_In) -> Result[T_Out, T_Error]:
        """Process a command object.

        Args:
            command: The input for this stage.

        Returns:
            A Result object containing either the stage output or an error.
        """
        ...
