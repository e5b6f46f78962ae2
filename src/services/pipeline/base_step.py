"""Base class for pipeline steps."""

from abc import ABC, abstractmethod

from structlog import get_logger

from src.exceptions import OfferError

logger = get_logger(__name__)


class PipelineStep(ABC):
    """Abstract base class for pipeline steps.

    Each step should:
    1. Implement execute() method
    2. Read data from context
    3. Perform its work
    4. Write results back to context
    5. Raise a typed OfferError when the request cannot proceed
    """

    def __init__(self, name: str | None = None):
        """Initialize the pipeline step.

        Args:
            name: Optional custom name for the step. Defaults to class name.
        """
        self.name = name or self.__class__.__name__
        self.logger = logger.bind(step=self.name)

    @abstractmethod
    async def execute(self, context: "OfferContext") -> bool:
        """Execute the pipeline step.

        Args:
            context: Pipeline context containing shared data

        Returns:
            True if step succeeded, False if failed
        """
        pass

    async def run(self, context: "OfferContext") -> bool:
        """Run the step with error handling and logging.

        Errors of required steps are recorded and re-raised; errors of
        optional steps are recorded and reported as a failed step.

        Args:
            context: Pipeline context

        Returns:
            True if step succeeded, False if failed
        """
        self.logger.info("Step starting", session_id=context.session_id)

        try:
            success = await self.execute(context)
        except OfferError as e:
            self.logger.warning(
                "Step raised offer error",
                session_id=context.session_id,
                error=e.message,
                error_type=type(e).__name__,
            )
            context.add_error(self.name, e.message)
            if self.is_required():
                raise
            return False
        except Exception as e:
            self.logger.error(
                "Step failed with exception",
                session_id=context.session_id,
                error=str(e),
                exc_info=True,
            )
            context.add_error(self.name, str(e))
            if self.is_required():
                raise
            return False

        if success:
            self.logger.info("Step completed successfully", session_id=context.session_id)
        else:
            self.logger.warning("Step completed with failure", session_id=context.session_id)

        return success

    def is_required(self) -> bool:
        """Check if this step is required for pipeline success.

        Returns:
            True if step failure should stop pipeline, False if optional
        """
        return True

    def get_name(self) -> str:
        """Get the step name.

        Returns:
            Step name
        """
        return self.name
