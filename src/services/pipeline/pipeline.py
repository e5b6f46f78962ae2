"""Pipeline executor for the offer steps."""

from structlog import get_logger

from src.exceptions import OfferError

from .base_step import PipelineStep
from .context import OfferContext

logger = get_logger(__name__)


class Pipeline:
    """Pipeline for executing a sequence of processing steps.

    The pipeline:
    1. Executes steps in order
    2. Passes context between steps
    3. Stops at the first failing required step, re-raising its error
    4. Continues past failing optional steps
    5. Collects statistics
    """

    def __init__(self, name: str, steps: list[PipelineStep]):
        """Initialize the pipeline.

        Args:
            name: Pipeline name for logging
            steps: List of pipeline steps to execute in order
        """
        self.name = name
        self.steps = steps
        self.logger = logger.bind(pipeline=name)

    async def execute(self, context: OfferContext) -> OfferContext:
        """Execute the pipeline.

        Args:
            context: Pipeline context

        Returns:
            Updated context with results

        Raises:
            OfferError: When a required step fails
        """
        self.logger.info(
            "Pipeline starting",
            session_id=context.session_id,
            steps=self.get_step_names(),
        )

        successful_steps = 0
        failed_steps = 0

        try:
            for step in self.steps:
                step_name = step.get_name()

                try:
                    success = await step.run(context)
                except Exception:
                    failed_steps += 1
                    self.logger.error(
                        "Required step failed, stopping pipeline",
                        session_id=context.session_id,
                        step=step_name,
                    )
                    raise

                if success:
                    successful_steps += 1
                    continue

                failed_steps += 1
                if step.is_required():
                    self.logger.error(
                        "Required step failed, stopping pipeline",
                        session_id=context.session_id,
                        step=step_name,
                    )
                    raise OfferError(f"Step {step_name} failed")

                self.logger.warning(
                    "Optional step failed, continuing pipeline",
                    session_id=context.session_id,
                    step=step_name,
                )

            context.success = True
        finally:
            context.stats["pipeline"] = {
                "name": self.name,
                "total_steps": len(self.steps),
                "successful_steps": successful_steps,
                "failed_steps": failed_steps,
            }
            self.logger.info(
                "Pipeline completed",
                session_id=context.session_id,
                success=context.success,
                successful_steps=successful_steps,
                failed_steps=failed_steps,
            )

        return context

    def add_step(self, step: PipelineStep) -> "Pipeline":
        """Add a step to the pipeline.

        Args:
            step: Pipeline step to add

        Returns:
            Self for method chaining
        """
        self.steps.append(step)
        return self

    def get_step_names(self) -> list[str]:
        """Get list of all step names in the pipeline.

        Returns:
            List of step names
        """
        return [step.get_name() for step in self.steps]
