"""GitHub Actions step outputs and job summary files."""

from pathlib import Path

import structlog


logger = structlog.get_logger()


class ActionOutputs:
    """Writes step outputs and the job summary.

    Both files are provided by the runner and are appended to, never
    replaced. When a path is unset (running outside Actions) the value
    is only logged.
    """

    def __init__(
        self,
        output_path: Path | None = None,
        step_summary_path: Path | None = None,
        run_id: str = "",
    ) -> None:
        """Initialize the outputs writer.

        Args:
            output_path: File named by GITHUB_OUTPUT.
            step_summary_path: File named by GITHUB_STEP_SUMMARY.
            run_id: Run identifier for logging.
        """
        self._output_path = output_path
        self._step_summary_path = step_summary_path
        self._log = logger.bind(component="outputs", run_id=run_id)

    def set_output(self, name: str, value: str) -> None:
        """Set a step output.

        Args:
            name: Output name.
            value: Single-line output value.
        """
        if "\n" in value:
            msg = f"Output '{name}' must be a single line"
            raise ValueError(msg)

        self._log.info("output_set", name=name, value=value)
        if self._output_path is None:
            return
        with self._output_path.open("a", encoding="utf-8") as f:
            f.write(f"{name}={value}\n")

    def append_summary(self, markdown: str) -> None:
        """Append markdown to the job summary.

        Args:
            markdown: Markdown content.
        """
        if self._step_summary_path is None:
            self._log.debug("summary_skipped", reason="no_step_summary_path")
            return
        with self._step_summary_path.open("a", encoding="utf-8") as f:
            f.write(markdown)
            if not markdown.endswith("\n"):
                f.write("\n")
        self._log.info("summary_written", bytes=len(markdown.encode("utf-8")))
