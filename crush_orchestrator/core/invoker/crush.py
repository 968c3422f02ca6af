"""Model invoker backed by the crush command-line client."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time

from crush_orchestrator.core.errors import InvocationError, InvocationTimeoutError
from crush_orchestrator.core.invoker.base import ModelInvoker
from crush_orchestrator.core.types import (
    CHARS_PER_TOKEN,
    UNSPECIFIED_MODEL,
    ModelResult,
    calculate_cost,
    estimate_tokens,
)

logger = logging.getLogger(__name__)


class CrushInvoker(ModelInvoker):
    """Runs one ``crush run`` process per call.

    The prompt is written to stdin, stdin is closed, and the whole of stdout
    becomes the generated text. A non-zero exit status is a hard failure.
    """

    def __init__(self, binary_path: str = "crush", timeout: float | None = 300.0):
        """Initialize the invoker.

        Args:
            binary_path: Path (or PATH-resolvable name) of the crush binary
            timeout: Seconds to wait for a call before killing it, None for no limit
        """
        self._binary_path = binary_path
        self._timeout = timeout

    @property
    def binary_path(self) -> str:
        return self._binary_path

    def build_args(self, model: str | None = None, session: str | None = None) -> list[str]:
        """Build the command-line arguments for one call."""
        args = ["run"]
        if model:
            args.extend(["--model", model])
        if session:
            args.extend(["--session", session])
        return args

    async def invoke(
        self,
        prompt: str,
        model: str | None = None,
        session: str | None = None,
        max_tokens: int | None = None,
    ) -> ModelResult:
        """Run the prompt through crush and account for tokens and cost."""
        model_id = model or UNSPECIFIED_MODEL
        args = self.build_args(model, session)

        logger.debug("Spawning %s %s", self._binary_path, " ".join(args))
        start_time = time.perf_counter()

        try:
            process = await asyncio.create_subprocess_exec(
                self._binary_path,
                *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.warning("Could not start %s: %s", self._binary_path, e)
            raise InvocationError(
                f"Failed to start '{self._binary_path}': {e}",
                model=model_id,
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(prompt.encode("utf-8")),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            logger.warning("Model call to %s timed out after %ss", model_id, self._timeout)
            raise InvocationTimeoutError(model_id, self._timeout) from e
        finally:
            if process.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    process.kill()
                await process.wait()

        time_seconds = time.perf_counter() - start_time
        error_text = stderr.decode("utf-8", errors="replace")

        if process.returncode != 0:
            logger.warning(
                "crush exited with code %s for model %s: %s",
                process.returncode,
                model_id,
                error_text.strip(),
            )
            raise InvocationError(
                f"crush exited with code {process.returncode}: {error_text}",
                model=model_id,
                exit_code=process.returncode,
                stderr=error_text,
            )

        output = stdout.decode("utf-8", errors="replace").rstrip()
        if max_tokens is not None:
            output = output[: max_tokens * CHARS_PER_TOKEN]

        tokens_in = estimate_tokens(prompt)
        tokens_out = estimate_tokens(output)
        cost = calculate_cost(model, tokens_in, tokens_out)

        logger.info(
            "Model %s: %d tokens in, %d tokens out, $%.6f, %.2fs",
            model_id,
            tokens_in,
            tokens_out,
            cost,
            time_seconds,
        )

        return ModelResult(
            model=model_id,
            output=output,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            cost=cost,
            time_seconds=time_seconds,
        )
