"""Graph image rendering.

Converts Graphviz source to an image either with the local ``dot``
executable or through a Kroki server.
"""

import base64
import logging
import shlex
import zlib

import httpx

from navgen.errors import ExternalToolError
from navgen.services.process import CommandRunner

logger = logging.getLogger(__name__)


def encode_diagram(source: str) -> str:
    """Encode diagram source for a Kroki GET URL.

    Args:
        source: Diagram source code

    Returns:
        URL-safe deflate + base64 string
    """
    compressed = zlib.compress(source.encode("utf-8"), level=9)
    return base64.urlsafe_b64encode(compressed).decode("ascii")


class GraphRenderer:
    """Renders Graphviz source to image bytes.

    Failures are reported once and never retried.
    """

    def __init__(
        self,
        runner: CommandRunner,
        dot: str = "dot",
        kroki_url: str | None = None,
    ) -> None:
        self._runner = runner
        self._dot = shlex.split(dot)
        self._kroki_url = kroki_url.rstrip("/") if kroki_url else None

    async def render(self, source: str, output_format: str = "svg") -> bytes:
        """Render Graphviz source.

        Args:
            source: Graphviz ``digraph`` source
            output_format: Image format (svg, png, ...)

        Returns:
            Image data as bytes

        Raises:
            ExternalToolError: If the renderer rejects the source
            NotFoundError: If the dot executable is missing
        """
        if self._kroki_url:
            return await self._render_kroki(source, output_format)
        return await self._runner.run(
            *self._dot,
            f"-T{output_format}",
            input=source.encode("utf-8"),
        )

    async def _render_kroki(self, source: str, output_format: str) -> bytes:
        url = f"{self._kroki_url}/graphviz/{output_format}/{encode_diagram(source)}"
        logger.debug(f"Kroki URL: {url}")

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(url, timeout=30.0)
                if response.status_code >= 400:
                    raise ExternalToolError(
                        response.text,
                        command=("kroki", url),
                        returncode=response.status_code,
                    )
        except httpx.HTTPError as e:
            raise ExternalToolError(f"Kroki request failed: {e}", command=("kroki", url)) from e

        logger.debug(f"Rendered graph: {len(response.content)} bytes")
        return response.content
