"""
Math Solver Editor - Math Solver Client
Sends formulas to the external solving backend and parses its answer.
"""

import logging
from typing import Optional
import httpx
from pydantic import ValidationError

from config import get_solver_config
from services.solution import Solution

logger = logging.getLogger(__name__)

CONNECT_ERROR = "Unable to connect to math solver server. Please check your connection."
FORMAT_ERROR = "Invalid response format from math server"


class MathSolverError(Exception):
    """User-facing solver failure with optional details.

    kind is one of 'network', 'http' or 'format'.
    """

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        kind: str = 'http',
        status_code: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        self.kind = kind
        self.status_code = status_code

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class MathSolverClient:
    """Async client for the external solver endpoint."""

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        config = get_solver_config()
        self.url = url or config["url"]
        self.timeout = timeout if timeout is not None else config["timeout"]
        self._transport = transport

    async def solve(self, formula: str) -> Solution:
        """
        Solve a formula on the remote backend.

        Args:
            formula: LaTeX or plain-text expression

        Returns:
            Parsed Solution

        Raises:
            MathSolverError: On connection, HTTP or format failure
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.url,
                    headers={"Content-Type": "application/json"},
                    json={"formula": formula}
                )
        except httpx.RequestError as e:
            logger.error(f"Math solver unreachable at {self.url}: {e}")
            raise MathSolverError(CONNECT_ERROR, details=str(e) or type(e).__name__, kind='network') from e

        if not response.is_success:
            raise self._http_error(response)

        return self._parse_solution(response)

    def _http_error(self, response: httpx.Response) -> MathSolverError:
        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict):
            message = data.get("error") or f"HTTP {response.status_code}: {response.reason_phrase}"
            details = data.get("details")
        else:
            message = "Failed to parse error response"
            details = response.text or None

        logger.warning(f"Math solver returned {response.status_code}: {message}")
        return MathSolverError(
            message,
            details=str(details) if details is not None else None,
            kind='http',
            status_code=response.status_code
        )

    def _parse_solution(self, response: httpx.Response) -> Solution:
        try:
            data = response.json()
        except ValueError as e:
            logger.warning("Math solver sent a non-JSON response")
            raise MathSolverError(
                FORMAT_ERROR,
                details=f"Expected JSON but received: {response.text[:500]}",
                kind='format'
            ) from e

        try:
            return Solution.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Math solver response failed validation: {e.error_count()} errors")
            raise MathSolverError(FORMAT_ERROR, details=str(e), kind='format') from e


# Singleton instance
_solver_client = None

def get_solver_client() -> MathSolverClient:
    """Get the singleton math solver client instance."""
    global _solver_client
    if _solver_client is None:
        _solver_client = MathSolverClient()
    return _solver_client
