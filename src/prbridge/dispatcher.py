"""Tool dispatch and result-to-envelope mapping.

Handler failures never become transport-level errors. Every call yields a
``ToolResult`` that renders to the same ``content`` shape; a failed call is
recognisable only by its ``"Error: "`` text.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .errors import BridgeError, UnknownToolError
from .tools import ToolContext, ToolSpec, build_catalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolResult:
    """Outcome of one tool call: a success payload or an error."""

    payload: Optional[Dict[str, Any]] = None
    error: Optional[Exception] = None

    @classmethod
    def success(cls, payload: Dict[str, Any]) -> "ToolResult":
        return cls(payload=payload)

    @classmethod
    def failure(cls, error: Exception) -> "ToolResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_text(self) -> str:
        if self.error is not None:
            return f"Error: {self.error}"
        return json.dumps(self.payload, indent=2)

    def to_content(self) -> List[Dict[str, str]]:
        return [{"type": "text", "text": self.to_text()}]


class ToolDispatcher:
    """Routes named tool calls to handlers with an explicit ``ToolContext``."""

    def __init__(self, context: ToolContext, catalog: Optional[List[ToolSpec]] = None) -> None:
        self._context = context
        self._tools: Dict[str, ToolSpec] = {tool.name: tool for tool in (catalog or build_catalog())}

    @property
    def context(self) -> ToolContext:
        return self._context

    def list_tools(self) -> List[Dict[str, Any]]:
        return [tool.describe() for tool in self._tools.values()]

    def call(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolResult:
        """Invoke tool ``name`` and capture its outcome.

        ``arguments`` that are not a mapping are treated as empty.
        """
        args: Mapping[str, Any] = arguments if isinstance(arguments, Mapping) else {}
        logger.info("Tool call received", extra={"tool": name})

        try:
            tool = self._tools.get(name)
            if tool is None:
                raise UnknownToolError(name)
            payload = tool.handler(self._context, args)
        except UnknownToolError as exc:
            logger.warning("Unknown tool requested", extra={"tool": name})
            return ToolResult.failure(exc)
        except BridgeError as exc:
            logger.warning("Tool call failed", extra={"tool": name, "error": str(exc)})
            return ToolResult.failure(exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Tool call failed unexpectedly", extra={"tool": name})
            return ToolResult.failure(exc)

        return ToolResult.success(payload)
