"""SVG rendering backend.

Renders the workflow as a standalone SVG document. When ``output_path`` is
set the document is rewritten after every change, so any viewer that reloads
the file follows the workflow live.
"""

from __future__ import annotations

import logging
from html import escape
from pathlib import Path
from typing import List, Optional, Union

from ..layout import NODE_HEIGHT, NODE_WIDTH
from .inmemory import InMemoryScene, NodeElement

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    "connecting": "Connecting...",
    "connected": "Connected",
    "disconnected": "Disconnected",
    "error": "Connection Error",
}

_STYLE = """
.node rect { fill: #ffffff; stroke: #d1d5db; stroke-width: 2; }
.node.in-progress rect { fill: #fffbeb; stroke: #f59e0b; }
.node.completed rect { fill: #ecfdf5; stroke: #10b981; }
.node.hidden { opacity: 0; }
.node-title { font: 600 16px sans-serif; fill: #111827; }
.node-description { font: 12px sans-serif; fill: #6b7280; }
.node-status { font: 12px sans-serif; fill: #374151; }
.status-indicator { fill: #9ca3af; }
.node.in-progress .status-indicator { fill: #f59e0b; }
.node.completed .status-indicator { fill: #10b981; }
.connection-path { fill: none; stroke: #d1d5db; stroke-width: 2; }
.connection.active .connection-path { stroke: #f59e0b; stroke-dasharray: 6 4; }
.connection.completed .connection-path { stroke: #10b981; }
.status-dot { fill: #9ca3af; }
.status-dot.connected { fill: #10b981; }
.chrome-text { font: 13px sans-serif; fill: #374151; }
.progress-track { fill: #e5e7eb; }
.progress-fill { fill: #10b981; }
"""

_PROGRESS_WIDTH = 240


class SvgScene(InMemoryScene):
    """Scene that renders its elements to SVG markup."""

    def __init__(
        self,
        width: float = 1200,
        height: float = 800,
        output_path: Optional[Union[str, Path]] = None,
    ) -> None:
        self.output_path = Path(output_path) if output_path else None
        super().__init__(width=width, height=height)

    def render(self) -> str:
        """Return the full SVG document for the current scene."""
        parts: List[str] = [
            f'<svg xmlns="http://www.w3.org/2000/svg" '
            f'width="{self.width:g}" height="{self.height:g}" '
            f'viewBox="0 0 {self.width:g} {self.height:g}">',
            f"<style>{_STYLE}</style>",
            '<g id="workflow-canvas">',
        ]
        for connection in self.connections.values():
            parts.append(
                f'<g class="connection {escape(connection.state)}">'
                f'<path class="connection-path" d="{escape(connection.path)}"/></g>'
            )
        parts.append("</g>")
        for node in self.nodes.values():
            parts.append(self._render_node(node))
        parts.append(self._render_chrome())
        parts.append("</svg>")
        return "\n".join(parts)

    def _render_node(self, node: NodeElement) -> str:
        classes = f"node {escape(node.status)}"
        if not node.visible:
            classes += " hidden"
        return (
            f'<g class="{classes}" data-step-id="{escape(node.step_id)}" '
            f'transform="translate({node.position.x:g},{node.position.y:g})">'
            f'<rect width="{NODE_WIDTH}" height="{NODE_HEIGHT}" rx="12"/>'
            f'<text class="node-title" x="16" y="30">{escape(node.title)}</text>'
            f'<text class="node-description" x="16" y="54">'
            f"{escape(node.description)}</text>"
            f'<circle class="status-indicator" cx="22" cy="{NODE_HEIGHT - 22}" r="5"/>'
            f'<text class="node-status" x="34" y="{NODE_HEIGHT - 18}">'
            f"{escape(node.status)}</text>"
            "</g>"
        )

    def _render_chrome(self) -> str:
        status = self.connection_status or "connecting"
        dot_class = "status-dot connected" if status == "connected" else "status-dot"
        label = STATUS_LABELS.get(status, status)
        parts = [
            '<g id="chrome">',
            f'<circle id="connection-status" class="{dot_class}" cx="20" cy="20" r="6"/>',
            f'<text id="connection-text" class="chrome-text" x="32" y="25">'
            f"{escape(label)}</text>",
        ]
        if self.workflow_info_visible:
            fill = _PROGRESS_WIDTH * self.progress.percentage / 100
            parts.extend(
                [
                    '<g id="workflow-info" transform="translate(20,40)">',
                    f'<rect class="progress-track" width="{_PROGRESS_WIDTH}" height="8" rx="4"/>',
                    f'<rect id="progress-fill" class="progress-fill" width="{fill:g}" height="8" rx="4"/>',
                    f'<text id="progress-text" class="chrome-text" y="28">'
                    f"{escape(self.progress.text)}</text>",
                    "</g>",
                ]
            )
        parts.append("</g>")
        return "".join(parts)

    def write(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Write the document to ``path`` or the configured output path."""
        target = Path(path) if path else self.output_path
        if target is None:
            raise ValueError("No output path configured for SvgScene")
        target.write_text(self.render(), encoding="utf-8")
        return target

    def _changed(self) -> None:
        if self.output_path is None:
            return
        try:
            self.write()
        except OSError as e:
            logger.error(f"Failed to write SVG snapshot to {self.output_path}: {e}")
