"""Text rendering of behavior trees and their execution traces.

- print_trace / format_trace: what happened during one tick, as a tree
- print_tree / format_tree: the shape of a tree and each node's last state
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from typing import TextIO

from arbor.core import Node

from .telemetry import ExecutionTrace


class Colors:
    GREEN = "\033[32m"
    RED = "\033[31m"
    YELLOW = "\033[33m"
    MAGENTA = "\033[35m"
    DIM = "\033[2m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


# status -> (glyph, color); anything else renders as a dim dot
_GLYPHS = {
    "success": ("✓", Colors.GREEN),
    "failure": ("✗", Colors.RED),
    "running": ("⏸", Colors.YELLOW),
    "aborted": ("⏹", Colors.MAGENTA),
}
_UNKNOWN = ("·", Colors.DIM)

_BRANCH = "├── "
_LAST_BRANCH = "└── "


def _paint(text: str, color: str, use_color: bool) -> str:
    return f"{color}{text}{Colors.RESET}" if use_color else text


def _supports_color(file: TextIO) -> bool:
    """NO_COLOR wins over FORCE_COLOR; otherwise color only a terminal."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    isatty = getattr(file, "isatty", None)
    return bool(isatty and isatty())


def _resolve_output(file: TextIO | None, use_color: bool | None) -> tuple[TextIO, bool]:
    file = sys.stdout if file is None else file
    return file, _supports_color(file) if use_color is None else use_color


def _status_icon(status: str | None, use_color: bool = True) -> str:
    glyph, color = _GLYPHS.get(status or "", _UNKNOWN)
    return _paint(glyph, color, use_color)


def _format_duration(duration_ms: float) -> str:
    if duration_ms < 1:
        return "<1ms"
    if duration_ms >= 1000:
        return f"{duration_ms / 1000:.2f}s"
    return f"{duration_ms:.0f}ms"


def _node_label(name: str, node_type: str, status: str | None, use_color: bool) -> str:
    type_tag = _paint(f"[{node_type}]", Colors.DIM, use_color)
    return f"{name} {type_tag} {_status_icon(status, use_color)}"


def _trace_lines(trace: ExecutionTrace, use_color: bool, show_duration: bool) -> Iterator[str]:
    timing = f" ({_format_duration(trace.duration_ms)})" if show_duration else ""
    if use_color:
        title = _paint(f"Tick #{trace.tick_id}", Colors.BOLD, True)
        yield f"{title} [{_status_icon(trace.status, True)}]{timing}"
    else:
        yield f"Tick #{trace.tick_id} [{trace.status}]{timing}"

    executions = trace.executions
    if not executions:
        yield "  (no executions)"
        return

    for index, execution in enumerate(executions):
        depth = execution.depth
        # last sibling when the next node at or above this depth is shallower
        next_depth = next(
            (e.depth for e in executions[index + 1 :] if e.depth <= depth), None
        )
        branch = _LAST_BRANCH if next_depth is None or next_depth < depth else _BRANCH
        line = "    " * depth + branch + _node_label(
            execution.node_id, execution.node_type, execution.status, use_color
        )
        if show_duration and execution.duration_ms > 0:
            line += f" ({_format_duration(execution.duration_ms)})"
        yield line


def print_trace(
    trace: ExecutionTrace,
    file: TextIO | None = None,
    use_color: bool | None = None,
    show_duration: bool = True,
) -> None:
    """Write one tick's trace as an indented tree.

    Args:
        trace: Trace to render, usually TraceCollector.get_trace().
        file: Where to write; sys.stdout when omitted.
        use_color: Force ANSI colors on or off. When None, colors are used
            only for terminals and honor the NO_COLOR / FORCE_COLOR
            environment variables.
        show_duration: Append timings to the header and to every node that
            took measurable time.

    A guard half way through its patrol renders as:

        Tick #3 [running] (<1ms)
        └── guard [Selector] ⏸
            ├── flee [Conditional] ✗
            └── patrol [Sequence] ⏸
    """
    file, use_color = _resolve_output(file, use_color)
    for line in _trace_lines(trace, use_color, show_duration):
        print(line, file=file)


def format_trace(
    trace: ExecutionTrace,
    use_color: bool = False,
    show_duration: bool = True,
) -> str:
    """Render a trace like print_trace, returning the text."""
    return "".join(f"{line}\n" for line in _trace_lines(trace, use_color, show_duration))


def _tree_lines(root: Node, use_color: bool) -> Iterator[str]:
    def walk(node: Node, indent: str, branch: str, child_indent: str) -> Iterator[str]:
        state = node.state.value if node.state is not None else None
        yield indent + branch + _node_label(node.name, node.node_type, state, use_color)
        children = node.get_children()
        for index, child in enumerate(children):
            last = index == len(children) - 1
            yield from walk(
                child,
                child_indent,
                _LAST_BRANCH if last else _BRANCH,
                child_indent + ("    " if last else "│   "),
            )

    yield from walk(root, "", "", "")


def print_tree(
    root: Node,
    file: TextIO | None = None,
    use_color: bool | None = None,
) -> None:
    """Write the structure of the tree under root with each node's last state.

    Nodes that have not run since their last reset show a dot.
    """
    file, use_color = _resolve_output(file, use_color)
    for line in _tree_lines(root, use_color):
        print(line, file=file)


def format_tree(root: Node, use_color: bool = False) -> str:
    return "".join(f"{line}\n" for line in _tree_lines(root, use_color))
