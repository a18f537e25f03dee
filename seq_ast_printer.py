#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import is_dataclass, fields
from typing import List, Any

from seq_ast import Span, Node, MathExpr


def _format_span(span: Span | None) -> str:
    if span is None:
        return ""
    return f" @{span.start}-{span.end}"


def format_postfix(expr: MathExpr) -> str:
    return " ".join(tok.text for tok in expr.postfix)


def format_node(node: Any, indent: int = 0) -> List[str]:
    """
    Generic, reflection-based AST pretty-printer.

    - Shows the node class name.
    - Prints simple scalar fields inline (excluding `span`).
    - Prints a MathExpr's postfix tokens inline, space-separated.
    - Recursively prints child Node fields on new indented lines.
    - Appends a concise span annotation like `@3-7` when available.
    """
    ind = "  " * indent

    if isinstance(node, list):
        lines: List[str] = []
        for elem in node:
            lines.extend(format_node(elem, indent))
        return lines

    if isinstance(node, MathExpr):
        return [ind + f"MathExpr[{format_postfix(node)}]" + _format_span(node.span)]

    if isinstance(node, Node) and is_dataclass(node):
        simple_parts = []
        child_fields = []
        for f in fields(node):
            if f.name == "span":
                continue
            value = getattr(node, f.name)
            if isinstance(value, Node):
                child_fields.append((f.name, value))
            elif value is not None:
                simple_parts.append((f.name, value))

        # Header: ClassName(field1=..., field2=...) @start-end
        header = node.__class__.__name__
        if simple_parts:
            inner = ", ".join(f"{name}={value!r}" for name, value in simple_parts)
            header = f"{header}({inner})"
        header += _format_span(node.span)

        lines = [ind + header]
        for name, value in child_fields:
            lines.append(ind + "  " + f"{name}:")
            lines.extend(format_node(value, indent + 2))
        return lines

    return [ind + repr(node)]


def format_nodes(nodes: List[Node]) -> str:
    return "\n".join(format_node(nodes))
