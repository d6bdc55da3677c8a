from __future__ import annotations

from typing import Any, Dict, List

from . import ast


def format_node(node: ast.Node, indent: str = "  ") -> str:
    """Render `node` as an indented listing, one node per line."""
    lines: List[str] = []
    _format_into(node, 0, indent, lines)
    return "\n".join(lines)


def format_program(program: ast.Program) -> str:
    return format_node(program)


def _format_into(node: ast.Node, level: int, indent: str, lines: List[str]) -> None:
    pad = indent * level
    if isinstance(node, ast.Program):
        lines.append(f"{pad}program ({node.span})")
        for assignment in node.assignments:
            _format_into(assignment, level + 1, indent, lines)
    elif isinstance(node, ast.Assignment):
        lines.append(f"{pad}assignment {node.identifier.name} ({node.span})")
        _format_into(node.expression, level + 1, indent, lines)
    elif isinstance(node, ast.Identifier):
        lines.append(f"{pad}identifier {node.name} ({node.span})")
    elif isinstance(node, ast.Number):
        lines.append(f"{pad}number {node.value} ({node.span})")
    elif isinstance(node, ast.FunctionCall):
        lines.append(f"{pad}call {node.function_name.name} ({node.span})")
        for arg in node.arguments:
            _format_into(arg, level + 1, indent, lines)
    elif isinstance(node, ast.FunctionDefinition):
        params = ", ".join(param.name for param in node.parameters)
        lines.append(f"{pad}function |{params}| ({node.span})")
        _format_into(node.body, level + 1, indent, lines)
    elif isinstance(node, ast.Block):
        lines.append(f"{pad}block ({node.span})")
        for assignment in node.assignments:
            _format_into(assignment, level + 1, indent, lines)
        _format_into(node.expression, level + 1, indent, lines)
    else:
        raise TypeError(f"Unexpected node type: {type(node).__name__}")


def node_to_dict(node: ast.Node) -> Dict[str, Any]:
    """JSON-friendly form of an AST node (kind, fields, span offsets)."""
    if isinstance(node, ast.Program):
        return {
            "kind": "Program",
            "assignments": [node_to_dict(a) for a in node.assignments],
            "span": node.span.to_dict(),
        }
    if isinstance(node, ast.Assignment):
        return {
            "kind": "Assignment",
            "identifier": node_to_dict(node.identifier),
            "expression": node_to_dict(node.expression),
            "span": node.span.to_dict(),
        }
    if isinstance(node, ast.Identifier):
        return {"kind": "Identifier", "name": node.name, "span": node.span.to_dict()}
    if isinstance(node, ast.Number):
        return {"kind": "Number", "value": node.value, "span": node.span.to_dict()}
    if isinstance(node, ast.FunctionCall):
        return {
            "kind": "FunctionCall",
            "function_name": node_to_dict(node.function_name),
            "arguments": [node_to_dict(a) for a in node.arguments],
            "span": node.span.to_dict(),
        }
    if isinstance(node, ast.FunctionDefinition):
        return {
            "kind": "FunctionDefinition",
            "parameters": [node_to_dict(p) for p in node.parameters],
            "body": node_to_dict(node.body),
            "span": node.span.to_dict(),
        }
    if isinstance(node, ast.Block):
        return {
            "kind": "Block",
            "assignments": [node_to_dict(a) for a in node.assignments],
            "expression": node_to_dict(node.expression),
            "span": node.span.to_dict(),
        }
    raise TypeError(f"Unexpected node type: {type(node).__name__}")


__all__ = ["format_node", "format_program", "node_to_dict"]
