from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Type

from pydantic import BaseModel

from ..common.art19 import Art19Client

Handler = Callable[[Art19Client, Any], Any]


@dataclass(frozen=True)
class ToolSpec:
    name: str
    title: str
    description: str
    input_model: Type[BaseModel]
    handler: Handler
    read_only: bool = False
    destructive: bool = False
    idempotent: bool = False

    def describe(self) -> Dict[str, Any]:
        schema = self.input_model.model_json_schema()
        schema.pop("title", None)
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": schema,
            "annotations": {
                "title": self.title,
                "readOnlyHint": self.read_only,
                "destructiveHint": self.destructive,
                "idempotentHint": self.idempotent,
                "openWorldHint": True,
            },
        }


class ToolRegistry:
    """Name to translator map, filled by the ``tool`` decorator at import time."""

    def __init__(self) -> None:
        self._tools: Dict[str, ToolSpec] = {}

    def tool(
        self,
        name: str,
        input_model: Type[BaseModel],
        *,
        title: str,
        read_only: bool = False,
        destructive: bool = False,
        idempotent: Optional[bool] = None,
    ) -> Callable[[Handler], Handler]:
        def decorator(func: Handler) -> Handler:
            self.register(
                ToolSpec(
                    name=name,
                    title=title,
                    description=inspect.cleandoc(func.__doc__ or title),
                    input_model=input_model,
                    handler=func,
                    read_only=read_only,
                    destructive=destructive,
                    idempotent=read_only if idempotent is None else idempotent,
                )
            )
            return func

        return decorator

    def register(self, spec: ToolSpec) -> None:
        if spec.name in self._tools:
            raise ValueError(f"Tool '{spec.name}' is already registered")
        self._tools[spec.name] = spec

    def get(self, name: str) -> Optional[ToolSpec]:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools)

    def describe(self) -> List[Dict[str, Any]]:
        return [spec.describe() for spec in self._tools.values()]

    def validate(self, expected: Iterable[str]) -> None:
        """Fail unless every declared tool name has exactly one handler."""
        expected_names = list(expected)
        duplicates = sorted({name for name in expected_names if expected_names.count(name) > 1})
        missing = sorted(set(expected_names) - set(self._tools))
        unexpected = sorted(set(self._tools) - set(expected_names))
        problems = []
        if duplicates:
            problems.append(f"declared twice: {', '.join(duplicates)}")
        if missing:
            problems.append(f"no handler: {', '.join(missing)}")
        if unexpected:
            problems.append(f"undeclared: {', '.join(unexpected)}")
        if problems:
            raise ValueError("Tool registry mismatch (" + "; ".join(problems) + ")")

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)


registry = ToolRegistry()
tool = registry.tool
