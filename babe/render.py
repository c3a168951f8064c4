from __future__ import annotations

from typing import Callable, Mapping

from pybars import Compiler

from .templates import TemplateLayout, TemplatePartial


class Renderer:
    """Compiles Handlebars templates once per build and renders them."""

    def __init__(self, helpers: Mapping[str, Callable], partials: Mapping[str, TemplatePartial]):
        self.compiler = Compiler()
        self.helpers = dict(helpers)
        self.partials = {name: self.compiler.compile(partial.contents) for name, partial in partials.items()}
        self._compiled: dict[tuple[str, str | None], Callable] = {}

    def compile(self, layout: TemplateLayout) -> Callable:
        key = (layout.name, layout.relative_path)
        template = self._compiled.get(key)
        if template is None:
            template = self.compiler.compile(layout.contents)
            self._compiled[key] = template
        return template

    def render(self, layout: TemplateLayout, data: Mapping[str, object]) -> str:
        template = self.compile(layout)
        return str(template(dict(data), helpers=self.helpers, partials=self.partials))
