# hublab/app/services/generators/react.py
"""Web/desktop backend: capsule trees -> React function components + Tailwind."""
from __future__ import annotations

import json
from typing import List, Optional

from hublab.app.models.project import CapsuleInstance, GeneratedFile, Project, Theme
from hublab.app.services.generators.base import (
    FALLBACK_COLORS,
    CodeGenerator,
    FragmentRegistry,
    TreeLimits,
    fmt_num,
    indent,
    percent,
    prop_bool,
    prop_number,
    prop_text,
    theme_color,
    type_name,
)

JSX = "  "

_BUTTON_CLASSES = {
    "outline": "px-4 py-2 border border-primary text-primary rounded-lg hover:bg-gray-50",
    "ghost": "px-4 py-2 text-primary rounded-lg hover:bg-gray-100",
    "secondary": "px-4 py-2 bg-secondary text-white rounded-lg hover:opacity-90",
}
_DEFAULT_BUTTON = "px-4 py-2 bg-primary text-white rounded-lg hover:opacity-90"

_DEFAULT_CHART = [40, 65, 30, 80, 55]


def _jsx(text: str, levels: int = 1) -> str:
    return indent(text, levels, JSX)


def _container(node: CapsuleInstance, theme: Theme, children: str) -> str:
    return f'<div className="space-y-4">\n{_jsx(children)}\n</div>'


def _placeholder(capsule_id: str) -> str:
    return f"<div>{{/* TODO: {capsule_id} */}}</div>"


REGISTRY = FragmentRegistry(
    separator="\n",
    container=_container,
    placeholder=_placeholder,
    empty="<div />",
)


@REGISTRY.register("button")
def _button(node: CapsuleInstance, theme: Theme, children: str) -> str:
    p = node.props
    classes = _BUTTON_CLASSES.get(prop_text(p, "variant"), _DEFAULT_BUTTON)
    return (
        "<button\n"
        f"{JSX}onClick={{() => {{ /* {prop_text(p, 'onPress', default='action')} */ }}}}\n"
        f'{JSX}className="{classes}"\n'
        ">\n"
        f"{JSX}{prop_text(p, 'text', default='Button')}\n"
        "</button>"
    )


@REGISTRY.register("text")
def _text(node: CapsuleInstance, theme: Theme, children: str) -> str:
    p = node.props
    content = prop_text(p, "content", "text")
    variant = prop_text(p, "variant")
    if variant == "heading":
        return f'<h2 className="text-xl font-semibold">{content}</h2>'
    if variant == "subheading":
        return f'<h3 className="text-lg font-medium">{content}</h3>'
    if variant == "caption":
        return f'<p className="text-sm text-gray-500">{content}</p>'
    return f"<p>{content}</p>"


@REGISTRY.register("input")
def _input(node: CapsuleInstance, theme: Theme, children: str) -> str:
    p = node.props
    field = (
        "<input\n"
        f'{JSX}type="{prop_text(p, "type", default="text")}"\n'
        f'{JSX}placeholder="{prop_text(p, "placeholder")}"\n'
        f'{JSX}className="w-full px-3 py-2 border rounded-lg focus:ring-2 focus:ring-primary"\n'
        "/>"
    )
    label = prop_text(p, "label")
    if not label:
        return field
    return (
        '<label className="block space-y-1">\n'
        f'{JSX}<span className="text-sm font-medium">{label}</span>\n'
        f"{_jsx(field)}\n"
        "</label>"
    )


@REGISTRY.register("card")
def _card(node: CapsuleInstance, theme: Theme, children: str) -> str:
    title = prop_text(node.props, "title")
    body: List[str] = []
    if title:
        body.append(f'<h3 className="text-lg font-semibold mb-2">{title}</h3>')
    if children:
        body.append(children)
    inner = _jsx("\n".join(body)) + "\n" if body else ""
    return f'<div className="bg-white rounded-xl shadow-md p-4">\n{inner}</div>'


@REGISTRY.register("list")
def _list(node: CapsuleInstance, theme: Theme, children: str) -> str:
    items = node.props.get("items")
    if isinstance(items, list) and items and all(isinstance(i, str) for i in items):
        rows = (
            f"{{{json.dumps(items, ensure_ascii=False)}.map(item => (\n"
            f'{JSX}<li key={{item}} className="py-3">{{item}}</li>\n'
            "))}"
        )
    else:
        rows = (
            "{[1, 2, 3, 4, 5].map(i => (\n"
            f'{JSX}<li key={{i}} className="py-3">Item {{i}}</li>\n'
            "))}"
        )
    return f'<ul className="divide-y">\n{_jsx(rows)}\n</ul>'


@REGISTRY.register("progress")
def _progress(node: CapsuleInstance, theme: Theme, children: str) -> str:
    width = fmt_num(percent(node.props))
    return (
        '<div className="w-full bg-gray-200 rounded-full h-2">\n'
        f"{JSX}<div className=\"bg-primary h-2 rounded-full\" style={{{{ width: '{width}%' }}}} />\n"
        "</div>"
    )


@REGISTRY.register("switch")
def _switch(node: CapsuleInstance, theme: Theme, children: str) -> str:
    p = node.props
    checked = " defaultChecked" if prop_bool(p, "checked") else ""
    return (
        '<label className="flex items-center gap-2">\n'
        f'{JSX}<input type="checkbox" className="toggle"{checked} />\n'
        f"{JSX}<span>{prop_text(p, 'label')}</span>\n"
        "</label>"
    )


@REGISTRY.register("slider")
def _slider(node: CapsuleInstance, theme: Theme, children: str) -> str:
    p = node.props
    return (
        "<input\n"
        f'{JSX}type="range"\n'
        f"{JSX}min={{{fmt_num(prop_number(p, 'min', 0))}}}\n"
        f"{JSX}max={{{fmt_num(prop_number(p, 'max', 100))}}}\n"
        f"{JSX}defaultValue={{{fmt_num(percent(p))}}}\n"
        f'{JSX}className="w-full accent-primary"\n'
        "/>"
    )


@REGISTRY.register("searchbar")
def _searchbar(node: CapsuleInstance, theme: Theme, children: str) -> str:
    placeholder = prop_text(node.props, "placeholder", default="Search...")
    return (
        "<input\n"
        f'{JSX}type="search"\n'
        f'{JSX}placeholder="{placeholder}"\n'
        f'{JSX}className="w-full px-3 py-2 border rounded-full focus:ring-2 focus:ring-primary"\n'
        "/>"
    )


@REGISTRY.register("divider")
def _divider(node: CapsuleInstance, theme: Theme, children: str) -> str:
    return '<hr className="my-4 border-gray-200" />'


@REGISTRY.register("image")
def _image(node: CapsuleInstance, theme: Theme, children: str) -> str:
    p = node.props
    return f'<img src="{prop_text(p, "src", "url")}" alt="{prop_text(p, "alt")}" className="w-full rounded-lg" />'


@REGISTRY.register("chart")
def _chart(node: CapsuleInstance, theme: Theme, children: str) -> str:
    data = node.props.get("data")
    if not (isinstance(data, list) and data and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in data)):
        data = _DEFAULT_CHART
    top = max(data) or 1
    heights = ", ".join(fmt_num(round(v / top * 100, 1)) if v > 0 else "0" for v in data)
    color = theme_color(theme, "primary")
    return (
        '<div className="flex items-end gap-2 h-48">\n'
        f"{JSX}{{[{heights}].map((h, i) => (\n"
        f"{JSX * 2}<div key={{i}} className=\"flex-1 rounded-t\" style={{{{ height: `${{h}}%`, backgroundColor: '{color}' }}}} />\n"
        f"{JSX}))}}\n"
        "</div>"
    )


class ReactGenerator(CodeGenerator):
    """``App.tsx`` + ``pages/<id>.tsx`` per screen + ``tailwind.config.js``."""

    platform = "web"
    language = "typescript"
    registry = REGISTRY

    def generate(self, project: Project, limits: Optional[TreeLimits] = None) -> List[GeneratedFile]:
        limits = limits or TreeLimits()
        files = [self._app_file(project)]
        for screen in project.screens:
            page_name = type_name(screen.id, "Page")
            fragment = self.render_root(screen.root, project.theme, limits)
            files.append(self.file(f"pages/{screen.id}.tsx", self._page_file(page_name, fragment, screen.title)))
        files.append(self.file("tailwind.config.js", self._tailwind_config(project.theme), language="javascript"))
        return files

    def _app_file(self, project: Project) -> GeneratedFile:
        imports = "\n".join(
            f"import {type_name(s.id, 'Page')} from './pages/{s.id}'" for s in project.screens
        )
        if project.uses_tabs:
            tabs = "\n".join(
                f"{{ id: '{s.id}', label: '{s.title}', Page: {type_name(s.id, 'Page')} }},"
                for s in project.screens
            )
            initial = project.initial_screen()
            content = f"""import React, {{ useState }} from 'react'
{imports}

const tabs = [
{_jsx(tabs)}
]

export default function App() {{
  const [active, setActive] = useState('{initial.id if initial else ''}')
  const current = tabs.find(t => t.id === active) ?? tabs[0]
  return (
    <div className="min-h-screen bg-gray-50 pb-16">
      <current.Page />
      <nav className="fixed bottom-0 inset-x-0 flex border-t bg-white">
        {{tabs.map(t => (
          <button
            key={{t.id}}
            onClick={{() => setActive(t.id)}}
            className={{`flex-1 py-3 ${{t.id === current.id ? 'text-primary font-semibold' : 'text-gray-500'}}`}}
          >
            {{t.label}}
          </button>
        ))}}
      </nav>
    </div>
  )
}}
"""
        else:
            initial = project.initial_screen()
            content = f"""import React from 'react'
{imports}

export default function App() {{
  return (
    <div className="min-h-screen bg-gray-50">
      <{type_name(initial.id if initial else None, 'Page')} />
    </div>
  )
}}
"""
        return self.file("App.tsx", content)

    @staticmethod
    def _page_file(page_name: str, fragment: str, title: str) -> str:
        return f"""import React from 'react'

export default function {page_name}() {{
  return (
    <div className="container mx-auto p-4">
      <h1 className="text-2xl font-bold mb-4">{title}</h1>
{_jsx(fragment, 3)}
    </div>
  )
}}
"""

    @staticmethod
    def _tailwind_config(theme: Theme) -> str:
        colors = {token: theme_color(theme, token) for token in FALLBACK_COLORS}
        return f"""module.exports = {{
  content: ['./src/**/*.{{js,ts,jsx,tsx}}'],
  theme: {{
    extend: {{
      colors: {{
        primary: '{colors['primary']}',
        secondary: '{colors['secondary']}',
        background: '{colors['background']}',
        surface: '{colors['surface']}',
        foreground: {{
          DEFAULT: '{colors['text.primary']}',
          muted: '{colors['text.secondary']}',
        }},
      }}
    }}
  }},
  plugins: []
}}
"""
