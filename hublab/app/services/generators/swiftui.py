# hublab/app/services/generators/swiftui.py
"""iOS backend: capsule trees -> SwiftUI views."""
from __future__ import annotations

from typing import List, Optional

from hublab.app.models.project import CapsuleInstance, GeneratedFile, Project, Theme
from hublab.app.services.generators.base import (
    INDENT,
    CodeGenerator,
    FragmentRegistry,
    TreeLimits,
    app_identifier,
    fmt_fraction,
    fmt_num,
    fraction,
    indent,
    prop_bool,
    prop_number,
    prop_text,
    type_name,
)

_TEXT_FONTS = {
    "heading": ".title",
    "subheading": ".headline",
    "caption": ".caption",
}


def _container(node: CapsuleInstance, theme: Theme, children: str) -> str:
    return f"VStack(spacing: 16) {{\n{indent(children)}\n}}"


def _placeholder(capsule_id: str) -> str:
    return f'// TODO: {capsule_id}\nText("{capsule_id}")'


REGISTRY = FragmentRegistry(
    separator="\n",
    container=_container,
    placeholder=_placeholder,
    empty="EmptyView()",
)


@REGISTRY.register("button")
def _button(node: CapsuleInstance, theme: Theme, children: str) -> str:
    p = node.props
    action = prop_text(p, "onPress", default="action")
    label = prop_text(p, "text", default="Button")
    style = ".bordered" if prop_text(p, "variant") in {"secondary", "outline"} else ".borderedProminent"
    return (
        f"Button(action: {{ /* {action} */ }}) {{\n"
        f'{INDENT}Text("{label}")\n'
        f"}}\n"
        f".buttonStyle({style})"
    )


@REGISTRY.register("text")
def _text(node: CapsuleInstance, theme: Theme, children: str) -> str:
    p = node.props
    out = f'Text("{prop_text(p, "content", "text")}")'
    font = _TEXT_FONTS.get(prop_text(p, "variant"))
    return f"{out}\n{INDENT}.font({font})" if font else out


@REGISTRY.register("input")
def _input(node: CapsuleInstance, theme: Theme, children: str) -> str:
    p = node.props
    field = "SecureField" if prop_text(p, "type") == "password" else "TextField"
    return (
        f'{field}("{prop_text(p, "placeholder")}", text: .constant(""))\n'
        f"{INDENT}.textFieldStyle(.roundedBorder)"
    )


@REGISTRY.register("card")
def _card(node: CapsuleInstance, theme: Theme, children: str) -> str:
    title = prop_text(node.props, "title")
    body: List[str] = []
    if title:
        body.append(f'Text("{title}").font(.headline)')
    if children:
        body.append(children)
    inner = indent("\n".join(body)) + "\n" if body else ""
    return (
        "VStack(alignment: .leading, spacing: 16) {\n"
        f"{inner}"
        "}\n"
        ".padding()\n"
        ".background(Color(.systemBackground))\n"
        ".cornerRadius(12)\n"
        ".shadow(radius: 4)"
    )


@REGISTRY.register("list")
def _list(node: CapsuleInstance, theme: Theme, children: str) -> str:
    items = node.props.get("items")
    if children:
        rows = children
    elif isinstance(items, list) and items and all(isinstance(i, str) for i in items):
        literal = ", ".join(f'"{i}"' for i in items)
        rows = f"ForEach([{literal}], id: \\.self) {{ item in\n{INDENT}Text(item)\n}}"
    else:
        rows = f'ForEach(0..<5, id: \\.self) {{ index in\n{INDENT}Text("Item \\(index + 1)")\n}}'
    return f"List {{\n{indent(rows)}\n}}\n.listStyle(.plain)"


@REGISTRY.register("progress")
def _progress(node: CapsuleInstance, theme: Theme, children: str) -> str:
    style = ".circular" if prop_text(node.props, "variant") == "circular" else ".linear"
    return (
        f"ProgressView(value: {fmt_fraction(fraction(node.props))})\n"
        f"{INDENT}.progressViewStyle({style})"
    )


@REGISTRY.register("switch")
def _switch(node: CapsuleInstance, theme: Theme, children: str) -> str:
    p = node.props
    checked = "true" if prop_bool(p, "checked") else "false"
    return f'Toggle("{prop_text(p, "label")}", isOn: .constant({checked}))'


@REGISTRY.register("chart")
def _chart(node: CapsuleInstance, theme: Theme, children: str) -> str:
    return (
        "// Chart - requires iOS 16+ and Charts framework\n"
        "Chart {\n"
        f"{INDENT}// Add chart data\n"
        "}\n"
        ".frame(height: 200)"
    )


@REGISTRY.register("searchbar")
def _searchbar(node: CapsuleInstance, theme: Theme, children: str) -> str:
    placeholder = prop_text(node.props, "placeholder", default="Search...")
    return (
        f'TextField("{placeholder}", text: .constant(""))\n'
        f"{INDENT}.textFieldStyle(.roundedBorder)\n"
        f"{INDENT}.overlay(\n"
        f"{INDENT * 2}HStack {{\n"
        f'{INDENT * 3}Image(systemName: "magnifyingglass")\n'
        f"{INDENT * 4}.foregroundColor(.gray)\n"
        f"{INDENT * 4}.padding(.leading, 8)\n"
        f"{INDENT * 3}Spacer()\n"
        f"{INDENT * 2}}}\n"
        f"{INDENT})"
    )


@REGISTRY.register("slider")
def _slider(node: CapsuleInstance, theme: Theme, children: str) -> str:
    p = node.props
    lo = fmt_num(prop_number(p, "min", 0))
    hi = fmt_num(prop_number(p, "max", 100))
    return f"Slider(value: .constant({fmt_fraction(fraction(p))}), in: {lo}...{hi})"


@REGISTRY.register("divider")
def _divider(node: CapsuleInstance, theme: Theme, children: str) -> str:
    return "Divider()"


@REGISTRY.register("image")
def _image(node: CapsuleInstance, theme: Theme, children: str) -> str:
    src = prop_text(node.props, "src", "url")
    return (
        f'AsyncImage(url: URL(string: "{src}")) {{ image in\n'
        f"{INDENT}image.resizable().scaledToFit()\n"
        "} placeholder: {\n"
        f"{INDENT}ProgressView()\n"
        "}"
    )


class SwiftUIGenerator(CodeGenerator):
    """App entry + ContentView + one ``<Screen>View.swift`` per screen."""

    platform = "ios"
    language = "swift"
    registry = REGISTRY

    def generate(self, project: Project, limits: Optional[TreeLimits] = None) -> List[GeneratedFile]:
        limits = limits or TreeLimits()
        files = [self._app_file(project), self._content_view(project)]
        for screen in project.screens:
            view_name = type_name(screen.id, "View")
            fragment = self.render_root(screen.root, project.theme, limits)
            files.append(self.file(f"{view_name}.swift", self._screen_view(view_name, fragment, screen.title)))
        return files

    def _app_file(self, project: Project) -> GeneratedFile:
        app_name = app_identifier(project.name)
        content = f"""import SwiftUI

@main
struct {app_name}App: App {{
    var body: some Scene {{
        WindowGroup {{
            ContentView()
        }}
    }}
}}
"""
        return self.file(f"{app_name}App.swift", content)

    def _content_view(self, project: Project) -> GeneratedFile:
        if project.uses_tabs:
            tabs = "\n".join(
                f"{type_name(s.id, 'View')}()\n"
                f"{INDENT}.tabItem {{\n"
                f'{INDENT * 2}Label("{s.title}", systemImage: "star")\n'
                f"{INDENT}}}"
                for s in project.screens
            )
            body = f"TabView {{\n{indent(tabs)}\n}}"
        else:
            initial = project.initial_screen()
            body = f"NavigationStack {{\n{INDENT}{type_name(initial.id if initial else None, 'View')}()\n}}"

        content = f"""import SwiftUI

struct ContentView: View {{
    var body: some View {{
{indent(body, 2)}
    }}
}}

#Preview {{
    ContentView()
}}
"""
        return self.file("ContentView.swift", content)

    @staticmethod
    def _screen_view(view_name: str, fragment: str, title: str) -> str:
        return f"""import SwiftUI

struct {view_name}: View {{
    var body: some View {{
{indent(fragment, 2)}
            .navigationTitle("{title}")
    }}
}}

#Preview {{
    NavigationStack {{
        {view_name}()
    }}
}}
"""
