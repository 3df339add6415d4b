# hublab/app/services/generators/compose.py
"""Android backend: capsule trees -> Jetpack Compose (Material 3)."""
from __future__ import annotations

import re
from typing import List, Optional

from hublab.app.core.config import settings
from hublab.app.models.project import CapsuleInstance, GeneratedFile, Project, Theme
from hublab.app.services.generators.base import (
    INDENT,
    CodeGenerator,
    FragmentRegistry,
    TreeLimits,
    app_identifier,
    capitalize,
    fmt_fraction,
    fmt_num,
    fraction,
    indent,
    prop_bool,
    prop_number,
    prop_text,
    type_name,
)

SIBLING_SPACER = "Spacer(Modifier.height(8.dp))"

_TEXT_STYLES = {
    "heading": "headlineMedium",
    "subheading": "titleMedium",
    "caption": "labelSmall",
}

_SCREEN_IMPORTS = (
    "androidx.compose.foundation.layout.*",
    "androidx.compose.foundation.lazy.LazyColumn",
    "androidx.compose.foundation.lazy.items",
    "androidx.compose.material.icons.Icons",
    "androidx.compose.material.icons.filled.Search",
    "androidx.compose.material3.*",
    "androidx.compose.runtime.*",
    "androidx.compose.ui.Alignment",
    "androidx.compose.ui.Modifier",
    "androidx.compose.ui.unit.dp",
)


def _state_name(node: CapsuleInstance, suffix: str) -> str:
    """Per-capsule state variable: 'email-input' + 'text' -> 'emailInputText'."""
    words = [w for w in re.split(r"[^A-Za-z0-9]+", node.id) if w]
    if not words or words[0][0].isdigit():
        return suffix
    head = words[0][:1].lower() + words[0][1:]
    return head + "".join(capitalize(w) for w in words[1:]) + capitalize(suffix)


def _container(node: CapsuleInstance, theme: Theme, children: str) -> str:
    return f"Column {{\n{indent(children)}\n}}"


def _placeholder(capsule_id: str) -> str:
    return f'// TODO: {capsule_id}\nText("{capsule_id}")'


REGISTRY = FragmentRegistry(
    separator=f"\n{SIBLING_SPACER}\n",
    container=_container,
    placeholder=_placeholder,
    empty='Text("Empty")',
)


@REGISTRY.register("button")
def _button(node: CapsuleInstance, theme: Theme, children: str) -> str:
    p = node.props
    variant = prop_text(p, "variant")
    composable = {"outline": "OutlinedButton", "ghost": "TextButton", "secondary": "FilledTonalButton"}.get(
        variant, "Button"
    )
    return (
        f"{composable}(onClick = {{ /* {prop_text(p, 'onPress', default='action')} */ }}) {{\n"
        f'{INDENT}Text("{prop_text(p, "text", default="Button")}")\n'
        "}"
    )


@REGISTRY.register("text")
def _text(node: CapsuleInstance, theme: Theme, children: str) -> str:
    p = node.props
    content = prop_text(p, "content", "text")
    style = _TEXT_STYLES.get(prop_text(p, "variant"))
    if style:
        return f'Text("{content}", style = MaterialTheme.typography.{style})'
    return f'Text("{content}")'


@REGISTRY.register("input")
def _input(node: CapsuleInstance, theme: Theme, children: str) -> str:
    p = node.props
    var = _state_name(node, "text")
    return (
        f'var {var} by remember {{ mutableStateOf("") }}\n'
        "OutlinedTextField(\n"
        f"{INDENT}value = {var},\n"
        f"{INDENT}onValueChange = {{ {var} = it }},\n"
        f'{INDENT}label = {{ Text("{prop_text(p, "label")}") }},\n'
        f'{INDENT}placeholder = {{ Text("{prop_text(p, "placeholder")}") }},\n'
        f"{INDENT}modifier = Modifier.fillMaxWidth()\n"
        ")"
    )


@REGISTRY.register("card")
def _card(node: CapsuleInstance, theme: Theme, children: str) -> str:
    title = prop_text(node.props, "title")
    body: List[str] = []
    if title:
        body.append(f'Text("{title}", style = MaterialTheme.typography.titleMedium)')
    if children:
        body.append(children)
    inner = indent("\n".join(body), 2) + "\n" if body else ""
    return (
        "Card(modifier = Modifier.fillMaxWidth()) {\n"
        f"{INDENT}Column(modifier = Modifier.padding(16.dp)) {{\n"
        f"{inner}"
        f"{INDENT}}}\n"
        "}"
    )


@REGISTRY.register("list")
def _list(node: CapsuleInstance, theme: Theme, children: str) -> str:
    items = node.props.get("items")
    if isinstance(items, list) and items and all(isinstance(i, str) for i in items):
        literal = ", ".join(f'"{i}"' for i in items)
        rows = f"items(listOf({literal})) {{ item ->\n{INDENT}ListItem(headlineContent = {{ Text(item) }})\n}}"
    else:
        rows = f'items(5) {{ index ->\n{INDENT}ListItem(headlineContent = {{ Text("Item ${{index + 1}}") }})\n}}'
    return f"LazyColumn {{\n{indent(rows)}\n}}"


@REGISTRY.register("progress")
def _progress(node: CapsuleInstance, theme: Theme, children: str) -> str:
    value = fmt_fraction(fraction(node.props))
    if prop_text(node.props, "variant") == "circular":
        return f"CircularProgressIndicator(progress = {{ {value}f }})"
    return (
        "LinearProgressIndicator(\n"
        f"{INDENT}progress = {{ {value}f }},\n"
        f"{INDENT}modifier = Modifier.fillMaxWidth()\n"
        ")"
    )


@REGISTRY.register("switch")
def _switch(node: CapsuleInstance, theme: Theme, children: str) -> str:
    p = node.props
    var = _state_name(node, "checked")
    checked = "true" if prop_bool(p, "checked") else "false"
    return (
        f"var {var} by remember {{ mutableStateOf({checked}) }}\n"
        "Row(verticalAlignment = Alignment.CenterVertically) {\n"
        f'{INDENT}Text("{prop_text(p, "label")}")\n'
        f"{INDENT}Spacer(Modifier.weight(1f))\n"
        f"{INDENT}Switch(checked = {var}, onCheckedChange = {{ {var} = it }})\n"
        "}"
    )


@REGISTRY.register("slider")
def _slider(node: CapsuleInstance, theme: Theme, children: str) -> str:
    p = node.props
    var = _state_name(node, "value")
    lo = fmt_num(prop_number(p, "min", 0))
    hi = fmt_num(prop_number(p, "max", 100))
    return (
        f"var {var} by remember {{ mutableFloatStateOf({fmt_fraction(fraction(p))}f) }}\n"
        "Slider(\n"
        f"{INDENT}value = {var},\n"
        f"{INDENT}onValueChange = {{ {var} = it }},\n"
        f"{INDENT}valueRange = {lo}f..{hi}f\n"
        ")"
    )


@REGISTRY.register("divider")
def _divider(node: CapsuleInstance, theme: Theme, children: str) -> str:
    return "HorizontalDivider()"


@REGISTRY.register("searchbar")
def _searchbar(node: CapsuleInstance, theme: Theme, children: str) -> str:
    var = _state_name(node, "query")
    placeholder = prop_text(node.props, "placeholder", default="Search...")
    return (
        f'var {var} by remember {{ mutableStateOf("") }}\n'
        "OutlinedTextField(\n"
        f"{INDENT}value = {var},\n"
        f"{INDENT}onValueChange = {{ {var} = it }},\n"
        f'{INDENT}placeholder = {{ Text("{placeholder}") }},\n'
        f'{INDENT}leadingIcon = {{ Icon(Icons.Default.Search, "Search") }},\n'
        f"{INDENT}modifier = Modifier.fillMaxWidth()\n"
        ")"
    )


@REGISTRY.register("chart")
def _chart(node: CapsuleInstance, theme: Theme, children: str) -> str:
    title = prop_text(node.props, "title", default="Chart")
    return (
        "// Chart - draw with Canvas or a charting library\n"
        "Box(\n"
        f"{INDENT}modifier = Modifier\n"
        f"{INDENT * 2}.fillMaxWidth()\n"
        f"{INDENT * 2}.height(200.dp),\n"
        f"{INDENT}contentAlignment = Alignment.Center\n"
        ") {\n"
        f'{INDENT}Text("{title}")\n'
        "}"
    )


class ComposeGenerator(CodeGenerator):
    """``MainActivity.kt`` + one ``<Screen>Screen.kt`` per screen."""

    platform = "android"
    language = "kotlin"
    registry = REGISTRY

    def generate(self, project: Project, limits: Optional[TreeLimits] = None) -> List[GeneratedFile]:
        limits = limits or TreeLimits()
        package = project.android_package or settings.default_android_package
        files = [self._main_activity(project, package)]
        for screen in project.screens:
            screen_name = type_name(screen.id, "Screen")
            fragment = self.render_root(screen.root, project.theme, limits)
            files.append(
                self.file(f"{screen_name}.kt", self._screen_file(package, screen_name, fragment, screen.title))
            )
        return files

    def _main_activity(self, project: Project, package: str) -> GeneratedFile:
        app_name = app_identifier(project.name)
        imports = [
            "android.os.Bundle",
            "androidx.activity.ComponentActivity",
            "androidx.activity.compose.setContent",
            "androidx.compose.material3.*",
            "androidx.compose.runtime.*",
            f"{package}.screens.*",
            f"{package}.ui.theme.{app_name}Theme",
        ]
        if project.uses_tabs:
            imports[3:3] = [
                "androidx.compose.foundation.layout.Box",
                "androidx.compose.foundation.layout.padding",
                "androidx.compose.material.icons.Icons",
                "androidx.compose.material.icons.filled.Star",
            ]
            imports.append("androidx.compose.ui.Modifier")
            body = self._tab_scaffold(project)
        else:
            initial = project.initial_screen()
            body = (
                "Surface(color = MaterialTheme.colorScheme.background) {\n"
                f"{INDENT}{type_name(initial.id if initial else None, 'Screen', default='Main')}()\n"
                "}"
            )

        import_block = "\n".join(f"import {i}" for i in imports)
        content = f"""package {package}

{import_block}

class MainActivity : ComponentActivity() {{
    override fun onCreate(savedInstanceState: Bundle?) {{
        super.onCreate(savedInstanceState)
        setContent {{
            {app_name}Theme {{
{indent(body, 4)}
            }}
        }}
    }}
}}
"""
        return self.file("MainActivity.kt", content)

    @staticmethod
    def _tab_scaffold(project: Project) -> str:
        items = "\n".join(
            "NavigationBarItem(\n"
            f"{INDENT}selected = selectedTab == {i},\n"
            f"{INDENT}onClick = {{ selectedTab = {i} }},\n"
            f'{INDENT}icon = {{ Icon(Icons.Default.Star, contentDescription = "{s.title}") }},\n'
            f'{INDENT}label = {{ Text("{s.title}") }}\n'
            ")"
            for i, s in enumerate(project.screens)
        )
        branches = "\n".join(f"{i} -> {type_name(s.id, 'Screen')}()" for i, s in enumerate(project.screens))
        return (
            "var selectedTab by remember { mutableIntStateOf(0) }\n"
            "Scaffold(\n"
            f"{INDENT}bottomBar = {{\n"
            f"{INDENT * 2}NavigationBar {{\n"
            f"{indent(items, 3)}\n"
            f"{INDENT * 2}}}\n"
            f"{INDENT}}}\n"
            ") { padding ->\n"
            f"{INDENT}Box(modifier = Modifier.padding(padding)) {{\n"
            f"{INDENT * 2}when (selectedTab) {{\n"
            f"{indent(branches, 3)}\n"
            f"{INDENT * 2}}}\n"
            f"{INDENT}}}\n"
            "}"
        )

    @staticmethod
    def _screen_file(package: str, screen_name: str, fragment: str, title: str) -> str:
        import_block = "\n".join(f"import {i}" for i in _SCREEN_IMPORTS)
        return f"""package {package}.screens

{import_block}

@Composable
fun {screen_name}() {{
    Column(
        modifier = Modifier
            .fillMaxSize()
            .padding(16.dp)
    ) {{
        Text("{title}", style = MaterialTheme.typography.headlineSmall)
        {SIBLING_SPACER}
{indent(fragment, 2)}
    }}
}}
"""
