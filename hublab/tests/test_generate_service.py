import pytest

from hublab.app.core.config import settings
from hublab.app.models.project import CapsuleInstance, Project, Screen
from hublab.app.services import generate_service
from hublab.app.services.generate_service import CapsuleTreeError, UnknownTargetError, count_capsules, generate


def _paths(result):
    return [f.path for f in result.files]


def test_todo_app_ios(todo_app):
    resp = generate(Project.model_validate(todo_app))
    assert [r.platform for r in resp.results] == ["ios"]
    ios = resp.results[0]
    assert _paths(ios) == ["TodoAppApp.swift", "ContentView.swift", "HomeView.swift"]
    home = ios.files[2].content
    assert 'Text("Tasks").font(.headline)' in home
    assert '.navigationTitle("Home")' in home
    assert "struct TodoAppApp: App" in ios.files[0].content
    assert "NavigationStack" in ios.files[1].content
    assert resp.summary.total_capsules == 1
    assert resp.summary.total_screens == 1
    assert resp.summary.total_files == 3
    assert ios.metadata.capsule_count == 1
    assert ios.metadata.generated_at.endswith("Z")


def test_manifest_shapes(two_screen_app):
    resp = generate(Project.model_validate(two_screen_app))
    by_platform = {r.platform: _paths(r) for r in resp.results}
    assert by_platform["ios"] == ["FitnessTrackerApp.swift", "ContentView.swift", "HomeView.swift", "StatsView.swift"]
    assert by_platform["android"] == ["MainActivity.kt", "HomeScreen.kt", "StatsScreen.kt"]
    assert by_platform["web"] == ["App.tsx", "pages/home.tsx", "pages/stats.tsx", "tailwind.config.js"]
    assert by_platform["desktop"] == by_platform["web"]
    assert resp.summary.total_platforms == 4
    assert resp.summary.total_files == 4 + 3 + 4 + 4
    assert resp.summary.total_capsules == 4


def test_tabs_navigation_and_android_package(two_screen_app):
    resp = generate(Project.model_validate(two_screen_app))
    files = {(r.platform, f.path): f for r in resp.results for f in r.files}
    assert "TabView" in files[("ios", "ContentView.swift")].content
    main = files[("android", "MainActivity.kt")].content
    assert main.startswith("package com.example.fit\n")
    assert "NavigationBar" in main
    assert "FitnessTrackerTheme {" in main
    assert files[("android", "HomeScreen.kt")].content.startswith("package com.example.fit.screens\n")
    app_tsx = files[("web", "App.tsx")].content
    assert "useState('stats')" in app_tsx
    assert "'#10B981'" in files[("web", "tailwind.config.js")].content
    assert files[("web", "tailwind.config.js")].language == "javascript"


def test_stack_navigation_uses_initial_screen(two_screen_app):
    two_screen_app["navigation"]["type"] = "stack"
    resp = generate(Project.model_validate(two_screen_app), targets=["ios", "android"])
    ios, android = resp.results
    assert "StatsView()" in ios.files[1].content
    assert "TabView" not in ios.files[1].content
    assert "package com.hublab.app" not in android.files[0].content
    assert "StatsScreen()" in android.files[0].content


def test_default_android_package(todo_app):
    todo_app["targets"] = ["android"]
    resp = generate(Project.model_validate(todo_app))
    assert resp.results[0].files[0].content.startswith("package com.hublab.app\n")


def test_generation_is_deterministic(two_screen_app):
    project = Project.model_validate(two_screen_app)
    first = generate(project)
    second = generate(project)
    assert [[f.model_dump() for f in r.files] for r in first.results] == [
        [f.model_dump() for f in r.files] for r in second.results
    ]


def test_screen_without_root(todo_app):
    todo_app["targets"] = ["ios", "android", "web"]
    todo_app["screens"][0]["root"] = None
    resp = generate(Project.model_validate(todo_app))
    ios, android, web = resp.results
    assert "EmptyView()" in ios.files[2].content
    assert 'Text("Empty")' in android.files[1].content
    assert "<div />" in web.files[1].content
    assert resp.summary.total_capsules == 0


def test_unknown_targets_are_skipped(todo_app):
    todo_app["targets"] = ["ios", "watchos"]
    resp = generate(Project.model_validate(todo_app))
    assert [r.platform for r in resp.results] == ["ios"]
    assert resp.summary.total_platforms == 1


def test_unknown_targets_rejected_in_strict_mode(todo_app, monkeypatch):
    monkeypatch.setattr(settings, "strict_targets", True)
    todo_app["targets"] = ["ios", "watchos"]
    with pytest.raises(UnknownTargetError) as exc:
        generate(Project.model_validate(todo_app))
    assert exc.value.targets == ["watchos"]


def test_depth_ceiling_from_settings(todo_app, monkeypatch):
    monkeypatch.setattr(settings, "max_tree_depth", 1)
    todo_app["screens"][0]["root"]["children"] = [{"id": "t", "capsuleId": "text", "props": {}}]
    with pytest.raises(CapsuleTreeError):
        generate(Project.model_validate(todo_app))


def test_count_capsules():
    assert count_capsules(None) == 0
    node = CapsuleInstance(id="a", capsule_id="card", children=[CapsuleInstance(id="b", capsule_id="text")])
    assert count_capsules(node) == 2


def test_explicit_targets_override_project(todo_app):
    resp = generate(Project.model_validate(todo_app), targets=["web"])
    assert [r.platform for r in resp.results] == ["web"]


def test_tree_limits_follow_settings(monkeypatch):
    monkeypatch.setattr(settings, "max_tree_nodes", 12)
    assert generate_service.tree_limits().max_nodes == 12


@pytest.mark.parametrize("target", ["ios", "android", "web"])
def test_ancestor_cycle_is_rejected(target):
    a = CapsuleInstance.model_construct(id="a", capsule_id="card", props={}, children=[])
    b = CapsuleInstance.model_construct(id="b", capsule_id="list", props={}, children=[a])
    a.children.append(b)
    project = Project(name="Loop", targets=[target], screens=[Screen(id="home", root=a)])
    with pytest.raises(CapsuleTreeError):
        generate(project)
