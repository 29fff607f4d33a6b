from __future__ import annotations

from whoimports.resolver import ModuleResolver, is_relative_specifier


def test_is_relative_specifier():
    assert is_relative_specifier("./a")
    assert is_relative_specifier("../a")
    assert not is_relative_specifier("react")
    assert not is_relative_specifier("@scope/pkg")


def test_resolves_relative_specifiers_with_extensions():
    resolver = ModuleResolver(["barrel.ts", "ui/Button.tsx", "legacy/util.js"])

    assert resolver.resolve("consumer.ts", "./barrel") == "barrel.ts"
    assert resolver.resolve("pages/home.ts", "../ui/Button") == "ui/Button.tsx"
    assert resolver.resolve("legacy/main.js", "./util") == "legacy/util.js"


def test_resolves_directory_index():
    resolver = ModuleResolver(["lib/index.ts", "index.ts"])

    assert resolver.resolve("app.ts", "./lib") == "lib/index.ts"
    assert resolver.resolve("app.ts", ".") == "index.ts"


def test_prefers_file_over_directory_index():
    resolver = ModuleResolver(["lib.ts", "lib/index.ts"])

    assert resolver.resolve("app.ts", "./lib") == "lib.ts"


def test_resolves_verbatim_specifier():
    resolver = ModuleResolver(["shared/types.ts"])

    assert resolver.resolve("app/main.ts", "../shared/types.ts") == "shared/types.ts"


def test_unresolved_specifiers_return_none():
    resolver = ModuleResolver(["a.ts"])

    assert resolver.resolve("b.ts", "react") is None
    assert resolver.resolve("b.ts", "./missing") is None
    assert resolver.resolve("b.ts", "./a") == "a.ts"
