"""Tree-sitter language loader helpers."""

from __future__ import annotations


def load_typescript_language(tsx: bool = False):
    """Return a Tree-sitter Language object for TypeScript (or TSX)."""
    from tree_sitter import Language

    try:
        import tree_sitter_typescript as tstypescript
    except Exception as exc:  # pragma: no cover - import guard
        raise RuntimeError("tree_sitter_typescript is not installed") from exc

    attr = "language_tsx" if tsx else "language_typescript"
    if not hasattr(tstypescript, attr):
        raise RuntimeError("Unsupported tree_sitter_typescript API")
    lang = getattr(tstypescript, attr)
    lang = lang() if callable(lang) else lang

    # tree_sitter_typescript returns a PyCapsule; wrap to Language if needed.
    if isinstance(lang, Language):
        return lang
    return Language(lang)
