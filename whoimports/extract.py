"""Extract import/export facts from a TypeScript Tree-sitter AST."""

from __future__ import annotations

import logging

from .models import (
    DEFAULT_EXPORT,
    WILDCARD,
    ExportBinding,
    ExportKind,
    ImportBinding,
    ImportKind,
    PropertyAccess,
    SourceFacts,
)


logger = logging.getLogger(__name__)

VARIABLE_DECLARATION_TYPES = {"lexical_declaration", "variable_declaration"}
NAMED_DECLARATION_TYPES = {
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
    "class_declaration",
    "abstract_class_declaration",
    "interface_declaration",
    "type_alias_declaration",
    "enum_declaration",
    "internal_module",
    "module",
}
PATTERN_IDENTIFIER_TYPES = {"identifier", "shorthand_property_identifier_pattern"}


def extract_facts(parsed, module: str) -> SourceFacts:
    """Collect the declared imports, exports and property accesses of one module."""
    root = parsed.tree.root_node
    source_bytes = parsed.source_bytes

    imports: list[ImportBinding] = []
    exports: list[ExportBinding] = []

    for node in root.children:
        if node.type == "import_statement":
            imports.extend(_extract_imports(node, source_bytes))
        elif node.type == "export_statement":
            exports.extend(_extract_exports(node, source_bytes, module))

    if root.has_error:
        logger.debug("Syntax errors in %s; facts may be incomplete", module)

    return SourceFacts(
        module=module,
        imports=tuple(imports),
        exports=tuple(exports),
        property_accesses=tuple(_property_accesses(root, source_bytes)),
    )


def _node_text(node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _string_value(node, source_bytes: bytes) -> str:
    text = _node_text(node, source_bytes)
    if len(text) >= 2 and text[0] == text[-1] and text[0] in {"'", '"', "`"}:
        return text[1:-1]
    return text


def _name_value(node, source_bytes: bytes) -> str:
    # Export names may be written as string literals: export { x as "y" }
    if node.type == "string":
        return _string_value(node, source_bytes)
    return _node_text(node, source_bytes)


def _source_specifier(node, source_bytes: bytes) -> str | None:
    source = node.child_by_field_name("source")
    if source is None:
        return None
    return _string_value(source, source_bytes)


def _extract_imports(node, source_bytes: bytes) -> list[ImportBinding]:
    specifier = _source_specifier(node, source_bytes)
    if specifier is None:
        return []

    clause = next((child for child in node.children if child.type == "import_clause"), None)
    if clause is None:
        return []

    bindings: list[ImportBinding] = []
    for child in clause.children:
        if child.type == "identifier":
            bindings.append(
                ImportBinding(
                    local_name=_node_text(child, source_bytes),
                    kind=ImportKind.DEFAULT,
                    source_specifier=specifier,
                    source_export_name=DEFAULT_EXPORT,
                )
            )
        elif child.type == "namespace_import":
            ident = next((c for c in child.children if c.type == "identifier"), None)
            if ident is not None:
                bindings.append(
                    ImportBinding(
                        local_name=_node_text(ident, source_bytes),
                        kind=ImportKind.NAMESPACE,
                        source_specifier=specifier,
                    )
                )
        elif child.type == "named_imports":
            for spec in child.named_children:
                if spec.type != "import_specifier":
                    continue
                name_node = spec.child_by_field_name("name")
                if name_node is None:
                    continue
                alias_node = spec.child_by_field_name("alias")
                source_name = _name_value(name_node, source_bytes)
                local_name = (
                    _node_text(alias_node, source_bytes) if alias_node is not None else source_name
                )
                bindings.append(
                    ImportBinding(
                        local_name=local_name,
                        kind=ImportKind.NAMED,
                        source_specifier=specifier,
                        source_export_name=source_name,
                    )
                )

    return bindings


def _extract_exports(node, source_bytes: bytes, module: str) -> list[ExportBinding]:
    specifier = _source_specifier(node, source_bytes)
    token_types = {child.type for child in node.children if not child.is_named}

    if "default" in token_types or "=" in token_types:
        return [
            ExportBinding(
                exported_name=DEFAULT_EXPORT,
                kind=ExportKind.DEFAULT_ASSIGNMENT,
                declared_in=module,
            )
        ]

    for child in node.children:
        if child.type == "namespace_export":
            # export * as ns from '...' has no per-name resolution.
            logger.debug("Skipping namespace re-export in %s", module)
            return []
        if child.type == "export_clause":
            return _export_clause_bindings(child, source_bytes, specifier)

    if "*" in token_types:
        if specifier is None:
            return []
        return [
            ExportBinding(
                exported_name=WILDCARD,
                kind=ExportKind.WILDCARD_RE_EXPORT,
                source_specifier=specifier,
            )
        ]

    declaration = node.child_by_field_name("declaration")
    if declaration is None:
        return []
    return [
        ExportBinding(
            exported_name=name,
            kind=ExportKind.LOCAL_DECLARATION,
            local_name=name,
            declared_in=module,
        )
        for name in _declared_names(declaration, source_bytes)
    ]


def _export_clause_bindings(
    clause, source_bytes: bytes, specifier: str | None
) -> list[ExportBinding]:
    bindings: list[ExportBinding] = []
    for spec in clause.named_children:
        if spec.type != "export_specifier":
            continue
        name_node = spec.child_by_field_name("name")
        if name_node is None:
            continue
        alias_node = spec.child_by_field_name("alias")
        name = _name_value(name_node, source_bytes)
        exported = _name_value(alias_node, source_bytes) if alias_node is not None else name
        if specifier is not None:
            bindings.append(
                ExportBinding(
                    exported_name=exported,
                    kind=ExportKind.NAMED_RE_EXPORT,
                    source_specifier=specifier,
                    source_export_name=name,
                )
            )
        else:
            bindings.append(
                ExportBinding(
                    exported_name=exported,
                    kind=ExportKind.NAMED_RE_EXPORT,
                    local_name=name,
                )
            )
    return bindings


def _declared_names(declaration, source_bytes: bytes) -> list[str]:
    if declaration.type == "ambient_declaration":
        names: list[str] = []
        for child in declaration.named_children:
            names.extend(_declared_names(child, source_bytes))
        return names

    if declaration.type in VARIABLE_DECLARATION_TYPES:
        names = []
        for declarator in declaration.named_children:
            if declarator.type != "variable_declarator":
                continue
            target = declarator.child_by_field_name("name")
            if target is not None:
                names.extend(_pattern_names(target, source_bytes))
        return names

    if declaration.type in NAMED_DECLARATION_TYPES:
        name_node = declaration.child_by_field_name("name")
        # declare module 'pkg' { ... } names a module, not a binding.
        if name_node is not None and name_node.type != "string":
            return [_node_text(name_node, source_bytes)]

    return []


def _pattern_names(node, source_bytes: bytes) -> list[str]:
    if node.type in PATTERN_IDENTIFIER_TYPES:
        return [_node_text(node, source_bytes)]

    names: list[str] = []
    for child in node.named_children:
        if child.type == "pair_pattern":
            value = child.child_by_field_name("value")
            if value is not None:
                names.extend(_pattern_names(value, source_bytes))
            continue
        if child.type in {"assignment_pattern", "object_assignment_pattern"}:
            left = child.child_by_field_name("left")
            if left is not None:
                names.extend(_pattern_names(left, source_bytes))
            continue
        if child.type in {"object_pattern", "array_pattern", "rest_pattern"}:
            names.extend(_pattern_names(child, source_bytes))
        elif child.type in PATTERN_IDENTIFIER_TYPES:
            names.append(_node_text(child, source_bytes))
    return names


def _property_accesses(root, source_bytes: bytes) -> list[PropertyAccess]:
    accesses: list[PropertyAccess] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "member_expression":
            obj = node.child_by_field_name("object")
            prop = node.child_by_field_name("property")
            if obj is not None and prop is not None and obj.type == "identifier":
                accesses.append(
                    PropertyAccess(
                        base_identifier=_node_text(obj, source_bytes),
                        property_name=_node_text(prop, source_bytes),
                    )
                )
        stack.extend(reversed(node.children))
    return accesses
