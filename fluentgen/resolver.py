"""Package-level type resolution for the resolved discovery strategy.

The resolver loads every file of one Go package, builds the package's
declaration and import tables and checks that each type expression used by a
type declaration resolves. The whole package is then type-checked with the Go
toolchain (``go list -e -json`` followed by ``go build``). When no ``go`` binary
is available, imports are checked against ``go.mod`` and top-level ``var`` and
``const`` declarations against the package scope instead.

Any failure rejects the whole package: fields are only rendered from a package
that compiles.
"""

from __future__ import annotations

import json
import os
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Set, Tuple

from tree_sitter import Node

from .discovery import discover_go_files
from .errors import PackageResolutionError, SourceSyntaxError
from .logging import get_logger
from .models import FieldSpec
from .parsing import (
    PREDECLARED_TYPES,
    GoSourceParser,
    ParsedFile,
    TypeRenderer,
    struct_field_specs,
    top_level_type_specs,
)

_VERSION_ELEMENT = re.compile(r"^v[0-9]+$")
_NOT_IDENTIFIER = re.compile(r"[^\w]")
_GO_MOD_DIRECTIVE = re.compile(r"^(module|require)\s+(.*)$")

PREDECLARED_VALUES = frozenset(
    {
        "append",
        "cap",
        "clear",
        "close",
        "complex",
        "copy",
        "delete",
        "false",
        "imag",
        "iota",
        "len",
        "make",
        "max",
        "min",
        "new",
        "nil",
        "panic",
        "print",
        "println",
        "real",
        "recover",
        "true",
    }
)

_BINDING_PARENTS = frozenset(
    {"qualified_type", "parameter_declaration", "variadic_parameter_declaration"}
)

GoRunner = Callable[..., str]

logger = get_logger("resolver")


@dataclass
class TypeDefinition:
    """A package-level type declaration."""

    name: str
    parsed: ParsedFile
    spec: Node
    type_node: Node
    is_alias: bool = False
    type_parameters: Tuple[str, ...] = ()

    @property
    def source_file(self) -> Path:
        return self.parsed.path

    @property
    def line(self) -> int:
        return self.spec.start_point[0] + 1

    @property
    def is_generic(self) -> bool:
        return bool(self.type_parameters)


@dataclass
class FileImports:
    """Import table of one file: local package name to import path."""

    names: Dict[str, str] = field(default_factory=dict)
    dot_imports: List[str] = field(default_factory=list)


@dataclass
class ResolvedPackage:
    """A fully resolved package: files, imports, declarations and their types."""

    name: str
    directory: Path
    files: List[ParsedFile]
    imports: Dict[Path, FileImports]
    definitions: Dict[str, TypeDefinition]
    types: Dict[str, str] = field(default_factory=dict)

    def underlying(self, definition: TypeDefinition) -> Optional[TypeDefinition]:
        """Follow package-local named types down to the declaration defining the shape.

        Returns ``None`` when the chain ends in a predeclared or imported type.
        """
        current = definition
        seen: Set[str] = set()
        while current.type_node.type == "type_identifier":
            if current.name in seen:
                return None
            seen.add(current.name)
            target = self.definitions.get(current.parsed.text(current.type_node))
            if target is None:
                return None
            current = target
        if current.type_node.type == "qualified_type":
            return None
        return current

    def field_specs(self, definition: TypeDefinition) -> Tuple[FieldSpec, ...]:
        """Return the struct fields of ``definition`` with canonical type strings."""
        renderer = TypeRenderer(definition.parsed.source)
        return struct_field_specs(definition.type_node, definition.parsed.source, renderer.render)


class PackageResolver:
    """Loads a Go package and resolves the identifiers it uses.

    ``runner`` executes ``go`` commands: it receives the argument list and a
    ``cwd`` keyword and returns stdout, raising ``CalledProcessError`` when the
    command fails and ``OSError`` when ``go`` cannot be started.
    """

    def __init__(
        self,
        parser: GoSourceParser | None = None,
        *,
        runner: GoRunner | None = None,
        skip_marker: str = "fluent",
        exclude_paths: Sequence[str] = (),
    ) -> None:
        self.parser = parser or GoSourceParser()
        self._runner = runner or _run_go
        self.skip_marker = skip_marker
        self.exclude_paths = list(exclude_paths)

    def load(self, identifier: str | Path) -> ResolvedPackage:
        directory, paths, listing = self._locate(identifier)
        if not paths:
            raise PackageResolutionError("no Go files in package", path=directory)
        logger.debug("Resolving package in %s (%d files)", directory, len(paths))

        files = [self._parse(path) for path in paths]
        package_name = self._package_name(files, directory)
        imports = {parsed.path: _file_imports(parsed) for parsed in files}
        definitions, values = self._collect_declarations(files)

        problems: List[str] = []
        for definition in definitions.values():
            problems.extend(
                self._check_names(definition, definitions, values, imports[definition.source_file])
            )
        problems.extend(self._check_cycles(definitions))
        _raise_for(problems, "type error(s)", directory)

        if listing is not None:
            checked = self._type_check([str(identifier)], None, directory, listing)
        else:
            checked = self._type_check([path.name for path in paths], directory, directory)
        if not checked:
            logger.debug("go toolchain unavailable; checking %s with the built-in rules", directory)
            modules = _module_paths(directory)
            for parsed in files:
                problems.extend(self._check_imports(parsed, modules))
                problems.extend(
                    self._check_values(parsed, definitions, values, imports[parsed.path])
                )
            _raise_for(problems, "error(s)", directory)

        package = ResolvedPackage(
            name=package_name,
            directory=directory,
            files=files,
            imports=imports,
            definitions=definitions,
        )
        for name, definition in definitions.items():
            rendered = TypeRenderer(definition.parsed.source).render(definition.type_node)
            package.types[name] = rendered if rendered is not None else definition.parsed.text(
                definition.type_node
            )
        return package

    # ------------------------------------------------------------------
    # Loading

    def _locate(
        self, identifier: str | Path
    ) -> Tuple[Path, List[Path], Optional[Dict[str, Any]]]:
        candidate = Path(identifier).expanduser()
        if candidate.is_dir():
            files = discover_go_files(
                candidate,
                skip_marker=self.skip_marker,
                exclude_paths=self.exclude_paths,
                include_tests=False,
            )
            return candidate.resolve(), files, None
        if candidate.is_file():
            raise PackageResolutionError(
                "expected a package directory or import path, got a file", path=candidate
            )

        try:
            output = self._runner(["go", "list", "-e", "-json", str(identifier)], cwd=None)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise PackageResolutionError(f"package not found: {identifier}") from exc
        listing = _decode_listing(output, str(identifier))
        if listing.get("Error"):
            message = listing["Error"].get("Err", "unknown error")
            raise PackageResolutionError(f"package not found: {identifier}: {message}")
        directory = Path(listing.get("Dir", ""))
        names = [
            name
            for name in listing.get("GoFiles", [])
            if not (self.skip_marker and self.skip_marker in name)
        ]
        return directory, [directory / name for name in names], listing

    def _parse(self, path: Path) -> ParsedFile:
        try:
            return self.parser.parse_file(path)
        except SourceSyntaxError as exc:
            raise PackageResolutionError(
                f"syntax error at line {exc.line}, column {exc.column}: {exc.message}", path=path
            ) from exc
        except OSError as exc:
            raise PackageResolutionError(f"reading file: {exc}", path=path) from exc

    @staticmethod
    def _package_name(files: Sequence[ParsedFile], directory: Path) -> str:
        names: Dict[str, Path] = {}
        for parsed in files:
            name = parsed.package_name
            if name is None:
                raise PackageResolutionError("missing package clause", path=parsed.path)
            names.setdefault(name, parsed.path)
        if len(names) > 1:
            found = " and ".join(f"{name} ({path.name})" for name, path in names.items())
            raise PackageResolutionError(f"found packages {found}", path=directory)
        return next(iter(names))

    @staticmethod
    def _collect_declarations(
        files: Sequence[ParsedFile],
    ) -> Tuple[Dict[str, TypeDefinition], Set[str]]:
        definitions: Dict[str, TypeDefinition] = {}
        values: Set[str] = set()
        for parsed in files:
            for spec in top_level_type_specs(parsed):
                name_node = spec.child_by_field_name("name")
                type_node = spec.child_by_field_name("type")
                if name_node is None or type_node is None:
                    continue
                name = parsed.text(name_node)
                if name in definitions:
                    previous = definitions[name]
                    raise PackageResolutionError(
                        f"{name} redeclared in this block (previous declaration at "
                        f"{previous.source_file.name}:{previous.line})",
                        path=parsed.path,
                        type_name=name,
                    )
                definitions[name] = TypeDefinition(
                    name=name,
                    parsed=parsed,
                    spec=spec,
                    type_node=type_node,
                    is_alias=spec.type == "type_alias",
                    type_parameters=_type_parameter_names(parsed, spec),
                )
            values.update(_value_names(parsed))
        return definitions, values

    # ------------------------------------------------------------------
    # Checks

    def _check_names(
        self,
        definition: TypeDefinition,
        definitions: Dict[str, TypeDefinition],
        values: Set[str],
        imports: FileImports,
    ) -> List[str]:
        parsed = definition.parsed
        in_scope = set(definition.type_parameters)
        problems: List[str] = []
        roots = [definition.type_node]
        parameters = definition.spec.child_by_field_name("type_parameters")
        if parameters is not None:
            roots.append(parameters)
        for root in roots:
            for node in _walk(root):
                if node.type == "type_identifier":
                    if node.parent is not None and node.parent.type == "qualified_type":
                        continue
                    name = parsed.text(node)
                    if name in in_scope or name in definitions or name in PREDECLARED_TYPES:
                        continue
                    if name in values:
                        problems.append(_problem(parsed, node, definition, f"{name} is not a type"))
                    elif not imports.dot_imports:
                        problems.append(_problem(parsed, node, definition, f"undefined: {name}"))
                elif node.type == "qualified_type":
                    package_node = node.child_by_field_name("package")
                    package = parsed.text(package_node) if package_node is not None else ""
                    if package not in imports.names:
                        problems.append(_problem(parsed, node, definition, f"undefined: {package}"))
        return problems

    @staticmethod
    def _check_cycles(definitions: Dict[str, TypeDefinition]) -> List[str]:
        problems: List[str] = []
        for definition in definitions.values():
            chain: List[str] = []
            current: Optional[TypeDefinition] = definition
            while current is not None and current.type_node.type == "type_identifier":
                if current.name in chain:
                    if current.name == definition.name:
                        problems.append(
                            f"{definition.source_file.name}:{definition.line}: "
                            f"invalid recursive type {definition.name}"
                        )
                    break
                chain.append(current.name)
                current = definitions.get(current.parsed.text(current.type_node))
        return problems

    def _type_check(
        self,
        targets: List[str],
        cwd: Optional[Path],
        directory: Path,
        listing: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Type-check the package with ``go``; return False when ``go`` is unavailable."""
        try:
            if listing is None:
                output = self._runner(["go", "list", "-e", "-json", *targets], cwd=cwd)
                listing = _decode_listing(output, str(directory))
            _raise_for(_listing_problems(listing), "import error(s)", directory)
            self._runner(["go", "build", "-o", os.devnull, *targets], cwd=cwd)
        except OSError as exc:
            logger.debug("Cannot run go: %s", exc)
            return False
        except subprocess.CalledProcessError as exc:
            raise PackageResolutionError(
                f"type check failed: {_process_output(exc)}", path=directory
            ) from exc
        return True

    @staticmethod
    def _check_imports(parsed: ParsedFile, modules: Optional[Tuple[str, ...]]) -> List[str]:
        problems: List[str] = []
        for spec in parsed.import_specs():
            path_node = spec.child_by_field_name("path")
            if path_node is None:
                continue
            import_path = parsed.text(path_node).strip("\"`")
            if not _import_available(import_path, modules):
                problems.append(
                    _located(
                        parsed,
                        path_node,
                        f"no required module provides package {import_path}",
                    )
                )
        return problems

    @staticmethod
    def _check_values(
        parsed: ParsedFile,
        definitions: Dict[str, TypeDefinition],
        values: Set[str],
        imports: FileImports,
    ) -> List[str]:
        if imports.dot_imports:
            return []
        known = values | set(definitions) | set(imports.names) | PREDECLARED_TYPES | PREDECLARED_VALUES
        problems: List[str] = []
        for spec in _value_specs(parsed):
            keyword = "var" if spec.type == "var_spec" else "const"
            names = ", ".join(parsed.text(name) for name in spec.children_by_field_name("name"))
            roots = [spec.child_by_field_name("type"), *spec.children_by_field_name("value")]
            for root in roots:
                if root is None:
                    continue
                for node in _references(root):
                    if node.type in {"identifier", "type_identifier"}:
                        if node.parent is not None and node.parent.type in _BINDING_PARENTS:
                            continue
                        name = parsed.text(node)
                        if name not in known:
                            problems.append(
                                _located(parsed, node, f"undefined: {name}", f"{keyword} {names}")
                            )
                    elif node.type == "qualified_type":
                        package_node = node.child_by_field_name("package")
                        package = parsed.text(package_node)
                        if package not in imports.names:
                            problems.append(
                                _located(parsed, node, f"undefined: {package}", f"{keyword} {names}")
                            )
        return problems


def default_import_name(import_path: str) -> str:
    """Return the package name conventionally bound by an unaliased import."""
    elements = [element for element in import_path.split("/") if element]
    if not elements:
        return ""
    base = elements[-1]
    if _VERSION_ELEMENT.match(base) and len(elements) > 1:
        base = elements[-2]
    base = base.split(".")[0]
    if base.startswith("go-"):
        base = base[len("go-") :]
    match = _NOT_IDENTIFIER.search(base)
    return base[: match.start()] if match else base


def _file_imports(parsed: ParsedFile) -> FileImports:
    table = FileImports()
    for name, import_path in parsed.imports():
        if name == "_":
            continue
        if name == ".":
            table.dot_imports.append(import_path)
            continue
        table.names[name or default_import_name(import_path)] = import_path
    return table


def _module_paths(directory: Path) -> Optional[Tuple[str, ...]]:
    """Return the module path and required modules of the enclosing ``go.mod``."""
    for folder in (directory, *directory.parents):
        go_mod = folder / "go.mod"
        if go_mod.is_file():
            return _read_go_mod(go_mod)
    return None


def _read_go_mod(go_mod: Path) -> Tuple[str, ...]:
    modules: List[str] = []
    in_block = False
    for raw in go_mod.read_text(encoding="utf-8").splitlines():
        line = raw.split("//", 1)[0].strip()
        if not line:
            continue
        if in_block:
            if line == ")":
                in_block = False
            else:
                modules.append(line.split()[0].strip('"'))
            continue
        match = _GO_MOD_DIRECTIVE.match(line)
        if match is None:
            continue
        rest = match.group(2).strip()
        if match.group(1) == "require" and rest == "(":
            in_block = True
        elif rest:
            modules.append(rest.split()[0].strip('"'))
    return tuple(modules)


def _import_available(import_path: str, modules: Optional[Tuple[str, ...]]) -> bool:
    first = import_path.split("/", 1)[0]
    if "." not in first:
        # Standard library (and cgo's "C").
        return True
    return any(
        import_path == module or import_path.startswith(module + "/")
        for module in modules or ()
    )


def _decode_listing(output: str, subject: str) -> Dict[str, Any]:
    try:
        listing = json.loads(output)
    except json.JSONDecodeError as exc:
        raise PackageResolutionError(f"unreadable go list output for {subject}") from exc
    if not isinstance(listing, dict):
        raise PackageResolutionError(f"unreadable go list output for {subject}")
    return listing


def _listing_problems(listing: Dict[str, Any]) -> List[str]:
    problems: List[str] = []
    error = listing.get("Error")
    if error:
        problems.append(error.get("Err", "unknown error"))
    for dependency in listing.get("DepsErrors") or []:
        problems.append(dependency.get("Err", "unknown error"))
    if listing.get("Incomplete") and not problems:
        problems.append("package could not be loaded completely")
    return problems


def _process_output(exc: subprocess.CalledProcessError) -> str:
    text = exc.stderr or exc.output or ""
    lines = [line.strip() for line in str(text).splitlines()]
    lines = [line for line in lines if line and not line.startswith("#")]
    return "; ".join(lines) or f"go exited with status {exc.returncode}"


def _raise_for(problems: List[str], kind: str, directory: Path) -> None:
    if problems:
        raise PackageResolutionError(
            f"{len(problems)} {kind}: " + "; ".join(problems), path=directory
        )


def _type_parameter_names(parsed: ParsedFile, spec: Node) -> Tuple[str, ...]:
    parameters = spec.child_by_field_name("type_parameters")
    if parameters is None:
        return ()
    names: List[str] = []
    for declaration in parameters.named_children:
        names.extend(parsed.text(name) for name in declaration.children_by_field_name("name"))
    return tuple(names)


def _value_specs(parsed: ParsedFile) -> Iterator[Node]:
    for child in parsed.root.named_children:
        if child.type in {"var_declaration", "const_declaration"}:
            for node in _walk(child):
                if node.type in {"var_spec", "const_spec"}:
                    yield node


def _value_names(parsed: ParsedFile) -> Iterator[str]:
    for child in parsed.root.named_children:
        if child.type == "function_declaration":
            name = child.child_by_field_name("name")
            if name is not None:
                yield parsed.text(name)
    for spec in _value_specs(parsed):
        for name in spec.children_by_field_name("name"):
            yield parsed.text(name)


def _walk(node: Node) -> Iterator[Node]:
    yield node
    for child in node.named_children:
        yield from _walk(child)


def _references(node: Node) -> Iterator[Node]:
    # Function literals open their own scope; keys of keyed elements name fields.
    yield node
    if node.type == "func_literal":
        return
    children = node.named_children
    if node.type == "keyed_element":
        children = children[1:]
    for child in children:
        yield from _references(child)


def _located(parsed: ParsedFile, node: Node, message: str, subject: str | None = None) -> str:
    line, column = node.start_point[0] + 1, node.start_point[1] + 1
    suffix = f" (in {subject})" if subject else ""
    return f"{parsed.path.name}:{line}:{column}: {message}{suffix}"


def _problem(parsed: ParsedFile, node: Node, definition: TypeDefinition, message: str) -> str:
    subject = definition.name
    enclosing = node.parent
    while enclosing is not None and enclosing.type != "field_declaration":
        enclosing = enclosing.parent
    if enclosing is not None:
        names = [parsed.text(name) for name in enclosing.children_by_field_name("name")]
        if names:
            subject = f"{subject}.{', '.join(names)}"
    return _located(parsed, node, message, subject)


def _run_go(args: Sequence[str], *, cwd: Path | None = None) -> str:
    completed = subprocess.run(
        list(args),
        cwd=str(cwd) if cwd is not None else None,
        check=True,
        text=True,
        capture_output=True,
    )
    return completed.stdout


__all__ = [
    "FileImports",
    "PREDECLARED_VALUES",
    "PackageResolver",
    "ResolvedPackage",
    "TypeDefinition",
    "default_import_name",
]
