"""JSON Reference resolution for OpenAPI documents.

Replaces every ``$ref`` object with the node it points to, so route synthesis
and the schema validator only ever see plain schemas. Supported forms:

    {"$ref": "#/components/schemas/Item"}          local JSON pointer
    {"$ref": "schemas/item.yaml"}                  whole relative file
    {"$ref": "schemas/item.yaml#/definitions/Id"}  pointer into relative file

Remote (``http://``) references, unknown targets and reference cycles raise
SpecValidationError. Keys next to a ``$ref`` are merged over the resolved
node.
"""

from pathlib import Path
from typing import Any

import yaml

from src.core.enums import ErrorCode
from src.core.errors import SpecValidationError

# (absolute file, JSON pointer)
RefKey = tuple[Path, str]


def read_document(path: Path) -> Any:
    """Read a YAML or JSON document (JSON is a YAML subset).

    Args:
        path: File to read.

    Returns:
        Parsed document.

    Raises:
        SpecValidationError: If the file cannot be read or parsed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecValidationError(
            code=ErrorCode.SPEC_FILE_UNREADABLE,
            message=f"Cannot read OpenAPI document {path}: {exc.strerror or exc}",
            details={"file": str(path)},
        ) from exc

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SpecValidationError(
            code=ErrorCode.SPEC_PARSE_FAILED,
            message=f"Cannot parse OpenAPI document {path}: {exc}",
            details={"file": str(path)},
        ) from exc


def _split_ref(ref: str) -> tuple[str, str]:
    path, _, pointer = ref.partition("#")
    return path, pointer


def _pointer_get(document: Any, pointer: str, *, ref: str, source: Path) -> Any:
    """Resolve an RFC 6901 JSON pointer ("" is the whole document)."""
    if pointer == "":
        return document
    if not pointer.startswith("/"):
        raise _unresolvable(ref, source, "fragment must be empty or start with '/'")

    node = document
    for raw_token in pointer[1:].split("/"):
        token = raw_token.replace("~1", "/").replace("~0", "~")
        if isinstance(node, dict) and token in node:
            node = node[token]
        elif isinstance(node, list) and token.isdigit() and int(token) < len(node):
            node = node[int(token)]
        else:
            raise _unresolvable(ref, source, f"'{token}' not found")
    return node


def _unresolvable(ref: str, source: Path, reason: str) -> SpecValidationError:
    return SpecValidationError(
        code=ErrorCode.SPEC_REF_UNRESOLVABLE,
        message=f"Cannot resolve $ref '{ref}' in {source.name}: {reason}",
        details={"ref": ref, "file": str(source)},
    )


class RefResolver:
    """Dereference a document rooted at ``root_file``.

    Referenced files are read once. Each target is resolved once and the
    result is shared by every reference to it.

    Args:
        root_file: File the document was read from; relative references are
            resolved against its directory.
    """

    def __init__(self, root_file: Path) -> None:
        self._root_file = root_file.resolve()
        self._documents: dict[Path, Any] = {}
        self._resolved: dict[RefKey, Any] = {}

    def dereference(self, document: Any) -> Any:
        """Return a copy of ``document`` with every ``$ref`` replaced.

        The input document is not modified.

        Raises:
            SpecValidationError: On remote, unresolvable or circular references.
        """
        self._documents[self._root_file] = document
        return self._resolve_node(document, self._root_file, ())

    def _resolve_node(self, node: Any, source: Path, stack: tuple[RefKey, ...]) -> Any:
        if isinstance(node, dict):
            ref = node.get("$ref")
            if isinstance(ref, str):
                resolved = self._resolve_ref(ref, source, stack)
                siblings = {
                    key: self._resolve_node(value, source, stack)
                    for key, value in node.items()
                    if key != "$ref"
                }
                if siblings and isinstance(resolved, dict):
                    return {**resolved, **siblings}
                return resolved
            return {
                key: self._resolve_node(value, source, stack)
                for key, value in node.items()
            }
        if isinstance(node, list):
            return [self._resolve_node(item, source, stack) for item in node]
        return node

    def _resolve_ref(self, ref: str, source: Path, stack: tuple[RefKey, ...]) -> Any:
        file_part, pointer = _split_ref(ref)
        if "://" in file_part:
            raise _unresolvable(ref, source, "remote references are not supported")

        target_file = (source.parent / file_part).resolve() if file_part else source
        key: RefKey = (target_file, pointer)

        if key in stack:
            raise SpecValidationError(
                code=ErrorCode.SPEC_REF_CIRCULAR,
                message=f"Circular $ref '{ref}' in {source.name}",
                details={"ref": ref, "file": str(source)},
            )
        if key in self._resolved:
            return self._resolved[key]

        target = _pointer_get(
            self._load(target_file, ref=ref, source=source),
            pointer,
            ref=ref,
            source=source,
        )
        resolved = self._resolve_node(target, target_file, (*stack, key))
        self._resolved[key] = resolved
        return resolved

    def _load(self, path: Path, *, ref: str, source: Path) -> Any:
        if path not in self._documents:
            if not path.is_file():
                raise _unresolvable(ref, source, f"file {path} does not exist")
            self._documents[path] = read_document(path)
        return self._documents[path]
