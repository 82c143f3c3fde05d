"""
namedreturns/dump.py
════════════════════

Loader for front-end dumps: a JSON rendering of one compilation unit
that has already been parsed and type-checked elsewhere.  Nothing here
reads source code; the dump carries the syntax tree and the resolver
tables verbatim.

Dump layout
───────────

    {
      "unit":    "example.com/pkg",
      "types":   {"t1": {"kind": "universe", "name": "error"},
                  "t2": {"kind": "basic", "name": "int"},
                  "t3": {"kind": "named", "name": "error", "package": "pkg"},
                  "t4": {"kind": "pointer", "elem": "t2"}, ...},
      "objects": {"o1": {"name": "err", "type": "t1", "pos": [3, 27]}, ...},
      "files":   [{"node": "File", "filename": "a.go", "decls": [...]}]
    }

Every node is ``{"node": "<ClassName>", "pos": [line, column], ...fields}``
where the fields are the dataclass fields of ``go_ast`` (``else`` and
``typeParams`` are accepted for ``else_`` and ``type_params``).  Three
annotation keys feed the resolver tables:

    "def":    object id the identifier declares
    "use":    object id the identifier refers to
    "typeOf": type id of the expression

License: MIT
"""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Set, Union

from namedreturns.ast_helper import Inspector
from namedreturns.checkers import CompilationUnit
from namedreturns.errors import DumpFormatError
from namedreturns.go_ast import NODE_TYPES, File, Ident, Node, Position
from namedreturns.type_info import (
    ERROR_TYPE,
    UNIVERSE,
    Object,
    Type,
    TypeInfo,
    TypeKind,
    basic,
)

_log = logging.getLogger(__name__)

_ANNOTATION_KEYS = frozenset({"node", "pos", "def", "use", "typeOf"})
_FIELD_ALIASES = {"else": "else_", "typeParams": "type_params"}


class _Decoder:
    """Decodes one dump document; not reusable across documents."""

    def __init__(self, data: Mapping[str, Any], path: str) -> None:
        self.data = data
        self.path = path
        self.info = TypeInfo()
        self._type_specs: Mapping[str, Any] = data.get("types") or {}
        self._object_specs: Mapping[str, Any] = data.get("objects") or {}
        self._types: Dict[str, Type] = {}
        self._objects: Dict[str, Object] = {}
        self._resolving: Set[str] = set()
        self._filename = ""

    def fail(self, message: str) -> DumpFormatError:
        return DumpFormatError(message, path=self.path)

    # ── types / objects ──────────────────────────────────────────────────

    def type_ref(self, tid: Any) -> Type:
        if not isinstance(tid, str):
            raise self.fail(f"type reference must be a string id, got {tid!r}")
        cached = self._types.get(tid)
        if cached is not None:
            return cached
        spec = self._type_specs.get(tid)
        if spec is None:
            raise self.fail(f"dangling type reference {tid!r}")
        if tid in self._resolving:
            raise self.fail(f"cyclic type reference {tid!r}")
        self._resolving.add(tid)
        try:
            typ = self._build_type(tid, spec)
        finally:
            self._resolving.discard(tid)
        self._types[tid] = typ
        return typ

    def _build_type(self, tid: str, spec: Mapping[str, Any]) -> Type:
        kind = spec.get("kind")
        name = spec.get("name", "")
        if kind == "universe":
            if name == "error":
                return ERROR_TYPE
            if name in UNIVERSE:
                return UNIVERSE[name]
            raise self.fail(f"type {tid!r}: unknown universe type {name!r}")
        if kind == "basic":
            return basic(name)
        if kind == "named":
            underlying = spec.get("underlying")
            return Type(
                kind=TypeKind.NAMED,
                name=name,
                package=spec.get("package", ""),
                underlying=self.type_ref(underlying) if underlying else None,
            )
        if kind in ("pointer", "slice", "array"):
            return Type(
                kind=TypeKind(kind),
                children=[self.type_ref(spec.get("elem"))],
                length=int(spec.get("length", -1)),
            )
        if kind == "map":
            return Type(
                kind=TypeKind.MAP,
                children=[self.type_ref(spec.get("key")), self.type_ref(spec.get("value"))],
            )
        if kind == "interface":
            return Type(kind=TypeKind.INTERFACE, name=name)
        if kind == "signature":
            params = [self.type_ref(t) for t in spec.get("params", [])]
            results = [self.type_ref(t) for t in spec.get("results", [])]
            return Type(kind=TypeKind.SIGNATURE, children=params + results,
                        n_params=len(params))
        raise self.fail(f"type {tid!r}: unknown kind {kind!r}")

    def object_ref(self, oid: Any) -> Object:
        if not isinstance(oid, str):
            raise self.fail(f"object reference must be a string id, got {oid!r}")
        cached = self._objects.get(oid)
        if cached is not None:
            return cached
        spec = self._object_specs.get(oid)
        if spec is None:
            raise self.fail(f"dangling object reference {oid!r}")
        type_id = spec.get("type")
        obj = Object(
            name=spec.get("name", ""),
            type=self.type_ref(type_id) if type_id else None,
            pos=self.position(spec.get("pos")),
        )
        self._objects[oid] = obj
        return obj

    # ── nodes ────────────────────────────────────────────────────────────

    def position(self, raw: Any) -> Position:
        if raw is None:
            return Position(self._filename)
        if not isinstance(raw, (list, tuple)) or len(raw) != 2:
            raise self.fail(f"position must be [line, column], got {raw!r}")
        return Position(self._filename, int(raw[0]), int(raw[1]))

    def value(self, raw: Any) -> Any:
        if isinstance(raw, Mapping):
            return self.node(raw)
        if isinstance(raw, list):
            return [self.value(item) for item in raw]
        return raw

    def node(self, raw: Mapping[str, Any]) -> Node:
        kind = raw.get("node")
        cls = NODE_TYPES.get(kind) if isinstance(kind, str) else None
        if cls is None:
            raise self.fail(f"unknown node kind {kind!r}")
        field_names = {f.name for f in dataclasses.fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, raw_value in raw.items():
            if key in _ANNOTATION_KEYS:
                continue
            name = _FIELD_ALIASES.get(key, key)
            if name not in field_names or name == "pos":
                raise self.fail(f"{kind}: unexpected field {key!r}")
            kwargs[name] = self.value(raw_value)
        kwargs["pos"] = self.position(raw.get("pos"))
        node = cls(**kwargs)

        if "typeOf" in raw:
            self.info.record_type(node, self.type_ref(raw["typeOf"]))
        if isinstance(node, Ident):
            if "def" in raw:
                self.info.defs[node] = self.object_ref(raw["def"])
            if "use" in raw:
                self.info.use(node, self.object_ref(raw["use"]))
        return node

    def file(self, raw: Any) -> File:
        if not isinstance(raw, Mapping) or raw.get("node", "File") != "File":
            raise self.fail("each entry of 'files' must be a File node")
        self._filename = str(raw.get("filename", ""))
        node = self.node({"node": "File", **raw})
        if not isinstance(node, File):
            raise self.fail("each entry of 'files' must be a File node")
        return node

    def unit(self) -> CompilationUnit:
        files_raw = self.data.get("files")
        if not isinstance(files_raw, list):
            raise self.fail("missing 'files' list")
        files: List[File] = [self.file(f) for f in files_raw]
        name = str(self.data.get("unit") or self.path or "<dump>")
        _log.debug(
            "loaded dump %s: %d files, %d objects, %d typed expressions",
            name, len(files), len(self._objects), len(self.info.types),
        )
        return CompilationUnit(name=name, files=files, info=self.info,
                               inspector=Inspector(files))


def decode_unit(data: Mapping[str, Any], path: str = "") -> CompilationUnit:
    """Build a CompilationUnit from an already-decoded dump document."""
    if not isinstance(data, Mapping):
        raise DumpFormatError("dump document must be a JSON object", path=path)
    return _Decoder(data, path).unit()


def parse_dump(text: str, path: str = "") -> CompilationUnit:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DumpFormatError(f"invalid JSON: {exc}", path=path) from exc
    return decode_unit(data, path)


def load_dump(source: Union[str, Path]) -> CompilationUnit:
    """Read and decode a dump file."""
    path = Path(source)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DumpFormatError(f"cannot read dump: {exc}", path=str(path)) from exc
    return parse_dump(text, path=str(path))


__all__ = ["decode_unit", "parse_dump", "load_dump"]
