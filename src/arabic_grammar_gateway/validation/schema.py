"""
Schema validation: untyped JSON tree in, typed pydantic model out.

Three passes, each reported as a ``ValidationOutcome``:

1. Cycle check. An iterative walk rejects self-referential containers
   before anything recurses into them.
2. JSON Schema (Draft 2020-12) via ``jsonschema``. Every violation is
   collected (required fields, types, closed enums, array lengths, numeric
   ranges) and sorted by path.
3. Typed promotion via ``model.model_validate``. Only reached when pass 2 is
   clean; anything pydantic still rejects is reported the same way.

A descriptor may declare one ``RecursiveField`` (the syntax tree). Its nodes
are checked one at a time from a work-list and promoted bottom-up, so tree
depth is bounded by memory, not by the interpreter stack or by the recursion
guards inside jsonschema and pydantic.

Nothing partially validated is ever returned: an outcome is either
``Valid(model_instance)`` or ``Invalid(violations)``.
"""

import copy
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar, Union

import structlog
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError as JSONSchemaError
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

logger = structlog.get_logger(__name__)

ROOT_PATH = "<root>"

ModelT = TypeVar("ModelT", bound=BaseModel)

Path = tuple[Any, ...]


@dataclass(frozen=True)
class Violation:
    """One problem found in a candidate, located by a dotted path."""

    path: str
    message: str
    keyword: str | None = None


@dataclass(frozen=True)
class Valid(Generic[ModelT]):
    value: ModelT


@dataclass(frozen=True)
class Invalid:
    violations: tuple[Violation, ...]

    def __post_init__(self) -> None:
        if not self.violations:
            raise ValueError("Invalid outcome requires at least one violation")


ValidationOutcome = Union[Valid, Invalid]


@dataclass(frozen=True)
class RecursiveField:
    """
    A self-referential model held under a top-level payload key.

    Attributes:
        root: Wire name of the payload key holding the tree (``syntaxTree``)
        node_model: Model of one node; its ``$defs`` entry is cut at ``children``
        children: Wire name of the node key holding the child list
    """

    root: str
    node_model: type[BaseModel]
    children: str = "children"

    @property
    def definition(self) -> str:
        return self.node_model.__name__


@dataclass(frozen=True)
class SchemaDescriptor(Generic[ModelT]):
    """
    Immutable description of an expected payload shape.

    Built once per endpoint and shared read-only across requests. The JSON
    Schema is derived from the pydantic model, so both passes agree on field
    names (camelCase aliases), ranges and closed vocabularies.

    With a ``tree``, ``validator`` checks the payload down to the tree root
    only, and ``node_validator`` checks a single node with its children
    required to be objects but not descended into.
    """

    name: str
    model: type[ModelT]
    json_schema: dict[str, Any]
    validator: Draft202012Validator = field(repr=False, compare=False)
    tree: Optional[RecursiveField] = None
    node_validator: Optional[Draft202012Validator] = field(
        default=None, repr=False, compare=False
    )

    @classmethod
    def from_model(
        cls,
        name: str,
        model: type[ModelT],
        extra: dict[str, Any] | None = None,
        tree: RecursiveField | None = None,
    ) -> "SchemaDescriptor[ModelT]":
        """Derive the JSON Schema from ``model``, merging optional extra keywords."""
        json_schema = model.model_json_schema(by_alias=True)
        if extra:
            json_schema = {**json_schema, **extra}
        json_schema.setdefault("$schema", "https://json-schema.org/draft/2020-12/schema")
        Draft202012Validator.check_schema(json_schema)

        payload_schema = json_schema
        node_validator = None
        if tree is not None:
            payload_schema, node_schema = _cut_recursion(json_schema, tree)
            Draft202012Validator.check_schema(node_schema)
            node_validator = Draft202012Validator(node_schema)

        return cls(
            name=name,
            model=model,
            json_schema=json_schema,
            validator=Draft202012Validator(payload_schema),
            tree=tree,
            node_validator=node_validator,
        )


def _replace_ref(schema: Any, ref: str, replacement: dict[str, Any]) -> Any:
    if isinstance(schema, dict):
        if schema.get("$ref") == ref:
            return dict(replacement)
        return {key: _replace_ref(value, ref, replacement) for key, value in schema.items()}
    if isinstance(schema, list):
        return [_replace_ref(item, ref, replacement) for item in schema]
    return schema


def _cut_recursion(
    json_schema: dict[str, Any], tree: RecursiveField
) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Return (payload schema, node schema) with the node's children reduced to
    plain objects.

    Raises:
        ValueError: The node model is not a ``$defs`` entry with ``children``
    """
    defs = json_schema.get("$defs", {})
    node_def = defs.get(tree.definition)
    if node_def is None or tree.children not in node_def.get("properties", {}):
        raise ValueError(
            f"{tree.definition!r} has no recursive {tree.children!r} property in $defs"
        )

    shallow = copy.deepcopy(node_def)
    shallow["properties"][tree.children] = _replace_ref(
        shallow["properties"][tree.children],
        f"#/$defs/{tree.definition}",
        {"type": "object"},
    )
    shallow_defs = {**defs, tree.definition: shallow}

    payload_schema = {**json_schema, "$defs": shallow_defs}
    node_schema = {"$schema": json_schema["$schema"], **shallow, "$defs": shallow_defs}
    return payload_schema, node_schema


def _field_name(model: type[BaseModel], alias: str) -> str:
    for name, info in model.model_fields.items():
        if (info.alias or name) == alias:
            return name
    raise ValueError(f"{model.__name__} has no field with wire name {alias!r}")


def _child_nodes(node: Any, path: Path, key: str) -> list[tuple[dict, Path]]:
    if not isinstance(node, dict):
        return []
    children = node.get(key)
    if not isinstance(children, list):
        return []
    return [
        (child, path + (key, index))
        for index, child in enumerate(children)
        if isinstance(child, dict)
    ]


def format_path(parts: Iterable[Any]) -> str:
    """``["quiz", 0, "options"]`` -> ``"quiz.0.options"``; empty -> ``"<root>"``."""
    joined = ".".join(str(p) for p in parts)
    return joined or ROOT_PATH


def _path_sort_key(parts: Sequence[Any]) -> tuple:
    # Ints and strings never compare directly; tag them
    return tuple((0, p, "") if isinstance(p, int) else (1, 0, str(p)) for p in parts)


def _is_type_mismatch(branch: list[JSONSchemaError]) -> bool:
    return (
        len(branch) == 1 and branch[0].validator == "type" and not branch[0].relative_path
    )


def _flatten_alternatives(error: JSONSchemaError) -> list[JSONSchemaError]:
    """
    Replace an ``anyOf``/``oneOf`` failure by the errors of its one plausible branch.

    Optional fields render as ``anyOf: [X, null]``; without this, a bad value
    deep inside X is reported only as "not valid under any of the given
    schemas" at the optional field. Branches whose only complaint is the
    instance type are dropped. When exactly one branch is left, its errors
    (flattened again) stand in for the parent; otherwise the parent is kept.
    """
    if error.validator not in ("anyOf", "oneOf") or not error.context:
        return [error]

    branches: dict[Any, list[JSONSchemaError]] = {}
    for sub in error.context:
        branches.setdefault(sub.relative_schema_path[0], []).append(sub)

    plausible = [branch for branch in branches.values() if not _is_type_mismatch(branch)]
    if len(plausible) != 1:
        return [error]
    return [leaf for sub in plausible[0] for leaf in _flatten_alternatives(sub)]


def find_cycle(candidate: Any) -> str | None:
    """
    Return the path of the first container that contains one of its own
    ancestors, or None for an acyclic tree.

    Iterative so arbitrarily deep trees never hit the recursion limit.
    Shared but acyclic references (the same dict under two siblings) pass.
    """
    on_path: set[int] = set()
    # (node, path, exiting)
    stack: list[tuple[Any, tuple, bool]] = [(candidate, (), False)]

    while stack:
        node, path, exiting = stack.pop()
        if not isinstance(node, (dict, list)):
            continue
        node_id = id(node)
        if exiting:
            on_path.discard(node_id)
            continue
        if node_id in on_path:
            return format_path(path)

        on_path.add(node_id)
        stack.append((node, path, True))
        children = node.items() if isinstance(node, dict) else enumerate(node)
        for key, child in children:
            if isinstance(child, (dict, list)):
                stack.append((child, path + (key,), False))
    return None


class SchemaValidator:
    """Validate candidates against ``SchemaDescriptor``s."""

    def validate(self, schema: SchemaDescriptor[ModelT], candidate: Any) -> ValidationOutcome:
        """
        Validate ``candidate`` and promote it to ``schema.model``.

        Returns:
            Valid(model instance) or Invalid(all violations, ordered by path)
        """
        cycle_path = find_cycle(candidate)
        if cycle_path is not None:
            return Invalid((Violation(cycle_path, "cyclic reference", "cycle"),))

        try:
            errors = self._schema_errors(schema, candidate)
        except RecursionError:
            logger.error("Schema validation exceeded recursion limit", schema=schema.name)
            return Invalid(
                (Violation(ROOT_PATH, "structure too deeply nested to validate", "depth"),)
            )

        if errors:
            violations = self._from_jsonschema(errors)
            logger.warning(
                "Schema validation failed",
                schema=schema.name,
                violation_count=len(violations),
                first_violations=[f"{v.path}: {v.message}" for v in violations[:5]],
            )
            return Invalid(violations)

        outcome = self._promote(schema, candidate)
        if isinstance(outcome, Invalid):
            logger.warning(
                "Model validation failed",
                schema=schema.name,
                violation_count=len(outcome.violations),
            )
            return outcome

        logger.debug("Schema validation passed", schema=schema.name)
        return outcome

    @staticmethod
    def _schema_errors(
        schema: SchemaDescriptor[ModelT], candidate: Any
    ) -> list[tuple[Path, JSONSchemaError]]:
        found = [((), err) for err in schema.validator.iter_errors(candidate)]
        tree = schema.tree
        if tree is None or not isinstance(candidate, dict):
            return found

        # The payload pass checked the root; queue everything below it
        pending = _child_nodes(candidate.get(tree.root), (tree.root,), tree.children)
        while pending:
            node, path = pending.pop()
            found.extend((path, err) for err in schema.node_validator.iter_errors(node))
            pending.extend(_child_nodes(node, path, tree.children))
        return found

    def _promote(self, schema: SchemaDescriptor[ModelT], candidate: Any) -> ValidationOutcome:
        tree = schema.tree
        deferred = (
            tree is not None
            and isinstance(candidate, dict)
            and candidate.get(tree.root) is not None
        )
        payload = {**candidate, tree.root: None} if deferred else candidate

        try:
            value = schema.model.model_validate(payload)
        except PydanticValidationError as e:
            return Invalid(self._from_pydantic(e))

        if deferred:
            built = self._build_tree(candidate[tree.root], tree)
            if isinstance(built, Invalid):
                return built
            setattr(value, _field_name(schema.model, tree.root), built)
        return Valid(value)

    def _build_tree(self, root: dict, tree: RecursiveField) -> Union[BaseModel, Invalid]:
        """Promote each node without its children, then attach them bottom-up."""
        children_attr = _field_name(tree.node_model, tree.children)
        built: dict[int, BaseModel] = {}
        violations: list[Violation] = []
        # (node, path, children done)
        stack: list[tuple[dict, Path, bool]] = [(root, (tree.root,), False)]

        while stack:
            node, path, ready = stack.pop()
            if not ready:
                stack.append((node, path, True))
                stack.extend(
                    (child, child_path, False)
                    for child, child_path in _child_nodes(node, path, tree.children)
                )
                continue

            try:
                model = tree.node_model.model_validate({**node, tree.children: None})
            except PydanticValidationError as e:
                violations.extend(self._from_pydantic(e, path))
                continue

            children = node.get(tree.children)
            if isinstance(children, list) and not violations:
                setattr(model, children_attr, [built[id(child)] for child in children])
            built[id(node)] = model

        if violations:
            ordered = sorted(
                violations,
                key=lambda v: _path_sort_key(
                    [int(p) if p.isdigit() else p for p in v.path.split(".")]
                ),
            )
            return Invalid(tuple(ordered))
        return built[id(root)]

    @staticmethod
    def _from_jsonschema(errors: list[tuple[Path, JSONSchemaError]]) -> tuple[Violation, ...]:
        leaves = [
            (prefix + tuple(leaf.absolute_path), leaf)
            for prefix, err in errors
            for leaf in _flatten_alternatives(err)
        ]
        ordered = sorted(leaves, key=lambda item: (_path_sort_key(item[0]), item[1].message))
        return tuple(
            Violation(format_path(path), leaf.message, leaf.validator) for path, leaf in ordered
        )

    @staticmethod
    def _from_pydantic(
        error: PydanticValidationError, prefix: Path = ()
    ) -> tuple[Violation, ...]:
        details = sorted(error.errors(), key=lambda err: _path_sort_key(list(err["loc"])))
        return tuple(
            Violation(format_path(prefix + tuple(err["loc"])), err["msg"], err["type"])
            for err in details
        )
