"""
adapters/solidity_adapter.py

Solidity AST → class models (and CIRGraph).

Takes the AST produced by solidity-parser-antlr for one source file and
builds one ClassModel per contract / interface / library with:

  - attributes (state variables) and operators (functions, modifiers, events)
  - structs and enums
  - associations: realizations from the base-contract list, storage
    references from state variables, memory references from parameters,
    locals, using-for and nested type references

Associations are found structurally: declarations, blocks and
loop / if bodies are walked for type names, expressions are not.
Import directives are not followed; targets stay bare names.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import config
from adapters.solidity_ast import (
    ArrayTypeName,
    Block,
    ContractDefinition,
    Declaration,
    DoWhileStatement,
    ElementaryTypeName,
    EnumDefinition,
    EventDefinition,
    ForStatement,
    FunctionDefinition,
    FunctionTypeName,
    IfStatement,
    ImportDirective,
    Mapping,
    ModifierDefinition,
    ParameterList,
    SourceUnit,
    StateVariableDeclaration,
    StructDefinition,
    UserDefinedTypeName,
    UsingForDeclaration,
    VariableDeclarationStatement,
    WhileStatement,
    node_kind,
)
from cir.graph import CIRGraph
from cir.model import (
    Attribute,
    ClassModel,
    ClassStereotype,
    Operator,
    OperatorParameter,
    Visibility,
)
from errors import (
    NotASourceUnitError,
    StructuralError,
    UnknownDeclarationKindError,
    UnknownTypeNameKindError,
    UnknownVisibilityError,
)
from logging_config import get_logger

logger = get_logger("solidity")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_CONTRACT_KINDS: dict[str, ClassStereotype] = {
    "contract": "none",
    "interface": "interface",
    "library": "library",
}

_VISIBILITIES: dict[str, Visibility] = {
    "default": "public",
    "public": "public",
    "external": "external",
    "internal": "internal",
    "private": "private",
}

# TypeDecl kind shown in the CIR graph for each class stereotype
_TYPE_DECL_KINDS = {
    "none": "contract",
    "interface": "interface",
    "library": "library",
    "abstract": "abstract",
}


# ---------------------------------------------------------------------------
# Helpers: keywords and names
# ---------------------------------------------------------------------------

def parse_contract_kind(kind: Optional[str]) -> ClassStereotype:
    try:
        return _CONTRACT_KINDS[kind]
    except KeyError:
        raise UnknownDeclarationKindError(kind) from None


def parse_visibility(visibility: Optional[str]) -> Visibility:
    try:
        return _VISIBILITIES[visibility]
    except KeyError:
        raise UnknownVisibilityError(visibility) from None


def parse_class_name(raw_class_name: Any) -> str:
    """
    Library types can be referenced with a dot, e.g. Set.Data.
    Returns the part before the first dot, or "" for a missing name.
    """
    if not raw_class_name or not isinstance(raw_class_name, str):
        return ""
    return raw_class_name.split(".")[0]


def parse_payable(state_mutability: Optional[str]) -> bool:
    return state_mutability == "payable"


# ---------------------------------------------------------------------------
# Helpers: type names → display strings
# ---------------------------------------------------------------------------

def parse_type_name(type_name: Any) -> str:
    """
    Render a type-name node:
      uint256, Lib.Data, Foo[], mapping(address=>Foo[]),
      function(uint256,address) returns (bool)
    """
    match type_name:
        case ElementaryTypeName(name=name):
            return name
        case UserDefinedTypeName(name_path=name_path):
            return name_path or ""
        case ArrayTypeName(base_type_name=base_type_name):
            return parse_type_name(base_type_name) + "[]"
        case Mapping(key_type=key_type, value_type=value_type):
            return config.MAPPING_TEMPLATE.format(
                key=parse_type_name(key_type),
                value=parse_type_name(value_type),
            )
        case FunctionTypeName(parameter_types=parameter_types, return_types=return_types):
            rendered = f"function({_join_types(parameter_types)})"
            if return_types:
                rendered += f" returns ({_join_types(return_types)})"
            return rendered
        case _:
            raise UnknownTypeNameKindError(node_kind(type_name))


def _join_types(declarations: Sequence[Any]) -> str:
    return ",".join(
        parse_type_name(d.type_name) for d in declarations if isinstance(d, Declaration)
    )


def parse_parameters(params: Optional[ParameterList]) -> List[OperatorParameter]:
    if params is None:
        return []
    parameters: List[OperatorParameter] = []
    for param in params.parameters:
        if not isinstance(param, Declaration):
            continue
        parameters.append(
            OperatorParameter(name=param.name, type=parse_type_name(param.type_name))
        )
    return parameters


def _statements_of(body: Any) -> Optional[List[Any]]:
    # Loop / if bodies are only walked when they are blocks.
    if isinstance(body, Block):
        return body.statements
    return None


# ---------------------------------------------------------------------------
# Main adapter class
# ---------------------------------------------------------------------------

class SolidityAdapter:
    """
    Solidity AST → ClassModel list / CIRGraph.

    Public API:
      parse_ast(node, source_file)               → List[ClassModel]
      build_cir_graph(class_models)               → CIRGraph
      build_cir_graph_for_ast(node, source_file)  → CIRGraph
      build_cir_graph_for_units(units)            → CIRGraph  (multi-file)
    """

    language = "solidity"

    def __init__(self, stop_at_elided_slot: bool = False) -> None:
        # Elided tuple slots (`var (a,,c) = f();`) show up as None in variable lists.
        # False: skip the slot and keep walking. True: stop at the first slot.
        self.stop_at_elided_slot = stop_at_elided_slot

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def parse_ast(self, node: Any, source_file: Optional[str] = None) -> List[ClassModel]:
        """
        Build one ClassModel per top-level contract-like declaration.

        `node` is the raw parser output (dict) or an already validated
        SourceUnit. Raises a StructuralError subclass for AST shapes the
        adapter does not support; the whole unit is abandoned.
        """
        kind = node_kind(node)
        if kind != "SourceUnit":
            raise NotASourceUnitError(kind, source_file)

        unit = node if isinstance(node, SourceUnit) else SourceUnit.model_validate(node)

        class_models: List[ClassModel] = []
        try:
            for child in unit.children:
                match child:
                    case ContractDefinition():
                        logger.debug(f"Adding contract {child.name}")
                        class_model = ClassModel(name=child.name, source_file=source_file)
                        self._parse_contract_definition(class_model, child)
                        class_models.append(class_model)
                    case ImportDirective():
                        logger.debug(f"Not following import {child.path} from {source_file}")
                    case _:
                        pass
        except StructuralError as e:
            if e.source_file is None:
                e.source_file = source_file
            raise

        return class_models

    def build_cir_graph_for_ast(self, node: Any, source_file: Optional[str] = None) -> CIRGraph:
        """Single-unit parse → CIR."""
        return self.build_cir_graph(self.parse_ast(node, source_file))

    def build_cir_graph_for_units(self, units: Iterable[Tuple[Any, Optional[str]]]) -> CIRGraph:
        """
        Multi-unit CIRGraph builder over (ast, source_file) pairs.
        Skips units that fail to parse but continues with the rest.
        """
        class_models: List[ClassModel] = []
        errors: List[dict] = []

        for node, source_file in units:
            try:
                class_models.extend(self.parse_ast(node, source_file))
            except ValueError as e:
                logger.warning(f"Skipping {source_file}: {e}")
                errors.append({"file": source_file, "error": str(e)})

        graph = self.build_cir_graph(class_models)
        graph.g.graph["parse_errors"] = errors
        return graph

    # ------------------------------------------------------------------
    # Contract body
    # ------------------------------------------------------------------

    def _parse_contract_definition(self, class_model: ClassModel, node: ContractDefinition) -> None:
        class_model.stereotype = parse_contract_kind(node.kind)

        for base in node.base_contracts:
            class_model.add_association(base.base_name.name_path, "storage", realization=True)

        for sub_node in node.sub_nodes:
            self._classify_member(class_model, sub_node)
            self._add_member_associations(class_model, sub_node)

    def _classify_member(self, class_model: ClassModel, sub_node: Any) -> None:
        match sub_node:
            case StateVariableDeclaration():
                for variable in sub_node.variables:
                    if not isinstance(variable, Declaration):
                        continue
                    class_model.attributes.append(
                        Attribute(
                            name=variable.name,
                            type=parse_type_name(variable.type_name),
                            visibility=parse_visibility(variable.visibility),
                        )
                    )

            case UsingForDeclaration():
                class_model.add_association(sub_node.library_name, "memory")

            case FunctionDefinition():
                class_model.operators.append(self._function_operator(sub_node))
                # No body: either an interface or an abstract contract
                if sub_node.body is None and class_model.stereotype != "interface":
                    class_model.stereotype = "abstract"

            case ModifierDefinition():
                class_model.operators.append(
                    Operator(
                        name=sub_node.name,
                        stereotype="modifier",
                        parameters=parse_parameters(sub_node.parameters),
                    )
                )

            case EventDefinition():
                class_model.operators.append(
                    Operator(
                        name=sub_node.name,
                        stereotype="event",
                        parameters=parse_parameters(sub_node.parameters),
                    )
                )

            case StructDefinition():
                # Redeclared names overwrite the earlier struct
                class_model.structs[sub_node.name] = [
                    OperatorParameter(name=member.name, type=parse_type_name(member.type_name))
                    for member in sub_node.members
                    if isinstance(member, Declaration)
                ]

            case EnumDefinition():
                class_model.enums[sub_node.name] = [member.name for member in sub_node.members]

            case _:
                pass

    def _function_operator(self, node: FunctionDefinition) -> Operator:
        parameters = parse_parameters(node.parameters)

        if node.is_constructor:
            return Operator(name="constructor", stereotype="none", parameters=parameters)

        if not node.name:
            return Operator(
                name="",
                stereotype="fallback",
                parameters=parameters,
                is_payable=parse_payable(node.state_mutability),
            )

        stereotype = "none"
        if node.body is None:
            stereotype = "abstract"
        elif node.state_mutability == "payable":
            stereotype = "payable"

        return Operator(
            name=node.name,
            stereotype=stereotype,
            visibility=parse_visibility(node.visibility),
            parameters=parameters,
            return_parameters=parse_parameters(node.return_parameters),
        )

    def _add_member_associations(self, class_model: ClassModel, sub_node: Any) -> None:
        match sub_node:
            case StateVariableDeclaration():
                self.add_associations(sub_node.variables, class_model)

            case FunctionDefinition() | ModifierDefinition():
                if sub_node.parameters is not None:
                    self.add_associations(sub_node.parameters.parameters, class_model)
                if isinstance(sub_node, FunctionDefinition) and sub_node.return_parameters is not None:
                    self.add_associations(sub_node.return_parameters.parameters, class_model)
                if isinstance(sub_node, FunctionDefinition) and sub_node.body is not None:
                    self.add_associations(sub_node.body.statements, class_model)

            case EventDefinition():
                if sub_node.parameters is not None:
                    self.add_associations(sub_node.parameters.parameters, class_model)

            case StructDefinition():
                self.add_associations(sub_node.members, class_model)

            case _:
                # using-for adds its association while classifying; enums reference no types
                pass

    # ------------------------------------------------------------------
    # Association walker
    # ------------------------------------------------------------------

    def add_associations(self, nodes: Any, class_model: ClassModel) -> None:
        """
        Recursively walk AST nodes and add an association for every
        user-defined type they mention.

        None entries are elided tuple slots, e.g. `var (lad,,,) = tub.cups(cup);`
        """
        if not isinstance(nodes, (list, tuple)):
            logger.warning(
                f"Can not recursively parse AST nodes for associations of {class_model.name}. "
                f"Invalid nodes array: {type(nodes).__name__}"
            )
            return

        for node in nodes:
            if node is None:
                if self.stop_at_elided_slot:
                    break
                continue

            match node:
                case Declaration():
                    match node.type_name:
                        case UserDefinedTypeName(name_path=name_path):
                            reference_type = "storage" if node.is_state_var else "memory"
                            class_model.add_association(parse_class_name(name_path), reference_type)
                        case Mapping(key_type=key_type, value_type=value_type):
                            self.add_associations([key_type], class_model)
                            self.add_associations([value_type], class_model)
                        case _:
                            pass

                case UserDefinedTypeName():
                    class_model.add_association(node.name_path, "memory")

                case Block():
                    self.add_associations(node.statements, class_model)

                case StateVariableDeclaration() | VariableDeclarationStatement():
                    self.add_associations(node.variables, class_model)

                case ForStatement() | WhileStatement() | DoWhileStatement():
                    self.add_associations(_statements_of(node.body), class_model)

                case IfStatement():
                    true_statements = _statements_of(node.true_body)
                    if true_statements is not None:
                        self.add_associations(true_statements, class_model)
                    false_statements = _statements_of(node.false_body)
                    if false_statements is not None:
                        self.add_associations(false_statements, class_model)

                case _:
                    pass

    # ------------------------------------------------------------------
    # CIRGraph view
    # ------------------------------------------------------------------

    def build_cir_graph(self, class_models: Iterable[ClassModel]) -> CIRGraph:
        """
        Project class models onto a CIRGraph, one TypeDecl per class name
        (the last model with a given name wins).

        Association edges are only drawn to classes present in the same
        graph: INHERITS for realizations, ASSOCIATES for storage and
        DEPENDS_ON for memory references.
        """
        graph = CIRGraph()

        # A class name declared again in a later unit replaces the earlier
        # declaration, so its members never mix.
        latest: Dict[str, ClassModel] = {}
        for class_model in class_models:
            latest[class_model.name] = class_model

        for class_model in latest.values():
            self._add_class_nodes(graph, class_model)

        for class_model in latest.values():
            self._add_relationship_edges(graph, class_model)

        return graph

    def _add_class_nodes(self, graph: CIRGraph, class_model: ClassModel) -> None:
        type_id = f"type:{class_model.name}"
        graph.add_node(
            type_id,
            "TypeDecl",
            {
                "name": class_model.name,
                "kind": _TYPE_DECL_KINDS[class_model.stereotype],
                "source_file": class_model.source_file,
                "structs": {
                    name: [{"name": m.name, "type": m.type} for m in members]
                    for name, members in class_model.structs.items()
                },
                "enums": {name: list(values) for name, values in class_model.enums.items()},
            },
        )

        for attribute in class_model.attributes:
            field_id = f"field:{class_model.name}:{attribute.name}"
            graph.add_node(
                field_id,
                "Field",
                {"name": attribute.name, "type": attribute.type, "visibility": attribute.visibility},
            )
            graph.add_edge(type_id, field_id, "HAS_FIELD")

        # Overloads and fallbacks share names, so ids carry the declaration index
        for index, operator in enumerate(class_model.operators):
            method_id = f"method:{class_model.name}:{index}:{operator.name}"
            graph.add_node(
                method_id,
                "Method",
                {
                    "name": operator.name,
                    "stereotype": operator.stereotype,
                    "visibility": operator.visibility,
                    "is_payable": operator.is_payable,
                    "return_types": [p.type for p in operator.return_parameters or []],
                },
            )
            graph.add_edge(type_id, method_id, "HAS_METHOD")

            for position, param in enumerate(operator.parameters):
                param_id = f"param:{class_model.name}:{index}:{position}"
                graph.add_node(param_id, "Parameter", {"name": param.name, "type": param.type})
                graph.add_edge(param_id, method_id, "PARAM_OF")

    def _add_relationship_edges(self, graph: CIRGraph, class_model: ClassModel) -> None:
        src_id = f"type:{class_model.name}"

        for association in class_model.associations:
            target_id = f"type:{association.target_class_name}"
            if target_id == src_id or not graph.has_node(target_id):
                continue

            if association.realization:
                etype = "INHERITS"
            elif association.reference_type == "storage":
                etype = "ASSOCIATES"
            else:
                etype = "DEPENDS_ON"

            graph.add_edge(src_id, target_id, etype, reference_type=association.reference_type)
