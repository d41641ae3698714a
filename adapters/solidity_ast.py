"""
adapters/solidity_ast.py

Typed view over the JSON AST emitted by solidity-parser-antlr (and its
Python port). Every node carries a `type` key; a callable discriminator
picks the model for the kinds the Solidity adapter inspects and falls
back to an opaque node for everything else (expressions, pragmas, ...).

Field names are snake_case; the camelCase keys of the parser output are
accepted through aliases, so `SourceUnit.model_validate(raw_dict)` works
on parser output directly.
"""

from __future__ import annotations

from typing import Annotated, Any, List, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Discriminator, Tag
from pydantic.alias_generators import to_camel


class Node(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    type: str


def node_kind(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        return value.get("type")
    return getattr(value, "type", None)


# ---------------------------------------------------------------------------
# Type names
# ---------------------------------------------------------------------------

class ElementaryTypeName(Node):
    name: str


class UserDefinedTypeName(Node):
    name_path: Optional[str] = None


class ArrayTypeName(Node):
    base_type_name: TypeName


class Mapping(Node):
    key_type: TypeName
    value_type: TypeName


class FunctionTypeName(Node):
    parameter_types: List[AstNode] = []
    return_types: List[AstNode] = []
    visibility: Optional[str] = None
    state_mutability: Optional[str] = None


class UnknownTypeName(Node):
    """A type-name kind this adapter does not render."""


_TYPE_NAME_KINDS = {
    "ElementaryTypeName",
    "UserDefinedTypeName",
    "ArrayTypeName",
    "Mapping",
    "FunctionTypeName",
}


def _type_name_tag(value: Any) -> str:
    kind = node_kind(value)
    return kind if kind in _TYPE_NAME_KINDS else "Unknown"


TypeName = Annotated[
    Union[
        Annotated[ElementaryTypeName, Tag("ElementaryTypeName")],
        Annotated[UserDefinedTypeName, Tag("UserDefinedTypeName")],
        Annotated[ArrayTypeName, Tag("ArrayTypeName")],
        Annotated[Mapping, Tag("Mapping")],
        Annotated[FunctionTypeName, Tag("FunctionTypeName")],
        Annotated[UnknownTypeName, Tag("Unknown")],
    ],
    Discriminator(_type_name_tag),
]


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

class Declaration(Node):
    """Shared shape of VariableDeclaration and Parameter."""

    name: Optional[str] = None
    type_name: Optional[TypeName] = None
    visibility: Optional[str] = None
    is_state_var: bool = False


class VariableDeclaration(Declaration):
    pass


class Parameter(Declaration):
    pass


class ParameterList(Node):
    parameters: List[Optional[AstNode]] = []


def _coerce_parameter_list(value: Any) -> Any:
    # Newer parser releases emit parameters as a bare list.
    if isinstance(value, list):
        return {"type": "ParameterList", "parameters": value}
    return value


Parameters = Annotated[Optional[ParameterList], BeforeValidator(_coerce_parameter_list)]


class StateVariableDeclaration(Node):
    variables: List[Optional[AstNode]] = []


class UsingForDeclaration(Node):
    library_name: Optional[str] = None
    type_name: Optional[TypeName] = None


class FunctionDefinition(Node):
    name: Optional[str] = None
    parameters: Parameters = None
    return_parameters: Parameters = None
    body: Optional[Block] = None
    visibility: Optional[str] = None
    state_mutability: Optional[str] = None
    is_constructor: bool = False


class ModifierDefinition(Node):
    name: Optional[str] = None
    parameters: Parameters = None
    body: Optional[Block] = None


class EventDefinition(Node):
    name: Optional[str] = None
    parameters: Parameters = None
    is_anonymous: bool = False


class StructDefinition(Node):
    name: str
    members: List[Optional[AstNode]] = []


class EnumValue(Node):
    name: str


class EnumDefinition(Node):
    name: str
    members: List[EnumValue] = []


class InheritanceSpecifier(Node):
    base_name: UserDefinedTypeName


class ContractDefinition(Node):
    name: str
    kind: str
    base_contracts: List[InheritanceSpecifier] = []
    sub_nodes: List[AstNode] = []


class ImportDirective(Node):
    path: Optional[str] = None


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

class Block(Node):
    statements: List[Optional[AstNode]] = []


class VariableDeclarationStatement(Node):
    variables: List[Optional[AstNode]] = []


class ForStatement(Node):
    body: Optional[AstNode] = None


class WhileStatement(Node):
    body: Optional[AstNode] = None


class DoWhileStatement(Node):
    body: Optional[AstNode] = None


class IfStatement(Node):
    true_body: Optional[AstNode] = None
    false_body: Optional[AstNode] = None


class OtherNode(Node):
    """Any node kind the adapter does not look inside."""


class SourceUnit(Node):
    children: List[AstNode] = []


_NODE_MODELS = {
    model.__name__: model
    for model in (
        ElementaryTypeName,
        UserDefinedTypeName,
        ArrayTypeName,
        Mapping,
        FunctionTypeName,
        VariableDeclaration,
        Parameter,
        ParameterList,
        StateVariableDeclaration,
        UsingForDeclaration,
        FunctionDefinition,
        ModifierDefinition,
        EventDefinition,
        StructDefinition,
        EnumDefinition,
        ContractDefinition,
        ImportDirective,
        Block,
        VariableDeclarationStatement,
        ForStatement,
        WhileStatement,
        DoWhileStatement,
        IfStatement,
        SourceUnit,
    )
}


def _ast_node_tag(value: Any) -> str:
    kind = node_kind(value)
    return kind if kind in _NODE_MODELS else "Other"


AstNode = Annotated[
    Union[
        tuple(Annotated[model, Tag(kind)] for kind, model in _NODE_MODELS.items())
        + (Annotated[OtherNode, Tag("Other")],)
    ],
    Discriminator(_ast_node_tag),
]


for _model in (*_NODE_MODELS.values(), Declaration, OtherNode, UnknownTypeName):
    _model.model_rebuild()
