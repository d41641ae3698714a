from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Literal, Optional

Visibility = Literal["public", "external", "internal", "private"]
ClassStereotype = Literal["none", "interface", "library", "abstract"]
OperatorStereotype = Literal["none", "abstract", "payable", "fallback", "modifier", "event"]
ReferenceType = Literal["storage", "memory"]

@dataclass
class Attribute:
    name: str
    type: str                 # normalized type string (e.g. mapping(address=>uint256))
    visibility: Visibility = "public"

@dataclass
class OperatorParameter:
    name: Optional[str]       # unnamed parameters are allowed (e.g. returns (uint256))
    type: str

@dataclass
class Operator:
    name: str
    stereotype: OperatorStereotype = "none"
    visibility: Optional[Visibility] = None   # events and modifiers have none
    parameters: List[OperatorParameter] = field(default_factory=list)
    return_parameters: Optional[List[OperatorParameter]] = None
    is_payable: bool = False  # only meaningful for fallback operators

@dataclass(frozen=True)
class Association:
    target_class_name: str
    reference_type: ReferenceType
    realization: bool = False

@dataclass
class ClassModel:
    """
    One contract / interface / library.
    Built in a single pass by the adapter; associations are kept in
    discovery order and may repeat.
    """
    name: str
    source_file: Optional[str] = None
    stereotype: ClassStereotype = "none"
    attributes: List[Attribute] = field(default_factory=list)
    operators: List[Operator] = field(default_factory=list)
    structs: Dict[str, List[OperatorParameter]] = field(default_factory=dict)
    enums: Dict[str, List[str]] = field(default_factory=dict)
    associations: List[Association] = field(default_factory=list)

    def add_association(
        self,
        target_class_name: Optional[str],
        reference_type: ReferenceType,
        realization: bool = False,
    ) -> Association:
        association = Association(
            target_class_name=target_class_name or "",
            reference_type=reference_type,
            realization=realization,
        )
        self.associations.append(association)
        return association

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
