import networkx as nx # type: ignore
from typing import Any, Dict, List

class CIRGraph:
    """
    Typed multi-graph view over parsed class models.
    Nodes: TypeDecl, Field, Method, Parameter
    Edges: HAS_FIELD, HAS_METHOD, PARAM_OF, INHERITS, ASSOCIATES, DEPENDS_ON

    Relationship edges carry the association's reference_type; units that
    failed to parse are listed under g.graph["parse_errors"].
    """
    def __init__(self) -> None:
        self.g = nx.MultiDiGraph()

    def add_node(self, node_id: str, kind: str, payload: Dict[str, Any]) -> None:
        self.g.add_node(node_id, kind=kind, payload=payload)

    def add_edge(self, src: str, dst: str, etype: str, **attrs: Any) -> None:
        """attrs are stored on the edge next to etype, e.g. reference_type="storage"."""
        self.g.add_edge(src, dst, etype=etype, **attrs)

    def has_node(self, node_id: str) -> bool:
        return self.g.has_node(node_id)

    def nodes_of_kind(self, kind: str) -> Dict[str, Any]:
        return {
            node_id: data.get("payload")
            for node_id, data in self.g.nodes(data=True)
            if data.get("kind") == kind
        }

    def to_debug_json(self) -> Dict[str, Any]:
        """
        JSON-ready dump used by POST /parse/cir.

        Node payloads become "attrs". An edge gets an "attrs" entry only
        when it carries more than its type (relationship edges carry
        reference_type). "parse_errors" lists the units that were skipped
        by build_cir_graph_for_units, empty for a single unit.
        """
        nodes = [
            {"id": node_id, "kind": data.get("kind"), "attrs": dict(data.get("payload") or {})}
            for node_id, data in self.g.nodes(data=True)
        ]

        edges: List[Dict[str, Any]] = []
        for src, dst, data in self.g.edges(data=True):
            extra = {k: v for k, v in data.items() if k != "etype"}
            edge: Dict[str, Any] = {"src": src, "dst": dst, "type": data.get("etype")}
            if extra:
                edge["attrs"] = extra
            edges.append(edge)

        return {
            "nodes": nodes,
            "edges": edges,
            "parse_errors": list(self.g.graph.get("parse_errors", [])),
        }
