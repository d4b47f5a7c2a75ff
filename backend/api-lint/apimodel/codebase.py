import networkx as nx # type: ignore
from typing import Any, Dict, List, Optional

from apimodel.model import Annotation, ClassItem, FieldItem, MethodItem, ParameterItem


class Codebase:
    """
    Read-only API surface, held as a typed multi-graph.
    Nodes: ClassItem, MethodItem, FieldItem, ParameterItem
    Edges: HAS_METHOD, HAS_FIELD (class -> member),
           NESTED_IN (inner class -> outer class),
           PARAM_OF (parameter -> method)
    """
    def __init__(self) -> None:
        self.g = nx.MultiDiGraph()
        self.parse_errors: List[Dict[str, str]] = []
        self._classes_by_name: Dict[str, ClassItem] = {}

    def add_node(self, node_id: str, kind: str, payload: Any) -> None:
        self.g.add_node(node_id, kind=kind, payload=payload)
        if isinstance(payload, ClassItem):
            self._classes_by_name[payload.qualified_name()] = payload

    def add_edge(self, src: str, dst: str, etype: str) -> None:
        self.g.add_edge(src, dst, etype=etype)

    # ---------------- Queries ----------------

    def node(self, node_id: str) -> Any:
        return self.g.nodes[node_id]["payload"]

    def _out(self, src: str, etype: str) -> List[Any]:
        return [self.node(dst) for _, dst, data in self.g.out_edges(src, data=True) if data.get("etype") == etype]

    def _in(self, dst: str, etype: str) -> List[Any]:
        return [self.node(src) for src, _, data in self.g.in_edges(dst, data=True) if data.get("etype") == etype]

    def classes(self) -> List[ClassItem]:
        """Top-level classes ordered by qualified name."""
        top = [
            data["payload"]
            for _, data in self.g.nodes(data=True)
            if data.get("kind") == "Class" and data["payload"].containing_class is None
        ]
        return sorted(top, key=lambda c: c.qualified_name())

    def methods_of(self, cls: ClassItem) -> List[MethodItem]:
        return self._out(cls.id, "HAS_METHOD")

    def fields_of(self, cls: ClassItem) -> List[FieldItem]:
        return self._out(cls.id, "HAS_FIELD")

    def nested_classes_of(self, cls: ClassItem) -> List[ClassItem]:
        return self._in(cls.id, "NESTED_IN")

    def parameters_of(self, method: MethodItem) -> List[ParameterItem]:
        return sorted(self._in(method.id, "PARAM_OF"), key=lambda p: p.index)

    def find_class(self, qualified_name: str) -> Optional[ClassItem]:
        return self._classes_by_name.get(qualified_name)

    def resolve_annotation(self, annotation: Annotation) -> Optional[ClassItem]:
        """
        Map an annotation use to the annotation type declared in this
        codebase, or None when the type lives outside it.
        """
        for name in annotation.lookup_names or (annotation.qualified_name,):
            cls = self._classes_by_name.get(name)
            if cls is not None:
                return cls
        return None

    def to_debug_json(self) -> Dict[str, Any]:
        """
        Convert graph to JSON-like dict for debugging / API responses.
        Back-references are dropped, only plain attributes are kept.
        """
        nodes = []
        for node_id, data in self.g.nodes(data=True):
            payload = data.get("payload")
            attrs = {
                k: v for k, v in vars(payload).items()
                if k not in ("unit", "containing_class", "containing_method")
            }
            attrs["annotations"] = [a.qualified_name for a in payload.annotations]
            attrs["qualified_name"] = payload.qualified_name()
            nodes.append({
                "id": node_id,
                "kind": data.get("kind"),
                "attrs": attrs,
            })

        edges = []
        for src, dst, data in self.g.edges(data=True):
            edges.append({
                "src": src,
                "dst": dst,
                "type": data.get("etype"),
            })

        return {"nodes": nodes, "edges": edges, "parse_errors": list(self.parse_errors)}
