import dataclasses
import json
from typing import Any, Dict, List, Optional, Union

# --- Tokens ---
LPAREN = '('
RPAREN = ')'


# --- Nodes ---
@dataclasses.dataclass
class Node:
    """
    One parenthesized list.
    Children are atoms (plain strings) or nested Nodes owned by this node.
    `parent` is the index of the enclosing node in the owning Tree, never a reference.
    """
    index: int
    parent: Optional[int] = None
    children: List['Child'] = dataclasses.field(default_factory=list)

    @property
    def head(self) -> Optional[str]:
        """The leading atom, or None for empty lists and lists starting with a list."""
        if self.children and isinstance(self.children[0], str):
            return self.children[0]
        return None

    @property
    def arguments(self) -> List['Child']:
        return self.children[1:]

    def is_empty(self) -> bool:
        return not self.children


Child = Union[str, Node]


@dataclasses.dataclass
class Tree:
    """Arena of nodes. Index 0 is always the root."""
    nodes: List[Node] = dataclasses.field(default_factory=list)

    def __post_init__(self):
        if not self.nodes:
            self.nodes.append(Node(index=0))

    @property
    def root(self) -> Node:
        return self.nodes[0]

    def new_node(self, parent: Node) -> Node:
        """Creates a node, appends it as the last child of `parent` and returns it."""
        node = Node(index=len(self.nodes), parent=parent.index)
        self.nodes.append(node)
        parent.children.append(node)
        return node

    def parent_of(self, node: Node) -> Optional[Node]:
        if node.parent is None:
            return None
        return self.nodes[node.parent]


# --- Traversal helpers ---
def flatten(tree: Tree) -> List[str]:
    """Returns the token stream the tree was built from (blank tokens excluded)."""
    tokens: List[str] = []

    def walk(node: Node) -> None:
        for child in node.children:
            if isinstance(child, Node):
                tokens.append(LPAREN)
                walk(child)
                tokens.append(RPAREN)
            else:
                tokens.append(child)

    walk(tree.root)
    return tokens


def to_data(node: Node) -> Dict[str, Any]:
    """JSON-ready form of a node: {"children": [atom | {...}, ...]}."""
    return {
        "children": [to_data(c) if isinstance(c, Node) else c for c in node.children]
    }


def dump_ast(tree: Tree) -> str:
    return json.dumps(to_data(tree.root), indent="\t")


def print_ast(node: Union[Tree, Node], indent: str = "") -> None:
    """Recursively prints the tree structure."""
    if isinstance(node, Tree):
        print(f"{indent}Tree ({len(node.nodes)} nodes):")
        print_ast(node.root, indent + "  ")
        return
    print(f"{indent}Node #{node.index}:")
    for child in node.children:
        if isinstance(child, Node):
            print_ast(child, indent + "  ")
        else:
            print(f"{indent}  Atom: {child}")
