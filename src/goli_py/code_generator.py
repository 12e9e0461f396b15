import sys
from typing import List, Optional, Sequence, Union

from .ast_nodes import Child, Node, Tree
from .forms import (
    DEFAULT_REGISTRY, CallForm, CodeGenerationError, DefnForm, Form, FormRegistry,
    ImportForm, PackageForm,
)

INDENT = "\t"


class GoCodeGenerator:
    """
    Generates Go source text from a parsed goli tree.
    Each list is classified into a form variant by the registry and emitted
    by the matching visit_<Variant> method. Output follows source order.
    """
    def __init__(self, registry: Optional[FormRegistry] = None):
        self.registry = registry if registry is not None else DEFAULT_REGISTRY
        self._path: List[str] = []

    def generate(self, node: Union[Tree, Node]) -> str:
        """Public entry point; returns the Go text for a tree or a single list."""
        self._path = []
        if isinstance(node, Tree):
            declarations = self.generate_sequence(node.root.children)
        elif node.head is not None:
            declarations = [self.generate_statement(node)]
        else:
            declarations = self.generate_sequence(node.children)
        if not declarations:
            return ""
        return "\n\n".join(declarations) + "\n"

    def generate_sequence(self, children: Sequence[Child]) -> List[str]:
        """
        Generates a run of statements. A list starting with another list only
        groups statements, so its children are generated in place.
        """
        statements: List[str] = []
        for child in children:
            if child is None:
                print("Warning: skipping missing child", file=sys.stderr)
                continue
            if not isinstance(child, Node):
                raise CodeGenerationError(f"unexpected atom {child!r} outside of a list",
                                          path=tuple(self._path))
            if child.is_empty():
                print("Warning: skipping empty list", file=sys.stderr)
                continue
            if child.head is None:
                statements.extend(self.generate_sequence(child.children))
            else:
                statements.append(self.generate_statement(child))
        return statements

    def generate_statement(self, node: Node) -> str:
        self._path.append(node.head)
        try:
            form = self.registry.classify(node)
            return self.visit(form)
        except CodeGenerationError as e:
            if e.path is None:
                e.path = tuple(self._path)
            raise
        finally:
            self._path.pop()

    def visit(self, form: Form) -> str:
        method_name = f'visit_{type(form).__name__}'
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(form)

    def generic_visit(self, form: Form) -> str:
        raise CodeGenerationError(f"Code generation not implemented for form: {type(form).__name__}")

    # --- Visitor Methods for Specific Forms ---

    def visit_PackageForm(self, form: PackageForm) -> str:
        return f"package {form.name}"

    def visit_ImportForm(self, form: ImportForm) -> str:
        lines = ["import ("]
        lines.extend(f"{INDENT}{spec}" for spec in form.specs)
        lines.append(")")
        return "\n".join(lines)

    def visit_DefnForm(self, form: DefnForm) -> str:
        params = ", ".join(str(p) for p in form.params)
        return_type = f" {form.return_type}" if form.return_type else ""
        lines = [f"func {form.name}({params}){return_type} {{"]

        # Only the first line is indented so multi-line literals keep their exact text
        for statement in self.generate_sequence(form.body):
            lines.append(f"{INDENT}{statement}")
        lines.append("}")
        return "\n".join(lines)

    def visit_CallForm(self, form: CallForm) -> str:
        args = ", ".join(self.generate_expression(arg) for arg in form.args)
        return f"{form.target}({args})"

    # --- Expressions ---

    def generate_expression(self, arg: Union[str, Node]) -> str:
        """Renders a call argument: atoms verbatim, nested lists as calls."""
        if isinstance(arg, str):
            return arg
        if arg.is_empty():
            raise CodeGenerationError("empty list cannot be used as an argument")
        self._path.append(arg.head or "()")
        try:
            form = self.registry.classify(arg)
            if not isinstance(form, CallForm):
                raise CodeGenerationError(f"'{arg.head}' cannot be used as an expression")
            return self.visit(form)
        except CodeGenerationError as e:
            if e.path is None:
                e.path = tuple(self._path)
            raise
        finally:
            self._path.pop()


def generate_go_code(tree: Union[Tree, Node], registry: Optional[FormRegistry] = None) -> str:
    """Helper function to generate Go code from a tree."""
    return GoCodeGenerator(registry).generate(tree)
