import dataclasses
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Type

from .ast_nodes import Child, Node

TYPE_SEPARATOR = ':'
PATH_SEPARATOR = '/'
MEMBER_SEPARATOR = '.'


# --- Errors ---

class CodeGenerationError(Exception):
    """
    Custom exception for errors during code generation.
    `path` holds the heads of the forms enclosing the failure, root first;
    the generator fills it in on the way out.
    """
    def __init__(self, message: str, path: Optional[Tuple[str, ...]] = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self):
        if self.path:
            return f"{' > '.join(self.path)}: {self.message}"
        return self.message


class FormArgumentError(CodeGenerationError):
    """A form received arguments that do not fit its shape."""
    def __init__(self, form: str, message: str):
        super().__init__(f"'{form}' {message}")
        self.form = form


class TooManyArguments(FormArgumentError):
    pass


class MissingArgument(FormArgumentError):
    pass


class MalformedTypedToken(CodeGenerationError):
    def __init__(self, token: str, message: str):
        super().__init__(f"malformed typed name {token!r}: {message}")
        self.token = token


# --- Typed names ---

@dataclasses.dataclass(frozen=True)
class TypedName:
    """A `name` or `name:type` token."""
    name: str
    type: Optional[str] = None

    def __str__(self):
        if self.type is None:
            return self.name
        return f"{self.name} {self.type}"


def parse_typed_name(token: str, type_required: bool = False) -> TypedName:
    parts = token.split(TYPE_SEPARATOR)
    if len(parts) > 2:
        raise MalformedTypedToken(token, "expected at most one ':'")
    name = parts[0]
    if not name:
        raise MalformedTypedToken(token, "name is empty")
    if len(parts) == 1:
        if type_required:
            raise MalformedTypedToken(token, "expected 'name:type'")
        return TypedName(name=name)
    if not parts[1]:
        raise MalformedTypedToken(token, "type is empty")
    return TypedName(name=name, type=parts[1])


# --- Form variants ---

def _expect_atom(form: str, arg: Child, what: str) -> str:
    if not isinstance(arg, str):
        raise FormArgumentError(form, f"expects {what} to be an atom, got a list")
    return arg


def _expect_list(form: str, arg: Child, what: str) -> Node:
    if not isinstance(arg, Node):
        raise FormArgumentError(form, f"expects {what} to be a list, got {arg!r}")
    return arg


@dataclasses.dataclass(frozen=True)
class Form:
    """Base class for all recognized list shapes."""

    @classmethod
    def from_arguments(cls, name: str, args: Sequence[Child]) -> 'Form':
        raise NotImplementedError


@dataclasses.dataclass(frozen=True)
class PackageForm(Form):
    """(package name)"""
    name: str

    @classmethod
    def from_arguments(cls, name: str, args: Sequence[Child]) -> 'PackageForm':
        if not args:
            raise MissingArgument(name, "expects a package name")
        if len(args) > 1:
            raise TooManyArguments(name, f"expects exactly 1 argument, got {len(args)}")
        return cls(name=_expect_atom(name, args[0], "the package name"))


@dataclasses.dataclass(frozen=True)
class ImportForm(Form):
    """(import (spec ...) ...); each spec list is space-joined into one import line."""
    specs: Tuple[str, ...] = ()

    @classmethod
    def from_arguments(cls, name: str, args: Sequence[Child]) -> 'ImportForm':
        specs: List[str] = []
        for arg in args:
            node = _expect_list(name, arg, "each import specification")
            if node.is_empty():
                raise MissingArgument(name, "specification lists must not be empty")
            atoms = [_expect_atom(name, c, "import specification parts") for c in node.children]
            specs.append(" ".join(atoms))
        return cls(specs=tuple(specs))


@dataclasses.dataclass(frozen=True)
class DefnForm(Form):
    """(defn name[:returnType] (param:type ...) body...)"""
    signature: TypedName
    params: Tuple[TypedName, ...]
    body: Tuple[Child, ...] = ()

    @property
    def name(self) -> str:
        return self.signature.name

    @property
    def return_type(self) -> Optional[str]:
        return self.signature.type

    @classmethod
    def from_arguments(cls, name: str, args: Sequence[Child]) -> 'DefnForm':
        if not args:
            raise MissingArgument(name, "expects a function name")
        if len(args) < 2:
            raise MissingArgument(name, "expects a parameter list after the function name")
        signature = parse_typed_name(_expect_atom(name, args[0], "the function name"))
        param_list = _expect_list(name, args[1], "the parameter list")
        params = tuple(
            parse_typed_name(_expect_atom(name, p, "each parameter"), type_required=True)
            for p in param_list.children
        )
        return cls(signature=signature, params=params, body=tuple(args[2:]))


@dataclasses.dataclass(frozen=True)
class CallForm(Form):
    """Any list whose head is not a registered form name: (callee arg...)."""
    callee: str
    args: Tuple[Child, ...] = ()

    @property
    def target(self) -> str:
        """The callee with '/' path separators turned into member access."""
        return self.callee.replace(PATH_SEPARATOR, MEMBER_SEPARATOR)

    @classmethod
    def from_arguments(cls, name: str, args: Sequence[Child]) -> 'CallForm':
        return cls(callee=name, args=tuple(args))


# --- Registry ---

class FormRegistry:
    """Read-only mapping from form name to the variant that handles it."""

    def __init__(self, forms: Mapping[str, Type[Form]]):
        self._forms: Mapping[str, Type[Form]] = MappingProxyType(dict(forms))

    def __contains__(self, name: str) -> bool:
        return name in self._forms

    def __iter__(self):
        return iter(self._forms)

    def __len__(self):
        return len(self._forms)

    def lookup(self, name: str) -> Type[Form]:
        """Returns the variant for `name`, falling back to CallForm."""
        return self._forms.get(name, CallForm)

    def classify(self, node: Node) -> Form:
        head = node.head
        if head is None:
            raise CodeGenerationError("expected a form name or callee at the head of the list")
        return self.lookup(head).from_arguments(head, node.arguments)


DEFAULT_FORMS: Dict[str, Type[Form]] = {
    "package": PackageForm,
    "import": ImportForm,
    "defn": DefnForm,
}

DEFAULT_REGISTRY = FormRegistry(DEFAULT_FORMS)
