import re
from typing import List

from .ast_nodes import LPAREN, RPAREN, Node, Tree
from .preprocessor import preserve_quotes, restore_quotes, strip_comments

# --- Tokenizer ---

# Splits on every single whitespace character, so runs of whitespace leave
# empty tokens behind; the builder skips them.
SEPARATOR_REGEX = re.compile(r'\s')


def tokenize(code: str) -> List[str]:
    """Converts prepared source text into a list of tokens."""
    spaced = code.replace(LPAREN, f' {LPAREN} ').replace(RPAREN, f' {RPAREN} ')
    return SEPARATOR_REGEX.split(spaced.strip())


def tokenize_source(code: str) -> List[str]:
    """
    Tokenizes raw source text.
    Literals stay behind their placeholders while comments are stripped and
    the text is split, so a literal holding spaces or parentheses ends up as
    a single token. Literals are restored token by token afterwards.
    """
    quote_map, protected = preserve_quotes(code)
    tokens = tokenize(strip_comments(protected))
    if not quote_map:
        return tokens
    return [restore_quotes(token, quote_map) for token in tokens]


# --- AST Builder ---

class ParseError(Exception):
    pass


class UnbalancedParentheses(ParseError):
    """A ')' without a matching '(' or a '(' that is never closed."""
    pass


def build_ast(tokens: List[str]) -> Tree:
    """
    Builds the tree in a single pass. The chain of parent indices from the
    current node back to the root acts as the parse stack.
    """
    tree = Tree()
    current: Node = tree.root
    depth = 0

    for position, token in enumerate(tokens):
        if not token.strip():
            continue

        if token == LPAREN:
            current = tree.new_node(current)
            depth += 1
        elif token == RPAREN:
            parent = tree.parent_of(current)
            if parent is None:
                raise UnbalancedParentheses(f"Unexpected '{RPAREN}' at token {position}: no open list to close")
            current = parent
            depth -= 1
        else:
            current.children.append(token)

    if current is not tree.root:
        raise UnbalancedParentheses(f"Unexpected end of input: {depth} unclosed '{LPAREN}'")
    return tree


# --- Main Parsing Function ---
def parse(code: str) -> Tree:
    """Tokenizes and parses the source code string."""
    return build_ast(tokenize_source(code))
