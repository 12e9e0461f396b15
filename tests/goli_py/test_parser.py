# tests/goli_py/test_parser.py

import time
import unittest

from goli_py.ast_nodes import Node, flatten
from goli_py.parser import (
    ParseError, UnbalancedParentheses, build_ast, parse, tokenize, tokenize_source,
)
from .all_test_examples import all_examples


def significant(tokens):
    return [t for t in tokens if t.strip()]


class TestTokenizer(unittest.TestCase):

    def test_parentheses_become_tokens(self):
        self.assertEqual(
            significant(tokenize("(a (b c))")),
            ['(', 'a', '(', 'b', 'c', ')', ')'],
        )

    def test_empty_tokens_left_for_the_builder(self):
        tokens = tokenize("(a  (b))")
        self.assertIn("", tokens)

    def test_newlines_and_tabs_separate_tokens(self):
        self.assertEqual(significant(tokenize("(a\n\tb)")), ['(', 'a', 'b', ')'])

    def test_typed_names_are_single_tokens(self):
        self.assertEqual(significant(tokenize("(defn f:int (x:int))"))[2], "f:int")

    def test_literal_with_spaces_is_one_token(self):
        self.assertEqual(
            significant(tokenize_source('(f "a b" (g))')),
            ['(', 'f', '"a b"', '(', 'g', ')', ')'],
        )

    def test_literal_with_parentheses_is_one_token(self):
        self.assertEqual(significant(tokenize_source('(f "(x)")')), ['(', 'f', '"(x)"', ')'])

    def test_many_literals_restored_in_linear_time(self):
        # 4000 literals used to take several seconds when every token was
        # checked against every placeholder
        count = 4000
        body = " ".join(f'(fmt/Println "s{i};")' for i in range(count))
        start = time.perf_counter()
        tokens = significant(tokenize_source(f"(defn main () {body})"))
        elapsed = time.perf_counter() - start
        literals = [t for t in tokens if t.startswith('"')]
        self.assertEqual(literals[0], '"s0;"')
        self.assertEqual(literals[-1], f'"s{count - 1};"')
        self.assertEqual(len(literals), count)
        self.assertLess(elapsed, 2.0)

    def test_comments_produce_no_tokens(self):
        self.assertEqual(
            significant(tokenize_source("; (ignored stuff)\n(package main) ; more")),
            ['(', 'package', 'main', ')'],
        )


class TestBuildAst(unittest.TestCase):

    def test_structure_mirrors_parentheses(self):
        tree = build_ast(tokenize("(a (b c) d)"))
        (outer,) = tree.root.children
        self.assertIsInstance(outer, Node)
        self.assertEqual(outer.head, "a")
        inner = outer.children[1]
        self.assertEqual(inner.children, ["b", "c"])
        self.assertEqual(outer.children[2], "d")

    def test_parent_indices(self):
        tree = build_ast(tokenize("(a (b))"))
        outer = tree.root.children[0]
        inner = outer.children[1]
        self.assertIsNone(tree.root.parent)
        self.assertIs(tree.parent_of(inner), outer)
        self.assertIs(tree.parent_of(outer), tree.root)
        self.assertIs(tree.nodes[inner.index], inner)

    def test_blank_tokens_skipped(self):
        tree = build_ast(["", " ", "(", "", "a", "\n", ")"])
        self.assertEqual(tree.root.children[0].children, ["a"])

    def test_empty_input(self):
        self.assertEqual(parse("").root.children, [])

    def test_round_trip(self):
        for i, example in enumerate(all_examples):
            with self.subTest(i=i, code=example['code']):
                tokens = tokenize_source(example['code'])
                self.assertEqual(flatten(build_ast(tokens)), significant(tokens))

    def test_extra_closing_paren(self):
        for code in ["(foo))", ")", "())(", "(a) (b))"]:
            with self.subTest(code=code):
                with self.assertRaises(UnbalancedParentheses):
                    parse(code)

    def test_unclosed_paren(self):
        with self.assertRaises(UnbalancedParentheses) as cm:
            parse("(defn f (x:int)")
        self.assertIn("1 unclosed", str(cm.exception))

    def test_unbalanced_is_a_parse_error(self):
        self.assertTrue(issubclass(UnbalancedParentheses, ParseError))


if __name__ == '__main__':
    unittest.main()
