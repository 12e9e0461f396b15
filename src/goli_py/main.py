import argparse
import sys
from typing import List, Optional, Tuple

from .ast_nodes import Tree, dump_ast, print_ast
from .code_generator import generate_go_code
from .forms import CodeGenerationError
from .parser import ParseError, build_ast, tokenize_source
from .preprocessor import PreprocessError, prepare

DEFAULT_INPUT = "main.goli"


def compile_program(source_code: str, print_stages: bool = False) -> Tuple[Tree, str]:
    """
    Compiles goli source code, returning the parsed tree and the Go source code.
    Orchestrates preprocessing, tokenizing, tree building and code generation.
    Any error aborts the whole run; nothing is returned for a failed program.
    """
    # 1. Preprocessing & Tokenizing
    tokens = tokenize_source(source_code)
    if print_stages:
        print("\n--- Tokens ---")
        print([t for t in tokens if t.strip()])
        print("--------------")

    # 2. Tree Building
    tree = build_ast(tokens)
    if print_stages:
        print("\n--- AST ---")
        print_ast(tree)
        print("-----------")

    # 3. Code Generation
    generated_code = generate_go_code(tree)
    if print_stages:
        print("\n--- Go Code Generation ---")
        print(f"{len(tree.root.children)} top-level lists, {len(generated_code.splitlines())} lines generated")
        print("--------------------------")
    return tree, generated_code


def compile_goli(source_code: str, print_stages: bool = False) -> str:
    """Compiles goli source code to Go source code."""
    _, generated_code = compile_program(source_code, print_stages=print_stages)
    return generated_code


def read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="goli", description="Compile goli code to Go.")
    parser.add_argument(
        "input_file",
        nargs='?',
        default=DEFAULT_INPUT,
        help=f"Path to the goli input file (default: {DEFAULT_INPUT}). Use '-' to read from stdin."
    )
    parser.add_argument(
        "-o", "--output",
        help="Path to the output Go file. Prints to stdout if not provided."
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print tokens, AST and stages during compilation."
    )
    parser.add_argument(
        "--ast",
        action="store_true",
        help="Print the parsed tree as JSON before the generated code."
    )
    parser.add_argument(
        "-E", "--preprocess-only",
        action="store_true",
        help="Print the source with comments stripped and stop."
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface."""
    args = build_arg_parser().parse_args(argv)

    try:
        source_code = read_source(args.input_file)
    except FileNotFoundError:
        print(f"Error: Input file not found: {args.input_file}", file=sys.stderr)
        return 1
    except IOError as e:
        print(f"Error reading input file {args.input_file}: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        print(f"Compiling source from: {args.input_file}")

    try:
        if args.preprocess_only:
            print(prepare(source_code))
            return 0
        tree, generated_code = compile_program(source_code, print_stages=args.verbose)
    except PreprocessError as e:
        print(f"Preprocess Error: {e}", file=sys.stderr)
        return 1
    except ParseError as e:
        print(f"Parse Error: {e}", file=sys.stderr)
        return 1
    except CodeGenerationError as e:
        print(f"Code Generation Error: {e}", file=sys.stderr)
        return 1

    # Nothing reaches stdout until the whole program has compiled
    if args.ast:
        print(dump_ast(tree))

    if args.output:
        try:
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(generated_code)
        except IOError as e:
            print(f"Error writing output file {args.output}: {e}", file=sys.stderr)
            return 1
        if args.verbose:
            print(f"\nGenerated Go code written to: {args.output}")
    else:
        print(generated_code, end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
