# examples/goli/compile_example.py

import os
import sys

from goli_py.ast_nodes import print_ast
from goli_py.main import compile_goli
from goli_py.parser import ParseError, parse
from goli_py.forms import CodeGenerationError

script_dir = os.path.dirname(os.path.abspath(__file__))
source_path = os.path.join(script_dir, 'main.goli')

with open(source_path, 'r', encoding='utf-8') as f:
    goli_code = f.read()

print("--- goli Code ---")
print(goli_code)
print("-----------------")

try:
    print("\n--- Parsed Tree ---")
    print_ast(parse(goli_code))
    print("-------------------")

    print("\n--- Generated Go ---")
    print(compile_goli(goli_code), end="")
    print("--------------------")
except (ParseError, CodeGenerationError) as e:
    print(f"\nError: {e}", file=sys.stderr)
    sys.exit(1)
