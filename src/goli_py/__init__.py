from .code_generator import GoCodeGenerator, generate_go_code
from .forms import CodeGenerationError, DEFAULT_REGISTRY, FormRegistry
from .main import compile_goli
from .parser import ParseError, UnbalancedParentheses, build_ast, parse, tokenize
from .preprocessor import PreprocessError, prepare
