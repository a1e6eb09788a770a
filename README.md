# minicomp

A small compiler for a toy imperative language. It has three stages, and they
pass a textual code tree to each other through a file (`code_file.txt` by
default).

## The language

```
var x = 3;
var y = x * 2 + 1;
if (y - 7) { x = x + 1; }
while (x) { x = x - 1; }
func twice(var a) { return a; }
print(y);
```

- Integers only. Variables are declared with `var` before they are used.
- Assignment `=`. Operators `+ - * / ^`.
- Math functions `sin`, `cos`, `ln`, `tg`, `arcsin`, `arccos`, `arctan`,
  `tanh`.
- Control and other statements: `if`, `while`, `func`, `return`, `print`.
- Statements end with `;`. A closing `}` already ends its statement, so do
  not put a `;` after it.
- `print` and `return` take a single number or variable.
- Each function body sees only its own parameters and the variables it
  declares itself.
- Keywords and operator names are matched as prefixes. A variable name must
  not begin with one of them. For example, `ifa` is read as `if` followed by
  `a`, and `sinh` and `cosh` are read as `sin` or `cos` followed by `h`.

When a program has a lexical or grammar error, the compiler raises
`minicomp.frontend.CompileSyntaxError`. This includes use of a variable that
was not declared.

## Installation

```
pip install .
```

## Usage

Run the three commands one after another in the same directory.

1. **Front end.** Tokenizes and parses a source file, then writes the code
   tree.

   ```
   minicomp-front program.txt [-o code_file.txt] [--no-dump]
   ```

2. **Middle end.** Reads the tree and folds constant sub-expressions to
   integers. Division truncates toward zero, and math functions are
   truncated to integers. It also removes neutral elements (`x * 1`, `1 * x`,
   `x + 0`, `0 + x`, `x - 0`, `x / 1`) and turns `0 * x`, `x * 0` and
   `0 / x` into `0`. It repeats both passes until nothing changes, then
   writes the tree back to the same file. A division by zero among the
   constants is reported as an error.

   ```
   minicomp-middle [--tree code_file.txt] [--no-dump]
   ```

3. **Back end.** Reads the tree and prints the declared variable names. It
   then writes stack-machine assembly to the output file, by default
   `code_asm.asm`.

   ```
   minicomp-back [--tree code_file.txt] [-o code_asm.asm] [--no-dump]
   ```

If a stage fails, it prints `error: ...` to standard error and exits with
status 1.

Unless `--no-dump` is given, each stage writes an HTML log, `Logfile.htm`.
The log links Graphviz pictures of the tree, stored as
`pictures/graph<N>.png`. The Graphviz source is written to `Comp_dump.txt`.
Drawing the pictures needs the `dot` program; if it is missing, no pictures
are drawn.

## Code tree format

Each node is written as `("TYPE value"<left><right>)`, and a missing child is
written as `nil`. For example:

```
("OP +"("NUM 2"nilnil)("VAR x"nilnil))
```

The types are `NUM`, `OP`, `VAR`, `VAR_INIT`, `FUNC` and `FUNC_INIT`.
Malformed text raises `minicomp.code_tree.TreeFormatError`.

## Library use

```python
from minicomp.frontend import tokenize, parse_program
from minicomp.middle import optimize
from minicomp.backend import generate_asm

variables, functions = [], []
tokens = tokenize("var x = 2 * 3 + 0;", variables, functions)
tree = optimize(parse_program(tokens, variables))
print(generate_asm(tree, variables))
```

prints

```
PUSH 6
PUSH 0
POPR RAX
PUSHM [RAX]
POPR RHX
POPM [RAX]
HLT
```

Other entry points:

- `minicomp.code_tree`: `format_tree`, `format_tree_middle`, `parse_tree` and
  `parse_tree_back`.
- `minicomp.dump`: `render_dot`, `render_dot_string` and `DumpWriter`.
- `minicomp.middle`: `evaluate` and `Optimizer`.
- `minicomp.backend`: `write_asm` and `get_index`.

## What it does not do

- There is no assembler or virtual machine. The generated assembly cannot be
  run with this package.
- The back end emits code for numbers, variables, assignment, arithmetic,
  `print` and `if`. For an `if`, it emits a `JE` jump to a label placed after
  the body.
- It emits nothing for `while`, `func`, `return` or function calls. Loops and
  functions are parsed and kept in the tree, but they are not compiled.