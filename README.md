# custasm

Building blocks of a customizable assembler, as a plain Python library with no
third-party dependencies.

## What it offers

- `custasm.util.source`: `Span` (a character range in a file, with `join` and
  `location`), `AsmError` (the exception every check raises, carrying a
  message, an optional `Span` and notes), and `CharCounter` for excerpts and
  line/column lookups.
- `custasm.util.bigint.BigInt`: integers that carry an optional bit size.
  It offers checked add, subtract, multiply, divide (truncating toward zero),
  modulo and shifts that stay within supported limits. It also has bit
  slicing, concatenation, little-endian byte conversion and the bitwise
  operators.
- `custasm.util.bitvec.BitVec`: a bit-addressed output buffer. It records a
  `BitVecSpan` for each marked write and merges adjacent spans into
  `BitVecBlock`s with `get_blocks()`.
- `custasm.util.output_format`: renders a `BitVec` in these forms:
  - raw bytes (`format_binary`)
  - binary and hex strings (`format_binstr`, `format_hexstr`)
  - dumps (`format_bindump`, `format_hexdump`)
  - `format_mif`, `format_intelhex`, `format_separator`, `format_c_array` and
    `format_logisim`
  - annotated listings (`format_annotated`, `format_tcgame`)
  - a position-to-source map (`format_addrspan`)
- `custasm.util.fileserver`: `MockFileServer` keeps files in memory.
  `RealFileServer` reads files from disk and can also serve built-in files
  added with `add`.
- `custasm.util.file_navigation`: `filename_navigate` resolves include-style
  relative names inside a project. `<std>/` paths pass through unchanged.
- `custasm.util.overlap_checker.OverlapChecker`: rejects output regions that
  overlap earlier ones.
- `custasm.util.string_styler.StringStyler`: builds text with optional ANSI
  colour codes.
- `custasm.util.symbols.SymbolManager`: declares symbols in nested scopes,
  covering global and local labels, and resolves names to item refs.
- `custasm.syntax.tokens`: `TokenKind`, `Token` and `decide_next_token`, which
  classifies the token at the start of a string and returns its length.
- `custasm.syntax.excerpt`: decodes string literals with escapes. It also
  decodes number literals with `0x`, `0b`, `0o`, `$` or `%` prefixes; binary,
  octal and hex literals get a definite size.
- `custasm.expr.values`: expression values (`IntegerValue`, `StringValue`,
  `BoolValue`, `UnknownValue`, `FailedConstraint`, …) with their `expect_*`
  checks, string encodings via `ExprString.to_bigint`, and the expression tree
  node classes.
- `custasm.expr.context`: `EvalContext` (locals, token substitutions,
  recursion depth), the provider query classes, and `dummy_eval_query`, a
  provider that rejects every query.

## Example

```python
from custasm.util.bigint import BigInt
from custasm.util.bitvec import BitVec
from custasm.util.output_format import format_hexstr

bits = BitVec()
bits.write_bigint(0, BigInt(0x12, 8))
bits.write_bigint(8, BigInt(0x34, 8))
print(format_hexstr(bits))  # "1234"
```

## What it does not do

This is a library of parts, not an assembler:

- There is no command-line program.
- There is no parser that turns source text into expression trees.
- Expression trees can be built, but nothing here evaluates them.
- There are no built-in functions.
- There is no static size inspection.
- There is no driver that assembles a file into output.

## Running the tests

```
pip install -e .[test]
pytest
```