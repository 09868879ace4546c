# src/resonancecalc/expreval.py
"""
Safe parsing of command-line arguments into integers, integer lists and bytes.

Integers may be written as literals (42, 1_000, 0xff, 0b1010, 1 000 000),
in scientific notation (1e18, 5e3) or as integer expressions using
+ - * // % ** << >> & ^ | and postfix ! (e.g. 2**256-1, 10**18 // 3, 20!).
Only integer arithmetic is evaluated; names, calls and floats are rejected.
"""

from __future__ import annotations

import ast
import math
import operator as op
import re

from resonancecalc.runtime import current as _rt_current
from resonancecalc.utility import UserInputError, dec_digits

_THIN_SPACES = ("\u2009", "\u202F", "\u00A0")  # thin, narrow no-break, no-break
_SEP_CLASS = r"[ ,._\u00A0\u2009\u202F]"
_GROUPED_RE = re.compile(rf"^[+-]?\d{{1,3}}(?:{_SEP_CLASS}\d{{3}})+$")

_ALLOWED_BINOPS = {
    ast.Add:      op.add,
    ast.Sub:      op.sub,
    ast.Mult:     op.mul,
    ast.FloorDiv: op.floordiv,
    ast.LShift:   op.lshift,
    ast.RShift:   op.rshift,
    ast.BitAnd:   op.and_,
    ast.BitXor:   op.xor,
    ast.BitOr:    op.or_,
}
_ALLOWED_UNARYOPS = {
    ast.UAdd: op.pos,
    ast.USub: op.neg,
}

_MAX_NODES = 256
_FAKE_FACT = "__fact__"

_SCI_NOTATION_TOKEN = re.compile(
    r"""
    (?<![\w.])          # not immediately after a word char or dot
    ([+\-]?)            # optional sign
    (\d+)               # mantissa
    [eE]
    ([+\-]?\d+)         # exponent
    (?![\w.])
    """,
    re.VERBOSE,
)


class _IntExprError(Exception):
    pass


def _max_digits() -> int:
    return _rt_current().max_digits


def _too_many_digits(limit: int) -> UserInputError:
    return UserInputError(
        f"number has more than {limit} decimal digits. "
        "Increase BEHAVIOUR.MAX_DIGITS in the profile or pass a smaller value."
    )


def _parse_int_literal(text: str) -> int | None:
    """Accepts: 42  -7  1_000_000  0xFF  0b1010  123 456 789
       Rejects: 3.14  1,23  0xG1"""
    if text is None:
        return None
    s = text.strip()
    if not s:
        return None
    for ch in _THIN_SPACES:
        s = s.replace(ch, " ")

    if s.lower().startswith(("0x", "0b", "0o")):
        try:
            return int(s.replace("_", ""), 0)
        except ValueError:
            return None

    if re.fullmatch(r"[+-]?\d[\d_]*", s):
        try:
            return int(s.replace("_", ""))
        except ValueError:
            return None

    if _GROUPED_RE.match(s):
        try:
            return int(re.sub(_SEP_CLASS, "", s))
        except ValueError:
            return None

    return None


def _rewrite_scientific_notation(expr: str) -> str:
    """1e3 -> 10**(3), 2e5 -> (2)*10**(5). Negative exponents are not integers."""

    def repl(m: re.Match) -> str:
        sign, mant, exp_str = m.group(1), m.group(2), m.group(3)
        exp = int(exp_str)
        if exp < 0:
            raise _IntExprError("scientific notation with negative exponent is not an integer")
        if int(mant) == 0:
            return "0"
        full_mant = (sign or "") + mant
        if full_mant == "1":
            return f"10**({exp})"
        return f"({full_mant})*10**({exp})"

    return _SCI_NOTATION_TOKEN.sub(repl, expr)


def _rewrite_factorial(expr: str) -> str:
    """Rewrite postfix 'x!' and '(expr)!' into '__fact__(...)'. No nesting."""
    out: list[str] = []
    pos = 0
    for i, ch in enumerate(expr):
        if ch != "!":
            continue
        j = i - 1
        while j >= 0 and expr[j].isspace():
            j -= 1
        if j < 0:
            raise _IntExprError("factorial '!' requires a left operand")

        if expr[j] == ")":
            level = 0
            k = j
            while k >= 0:
                if expr[k] == ")":
                    level += 1
                elif expr[k] == "(":
                    level -= 1
                    if level == 0:
                        break
                k -= 1
            if k < 0:
                raise _IntExprError("unbalanced parentheses before '!'")
            start = k
        else:
            if not (expr[j].isalnum() or expr[j] == "_"):
                raise _IntExprError("factorial '!' has invalid left operand")
            k = j
            while k >= 0 and (expr[k].isalnum() or expr[k] == "_"):
                k -= 1
            start = k + 1

        if start < pos:
            raise _IntExprError("nested factorial '!' is not supported")
        out.append(expr[pos:start])
        out.append(f"{_FAKE_FACT}({expr[start:j + 1]})")
        pos = i + 1
    out.append(expr[pos:])
    return "".join(out)


def _eval_int_expr(expr: str) -> int:
    """
    Evaluate a safe integer expression.

    Power and modulo are handled explicitly: ``a ** b % m`` evaluates the
    power modularly, and a plain power whose result would exceed the digit
    limit is rejected before it is computed.
    """
    limit = _max_digits()
    expr = _rewrite_factorial(_rewrite_scientific_notation(expr))

    try:
        tree = ast.parse(expr, mode="eval")
    except SyntaxError as e:
        raise _IntExprError("invalid integer expression") from e

    if sum(1 for _ in ast.walk(tree)) > _MAX_NODES:
        raise _IntExprError("expression too large")

    def _eval(node, *, modulus: int | None = None) -> int:
        if isinstance(node, ast.Expression):
            return _eval(node.body, modulus=modulus)

        if isinstance(node, ast.Constant):
            if isinstance(node.value, bool) or not isinstance(node.value, int):
                raise _IntExprError("non-integer values are not allowed")
            if dec_digits(node.value) > limit:
                raise _too_many_digits(limit)
            return node.value

        if isinstance(node, ast.UnaryOp) and type(node.op) in _ALLOWED_UNARYOPS:
            return _ALLOWED_UNARYOPS[type(node.op)](_eval(node.operand, modulus=modulus))

        if isinstance(node, ast.BinOp):
            op_type = type(node.op)

            if op_type is ast.Pow:
                base = _eval(node.left, modulus=modulus)
                exp = _eval(node.right)
                if exp < 0:
                    raise UserInputError("negative exponents are not allowed in integer expressions")
                if modulus is not None:
                    return pow(base, exp, modulus)
                # lower bound: digits(base**exp) >= digits(2**exp)
                if abs(base) > 1 and 1 + (exp * 30103) // 100000 > limit:
                    raise _too_many_digits(limit)
                return pow(base, exp)

            if op_type is ast.Mod:
                m = _eval(node.right)
                if m == 0:
                    raise _IntExprError("modulus by zero is not allowed")
                return _eval(node.left, modulus=m) % m

            if op_type is ast.FloorDiv:
                right = _eval(node.right)
                if right == 0:
                    raise _IntExprError("division by zero")
                return _eval(node.left) // right

            if op_type in _ALLOWED_BINOPS:
                # only ring operations may reduce their operands modulo m
                inner = modulus if op_type in (ast.Add, ast.Sub, ast.Mult) else None
                left = _eval(node.left, modulus=inner)
                right = _eval(node.right, modulus=inner)
                if op_type is ast.LShift and right > limit * 4:
                    raise _too_many_digits(limit)
                return _ALLOWED_BINOPS[op_type](left, right)

        if isinstance(node, ast.Call):
            if isinstance(node.func, ast.Name) and node.func.id == _FAKE_FACT and len(node.args) == 1 \
                    and not node.keywords:
                val = _eval(node.args[0], modulus=modulus)
                if val < 0:
                    raise _IntExprError("factorial requires non-negative integer")
                if val > 10 * limit:
                    raise _too_many_digits(limit)
                return math.factorial(val)
            raise _IntExprError("function calls are not allowed")

        raise _IntExprError(f"unsupported syntax: {type(node).__name__}")

    value = _eval(tree.body)
    if dec_digits(value) > limit:
        raise _too_many_digits(limit)
    return value


# ---- public entry points ----


def parse_int(s: str) -> int:
    """Parse one integer argument; raises UserInputError on anything else."""
    text = (s or "").strip()
    n = _parse_int_literal(text)
    if n is not None:
        return n
    try:
        return _eval_int_expr(text)
    except _IntExprError as e:
        raise UserInputError(f"not an integer or integer expression: {s!r} ({e})") from None


def parse_int_list(s: str) -> list[int]:
    """'[1, 2, 3]', '1,2,3' or '1 2 3'. Each element may be an expression."""
    text = (s or "").strip()
    if text.startswith("[") and text.endswith("]"):
        text = text[1:-1]
    if not text.strip():
        return []
    parts = text.split(",") if "," in text else text.split()
    return [parse_int(p) for p in parts if p.strip()]


def parse_bytes(s: str) -> bytes:
    """Hex string with optional 0x prefix; whitespace and underscores ignored."""
    text = re.sub(r"[\s_]", "", s or "")
    if text.lower().startswith("0x"):
        text = text[2:]
    if len(text) % 2:
        text = "0" + text
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise UserInputError(f"not a hex byte string: {s!r}") from None
