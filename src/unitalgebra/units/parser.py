from functools import lru_cache
from typing import Tuple, Union

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from unitalgebra.core.unit import CompoundUnit
    from unitalgebra.units.registry import UnitsRegistry

# --- Plan node types ------------------------------------------------
# ("name", <str>, None)
# ("pow", <plan>, <float>)
# ("mul", <plan>, <plan>)
# ("div", <plan>, <plan>)
Plan = Tuple[str, Union[str, "Plan"], Union[float, "Plan", None]]

_NAME_EXTRA = "_°%"


# ---------------- Parser that builds a PLAN (no registry lookups!) ----------------
class _UnitExprParser:
    """
    Grammar:
      expr     := term (('*' | '/') term)*
      term     := factor [('**' | '^') exponent]?
      factor   := NAME | '(' expr ')'
      exponent := number | '(' number ['/' number] ')'
      NAME     := [A-Za-z_°%][A-Za-z0-9_°%]*
      number   := ['+'|'-']? digits ['.' digits]?
    """
    def __init__(self, text: str):
        self.s = text
        self.n = len(text)
        self.i = 0

    def parse(self) -> Plan:
        plan = self._parse_expr()
        self._skip_ws()
        if self.i != self.n:
            raise ValueError(f"Unexpected trailing input at {self.i}: {self.s[self.i:self.i+10]!r}")
        return plan

    # expr := term (('*' | '/') term)*
    def _parse_expr(self) -> Plan:
        left = self._parse_term()
        while True:
            self._skip_ws()
            if self._peek('*') and not self._peek('**'):
                self._eat('*')
                right = self._parse_term()
                left = ("mul", left, right)
            elif self._peek('/'):
                self._eat('/')
                right = self._parse_term()
                left = ("div", left, right)
            else:
                break
        return left

    # term := factor [('**' | '^') exponent]?
    def _parse_term(self) -> Plan:
        base = self._parse_factor()
        self._skip_ws()
        if self._peek('**'):
            self._eat('**')
            base = ("pow", base, self._parse_exponent())
        elif self._peek('^'):
            self._eat('^')
            base = ("pow", base, self._parse_exponent())
        return base

    # factor := NAME | '(' expr ')'
    def _parse_factor(self) -> Plan:
        self._skip_ws()
        if self._peek('('):
            self._eat('(')
            val = self._parse_expr()
            self._skip_ws()
            self._eat(')')
            return val
        name = self._parse_name()
        if not name:
            ch = self.s[self.i:self.i+1]
            raise ValueError(f"Expected unit name or '(' at {self.i}, got {ch!r}")
        return ("name", name, None)

    # exponent := number | '(' number ['/' number] ')'
    def _parse_exponent(self) -> float:
        self._skip_ws()
        if self._peek('('):
            self._eat('(')
            num = self._parse_number()
            if self._peek('/'):
                self._eat('/')
                den = self._parse_number()
                if den == 0:
                    raise ValueError(f"Zero denominator in exponent at {self.i}")
                num = num / den
            self._eat(')')
            return num
        return self._parse_number()

    # ---- token helpers ----
    def _parse_name(self):
        self._skip_ws()
        i0 = self.i
        if i0 < self.n and (self.s[i0].isalpha() or self.s[i0] in _NAME_EXTRA):
            self.i += 1
            while self.i < self.n and (self.s[self.i].isalnum() or self.s[self.i] in _NAME_EXTRA):
                self.i += 1
            return self.s[i0:self.i]
        return None

    def _parse_number(self) -> float:
        self._skip_ws()
        i0 = self.i
        if self.i < self.n and self.s[self.i] in '+-':
            self.i += 1
        i1 = self.i
        while self.i < self.n and self.s[self.i].isdigit():
            self.i += 1
        if i1 == self.i:
            raise ValueError(f"Expected numeric exponent at {self.i}")
        if self.i < self.n and self.s[self.i] == '.':
            self.i += 1
            i2 = self.i
            while self.i < self.n and self.s[self.i].isdigit():
                self.i += 1
            if i2 == self.i:
                raise ValueError(f"Expected digits after '.' at {self.i}")
        return float(self.s[i0:self.i])

    def _skip_ws(self):
        s, n, i = self.s, self.n, self.i
        while i < n and s[i].isspace():
            i += 1
        self.i = i

    def _peek(self, tok: str) -> bool:
        self._skip_ws()
        if tok == '**':
            return self.s[self.i:self.i+2] == '**'
        return self.i < self.n and self.s[self.i] == tok

    def _eat(self, tok: str):
        if not self._peek(tok):
            got = self.s[self.i:self.i+len(tok)]
            raise ValueError(f"Expected {tok!r} at {self.i}, got {got!r}")
        self.i += len(tok)


# ---------------- Evaluation of a plan against a given registry ----------------
def _eval_plan(plan: Plan, reg: "UnitsRegistry") -> "CompoundUnit":
    kind = plan[0]
    if kind == "name":
        name = plan[1]
        try:
            return reg.get(name)  # late binding to the provided registry
        except ValueError as e:
            raise ValueError(f"Unknown unit '{name}': {e}") from None
    elif kind == "pow":
        return _eval_plan(plan[1], reg) ** plan[2]
    elif kind == "mul":
        return _eval_plan(plan[1], reg) * _eval_plan(plan[2], reg)
    elif kind == "div":
        return _eval_plan(plan[1], reg) / _eval_plan(plan[2], reg)
    else:
        raise RuntimeError(f"Invalid plan node: {plan!r}")


# ---------------- Public API with caching-safe compilation ----------------
# Cache the *compiled plan* only. Safe across registries because there's no bound objects inside.
@lru_cache(maxsize=4096)
def _compile_unit_expr(expr: str) -> Plan:
    # cheap prefilter to reject disallowed characters early.
    disallowed = set('~!@#$&|=,:;?<>\'\"`\\[]{}')
    if any(c in disallowed for c in expr):
        raise ValueError("Only *, /, **, ^, parentheses, unit names, and numeric exponents are allowed.")
    return _UnitExprParser(expr).parse()


def extract_unit_expr(expr: str, reg: "UnitsRegistry") -> "CompoundUnit":
    """
    Parser for unit expressions like 'kg*m/s**2', 'km/h' or '(kg*m)/s^2'.

    Caching-safety:
      * We cache a compiled syntax plan keyed by `expr` only (no registry state).
      * Evaluation binds names to units from the *provided* `reg` at call time.

    Allowed syntax:
      * Operators: '*', '/', and '**' or '^' with signed numeric exponents,
        optionally written as a parenthesised fraction ('m^(1/2)').
      * Parentheses and unit names (letters, digits, '_', '°', '%').
      * Anything else raises ValueError.
    """
    plan = _compile_unit_expr(expr)
    return _eval_plan(plan, reg)
