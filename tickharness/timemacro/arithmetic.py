"""Integer arithmetic over time expressions.

Supports ``+ - * /``, unary signs, parentheses and integer literals of any
magnitude. Everything stays in Python ``int`` so nanosecond timestamps
(around 10**18) keep full precision.
"""
import re
from typing import List, Tuple

from ..errors import ArithmeticExpressionError

_TOKEN_PATTERN = re.compile(r"\s*(?:([0-9]+)|(.))")

Token = Tuple[str, str, int]  # (kind, text, position)


def tokenize(expression: str) -> List[Token]:
    """Split an expression into number and operator tokens."""
    tokens: List[Token] = []
    position = 0
    length = len(expression)
    
    while position < length:
        match = _TOKEN_PATTERN.match(expression, position)
        if match is None:
            # Only trailing whitespace left
            break
        number, symbol = match.groups()
        if number is not None:
            tokens.append(("number", number, match.start(1)))
        elif symbol in "+-*/()":
            tokens.append(("op", symbol, match.start(2)))
        else:
            raise ArithmeticExpressionError(
                f"unexpected character {symbol!r} at position {match.start(2)}",
                expression=expression,
                position=match.start(2)
            )
        position = match.end()
    
    tokens.append(("end", "", length))
    return tokens


def _truncating_divide(dividend: int, divisor: int) -> int:
    quotient = abs(dividend) // abs(divisor)
    return quotient if (dividend >= 0) == (divisor >= 0) else -quotient


class _Parser:
    """Recursive-descent parser that evaluates while it parses."""
    
    def __init__(self, expression: str):
        self.expression = expression
        self.tokens = tokenize(expression)
        self.index = 0
    
    def _peek(self) -> Token:
        return self.tokens[self.index]
    
    def _advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token
    
    def _error(self, message: str, token: Token) -> ArithmeticExpressionError:
        return ArithmeticExpressionError(
            f"{message} at position {token[2]}",
            expression=self.expression,
            position=token[2]
        )
    
    def parse(self) -> int:
        if self._peek()[0] == "end":
            raise self._error("empty expression", self._peek())
        value = self._expression()
        token = self._peek()
        if token[0] != "end":
            raise self._error(f"unexpected token {token[1]!r}", token)
        return value
    
    def _expression(self) -> int:
        value = self._term()
        while self._peek()[1] in ("+", "-"):
            operator = self._advance()[1]
            right = self._term()
            value = value + right if operator == "+" else value - right
        return value
    
    def _term(self) -> int:
        value = self._unary()
        while self._peek()[1] in ("*", "/"):
            operator_token = self._advance()
            right = self._unary()
            if operator_token[1] == "*":
                value *= right
            elif right == 0:
                raise self._error("division by zero", operator_token)
            else:
                value = _truncating_divide(value, right)
        return value
    
    def _unary(self) -> int:
        token = self._peek()
        if token[0] == "op" and token[1] in ("+", "-"):
            self._advance()
            operand = self._unary()
            return -operand if token[1] == "-" else operand
        return self._primary()
    
    def _primary(self) -> int:
        token = self._advance()
        if token[0] == "number":
            return int(token[1])
        if token[0] == "op" and token[1] == "(":
            value = self._expression()
            closing = self._advance()
            if closing[1] != ")":
                raise self._error("expected ')'", closing)
            return value
        if token[0] == "end":
            raise self._error("unexpected end of expression", token)
        raise self._error(f"unexpected token {token[1]!r}", token)


def evaluate(expression: str) -> int:
    """Evaluate an integer arithmetic expression.
    
    Args:
        expression: e.g. '1257894000000000000-(3600000000000-60000000000)'
        
    Returns:
        The integer result
        
    Raises:
        ArithmeticExpressionError: If the expression is malformed or divides by zero
    """
    return _Parser(expression).parse()
