"""
Recursive Descent Parser for Lox

Structure:
- Lexer: Token stream from source (lexer_rd)
- Parser: Recursive descent, one method per precedence tier
- AST: frozen dataclasses from tree.py

Errors are reported through the ErrorReporter and then raised as ParseError.
The nearest parse_declaration catches it, resynchronizes on a statement
boundary and drops that declaration, so one run surfaces every independent
syntax error instead of stopping at the first.
"""

from typing import Callable, List, Optional

from .errors import ErrorReporter
from .token_types import TT, Tok
from .tree import (
    Assign, Binary, Block, Call, Expr, Expression, Function, Grouping, If,
    Literal, Logical, Print, Return, Stmt, Ternary, Unary, Var, Variable, While,
)

MAX_ARGS = 255

# Tokens that start a statement; synchronize() stops in front of them.
_STATEMENT_STARTS = {
    TT.CLASS, TT.FOR, TT.FUN, TT.IF, TT.PRINT, TT.RETURN, TT.VAR, TT.WHILE,
}

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        super().__init__(
            f"{message} at line {token.line}" if token else message
        )

class Parser:
    """
    Recursive descent parser for Lox.

    Expression precedence (lowest to highest):
    1. assignment (=, right associative)
    2. ternary (? :, right associative)
    3. or
    4. and
    5. equality (==, !=)
    6. comparison (<, <=, >, >=)
    7. term (+, -)
    8. factor (*, /)
    9. unary (!, -)
    10. call (f(...)(...))
    11. primary (literals, identifiers, parens)
    """

    def __init__(self, tokens: List[Tok], reporter: Optional[ErrorReporter] = None):
        self.tokens = tokens
        self.pos = 0
        self.reporter = reporter if reporter is not None else ErrorReporter()

    # ========================================================================
    # Token Navigation
    # ========================================================================

    @property
    def current(self) -> Tok:
        return self.tokens[self.pos]

    def previous(self) -> Tok:
        return self.tokens[self.pos - 1]

    def at_end(self) -> bool:
        return self.current.kind == TT.EOF

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        if not self.at_end():
            self.pos += 1
        return self.previous()

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.kind in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: str) -> Tok:
        """Consume token of expected type or report and raise"""
        if self.check(token_type):
            return self.advance()
        raise self.error(self.current, message)

    def error(self, token: Tok, message: str) -> ParseError:
        """Report a syntax error; the caller decides whether to raise it"""
        self.reporter.error(token, message)
        return ParseError(message, token)

    def synchronize(self) -> None:
        """Discard tokens until a likely statement boundary"""
        self.advance()

        while not self.at_end():
            if self.previous().kind == TT.SEMI:
                return
            if self.current.kind in _STATEMENT_STARTS:
                return
            self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> List[Stmt]:
        """Parse entire program"""
        stmts: List[Stmt] = []

        while not self.at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                stmts.append(stmt)

        return stmts

    def parse_declaration(self) -> Optional[Stmt]:
        try:
            if self.match(TT.FUN):
                return self.parse_function("function")
            if self.match(TT.VAR):
                return self.parse_var_decl()
            return self.parse_statement()
        except ParseError:
            self.synchronize()
            return None

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Stmt:
        if self.match(TT.FOR):
            return self.parse_for_stmt()
        if self.match(TT.WHILE):
            return self.parse_while_stmt()
        if self.match(TT.IF):
            return self.parse_if_stmt()
        if self.match(TT.PRINT):
            return self.parse_print_stmt()
        if self.match(TT.RETURN):
            return self.parse_return_stmt()
        if self.match(TT.LBRACE):
            return Block(self.parse_block())

        return self.parse_expr_stmt()

    def parse_function(self, kind: str) -> Function:
        name = self.expect(TT.IDENT, f"Expect {kind} name.")
        self.expect(TT.LPAR, f"Expect '(' after {kind} name.")

        params: List[Tok] = []
        if not self.check(TT.RPAR):
            while True:
                if len(params) >= MAX_ARGS:
                    self.error(self.current, f"Can't have more than {MAX_ARGS} parameters.")
                params.append(self.expect(TT.IDENT, "Expect parameter name."))
                if not self.match(TT.COMMA):
                    break

        self.expect(TT.RPAR, "Expect ')' after parameters.")
        self.expect(TT.LBRACE, f"Expect '{{' before {kind} body.")
        body = self.parse_block()
        return Function(name, params, body)

    def parse_var_decl(self) -> Var:
        name = self.expect(TT.IDENT, "Expect variable name.")
        initializer = None
        if self.match(TT.ASSIGN):
            initializer = self.parse_expr()
        self.expect(TT.SEMI, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    def parse_block(self) -> List[Stmt]:
        """Parse declarations up to the closing brace; '{' already consumed"""
        stmts: List[Stmt] = []

        while not self.check(TT.RBRACE) and not self.at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                stmts.append(stmt)

        self.expect(TT.RBRACE, "Expect '}' after block.")
        return stmts

    def parse_if_stmt(self) -> If:
        """if "(" expr ")" stmt ("else" stmt)?"""
        self.expect(TT.LPAR, "Expect '(' after 'if'.")
        cond = self.parse_expr()
        self.expect(TT.RPAR, "Expect ')' after if condition.")
        then_branch = self.parse_statement()

        else_branch = None
        if self.match(TT.ELSE):
            else_branch = self.parse_statement()

        return If(cond, then_branch, else_branch)

    def parse_while_stmt(self) -> While:
        """while "(" expr ")" stmt"""
        self.expect(TT.LPAR, "Expect '(' after 'while'.")
        cond = self.parse_expr()
        self.expect(TT.RPAR, "Expect ')' after while condition.")
        return While(cond, self.parse_statement())

    def parse_for_stmt(self) -> Stmt:
        """
        Parse for loop and desugar it:
        for (init; cond; incr) body
        =>
        { init; while (cond) { body; incr; } }
        """
        self.expect(TT.LPAR, "Expect '(' after 'for'.")

        initializer: Optional[Stmt]
        if self.match(TT.SEMI):
            initializer = None
        elif self.match(TT.VAR):
            initializer = self.parse_var_decl()
        else:
            initializer = self.parse_expr_stmt()

        cond: Optional[Expr] = None
        if not self.check(TT.SEMI):
            cond = self.parse_expr()
        self.expect(TT.SEMI, "Expect ';' after loop condition.")

        increment: Optional[Expr] = None
        if not self.check(TT.RPAR):
            increment = self.parse_expr()
        self.expect(TT.RPAR, "Expect ')' after for clauses.")

        body = self.parse_statement()

        if increment is not None:
            body = Block([body, Expression(increment)])

        if cond is None:
            cond = Literal(True)
        body = While(cond, body)

        if initializer is not None:
            body = Block([initializer, body])

        return body

    def parse_print_stmt(self) -> Print:
        value = self.parse_expr()
        self.expect(TT.SEMI, "Expect ';' after value.")
        return Print(value)

    def parse_return_stmt(self) -> Return:
        keyword = self.previous()
        value = None
        if not self.check(TT.SEMI):
            value = self.parse_expr()
        self.expect(TT.SEMI, "Expect ';' after return value.")
        return Return(keyword, value)

    def parse_expr_stmt(self) -> Expression:
        expr = self.parse_expr()
        self.expect(TT.SEMI, "Expect ';' after expression.")
        return Expression(expr)

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self) -> Expr:
        """Parse expression (top level)."""
        return self.parse_assignment()

    def parse_assignment(self) -> Expr:
        """Parse assignment: IDENT = assignment (right associative)"""
        expr = self.parse_ternary_expr()

        if self.match(TT.ASSIGN):
            equals = self.previous()
            value = self.parse_assignment()

            if isinstance(expr, Variable):
                return Assign(expr.name, value)

            # Reported but not raised: the parser is not confused.
            self.error(equals, "Invalid assignment target.")

        return expr

    def parse_ternary_expr(self) -> Expr:
        """Parse ternary: cond ? then : else (right associative)"""
        expr = self.parse_or_expr()

        if self.match(TT.QMARK):
            question = self.previous()
            then_expr = self.parse_ternary_expr()
            self.expect(TT.COLON, "Expected ':' for ternary expression.")
            else_expr = self.parse_ternary_expr()
            return Ternary(expr, question, then_expr, else_expr)

        return expr

    def parse_or_expr(self) -> Expr:
        """Parse logical OR: expr or expr"""
        left = self.parse_and_expr()

        while self.match(TT.OR):
            op = self.previous()
            right = self.parse_and_expr()
            left = Logical(left, op, right)

        return left

    def parse_and_expr(self) -> Expr:
        """Parse logical AND: expr and expr"""
        left = self.parse_equality_expr()

        while self.match(TT.AND):
            op = self.previous()
            right = self.parse_equality_expr()
            left = Logical(left, op, right)

        return left

    def _left_assoc(self, operand: Callable[[], Expr], *types: TT) -> Expr:
        """One binary tier: operand (op operand)* folded to the left"""
        left = operand()

        while self.match(*types):
            op = self.previous()
            right = operand()
            left = Binary(left, op, right)

        return left

    def parse_equality_expr(self) -> Expr:
        return self._left_assoc(self.parse_comparison_expr, TT.NEQ, TT.EQ)

    def parse_comparison_expr(self) -> Expr:
        return self._left_assoc(self.parse_term_expr, TT.GT, TT.GTE, TT.LT, TT.LTE)

    def parse_term_expr(self) -> Expr:
        return self._left_assoc(self.parse_factor_expr, TT.MINUS, TT.PLUS)

    def parse_factor_expr(self) -> Expr:
        return self._left_assoc(self.parse_unary_expr, TT.SLASH, TT.STAR)

    def parse_unary_expr(self) -> Expr:
        """Parse unary operators: -expr, !expr"""
        if self.match(TT.NEG, TT.MINUS):
            op = self.previous()
            return Unary(op, self.parse_unary_expr())

        return self.parse_call_expr()

    def parse_call_expr(self) -> Expr:
        """Parse calls, including chained calls like f()()"""
        expr = self.parse_primary_expr()

        while self.match(TT.LPAR):
            expr = self.finish_call(expr)

        return expr

    def finish_call(self, callee: Expr) -> Call:
        args = self.parse_arg_list()
        paren = self.expect(TT.RPAR, "Expect ')' after arguments.")
        return Call(callee, paren, args)

    def parse_arg_list(self) -> List[Expr]:
        args: List[Expr] = []

        if self.check(TT.RPAR):
            return args

        while True:
            if len(args) >= MAX_ARGS:
                self.error(self.current, f"Can't have more than {MAX_ARGS} arguments.")
            args.append(self.parse_expr())
            if not self.match(TT.COMMA):
                break

        return args

    def parse_primary_expr(self) -> Expr:
        if self.match(TT.FALSE):
            return Literal(False)
        if self.match(TT.TRUE):
            return Literal(True)
        if self.match(TT.NIL):
            return Literal(None)
        if self.match(TT.NUMBER, TT.STRING):
            return Literal(self.previous().literal)
        if self.match(TT.IDENT):
            return Variable(self.previous())
        if self.match(TT.LPAR):
            expr = self.parse_expr()
            self.expect(TT.RPAR, "Expect ')' after expression.")
            return Grouping(expr)

        raise self.error(self.current, "Expect expression.")

# ============================================================================
# Entry points
# ============================================================================

def parse_source(source: str, reporter: Optional[ErrorReporter] = None) -> List[Stmt]:
    """
    Parse Lox source code to a statement list.

    Syntax errors are reported to *reporter* (stderr by default); the
    returned list holds every declaration that parsed cleanly.
    """
    from .lexer_rd import tokenize

    reporter = reporter if reporter is not None else ErrorReporter()
    tokens = tokenize(source, reporter=reporter)
    return Parser(tokens, reporter=reporter).parse()


def parse_expr_fragment(source: str, reporter: Optional[ErrorReporter] = None) -> Optional[Expr]:
    """
    Parse a standalone expression (REPL echo lines).
    Returns None when the fragment does not parse as exactly one expression.
    """
    from .lexer_rd import tokenize

    reporter = reporter if reporter is not None else ErrorReporter()
    tokens = tokenize(source, reporter=reporter)
    parser = Parser(tokens, reporter=reporter)

    try:
        expr = parser.parse_expr()
        if not parser.at_end():
            raise parser.error(parser.current, "Unexpected tokens after expression.")
    except ParseError:
        return None
    return expr
