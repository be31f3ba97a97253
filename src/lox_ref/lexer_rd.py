"""
Lexer for Lox - feeds the recursive descent parser

Tokenizes Lox source code into a stream of tokens.

Features:
- Single-pass tokenization
- Line tracking (multi-line strings and block comments included)
- Nested /* */ block comments
- Errors are reported and scanning continues, so one run can surface
  several lexical problems
"""

from typing import List, Optional

from .errors import ErrorReporter
from .token_types import TT, Tok

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Lox lexer.

    Whitespace is insignificant; newlines only advance the line counter.
    """

    # Keyword mapping
    KEYWORDS = {
        'and': TT.AND,
        'class': TT.CLASS,
        'else': TT.ELSE,
        'false': TT.FALSE,
        'for': TT.FOR,
        'fun': TT.FUN,
        'if': TT.IF,
        'nil': TT.NIL,
        'or': TT.OR,
        'print': TT.PRINT,
        'return': TT.RETURN,
        'super': TT.SUPER,
        'this': TT.THIS,
        'true': TT.TRUE,
        'var': TT.VAR,
        'while': TT.WHILE,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Two-character operators
        ('!=', TT.NEQ),
        ('==', TT.EQ),
        ('<=', TT.LTE),
        ('>=', TT.GTE),

        # Single-character operators
        ('!', TT.NEG),
        ('=', TT.ASSIGN),
        ('<', TT.LT),
        ('>', TT.GT),
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('*', TT.STAR),
        ('/', TT.SLASH),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        (',', TT.COMMA),
        ('.', TT.DOT),
        (';', TT.SEMI),
        ('?', TT.QMARK),
        (':', TT.COLON),
    ]

    def __init__(self, source: str, reporter: Optional[ErrorReporter] = None):
        self.source = source
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.pos = 0
        self.start = 0
        self.line = 1
        self.tokens: List[Tok] = []

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while not self.at_end():
            self.start = self.pos
            self.scan_token()

        self.tokens.append(Tok(TT.EOF, "", None, self.line))
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        ch = self.peek()

        # Whitespace and newlines
        if ch in (' ', '\t', '\r'):
            self.advance()
            return
        if ch == '\n':
            self.advance()
            self.line += 1
            return

        # Comments
        if self.source.startswith('//', self.pos):
            self.skip_comment()
            return
        if self.source.startswith('/*', self.pos):
            self.skip_block_comment()
            return

        # String literals
        if ch == '"':
            self.scan_string()
            return

        # Numbers
        if self.is_digit(ch):
            self.scan_number()
            return

        # Identifiers and keywords
        if self.is_alpha(ch):
            self.scan_identifier()
            return

        # Operators and punctuation
        self.scan_operator()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self):
        """Scan string literal: "..." (may span lines, no escapes)"""
        self.advance()  # Opening quote

        while not self.at_end() and self.peek() != '"':
            if self.peek() == '\n':
                self.line += 1
            self.advance()

        if self.at_end():
            self.reporter.report(self.line, "Unterminated string.")
            return

        self.advance()  # Closing quote
        self.emit(TT.STRING, self.source[self.start + 1:self.pos - 1])

    def scan_number(self):
        """Scan number literal"""
        # Integer part
        while self.is_digit(self.peek()):
            self.advance()

        # Decimal part; a trailing '.' is left for the next token
        if self.peek() == '.' and self.is_digit(self.peek(1)):
            self.advance()
            while self.is_digit(self.peek()):
                self.advance()

        self.emit(TT.NUMBER, float(self.source[self.start:self.pos]))

    def scan_identifier(self):
        """Scan identifier or keyword"""
        while self.is_alpha(self.peek()) or self.is_digit(self.peek()):
            self.advance()

        # Check if keyword
        token_type = self.KEYWORDS.get(self.source[self.start:self.pos], TT.IDENT)
        self.emit(token_type)

    def scan_operator(self):
        """Scan operators and punctuation"""
        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                self.emit(op_type)
                return

        ch = self.advance()
        self.reporter.report(self.line, f"Unexpected character '{ch}'.")

    # ========================================================================
    # Utilities
    # ========================================================================

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        if n < 0:
            raise ValueError(f"advance() requires n >= 0, got {n}")
        result = self.source[self.pos:self.pos + n]
        self.pos += n
        return result

    @staticmethod
    def is_digit(ch: str) -> bool:
        return '0' <= ch <= '9'

    @staticmethod
    def is_alpha(ch: str) -> bool:
        return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'

    def skip_comment(self):
        """Skip comment until end of line"""
        while self.peek() not in ('\n', '\0'):
            self.advance()

    def skip_block_comment(self):
        """Skip a /* */ comment; nested openers must each be closed"""
        self.advance(2)
        depth = 1

        while not self.at_end():
            if self.source.startswith('/*', self.pos):
                self.advance(2)
                depth += 1
            elif self.source.startswith('*/', self.pos):
                self.advance(2)
                depth -= 1
                if depth == 0:
                    return
            else:
                if self.advance() == '\n':
                    self.line += 1

        self.reporter.report(self.line, "Unclosed multi-line comment.")

    def emit(self, token_type: TT, literal=None):
        """Emit a token for the lexeme between start and pos"""
        tok = Tok(
            kind=token_type,
            lexeme=self.source[self.start:self.pos],
            literal=literal,
            line=self.line,
        )
        self.tokens.append(tok)


def tokenize(source: str, reporter: Optional[ErrorReporter] = None) -> List[Tok]:
    """Convenience function to tokenize source"""
    lexer = Lexer(source, reporter=reporter)
    return lexer.tokenize()
