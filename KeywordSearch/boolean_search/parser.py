import re


class QuerySyntaxError(SyntaxError):
    """Raised when a boolean query cannot be parsed."""


TOKEN_SPEC = [
    ('AND', r'\bAND\b'),
    ('OR', r'\bOR\b'),
    ('NOT', r'\bNOT\b'),
    ('LPAREN', r'\('),
    ('RPAREN', r'\)'),
    ('TERM', r'[\w\.\-]+'),
    ('SKIP', r'\s+'),
    ('MISMATCH', r'.'),
]
TOKEN_REGEX = re.compile('|'.join(f'(?P<{name}>{pattern})' for name, pattern in TOKEN_SPEC))


# AST Node definitions
class Node:
    def evaluate(self, engine):
        raise NotImplementedError()


class TermNode(Node):
    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f"Term({self.value})"

    def __eq__(self, other):
        return isinstance(other, TermNode) and self.value == other.value

    def evaluate(self, engine):
        """Return the relevance set of the documents containing this term"""
        return engine.search_term(self.value)


class BinaryNode(Node):
    name = "Binary"

    def __init__(self, left, right):
        self.left = left
        self.right = right

    def __repr__(self):
        return f"{self.name}({self.left}, {self.right})"

    def __eq__(self, other):
        return type(self) is type(other) and self.left == other.left and self.right == other.right


class AndNode(BinaryNode):
    name = "And"

    def evaluate(self, engine):
        """Perform the AND operation (intersection)"""
        left = self.left.evaluate(engine)

        # Short-circuit: if left is empty, result will be empty
        if not left:
            return left

        return left.intersection(self.right.evaluate(engine))


class OrNode(BinaryNode):
    name = "Or"

    def evaluate(self, engine):
        """Perform the OR operation (union)"""
        return self.left.evaluate(engine).union(self.right.evaluate(engine))


class NotNode(BinaryNode):
    """
    Documents of the left operand that do not match the right one.
    NOT is always binary: relevance sets have no universal set to complement against.
    """
    name = "Not"

    def evaluate(self, engine):
        left = self.left.evaluate(engine)
        if not left:
            return left
        return left.difference(self.right.evaluate(engine))


class BooleanParser:
    """
    Lexical and syntax analyzer for boolean queries with the following grammar:
    expr: term (OR term)*
    term: factor ((AND | AND NOT | NOT) factor)*
    factor: LPAREN expr RPAREN | TERM
    """
    def __init__(self, text):
        self.text = text
        self.tokens = self.tokenize(text)
        self.pos = 0

    def tokenize(self, text):
        if text.count('(') != text.count(')'):
            raise QuerySyntaxError(f"Unbalanced parentheses in query: '{text}'")

        tokens = []
        for mo in TOKEN_REGEX.finditer(text):
            kind = mo.lastgroup
            value = mo.group()
            if kind == 'SKIP':
                continue
            if kind == 'MISMATCH':
                raise QuerySyntaxError(f"Unexpected character {value!r} at position {mo.start()}")
            tokens.append((kind, value))
        return tokens

    def current_token(self):
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return (None, None)

    def consume(self, expected_kind=None):
        token = self.current_token()
        if expected_kind and token[0] != expected_kind:
            raise QuerySyntaxError(f"Expected token {expected_kind} but got {token[0]}")
        self.pos += 1
        return token

    def parse(self):
        if not self.tokens:
            raise QuerySyntaxError("Empty query")
        result = self.parse_expr()
        if self.current_token()[0] is not None:
            raise QuerySyntaxError(f"Unexpected token at the end: {self.current_token()[1]!r}")
        return result

    def parse_expr(self):
        node = self.parse_term()
        while self.current_token()[0] == 'OR':
            self.consume('OR')
            node = OrNode(node, self.parse_term())
        return node

    def parse_term(self):
        node = self.parse_factor()
        while True:
            kind = self.current_token()[0]
            if kind == 'AND':
                self.consume('AND')
                if self.current_token()[0] == 'NOT':
                    self.consume('NOT')
                    node = NotNode(node, self.parse_factor())
                else:
                    node = AndNode(node, self.parse_factor())
            elif kind == 'NOT':
                self.consume('NOT')
                node = NotNode(node, self.parse_factor())
            else:
                break
        return node

    def parse_factor(self):
        token = self.current_token()
        if token[0] == 'LPAREN':
            self.consume('LPAREN')
            node = self.parse_expr()
            self.consume('RPAREN')
            return node
        elif token[0] == 'TERM':
            return TermNode(self.consume('TERM')[1])
        elif token[0] == 'NOT':
            raise QuerySyntaxError("NOT needs a left operand, e.g. 'java NOT coffee'")
        elif token[0] is None:
            raise QuerySyntaxError("Unexpected end of query")
        else:
            raise QuerySyntaxError("Unexpected token: " + str(token))
