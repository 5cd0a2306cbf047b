"""
MyPL Recursive Descent Parser

One method per grammar production, one token of lookahead (curr_token)
pulled from the lexer on demand. The first syntax error aborts the parse;
a node is only built once its whole production has been recognized, so no
partially constructed tree ever escapes.

Expressions have no operator precedence: the rest of a chain after the
first operator is parsed as one sub-expression, so a + b * c is a + (b * c)
and (a + b) * c must be written with parentheses.

Author: xwest
"""

import logging
from typing import List, Optional, Tuple, Union

from ..lexer.lexer import Lexer
from ..lexer.tokens import (
    Token, TokenType, PRIMITIVE_TYPES
)
from .ast_nodes import (
    Program, Decl, TypeDecl, FunDecl, FunParam, Stmt, VarDeclStmt, AssignStmt,
    ReturnStmt, IfStmt, BasicIf, WhileStmt, ForStmt, Expr, Term, SimpleTerm,
    ComplexTerm, RValue, SimpleRValue, NewRValue, CallExpr, IDRValue,
    NegatedRValue
)
from .errors import ParseError, create_unexpected_token_error

logger = logging.getLogger(__name__)


# Tokens that can start a statement
STATEMENT_STARTS = frozenset({
    TokenType.VAR, TokenType.ID, TokenType.IF, TokenType.WHILE,
    TokenType.FOR, TokenType.RETURN,
})

DATA_TYPES = PRIMITIVE_TYPES | {TokenType.ID}


class Parser:
    """
    MyPL recursive descent parser.

    Drives a Lexer one token at a time and builds a Program tree.
    """

    def __init__(self, lexer: Lexer):
        """
        Initialize parser with a lexer.

        Args:
            lexer: Lexer positioned at the start of the source
        """
        self.lexer = lexer
        self.filename = lexer.filename
        self.curr_token: Optional[Token] = None

    def parse(self) -> Program:
        """
        Parse the whole token stream into an AST.

        Returns:
            Program AST node representing the entire program

        Raises:
            LexerError: If the lexer rejects the source
            ParseError: On the first syntax error
        """
        self._advance()

        decls: List[Decl] = []
        while not self._check(TokenType.EOS):
            if self._check(TokenType.TYPE):
                decls.append(self._parse_type_decl())
            elif self._check(TokenType.FUN):
                decls.append(self._parse_fun_decl())
            else:
                raise self._error("'type' or 'fun' declaration", code="P002")

        self._consume(TokenType.EOS)
        return Program(tuple(decls))

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _parse_type_decl(self) -> TypeDecl:
        """tdecl ::= TYPE ID vdecl_stmt* END"""
        self._consume(TokenType.TYPE)
        name_token = self._consume(TokenType.ID)

        fields = []
        while self._check(TokenType.VAR):
            fields.append(self._parse_var_decl())

        self._consume(TokenType.END)
        return TypeDecl(name_token, tuple(fields))

    def _parse_fun_decl(self) -> FunDecl:
        """fdecl ::= FUN (dtype | NIL) ID LPAREN params? RPAREN stmt* END"""
        self._consume(TokenType.FUN)

        if self._check(TokenType.NIL):
            return_type = self._advance()
        else:
            return_type = self._parse_data_type("return type or 'nil'")

        name_token = self._consume(TokenType.ID)

        self._consume(TokenType.LPAREN)
        params = self._parse_parameter_list()
        self._consume(TokenType.RPAREN)

        body = self._parse_statements()
        self._consume(TokenType.END)

        return FunDecl(return_type, name_token, params, body)

    def _parse_parameter_list(self) -> Tuple[FunParam, ...]:
        """params ::= ID COLON dtype (COMMA ID COLON dtype)*"""
        params = []

        if self._check(TokenType.ID):
            params.append(self._parse_parameter())
            while self._match(TokenType.COMMA):
                params.append(self._parse_parameter())

        return tuple(params)

    def _parse_parameter(self) -> FunParam:
        name_token = self._consume(TokenType.ID)
        self._consume(TokenType.COLON)
        return FunParam(name_token, self._parse_data_type())

    def _parse_data_type(self, expected: str = "data type") -> Token:
        """dtype ::= INT | DOUBLE | BOOL | CHAR | STRING | ID"""
        if self.curr_token.type in DATA_TYPES:
            return self._advance()
        raise self._error(expected, code="P003")

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _parse_statements(self) -> Tuple[Stmt, ...]:
        """stmt* -- stops at the first token that cannot start a statement."""
        statements = []
        while self.curr_token.type in STATEMENT_STARTS:
            statements.append(self._parse_statement())
        return tuple(statements)

    def _parse_statement(self) -> Stmt:
        """Parse a statement."""
        if self._check(TokenType.VAR):
            return self._parse_var_decl()
        elif self._check(TokenType.ID):
            return self._parse_assign_or_call()
        elif self._check(TokenType.IF):
            return self._parse_if_statement()
        elif self._check(TokenType.WHILE):
            return self._parse_while_statement()
        elif self._check(TokenType.FOR):
            return self._parse_for_statement()
        elif self._check(TokenType.RETURN):
            return self._parse_return_statement()

        raise self._error("statement")

    def _parse_var_decl(self) -> VarDeclStmt:
        """vdecl_stmt ::= VAR ID (COLON dtype)? ASSIGN expr"""
        self._consume(TokenType.VAR)
        name_token = self._consume(TokenType.ID)

        declared_type = None
        if self._match(TokenType.COLON):
            declared_type = self._parse_data_type()

        self._consume(TokenType.ASSIGN)
        initializer = self._parse_expression()

        return VarDeclStmt(name_token, declared_type, initializer)

    def _parse_assign_or_call(self) -> Union[AssignStmt, CallExpr]:
        """assign_or_call ::= ID ( call_tail | lvalue_tail ASSIGN expr )"""
        name_token = self._consume(TokenType.ID)

        if self._check(TokenType.LPAREN):
            return self._parse_call_tail(name_token)

        path = self._parse_path_tail(name_token)
        self._consume(TokenType.ASSIGN)
        value = self._parse_expression()

        return AssignStmt(path, value)

    def _parse_if_statement(self) -> IfStmt:
        """cond_stmt ::= IF expr THEN stmt* (ELSEIF expr THEN stmt*)* (ELSE stmt*)? END"""
        self._consume(TokenType.IF)
        if_part = self._parse_basic_if()

        else_ifs = []
        while self._match(TokenType.ELSEIF):
            else_ifs.append(self._parse_basic_if())

        else_body: Tuple[Stmt, ...] = ()
        if self._match(TokenType.ELSE):
            else_body = self._parse_statements()

        self._consume(TokenType.END)
        return IfStmt(if_part, tuple(else_ifs), else_body)

    def _parse_basic_if(self) -> BasicIf:
        condition = self._parse_expression()
        self._consume(TokenType.THEN)
        return BasicIf(condition, self._parse_statements())

    def _parse_while_statement(self) -> WhileStmt:
        """while_stmt ::= WHILE expr DO stmt* END"""
        self._consume(TokenType.WHILE)
        condition = self._parse_expression()
        self._consume(TokenType.DO)
        body = self._parse_statements()
        self._consume(TokenType.END)

        return WhileStmt(condition, body)

    def _parse_for_statement(self) -> ForStmt:
        """for_stmt ::= FOR ID ASSIGN expr TO expr DO stmt* END"""
        self._consume(TokenType.FOR)
        var_token = self._consume(TokenType.ID)
        self._consume(TokenType.ASSIGN)
        start = self._parse_expression()
        self._consume(TokenType.TO)
        end = self._parse_expression()
        self._consume(TokenType.DO)
        body = self._parse_statements()
        self._consume(TokenType.END)

        return ForStmt(var_token, start, end, body)

    def _parse_return_statement(self) -> ReturnStmt:
        """exit_stmt ::= RETURN expr"""
        self._consume(TokenType.RETURN)
        return ReturnStmt(self._parse_expression())

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _parse_expression(self) -> Expr:
        """
        expr ::= (NOT expr | LPAREN expr RPAREN | rvalue) (operator expr)?

        The operator chain is read in a loop and folded from the right, so
        long chains do not grow the call stack.
        """
        links: List[Tuple[bool, Term, Token]] = []

        while True:
            negated, first = self._parse_term()
            if not self.curr_token.is_operator:
                break
            links.append((negated, first, self._advance()))

        expr = Expr(negated, first)
        for negated, first, operator in reversed(links):
            expr = Expr(negated, first, operator, expr)
        return expr

    def _parse_term(self) -> Tuple[bool, Term]:
        """Leading operand of an expression and whether 'not' negated it."""
        if self._match(TokenType.NOT):
            return True, ComplexTerm(self._parse_expression())

        if self._match(TokenType.LPAREN):
            inner = self._parse_expression()
            self._consume(TokenType.RPAREN)
            return False, ComplexTerm(inner)

        return False, SimpleTerm(self._parse_rvalue())

    def _parse_rvalue(self) -> RValue:
        """rvalue ::= pval | NIL | NEW ID | NEG expr | ID ( call_tail | (DOT ID)* )"""
        if self.curr_token.is_literal or self._check(TokenType.NIL):
            return SimpleRValue(self._advance())

        if self._match(TokenType.NEW):
            return NewRValue(self._consume(TokenType.ID))

        if self._match(TokenType.NEG):
            return NegatedRValue(self._parse_expression())

        if self._check(TokenType.ID):
            name_token = self._advance()
            if self._check(TokenType.LPAREN):
                return self._parse_call_tail(name_token)
            return IDRValue(self._parse_path_tail(name_token))

        raise self._error("value", code="P004")

    def _parse_call_tail(self, name_token: Token) -> CallExpr:
        """call_tail ::= LPAREN (expr (COMMA expr)*)? RPAREN"""
        self._consume(TokenType.LPAREN)

        args = []
        if not self._check(TokenType.RPAREN):
            args.append(self._parse_expression())
            while self._match(TokenType.COMMA):
                args.append(self._parse_expression())

        self._consume(TokenType.RPAREN)
        return CallExpr(name_token, tuple(args))

    def _parse_path_tail(self, head: Token) -> Tuple[Token, ...]:
        """(DOT ID)* following an identifier already consumed."""
        path = [head]
        while self._match(TokenType.DOT):
            path.append(self._consume(TokenType.ID))
        return tuple(path)

    # ------------------------------------------------------------------
    # Token helpers
    # ------------------------------------------------------------------

    def _advance(self) -> Optional[Token]:
        """Fetch the next token; return the one that was current."""
        previous = self.curr_token
        self.curr_token = self.lexer.next_token()
        return previous

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        return self.curr_token.type == token_type

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _consume(self, token_type: TokenType) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()
        raise self._error(token_type)

    def _error(self, expected: Union[TokenType, str], code: str = "P001") -> ParseError:
        return create_unexpected_token_error(expected, self.curr_token, self.filename, code)


def parse_string(source: str, filename: str = "<string>") -> Program:
    """
    Convenience function to parse a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        Program AST

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
    """
    logger.debug("Parsing %s", filename)
    return Parser(Lexer(source, filename)).parse()


def parse_file(filepath: str) -> Program:
    """
    Convenience function to parse a source file.

    Args:
        filepath: Path to source file

    Returns:
        Program AST

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
        IOError: If file cannot be read
    """
    logger.debug("Parsing %s", filepath)
    with open(filepath, 'r', encoding='utf-8') as f:
        program = Parser(Lexer(f, filepath)).parse()

    logger.debug("Parsed %d declarations from %s", len(program.decls), filepath)
    return program
