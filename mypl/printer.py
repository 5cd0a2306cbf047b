"""
Pretty printer for MyPL syntax trees.

Renders a Program back to MyPL source text. The output parses back to a
tree with the same structure, so the printer doubles as a formatter.

Author: xwest
"""

from io import StringIO
from typing import Iterable, TextIO

from .lexer.tokens import TokenType
from .parser.ast_nodes import (
    ASTVisitor, Program, TypeDecl, FunDecl, Stmt, VarDeclStmt, AssignStmt,
    ReturnStmt, IfStmt, BasicIf, WhileStmt, ForStmt, Expr, SimpleTerm,
    ComplexTerm, SimpleRValue, NewRValue, CallExpr, IDRValue, NegatedRValue
)


class Printer(ASTVisitor):
    """
    Writes declarations and statements to the output stream, one per line.

    Expression visits return their text instead of writing it, so a
    statement can be emitted as a single line.
    """

    def __init__(self, output: TextIO, indent_width: int = 3):
        self.out = output
        self.indent_width = indent_width
        self.level = 0

    # Top level

    def visit_program(self, node: Program):
        for index, decl in enumerate(node.decls):
            if index > 0:
                self.out.write("\n")
            decl.accept(self)

    def visit_type_decl(self, node: TypeDecl):
        self._line(f"type {node.id.lexeme}")
        self._block(node.fields)
        self._line("end")

    def visit_fun_decl(self, node: FunDecl):
        params = ", ".join(f"{p.id.lexeme}: {p.type.lexeme}" for p in node.params)
        self._line(f"fun {node.return_type.lexeme} {node.id.lexeme}({params})")
        self._block(node.body)
        self._line("end")

    # Statements

    def visit_var_decl_stmt(self, node: VarDeclStmt):
        declared = f": {node.declared_type.lexeme}" if node.declared_type else ""
        self._line(f"var {node.id.lexeme}{declared} = {node.init.accept(self)}")

    def visit_assign_stmt(self, node: AssignStmt):
        target = ".".join(token.lexeme for token in node.path)
        self._line(f"{target} = {node.value.accept(self)}")

    def visit_return_stmt(self, node: ReturnStmt):
        self._line(f"return {node.value.accept(self)}")

    def visit_if_stmt(self, node: IfStmt):
        self._clause("if", node.if_part)
        for else_if in node.else_ifs:
            self._clause("elseif", else_if)
        if node.else_body:
            self._line("else")
            self._block(node.else_body)
        self._line("end")

    def visit_while_stmt(self, node: WhileStmt):
        self._line(f"while {node.cond.accept(self)} do")
        self._block(node.body)
        self._line("end")

    def visit_for_stmt(self, node: ForStmt):
        self._line(
            f"for {node.var_id.lexeme} = {node.start.accept(self)} "
            f"to {node.end.accept(self)} do"
        )
        self._block(node.body)
        self._line("end")

    # Expressions

    def visit_expr(self, node: Expr) -> str:
        parts = []
        while node is not None:
            if node.negated:
                parts.append("not " + node.first.inner.accept(self))
            else:
                parts.append(node.first.accept(self))
            if node.op is not None:
                parts.append(node.op.lexeme)
            node = node.rest
        return " ".join(parts)

    def visit_simple_term(self, node: SimpleTerm) -> str:
        return node.value.accept(self)

    def visit_complex_term(self, node: ComplexTerm) -> str:
        return f"({node.inner.accept(self)})"

    # R-values

    def visit_simple_rvalue(self, node: SimpleRValue) -> str:
        literal = node.literal
        if literal.type == TokenType.STRING_VAL:
            return f'"{literal.lexeme}"'
        if literal.type == TokenType.CHAR_VAL:
            return f"'{literal.lexeme}'"
        return literal.lexeme

    def visit_new_rvalue(self, node: NewRValue) -> str:
        return f"new {node.type_id.lexeme}"

    def visit_call_expr(self, node: CallExpr) -> str:
        args = ", ".join(arg.accept(self) for arg in node.args)
        return f"{node.function_id.lexeme}({args})"

    def visit_id_rvalue(self, node: IDRValue) -> str:
        return ".".join(token.lexeme for token in node.path)

    def visit_negated_rvalue(self, node: NegatedRValue) -> str:
        return f"neg {node.inner.accept(self)}"

    # Helpers

    def _block(self, statements: Iterable[Stmt]):
        self.level += 1
        for stmt in statements:
            # Call statements share the r-value visit, which only returns text
            if isinstance(stmt, CallExpr):
                self._line(stmt.accept(self))
            else:
                stmt.accept(self)
        self.level -= 1

    def _clause(self, keyword: str, clause: BasicIf):
        self._line(f"{keyword} {clause.cond.accept(self)} then")
        self._block(clause.body)

    def _line(self, text: str):
        self.out.write(" " * (self.level * self.indent_width) + text + "\n")


def print_program(program: Program, indent_width: int = 3) -> str:
    """Render a Program as MyPL source text."""
    buffer = StringIO()
    program.accept(Printer(buffer, indent_width))
    return buffer.getvalue()
