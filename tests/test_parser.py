"""
Test suite for the MyPL parser.

Tests cover:
- Type and function declarations
- Every statement form, including the assignment/call decision
- Expression chains without operator precedence
- Syntax error detection and positions
- Tree invariants (immutability, non-empty paths)

Author: xwest
"""

import dataclasses
import tempfile
import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from mypl.lexer.lexer import Lexer
from mypl.lexer.tokens import TokenType
from mypl.lexer.errors import ErrorCategory, LexerError
from mypl.parser.parser import Parser, parse_string, parse_file
from mypl.parser.errors import ParseError, describe_token_type
from mypl.parser.ast_nodes import (
    Program, TypeDecl, FunDecl, VarDeclStmt, AssignStmt, ReturnStmt, IfStmt,
    WhileStmt, ForStmt, Expr, SimpleTerm, ComplexTerm, SimpleRValue,
    NewRValue, CallExpr, IDRValue, NegatedRValue, ASTNodeType, same_structure
)


def _body(source):
    """Parse statements wrapped in a function and return its body."""
    program = parse_string(f"fun nil main()\n{source}\nend\n")
    return program.decls[0].body


def _expr(source):
    """Parse an expression through a return statement."""
    stmt = _body(f"return {source}")[0]
    return stmt.value


class TestDeclarations(unittest.TestCase):
    """Top-level type and function declarations."""

    def test_empty_program(self):
        program = parse_string("  # nothing here\n")
        self.assertIsInstance(program, Program)
        self.assertEqual(program.decls, ())

    def test_empty_function(self):
        program = parse_string("fun int f() end")
        fun = program.decls[0]
        self.assertIsInstance(fun, FunDecl)
        self.assertEqual(fun.return_type.type, TokenType.INT)
        self.assertEqual(fun.id.lexeme, "f")
        self.assertEqual(fun.params, ())
        self.assertEqual(fun.body, ())

    def test_nil_return_type(self):
        fun = parse_string("fun nil main() end").decls[0]
        self.assertEqual(fun.return_type.type, TokenType.NIL)

    def test_user_type_return_and_params(self):
        fun = parse_string("fun Node link(a: Node, n: int, s: string) end").decls[0]
        self.assertEqual(fun.return_type.type, TokenType.ID)
        self.assertEqual(
            [(p.id.lexeme, p.type.type) for p in fun.params],
            [("a", TokenType.ID), ("n", TokenType.INT), ("s", TokenType.STRING)]
        )

    def test_type_declaration(self):
        source = """
        type Node
            var value: int = 0
            var next: Node = nil
            var label = "x"
        end
        """
        decl = parse_string(source).decls[0]
        self.assertIsInstance(decl, TypeDecl)
        self.assertEqual(decl.id.lexeme, "Node")
        self.assertEqual([f.id.lexeme for f in decl.fields], ["value", "next", "label"])
        self.assertEqual(decl.fields[1].declared_type.lexeme, "Node")
        self.assertIsNone(decl.fields[2].declared_type)

    def test_empty_type_declaration(self):
        decl = parse_string("type Empty end").decls[0]
        self.assertEqual(decl.fields, ())

    def test_declarations_keep_source_order(self):
        program = parse_string("type A end fun nil f() end type B end")
        self.assertEqual(
            [type(d) for d in program.decls],
            [TypeDecl, FunDecl, TypeDecl]
        )
        self.assertEqual(program.decls[2].id.lexeme, "B")

    def test_parse_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "bad.mypl")
            with open(path, "w", encoding="utf-8") as f:
                f.write("fun nil main()\n  x = \nend\n")

            with self.assertRaises(ParseError) as ctx:
                parse_file(path)

        self.assertEqual(ctx.exception.filename, path)
        self.assertEqual((ctx.exception.line, ctx.exception.column), (3, 1))


class TestStatements(unittest.TestCase):
    """Statement forms inside function bodies."""

    def test_var_declaration(self):
        stmt = _body("var x: double = 1.5")[0]
        self.assertIsInstance(stmt, VarDeclStmt)
        self.assertEqual(stmt.id.lexeme, "x")
        self.assertEqual(stmt.declared_type.type, TokenType.DOUBLE)
        self.assertEqual(stmt.init.first.value.literal.lexeme, "1.5")

    def test_assignment_to_dotted_path(self):
        stmt = _body("a.b.c = 3")[0]
        self.assertIsInstance(stmt, AssignStmt)
        self.assertEqual([t.lexeme for t in stmt.path], ["a", "b", "c"])

    def test_assignment_to_plain_variable(self):
        stmt = _body("x = y")[0]
        self.assertEqual([t.lexeme for t in stmt.path], ["x"])
        self.assertIsInstance(stmt.value.first.value, IDRValue)

    def test_call_statement(self):
        stmt = _body('print("hi", x)')[0]
        self.assertIsInstance(stmt, CallExpr)
        self.assertEqual(stmt.function_id.lexeme, "print")
        self.assertEqual(len(stmt.args), 2)

    def test_call_without_arguments(self):
        stmt = _body("tick()")[0]
        self.assertEqual(stmt.args, ())

    def test_return(self):
        stmt = _body("return nil")[0]
        self.assertIsInstance(stmt, ReturnStmt)
        self.assertEqual(stmt.value.first.value.literal.type, TokenType.NIL)

    def test_if_elseif_else(self):
        source = """
        if x < 0 then
            y = 1
        elseif x == 0 then
            y = 2
            z = 3
        elseif x > 10 then
        else
            y = 4
        end
        """
        stmt = _body(source)[0]
        self.assertIsInstance(stmt, IfStmt)
        self.assertEqual(len(stmt.if_part.body), 1)
        self.assertEqual([len(e.body) for e in stmt.else_ifs], [2, 0])
        self.assertEqual(len(stmt.else_body), 1)
        self.assertEqual(stmt.else_ifs[1].cond.op.type, TokenType.GREATER)

    def test_if_without_else(self):
        stmt = _body("if flag then end")[0]
        self.assertEqual(stmt.else_ifs, ())
        self.assertEqual(stmt.else_body, ())

    def test_nested_conditionals(self):
        stmt = _body("if a then if b then x = 1 end end")[0]
        inner = stmt.if_part.body[0]
        self.assertIsInstance(inner, IfStmt)

    def test_while(self):
        stmt = _body("while i < 10 do i = i + 1 end")[0]
        self.assertIsInstance(stmt, WhileStmt)
        self.assertEqual(len(stmt.body), 1)

    def test_for(self):
        stmt = _body("for i = 1 to n do total = total + i end")[0]
        self.assertIsInstance(stmt, ForStmt)
        self.assertEqual(stmt.var_id.lexeme, "i")
        self.assertEqual(stmt.start.first.value.literal.lexeme, "1")
        self.assertEqual(stmt.end.first.value.path[0].lexeme, "n")

    def test_statement_sequence(self):
        body = _body("var x = 1\nx = 2\nf(x)\nreturn x")
        self.assertEqual(
            [type(s) for s in body],
            [VarDeclStmt, AssignStmt, CallExpr, ReturnStmt]
        )


class TestExpressions(unittest.TestCase):
    """Expression chains, terms and r-values."""

    def test_literals(self):
        for source, token_type in [
            ("1", TokenType.INT_VAL), ("2.5", TokenType.DOUBLE_VAL),
            ("true", TokenType.BOOL_VAL), ("'c'", TokenType.CHAR_VAL),
            ('"s"', TokenType.STRING_VAL), ("nil", TokenType.NIL),
        ]:
            with self.subTest(source=source):
                rvalue = _expr(source).first.value
                self.assertIsInstance(rvalue, SimpleRValue)
                self.assertEqual(rvalue.literal.type, token_type)

    def test_new(self):
        rvalue = _expr("new Node").first.value
        self.assertIsInstance(rvalue, NewRValue)
        self.assertEqual(rvalue.type_id.lexeme, "Node")

    def test_neg_takes_the_rest_of_the_chain(self):
        expr = _expr("neg x + 1")
        self.assertIsNone(expr.op)
        rvalue = expr.first.value
        self.assertIsInstance(rvalue, NegatedRValue)
        self.assertEqual(rvalue.inner.op.type, TokenType.PLUS)

    def test_call_and_path_rvalues(self):
        expr = _expr("f(a.b, g()) + p.q")
        call = expr.first.value
        self.assertIsInstance(call, CallExpr)
        self.assertEqual([t.lexeme for t in call.args[0].first.value.path], ["a", "b"])
        self.assertIsInstance(call.args[1].first.value, CallExpr)
        self.assertEqual([t.lexeme for t in expr.rest.first.value.path], ["p", "q"])

    def test_chain_is_right_leaning(self):
        expr = _expr("1 + 2 * 3")
        self.assertEqual(expr.op.type, TokenType.PLUS)
        self.assertIsInstance(expr.first, SimpleTerm)
        self.assertEqual(expr.rest.op.type, TokenType.MULTIPLY)
        self.assertIsNone(expr.rest.rest.op)

    def test_no_operator_precedence(self):
        flat = _expr("1 + 2 * 3")
        explicit = _expr("1 + (2 * 3)")
        left_grouped = _expr("(1 + 2) * 3")

        # "(2 * 3)" adds a ComplexTerm, so compare the shapes of the chains
        self.assertEqual(flat.op.type, explicit.op.type)
        self.assertTrue(same_structure(flat.rest, explicit.rest.first.inner))
        self.assertFalse(same_structure(flat, left_grouped))
        self.assertIsInstance(left_grouped.first, ComplexTerm)
        self.assertEqual(left_grouped.op.type, TokenType.MULTIPLY)

    def test_multiplication_first_still_groups_right(self):
        expr = _expr("2 * 3 + 1")
        self.assertEqual(expr.op.type, TokenType.MULTIPLY)
        self.assertEqual(expr.rest.op.type, TokenType.PLUS)

    def test_not_negates_the_whole_chain(self):
        expr = _expr("not a and b")
        self.assertTrue(expr.negated)
        self.assertIsNone(expr.op)
        self.assertIsInstance(expr.first, ComplexTerm)
        self.assertEqual(expr.first.inner.op.type, TokenType.AND)

    def test_parenthesized_term_is_not_negated(self):
        expr = _expr("(a or b) and c")
        self.assertFalse(expr.negated)
        self.assertIsInstance(expr.first, ComplexTerm)
        self.assertEqual(expr.op.type, TokenType.AND)

    def test_all_operators(self):
        for op in ["+", "-", "*", "/", "%", "and", "or", "==", "!=", "<", "<=", ">", ">="]:
            with self.subTest(op=op):
                expr = _expr(f"a {op} b")
                self.assertEqual(expr.op.lexeme, op)

    def test_long_chain_parses_without_deep_recursion(self):
        count = 5000
        expr = _expr(" + ".join(["1"] * count))

        links = 0
        while expr is not None:
            links += 1
            self.assertEqual(expr.first.value.literal.lexeme, "1")
            expr = expr.rest
        self.assertEqual(links, count)

    def test_long_chain_compares_structurally(self):
        terms = [str(n) for n in range(3000)]
        spaced = parse_string("fun int f() return " + " * ".join(terms) + " end")
        compact = parse_string("fun int f()\nreturn " + "*".join(terms) + "\nend")
        self.assertTrue(same_structure(spaced, compact))

        terms[-1] = "x"
        changed = parse_string("fun int f() return " + " * ".join(terms) + " end")
        self.assertFalse(same_structure(spaced, changed))


class TestSyntaxErrors(unittest.TestCase):
    """First-error reporting with token positions."""

    def assertParseError(self, source, line, column):
        with self.assertRaises(ParseError) as ctx:
            parse_string(source)
        error = ctx.exception
        self.assertEqual(error.category, ErrorCategory.SYNTAX)
        self.assertEqual((error.line, error.column), (line, column))
        return error

    def test_missing_colon_points_at_following_token(self):
        error = self.assertParseError("fun int f( x ) end", 1, 14)
        self.assertIn("':'", error.message)
        self.assertIn("')'", error.message)

    def test_trailing_comma_in_params(self):
        self.assertParseError("fun int f(a: int,) end", 1, 18)

    def test_trailing_comma_in_args(self):
        self.assertParseError("fun nil f()\n  g(1, )\nend", 2, 8)

    def test_missing_end(self):
        error = self.assertParseError("fun nil f()\n  x = 1\n", 3, 1)
        self.assertIn("end of input", error.message)

    def test_end_of_input_wording(self):
        self.assertEqual(describe_token_type(TokenType.EOS), "end of input")

    def test_bad_top_level_token(self):
        self.assertParseError("var x = 1", 1, 1)

    def test_missing_then(self):
        self.assertParseError("fun nil f()\n  if x do end\nend", 2, 8)

    def test_missing_assign_in_var(self):
        self.assertParseError("fun nil f() var x 1 end", 1, 19)

    def test_assignment_needs_value(self):
        self.assertParseError("fun nil f() x = end", 1, 17)

    def test_bad_return_type(self):
        self.assertParseError("fun 5 f() end", 1, 5)

    def test_bad_dotted_path(self):
        self.assertParseError("fun nil f() a. = 1 end", 1, 16)

    def test_new_needs_type_name(self):
        self.assertParseError("fun nil f() return new int end", 1, 24)

    def test_unclosed_parenthesis(self):
        self.assertParseError("fun nil f() return (1 + 2 end", 1, 27)

    def test_dangling_operator(self):
        self.assertParseError("fun nil f() return 1 + end", 1, 24)

    def test_lexer_errors_propagate(self):
        with self.assertRaises(LexerError) as ctx:
            parse_string("fun nil f() x = 'ab' end")
        self.assertEqual(ctx.exception.category, ErrorCategory.LEXER)

    def test_error_message_names_found_lexeme(self):
        error = self.assertParseError("fun nil f() while x then end end", 1, 21)
        self.assertIn("'then'", error.message)


class TestTreeInvariants(unittest.TestCase):
    """Immutability, visitor dispatch tags and structural comparison."""

    def test_nodes_are_frozen(self):
        fun = parse_string("fun int f() end").decls[0]
        with self.assertRaises(dataclasses.FrozenInstanceError):
            fun.id = None

    def test_empty_paths_rejected(self):
        expr = _expr("1")
        with self.assertRaises(ValueError):
            AssignStmt((), expr)
        with self.assertRaises(ValueError):
            IDRValue(())

    def test_operator_requires_rest(self):
        expr = _expr("a + b")
        with self.assertRaises(ValueError):
            Expr(False, expr.first, expr.op, None)

    def test_negated_expr_shape(self):
        plain = _expr("a + b")
        with self.assertRaises(ValueError):
            Expr(True, plain.first)

        negated = _expr("not a")
        with self.assertRaises(ValueError):
            Expr(True, negated.first, plain.op, plain.rest)

    def test_node_types(self):
        program = parse_string("fun nil f() g() end")
        self.assertEqual(program.node_type, ASTNodeType.PROGRAM)
        self.assertEqual(program.decls[0].node_type, ASTNodeType.FUN_DECL)
        self.assertEqual(program.decls[0].body[0].node_type, ASTNodeType.CALL_EXPR)

    def test_children_in_source_order(self):
        stmt = _body("for i = a to b do x = 1 y = 2 end")[0]
        kinds = [type(child) for child in stmt.children()]
        self.assertEqual(kinds, [Expr, Expr, AssignStmt, AssignStmt])

    def test_structure_ignores_positions(self):
        compact = parse_string("fun int f(x: int) return x+1 end")
        spread = parse_string("# comment\nfun int f(\n  x : int\n)\n  return x + 1\nend\n")
        self.assertTrue(compact.same_structure(spread))
        self.assertNotEqual(compact, spread)

    def test_structure_detects_different_lexemes(self):
        first = parse_string("fun int f() return 1 end")
        second = parse_string("fun int f() return 2 end")
        self.assertFalse(first.same_structure(second))

    def test_parser_reads_lexer_lazily(self):
        lexer = Lexer("fun nil f() end fun nil g() end", "lazy.mypl")
        parser = Parser(lexer)
        program = parser.parse()
        self.assertEqual(len(program.decls), 2)
        self.assertEqual(parser.curr_token.type, TokenType.EOS)


if __name__ == "__main__":
    unittest.main()
