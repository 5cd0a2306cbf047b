"""
MyPL Parser Package

Implements a recursive descent (LL(1)) parser for MyPL that produces an
immutable, single-owner Abstract Syntax Tree.

Key Features:
- One method per grammar production, single-token lookahead
- Flat, right-associated operator chains (no precedence)
- Visitor contract with one visit method per node class
- First-error diagnostics with exact line/column

Author: xwest
"""

from .ast_nodes import *
from .parser import Parser, parse_string, parse_file
from .errors import ParseError

__all__ = [
    # Core parser
    "Parser", "parse_string", "parse_file",

    # AST nodes
    "ASTNode", "ASTNodeType", "ASTVisitor",
    "Program", "Decl", "TypeDecl", "FunDecl", "FunParam",
    "Stmt", "VarDeclStmt", "AssignStmt", "ReturnStmt", "IfStmt", "BasicIf",
    "WhileStmt", "ForStmt",
    "Expr", "Term", "SimpleTerm", "ComplexTerm",
    "RValue", "SimpleRValue", "NewRValue", "CallExpr", "IDRValue", "NegatedRValue",
    "same_structure", "structure_of",

    # Error handling
    "ParseError",
]
