"""
Abstract Syntax Tree node definitions for MyPL.

Every node is an immutable dataclass owned by exactly one parent: sequences
are tuples, there are no parent pointers and no node appears twice in a tree.
Nodes support the visitor pattern through accept(), which dispatches to the
visit_* method for the concrete node class.

Author: xwest
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, List, Optional, Tuple
from dataclasses import dataclass, fields, is_dataclass
from enum import Enum

from ..lexer.tokens import Token


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Top-level
    PROGRAM = "Program"

    # Declarations
    TYPE_DECL = "TypeDecl"
    FUN_DECL = "FunDecl"

    # Statements
    VAR_DECL_STMT = "VarDeclStmt"
    ASSIGN_STMT = "AssignStmt"
    RETURN_STMT = "ReturnStmt"
    IF_STMT = "IfStmt"
    WHILE_STMT = "WhileStmt"
    FOR_STMT = "ForStmt"

    # Expressions and terms
    EXPR = "Expr"
    SIMPLE_TERM = "SimpleTerm"
    COMPLEX_TERM = "ComplexTerm"

    # R-values
    SIMPLE_RVALUE = "SimpleRValue"
    NEW_RVALUE = "NewRValue"
    CALL_EXPR = "CallExpr"
    ID_RVALUE = "IDRValue"
    NEGATED_RVALUE = "NegatedRValue"


class ASTVisitor(ABC):
    """
    Visitor interface for traversing AST nodes.

    There is one abstract method per concrete node class, so a visitor that
    forgets a node kind cannot be instantiated.
    """

    @abstractmethod
    def visit_program(self, node: 'Program') -> Any: ...

    @abstractmethod
    def visit_type_decl(self, node: 'TypeDecl') -> Any: ...

    @abstractmethod
    def visit_fun_decl(self, node: 'FunDecl') -> Any: ...

    @abstractmethod
    def visit_var_decl_stmt(self, node: 'VarDeclStmt') -> Any: ...

    @abstractmethod
    def visit_assign_stmt(self, node: 'AssignStmt') -> Any: ...

    @abstractmethod
    def visit_return_stmt(self, node: 'ReturnStmt') -> Any: ...

    @abstractmethod
    def visit_if_stmt(self, node: 'IfStmt') -> Any: ...

    @abstractmethod
    def visit_while_stmt(self, node: 'WhileStmt') -> Any: ...

    @abstractmethod
    def visit_for_stmt(self, node: 'ForStmt') -> Any: ...

    @abstractmethod
    def visit_expr(self, node: 'Expr') -> Any: ...

    @abstractmethod
    def visit_simple_term(self, node: 'SimpleTerm') -> Any: ...

    @abstractmethod
    def visit_complex_term(self, node: 'ComplexTerm') -> Any: ...

    @abstractmethod
    def visit_simple_rvalue(self, node: 'SimpleRValue') -> Any: ...

    @abstractmethod
    def visit_new_rvalue(self, node: 'NewRValue') -> Any: ...

    @abstractmethod
    def visit_call_expr(self, node: 'CallExpr') -> Any: ...

    @abstractmethod
    def visit_id_rvalue(self, node: 'IDRValue') -> Any: ...

    @abstractmethod
    def visit_negated_rvalue(self, node: 'NegatedRValue') -> Any: ...


class ASTNode(ABC):
    """Base class for all AST nodes."""

    node_type: ClassVar[ASTNodeType]

    @abstractmethod
    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all child nodes, in source order."""

    def same_structure(self, other: 'ASTNode') -> bool:
        """Compare with another tree, ignoring token positions."""
        return same_structure(self, other)

    def __str__(self) -> str:
        return self.node_type.value


# ============================================================================
# Node categories
# ============================================================================

class Decl(ASTNode):
    """Base class for top-level declarations."""


class Stmt(ASTNode):
    """Base class for statements."""


class Term(ASTNode):
    """Base class for expression operands."""


class RValue(ASTNode):
    """Base class for value-producing expression atoms."""


# ============================================================================
# Expressions
# ============================================================================

@dataclass(frozen=True)
class Expr(ASTNode):
    """
    An operand optionally followed by an operator and the rest of the chain.

    All operators have the same precedence: a op b op c is a op (b op c).
    """
    negated: bool
    first: Term
    op: Optional[Token] = None
    rest: Optional['Expr'] = None

    node_type: ClassVar[ASTNodeType] = ASTNodeType.EXPR

    def __post_init__(self):
        if (self.op is None) != (self.rest is None):
            raise ValueError("Expr operator and rest must be given together")
        # 'not' takes the whole rest of the chain as one ComplexTerm
        if self.negated and (not isinstance(self.first, ComplexTerm) or self.op is not None):
            raise ValueError("negated Expr must be a lone ComplexTerm")

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_expr(self)

    def children(self) -> List[ASTNode]:
        children: List[ASTNode] = [self.first]
        if self.rest is not None:
            children.append(self.rest)
        return children


@dataclass(frozen=True)
class SimpleTerm(Term):
    """A bare r-value operand."""
    value: RValue

    node_type: ClassVar[ASTNodeType] = ASTNodeType.SIMPLE_TERM

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_simple_term(self)

    def children(self) -> List[ASTNode]:
        return [self.value]


@dataclass(frozen=True)
class ComplexTerm(Term):
    """A parenthesized or 'not'-negated sub-expression."""
    inner: Expr

    node_type: ClassVar[ASTNodeType] = ASTNodeType.COMPLEX_TERM

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_complex_term(self)

    def children(self) -> List[ASTNode]:
        return [self.inner]


# ============================================================================
# R-values
# ============================================================================

@dataclass(frozen=True)
class SimpleRValue(RValue):
    """Literal value: int, double, bool, char, string or nil."""
    literal: Token

    node_type: ClassVar[ASTNodeType] = ASTNodeType.SIMPLE_RVALUE

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_simple_rvalue(self)

    def children(self) -> List[ASTNode]:
        return []


@dataclass(frozen=True)
class NewRValue(RValue):
    """Object construction: new T."""
    type_id: Token

    node_type: ClassVar[ASTNodeType] = ASTNodeType.NEW_RVALUE

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_new_rvalue(self)

    def children(self) -> List[ASTNode]:
        return []


@dataclass(frozen=True)
class IDRValue(RValue):
    """Dotted field-access path such as a.b.c."""
    path: Tuple[Token, ...]

    node_type: ClassVar[ASTNodeType] = ASTNodeType.ID_RVALUE

    def __post_init__(self):
        if not self.path:
            raise ValueError("IDRValue path must not be empty")

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_id_rvalue(self)

    def children(self) -> List[ASTNode]:
        return []


@dataclass(frozen=True)
class NegatedRValue(RValue):
    """Arithmetic negation: neg expr."""
    inner: Expr

    node_type: ClassVar[ASTNodeType] = ASTNodeType.NEGATED_RVALUE

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_negated_rvalue(self)

    def children(self) -> List[ASTNode]:
        return [self.inner]


# ============================================================================
# Statements
# ============================================================================

@dataclass(frozen=True)
class CallExpr(Stmt, RValue):
    """Function call, usable both as a statement and as an r-value."""
    function_id: Token
    args: Tuple[Expr, ...] = ()

    node_type: ClassVar[ASTNodeType] = ASTNodeType.CALL_EXPR

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_call_expr(self)

    def children(self) -> List[ASTNode]:
        return list(self.args)


@dataclass(frozen=True)
class VarDeclStmt(Stmt):
    """Variable declaration: var id (: type)? = expr."""
    id: Token
    declared_type: Optional[Token]
    init: Expr

    node_type: ClassVar[ASTNodeType] = ASTNodeType.VAR_DECL_STMT

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_var_decl_stmt(self)

    def children(self) -> List[ASTNode]:
        return [self.init]


@dataclass(frozen=True)
class AssignStmt(Stmt):
    """Assignment to a dotted lvalue path."""
    path: Tuple[Token, ...]
    value: Expr

    node_type: ClassVar[ASTNodeType] = ASTNodeType.ASSIGN_STMT

    def __post_init__(self):
        if not self.path:
            raise ValueError("AssignStmt path must not be empty")

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_assign_stmt(self)

    def children(self) -> List[ASTNode]:
        return [self.value]


@dataclass(frozen=True)
class ReturnStmt(Stmt):
    """Return statement."""
    value: Expr

    node_type: ClassVar[ASTNodeType] = ASTNodeType.RETURN_STMT

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_return_stmt(self)

    def children(self) -> List[ASTNode]:
        return [self.value]


@dataclass(frozen=True)
class BasicIf:
    """Condition and body shared by the 'if' clause and each 'elseif'."""
    cond: Expr
    body: Tuple[Stmt, ...] = ()


@dataclass(frozen=True)
class IfStmt(Stmt):
    """If statement; empty else_body means there is no 'else' clause."""
    if_part: BasicIf
    else_ifs: Tuple[BasicIf, ...] = ()
    else_body: Tuple[Stmt, ...] = ()

    node_type: ClassVar[ASTNodeType] = ASTNodeType.IF_STMT

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_if_stmt(self)

    def children(self) -> List[ASTNode]:
        children: List[ASTNode] = []
        for clause in (self.if_part,) + self.else_ifs:
            children.append(clause.cond)
            children.extend(clause.body)
        children.extend(self.else_body)
        return children


@dataclass(frozen=True)
class WhileStmt(Stmt):
    """While loop statement."""
    cond: Expr
    body: Tuple[Stmt, ...] = ()

    node_type: ClassVar[ASTNodeType] = ASTNodeType.WHILE_STMT

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_while_stmt(self)

    def children(self) -> List[ASTNode]:
        return [self.cond] + list(self.body)


@dataclass(frozen=True)
class ForStmt(Stmt):
    """Counting loop: for id = start to end do ... end."""
    var_id: Token
    start: Expr
    end: Expr
    body: Tuple[Stmt, ...] = ()

    node_type: ClassVar[ASTNodeType] = ASTNodeType.FOR_STMT

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_for_stmt(self)

    def children(self) -> List[ASTNode]:
        return [self.start, self.end] + list(self.body)


# ============================================================================
# Declarations
# ============================================================================

@dataclass(frozen=True)
class TypeDecl(Decl):
    """User-defined record type; fields are var declarations."""
    id: Token
    fields: Tuple[VarDeclStmt, ...] = ()

    node_type: ClassVar[ASTNodeType] = ASTNodeType.TYPE_DECL

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_type_decl(self)

    def children(self) -> List[ASTNode]:
        return list(self.fields)


@dataclass(frozen=True)
class FunParam:
    """Function parameter."""
    id: Token
    type: Token


@dataclass(frozen=True)
class FunDecl(Decl):
    """Function definition; return_type may be the nil token."""
    return_type: Token
    id: Token
    params: Tuple[FunParam, ...] = ()
    body: Tuple[Stmt, ...] = ()

    node_type: ClassVar[ASTNodeType] = ASTNodeType.FUN_DECL

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_fun_decl(self)

    def children(self) -> List[ASTNode]:
        return list(self.body)


@dataclass(frozen=True)
class Program(ASTNode):
    """Root AST node: declarations in source order."""
    decls: Tuple[Decl, ...] = ()

    node_type: ClassVar[ASTNodeType] = ASTNodeType.PROGRAM

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_program(self)

    def children(self) -> List[ASTNode]:
        return list(self.decls)


# ============================================================================
# Structural comparison
# ============================================================================

def structure_of(value: Any) -> Any:
    """
    Reduce a tree to nested tuples of class names, token types and lexemes.

    Token positions are dropped, so two trees parsed from differently
    formatted sources compare equal when their token content matches.
    """
    if isinstance(value, Token):
        return (value.type, value.lexeme)
    if isinstance(value, Expr):
        # Operator chains are flattened into one tuple of links
        links = []
        while value is not None:
            links.append((value.negated, structure_of(value.first), structure_of(value.op)))
            value = value.rest
        return ("Expr",) + tuple(links)
    if isinstance(value, tuple):
        return tuple(structure_of(item) for item in value)
    if is_dataclass(value):
        return (type(value).__name__,) + tuple(
            structure_of(getattr(value, f.name)) for f in fields(value)
        )
    return value


def same_structure(left: Any, right: Any) -> bool:
    """Check whether two trees are equal apart from token positions."""
    return structure_of(left) == structure_of(right)
