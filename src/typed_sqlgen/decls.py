"""Declaration model: expressions, statements and top-level declarations.

Drivers build these nodes; typed_sqlgen.render turns them into source text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from typed_sqlgen.types import TypeRef


# ---- Expression nodes ----


@dataclass
class Identifier:
    """A bare name: sql, args, row."""
    name: str


@dataclass
class PropertyAccess:
    """obj.name"""
    obj: Expr
    name: str


@dataclass
class ElementAccess:
    """obj[index]"""
    obj: Expr
    index: int


@dataclass
class Call:
    """callee(arg, ...)"""
    callee: Expr
    args: list[Expr] = field(default_factory=list)


@dataclass
class Await:
    """await expr"""
    expr: Expr


@dataclass
class AsExpr:
    """expr as Type"""
    expr: Expr
    type: TypeRef


@dataclass
class ArrayLiteral:
    """[a, b, c]"""
    items: list[Expr] = field(default_factory=list)


@dataclass
class ObjectLiteral:
    """{ key: value, ... }, one property per line."""
    properties: list[tuple[str, Expr]] = field(default_factory=list)


@dataclass
class ArrowFunction:
    """(param: Type) => body"""
    params: list[Param]
    body: Expr


@dataclass
class Conditional:
    """cond ? when_true : when_false"""
    cond: Expr
    when_true: Expr
    when_false: Expr


@dataclass
class Binary:
    """left op right"""
    left: Expr
    op: str
    right: Expr


@dataclass
class Not:
    """!expr"""
    expr: Expr


@dataclass
class NumberLiteral:
    """An integer literal."""
    value: int


@dataclass
class NullLiteral:
    """null"""
    pass


@dataclass
class TemplateLiteral:
    """A template literal without substitutions, used for query text."""
    text: str


@dataclass
class TaggedTemplate:
    """tag<TypeArgs>`fragment0${expr0}fragment1...`

    ``fragments`` always has one more entry than ``exprs``.
    """
    tag: Expr
    fragments: list[str]
    exprs: list[Expr] = field(default_factory=list)
    type_args: list[TypeRef] = field(default_factory=list)


# Union of all expression types
Expr = Union[
    Identifier, PropertyAccess, ElementAccess, Call, Await, AsExpr,
    ArrayLiteral, ObjectLiteral, ArrowFunction, Conditional, Binary, Not,
    NumberLiteral, NullLiteral, TemplateLiteral, TaggedTemplate,
]


# ---- Statement nodes ----


@dataclass
class ExprStatement:
    """An expression evaluated for effect."""
    expr: Expr


@dataclass
class ConstStatement:
    """const name = value"""
    name: str
    value: Expr


@dataclass
class ReturnStatement:
    """return [value]"""
    value: Expr | None = None


@dataclass
class IfStatement:
    """if (cond) { body }"""
    cond: Expr
    body: list[Stmt] = field(default_factory=list)


# Union of all statement types
Stmt = Union[ExprStatement, ConstStatement, ReturnStatement, IfStatement]


# ---- Declarations ----


@dataclass
class Param:
    """A function or arrow-function parameter."""
    name: str
    type: TypeRef | None = None


@dataclass
class ImportSpecifier:
    """One imported name."""
    name: str


@dataclass
class ImportDecl:
    """import [type] { specifiers } from "module" """
    module: str
    names: list[ImportSpecifier]
    type_only: bool = False


@dataclass
class TypeAliasDecl:
    """export type Name = Type"""
    name: str
    type: TypeRef
    exported: bool = True


@dataclass
class PropertySignature:
    """A field of an interface."""
    name: str
    type: TypeRef


@dataclass
class InterfaceDecl:
    """export interface Name { fields }"""
    name: str
    fields: list[PropertySignature] = field(default_factory=list)
    exported: bool = True


@dataclass
class FunctionDecl:
    """export async function name(params): ReturnType { body }"""
    name: str
    params: list[Param]
    return_type: TypeRef
    body: list[Stmt] = field(default_factory=list)
    is_async: bool = True
    exported: bool = True


# Union of all top-level declaration types
Declaration = Union[ImportDecl, TypeAliasDecl, InterfaceDecl, FunctionDecl]
