"""Render the declaration model as TypeScript source text."""

from __future__ import annotations

import json

from typed_sqlgen.decls import (
    ArrayLiteral,
    ArrowFunction,
    AsExpr,
    Await,
    Binary,
    Call,
    Conditional,
    ConstStatement,
    Declaration,
    ElementAccess,
    Expr,
    ExprStatement,
    FunctionDecl,
    Identifier,
    IfStatement,
    ImportDecl,
    InterfaceDecl,
    Not,
    NullLiteral,
    NumberLiteral,
    ObjectLiteral,
    Param,
    PropertyAccess,
    ReturnStatement,
    Stmt,
    TaggedTemplate,
    TemplateLiteral,
    TypeAliasDecl,
)
from typed_sqlgen.types import (
    ArrayTypeRef,
    EnumTypeRef,
    NullTypeRef,
    PrimitiveTypeRef,
    StringLiteralTypeRef,
    TupleTypeRef,
    TypeCategory,
    TypeReference,
    TypeRef,
    UnionTypeRef,
)

HEADER = "// Code generated by sqlc. DO NOT EDIT.\n\n"

INDENT = "    "

PRIMITIVE_NAMES: dict[TypeCategory, str] = {
    TypeCategory.BOOLEAN: "boolean",
    TypeCategory.INTEGER: "number",
    TypeCategory.FLOAT: "number",
    TypeCategory.BINARY: "Buffer",
    TypeCategory.TIMESTAMP: "Date",
    TypeCategory.OPAQUE: "any",
    TypeCategory.STRING: "string",
    TypeCategory.VOID: "void",
}

# Expressions that must be parenthesized when used as a receiver or operand
_LOOSE_EXPRS = (AsExpr, Await, Conditional, Binary, ArrowFunction, Not)


def escape_template(text: str) -> str:
    """Escape text for use between backticks without changing its value."""
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def string_literal(value: str) -> str:
    """Return a double-quoted string literal."""
    return json.dumps(value, ensure_ascii=False)


class TypeScriptRenderer:
    """Turns declarations into TypeScript text."""

    extension = ".ts"

    def render_file(self, declarations: list[Declaration]) -> str:
        """Render a whole file, header included."""
        output = HEADER
        for decl in declarations:
            output += self.render_declaration(decl)
            output += "\n\n"
        return output

    def render_declaration(self, decl: Declaration) -> str:
        if isinstance(decl, ImportDecl):
            return self._render_import(decl)
        elif isinstance(decl, TypeAliasDecl):
            export = "export " if decl.exported else ""
            return f"{export}type {decl.name} = {self.render_type(decl.type)};"
        elif isinstance(decl, InterfaceDecl):
            return self._render_interface(decl)
        elif isinstance(decl, FunctionDecl):
            return self._render_function(decl)
        raise TypeError(f"Unsupported declaration: {type(decl).__name__}")

    # ---- Types ----

    def render_type(self, type_ref: TypeRef) -> str:
        if isinstance(type_ref, PrimitiveTypeRef):
            return PRIMITIVE_NAMES[type_ref.category]
        elif isinstance(type_ref, EnumTypeRef):
            return type_ref.name
        elif isinstance(type_ref, TypeReference):
            if not type_ref.args:
                return type_ref.name
            args = ", ".join(self.render_type(a) for a in type_ref.args)
            return f"{type_ref.name}<{args}>"
        elif isinstance(type_ref, ArrayTypeRef):
            element = self.render_type(type_ref.element)
            if isinstance(type_ref.element, UnionTypeRef):
                return f"({element})[]"
            return f"{element}[]"
        elif isinstance(type_ref, UnionTypeRef):
            return " | ".join(self.render_type(m) for m in type_ref.members)
        elif isinstance(type_ref, NullTypeRef):
            return "null"
        elif isinstance(type_ref, StringLiteralTypeRef):
            return string_literal(type_ref.value)
        elif isinstance(type_ref, TupleTypeRef):
            return "[" + ", ".join(self.render_type(e) for e in type_ref.elements) + "]"
        raise TypeError(f"Unsupported type descriptor: {type(type_ref).__name__}")

    # ---- Declarations ----

    def _render_import(self, decl: ImportDecl) -> str:
        specifiers = [item.name for item in decl.names]
        keyword = "import type" if decl.type_only else "import"
        return f"{keyword} {{ {', '.join(specifiers)} }} from {string_literal(decl.module)};"

    def _render_interface(self, decl: InterfaceDecl) -> str:
        export = "export " if decl.exported else ""
        lines = [f"{export}interface {decl.name} {{"]
        for prop in decl.fields:
            lines.append(f"{INDENT}{prop.name}: {self.render_type(prop.type)};")
        lines.append("}")
        return "\n".join(lines)

    def _render_function(self, decl: FunctionDecl) -> str:
        modifiers = ""
        if decl.exported:
            modifiers += "export "
        if decl.is_async:
            modifiers += "async "
        params = self._render_params(decl.params)
        header = (
            f"{modifiers}function {decl.name}({params}): "
            f"{self.render_type(decl.return_type)} {{"
        )
        lines = [header]
        for stmt in decl.body:
            lines.append(self.render_statement(stmt, 1))
        lines.append("}")
        return "\n".join(lines)

    def _render_params(self, params: list[Param]) -> str:
        rendered = []
        for param in params:
            if param.type is None:
                rendered.append(param.name)
            else:
                rendered.append(f"{param.name}: {self.render_type(param.type)}")
        return ", ".join(rendered)

    # ---- Statements ----

    def render_statement(self, stmt: Stmt, level: int = 0) -> str:
        pad = INDENT * level
        if isinstance(stmt, ExprStatement):
            return f"{pad}{self.render_expr(stmt.expr, level)};"
        elif isinstance(stmt, ConstStatement):
            return f"{pad}const {stmt.name} = {self.render_expr(stmt.value, level)};"
        elif isinstance(stmt, ReturnStatement):
            if stmt.value is None:
                return f"{pad}return;"
            return f"{pad}return {self.render_expr(stmt.value, level)};"
        elif isinstance(stmt, IfStatement):
            lines = [f"{pad}if ({self.render_expr(stmt.cond, level)}) {{"]
            for inner in stmt.body:
                lines.append(self.render_statement(inner, level + 1))
            lines.append(f"{pad}}}")
            return "\n".join(lines)
        raise TypeError(f"Unsupported statement: {type(stmt).__name__}")

    # ---- Expressions ----

    def render_expr(self, expr: Expr, level: int = 0) -> str:
        if isinstance(expr, Identifier):
            return expr.name
        elif isinstance(expr, PropertyAccess):
            return f"{self._operand(expr.obj, level)}.{expr.name}"
        elif isinstance(expr, ElementAccess):
            return f"{self._operand(expr.obj, level)}[{expr.index}]"
        elif isinstance(expr, Call):
            args = ", ".join(self.render_expr(a, level) for a in expr.args)
            return f"{self._operand(expr.callee, level)}({args})"
        elif isinstance(expr, Await):
            return f"await {self._operand(expr.expr, level)}"
        elif isinstance(expr, AsExpr):
            inner = expr.expr
            rendered = self.render_expr(inner, level)
            if isinstance(inner, (Conditional, Binary, ArrowFunction)):
                rendered = f"({rendered})"
            return f"{rendered} as {self.render_type(expr.type)}"
        elif isinstance(expr, ArrayLiteral):
            return "[" + ", ".join(self.render_expr(i, level) for i in expr.items) + "]"
        elif isinstance(expr, ObjectLiteral):
            return self._render_object(expr, level)
        elif isinstance(expr, ArrowFunction):
            params = self._render_params(expr.params)
            body = self.render_expr(expr.body, level)
            if isinstance(expr.body, ObjectLiteral):
                body = f"({body})"
            return f"({params}) => {body}"
        elif isinstance(expr, Conditional):
            return (
                f"{self.render_expr(expr.cond, level)} ? "
                f"{self.render_expr(expr.when_true, level)} : "
                f"{self.render_expr(expr.when_false, level)}"
            )
        elif isinstance(expr, Binary):
            left = self._operand(expr.left, level)
            right = self._operand(expr.right, level)
            return f"{left} {expr.op} {right}"
        elif isinstance(expr, Not):
            return f"!{self._operand(expr.expr, level)}"
        elif isinstance(expr, NumberLiteral):
            return str(expr.value)
        elif isinstance(expr, NullLiteral):
            return "null"
        elif isinstance(expr, TemplateLiteral):
            return f"`{escape_template(expr.text)}`"
        elif isinstance(expr, TaggedTemplate):
            return self._render_tagged_template(expr, level)
        raise TypeError(f"Unsupported expression: {type(expr).__name__}")

    def _operand(self, expr: Expr, level: int) -> str:
        rendered = self.render_expr(expr, level)
        if isinstance(expr, _LOOSE_EXPRS):
            return f"({rendered})"
        return rendered

    def _render_object(self, expr: ObjectLiteral, level: int) -> str:
        if not expr.properties:
            return "{}"
        pad = INDENT * (level + 1)
        lines = [
            f"{pad}{name}: {self.render_expr(value, level + 1)}"
            for name, value in expr.properties
        ]
        return "{\n" + ",\n".join(lines) + "\n" + INDENT * level + "}"

    def _render_tagged_template(self, expr: TaggedTemplate, level: int) -> str:
        tag = self._operand(expr.tag, level)
        if expr.type_args:
            tag += "<" + ", ".join(self.render_type(t) for t in expr.type_args) + ">"
        body = escape_template(expr.fragments[0])
        for sub, fragment in zip(expr.exprs, expr.fragments[1:]):
            body += "${" + self.render_expr(sub, level) + "}" + escape_template(fragment)
        return f"{tag}`{body}`"
