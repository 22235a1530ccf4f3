"""Expression strategy: method calls, property reads and field reads.

The thunk is built as a syntax tree with the `ast` module, then compiled once.
For a method `Calc.add(self, a: int, b: int) -> int` the tree unparses to

    def Invokeadd(target, arguments):
        return cast_0(target).add(unbox_1(arguments[0]), unbox_2(arguments[1]))

where cast_0 and unbox_* are conversions bound into the function's globals.
Conversions to `object` are omitted entirely.
"""

from __future__ import annotations

import ast
import keyword
import logging
from typing import Callable

from .config import DEFAULT_OPTIONS, Options
from .convert import Conversion, UnboxAny, cast_class, conversion_for
from .errors import MemberError, MissingAccessorError, UnsupportedMemberError
from .loader import identifier, load_function
from .members import FieldDescriptor, Member, MethodDescriptor, PropertyDescriptor

logger = logging.getLogger(__name__)


def _is_plain_name(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def member_conversion(typ: object, member: Member) -> Conversion | None:
    """conversion_for, with unsupported annotations blamed on member."""
    try:
        return conversion_for(typ)
    except UnsupportedMemberError as e:
        raise UnsupportedMemberError(e.msg, member.qualname) from e


# ============================================================
# TREE BUILDING
# ============================================================


class Lambda:
    """A function tree ready to compile: `def name(params): body`.

    Invariants:
    - body is a single expression; void lambdas evaluate it and return None
    - every free name in body is a parameter or a key of constants
    """

    def __init__(
        self,
        name: str,
        params: list[str],
        body: ast.expr,
        void: bool,
        constants: dict[str, object],
    ):
        self.name = name
        self.params = params
        self.body = body
        self.void = void
        self.constants = constants

    def tree(self) -> ast.Module:
        if self.void:
            stmts: list[ast.stmt] = [
                ast.Expr(value=self.body),
                ast.Return(value=ast.Constant(value=None)),
            ]
        else:
            stmts = [ast.Return(value=self.body)]
        func = ast.FunctionDef(
            name=self.name,
            args=ast.arguments(
                posonlyargs=[],
                args=[ast.arg(arg=p) for p in self.params],
                vararg=None,
                kwonlyargs=[],
                kw_defaults=[],
                kwarg=None,
                defaults=[],
            ),
            body=stmts,
            decorator_list=[],
            returns=None,
        )
        if "type_params" in ast.FunctionDef._fields:
            func.type_params = []
        # Line numbers match ast.unparse output: def on 1, statement i on i + 2.
        func.lineno = 1
        func.end_lineno = len(stmts) + 1
        for i, stmt in enumerate(stmts):
            for node in ast.walk(stmt):
                node.lineno = node.end_lineno = i + 2
        return ast.fix_missing_locations(ast.Module(body=[func], type_ignores=[]))

    def source(self) -> str:
        return ast.unparse(self.tree())

    def compile(self, options: Options = DEFAULT_OPTIONS) -> Callable[..., object]:
        return load_function(
            self.tree(), self.name, self.source(), self.constants, options
        )


class ExpressionBuilder:
    """Factory for the nodes of one thunk tree. Owns the constants it references."""

    def __init__(self) -> None:
        self.constants: dict[str, object] = {}

    def parameter(self, name: str) -> ast.Name:
        return ast.Name(id=name, ctx=ast.Load())

    def constant(self, value: object, hint: str) -> ast.Name:
        """Reference value through a fresh global name."""
        name = identifier(hint) + "_" + str(len(self.constants))
        self.constants[name] = value
        return ast.Name(id=name, ctx=ast.Load())

    def convert(self, expr: ast.expr, conversion: Conversion | None) -> ast.expr:
        if conversion is None:
            return expr
        hint = "unbox" if isinstance(conversion, UnboxAny) else "cast"
        return ast.Call(func=self.constant(conversion, hint), args=[expr], keywords=[])

    def array_index(self, array: ast.expr, index: int) -> ast.Subscript:
        return ast.Subscript(
            value=array, slice=ast.Constant(value=index), ctx=ast.Load()
        )

    def member(self, instance: ast.expr, name: str) -> ast.expr:
        """instance.name, or getattr(instance, name) when name is not an identifier."""
        if _is_plain_name(name):
            return ast.Attribute(value=instance, attr=name, ctx=ast.Load())
        return ast.Call(
            func=ast.Name(id="getattr", ctx=ast.Load()),
            args=[instance, ast.Constant(value=name)],
            keywords=[],
        )

    def load(self, instance: ast.expr, name: str) -> ast.Call:
        """object.__getattribute__(instance, name); class overrides never run."""
        return ast.Call(
            func=self.constant(object.__getattribute__, "load"),
            args=[instance, ast.Constant(value=name)],
            keywords=[],
        )

    def call(
        self,
        instance: ast.expr,
        name: str,
        args: list[ast.expr],
        keywords: list[ast.keyword],
    ) -> ast.Call:
        return ast.Call(func=self.member(instance, name), args=args, keywords=keywords)

    def lambda_(
        self, name: str, params: list[str], body: ast.expr, void: bool = False
    ) -> Lambda:
        return Lambda(identifier(name), params, body, void, self.constants)


def parameter_expressions(
    builder: ExpressionBuilder, method: MethodDescriptor, arguments: ast.expr
) -> tuple[list[ast.expr], list[ast.keyword]]:
    """One converted `arguments[i]` per declared parameter, in declaration order."""
    positional: list[ast.expr] = []
    keywords: list[ast.keyword] = []
    for index, parameter in enumerate(method.parameters):
        value = builder.convert(
            builder.array_index(arguments, index),
            member_conversion(parameter.type, method),
        )
        if parameter.keyword_only:
            keywords.append(ast.keyword(arg=parameter.name, value=value))
        else:
            positional.append(value)
    return positional, keywords


# ============================================================
# THUNK TREES
# ============================================================


def method_lambda(method: MethodDescriptor) -> Lambda:
    """Tree of `(target, arguments) -> result` for method."""
    builder = ExpressionBuilder()
    target = builder.parameter("target")
    arguments = builder.parameter("arguments")
    instance = builder.convert(target, cast_class(method.declaring_type))
    positional, keywords = parameter_expressions(builder, method, arguments)
    call = builder.call(instance, method.name, positional, keywords)
    return builder.lambda_(
        "Invoke" + method.name, ["target", "arguments"], call, void=method.is_void
    )


def getter_lambda(member: PropertyDescriptor | FieldDescriptor) -> Lambda:
    """Tree of `(target) -> value` for a property or field.

    Properties go through their getter by ordinary attribute access, so a
    property with no getter is rejected here rather than failing per call.
    Fields are read straight from the instance, like StoreField writes them.
    """
    if isinstance(member, PropertyDescriptor) and member.getter is None:
        raise MissingAccessorError("property has no getter", member.qualname)
    builder = ExpressionBuilder()
    target = builder.parameter("target")
    instance = builder.convert(target, cast_class(member.declaring_type))
    if isinstance(member, FieldDescriptor):
        access = builder.load(instance, member.name)
    else:
        access = builder.member(instance, member.name)
    return builder.lambda_("Get" + member.name, ["target"], access)


class ExpressionCompiler:
    """Read-side strategy: builds a tree per member and compiles it."""

    kind = "expression"

    def __init__(self, options: Options = DEFAULT_OPTIONS):
        self.options = options

    def lambda_for(self, member: Member) -> Lambda:
        if isinstance(member, MethodDescriptor):
            return method_lambda(member)
        if isinstance(member, (PropertyDescriptor, FieldDescriptor)):
            return getter_lambda(member)
        raise MemberError("cannot compile a read thunk for " + type(member).__name__)

    def source(self, member: Member) -> str:
        return self.lambda_for(member).source()

    def build(self, member: Member) -> Callable[..., object]:
        lam = self.lambda_for(member)
        thunk = lam.compile(self.options)
        logger.debug("compiled %s for %s", lam.name, member.qualname)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s", lam.source())
        return thunk
