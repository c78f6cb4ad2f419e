"""Remote method naming, visibility and signatures."""

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from dataclasses_json import DataClassJsonMixin

from .classifier import type_name
from .python import descriptor_for, type_hints

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


@dataclass(frozen=True)
class MethodMetadata:
    """Remote method options declared for a host method.

    - method: name exposed to remote callers, None or "" keeps the host name
    - hidden: exclude the method from the service's method table
    - introspection_method: the method is one of the built-in system.* methods
    """

    method: str | None = None
    hidden: bool = False
    introspection_method: bool | None = None


def resolve_name(metadata: MethodMetadata | None, fallback_name: str) -> str:
    """Return the remote name for a method."""
    if metadata is not None and metadata.method:
        return metadata.method
    return fallback_name


def is_visible(metadata: MethodMetadata | None) -> bool:
    """Check if a method should be listed in the service's method table."""
    if metadata is None:
        return True
    return not (metadata.hidden or metadata.introspection_method is True)


@dataclass
class ParamSignature(DataClassJsonMixin):
    """Wire type of a single method parameter."""

    name: str
    type: str | None


@dataclass
class MethodSignature(DataClassJsonMixin):
    """Wire signature of a remote method.

    Type names are None where the host type has no wire mapping.
    """

    name: str
    visible: bool
    returns: str | None
    params: list[ParamSignature] = field(default_factory=list)
    help: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.returns is not None and all(p.type is not None for p in self.params)

    def wire_signature(self) -> list[str | None]:
        """Return [return type, param types...] as used by system.methodSignature."""
        return [self.returns, *(p.type for p in self.params)]


def method_signature(
    func: Callable[..., Any],
    metadata: MethodMetadata | None = None,
    *,
    fallback_name: str | None = None,
    unbound: bool = False,
) -> MethodSignature:
    """Build the wire signature for a function or method.

    Bound methods already leave out their instance parameter. Pass
    ``unbound=True`` for a plain function looked up on a class, whose first
    positional parameter receives the instance. Unannotated parameters and
    return values are treated as "any".
    """
    hints = type_hints(func)
    parameters = list(inspect.signature(func).parameters.values())
    if unbound and parameters and parameters[0].kind in _POSITIONAL:
        parameters = parameters[1:]

    params: list[ParamSignature] = []
    for param in parameters:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        params.append(ParamSignature(param.name, type_name(descriptor_for(hints.get(param.name, Any)))))

    return MethodSignature(
        name=resolve_name(metadata, fallback_name or func.__name__),
        visible=is_visible(metadata),
        returns=type_name(descriptor_for(hints.get("return", Any))),
        params=params,
        help=inspect.getdoc(func),
    )


def _is_python_method(obj: Any) -> bool:
    return inspect.isfunction(obj) or inspect.ismethod(obj)


def service_signatures(
    cls: type, metadata: Mapping[str, MethodMetadata] | None = None
) -> list[MethodSignature]:
    """Build signatures for the public methods of a class, in name order.

    Only methods written in Python are listed; methods inherited from
    builtin bases have no inspectable signature. ``metadata`` maps
    attribute names to their remote method options.
    """
    metadata = metadata or {}
    signatures: list[MethodSignature] = []

    for attr_name, attr in inspect.getmembers(cls, _is_python_method):
        if attr_name.startswith("_"):
            continue
        # staticmethod and classmethod wrappers are not functions
        unbound = inspect.isfunction(inspect.getattr_static(cls, attr_name))
        signatures.append(
            method_signature(attr, metadata.get(attr_name), fallback_name=attr_name, unbound=unbound)
        )

    return signatures
