import inspect
import typing
from typing import Any, Callable, Dict, List, Optional, Tuple, Union, get_args, get_origin, Annotated

from .constants import (
    COMPONENT_FLAG,
    CONSTRUCTOR_FLAG,
    FACTORY_FLAG,
    NON_SINGLETON_FLAG,
    ORDERING_KEY,
    PROVIDES_FLAG,
    ROLE_COMPONENT,
    ROLE_FACTORY,
    SINGLETON_FLAG,
)
from .decorators import DependentType
from .descriptor import ConstructorDescriptor, MethodDescriptor, ParameterSlot, TypeDescriptor
from .exceptions import ConfigurationError, type_name

KeyT = Union[str, type]


def _flag(obj: Any, name: str) -> bool:
    fn = getattr(obj, "__func__", obj)
    return bool(getattr(fn, name, False))


def _class_flag(cls: type, name: str) -> bool:
    # Markers are not inherited: a subclass of a component is not a component.
    return bool(vars(cls).get(name, False))


def roles_of(cls: Any) -> Tuple[str, ...]:
    if not isinstance(cls, type):
        return ()
    roles: List[str] = []
    if _class_flag(cls, COMPONENT_FLAG):
        roles.append(ROLE_COMPONENT)
    if _class_flag(cls, FACTORY_FLAG):
        roles.append(ROLE_FACTORY)
    return tuple(roles)


def _resolve_one(ann: Any, globalns: Dict[str, Any], localns: Optional[Dict[str, Any]]) -> Any:
    if not isinstance(ann, str):
        return ann
    try:
        return eval(ann, globalns, localns)
    except (NameError, AttributeError, SyntaxError, TypeError):
        # Name not visible from the function: the annotation text is the key.
        return ann


def _type_hints(fn: Callable[..., Any], localns: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(fn, localns=localns, include_extras=True)
    except (NameError, AttributeError, SyntaxError, TypeError):
        pass
    # Resolve annotation by annotation; names that still fail keep their text.
    globalns = getattr(fn, "__globals__", {})
    raw = getattr(fn, "__annotations__", None) or {}
    return {name: _resolve_one(ann, globalns, localns) for name, ann in raw.items()}


def _extract_dependent(ann: Any) -> Tuple[Any, bool]:
    if get_origin(ann) is Annotated:
        args = get_args(ann)
        base = args[0] if args else Any
        return base, any(isinstance(m, DependentType) for m in args[1:])
    return ann, False


def _signature(fn: Callable[..., Any], owner: Any = None) -> inspect.Signature:
    try:
        return inspect.signature(fn)
    except (ValueError, TypeError) as e:
        name = getattr(fn, "__name__", repr(fn))
        where = f"{type_name(owner)}.{name}" if owner is not None else name
        raise ConfigurationError(f"Cannot inspect the signature of \"{where}\": {e}") from e


def _localns(owner: Any) -> Optional[Dict[str, Any]]:
    if isinstance(owner, type):
        return {owner.__name__: owner}
    return None


def analyze_parameters(
    fn: Callable[..., Any],
    *,
    skip_first: bool,
    owner: Any = None,
) -> Tuple[ParameterSlot, ...]:
    sig = _signature(fn, owner)
    hints = _type_hints(fn, _localns(owner))
    params = list(sig.parameters.values())
    if skip_first and params:
        params = params[1:]

    plan: List[ParameterSlot] = []
    for param in params:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        ann = hints.get(param.name, param.annotation)
        base, dependent = _extract_dependent(ann)

        key: KeyT
        if ann is inspect.Parameter.empty:
            key = param.name
        else:
            key = base
        plan.append(
            ParameterSlot(
                name=param.name,
                key=key,
                dependent_type=dependent,
                keyword_only=param.kind is inspect.Parameter.KEYWORD_ONLY,
            )
        )
    return tuple(plan)


def call_with_slots(target: Callable[..., Any], slots: Tuple[ParameterSlot, ...], args: Tuple[Any, ...]) -> Any:
    """Call *target* with *args* bound to *slots*: keyword-only slots by name, the rest by position."""
    positional = [arg for slot, arg in zip(slots, args) if not slot.keyword_only]
    keywords = {slot.name: arg for slot, arg in zip(slots, args) if slot.keyword_only}
    return target(*positional, **keywords)


def _required_count(fn: Callable[..., Any], owner: Any = None) -> int:
    params = list(_signature(fn, owner).parameters.values())[1:]
    return sum(
        1 for p in params
        if p.default is inspect.Parameter.empty
        and p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    )


def _init_constructor(cls: type) -> ConstructorDescriptor:
    init = cls.__init__
    designated = _flag(init, CONSTRUCTOR_FLAG)
    if designated or _required_count(init, cls) > 0:
        parameters = analyze_parameters(init, skip_first=True, owner=cls)
    else:
        # Every argument has a default: usable as a no-argument constructor.
        parameters = ()
    return ConstructorDescriptor(
        name="__init__",
        parameters=parameters,
        construct=lambda args: call_with_slots(cls, parameters, args),
        designated=designated,
        public=True,
    )


def _alternate_constructors(cls: type) -> List[ConstructorDescriptor]:
    out: List[ConstructorDescriptor] = []
    for name, member in vars(cls).items():
        if not isinstance(member, classmethod) or not _flag(member, CONSTRUCTOR_FLAG):
            continue
        parameters = analyze_parameters(member.__func__, skip_first=True, owner=cls)

        def construct(args, _name=name, _slots=parameters):
            return call_with_slots(getattr(cls, _name), _slots, args)

        out.append(
            ConstructorDescriptor(
                name=name,
                parameters=parameters,
                construct=construct,
                designated=True,
                public=not name.startswith("_"),
            )
        )
    return out


def _return_type(fn: Callable[..., Any], owner: Any = None) -> Optional[KeyT]:
    ann = _type_hints(fn, _localns(owner)).get("return", _signature(fn, owner).return_annotation)
    if ann is inspect.Signature.empty or ann is None or ann is type(None):
        return None
    base, _ = _extract_dependent(ann)
    return base


def _provider_methods(cls: type) -> List[MethodDescriptor]:
    out: List[MethodDescriptor] = []
    for name, member in vars(cls).items():
        fn = getattr(member, "__func__", member)
        if not inspect.isfunction(fn) or not _flag(fn, PROVIDES_FLAG):
            continue
        static = isinstance(member, (staticmethod, classmethod))
        parameters = analyze_parameters(fn, skip_first=not isinstance(member, staticmethod), owner=cls)

        if static:
            def invoke(_instance, args, _name=name, _slots=parameters):
                return call_with_slots(getattr(cls, _name), _slots, args)
        else:
            def invoke(instance, args, _name=name, _slots=parameters):
                return call_with_slots(getattr(instance, _name), _slots, args)

        out.append(
            MethodDescriptor(
                name=name,
                return_type=_return_type(fn, cls),
                parameters=parameters,
                invoke=invoke,
                provider=True,
                singleton=_flag(fn, SINGLETON_FLAG),
                non_singleton=_flag(fn, NON_SINGLETON_FLAG),
                static=static,
                public=not name.startswith("_"),
                ordering=int(getattr(fn, ORDERING_KEY, 0)),
            )
        )
    return out


def describe(cls: type) -> TypeDescriptor:
    """Build the :class:`TypeDescriptor` of a decorated class.

    Raises:
        ConfigurationError: A constructor or provider method has no inspectable signature.
    """
    roles = roles_of(cls)
    is_factory = ROLE_FACTORY in roles
    constructors = [_init_constructor(cls)] + _alternate_constructors(cls)
    return TypeDescriptor(
        key=cls,
        component=ROLE_COMPONENT in roles,
        factory=is_factory,
        singleton=_class_flag(cls, SINGLETON_FLAG),
        non_singleton=_class_flag(cls, NON_SINGLETON_FLAG),
        ordering=int(vars(cls).get(ORDERING_KEY, 0)),
        constructors=tuple(constructors),
        methods=tuple(_provider_methods(cls)) if is_factory else (),
        ancestors=tuple(cls.__mro__),
    )
