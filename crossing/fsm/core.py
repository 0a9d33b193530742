# Small deterministic FSM in the spirit of the 'transitions' library
# https://github.com/pytransitions/transitions

from __future__ import annotations

from collections import defaultdict
from enum import Enum
from functools import partial
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from graphviz import Digraph

from crossing.internal.log import get_logger

StateKey = Union[str, Enum]
Callback = Callable[["EventData"], Any]
Condition = Callable[["EventData"], bool]

log = get_logger("fsm")

WILDCARD = "*"


def _key(value: StateKey) -> str:
    return value.name if isinstance(value, Enum) else str(value)


def _as_list(value: Optional[Union[Callable, Sequence[Callable]]]) -> List[Callable]:
    if value is None:
        return []
    if callable(value):
        return [value]
    return list(value)


class MachineError(RuntimeError):
    """Raised by a strict trigger that matched no transition."""


class State:
    def __init__(self, key: StateKey, final: bool = False) -> None:
        self.key = key
        self.final = final
        self.on_enter: List[Callback] = []
        self.on_exit: List[Callback] = []

    @property
    def name(self) -> str:
        return _key(self.key)

    def __repr__(self) -> str:
        return f"State({self.name}{', final' if self.final else ''})"


class EventData:
    """What callbacks and conditions see about the transition in progress."""

    def __init__(self, machine: Machine, trigger: Optional[str], args=(), kwargs=None) -> None:
        self.machine = machine
        self.trigger = trigger
        self.args = args
        self.kwargs = kwargs or {}
        self.source: Optional[State] = machine.current_state
        self.dest: Optional[State] = None


class Transition:
    def __init__(self, source: str, dest: str, conditions: Iterable[Condition] = ()) -> None:
        self.source = source
        self.dest = dest
        self.conditions = list(conditions)

    def allowed(self, data: EventData) -> bool:
        return all(condition(data) for condition in self.conditions)


class Machine:
    """
    States are plain strings or Enum members. Every trigger registered with
    `add_transition` also becomes a method of the machine. The first
    transition whose conditions pass wins; transitions registered from the
    wildcard source are tried after the specific ones.

    A final state ignores every trigger; only `reset()` or `set_state()`
    leave it.
    """

    def __init__(
        self,
        states: Iterable[StateKey],
        initial_state: Optional[StateKey] = None,
        final_states: Iterable[StateKey] = (),
        name: str = "machine",
    ) -> None:
        self.name = name
        self._states: Dict[str, State] = {}
        self._transitions: Dict[str, Dict[str, List[Transition]]] = defaultdict(lambda: defaultdict(list))
        self._current: Optional[State] = None

        for key in states:
            self.add_state(key)
        for key in final_states:
            self.get_state(key).final = True

        self._initial: Optional[State] = None
        if initial_state is not None:
            if _key(initial_state) not in self._states:
                raise ValueError(f"Initial state '{_key(initial_state)}' is not a state of {name}.")
            self._initial = self._states[_key(initial_state)]
            self.set_state(initial_state)

    @property
    def states(self) -> Dict[str, State]:
        return dict(self._states)

    @property
    def current_state(self) -> Optional[State]:
        return self._current

    @property
    def is_final(self) -> bool:
        return self._current is not None and self._current.final

    def is_state(self, key: StateKey) -> bool:
        return self._current is not None and self._current.name == _key(key)

    def add_state(self, key: StateKey, final: bool = False) -> State:
        name = _key(key)
        if name in self._states:
            raise ValueError(f"State '{name}' already registered.")
        state = State(key, final=final)
        self._states[name] = state
        return state

    def get_state(self, key: StateKey) -> State:
        try:
            return self._states[_key(key)]
        except KeyError:
            raise ValueError(f"State '{_key(key)}' not found in {self.name}.") from None

    def on_enter(self, key: StateKey, callback: Callback) -> None:
        self.get_state(key).on_enter.append(callback)

    def on_exit(self, key: StateKey, callback: Callback) -> None:
        self.get_state(key).on_exit.append(callback)

    def add_transition(
        self,
        sources: Union[StateKey, Sequence[StateKey]],
        dest: StateKey,
        trigger: str,
        conditions: Optional[Union[Condition, Sequence[Condition]]] = None,
    ) -> None:
        dest_state = self.get_state(dest)
        if isinstance(sources, (list, tuple)):
            source_names = [self.get_state(s).name for s in sources]
        elif sources == WILDCARD:
            source_names = [WILDCARD]
        else:
            source_names = [self.get_state(sources).name]

        if trigger not in self._transitions and not hasattr(self, trigger):
            setattr(self, trigger, partial(self.trigger, trigger))
        for source in source_names:
            self._transitions[trigger][source].append(
                Transition(source, dest_state.name, _as_list(conditions))
            )

    def trigger(self, trigger: str, *args: Any, strict: bool = False, **kwargs: Any) -> bool:
        current = self._current
        if current is not None and not current.final:
            data = EventData(self, trigger, args, kwargs)
            candidates = self._transitions.get(trigger, {})
            for source in (current.name, WILDCARD):
                for transition in candidates.get(source, ()):
                    data.dest = self._states[transition.dest]
                    if transition.allowed(data):
                        self._change_state(data.dest, data)
                        return True

        if strict:
            where = current.name if current else None
            log.warning("%s: strict trigger %r matched nothing in %s", self.name, trigger, where)
            raise MachineError(f"{self.name}: no transition for '{trigger}' from '{where}'.")
        return False

    def set_state(self, key: StateKey) -> None:
        dest = self.get_state(key)
        data = EventData(self, None)
        data.dest = dest
        self._change_state(dest, data)

    def reset(self) -> None:
        if self._initial is None:
            self._current = None
        else:
            self.set_state(self._initial.key)

    def to_graphviz(self) -> Digraph:
        g = Digraph(name=self.name)
        for state in self._states.values():
            if state is self._current:
                shape = "doublecircle"
            elif state.final:
                shape = "box"
            else:
                shape = "circle"
            g.node(state.name, shape=shape)

        for trigger, by_source in self._transitions.items():
            for source, transitions in by_source.items():
                sources = list(self._states) if source == WILDCARD else [source]
                for transition in transitions:
                    for src in sources:
                        g.edge(src, transition.dest, label=trigger)
        return g

    def _change_state(self, dest: State, data: EventData) -> None:
        previous = self._current
        if previous is dest:
            return
        data.source = previous
        if previous is not None:
            for callback in previous.on_exit:
                callback(data)
        self._current = dest
        log.debug("%s: %s -> %s", self.name, previous.name if previous else None, dest.name)
        for callback in dest.on_enter:
            callback(data)
