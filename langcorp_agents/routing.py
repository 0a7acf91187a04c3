"""
The support routing state machine, expressed as data.

Each (state, trigger) pair maps to exactly one next state. A trigger is either a
label produced by a classification call, the unconditional ALWAYS, or the external
AUTHORIZED signal that releases a pending refund. The table is checked once, when it
is built, so routing at run time is a plain dictionary lookup.
"""

from collections import defaultdict, deque
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Set, Tuple

from langcorp_agents.errors import InvalidTransitionError, TransitionTableError


class MachineState(str, Enum):
    INITIAL = "INITIAL"
    BILLING = "BILLING"
    TECHNICAL = "TECHNICAL"
    REFUND_PENDING = "REFUND_PENDING"
    END = "END"


class Representative(str, Enum):
    """The routing label stored on the conversation as `next_representative`."""
    BILLING = "BILLING"
    TECHNICAL = "TECHNICAL"
    RESPOND = "RESPOND"
    REFUND = "REFUND"
    UNSET = "UNSET"


class Trigger(str, Enum):
    BILLING = "BILLING"
    TECHNICAL = "TECHNICAL"
    RESPOND = "RESPOND"
    REFUND = "REFUND"
    ALWAYS = "ALWAYS"
    AUTHORIZED = "AUTHORIZED"

    @classmethod
    def from_label(cls, label: Representative) -> "Trigger":
        if label is Representative.UNSET:
            raise InvalidTransitionError("UNSET is not a routing label")
        return cls(label.value)


# Triggers that can only come out of a classification call.
CLASSIFICATION_TRIGGERS = frozenset(
    {Trigger.BILLING, Trigger.TECHNICAL, Trigger.RESPOND, Trigger.REFUND}
)


class TransitionTable:
    """An exhaustively validated (state x trigger -> state) mapping."""

    def __init__(
        self,
        transitions: Mapping[Tuple[MachineState, Trigger], MachineState],
        labels: Mapping[MachineState, Iterable[Trigger]],
        initial: MachineState = MachineState.INITIAL,
        terminal: MachineState = MachineState.END,
    ):
        self._transitions: Dict[Tuple[MachineState, Trigger], MachineState] = dict(transitions)
        self._labels: Dict[MachineState, FrozenSet[Trigger]] = {
            state: frozenset(triggers) for state, triggers in labels.items()
        }
        self.initial = initial
        self.terminal = terminal
        self._validate()

    def _validate(self) -> None:
        outgoing: Dict[MachineState, Set[Trigger]] = defaultdict(set)
        for key, target in self._transitions.items():
            source, trigger = key
            if not isinstance(source, MachineState) or not isinstance(target, MachineState):
                raise TransitionTableError(f"Unknown state in transition {key!r} -> {target!r}")
            if not isinstance(trigger, Trigger):
                raise TransitionTableError(f"Unknown trigger in transition {key!r}")
            if source is self.terminal:
                raise TransitionTableError(f"Terminal state {source.value} cannot have outgoing transitions")
            outgoing[source].add(trigger)

        for state, labels in self._labels.items():
            if state is self.terminal:
                raise TransitionTableError(f"Terminal state {state.value} cannot classify")
            if not labels:
                raise TransitionTableError(f"State {state.value} declares an empty label set")
            extra = labels - CLASSIFICATION_TRIGGERS
            if extra:
                raise TransitionTableError(
                    f"State {state.value} declares non-classification labels: {sorted(t.value for t in extra)}"
                )

        for state in MachineState:
            if state is self.terminal:
                continue
            triggers = outgoing.get(state, set())
            if not triggers:
                raise TransitionTableError(f"State {state.value} has no outgoing transition")

            expected = self._labels.get(state)
            if expected is not None:
                missing = expected - triggers
                unexpected = triggers - expected
                if missing or unexpected:
                    raise TransitionTableError(
                        f"State {state.value} must route on exactly {sorted(t.value for t in expected)}; "
                        f"missing={sorted(t.value for t in missing)} unexpected={sorted(t.value for t in unexpected)}"
                    )
            elif triggers & CLASSIFICATION_TRIGGERS:
                raise TransitionTableError(
                    f"State {state.value} routes on classification labels but declares no label set"
                )

        unreachable = set(MachineState) - self._reachable_from(self.initial)
        if unreachable:
            raise TransitionTableError(
                f"States unreachable from {self.initial.value}: {sorted(s.value for s in unreachable)}"
            )

    def _reachable_from(self, start: MachineState) -> Set[MachineState]:
        seen = {start}
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for target in self.targets(current):
                if target not in seen:
                    seen.add(target)
                    queue.append(target)
        return seen

    def next(self, state: MachineState, trigger: Trigger) -> MachineState:
        try:
            return self._transitions[(state, trigger)]
        except KeyError:
            raise InvalidTransitionError(
                f"No transition from {state.value} on {trigger.value}"
            ) from None

    def labels_for(self, state: MachineState) -> FrozenSet[Trigger]:
        """The closed label set the state's classification call must answer with."""
        return self._labels.get(state, frozenset())

    def targets(self, state: MachineState) -> FrozenSet[MachineState]:
        return frozenset(
            target for (source, _), target in self._transitions.items() if source is state
        )

    def unconditional_target(self, state: MachineState) -> Optional[MachineState]:
        return self._transitions.get((state, Trigger.ALWAYS))

    def is_terminal(self, state: MachineState) -> bool:
        return state is self.terminal


SUPPORT_TRANSITIONS = TransitionTable(
    transitions={
        (MachineState.INITIAL, Trigger.BILLING): MachineState.BILLING,
        (MachineState.INITIAL, Trigger.TECHNICAL): MachineState.TECHNICAL,
        (MachineState.INITIAL, Trigger.RESPOND): MachineState.END,
        (MachineState.BILLING, Trigger.REFUND): MachineState.REFUND_PENDING,
        (MachineState.BILLING, Trigger.RESPOND): MachineState.END,
        (MachineState.TECHNICAL, Trigger.ALWAYS): MachineState.END,
        # Without authorization the refund step suspends in place; there is no edge for it.
        (MachineState.REFUND_PENDING, Trigger.AUTHORIZED): MachineState.END,
    },
    labels={
        MachineState.INITIAL: {Trigger.BILLING, Trigger.TECHNICAL, Trigger.RESPOND},
        MachineState.BILLING: {Trigger.REFUND, Trigger.RESPOND},
    },
)
