from enum import Enum, auto
import logging

logger = logging.getLogger(__name__)


class WidgetState(Enum):
    IDLE = auto()  # Constructed, not mounted yet
    LOADING = auto()  # First fetch (or retry after an error) in flight
    LOADED = auto()  # Rows available (possibly empty)
    ERRORED = auto()  # Last fetch failed, error message available
    REFETCHING = auto()  # Loaded rows still shown while a newer fetch runs
    UNMOUNTED = auto()  # Torn down, accepts nothing


class WidgetAction(Enum):
    FETCH = auto()
    LOAD_SUCCESS = auto()
    LOAD_ERROR = auto()
    UNMOUNT = auto()


class WidgetStateMachine:
    """
    Pure FSM Logic.
    Only cares about State Transitions, not rendering or data access.
    """

    def __init__(self, initial_state: WidgetState = WidgetState.IDLE) -> None:
        self._state = initial_state

    @property
    def current_state(self) -> WidgetState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state in (WidgetState.LOADING, WidgetState.REFETCHING)

    def transition(self, action: WidgetAction) -> bool:
        """
        The Transition Table.
        Returns False (and leaves the state untouched) for invalid transitions.
        """
        previous = self._state

        match (self._state, action):
            # Terminal
            case (WidgetState.UNMOUNTED, _):
                logger.error(f"⛔ INVALID TRANSITION: {self._state.name} + {action.name}")
                return False

            case (_, WidgetAction.UNMOUNT):
                self._state = WidgetState.UNMOUNTED

            # IDLE / ERRORED -> LOADING
            case (WidgetState.IDLE | WidgetState.ERRORED, WidgetAction.FETCH):
                self._state = WidgetState.LOADING

            # LOADED -> REFETCHING
            case (WidgetState.LOADED, WidgetAction.FETCH):
                self._state = WidgetState.REFETCHING

            # A newer fetch supersedes the one in flight
            case (WidgetState.LOADING | WidgetState.REFETCHING, WidgetAction.FETCH):
                pass

            # In flight -> LOADED or ERRORED
            case (WidgetState.LOADING | WidgetState.REFETCHING, WidgetAction.LOAD_SUCCESS):
                self._state = WidgetState.LOADED
            case (WidgetState.LOADING | WidgetState.REFETCHING, WidgetAction.LOAD_ERROR):
                self._state = WidgetState.ERRORED

            case _:
                logger.error(f"⛔ INVALID TRANSITION: {self._state.name} + {action.name}")
                return False

        logger.info(f"🔄 FSM: {previous.name} --[{action.name}]--> {self._state.name}")
        return True
