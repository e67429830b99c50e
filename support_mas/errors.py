"""
Exceptions raised by the runtime, simulation engine and judge team
"""


class SupportMASError(Exception):
    """Base class for all Support MAS errors."""


class SessionNotFound(SupportMASError, LookupError):
    """Raised when a runtime session id was never started."""

    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class InvalidCustomerContext(SupportMASError, ValueError):
    """Raised when a customer context lacks required identity fields."""


class ScenarioNotFound(SupportMASError, LookupError):
    """Raised when a scenario id was never registered."""

    def __init__(self, scenario_id: str):
        super().__init__(f"Scenario not found: {scenario_id}")
        self.scenario_id = scenario_id


class ScenarioNotJudgeable(SupportMASError, LookupError):
    """Raised when a scenario or its timeline is missing at judging time."""

    def __init__(self, scenario_id: str):
        super().__init__(f"Cannot judge {scenario_id}: scenario or timeline not found")
        self.scenario_id = scenario_id


class JudgeSessionNotFound(SupportMASError, LookupError):
    """Raised when a judge session id is unknown."""

    def __init__(self, session_id: str):
        super().__init__(f"Judge session not found: {session_id}")
        self.session_id = session_id


class JudgeSessionClosed(SupportMASError, ValueError):
    """Raised when consensus is requested for an already completed session."""

    def __init__(self, session_id: str):
        super().__init__(f"Judge session already completed: {session_id}")
        self.session_id = session_id
