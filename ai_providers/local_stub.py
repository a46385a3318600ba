from .base import AdapterFailure, AICapability, AISession, Availability, SessionConfig


class LocalStub(AICapability):
    """No model at all: always reports unavailable so callers take their deterministic path."""

    def availability(self) -> Availability:
        return Availability.UNAVAILABLE

    def create_session(self, config: SessionConfig) -> AISession:
        raise AdapterFailure("local stub has no language model")

    @property
    def name(self) -> str:
        return "stub"
