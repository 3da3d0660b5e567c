from .mock_sinks import MockSession, FailingFlushSession, MockSink

__all__ = ["MockSession", "FailingFlushSession", "MockSink"]
