"""Remote logging: throttle policy and HTTP sink."""

from gateway.remote_log.gate import LogGate, LogThrottleState
from gateway.remote_log.sink import LogSink, build_log_payload

__all__ = ["LogGate", "LogSink", "LogThrottleState", "build_log_payload"]
