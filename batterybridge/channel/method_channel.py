"""
batterybridge/channel/method_channel.py

BatteryBridge - Method Channel
------------------------------
• Named request/response channel between app logic and platform code
• One handler per channel; each call is answered exactly once with success,
  error or not-implemented
• JSON-ready dict envelopes so any transport (Kivy event, socket, service
  message) can carry calls and replies

Envelopes:
    call:  {"method": str, "arguments": any}
    reply: {"status": "success", "result": any}
           {"status": "error", "code": str, "message": str|None, "details": any}
           {"status": "not_implemented"}

License: Apache 2.0
"""

import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from batterybridge.utils.logger import get_logger

logger = get_logger(__name__)

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"
STATUS_NOT_IMPLEMENTED = "not_implemented"

# -------------------------------
# Exceptions
# -------------------------------

class ChannelError(Exception):
    """Base method channel error."""
    pass

class ReplyAlreadySubmitted(ChannelError):
    """A method call was answered more than once."""
    pass

# -------------------------------
# Calls and Replies
# -------------------------------

@dataclass
class MethodCall:
    method: str
    arguments: Any = None

    @classmethod
    def from_message(cls, message: Dict[str, Any]) -> "MethodCall":
        if not isinstance(message, dict) or not isinstance(message.get("method"), str):
            raise ChannelError(f"Malformed method call envelope: {message!r}")
        return cls(method=message["method"], arguments=message.get("arguments"))

    def to_message(self) -> Dict[str, Any]:
        return {"method": self.method, "arguments": self.arguments}


class MethodResult:
    """Reply slot for a single method call."""

    def __init__(self, method: str = ""):
        self.method = method
        self.status: Optional[str] = None
        self.result: Any = None
        self.error_code: Optional[str] = None
        self.error_message: Optional[str] = None
        self.error_details: Any = None

    @property
    def submitted(self) -> bool:
        return self.status is not None

    def _submit(self, status: str):
        if self.submitted:
            raise ReplyAlreadySubmitted(f"Reply already submitted for '{self.method}' ({self.status})")
        self.status = status

    def success(self, result: Any = None):
        self._submit(STATUS_SUCCESS)
        self.result = result

    def error(self, code: str, message: Optional[str] = None, details: Any = None):
        self._submit(STATUS_ERROR)
        self.error_code = code
        self.error_message = message
        self.error_details = details

    def not_implemented(self):
        self._submit(STATUS_NOT_IMPLEMENTED)

    def to_message(self) -> Dict[str, Any]:
        if self.status == STATUS_SUCCESS:
            return {"status": STATUS_SUCCESS, "result": self.result}
        if self.status == STATUS_ERROR:
            return {
                "status": STATUS_ERROR,
                "code": self.error_code,
                "message": self.error_message,
                "details": self.error_details,
            }
        return {"status": STATUS_NOT_IMPLEMENTED}

    def __repr__(self):
        return f"<MethodResult method={self.method!r} status={self.status}>"


MethodCallHandler = Callable[[MethodCall, MethodResult], None]

# -------------------------------
# Channel
# -------------------------------

class MethodChannel:
    """A named channel dispatching method calls to one handler."""

    def __init__(self, name: str, messenger: Optional["BinaryMessenger"] = None):
        if not name:
            raise ValueError("Channel name must not be empty")
        self.name = name
        self.messenger = messenger
        self._handler: Optional[MethodCallHandler] = None

    def set_method_call_handler(self, handler: Optional[MethodCallHandler]):
        """Install ``handler``; None uninstalls it and unregisters the channel."""
        self._handler = handler
        if self.messenger is not None:
            if handler is None:
                self.messenger.unregister(self.name)
            else:
                self.messenger.register(self)

    def invoke_method(self, method: str, arguments: Any = None) -> MethodResult:
        call = MethodCall(method, arguments)
        result = MethodResult(method)

        if self._handler is None:
            logger.debug(f"[{self.name}] no handler for '{method}'")
            result.not_implemented()
            return result

        try:
            self._handler(call, result)
        except Exception as e:
            logger.error(f"[{self.name}] handler failed on '{method}': {e}")
            # First reply wins
            if result.submitted:
                return result
            result.error("error", str(e), type(e).__name__)
            return result

        if not result.submitted:
            logger.warning(f"[{self.name}] handler did not reply to '{method}'")
            result.not_implemented()
        return result

    def handle_message(self, message: Dict[str, Any]) -> Dict[str, Any]:
        """Decode a call envelope, dispatch it, encode the reply."""
        try:
            call = MethodCall.from_message(message)
        except ChannelError as e:
            reply = MethodResult()
            reply.error("bad_envelope", str(e))
            return reply.to_message()
        return self.invoke_method(call.method, call.arguments).to_message()


class BinaryMessenger:
    """In-process router from channel names to channels."""

    def __init__(self):
        self._channels: Dict[str, MethodChannel] = {}
        self._lock = threading.Lock()

    def register(self, channel: MethodChannel):
        with self._lock:
            self._channels[channel.name] = channel
        logger.debug(f"Channel registered: {channel.name}")

    def unregister(self, name: str):
        with self._lock:
            self._channels.pop(name, None)

    def get_channel(self, name: str) -> Optional[MethodChannel]:
        return self._channels.get(name)

    def send(self, channel_name: str, message: Dict[str, Any]) -> Dict[str, Any]:
        channel = self.get_channel(channel_name)
        if channel is None:
            logger.debug(f"No channel named '{channel_name}'")
            return {"status": STATUS_NOT_IMPLEMENTED}
        return channel.handle_message(message)
