"""
batterybridge/core/exemption.py

BatteryBridge - Battery-Optimization Exemption Requester
--------------------------------------------------------
• Gates on the platform capability tier: below the restriction threshold there
  is nothing to request
• Checks the current exemption status before acting, so repeated calls while
  exempt never show the system prompt again
• Absorbs every platform fault into a single "request not issued" outcome

A ``True`` result means "exempt, or the request was issued". The user may
still deny the system prompt afterwards; that decision happens outside this
component and is not reported.

License: Apache 2.0
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from batterybridge.core.config_loader import DEFAULT_RESTRICTION_THRESHOLD, BatteryBridgeConfig, get_config
from batterybridge.core.exceptions import RequestNotIssued
from batterybridge.platforms.base import BatteryPlatform
from batterybridge.platforms.factory import get_battery_platform
from batterybridge.utils.logger import get_logger, log_traceback

logger = get_logger(__name__)


class RequestOutcome(Enum):
    ALREADY_EXEMPT = "already_exempt"
    REQUEST_ISSUED = "request_issued"
    REQUEST_FAILED = "request_failed"


@dataclass(frozen=True)
class ExemptionResult:
    """Outcome of one exemption decision. Never stored between calls."""
    outcome: RequestOutcome
    tier: Optional[int] = None
    package_name: Optional[str] = None
    error: Optional[RequestNotIssued] = None

    @property
    def granted_or_issued(self) -> bool:
        return self.outcome is not RequestOutcome.REQUEST_FAILED

    def __bool__(self) -> bool:
        return self.granted_or_issued


class ExemptionRequester:
    """
    Decides whether battery-optimization exemption must be requested and, if
    so, issues the request.

    Args:
        platform: capability tier, status query and issuance collaborator
        restriction_threshold: lowest tier where the restriction model exists
        package_name: identity override; the platform's own when None
    """

    def __init__(
        self,
        platform: BatteryPlatform,
        restriction_threshold: int = DEFAULT_RESTRICTION_THRESHOLD,
        package_name: Optional[str] = None,
    ):
        self.platform = platform
        self.restriction_threshold = restriction_threshold
        self.package_name = package_name

    @classmethod
    def from_config(cls, platform: BatteryPlatform, config: BatteryBridgeConfig) -> "ExemptionRequester":
        return cls(
            platform,
            restriction_threshold=config.exemption.restriction_threshold,
            package_name=config.exemption.package_name,
        )

    def evaluate(self) -> ExemptionResult:
        tier = None
        package_name = None
        try:
            tier = self.platform.get_capability_tier()
            if tier < self.restriction_threshold:
                logger.debug(f"Tier {tier} < {self.restriction_threshold}: no battery restriction model")
                return ExemptionResult(RequestOutcome.ALREADY_EXEMPT, tier=tier)

            package_name = self.package_name or self.platform.get_package_name()
            if self.platform.is_ignoring_battery_optimizations(package_name):
                logger.debug(f"{package_name} already ignores battery optimizations")
                return ExemptionResult(RequestOutcome.ALREADY_EXEMPT, tier=tier, package_name=package_name)

            self.platform.request_ignore_battery_optimizations(package_name)
            logger.info(f"Battery optimization exemption requested for {package_name} (tier {tier})")
            return ExemptionResult(RequestOutcome.REQUEST_ISSUED, tier=tier, package_name=package_name)

        except Exception as e:
            error = RequestNotIssued(f"Battery optimization exemption request not issued: {e}")
            error.__cause__ = e
            log_traceback(logger, e, str(error))
            return ExemptionResult(RequestOutcome.REQUEST_FAILED, tier=tier, package_name=package_name, error=error)

    def request_ignore_battery_optimization(self) -> bool:
        """True when exempt or the request was issued, False when it could not be issued."""
        return self.evaluate().granted_or_issued

    # Channel method name
    requestIgnoreBatteryOptimization = request_ignore_battery_optimization

# -------------------------------
# Singleton/Convenience API
# -------------------------------

_global_requester: Optional[ExemptionRequester] = None
_requester_lock = threading.Lock()

def get_exemption_requester(
    config: Optional[BatteryBridgeConfig] = None,
    platform: Optional[BatteryPlatform] = None,
) -> ExemptionRequester:
    """
    Process-wide requester for the detected platform.

    ``config`` and ``platform`` are only used by the first call, which builds
    the instance; later calls return that instance and ignore them.
    """
    global _global_requester
    with _requester_lock:
        if _global_requester is None:
            config = config or get_config()
            platform = platform or get_battery_platform()
            _global_requester = ExemptionRequester.from_config(platform, config)
            logger.info(
                f"ExemptionRequester initialized (platform: {platform.name}, "
                f"threshold: {_global_requester.restriction_threshold})"
            )
        elif config is not None or platform is not None:
            logger.debug("ExemptionRequester already initialized; ignoring config/platform arguments")
    return _global_requester

def request_ignore_battery_optimization() -> bool:
    """Convenience for single-call use."""
    return get_exemption_requester().request_ignore_battery_optimization()

# -------------------------------
# Demo
# -------------------------------

if __name__ == "__main__":
    result = get_exemption_requester().evaluate()
    print(f"Platform tier: {result.tier}")
    print(f"Outcome: {result.outcome.value} -> {result.granted_or_issued}")
    if result.error is not None:
        print(f"Error: {result.error}")
