"""Result types returned by an authentication attempt."""

from __future__ import annotations

from dataclasses import dataclass

from ...const import STATUS_SUCCESS


@dataclass(frozen=True)
class DeviceInfo:
    """Device details returned by a successful finish call.

    Attributes:
        number: Mobile number (MSISDN)
        carrier: Mobile operator name
        pfid: Payfone alias for the device
    """

    number: str
    carrier: str
    pfid: str

    def as_dict(self) -> dict[str, str]:
        """Convert to the dict handed to the completion callback."""
        return {"number": self.number, "carrier": self.carrier, "pfid": self.pfid}


@dataclass
class AuthenticationResult:
    """Final outcome of one authenticate call.

    Attributes:
        status_code: 0 on success, vendor/HTTP/internal code otherwise
        description: Human-readable status description
        is_authenticated: Whether device_info is populated
        device_info: Device details (None unless authenticated)
        session_id: Id of the session that produced this result
        device_ip: Device IP discovered by the IP leg, if requested
    """

    status_code: int
    description: str
    is_authenticated: bool = False
    device_info: DeviceInfo | None = None
    session_id: str | None = None
    device_ip: str | None = None

    def __iter__(self):
        """Allow unpacking in completion-callback order."""
        return iter(
            (
                self.status_code,
                self.description,
                self.is_authenticated,
                self.device_info.as_dict() if self.device_info else None,
            )
        )

    @classmethod
    def ok(cls, description: str, device_info: DeviceInfo, **kwargs) -> AuthenticationResult:
        """Create successful result."""
        return cls(
            status_code=STATUS_SUCCESS,
            description=description,
            is_authenticated=True,
            device_info=device_info,
            **kwargs,
        )

    @classmethod
    def fail(cls, status_code: int, description: str, **kwargs) -> AuthenticationResult:
        """Create failure result."""
        return cls(status_code=status_code, description=description, **kwargs)
