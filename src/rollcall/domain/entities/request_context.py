"""Typed request context built once at the HTTP boundary.

Downstream code (rate limiting, audit logging) reads request metadata from
this struct instead of poking at the framework request object.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from ipaddress import ip_address, ip_network
from types import MappingProxyType

from rollcall.domain.entities.principal import Principal

DEFAULT_CLIENT_IP = "127.0.0.1"


def _frozen(values: Mapping[str, str] | None = None) -> Mapping[str, str]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True)
class RequestContext:
    """Immutable metadata about the request being served.

    Attributes:
        method: HTTP method, upper-case.
        path: Request path without query string.
        headers: Request headers keyed by lower-cased name.
        cookies: Request cookies.
        client_ip: Client address. Proxy headers count only from trusted peers.
        user_agent: User agent string, if sent.
        correlation_id: Correlation ID used in logs and response headers.
        principal: Acting principal once resolved, else None.
    """

    method: str
    path: str
    headers: Mapping[str, str] = field(default_factory=_frozen)
    cookies: Mapping[str, str] = field(default_factory=_frozen)
    client_ip: str = DEFAULT_CLIENT_IP
    user_agent: str | None = None
    correlation_id: str | None = None
    principal: Principal | None = None

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        headers: Mapping[str, str],
        cookies: Mapping[str, str],
        peer_host: str | None = None,
        correlation_id: str | None = None,
        trusted_proxies: Sequence[str] = (),
    ) -> "RequestContext":
        """Construct the context from raw request pieces."""
        lowered = {k.lower(): v for k, v in headers.items()}
        return cls(
            method=method.upper(),
            path=path,
            headers=_frozen(lowered),
            cookies=_frozen(cookies),
            client_ip=resolve_client_ip(lowered, peer_host, trusted_proxies),
            user_agent=lowered.get("user-agent"),
            correlation_id=correlation_id,
        )

    def with_principal(self, principal: Principal) -> "RequestContext":
        """Return a copy of this context carrying the resolved principal."""
        return replace(self, principal=principal)


def is_trusted_proxy(host: str | None, trusted_proxies: Sequence[str]) -> bool:
    """Whether ``host`` falls inside one of the trusted proxy networks."""
    if not host or not trusted_proxies:
        return False
    try:
        address = ip_address(host)
    except ValueError:
        return False
    return any(address in ip_network(entry, strict=False) for entry in trusted_proxies)


def resolve_client_ip(
    headers: Mapping[str, str],
    peer_host: str | None,
    trusted_proxies: Sequence[str] = (),
) -> str:
    """Pick the client address for the request.

    ``X-Forwarded-For`` and ``X-Real-IP`` are only honoured when the socket
    peer is a trusted proxy.
    The forwarded chain is walked right to left past trusted hops, so the
    first untrusted address is the client.

    Args:
        headers: Request headers keyed by lower-cased name.
        peer_host: Host of the connected peer, if known.
        trusted_proxies: Proxy addresses or CIDR networks.
    """
    if not is_trusted_proxy(peer_host, trusted_proxies):
        return peer_host or DEFAULT_CLIENT_IP

    hops = [hop.strip() for hop in headers.get("x-forwarded-for", "").split(",") if hop.strip()]
    if hops:
        for hop in reversed(hops):
            if not is_trusted_proxy(hop, trusted_proxies):
                return hop
        return hops[0]

    real_ip = headers.get("x-real-ip", "").strip()
    if real_ip:
        return real_ip
    return peer_host
