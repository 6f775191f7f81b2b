import ipaddress
from typing import Optional, Tuple

from constants import INTERNAL_ROOM_KEY, RESERVED_PATH_SEGMENTS, ROOM_ID_MAX_LENGTH

INTERNAL_NETWORKS = [
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
    ipaddress.ip_network("fe80::/10"),
]


def is_internal_address(address: Optional[str]) -> bool:
    """Return True for private LAN and loopback addresses.

    Anything that does not parse as an IP address (a hostname, an empty
    string) is treated as external.
    """
    if not address:
        return False
    try:
        ip = ipaddress.ip_address(address.split("%", 1)[0])
    except ValueError:
        return False
    if ip.version == 6 and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    return any(ip.version == network.version and ip in network for network in INTERNAL_NETWORKS)


def resolve_room_key(room_id: Optional[str], client_host: Optional[str]) -> str:
    if room_id and len(room_id) <= ROOM_ID_MAX_LENGTH:
        return room_id
    if is_internal_address(client_host):
        return INTERNAL_ROOM_KEY
    return client_host or ""


def parse_room_path(path: str) -> Tuple[Optional[str], Optional[str]]:
    """Split an upgrade path of the form /{room_id}/{password}.

    Both parts are optional. A room id that is empty, reserved or too long
    is discarded, and the connection falls back to address-based rooms.
    """
    segments = [segment for segment in path.split("/") if segment]
    room_id = segments[0] if segments else None
    password = segments[1] if len(segments) > 1 else None

    if not room_id or room_id in RESERVED_PATH_SEGMENTS or len(room_id) > ROOM_ID_MAX_LENGTH:
        room_id = None
    return room_id, password
