# SPDX-License-Identifier: LGPL-3.0-or-later
# kvm_persistent_net/udev/discovery.py
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING, List, Optional

from ..core.exceptions import DiscoveryError, ErrorKind
from ..core.result import Result
from .model import NetworkDevice

if TYPE_CHECKING:  # pragma: no cover
    from ..backends.base import DescriptionSource

_SOURCE_ATTRS = ("network", "bridge", "dev")


def _source_of(iface: ET.Element) -> Optional[str]:
    src = iface.find("source")
    if src is None:
        return None
    for attr in _SOURCE_ATTRS:
        v = src.get(attr)
        if v:
            return v
    return None


def parse_domain_interfaces(xml_text: str, logger: Optional[logging.Logger] = None) -> List[NetworkDevice]:
    """
    Extract NICs from libvirt domain XML in document order.

    Only <domain><devices><interface> elements are read. Interfaces without a
    <mac address="..."> are skipped. Raises ET.ParseError on malformed XML.
    """
    logger = logger or logging.getLogger("kvm_persistent_net")
    root = ET.fromstring(xml_text)

    devices: List[NetworkDevice] = []
    for idx, iface in enumerate(root.findall("./devices/interface")):
        mac = iface.find("mac")
        address = (mac.get("address") or "").strip() if mac is not None else ""
        if not address:
            logger.debug("Skipping interface #%d: no MAC address", idx)
            continue

        model = iface.find("model")
        devices.append(
            NetworkDevice(
                hardware_address=address,
                interface_type=iface.get("type"),
                model=model.get("type") if model is not None else None,
                source=_source_of(iface),
            )
        )
    return devices


class MacDiscoverer:
    """
    Reads the ordered MAC addresses of a (shut-off) domain.

    The shut-off precondition is checked by the caller before discover().
    """

    def __init__(self, logger: logging.Logger, source: DescriptionSource):
        self.logger = logger
        self.source = source

    def discover(self, vm_name: str) -> Result[List[NetworkDevice]]:
        described = self.source.fetch_description(vm_name)
        if not described.ok:
            return Result.failure(described.error)  # type: ignore[arg-type]

        try:
            devices = parse_domain_interfaces(described.value or "", self.logger)
        except ET.ParseError as e:
            return Result.failure(
                DiscoveryError(
                    msg=f"Failed to parse domain XML of VM '{vm_name}': {e}",
                    kind=ErrorKind.PARSE_FAILURE,
                    cause=e,
                    context={"vm": vm_name},
                )
            )

        if not devices:
            return Result.failure(
                DiscoveryError(
                    msg=f"No network interfaces found in VM '{vm_name}'",
                    kind=ErrorKind.NO_DEVICES_FOUND,
                    context={"vm": vm_name},
                )
            )

        for dev in devices:
            self.logger.debug("Discovered NIC %s", dev.describe())
        return Result.success(devices)
