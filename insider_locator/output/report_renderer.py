"""
Insider Locator - Report Renderer
=================================

Human-readable console rendering of a LocationReport: key/value lines
for each signal, a table of access points and a bulleted flag list.
Missing data is always shown as "Unavailable" rather than left out.

Author: Insider Locator Team
Version: 1.0.0
"""

from typing import List, Optional

from ..core.models import (
    AccessPointObservation,
    Availability,
    IPLocationResult,
    LocationReport,
    RadioLocationResult,
    RadioSource,
    maps_url,
)
from .console import ConsoleFormatter

UNAVAILABLE = "Unavailable"

SOURCE_LABELS = {
    RadioSource.REMOTE: "Positioning service",
    RadioSource.OFFLINE: "Offline fallback table",
    RadioSource.NONE: "None",
}


def _or_unavailable(value: Optional[object]) -> str:
    if value is None or value == "":
        return UNAVAILABLE
    return str(value)


def _join_location(*parts: Optional[str]) -> str:
    known = [part for part in parts if part]
    return ", ".join(known) if known else UNAVAILABLE


class ConsoleReportRenderer:
    """
    Render a LocationReport as console text.

    Usage:
        renderer = ConsoleReportRenderer(use_colors=sys.stdout.isatty())
        print(renderer.render(report))
    """

    def __init__(self, use_colors: bool = True):
        self.fmt = ConsoleFormatter(use_colors)

    def render(self, report: LocationReport) -> str:
        lines: List[str] = [self.fmt.header("Insider Locator Report"), ""]
        lines += self._ip_section(report.ip)
        lines.append("")
        lines += self._access_point_section(report.observations)
        lines.append("")
        lines += self._radio_section(report.radio, report.verdict.radio_country)
        lines.append("")
        lines += self._hardware_section(report.hardware_model)
        lines.append("")
        lines += self._verdict_section(report)
        lines.append("")
        lines.append(self.fmt.info(f"Generated {report.generated_at}"))
        return "\n".join(lines)

    def _ip_section(self, ip: IPLocationResult) -> List[str]:
        lines = [self.fmt.section("Public IP")]
        if not ip.available:
            lines.append(self.fmt.warning("IP lookup unavailable"))
            return lines

        lines.append(self.fmt.field("Public IP", _or_unavailable(ip.public_ip)))
        lines.append(self.fmt.field("Location", _join_location(ip.city, ip.region, ip.country)))
        lines.append(self.fmt.field("ISP", _or_unavailable(ip.isp_org)))
        if ip.has_coordinates:
            lines.append(self.fmt.field("Maps", maps_url(ip.latitude, ip.longitude)))
        return lines

    def _access_point_section(self, observations) -> List[str]:
        count = len(observations)
        lines = [self.fmt.section(f"Nearby Wi-Fi networks ({count})")]
        if not observations:
            lines.append(self.fmt.warning("No access points found"))
            return lines

        lines.append(f"  {'SSID':<32} {'BSSID':<17}  {'Signal':>7}")
        lines.append(f"  {'-' * 32} {'-' * 17}  {'-' * 7}")
        for observation in observations:
            lines.append(self._access_point_row(observation))
        return lines

    @staticmethod
    def _access_point_row(observation: AccessPointObservation) -> str:
        name = observation.display_name or "<hidden>"
        if len(name) > 32:
            name = name[:31] + "…"
        if observation.signal_quality is None:
            signal = "unknown"
        else:
            signal = f"{observation.signal_quality}%"
        return f"  {name:<32} {observation.identifier:<17}  {signal:>7}"

    def _radio_section(self, radio: RadioLocationResult, country: Optional[str]) -> List[str]:
        lines = [self.fmt.section("Wi-Fi location")]
        if radio.status == Availability.NO_SIGNAL:
            lines.append(self.fmt.warning("No Wi-Fi data for geolocation"))
            return lines
        if radio.status == Availability.UNAVAILABLE:
            lines.append(self.fmt.error("Wi-Fi geolocation unavailable"))
            return lines

        lines.append(self.fmt.field("Source", SOURCE_LABELS[radio.source]))
        lines.append(self.fmt.field("Coordinates", f"{radio.latitude}, {radio.longitude}"))
        if radio.is_offline_estimate:
            lines.append(self.fmt.field("Accuracy", "Offline Estimation"))
        elif radio.accuracy_meters is not None:
            lines.append(self.fmt.field("Accuracy", f"{radio.accuracy_meters:g} meters"))
        else:
            lines.append(self.fmt.field("Accuracy", UNAVAILABLE))
        if radio.display_location:
            lines.append(self.fmt.field("Estimated area", radio.display_location))
        if country:
            lines.append(self.fmt.field("Country", country))
        lines.append(self.fmt.field("Maps", maps_url(radio.latitude, radio.longitude)))
        return lines

    def _hardware_section(self, hardware_model: str) -> List[str]:
        return [
            self.fmt.section("Hardware"),
            self.fmt.field("Model", _or_unavailable(hardware_model)),
        ]

    def _verdict_section(self, report: LocationReport) -> List[str]:
        lines = [self.fmt.section("Spoofing indicators")]
        verdict = report.verdict
        if verdict.is_clean:
            lines.append(self.fmt.success("No obvious spoofing detected."))
            return lines

        for flag in verdict:
            lines.append("  " + self.fmt.flag(flag.value, verdict.reason_for(flag) or ""))
        return lines
