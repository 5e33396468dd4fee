import json
import subprocess
from unittest.mock import MagicMock

import pytest

from insider_locator.core.radio_scanner import (
    RadioScanner,
    dbm_to_quality,
    normalize_identifier,
    observations_from_identifiers,
    parse_netsh_output,
    parse_nmcli_output,
    parse_system_profiler_json,
    quality_to_dbm,
)

NMCLI_OUTPUT = (
    r"AA\:BB\:CC\:DD\:EE\:01:HomeNet:80" "\n"
    r"aa\:bb\:cc\:dd\:ee\:02:Cafe\:Guest:45" "\n"
    r"aa\:bb\:cc\:dd\:ee\:03::" "\n"
    "garbage line\n"
    "\n"
)

NETSH_OUTPUT = """
Interface name : Wi-Fi
There are 2 networks currently visible.

SSID 1 : HomeNet
    Network type            : Infrastructure
    Authentication          : WPA2-Personal
    Encryption              : CCMP
    BSSID 1                 : AA:BB:CC:DD:EE:01
         Signal             : 80%
         Radio type         : 802.11ac
    BSSID 2                 : aa-bb-cc-dd-ee-02
         Radio type         : 802.11n

SSID 2 :
    Network type            : Infrastructure
    BSSID 1                 : 11:22:33:44:55:66
         Signal             : 45%
"""

PROFILER_OUTPUT = json.dumps({
    "SPAirPortDataType": [{
        "spairport_airport_interfaces": [
            {"_name": "awdl0"},
            {
                "_name": "en0",
                "spairport_current_network_information": {
                    "_name": "Office",
                    "spairport_network_bssid": "68:34:21:CB:C2:01",
                    "spairport_signal_noise": "-55 dBm / -92 dBm",
                },
                "spairport_airport_other_local_wireless_networks": [
                    {
                        "_name": "Cafe",
                        "spairport_network_bssid": "f4:92:bf:ab:cd:ef",
                        "spairport_signal_noise": "-80 dBm / -90 dBm",
                    },
                    {"_name": "Redacted"},
                    {"_name": "NoSignal", "spairport_network_bssid": "00:11:22:33:44:55"},
                ],
            },
        ]
    }]
})


def completed(stdout="", returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr="")


class TestNormalization:

    @pytest.mark.parametrize("raw, expected", [
        ("AA:BB:CC:DD:EE:FF", "aa:bb:cc:dd:ee:ff"),
        ("  aa-bb-cc-dd-ee-ff ", "aa:bb:cc:dd:ee:ff"),
        ("", None),
        (None, None),
        ("<redacted>", None),
        ("aa:bb:cc:dd:ee", None),
    ])
    def test_normalize_identifier(self, raw, expected):
        assert normalize_identifier(raw) == expected

    def test_dbm_to_quality_is_clamped(self):
        assert dbm_to_quality(-65) == 70
        assert dbm_to_quality(-30) == 100
        assert dbm_to_quality(-110) == 0

    def test_quality_to_dbm(self):
        assert quality_to_dbm(80) == -60
        assert quality_to_dbm(0) == -100

    def test_observations_from_identifiers_skips_junk(self):
        observations = observations_from_identifiers(["68:34:21:CB:C2:01", "nope"])
        assert [o.identifier for o in observations] == ["68:34:21:cb:c2:01"]
        assert observations[0].signal_quality is None


class TestParsers:

    def test_nmcli(self):
        observations = parse_nmcli_output(NMCLI_OUTPUT)

        assert [(o.identifier, o.display_name, o.signal_quality) for o in observations] == [
            ("aa:bb:cc:dd:ee:01", "HomeNet", 80),
            ("aa:bb:cc:dd:ee:02", "Cafe:Guest", 45),
            ("aa:bb:cc:dd:ee:03", "", None),
        ]

    def test_netsh(self):
        observations = parse_netsh_output(NETSH_OUTPUT)

        assert [(o.identifier, o.display_name, o.signal_quality) for o in observations] == [
            ("aa:bb:cc:dd:ee:01", "HomeNet", 80),
            ("aa:bb:cc:dd:ee:02", "HomeNet", None),
            ("11:22:33:44:55:66", "", 45),
        ]

    def test_system_profiler(self):
        observations = parse_system_profiler_json(PROFILER_OUTPUT)

        assert [(o.identifier, o.display_name, o.signal_quality) for o in observations] == [
            ("68:34:21:cb:c2:01", "Office", 90),
            ("f4:92:bf:ab:cd:ef", "Cafe", 40),
            ("00:11:22:33:44:55", "NoSignal", None),
        ]

    def test_system_profiler_legacy_ssid_map(self):
        text = json.dumps({"SPAirPortDataType": [{"spairport_airport_interfaces": [{
            "spairport_current_network_information": {
                "Home": {"spairport_network_bssid": "aa:bb:cc:dd:ee:ff"}
            }
        }]}]})

        observations = parse_system_profiler_json(text)

        assert observations[0].identifier == "aa:bb:cc:dd:ee:ff"
        assert observations[0].display_name == "Home"

    def test_duplicates_are_kept(self):
        text = "aa\\:bb\\:cc\\:dd\\:ee\\:ff:A:50\naa\\:bb\\:cc\\:dd\\:ee\\:ff:A:60\n"
        assert len(parse_nmcli_output(text)) == 2

    def test_no_adapter_means_no_observations(self):
        assert parse_nmcli_output("") == []
        assert parse_netsh_output("There is no wireless interface on the system.") == []
        assert parse_system_profiler_json('{"SPAirPortDataType": []}') == []


class TestRadioScanner:

    def test_linux_scan_runs_nmcli(self):
        runner = MagicMock(return_value=completed(NMCLI_OUTPUT))

        observations = RadioScanner(platform="linux", runner=runner, timeout=3).scan()

        assert len(observations) == 3
        command = runner.call_args[0][0]
        assert command[0] == "nmcli"
        assert runner.call_args[1]["timeout"] == 3

    def test_windows_scan(self):
        runner = MagicMock(return_value=completed(NETSH_OUTPUT))
        assert len(RadioScanner(platform="win32", runner=runner).scan()) == 3

    def test_non_zero_exit_gives_empty_list(self):
        runner = MagicMock(return_value=completed("", returncode=10))
        assert RadioScanner(platform="linux", runner=runner).scan() == []

    @pytest.mark.parametrize("error", [
        FileNotFoundError("nmcli"),
        subprocess.TimeoutExpired(cmd="nmcli", timeout=1),
        PermissionError("denied"),
    ])
    def test_command_failure_gives_empty_list(self, error):
        runner = MagicMock(side_effect=error)
        assert RadioScanner(platform="linux", runner=runner).scan() == []

    def test_unparsable_output_gives_empty_list(self):
        runner = MagicMock(return_value=completed("not json"))
        assert RadioScanner(platform="darwin", runner=runner).scan() == []

    def test_unsupported_platform(self):
        runner = MagicMock()
        assert RadioScanner(platform="sunos5", runner=runner).scan() == []
        runner.assert_not_called()

    def test_output_is_captured_as_bytes(self):
        runner = MagicMock(return_value=completed(NMCLI_OUTPUT.encode()))

        assert len(RadioScanner(platform="linux", runner=runner).scan()) == 3
        assert "text" not in runner.call_args[1]

    def test_undecodable_ssid_is_replaced(self):
        raw = b"aa\\:bb\\:cc\\:dd\\:ee\\:01:Caf\xe9:70\n"
        runner = MagicMock(return_value=completed(raw))

        observations = RadioScanner(platform="linux", runner=runner).scan()

        assert [o.identifier for o in observations] == ["aa:bb:cc:dd:ee:01"]
        assert observations[0].display_name == "Caf�"
        assert observations[0].signal_quality == 70

    def test_undecodable_garbage_gives_empty_list(self):
        runner = MagicMock(return_value=completed(b"\xff\xfe:bad\n"))
        assert RadioScanner(platform="linux", runner=runner).scan() == []

    def test_decode_error_from_runner_gives_empty_list(self):
        error = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        runner = MagicMock(side_effect=error)
        assert RadioScanner(platform="linux", runner=runner).scan() == []
