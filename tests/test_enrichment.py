import asyncio
from unittest.mock import MagicMock

from google.api_core.exceptions import ServiceUnavailable

from core.device_info import list_device_infos
from core.enrichment import resolve_email
from core.models import DeviceInfo


class TestResolveEmail:

    def test_real_email_skips_lookup(self):
        store = MagicMock()

        assert asyncio.run(resolve_email(store, "a@x.com", "1.2.3.4")) == "a@x.com"
        store.latest_user_for_ip.assert_not_called()

    def test_unknown_resolves_from_users(self, store, add_user):
        add_user("a@x.com", "1.2.3.4")

        assert asyncio.run(resolve_email(store, "Unknown", "1.2.3.4")) == "a@x.com"

    def test_unknown_without_match_stays_unknown(self, store):
        assert asyncio.run(resolve_email(store, "Unknown", "1.2.3.4")) == "Unknown"

    def test_user_without_email_keeps_sentinel(self):
        store = MagicMock()
        store.latest_user_for_ip.return_value = {"ipAddress": "1.2.3.4"}

        assert asyncio.run(resolve_email(store, "Unknown", "1.2.3.4")) == "Unknown"

    def test_lookup_error_degrades_to_sentinel(self):
        store = MagicMock()
        store.latest_user_for_ip.side_effect = ServiceUnavailable("down")

        assert asyncio.run(resolve_email(store, "Unknown", "1.2.3.4")) == "Unknown"


class TestListDeviceInfos:

    def test_preserves_store_order_and_isolates_failures(self):
        infos = [
            DeviceInfo(id="1", email="Unknown", ipAddress="10.0.0.1"),
            DeviceInfo(id="2", email="b@x.com", ipAddress="10.0.0.2"),
            DeviceInfo(id="3", email="Unknown", ipAddress="10.0.0.3"),
        ]

        def lookup(ip_address):
            if ip_address == "10.0.0.1":
                raise ServiceUnavailable("down")
            return {"email": "c@x.com"}

        store = MagicMock()
        store.list_device_infos.return_value = infos
        store.latest_user_for_ip.side_effect = lookup

        result = asyncio.run(list_device_infos(store))

        assert [info.id for info in result] == ["1", "2", "3"]
        assert [info.email for info in result] == ["Unknown", "b@x.com", "c@x.com"]
        # Input objects are left as fetched
        assert infos[2].email == "Unknown"
