import unittest

from price_scout.config import (
    DEFAULT_ITEM,
    DEFAULT_LATITUDE,
    DEFAULT_LONGITUDE,
    ScrapeSettings,
    _parse_float,
    create_request_from_query,
    settings_from_env,
)
from price_scout.errors import InvalidQueryError


class ParseFloatTests(unittest.TestCase):
    def test_parse_float_accepts_strings_and_numbers(self) -> None:
        for raw, expected in [("28.65420", 28.6542), (" 77.2 ", 77.2), (12, 12.0)]:
            with self.subTest(raw=raw):
                self.assertEqual(_parse_float(raw), expected)

    def test_parse_float_rejects_garbage(self) -> None:
        for raw in [None, "", "north", True]:
            with self.subTest(raw=raw):
                self.assertIsNone(_parse_float(raw))


class CreateRequestTests(unittest.TestCase):
    def test_missing_parameters_use_defaults(self) -> None:
        scrape_request = create_request_from_query({})
        self.assertEqual(scrape_request.item, DEFAULT_ITEM)
        self.assertEqual(scrape_request.latitude, DEFAULT_LATITUDE)
        self.assertEqual(scrape_request.longitude, DEFAULT_LONGITUDE)

    def test_blank_parameters_use_defaults(self) -> None:
        scrape_request = create_request_from_query({"item": "  ", "lat": "", "long": ""})
        self.assertEqual(scrape_request.to_dict(), {"item": "Biryani", "lat": 28.6542, "long": 77.2373})

    def test_explicit_values_are_parsed(self) -> None:
        scrape_request = create_request_from_query({"item": "Paneer Tikka", "lat": "12.97", "long": "77.59"})
        self.assertEqual(scrape_request.item, "Paneer Tikka")
        self.assertAlmostEqual(scrape_request.latitude, 12.97)
        self.assertAlmostEqual(scrape_request.longitude, 77.59)

    def test_lng_is_accepted_as_alias(self) -> None:
        scrape_request = create_request_from_query({"lng": "72.88"})
        self.assertAlmostEqual(scrape_request.longitude, 72.88)

    def test_non_numeric_coordinate_is_rejected(self) -> None:
        with self.assertRaises(InvalidQueryError) as ctx:
            create_request_from_query({"lat": "somewhere"})
        self.assertEqual(ctx.exception.http_code, 400)
        self.assertEqual(ctx.exception.reason, "invalid_query")


class SettingsFromEnvTests(unittest.TestCase):
    def test_empty_environment_keeps_defaults(self) -> None:
        self.assertEqual(settings_from_env({}), ScrapeSettings())

    def test_overrides_are_applied(self) -> None:
        settings = settings_from_env(
            {
                "PRICE_SCOUT_API_MARKER": "v4?",
                "PRICE_SCOUT_HEADLESS": "false",
                "PRICE_SCOUT_NAVIGATION_TIMEOUT_MS": "15000",
                "PRICE_SCOUT_REPLAY_TIMEOUT": "5",
                "PRICE_SCOUT_TOP_N": "3",
            }
        )
        self.assertEqual(settings.api_marker, "v4?")
        self.assertFalse(settings.headless)
        self.assertEqual(settings.navigation_timeout_ms, 15000)
        self.assertEqual(settings.replay_timeout, 5.0)
        self.assertEqual(settings.top_n, 3)

    def test_invalid_numbers_are_ignored(self) -> None:
        settings = settings_from_env({"PRICE_SCOUT_TOP_N": "many", "PRICE_SCOUT_REPLAY_TIMEOUT": "-1"})
        self.assertEqual(settings.top_n, 5)
        self.assertEqual(settings.replay_timeout, 30.0)


if __name__ == "__main__":
    unittest.main()
