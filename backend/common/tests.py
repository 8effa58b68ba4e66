from django.test import SimpleTestCase

from common.utils import TIME_24H_PATTERN, format_time_12h, passenger_seats


class FormatTime12hTests(SimpleTestCase):
    def test_morning_and_evening(self):
        self.assertEqual(format_time_12h("09:05"), "09:05 AM")
        self.assertEqual(format_time_12h("17:30"), "05:30 PM")

    def test_midnight_and_noon(self):
        self.assertEqual(format_time_12h("00:15"), "12:15 AM")
        self.assertEqual(format_time_12h("12:00"), "12:00 PM")

    def test_unrecognised_input_passes_through(self):
        for value in ("", "9:05", "0905", "later"):
            self.assertEqual(format_time_12h(value), value)


class TimePatternTests(SimpleTestCase):
    def test_accepts_24_hour_times(self):
        for value in ("00:00", "09:59", "23:59"):
            self.assertRegex(value, TIME_24H_PATTERN)

    def test_rejects_out_of_range(self):
        for value in ("24:00", "12:60", "7:30", "07:30:00"):
            self.assertIsNone(TIME_24H_PATTERN.match(value))


class PassengerSeatsTests(SimpleTestCase):
    def test_driver_counted(self):
        self.assertEqual(passenger_seats(4), "3")
        self.assertEqual(passenger_seats(2), "1")

    def test_driver_only(self):
        self.assertEqual(passenger_seats(1), "0 (Driver only)")
        self.assertEqual(passenger_seats(0), "0 (Driver only)")
