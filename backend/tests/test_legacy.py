import pathlib
import sys
import unittest

BACKEND_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from household_ledger.pagination.legacy import DEFAULT_LEGACY_LIMIT, from_legacy_params, to_legacy_format
from household_ledger.pagination.pager import CursorRequest, PageInfo, PageResult, PageTiming

LEGACY_LOGGER = "household_ledger.pagination.legacy"

ROWS = [{"id": i, "amount": i * 100} for i in (10, 9, 8, 7, 6)]


def cursor_result(rows, has_more, total=None, count_time=None) -> PageResult:
    return PageResult(
        data=list(rows),
        pagination=PageInfo(next_cursor="Nw==" if has_more else None, prev_cursor=None, has_more=has_more, total_count=total),
        performance=PageTiming(query_time=45.0, total_count_query_time=count_time),
    )


class FromLegacyParamsTests(unittest.TestCase):
    def test_converts_to_first_forward_page_and_warns(self):
        with self.assertLogs(LEGACY_LOGGER, level="WARNING") as logs:
            request = from_legacy_params(page=3, limit=20)

        self.assertEqual(request, CursorRequest(cursor=None, limit=20, direction="forward"))
        record = logs.records[0]
        self.assertEqual(record.getMessage(), "Legacy pagination request detected")
        self.assertIn("cursor", record.recommendation)
        self.assertEqual(record.params, {"page": 3, "limit": 20})

    def test_invalid_page_numbers_behave_like_page_one(self):
        with self.assertLogs(LEGACY_LOGGER, level="WARNING"):
            request = from_legacy_params(page=0, limit=10)
        self.assertEqual(request.limit, 10)
        self.assertIsNone(request.cursor)

    def test_defaults(self):
        for limit in (None, 0, -5, "abc"):
            with self.subTest(limit=limit):
                with self.assertLogs(LEGACY_LOGGER, level="WARNING"):
                    request = from_legacy_params(limit=limit)
                self.assertEqual(request, CursorRequest(cursor=None, limit=DEFAULT_LEGACY_LIMIT, direction="forward"))


class ToLegacyFormatTests(unittest.TestCase):
    def test_converts_cursor_result(self):
        result = cursor_result(ROWS[:3], has_more=True, total=150, count_time=12.0)
        legacy = to_legacy_format(result, 2)

        self.assertEqual(legacy.data, ROWS[:3])
        self.assertEqual(
            legacy.pagination,
            {
                "page": 2,
                "limit": 3,
                "total": 150,
                "total_pages": 50,
                "has_next": True,
                "has_prev": True,
            },
        )
        self.assertEqual(legacy.performance, {"query_time": 45.0, "total_count_query_time": 12.0})

    def test_first_page_without_count(self):
        legacy = to_legacy_format(cursor_result(ROWS[:3], has_more=True), 1)

        self.assertEqual(legacy.pagination["page"], 1)
        self.assertFalse(legacy.pagination["has_prev"])
        self.assertIsNone(legacy.pagination["total"])
        self.assertIsNone(legacy.pagination["total_pages"])
        self.assertEqual(legacy.performance, {"query_time": 45.0})

    def test_last_page(self):
        legacy = to_legacy_format(cursor_result(ROWS[:2], has_more=False, total=42), 5)

        self.assertFalse(legacy.pagination["has_next"])
        self.assertTrue(legacy.pagination["has_prev"])
        self.assertEqual(legacy.pagination["total_pages"], 21)

    def test_empty_page_with_count(self):
        legacy = to_legacy_format(cursor_result([], has_more=False, total=0), None)

        self.assertEqual(legacy.pagination["page"], 1)
        self.assertEqual(legacy.pagination["limit"], 0)
        self.assertEqual(legacy.pagination["total_pages"], 0)
        self.assertEqual(legacy.to_dict()["data"], [])


if __name__ == "__main__":
    unittest.main()
