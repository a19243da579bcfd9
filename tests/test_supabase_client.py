import json
import unittest
import sys
from pathlib import Path

import httpx

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.integrations.supabase import SupabaseClient, SupabaseError, _filter_params, _parse_content_range


class FilterRenderingTests(unittest.TestCase):
    def test_operators(self):
        params = _filter_params(
            [
                ("id", "eq", "abc"),
                ("payment_status", "in", ["active", "suspended"]),
                ("end_date", "lt", "2024-01-01T00:00:00+00:00"),
                ("deleted_at", "is", None),
                ("is_public", "eq", True),
            ]
        )
        self.assertEqual(
            params,
            [
                ("id", "eq.abc"),
                ("payment_status", 'in.("active","suspended")'),
                ("end_date", "lt.2024-01-01T00:00:00+00:00"),
                ("deleted_at", "is.null"),
                ("is_public", "eq.true"),
            ],
        )

    def test_in_list_items_with_delimiters_are_quoted(self):
        params = _filter_params([("title", "in", ["a,b", "c)d", 'say "hi"', "back\\slash"])])
        self.assertEqual(params, [("title", 'in.("a,b","c)d","say \\"hi\\"","back\\\\slash")')])

    def test_unknown_operator_rejected(self):
        with self.assertRaises(ValueError):
            _filter_params([("id", "like", "x")])

    def test_content_range(self):
        self.assertEqual(_parse_content_range("0-24/3573"), 3573)
        self.assertEqual(_parse_content_range("*/0"), 0)
        self.assertEqual(_parse_content_range(None), 0)
        self.assertEqual(_parse_content_range("*/*"), 0)


class SupabaseClientTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.requests = []
        self.handler = None

        def dispatch(request):
            self.requests.append(request)
            return self.handler(request)

        self.client = SupabaseClient(
            "https://project.supabase.co/",
            "service-key",
            transport=httpx.MockTransport(dispatch),
        )

    async def asyncTearDown(self):
        await self.client.aclose()

    def test_requires_credentials(self):
        with self.assertRaises(RuntimeError):
            SupabaseClient("", "key")

    async def test_select_builds_postgrest_query(self):
        self.handler = lambda request: httpx.Response(200, json=[{"id": "r1"}])
        rows = await self.client.select(
            "user_resumes",
            columns="id,content",
            filters=[("user_id", "eq", "u1")],
            order="created_at.desc",
            limit=5,
        )
        self.assertEqual(rows, [{"id": "r1"}])
        request = self.requests[0]
        self.assertEqual(request.method, "GET")
        self.assertEqual(request.url.path, "/rest/v1/user_resumes")
        self.assertEqual(request.url.params["select"], "id,content")
        self.assertEqual(request.url.params["user_id"], "eq.u1")
        self.assertEqual(request.url.params["order"], "created_at.desc")
        self.assertEqual(request.url.params["limit"], "5")
        self.assertEqual(request.headers["apikey"], "service-key")
        self.assertEqual(request.headers["authorization"], "Bearer service-key")

    async def test_select_one_returns_none_when_empty(self):
        self.handler = lambda request: httpx.Response(200, json=[])
        self.assertIsNone(await self.client.select_one("profiles", [("id", "eq", "u1")]))
        self.assertEqual(self.requests[0].url.params["limit"], "1")

    async def test_count_reads_content_range(self):
        self.handler = lambda request: httpx.Response(200, headers={"content-range": "0-2/3"})
        total = await self.client.count("interviews", [("user_id", "eq", "u1")])
        self.assertEqual(total, 3)
        request = self.requests[0]
        self.assertEqual(request.method, "HEAD")
        self.assertEqual(request.headers["prefer"], "count=exact")

    async def test_insert_returns_first_row(self):
        self.handler = lambda request: httpx.Response(201, json=[{"id": "s1", "status": "active"}])
        row = await self.client.insert("advanced_interview_sessions", {"status": "active"})
        self.assertEqual(row["id"], "s1")
        request = self.requests[0]
        self.assertEqual(json.loads(request.content), {"status": "active"})
        self.assertEqual(request.headers["prefer"], "return=representation")

    async def test_insert_without_rows_is_an_error(self):
        self.handler = lambda request: httpx.Response(201, json=[])
        with self.assertRaises(SupabaseError):
            await self.client.insert("temp_resumes", {"id": "temp_1"})

    async def test_update_requires_filters(self):
        with self.assertRaises(ValueError):
            await self.client.update("subscriptions", {"payment_status": "expired"}, [])

    async def test_update_sends_patch(self):
        self.handler = lambda request: httpx.Response(200, json=[{"id": "s1"}])
        rows = await self.client.update("subscriptions", {"payment_status": "expired"}, [("id", "eq", "s1")])
        self.assertEqual(rows, [{"id": "s1"}])
        request = self.requests[0]
        self.assertEqual(request.method, "PATCH")
        self.assertEqual(request.url.params["id"], "eq.s1")

    async def test_error_body_becomes_supabase_error(self):
        self.handler = lambda request: httpx.Response(400, json={"message": "column does not exist"})
        with self.assertRaises(SupabaseError) as ctx:
            await self.client.select("profiles")
        self.assertEqual(str(ctx.exception), "Database error: column does not exist")
        self.assertEqual(ctx.exception.status_code, 400)

    async def test_transport_failure_becomes_supabase_error(self):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        self.handler = fail
        with self.assertRaises(SupabaseError):
            await self.client.select("profiles")

    async def test_get_user(self):
        def handler(request):
            if request.headers["authorization"] == "Bearer good":
                return httpx.Response(200, json={"id": "user-1", "email": "a@example.com"})
            return httpx.Response(401, json={"msg": "invalid JWT"})

        self.handler = handler
        user = await self.client.get_user("good")
        self.assertEqual(user.id, "user-1")
        self.assertEqual(user.email, "a@example.com")
        self.assertEqual(self.requests[0].url.path, "/auth/v1/user")
        self.assertIsNone(await self.client.get_user("bad"))
        self.assertIsNone(await self.client.get_user(""))


if __name__ == "__main__":
    unittest.main()
